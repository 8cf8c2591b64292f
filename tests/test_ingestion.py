import pytest

from box3.market.ingestion import UploadError, build_template_workbook, parse_returns_file


def test_parse_csv_scales_fractional_returns_and_skips_junk():
    data = b"Year,Return (%)\n2015,1.38\n2016,0.12\nabc,5\n2017,\n2018,-4.38\n"

    parsed = parse_returns_file(data, "returns.csv")

    assert parsed.name == "Eigen data (returns.csv)"
    assert parsed.currency == "EUR"
    assert parsed.returns == {2015: pytest.approx(1.38), 2016: pytest.approx(12.0), 2018: pytest.approx(-4.38)}


def test_parse_csv_with_dutch_headers():
    data = b"Jaar,Rendement\n2020,5\n2021,-0.5\n"

    parsed = parse_returns_file(data, "eigen.csv")

    assert parsed.returns == {2020: 5.0, 2021: pytest.approx(-50.0)}


def test_missing_columns_are_rejected():
    with pytest.raises(UploadError, match="Kolommen niet gevonden"):
        parse_returns_file(b"Date,Value\n2020,5\n", "bad.csv")


def test_header_only_file_is_empty():
    with pytest.raises(UploadError, match="leeg"):
        parse_returns_file(b"Year,Return\n", "empty.csv")


def test_file_without_valid_rows_is_rejected():
    with pytest.raises(UploadError, match="Geen geldige data"):
        parse_returns_file(b"Year,Return\nfoo,bar\n", "junk.csv")


def test_unreadable_file_is_rejected():
    with pytest.raises(UploadError):
        parse_returns_file(b"definitely not a workbook", "upload.xlsx")
    with pytest.raises(UploadError):
        parse_returns_file(b"", "upload.xlsx")


def test_template_workbook_parses_back():
    parsed = parse_returns_file(build_template_workbook(), "box3_returns_template.xlsx")

    assert sorted(parsed.returns) == list(range(2015, 2025))
    assert parsed.returns[2018] == pytest.approx(-4.38)


def test_legacy_xls_is_rejected_with_clear_message():
    with pytest.raises(UploadError, match=r"\.xlsx en \.csv"):
        parse_returns_file(build_template_workbook(), "returns.XLS")
