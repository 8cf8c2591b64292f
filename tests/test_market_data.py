from box3.market.data import (
    get_all_years,
    get_available_years,
    get_cpi_for_year,
    get_returns,
    list_indices,
)


def test_get_returns_filters_inclusive_range():
    returns = get_returns("sp500", 2008, 2009)

    assert [(item.year, item.return_pct) for item in returns] == [(2008, -37.0), (2009, 26.46)]


def test_unknown_index_has_no_data():
    assert get_returns("nikkei", 2000, 2030) == []
    assert get_available_years("nikkei") == []


def test_year_lists_are_sorted():
    assert get_available_years("aex")[0] == 2005
    assert get_all_years() == list(range(2005, 2026))


def test_cpi_lookup_defaults_to_zero():
    assert get_cpi_for_year(2022) == 10.0
    assert get_cpi_for_year(1990) == 0.0
    assert get_cpi_for_year("n/a") == 0.0


def test_list_indices():
    keys = [item["key"] for item in list_indices()]

    assert keys == ["sp500", "aex", "allworld"]
