import math

import pytest

from box3.engine.contributions import build_contributions_by_year, clamp_amount, total_contributed


def test_flat_schedule_without_indexation():
    schedule = build_contributions_by_year(100, 2020, 2022, cpi_enabled=False)

    assert schedule == {2020: 100, 2021: 100, 2022: 100}


def test_indexation_compounds_from_second_year():
    rates = {2020: 50.0, 2021: 10.0, 2022: 10.0}

    schedule = build_contributions_by_year(100, 2020, 2022, cpi_enabled=True, cpi_lookup=rates.get)

    assert schedule[2020] == 100
    assert schedule[2021] == pytest.approx(110)
    assert schedule[2022] == pytest.approx(121)


def test_missing_cpi_years_leave_amount_flat():
    schedule = build_contributions_by_year(250, 2040, 2042, cpi_enabled=True)

    assert schedule == {2040: 250, 2041: 250, 2042: 250}


def test_amounts_are_rounded_to_cents():
    rates = {2021: 3.333}

    schedule = build_contributions_by_year(100, 2020, 2021, cpi_enabled=True, cpi_lookup=rates.get)

    assert schedule[2021] == 103.33


def test_invalid_base_amounts_clamp_to_zero():
    assert build_contributions_by_year(-50, 2020, 2021) == {2020: 0, 2021: 0}
    assert clamp_amount(math.nan) == 0
    assert clamp_amount("abc") == 0
    assert clamp_amount(math.inf) == 0


def test_empty_range_and_totals():
    assert build_contributions_by_year(100, 2021, 2020) == {}
    assert total_contributed({2020: 100, 2021: 110}) == pytest.approx(2520)
