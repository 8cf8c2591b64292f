"""Historical market return data (total return including dividends).

All returns are in percent (e.g. 15.79 = 15.79%).
"""
from __future__ import annotations

from typing import Dict, List

from ..data_model import YearReturn

MARKET_DATA: Dict[str, dict] = {
    "sp500": {
        "name": "S&P 500 (Total Return)",
        "currency": "USD",
        "returns": {
            2005: 4.91, 2006: 15.79, 2007: 5.49, 2008: -37.0, 2009: 26.46,
            2010: 15.06, 2011: 2.11, 2012: 16.0, 2013: 32.39, 2014: 13.69,
            2015: 1.38, 2016: 11.96, 2017: 21.83, 2018: -4.38, 2019: 31.49,
            2020: 18.4, 2021: 28.71, 2022: -18.11, 2023: 26.29, 2024: 25.02,
            2025: 4.5,
        },
    },
    "aex": {
        "name": "AEX (Gross Return)",
        "currency": "EUR",
        "returns": {
            2005: 28.01, 2006: 17.35, 2007: 7.94, 2008: -50.4, 2009: 41.8,
            2010: 8.9, 2011: -9.4, 2012: 16.2, 2013: 21.2, 2014: 9.8,
            2015: 7.4, 2016: 12.7, 2017: 16.1, 2018: -8.5, 2019: 28.6,
            2020: 5.4, 2021: 30.3, 2022: -11.7, 2023: 18.6, 2024: 14.5,
            2025: 5.3,
        },
    },
    "allworld": {
        "name": "MSCI All World (Total Return)",
        "currency": "USD",
        "returns": {
            2005: 11.37, 2006: 21.53, 2007: 12.18, 2008: -42.19, 2009: 34.63,
            2010: 12.67, 2011: -7.35, 2012: 16.13, 2013: 22.8, 2014: 4.16,
            2015: -2.36, 2016: 7.86, 2017: 23.97, 2018: -9.41, 2019: 26.6,
            2020: 16.25, 2021: 18.54, 2022: -18.36, 2023: 22.2, 2024: 17.49,
            2025: 3.0,
        },
    },
}

# Dutch consumer price index, yearly change in percent (CBS).
CPI_DATA: Dict[int, float] = {
    2005: 1.7, 2006: 1.1, 2007: 1.6, 2008: 2.5, 2009: 1.2,
    2010: 1.3, 2011: 2.3, 2012: 2.5, 2013: 2.5, 2014: 1.0,
    2015: 0.6, 2016: 0.3, 2017: 1.4, 2018: 1.7, 2019: 2.6,
    2020: 1.3, 2021: 2.7, 2022: 10.0, 2023: 3.8, 2024: 3.3,
    2025: 3.0,
}


def list_indices() -> List[dict[str, str]]:
    return [
        {"key": key, "name": data["name"], "currency": data["currency"]}
        for key, data in MARKET_DATA.items()
    ]


def get_available_years(index_key: str) -> List[int]:
    data = MARKET_DATA.get(index_key)
    if not data:
        return []
    return sorted(int(year) for year in data["returns"])


def get_all_years() -> List[int]:
    years: set[int] = set()
    for data in MARKET_DATA.values():
        years.update(int(year) for year in data["returns"])
    return sorted(years)


def get_returns(index_key: str, start_year: int, end_year: int) -> List[YearReturn]:
    """Returns for one index over an inclusive year range; unknown index gives []."""
    data = MARKET_DATA.get(index_key)
    if not data:
        return []
    return [
        YearReturn(year, data["returns"][year])
        for year in get_available_years(index_key)
        if start_year <= year <= end_year
    ]


def get_cpi_for_year(year: int) -> float:
    try:
        return CPI_DATA.get(int(year), 0.0)
    except (TypeError, ValueError):
        return 0.0
