from __future__ import annotations

import math
from typing import Callable, Dict, Mapping

from ..market.data import get_cpi_for_year


def clamp_amount(value) -> float:
    """Deposits are never negative; anything non-numeric counts as nothing."""
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(amount):
        return 0.0
    return max(0.0, amount)


def build_contributions_by_year(
    base_amount: float,
    start_year: int,
    end_year: int,
    cpi_enabled: bool = False,
    cpi_lookup: Callable[[int], float] = get_cpi_for_year,
) -> Dict[int, float]:
    """Monthly deposit per year, optionally indexed with CPI.

    The first year uses the base amount. With indexation on, each later year
    grows the previous (unrounded) amount by that year's CPI change. Stored
    values are rounded to cents.
    """
    schedule: Dict[int, float] = {}
    amount = clamp_amount(base_amount)
    for year in range(int(start_year), int(end_year) + 1):
        if cpi_enabled and year > start_year:
            rate = cpi_lookup(year) or 0.0
            amount = amount * (1 + rate / 100.0)
        schedule[year] = round(amount, 2)
    return schedule


def total_contributed(schedule: Mapping[int, float]) -> float:
    return sum(monthly * 12 for monthly in schedule.values())
