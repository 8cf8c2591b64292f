# data_model/returns.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping


@dataclass(frozen=True)
class YearReturn:
    year: int
    return_pct: float

    def to_payload(self) -> dict[str, float | int]:
        return {"year": self.year, "return": self.return_pct}


def _to_year(value: Any) -> int | None:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def _to_pct(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    try:
        pct = float(value)
    except (TypeError, ValueError):
        return None
    return pct if math.isfinite(pct) else None


def returns_from_mapping(
    raw: Mapping[Any, Any] | None,
    start_year: int | None = None,
    end_year: int | None = None,
) -> List[YearReturn]:
    """Turn a ``{year: pct}`` map into a year-sorted return series.

    Keys that are not years and values that are blank or not numbers are
    skipped. ``start_year``/``end_year`` bound the range inclusively.
    """
    series: Dict[int, float] = {}
    for key, value in (raw or {}).items():
        year = _to_year(key)
        pct = _to_pct(value)
        if year is None or pct is None:
            continue
        if start_year is not None and year < start_year:
            continue
        if end_year is not None and year > end_year:
            continue
        series[year] = pct
    return [YearReturn(year, series[year]) for year in sorted(series)]


def returns_from_records(rows: Iterable[Any]) -> List[YearReturn]:
    """Accept ``YearReturn`` objects or ``{"year": .., "return": ..}`` dicts."""
    mapping: Dict[int, float] = {}
    for row in rows or []:
        if isinstance(row, YearReturn):
            mapping[row.year] = row.return_pct
            continue
        if not isinstance(row, Mapping):
            continue
        value = row.get("return", row.get("returnPct", row.get("return_pct")))
        mapping[row.get("year")] = value
    return returns_from_mapping(mapping)
