"""Spreadsheet ingestion for custom return series.

Accepts ``.xlsx`` workbooks (first sheet) and ``.csv`` files with a
year column and a return column, and builds the downloadable template.
"""
from __future__ import annotations

import io
import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable

import pandas as pd

from .data import MARKET_DATA

logger = logging.getLogger(__name__)

TEMPLATE_YEARS = range(2015, 2025)
TEMPLATE_SHEET = "Returns"


class UploadError(ValueError):
    """Raised with a message that can be shown to the user as-is."""


@dataclass
class ParsedUpload:
    name: str
    currency: str = "EUR"
    returns: Dict[int, float] = field(default_factory=dict)

    def to_payload(self) -> dict:
        return {
            "name": self.name,
            "currency": self.currency,
            "returns": {str(year): pct for year, pct in sorted(self.returns.items())},
        }


def find_year_column(columns: Iterable[str]) -> str | None:
    for col in columns:
        lowered = str(col).lower()
        if "year" in lowered or "jaar" in lowered:
            return col
    return None


def find_return_column(columns: Iterable[str]) -> str | None:
    for col in columns:
        lowered = str(col).lower()
        if "return" in lowered or "rendement" in lowered or lowered == "%":
            return col
    return None


def _read_frame(file_bytes: bytes, filename: str) -> pd.DataFrame:
    stream = io.BytesIO(file_bytes)
    if filename.lower().endswith(".csv"):
        return pd.read_csv(stream)
    return pd.read_excel(stream, sheet_name=0)


def _to_number(value) -> float | None:
    number = pd.to_numeric(value, errors="coerce")
    if pd.isna(number):
        return None
    number = float(number)
    return number if math.isfinite(number) else None


def parse_returns_file(file_bytes: bytes, filename: str) -> ParsedUpload:
    """Extract ``{year: return_pct}`` from an uploaded file.

    Returns that look like fractions (``0 < |x| < 1``) are scaled to percent.
    Rows where either cell is not a number are skipped.
    """
    if not file_bytes:
        raise UploadError("Bestand kon niet worden geopend.")
    if filename.lower().endswith(".xls"):
        raise UploadError("Alleen .xlsx en .csv bestanden worden ondersteund.")
    try:
        df = _read_frame(file_bytes, filename)
    except Exception as exc:
        raise UploadError(f"Bestand kon niet worden gelezen: {exc}") from exc

    if df.empty:
        raise UploadError("Het Excel bestand is leeg.")

    year_col = find_year_column(df.columns)
    return_col = find_return_column(df.columns)
    if year_col is None or return_col is None:
        raise UploadError('Kolommen niet gevonden. Zorg dat je kolommen hebt genaamd "Year" en "Return".')

    returns: Dict[int, float] = {}
    for row in df.to_dict("records"):
        year = _to_number(row.get(year_col))
        ret = _to_number(row.get(return_col))
        if year is None or ret is None:
            continue
        if 0 < abs(ret) < 1:
            ret = ret * 100
        returns[int(year)] = ret

    if not returns:
        raise UploadError("Geen geldige data gevonden in het bestand.")

    logger.info("Parsed %d custom returns from %s", len(returns), filename)
    return ParsedUpload(name=f"Eigen data ({filename})", currency="EUR", returns=returns)


def template_frame() -> pd.DataFrame:
    source = MARKET_DATA["sp500"]["returns"]
    return pd.DataFrame(
        [{"Year": year, "Return (%)": source[year]} for year in TEMPLATE_YEARS]
    )


def build_template_workbook() -> bytes:
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        template_frame().to_excel(writer, sheet_name=TEMPLATE_SHEET, index=False)
    return buffer.getvalue()
