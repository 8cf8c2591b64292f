from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

import pandas as pd

from ..data_model import REGIME_LABELS, Regime, YearReturn
from .state import SimulationState


@dataclass
class SimulationResult:
    """Per-regime series of one run, keyed by regime tag (``"noTax"``, ...)."""

    labels: List[int | str]
    tax_labels: List[int]
    systems: List[str]
    portfolio_values: Dict[str, List[float]] = field(default_factory=dict)
    annual_tax: Dict[str, List[float]] = field(default_factory=dict)
    cumulative_tax: Dict[str, List[float]] = field(default_factory=dict)
    final_states: Dict[str, SimulationState] = field(default_factory=dict)

    def final_value(self, system: str) -> float:
        return self.portfolio_values[system][-1]

    def total_tax(self, system: str) -> float:
        series = self.cumulative_tax[system]
        return series[-1] if series else 0.0

    def to_payload(self) -> dict:
        return {
            "labels": list(self.labels),
            "taxLabels": list(self.tax_labels),
            "systems": list(self.systems),
            "portfolioValues": {key: list(values) for key, values in self.portfolio_values.items()},
            "annualTax": {key: list(values) for key, values in self.annual_tax.items()},
            "cumulativeTax": {key: list(values) for key, values in self.cumulative_tax.items()},
            "carryForwardLoss": {key: state.carry_forward_loss for key, state in self.final_states.items()},
        }


def build_labels(returns: Sequence[YearReturn]) -> tuple[List[int | str], List[int]]:
    """Axis labels: the year before the first return for the start value, then each year."""
    years = [item.year for item in returns]
    labels: List[int | str] = [years[0] - 1 if years else "Start", *years]
    return labels, list(years)


def new_result(returns: Sequence[YearReturn], systems: Sequence[Regime], start_capital: float) -> SimulationResult:
    labels, tax_labels = build_labels(returns)
    result = SimulationResult(labels=labels, tax_labels=tax_labels, systems=[sys.value for sys in systems])
    for sys in systems:
        result.portfolio_values[sys.value] = [start_capital]
        result.annual_tax[sys.value] = []
        result.cumulative_tax[sys.value] = []
    return result


def record_year(result: SimulationResult, system: str, wealth: float, tax: float) -> None:
    result.portfolio_values[system].append(wealth)
    result.annual_tax[system].append(tax)
    cumulative = result.cumulative_tax[system]
    previous = cumulative[-1] if cumulative else 0.0
    cumulative.append(previous + tax)


def summarize(result: SimulationResult, total_invested: float) -> List[dict]:
    """Final value, total tax and profit over everything deposited, per regime."""
    rows = []
    for sys in result.systems:
        final_value = result.final_value(sys)
        rows.append(
            {
                "system": sys,
                "label": REGIME_LABELS.get(Regime(sys), sys),
                "finalValue": final_value,
                "totalTax": result.total_tax(sys),
                "profit": final_value - total_invested,
                "totalInvested": total_invested,
            }
        )
    return rows


def result_frame(result: SimulationResult) -> pd.DataFrame:
    """Long-format table with one row per regime and year, including the start row."""
    records = []
    for sys in result.systems:
        for idx, label in enumerate(result.labels):
            records.append(
                {
                    "System": sys,
                    "YearIndex": idx,
                    "Year": label,
                    "Wealth": result.portfolio_values[sys][idx],
                    "AnnualTax": result.annual_tax[sys][idx - 1] if idx > 0 else 0.0,
                    "CumulativeTax": result.cumulative_tax[sys][idx - 1] if idx > 0 else 0.0,
                }
            )
    if not records:
        return pd.DataFrame(columns=["System", "YearIndex", "Year", "Wealth", "AnnualTax", "CumulativeTax"])
    return pd.DataFrame(records)
