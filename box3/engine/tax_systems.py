"""Box 3 tax calculations, one function per regime.

Every calculation returns tax in EUR (>= 0). The simulation passes the
peildatum wealth (1 January, before that year's return) as the base for the
deemed-return regimes and the realised return for the future regime.
Rates are stored as percentages and converted where they are applied.
"""
from __future__ import annotations

from typing import Any, Mapping, Union

from ..data_model import (
    CurrentSystemConfig,
    FutureSystemConfig,
    OldSystemConfig,
    Regime,
    RegimeConfig,
    as_config,
)

ConfigLike = Union[RegimeConfig, Mapping[str, Any], None]


def normalize_allocations(alloc_savings: float, alloc_invest: float, alloc_debt: float) -> tuple[float, float, float]:
    savings = max(0.0, alloc_savings)
    invest = max(0.0, alloc_invest)
    debt = max(0.0, alloc_debt)
    total = savings + invest + debt
    if total <= 0:
        return 0.0, 0.0, 0.0
    return savings / total, invest / total, debt / total


def calc_no_tax(*_args: Any) -> float:
    return 0.0


def calc_old_system(wealth: float, return_amount: float, config: ConfigLike = None) -> float:
    """Pre-2017 system: flat deemed return over wealth above a single exemption."""
    cfg: OldSystemConfig = as_config(Regime.OLD, config)
    effective_exemption = cfg.exemption * cfg.partner_multiplier

    taxable_wealth = max(0.0, wealth - effective_exemption)
    deemed_income = taxable_wealth * (cfg.deemed_return / 100.0)
    return max(0.0, deemed_income * (cfg.tax_rate / 100.0))


def calc_current_system(wealth: float, return_amount: float, config: ConfigLike = None) -> float:
    """Bridging-law system: deemed return per category with debt deduction.

    Wealth is split over savings, investments and debts by the configured
    allocation. The notional return is apportioned by the share of the
    notional base that lies above the exemption.
    """
    cfg: CurrentSystemConfig = as_config(Regime.CURRENT, config)

    total_wealth = max(0.0, wealth)
    if total_wealth <= 0:
        return 0.0

    effective_exemption = cfg.exemption * cfg.partner_multiplier
    effective_debt_threshold = cfg.debt_threshold * cfg.partner_multiplier

    savings_share, invest_share, debt_share = normalize_allocations(
        cfg.alloc_savings, cfg.alloc_invest, cfg.alloc_debt
    )
    if savings_share == 0 and invest_share == 0 and debt_share == 0:
        return 0.0

    savings = total_wealth * savings_share
    invest = total_wealth * invest_share
    debt = total_wealth * debt_share
    deductible_debt = max(0.0, debt - effective_debt_threshold)

    notional_return = (
        savings * (cfg.savings_rate / 100.0)
        + invest * (cfg.invest_rate / 100.0)
        - deductible_debt * (cfg.debt_rate / 100.0)
    )
    if notional_return <= 0:
        return 0.0

    notional_base = savings + invest - deductible_debt
    if notional_base <= 0:
        return 0.0

    taxable_base = max(0.0, notional_base - effective_exemption)
    if taxable_base <= 0:
        return 0.0

    share = min(1.0, taxable_base / notional_base)
    return max(0.0, notional_return * share * (cfg.tax_rate / 100.0))


def calc_future_income(actual_return: float, config: ConfigLike = None) -> float:
    """Income after the tax-free result. Losses pass through untouched."""
    if actual_return <= 0:
        return actual_return

    cfg: FutureSystemConfig = as_config(Regime.FUTURE, config)
    effective_free_return = cfg.free_return * cfg.partner_multiplier
    return max(0.0, actual_return - effective_free_return)


def calc_future_system(taxable_income: float, config: ConfigLike = None) -> float:
    cfg: FutureSystemConfig = as_config(Regime.FUTURE, config)
    return max(0.0, max(0.0, taxable_income) * (cfg.tax_rate / 100.0))
