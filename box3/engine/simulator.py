"""Year-by-year simulation of portfolio growth under the four box 3 regimes."""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Sequence

from ..data_model import (
    REGIME_ORDER,
    CurrentSystemConfig,
    FutureSystemConfig,
    OldSystemConfig,
    Regime,
    RegimeConfig,
    RegimeConfigs,
    YearReturn,
    returns_from_records,
)
from .aggregate import SimulationResult, new_result, record_year
from .contributions import clamp_amount
from .state import SimulationState
from .tax_systems import (
    calc_current_system,
    calc_future_income,
    calc_future_system,
    calc_no_tax,
    calc_old_system,
)

logger = logging.getLogger(__name__)


class RegimeCalculator(ABC):
    """Turns one year of a regime's state into the tax due for that year."""

    regime: Regime

    @abstractmethod
    def assess(
        self,
        state: SimulationState,
        config: RegimeConfig,
        prev_wealth: float,
        return_amount: float,
    ) -> float:
        ...


class NoTaxCalculator(RegimeCalculator):
    regime = Regime.NO_TAX

    def assess(self, state, config, prev_wealth, return_amount):
        return calc_no_tax()


class OldSystemCalculator(RegimeCalculator):
    regime = Regime.OLD

    def assess(self, state, config: OldSystemConfig, prev_wealth, return_amount):
        return calc_old_system(prev_wealth, return_amount, config)


class CurrentSystemCalculator(RegimeCalculator):
    regime = Regime.CURRENT

    def assess(self, state, config: CurrentSystemConfig, prev_wealth, return_amount):
        return calc_current_system(prev_wealth, return_amount, config)


class FutureSystemCalculator(RegimeCalculator):
    """Taxes the realised return, with losses carried forward in ``state``.

    Only losses strictly above the loss threshold are banked. Carried losses
    are set off against later positive income before the rate is applied.
    """

    regime = Regime.FUTURE

    def assess(self, state, config: FutureSystemConfig, prev_wealth, return_amount):
        income = calc_future_income(return_amount, config)

        if income < 0:
            loss = abs(income)
            if loss > config.loss_threshold * config.partner_multiplier:
                state.carry_forward_loss += loss
            return 0.0

        if income == 0:
            return 0.0

        setoff = min(state.carry_forward_loss, income)
        state.carry_forward_loss -= setoff
        return calc_future_system(income - setoff, config)


CALCULATORS: Dict[Regime, RegimeCalculator] = {
    calc.regime: calc
    for calc in (NoTaxCalculator(), OldSystemCalculator(), CurrentSystemCalculator(), FutureSystemCalculator())
}

_missing = set(Regime) - set(CALCULATORS)
if _missing:
    raise RuntimeError(f"No calculator registered for: {', '.join(sorted(r.value for r in _missing))}")


def grow_year(prev_wealth: float, return_pct: float, monthly_deposit: float) -> tuple[float, float]:
    """Apply one year of growth plus deposits.

    Returns ``(wealth_after_return, return_amount)`` where the return amount
    excludes the deposited principal. Deposits land at the end of each month.
    """
    annual_factor = 1 + return_pct / 100.0
    monthly_factor = annual_factor ** (1 / 12) if annual_factor > 0 else 0.0

    if monthly_deposit <= 0:
        after = prev_wealth * annual_factor
    else:
        after = prev_wealth
        for _ in range(12):
            after = after * monthly_factor + monthly_deposit

    return_amount = after - prev_wealth - 12 * max(0.0, monthly_deposit)
    return after, return_amount


def _deposit_for_year(contributions: Mapping[Any, Any] | float | int | None, year: int) -> float:
    if contributions is None:
        return 0.0
    if isinstance(contributions, Mapping):
        value = contributions.get(year, contributions.get(str(year), 0.0))
        return clamp_amount(value)
    return clamp_amount(contributions)


def _as_configs(configs: RegimeConfigs | Mapping[str, Any] | None) -> RegimeConfigs:
    if isinstance(configs, RegimeConfigs):
        return configs
    return RegimeConfigs.from_mapping(configs)


def run_simulation(
    start_capital: float,
    returns: Sequence[YearReturn | Mapping[str, Any]],
    configs: RegimeConfigs | Mapping[str, Any] | None = None,
    contributions_by_year: Mapping[Any, Any] | float = 0,
    systems: Sequence[Regime] = REGIME_ORDER,
) -> SimulationResult:
    """Run every regime over the same return series.

    Args:
        start_capital: Wealth at the start of the first year.
        returns: Yearly returns in percent, as ``YearReturn`` or
            ``{"year": .., "return": ..}`` records.
        configs: ``RegimeConfigs`` or a ``{"noTax": {}, "old": {...}, ...}`` map.
        contributions_by_year: Monthly deposit per year, or a flat amount.

    An empty return series gives empty tax series and only the start value.
    """
    series = returns_from_records(returns)
    cfgs = _as_configs(configs)
    start = clamp_amount(start_capital)

    result = new_result(series, systems, start)
    states = {sys: SimulationState(wealth=start) for sys in systems}

    for item in series:
        deposit = _deposit_for_year(contributions_by_year, item.year)

        for sys in systems:
            state = states[sys]
            prev_wealth = state.wealth
            after, return_amount = grow_year(prev_wealth, item.return_pct, deposit)

            tax = CALCULATORS[sys].assess(state, cfgs.for_regime(sys), prev_wealth, return_amount)
            tax = min(max(0.0, tax), max(0.0, after))

            state.wealth = after - tax
            record_year(result, sys.value, state.wealth, tax)

            logger.debug(
                "%s %s: return=%.2f%% deposit=%.2f growth=%.2f tax=%.2f wealth=%.2f carry=%.2f",
                item.year,
                sys.value,
                item.return_pct,
                deposit,
                return_amount,
                tax,
                state.wealth,
                state.carry_forward_loss,
            )

    result.final_states = {sys.value: state for sys, state in states.items()}
    logger.debug(
        "Simulated %d years for %s",
        len(series),
        ", ".join(f"{sys}={result.final_value(sys):.2f}" for sys in result.systems),
    )
    return result
