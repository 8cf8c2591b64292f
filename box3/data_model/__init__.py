from .defaults import CURRENT_DEFAULTS, FUTURE_DEFAULTS, OLD_DEFAULTS, default_plan
from .regimes import (
    REGIME_LABELS,
    REGIME_ORDER,
    CurrentSystemConfig,
    FutureSystemConfig,
    NoTaxConfig,
    OldSystemConfig,
    Regime,
    RegimeConfig,
    RegimeConfigs,
    as_config,
    coerce_number,
    get_default_configs,
    normalize_partner_multiplier,
)
from .returns import YearReturn, returns_from_mapping, returns_from_records

__all__ = [
    "CURRENT_DEFAULTS",
    "FUTURE_DEFAULTS",
    "OLD_DEFAULTS",
    "REGIME_LABELS",
    "REGIME_ORDER",
    "CurrentSystemConfig",
    "FutureSystemConfig",
    "NoTaxConfig",
    "OldSystemConfig",
    "Regime",
    "RegimeConfig",
    "RegimeConfigs",
    "YearReturn",
    "as_config",
    "coerce_number",
    "default_plan",
    "get_default_configs",
    "normalize_partner_multiplier",
    "returns_from_mapping",
    "returns_from_records",
]
