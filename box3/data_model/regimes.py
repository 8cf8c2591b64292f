# data_model/regimes.py
from __future__ import annotations

import math
import re
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Mapping

from .defaults import CURRENT_DEFAULTS, FUTURE_DEFAULTS, OLD_DEFAULTS


class Regime(str, Enum):
    """Closed set of tax regimes the simulator compares side by side."""

    NO_TAX = "noTax"
    OLD = "old"
    CURRENT = "current"
    FUTURE = "future"


REGIME_ORDER = (Regime.NO_TAX, Regime.OLD, Regime.CURRENT, Regime.FUTURE)

REGIME_LABELS: Dict[Regime, str] = {
    Regime.NO_TAX: "Geen belasting",
    Regime.OLD: "Oud systeem (vóór 2017)",
    Regime.CURRENT: "Huidig systeem (overbruggingswet)",
    Regime.FUTURE: "Toekomstig (2028+)",
}

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _snake(key: str) -> str:
    return _CAMEL_RE.sub("_", str(key)).lower()


def _camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.title() for part in rest)


def coerce_number(value: Any, default: float) -> float:
    """Return ``value`` as a finite float, or ``default`` when that is impossible."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return number


def normalize_partner_multiplier(value: Any) -> int:
    raw = coerce_number(value, 1.0)
    return 2 if raw > 1 else 1


def _normalized_keys(raw: Mapping[str, Any] | None) -> Dict[str, Any]:
    if not isinstance(raw, Mapping):
        return {}
    return {_snake(key): value for key, value in raw.items()}


@dataclass(frozen=True)
class RegimeConfig:
    partner_multiplier: int = 1

    @classmethod
    def defaults(cls) -> Dict[str, float]:
        return {"partner_multiplier": 1}

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None = None):
        """Build a config from camelCase or snake_case keys, defaulting bad values."""
        values = _normalized_keys(raw)
        defaults = cls.defaults()
        kwargs: Dict[str, Any] = {}
        for item in fields(cls):
            if item.name == "partner_multiplier":
                kwargs[item.name] = normalize_partner_multiplier(values.get(item.name))
            else:
                kwargs[item.name] = coerce_number(values.get(item.name), defaults[item.name])
        return cls(**kwargs)

    def to_payload(self) -> Dict[str, Any]:
        return {_camel(key): value for key, value in asdict(self).items()}


@dataclass(frozen=True)
class NoTaxConfig(RegimeConfig):
    pass


@dataclass(frozen=True)
class OldSystemConfig(RegimeConfig):
    deemed_return: float = OLD_DEFAULTS["deemed_return"]
    tax_rate: float = OLD_DEFAULTS["tax_rate"]
    exemption: float = OLD_DEFAULTS["exemption"]

    @classmethod
    def defaults(cls) -> Dict[str, float]:
        return OLD_DEFAULTS


@dataclass(frozen=True)
class CurrentSystemConfig(RegimeConfig):
    tax_rate: float = CURRENT_DEFAULTS["tax_rate"]
    exemption: float = CURRENT_DEFAULTS["exemption"]
    debt_threshold: float = CURRENT_DEFAULTS["debt_threshold"]
    savings_rate: float = CURRENT_DEFAULTS["savings_rate"]
    invest_rate: float = CURRENT_DEFAULTS["invest_rate"]
    debt_rate: float = CURRENT_DEFAULTS["debt_rate"]
    alloc_savings: float = CURRENT_DEFAULTS["alloc_savings"]
    alloc_invest: float = CURRENT_DEFAULTS["alloc_invest"]
    alloc_debt: float = CURRENT_DEFAULTS["alloc_debt"]

    @classmethod
    def defaults(cls) -> Dict[str, float]:
        return CURRENT_DEFAULTS


@dataclass(frozen=True)
class FutureSystemConfig(RegimeConfig):
    tax_rate: float = FUTURE_DEFAULTS["tax_rate"]
    free_return: float = FUTURE_DEFAULTS["free_return"]
    loss_threshold: float = FUTURE_DEFAULTS["loss_threshold"]

    @classmethod
    def defaults(cls) -> Dict[str, float]:
        return FUTURE_DEFAULTS


CONFIG_TYPES = {
    Regime.NO_TAX: NoTaxConfig,
    Regime.OLD: OldSystemConfig,
    Regime.CURRENT: CurrentSystemConfig,
    Regime.FUTURE: FutureSystemConfig,
}


def as_config(regime: Regime, config: RegimeConfig | Mapping[str, Any] | None) -> RegimeConfig:
    config_type = CONFIG_TYPES[regime]
    if isinstance(config, config_type):
        return config
    if isinstance(config, RegimeConfig):
        return config_type.from_mapping(asdict(config))
    return config_type.from_mapping(config)


@dataclass(frozen=True)
class RegimeConfigs:
    no_tax: NoTaxConfig = field(default_factory=NoTaxConfig)
    old: OldSystemConfig = field(default_factory=OldSystemConfig)
    current: CurrentSystemConfig = field(default_factory=CurrentSystemConfig)
    future: FutureSystemConfig = field(default_factory=FutureSystemConfig)

    @classmethod
    def from_mapping(
        cls,
        raw: Mapping[str, Any] | None = None,
        partner_multiplier: Any = None,
    ) -> "RegimeConfigs":
        """Parse ``{"noTax": {...}, "old": {...}, ...}``.

        A ``partner_multiplier`` given here overrides whatever the individual
        regime mappings carry, matching a single "fiscal partner" toggle.
        """
        if not isinstance(raw, Mapping):
            raw = {}
        parsed: Dict[str, RegimeConfig] = {}
        for regime in REGIME_ORDER:
            section = raw.get(regime.value) or raw.get(_snake(regime.value)) or {}
            section = dict(section) if isinstance(section, Mapping) else {}
            if partner_multiplier is not None:
                section["partner_multiplier"] = partner_multiplier
                section.pop("partnerMultiplier", None)
            parsed[_snake(regime.value)] = as_config(regime, section)
        return cls(**parsed)

    def for_regime(self, regime: Regime) -> RegimeConfig:
        return getattr(self, _snake(regime.value))

    def to_payload(self) -> Dict[str, Dict[str, Any]]:
        payload = {regime.value: self.for_regime(regime).to_payload() for regime in REGIME_ORDER}
        payload[Regime.NO_TAX.value] = {}
        return payload


def get_default_configs() -> Dict[str, Dict[str, Any]]:
    """Default configuration per regime, keyed the way the front-end expects."""
    return RegimeConfigs().to_payload()
