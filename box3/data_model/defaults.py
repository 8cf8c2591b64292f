# data_model/defaults.py
from __future__ import annotations

from typing import Dict

OLD_DEFAULTS: Dict[str, float] = {
    "deemed_return": 4.0,
    "tax_rate": 30.0,
    "exemption": 21139.0,
    "partner_multiplier": 1,
}

CURRENT_DEFAULTS: Dict[str, float] = {
    "tax_rate": 36.0,
    "exemption": 59357.0,
    "debt_threshold": 3800.0,
    "savings_rate": 1.28,
    "invest_rate": 6.00,
    "debt_rate": 2.70,
    "alloc_savings": 0.0,
    "alloc_invest": 100.0,
    "alloc_debt": 0.0,
    "partner_multiplier": 1,
}

FUTURE_DEFAULTS: Dict[str, float] = {
    "tax_rate": 36.0,
    "free_return": 1800.0,
    "loss_threshold": 500.0,
    "partner_multiplier": 1,
}


def default_plan() -> dict[str, float | str | bool]:
    return {
        "startCapital": 150000.0,
        "monthlyContribution": 0.0,
        "cpiEnabled": False,
        "fiscalPartner": False,
        "index": "sp500",
        "defaultStartYear": 2015,
    }
