import pytest

from box3.data_model import CurrentSystemConfig, FutureSystemConfig, OldSystemConfig, get_default_configs
from box3.engine.tax_systems import (
    calc_current_system,
    calc_future_income,
    calc_future_system,
    calc_no_tax,
    calc_old_system,
    normalize_allocations,
)


def test_no_tax_is_always_zero():
    assert calc_no_tax() == 0
    assert calc_no_tax(1_000_000, 50_000, {}) == 0


def test_old_system_taxes_deemed_return_above_exemption():
    # (100000 - 21139) * 4% * 30%
    tax = calc_old_system(100000, 0, OldSystemConfig())

    assert tax == pytest.approx(946.332)


def test_old_system_below_exemption_is_free():
    assert calc_old_system(20000, 5000, OldSystemConfig()) == 0


def test_old_system_accepts_camel_case_mapping_and_defaults_bad_fields():
    config = {"deemedReturn": 5, "taxRate": "oops", "exemption": None}

    tax = calc_old_system(100000, 0, config)

    assert tax == pytest.approx(78861 * 0.05 * 0.30)
    assert config == {"deemedReturn": 5, "taxRate": "oops", "exemption": None}


def test_current_system_apportions_return_over_exempt_share():
    tax = calc_current_system(100000, 0, CurrentSystemConfig())

    # 6% of 100000, apportioned by (100000 - 59357) / 100000, taxed at 36%
    assert tax == pytest.approx(6000 * 0.40643 * 0.36)


def test_current_system_zero_when_all_allocations_empty():
    config = CurrentSystemConfig(alloc_savings=0, alloc_invest=0, alloc_debt=0)

    assert calc_current_system(500000, 0, config) == 0


def test_current_system_zero_when_debt_outweighs_notional_return():
    config = CurrentSystemConfig(alloc_savings=50, alloc_invest=0, alloc_debt=50)

    # 50000 * 1.28% - (50000 - 3800) * 2.70% is negative
    assert calc_current_system(100000, 0, config) == 0


def test_current_system_zero_for_non_positive_wealth():
    assert calc_current_system(0, 0, CurrentSystemConfig()) == 0
    assert calc_current_system(-1000, 0, CurrentSystemConfig()) == 0


def test_normalize_allocations_clamps_negative_weights():
    assert normalize_allocations(20, 60, 20) == pytest.approx((0.2, 0.6, 0.2))
    assert normalize_allocations(-10, 100, 0) == (0.0, 1.0, 0.0)
    assert normalize_allocations(0, 0, 0) == (0.0, 0.0, 0.0)


def test_partner_multiplier_doubles_exemptions_in_deemed_return_regimes():
    old_single = OldSystemConfig(exemption=42278, partner_multiplier=1)
    old_partner = OldSystemConfig(exemption=21139, partner_multiplier=2)
    assert calc_old_system(150000, 0, old_partner) == pytest.approx(calc_old_system(150000, 0, old_single))

    mixed = dict(alloc_savings=30, alloc_invest=50, alloc_debt=20)
    cur_single = CurrentSystemConfig(exemption=59357 * 2, debt_threshold=3800 * 2, partner_multiplier=1, **mixed)
    cur_partner = CurrentSystemConfig(partner_multiplier=2, **mixed)
    assert calc_current_system(400000, 0, cur_partner) == pytest.approx(calc_current_system(400000, 0, cur_single))


def test_partner_multiplier_normalizes_to_one_or_two():
    assert OldSystemConfig.from_mapping({"partnerMultiplier": 3}).partner_multiplier == 2
    assert OldSystemConfig.from_mapping({"partnerMultiplier": 0.5}).partner_multiplier == 1
    assert OldSystemConfig.from_mapping({"partnerMultiplier": "x"}).partner_multiplier == 1


def test_future_income_passes_losses_through():
    assert calc_future_income(-750, FutureSystemConfig()) == -750
    assert calc_future_income(0, FutureSystemConfig()) == 0


def test_future_income_subtracts_free_return():
    assert calc_future_income(20000, FutureSystemConfig()) == pytest.approx(18200)
    assert calc_future_income(1000, FutureSystemConfig()) == 0
    assert calc_future_income(20000, FutureSystemConfig(partner_multiplier=2)) == pytest.approx(16400)


def test_future_system_applies_rate_to_positive_income_only():
    assert calc_future_system(18200, FutureSystemConfig()) == pytest.approx(6552)
    assert calc_future_system(-5000, FutureSystemConfig()) == 0


def test_calculators_are_pure():
    config = CurrentSystemConfig(alloc_savings=10, alloc_invest=80, alloc_debt=10)

    first = calc_current_system(250000, 12000, config)
    second = calc_current_system(250000, 12000, config)

    assert first == second
    assert config == CurrentSystemConfig(alloc_savings=10, alloc_invest=80, alloc_debt=10)


def test_default_configs_shape():
    configs = get_default_configs()

    assert configs["noTax"] == {}
    assert configs["old"] == {"partnerMultiplier": 1, "deemedReturn": 4.0, "taxRate": 30.0, "exemption": 21139.0}
    assert configs["current"]["investRate"] == 6.0
    assert configs["current"]["allocInvest"] == 100.0
    assert configs["future"] == {"partnerMultiplier": 1, "taxRate": 36.0, "freeReturn": 1800.0, "lossThreshold": 500.0}
