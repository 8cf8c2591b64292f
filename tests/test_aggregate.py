import pytest

from box3.data_model import RegimeConfigs, YearReturn
from box3.engine.aggregate import result_frame, summarize
from box3.engine.simulator import run_simulation


def _result():
    returns = [YearReturn(2020, 10), YearReturn(2021, -5)]
    return run_simulation(100000, returns, RegimeConfigs())


def test_summary_reports_profit_over_invested_capital():
    result = _result()

    rows = summarize(result, 100000)

    assert [row["system"] for row in rows] == ["noTax", "old", "current", "future"]
    no_tax = rows[0]
    assert no_tax["label"] == "Geen belasting"
    assert no_tax["finalValue"] == pytest.approx(100000 * 1.1 * 0.95)
    assert no_tax["totalTax"] == 0
    assert no_tax["profit"] == pytest.approx(100000 * 1.1 * 0.95 - 100000)


def test_result_frame_has_start_row_per_system():
    result = _result()

    df = result_frame(result)

    assert len(df) == 4 * 3
    future = df[df["System"] == "future"].reset_index(drop=True)
    assert list(future["Year"]) == [2019, 2020, 2021]
    assert future.loc[0, "AnnualTax"] == 0
    assert future.loc[2, "CumulativeTax"] == pytest.approx(result.total_tax("future"))


def test_payload_uses_regime_tags():
    payload = _result().to_payload()

    assert payload["labels"] == [2019, 2020, 2021]
    assert set(payload["portfolioValues"]) == {"noTax", "old", "current", "future"}
    assert payload["carryForwardLoss"]["noTax"] == 0
    # the 5% drop in 2021 is banked for the future regime
    assert payload["carryForwardLoss"]["future"] > 500
