"""
Tests for report tables, summary values and the narrative verdict.
"""
import json

import pytest

from roi_model.engine import compute
from roi_model.reporting import (
    COL_AI,
    COL_BREAK_EVEN,
    COL_CHANGE,
    COL_CUM_AI,
    COL_CURRENT,
    COL_ITEM,
    COL_SAVING,
    analysis_text,
    breakdown_table,
    cost_reduction_percent,
    format_breakdown,
    payback_months,
    save_detailed_results,
    summary,
    yearly_series,
)


def test_breakdown_table(default_result):
    df = breakdown_table(default_result)
    assert len(df) == 8
    labor = df.iloc[0]
    assert labor[COL_CURRENT] == pytest.approx(75_000_000)
    assert labor[COL_AI] == pytest.approx(25_000_000)
    assert labor[COL_SAVING] == pytest.approx(50_000_000)
    assert labor[COL_CHANGE] == "-66.7 %"

    maintenance = df[df[COL_ITEM].str.startswith("연간 유지보수")].iloc[0]
    assert maintenance[COL_CHANGE] == "N/A"
    assert maintenance[COL_SAVING] == pytest.approx(-11_000_000)

    total_y2 = df.iloc[-1]
    assert total_y2[COL_AI] == pytest.approx(83_500_000)


def test_format_breakdown(default_result):
    df = format_breakdown(breakdown_table(default_result))
    assert df.iloc[0][COL_CURRENT] == "75,000,000 원"


def test_yearly_series(default_result):
    df = yearly_series(default_result)
    assert df["year"].tolist() == [1, 2, 3, 4, 5]
    assert df[COL_BREAK_EVEN].tolist() == [True, False, False, False, False]
    assert df[COL_CUM_AI].iloc[-1] == pytest.approx(616_500_000)


def test_yearly_series_without_break_even(no_saving_params):
    result = compute(no_saving_params)
    assert not yearly_series(result)[COL_BREAK_EVEN].any()


def test_summary_values(default_result):
    s = summary(default_result)
    assert s["initial_investment"] == pytest.approx(210_000_000)
    assert s["roi_status"] == "within_year"
    assert s["break_even_year"] == 1
    assert s["tco_saving_rate"] == 67.8
    # 310M / 382.5M
    assert s["cost_reduction_percent"] == 81.0
    # 0.7 years displayed -> 8.4 months
    assert s["payback_months"] == pytest.approx(8.4)


def test_summary_unrecoverable(no_saving_params):
    result = compute(no_saving_params)
    s = summary(result)
    assert s["roi_years"] is None
    assert s["payback_months"] is None
    assert s["break_even_year"] is None


def test_cost_reduction_percent_without_current_cost():
    result = compute({"personnel_count": 0, "revenue": 0})
    assert cost_reduction_percent(result) is None


def test_payback_months_immediate(default_params):
    result = compute(default_params.model_copy(update={"ai_units": 0, "custom_dev_cost": 0}))
    assert payback_months(result) == 0.0


def test_analysis_text_effective(default_result):
    text = analysis_text(default_result)
    assert "310,000,000 원" in text
    assert "품질 관련 비용 90% 개선" in text
    assert "오감지 비용 80% 절감" in text
    assert "매우 효과적인 투자" in text


def test_analysis_text_long_payback(default_params):
    # heavy custom development pushes payback past three years
    result = compute(default_params.model_copy(update={"custom_dev_cost": 1_500_000_000}))
    assert result.roi_years > 3
    assert "장기 투자" in analysis_text(result)


def test_analysis_text_moderate_payback(default_params):
    result = compute(default_params.model_copy(update={"custom_dev_cost": 500_000_000}))
    assert 1.5 < result.roi_years <= 3
    assert "적정 수준" in analysis_text(result)


def test_analysis_text_no_saving(no_saving_params):
    result = compute(no_saving_params)
    assert result.annual_saving_y1 <= 0
    assert analysis_text(result).startswith("본 AI 시스템 도입은")


def test_save_detailed_results(tmp_path, default_result):
    paths = save_detailed_results(default_result, tmp_path / "out", "baseline")
    for p in paths.values():
        assert p.exists()
    payload = json.loads(paths["summary"].read_text(encoding="utf-8"))
    assert payload["scenario"] == "baseline"
    assert payload["summary"]["break_even_year"] == 1
    assert payload["result"]["roi_status"] == "within_year"


def test_save_detailed_results_infinite_roi(tmp_path, no_saving_params):
    result = compute(no_saving_params)
    paths = save_detailed_results(result, tmp_path, "bad")
    payload = json.loads(paths["summary"].read_text(encoding="utf-8"))
    assert payload["result"]["roi_years"] is None
