"""
Tests for the cost model engine: cost components, payback, cumulative series and TCO.
"""
import math

import pytest

from roi_model import engine
from roi_model.config.models import BusinessParameters
from roi_model.engine import compute, cumulative_costs, payback_years, tco_comparison
from roi_model.results import RoiStatus


def test_default_scenario_figures(default_result):
    r = default_result
    assert r.labor_cost == pytest.approx(75_000_000)
    assert r.training_cost == pytest.approx(7_500_000)
    assert r.misdetect_cost == pytest.approx(150_000_000)
    assert r.quality_cost == pytest.approx(75_000_000)
    assert r.defect_cost == pytest.approx(75_000_000)
    assert r.current_total_op_cost == pytest.approx(382_500_000)

    # 2 * (15M license + 40M optics) + 100M custom development
    assert r.initial_investment == pytest.approx(210_000_000)
    assert r.annual_maintenance_cost == pytest.approx(11_000_000)

    assert r.reduced_labor == pytest.approx(25_000_000)
    assert r.ai_training_cost == pytest.approx(2_500_000)
    assert r.reduced_misdetect == pytest.approx(30_000_000)
    assert r.reduced_quality_defect_cost == pytest.approx(15_000_000)
    assert r.ai_total_annual_cost_y1 == pytest.approx(72_500_000)
    assert r.ai_total_annual_cost_y2plus == pytest.approx(83_500_000)

    assert r.annual_saving_y1 == pytest.approx(310_000_000)
    assert r.annual_saving_y2plus == pytest.approx(299_000_000)


def test_default_scenario_payback_and_tco(default_result):
    r = default_result
    assert r.roi_years == pytest.approx(210 / 310)
    assert r.roi_status is RoiStatus.WITHIN_YEAR
    assert r.roi_display == "0.7 년 (1년 이내)"
    assert r.series.break_even_year_index == 0
    assert r.series.break_even_year == 1

    assert r.current_tco5 == pytest.approx(1_912_500_000)
    assert r.ai_tco5 == pytest.approx(616_500_000)
    assert r.tco_saving == 1_296_000_000
    assert r.tco_saving_rate == 67.8


def test_current_total_is_sum_of_components(default_result):
    r = default_result
    assert r.current_total_op_cost == pytest.approx(
        r.labor_cost + r.training_cost + r.misdetect_cost + r.quality_cost + r.defect_cost
    )
    assert r.current_total_cost_y1 == r.current_total_cost_y2plus == r.current_total_op_cost
    assert r.current_maintenance == 0.0


def test_reuse_optics_lowers_investment(default_params):
    r = compute(default_params.model_copy(update={"use_optics": False}))
    assert r.initial_investment == pytest.approx(2 * 15_000_000 + 100_000_000)
    assert r.annual_maintenance_cost == pytest.approx(3_000_000)


def test_zero_investment_is_immediate(default_params):
    params = default_params.model_copy(update={"ai_units": 0, "custom_dev_cost": 0})
    r = compute(params)
    assert r.initial_investment == 0
    assert r.roi_years == 0.0
    assert r.roi_status is RoiStatus.IMMEDIATE
    assert r.roi_display == "즉시 회수"


def test_no_savings_is_unrecoverable(default_params):
    # more inspectors after adoption and no quality gains: savings negative every year
    params = default_params.model_copy(
        update={"target_ai_personnel": 10, "misdetect_reduction": 0.0, "quality_defect_reduction": 0.0}
    )
    r = compute(params)
    assert r.annual_saving_y1 <= 0
    assert r.annual_saving_y2plus <= 0
    assert math.isinf(r.roi_years)
    assert r.roi_status is RoiStatus.UNRECOVERABLE
    assert r.roi_display == "회수 불가 (절감액 부족)"
    assert r.series.break_even_year_index is None


def test_payback_years_branches():
    assert payback_years(0, 100, 100) == 0.0
    assert payback_years(-5, -1, -1) == 0.0
    assert math.isinf(payback_years(100, 0, 0))
    assert math.isinf(payback_years(100, -10, -20))
    assert payback_years(100, 200, 50) == pytest.approx(0.5)
    assert payback_years(100, 100, 50) == pytest.approx(1.0)
    # 40 recovered in year 1, remaining 60 at 30/year
    assert payback_years(100, 40, 30) == pytest.approx(3.0)
    # positive year-1 saving that never covers the investment
    assert math.isinf(payback_years(100, 40, -5))


def test_payback_within_first_year_bounds(default_params):
    r = compute(default_params)
    assert r.annual_saving_y1 >= r.initial_investment > 0
    assert r.roi_years == pytest.approx(r.initial_investment / r.annual_saving_y1)
    assert 0 < r.roi_years <= 1


def test_cumulative_series_strictly_increasing(default_result):
    s = default_result.series
    assert len(s.cumulative_current) == len(s.cumulative_ai) == 5
    assert all(b > a for a, b in zip(s.cumulative_current, s.cumulative_current[1:]))
    assert all(b > a for a, b in zip(s.cumulative_ai, s.cumulative_ai[1:]))
    assert s.cumulative_ai[0] == pytest.approx(210_000_000 + 72_500_000)
    assert s.annual_ai == pytest.approx((72_500_000,) + (83_500_000,) * 4)
    assert s.labels == ("1년차", "2년차", "3년차", "4년차", "5년차")


def test_break_even_scan_is_independent_of_payback():
    # payback 1.5 years analytically; the yearly scan first sees it in year 2
    series = cumulative_costs(100, 150, 0, 0)
    assert series.cumulative_current == (100, 200, 300, 400, 500)
    assert series.cumulative_ai == (150, 150, 150, 150, 150)
    assert series.break_even_year_index == 1
    assert payback_years(150, 100, 100) == pytest.approx(1.5)


def test_break_even_requires_strictly_lower_cost():
    series = cumulative_costs(100, 100, 50, 50)
    # year 2: 200 vs 200 is not a break-even
    assert series.cumulative_ai[1] == series.cumulative_current[1]
    assert series.break_even_year_index == 2


def test_tco_rate_zero_when_no_current_cost():
    current, ai, saving, rate = tco_comparison(0, 0, 100, 10, 10)
    assert current == 0
    assert ai == 150
    assert saving == -150
    assert rate == 0.0


def test_negative_tco_figures_round_like_the_calculator(monkeypatch):
    # saving rounds halves toward +inf, the rate rounds its magnitude
    monkeypatch.setattr(engine, "tco_comparison", lambda *args: (100.0, 112.25, -12.25, -12.25))
    result = compute()
    assert result.tco_saving == -12
    assert result.tco_saving_rate == pytest.approx(-12.3)


def test_all_zero_inputs_are_defined():
    params = BusinessParameters(
        personnel_count=0, salary=0, revenue=0, ai_units=0, target_ai_personnel=0,
        custom_dev_cost=0,
    )
    r = compute(params)
    assert r.current_tco5 == 0
    assert r.tco_saving_rate == 0.0
    assert r.roi_status is RoiStatus.IMMEDIATE
    for value in (r.annual_saving_y1, r.annual_saving_y2plus, r.tco_saving):
        assert math.isfinite(value)


def test_zero_revenue_has_no_nan(default_params):
    r = compute(default_params.model_copy(update={"revenue": 0}))
    assert r.misdetect_cost == 0
    assert not math.isnan(r.tco_saving_rate)
    assert not math.isnan(r.roi_years)


@pytest.mark.parametrize("target", [3, 2, 1, 0])
def test_saving_non_decreasing_as_target_headcount_falls(default_params, target):
    higher = compute(default_params.model_copy(update={"target_ai_personnel": target + 1}))
    lower = compute(default_params.model_copy(update={"target_ai_personnel": target}))
    assert lower.annual_saving_y1 >= higher.annual_saving_y1


def test_out_of_range_ratio_propagates(default_params):
    r = compute(default_params.model_copy(update={"misdetect_reduction": 1.5}))
    # a "reduction" above 100% turns misdetection into a credit
    assert r.reduced_misdetect == pytest.approx(-75_000_000)


def test_compute_accepts_camel_case_mapping():
    r = compute(
        {
            "personnelCount": 3,
            "salary": 25_000_000,
            "revenue": 3_000_000_000,
            "aiUnits": 2,
            "useOptics": True,
            "misdetectReduction": 0.8,
            "qualityDefectReduction": 0.9,
            "targetAiPersonnel": 1,
        }
    )
    assert r.initial_investment == pytest.approx(210_000_000)


def test_compute_default_and_input_untouched(default_params):
    before = default_params.model_dump()
    first = compute(default_params)
    second = compute(default_params)
    assert default_params.model_dump() == before
    assert first == second
    assert first is not second
    assert compute().initial_investment == pytest.approx(first.initial_investment)


def test_remarks_describe_derivation(default_result):
    remarks = default_result.remarks
    assert set(remarks) == {"labor", "training", "misdetect", "quality", "maintenance"}
    assert "3명 → 1명" in remarks["labor"]
    assert "25,000,000" in remarks["labor"]
    assert remarks["training"] == "인력 인건비의 10% 적용"
    assert "3,000,000,000의 5% 적용" in remarks["misdetect"]
    assert "110,000,000" in remarks["maintenance"]


def test_category_pairs(default_result):
    assert default_result.labor.saving == pytest.approx(50_000_000)
    assert default_result.quality_defect.current == pytest.approx(150_000_000)
    assert default_result.maintenance.current == 0.0
    assert default_result.maintenance.ai == pytest.approx(11_000_000)


def test_to_dict_is_plain(default_result):
    d = default_result.to_dict()
    assert d["roi_status"] == "within_year"
    assert d["series"]["labels"][0] == "1년차"
    assert isinstance(d["series"]["cumulative_ai"], list)
    assert d["series"]["break_even_year_index"] == 0
