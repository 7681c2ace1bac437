# roi_model/engine.py
"""
Cost model engine: compares the annual cost of manual inspection with the
cost after deploying AI inspection units, and derives savings, payback period,
cumulative 5-year costs and TCO.

The engine is a pure function of its input and never raises for numeric
input; degenerate divisions fall back to sentinels (0.0 or ``math.inf``).
"""

import logging
import math
from typing import Any, List, Mapping, Optional, Tuple, Union

from roi_model.config.models import BusinessParameters
from roi_model.formatting import (
    build_remarks,
    classify_roi,
    roi_display,
    round_half_away,
    round_half_up,
)
from roi_model.results import HORIZON_YEARS, CostAnalysisResult, CostSeries

logger = logging.getLogger(__name__)


def payback_years(
    initial_investment: float, annual_saving_y1: float, annual_saving_y2plus: float
) -> float:
    """
    Years needed for savings to repay the initial investment.

    - No investment: 0.0.
    - Savings never positive: ``math.inf``.
    - Repaid within year 1: investment / year-1 saving.
    - Otherwise: 1 + remainder / year-2+ saving, or ``math.inf`` if that
      saving is not positive.
    """
    if initial_investment <= 0:
        return 0.0
    if annual_saving_y1 <= 0 and annual_saving_y2plus <= 0:
        return math.inf
    if annual_saving_y1 >= initial_investment:
        return initial_investment / annual_saving_y1
    if annual_saving_y2plus > 0:
        remaining = initial_investment - annual_saving_y1
        return 1 + remaining / annual_saving_y2plus
    # covers NaN savings too, since every comparison above is False
    return math.inf


def cumulative_costs(
    current_annual: float,
    initial_investment: float,
    ai_cost_y1: float,
    ai_cost_y2plus: float,
    years: int = HORIZON_YEARS,
) -> CostSeries:
    """Build annual and cumulative cost series and scan for the break-even year.

    The AI scenario starts from the initial investment; the current scenario
    starts from zero.
    """
    annual_current = [current_annual] * years
    annual_ai = [ai_cost_y1] + [ai_cost_y2plus] * (years - 1)

    cumulative_current: List[float] = []
    cumulative_ai: List[float] = []
    running_current = 0.0
    running_ai = initial_investment
    break_even: Optional[int] = None

    for i in range(years):
        running_current += annual_current[i]
        running_ai += annual_ai[i]
        cumulative_current.append(running_current)
        cumulative_ai.append(running_ai)
        if break_even is None and running_ai < running_current:
            break_even = i

    return CostSeries(
        annual_current=tuple(annual_current),
        annual_ai=tuple(annual_ai),
        cumulative_current=tuple(cumulative_current),
        cumulative_ai=tuple(cumulative_ai),
        break_even_year_index=break_even,
    )


def tco_comparison(
    current_y1: float,
    current_y2plus: float,
    initial_investment: float,
    ai_y1: float,
    ai_y2plus: float,
    years: int = HORIZON_YEARS,
) -> Tuple[float, float, float, float]:
    """Return (current TCO, AI TCO, saving, saving rate in percent)."""
    current_tco = current_y1 + current_y2plus * (years - 1)
    ai_tco = initial_investment + ai_y1 + ai_y2plus * (years - 1)
    saving = current_tco - ai_tco

    rate = 0.0
    if current_tco != 0:
        rate = saving / current_tco * 100
    if not math.isfinite(rate):
        logger.warning(f"TCO saving rate is not finite (saving={saving}, current={current_tco})")
        rate = 0.0
    return current_tco, ai_tco, saving, rate


def _coerce(params: Union[BusinessParameters, Mapping[str, Any], None]) -> BusinessParameters:
    if params is None:
        return BusinessParameters()
    if isinstance(params, BusinessParameters):
        return params
    return BusinessParameters.model_validate(dict(params))


def compute(params: Union[BusinessParameters, Mapping[str, Any], None] = None) -> CostAnalysisResult:
    """
    Run the cost model for one set of business parameters.

    Args:
        params: A ``BusinessParameters`` instance or a mapping of its fields
            (snake_case or camelCase). ``None`` runs the default scenario.

    Returns:
        A fresh ``CostAnalysisResult``; the input is not modified.
    """
    p = _coerce(params)
    logger.debug(f"Computing cost model for {p.model_dump()}")

    # 1. Current annual costs
    labor_cost = p.personnel_count * p.salary
    training_cost = labor_cost * p.training_rate
    misdetect_cost = p.revenue * p.misdetect_rate
    quality_cost = p.revenue * (p.quality_defect_rate / 2)
    defect_cost = p.revenue * (p.quality_defect_rate / 2)
    current_total_op_cost = labor_cost + training_cost + misdetect_cost + quality_cost + defect_cost
    # no maintenance in the manual process, so every year costs the same
    current_total_cost_y1 = current_total_op_cost
    current_total_cost_y2plus = current_total_op_cost

    # 2. Initial investment; maintenance is charged from year 2
    optics_cost_per_unit = p.optics_cost if p.use_optics else 0.0
    ai_unit_cost = p.unit_license + optics_cost_per_unit
    ai_total_unit_cost = p.ai_units * ai_unit_cost
    initial_investment = ai_total_unit_cost + p.custom_dev_cost
    annual_maintenance_cost = ai_total_unit_cost * p.maint_rate

    # 3. Costs after adoption
    reduced_labor = p.target_ai_personnel * p.salary
    ai_training_cost = reduced_labor * p.training_rate
    reduced_misdetect = misdetect_cost * (1 - p.misdetect_reduction)
    reduced_quality_defect_cost = (quality_cost + defect_cost) * (1 - p.quality_defect_reduction)
    ai_total_annual_op_cost = (
        reduced_labor + ai_training_cost + reduced_misdetect + reduced_quality_defect_cost
    )
    ai_total_annual_cost_y1 = ai_total_annual_op_cost
    ai_total_annual_cost_y2plus = ai_total_annual_op_cost + annual_maintenance_cost

    # 4. Savings
    annual_saving_y1 = current_total_cost_y1 - ai_total_annual_cost_y1
    annual_saving_y2plus = current_total_cost_y2plus - ai_total_annual_cost_y2plus

    # 5. Payback
    roi_years = payback_years(initial_investment, annual_saving_y1, annual_saving_y2plus)

    # 6. Cumulative series, scanned independently of the analytic payback
    series = cumulative_costs(
        current_total_cost_y1,
        initial_investment,
        ai_total_annual_cost_y1,
        ai_total_annual_cost_y2plus,
    )

    # 7. TCO
    current_tco5, ai_tco5, tco_saving, tco_saving_rate = tco_comparison(
        current_total_cost_y1,
        current_total_cost_y2plus,
        initial_investment,
        ai_total_annual_cost_y1,
        ai_total_annual_cost_y2plus,
    )

    remarks = build_remarks(
        personnel_count=p.personnel_count,
        target_ai_personnel=p.target_ai_personnel,
        salary=p.salary,
        revenue=p.revenue,
        training_rate=p.training_rate,
        misdetect_rate=p.misdetect_rate,
        quality_defect_rate=p.quality_defect_rate,
        maint_rate=p.maint_rate,
        ai_total_unit_cost=ai_total_unit_cost,
    )

    result = CostAnalysisResult(
        labor_cost=labor_cost,
        training_cost=training_cost,
        misdetect_cost=misdetect_cost,
        quality_cost=quality_cost,
        defect_cost=defect_cost,
        current_total_op_cost=current_total_op_cost,
        current_total_cost_y1=current_total_cost_y1,
        current_total_cost_y2plus=current_total_cost_y2plus,
        ai_total_unit_cost=ai_total_unit_cost,
        initial_investment=initial_investment,
        annual_maintenance_cost=annual_maintenance_cost,
        reduced_labor=reduced_labor,
        ai_training_cost=ai_training_cost,
        reduced_misdetect=reduced_misdetect,
        reduced_quality_defect_cost=reduced_quality_defect_cost,
        ai_total_annual_op_cost=ai_total_annual_op_cost,
        ai_total_annual_cost_y1=ai_total_annual_cost_y1,
        ai_total_annual_cost_y2plus=ai_total_annual_cost_y2plus,
        annual_saving_y1=annual_saving_y1,
        annual_saving_y2plus=annual_saving_y2plus,
        roi_years=roi_years,
        roi_status=classify_roi(roi_years),
        roi_display=roi_display(roi_years),
        series=series,
        current_tco5=current_tco5,
        ai_tco5=ai_tco5,
        tco_saving=round_half_up(tco_saving),
        tco_saving_rate=round_half_away(tco_saving_rate, 1),
        remarks=remarks,
    )
    logger.debug(
        f"Investment={initial_investment:,.0f} saving_y1={annual_saving_y1:,.0f} "
        f"roi={result.roi_display} break_even_index={series.break_even_year_index}"
    )
    return result
