# roi_model/reporting.py
"""
Reporting module for the inspection ROI model.
Turns a ``CostAnalysisResult`` into the tables and texts shown to a user:
the summary panel, the per-category breakdown table, the yearly cost series
and a short narrative verdict. Column names are module constants so that the
CLI, the chart and the tests agree on them.
"""

import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np
import pandas as pd

from roi_model.formatting import format_won, percentage_change
from roi_model.results import CostAnalysisResult, RoiStatus

logger = logging.getLogger(__name__)

# Breakdown table columns
COL_ITEM = "item"
COL_CURRENT = "current_annual_cost"
COL_AI = "ai_annual_cost"
COL_SAVING = "annual_saving"
COL_CHANGE = "change"
COL_REMARK = "remark"

# Yearly series columns
COL_YEAR = "year"
COL_ANNUAL_CURRENT = "annual_current_cost"
COL_ANNUAL_AI = "annual_ai_cost"
COL_CUM_CURRENT = "cumulative_current_cost"
COL_CUM_AI = "cumulative_ai_cost"
COL_BREAK_EVEN = "is_break_even"

# Payback thresholds (years) used by the narrative verdict
LONG_PAYBACK_YEARS = 3.0
MODERATE_PAYBACK_YEARS = 1.5


def breakdown_table(result: CostAnalysisResult) -> pd.DataFrame:
    """Per-category comparison of current and AI annual costs."""
    r = result
    qd_current = r.quality_cost + r.defect_cost
    rows = [
        ("검사 인력 운영비", r.labor_cost, r.reduced_labor, r.remarks.get("labor", "")),
        ("교육 및 관리 비용", r.training_cost, r.ai_training_cost, r.remarks.get("training", "")),
        ("과검출 비용", r.misdetect_cost, r.reduced_misdetect, r.remarks.get("misdetect", "")),
        (
            "품질관리/불량처리 비용",
            qd_current,
            r.reduced_quality_defect_cost,
            r.remarks.get("quality", ""),
        ),
        ("운영 비용 소계 (첫해 기준)", r.current_total_op_cost, r.ai_total_annual_cost_y1, ""),
        (
            "연간 유지보수 비용 (2년차 부터)",
            r.current_maintenance,
            r.annual_maintenance_cost,
            r.remarks.get("maintenance", ""),
        ),
        ("총 연간 비용 (첫해)", r.current_total_cost_y1, r.ai_total_annual_cost_y1, ""),
        ("총 연간 비용 (2년차+)", r.current_total_cost_y2plus, r.ai_total_annual_cost_y2plus, ""),
    ]

    df = pd.DataFrame(rows, columns=[COL_ITEM, COL_CURRENT, COL_AI, COL_REMARK])
    df[COL_SAVING] = df[COL_CURRENT] - df[COL_AI]
    df[COL_CHANGE] = [percentage_change(c, a).text for c, a in zip(df[COL_CURRENT], df[COL_AI])]
    # there is no current maintenance to compare against
    df.loc[df[COL_ITEM].str.startswith("연간 유지보수"), COL_CHANGE] = "N/A"
    return df[[COL_ITEM, COL_CURRENT, COL_AI, COL_SAVING, COL_CHANGE, COL_REMARK]]


def yearly_series(result: CostAnalysisResult) -> pd.DataFrame:
    """Annual and cumulative costs of both scenarios, one row per year."""
    s = result.series
    df = pd.DataFrame(
        {
            COL_YEAR: np.arange(1, len(s.annual_current) + 1),
            COL_ANNUAL_CURRENT: s.annual_current,
            COL_ANNUAL_AI: s.annual_ai,
            COL_CUM_CURRENT: s.cumulative_current,
            COL_CUM_AI: s.cumulative_ai,
        }
    )
    df[COL_BREAK_EVEN] = False
    if s.break_even_year_index is not None:
        df.loc[s.break_even_year_index, COL_BREAK_EVEN] = True
    return df


def cost_reduction_percent(result: CostAnalysisResult) -> Optional[float]:
    """Year-1 saving as a share of current cost, or None if there is no current cost."""
    if not result.current_total_cost_y1 > 0:
        return None
    return round(result.annual_saving_y1 / result.current_total_cost_y1 * 100, 1)


def payback_months(result: CostAnalysisResult) -> Optional[float]:
    """Payback period in months; 0.0 when immediate, None when never."""
    if result.roi_status is RoiStatus.UNRECOVERABLE:
        return None
    if result.roi_status is RoiStatus.IMMEDIATE:
        return 0.0
    # the display rounds years to one decimal before converting, keep that
    return round(round(result.roi_years, 1) * 12, 1)


def summary(result: CostAnalysisResult) -> Dict[str, Any]:
    """Values of the summary panel."""
    return {
        "initial_investment": result.initial_investment,
        "annual_saving_y1": result.annual_saving_y1,
        "annual_saving_y2plus": result.annual_saving_y2plus,
        "roi_years": result.roi_years if math.isfinite(result.roi_years) else None,
        "roi_status": result.roi_status.value,
        "roi_display": result.roi_display,
        "break_even_year": result.series.break_even_year,
        "tco_saving": result.tco_saving,
        "tco_saving_rate": result.tco_saving_rate,
        "cost_reduction_percent": cost_reduction_percent(result),
        "payback_months": payback_months(result),
    }


def _abs_change(current: float, ai: float) -> str:
    text = percentage_change(current, ai).text.replace("%", "").strip()
    try:
        value = abs(float(text))
    except ValueError:
        return text
    return f"{value:g}"


def analysis_text(result: CostAnalysisResult) -> str:
    """Short narrative verdict on the investment."""
    r = result
    if not r.annual_saving_y1 > 0:
        return "본 AI 시스템 도입은 비용 절감 효과를 기대하기 어렵습니다. 도입 전 추가 검토가 필요합니다."

    quality_pct = _abs_change(r.quality_cost + r.defect_cost, r.reduced_quality_defect_cost)
    misdetect_pct = _abs_change(r.misdetect_cost, r.reduced_misdetect)

    text = f"AI 비전 도입으로 연간 {format_won(r.annual_saving_y1)}의 비용 절감이 예상되며, "
    text += f"주요 개선사항으로는 품질 관련 비용 {quality_pct}% 개선, "
    text += f"오감지 비용 {misdetect_pct}% 절감이 포함됩니다. "

    if r.roi_status is RoiStatus.UNRECOVERABLE:
        text += "투자비용 회수는 어려울 것으로 판단됩니다."
    elif r.roi_status is RoiStatus.IMMEDIATE:
        text += "투자비용은 즉시 회수됩니다."
    else:
        years = round(r.roi_years, 1)
        if years > LONG_PAYBACK_YEARS:
            text += f"투자비용 회수 기간이 {r.roi_display}으로 장기 투자로 고려해야 합니다."
        elif years > MODERATE_PAYBACK_YEARS:
            text += f"투자비용 회수 기간은 {r.roi_display}으로 적정 수준입니다."
        else:
            text += f"투자비용 회수 기간이 {r.roi_display}으로 매우 효과적인 투자입니다."
    return text


def format_breakdown(df: pd.DataFrame) -> pd.DataFrame:
    """Copy of the breakdown table with amounts rendered as won strings."""
    out = df.copy()
    for col in (COL_CURRENT, COL_AI, COL_SAVING):
        out[col] = out[col].map(format_won)
    return out


def save_detailed_results(
    result: CostAnalysisResult, output_dir: Path, scenario_name: str = "scenario"
) -> Dict[str, Path]:
    """
    Write breakdown and yearly tables as CSV and the summary/full result as JSON.

    Returns a mapping of artefact name to written path.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    logger.info(f"Saving detailed results for '{scenario_name}' to {output_dir}")

    paths = {
        "breakdown": output_dir / f"{scenario_name}_breakdown.csv",
        "yearly": output_dir / f"{scenario_name}_yearly.csv",
        "summary": output_dir / f"{scenario_name}_summary.json",
    }
    breakdown_table(result).to_csv(paths["breakdown"], index=False, encoding="utf-8-sig")
    yearly_series(result).to_csv(paths["yearly"], index=False)

    payload = {
        "scenario": scenario_name,
        "summary": _json_safe(summary(result)),
        "analysis": analysis_text(result),
        "result": _json_safe(result.to_dict()),
    }
    with open(paths["summary"], "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)

    logger.debug(f"Wrote {[str(p) for p in paths.values()]}")
    return paths


def _json_safe(obj: Any) -> Any:
    """Replace non-finite floats with None so the JSON stays standard."""
    if isinstance(obj, dict):
        return {k: _json_safe(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_json_safe(v) for v in obj]
    if isinstance(obj, float) and not math.isfinite(obj):
        return None
    return obj
