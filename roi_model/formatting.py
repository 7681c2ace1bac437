# roi_model/formatting.py
"""
Display helpers: KRW amounts, form-field number strings, percent changes and
the payback-period label. Nothing here feeds back into the arithmetic.
"""

import math
import re
from dataclasses import dataclass
from typing import Dict

from .results import RoiStatus

IMMEDIATE_LABEL = "즉시 회수"
UNRECOVERABLE_LABEL = "회수 불가 (절감액 부족)"

_LEADING_INT = re.compile(r"\s*[-+]?\d+")


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves toward +inf, so 2.5 gives 3 and -2.5 gives -2.

    Non-finite values are returned unchanged.
    """
    if not math.isfinite(value):
        return value
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def round_half_away(value: float, digits: int = 0) -> float:
    """Round halves away from zero, so -12.25 gives -12.3 at one digit.

    Non-finite values are returned unchanged.
    """
    if not math.isfinite(value):
        return value
    magnitude = round_half_up(abs(value), digits)
    return -magnitude if value < 0 and magnitude else magnitude


def format_won(value: float, show_unit: bool = True) -> str:
    """Format an amount as whole won with thousands separators.

    >>> format_won(75000000)
    '75,000,000 원'
    """
    if value is None or not math.isfinite(value):
        return "0 원" if show_unit else "0"
    formatted = f"{int(round_half_up(value)):,}"
    return f"{formatted} 원" if show_unit else formatted


def format_eok(value: float, unit: str = "억원") -> str:
    """Format an amount in 억 (1e8 won), dropping the decimal for whole values."""
    if value is None or not math.isfinite(value):
        return f"0 {unit}"
    eok = value / 100_000_000
    text = f"{eok:.0f}" if eok % 1 == 0 else f"{eok:.1f}"
    return f"{text} {unit}"


def unformat_number(text) -> int:
    """Read a typed number such as "1,234"; unparsable input becomes 0.

    Only the leading integer part is read, so "12.5" gives 12.
    """
    match = _LEADING_INT.match(str(text).replace(",", ""))
    return int(match.group(0)) if match else 0


def format_rate(rate: float) -> str:
    """Render a fractional rate as a bare percent number (0.05 -> '5')."""
    return f"{round(rate * 100, 6):g}"


@dataclass(frozen=True)
class PercentChange:
    text: str
    # "decrease", "increase" or "" (no change / not computable)
    trend: str = ""


def percentage_change(current: float, ai: float) -> PercentChange:
    """Relative change from the current cost to the AI cost."""
    if not math.isfinite(current) or not math.isfinite(ai):
        return PercentChange("N/A")
    if current == 0:
        if ai > 0:
            return PercentChange("+Inf %", "increase")
        return PercentChange("0.0 %")
    change = (ai / current - 1) * 100
    trend = "decrease" if change < 0 else ("increase" if change > 0 else "")
    return PercentChange(f"{change:.1f} %", trend)


def classify_roi(years: float) -> RoiStatus:
    if not math.isfinite(years):
        return RoiStatus.UNRECOVERABLE
    if years <= 0:
        return RoiStatus.IMMEDIATE
    if years <= 1:
        return RoiStatus.WITHIN_YEAR
    return RoiStatus.YEARS


def roi_display(years: float) -> str:
    """Human-readable payback period."""
    status = classify_roi(years)
    if status is RoiStatus.UNRECOVERABLE:
        return UNRECOVERABLE_LABEL
    if status is RoiStatus.IMMEDIATE:
        return IMMEDIATE_LABEL
    if status is RoiStatus.WITHIN_YEAR:
        return f"{years:.1f} 년 (1년 이내)"
    return f"{years:.1f} 년"


def build_remarks(
    personnel_count: float,
    target_ai_personnel: float,
    salary: float,
    revenue: float,
    training_rate: float,
    misdetect_rate: float,
    quality_defect_rate: float,
    maint_rate: float,
    ai_total_unit_cost: float,
) -> Dict[str, str]:
    """Explain how each table row was derived."""
    return {
        "labor": (
            f"인력 변화에 따른 인건비 계산 ({personnel_count:g}명 → {target_ai_personnel:g}명), "
            f"인당 {format_won(salary, False)}"
        ),
        "training": f"인력 인건비의 {format_rate(training_rate)}% 적용",
        "misdetect": (
            f"연 매출액 {format_won(revenue, False)}의 {format_rate(misdetect_rate)}% 적용, "
            "품질보증활동 비용"
        ),
        "quality": (
            f"연 매출액 {format_won(revenue, False)}의 {format_rate(quality_defect_rate)}% 적용, "
            "품질검사 관련 불량비용"
        ),
        "maintenance": (
            f"초기 시스템 도입비용({format_won(ai_total_unit_cost, False)})의 "
            f"{format_rate(maint_rate)}% 적용"
        ),
    }
