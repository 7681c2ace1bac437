# roi_model/results.py
"""Result types returned by the cost model engine."""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

HORIZON_YEARS = 5


class RoiStatus(Enum):
    """How the investment payback period is classified for display."""

    IMMEDIATE = "immediate"
    WITHIN_YEAR = "within_year"
    YEARS = "years"
    UNRECOVERABLE = "unrecoverable"


@dataclass(frozen=True)
class CostPair:
    """Annual cost of one category before and after AI adoption."""

    current: float
    ai: float

    @property
    def saving(self) -> float:
        return self.current - self.ai


@dataclass(frozen=True)
class CostSeries:
    """Annual and cumulative costs of both scenarios over the horizon."""

    annual_current: Tuple[float, ...]
    annual_ai: Tuple[float, ...]
    cumulative_current: Tuple[float, ...]
    cumulative_ai: Tuple[float, ...]
    # 0-based year in which cumulative AI cost first drops below current
    break_even_year_index: Optional[int]

    @property
    def break_even_year(self) -> Optional[int]:
        """1-based break-even year, or None when it never happens."""
        if self.break_even_year_index is None:
            return None
        return self.break_even_year_index + 1

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(f"{year}년차" for year in range(1, len(self.annual_current) + 1))


@dataclass(frozen=True)
class CostAnalysisResult:
    # current-state components
    labor_cost: float
    training_cost: float
    misdetect_cost: float
    quality_cost: float
    defect_cost: float
    current_total_op_cost: float
    current_total_cost_y1: float
    current_total_cost_y2plus: float

    # investment
    ai_total_unit_cost: float
    initial_investment: float
    annual_maintenance_cost: float

    # post-adoption components
    reduced_labor: float
    ai_training_cost: float
    reduced_misdetect: float
    reduced_quality_defect_cost: float
    ai_total_annual_op_cost: float
    ai_total_annual_cost_y1: float
    ai_total_annual_cost_y2plus: float

    # savings and payback
    annual_saving_y1: float
    annual_saving_y2plus: float
    roi_years: float
    roi_status: RoiStatus
    roi_display: str

    # 5-year horizon
    series: CostSeries
    current_tco5: float
    ai_tco5: float
    tco_saving: float
    tco_saving_rate: float

    remarks: Dict[str, str] = field(default_factory=dict)

    current_maintenance: float = 0.0

    @property
    def labor(self) -> CostPair:
        return CostPair(self.labor_cost, self.reduced_labor)

    @property
    def training(self) -> CostPair:
        return CostPair(self.training_cost, self.ai_training_cost)

    @property
    def misdetection(self) -> CostPair:
        return CostPair(self.misdetect_cost, self.reduced_misdetect)

    @property
    def quality_defect(self) -> CostPair:
        return CostPair(self.quality_cost + self.defect_cost, self.reduced_quality_defect_cost)

    @property
    def maintenance(self) -> CostPair:
        return CostPair(self.current_maintenance, self.annual_maintenance_cost)

    @property
    def break_even_year_index(self) -> Optional[int]:
        return self.series.break_even_year_index

    def to_dict(self) -> Dict[str, Any]:
        """Plain-dict view, suitable for JSON output."""
        out = asdict(self)
        out["roi_status"] = self.roi_status.value
        out["series"]["labels"] = list(self.series.labels)
        for key in ("annual_current", "annual_ai", "cumulative_current", "cumulative_ai"):
            out["series"][key] = list(out["series"][key])
        return out
