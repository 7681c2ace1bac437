from roi_model.config.models import BusinessParameters, FormInputs
from roi_model.engine import compute
from roi_model.results import CostAnalysisResult, CostPair, CostSeries, RoiStatus

__all__ = [
    "BusinessParameters",
    "FormInputs",
    "compute",
    "CostAnalysisResult",
    "CostPair",
    "CostSeries",
    "RoiStatus",
]
