# roi_model/sensitivity.py
"""
One-parameter sensitivity sweeps: re-run the engine while varying a single
field and collect the headline outputs in a DataFrame.
"""

import logging
import math
from typing import Iterable, Optional

import numpy as np
import pandas as pd

from roi_model.config.models import BusinessParameters
from roi_model.engine import compute

logger = logging.getLogger(__name__)

RATIO_FIELDS = ("misdetect_reduction", "quality_defect_reduction")

SWEEP_COLUMNS = [
    "value",
    "annual_saving_y1",
    "annual_saving_y2plus",
    "roi_years",
    "roi_display",
    "break_even_year",
    "tco_saving",
    "tco_saving_rate",
]


def default_grid(field: str, params: Optional[BusinessParameters] = None) -> np.ndarray:
    """Values a form slider would offer for ``field``."""
    params = params or BusinessParameters()
    if field in RATIO_FIELDS:
        return np.round(np.linspace(0.0, 1.0, 11), 2)
    if field == "target_ai_personnel":
        return np.arange(0, int(params.personnel_count) + 1, dtype=float)
    raise ValueError(f"No default grid for field '{field}'; pass values explicitly")


def sweep(
    params: BusinessParameters, field: str, values: Optional[Iterable[float]] = None
) -> pd.DataFrame:
    """
    Recompute the model for each value of ``field``.

    Args:
        params: Base parameters; left untouched.
        field: Name of a ``BusinessParameters`` field.
        values: Values to try; defaults to ``default_grid(field, params)``.

    Returns:
        One row per value with the columns in ``SWEEP_COLUMNS``.
    """
    if field not in BusinessParameters.model_fields:
        raise ValueError(f"Unknown parameter '{field}'")
    if values is None:
        values = default_grid(field, params)

    rows = []
    for value in values:
        value = float(value)
        result = compute(params.model_copy(update={field: value}))
        rows.append(
            {
                "value": value,
                "annual_saving_y1": result.annual_saving_y1,
                "annual_saving_y2plus": result.annual_saving_y2plus,
                "roi_years": result.roi_years if math.isfinite(result.roi_years) else np.nan,
                "roi_display": result.roi_display,
                "break_even_year": result.series.break_even_year,
                "tco_saving": result.tco_saving,
                "tco_saving_rate": result.tco_saving_rate,
            }
        )
    logger.info(f"Swept '{field}' over {len(rows)} value(s)")
    return pd.DataFrame(rows, columns=SWEEP_COLUMNS)
