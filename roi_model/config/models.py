# roi_model/config/models.py
"""
Pydantic models for the inputs of the inspection ROI model.

``BusinessParameters`` is what the engine consumes: every amount is in KRW,
every rate is a fraction. ``FormInputs`` mirrors the calculator form, where
revenue is entered in 억원, salary in 백만원 and reductions in percent, and
converts itself into ``BusinessParameters``.
"""

import logging
from typing import Any, Set, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from roi_model.formatting import unformat_number

logger = logging.getLogger(__name__)

EOK = 100_000_000  # 억원
MILLION = 1_000_000  # 백만원

# --- Form defaults (display units) ---
DEFAULT_ANNUAL_REVENUE_EOK = 30
DEFAULT_PERSONNEL_COUNT = 3
DEFAULT_SALARY_MIL = 25
DEFAULT_EQUIPMENT_UNITS = 2
DEFAULT_REUSE_OPTICAL = False
DEFAULT_MISDETECT_REDUCTION_PCT = 80
DEFAULT_QUALITY_DEFECT_REDUCTION_PCT = 90
DEFAULT_TARGET_PERSONNEL = 1

# Form field -> the BusinessParameters field it sets
FORM_PARAMETER_FIELDS = {
    "annual_revenue_eok": "revenue",
    "personnel_count": "personnel_count",
    "salary_mil": "salary",
    "equipment_units": "ai_units",
    "reuse_optical": "use_optics",
    "misdetect_reduction_pct": "misdetect_reduction",
    "quality_defect_reduction_pct": "quality_defect_reduction",
    "target_personnel": "target_ai_personnel",
}


class BusinessParameters(BaseModel):
    """Inputs to the cost model, in currency units and fractional rates.

    Ratios are not range-checked: values outside [0, 1] flow
    through the arithmetic unchanged.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    personnel_count: float = Field(
        DEFAULT_PERSONNEL_COUNT, description="Current inspection headcount"
    )
    salary: float = Field(
        DEFAULT_SALARY_MIL * MILLION, description="Average annual salary per head (KRW)"
    )
    revenue: float = Field(
        DEFAULT_ANNUAL_REVENUE_EOK * EOK, description="Annual revenue (KRW)"
    )
    ai_units: float = Field(
        DEFAULT_EQUIPMENT_UNITS, description="Number of AI inspection units to deploy"
    )
    use_optics: bool = Field(
        not DEFAULT_REUSE_OPTICAL,
        description="True when new optical hardware must be bought for every unit",
    )
    misdetect_reduction: float = Field(
        DEFAULT_MISDETECT_REDUCTION_PCT / 100,
        description="Fractional reduction of misdetection cost (e.g., 0.8 for 80%)",
    )
    quality_defect_reduction: float = Field(
        DEFAULT_QUALITY_DEFECT_REDUCTION_PCT / 100,
        description="Fractional reduction of quality/defect cost",
    )
    target_ai_personnel: float = Field(
        DEFAULT_TARGET_PERSONNEL, description="Headcount remaining after AI adoption"
    )

    # Fixed model constants, overridable per scenario
    unit_license: float = Field(15_000_000, description="License cost per AI unit (KRW)")
    custom_dev_cost: float = Field(100_000_000, description="One-off customisation cost (KRW)")
    training_rate: float = Field(0.1, description="Training/management cost as share of labor")
    misdetect_rate: float = Field(0.05, description="Misdetection cost as share of revenue")
    quality_defect_rate: float = Field(
        0.05, description="Quality control + defect handling cost as share of revenue"
    )
    optics_cost: float = Field(40_000_000, description="Optics cost per unit (KRW)")
    maint_rate: float = Field(0.1, description="Annual maintenance as share of unit cost")


def parse_form_number(value: Any) -> int:
    """Parse a form field that may carry thousands separators ("1,234").

    Anything that does not parse becomes 0, as an empty form field would.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return int(value) if value == value and abs(value) != float("inf") else 0
    return unformat_number(value)


class FormInputs(BaseModel):
    """The calculator form, in the units a user types them."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    annual_revenue_eok: int = Field(DEFAULT_ANNUAL_REVENUE_EOK, description="Annual revenue (억원)")
    personnel_count: int = Field(DEFAULT_PERSONNEL_COUNT, description="Current inspectors")
    salary_mil: int = Field(DEFAULT_SALARY_MIL, description="Average salary (백만원)")
    equipment_units: int = Field(DEFAULT_EQUIPMENT_UNITS, description="Inspection lines to equip")
    reuse_optical: bool = Field(
        DEFAULT_REUSE_OPTICAL, description="Reuse existing optics instead of buying new ones"
    )
    misdetect_reduction_pct: float = Field(DEFAULT_MISDETECT_REDUCTION_PCT)
    quality_defect_reduction_pct: float = Field(DEFAULT_QUALITY_DEFECT_REDUCTION_PCT)
    target_personnel: int = Field(DEFAULT_TARGET_PERSONNEL, description="Inspectors after adoption")

    @field_validator(
        "annual_revenue_eok",
        "personnel_count",
        "salary_mil",
        "equipment_units",
        "target_personnel",
        mode="before",
    )
    @classmethod
    def _parse_grouped_number(cls, v: Union[str, int, float]) -> int:
        return parse_form_number(v)

    def typed_parameter_fields(self) -> Set[str]:
        """BusinessParameters fields set by values actually given to the form."""
        return {FORM_PARAMETER_FIELDS[name] for name in self.model_fields_set}

    def to_business_parameters(self, **overrides: Any) -> BusinessParameters:
        """Convert display units into a ``BusinessParameters``.

        ``overrides`` replace converted values. The target headcount is then
        capped at the current headcount, the same limit the form's slider
        enforces.
        """
        values = dict(
            personnel_count=self.personnel_count,
            salary=self.salary_mil * MILLION,
            revenue=self.annual_revenue_eok * EOK,
            ai_units=self.equipment_units,
            use_optics=not self.reuse_optical,
            misdetect_reduction=self.misdetect_reduction_pct / 100,
            quality_defect_reduction=self.quality_defect_reduction_pct / 100,
            target_ai_personnel=self.target_personnel,
        )
        values.update(overrides)

        if values["target_ai_personnel"] > values["personnel_count"]:
            logger.debug(
                f"Clamping target personnel {values['target_ai_personnel']} "
                f"to current headcount {values['personnel_count']}"
            )
            values["target_ai_personnel"] = values["personnel_count"]
        return BusinessParameters(**values)
