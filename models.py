from typing import Any, Optional, Tuple, Union
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from config import RiskProfile
from constants import DEFAULT_TAX_BRACKET, MONTHS_PER_YEAR


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

_REQUEST_CONFIG = {"alias_generator": to_camel, "validate_by_name": True, "frozen": True}


class ProjectionRequest(BaseModel):
    """Raw forward-projection input, as received from a caller. Not yet checked against the rules."""

    monthly_contribution: Optional[float] = Field(
        None, description="Monthly contribution in rupees."
    )
    # Loosely typed; validation.py checks ages and profile in order.
    current_age: Any = Field(..., description="Subscriber's age today, in whole years.")
    retirement_age: Optional[Any] = Field(
        None, description="Age at retirement, in whole years. None means the statutory default."
    )
    risk_profile: Optional[Any] = Field(
        None,
        description="One of 'conservative', 'moderate' or 'aggressive'. None means moderate.",
    )
    inflation_adjusted: bool = Field(
        False, description="Report the corpus in today's purchasing power."
    )

    model_config = _REQUEST_CONFIG


class OptimizationRequest(BaseModel):
    """Raw inverse input: the corpus a subscriber wants to reach."""

    target_corpus: Optional[float] = Field(None, description="Desired corpus in rupees.")
    current_age: Any = Field(...)
    retirement_age: Optional[Any] = Field(None)
    risk_profile: Optional[Any] = Field(None)

    model_config = _REQUEST_CONFIG


class TaxBenefitRequest(BaseModel):
    annual_contribution: float = Field(..., ge=0)
    tax_bracket: float = Field(DEFAULT_TAX_BRACKET, description="Marginal tax rate, e.g. 0.30.")

    model_config = _REQUEST_CONFIG


class _AgeSpan(BaseModel):
    current_age: int
    retirement_age: int
    risk_profile: RiskProfile

    model_config = _REQUEST_CONFIG

    @property
    def years(self) -> int:
        return self.retirement_age - self.current_age

    @property
    def months(self) -> int:
        return self.years * MONTHS_PER_YEAR


class ValidatedRequest(_AgeSpan):
    """Forward request that passed validation; every field is concrete."""

    monthly_contribution: float
    inflation_adjusted: bool = False


class ValidatedOptimizationRequest(_AgeSpan):
    target_corpus: float


# ---------------------------------------------------------------------------
# Result models
# ---------------------------------------------------------------------------

_RESULT_CONFIG = {"alias_generator": to_camel, "validate_by_name": True, "frozen": True}


class TimelinePoint(BaseModel):
    """Snapshot of the account at a whole-year age between joining and retirement."""

    age: int
    year: int
    corpus: int
    contributed: int
    gains: int

    model_config = _RESULT_CONFIG


class ProjectionResult(BaseModel):
    request: ValidatedRequest
    annual_return_rate: float
    total_corpus: int
    total_contributed: int
    wealth_gained: int
    real_corpus: int = Field(
        ...,
        description="Inflation-adjusted corpus, or the nominal corpus when inflation_adjusted is False.",
    )
    inflation_adjusted: bool
    growth_multiplier: float
    annuity_corpus: int
    lump_sum: int
    monthly_pension: int
    timeline: Tuple[TimelinePoint, ...] = ()

    model_config = _RESULT_CONFIG


class OptimizationResult(BaseModel):
    """Monthly contribution needed to reach a target, with the inputs echoed back."""

    request: ValidatedOptimizationRequest
    annual_return_rate: float
    equity: float
    debt: float
    required_monthly_contribution: int

    model_config = _RESULT_CONFIG


class ScenarioComparison(BaseModel):
    """One row of a side-by-side comparison across risk profiles."""

    risk_profile: RiskProfile
    label: str
    equity: float
    debt: float
    expected_return: float
    result: Union[ProjectionResult, OptimizationResult]

    model_config = _RESULT_CONFIG


class TaxBenefitResult(BaseModel):
    annual_contribution: float
    tax_bracket: float
    primary_deduction: float = Field(..., description="Deduction under Section 80C.")
    supplementary_deduction: float = Field(
        ..., description="Additional deduction under Section 80CCD(1B)."
    )
    total_deduction: float
    tax_saved: int
    effective_cost: int

    model_config = _RESULT_CONFIG
