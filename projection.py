import math
import datetime as _dt
from typing import Any, Iterator, Mapping, Optional, Union
from loguru import logger

from config import DEFAULT_RULES, RiskProfile, RuleSet
from constants import MONTHS_PER_YEAR
from errors import ComputationError
from models import (
    OptimizationRequest,
    OptimizationResult,
    ProjectionRequest,
    ProjectionResult,
    TimelinePoint,
    ValidatedOptimizationRequest,
    ValidatedRequest,
)
from validation import validate_optimization_request, validate_request


def round_currency(value: float) -> int:
    """Rounds half up to a whole rupee (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def _ensure_finite(name: str, value: float) -> float:
    if not math.isfinite(value):
        raise ComputationError(f"{name} evaluated to {value}; refusing to report it.")
    return value


def _compound(rate: float, periods: int) -> float:
    try:
        return (1.0 + rate) ** periods
    except OverflowError as e:
        raise ComputationError(
            f"Compounding {rate:.6f} per period over {periods} periods overflowed."
        ) from e


def sip_future_value(monthly_contribution: float, monthly_rate: float, months: int) -> float:
    """
    Future value of a level monthly contribution, compounded monthly.

    FV = P * (((1 + r)^n - 1) / r) * (1 + r)

    The trailing (1 + r) credits each contribution at the start of its month.
    Zero elapsed months is defined as exactly 0 rather than evaluated.
    """
    if months == 0:
        return 0.0
    if monthly_rate <= 0:
        raise ComputationError(f"Monthly rate must be positive, got {monthly_rate}.")
    growth = _compound(monthly_rate, months)
    return monthly_contribution * ((growth - 1.0) / monthly_rate) * (1.0 + monthly_rate)


class CorpusProjector:
    """
    Forward projection of a contribution stream to the corpus at retirement.

    Expects requests that already passed ``validation.validate_request``: the
    age span is positive and the profile is known. Rounding to whole rupees
    happens only when the result is assembled.
    """

    def __init__(self, rule_set: RuleSet = DEFAULT_RULES):
        self.rule_set = rule_set

    def monthly_rate(self, risk_profile: RiskProfile) -> float:
        return self.rule_set.profile(risk_profile).expected_return / MONTHS_PER_YEAR

    def iter_timeline(
        self,
        request: ValidatedRequest,
        step: int = 1,
        start_year: Optional[int] = None,
    ) -> Iterator[TimelinePoint]:
        """
        Yields one point per ``step`` years from the current age up to the
        retirement age. The retirement age itself is included only when the
        span is a multiple of ``step``.
        """
        if step < 1:
            raise ValueError(f"Timeline step must be at least 1 year, got {step}.")
        if start_year is None:
            start_year = _dt.date.today().year

        rate = self.monthly_rate(request.risk_profile)
        for age in range(request.current_age, request.retirement_age + 1, step):
            elapsed_years = age - request.current_age
            months = elapsed_years * MONTHS_PER_YEAR
            corpus = _ensure_finite(
                f"Corpus at age {age}",
                sip_future_value(request.monthly_contribution, rate, months),
            )
            contributed = request.monthly_contribution * months
            yield TimelinePoint(
                age=age,
                year=start_year + elapsed_years,
                corpus=round_currency(corpus),
                contributed=round_currency(contributed),
                gains=round_currency(corpus - contributed),
            )

    def project(
        self,
        request: ValidatedRequest,
        timeline_step: int = 1,
        start_year: Optional[int] = None,
    ) -> ProjectionResult:
        rules = self.rule_set.rules
        annual_rate = self.rule_set.profile(request.risk_profile).expected_return
        monthly_rate = annual_rate / MONTHS_PER_YEAR
        years = request.years
        months = request.months

        total_corpus = _ensure_finite(
            "Total corpus",
            sip_future_value(request.monthly_contribution, monthly_rate, months),
        )
        total_contributed = request.monthly_contribution * months
        if total_contributed <= 0:
            raise ComputationError(
                f"Total contributed is {total_contributed}; growth multiplier is undefined."
            )
        wealth_gained = total_corpus - total_contributed
        growth_multiplier = _ensure_finite("Growth multiplier", total_corpus / total_contributed)

        annuity_corpus = total_corpus * rules.annuity_purchase_min
        lump_sum = total_corpus * (1 - rules.annuity_purchase_min)
        # Yield-on-corpus approximation, not an actuarial annuity factor.
        monthly_pension = annuity_corpus * rules.annuity_rate / MONTHS_PER_YEAR

        if request.inflation_adjusted:
            real_corpus = _ensure_finite(
                "Real corpus", total_corpus / _compound(rules.inflation_rate, years)
            )
        else:
            real_corpus = total_corpus

        logger.debug(
            f"Projected {request.risk_profile.value}: {request.monthly_contribution:,.0f}/mo over "
            f"{months} months at {monthly_rate:.6f}/mo -> corpus {total_corpus:,.2f}"
        )

        return ProjectionResult(
            request=request,
            annual_return_rate=annual_rate,
            total_corpus=round_currency(total_corpus),
            total_contributed=round_currency(total_contributed),
            wealth_gained=round_currency(wealth_gained),
            real_corpus=round_currency(real_corpus),
            inflation_adjusted=request.inflation_adjusted,
            growth_multiplier=round(growth_multiplier, 2),
            annuity_corpus=round_currency(annuity_corpus),
            lump_sum=round_currency(lump_sum),
            monthly_pension=round_currency(monthly_pension),
            timeline=tuple(self.iter_timeline(request, timeline_step, start_year)),
        )


class ContributionSolver:
    """Inverse of CorpusProjector: the level monthly contribution that reaches a target corpus."""

    def __init__(self, rule_set: RuleSet = DEFAULT_RULES):
        self.rule_set = rule_set

    def solve(self, request: ValidatedOptimizationRequest) -> OptimizationResult:
        profile = self.rule_set.profile(request.risk_profile)
        monthly_rate = profile.expected_return / MONTHS_PER_YEAR
        months = request.months

        denominator = (_compound(monthly_rate, months) - 1.0) * (1.0 + monthly_rate)
        if not denominator > 0 or not math.isfinite(denominator):
            raise ComputationError(
                f"Growth factor for {months} months at {monthly_rate:.6f}/mo is {denominator}."
            )
        required = _ensure_finite(
            "Required contribution", request.target_corpus * monthly_rate / denominator
        )

        logger.debug(
            f"Solved {request.risk_profile.value}: target {request.target_corpus:,.0f} over "
            f"{months} months -> {required:,.2f}/mo"
        )

        return OptimizationResult(
            request=request,
            annual_return_rate=profile.expected_return,
            equity=profile.equity,
            debt=profile.debt,
            # Rounded up so the target is never under-funded.
            required_monthly_contribution=int(math.ceil(required)),
        )


def project_corpus(
    request: Union[ProjectionRequest, Mapping[str, Any]],
    rule_set: RuleSet = DEFAULT_RULES,
    timeline_step: int = 1,
    start_year: Optional[int] = None,
) -> ProjectionResult:
    """Validates a raw request and projects it. Raises PensionValidationError on bad input."""
    validated = validate_request(request, rule_set)
    return CorpusProjector(rule_set).project(validated, timeline_step, start_year)


def solve_required_contribution(
    target_corpus: float,
    current_age: int,
    retirement_age: Optional[int] = None,
    risk_profile: Union[RiskProfile, str] = RiskProfile.MODERATE,
    rule_set: RuleSet = DEFAULT_RULES,
) -> OptimizationResult:
    request = OptimizationRequest(
        target_corpus=target_corpus,
        current_age=current_age,
        retirement_age=retirement_age,
        risk_profile=risk_profile.value if isinstance(risk_profile, RiskProfile) else risk_profile,
    )
    validated = validate_optimization_request(request, rule_set)
    return ContributionSolver(rule_set).solve(validated)
