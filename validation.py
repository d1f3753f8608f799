from typing import Any, Mapping, Optional, Union
from loguru import logger

from config import DEFAULT_RULES, RegulatoryRules, RiskProfile, RuleSet
from errors import (
    AgeOutOfRangeError,
    BelowMinimumContributionError,
    InvalidAgeOrderError,
    InvalidTargetCorpusError,
    UnknownRiskProfileError,
)
from formatting import format_inr
from models import (
    OptimizationRequest,
    ProjectionRequest,
    ValidatedOptimizationRequest,
    ValidatedRequest,
)


def _whole_years(raw: Any) -> int:
    """Ages are whole years; int-valued floats and numeric strings are accepted."""
    value = raw
    if isinstance(raw, str):
        try:
            value = float(raw.strip())
        except ValueError:
            value = None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if float(value).is_integer():
            return int(value)
    raise AgeOutOfRangeError(f"Age must be a whole number of years, got {raw!r}")


def _check_age_range(current_age: Any, rules: RegulatoryRules) -> int:
    age = _whole_years(current_age)
    if not rules.min_join_age <= age <= rules.max_join_age:
        raise AgeOutOfRangeError(
            f"Age must be between {rules.min_join_age} and {rules.max_join_age}"
        )
    return age


def _resolve_retirement_age(
    current_age: int, retirement_age: Optional[Any], rules: RegulatoryRules
) -> int:
    if retirement_age is None:
        resolved = rules.default_retirement_age
    else:
        resolved = _whole_years(retirement_age)
    if resolved <= current_age:
        raise InvalidAgeOrderError("Retirement age must be greater than current age")
    return resolved


def _parse_risk_profile(value: Any, rule_set: RuleSet) -> RiskProfile:
    if value is None:
        value = RiskProfile.MODERATE.value
    profile = None
    if isinstance(value, str):
        try:
            profile = RiskProfile(value)
        except ValueError:
            pass
    if profile is None or profile not in rule_set.profiles:
        choices = RiskProfile.choices()
        raise UnknownRiskProfileError(
            f"Invalid risk profile. Choose: {', '.join(choices[:-1])}, or {choices[-1]}"
        )
    return profile


def validate_request(
    request: Union[ProjectionRequest, Mapping[str, Any]],
    rule_set: RuleSet = DEFAULT_RULES,
) -> ValidatedRequest:
    """
    Checks a forward-projection request against the scheme rules.

    Checks run in a fixed order and stop at the first failure: minimum
    contribution, joining-age range, retirement after current age, known
    risk profile.

    Raises:
        PensionValidationError: a subclass naming the violated rule.
    """
    if not isinstance(request, ProjectionRequest):
        request = ProjectionRequest.model_validate(request)
    rules = rule_set.rules

    contribution = request.monthly_contribution
    if contribution is None or not contribution >= rules.min_contribution:
        raise BelowMinimumContributionError(
            f"Minimum contribution is {format_inr(rules.min_contribution)}/month"
        )
    current_age = _check_age_range(request.current_age, rules)
    retirement_age = _resolve_retirement_age(current_age, request.retirement_age, rules)
    risk_profile = _parse_risk_profile(request.risk_profile, rule_set)

    validated = ValidatedRequest(
        monthly_contribution=contribution,
        current_age=current_age,
        retirement_age=retirement_age,
        risk_profile=risk_profile,
        inflation_adjusted=request.inflation_adjusted,
    )
    logger.debug(f"Validated projection request: {validated.model_dump()}")
    return validated


def validate_optimization_request(
    request: Union[OptimizationRequest, Mapping[str, Any]],
    rule_set: RuleSet = DEFAULT_RULES,
) -> ValidatedOptimizationRequest:
    """Same checks as validate_request, with a positive target corpus in place of the contribution."""
    if not isinstance(request, OptimizationRequest):
        request = OptimizationRequest.model_validate(request)
    rules = rule_set.rules

    target = request.target_corpus
    if target is None or not target > 0:
        raise InvalidTargetCorpusError("Target corpus must be greater than zero")
    current_age = _check_age_range(request.current_age, rules)
    retirement_age = _resolve_retirement_age(current_age, request.retirement_age, rules)
    risk_profile = _parse_risk_profile(request.risk_profile, rule_set)

    validated = ValidatedOptimizationRequest(
        target_corpus=target,
        current_age=current_age,
        retirement_age=retirement_age,
        risk_profile=risk_profile,
    )
    logger.debug(f"Validated optimization request: {validated.model_dump()}")
    return validated
