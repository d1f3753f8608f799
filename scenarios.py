from typing import Any, List, Mapping, Optional, Union
from loguru import logger

from config import DEFAULT_RULES, RuleSet
from constants import COARSE_TIMELINE_STEP
from models import (
    OptimizationRequest,
    ProjectionRequest,
    ScenarioComparison,
    ValidatedOptimizationRequest,
    ValidatedRequest,
)
from projection import ContributionSolver, CorpusProjector
from validation import validate_optimization_request, validate_request


def compare_projections(
    base: Union[ProjectionRequest, ValidatedRequest, Mapping[str, Any]],
    rule_set: RuleSet = DEFAULT_RULES,
    timeline_step: int = COARSE_TIMELINE_STEP,
    start_year: Optional[int] = None,
) -> List[ScenarioComparison]:
    """
    Projects the same contribution and age span under every risk profile.

    The risk profile on ``base`` only has to be valid; each entry overrides it.
    Entries come back in the fixed order conservative, moderate, aggressive.
    """
    if not isinstance(base, ValidatedRequest):
        base = validate_request(base, rule_set)
    projector = CorpusProjector(rule_set)

    comparisons = []
    for risk_profile, assumptions in rule_set.ordered_profiles():
        request = base.model_copy(update={"risk_profile": risk_profile})
        comparisons.append(
            ScenarioComparison(
                risk_profile=risk_profile,
                label=assumptions.label,
                equity=assumptions.equity,
                debt=assumptions.debt,
                expected_return=assumptions.expected_return,
                result=projector.project(request, timeline_step, start_year),
            )
        )
    logger.debug(f"Compared projections across {len(comparisons)} risk profiles.")
    return comparisons


def compare_contributions(
    base: Union[OptimizationRequest, ValidatedOptimizationRequest, Mapping[str, Any]],
    rule_set: RuleSet = DEFAULT_RULES,
) -> List[ScenarioComparison]:
    """Required monthly contribution for the same target under every risk profile, each solved independently."""
    if not isinstance(base, ValidatedOptimizationRequest):
        base = validate_optimization_request(base, rule_set)
    solver = ContributionSolver(rule_set)

    comparisons = []
    for risk_profile, assumptions in rule_set.ordered_profiles():
        request = base.model_copy(update={"risk_profile": risk_profile})
        comparisons.append(
            ScenarioComparison(
                risk_profile=risk_profile,
                label=assumptions.label,
                equity=assumptions.equity,
                debt=assumptions.debt,
                expected_return=assumptions.expected_return,
                result=solver.solve(request),
            )
        )
    logger.debug(f"Compared required contributions across {len(comparisons)} risk profiles.")
    return comparisons


def _is_inverse(base: Any) -> bool:
    if isinstance(base, (OptimizationRequest, ValidatedOptimizationRequest)):
        return True
    if isinstance(base, Mapping):
        return "target_corpus" in base or "targetCorpus" in base
    return False


def compare_scenarios(
    base: Any,
    rule_set: RuleSet = DEFAULT_RULES,
    timeline_step: int = COARSE_TIMELINE_STEP,
    start_year: Optional[int] = None,
) -> List[ScenarioComparison]:
    """Forward comparison for contribution requests, inverse comparison for target-corpus requests."""
    if _is_inverse(base):
        return compare_contributions(base, rule_set)
    return compare_projections(base, rule_set, timeline_step, start_year)
