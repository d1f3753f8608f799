from typing import Sequence
from loguru import logger

from config import RuleSet
from formatting import format_inr, format_percent
from models import (
    ProjectionResult,
    ScenarioComparison,
    TaxBenefitResult,
    ValidatedOptimizationRequest,
    ValidatedRequest,
)


def log_rule_set(rule_set: RuleSet) -> None:
    """Logs the regulatory constants and per-profile assumptions in use."""
    rules = rule_set.rules
    logger.info("--- Scheme Rules ---")
    logger.info(f"Minimum Contribution: {format_inr(rules.min_contribution)}/month")
    logger.info(f"Joining Age: {rules.min_join_age}-{rules.max_join_age}")
    logger.info(f"Default Retirement Age: {rules.default_retirement_age}")
    logger.info(f"Mandatory Annuity: {format_percent(rules.annuity_purchase_min, 0)} of corpus")
    logger.info(f"Annuity Rate: {format_percent(rules.annuity_rate)}")
    logger.info(f"Inflation Rate: {format_percent(rules.inflation_rate)}")
    for risk_profile, assumptions in rule_set.ordered_profiles():
        logger.info(
            f"  - {assumptions.label}: {format_percent(assumptions.expected_return)} p.a., "
            f"equity {format_percent(assumptions.equity, 0)} / debt {format_percent(assumptions.debt, 0)}"
        )
    logger.info("--- End of Scheme Rules ---")


def log_input_parameters(request: ValidatedRequest) -> None:
    """Logs the input parameters for the projection."""
    logger.info("--- Input Parameters ---")
    for key, value in request.model_dump().items():
        label = key.replace("_", " ").title()
        if key == "monthly_contribution":
            logger.info(f"{label}: {format_inr(value)}")
        elif key == "risk_profile":
            logger.info(f"{label}: {value.value}")
        else:
            logger.info(f"{label}: {value}")
    logger.info(f"Years To Retirement (Calculated): {request.years}")
    logger.info("--- End of Input Parameters ---")


def log_projection_results(result: ProjectionResult) -> None:
    logger.info(f"--- Projection Results ({result.request.risk_profile.value}) ---")
    logger.info(f"Total Corpus: {format_inr(result.total_corpus)}")
    logger.info(f"Total Contributed: {format_inr(result.total_contributed)}")
    logger.info(f"Wealth Gained: {format_inr(result.wealth_gained)}")
    real_label = "Real Corpus (Today's Value)" if result.inflation_adjusted else "Real Corpus (Nominal)"
    logger.info(f"{real_label}: {format_inr(result.real_corpus)}")
    logger.info(f"Growth Multiplier: {result.growth_multiplier:.2f}x")
    logger.info(f"Annuity Corpus: {format_inr(result.annuity_corpus)}")
    logger.info(f"Lump Sum Withdrawal: {format_inr(result.lump_sum)}")
    logger.info(f"Estimated Monthly Pension: {format_inr(result.monthly_pension)}")


def log_optimization_results(
    request: ValidatedOptimizationRequest, comparisons: Sequence[ScenarioComparison]
) -> None:
    logger.info(
        f"--- Required Contribution For {format_inr(request.target_corpus)} "
        f"Over {request.years} Years ---"
    )
    for c in comparisons:
        marker = " (requested)" if c.risk_profile == request.risk_profile else ""
        logger.info(
            f"  {c.label}{marker}: {format_inr(c.result.required_monthly_contribution)}/month "
            f"at {format_percent(c.expected_return, 0)} p.a."
        )


def log_scenario_comparison(comparisons: Sequence[ScenarioComparison]) -> None:
    logger.info("--- Scenario Comparison ---")
    for c in comparisons:
        logger.info(
            f"  {c.label}: corpus {format_inr(c.result.total_corpus)}, "
            f"pension {format_inr(c.result.monthly_pension)}/month, "
            f"lump sum {format_inr(c.result.lump_sum)}"
        )


def log_tax_benefit(result: TaxBenefitResult) -> None:
    logger.info(f"--- Tax Benefit At {format_percent(result.tax_bracket, 0)} Bracket ---")
    logger.info(f"Annual Contribution: {format_inr(result.annual_contribution)}")
    logger.info(f"Deduction Under 80C: {format_inr(result.primary_deduction)}")
    logger.info(f"Additional Deduction Under 80CCD(1B): {format_inr(result.supplementary_deduction)}")
    logger.info(f"Total Deduction: {format_inr(result.total_deduction)}")
    logger.info(f"Estimated Tax Saved: {format_inr(result.tax_saved)}")
    logger.info(f"Effective Cost: {format_inr(result.effective_cost)}")
