from typing import Any, Dict, Iterable, List, Sequence

import pandas as pd

from config import DEFAULT_RULES, RiskProfile, RuleSet
from constants import DISCLAIMER, TAX_NOTE
from errors import PensionError
from formatting import format_percent
from models import (
    OptimizationResult,
    ProjectionResult,
    ScenarioComparison,
    TaxBenefitResult,
    TimelinePoint,
)


# ---------------------------------------------------------------------------
# Response bodies
# ---------------------------------------------------------------------------

def _assumptions(annual_rate: float, rule_set: RuleSet) -> Dict[str, str]:
    rules = rule_set.rules
    return {
        "annualReturn": f"{format_percent(annual_rate)} p.a.",
        "annuityRate": f"{format_percent(rules.annuity_rate)} p.a.",
        "annuityCorpusPercent": f"{format_percent(rules.annuity_purchase_min, 0)} (PFRDA minimum rule)",
        "inflationRate": f"{format_percent(rules.inflation_rate, 0)} p.a.",
        "disclaimer": DISCLAIMER,
    }


def build_projection_response(
    result: ProjectionResult, rule_set: RuleSet = DEFAULT_RULES
) -> Dict[str, Any]:
    request = result.request
    return {
        "inputs": {
            "monthlyContribution": request.monthly_contribution,
            "currentAge": request.current_age,
            "retirementAge": request.retirement_age,
            "riskProfile": request.risk_profile.value,
            "inflationAdjusted": request.inflation_adjusted,
            "years": request.years,
            "annualReturnRate": format_percent(result.annual_return_rate),
        },
        "corpus": {
            "totalCorpus": result.total_corpus,
            "totalContributed": result.total_contributed,
            "wealthGained": result.wealth_gained,
            "realCorpus": result.real_corpus,
            "growthMultiplier": result.growth_multiplier,
        },
        "withdrawal": {
            "annuityCorpus": result.annuity_corpus,
            "lumpSumWithdrawal": result.lump_sum,
            "estimatedMonthlyPension": result.monthly_pension,
        },
        "timeline": [point.model_dump(by_alias=True) for point in result.timeline],
        "assumptions": _assumptions(result.annual_return_rate, rule_set),
    }


def _optimization_entry(result: OptimizationResult) -> Dict[str, Any]:
    return {
        "riskProfile": result.request.risk_profile.value,
        "annualReturn": format_percent(result.annual_return_rate, 0),
        "requiredMonthlyContribution": result.required_monthly_contribution,
        "equityPercent": format_percent(result.equity, 0),
        "debtPercent": format_percent(result.debt, 0),
    }


def build_optimization_response(
    comparisons: Sequence[ScenarioComparison], requested_profile: RiskProfile
) -> Dict[str, Any]:
    """Every profile's required contribution, plus the requested profile's entry as the recommendation."""
    if not comparisons:
        raise ValueError("At least one scenario is required to build an optimization response.")

    scenarios = [_optimization_entry(c.result) for c in comparisons]
    recommendation = next(
        (
            entry
            for entry, c in zip(scenarios, comparisons)
            if c.risk_profile == RiskProfile(requested_profile)
        ),
        None,
    )
    request = comparisons[0].result.request
    return {
        "targetCorpus": request.target_corpus,
        "currentAge": request.current_age,
        "retirementAge": request.retirement_age,
        "years": request.years,
        "scenarios": scenarios,
        "recommendation": recommendation,
        "disclaimer": DISCLAIMER,
    }


def build_scenarios_response(comparisons: Sequence[ScenarioComparison]) -> Dict[str, Any]:
    scenarios = []
    for c in comparisons:
        result: ProjectionResult = c.result
        scenarios.append(
            {
                "profile": c.risk_profile.value,
                "scenario": c.label,
                "returnRate": format_percent(c.expected_return, 0),
                "equityPercent": format_percent(c.equity, 0),
                "debtPercent": format_percent(c.debt, 0),
                "totalCorpus": result.total_corpus,
                "totalContributed": result.total_contributed,
                "wealthGained": result.wealth_gained,
                "realCorpus": result.real_corpus,
                "growthMultiplier": result.growth_multiplier,
                "monthlyPension": result.monthly_pension,
                "lumpSum": result.lump_sum,
                "timeline": [p.model_dump(by_alias=True) for p in result.timeline],
            }
        )
    return {"scenarios": scenarios, "disclaimer": DISCLAIMER}


def build_tax_response(result: TaxBenefitResult) -> Dict[str, Any]:
    return {
        "annualContribution": result.annual_contribution,
        "taxBracket": result.tax_bracket,
        "deductionUnder80C": result.primary_deduction,
        "additionalDeductionUnder80CCD": result.supplementary_deduction,
        "totalDeduction": result.total_deduction,
        "estimatedTaxSaved": result.tax_saved,
        "effectiveCost": result.effective_cost,
        "note": TAX_NOTE,
        "disclaimer": DISCLAIMER,
    }


def to_error_response(error: PensionError) -> Dict[str, Any]:
    return {"success": False, "error": str(error), "kind": error.kind}


# ---------------------------------------------------------------------------
# Tabular views
# ---------------------------------------------------------------------------

def timeline_frame(timeline: Iterable[TimelinePoint]) -> pd.DataFrame:
    """Timeline as a DataFrame indexed by age."""
    rows = [point.model_dump() for point in timeline]
    df = pd.DataFrame(rows, columns=["age", "year", "corpus", "contributed", "gains"])
    return df.set_index("age")


def scenarios_frame(comparisons: Sequence[ScenarioComparison]) -> pd.DataFrame:
    rows: List[Dict[str, Any]] = []
    for c in comparisons:
        row: Dict[str, Any] = {
            "Profile": c.label,
            "Equity": c.equity,
            "Debt": c.debt,
            "Expected Return": c.expected_return,
        }
        if isinstance(c.result, ProjectionResult):
            row.update(
                {
                    "Total Corpus": c.result.total_corpus,
                    "Total Contributed": c.result.total_contributed,
                    "Real Corpus": c.result.real_corpus,
                    "Lump Sum": c.result.lump_sum,
                    "Monthly Pension": c.result.monthly_pension,
                    "Growth Multiplier": c.result.growth_multiplier,
                }
            )
        else:
            row["Required Monthly Contribution"] = c.result.required_monthly_contribution
        rows.append(row)
    return pd.DataFrame(rows).set_index("Profile")
