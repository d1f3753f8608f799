from loguru import logger

from config import DEFAULT_RULES, RuleSet
from constants import DEFAULT_TAX_BRACKET
from models import TaxBenefitResult
from projection import round_currency


def calculate_tax_benefit(
    annual_contribution: float,
    tax_bracket: float = DEFAULT_TAX_BRACKET,
    rule_set: RuleSet = DEFAULT_RULES,
) -> TaxBenefitResult:
    """
    Deductions and tax saved on a year's contributions.

    Section 80C covers the first ``tax_cap_primary`` rupees and Section
    80CCD(1B) up to a further ``tax_cap_supplementary``. The combined deduction
    never exceeds what was actually contributed.
    """
    rules = rule_set.rules
    if not 0.0 <= tax_bracket <= 1.0:
        logger.warning(f"Tax bracket {tax_bracket} is outside [0, 1]; computing anyway.")

    primary = min(annual_contribution, rules.tax_cap_primary)
    total = min(annual_contribution, primary + rules.tax_cap_supplementary)
    tax_saved = total * tax_bracket

    return TaxBenefitResult(
        annual_contribution=annual_contribution,
        tax_bracket=tax_bracket,
        primary_deduction=primary,
        supplementary_deduction=total - primary,
        total_deduction=total,
        tax_saved=round_currency(tax_saved),
        effective_cost=round_currency(annual_contribution - tax_saved),
    )
