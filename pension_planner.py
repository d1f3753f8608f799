# pension_planner - NPS Retirement Corpus Planner
# Description: Deterministic projection of an NPS retirement corpus, the required
# contribution for a target corpus, a comparison across risk profiles and the
# yearly tax benefit of contributing.

import os
import sys
import datetime as _dt
from typing import Any, Dict, List, Optional

from loguru import logger
from pydantic import ValidationError

from config import DEFAULT_RULES, ConfigurationError, RuleSet, load_config_from_json, load_rules
from constants import DEFAULT_LOG_FORMAT, MONTHS_PER_YEAR
from errors import PensionError, PensionValidationError
from models import TaxBenefitRequest
from plotting import plot_growth_timeline, plot_scenario_comparison
from projection import CorpusProjector
from reporting import (
    build_optimization_response,
    build_projection_response,
    build_scenarios_response,
    build_tax_response,
    scenarios_frame,
    timeline_frame,
)
from scenarios import compare_contributions, compare_projections
from tax_benefit import calculate_tax_benefit
from utils import (
    log_input_parameters,
    log_optimization_results,
    log_projection_results,
    log_rule_set,
    log_scenario_comparison,
    log_tax_benefit,
)
from validation import validate_optimization_request, validate_request


def _configure_logging(log_filename: Optional[str]) -> None:
    logger.remove()  # Remove default handler
    logger.add(sys.stderr, format=DEFAULT_LOG_FORMAT, level="INFO", colorize=True)
    if log_filename:
        logger.add(
            log_filename,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}",
            level="INFO",
            rotation="10 MB",
        )


def _timeline_step(plan: Dict[str, Any]) -> int:
    raw = plan.get("timeline_step", plan.get("timelineStep", 1))
    if isinstance(raw, float) and raw.is_integer():
        raw = int(raw)
    if isinstance(raw, str) and raw.strip().lstrip("-").isdigit():
        raw = int(raw)
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ValueError(f"Timeline step must be a whole number of years, got {raw!r}.")
    if raw < 1:
        raise ValueError(f"Timeline step must be at least 1 year, got {raw}.")
    return raw


def run_plan(
    plan: Dict[str, Any],
    rule_set: RuleSet = DEFAULT_RULES,
    output_base: Optional[str] = None,
    make_plots: bool = False,
) -> Dict[str, Any]:
    """
    Runs every computation a plan asks for and returns the response bodies keyed by section.

    Sections: ``projection`` (also produces ``scenarios``), ``optimization`` and
    ``tax``. When ``output_base`` is set, timelines and comparisons are written
    to CSV next to it, and to PNG as well when ``make_plots`` is set.

    Raises:
        PensionValidationError: a section failed the scheme rules.
        pydantic.ValidationError: a section is malformed (missing or mistyped fields).
        ValueError: the timeline step is not a positive whole number.
        OSError: a table or chart could not be written.
    """
    responses: Dict[str, Any] = {}
    timeline_step = _timeline_step(plan)

    projection_section = plan.get("projection")
    if projection_section is not None:
        request = validate_request(projection_section, rule_set)
        log_input_parameters(request)

        result = CorpusProjector(rule_set).project(request, timeline_step=timeline_step)
        log_projection_results(result)
        responses["projection"] = build_projection_response(result, rule_set)

        comparisons = compare_projections(request, rule_set)
        log_scenario_comparison(comparisons)
        responses["scenarios"] = build_scenarios_response(comparisons)

        if output_base:
            timeline_frame(result.timeline).to_csv(f"{output_base}_TIMELINE.csv")
            scenarios_frame(comparisons).to_csv(f"{output_base}_SCENARIOS.csv")
            logger.info(f"Timeline and scenario tables written with prefix {output_base}")
            if make_plots:
                plot_growth_timeline(result, f"{output_base}_TIMELINE.png")
                plot_scenario_comparison(comparisons, f"{output_base}_SCENARIOS.png")

    optimization_section = plan.get("optimization")
    if optimization_section is not None:
        target_request = validate_optimization_request(optimization_section, rule_set)
        comparisons = compare_contributions(target_request, rule_set)
        log_optimization_results(target_request, comparisons)
        responses["optimization"] = build_optimization_response(
            comparisons, target_request.risk_profile
        )
        if output_base:
            scenarios_frame(comparisons).to_csv(f"{output_base}_OPTIMIZATION.csv")

    tax_section = plan.get("tax")
    if tax_section is not None:
        tax_section = dict(tax_section)
        has_contribution = "annual_contribution" in tax_section or "annualContribution" in tax_section
        if not has_contribution and projection_section is not None:
            tax_section["annual_contribution"] = (
                responses["projection"]["inputs"]["monthlyContribution"] * MONTHS_PER_YEAR
            )
        tax_request = TaxBenefitRequest.model_validate(tax_section)
        tax_result = calculate_tax_benefit(
            tax_request.annual_contribution, tax_request.tax_bracket, rule_set
        )
        log_tax_benefit(tax_result)
        responses["tax"] = build_tax_response(tax_result)

    if not responses:
        logger.warning("Plan contains none of 'projection', 'optimization' or 'tax'; nothing to do.")
    return responses


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main execution entry point.

    Loads a plan file, applies any rule overrides, runs the requested
    computations, logs the results and writes tables and plots.
    """
    argv = sys.argv if argv is None else argv
    current_timestamp_str = _dt.datetime.now().strftime("%Y%m%d_%H%M%S")

    # --- LOAD PLAN FROM JSON ---
    if len(argv) > 1:
        json_filename = argv[1]
    else:
        json_filename = "config.json"

    try:
        plan = load_config_from_json(json_filename)
    except ConfigurationError as e:
        _configure_logging(None)
        logger.error(f"Configuration file error: {e}")
        return 1

    output_dir = plan.get("output_dir", ".")
    try:
        os.makedirs(output_dir, exist_ok=True)
    except OSError as e:
        _configure_logging(None)
        logger.error(f"Cannot create output directory '{output_dir}': {e}")
        return 1
    log_filename = os.path.join(output_dir, f"pension_plan_{current_timestamp_str}.log")
    _configure_logging(log_filename)
    logger.info(f"Logging initialized. Log file: {log_filename}")
    logger.info(f"Loaded plan from: {json_filename}")

    nickname = plan.get("scenario", "DefaultPlan")
    try:
        rule_set = load_rules(plan.get("rules"))
    except ConfigurationError as e:
        logger.error(f"Configuration error for plan '{nickname}': {e}")
        return 1
    log_rule_set(rule_set)

    safe_nickname = "".join(c if c.isalnum() or c in ["_", "-"] else "_" for c in str(nickname))
    output_base = os.path.join(output_dir, f"pension_{safe_nickname}_{current_timestamp_str}")

    try:
        run_plan(plan, rule_set, output_base, make_plots=bool(plan.get("plots", True)))
    except PensionValidationError as e:
        logger.error(f"Plan '{nickname}' rejected ({e.kind}): {e}")
        return 1
    except (ValidationError, ValueError) as e:
        logger.error(f"Plan '{nickname}' is malformed: {e}")
        return 1
    except OSError as e:
        logger.error(f"Could not write outputs for plan '{nickname}': {e}")
        return 1
    except PensionError as e:
        logger.exception(f"Computation failed for plan '{nickname}': {e}")
        return 2

    logger.info(f"--- Plan '{nickname}' finished. Outputs in {output_dir}. Log: {log_filename} ---")
    return 0


if __name__ == "__main__":
    sys.exit(main())
