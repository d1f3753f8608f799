import json

import pandas as pd
import pytest
from pydantic import ValidationError

from errors import BelowMinimumContributionError
from pension_planner import main, run_plan


@pytest.fixture
def plan():
    return {
        "scenario": "Test Plan",
        "plots": False,
        "projection": {"monthlyContribution": 5000, "currentAge": 30, "retirementAge": 60},
        "optimization": {"targetCorpus": 10_000_000, "currentAge": 30, "riskProfile": "conservative"},
        "tax": {"taxBracket": 0.20},
    }


def test_run_plan_returns_every_section(plan):
    responses = run_plan(plan)
    assert set(responses) == {"projection", "scenarios", "optimization", "tax"}
    assert responses["projection"]["inputs"]["years"] == 30
    assert len(responses["scenarios"]["scenarios"]) == 3
    assert responses["optimization"]["recommendation"]["riskProfile"] == "conservative"


def test_run_plan_tax_defaults_to_annualised_contribution(plan):
    tax = run_plan(plan)["tax"]
    assert tax["annualContribution"] == 60_000
    assert tax["estimatedTaxSaved"] == 12_000


def test_run_plan_timeline_step(plan):
    responses = run_plan({**plan, "timeline_step": 10})
    assert [p["age"] for p in responses["projection"]["timeline"]] == [30, 40, 50, 60]


def test_run_plan_writes_tables(plan, tmp_path):
    base = str(tmp_path / "plan")
    run_plan(plan, output_base=base)
    assert (tmp_path / "plan_TIMELINE.csv").exists()
    assert (tmp_path / "plan_SCENARIOS.csv").exists()
    assert (tmp_path / "plan_OPTIMIZATION.csv").exists()
    assert not (tmp_path / "plan_TIMELINE.png").exists()


def test_run_plan_writes_plots(plan, tmp_path):
    base = str(tmp_path / "plan")
    run_plan(plan, output_base=base, make_plots=True)
    assert (tmp_path / "plan_TIMELINE.png").exists()
    assert (tmp_path / "plan_SCENARIOS.png").exists()


def test_run_plan_rejects_invalid_projection(plan):
    plan["projection"]["monthlyContribution"] = 100
    with pytest.raises(BelowMinimumContributionError):
        run_plan(plan)


def test_run_plan_rejects_malformed_tax_section():
    with pytest.raises(ValidationError):
        run_plan({"tax": {"taxBracket": 0.3}})


def test_run_plan_empty_plan():
    assert run_plan({}) == {}


def test_main_success(plan, tmp_path):
    plan["output_dir"] = str(tmp_path / "out")
    path = tmp_path / "plan.json"
    path.write_text(json.dumps(plan), encoding="utf-8")

    assert main(["pension_planner.py", str(path)]) == 0
    written = sorted(p.name for p in (tmp_path / "out").iterdir())
    assert any(name.endswith("_TIMELINE.csv") and "Test_Plan" in name for name in written)
    assert any(name.endswith(".log") for name in written)


def test_main_missing_file(tmp_path):
    assert main(["pension_planner.py", str(tmp_path / "absent.json")]) == 1


def test_main_invalid_request(plan, tmp_path):
    plan["output_dir"] = str(tmp_path)
    plan["projection"]["currentAge"] = 75
    path = tmp_path / "plan.json"
    path.write_text(json.dumps(plan), encoding="utf-8")
    assert main(["pension_planner.py", str(path)]) == 1


def test_main_invalid_rules(plan, tmp_path):
    plan["output_dir"] = str(tmp_path)
    plan["rules"] = {"rules": {"annuity_purchase_min": 2}}
    path = tmp_path / "plan.json"
    path.write_text(json.dumps(plan), encoding="utf-8")
    assert main(["pension_planner.py", str(path)]) == 1


def _write_plan(plan, tmp_path):
    plan.setdefault("output_dir", str(tmp_path))
    path = tmp_path / "plan.json"
    path.write_text(json.dumps(plan), encoding="utf-8")
    return str(path)


@pytest.mark.parametrize("step", [0, -5, 2.5, "abc", None, True])
def test_run_plan_rejects_bad_timeline_step(plan, step):
    with pytest.raises(ValueError, match="Timeline step"):
        run_plan({**plan, "timeline_step": step})


def test_run_plan_accepts_whole_number_timeline_step_forms(plan):
    for step in (5.0, "5"):
        responses = run_plan({**plan, "timelineStep": step})
        assert [p["age"] for p in responses["projection"]["timeline"]] == [30, 35, 40, 45, 50, 55, 60]


@pytest.mark.parametrize("step", [0, "abc"])
def test_main_bad_timeline_step_exits_with_error(plan, tmp_path, step):
    plan["timeline_step"] = step
    assert main(["pension_planner.py", _write_plan(plan, tmp_path)]) == 1


def test_main_unwritable_table_exits_with_error(plan, tmp_path, monkeypatch):
    def refuse(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(pd.DataFrame, "to_csv", refuse)
    assert main(["pension_planner.py", _write_plan(plan, tmp_path)]) == 1


def test_main_output_dir_is_a_file(plan, tmp_path):
    blocker = tmp_path / "taken"
    blocker.write_text("", encoding="utf-8")
    plan["output_dir"] = str(blocker)
    assert main(["pension_planner.py", _write_plan(plan, tmp_path)]) == 1
