import json

import pytest
from pydantic import ValidationError

from config import (
    DEFAULT_RULES,
    ConfigurationError,
    ProfileAssumptions,
    RegulatoryRules,
    RiskProfile,
    RuleSet,
    load_config_from_json,
    load_rules,
)


def test_default_regulatory_constants():
    rules = DEFAULT_RULES.rules
    assert rules.min_contribution == 500
    assert (rules.min_join_age, rules.max_join_age) == (18, 70)
    assert rules.default_retirement_age == 60
    assert rules.annuity_purchase_min == 0.40
    assert rules.annuity_rate == 0.055
    assert rules.inflation_rate == 0.06
    assert rules.tax_cap_primary == 150_000
    assert rules.tax_cap_supplementary == 50_000


@pytest.mark.parametrize(
    "profile, equity, debt, expected_return",
    [
        (RiskProfile.CONSERVATIVE, 0.25, 0.75, 0.08),
        (RiskProfile.MODERATE, 0.50, 0.50, 0.10),
        (RiskProfile.AGGRESSIVE, 0.75, 0.25, 0.12),
    ],
)
def test_default_profile_assumptions(profile, equity, debt, expected_return):
    assumptions = DEFAULT_RULES.profile(profile)
    assert assumptions.equity == equity
    assert assumptions.debt == debt
    assert assumptions.expected_return == expected_return


def test_profile_lookup_accepts_plain_strings():
    assert DEFAULT_RULES.profile("aggressive").label == "Aggressive"


def test_ordered_profiles_ignore_dict_order():
    shuffled = RuleSet(profiles=dict(reversed(list(DEFAULT_RULES.profiles.items()))))
    assert [p for p, _ in shuffled.ordered_profiles()] == [
        RiskProfile.CONSERVATIVE,
        RiskProfile.MODERATE,
        RiskProfile.AGGRESSIVE,
    ]


def test_profile_split_must_sum_to_one():
    with pytest.raises(ValidationError):
        ProfileAssumptions(label="Broken", equity=0.6, debt=0.6, expected_return=0.1)


def test_rule_set_requires_every_profile():
    partial = {RiskProfile.MODERATE: DEFAULT_RULES.profile(RiskProfile.MODERATE)}
    with pytest.raises(ValidationError):
        RuleSet(profiles=partial)


def test_join_age_bounds_must_be_ordered():
    with pytest.raises(ValidationError):
        RegulatoryRules(min_join_age=40, max_join_age=30)


def test_rules_are_frozen():
    with pytest.raises(ValidationError):
        DEFAULT_RULES.rules.min_contribution = 1000


def test_load_rules_without_overrides_returns_defaults():
    assert load_rules(None) is DEFAULT_RULES
    assert load_rules({}) is DEFAULT_RULES


def test_load_rules_merges_partial_overrides():
    rule_set = load_rules(
        {"rules": {"inflation_rate": 0.05}, "profiles": {"moderate": {"expected_return": 0.09}}}
    )
    assert rule_set.rules.inflation_rate == 0.05
    assert rule_set.rules.min_contribution == 500
    assert rule_set.profile(RiskProfile.MODERATE).expected_return == 0.09
    assert rule_set.profile(RiskProfile.MODERATE).equity == 0.50
    assert rule_set.profile(RiskProfile.AGGRESSIVE).expected_return == 0.12


def test_load_rules_rejects_invalid_overrides():
    with pytest.raises(ConfigurationError):
        load_rules({"profiles": {"reckless": {"label": "Reckless"}}})
    with pytest.raises(ConfigurationError):
        load_rules({"rules": {"annuity_purchase_min": 1.5}})


def test_load_config_from_json_roundtrip(tmp_path):
    path = tmp_path / "plan.json"
    path.write_text(json.dumps({"scenario": "Test"}), encoding="utf-8")
    assert load_config_from_json(str(path)) == {"scenario": "Test"}


def test_load_config_from_json_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        load_config_from_json(str(tmp_path / "absent.json"))


def test_load_config_from_json_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="Error parsing"):
        load_config_from_json(str(path))


def test_load_config_from_json_requires_object(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_config_from_json(str(path))
