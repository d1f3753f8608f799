import os
import json
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
from pydantic import BaseModel, Field, ValidationError, ValidationInfo, field_validator, model_validator
from loguru import logger

from constants import SMALL_EPSILON


class ConfigurationError(Exception):
    """Raised when the configuration file cannot be loaded or parsed."""


class RiskProfile(str, Enum):
    """Asset-allocation bundles a subscriber can choose from, in display order."""

    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"

    @classmethod
    def choices(cls) -> List[str]:
        return [member.value for member in cls]


class ProfileAssumptions(BaseModel):
    """Return and allocation assumptions attached to one risk profile."""

    label: str = Field(..., description="Display name of the profile.")
    equity: float = Field(..., ge=0.0, le=1.0, description="Fraction invested in equity.")
    debt: float = Field(..., ge=0.0, le=1.0, description="Fraction invested in debt.")
    expected_return: float = Field(
        ..., gt=0.0, description="Deterministic expected annual return (e.g. 0.10 for 10%)."
    )
    description: str = Field("", description="One-line summary shown next to the label.")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_split(self) -> "ProfileAssumptions":
        if abs(self.equity + self.debt - 1.0) > SMALL_EPSILON:
            raise ValueError(
                f"Equity ({self.equity}) and debt ({self.debt}) fractions of '{self.label}' must add up to 1.0"
            )
        return self


class RegulatoryRules(BaseModel):
    """Scheme-wide regulatory limits and modelling assumptions."""

    min_contribution: float = Field(500.0, gt=0, description="Minimum monthly contribution.")
    min_join_age: int = Field(18, ge=0)
    max_join_age: int = Field(70, ge=0)
    default_retirement_age: int = Field(60, gt=0)
    annuity_purchase_min: float = Field(
        0.40, ge=0.0, le=1.0, description="Minimum share of the corpus that must buy an annuity."
    )
    annuity_rate: float = Field(0.055, ge=0.0, description="Assumed annual annuity yield.")
    inflation_rate: float = Field(0.06, ge=0.0, description="Assumed annual inflation.")
    tax_cap_primary: float = Field(150_000.0, ge=0.0, description="Section 80C deduction cap.")
    tax_cap_supplementary: float = Field(
        50_000.0, ge=0.0, description="Additional Section 80CCD(1B) deduction cap."
    )

    model_config = {"frozen": True}

    @field_validator("max_join_age")
    @classmethod
    def check_join_ages(cls, v: int, info: ValidationInfo) -> int:
        min_age = info.data.get("min_join_age")
        if min_age is not None and v < min_age:
            raise ValueError(f"max_join_age ({v}) must not be below min_join_age ({min_age})")
        return v


def _default_profiles() -> Dict[RiskProfile, ProfileAssumptions]:
    return {
        RiskProfile.CONSERVATIVE: ProfileAssumptions(
            label="Conservative",
            equity=0.25,
            debt=0.75,
            expected_return=0.08,
            description="Lower risk, stable returns",
        ),
        RiskProfile.MODERATE: ProfileAssumptions(
            label="Moderate",
            equity=0.50,
            debt=0.50,
            expected_return=0.10,
            description="Balanced risk-return profile",
        ),
        RiskProfile.AGGRESSIVE: ProfileAssumptions(
            label="Aggressive",
            equity=0.75,
            debt=0.25,
            expected_return=0.12,
            description="Higher risk, higher potential returns",
        ),
    }


class RuleSet(BaseModel):
    """Regulatory constants plus the per-profile assumptions, read-only after construction."""

    rules: RegulatoryRules = Field(default_factory=RegulatoryRules)
    profiles: Dict[RiskProfile, ProfileAssumptions] = Field(default_factory=_default_profiles)

    model_config = {"frozen": True}

    @field_validator("profiles")
    @classmethod
    def check_all_profiles_defined(
        cls, v: Dict[RiskProfile, ProfileAssumptions]
    ) -> Dict[RiskProfile, ProfileAssumptions]:
        missing = [p.value for p in RiskProfile if p not in v]
        if missing:
            raise ValueError(f"Assumptions missing for risk profile(s): {', '.join(missing)}")
        return v

    def profile(self, risk_profile: RiskProfile) -> ProfileAssumptions:
        return self.profiles[RiskProfile(risk_profile)]

    def ordered_profiles(self) -> List[Tuple[RiskProfile, ProfileAssumptions]]:
        """Profiles in enum order (conservative, moderate, aggressive), independent of dict order."""
        return [(p, self.profiles[p]) for p in RiskProfile]


DEFAULT_RULES = RuleSet()


def _deep_merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_rules(overrides: Optional[Dict[str, Any]] = None) -> RuleSet:
    """Builds a RuleSet from partial overrides layered over the default constants."""
    if not overrides:
        return DEFAULT_RULES

    merged = _deep_merge(DEFAULT_RULES.model_dump(mode="json"), overrides)
    try:
        rule_set = RuleSet.model_validate(merged)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid rule overrides: {e}") from e

    logger.info(f"Rule overrides applied: {sorted(overrides.keys())}")
    return rule_set


def load_config_from_json(file_path: str) -> Dict[str, Any]:
    """Loads and returns the configuration dictionary from a JSON file."""
    if not os.path.exists(file_path):
        raise ConfigurationError(f"Configuration file not found at: {file_path}")

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Error parsing JSON file '{file_path}': {e}"
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Unexpected error reading config file '{file_path}': {e}"
        ) from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration file '{file_path}' must contain a JSON object at the top level."
        )
    return data
