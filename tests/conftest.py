import pytest

from config import DEFAULT_RULES
from validation import validate_request


@pytest.fixture
def rule_set():
    return DEFAULT_RULES


@pytest.fixture
def base_payload():
    """Reference case: ₹5,000/month from 30 to 60 on the moderate profile."""
    return {
        "monthlyContribution": 5000,
        "currentAge": 30,
        "retirementAge": 60,
        "riskProfile": "moderate",
    }


@pytest.fixture
def validated_request(base_payload, rule_set):
    return validate_request(base_payload, rule_set)
