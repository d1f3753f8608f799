import pytest

from formatting import format_inr, format_percent


@pytest.mark.parametrize(
    "amount, expected",
    [
        (10_000_000, "₹1.00 Cr"),
        (11_396_638, "₹1.14 Cr"),
        (250_000_000, "₹25.00 Cr"),
        (9_999_999, "₹100.00 L"),
        (100_000, "₹1.00 L"),
        (250_000, "₹2.50 L"),
        (99_999, "₹99,999"),
        (12_345, "₹12,345"),
        (500, "₹500"),
        (1234.5, "₹1,234.5"),
        (0, "₹0"),
        (-5000, "₹-5,000"),
        (-5_000_000, "₹-50,00,000"),
    ],
)
def test_format_inr(amount, expected):
    assert format_inr(amount) == expected


def test_format_percent():
    assert format_percent(0.10) == "10.0%"
    assert format_percent(0.055) == "5.5%"
    assert format_percent(0.06, 0) == "6%"
    assert format_percent(0.25, 0) == "25%"
