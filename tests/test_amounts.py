from decimal import Decimal

import pytest

from loan_recon.config import AmountPolicy
from loan_recon.domain.errors import InvalidAmountError
from loan_recon.infrastructure.parsing.amounts import AmountNormalizer, parse_amount


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("₹1,200.50", Decimal("1200.50")),
        ("100.00 INR", Decimal("100.00")),
        ("INR 2,500", Decimal("2500")),
        ("  -15.5 ", Decimal("-15.5")),
        ("-$1,000", Decimal("-1000")),
        ("€ 12 345.67", Decimal("12345.67")),
        (-42, Decimal("-42")),
        (0.1, Decimal("0.1")),
        (250.0, Decimal("250")),
    ],
)
def test_parse_amount_normalizes(raw, expected):
    assert parse_amount(raw) == expected


def test_decimal_input_is_returned_unchanged():
    value = Decimal("3.50")
    assert parse_amount(value) is value


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("100-", Decimal("100")),
        ("5-3", Decimal("53")),
        ("₹-50", Decimal("50")),
        ("--4", Decimal("-4")),
        ("-1,000-", Decimal("-1000")),
    ],
)
def test_only_leading_minus_is_a_sign(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.parametrize("raw", ["", "   ", "abc", "INR", "-", ".", "1.2.3", None, True, float("nan")])
def test_parse_amount_rejects_invalid(raw):
    with pytest.raises(InvalidAmountError):
        parse_amount(raw)


def test_strict_policy_reports_location():
    normalizer = AmountNormalizer(AmountPolicy.STRICT)

    with pytest.raises(InvalidAmountError) as excinfo:
        normalizer.normalize("n/a", row_index=3, column="loan_amount", source="lendings.csv")

    error = excinfo.value
    assert error.raw_value == "n/a"
    assert error.row_index == 3
    assert error.line_number == 4
    assert error.column == "loan_amount"
    assert str(error) == 'Invalid loan_amount in lendings.csv, line 4: "n/a"'


def test_zero_policy_substitutes_and_counts():
    normalizer = AmountNormalizer(AmountPolicy.ZERO)

    assert normalizer.normalize("") == Decimal("0")
    assert normalizer.normalize("oops", row_index=1, column="payment_amount") == Decimal("0")
    assert normalizer.normalize("₹10") == Decimal("10")
    assert normalizer.substitutions == 2


def test_default_policy_is_strict():
    assert AmountNormalizer().policy is AmountPolicy.STRICT
