"""Amount parsing utilities."""

import re
from decimal import Decimal, InvalidOperation

from checkbook.domain.errors import ValidationError

CENTS = Decimal("0.01")

# Amounts are stored as NUMERIC(15, 2): at most 13 digits before the point.
MAX_ADJUSTED_EXPONENT = 12


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValidationError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValidationError("Empty amount string")

    amount_str = amount_str.strip()

    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    amount_str = re.sub(r"[$€£¥]", "", amount_str)
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValidationError(f"Could not parse amount '{amount_str}'") from e
    if not amount.is_finite():
        raise ValidationError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount


def to_decimal(value: Decimal | int | str, field: str = "amount") -> Decimal:
    """Coerce a number or numeric string into a Decimal without using floats."""
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a Decimal or string, not bool")
    if isinstance(value, float):
        raise ValidationError(f"{field} must be a Decimal or string, not float")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    else:
        amount = parse_amount(str(value))
    if not amount.is_finite():
        raise ValidationError(f"Invalid {field} '{value}'")
    if amount and amount.adjusted() > MAX_ADJUSTED_EXPONENT:
        raise ValidationError(f"{field} '{value}' is too large")
    return amount


def require_positive_amount(value: Decimal | int | str, field: str = "amount") -> Decimal:
    """Return the value as a two-place Decimal, rejecting zero and negatives."""
    amount = to_decimal(value, field)
    if amount <= 0:
        raise ValidationError(f"{field} must be a positive number")
    if amount != amount.quantize(CENTS):
        raise ValidationError(f"{field} must have at most two decimal places")
    return amount.quantize(CENTS)


def require_money(value: Decimal | int | str, field: str = "amount") -> Decimal:
    """Return the value as a two-place Decimal. Negative values are allowed."""
    amount = to_decimal(value, field)
    if amount != amount.quantize(CENTS):
        raise ValidationError(f"{field} must have at most two decimal places")
    return amount.quantize(CENTS)
