"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re
from typing import Any

from ledgerbook.domain.errors import ValidationError


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "123,45"
    - "R$ 1.234,56"
    - "1,234.56"
    - "-123,45"
    - "(123,45)" (negative in parentheses)

    When both separators appear, the last one is the decimal separator.
    A lone comma is a decimal comma.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols
    amount_str = re.sub(r"R\$|[$€£¥]", "", amount_str).strip()

    if "," in amount_str and "." in amount_str:
        if amount_str.rfind(",") > amount_str.rfind("."):
            amount_str = amount_str.replace(".", "").replace(",", ".")
        else:
            amount_str = amount_str.replace(",", "")
    elif "," in amount_str:
        amount_str = amount_str.replace(",", ".")

    amount_str = amount_str.replace(" ", "")

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e!r}")

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}': not a finite number")

    if is_negative:
        amount = -amount
    return amount


def to_decimal(value: Any, default: Decimal = Decimal("0")) -> Decimal:
    """Convert a stored number to Decimal.

    Stored documents may hold numbers as int, float or text. Floats go
    through ``str`` so 0.1 stays 0.1. Missing or empty values become
    ``default``.

    Raises:
        ValidationError: If the value is present but not a finite number
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise ValidationError(f"Not a number: {value!r}")
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValidationError(f"Not a finite number: {value!r}")
        return value
    try:
        return parse_amount(str(value))
    except ValueError as e:
        raise ValidationError(str(e)) from e
