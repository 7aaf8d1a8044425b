"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
from typing import Optional
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "-123.45"
    - "1,234.56"
    - "$123.45"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed or is not finite
    """
    if amount_str is None or not str(amount_str).strip():
        raise ValueError("Empty amount string")

    amount_str = str(amount_str).strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols
    amount_str = re.sub(r"[$€£¥]", "", amount_str)

    # Remove thousands separators
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}'") from e

    if not amount.is_finite():
        raise ValueError(f"Amount '{amount_str}' is not a finite number")

    return -amount if is_negative else amount


def parse_number(value: Optional[str]) -> Optional[Decimal]:
    """Parse a numeric cell, returning None for blank or unparseable text."""
    try:
        return parse_amount(value)
    except ValueError:
        return None


def is_blank(value: Optional[str]) -> bool:
    """Return True for None or whitespace-only text."""
    return value is None or not str(value).strip()


def is_numeric(value: Optional[str]) -> bool:
    """Return True if the value is blank or parses as a finite number."""
    return is_blank(value) or parse_number(value) is not None
