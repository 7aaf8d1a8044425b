"""Date parsing and formatting utilities."""

from datetime import date, timedelta
from typing import Optional
from dateutil import parser as date_parser

CREATED_ON_FORMAT = "%d/%m/%Y"


def format_created_on(value: Optional[date] = None) -> str:
    """Format a date the way creation dates are stored (dd/mm/yyyy).

    Args:
        value: Date to format; defaults to today

    Returns:
        Formatted date string, e.g. "07/03/2025"
    """
    if value is None:
        value = date.today()
    return value.strftime(CREATED_ON_FORMAT)


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports:
    - Stored creation dates: "07/03/2025" (day first)
    - ISO dates: "2025-03-07"
    - Relative dates: "today", "yesterday", "tomorrow"

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    if not date_str:
        raise ValueError("Empty date string")

    # ISO strings start with the year; everything else is day first
    dayfirst = not (len(date_str) >= 5 and date_str[:4].isdigit() and date_str[4] in "-/")
    try:
        return date_parser.parse(date_str, dayfirst=dayfirst).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
