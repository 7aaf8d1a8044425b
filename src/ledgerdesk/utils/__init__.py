"""Utility functions for ledgerdesk."""

from ledgerdesk.utils.date_parser import parse_date, format_created_on
from ledgerdesk.utils.amount_parser import parse_amount, parse_number, is_numeric

__all__ = ["parse_date", "format_created_on", "parse_amount", "parse_number", "is_numeric"]
