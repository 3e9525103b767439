"""Utility functions for ledgerbook."""

from ledgerbook.utils.date_parser import parse_date, format_date, advance_date
from ledgerbook.utils.amount_parser import parse_amount, to_decimal

__all__ = ["parse_date", "format_date", "advance_date", "parse_amount", "to_decimal"]
