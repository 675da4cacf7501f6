"""Utility functions for checkbook."""

from checkbook.utils.date_parser import parse_date, parse_iso_date
from checkbook.utils.amount_parser import parse_amount

__all__ = ["parse_date", "parse_iso_date", "parse_amount"]
