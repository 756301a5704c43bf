"""Shared date / number helpers for the ledger services."""

from __future__ import annotations

import math
import re
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.utils.dateparse import parse_date

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")

_NUMERIC_PREFIX = re.compile(r"^\d+")


def q2(amount) -> Decimal:
    """Quantize any amount (None, str, float, Decimal) to cents."""
    if amount is None or amount == "":
        return ZERO
    if not isinstance(amount, Decimal):
        try:
            amount = Decimal(str(amount))
        except InvalidOperation:
            raise ValueError(f"Not a monetary amount: {amount!r}")
    return amount.quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def numeric_prefix(acct_code) -> int | None:
    """Leading digits of an account code ("1001-01" -> 1001), None if absent."""
    match = _NUMERIC_PREFIX.match((acct_code or "").strip())
    if match is None:
        return None
    return int(match.group(0))


def natural_sort_key(acct_code):
    # numeric prefix first (codes without one sort last), then full code
    prefix = numeric_prefix(acct_code)
    return (math.inf if prefix is None else prefix, acct_code)


def natural_sorted(codes):
    return sorted(codes, key=natural_sort_key)


def day_before(value: date) -> date:
    return value - timedelta(days=1)


def start_of_year(value) -> date:
    year = value if isinstance(value, int) else value.year
    return date(year, 1, 1)


def end_of_year(value) -> date:
    year = value if isinstance(value, int) else value.year
    return date(year, 12, 31)


def is_new_year(value: date) -> bool:
    return value.month == 1 and value.day == 1


def coerce_date(value) -> date:
    """Accept a date, datetime or ISO "YYYY-MM-DD" string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    parsed = parse_date(str(value or "").strip()[:10]) if value else None
    if parsed is None:
        raise ValueError(f"Not a date: {value!r}")
    return parsed
