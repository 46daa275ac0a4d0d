"""Shared parsing and normalization helpers for Ventas Core.

This module provides the small, pure functions the grouping engine and the
aggregator build on:

- Date parsing: the textual date formats found in accounting exports
- Label normalization: customer ids, document classes, sale types
- Advisor code normalization: zero-stripped, zero-padded codes

Examples:
    >>> from ventas_core.utils import parse_sale_date, days_between
    >>> parse_sale_date("01/03/24")
    datetime.date(2024, 3, 1)
    >>> days_between(parse_sale_date("2024-03-01"), parse_sale_date("2024-03-08"))
    7

"""

from __future__ import annotations

import re
from datetime import date
from typing import Any, Optional

import pandas as pd

from ventas_core.config import ADVISOR_CODE_WIDTH, UNKNOWN_LABEL

# Separator between date parts: DD/MM/YYYY, DD-MM-YYYY, YYYY-MM-DD, YYYY/MM/DD
DATE_SPLIT_RE = re.compile(r"[/\-]")

# Day-first dates: D/M/YY through DD/MM/YYYY
DAY_FIRST_RE = re.compile(r"^(?P<day>\d{1,2})[/\-](?P<month>\d{1,2})[/\-](?P<year>\d{2}|\d{4})$")

# Year-first dates, optionally followed by a time component
YEAR_FIRST_RE = re.compile(
    r"^(?P<year>\d{4})[/\-](?P<month>\d{1,2})[/\-](?P<day>\d{1,2})(?:[T ].*)?$"
)


def _build_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_sale_date(value: Any) -> Optional[date]:
    """Parse a textual sale date.

    Accepts ``DD/MM/YYYY``, ``DD-MM-YYYY``, ``YYYY-MM-DD`` and ``YYYY/MM/DD``.
    Two-digit years are read as ``20YY``. A ``date``/``datetime`` (or pandas
    Timestamp) is passed through as a calendar date. Anything else that
    does not split into three parts is handed to ``pandas.to_datetime``.

    Args:
        value: Raw date value from a line record.

    Returns:
        Parsed date, or None if the value is blank or not a valid date.

    Examples:
        >>> parse_sale_date("15-01-2025")
        datetime.date(2025, 1, 15)
        >>> parse_sale_date("2025/01/15")
        datetime.date(2025, 1, 15)
        >>> parse_sale_date("31/02/2025") is None
        True

    """
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, pd.Timestamp):
        return None if pd.isna(value) else value.date()
    if isinstance(value, date):
        # datetime is a subclass of date
        return value if type(value) is date else value.date()
    if not isinstance(value, str):
        return None

    clean = value.strip()
    if not clean:
        return None

    if len(DATE_SPLIT_RE.split(clean)) == 3:
        match = DAY_FIRST_RE.match(clean)
        if match:
            year = match.group("year")
            if len(year) == 2:
                year = f"20{year}"
            return _build_date(int(year), int(match.group("month")), int(match.group("day")))

        match = YEAR_FIRST_RE.match(clean)
        if match:
            return _build_date(
                int(match.group("year")), int(match.group("month")), int(match.group("day"))
            )
        return None

    parsed = pd.to_datetime(clean, errors="coerce")
    if pd.isna(parsed):
        return None
    return parsed.date()


def days_between(first: date, second: date) -> int:
    """Return the absolute number of whole days between two dates.

    Examples:
        >>> from datetime import date
        >>> days_between(date(2024, 3, 9), date(2024, 3, 1))
        8

    """
    return abs((second - first).days)


def clean_text(value: Any) -> Optional[str]:
    """Return a stripped string, or None for missing/blank/NaN values."""
    if value is None:
        return None
    if not isinstance(value, str):
        try:
            if pd.isna(value):
                return None
        except (TypeError, ValueError):
            pass
        # Numeric ids read from spreadsheets arrive as floats
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        value = str(value)
    value = value.strip()
    return value or None


def normalize_label(value: Any, unknown: str = UNKNOWN_LABEL) -> str:
    """Upper-case a classification label, falling back to ``unknown``.

    Examples:
        >>> normalize_label(" credito ")
        'CREDITO'
        >>> normalize_label(None)
        'UNKNOWN'

    """
    text = clean_text(value)
    return text.upper() if text else unknown


def normalize_customer_id(value: Any, unknown: str = UNKNOWN_LABEL) -> str:
    """Return the trimmed customer id, or ``unknown`` when blank."""
    return clean_text(value) or unknown


def normalize_document_class(value: Any, unknown: str = UNKNOWN_LABEL) -> str:
    """Return the upper-cased document class, or ``unknown`` when blank."""
    return normalize_label(value, unknown)


def normalize_advisor_code(code: Any, width: int = ADVISOR_CODE_WIDTH) -> str:
    """Normalize an advisor code for lookups.

    Strips surrounding whitespace and leading zeros, then left-pads with
    zeros to ``width`` characters. Longer codes are returned unpadded.

    Examples:
        >>> normalize_advisor_code("0123")
        '00123'
        >>> normalize_advisor_code("1")
        '00001'
        >>> normalize_advisor_code(None)
        '00000'

    """
    text = clean_text(code) or ""
    return text.lstrip("0").rjust(width, "0")


def line_value(value: Any) -> float:
    """Return a line's value for summing; None and NaN count as 0.

    Examples:
        >>> line_value(float("nan"))
        0
        >>> line_value(-30000)
        -30000

    """
    if value is None or pd.isna(value):
        return 0
    return value
