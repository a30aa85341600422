"""
Date helpers for period windows and Monday-anchored weeks.

All record dates in this project are zero-padded ISO ``YYYY-MM-DD`` strings.
For that format lexicographic order equals chronological order, which is what
lets the period filter compare strings directly.

Week convention:
  - A week runs Monday..Sunday.
  - Sunday belongs to the week of the *preceding* Monday.
  - The week key is the Monday's ISO date string.
"""

from __future__ import annotations

import re
from datetime import date, timedelta

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_iso_date(value: str) -> date:
    """Parse a zero-padded ``YYYY-MM-DD`` string.

    Raises:
        ValueError: If the string is not zero-padded ISO or not a real date.
    """
    if not ISO_DATE_PATTERN.match(value):
        raise ValueError(f"Date must be zero-padded YYYY-MM-DD, got '{value}'.")
    return date.fromisoformat(value)


def inclusive_day_count(start: str, end: str) -> int:
    """Number of calendar days in ``[start, end]``, both ends included.

    Raises:
        ValueError: If ``end`` is before ``start``.
    """
    start_d = parse_iso_date(start)
    end_d = parse_iso_date(end)
    if end_d < start_d:
        raise ValueError(f"Range end {end} is before range start {start}.")
    return (end_d - start_d).days + 1


def week_start(date_str: str) -> str:
    """Return the ISO date of the Monday on or before ``date_str``."""
    d = parse_iso_date(date_str)
    # date.weekday(): Monday == 0 ... Sunday == 6
    return (d - timedelta(days=d.weekday())).isoformat()


def week_key_to_label(week_key: str) -> str:
    """Render a week key as ``"MM/DD~MM/DD"`` (Monday through Sunday)."""
    monday = parse_iso_date(week_key)
    sunday = monday + timedelta(days=6)
    return f"{monday:%m/%d}~{sunday:%m/%d}"
