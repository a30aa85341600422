"""
Period selection and weekly bucketing for dated records.

Any object with a ``date`` attribute holding a zero-padded ``YYYY-MM-DD``
string works here. The record models enforce that format, which is the
precondition for comparing dates as strings.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from typing import Protocol, TypeVar

from cost_scorer.utils.time_utils import week_start


class Dated(Protocol):
    date: str


R = TypeVar("R", bound=Dated)


def filter_by_range(records: Iterable[R], start: str, end: str) -> list[R]:
    """Keep records with ``start <= record.date <= end`` (inclusive)."""
    return [r for r in records if start <= r.date <= end]


def group_by_week(records: Iterable[R]) -> dict[str, list[R]]:
    """Bucket records under the Monday of their week.

    Sunday is day 7 of the week that began the previous Monday. The returned
    dict has no ordering guarantee; sort the keys before iterating (the
    ``YYYY-MM-DD`` key sorts chronologically).
    """
    buckets: dict[str, list[R]] = defaultdict(list)
    for record in records:
        buckets[week_start(record.date)].append(record)
    return dict(buckets)
