"""Inclusive calendar-date helpers shared by the leave rules."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterator

from hr_dashboard.common.constants import DATE_FORMAT


def dates_in_range(start: date, end: date) -> Iterator[date]:
    """Yield every calendar date from *start* to *end*, both inclusive.

    Yields nothing when ``end < start``. Each call returns a fresh iterator.
    """
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def ranges_overlap(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
    """Closed-interval overlap: touching endpoints count as overlapping."""
    return start_a <= end_b and end_a >= start_b


def inclusive_day_count(start: date, end: date) -> int:
    return (end - start).days + 1


def parse_iso_date(value: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` string.

    ``date.fromisoformat`` accepts other ISO shapes on newer interpreters
    (``20260310``, week dates), so the layout is checked explicitly.
    """
    if not isinstance(value, str) or len(value) != 10:
        raise ValueError(f"Invalid date '{value}': expected YYYY-MM-DD.")
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        raise ValueError(f"Invalid date '{value}': expected YYYY-MM-DD.") from None
