"""Days-requested calculator with half-day boundary markers."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from hr_dashboard.common.constants import HALF_DAY, ONE_DAY, HalfDay
from hr_dashboard.leave.dates import inclusive_day_count


def calculate_days_requested(
    start_date: date,
    end_date: date,
    start_half_day: HalfDay = HalfDay.full,
    end_half_day: HalfDay = HalfDay.full,
) -> Decimal:
    """Return the leave quantity for a date range, in steps of 0.5 days.

    Single day: 1, or 0.5 when either marker is a half day (am and pm are
    equivalent here).

    Multi-day: inclusive day count, less 0.5 for a ``pm`` start (the
    morning of the first day is worked) and less 0.5 for an ``am`` end
    (the afternoon of the last day is worked). An ``am`` start or a ``pm``
    end does not change the total.
    """
    if end_date < start_date:
        raise ValueError("end_date must be on or after start_date.")

    half = Decimal(HALF_DAY)

    if start_date == end_date:
        if start_half_day == HalfDay.full and end_half_day == HalfDay.full:
            return Decimal(ONE_DAY)
        return half

    # TODO: am-start / pm-end are ignored on multi-day ranges; confirm with HR
    # whether they should also discount half a day before changing stored totals.
    total = Decimal(inclusive_day_count(start_date, end_date))
    if start_half_day == HalfDay.pm:
        total -= half
    if end_half_day == HalfDay.am:
        total -= half
    return total
