"""Conflict and blocked-day resolution for a leave date range.

Conflicts are other employees' approved leave overlapping the range and
are informational only. Blocked days inside the range block approval unless an
admin overrides them. Both lists are recomputed from current data on every
call; nothing here is cached.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from hr_dashboard.common.constants import LeaveStatus
from hr_dashboard.leave.dates import ranges_overlap
from hr_dashboard.leave.records import BlockedDayRecord, LeaveRecord


@dataclass(frozen=True)
class LeaveWarnings:
    conflicts: tuple[LeaveRecord, ...] = ()
    blocked_days: tuple[BlockedDayRecord, ...] = ()

    @property
    def has_blocked_days(self) -> bool:
        return bool(self.blocked_days)


def find_conflicts(
    request_id: Optional[int],
    employee_id: Optional[int],
    start_date: date,
    end_date: date,
    candidates: Iterable[LeaveRecord],
) -> tuple[LeaveRecord, ...]:
    """Other employees' approved requests that overlap the range.

    The request itself (*request_id*) and anything else booked by
    *employee_id* are skipped.

    Ordered by start date, then id.
    """
    hits = [
        leave
        for leave in candidates
        if leave.status == LeaveStatus.approved
        and leave.id != request_id
        and leave.employee_id != employee_id
        and ranges_overlap(start_date, end_date, leave.start_date, leave.end_date)
    ]
    hits.sort(key=lambda leave: (leave.start_date, leave.id))
    return tuple(hits)


def find_blocked_days(
    start_date: date,
    end_date: date,
    blocked_days: Iterable[BlockedDayRecord],
) -> tuple[BlockedDayRecord, ...]:
    """Blocked days falling inside the range (inclusive), ordered by date."""
    hits = [
        day
        for day in blocked_days
        if ranges_overlap(start_date, end_date, day.blocked_date, day.blocked_date)
    ]
    hits.sort(key=lambda day: (day.blocked_date, day.id))
    return tuple(hits)


def resolve_warnings(
    request_id: Optional[int],
    employee_id: Optional[int],
    start_date: date,
    end_date: date,
    *,
    approved: Iterable[LeaveRecord],
    blocked_days: Iterable[BlockedDayRecord],
) -> LeaveWarnings:
    return LeaveWarnings(
        conflicts=find_conflicts(request_id, employee_id, start_date, end_date, approved),
        blocked_days=find_blocked_days(start_date, end_date, blocked_days),
    )
