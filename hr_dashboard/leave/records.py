"""Plain records handed to the leave rules.

The rules never see ORM rows or request bodies: the service layer copies
what it needs into these frozen dataclasses first, so the rules stay pure
and can be exercised without a database.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from hr_dashboard.common.constants import LeaveStatus


@dataclass(frozen=True)
class EmployeeRecord:
    id: int
    email: str
    full_name: str
    manager_email: Optional[str] = None


@dataclass(frozen=True)
class LeaveRecord:
    id: int
    employee_id: int
    start_date: date
    end_date: date
    days_requested: Decimal
    status: LeaveStatus
    full_name: str = ""
    email: str = ""


@dataclass(frozen=True)
class BlockedDayRecord:
    id: int
    blocked_date: date
    reason: str


@dataclass(frozen=True)
class EntitlementRecord:
    employee_id: int
    year: int
    annual_allowance_days: Decimal
    carryover_days: Decimal
