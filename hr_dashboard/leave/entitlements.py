"""Per-employee leave balance for a calendar year.

``taken`` counts approved requests by the year of their start date, so a
request spanning New Year is charged entirely to the year it starts in.
Balances are never clamped: over-allocation shows up as a negative
``remaining``.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from hr_dashboard.common.constants import LeaveStatus
from hr_dashboard.leave.records import EmployeeRecord, EntitlementRecord, LeaveRecord

ZERO = Decimal("0")


@dataclass(frozen=True)
class EntitlementBalance:
    employee_id: int
    email: str
    full_name: str
    year: int
    annual_allowance_days: Decimal
    carryover_days: Decimal
    total_allowance: Decimal
    taken: Decimal
    remaining: Decimal
    entitlement_set: bool


def compute_remaining(
    allowance: Decimal,
    carryover: Decimal,
    taken: Decimal,
) -> tuple[Decimal, Decimal]:
    """Return ``(total_allowance, remaining)``."""
    total = allowance + carryover
    return total, total - taken


def taken_days(
    employee_id: int,
    year: int,
    requests: Iterable[LeaveRecord],
) -> Decimal:
    return sum(
        (
            r.days_requested
            for r in requests
            if r.employee_id == employee_id
            and r.status == LeaveStatus.approved
            and r.start_date.year == year
        ),
        ZERO,
    )


def balance_for(
    employee: EmployeeRecord,
    year: int,
    entitlement: Optional[EntitlementRecord],
    taken: Decimal,
) -> EntitlementBalance:
    if entitlement is None:
        allowance, carryover, is_set = ZERO, ZERO, False
    else:
        allowance = entitlement.annual_allowance_days
        carryover = entitlement.carryover_days
        is_set = True

    total, remaining = compute_remaining(allowance, carryover, taken)
    return EntitlementBalance(
        employee_id=employee.id,
        email=employee.email,
        full_name=employee.full_name,
        year=year,
        annual_allowance_days=allowance,
        carryover_days=carryover,
        total_allowance=total,
        taken=taken,
        remaining=remaining,
        entitlement_set=is_set,
    )


def aggregate_balances(
    employees: Iterable[EmployeeRecord],
    entitlements: Iterable[EntitlementRecord],
    requests: Iterable[LeaveRecord],
    year: int,
) -> list[EntitlementBalance]:
    """Compute one balance per employee for *year*, in input order.

    Entitlements for other years and requests that are not approved or that
    start in another year are ignored.
    """
    by_employee: Mapping[int, EntitlementRecord] = {
        e.employee_id: e for e in entitlements if e.year == year
    }

    taken: dict[int, Decimal] = defaultdict(lambda: ZERO)
    for r in requests:
        if r.status == LeaveStatus.approved and r.start_date.year == year:
            taken[r.employee_id] += r.days_requested

    return [
        balance_for(emp, year, by_employee.get(emp.id), taken[emp.id])
        for emp in employees
    ]
