"""Admin service — entitlements, all requests, blocked days, leave calendar."""

from __future__ import annotations

import calendar
import logging
from datetime import date
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from hr_dashboard.admin.schemas import (
    BlockedDayCreate,
    BlockedDayOut,
    CalendarDayOut,
    CalendarEntryOut,
    EntitlementUpsert,
    LeaveCalendarOut,
)
from hr_dashboard.common.audit import create_audit_entry
from hr_dashboard.common.constants import AuditAction, HalfDay
from hr_dashboard.common.exceptions import NotFoundException
from hr_dashboard.leave.dates import dates_in_range
from hr_dashboard.leave.entitlements import aggregate_balances
from hr_dashboard.leave.models import LeaveRequest
from hr_dashboard.leave.repository import (
    BlockedDayStore,
    EmployeeStore,
    EntitlementStore,
    LeaveRequestStore,
    employee_record,
    entitlement_record,
    leave_record,
)
from hr_dashboard.leave.schemas import BlockedDayBrief, EntitlementBalanceOut, LeaveRequestOut
from hr_dashboard.leave.service import request_out

logger = logging.getLogger(__name__)


def _half_day_on(req: LeaveRequest, day: date) -> Optional[HalfDay]:
    """The boundary marker that applies to *day*, if it is a half day."""
    if day == req.start_date and req.start_half_day != HalfDay.full:
        return HalfDay(req.start_half_day)
    if day == req.end_date and req.end_half_day != HalfDay.full:
        return HalfDay(req.end_half_day)
    return None


class AdminService:
    """Static service class for HR admin operations."""

    # ── Entitlements ────────────────────────────────────────────────

    @staticmethod
    async def list_entitlements(db: AsyncSession, year: int) -> list[EntitlementBalanceOut]:
        """One balance per employee for *year*, employees ordered by name."""
        employees = await EmployeeStore.list_all(db)
        entitlements = await EntitlementStore.list_for_year(db, year)
        approved = await LeaveRequestStore.list_approved(db)

        balances = aggregate_balances(
            [employee_record(e) for e in employees],
            [entitlement_record(e) for e in entitlements],
            [leave_record(r) for r in approved],
            year,
        )
        return [EntitlementBalanceOut.model_validate(b) for b in balances]

    @staticmethod
    async def upsert_entitlement(
        db: AsyncSession,
        data: EntitlementUpsert,
        *,
        actor_email: str,
    ) -> EntitlementBalanceOut:
        employee = await EmployeeStore.get_by_id(db, data.employee_id)
        if employee is None:
            raise NotFoundException("Employee", data.employee_id)

        existing = await EntitlementStore.get_by_employee_and_year(
            db, data.employee_id, data.year,
        )
        old_values = (
            {
                "annual_allowance_days": str(existing.annual_allowance_days),
                "carryover_days": str(existing.carryover_days),
            }
            if existing
            else None
        )

        row, created = await EntitlementStore.upsert(
            db,
            data.employee_id,
            data.year,
            data.annual_allowance_days,
            data.carryover_days,
        )

        await create_audit_entry(
            db,
            action=(AuditAction.create if created else AuditAction.update).value,
            entity_type="leave_entitlement",
            entity_id=row.id,
            actor_email=actor_email,
            old_values=old_values,
            new_values=data.model_dump(mode="json"),
        )
        logger.info(
            "Entitlement for employee %s year %s set by %s",
            data.employee_id, data.year, actor_email,
        )

        requests = await LeaveRequestStore.list_by_employee(db, employee.id)
        (balance,) = aggregate_balances(
            [employee_record(employee)],
            [entitlement_record(row)],
            [leave_record(r) for r in requests],
            data.year,
        )
        return EntitlementBalanceOut.model_validate(balance)

    # ── All requests ────────────────────────────────────────────────

    @staticmethod
    async def list_all_requests(db: AsyncSession) -> list[LeaveRequestOut]:
        rows = await LeaveRequestStore.list_all(db)
        return [request_out(r) for r in rows]

    # ── Blocked days ────────────────────────────────────────────────

    @staticmethod
    async def list_blocked_days(db: AsyncSession) -> list[BlockedDayOut]:
        rows = await BlockedDayStore.list_all(db)
        return [BlockedDayOut.model_validate(b) for b in rows]

    @staticmethod
    async def add_blocked_day(
        db: AsyncSession,
        data: BlockedDayCreate,
        *,
        actor_email: str,
    ) -> BlockedDayOut:
        day = await BlockedDayStore.insert(db, data.blocked_date, data.reason, actor_email)
        await create_audit_entry(
            db,
            action=AuditAction.create.value,
            entity_type="blocked_day",
            entity_id=day.id,
            actor_email=actor_email,
            new_values=data.model_dump(mode="json"),
        )
        logger.info("Blocked day %s added by %s", data.blocked_date, actor_email)
        return BlockedDayOut.model_validate(day)

    @staticmethod
    async def remove_blocked_day(
        db: AsyncSession,
        blocked_day_id: int,
        *,
        actor_email: str,
    ) -> None:
        day = await BlockedDayStore.delete(db, blocked_day_id)
        await create_audit_entry(
            db,
            action=AuditAction.delete.value,
            entity_type="blocked_day",
            entity_id=blocked_day_id,
            actor_email=actor_email,
            old_values={"blocked_date": day.blocked_date.isoformat(), "reason": day.reason},
        )
        logger.info("Blocked day %s removed by %s", day.blocked_date, actor_email)

    # ── Leave calendar ──────────────────────────────────────────────

    @staticmethod
    async def leave_calendar(db: AsyncSession, year: int, month: int) -> LeaveCalendarOut:
        """Approved and pending leave for each day of the month."""
        first = date(year, month, 1)
        last = date(year, month, calendar.monthrange(year, month)[1])

        requests = await LeaveRequestStore.list_active_in_range(db, first, last)
        blocked = await BlockedDayStore.list_in_range(db, first, last)

        days: list[CalendarDayOut] = []
        for day in dates_in_range(first, last):
            entries = [
                CalendarEntryOut(
                    request_id=req.id,
                    employee_id=req.employee_id,
                    full_name=req.employee.full_name,
                    status=req.status,
                    half_day=_half_day_on(req, day),
                )
                for req in requests
                if req.start_date <= day <= req.end_date
            ]
            days.append(CalendarDayOut(date=day, entries=entries))

        return LeaveCalendarOut(
            year=year,
            month=month,
            days=days,
            blocked_days=[BlockedDayBrief.model_validate(b) for b in blocked],
        )
