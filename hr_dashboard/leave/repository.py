"""Async data access for employees, leave requests, blocked days and
entitlements.

Each store is a namespace of static coroutines over an ``AsyncSession``.
They flush but never commit; the request-scoped session in ``get_db``
owns the transaction. Duplicate inserts surface as ``ConflictError`` and
unknown ids as ``NotFoundException``.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hr_dashboard.common.constants import LeaveStatus
from hr_dashboard.common.exceptions import ConflictError, NotFoundException
from hr_dashboard.employees.models import Employee
from hr_dashboard.leave.models import BlockedDay, LeaveEntitlement, LeaveRequest
from hr_dashboard.leave.records import (
    BlockedDayRecord,
    EmployeeRecord,
    EntitlementRecord,
    LeaveRecord,
)


# ═════════════════════════════════════════════════════════════════════
# ORM → record conversion
# ═════════════════════════════════════════════════════════════════════


def employee_record(emp: Employee) -> EmployeeRecord:
    return EmployeeRecord(
        id=emp.id,
        email=emp.email,
        full_name=emp.full_name,
        manager_email=emp.manager_email,
    )


def leave_record(req: LeaveRequest) -> LeaveRecord:
    """Copy a request (with ``employee`` loaded) into a ``LeaveRecord``."""
    return LeaveRecord(
        id=req.id,
        employee_id=req.employee_id,
        start_date=req.start_date,
        end_date=req.end_date,
        days_requested=Decimal(req.days_requested),
        status=LeaveStatus(req.status),
        full_name=req.employee.full_name if req.employee else "",
        email=req.employee.email if req.employee else "",
    )


def blocked_day_record(day: BlockedDay) -> BlockedDayRecord:
    return BlockedDayRecord(id=day.id, blocked_date=day.blocked_date, reason=day.reason)


def entitlement_record(ent: LeaveEntitlement) -> EntitlementRecord:
    return EntitlementRecord(
        employee_id=ent.employee_id,
        year=ent.year,
        annual_allowance_days=Decimal(ent.annual_allowance_days),
        carryover_days=Decimal(ent.carryover_days),
    )


def _with_employee(query):
    return query.options(selectinload(LeaveRequest.employee))


# ═════════════════════════════════════════════════════════════════════
# Employees
# ═════════════════════════════════════════════════════════════════════


class EmployeeStore:

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> Optional[Employee]:
        result = await db.execute(
            select(Employee).where(func.lower(Employee.email) == email.strip().lower())
        )
        return result.scalars().first()

    @staticmethod
    async def get_by_id(db: AsyncSession, employee_id: int) -> Optional[Employee]:
        result = await db.execute(select(Employee).where(Employee.id == employee_id))
        return result.scalars().first()

    @staticmethod
    async def list_all(db: AsyncSession) -> Sequence[Employee]:
        result = await db.execute(select(Employee).order_by(Employee.full_name, Employee.id))
        return result.scalars().all()


# ═════════════════════════════════════════════════════════════════════
# Leave requests
# ═════════════════════════════════════════════════════════════════════


class LeaveRequestStore:

    @staticmethod
    async def create(db: AsyncSession, row: LeaveRequest) -> LeaveRequest:
        db.add(row)
        await db.flush()
        return row

    @staticmethod
    async def get_by_id(db: AsyncSession, request_id: int) -> Optional[LeaveRequest]:
        result = await db.execute(
            _with_employee(select(LeaveRequest).where(LeaveRequest.id == request_id))
        )
        return result.scalars().first()

    @staticmethod
    async def list_by_employee(
        db: AsyncSession,
        employee_id: int,
    ) -> Sequence[LeaveRequest]:
        result = await db.execute(
            _with_employee(
                select(LeaveRequest)
                .where(LeaveRequest.employee_id == employee_id)
                .order_by(LeaveRequest.created_at.desc(), LeaveRequest.id.desc())
            )
        )
        return result.scalars().all()

    @staticmethod
    async def list_pending_for_manager(
        db: AsyncSession,
        manager_email: str,
    ) -> Sequence[LeaveRequest]:
        """Pending requests of employees whose ``manager_email`` matches, oldest first."""
        result = await db.execute(
            _with_employee(
                select(LeaveRequest)
                .join(Employee, LeaveRequest.employee_id == Employee.id)
                .where(
                    func.lower(Employee.manager_email) == manager_email.strip().lower(),
                    LeaveRequest.status == LeaveStatus.pending,
                )
                .order_by(LeaveRequest.created_at.asc(), LeaveRequest.id.asc())
            )
        )
        return result.scalars().all()

    @staticmethod
    async def list_pending(db: AsyncSession) -> Sequence[LeaveRequest]:
        result = await db.execute(
            _with_employee(
                select(LeaveRequest)
                .where(LeaveRequest.status == LeaveStatus.pending)
                .order_by(LeaveRequest.created_at.asc(), LeaveRequest.id.asc())
            )
        )
        return result.scalars().all()

    @staticmethod
    async def list_approved(db: AsyncSession) -> Sequence[LeaveRequest]:
        result = await db.execute(
            _with_employee(
                select(LeaveRequest)
                .where(LeaveRequest.status == LeaveStatus.approved)
                .order_by(LeaveRequest.start_date, LeaveRequest.id)
            )
        )
        return result.scalars().all()

    @staticmethod
    async def list_approved_in_range(
        db: AsyncSession,
        start_date: date,
        end_date: date,
    ) -> Sequence[LeaveRequest]:
        """Approved requests overlapping [start_date, end_date]."""
        result = await db.execute(
            _with_employee(
                select(LeaveRequest)
                .where(
                    LeaveRequest.status == LeaveStatus.approved,
                    LeaveRequest.start_date <= end_date,
                    LeaveRequest.end_date >= start_date,
                )
                .order_by(LeaveRequest.start_date, LeaveRequest.id)
            )
        )
        return result.scalars().all()

    @staticmethod
    async def list_active_in_range(
        db: AsyncSession,
        start_date: date,
        end_date: date,
    ) -> Sequence[LeaveRequest]:
        """Pending or approved requests overlapping the range (calendar view)."""
        result = await db.execute(
            _with_employee(
                select(LeaveRequest)
                .where(
                    LeaveRequest.status.in_([LeaveStatus.pending, LeaveStatus.approved]),
                    LeaveRequest.start_date <= end_date,
                    LeaveRequest.end_date >= start_date,
                )
                .order_by(LeaveRequest.start_date, LeaveRequest.id)
            )
        )
        return result.scalars().all()

    @staticmethod
    async def list_all(db: AsyncSession) -> Sequence[LeaveRequest]:
        result = await db.execute(
            _with_employee(
                select(LeaveRequest).order_by(
                    LeaveRequest.created_at.desc(), LeaveRequest.id.desc()
                )
            )
        )
        return result.scalars().all()

    @staticmethod
    async def update_status(
        db: AsyncSession,
        request: LeaveRequest,
        status: LeaveStatus,
        notes: Optional[str],
        *,
        keep_notes: bool = False,
    ) -> LeaveRequest:
        """Set status and notes and refresh ``updated_at``.

        With ``keep_notes`` the existing manager notes survive when *notes*
        is ``None``.
        """
        request.status = status
        if notes is not None or not keep_notes:
            request.manager_notes = notes
        request.updated_at = datetime.now(timezone.utc)
        await db.flush()
        return request


# ═════════════════════════════════════════════════════════════════════
# Blocked days
# ═════════════════════════════════════════════════════════════════════


class BlockedDayStore:

    @staticmethod
    async def list_in_range(
        db: AsyncSession,
        start_date: date,
        end_date: date,
    ) -> Sequence[BlockedDay]:
        result = await db.execute(
            select(BlockedDay)
            .where(
                BlockedDay.blocked_date >= start_date,
                BlockedDay.blocked_date <= end_date,
            )
            .order_by(BlockedDay.blocked_date)
        )
        return result.scalars().all()

    @staticmethod
    async def list_all(db: AsyncSession) -> Sequence[BlockedDay]:
        result = await db.execute(select(BlockedDay).order_by(BlockedDay.blocked_date))
        return result.scalars().all()

    @staticmethod
    async def insert(
        db: AsyncSession,
        blocked_date: date,
        reason: str,
        created_by: str,
    ) -> BlockedDay:
        existing = await db.execute(
            select(BlockedDay.id).where(BlockedDay.blocked_date == blocked_date)
        )
        if existing.scalar() is not None:
            raise ConflictError("blocked_date", blocked_date.isoformat())

        day = BlockedDay(blocked_date=blocked_date, reason=reason, created_by=created_by)
        db.add(day)
        try:
            await db.flush()
        except IntegrityError:
            # Lost a race with a concurrent insert of the same date
            await db.rollback()
            raise ConflictError("blocked_date", blocked_date.isoformat())
        return day

    @staticmethod
    async def delete(db: AsyncSession, blocked_day_id: int) -> BlockedDay:
        result = await db.execute(select(BlockedDay).where(BlockedDay.id == blocked_day_id))
        day = result.scalars().first()
        if day is None:
            raise NotFoundException("BlockedDay", blocked_day_id)
        await db.delete(day)
        await db.flush()
        return day


# ═════════════════════════════════════════════════════════════════════
# Entitlements
# ═════════════════════════════════════════════════════════════════════


class EntitlementStore:

    @staticmethod
    async def get_by_employee_and_year(
        db: AsyncSession,
        employee_id: int,
        year: int,
    ) -> Optional[LeaveEntitlement]:
        result = await db.execute(
            select(LeaveEntitlement).where(
                LeaveEntitlement.employee_id == employee_id,
                LeaveEntitlement.year == year,
            )
        )
        return result.scalars().first()

    @staticmethod
    async def list_for_year(db: AsyncSession, year: int) -> Sequence[LeaveEntitlement]:
        result = await db.execute(
            select(LeaveEntitlement).where(LeaveEntitlement.year == year)
        )
        return result.scalars().all()

    @staticmethod
    async def upsert(
        db: AsyncSession,
        employee_id: int,
        year: int,
        annual_allowance_days: Decimal,
        carryover_days: Decimal,
    ) -> tuple[LeaveEntitlement, bool]:
        """Insert or update the (employee, year) row. Returns ``(row, created)``."""
        row = await EntitlementStore.get_by_employee_and_year(db, employee_id, year)
        created = row is None
        if created:
            row = LeaveEntitlement(employee_id=employee_id, year=year)
            db.add(row)
        row.annual_allowance_days = annual_allowance_days
        row.carryover_days = carryover_days
        await db.flush()
        return row, created
