"""Admin router — employees, entitlements, all requests, blocked days, calendar.

All endpoints require an HR admin (``HR_ADMIN_EMAILS``).
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from hr_dashboard.admin.schemas import (
    BlockedDayCreate,
    BlockedDayOut,
    EntitlementUpsert,
    LeaveCalendarOut,
)
from hr_dashboard.admin.service import AdminService
from hr_dashboard.auth.dependencies import require_admin
from hr_dashboard.common.rate_limit import WRITE_LIMIT, limiter
from hr_dashboard.database import get_db
from hr_dashboard.employees.schemas import EmployeeOut, EmployeeUpsert
from hr_dashboard.employees.service import EmployeeService
from hr_dashboard.leave.policy import ActorContext
from hr_dashboard.leave.schemas import EntitlementBalanceOut, LeaveRequestOut

router = APIRouter(prefix="", tags=["admin"])


# ═══════════════════════════════════════════════════════════════════
# EMPLOYEES
# ═══════════════════════════════════════════════════════════════════

@router.get("/employees", response_model=list[EmployeeOut])
async def list_employees(
    _admin: ActorContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """All employees ordered by name."""
    return await EmployeeService.list_employees(db)


@router.post("/employees", response_model=EmployeeOut)
@limiter.limit(WRITE_LIMIT)
async def upsert_employee(
    request: Request,
    response: Response,
    body: EmployeeUpsert,
    admin: ActorContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Create or update an employee by email (201 on create, 200 on update)."""
    employee, created = await EmployeeService.upsert(db, body, actor_email=admin.email)
    if created:
        response.status_code = 201
    return employee


# ═══════════════════════════════════════════════════════════════════
# ENTITLEMENTS
# ═══════════════════════════════════════════════════════════════════

@router.get("/entitlements", response_model=list[EntitlementBalanceOut])
async def list_entitlements(
    year: Optional[int] = Query(None, ge=1900, le=9999),
    _admin: ActorContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Every employee's balance for the year (defaults to this year)."""
    return await AdminService.list_entitlements(db, year or date.today().year)


@router.post("/entitlements", response_model=EntitlementBalanceOut)
@limiter.limit(WRITE_LIMIT)
async def upsert_entitlement(
    request: Request,
    body: EntitlementUpsert,
    admin: ActorContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Set allowance and carryover for one employee-year."""
    return await AdminService.upsert_entitlement(db, body, actor_email=admin.email)


# ═══════════════════════════════════════════════════════════════════
# ALL REQUESTS / CALENDAR
# ═══════════════════════════════════════════════════════════════════

@router.get("/all-requests", response_model=list[LeaveRequestOut])
async def all_requests(
    _admin: ActorContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Every leave request with employee name and email, newest first."""
    return await AdminService.list_all_requests(db)


@router.get("/calendar", response_model=LeaveCalendarOut)
async def leave_calendar(
    year: int = Query(..., ge=1900, le=9999),
    month: int = Query(..., ge=1, le=12),
    _admin: ActorContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Approved and pending leave per day for one month, plus blocked days."""
    return await AdminService.leave_calendar(db, year, month)


# ═══════════════════════════════════════════════════════════════════
# BLOCKED DAYS
# ═══════════════════════════════════════════════════════════════════

@router.get("/blocked-days", response_model=list[BlockedDayOut])
async def list_blocked_days(
    _admin: ActorContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await AdminService.list_blocked_days(db)


@router.post("/blocked-days", response_model=BlockedDayOut, status_code=201)
@limiter.limit(WRITE_LIMIT)
async def add_blocked_day(
    request: Request,
    body: BlockedDayCreate,
    admin: ActorContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Block a date. A date can only be blocked once (409 otherwise)."""
    return await AdminService.add_blocked_day(db, body, actor_email=admin.email)


@router.delete("/blocked-days/{blocked_day_id}", status_code=204)
@limiter.limit(WRITE_LIMIT)
async def remove_blocked_day(
    request: Request,
    blocked_day_id: int,
    admin: ActorContext = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await AdminService.remove_blocked_day(db, blocked_day_id, actor_email=admin.email)
    return Response(status_code=204)
