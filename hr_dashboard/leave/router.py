"""Leave router — submit, own requests and balance, approval queue, transitions.

All endpoints require an authenticated actor. Approve / decline authority
(manager of record or HR admin) and cancel authority (owner or HR admin)
are enforced by the approval policy inside the service.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from hr_dashboard.auth.dependencies import get_approval_policy, get_current_actor
from hr_dashboard.common.rate_limit import WRITE_LIMIT, limiter
from hr_dashboard.database import get_db
from hr_dashboard.leave.policy import ActorContext, ApprovalPolicy
from hr_dashboard.leave.schemas import (
    EntitlementBalanceOut,
    LeaveApproveRequest,
    LeaveDeclineRequest,
    LeaveRequestCreate,
    LeaveRequestOut,
    LeaveWarningsOut,
    PendingRequestOut,
)
from hr_dashboard.leave.service import LeaveService

router = APIRouter(prefix="", tags=["leave"])


# ── GET /my-requests ────────────────────────────────────────────────

@router.get("/my-requests", response_model=list[LeaveRequestOut])
async def my_requests(
    actor: ActorContext = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """The caller's own leave requests, newest first."""
    return await LeaveService.list_my_requests(db, actor)


# ── GET /my-balance ─────────────────────────────────────────────────

@router.get("/my-balance", response_model=EntitlementBalanceOut)
async def my_balance(
    year: Optional[int] = Query(None, ge=1900, le=9999),
    actor: ActorContext = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """Allowance, carryover, taken and remaining days (defaults to this year)."""
    return await LeaveService.my_balance(db, actor, year or date.today().year)


# ── POST /request ───────────────────────────────────────────────────

@router.post("/request", response_model=LeaveRequestOut, status_code=201)
@limiter.limit(WRITE_LIMIT)
async def submit_request(
    request: Request,
    body: LeaveRequestCreate,
    actor: ActorContext = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """Submit a leave request. ``days_requested`` is computed server-side."""
    return await LeaveService.submit(db, actor, body)


# ── GET /pending ────────────────────────────────────────────────────

@router.get("/pending", response_model=list[PendingRequestOut])
async def pending(
    actor: ActorContext = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """Pending requests the caller may review, with conflicts and blocked days."""
    return await LeaveService.pending_for_actor(db, actor)


# ── GET /{id}/conflicts ─────────────────────────────────────────────

@router.get("/{request_id}/conflicts", response_model=LeaveWarningsOut)
async def request_conflicts(
    request_id: int,
    actor: ActorContext = Depends(get_current_actor),
    policy: ApprovalPolicy = Depends(get_approval_policy),
    db: AsyncSession = Depends(get_db),
):
    """Fresh conflicts and blocked days for one request."""
    return await LeaveService.get_warnings(db, request_id, actor, policy)


# ── PUT /{id}/approve ───────────────────────────────────────────────

@router.put("/{request_id}/approve", response_model=LeaveRequestOut)
@limiter.limit(WRITE_LIMIT)
async def approve_request(
    request: Request,
    request_id: int,
    body: LeaveApproveRequest,
    actor: ActorContext = Depends(get_current_actor),
    policy: ApprovalPolicy = Depends(get_approval_policy),
    db: AsyncSession = Depends(get_db),
):
    """Approve a pending request. Blocked days need an admin override."""
    return await LeaveService.approve(
        db, request_id, actor, policy,
        notes=body.notes,
        admin_override=body.admin_override,
    )


# ── PUT /{id}/decline ───────────────────────────────────────────────

@router.put("/{request_id}/decline", response_model=LeaveRequestOut)
@limiter.limit(WRITE_LIMIT)
async def decline_request(
    request: Request,
    request_id: int,
    body: LeaveDeclineRequest,
    actor: ActorContext = Depends(get_current_actor),
    policy: ApprovalPolicy = Depends(get_approval_policy),
    db: AsyncSession = Depends(get_db),
):
    """Decline a pending request."""
    return await LeaveService.decline(db, request_id, actor, policy, notes=body.notes)


# ── PUT /{id}/cancel ────────────────────────────────────────────────

@router.put("/{request_id}/cancel", response_model=LeaveRequestOut)
@limiter.limit(WRITE_LIMIT)
async def cancel_request(
    request: Request,
    request_id: int,
    actor: ActorContext = Depends(get_current_actor),
    policy: ApprovalPolicy = Depends(get_approval_policy),
    db: AsyncSession = Depends(get_db),
):
    """Cancel a pending request, or one whose end date has passed."""
    return await LeaveService.cancel(db, request_id, actor, policy)
