"""Leave service layer — submission, balances, approval queue, transitions.

Business logic:
  - Submission with server-side day quantity (half-day aware)
  - Own requests and own entitlement balance
  - Manager / admin pending queue annotated with conflicts and blocked days
  - Approve / decline / cancel through the approval policy, with audit rows

The rules themselves live in ``dates``, ``quantity``, ``conflicts``,
``entitlements`` and ``policy``; this module loads rows, hands plain
records to the rules and persists the outcome.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from hr_dashboard.common.audit import create_audit_entry
from hr_dashboard.common.constants import AuditAction, LeaveStatus
from hr_dashboard.common.exceptions import (
    BlockedDaysException,
    ForbiddenException,
    NotFoundException,
)
from hr_dashboard.employees.models import Employee
from hr_dashboard.leave.conflicts import LeaveWarnings, resolve_warnings
from hr_dashboard.leave.entitlements import balance_for, taken_days
from hr_dashboard.leave.models import LeaveRequest
from hr_dashboard.leave.policy import ActorContext, ApprovalPolicy
from hr_dashboard.leave.quantity import calculate_days_requested
from hr_dashboard.leave.repository import (
    BlockedDayStore,
    EmployeeStore,
    EntitlementStore,
    LeaveRequestStore,
    blocked_day_record,
    employee_record,
    entitlement_record,
    leave_record,
)
from hr_dashboard.leave.schemas import (
    BlockedDayBrief,
    ConflictOut,
    EntitlementBalanceOut,
    LeaveRequestCreate,
    LeaveRequestOut,
    LeaveWarningsOut,
    PendingRequestOut,
)

logger = logging.getLogger(__name__)

ENTITY = "leave_request"


# ═════════════════════════════════════════════════════════════════════
# Serialisation helpers
# ═════════════════════════════════════════════════════════════════════


def request_out(req: LeaveRequest, employee: Optional[Employee] = None) -> LeaveRequestOut:
    """ORM row → ``LeaveRequestOut`` enriched with the employee's identity."""
    employee = employee or req.employee
    return LeaveRequestOut.model_validate(req).model_copy(
        update={
            "full_name": employee.full_name if employee else None,
            "email": employee.email if employee else None,
        }
    )


def _snapshot(req: LeaveRequest) -> dict:
    return {
        "status": LeaveStatus(req.status).value,
        "manager_notes": req.manager_notes,
    }


def _conflicts_out(warnings: LeaveWarnings) -> list[ConflictOut]:
    return [ConflictOut.model_validate(c) for c in warnings.conflicts]


def _blocked_out(warnings: LeaveWarnings) -> list[BlockedDayBrief]:
    return [BlockedDayBrief.model_validate(b) for b in warnings.blocked_days]


# ═════════════════════════════════════════════════════════════════════
# LeaveService
# ═════════════════════════════════════════════════════════════════════


class LeaveService:
    """Async leave operations for employees, managers and HR admins."""

    # ─────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    async def _require_employee(db: AsyncSession, actor: ActorContext) -> Employee:
        employee = await EmployeeStore.get_by_email(db, actor.email)
        if employee is None:
            raise NotFoundException("Employee", actor.email)
        return employee

    @staticmethod
    async def _get_request(db: AsyncSession, request_id: int) -> LeaveRequest:
        req = await LeaveRequestStore.get_by_id(db, request_id)
        if req is None:
            raise NotFoundException("LeaveRequest", request_id)
        return req

    @staticmethod
    async def _warnings_for_range(
        db: AsyncSession,
        start_date: date,
        end_date: date,
    ) -> tuple[list, list]:
        """Load approved leave and blocked days touching [start, end] as records."""
        approved = await LeaveRequestStore.list_approved_in_range(db, start_date, end_date)
        blocked = await BlockedDayStore.list_in_range(db, start_date, end_date)
        return (
            [leave_record(r) for r in approved],
            [blocked_day_record(b) for b in blocked],
        )

    @staticmethod
    async def _warnings_for(db: AsyncSession, req: LeaveRequest) -> LeaveWarnings:
        approved, blocked = await LeaveService._warnings_for_range(
            db, req.start_date, req.end_date,
        )
        return resolve_warnings(
            req.id, req.employee_id, req.start_date, req.end_date,
            approved=approved, blocked_days=blocked,
        )

    # ─────────────────────────────────────────────────────────────────
    # Submit
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    async def submit(
        db: AsyncSession,
        actor: ActorContext,
        data: LeaveRequestCreate,
    ) -> LeaveRequestOut:
        """Create a pending request for the actor. ``days_requested`` is
        always computed here; clients cannot supply it."""
        employee = await LeaveService._require_employee(db, actor)
        ApprovalPolicy.check_submit(data.start_date, data.end_date)

        days = calculate_days_requested(
            data.start_date, data.end_date, data.start_half_day, data.end_half_day,
        )
        req = await LeaveRequestStore.create(
            db,
            LeaveRequest(
                employee_id=employee.id,
                start_date=data.start_date,
                end_date=data.end_date,
                start_half_day=data.start_half_day,
                end_half_day=data.end_half_day,
                days_requested=days,
                reason=data.reason,
                status=LeaveStatus.pending,
            ),
        )

        await create_audit_entry(
            db,
            action=AuditAction.create.value,
            entity_type=ENTITY,
            entity_id=req.id,
            actor_email=actor.email,
            new_values={
                "start_date": data.start_date.isoformat(),
                "end_date": data.end_date.isoformat(),
                "start_half_day": data.start_half_day.value,
                "end_half_day": data.end_half_day.value,
                "days_requested": str(days),
                "status": LeaveStatus.pending.value,
            },
        )
        logger.info(
            "Leave request %s submitted by %s (%s days)", req.id, actor.email, days,
        )
        return request_out(req, employee)

    # ─────────────────────────────────────────────────────────────────
    # Own requests / balance
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    async def list_my_requests(
        db: AsyncSession,
        actor: ActorContext,
    ) -> list[LeaveRequestOut]:
        employee = await LeaveService._require_employee(db, actor)
        rows = await LeaveRequestStore.list_by_employee(db, employee.id)
        return [request_out(r, employee) for r in rows]

    @staticmethod
    async def my_balance(
        db: AsyncSession,
        actor: ActorContext,
        year: int,
    ) -> EntitlementBalanceOut:
        employee = await LeaveService._require_employee(db, actor)
        entitlement = await EntitlementStore.get_by_employee_and_year(db, employee.id, year)
        rows = await LeaveRequestStore.list_by_employee(db, employee.id)

        balance = balance_for(
            employee_record(employee),
            year,
            entitlement_record(entitlement) if entitlement else None,
            taken_days(employee.id, year, [leave_record(r) for r in rows]),
        )
        return EntitlementBalanceOut.model_validate(balance)

    # ─────────────────────────────────────────────────────────────────
    # Pending queue / warnings
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    async def pending_for_actor(
        db: AsyncSession,
        actor: ActorContext,
    ) -> list[PendingRequestOut]:
        """Pending requests the actor may review, oldest first.

        Admins see every pending request; everyone else sees those of
        employees whose ``manager_email`` is theirs. Each entry carries
        warnings computed from the current approved set and blocked days.
        """
        if actor.is_admin:
            rows: Sequence[LeaveRequest] = await LeaveRequestStore.list_pending(db)
        else:
            rows = await LeaveRequestStore.list_pending_for_manager(db, actor.email)
        if not rows:
            return []

        # One load over the union of all ranges; the resolver narrows per request
        approved, blocked = await LeaveService._warnings_for_range(
            db,
            min(r.start_date for r in rows),
            max(r.end_date for r in rows),
        )

        out: list[PendingRequestOut] = []
        for req in rows:
            warnings = resolve_warnings(
                req.id, req.employee_id, req.start_date, req.end_date,
                approved=approved, blocked_days=blocked,
            )
            base = request_out(req)
            out.append(
                PendingRequestOut(
                    **base.model_dump(),
                    conflicts=_conflicts_out(warnings),
                    blocked_days=_blocked_out(warnings),
                )
            )
        return out

    @staticmethod
    async def get_warnings(
        db: AsyncSession,
        request_id: int,
        actor: ActorContext,
        policy: ApprovalPolicy,
    ) -> LeaveWarningsOut:
        req = await LeaveService._get_request(db, request_id)
        employee = req.employee
        if not policy.can_view(actor, employee.email, employee.manager_email):
            raise ForbiddenException("You are not authorized to view this leave request.")

        warnings = await LeaveService._warnings_for(db, req)
        return LeaveWarningsOut(
            request_id=req.id,
            conflicts=_conflicts_out(warnings),
            blocked_days=_blocked_out(warnings),
            has_blocked_days=warnings.has_blocked_days,
        )

    # ─────────────────────────────────────────────────────────────────
    # Approve / decline
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    async def approve(
        db: AsyncSession,
        request_id: int,
        actor: ActorContext,
        policy: ApprovalPolicy,
        *,
        notes: Optional[str] = None,
        admin_override: bool = False,
    ) -> LeaveRequestOut:
        """Approve a pending request. Blocked days in the range refuse the
        approval unless an admin passes ``admin_override``."""
        req = await LeaveService._get_request(db, request_id)
        employee = req.employee
        blocked = [
            blocked_day_record(b)
            for b in await BlockedDayStore.list_in_range(db, req.start_date, req.end_date)
        ]

        try:
            policy.check_approve(
                actor,
                manager_email=employee.manager_email,
                status=req.status,
                blocked_days=blocked,
                admin_override=admin_override,
            )
        except BlockedDaysException:
            logger.warning(
                "Approval of leave request %s by %s refused: %d blocked day(s)",
                req.id, actor.email, len(blocked),
            )
            raise

        old_values = _snapshot(req)
        await LeaveRequestStore.update_status(db, req, LeaveStatus.approved, notes)

        overridden = bool(blocked)
        await create_audit_entry(
            db,
            action=AuditAction.approve.value,
            entity_type=ENTITY,
            entity_id=req.id,
            actor_email=actor.email,
            old_values=old_values,
            new_values={**_snapshot(req), "admin_override": overridden},
        )
        if overridden:
            logger.info(
                "Leave request %s approved by %s over %d blocked day(s)",
                req.id, actor.email, len(blocked),
            )
        else:
            logger.info("Leave request %s approved by %s", req.id, actor.email)
        return request_out(req, employee)

    @staticmethod
    async def decline(
        db: AsyncSession,
        request_id: int,
        actor: ActorContext,
        policy: ApprovalPolicy,
        *,
        notes: Optional[str] = None,
    ) -> LeaveRequestOut:
        req = await LeaveService._get_request(db, request_id)
        employee = req.employee
        policy.check_decline(
            actor, manager_email=employee.manager_email, status=req.status,
        )

        old_values = _snapshot(req)
        await LeaveRequestStore.update_status(db, req, LeaveStatus.declined, notes)

        await create_audit_entry(
            db,
            action=AuditAction.decline.value,
            entity_type=ENTITY,
            entity_id=req.id,
            actor_email=actor.email,
            old_values=old_values,
            new_values=_snapshot(req),
        )
        logger.info("Leave request %s declined by %s", req.id, actor.email)
        return request_out(req, employee)

    # ─────────────────────────────────────────────────────────────────
    # Cancel
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    async def cancel(
        db: AsyncSession,
        request_id: int,
        actor: ActorContext,
        policy: ApprovalPolicy,
        *,
        today: Optional[date] = None,
    ) -> LeaveRequestOut:
        """Cancel a pending request, or one that has already ended.

        Manager notes from an earlier decision are kept.
        """
        req = await LeaveService._get_request(db, request_id)
        employee = req.employee
        policy.check_cancel(
            actor,
            owner_email=employee.email,
            status=req.status,
            end_date=req.end_date,
            today=today or date.today(),
        )

        old_values = _snapshot(req)
        await LeaveRequestStore.update_status(
            db, req, LeaveStatus.cancelled, None, keep_notes=True,
        )

        await create_audit_entry(
            db,
            action=AuditAction.cancel.value,
            entity_type=ENTITY,
            entity_id=req.id,
            actor_email=actor.email,
            old_values=old_values,
            new_values=_snapshot(req),
        )
        logger.info("Leave request %s cancelled by %s", req.id, actor.email)
        return request_out(req, employee)
