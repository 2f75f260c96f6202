"""Approval policy — who may move a leave request between statuses.

State machine::

    pending ──approve──► approved
    pending ──decline──► declined
    pending ──cancel───► cancelled
    <any, end_date in the past> ──cancel──► cancelled

Every check takes an explicit :class:`ActorContext`; the admin allow-list is
fixed when the policy is constructed. Checks raise and never mutate, so a
refused transition leaves the request untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Sequence

from hr_dashboard.common.constants import LeaveStatus
from hr_dashboard.common.exceptions import (
    BlockedDaysException,
    ForbiddenException,
    InvalidTransitionException,
    ValidationException,
)
from hr_dashboard.leave.records import BlockedDayRecord


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


@dataclass(frozen=True)
class ActorContext:
    """The authenticated caller: email plus whether they are an HR admin."""

    email: str
    is_admin: bool = False


class ApprovalPolicy:
    """Authorization and transition rules for leave requests."""

    def __init__(self, admin_emails: Iterable[str] = ()) -> None:
        self._admin_emails = frozenset(
            normalize_email(e) for e in admin_emails if normalize_email(e)
        )

    def actor_for(self, email: str) -> ActorContext:
        email = normalize_email(email)
        return ActorContext(email=email, is_admin=email in self._admin_emails)

    # ── Relationship helpers ───────────────────────────────────────

    @staticmethod
    def is_manager_of(actor: ActorContext, manager_email: Optional[str]) -> bool:
        return bool(manager_email) and normalize_email(manager_email) == actor.email

    @staticmethod
    def is_owner(actor: ActorContext, owner_email: Optional[str]) -> bool:
        return bool(owner_email) and normalize_email(owner_email) == actor.email

    def can_review(self, actor: ActorContext, manager_email: Optional[str]) -> bool:
        return actor.is_admin or self.is_manager_of(actor, manager_email)

    def can_view(
        self,
        actor: ActorContext,
        owner_email: Optional[str],
        manager_email: Optional[str],
    ) -> bool:
        return self.can_review(actor, manager_email) or self.is_owner(actor, owner_email)

    # ── Submit ─────────────────────────────────────────────────────

    @staticmethod
    def check_submit(start_date: date, end_date: date) -> None:
        if start_date > end_date:
            raise ValidationException(
                {"end_date": ["end_date must be on or after start_date."]}
            )

    # ── Approve / decline ──────────────────────────────────────────

    def _authorize_review(
        self,
        actor: ActorContext,
        manager_email: Optional[str],
        action: str,
    ) -> None:
        if not self.can_review(actor, manager_email):
            raise ForbiddenException(
                f"You are not authorized to {action} this leave request."
            )

    @staticmethod
    def _require_pending(status: LeaveStatus, action: str) -> None:
        if status != LeaveStatus.pending:
            raise InvalidTransitionException(LeaveStatus(status).value, action)

    def check_approve(
        self,
        actor: ActorContext,
        *,
        manager_email: Optional[str],
        status: LeaveStatus,
        blocked_days: Sequence[BlockedDayRecord],
        admin_override: bool = False,
    ) -> None:
        """Raise unless *actor* may approve now.

        Blocked days refuse the approval for everyone except an admin who
        passed ``admin_override``. Overlapping approved leave never blocks.
        """
        self._authorize_review(actor, manager_email, "approve")
        self._require_pending(status, "approve")

        if blocked_days and not (actor.is_admin and admin_override):
            raise BlockedDaysException(
                [
                    {
                        "id": b.id,
                        "blocked_date": b.blocked_date.isoformat(),
                        "reason": b.reason,
                    }
                    for b in blocked_days
                ]
            )

    def check_decline(
        self,
        actor: ActorContext,
        *,
        manager_email: Optional[str],
        status: LeaveStatus,
    ) -> None:
        self._authorize_review(actor, manager_email, "decline")
        self._require_pending(status, "decline")

    # ── Cancel ─────────────────────────────────────────────────────

    def check_cancel(
        self,
        actor: ActorContext,
        *,
        owner_email: str,
        status: LeaveStatus,
        end_date: date,
        today: date,
    ) -> None:
        """Owner or admin may cancel a pending request, or any request
        whose end date is already behind *today*."""
        if not (actor.is_admin or self.is_owner(actor, owner_email)):
            raise ForbiddenException("You can only cancel your own leave requests.")

        if status == LeaveStatus.cancelled:
            raise InvalidTransitionException(status.value, "cancel")
        if status != LeaveStatus.pending and not end_date < today:
            raise InvalidTransitionException(LeaveStatus(status).value, "cancel")
