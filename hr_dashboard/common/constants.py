"""Enums and constants for the HR leave dashboard.

Enum values are persisted verbatim and read by the UI and reports.
"""

from __future__ import annotations

import enum


# ── Leave ───────────────────────────────────────────────────────────

class LeaveStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    declined = "declined"
    cancelled = "cancelled"


class HalfDay(str, enum.Enum):
    """Boundary marker for the first or last day of a leave request."""

    full = "full"
    am = "am"
    pm = "pm"


# ── Audit actions ───────────────────────────────────────────────────

class AuditAction(str, enum.Enum):
    create = "create"
    update = "update"
    delete = "delete"
    approve = "approve"
    decline = "decline"
    cancel = "cancel"


# ── Misc constants ──────────────────────────────────────────────────

DATE_FORMAT = "%Y-%m-%d"
HALF_DAY = "0.5"
ONE_DAY = "1"
