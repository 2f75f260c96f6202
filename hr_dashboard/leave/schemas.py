"""Leave Pydantic v2 schemas — request / response validation.

Naming conventions:
  - *Create / *Request  → request bodies (write)
  - *Out                → response bodies (read)
  - *Brief              → compact embedded representations

Request bodies coerce loosely-typed JSON into strict values here: blank
strings become ``None``, a missing or null half-day marker becomes
``full``, and dates must be ``YYYY-MM-DD``.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hr_dashboard.common.constants import HalfDay, LeaveStatus
from hr_dashboard.common.validators import blank_to_none
from hr_dashboard.leave.dates import parse_iso_date


def _strict_date(value: Any) -> Any:
    if isinstance(value, str):
        return parse_iso_date(value)
    return value


# ═════════════════════════════════════════════════════════════════════
# Leave Request: Create
# ═════════════════════════════════════════════════════════════════════


class LeaveRequestCreate(BaseModel):
    """Payload for submitting a leave request.

    ``days_requested`` is not accepted; it is always computed server-side.
    """

    start_date: date = Field(..., description="Leave start date (inclusive), YYYY-MM-DD")
    end_date: date = Field(..., description="Leave end date (inclusive), YYYY-MM-DD")
    start_half_day: HalfDay = Field(
        HalfDay.full,
        description="full | am | pm — pm means the morning of the first day is worked",
    )
    end_half_day: HalfDay = Field(
        HalfDay.full,
        description="full | am | pm — am means the afternoon of the last day is worked",
    )
    reason: Optional[str] = Field(None, max_length=1000)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def iso_dates(cls, v: Any) -> Any:
        return _strict_date(v)

    @field_validator("reason", mode="before")
    @classmethod
    def blank_reason(cls, v: Any) -> Any:
        return blank_to_none(v)

    @field_validator("start_half_day", "end_half_day", mode="before")
    @classmethod
    def default_half_day(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return HalfDay.full
        return v


# ═════════════════════════════════════════════════════════════════════
# Approve / Decline
# ═════════════════════════════════════════════════════════════════════


class LeaveApproveRequest(BaseModel):
    """Payload for approving a leave request."""

    notes: Optional[str] = Field(None, max_length=1000)
    admin_override: bool = Field(
        False, description="Admins only: approve despite blocked days in the range",
    )

    @field_validator("notes", mode="before")
    @classmethod
    def blank_notes(cls, v: Any) -> Any:
        return blank_to_none(v)

    @field_validator("admin_override", mode="before")
    @classmethod
    def null_override(cls, v: Any) -> Any:
        return False if v is None else v


class LeaveDeclineRequest(BaseModel):
    """Payload for declining a leave request."""

    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator("notes", mode="before")
    @classmethod
    def blank_notes(cls, v: Any) -> Any:
        return blank_to_none(v)


# ═════════════════════════════════════════════════════════════════════
# Leave Request: Response
# ═════════════════════════════════════════════════════════════════════


class LeaveRequestOut(BaseModel):
    """Full leave request response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    employee_id: int
    start_date: date
    end_date: date
    start_half_day: HalfDay
    end_half_day: HalfDay
    days_requested: float
    reason: Optional[str] = None
    status: LeaveStatus
    manager_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    # Enriched by service
    full_name: Optional[str] = None
    email: Optional[str] = None


class ConflictOut(BaseModel):
    """Another employee's approved leave overlapping a request."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    employee_id: int
    full_name: str
    email: str
    start_date: date
    end_date: date
    days_requested: float


class BlockedDayBrief(BaseModel):
    """Blocked day embedded in approval warnings."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    blocked_date: date
    reason: str


class PendingRequestOut(LeaveRequestOut):
    """Pending request annotated with fresh approval warnings."""

    conflicts: list[ConflictOut] = []
    blocked_days: list[BlockedDayBrief] = []


class LeaveWarningsOut(BaseModel):
    """Conflicts and blocked days for a single request."""

    request_id: int
    conflicts: list[ConflictOut]
    blocked_days: list[BlockedDayBrief]
    has_blocked_days: bool


# ═════════════════════════════════════════════════════════════════════
# Entitlement balance
# ═════════════════════════════════════════════════════════════════════


class EntitlementBalanceOut(BaseModel):
    """Allowance, carryover, taken and remaining days for one employee-year."""

    model_config = ConfigDict(from_attributes=True)

    employee_id: int
    email: str
    full_name: str
    year: int
    annual_allowance_days: float
    carryover_days: float
    total_allowance: float
    taken: float
    remaining: float
    entitlement_set: bool
