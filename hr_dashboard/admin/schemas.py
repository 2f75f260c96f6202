"""Admin Pydantic v2 schemas — entitlements, blocked days, leave calendar."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hr_dashboard.common.constants import HalfDay, LeaveStatus
from hr_dashboard.leave.dates import parse_iso_date
from hr_dashboard.leave.schemas import BlockedDayBrief


# ═════════════════════════════════════════════════════════════════════
# Entitlements
# ═════════════════════════════════════════════════════════════════════


class EntitlementUpsert(BaseModel):
    """Set one employee's allowance and carryover for a year."""

    employee_id: int
    year: int = Field(..., ge=1900, le=9999)
    annual_allowance_days: Decimal = Field(..., gt=0, max_digits=5, decimal_places=1)
    carryover_days: Decimal = Field(Decimal("0"), ge=0, max_digits=5, decimal_places=1)

    @field_validator("carryover_days", mode="before")
    @classmethod
    def null_carryover(cls, v: Any) -> Any:
        return Decimal("0") if v is None else v


# ═════════════════════════════════════════════════════════════════════
# Blocked days
# ═════════════════════════════════════════════════════════════════════


class BlockedDayCreate(BaseModel):
    blocked_date: dt.date = Field(..., description="YYYY-MM-DD")
    reason: str = Field(..., min_length=1, max_length=500)

    @field_validator("blocked_date", mode="before")
    @classmethod
    def iso_date(cls, v: Any) -> Any:
        return parse_iso_date(v) if isinstance(v, str) else v

    @field_validator("reason", mode="before")
    @classmethod
    def strip_reason(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v


class BlockedDayOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    blocked_date: dt.date
    reason: str
    created_by: str
    created_at: dt.datetime


# ═════════════════════════════════════════════════════════════════════
# Leave calendar
# ═════════════════════════════════════════════════════════════════════


class CalendarEntryOut(BaseModel):
    """One employee's leave on one calendar day."""

    request_id: int
    employee_id: int
    full_name: str
    status: LeaveStatus
    # am / pm when this day is a half-day boundary of the request
    half_day: Optional[HalfDay] = None


class CalendarDayOut(BaseModel):
    date: dt.date
    entries: list[CalendarEntryOut] = []


class LeaveCalendarOut(BaseModel):
    """Approved and pending leave for every day of a month."""

    year: int
    month: int
    days: list[CalendarDayOut]
    blocked_days: list[BlockedDayBrief]
