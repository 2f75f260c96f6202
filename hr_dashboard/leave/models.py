"""Leave ORM models: LeaveEntitlement, LeaveRequest, BlockedDay."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hr_dashboard.common.constants import HalfDay, LeaveStatus
from hr_dashboard.database import Base

if TYPE_CHECKING:
    from hr_dashboard.employees.models import Employee


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class LeaveEntitlement(Base):
    __tablename__ = "leave_entitlements"
    __table_args__ = (
        sa.UniqueConstraint("employee_id", "year", name="uq_leave_entitlement"),
    )

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(
        sa.Integer, sa.ForeignKey("employees.id"), nullable=False
    )
    year: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    annual_allowance_days: Mapped[Decimal] = mapped_column(
        sa.Numeric(5, 1), nullable=False
    )
    carryover_days: Mapped[Decimal] = mapped_column(
        sa.Numeric(5, 1), nullable=False, server_default=sa.text("0")
    )

    # Relationships
    employee: Mapped[Employee] = relationship(
        back_populates="entitlements"
    )


class LeaveRequest(Base):
    __tablename__ = "leave_requests"
    __table_args__ = (
        sa.CheckConstraint("start_date <= end_date", name="ck_leave_request_range"),
        sa.Index("idx_leave_requests_employee", "employee_id"),
        sa.Index("idx_leave_requests_status", "status"),
    )

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(
        sa.Integer, sa.ForeignKey("employees.id"), nullable=False
    )
    start_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    end_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    start_half_day: Mapped[HalfDay] = mapped_column(
        sa.Enum(
            HalfDay,
            name="half_day",
            native_enum=False,
            values_callable=_enum_values,
            length=10,
        ),
        nullable=False,
        default=HalfDay.full,
    )
    end_half_day: Mapped[HalfDay] = mapped_column(
        sa.Enum(
            HalfDay,
            name="half_day",
            native_enum=False,
            values_callable=_enum_values,
            length=10,
        ),
        nullable=False,
        default=HalfDay.full,
    )
    days_requested: Mapped[Decimal] = mapped_column(sa.Numeric(5, 1), nullable=False)
    reason: Mapped[Optional[str]] = mapped_column(sa.Text)
    status: Mapped[LeaveStatus] = mapped_column(
        sa.Enum(
            LeaveStatus,
            name="leave_status",
            native_enum=False,
            values_callable=_enum_values,
            length=20,
        ),
        nullable=False,
        default=LeaveStatus.pending,
    )
    manager_notes: Mapped[Optional[str]] = mapped_column(sa.Text)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=_utcnow, server_default=sa.func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=_utcnow, server_default=sa.func.now()
    )

    # Relationships
    employee: Mapped[Employee] = relationship(
        back_populates="leave_requests"
    )


class BlockedDay(Base):
    __tablename__ = "blocked_days"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    blocked_date: Mapped[date] = mapped_column(sa.Date, unique=True, nullable=False)
    reason: Mapped[str] = mapped_column(sa.Text, nullable=False)
    created_by: Mapped[str] = mapped_column(sa.String(320), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=_utcnow, server_default=sa.func.now()
    )
