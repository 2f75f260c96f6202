"""Employee ORM model.

``manager_email`` is a value back-reference to another employee's email,
matched at query time; it is deliberately not a foreign key, so a manager
can be recorded before (or without) having an employee row.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hr_dashboard.database import Base

if TYPE_CHECKING:
    from hr_dashboard.files.models import AgentFile
    from hr_dashboard.leave.models import LeaveEntitlement, LeaveRequest


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Employee(Base):
    __tablename__ = "employees"
    __table_args__ = (sa.Index("idx_employees_manager", "manager_email"),)

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(sa.String(320), unique=True, nullable=False)
    full_name: Mapped[str] = mapped_column(sa.String(200), nullable=False)
    manager_email: Mapped[Optional[str]] = mapped_column(sa.String(320))
    onedrive_folder_url: Mapped[Optional[str]] = mapped_column(sa.Text)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=_utcnow, server_default=sa.func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
        server_default=sa.func.now(),
    )

    # ── Relationships ───────────────────────────────────────────────
    leave_requests: Mapped[list[LeaveRequest]] = relationship(
        back_populates="employee",
    )
    entitlements: Mapped[list[LeaveEntitlement]] = relationship(
        back_populates="employee",
    )
    files: Mapped[list[AgentFile]] = relationship(back_populates="employee")

    def __repr__(self) -> str:
        return f"<Employee {self.email!r}>"
