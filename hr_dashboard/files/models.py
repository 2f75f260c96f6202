"""Agent file metadata. The files themselves live in OneDrive."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hr_dashboard.database import Base

if TYPE_CHECKING:
    from hr_dashboard.employees.models import Employee


class AgentFile(Base):
    __tablename__ = "agent_files"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(
        sa.Integer, sa.ForeignKey("employees.id"), nullable=False, index=True
    )
    filename: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    file_description: Mapped[Optional[str]] = mapped_column(sa.Text)
    onedrive_file_url: Mapped[str] = mapped_column(sa.Text, nullable=False)
    file_size_bytes: Mapped[Optional[int]] = mapped_column(sa.BigInteger)
    file_type: Mapped[Optional[str]] = mapped_column(sa.String(100))
    uploaded_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=sa.func.now(),
    )

    employee: Mapped[Employee] = relationship(
        back_populates="files"
    )
