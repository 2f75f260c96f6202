"""Auth Pydantic v2 schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from hr_dashboard.employees.schemas import EmployeeOut


class MeResponse(BaseModel):
    """The caller's identity, admin flag and employee row (if any)."""

    model_config = ConfigDict(populate_by_name=True)

    email: str
    is_admin: bool = Field(..., alias="isAdmin")
    employee: Optional[EmployeeOut] = None
