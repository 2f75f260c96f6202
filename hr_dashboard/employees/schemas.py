"""Employee Pydantic v2 schemas — request / response validation."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from hr_dashboard.common.validators import blank_to_none


class EmployeeUpsert(BaseModel):
    """HR admin create-or-update, keyed by email."""

    email: EmailStr
    full_name: str = Field(..., min_length=1, max_length=200)
    manager_email: Optional[EmailStr] = None
    onedrive_folder_url: Optional[str] = None

    @field_validator("email", "manager_email", mode="before")
    @classmethod
    def normalise_email(cls, v: Any) -> Any:
        v = blank_to_none(v)
        return v.lower() if isinstance(v, str) else v

    @field_validator("full_name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("onedrive_folder_url", mode="before")
    @classmethod
    def http_url(cls, v: Any) -> Any:
        v = blank_to_none(v)
        if v is not None and not str(v).lower().startswith(("http://", "https://")):
            raise ValueError("onedrive_folder_url must be an http(s) URL.")
        return v


class EmployeeOut(BaseModel):
    """Employee row as returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    full_name: str
    manager_email: Optional[str] = None
    onedrive_folder_url: Optional[str] = None
    created_at: datetime
