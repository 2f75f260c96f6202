"""Agent file Pydantic v2 schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hr_dashboard.common.validators import blank_to_none


class AgentFileCreate(BaseModel):
    """Register a file already uploaded to the employee's OneDrive folder."""

    filename: str = Field(..., min_length=1, max_length=255)
    file_description: Optional[str] = Field(None, max_length=1000)
    onedrive_file_url: str
    file_size_bytes: Optional[int] = Field(None, ge=0)
    file_type: Optional[str] = Field(None, max_length=100)

    @field_validator("filename", mode="before")
    @classmethod
    def strip_filename(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("file_description", "file_type", mode="before")
    @classmethod
    def optional_text(cls, v: Any) -> Any:
        return blank_to_none(v)

    @field_validator("onedrive_file_url")
    @classmethod
    def http_url(cls, v: str) -> str:
        v = v.strip()
        if not v.lower().startswith(("http://", "https://")):
            raise ValueError("onedrive_file_url must be an http(s) URL.")
        return v


class AgentFileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    employee_id: int
    filename: str
    file_description: Optional[str] = None
    onedrive_file_url: str
    file_size_bytes: Optional[int] = None
    file_type: Optional[str] = None
    uploaded_at: datetime
