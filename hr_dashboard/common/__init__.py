"""Common module — shared utilities for the HR leave dashboard."""

from hr_dashboard.common.audit import AuditTrail, create_audit_entry
from hr_dashboard.common.constants import (
    DATE_FORMAT,
    AuditAction,
    HalfDay,
    LeaveStatus,
)
from hr_dashboard.common.exceptions import (
    AppException,
    BlockedDaysException,
    ConflictError,
    ForbiddenException,
    InvalidTransitionException,
    NotFoundException,
    UnauthorizedException,
    ValidationException,
    register_exception_handlers,
)

__all__ = [
    # Audit
    "AuditTrail",
    "create_audit_entry",
    # Constants / Enums
    "AuditAction",
    "HalfDay",
    "LeaveStatus",
    "DATE_FORMAT",
    # Exceptions
    "AppException",
    "BlockedDaysException",
    "ConflictError",
    "ForbiddenException",
    "InvalidTransitionException",
    "NotFoundException",
    "UnauthorizedException",
    "ValidationException",
    "register_exception_handlers",
]
