"""Employee service — HR admin upsert by email, listing and lookup.

Employees are never hard-deleted; an upsert on an existing email updates
name, manager and folder in place.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hr_dashboard.common.audit import create_audit_entry
from hr_dashboard.common.constants import AuditAction
from hr_dashboard.common.exceptions import ConflictError
from hr_dashboard.employees.models import Employee
from hr_dashboard.employees.schemas import EmployeeOut, EmployeeUpsert
from hr_dashboard.leave.repository import EmployeeStore

logger = logging.getLogger(__name__)

_FIELDS = ("full_name", "manager_email", "onedrive_folder_url")


class EmployeeService:
    """Async employee operations."""

    @staticmethod
    async def list_employees(db: AsyncSession) -> list[EmployeeOut]:
        rows = await EmployeeStore.list_all(db)
        return [EmployeeOut.model_validate(e) for e in rows]

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> Optional[Employee]:
        return await EmployeeStore.get_by_email(db, email)

    @staticmethod
    async def upsert(
        db: AsyncSession,
        data: EmployeeUpsert,
        *,
        actor_email: str,
    ) -> tuple[EmployeeOut, bool]:
        """Create or update the employee with ``data.email``.

        Returns ``(employee, created)``.
        """
        employee = await EmployeeStore.get_by_email(db, data.email)
        new_values = data.model_dump(mode="json")

        if employee is None:
            employee = Employee(**data.model_dump())
            db.add(employee)
            try:
                await db.flush()
            except IntegrityError:
                await db.rollback()
                raise ConflictError("email", data.email)

            await create_audit_entry(
                db,
                action=AuditAction.create.value,
                entity_type="employee",
                entity_id=employee.id,
                actor_email=actor_email,
                new_values=new_values,
            )
            logger.info("Employee %s created by %s", employee.email, actor_email)
            return EmployeeOut.model_validate(employee), True

        old_values = {f: getattr(employee, f) for f in _FIELDS}
        for field in _FIELDS:
            setattr(employee, field, getattr(data, field))
        await db.flush()
        await db.refresh(employee)

        await create_audit_entry(
            db,
            action=AuditAction.update.value,
            entity_type="employee",
            entity_id=employee.id,
            actor_email=actor_email,
            old_values=old_values,
            new_values=new_values,
        )
        logger.info("Employee %s updated by %s", employee.email, actor_email)
        return EmployeeOut.model_validate(employee), False
