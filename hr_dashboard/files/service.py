"""Agent file service — metadata only; the bytes stay in OneDrive."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hr_dashboard.common.audit import create_audit_entry
from hr_dashboard.common.constants import AuditAction
from hr_dashboard.common.exceptions import NotFoundException
from hr_dashboard.employees.models import Employee
from hr_dashboard.files.models import AgentFile
from hr_dashboard.files.schemas import AgentFileCreate, AgentFileOut
from hr_dashboard.leave.policy import ActorContext
from hr_dashboard.leave.repository import EmployeeStore

logger = logging.getLogger(__name__)


class FileService:
    """Async operations on the caller's registered files."""

    @staticmethod
    async def _require_employee(db: AsyncSession, actor: ActorContext) -> Employee:
        employee = await EmployeeStore.get_by_email(db, actor.email)
        if employee is None:
            raise NotFoundException("Employee", actor.email)
        return employee

    @staticmethod
    async def list_my_files(db: AsyncSession, actor: ActorContext) -> list[AgentFileOut]:
        employee = await FileService._require_employee(db, actor)
        result = await db.execute(
            select(AgentFile)
            .where(AgentFile.employee_id == employee.id)
            .order_by(AgentFile.uploaded_at.desc(), AgentFile.id.desc())
        )
        return [AgentFileOut.model_validate(f) for f in result.scalars().all()]

    @staticmethod
    async def register(
        db: AsyncSession,
        actor: ActorContext,
        data: AgentFileCreate,
    ) -> AgentFileOut:
        employee = await FileService._require_employee(db, actor)
        row = AgentFile(employee_id=employee.id, **data.model_dump())
        db.add(row)
        await db.flush()

        await create_audit_entry(
            db,
            action=AuditAction.create.value,
            entity_type="agent_file",
            entity_id=row.id,
            actor_email=actor.email,
            new_values=data.model_dump(mode="json"),
        )
        logger.info("File %s registered by %s", row.id, actor.email)
        return AgentFileOut.model_validate(row)

    @staticmethod
    async def delete(db: AsyncSession, actor: ActorContext, file_id: int) -> None:
        """Delete a file record owned by the caller (admins: any file).

        Someone else's file is reported as not found.
        """
        query = select(AgentFile).where(AgentFile.id == file_id)
        if not actor.is_admin:
            employee = await FileService._require_employee(db, actor)
            query = query.where(AgentFile.employee_id == employee.id)

        row = (await db.execute(query)).scalars().first()
        if row is None:
            raise NotFoundException("AgentFile", file_id)

        old_values = {
            "employee_id": row.employee_id,
            "filename": row.filename,
            "onedrive_file_url": row.onedrive_file_url,
        }
        await db.delete(row)
        await db.flush()

        await create_audit_entry(
            db,
            action=AuditAction.delete.value,
            entity_type="agent_file",
            entity_id=file_id,
            actor_email=actor.email,
            old_values=old_values,
        )
        logger.info("File %s deleted by %s", file_id, actor.email)
