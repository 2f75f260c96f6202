"""Auth router — current actor profile."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hr_dashboard.auth.dependencies import get_current_actor
from hr_dashboard.auth.schemas import MeResponse
from hr_dashboard.database import get_db
from hr_dashboard.employees.schemas import EmployeeOut
from hr_dashboard.employees.service import EmployeeService
from hr_dashboard.leave.policy import ActorContext

router = APIRouter(prefix="", tags=["auth"])


# ── GET /me ─────────────────────────────────────────────────────────

@router.get("/me", response_model=MeResponse)
async def me(
    actor: ActorContext = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """Return the caller's email, admin flag and employee record.

    ``employee`` is null for callers who are not on the employee list yet.
    """
    employee = await EmployeeService.get_by_email(db, actor.email)
    return MeResponse(
        email=actor.email,
        is_admin=actor.is_admin,
        employee=EmployeeOut.model_validate(employee) if employee else None,
    )
