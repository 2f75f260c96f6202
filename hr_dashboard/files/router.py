"""Files router — the caller's OneDrive file register."""

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from hr_dashboard.auth.dependencies import get_current_actor
from hr_dashboard.common.rate_limit import WRITE_LIMIT, limiter
from hr_dashboard.database import get_db
from hr_dashboard.files.schemas import AgentFileCreate, AgentFileOut
from hr_dashboard.files.service import FileService
from hr_dashboard.leave.policy import ActorContext

router = APIRouter(prefix="", tags=["files"])


# ── GET /my-files ───────────────────────────────────────────────────

@router.get("/my-files", response_model=list[AgentFileOut])
async def my_files(
    actor: ActorContext = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """The caller's registered files, newest first."""
    return await FileService.list_my_files(db, actor)


# ── POST /upload ────────────────────────────────────────────────────

@router.post("/upload", response_model=AgentFileOut, status_code=201)
@limiter.limit(WRITE_LIMIT)
async def upload_file(
    request: Request,
    body: AgentFileCreate,
    actor: ActorContext = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """Register file metadata. The file itself must already be in OneDrive."""
    return await FileService.register(db, actor, body)


# ── DELETE /{id} ────────────────────────────────────────────────────

@router.delete("/{file_id}", status_code=204)
@limiter.limit(WRITE_LIMIT)
async def delete_file(
    request: Request,
    file_id: int,
    actor: ActorContext = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    await FileService.delete(db, actor, file_id)
    return Response(status_code=204)
