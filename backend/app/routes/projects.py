from __future__ import annotations
import uuid
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
import structlog
from app.db import get_session
from app.auth_deps import get_caller
from app.errors import NotFound
from app.models.project import Project
from app.schemas.project import ProjectCreate, ProjectPublic
from app.services.permissions import Caller

router = APIRouter(prefix="/projects", tags=["projects"])
log = structlog.get_logger()

@router.post("", response_model=ProjectPublic, status_code=201)
async def create_project(
    payload: ProjectCreate,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
):
    project = Project(owner_id=caller.user_id, title=payload.title, description=payload.description)
    session.add(project)
    await session.commit()
    await session.refresh(project)
    log.info("project_created", project_id=str(project.id), owner_id=str(caller.user_id))
    return ProjectPublic.model_validate(project)

@router.get("/{project_id}", response_model=ProjectPublic)
async def get_project(project_id: uuid.UUID, session: AsyncSession = Depends(get_session)):
    project = await session.get(Project, project_id)
    if not project:
        raise NotFound("Project not found")
    return ProjectPublic.model_validate(project)
