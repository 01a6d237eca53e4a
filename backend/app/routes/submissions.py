from __future__ import annotations
import uuid
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.db import get_session
from app.auth_deps import get_caller
from app.schemas.submission import GradeRequest, SubmissionPublic
from app.services import submissions as submission_svc
from app.services.grading import grade
from app.services.permissions import Caller

router = APIRouter(prefix="/submissions", tags=["submissions"])

# Declared before /{submission_id} so "user" is never parsed as an id
@router.get("/user/{user_id}", response_model=list[SubmissionPublic])
async def user_submissions(
    user_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
):
    rows = await submission_svc.list_for_user(session, caller, user_id)
    return [SubmissionPublic.model_validate(s) for s in rows]

@router.get("/{submission_id}", response_model=SubmissionPublic)
async def get_submission(
    submission_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
):
    sub = await submission_svc.get_submission(session, caller, submission_id)
    return SubmissionPublic.model_validate(sub)

@router.put("/{submission_id}/grade", response_model=SubmissionPublic)
async def grade_submission(
    submission_id: uuid.UUID,
    payload: GradeRequest,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
):
    sub = await grade(session, caller, submission_id, payload)
    return SubmissionPublic.model_validate(sub)
