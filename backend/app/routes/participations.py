from __future__ import annotations
import uuid
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.db import get_session
from app.auth_deps import get_caller
from app.schemas.participation import ReviewRequest, ParticipationPublic
from app.services.participation import review
from app.services.permissions import Caller

router = APIRouter(prefix="/participations", tags=["participations"])

@router.put("/{participation_id}/review", response_model=ParticipationPublic)
async def review_participation(
    participation_id: uuid.UUID,
    payload: ReviewRequest,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
):
    p = await review(session, caller, participation_id, payload)
    return ParticipationPublic.model_validate(p)
