from __future__ import annotations
import uuid
from fastapi import APIRouter, Depends, Body
from sqlalchemy.ext.asyncio import AsyncSession
from app.db import get_session
from app.auth_deps import get_caller, get_optional_caller
from app.schemas.engagement import LikeState, ShareRequest, ShareState, ViewState
from app.services import engagement as engagement_svc
from app.services.permissions import Caller

def build_router(kind: str, prefix: str) -> APIRouter:
    """The like/share/view endpoints, identical for every engageable entity kind."""
    router = APIRouter(prefix=prefix, tags=["engagement"])

    @router.post("/{entity_id}/like", response_model=LikeState)
    async def toggle_like(
        entity_id: uuid.UUID,
        session: AsyncSession = Depends(get_session),
        caller: Caller = Depends(get_caller),
    ):
        return await engagement_svc.toggle_like(session, kind, entity_id, caller)

    @router.get("/{entity_id}/like-status", response_model=LikeState)
    async def like_status(
        entity_id: uuid.UUID,
        session: AsyncSession = Depends(get_session),
        caller: Caller | None = Depends(get_optional_caller),
    ):
        return await engagement_svc.like_status(session, kind, entity_id, caller)

    @router.post("/{entity_id}/share", response_model=ShareState)
    async def track_share(
        entity_id: uuid.UUID,
        payload: ShareRequest | None = Body(default=None),
        session: AsyncSession = Depends(get_session),
        caller: Caller | None = Depends(get_optional_caller),
    ):
        platform = payload.platform if payload else "direct"
        return await engagement_svc.track_share(session, kind, entity_id, caller, platform)

    @router.post("/{entity_id}/view", response_model=ViewState)
    async def track_view(entity_id: uuid.UUID, session: AsyncSession = Depends(get_session)):
        return await engagement_svc.track_view(session, kind, entity_id)

    return router

campaign_router = build_router("campaign", "/campaigns")
project_router = build_router("project", "/projects")
