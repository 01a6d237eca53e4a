from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Literal
from uuid import UUID

import structlog
from sqlalchemy import select, update, func, delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import Unauthenticated, NotFound
from app.models.campaign import Campaign
from app.models.project import Project
from app.models.engagement import CampaignLike, ProjectLike, CampaignShare, ProjectShare
from app.schemas.engagement import LikeState, ShareState, ViewState
from app.services.permissions import Caller

log = structlog.get_logger()

EntityKind = Literal["campaign", "project"]


@dataclass(frozen=True)
class EngagementTarget:
    model: Any
    like_model: Any
    share_model: Any
    fk: str  # name of the entity column on like/share rows

    def like_fk(self):
        return getattr(self.like_model, self.fk)


TARGETS: dict[str, EngagementTarget] = {
    "campaign": EngagementTarget(Campaign, CampaignLike, CampaignShare, "campaign_id"),
    "project": EngagementTarget(Project, ProjectLike, ProjectShare, "project_id"),
}


def target_for(kind: str) -> EngagementTarget:
    try:
        return TARGETS[kind]
    except KeyError:
        raise NotFound(f"Unknown entity type: {kind}")


async def _find_like(session: AsyncSession, t: EngagementTarget, entity_id: UUID, user_id: UUID):
    return await session.scalar(
        select(t.like_model).where(t.like_fk() == entity_id, t.like_model.user_id == user_id)
    )


async def _count_likes(session: AsyncSession, t: EngagementTarget, entity_id: UUID) -> int:
    n = await session.scalar(select(func.count()).select_from(t.like_model).where(t.like_fk() == entity_id))
    return int(n or 0)


async def like_status(session: AsyncSession, kind: EntityKind, entity_id: UUID, caller: Caller | None = None) -> LikeState:
    """Read-only: has the (optional) caller liked the entity, and the current counter."""
    t = target_for(kind)
    likes_count = await session.scalar(select(t.model.likes_count).where(t.model.id == entity_id))
    if likes_count is None:
        raise NotFound(f"{kind.capitalize()} not found")
    liked = False
    if caller is not None:
        liked = (await _find_like(session, t, entity_id, caller.user_id)) is not None
    return LikeState(liked=liked, likes_count=int(likes_count))


async def toggle_like(session: AsyncSession, kind: EntityKind, entity_id: UUID, caller: Caller | None) -> LikeState:
    """
    Like the entity if the caller has not, unlike it otherwise.

    The entity row is locked for the whole transaction, so toggles on the
    same entity apply one at a time, and likes_count is recomputed from the
    like rows instead of being incremented. An insert that still trips the
    (entity, user) unique constraint lost a race to an identical like: it
    is rolled back and answered with the current state.
    """
    if caller is None:
        raise Unauthenticated("Authentication required")
    t = target_for(kind)
    user_id = caller.user_id

    entity = await session.get(t.model, entity_id, with_for_update=True)
    if not entity:
        raise NotFound(f"{kind.capitalize()} not found")

    existing = await _find_like(session, t, entity_id, user_id)
    if existing is not None:
        await session.execute(delete(t.like_model).where(t.like_model.id == existing.id))
        liked = False
    else:
        session.add(t.like_model(**{t.fk: entity_id, "user_id": user_id}))
        try:
            await session.flush()
        except IntegrityError:
            await session.rollback()
            log.info("like_insert_race", entity=kind, entity_id=str(entity_id), user_id=str(user_id))
            return await like_status(session, kind, entity_id, caller)
        liked = True

    likes_count = await _count_likes(session, t, entity_id)
    await session.execute(update(t.model).where(t.model.id == entity_id).values(likes_count=likes_count))
    await session.commit()
    log.info("like_toggled", entity=kind, entity_id=str(entity_id), user_id=str(user_id), liked=liked, likes_count=likes_count)
    return LikeState(liked=liked, likes_count=likes_count)


async def _increment(session: AsyncSession, t: EngagementTarget, entity_id: UUID, column: str) -> int:
    col = getattr(t.model, column)
    res = await session.execute(update(t.model).where(t.model.id == entity_id).values({column: col + 1}))
    if res.rowcount == 0:
        await session.rollback()
        raise NotFound("Entity not found")
    value = await session.scalar(select(col).where(t.model.id == entity_id))
    await session.commit()
    return int(value)


async def _insert_share_row(session: AsyncSession, t: EngagementTarget, entity_id: UUID, user_id: UUID, platform: str) -> None:
    session.add(t.share_model(**{t.fk: entity_id, "user_id": user_id, "platform": platform}))
    await session.commit()


async def track_share(
    session: AsyncSession,
    kind: EntityKind,
    entity_id: UUID,
    caller: Caller | None = None,
    platform: str = "direct",
) -> ShareState:
    """
    Count a share of the entity.

    The counter is committed first and is the authoritative signal. The
    per-user detail row is analytics only: it is skipped for anonymous
    shares and a failure to store it is logged, never raised.
    """
    t = target_for(kind)
    shares_count = await _increment(session, t, entity_id, "shares_count")

    if caller is not None:
        try:
            await _insert_share_row(session, t, entity_id, caller.user_id, platform)
        except SQLAlchemyError as e:
            await session.rollback()
            log.warning(
                "share_detail_dropped",
                entity=kind,
                entity_id=str(entity_id),
                user_id=str(caller.user_id),
                platform=platform,
                error=e.__class__.__name__,
            )
    return ShareState(shares_count=shares_count)


async def track_view(session: AsyncSession, kind: EntityKind, entity_id: UUID) -> ViewState:
    """Count a view; views are not deduplicated per user."""
    t = target_for(kind)
    views_count = await _increment(session, t, entity_id, "views_count")
    return ViewState(views_count=views_count)
