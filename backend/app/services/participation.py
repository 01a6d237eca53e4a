from __future__ import annotations
from datetime import datetime, timezone as dt_tz
from typing import Callable
from uuid import UUID

import structlog
from sqlalchemy import select, exists
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import Forbidden, NotFound, InvalidState, Conflict
from app.models.campaign import Campaign
from app.models.participation import Participation
from app.models.submission import Submission
from app.schemas.participation import ParticipationCreate, ReviewRequest
from app.services.permissions import Caller, is_participant_role, is_verified, can_review, can_manage_campaign

log = structlog.get_logger()

Authorizer = Callable[[Caller, Campaign], bool]


async def get_campaign_or_404(session: AsyncSession, campaign_id: UUID, *, for_update: bool = False) -> Campaign:
    ch = await session.get(Campaign, campaign_id, with_for_update=for_update)
    if not ch:
        raise NotFound("Campaign not found")
    return ch


async def _already_applied(session: AsyncSession, campaign_id: UUID, user_id: UUID) -> bool:
    return bool(await session.scalar(
        select(exists().where(Participation.campaign_id == campaign_id, Participation.user_id == user_id))
    ))


async def apply(
    session: AsyncSession,
    caller: Caller,
    campaign_id: UUID,
    payload: ParticipationCreate,
    *,
    now: datetime | None = None,
) -> Participation:
    """Register the caller's interest in a campaign as a pending participation."""
    if not is_participant_role(caller):
        raise Forbidden("Only students can participate in campaigns")
    if not is_verified(caller):
        raise Forbidden("Student verification required to participate in campaigns", code="verification_required")

    ch = await get_campaign_or_404(session, campaign_id)
    if ch.status != "active":
        raise InvalidState("Campaign is not active", code="campaign_not_active")
    if not ch.funding_trail:
        raise InvalidState("Campaign does not allow participation", code="participation_disabled")

    if await _already_applied(session, ch.id, caller.user_id):
        raise Conflict("You have already applied to this campaign")

    now = now or datetime.now(dt_tz.utc)
    p = Participation(
        campaign_id=ch.id,
        user_id=caller.user_id,
        motivation=payload.motivation,
        experience=payload.experience,
        portfolio=payload.portfolio,
        additional_info=payload.additional_info,
        status="pending",
        submission_status="not_submitted",
        submitted_at=now,
    )
    session.add(p)
    try:
        await session.commit()
    except IntegrityError:
        # Lost the race against a concurrent apply for the same (campaign, user)
        await session.rollback()
        raise Conflict("You have already applied to this campaign")
    await session.refresh(p)
    log.info("participation_applied", participation_id=str(p.id), campaign_id=str(campaign_id), user_id=str(caller.user_id))
    return p


async def review(
    session: AsyncSession,
    caller: Caller,
    participation_id: UUID,
    payload: ReviewRequest,
    *,
    authorize: Authorizer = can_review,
    now: datetime | None = None,
) -> Participation:
    """
    Approve or reject a participation.

    Repeating the same decision is harmless and re-review overwrites the
    previous decision, except that an approval cannot be revoked once the
    participant has submitted work against it.
    """
    p = await session.get(Participation, participation_id, with_for_update=True)
    if not p:
        raise NotFound("Participation not found")
    ch = await get_campaign_or_404(session, p.campaign_id)
    if not authorize(caller, ch):
        raise Forbidden("Only campaign creators and admins can review participations")

    if p.status == "approved" and payload.status == "rejected":
        has_submission = await session.scalar(
            select(exists().where(Submission.participation_id == p.id))
        )
        if has_submission:
            raise InvalidState("Approval cannot be revoked after a submission was made", code="approval_locked")

    previous = p.status
    p.status = payload.status
    p.review_notes = payload.review_notes
    p.reviewed_at = now or datetime.now(dt_tz.utc)
    p.reviewed_by = caller.user_id
    await session.commit()
    await session.refresh(p)
    log.info(
        "participation_reviewed",
        participation_id=str(p.id),
        previous=previous,
        status=p.status,
        reviewer_id=str(caller.user_id),
    )
    return p


async def participation_for(session: AsyncSession, campaign_id: UUID, user_id: UUID) -> Participation | None:
    return await session.scalar(
        select(Participation).where(Participation.campaign_id == campaign_id, Participation.user_id == user_id)
    )


async def list_for_campaign(session: AsyncSession, caller: Caller, campaign_id: UUID) -> list[Participation]:
    ch = await get_campaign_or_404(session, campaign_id)
    if not can_manage_campaign(caller, ch):
        raise Forbidden("Only campaign creators and admins can view participations")
    rows = await session.execute(
        select(Participation)
        .where(Participation.campaign_id == ch.id)
        .order_by(Participation.submitted_at.desc())
    )
    return list(rows.scalars().all())
