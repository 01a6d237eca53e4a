from __future__ import annotations
from datetime import datetime, timezone as dt_tz
from uuid import UUID

import structlog
from sqlalchemy import select, exists
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import Forbidden, NotFound, InvalidState, Conflict
from app.models.participation import Participation
from app.models.submission import Submission
from app.schemas.submission import SubmissionCreate
from app.services.participation import get_campaign_or_404
from app.services.permissions import Caller, is_participant_role, can_manage_campaign, can_view_submission
from app.services.status_sync import propagate_submission_status
from app.services.time_windows import submission_window_state

log = structlog.get_logger()


async def _already_submitted(session: AsyncSession, participation_id: UUID) -> bool:
    return bool(await session.scalar(select(exists().where(Submission.participation_id == participation_id))))


async def submit(
    session: AsyncSession,
    caller: Caller,
    campaign_id: UUID,
    payload: SubmissionCreate,
    *,
    now: datetime | None = None,
) -> Submission:
    """
    Create the single submission of an approved participant.

    The window check is inclusive on both edges. The submission and the
    participation's mirrored status are committed together.
    """
    if not is_participant_role(caller):
        raise Forbidden("Only students can submit projects for campaigns")

    ch = await get_campaign_or_404(session, campaign_id)

    now = now or datetime.now(dt_tz.utc)
    state = submission_window_state(ch, now)
    if state == "before":
        raise InvalidState("Submission period has not started yet", code="window_not_open")
    if state == "after":
        raise InvalidState("Submission period has ended", code="window_closed")

    # Row lock serializes concurrent submits of the same participant
    participation = await session.scalar(
        select(Participation)
        .where(
            Participation.campaign_id == ch.id,
            Participation.user_id == caller.user_id,
            Participation.status == "approved",
        )
        .with_for_update()
    )
    if not participation:
        raise Forbidden("You must have an approved participation to submit a project", code="not_approved")

    if await _already_submitted(session, participation.id):
        raise Conflict("You have already submitted a project for this campaign")

    links = payload.project_links.model_dump(mode="json", exclude_none=True)
    sub = Submission(
        campaign_id=ch.id,
        user_id=caller.user_id,
        participation_id=participation.id,
        project_title=payload.project_title,
        project_description=payload.project_description,
        project_screenshots=[str(u) for u in payload.project_screenshots],
        project_links=links,
        pitch_deck_url=str(payload.pitch_deck_url) if payload.pitch_deck_url else None,
        status="submitted",
        submission_date=now,
    )
    session.add(sub)
    propagate_submission_status(participation, sub)
    try:
        await session.commit()
    except IntegrityError:
        # Lost the race against a concurrent submit for the same participation
        await session.rollback()
        raise Conflict("You have already submitted a project for this campaign")
    await session.refresh(sub)
    log.info(
        "submission_created",
        submission_id=str(sub.id),
        participation_id=str(sub.participation_id),
        campaign_id=str(campaign_id),
        user_id=str(caller.user_id),
    )
    return sub


async def get_submission(session: AsyncSession, caller: Caller, submission_id: UUID) -> Submission:
    sub = await session.get(Submission, submission_id)
    if not sub:
        raise NotFound("Submission not found")
    ch = await get_campaign_or_404(session, sub.campaign_id)
    if not can_view_submission(caller, sub, ch):
        raise Forbidden("Access denied")
    return sub


async def list_for_campaign(session: AsyncSession, caller: Caller, campaign_id: UUID) -> list[Submission]:
    ch = await get_campaign_or_404(session, campaign_id)
    if not can_manage_campaign(caller, ch):
        raise Forbidden("Only campaign creators and admins can view submissions")
    rows = await session.execute(
        select(Submission).where(Submission.campaign_id == ch.id).order_by(Submission.submission_date.desc())
    )
    return list(rows.scalars().all())


async def list_for_user(session: AsyncSession, caller: Caller, user_id: UUID) -> list[Submission]:
    if user_id != caller.user_id and not caller.is_admin:
        raise Forbidden("Access denied")
    rows = await session.execute(
        select(Submission).where(Submission.user_id == user_id).order_by(Submission.submission_date.desc())
    )
    return list(rows.scalars().all())
