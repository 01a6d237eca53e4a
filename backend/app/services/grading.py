from __future__ import annotations
from datetime import datetime, timezone as dt_tz
from typing import Callable
from uuid import UUID

import structlog
from sqlalchemy import select, case
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import Forbidden, NotFound, InvalidState
from app.models.campaign import Campaign
from app.models.participation import Participation
from app.models.submission import Submission
from app.models.user import User
from app.schemas.submission import GradeRequest, RankingRow
from app.services.participation import get_campaign_or_404
from app.services.permissions import Caller, can_grade, can_manage_campaign
from app.services.status_sync import propagate_submission_status
from app.services.time_windows import ensure_utc

log = structlog.get_logger()

# Statuses that mean a grader has looked at the submission
GRADED_STATUSES = ("graded", "winner", "runner_up", "not_selected")
PODIUM_STATUSES = ("winner", "runner_up")


async def grade(
    session: AsyncSession,
    caller: Caller,
    submission_id: UUID,
    payload: GradeRequest,
    *,
    authorize: Callable[[Caller, Campaign], bool] = can_grade,
    now: datetime | None = None,
) -> Submission:
    """
    Score a submission and push its new status onto the participation.

    The submission row is re-read under lock so two graders acting at once
    apply their updates one after the other. Any grader-supplied status
    overwrites the current one. Moving a submission off the podium without
    naming a new position clears its old position and prize.
    """
    sub = await session.get(Submission, submission_id, with_for_update=True, populate_existing=True)
    if not sub:
        raise NotFound("Submission not found")
    ch = await get_campaign_or_404(session, sub.campaign_id)
    if not authorize(caller, ch):
        raise Forbidden("Only campaign creators and admins can grade submissions")

    participation = await session.get(Participation, sub.participation_id, with_for_update=True)

    sub.score = payload.score
    sub.grade = payload.grade
    sub.feedback = payload.feedback
    sub.status = payload.status or "graded"
    if payload.position is not None:
        sub.position = payload.position
    if payload.prize_amount is not None:
        sub.prize_amount = payload.prize_amount
    if sub.status not in PODIUM_STATUSES:
        if payload.position is None:
            sub.position = None
        if payload.prize_amount is None:
            sub.prize_amount = None
    sub.graded_by = caller.user_id
    sub.graded_at = now or datetime.now(dt_tz.utc)

    if participation is not None:
        propagate_submission_status(participation, sub)

    await session.commit()
    await session.refresh(sub)
    log.info(
        "submission_graded",
        submission_id=str(sub.id),
        campaign_id=str(sub.campaign_id),
        status=sub.status,
        score=sub.score,
        position=sub.position,
        grader_id=str(caller.user_id),
    )
    return sub


async def rankings(
    session: AsyncSession,
    caller: Caller,
    campaign_id: UUID,
    *,
    now: datetime | None = None,
) -> list[RankingRow]:
    """
    Graded submissions of a campaign, best first.

    Podium positions come first (1, 2, 3), then everyone else by score,
    earlier submissions winning ties. Participants only see the table once
    results have been announced.
    """
    ch = await get_campaign_or_404(session, campaign_id)
    if not can_manage_campaign(caller, ch):
        now = now or datetime.now(dt_tz.utc)
        announced = ensure_utc(ch.results_announcement_at)
        if announced is None or ensure_utc(now) < announced:
            raise InvalidState("Results have not been announced yet", code="results_not_announced")

    q = (
        select(Submission, User.username)
        .join(User, User.id == Submission.user_id)
        .where(Submission.campaign_id == ch.id, Submission.status.in_(GRADED_STATUSES))
        .order_by(
            case((Submission.position.is_(None), 1), else_=0),
            Submission.position.asc(),
            case((Submission.score.is_(None), 1), else_=0),
            Submission.score.desc(),
            Submission.submission_date.asc(),
        )
    )
    rows = (await session.execute(q)).all()
    return [
        RankingRow(
            rank=idx,
            submission_id=s.id,
            user_id=s.user_id,
            username=uname,
            project_title=s.project_title,
            status=s.status,
            score=s.score,
            grade=s.grade,
            position=s.position,
            prize_amount=s.prize_amount,
        )
        for idx, (s, uname) in enumerate(rows, start=1)
    ]
