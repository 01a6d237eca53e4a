from __future__ import annotations
import uuid
from datetime import datetime, timezone as dt_tz
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
import structlog
from app.db import get_session
from app.auth_deps import get_caller, get_optional_caller
from app.errors import Forbidden, ValidationFailed
from app.models.campaign import Campaign
from app.schemas.campaign import CampaignCreate, CampaignUpdate, CampaignPublic, CampaignSummary
from app.schemas.participation import ParticipationCreate, ParticipationPublic, ParticipationStatusView
from app.schemas.submission import SubmissionCreate, SubmissionPublic, RankingRow
from app.services import participation as participation_svc
from app.services import submissions as submission_svc
from app.services.grading import rankings as compute_rankings
from app.services.permissions import Caller, can_manage_campaign
from app.services.time_windows import campaign_phase, ensure_utc

router = APIRouter(prefix="/campaigns", tags=["campaigns"])
log = structlog.get_logger()

# Roles allowed to launch campaigns
CREATOR_ROLES = ("creator", "admin")

def to_public(ch: Campaign, caller: Caller | None) -> CampaignPublic:
    now = datetime.now(dt_tz.utc)
    return CampaignPublic(
        id=ch.id, owner_id=ch.owner_id, title=ch.title, description=ch.description,
        campaign_type=ch.campaign_type, status=ch.status, funding_trail=ch.funding_trail,
        prize_pool=ch.prize_pool,
        registration_start=ch.registration_start, registration_end=ch.registration_end,
        submission_start=ch.submission_start, submission_end=ch.submission_end,
        results_announcement_at=ch.results_announcement_at, award_distribution_at=ch.award_distribution_at,
        likes_count=ch.likes_count, shares_count=ch.shares_count, views_count=ch.views_count,
        created_at=ch.created_at,
        is_owner=bool(caller and ch.owner_id == caller.user_id),
        phase=campaign_phase(ch, now),
    )

@router.post("", response_model=CampaignPublic, status_code=201)
async def create_campaign(
    payload: CampaignCreate,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
):
    if caller.role not in CREATOR_ROLES:
        raise Forbidden("Only creators can launch campaigns")
    ch = Campaign(owner_id=caller.user_id, **payload.model_dump())
    session.add(ch)
    await session.commit()
    await session.refresh(ch)
    log.info("campaign_created", campaign_id=str(ch.id), owner_id=str(caller.user_id), status=ch.status)
    return to_public(ch, caller)

@router.get("/{campaign_id}", response_model=CampaignPublic)
async def get_campaign(
    campaign_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    caller: Caller | None = Depends(get_optional_caller),
):
    ch = await participation_svc.get_campaign_or_404(session, campaign_id)
    return to_public(ch, caller)

@router.patch("/{campaign_id}", response_model=CampaignPublic)
async def update_campaign(
    campaign_id: uuid.UUID,
    payload: CampaignUpdate,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
):
    ch = await participation_svc.get_campaign_or_404(session, campaign_id, for_update=True)
    if not can_manage_campaign(caller, ch):
        raise Forbidden("Only the campaign creator or an admin can update it")
    changes = payload.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(ch, field, value)
    # A partial update can still invert a window against stored values
    for start_field, end_field in (("registration_start", "registration_end"), ("submission_start", "submission_end")):
        start, end = getattr(ch, start_field), getattr(ch, end_field)
        if start and end and ensure_utc(end) <= ensure_utc(start):
            await session.rollback()
            raise ValidationFailed(f"{end_field} must be after {start_field}")
    await session.commit()
    await session.refresh(ch)
    log.info("campaign_updated", campaign_id=str(ch.id), fields=sorted(changes))
    return to_public(ch, caller)

@router.post("/{campaign_id}/participate", response_model=ParticipationPublic, status_code=201)
async def participate(
    campaign_id: uuid.UUID,
    payload: ParticipationCreate,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
):
    p = await participation_svc.apply(session, caller, campaign_id, payload)
    return ParticipationPublic.model_validate(p)

@router.get("/{campaign_id}/participations", response_model=list[ParticipationPublic])
async def list_participations(
    campaign_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
):
    rows = await participation_svc.list_for_campaign(session, caller, campaign_id)
    return [ParticipationPublic.model_validate(p) for p in rows]

@router.get("/{campaign_id}/participation-status", response_model=ParticipationStatusView)
async def participation_status(
    campaign_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
):
    ch = await participation_svc.get_campaign_or_404(session, campaign_id)
    p = await participation_svc.participation_for(session, ch.id, caller.user_id)
    return ParticipationStatusView(
        campaign=CampaignSummary.model_validate(ch),
        participation=ParticipationPublic.model_validate(p) if p else None,
    )

@router.post("/{campaign_id}/submit", response_model=SubmissionPublic, status_code=201)
async def submit_project(
    campaign_id: uuid.UUID,
    payload: SubmissionCreate,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
):
    sub = await submission_svc.submit(session, caller, campaign_id, payload)
    return SubmissionPublic.model_validate(sub)

@router.get("/{campaign_id}/submissions", response_model=list[SubmissionPublic])
async def list_submissions(
    campaign_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
):
    rows = await submission_svc.list_for_campaign(session, caller, campaign_id)
    return [SubmissionPublic.model_validate(s) for s in rows]

@router.get("/{campaign_id}/rankings", response_model=list[RankingRow])
async def rankings(
    campaign_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    caller: Caller = Depends(get_caller),
):
    return await compute_rankings(session, caller, campaign_id)
