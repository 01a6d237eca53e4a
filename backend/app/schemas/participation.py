from __future__ import annotations
from pydantic import BaseModel, ConfigDict, StringConstraints
from typing import Annotated, Literal
from uuid import UUID
from datetime import datetime
from app.schemas.campaign import CampaignSummary

ParticipationStatus = Literal["pending", "approved", "rejected"]
SubmissionStatus = Literal["not_submitted", "submitted", "under_review", "graded", "winner", "runner_up", "not_selected"]

LongText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=10, max_length=1000)]

class ParticipationCreate(BaseModel):
    motivation: LongText
    experience: LongText
    portfolio: Annotated[str, StringConstraints(strip_whitespace=True, max_length=500)] | None = None
    additional_info: Annotated[str, StringConstraints(strip_whitespace=True, max_length=1000)] | None = None

class ReviewRequest(BaseModel):
    status: Literal["approved", "rejected"]
    review_notes: Annotated[str, StringConstraints(strip_whitespace=True, max_length=500)] | None = None

class ParticipationPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    campaign_id: UUID
    user_id: UUID
    motivation: str
    experience: str
    portfolio: str | None = None
    additional_info: str | None = None
    status: ParticipationStatus
    submission_status: SubmissionStatus
    submitted_at: datetime
    reviewed_by: UUID | None = None
    reviewed_at: datetime | None = None
    review_notes: str | None = None

class ParticipationStatusView(BaseModel):
    campaign: CampaignSummary
    participation: ParticipationPublic | None = None
