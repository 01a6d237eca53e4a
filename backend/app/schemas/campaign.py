from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Literal
from uuid import UUID
from datetime import datetime
from decimal import Decimal

CampaignStatus = Literal["draft", "active", "completed", "cancelled"]
CampaignType = Literal["custom", "mini"]
Phase = Literal["upcoming", "registration", "submission", "judging", "results", "ended", "cancelled"]

# (start, end) pairs that must be ordered when both are given
_WINDOWS = (
    ("registration_start", "registration_end"),
    ("submission_start", "submission_end"),
)

class CampaignWindows(BaseModel):
    registration_start: datetime | None = None
    registration_end: datetime | None = None
    submission_start: datetime | None = None
    submission_end: datetime | None = None
    results_announcement_at: datetime | None = None
    award_distribution_at: datetime | None = None

    @model_validator(mode="after")
    def windows_ordered(self):
        for start_field, end_field in _WINDOWS:
            start, end = getattr(self, start_field), getattr(self, end_field)
            if start and end and end <= start:
                raise ValueError(f"{end_field} must be after {start_field}")
        return self

class CampaignCreate(CampaignWindows):
    title: str = Field(min_length=3, max_length=255)
    description: str | None = None
    campaign_type: CampaignType = "custom"
    status: Literal["draft", "active"] = "draft"
    funding_trail: bool = True
    prize_pool: Decimal | None = Field(default=None, ge=0)

class CampaignUpdate(CampaignWindows):
    title: str | None = Field(default=None, min_length=3, max_length=255)
    description: str | None = None
    status: CampaignStatus | None = None
    funding_trail: bool | None = None
    prize_pool: Decimal | None = Field(default=None, ge=0)

class CampaignPublic(BaseModel):
    id: UUID
    owner_id: UUID
    title: str
    description: str | None
    campaign_type: CampaignType
    status: CampaignStatus
    funding_trail: bool
    prize_pool: Decimal | None = None
    registration_start: datetime | None = None
    registration_end: datetime | None = None
    submission_start: datetime | None = None
    submission_end: datetime | None = None
    results_announcement_at: datetime | None = None
    award_distribution_at: datetime | None = None
    likes_count: int
    shares_count: int
    views_count: int
    created_at: datetime
    is_owner: bool
    phase: Phase

class CampaignSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    status: CampaignStatus
    submission_start: datetime | None = None
    submission_end: datetime | None = None
    results_announcement_at: datetime | None = None
    award_distribution_at: datetime | None = None
