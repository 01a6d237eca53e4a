from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field, AnyHttpUrl, StringConstraints
from typing import Annotated, Literal
from uuid import UUID
from datetime import datetime
from decimal import Decimal

LetterGrade = Literal["A+", "A", "B+", "B", "C+", "C", "D", "F"]
GradedStatus = Literal["graded", "winner", "runner_up", "not_selected"]


class ProjectLinks(BaseModel):
    demo_url: AnyHttpUrl | None = None
    github_url: AnyHttpUrl | None = None
    files_url: AnyHttpUrl | None = None


class SubmissionCreate(BaseModel):
    project_title: Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=255)]
    project_description: Annotated[str, StringConstraints(strip_whitespace=True, min_length=10)]
    project_screenshots: list[AnyHttpUrl] = Field(min_length=1)
    project_links: ProjectLinks = Field(default_factory=ProjectLinks)
    pitch_deck_url: AnyHttpUrl | None = None


class GradeRequest(BaseModel):
    score: int = Field(ge=0, le=100)
    grade: LetterGrade
    feedback: str | None = None
    status: GradedStatus | None = None  # defaults to "graded"
    position: int | None = Field(default=None, ge=1, le=3)
    prize_amount: Decimal | None = Field(default=None, ge=0, max_digits=15, decimal_places=2)


class SubmissionPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    campaign_id: UUID
    user_id: UUID
    participation_id: UUID
    project_title: str
    project_description: str
    project_screenshots: list[str]
    project_links: dict = Field(default_factory=dict)
    pitch_deck_url: str | None = None
    status: str
    submission_date: datetime
    score: int | None = None
    grade: str | None = None
    feedback: str | None = None
    graded_by: UUID | None = None
    graded_at: datetime | None = None
    position: int | None = None
    prize_amount: Decimal | None = None
    prize_distributed: bool = False
    prize_distributed_at: datetime | None = None


class RankingRow(BaseModel):
    rank: int
    submission_id: UUID
    user_id: UUID
    username: str
    project_title: str
    status: str
    score: int | None = None
    grade: str | None = None
    position: int | None = None
    prize_amount: Decimal | None = None
