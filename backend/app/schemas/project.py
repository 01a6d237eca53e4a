from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field
from uuid import UUID
from datetime import datetime

class ProjectCreate(BaseModel):
    title: str = Field(min_length=3, max_length=255)
    description: str | None = None

class ProjectPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    owner_id: UUID
    title: str
    description: str | None
    likes_count: int
    shares_count: int
    views_count: int
    created_at: datetime
