from __future__ import annotations
from pydantic import BaseModel, Field

class LikeState(BaseModel):
    liked: bool
    likes_count: int

class ShareRequest(BaseModel):
    platform: str = Field(default="direct", min_length=1, max_length=50)

class ShareState(BaseModel):
    shares_count: int

class ViewState(BaseModel):
    views_count: int
