from __future__ import annotations
import uuid
from datetime import datetime
from decimal import Decimal
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, Boolean, Numeric, DateTime, Text, Uuid, func, ForeignKey
from app.db import Base

class Campaign(Base):
    __tablename__ = "campaigns"
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text())
    campaign_type: Mapped[str] = mapped_column(String(20), nullable=False, default="custom")  # custom|mini
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft")  # draft|active|completed|cancelled
    # False for donation-only campaigns: nobody can apply
    funding_trail: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    prize_pool: Mapped[Decimal | None] = mapped_column(Numeric(15, 2))

    registration_start: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    registration_end: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    submission_start: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    submission_end: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    results_announcement_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    award_distribution_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    likes_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    shares_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    views_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
