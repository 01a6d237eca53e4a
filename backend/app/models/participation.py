from __future__ import annotations
import uuid
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, DateTime, Uuid, ForeignKey, UniqueConstraint, func
from app.db import Base


class Participation(Base):
    __tablename__ = "participations"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    campaign_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("campaigns.id", ondelete="CASCADE"), index=True, nullable=False
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )

    motivation: Mapped[str] = mapped_column(Text(), nullable=False)
    experience: Mapped[str] = mapped_column(Text(), nullable=False)
    portfolio: Mapped[str | None] = mapped_column(Text(), nullable=True)
    additional_info: Mapped[str | None] = mapped_column(Text(), nullable=True)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")  # pending|approved|rejected
    # Mirrors the submission's status; only written by the submission/grading services
    submission_status: Mapped[str] = mapped_column(String(20), nullable=False, default="not_submitted")
    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    reviewed_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    review_notes: Mapped[str | None] = mapped_column(Text(), nullable=True)

    __table_args__ = (
        UniqueConstraint("campaign_id", "user_id", name="uq_participation_campaign_user"),
    )
