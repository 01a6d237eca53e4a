from __future__ import annotations
import uuid
from datetime import datetime
from decimal import Decimal
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text, Integer, Boolean, Numeric, DateTime, Uuid, ForeignKey, UniqueConstraint, func
from app.db import Base, JSONType


class Submission(Base):
    __tablename__ = "submissions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    campaign_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("campaigns.id", ondelete="CASCADE"), index=True, nullable=False
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )
    participation_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("participations.id", ondelete="CASCADE"), nullable=False
    )

    project_title: Mapped[str] = mapped_column(String(255), nullable=False)
    project_description: Mapped[str] = mapped_column(Text(), nullable=False)
    project_screenshots: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    project_links: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)  # demo_url|github_url|files_url
    pitch_deck_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="submitted", index=True)
    submission_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    score: Mapped[int | None] = mapped_column(Integer, nullable=True)  # 0..100
    grade: Mapped[str | None] = mapped_column(String(10), nullable=True)
    feedback: Mapped[str | None] = mapped_column(Text(), nullable=True)
    graded_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    graded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    position: Mapped[int | None] = mapped_column(Integer, nullable=True)  # 1st/2nd/3rd
    prize_amount: Mapped[Decimal | None] = mapped_column(Numeric(15, 2), nullable=True)
    prize_distributed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    prize_distributed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("participation_id", name="uq_submission_one_per_participation"),
    )
