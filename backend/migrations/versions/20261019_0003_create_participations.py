from __future__ import annotations
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision = "20261019_0003"
down_revision = "20261019_0002"
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        "participations",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("campaign_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("motivation", sa.Text(), nullable=False),
        sa.Column("experience", sa.Text(), nullable=False),
        sa.Column("portfolio", sa.Text(), nullable=True),
        sa.Column("additional_info", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("submission_status", sa.String(length=20), nullable=False, server_default="not_submitted"),
        sa.Column("submitted_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("reviewed_by", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("reviewed_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("review_notes", sa.Text(), nullable=True),
        sa.CheckConstraint("status IN ('pending','approved','rejected')", name="ck_participation_status"),
    )
    op.create_index("ix_participations_campaign_id", "participations", ["campaign_id"])
    op.create_index("ix_participations_user_id", "participations", ["user_id"])
    op.create_unique_constraint("uq_participation_campaign_user", "participations", ["campaign_id", "user_id"])

def downgrade() -> None:
    op.drop_constraint("uq_participation_campaign_user", "participations", type_="unique")
    op.drop_index("ix_participations_user_id", table_name="participations")
    op.drop_index("ix_participations_campaign_id", table_name="participations")
    op.drop_table("participations")
