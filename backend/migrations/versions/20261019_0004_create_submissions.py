from __future__ import annotations
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision = "20261019_0004"
down_revision = "20261019_0003"
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        "submissions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("campaign_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("campaigns.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("participation_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("participations.id", ondelete="CASCADE"), nullable=False),
        sa.Column("project_title", sa.String(length=255), nullable=False),
        sa.Column("project_description", sa.Text(), nullable=False),
        sa.Column("project_screenshots", postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("project_links", postgresql.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("pitch_deck_url", sa.String(length=500), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="submitted"),
        sa.Column("submission_date", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("score", sa.Integer(), nullable=True),
        sa.Column("grade", sa.String(length=10), nullable=True),
        sa.Column("feedback", sa.Text(), nullable=True),
        sa.Column("graded_by", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("graded_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("position", sa.Integer(), nullable=True),
        sa.Column("prize_amount", sa.Numeric(15, 2), nullable=True),
        sa.Column("prize_distributed", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("prize_distributed_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.CheckConstraint("score IS NULL OR (score >= 0 AND score <= 100)", name="ck_submission_score_range"),
        sa.CheckConstraint("position IS NULL OR position BETWEEN 1 AND 3", name="ck_submission_position_range"),
        sa.CheckConstraint("prize_amount IS NULL OR prize_amount >= 0", name="ck_submission_prize_non_negative"),
        sa.CheckConstraint(
            "status IN ('submitted','under_review','graded','winner','runner_up','not_selected')",
            name="ck_submission_status",
        ),
    )
    op.create_index("ix_submissions_campaign_id", "submissions", ["campaign_id"])
    op.create_index("ix_submissions_user_id", "submissions", ["user_id"])
    op.create_index("ix_submissions_status", "submissions", ["status"])
    op.create_unique_constraint("uq_submission_one_per_participation", "submissions", ["participation_id"])

def downgrade() -> None:
    op.drop_constraint("uq_submission_one_per_participation", "submissions", type_="unique")
    op.drop_index("ix_submissions_status", table_name="submissions")
    op.drop_index("ix_submissions_user_id", table_name="submissions")
    op.drop_index("ix_submissions_campaign_id", table_name="submissions")
    op.drop_table("submissions")
