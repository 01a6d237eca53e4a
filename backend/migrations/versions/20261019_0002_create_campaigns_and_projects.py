from __future__ import annotations
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision = "20261019_0002"
down_revision = "20261019_0001"
branch_labels = None
depends_on = None

def _counters() -> list[sa.Column]:
    return [
        sa.Column("likes_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("shares_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("views_count", sa.Integer(), nullable=False, server_default="0"),
    ]

def upgrade() -> None:
    op.create_table(
        "campaigns",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("owner_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("campaign_type", sa.String(length=20), nullable=False, server_default="custom"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="draft"),
        sa.Column("funding_trail", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("prize_pool", sa.Numeric(15, 2), nullable=True),
        sa.Column("registration_start", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("registration_end", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("submission_start", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("submission_end", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("results_announcement_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("award_distribution_at", sa.TIMESTAMP(timezone=True), nullable=True),
        *_counters(),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint("likes_count >= 0 AND shares_count >= 0 AND views_count >= 0", name="ck_campaign_counters_non_negative"),
    )
    op.create_index("ix_campaigns_owner_id", "campaigns", ["owner_id"])

    op.create_table(
        "projects",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("owner_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        *_counters(),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint("likes_count >= 0 AND shares_count >= 0 AND views_count >= 0", name="ck_project_counters_non_negative"),
    )
    op.create_index("ix_projects_owner_id", "projects", ["owner_id"])

def downgrade() -> None:
    op.drop_index("ix_projects_owner_id", table_name="projects")
    op.drop_table("projects")
    op.drop_index("ix_campaigns_owner_id", table_name="campaigns")
    op.drop_table("campaigns")
