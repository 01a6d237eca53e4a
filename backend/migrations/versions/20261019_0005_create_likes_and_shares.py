from __future__ import annotations
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision = "20261019_0005"
down_revision = "20261019_0004"
branch_labels = None
depends_on = None

# (table prefix, entity table, entity fk column)
ENTITIES = (
    ("campaign", "campaigns", "campaign_id"),
    ("project", "projects", "project_id"),
)

def upgrade() -> None:
    for prefix, entity_table, fk in ENTITIES:
        likes = f"{prefix}_likes"
        op.create_table(
            likes,
            sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
            sa.Column(fk, postgresql.UUID(as_uuid=True), sa.ForeignKey(f"{entity_table}.id", ondelete="CASCADE"), nullable=False),
            sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
            sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
        )
        op.create_index(f"ix_{likes}_{fk}", likes, [fk])
        op.create_index(f"ix_{likes}_user_id", likes, ["user_id"])
        op.create_unique_constraint(f"uq_{prefix}_like_once_per_user", likes, [fk, "user_id"])

        shares = f"{prefix}_shares"
        op.create_table(
            shares,
            sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
            sa.Column(fk, postgresql.UUID(as_uuid=True), sa.ForeignKey(f"{entity_table}.id", ondelete="CASCADE"), nullable=False),
            sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
            sa.Column("platform", sa.String(length=50), nullable=False, server_default="direct"),
            sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("now()"), nullable=False),
        )
        op.create_index(f"ix_{shares}_{fk}", shares, [fk])
        op.create_index(f"ix_{shares}_user_id", shares, ["user_id"])

def downgrade() -> None:
    for prefix, _, _ in reversed(ENTITIES):
        op.drop_table(f"{prefix}_shares")
        op.drop_table(f"{prefix}_likes")
