"""Create audit log table.

Revision ID: 002
Revises: 001
Create Date: 2026-10-17

Tables: audit_logs (append-only)
"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import JSONB

revision = "002"
down_revision = "001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create audit_logs table."""
    op.create_table(
        "audit_logs",
        sa.Column("id", sa.BigInteger, sa.Identity(), primary_key=True),
        sa.Column("acted_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("actor", sa.Text, nullable=False),
        sa.Column("action", sa.String(16), nullable=False),
        sa.Column("before", JSONB),
        sa.Column("after", JSONB),
        sa.Column("entity_id", sa.Text, nullable=False),
        sa.Column("acted_on", sa.String(255), nullable=False),
        sa.Column("action_key", sa.String(255), nullable=False),
        sa.CheckConstraint(
            "action IN ('INSERT_ONE', 'INSERT_MANY', 'UPDATE_ONE', "
            "'UPDATE_MANY', 'DELETE_ONE', 'DELETE_MANY')",
            name="ck_audit_logs_action",
        ),
    )
    op.create_index("idx_audit_logs_entity", "audit_logs", ["acted_on", "entity_id"])
    op.create_index("idx_audit_logs_action_key", "audit_logs", ["action_key"])
    op.create_index(
        "idx_audit_logs_acted_at",
        "audit_logs",
        [sa.text("acted_at DESC")],
    )


def downgrade() -> None:
    """Drop audit_logs table."""
    op.drop_table("audit_logs")
