"""Create EntityStore document table.

Revision ID: 001
Revises:
Create Date: 2026-10-17

Tables: entities
"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import JSONB

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create EntityStore table."""
    op.create_table(
        "entities",
        sa.Column("entity_type", sa.String(255), nullable=False),
        sa.Column("id", sa.Text, nullable=False),
        sa.Column("data", JSONB, nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("NOW()")),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), server_default=sa.text("NOW()")),
        sa.PrimaryKeyConstraint("entity_type", "id"),
    )
    op.create_index(
        "idx_entities_data",
        "entities",
        ["data"],
        postgresql_using="gin",
    )


def downgrade() -> None:
    """Drop EntityStore table."""
    op.drop_table("entities")
