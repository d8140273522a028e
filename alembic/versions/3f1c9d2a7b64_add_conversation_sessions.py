"""Add conversation_sessions table.

Revision ID: 3f1c9d2a7b64
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1c9d2a7b64"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "conversation_sessions",
        sa.Column("id", sa.Integer(), nullable=False, primary_key=True),
        sa.Column("conversation_id", sa.String(100), nullable=False, unique=True),
        sa.Column("default_face", sa.Integer(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.CheckConstraint(
            "default_face IS NULL OR (default_face >= 4 AND default_face <= 100)",
            name="ck_conversation_sessions_default_face",
        ),
    )


def downgrade() -> None:
    op.drop_table("conversation_sessions")
