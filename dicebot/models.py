"""SQLAlchemy ORM models for dice bot conversation state."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from dicebot.database import Base

# ---------------------------------------------------------------------------
# Timestamp mixin
# ---------------------------------------------------------------------------


class TimestampMixin:
    """Adds created_at and updated_at columns to any model."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class ConversationSession(TimestampMixin, Base):
    """Per-conversation state opened by ``.start`` and cleared by ``.end``.

    ``conversation_id`` is ``direct:<guild_id>`` for direct messages and
    ``guild:<channel_id>`` for channel messages.
    """

    __tablename__ = "conversation_sessions"
    __table_args__ = (
        CheckConstraint(
            "default_face IS NULL OR (default_face >= 4 AND default_face <= 100)",
            name="ck_conversation_sessions_default_face",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    conversation_id: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    default_face: Mapped[int | None] = mapped_column(Integer, nullable=True)
