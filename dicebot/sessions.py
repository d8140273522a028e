"""Per-conversation session state: the remembered default die face."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dicebot.dice import validate_face
from dicebot.models import ConversationSession
from dicebot.schemas import Message

logger = logging.getLogger(__name__)


class NoActiveSession(LookupError):
    """Raised when a conversation has no session to update."""


def conversation_id_for(intent: str, msg: Message) -> str:
    """Direct messages are keyed by guild, channel messages by channel."""
    if intent == "direct":
        return f"direct:{msg.guild_id}"
    return f"guild:{msg.channel_id}"


async def get_session(db: AsyncSession, conversation_id: str) -> ConversationSession | None:
    result = await db.execute(
        select(ConversationSession).where(ConversationSession.conversation_id == conversation_id)
    )
    return result.scalar_one_or_none()


async def start_session(db: AsyncSession, conversation_id: str) -> ConversationSession:
    """Open a session, or reset the default face of an existing one."""
    session = await get_session(db, conversation_id)
    if session is None:
        session = ConversationSession(conversation_id=conversation_id)
        db.add(session)
    else:
        session.default_face = None
    await db.commit()
    logger.debug("Started session for %s", conversation_id)
    return session


async def end_session(db: AsyncSession, conversation_id: str) -> bool:
    """Delete the session. Returns False if there was none."""
    session = await get_session(db, conversation_id)
    if session is None:
        return False
    await db.delete(session)
    await db.commit()
    logger.debug("Ended session for %s", conversation_id)
    return True


async def set_default_face(
    db: AsyncSession, conversation_id: str, face: int
) -> ConversationSession:
    """Remember face as the conversation default.

    Raises:
        RangeError: If face is not a valid die.
        NoActiveSession: If the conversation has no session.
    """
    validate_face(face)
    session = await get_session(db, conversation_id)
    if session is None:
        raise NoActiveSession(conversation_id)
    session.default_face = face
    await db.commit()
    return session


async def get_default_face(db: AsyncSession, conversation_id: str) -> int | None:
    session = await get_session(db, conversation_id)
    if session is None:
        return None
    return session.default_face
