"""Command dispatch for received guild and direct messages.

Recognized commands, shown with the default ``.`` prefix:

    .r[amount]d[face][+n-n...]   roll dice, e.g. .r3d6+2 or .rd
    .start                       open a session for this conversation
    .set [d]<face>               remember a default face for .rd
    .end                         close the session

Dice errors are user-facing: their message becomes the reply text.
"""

from __future__ import annotations

import logging
import re

from sqlalchemy.ext.asyncio import AsyncSession

from dicebot.config import settings
from dicebot.dice import DiceError, format_roll_result, parse_face, parse_roll_options, roll
from dicebot.schemas import Message, MessageToCreate
from dicebot.sessions import (
    NoActiveSession,
    conversation_id_for,
    end_session,
    get_default_face,
    set_default_face,
    start_session,
)

logger = logging.getLogger(__name__)

_MENTION_RE = re.compile(r"^(?:\s*<@!?\d+>)+\s*")
_SET_RE = re.compile(r"set\s*d?(?P<face>\d+)", re.ASCII)


def strip_mentions(content: str) -> str:
    """Drop leading ``<@!id>`` mentions that channel messages carry."""
    return _MENTION_RE.sub("", content).strip()


def build_roll_reply(msg_id: str, command: str, default_face: int | None = None) -> MessageToCreate:
    """Roll command and wrap the formatted result, or the error, as a reply."""
    reply = MessageToCreate(msg_id=msg_id)
    try:
        options = parse_roll_options(command, default_face)
        reply.content = format_roll_result(roll(options))
    except DiceError as exc:
        reply.content = str(exc)
    return reply


async def handle_message(db: AsyncSession, intent: str, msg: Message) -> MessageToCreate | None:
    """Return the reply for msg, or None if it is not a bot command.

    Args:
        db: Session used for conversation state.
        intent: "direct" or "guild".
        msg: The received message.
    """
    if msg.author.bot:
        return None

    text = strip_mentions(msg.content)
    prefix = settings.command_prefix
    if not text.startswith(prefix):
        return None
    command = text[len(prefix) :].strip()
    conversation_id = conversation_id_for(intent, msg)

    if command.startswith("r"):
        default_face = await get_default_face(db, conversation_id)
        return build_roll_reply(msg.id, command, default_face)

    if command == "start":
        await start_session(db, conversation_id)
        return MessageToCreate(msg_id=msg.id, content="session started")

    if command == "end":
        ended = await end_session(db, conversation_id)
        content = "session ended" if ended else "no active session"
        return MessageToCreate(msg_id=msg.id, content=content)

    if command.startswith("set"):
        m = _SET_RE.fullmatch(command)
        if not m:
            return MessageToCreate(msg_id=msg.id, content=f"usage: {prefix}set d<face>")
        try:
            face = parse_face(m.group("face"))
            await set_default_face(db, conversation_id, face)
        except DiceError as exc:
            return MessageToCreate(msg_id=msg.id, content=str(exc))
        except NoActiveSession:
            return MessageToCreate(
                msg_id=msg.id, content=f"no active session, send {prefix}start first"
            )
        return MessageToCreate(msg_id=msg.id, content=f"default die set to D{face}")

    logger.debug("Ignoring unknown command %r in %s", command, conversation_id)
    return None
