"""Write every received platform message to disk as JSON."""

from __future__ import annotations

import logging
from pathlib import Path

from dicebot.config import settings
from dicebot.schemas import Message

logger = logging.getLogger(__name__)


class UnsafeLogPath(ValueError):
    """Raised when message ids would place a log file outside the log directory."""


def message_log_path(log_dir: Path, intent: str, msg: Message) -> Path:
    """Return ``<log_dir>/<intent>/<guild>-<channel>-<author>-<id>.json``.

    Raises:
        UnsafeLogPath: If the resolved path is not inside ``<log_dir>/<intent>``.
    """
    name = f"{msg.guild_id}-{msg.channel_id}-{msg.author.id}-{msg.id}.json"
    path = log_dir / intent / name
    if path.resolve().parent != (log_dir / intent).resolve():
        raise UnsafeLogPath(f"refusing to log message {msg.id!r} outside {log_dir}")
    return path


def save_message(intent: str, msg: Message, log_dir: Path | None = None) -> Path:
    """Serialize msg to its log file, creating directories as needed.

    Args:
        intent: "direct" or "guild".
        msg: The message as received, including any extra platform fields.
        log_dir: Root directory; defaults to ``settings.log_dir``.

    Returns:
        Path of the written file.
    """
    root = Path(log_dir if log_dir is not None else settings.log_dir)
    path = message_log_path(root, intent, msg)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(msg.model_dump_json(), encoding="utf-8")
    logger.debug("Saved %s message %s to %s", intent, msg.id, path)
    return path
