"""Pydantic models for guild platform events and outgoing messages.

Incoming models allow extra fields so a message can be written to the
message log exactly as the platform delivered it.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field

# Gateway opcodes used by the webhook.
OP_DISPATCH = 0
OP_HTTP_CALLBACK_ACK = 12
OP_CALLBACK_VALIDATION = 13

# Platform ids become message log file names, so only these characters pass.
Snowflake = Annotated[str, Field(pattern=r"^[A-Za-z0-9_-]+$", max_length=64)]
OptionalSnowflake = Annotated[str, Field(pattern=r"^[A-Za-z0-9_-]*$", max_length=64)]


class Author(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Snowflake
    username: str | None = None
    bot: bool = False


class Message(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Snowflake
    content: str = ""
    channel_id: OptionalSnowflake = ""
    guild_id: OptionalSnowflake = ""
    author: Author
    timestamp: str | None = None


class MessageToCreate(BaseModel):
    content: str | None = None
    msg_id: str | None = None


class EventPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    op: int
    d: dict[str, Any] | None = None
    s: int | None = None
    t: str | None = None
    id: str | None = None


class CallbackValidation(BaseModel):
    """The ``d`` of an op 13 request: sign ``event_ts + plain_token``."""

    plain_token: str
    event_ts: str
