"""Webhook receiving guild platform callback events."""

from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, Depends, Header, HTTPException
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from dicebot.bot import handle_message
from dicebot.config import settings
from dicebot.database import get_db
from dicebot.guild_api import GuildApi, get_guild_api
from dicebot.message_log import save_message
from dicebot.schemas import (
    OP_CALLBACK_VALIDATION,
    OP_DISPATCH,
    OP_HTTP_CALLBACK_ACK,
    CallbackValidation,
    EventPayload,
    Message,
)
from dicebot.signing import sign_callback_validation, verify_signature

logger = logging.getLogger(__name__)

router = APIRouter()

# Dispatch event type -> message log intent.
_MESSAGE_EVENTS: dict[str, str] = {
    "DIRECT_MESSAGE_CREATE": "direct",
    "MESSAGE_CREATE": "guild",
    "AT_MESSAGE_CREATE": "guild",
}


def _ack() -> JSONResponse:
    return JSONResponse({"op": OP_HTTP_CALLBACK_ACK})


def _validation_response(payload: EventPayload) -> JSONResponse:
    """Answer the op 13 handshake that enables the callback URL."""
    if not settings.qq_bot_secret:
        raise HTTPException(status_code=503, detail="Callback secret not configured")
    try:
        validation = CallbackValidation.model_validate(payload.d or {})
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail="Malformed validation event") from exc
    signature = sign_callback_validation(
        settings.qq_bot_secret, validation.event_ts, validation.plain_token
    )
    return JSONResponse({"plain_token": validation.plain_token, "signature": signature})


async def _check_signature(request: Request, signature: str | None, timestamp: str | None) -> None:
    """Reject callbacks not signed with the bot secret.

    Without a configured secret, checks are skipped outside production so the
    bot can be driven locally; in production the webhook refuses to run.
    """
    if not settings.qq_bot_secret:
        if settings.environment == "production":
            raise HTTPException(status_code=503, detail="Callback secret not configured")
        logger.debug("Callback secret not configured, skipping signature check")
        return
    if not signature or not timestamp:
        raise HTTPException(status_code=401, detail="Missing callback signature")
    body = await request.body()
    if not verify_signature(settings.qq_bot_secret, timestamp, body, signature):
        raise HTTPException(status_code=401, detail="Invalid callback signature")


@router.get("/health")
async def health() -> JSONResponse:
    return JSONResponse({"status": "ok"})


@router.post("/events")
async def receive_event(
    payload: EventPayload,
    request: Request,
    db: AsyncSession = Depends(get_db),
    guild_api: GuildApi = Depends(get_guild_api),
    x_signature: str | None = Header(default=None, alias="X-Signature-Ed25519"),
    x_signature_timestamp: str | None = Header(default=None, alias="X-Signature-Timestamp"),
) -> JSONResponse:
    """Validate, log, dispatch and answer a single platform event.

    Op 13 is the callback URL handshake. Every other request must carry a valid
    signature. Non-message events are acknowledged and ignored. A failed reply
    delivery is logged; the platform still receives its ack so it does not
    redeliver.
    """
    if payload.op == OP_CALLBACK_VALIDATION:
        return _validation_response(payload)

    await _check_signature(request, x_signature, x_signature_timestamp)

    intent = _MESSAGE_EVENTS.get(payload.t or "")
    if payload.op != OP_DISPATCH or intent is None or payload.d is None:
        logger.debug("Ignoring event op=%s t=%s", payload.op, payload.t)
        return _ack()

    try:
        msg = Message.model_validate(payload.d)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail="Malformed message event") from exc

    logger.info("Received %s message %s", intent, msg.id)
    save_message(intent, msg)

    reply = await handle_message(db, intent, msg)
    if reply is None:
        return _ack()

    try:
        if intent == "direct":
            await guild_api.post_direct_message(msg.guild_id, reply)
        else:
            await guild_api.post_message(msg.channel_id, reply)
    except httpx.HTTPError:
        logger.exception("Failed to deliver reply to %s message %s", intent, msg.id)
    return _ack()
