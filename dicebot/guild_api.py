"""Guild platform OpenAPI client used to deliver bot replies.

When no app ID or token is configured, all send calls are no-ops logged at
DEBUG level, so the bot can run locally without platform credentials.
"""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from dicebot.config import settings
from dicebot.schemas import MessageToCreate

logger = logging.getLogger(__name__)


class GuildApi(Protocol):
    """Interface for posting replies to the platform."""

    async def post_message(self, channel_id: str, reply: MessageToCreate) -> None:
        """Post a reply into a guild channel."""
        ...

    async def post_direct_message(self, guild_id: str, reply: MessageToCreate) -> None:
        """Post a reply into a direct-message conversation."""
        ...


class NoOpGuildApi:
    """No-op client used when credentials are missing."""

    async def post_message(self, channel_id: str, reply: MessageToCreate) -> None:
        logger.debug(
            "Guild API disabled, skipping reply to channel %s: %s", channel_id, reply.content
        )

    async def post_direct_message(self, guild_id: str, reply: MessageToCreate) -> None:
        logger.debug("Guild API disabled, skipping direct reply to %s: %s", guild_id, reply.content)


class HttpGuildApi:
    """httpx-backed OpenAPI client.

    Args:
        app_id: Bot application ID.
        token: Bot token.
        base_url: OpenAPI root, production or sandbox.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport, used by tests.
    """

    def __init__(
        self,
        app_id: str,
        token: str,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._headers = {"Authorization": f"Bot {app_id}.{token}"}
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport

    async def _post(self, path: str, reply: MessageToCreate) -> None:
        async with httpx.AsyncClient(
            base_url=self._base_url,
            headers=self._headers,
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            resp = await client.post(path, json=reply.model_dump(exclude_none=True))
            resp.raise_for_status()
        logger.debug("Posted reply to %s", path)

    async def post_message(self, channel_id: str, reply: MessageToCreate) -> None:
        """Post to ``/channels/{channel_id}/messages``.

        Raises:
            httpx.HTTPStatusError: On a non-2xx response.
        """
        await self._post(f"/channels/{channel_id}/messages", reply)

    async def post_direct_message(self, guild_id: str, reply: MessageToCreate) -> None:
        """Post to ``/dms/{guild_id}/messages``.

        Raises:
            httpx.HTTPStatusError: On a non-2xx response.
        """
        await self._post(f"/dms/{guild_id}/messages", reply)


def get_guild_api() -> NoOpGuildApi | HttpGuildApi:
    """Return the configured guild API client.

    Returns a :class:`NoOpGuildApi` when credentials are missing, otherwise an
    :class:`HttpGuildApi` pointed at the sandbox or production OpenAPI.
    """
    if not settings.qq_bot_appid or not settings.qq_bot_token:
        return NoOpGuildApi()
    base_url = settings.sandbox_api_base_url if settings.qq_bot_sandbox else settings.api_base_url
    return HttpGuildApi(
        app_id=settings.qq_bot_appid,
        token=settings.qq_bot_token,
        base_url=base_url,
        timeout=settings.api_timeout_seconds,
    )
