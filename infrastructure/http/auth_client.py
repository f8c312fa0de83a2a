from __future__ import annotations

import asyncio
import logging
from typing import Optional
from uuid import UUID

import aiohttp

from domain.errors import TransportFailureError
from domain.gateways import AuthorizationGateway

from .session import decode_json, validate_base_url, validate_token

logger = logging.getLogger(__name__)


class AuthorizationClient(AuthorizationGateway):
    """
    aiohttp client for the authorization service that links Discord accounts
    to game identities.

    Any non-200 answer or unreadable body is a refusal (None). Only a
    failure to reach the service is raised, as `TransportFailureError`.
    """

    def __init__(self, session: aiohttp.ClientSession, auth_url: str, auth_token: str) -> None:
        self._session = session
        self._auth_url = validate_base_url(auth_url, "AUTH_URL")
        self._auth_token = validate_token(auth_token, "AUTH_TOKEN")

    async def get_user_id_by_discord_id(self, discord_id: str) -> Optional[UUID]:
        url = f"{self._auth_url}/api/uuid"
        params = {"method": "discord", "id": discord_id}
        headers = {"Authorization": f"Bearer {self._auth_token}"}

        try:
            async with self._session.get(url, params=params, headers=headers) as response:
                status = response.status
                body = await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error("Connecting error in auth client. Check if auth service is up: %s", e)
            raise TransportFailureError(f"Authorization service unreachable: {e}") from e

        text = body.decode("utf-8", errors="replace")
        if status != 200:
            logger.warning(
                "Auth service refused discord id %s (status %s): %.200s",
                discord_id,
                status,
                _error_text(text),
            )
            return None

        payload = decode_json(text)
        try:
            return UUID(str(payload["uuid"]))
        except (ValueError, KeyError, TypeError) as e:
            logger.error("Error deserializing UUID response from auth service: %r (%.200r)", e, text)
            return None


def _error_text(text: str) -> str:
    payload = decode_json(text)
    if payload is None:
        return text or "<empty body>"
    if isinstance(payload, dict) and "error" in payload:
        return str(payload["error"])
    return text
