from __future__ import annotations

import asyncio
import logging
from typing import Optional
from uuid import UUID

import aiohttp

from domain.errors import TransportFailureError
from domain.gateways import PlayerLookupGateway

from .session import decode_json, validate_base_url

logger = logging.getLogger(__name__)

DEFAULT_LOOKUP_URL = "https://auth.spacestation14.com"


class PlayerLookupClient(PlayerLookupGateway):
    """
    Queries the public account service for the identifier behind a login.

    A body with `userId` is a hit; anything else is "not found".
    """

    def __init__(self, session: aiohttp.ClientSession, base_url: str = DEFAULT_LOOKUP_URL) -> None:
        self._session = session
        self._base_url = validate_base_url(base_url, "PLAYER_LOOKUP_URL")

    async def lookup_user_id_by_login(self, login: str) -> Optional[UUID]:
        url = f"{self._base_url}/api/query/name"
        try:
            async with self._session.get(url, params={"name": login}) as response:
                status = response.status
                body = await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportFailureError(f"Player lookup service unreachable: {e}") from e

        payload = decode_json(body)
        try:
            return UUID(str(payload["userId"]))
        except (ValueError, KeyError, TypeError):
            logger.debug("Lookup for %s found nothing (status %s)", login, status)
            return None
