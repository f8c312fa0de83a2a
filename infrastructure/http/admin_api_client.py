from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, Union

import aiohttp

from domain.errors import RemoteRejectedError, TransportFailureError
from domain.gateways import AdminActionGateway
from domain.models import ActorContext, AdministrativeAction, BanAction, PardonAction

from .session import decode_json, validate_base_url, validate_token

logger = logging.getLogger(__name__)


def serialize_actor(actor: ActorContext) -> Dict[str, str]:
    return {"Guid": str(actor.identity), "Name": actor.display_name}


def serialize_ban(action: BanAction) -> Dict[str, Any]:
    """
    Request body for `POST /admin/actions/ban`.

    Field names and casing are a wire contract with the game server.
    """

    return {
        "Username": action.target_login,
        "PlayerGuid": str(action.target_id),
        "Reason": action.reason,
        "Minutes": action.minutes,
        "Severity": action.severity,
        "Actor": serialize_actor(action.actor),
    }


def serialize_pardon(action: PardonAction) -> Dict[str, Any]:
    """Request body for `POST /admin/actions/pardon`. Never names a player."""

    return {
        "BanId": action.ban_id,
        "Actor": serialize_actor(action.actor),
    }


def parse_error_response(
    status: int,
    body: bytes,
) -> Union[RemoteRejectedError, TransportFailureError]:
    """
    Classify a non-200 answer from the administrative API.

    Parsing is attempted in a fixed order:
    1. The business envelope `{"Message", "ErrorCode", "Exception"?}`
       becomes a `RemoteRejectedError`.
    2. Anything else becomes a `TransportFailureError` carrying the status
       and the raw body.
    """

    text = body.decode("utf-8", errors="replace")

    payload = decode_json(text)

    if isinstance(payload, dict):
        message = payload.get("Message")
        code = payload.get("ErrorCode")
        if isinstance(message, str) and isinstance(code, int) and not isinstance(code, bool):
            exception = payload.get("Exception")
            inner_message = None
            if isinstance(exception, dict) and exception.get("Message") is not None:
                inner_message = str(exception["Message"])
            return RemoteRejectedError(message, code, inner_message)

    if text:
        return TransportFailureError("Invalid error response from game server", status, text)
    return TransportFailureError("Unknown error occurred at game server", status)


class AdminApiClient(AdminActionGateway):
    """
    Relays bans and pardons to the game server's administrative API.

    The actor is attributed twice: inside the JSON body and in an `Actor`
    header, which the server logs even for requests it rejects. Each call
    issues exactly one request; nothing is retried here.
    """

    def __init__(self, session: aiohttp.ClientSession, api_url: str, api_key: str) -> None:
        self._session = session
        self._api_url = validate_base_url(api_url, "SS14_API_URL")
        self._api_key = validate_token(api_key, "SS14_API_TOKEN")

    async def ban(self, action: BanAction) -> None:
        await self._post("/admin/actions/ban", serialize_ban(action), action.actor)

    async def pardon(self, action: PardonAction) -> None:
        await self._post("/admin/actions/pardon", serialize_pardon(action), action.actor)

    async def relay(self, action: AdministrativeAction) -> None:
        if isinstance(action, BanAction):
            await self.ban(action)
        elif isinstance(action, PardonAction):
            await self.pardon(action)
        else:
            raise TypeError(f"Unsupported administrative action: {type(action).__name__}")

    async def _post(self, path: str, body: Dict[str, Any], actor: ActorContext) -> None:
        headers = {
            "Authorization": f"SS14Token {self._api_key}",
            "Actor": json.dumps(serialize_actor(actor)),
            "Content-Type": "application/json",
        }
        url = f"{self._api_url}{path}"

        try:
            async with self._session.post(url, data=json.dumps(body), headers=headers) as response:
                status = response.status
                raw = await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error("Request to %s failed: %s", url, e)
            raise TransportFailureError(f"Game server unreachable: {e}") from e

        if status == 200:
            return

        error = parse_error_response(status, raw)
        logger.warning("Game server answered %s for %s: %s", status, path, error)
        raise error
