from __future__ import annotations

from typing import Optional, Protocol
from uuid import UUID

from .models import BanAction, PardonAction


class AuthorizationGateway(Protocol):
    """
    Maps a chat-platform account to the game identity it is linked to.
    """

    async def get_user_id_by_discord_id(self, discord_id: str) -> Optional[UUID]:
        """
        Return the linked identity, or None when the service refuses or its
        answer cannot be parsed.

        Raises `TransportFailureError` when the service cannot be reached.
        """

        ...


class PlayerLookupGateway(Protocol):
    """Authoritative login -> identifier lookup used when the store misses."""

    async def lookup_user_id_by_login(self, login: str) -> Optional[UUID]:
        ...


class AdminActionGateway(Protocol):
    """
    Delivers administrative actions to the game server.

    Both methods return None on success and raise `RemoteRejectedError` or
    `TransportFailureError` otherwise.
    """

    async def ban(self, action: BanAction) -> None:
        ...

    async def pardon(self, action: PardonAction) -> None:
        ...
