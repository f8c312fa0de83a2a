from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from domain.errors import TransportFailureError, UnauthorizedError
from domain.gateways import AuthorizationGateway, PlayerLookupGateway
from domain.models import ActorContext
from domain.repositories import PlayerRepository

logger = logging.getLogger(__name__)


async def resolve_player(
    login: str,
    player_repo: PlayerRepository,
    lookup_gateway: PlayerLookupGateway,
) -> Optional[UUID]:
    """
    Resolve an in-game login to its player identifier.

    The local store is only an accelerator: a miss or a store error both
    fall through to the authoritative lookup service, which is called at
    most once. Failures of that service are reported as absence, so the
    caller only ever sees an identifier or None.
    """

    try:
        user_id = await player_repo.get_user_id_by_login(login)
    except Exception:
        logger.warning("Player store lookup failed for %s, using fallback", login, exc_info=True)
        user_id = None

    if user_id is not None:
        return user_id

    try:
        return await lookup_gateway.lookup_user_id_by_login(login)
    except Exception as e:
        logger.error("Fallback lookup for %s failed: %r", login, e)
        return None


async def resolve_admin(
    discord_id: str,
    auth_gateway: AuthorizationGateway,
    player_repo: PlayerRepository,
) -> ActorContext:
    """
    Turn a Discord account into the actor recorded by the game server.

    Steps run in order and stop at the first failure:
    - Ask the authorization service for the linked identity. A refusal or
      an unreadable answer means the caller is not entitled to act.
    - Look up the in-game login for that identity. Without one the action
      cannot be attributed, which is treated the same as a refusal.

    Raises `UnauthorizedError` for both of the above, and
    `TransportFailureError` when either upstream is unavailable.
    """

    identity = await auth_gateway.get_user_id_by_discord_id(discord_id)
    if identity is None:
        raise UnauthorizedError(f"Discord account {discord_id} is not linked to an admin identity.")

    try:
        display_name = await player_repo.get_login_by_user_id(identity)
    except Exception as e:
        logger.exception("Player store lookup failed for admin %s", identity)
        raise TransportFailureError(f"Player store unavailable: {e}") from e

    if not display_name or not display_name.strip():
        raise UnauthorizedError(f"Unable to attribute the action: no login known for {identity}.")

    return ActorContext(identity=identity, display_name=display_name)
