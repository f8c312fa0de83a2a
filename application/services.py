from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional
from uuid import UUID

from domain.errors import (
    ConfigurationError,
    RemoteRejectedError,
    TransportFailureError,
    UnauthorizedError,
)
from domain.gateways import AdminActionGateway, AuthorizationGateway, PlayerLookupGateway
from domain.models import (
    AdminNote,
    AdminNoteShort,
    BanAction,
    PardonAction,
    ServerBan,
    ServerBanShort,
)
from domain.repositories import ModerationRecordRepository, PlayerRepository

from .identity import resolve_admin, resolve_player

logger = logging.getLogger(__name__)

UNAUTHORIZED_MESSAGE = "You are not authorized to perform administrative actions."
PLAYER_NOT_FOUND_MESSAGE = "No such player found."
TRANSPORT_FAILURE_MESSAGE = "Unable to reach the game server. Please try again later."
CONFIGURATION_FAILURE_MESSAGE = "The bot is not configured correctly. Contact the bot maintainer."


@dataclass
class ExternalContext:
    """
    Information about the caller from a particular channel.

    The application layer never depends on concrete SDK types; it only sees
    this small context object.
    """

    provider: str
    provider_user_id: str
    display_name: str


@dataclass
class BanCommand:
    login: str
    reason: str
    minutes: int
    severity: int


@dataclass
class PardonCommand:
    ban_id: int


@dataclass
class BanListCommand:
    login: str


@dataclass
class BanInfoCommand:
    ban_id: int


@dataclass
class NoteListCommand:
    login: str


@dataclass
class NoteInfoCommand:
    note_id: int


@dataclass
class OperationResult:
    """Outcome of an administrative action, rendered as a single message."""

    success: bool
    message: str


@dataclass
class BanListResult:
    success: bool
    error_message: Optional[str] = None
    login: str = ""
    bans: List[ServerBanShort] = field(default_factory=list)


@dataclass
class BanInfoResult:
    success: bool
    error_message: Optional[str] = None
    ban: Optional[ServerBan] = None
    player_name: str = ""
    banning_admin_name: str = ""
    last_edited_by_name: Optional[str] = None


@dataclass
class NoteListResult:
    success: bool
    error_message: Optional[str] = None
    login: str = ""
    notes: List[AdminNoteShort] = field(default_factory=list)


@dataclass
class NoteInfoResult:
    success: bool
    error_message: Optional[str] = None
    note: Optional[AdminNote] = None
    player_name: str = ""
    created_by_name: str = ""
    last_edited_by_name: str = ""


def _failure_from_error(error: Exception) -> OperationResult:
    """Map a relay-side error to the one message the operator sees."""

    if isinstance(error, UnauthorizedError):
        logger.info("Refused administrative action: %s", error)
        return OperationResult(success=False, message=UNAUTHORIZED_MESSAGE)
    if isinstance(error, RemoteRejectedError):
        logger.warning("Game server rejected action: %s", error)
        return OperationResult(success=False, message=f"Game server rejected the action: {error.message}")
    if isinstance(error, ConfigurationError):
        logger.error("Client configuration error: %s", error)
        return OperationResult(success=False, message=CONFIGURATION_FAILURE_MESSAGE)
    logger.error("Administrative action failed: %s", error)
    return OperationResult(success=False, message=TRANSPORT_FAILURE_MESSAGE)


async def execute_ban(
    external_ctx: ExternalContext,
    command: BanCommand,
    auth_gateway: AuthorizationGateway,
    player_repo: PlayerRepository,
    lookup_gateway: PlayerLookupGateway,
    action_gateway: AdminActionGateway,
) -> OperationResult:
    """
    Ban a player on the game server on behalf of the caller.

    - The caller is resolved to an actor first; without one nothing else runs.
    - The target login is resolved to a player identifier.
    - The ban is relayed once. Remote business errors are shown verbatim.
    """

    try:
        actor = await resolve_admin(external_ctx.provider_user_id, auth_gateway, player_repo)
    except (UnauthorizedError, TransportFailureError) as e:
        return _failure_from_error(e)

    target_id = await resolve_player(command.login, player_repo, lookup_gateway)
    if target_id is None:
        return OperationResult(success=False, message=PLAYER_NOT_FOUND_MESSAGE)

    action = BanAction(
        target_login=command.login,
        target_id=target_id,
        reason=command.reason,
        minutes=command.minutes,
        severity=command.severity,
        actor=actor,
    )

    try:
        await action_gateway.ban(action)
    except (RemoteRejectedError, TransportFailureError, ConfigurationError) as e:
        return _failure_from_error(e)

    logger.info(
        "%s (%s) banned %s (%s) for %s minutes",
        actor.display_name,
        actor.identity,
        command.login,
        target_id,
        command.minutes,
    )
    if command.minutes == 0:
        text = f"Successfully banned {command.login} permanently."
    else:
        text = f"Successfully banned {command.login} for {command.minutes} minutes."
    return OperationResult(success=True, message=text)


async def execute_pardon(
    external_ctx: ExternalContext,
    command: PardonCommand,
    auth_gateway: AuthorizationGateway,
    player_repo: PlayerRepository,
    action_gateway: AdminActionGateway,
) -> OperationResult:
    """
    Pardon a ban record. Only the caller is resolved; a pardon has no target.
    """

    try:
        actor = await resolve_admin(external_ctx.provider_user_id, auth_gateway, player_repo)
    except (UnauthorizedError, TransportFailureError) as e:
        return _failure_from_error(e)

    action = PardonAction(ban_id=command.ban_id, actor=actor)

    try:
        await action_gateway.pardon(action)
    except (RemoteRejectedError, TransportFailureError, ConfigurationError) as e:
        return _failure_from_error(e)

    logger.info("%s (%s) pardoned ban %s", actor.display_name, actor.identity, command.ban_id)
    return OperationResult(success=True, message=f"Successfully pardoned ban #{command.ban_id}.")


async def _name_or_id(player_repo: PlayerRepository, user_id: Optional[UUID]) -> str:
    """
    Best-effort display name for a record field; falls back to the raw id.
    """

    if user_id is None:
        return "Unknown"
    try:
        login = await player_repo.get_login_by_user_id(user_id)
    except Exception:
        logger.warning("Could not resolve login for %s", user_id, exc_info=True)
        login = None
    return login or str(user_id)


async def list_bans(
    command: BanListCommand,
    player_repo: PlayerRepository,
    lookup_gateway: PlayerLookupGateway,
    record_repo: ModerationRecordRepository,
) -> BanListResult:
    user_id = await resolve_player(command.login, player_repo, lookup_gateway)
    if user_id is None:
        return BanListResult(success=False, error_message=PLAYER_NOT_FOUND_MESSAGE)

    try:
        bans = await record_repo.get_bans_list(user_id)
    except Exception:
        logger.exception("Error retrieving bans for %s", command.login)
        return BanListResult(success=False, error_message="Failed to retrieve bans.")

    return BanListResult(success=True, login=command.login, bans=bans)


async def get_ban_info(
    command: BanInfoCommand,
    player_repo: PlayerRepository,
    record_repo: ModerationRecordRepository,
) -> BanInfoResult:
    try:
        ban = await record_repo.get_ban_by_id(command.ban_id)
    except Exception:
        logger.exception("Error retrieving ban by id: %s", command.ban_id)
        return BanInfoResult(success=False, error_message="Error happened retrieving ban.")

    if ban is None:
        return BanInfoResult(
            success=False,
            error_message=f"Ban with id: {command.ban_id} is not found",
        )

    last_edited_by_name = None
    if ban.last_edited_by is not None:
        last_edited_by_name = await _name_or_id(player_repo, ban.last_edited_by)

    return BanInfoResult(
        success=True,
        ban=ban,
        player_name=await _name_or_id(player_repo, ban.player_id),
        banning_admin_name=await _name_or_id(player_repo, ban.banning_admin),
        last_edited_by_name=last_edited_by_name,
    )


async def list_notes(
    command: NoteListCommand,
    player_repo: PlayerRepository,
    lookup_gateway: PlayerLookupGateway,
    record_repo: ModerationRecordRepository,
) -> NoteListResult:
    user_id = await resolve_player(command.login, player_repo, lookup_gateway)
    if user_id is None:
        return NoteListResult(success=False, error_message=PLAYER_NOT_FOUND_MESSAGE)

    try:
        notes = await record_repo.get_notes_list(user_id)
    except Exception:
        logger.exception("Error retrieving notes for %s", command.login)
        return NoteListResult(success=False, error_message="Failed to retrieve notes.")

    return NoteListResult(success=True, login=command.login, notes=notes)


async def get_note_info(
    command: NoteInfoCommand,
    player_repo: PlayerRepository,
    record_repo: ModerationRecordRepository,
) -> NoteInfoResult:
    try:
        note = await record_repo.get_note_by_id(command.note_id)
    except Exception:
        logger.exception("Error fetching note with ID %s", command.note_id)
        return NoteInfoResult(
            success=False,
            error_message="Error occurred while fetching the note.",
        )

    if note is None:
        return NoteInfoResult(
            success=False,
            error_message=f"Note with ID `{command.note_id}` not found.",
        )

    return NoteInfoResult(
        success=True,
        note=note,
        player_name=await _name_or_id(player_repo, note.player_id),
        created_by_name=await _name_or_id(player_repo, note.created_by),
        last_edited_by_name=await _name_or_id(player_repo, note.last_edited_by),
    )
