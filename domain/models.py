from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union
from uuid import UUID


@dataclass(frozen=True)
class ActorContext:
    """
    The attributed issuer of an administrative action.

    The game server records this identity and name against every ban or
    pardon it applies, so an actor is only ever built from a verified
    identity and a known in-game login.
    """

    identity: UUID
    display_name: str

    def __post_init__(self) -> None:
        if not self.display_name or not self.display_name.strip():
            raise ValueError("ActorContext requires a non-empty display name.")


@dataclass(frozen=True)
class BanAction:
    """
    A ban to relay to the game server.

    `minutes == 0` denotes a permanent ban. `severity` is an ordinal whose
    meaning is owned by the game server.
    """

    target_login: str
    target_id: UUID
    reason: str
    minutes: int
    severity: int
    actor: ActorContext


@dataclass(frozen=True)
class PardonAction:
    """A pardon of an existing ban record. Carries no target player."""

    ban_id: int
    actor: ActorContext


AdministrativeAction = Union[BanAction, PardonAction]


@dataclass
class ServerBanShort:
    ban_id: int
    reason: str


@dataclass
class ServerBan:
    """Full ban record as stored in the game database."""

    ban_id: int
    player_id: Optional[UUID]
    address: Optional[str]
    ban_time: datetime
    expiration_time: Optional[datetime]
    reason: str
    banning_admin: Optional[UUID]
    hwid: bytes
    auto_delete: bool
    last_edited_at: Optional[datetime]
    last_edited_by: Optional[UUID]
    round_id: Optional[int]


@dataclass
class AdminNoteShort:
    note_id: int
    message: str


@dataclass
class AdminNote:
    """Full admin note record as stored in the game database."""

    note_id: int
    round_id: Optional[int]
    player_id: UUID
    message: str
    created_by: Optional[UUID]
    created_at: datetime
    last_edited_by: Optional[UUID]
    last_edited_at: Optional[datetime]
    deleted: bool
    deleted_at: Optional[datetime]
    secret: bool
    expiration_time: Optional[datetime]
    severity: int
