from __future__ import annotations

from typing import List, Optional, Protocol
from uuid import UUID

from .models import AdminNote, AdminNoteShort, ServerBan, ServerBanShort


class PlayerRepository(Protocol):
    """
    Read-only view of the game database's `player` table.

    Implementations return None when no row matches and let driver errors
    propagate; callers decide whether an error is fatal.
    """

    async def get_user_id_by_login(self, login: str) -> Optional[UUID]:
        """Exact, case-sensitive match on the last-seen login."""

        ...

    async def get_login_by_user_id(self, user_id: UUID) -> Optional[str]:
        """Return the last-seen login for a player identifier, if any."""

        ...


class ModerationRecordRepository(Protocol):
    """
    Read-only access to ban and admin note history.
    """

    async def get_bans_list(self, user_id: UUID) -> List[ServerBanShort]:
        ...

    async def get_ban_by_id(self, ban_id: int) -> Optional[ServerBan]:
        ...

    async def get_notes_list(self, user_id: UUID) -> List[AdminNoteShort]:
        ...

    async def get_note_by_id(self, note_id: int) -> Optional[AdminNote]:
        ...
