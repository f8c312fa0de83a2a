from __future__ import annotations

import asyncio
from contextlib import closing
from typing import List, Optional
from uuid import UUID

import psycopg2
import psycopg2.extras

from domain.models import AdminNote, AdminNoteShort, ServerBan, ServerBanShort
from domain.repositories import ModerationRecordRepository

psycopg2.extras.register_uuid()

_BAN_COLUMNS = """
    server_ban_id, player_user_id, address, ban_time, expiration_time,
    reason, banning_admin, hwid, auto_delete, last_edited_at,
    last_edited_by_id, round_id
"""

_NOTE_COLUMNS = """
    admin_notes_id, round_id, player_user_id, message, created_by_id,
    created_at, last_edited_by_id, last_edited_at, deleted, deleted_at,
    secret, expiration_time, severity
"""


class PostgresModerationRecordRepository(ModerationRecordRepository):
    """
    Postgres-backed implementation of `ModerationRecordRepository`.

    Reads the game server's `server_ban` and `admin_notes` tables and maps
    rows to domain records. Read-only.
    """

    def __init__(self, dsn: str) -> None:
        self._dsn = dsn

    def _get_connection(self):
        return psycopg2.connect(self._dsn)

    def _fetch(self, query: str, params: tuple, one: bool):
        with closing(self._get_connection()) as conn:
            with conn, conn.cursor() as cur:
                cur.execute(query, params)
                return cur.fetchone() if one else cur.fetchall()

    @staticmethod
    def _ban_to_domain(row) -> ServerBan:
        return ServerBan(
            ban_id=int(row[0]),
            player_id=row[1],
            address=str(row[2]) if row[2] is not None else None,
            ban_time=row[3],
            expiration_time=row[4],
            reason=row[5],
            banning_admin=row[6],
            # bytea comes back as memoryview
            hwid=bytes(row[7]) if row[7] is not None else b"",
            auto_delete=bool(row[8]),
            last_edited_at=row[9],
            last_edited_by=row[10],
            round_id=row[11],
        )

    @staticmethod
    def _note_to_domain(row) -> AdminNote:
        return AdminNote(
            note_id=int(row[0]),
            round_id=row[1],
            player_id=row[2],
            message=row[3],
            created_by=row[4],
            created_at=row[5],
            last_edited_by=row[6],
            last_edited_at=row[7],
            deleted=bool(row[8]),
            deleted_at=row[9],
            secret=bool(row[10]),
            expiration_time=row[11],
            severity=int(row[12]),
        )

    async def get_bans_list(self, user_id: UUID) -> List[ServerBanShort]:
        rows = await asyncio.to_thread(
            self._fetch,
            "SELECT server_ban_id, reason FROM server_ban WHERE player_user_id = %s "
            "ORDER BY server_ban_id",
            (user_id,),
            False,
        )
        return [ServerBanShort(ban_id=int(row[0]), reason=row[1]) for row in rows]

    async def get_ban_by_id(self, ban_id: int) -> Optional[ServerBan]:
        row = await asyncio.to_thread(
            self._fetch,
            f"SELECT {_BAN_COLUMNS} FROM server_ban WHERE server_ban_id = %s",
            (ban_id,),
            True,
        )
        if not row:
            return None
        return self._ban_to_domain(row)

    async def get_notes_list(self, user_id: UUID) -> List[AdminNoteShort]:
        rows = await asyncio.to_thread(
            self._fetch,
            "SELECT admin_notes_id, message FROM admin_notes WHERE player_user_id = %s "
            "ORDER BY admin_notes_id",
            (user_id,),
            False,
        )
        return [AdminNoteShort(note_id=int(row[0]), message=row[1]) for row in rows]

    async def get_note_by_id(self, note_id: int) -> Optional[AdminNote]:
        row = await asyncio.to_thread(
            self._fetch,
            f"SELECT {_NOTE_COLUMNS} FROM admin_notes WHERE admin_notes_id = %s",
            (note_id,),
            True,
        )
        if not row:
            return None
        return self._note_to_domain(row)
