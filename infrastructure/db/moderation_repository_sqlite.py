from __future__ import annotations

import asyncio
import sqlite3
from contextlib import closing
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from domain.models import AdminNote, AdminNoteShort, ServerBan, ServerBanShort
from domain.repositories import ModerationRecordRepository


def _uuid(value) -> Optional[UUID]:
    return UUID(value) if value else None


def _timestamp(value) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


class SqliteModerationRecordRepository(ModerationRecordRepository):
    """
    SQLite-backed implementation of `ModerationRecordRepository`.

    Mirrors the game's `server_ban` and `admin_notes` tables with UUIDs and
    timestamps stored as ISO text. Tables are created if needed.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._ensure_tables()

    def _get_connection(self) -> sqlite3.Connection:
        return sqlite3.connect(self._db_path)

    def _ensure_tables(self) -> None:
        with closing(self._get_connection()) as conn:
            with conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS server_ban (
                        server_ban_id INTEGER PRIMARY KEY,
                        player_user_id TEXT,
                        address TEXT,
                        ban_time TEXT NOT NULL,
                        expiration_time TEXT,
                        reason TEXT NOT NULL,
                        banning_admin TEXT,
                        hwid BLOB,
                        auto_delete INTEGER NOT NULL DEFAULT 0,
                        last_edited_at TEXT,
                        last_edited_by_id TEXT,
                        round_id INTEGER
                    )
                    """
                )
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS admin_notes (
                        admin_notes_id INTEGER PRIMARY KEY,
                        round_id INTEGER,
                        player_user_id TEXT NOT NULL,
                        message TEXT NOT NULL,
                        created_by_id TEXT,
                        created_at TEXT NOT NULL,
                        last_edited_by_id TEXT,
                        last_edited_at TEXT,
                        deleted INTEGER NOT NULL DEFAULT 0,
                        deleted_at TEXT,
                        secret INTEGER NOT NULL DEFAULT 0,
                        expiration_time TEXT,
                        severity INTEGER NOT NULL DEFAULT 0
                    )
                    """
                )

    def _fetch(self, query: str, params: tuple, one: bool):
        with closing(self._get_connection()) as conn:
            cur = conn.execute(query, params)
            return cur.fetchone() if one else cur.fetchall()

    @staticmethod
    def _ban_to_domain(row: sqlite3.Row) -> ServerBan:
        return ServerBan(
            ban_id=int(row[0]),
            player_id=_uuid(row[1]),
            address=row[2],
            ban_time=_timestamp(row[3]),
            expiration_time=_timestamp(row[4]),
            reason=row[5],
            banning_admin=_uuid(row[6]),
            hwid=bytes(row[7]) if row[7] is not None else b"",
            auto_delete=bool(row[8]),
            last_edited_at=_timestamp(row[9]),
            last_edited_by=_uuid(row[10]),
            round_id=row[11],
        )

    @staticmethod
    def _note_to_domain(row: sqlite3.Row) -> AdminNote:
        return AdminNote(
            note_id=int(row[0]),
            round_id=row[1],
            player_id=UUID(row[2]),
            message=row[3],
            created_by=_uuid(row[4]),
            created_at=_timestamp(row[5]),
            last_edited_by=_uuid(row[6]),
            last_edited_at=_timestamp(row[7]),
            deleted=bool(row[8]),
            deleted_at=_timestamp(row[9]),
            secret=bool(row[10]),
            expiration_time=_timestamp(row[11]),
            severity=int(row[12]),
        )

    async def get_bans_list(self, user_id: UUID) -> List[ServerBanShort]:
        rows = await asyncio.to_thread(
            self._fetch,
            "SELECT server_ban_id, reason FROM server_ban WHERE player_user_id = ? "
            "ORDER BY server_ban_id",
            (str(user_id),),
            False,
        )
        return [ServerBanShort(ban_id=int(row[0]), reason=row[1]) for row in rows]

    async def get_ban_by_id(self, ban_id: int) -> Optional[ServerBan]:
        row = await asyncio.to_thread(
            self._fetch,
            """
            SELECT server_ban_id, player_user_id, address, ban_time, expiration_time,
                   reason, banning_admin, hwid, auto_delete, last_edited_at,
                   last_edited_by_id, round_id
            FROM server_ban
            WHERE server_ban_id = ?
            """,
            (ban_id,),
            True,
        )
        if not row:
            return None
        return self._ban_to_domain(row)

    async def get_notes_list(self, user_id: UUID) -> List[AdminNoteShort]:
        rows = await asyncio.to_thread(
            self._fetch,
            "SELECT admin_notes_id, message FROM admin_notes WHERE player_user_id = ? "
            "ORDER BY admin_notes_id",
            (str(user_id),),
            False,
        )
        return [AdminNoteShort(note_id=int(row[0]), message=row[1]) for row in rows]

    async def get_note_by_id(self, note_id: int) -> Optional[AdminNote]:
        row = await asyncio.to_thread(
            self._fetch,
            """
            SELECT admin_notes_id, round_id, player_user_id, message, created_by_id,
                   created_at, last_edited_by_id, last_edited_at, deleted, deleted_at,
                   secret, expiration_time, severity
            FROM admin_notes
            WHERE admin_notes_id = ?
            """,
            (note_id,),
            True,
        )
        if not row:
            return None
        return self._note_to_domain(row)
