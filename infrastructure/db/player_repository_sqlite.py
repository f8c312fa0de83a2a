from __future__ import annotations

import asyncio
import sqlite3
from contextlib import closing
from typing import Optional
from uuid import UUID

from domain.repositories import PlayerRepository


class SqlitePlayerRepository(PlayerRepository):
    """
    SQLite-backed implementation of `PlayerRepository`.

    Serves a local mirror of the game's `player` table for development.
    Identifiers are stored as canonical UUID text. The table is created if
    needed; rows are populated by whatever keeps the mirror in sync.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._ensure_table()

    def _get_connection(self) -> sqlite3.Connection:
        return sqlite3.connect(self._db_path)

    def _ensure_table(self) -> None:
        with closing(self._get_connection()) as conn:
            with conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS player (
                        user_id TEXT PRIMARY KEY,
                        last_seen_user_name TEXT NOT NULL
                    )
                    """
                )

    def _fetch_one(self, query: str, params: tuple):
        with closing(self._get_connection()) as conn:
            return conn.execute(query, params).fetchone()

    async def get_user_id_by_login(self, login: str) -> Optional[UUID]:
        row = await asyncio.to_thread(
            self._fetch_one,
            "SELECT user_id FROM player WHERE last_seen_user_name = ?",
            (login,),
        )
        if not row:
            return None
        return UUID(row[0])

    async def get_login_by_user_id(self, user_id: UUID) -> Optional[str]:
        row = await asyncio.to_thread(
            self._fetch_one,
            "SELECT last_seen_user_name FROM player WHERE user_id = ?",
            (str(user_id),),
        )
        if not row:
            return None
        return row[0]
