from __future__ import annotations

import asyncio
from contextlib import closing
from typing import Optional
from uuid import UUID

import psycopg2
import psycopg2.extras

from domain.repositories import PlayerRepository

psycopg2.extras.register_uuid()


class PostgresPlayerRepository(PlayerRepository):
    """
    Postgres-backed implementation of `PlayerRepository`.

    Reads the game server's own `player` table; this repository never
    writes. Each call opens a connection in a worker thread and closes it
    before returning, so the event loop is never blocked on the driver.
    """

    def __init__(self, dsn: str) -> None:
        self._dsn = dsn

    def _get_connection(self):
        return psycopg2.connect(self._dsn)

    def _fetch_one(self, query: str, params: tuple):
        with closing(self._get_connection()) as conn:
            with conn, conn.cursor() as cur:
                cur.execute(query, params)
                return cur.fetchone()

    async def get_user_id_by_login(self, login: str) -> Optional[UUID]:
        row = await asyncio.to_thread(
            self._fetch_one,
            "SELECT user_id FROM player WHERE last_seen_user_name = %s",
            (login,),
        )
        if not row:
            return None
        return row[0] if isinstance(row[0], UUID) else UUID(str(row[0]))

    async def get_login_by_user_id(self, user_id: UUID) -> Optional[str]:
        row = await asyncio.to_thread(
            self._fetch_one,
            "SELECT last_seen_user_name FROM player WHERE user_id = %s",
            (user_id,),
        )
        if not row:
            return None
        return row[0]
