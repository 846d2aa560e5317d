from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from application.ports.watchlist_repository_port import WatchlistRepositoryPort
from domain.watchlist import WatchlistEntry

logger = logging.getLogger(__name__)


def _stamp(entry: WatchlistEntry, added_at: datetime) -> WatchlistEntry:
    return WatchlistEntry(
        movie_id=entry.movie_id,
        title=entry.title,
        poster=entry.poster,
        overview=entry.overview,
        year=entry.year,
        added_at=added_at,
        vote_average=entry.vote_average,
    )


def _validate(entry: WatchlistEntry) -> None:
    if not (entry.movie_id or "").strip():
        raise ValueError("movieId is required")
    if not (entry.title or "").strip():
        raise ValueError("title is required")


class InMemoryWatchlistRepository(WatchlistRepositoryPort):
    def __init__(self) -> None:
        self._lists: Dict[str, List[WatchlistEntry]] = {}

    async def list_entries(self, *, user_id: str) -> List[WatchlistEntry]:
        return list(self._lists.get(str(user_id), []))

    async def add_entry(self, *, user_id: str, entry: WatchlistEntry) -> List[WatchlistEntry]:
        _validate(entry)
        items = self._lists.setdefault(str(user_id), [])
        if not any(it.movie_id == entry.movie_id for it in items):
            items.append(_stamp(entry, datetime.now(timezone.utc)))
        return list(items)

    async def remove_entry(self, *, user_id: str, movie_id: str) -> List[WatchlistEntry]:
        items = [it for it in self._lists.get(str(user_id), []) if it.movie_id != str(movie_id)]
        self._lists[str(user_id)] = items
        return list(items)

    async def close(self) -> None:
        return None


class PostgresWatchlistRepository(WatchlistRepositoryPort):
    """Postgres-backed watchlist storage (asyncpg)."""

    def __init__(
        self,
        *,
        dsn: str,
        min_size: int = 1,
        max_size: int = 5,
    ) -> None:
        self._dsn = dsn
        self._min_size = min_size
        self._max_size = max_size
        self._pool = None
        self._pool_lock = asyncio.Lock()

    async def _get_pool(self):
        if self._pool is not None:
            return self._pool
        async with self._pool_lock:
            if self._pool is not None:
                return self._pool
            import asyncpg  # type: ignore

            self._pool = await asyncpg.create_pool(
                self._dsn,
                min_size=self._min_size,
                max_size=self._max_size,
                ssl=False,
            )
            await self._ensure_schema()
            logger.info("PostgreSQL watchlist repository pool initialized")
            return self._pool

    async def _ensure_schema(self) -> None:
        pool = self._pool
        if pool is None:
            return
        async with pool.acquire() as conn:
            await conn.execute(
                """
                CREATE TABLE IF NOT EXISTS watchlist_entries (
                    user_id text NOT NULL,
                    movie_id text NOT NULL,
                    title text NOT NULL,
                    poster text,
                    overview text,
                    year text,
                    vote_average double precision,
                    added_at timestamptz NOT NULL DEFAULT NOW(),
                    PRIMARY KEY (user_id, movie_id)
                );
                """
            )
            await conn.execute(
                "CREATE INDEX IF NOT EXISTS watchlist_entries_user_added_idx ON watchlist_entries(user_id, added_at);"
            )

    @staticmethod
    def _row_to_entry(row: Dict[str, Any]) -> WatchlistEntry:
        vote = row.get("vote_average")
        return WatchlistEntry(
            movie_id=str(row.get("movie_id") or ""),
            title=str(row.get("title") or ""),
            poster=row.get("poster"),
            overview=row.get("overview"),
            year=row.get("year"),
            added_at=row.get("added_at"),
            vote_average=float(vote) if vote is not None else None,
        )

    async def _list(self, conn, user_id: str) -> List[WatchlistEntry]:
        rows = await conn.fetch(
            """
            SELECT movie_id, title, poster, overview, year, vote_average, added_at
            FROM watchlist_entries
            WHERE user_id = $1
            ORDER BY added_at ASC, movie_id ASC;
            """,
            str(user_id),
        )
        return [self._row_to_entry(dict(r)) for r in rows]

    async def list_entries(self, *, user_id: str) -> List[WatchlistEntry]:
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            return await self._list(conn, user_id)

    async def add_entry(self, *, user_id: str, entry: WatchlistEntry) -> List[WatchlistEntry]:
        _validate(entry)
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            # Re-adding an existing movie keeps the original row (and added_at).
            await conn.execute(
                """
                INSERT INTO watchlist_entries (user_id, movie_id, title, poster, overview, year, vote_average)
                VALUES ($1, $2, $3, $4, $5, $6, $7)
                ON CONFLICT (user_id, movie_id) DO NOTHING;
                """,
                str(user_id),
                entry.movie_id,
                entry.title,
                entry.poster,
                entry.overview,
                entry.year,
                entry.vote_average,
            )
            return await self._list(conn, user_id)

    async def remove_entry(self, *, user_id: str, movie_id: str) -> List[WatchlistEntry]:
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            await conn.execute(
                "DELETE FROM watchlist_entries WHERE user_id = $1 AND movie_id = $2;",
                str(user_id),
                str(movie_id),
            )
            return await self._list(conn, user_id)

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
