from __future__ import annotations

from functools import lru_cache

from application.ports.watchlist_repository_port import WatchlistRepositoryPort


@lru_cache(maxsize=1)
def _build_watchlist_repository() -> WatchlistRepositoryPort:
    from config.database import get_postgres_dsn
    from infrastructure.persistence.postgres.watchlist_repository import (
        InMemoryWatchlistRepository,
        PostgresWatchlistRepository,
    )

    dsn = get_postgres_dsn()
    if dsn:
        return PostgresWatchlistRepository(dsn=dsn)
    return InMemoryWatchlistRepository()


def get_watchlist_repository() -> WatchlistRepositoryPort:
    return _build_watchlist_repository()


async def shutdown_dependencies() -> None:
    """Best-effort shutdown hooks for long-lived adapters (connection pools)."""
    repo = _build_watchlist_repository()
    close = getattr(repo, "close", None)
    if callable(close):
        await close()
