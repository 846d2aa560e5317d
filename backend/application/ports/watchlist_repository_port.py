from __future__ import annotations

from typing import List, Protocol

from domain.watchlist import WatchlistEntry


class WatchlistRepositoryPort(Protocol):
    """Server-side persistence behind the watchlist REST resource."""

    async def list_entries(self, *, user_id: str) -> List[WatchlistEntry]:
        ...

    async def add_entry(self, *, user_id: str, entry: WatchlistEntry) -> List[WatchlistEntry]:
        """Insert ``entry`` unless its movie_id is already present; return the full list."""
        ...

    async def remove_entry(self, *, user_id: str, movie_id: str) -> List[WatchlistEntry]:
        """Remove ``movie_id`` if present; return the full list."""
        ...

    async def close(self) -> None:
        ...
