from __future__ import annotations

from typing import Protocol

from domain.watchlist import WatchlistEntry


class RemoteWatchlistServicePort(Protocol):
    """Remote source of truth for an authenticated user's watchlist.

    Every call returns the authoritative full list. Failures surface as
    ``TransientNetworkError`` (``AuthExpiredError`` for 401).
    """

    async def fetch(self, user_id: str) -> list[WatchlistEntry]:
        ...

    async def add(self, user_id: str, entry: WatchlistEntry) -> list[WatchlistEntry]:
        ...

    async def remove(self, user_id: str, movie_id: str) -> list[WatchlistEntry]:
        ...

    async def close(self) -> None:
        ...
