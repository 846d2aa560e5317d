from __future__ import annotations

from typing import Any, Optional, Protocol

from domain.watchlist import WatchlistEntry


class LocalDurableStorePort(Protocol):
    """Synchronous durable storage for the unauthenticated watchlist.

    Implementations never raise: unreadable data loads as ``None`` and
    ``save`` replaces the whole list at once.
    """

    def load(self) -> Optional[list[WatchlistEntry]]:
        ...

    def save(self, entries: list[WatchlistEntry]) -> None:
        ...

    # Raw key/value access for small client-side records (pending add, return url).
    def get_value(self, key: str) -> Optional[Any]:
        ...

    def set_value(self, key: str, value: Any) -> None:
        ...

    def delete_value(self, key: str) -> None:
        ...
