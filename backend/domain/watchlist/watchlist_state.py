from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from domain.watchlist.watchlist_entry import WatchlistEntry, coerce_movie_id


class SyncMode(str, Enum):
    # local: persisted to durable local storage (unauthenticated)
    # backend: the remote service is the source of truth
    LOCAL = "local"
    BACKEND = "backend"


@dataclass(frozen=True)
class WatchlistState:
    """Immutable snapshot of the watchlist as seen by readers."""

    items: tuple[WatchlistEntry, ...] = ()
    is_loading: bool = False
    error: Optional[str] = None
    sync_mode: SyncMode = SyncMode.LOCAL

    def contains(self, movie_id: object) -> bool:
        wanted = coerce_movie_id(movie_id)
        return any(item.movie_id == wanted for item in self.items)
