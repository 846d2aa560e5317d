"""Optimistic watchlist mutations as apply/compensate pairs.

``apply`` computes the optimistic item sequence shown before the remote
service answers. ``compensate`` is what the store runs when the confirming
call fails: adds are rolled back, removals are not (the removed entry is gone
and the next fetch corrects any drift).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from domain.watchlist import WatchlistEntry

Items = tuple[WatchlistEntry, ...]


@dataclass(frozen=True)
class AddEntryCommand:
    entry: WatchlistEntry

    @property
    def movie_id(self) -> str:
        return self.entry.movie_id

    def apply(self, items: Items) -> Optional[Items]:
        """Append the entry; ``None`` when the movie is already listed."""
        if any(item.movie_id == self.movie_id for item in items):
            return None
        return (*items, self.entry)

    def compensate(self, items: Items) -> Items:
        return tuple(item for item in items if item.movie_id != self.movie_id)


@dataclass(frozen=True)
class RemoveEntryCommand:
    movie_id: str

    def apply(self, items: Items) -> Items:
        return tuple(item for item in items if item.movie_id != self.movie_id)

    def compensate(self, items: Items) -> Items:
        # No rollback for removals.
        return items
