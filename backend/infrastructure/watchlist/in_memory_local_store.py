from __future__ import annotations

import copy
from typing import Any, Optional

from application.ports.local_watchlist_port import LocalDurableStorePort
from domain.watchlist import WatchlistEntry, entry_to_dict, normalize_entries

WATCHLIST_KEY = "watchlist"


class InMemoryLocalStore(LocalDurableStorePort):
    """Process-local stand-in for local storage (tests / ephemeral clients)."""

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}
        self.save_calls: list[list[WatchlistEntry]] = []

    def load(self) -> Optional[list[WatchlistEntry]]:
        raw = self._values.get(WATCHLIST_KEY)
        if not isinstance(raw, list):
            return None
        return normalize_entries(raw)

    def save(self, entries: list[WatchlistEntry]) -> None:
        self.save_calls.append(list(entries))
        self._values[WATCHLIST_KEY] = [entry_to_dict(e) for e in entries]

    def get_value(self, key: str) -> Optional[Any]:
        return copy.deepcopy(self._values.get(key))

    def set_value(self, key: str, value: Any) -> None:
        self._values[key] = copy.deepcopy(value)

    def delete_value(self, key: str) -> None:
        self._values.pop(key, None)
