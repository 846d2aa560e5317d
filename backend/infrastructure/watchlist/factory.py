"""Factories wiring watchlist adapters from configuration."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal, Optional

from application.ports.local_watchlist_port import LocalDurableStorePort
from application.watchlist import PendingAddStash, WatchlistSession, WatchlistStore
from infrastructure.config.settings import (
    WATCHLIST_API_BASE_URL,
    WATCHLIST_LOCAL_PATH,
    WATCHLIST_LOCAL_PROVIDER,
    WATCHLIST_REQUIRE_LOGIN_FOR_ADD,
)
from infrastructure.watchlist.http_remote_watchlist_service import HttpRemoteWatchlistService
from infrastructure.watchlist.static_auth_context import StaticAuthContext

logger = logging.getLogger(__name__)

LocalProviderType = Literal["file", "memory", ""]


class LocalStoreFactory:
    """Factory for the local durable store behind the signed-out watchlist."""

    @staticmethod
    def create(
        provider: LocalProviderType | None = None,
        *,
        path: Optional[Path | str] = None,
    ) -> LocalDurableStorePort:
        """Create a local store.

        Args:
            provider: 'file', 'memory', or None to read WATCHLIST_LOCAL_PROVIDER.
            path: JSON file location for the 'file' provider.

        Raises:
            ValueError: If an unsupported provider is specified.
        """
        if provider is None:
            provider = WATCHLIST_LOCAL_PROVIDER  # type: ignore[assignment]

        provider = (provider or "").strip().lower()

        match provider:
            case "file" | "":
                from infrastructure.watchlist.json_file_local_store import JsonFileLocalStore

                return JsonFileLocalStore(path or WATCHLIST_LOCAL_PATH)

            case "memory":
                from infrastructure.watchlist.in_memory_local_store import InMemoryLocalStore

                return InMemoryLocalStore()

            case _:
                raise ValueError(
                    f"Unsupported WATCHLIST_LOCAL_PROVIDER: {provider!r}. "
                    f"Supported values: 'file', 'memory'"
                )


def create_watchlist_session(
    *,
    base_url: str = WATCHLIST_API_BASE_URL,
    local_provider: LocalProviderType | None = None,
    local_path: Optional[Path | str] = None,
    require_login_for_add: bool = WATCHLIST_REQUIRE_LOGIN_FOR_ADD,
) -> WatchlistSession:
    """Build a ready-to-use session (hydrated from local storage, signed out)."""
    auth = StaticAuthContext()
    local = LocalStoreFactory.create(local_provider, path=local_path)
    remote = HttpRemoteWatchlistService(base_url=base_url, token_provider=lambda: auth.token)
    store = WatchlistStore(remote=remote, local=local, auth=auth)
    logger.info("Watchlist session ready (%d items hydrated)", len(store.items))
    return WatchlistSession(
        store=store,
        auth=auth,
        stash=PendingAddStash(local=local),
        require_login_for_add=require_login_for_add,
    )
