from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import Any, Awaitable, Callable, Optional, Union

from application.ports.auth_context_port import AuthContextPort
from application.ports.local_watchlist_port import LocalDurableStorePort
from application.ports.remote_watchlist_port import RemoteWatchlistServicePort
from application.watchlist.commands import AddEntryCommand, RemoveEntryCommand
from domain.watchlist import (
    SyncMode,
    WatchlistEntry,
    WatchlistError,
    WatchlistState,
    coerce_movie_id,
    normalize_entries,
    prepare_new_entry,
)

logger = logging.getLogger(__name__)

Listener = Callable[[WatchlistState], None]
Command = Union[AddEntryCommand, RemoveEntryCommand]


def _error_message(exc: BaseException) -> str:
    if isinstance(exc, WatchlistError):
        return exc.message
    return str(exc) or exc.__class__.__name__


class WatchlistStore:
    """Single source of truth for the current user's watchlist.

    Runs in one of two sync modes:
    - ``SyncMode.LOCAL``: every mutation is written through to the local
      durable store; no network.
    - ``SyncMode.BACKEND`` (after the first successful authenticated fetch):
      mutations are applied optimistically and confirmed by the remote
      service in a background task; the remote answer replaces ``items``.

    Remote failures never propagate to callers. They are recorded in
    ``error`` and, for adds, the optimistic change is rolled back.

    Backend-mode commands schedule tasks on the running event loop, so they
    must be issued from inside it. Concurrent commands for the same movie are
    not sequenced; whichever remote response lands last wins.

    ``reset()`` ends the session: remote answers that arrive afterwards for
    work started before it are dropped. A fetch for a different user than the
    one currently synced starts a new session as well.
    """

    def __init__(
        self,
        *,
        remote: RemoteWatchlistServicePort,
        local: LocalDurableStorePort,
        auth: AuthContextPort,
    ) -> None:
        self._remote = remote
        self._local = local
        self._auth = auth
        self._state = WatchlistState()
        self._listeners: list[Listener] = []
        self._tasks: set[asyncio.Task[bool]] = set()
        # Bumped by reset(); results captured under an older value are stale.
        self._epoch = 0
        self._synced_user_id: Optional[str] = None
        self.hydrate()

    # ----- read side -----

    @property
    def state(self) -> WatchlistState:
        return self._state

    @property
    def items(self) -> tuple[WatchlistEntry, ...]:
        return self._state.items

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def error(self) -> Optional[str]:
        return self._state.error

    @property
    def sync_mode(self) -> SyncMode:
        return self._state.sync_mode

    def contains(self, movie_id: Any) -> bool:
        return self._state.contains(movie_id)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for every state change; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ----- commands -----

    def hydrate(self) -> None:
        """Load items from the local durable store (Local mode, no network).

        Once the store is backend-synced the server list is authoritative and
        local storage is stale, so this is a no-op until ``reset()``.
        """
        if self._state.sync_mode is SyncMode.BACKEND:
            logger.debug("Skipping local hydrate: watchlist is backend-synced")
            return
        try:
            stored = self._local.load()
        except Exception as exc:
            logger.warning("Local watchlist unreadable, starting empty: %s", exc)
            stored = None
        self._set(items=tuple(normalize_entries(stored)), sync_mode=SyncMode.LOCAL)

    async def fetch_remote(self, user_id: str) -> bool:
        """Replace items with the remote list; switches to Backend mode on success.

        Fetching for a different user than the synced one resets the store first.
        A response that lands after ``reset()`` is discarded and reports False.
        """
        user_id = str(user_id)
        if self._synced_user_id is not None and self._synced_user_id != user_id:
            logger.info("Watchlist user changed from %s to %s, resetting", self._synced_user_id, user_id)
            self.reset()

        epoch = self._epoch
        self._set(is_loading=True)
        try:
            entries = await self._remote.fetch(user_id)
        except Exception as exc:
            if epoch != self._epoch:
                return False
            logger.warning("Watchlist fetch failed for user %s: %s", user_id, exc)
            self._set(is_loading=False, error=_error_message(exc))
            return False

        if epoch != self._epoch:
            logger.info("Discarding watchlist fetch for user %s after reset", user_id)
            return False
        if self._state.sync_mode is not SyncMode.BACKEND:
            logger.info("Watchlist switched to backend sync for user %s", user_id)
        self._synced_user_id = user_id
        self._set(
            items=tuple(normalize_entries(entries)),
            sync_mode=SyncMode.BACKEND,
            error=None,
            is_loading=False,
        )
        return True

    async def ensure_synced(self) -> bool:
        """Fetch once per signed-in user: no-op when that user is already synced or nobody is signed in."""
        user_id = self._auth.user_id
        if not self._auth.is_authenticated or not user_id:
            return self._state.sync_mode is SyncMode.BACKEND
        if self._state.sync_mode is SyncMode.BACKEND and self._synced_user_id == str(user_id):
            return True
        return await self.fetch_remote(user_id)

    def add(self, user_id: Optional[str], entry: Any) -> Optional[asyncio.Task[bool]]:
        """Optimistically add ``entry``.

        Returns the confirmation task in Backend mode, ``None`` otherwise
        (Local mode, or the movie was already listed). ``user_id`` defaults
        to the signed-in user.

        Raises:
            ValueError: If ``entry`` carries no movie id. Nothing is changed.
        """
        command = AddEntryCommand(prepare_new_entry(entry))
        items = command.apply(self._state.items)
        if items is None:
            return None
        logger.debug("Optimistic add of movie %s", command.movie_id)
        self._set(items=items)

        target = self._backend_user(user_id)
        if target is None:
            self._persist()
            return None

        self._set(is_loading=True)
        return self._schedule(
            command,
            lambda: self._remote.add(target, command.entry),
        )

    def remove(self, user_id: Optional[str], movie_id: Any) -> Optional[asyncio.Task[bool]]:
        """Optimistically remove ``movie_id``; a failed remote call is not rolled back."""
        command = RemoveEntryCommand(coerce_movie_id(movie_id))
        before = self._state.items
        items = command.apply(before)
        if items != before:
            logger.debug("Optimistic remove of movie %s", command.movie_id)
            self._set(items=items)

        target = self._backend_user(user_id)
        if target is None:
            if items != before:
                self._persist()
            return None

        self._set(is_loading=True)
        return self._schedule(
            command,
            lambda: self._remote.remove(target, command.movie_id),
        )

    def clear_error(self) -> None:
        self._set(error=None)

    def reset(self) -> None:
        """Forget everything (logout / account deletion)."""
        self._epoch += 1
        self._synced_user_id = None
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()
        self._state = WatchlistState()
        self._persist()
        self._notify()

    async def drain(self) -> None:
        """Wait for every in-flight confirmation to settle."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        """Settle in-flight confirmations and release the remote client."""
        await self.drain()
        await self._remote.close()

    # ----- internals -----

    def _backend_user(self, user_id: Optional[str]) -> Optional[str]:
        """User id to confirm against, or None when writes stay local."""
        if self._state.sync_mode is not SyncMode.BACKEND or not self._auth.is_authenticated:
            return None
        target = user_id or self._auth.user_id
        return str(target) if target else None

    def _schedule(
        self,
        command: Command,
        call: Callable[[], Awaitable[list[WatchlistEntry]]],
    ) -> asyncio.Task[bool]:
        task = asyncio.get_running_loop().create_task(self._confirm(command, call, self._epoch))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _confirm(
        self,
        command: Command,
        call: Callable[[], Awaitable[list[WatchlistEntry]]],
        epoch: int,
    ) -> bool:
        try:
            entries = await call()
        except Exception as exc:
            if epoch != self._epoch:
                return False
            logger.warning(
                "Watchlist %s of movie %s failed: %s",
                "add" if isinstance(command, AddEntryCommand) else "remove",
                command.movie_id,
                exc,
            )
            self._set(
                items=command.compensate(self._state.items),
                error=_error_message(exc),
                is_loading=False,
            )
            return False

        if epoch != self._epoch:
            return False
        self._set(items=tuple(normalize_entries(entries)), error=None, is_loading=False)
        return True

    def _persist(self) -> None:
        self._local.save(list(self._state.items))

    def _set(self, **changes: Any) -> None:
        self._state = dataclasses.replace(self._state, **changes)
        self._notify()

    def _notify(self) -> None:
        state = self._state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Watchlist listener failed")
