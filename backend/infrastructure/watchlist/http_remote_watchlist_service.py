from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional
from urllib.parse import quote, urljoin

import aiohttp

from application.ports.remote_watchlist_port import RemoteWatchlistServicePort
from domain.watchlist import (
    AuthExpiredError,
    TransientNetworkError,
    WatchlistEntry,
    entry_to_dict,
    normalize_entries,
)
from infrastructure.config.settings import (
    WATCHLIST_API_BASE_URL,
    WATCHLIST_API_TIMEOUT_S,
    WATCHLIST_API_TOKEN,
    WATCHLIST_ITEM_PATH,
    WATCHLIST_LIST_PATH,
)

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], Optional[str]]


def _join(base: str, path: str) -> str:
    base = (base or "").rstrip("/") + "/"
    path = (path or "").lstrip("/")
    return urljoin(base, path)


class HttpRemoteWatchlistService(RemoteWatchlistServicePort):
    """REST client for `/users/{user_id}/watchlist` (schema tolerant).

    Every endpoint answers with the user's full list, either under a
    ``watchlist`` key or as a bare array. Entries are normalized here so the
    store only ever sees ``WatchlistEntry``.
    """

    def __init__(
        self,
        *,
        base_url: str = WATCHLIST_API_BASE_URL,
        api_token: str = WATCHLIST_API_TOKEN,
        timeout_s: float = WATCHLIST_API_TIMEOUT_S,
        list_path: str = WATCHLIST_LIST_PATH,
        item_path: str = WATCHLIST_ITEM_PATH,
        token_provider: Optional[TokenProvider] = None,
    ) -> None:
        self._base_url = (base_url or "").strip()
        self._api_token = (api_token or "").strip()
        self._timeout_s = float(timeout_s or 10.0)
        self._list_path = list_path or "/users/{user_id}/watchlist"
        self._item_path = item_path or "/users/{user_id}/watchlist/{movie_id}"
        self._token_provider = token_provider
        self._session: aiohttp.ClientSession | None = None
        self._lock = asyncio.Lock()

    def _headers(self) -> dict[str, str]:
        headers = {"content-type": "application/json"}
        token = self._token_provider() if self._token_provider else None
        token = (token or self._api_token or "").strip()
        if token:
            headers["authorization"] = f"Bearer {token}"
        return headers

    def _list_url(self, user_id: str) -> str:
        path = self._list_path.replace("{user_id}", quote(str(user_id), safe=""))
        return _join(self._base_url, path)

    def _item_url(self, user_id: str, movie_id: str) -> str:
        path = self._item_path.replace("{user_id}", quote(str(user_id), safe="")).replace(
            "{movie_id}", quote(str(movie_id), safe="")
        )
        return _join(self._base_url, path)

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is not None and not self._session.closed:
            return self._session

        # Double-checked under the lock: concurrent first calls share one session.
        async with self._lock:
            if self._session is not None and not self._session.closed:
                return self._session

            timeout = aiohttp.ClientTimeout(total=self._timeout_s)
            self._session = aiohttp.ClientSession(timeout=timeout)
            return self._session

    @staticmethod
    def _parse_entries(payload: Any) -> list[WatchlistEntry]:
        # Accept {"watchlist": [...]}, {"data": {"watchlist": [...]}}, {"items": [...]} or [...]
        if isinstance(payload, dict):
            data = payload.get("data")
            if isinstance(data, dict) and isinstance(data.get("watchlist"), list):
                payload = data["watchlist"]
            else:
                for key in ("watchlist", "items", "data"):
                    if isinstance(payload.get(key), list):
                        payload = payload[key]
                        break
        if not isinstance(payload, list):
            raise TransientNetworkError("watchlist response has no list")
        return normalize_entries(payload)

    async def _request(self, method: str, url: str, *, json_body: Any = None) -> list[WatchlistEntry]:
        session = await self._get_session()
        logger.debug("watchlist %s %s", method, url)
        try:
            async with session.request(method, url, json=json_body, headers=self._headers()) as resp:
                if resp.status == 401:
                    raise AuthExpiredError()
                if resp.status >= 400:
                    text = await resp.text()
                    raise TransientNetworkError(
                        f"watchlist {method} failed ({resp.status}): {text[:200]}",
                        status_code=resp.status,
                    )
                data = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            raise TransientNetworkError(f"watchlist {method} failed: {str(exc) or exc.__class__.__name__}") from exc
        return self._parse_entries(data)

    async def fetch(self, user_id: str) -> list[WatchlistEntry]:
        return await self._request("GET", self._list_url(user_id))

    async def add(self, user_id: str, entry: WatchlistEntry) -> list[WatchlistEntry]:
        return await self._request("POST", self._list_url(user_id), json_body=entry_to_dict(entry))

    async def remove(self, user_id: str, movie_id: str) -> list[WatchlistEntry]:
        return await self._request("DELETE", self._item_url(user_id, movie_id))

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
