import sys
import unittest
from pathlib import Path

from aiohttp import web
from aiohttp.test_utils import TestServer

_BACKEND_ROOT = Path(__file__).resolve().parents[1] / "backend"
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))

from application.watchlist import WatchlistStore
from domain.watchlist import AuthExpiredError, SyncMode, TransientNetworkError, WatchlistEntry
from infrastructure.watchlist import HttpRemoteWatchlistService, InMemoryLocalStore, StaticAuthContext


class TestHttpRemoteWatchlistService(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.lists: dict[str, list[dict]] = {}
        self.auth_headers: list[str] = []
        self.posted: list[dict] = []

        app = web.Application()
        app.router.add_get("/api/users/{user_id}/watchlist", self._get)
        app.router.add_post("/api/users/{user_id}/watchlist", self._post)
        app.router.add_delete("/api/users/{user_id}/watchlist/{movie_id}", self._delete)
        self.server = TestServer(app)
        await self.server.start_server()
        self.base_url = str(self.server.make_url("/api"))
        self.client = HttpRemoteWatchlistService(base_url=self.base_url, api_token="static-token")

    async def asyncTearDown(self) -> None:
        await self.client.close()
        await self.server.close()

    def _check(self, request: web.Request) -> None:
        self.auth_headers.append(request.headers.get("Authorization", ""))
        user_id = request.match_info["user_id"]
        if user_id == "expired":
            raise web.HTTPUnauthorized(text="token expired")
        if user_id == "broken":
            raise web.HTTPInternalServerError(text="database unavailable")

    async def _get(self, request: web.Request) -> web.StreamResponse:
        self._check(request)
        user_id = request.match_info["user_id"]
        if user_id == "garbage":
            return web.Response(text="<html>oops</html>", content_type="text/html")
        if user_id == "shapeless":
            return web.json_response({"message": "ok"})
        return web.json_response({"watchlist": self.lists.get(user_id, [])})

    async def _post(self, request: web.Request) -> web.StreamResponse:
        self._check(request)
        user_id = request.match_info["user_id"]
        body = await request.json()
        self.posted.append(body)
        items = self.lists.setdefault(user_id, [])
        if not any(str(it.get("movieId")) == str(body["movieId"]) for it in items):
            items.append({**body, "addedAt": "2024-01-01T00:00:00Z"})
        return web.json_response({"message": "added", "watchlist": items})

    async def _delete(self, request: web.Request) -> web.StreamResponse:
        self._check(request)
        user_id = request.match_info["user_id"]
        movie_id = request.match_info["movie_id"]
        self.lists[user_id] = [it for it in self.lists.get(user_id, []) if str(it.get("movieId")) != movie_id]
        return web.json_response(self.lists[user_id])

    async def test_fetch_normalizes_legacy_records(self) -> None:
        self.lists["u1"] = [
            {"id": 27205, "title": "Inception", "poster": "p.jpg"},
            {"movieId": "157336", "title": "Interstellar", "addedAt": "2024-02-02T00:00:00Z"},
            {"title": "no id"},
        ]
        entries = await self.client.fetch("u1")
        self.assertEqual([e.movie_id for e in entries], ["27205", "157336"])
        self.assertIsNotNone(entries[1].added_at)
        self.assertEqual(self.auth_headers, ["Bearer static-token"])

    async def test_add_posts_wire_shape_and_returns_full_list(self) -> None:
        entry = WatchlistEntry(movie_id="27205", title="Inception", year="2010")
        entries = await self.client.add("u1", entry)

        self.assertEqual(self.posted, [{"movieId": "27205", "title": "Inception", "year": "2010"}])
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].movie_id, "27205")
        self.assertEqual(entries[0].added_at.year, 2024)

    async def test_remove_accepts_bare_list_response(self) -> None:
        self.lists["u1"] = [{"movieId": "1", "title": "A"}, {"movieId": "2", "title": "B"}]
        entries = await self.client.remove("u1", "1")
        self.assertEqual([e.movie_id for e in entries], ["2"])

    async def test_unauthorized_maps_to_auth_expired(self) -> None:
        with self.assertRaises(AuthExpiredError) as ctx:
            await self.client.fetch("expired")
        self.assertEqual(ctx.exception.status_code, 401)

    async def test_server_error_maps_to_transient_error(self) -> None:
        with self.assertRaises(TransientNetworkError) as ctx:
            await self.client.add("broken", WatchlistEntry(movie_id="1", title="A"))
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertIn("database unavailable", ctx.exception.message)

    async def test_undecodable_or_shapeless_payload_is_transient(self) -> None:
        with self.assertRaises(TransientNetworkError):
            await self.client.fetch("garbage")
        with self.assertRaises(TransientNetworkError):
            await self.client.fetch("shapeless")

    async def test_connection_failure_is_transient(self) -> None:
        await self.server.close()
        with self.assertRaises(TransientNetworkError):
            await self.client.fetch("u1")

    async def test_session_token_takes_precedence(self) -> None:
        client = HttpRemoteWatchlistService(
            base_url=self.base_url,
            api_token="static-token",
            token_provider=lambda: "session-token",
        )
        try:
            await client.fetch("u1")
        finally:
            await client.close()
        self.assertEqual(self.auth_headers, ["Bearer session-token"])

    async def test_store_round_trip_over_http(self) -> None:
        auth = StaticAuthContext(user_id="u1")
        store = WatchlistStore(
            remote=HttpRemoteWatchlistService(base_url=self.base_url, token_provider=lambda: auth.token),
            local=InMemoryLocalStore(),
            auth=auth,
        )
        self.assertTrue(await store.ensure_synced())
        self.assertEqual(store.sync_mode, SyncMode.BACKEND)

        self.assertTrue(await store.add("u1", {"id": 27205, "title": "Inception"}))
        self.assertIsNotNone(store.items[0].added_at)

        failed = await store.add("broken", {"movieId": "1", "title": "A"})
        self.assertFalse(failed)
        self.assertFalse(store.contains("1"))
        self.assertIn("500", store.error or "")

        self.assertTrue(await store.remove("u1", 27205))
        self.assertEqual(store.items, ())
        await store.close()


if __name__ == "__main__":
    unittest.main()
