import sys
import tempfile
import unittest
from pathlib import Path

_BACKEND_ROOT = Path(__file__).resolve().parents[1] / "backend"
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))

from application.watchlist import WatchlistStore
from domain.watchlist import SyncMode
from infrastructure.watchlist import InMemoryLocalStore, JsonFileLocalStore, StaticAuthContext


class _UnusedRemote:
    """Signed-out stores must never touch the network."""

    async def fetch(self, user_id):
        raise AssertionError("fetch must not be called in local mode")

    async def add(self, user_id, entry):
        raise AssertionError("add must not be called in local mode")

    async def remove(self, user_id, movie_id):
        raise AssertionError("remove must not be called in local mode")

    async def close(self) -> None:
        return None


def _store(local) -> WatchlistStore:
    return WatchlistStore(remote=_UnusedRemote(), local=local, auth=StaticAuthContext())


class TestLocalModeWatchlist(unittest.TestCase):
    def test_add_then_remove_writes_through_local_storage(self) -> None:
        local = InMemoryLocalStore()
        store = _store(local)

        self.assertIsNone(store.add(None, {"movieId": "27205", "title": "Inception"}))
        self.assertTrue(store.contains("27205"))
        self.assertTrue(store.contains(27205))
        self.assertEqual(len(local.save_calls[-1]), 1)
        self.assertEqual(local.save_calls[-1][0].movie_id, "27205")

        store.remove(None, "27205")
        self.assertEqual(store.items, ())
        self.assertEqual(local.save_calls[-1], [])
        self.assertEqual(store.sync_mode, SyncMode.LOCAL)
        self.assertFalse(store.is_loading)

    def test_items_stay_unique_by_movie_id(self) -> None:
        local = InMemoryLocalStore()
        store = _store(local)
        for raw in (
            {"movieId": "27205", "title": "Inception"},
            {"id": 27205, "title": "Inception (legacy)"},
            {"movieId": "157336", "title": "Interstellar"},
            {"movie_id": 27205, "title": "Inception again"},
        ):
            store.add(None, raw)

        ids = [e.movie_id for e in store.items]
        self.assertEqual(ids, ["27205", "157336"])
        self.assertEqual(store.items[0].title, "Inception")
        # The duplicate adds were no-ops and did not rewrite storage.
        self.assertEqual(len(local.save_calls), 2)

    def test_removing_unknown_movie_does_not_rewrite_storage(self) -> None:
        local = InMemoryLocalStore()
        store = _store(local)
        store.remove(None, "404")
        self.assertEqual(local.save_calls, [])

    def test_hydrate_is_idempotent(self) -> None:
        local = InMemoryLocalStore()
        store = _store(local)
        store.add(None, {"movieId": "1", "title": "A"})
        store.add(None, {"movieId": "2", "title": "B"})

        store.hydrate()
        first = store.items
        store.hydrate()
        self.assertEqual(store.items, first)

    def test_reset_empties_list_and_storage(self) -> None:
        local = InMemoryLocalStore()
        store = _store(local)
        store.add(None, {"movieId": "1", "title": "A"})
        store.reset()
        self.assertEqual(store.items, ())
        self.assertEqual(local.save_calls[-1], [])
        self.assertEqual(_store(local).items, ())

    def test_listeners_see_every_change_and_can_unsubscribe(self) -> None:
        store = _store(InMemoryLocalStore())
        seen = []
        unsubscribe = store.subscribe(lambda state: seen.append(len(state.items)))

        store.add(None, {"movieId": "1", "title": "A"})
        store.add(None, {"movieId": "2", "title": "B"})
        unsubscribe()
        store.remove(None, "1")

        self.assertEqual(seen, [1, 2])

    def test_failing_listener_does_not_break_the_store(self) -> None:
        store = _store(InMemoryLocalStore())

        def _boom(state):
            raise RuntimeError("listener bug")

        store.subscribe(_boom)
        with self.assertLogs("application.watchlist.watchlist_store", level="ERROR"):
            store.add(None, {"movieId": "1", "title": "A"})
        self.assertTrue(store.contains("1"))


class TestJsonFileLocalStore(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "nested" / "watchlist.json"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_restart_reproduces_items_in_order(self) -> None:
        store = _store(JsonFileLocalStore(self.path))
        store.add(None, {"movieId": "27205", "title": "Inception", "year": "2010"})
        store.add(None, {"id": 157336, "title": "Interstellar", "overview": "Space."})
        store.add(None, {"movieId": "603", "title": "The Matrix"})
        store.remove(None, "603")

        restarted = _store(JsonFileLocalStore(self.path))
        self.assertEqual(restarted.items, store.items)
        self.assertEqual([e.movie_id for e in restarted.items], ["27205", "157336"])

    def test_missing_file_hydrates_empty(self) -> None:
        store = _store(JsonFileLocalStore(self.path))
        self.assertEqual(store.items, ())
        self.assertEqual(store.sync_mode, SyncMode.LOCAL)

    def test_corrupt_file_hydrates_empty(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text("{not json", encoding="utf-8")
        local = JsonFileLocalStore(self.path)
        self.assertIsNone(local.load())
        self.assertEqual(_store(local).items, ())

    def test_wrong_shape_hydrates_empty(self) -> None:
        self.path.parent.mkdir(parents=True)
        self.path.write_text('{"watchlist": {"movieId": "1"}}', encoding="utf-8")
        self.assertEqual(_store(JsonFileLocalStore(self.path)).items, ())

    def test_values_share_the_document_with_the_list(self) -> None:
        local = JsonFileLocalStore(self.path)
        local.set_value("returnUrl", "/movie/1")
        _store(local).add(None, {"movieId": "1", "title": "A"})

        reopened = JsonFileLocalStore(self.path)
        self.assertEqual(reopened.get_value("returnUrl"), "/movie/1")
        self.assertEqual(len(reopened.load() or []), 1)

        reopened.delete_value("returnUrl")
        self.assertIsNone(JsonFileLocalStore(self.path).get_value("returnUrl"))

    def test_no_temp_files_left_behind(self) -> None:
        store = _store(JsonFileLocalStore(self.path))
        store.add(None, {"movieId": "1", "title": "A"})
        self.assertEqual(sorted(p.name for p in self.path.parent.iterdir()), ["watchlist.json"])


if __name__ == "__main__":
    unittest.main()
