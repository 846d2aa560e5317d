from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

from application.ports.local_watchlist_port import LocalDurableStorePort
from domain.watchlist import WatchlistEntry, entry_to_dict, normalize_entries
from infrastructure.config.settings import WATCHLIST_LOCAL_PATH

logger = logging.getLogger(__name__)

WATCHLIST_KEY = "watchlist"


class JsonFileLocalStore(LocalDurableStorePort):
    """Key/value JSON file standing in for browser local storage.

    The whole document is rewritten on every change via a temp file and
    ``os.replace``, so readers see either the old or the new content.
    Corrupt or unreadable files load as empty; write failures are logged.
    """

    def __init__(self, path: Path | str = WATCHLIST_LOCAL_PATH) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def _read_document(self) -> dict[str, Any]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            logger.warning("Failed to read local watchlist file %s: %s", self._path, e)
            return {}
        try:
            doc = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring corrupt local watchlist file %s", self._path)
            return {}
        return doc if isinstance(doc, dict) else {}

    def _write_document(self, doc: dict[str, Any]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(prefix=".watchlist-", suffix=".tmp", dir=str(self._path.parent))
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(doc, fh, ensure_ascii=False)
                os.replace(tmp, self._path)
            except BaseException:
                if os.path.exists(tmp):
                    os.unlink(tmp)
                raise
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Failed to write local watchlist file %s: %s", self._path, e)

    def load(self) -> Optional[list[WatchlistEntry]]:
        raw = self._read_document().get(WATCHLIST_KEY)
        if not isinstance(raw, list):
            return None
        return normalize_entries(raw)

    def save(self, entries: list[WatchlistEntry]) -> None:
        self.set_value(WATCHLIST_KEY, [entry_to_dict(e) for e in entries])

    def get_value(self, key: str) -> Optional[Any]:
        return self._read_document().get(key)

    def set_value(self, key: str, value: Any) -> None:
        doc = self._read_document()
        doc[key] = value
        self._write_document(doc)

    def delete_value(self, key: str) -> None:
        doc = self._read_document()
        if key in doc:
            del doc[key]
            self._write_document(doc)
