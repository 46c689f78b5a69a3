from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Sequence

from application.ports.watchlist_persistence_port import WatchlistPersistencePort
from domain.movies import WatchlistItem

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


class JsonFileWatchlistPersistence(WatchlistPersistencePort):
    """Stores the whole watchlist as one JSON document.

    Writes go to a temp file in the same directory and are swapped in with
    `os.replace`, so a crash mid-write leaves the previous file intact.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[WatchlistItem]:
        if not self._path.exists():
            return []
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("watchlist file %s unreadable, starting empty: %s", self._path, exc)
            return []

        rows = raw.get("items") if isinstance(raw, dict) else raw
        if not isinstance(rows, list):
            logger.warning("watchlist file %s has no item list, starting empty", self._path)
            return []

        items: list[WatchlistItem] = []
        for row in rows:
            try:
                items.append(WatchlistItem.from_dict(row))
            except ValueError as exc:
                logger.warning("skipping unreadable watchlist entry in %s: %s", self._path, exc)
        return items

    def save(self, items: Sequence[WatchlistItem]) -> None:
        payload = {"version": FORMAT_VERSION, "items": [item.to_dict() for item in items]}
        with self._lock:
            tmp_name = None
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(
                    prefix=f".{self._path.name}.", suffix=".tmp", dir=str(self._path.parent)
                )
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(payload, fh, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self._path)
                tmp_name = None
            except OSError as exc:
                # The in-memory watchlist stays authoritative; the next save retries.
                logger.error("failed to persist watchlist to %s: %s", self._path, exc)
            finally:
                if tmp_name is not None and os.path.exists(tmp_name):
                    os.unlink(tmp_name)


class NullWatchlistPersistence(WatchlistPersistencePort):
    def load(self) -> list[WatchlistItem]:
        return []

    def save(self, items: Sequence[WatchlistItem]) -> None:
        _ = items
        return None
