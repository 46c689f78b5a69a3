"""Watchlist persistence factory.

Picks the storage backend for the watchlist from configuration so the
application layer only ever sees `WatchlistPersistencePort`.
"""

from __future__ import annotations

import logging
import os
from typing import Literal

from application.ports.watchlist_persistence_port import WatchlistPersistencePort
from infrastructure.config.settings import WATCHLIST_PATH, WATCHLIST_PROVIDER

logger = logging.getLogger(__name__)

ProviderType = Literal["json", "null", ""]


class WatchlistPersistenceFactory:
    @staticmethod
    def create(
        provider: ProviderType | None = None,
        *,
        path: str | os.PathLike[str] | None = None,
    ) -> WatchlistPersistencePort:
        """Create a persistence backend.

        Args:
            provider: 'json', 'null', or None to read WATCHLIST_PROVIDER.
            path: JSON file location (default: WATCHLIST_PATH).

        Raises:
            ValueError: If an unsupported provider is specified.
        """
        if provider is None:
            provider = WATCHLIST_PROVIDER  # type: ignore[assignment]

        provider = (provider or "").strip().lower()

        match provider:
            case "json":
                from infrastructure.persistence.watchlist.json_watchlist_store import (
                    JsonFileWatchlistPersistence,
                )

                target = path or WATCHLIST_PATH
                logger.info("watchlist persistence: json file %s", target)
                return JsonFileWatchlistPersistence(target)

            case "null" | "":
                from infrastructure.persistence.watchlist.json_watchlist_store import (
                    NullWatchlistPersistence,
                )

                logger.info("watchlist persistence disabled (in-memory only)")
                return NullWatchlistPersistence()

            case _:
                raise ValueError(
                    f"Unsupported WATCHLIST_PROVIDER: {provider!r}. "
                    f"Supported values: 'json', 'null'"
                )


def create_watchlist_persistence(
    provider: ProviderType | None = None,
    *,
    path: str | os.PathLike[str] | None = None,
) -> WatchlistPersistencePort:
    return WatchlistPersistenceFactory.create(provider, path=path)
