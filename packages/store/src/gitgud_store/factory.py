"""Build the configured store from the merged gitgud config."""

from __future__ import annotations

import logging

from gitgud_store.base import BaseStore
from gitgud_store.noop import NoOpStore
from gitgud_store.sqlite import SQLiteStore

logger = logging.getLogger(__name__)


def open_store(config: dict) -> BaseStore:
    """Instantiate the store named by ``config["store"]``.

    Store selection:
      store: sqlite → SQLiteStore at store_path (default .gitgud.db)
      store: noop   → NoOpStore (nothing persisted)
    """
    store_type = config.get("store", "sqlite")

    if store_type == "sqlite":
        db_path = config.get("store_path") or ".gitgud.db"
        logger.debug("Opening SQLite store at %s", db_path)
        return SQLiteStore(db_path=db_path)

    if store_type == "noop":
        return NoOpStore()

    raise ValueError(f"unknown store type {store_type!r}; expected 'sqlite' or 'noop'")
