from __future__ import annotations

import logging
from typing import Optional

from .db import get_session
from .models import KeyValueEntry

logger = logging.getLogger("widget_sync.storage.kv")


class KeyValueStore:
    """String key-value persistence on the configured SQLite engine."""

    def get(self, key: str) -> Optional[str]:
        with get_session() as session:
            entry = session.get(KeyValueEntry, key)
            return entry.value if entry is not None else None

    def set(self, key: str, value: str) -> None:
        with get_session() as session:
            entry = session.get(KeyValueEntry, key)
            if entry is None:
                session.add(KeyValueEntry(key=key, value=value))
            else:
                entry.value = value
        logger.debug({"event": "kv.set", "key": key})

    def delete(self, key: str) -> None:
        with get_session() as session:
            entry = session.get(KeyValueEntry, key)
            if entry is not None:
                session.delete(entry)
        logger.debug({"event": "kv.delete", "key": key})
