"""Key/value caches with expiration, used to persist icon bitmaps."""

import json
import logging
import threading
from pathlib import Path
from typing import Any, Protocol

from forecast_builder.models.common import epoch_ms, utc_now
from forecast_builder.storage import cache_repo
from forecast_builder.storage.database import connect, run_migrations

logger = logging.getLogger(__name__)


class ByteCache(Protocol):
    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any, expires_at: int) -> None: ...


class SqliteCache:
    """ByteCache backed by a SQLite file.

    Values must be JSON serializable. ``expires_at`` is epoch milliseconds.
    One connection is shared across threads behind a lock.
    """

    def __init__(self, db_path: str | Path):
        self.db_path = db_path
        self._lock = threading.Lock()
        self._conn = connect(db_path, shared=True)
        run_migrations(self._conn)

    def get(self, key: str) -> Any | None:
        with self._lock:
            raw = cache_repo.get_entry(self._conn, key, epoch_ms(utc_now()))
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: Any, expires_at: int) -> None:
        payload = json.dumps(value)
        with self._lock:
            cache_repo.set_entry(self._conn, key, payload, expires_at)

    def purge_expired(self) -> int:
        with self._lock:
            removed = cache_repo.delete_expired(self._conn, epoch_ms(utc_now()))
        logger.info("Purged %d expired cache entries", removed)
        return removed

    def __len__(self) -> int:
        with self._lock:
            return cache_repo.count_entries(self._conn)

    def close(self) -> None:
        with self._lock:
            self._conn.close()


class MemoryCache:
    """In-process ByteCache with the same expiration semantics."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, tuple[Any, int]] = {}

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at <= epoch_ms(utc_now()):
            return None
        return value

    def set(self, key: str, value: Any, expires_at: int) -> None:
        with self._lock:
            self._entries[key] = (value, expires_at)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
