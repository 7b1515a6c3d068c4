"""SQLite backing store.

Persists cache entries in a single table so they survive across requests
and processes. Values are stored as JSON text; pattern deletion runs the
escaped ``LIKE`` pattern directly in SQL.
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
import json
from pathlib import Path
import sqlite3
import time
from typing import Any

from ..core.logging import get_logger
from .exceptions import CacheBackendError
from .interface import CacheBackend
from .patterns import LIKE_ESCAPE

logger = get_logger(__name__)


class SqliteCacheBackend(CacheBackend):
    """Cache entries in a SQLite database file."""

    TABLE = "schema_cache"

    def __init__(
        self, path: str | Path, clock: Callable[[], float] = time.time
    ) -> None:
        self._path = str(path)
        self.clock = clock
        if self._path != ":memory:":
            Path(self._path).parent.mkdir(parents=True, exist_ok=True)
        # One shared connection keeps ":memory:" databases alive
        self._conn = sqlite3.connect(self._path)
        self._conn.execute("PRAGMA case_sensitive_like = ON")
        self._init_db()

    def _init_db(self) -> None:
        """Initialize database schema."""
        with self._get_conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {self.TABLE} (
                    cache_key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    expires_at REAL
                )
                """
            )

    @contextmanager
    def _get_conn(self) -> Iterator[sqlite3.Connection]:
        """Yield the connection inside a transaction, wrapping sqlite errors."""
        try:
            with self._conn:
                yield self._conn
        except sqlite3.Error as e:
            raise CacheBackendError(f"SQLite cache operation failed: {e}", e) from e

    def get(self, key: str) -> Any | None:
        with self._get_conn() as conn:
            row = conn.execute(
                f"SELECT value, expires_at FROM {self.TABLE} WHERE cache_key = ?",
                (key,),
            ).fetchone()
            if row is None:
                return None

            value, expires_at = row
            if expires_at is not None and expires_at <= self.clock():
                conn.execute(f"DELETE FROM {self.TABLE} WHERE cache_key = ?", (key,))
                return None

        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            raise CacheBackendError(f"Corrupt cache value for '{key}'", e) from e

    def set(self, key: str, value: Any, ttl: int) -> bool:
        if value is None:
            return False
        try:
            encoded = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise CacheBackendError(f"Value for '{key}' is not serializable", e) from e

        expires_at = self.clock() + ttl if ttl > 0 else None
        with self._get_conn() as conn:
            conn.execute(
                f"INSERT OR REPLACE INTO {self.TABLE} (cache_key, value, expires_at) "
                "VALUES (?, ?, ?)",
                (key, encoded, expires_at),
            )
        return True

    def delete(self, key: str) -> bool:
        with self._get_conn() as conn:
            cursor = conn.execute(
                f"DELETE FROM {self.TABLE} WHERE cache_key = ?", (key,)
            )
            return cursor.rowcount > 0

    def delete_like(self, pattern: str) -> int:
        with self._get_conn() as conn:
            cursor = conn.execute(
                f"DELETE FROM {self.TABLE} WHERE cache_key LIKE ? ESCAPE ?",
                (pattern, LIKE_ESCAPE),
            )
            return cursor.rowcount

    def count_like(self, pattern: str) -> int:
        with self._get_conn() as conn:
            row = conn.execute(
                f"SELECT COUNT(*) FROM {self.TABLE} WHERE cache_key LIKE ? ESCAPE ? "
                "AND (expires_at IS NULL OR expires_at > ?)",
                (pattern, LIKE_ESCAPE, self.clock()),
            ).fetchone()
            return int(row[0])

    def info(self) -> dict[str, Any]:
        return {"backend": "sqlite", "path": self._path}

    def close(self) -> None:
        try:
            self._conn.close()
        except sqlite3.Error as e:
            logger.warning("Error closing SQLite cache", error=str(e))
