"""In-memory backing store.

Useful for tests, development and single-process deployments where a
persistent store is not needed. Values are deep-copied on the way in and
out so callers can never mutate what is stored.
"""

from collections.abc import Callable
import copy
import time
from typing import Any

from .interface import CacheBackend
from .patterns import like_to_regex


class MemoryCacheBackend(CacheBackend):
    """Dictionary-backed store with lazy expiry."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        # key -> (value, expires_at or None)
        self.entries: dict[str, tuple[Any, float | None]] = {}
        self.clock = clock

    def get(self, key: str) -> Any | None:
        entry = self.entries.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if expires_at is not None and expires_at <= self.clock():
            del self.entries[key]
            return None
        return copy.deepcopy(value)

    def set(self, key: str, value: Any, ttl: int) -> bool:
        if value is None:
            return False
        expires_at = self.clock() + ttl if ttl > 0 else None
        self.entries[key] = (copy.deepcopy(value), expires_at)
        return True

    def delete(self, key: str) -> bool:
        return self.entries.pop(key, None) is not None

    def delete_like(self, pattern: str) -> int:
        regex = like_to_regex(pattern)
        matches = [key for key in self.entries if regex.match(key)]
        for key in matches:
            del self.entries[key]
        return len(matches)

    def count_like(self, pattern: str) -> int:
        regex = like_to_regex(pattern)
        now = self.clock()
        return sum(
            1
            for key, (_value, expires_at) in self.entries.items()
            if regex.match(key) and (expires_at is None or expires_at > now)
        )

    def info(self) -> dict[str, Any]:
        return {"backend": "memory", "entries": len(self.entries)}
