"""Abstract backing-store interface for the schema cache.

A backing store is a flat namespace of string keys with per-key TTLs. It
supports exact reads, writes and deletes plus ``LIKE``-style wildcard
deletion, which the schema cache uses for pattern-based invalidation.
"""

from abc import ABC, abstractmethod
from typing import Any


class CacheBackend(ABC):
    """Abstract interface for cache backing stores.

    Keys arrive already namespaced. Operations are atomic per key; there are
    no cross-key transactions. ``None`` is never stored, so a ``None`` read
    always means a miss.
    """

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Read a value.

        Args:
            key: Namespaced storage key

        Returns:
            The stored value, or None if absent or expired

        Raises:
            CacheBackendError: If the store cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: Any, ttl: int) -> bool:
        """Write a value.

        Args:
            key: Namespaced storage key
            value: JSON-serializable value
            ttl: Lifetime in seconds; 0 means no expiry

        Returns:
            True if the value was stored

        Raises:
            CacheBackendError: If the store cannot be written
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete a key.

        Returns:
            True if the key existed and was removed
        """
        pass

    @abstractmethod
    def delete_like(self, pattern: str) -> int:
        """Delete every key matching an escaped ``LIKE`` pattern.

        Returns:
            Number of keys removed
        """
        pass

    @abstractmethod
    def count_like(self, pattern: str) -> int:
        """Count live keys matching an escaped ``LIKE`` pattern."""
        pass

    def info(self) -> dict[str, Any]:
        """Backend-specific details for stats reporting."""
        return {"backend": type(self).__name__}

    def close(self) -> None:
        """Release backend resources. Should not raise."""
        return None
