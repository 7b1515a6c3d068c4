"""Schema cache with request memo layer and reactive invalidation.

Sits in front of expensive provider calls. Keys are namespaced with a
prefix and bounded in length; a metadata record is kept per key for
invalidation bookkeeping, and expired records are purged on every write.
Backing-store failures are logged and treated as misses so generation
proceeds uncached instead of failing.
"""

from collections.abc import Callable, Iterable
import hashlib
import time
from typing import Any

from ..core.hooks import ContentEvent, HookDispatcher, HookName
from ..core.logging import get_logger
from .exceptions import CacheError
from .interface import CacheBackend
from .models import CacheMetadata, CacheStats
from .patterns import escape_like, glob_to_like, like_to_regex

logger = get_logger(__name__)

DEFAULT_PREFIX = "wp_schema_"
DEFAULT_TTL = 3600
MAX_KEY_LENGTH = 172
# Characters of the original key kept in front of the hash for long keys
HASHED_KEY_PREFIX_LENGTH = 20


class SchemaCache:
    """Key/value cache with pattern-based bulk invalidation."""

    def __init__(
        self,
        backend: CacheBackend,
        prefix: str = DEFAULT_PREFIX,
        default_ttl: int = DEFAULT_TTL,
        max_key_length: int = MAX_KEY_LENGTH,
        use_memory_cache: bool = True,
        hooks: HookDispatcher | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.backend = backend
        self.prefix = prefix
        self.default_ttl = default_ttl
        self.max_key_length = max_key_length
        self.use_memory_cache = use_memory_cache
        self.hooks = hooks
        self.clock = clock
        self.metadata_key = f"__metadata__{prefix}"
        self._memory: dict[str, Any] = {}

    # Key handling

    def build_cache_key(self, key: str) -> str:
        """Namespace a key, hashing overlong keys.

        Overlong keys keep the prefix and the first characters of the original
        key in front of an md5 of the full key, so prefix-based invalidation
        patterns can still find them.
        """
        cache_key = self.prefix + key
        if len(cache_key) > self.max_key_length:
            digest = hashlib.md5(key.encode("utf-8")).hexdigest()
            cache_key = f"{self.prefix}{key[:HASHED_KEY_PREFIX_LENGTH]}_{digest}"
        return cache_key

    # Single-key operations

    def get(self, key: str) -> Any | None:
        """Return the cached value for ``key``, or None on a miss."""
        cache_key = self.build_cache_key(key)

        if self.use_memory_cache and cache_key in self._memory:
            return self._memory[cache_key]

        try:
            value = self.backend.get(cache_key)
        except CacheError as e:
            logger.warning("Cache read failed", key=key, error=str(e))
            return None

        if self.use_memory_cache and value is not None:
            self._memory[cache_key] = value
        return value

    def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Store ``value`` under ``key`` for ``ttl`` seconds."""
        ttl = self.default_ttl if ttl is None else ttl
        cache_key = self.build_cache_key(key)

        if self.use_memory_cache:
            self._memory[cache_key] = value

        try:
            result = self.backend.set(cache_key, value, ttl)
        except CacheError as e:
            logger.warning("Cache write failed", key=key, error=str(e))
            return False

        self._store_metadata(key, cache_key, ttl)
        return result

    def delete(self, key: str) -> bool:
        cache_key = self.build_cache_key(key)
        self._memory.pop(cache_key, None)

        try:
            result = self.backend.delete(cache_key)
        except CacheError as e:
            logger.warning("Cache delete failed", key=key, error=str(e))
            return False

        self._remove_metadata([cache_key])
        return result

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    # Batch operations

    def get_multiple(self, keys: Iterable[str]) -> dict[str, Any | None]:
        return {key: self.get(key) for key in keys}

    def set_multiple(self, values: dict[str, Any], ttl: int | None = None) -> bool:
        """Store several values; every key is attempted even after a failure."""
        results = [self.set(key, value, ttl) for key, value in values.items()]
        return all(results)

    def delete_multiple(self, keys: Iterable[str]) -> bool:
        """Delete several keys; every key is attempted even after a failure."""
        results = [self.delete(key) for key in keys]
        return all(results)

    # Bulk invalidation

    def delete_by_pattern(self, pattern: str) -> bool:
        """Delete every key matching a ``*`` glob, in memo and backing store."""
        like = escape_like(self.prefix) + glob_to_like(pattern)
        regex = like_to_regex(like)

        self._memory = {
            cache_key: value
            for cache_key, value in self._memory.items()
            if not regex.match(cache_key)
        }

        try:
            removed = self.backend.delete_like(like)
        except CacheError as e:
            logger.warning("Cache pattern delete failed", pattern=pattern, error=str(e))
            return False

        metadata = self._load_metadata()
        self._remove_metadata(
            [cache_key for cache_key in metadata if regex.match(cache_key)]
        )
        logger.debug("Cache pattern deleted", pattern=pattern, removed=removed)
        return True

    def flush(self) -> bool:
        """Clear the memo layer, every namespaced entry and all metadata."""
        self._memory = {}

        try:
            self.backend.delete_like(escape_like(self.prefix) + "%")
            self.backend.delete(self.metadata_key)
        except CacheError as e:
            logger.error("Cache flush failed", error=str(e))
            return False

        logger.info("Schema cache flushed")
        if self.hooks:
            self.hooks.notify(HookName.CACHE_FLUSHED)
        return True

    def invalidate_post(self, post_id: int | str) -> None:
        """Drop every entry derived from a post."""
        for pattern in (
            f"provider_singular_*{post_id}*",
            "provider_home_*",
            f"schema_post_{post_id}_*",
            f"context_singular_*{post_id}*",
        ):
            self.delete_by_pattern(pattern)

        logger.debug("Post cache invalidated", post_id=post_id)
        if self.hooks:
            self.hooks.notify(HookName.POST_CACHE_INVALIDATED, post_id)

    def invalidate_term(self, term_id: int | str) -> None:
        """Drop every entry derived from a taxonomy term."""
        for pattern in (
            f"provider_taxonomy_*{term_id}*",
            f"provider_archive_*{term_id}*",
            f"schema_term_{term_id}_*",
            f"context_taxonomy_*{term_id}*",
        ):
            self.delete_by_pattern(pattern)

        logger.debug("Term cache invalidated", term_id=term_id)
        if self.hooks:
            self.hooks.notify(HookName.TERM_CACHE_INVALIDATED, term_id)

    def invalidate_home(self) -> None:
        """Drop home-page entries after site identity changes."""
        for pattern in ("provider_home_*", "schema_home_*", "context_home_*"):
            self.delete_by_pattern(pattern)

        logger.debug("Home cache invalidated")
        if self.hooks:
            self.hooks.notify(HookName.HOME_CACHE_INVALIDATED)

    def register_invalidation_hooks(self, hooks: HookDispatcher) -> None:
        """Wire content-change events reported by the host to invalidation."""
        for event in (
            ContentEvent.SAVE_POST,
            ContentEvent.DELETE_POST,
            ContentEvent.TRASH_POST,
            ContentEvent.UNTRASH_POST,
        ):
            hooks.add_action(event, self.invalidate_post)

        for event in (
            ContentEvent.EDIT_TERM,
            ContentEvent.CREATE_TERM,
            ContentEvent.DELETE_TERM,
        ):
            hooks.add_action(event, self.invalidate_term)

        for event in (
            ContentEvent.UPDATE_SITE_IDENTITY,
            ContentEvent.CUSTOMIZE_SAVE_AFTER,
        ):
            hooks.add_action(event, lambda *_args: self.invalidate_home())

        for event in (
            ContentEvent.SWITCH_THEME,
            ContentEvent.ACTIVATED_PLUGIN,
            ContentEvent.DEACTIVATED_PLUGIN,
            ContentEvent.UPDATE_NAV_MENU,
        ):
            hooks.add_action(event, lambda *_args: self.flush())

    # Request lifecycle

    def reset_request(self) -> None:
        """Discard the memo layer at the end of a generation request."""
        self._memory = {}

    def get_stats(self) -> CacheStats:
        try:
            backend_count = self.backend.count_like(escape_like(self.prefix) + "%")
        except CacheError as e:
            logger.warning("Cache stats unavailable", error=str(e))
            backend_count = 0

        return CacheStats(
            backend_count=backend_count,
            memory_cache_count=len(self._memory),
            memory_cache_enabled=self.use_memory_cache,
            metadata_count=len(self._load_metadata()),
            backend_info=self.backend.info(),
        )

    def get_metadata(self) -> dict[str, CacheMetadata]:
        """Metadata records keyed by namespaced cache key."""
        return {
            cache_key: CacheMetadata(**record)
            for cache_key, record in self._load_metadata().items()
        }

    # Metadata bookkeeping

    def _load_metadata(self) -> dict[str, dict[str, Any]]:
        try:
            metadata = self.backend.get(self.metadata_key)
        except CacheError as e:
            logger.warning("Cache metadata read failed", error=str(e))
            return {}
        return metadata if isinstance(metadata, dict) else {}

    def _save_metadata(self, metadata: dict[str, dict[str, Any]]) -> None:
        try:
            if metadata:
                self.backend.set(self.metadata_key, metadata, 0)
            else:
                self.backend.delete(self.metadata_key)
        except CacheError as e:
            logger.warning("Cache metadata write failed", error=str(e))

    def _store_metadata(self, original_key: str, cache_key: str, ttl: int) -> None:
        now = self.clock()
        metadata = self._load_metadata()
        metadata[cache_key] = CacheMetadata(
            original_key=original_key,
            created=now,
            ttl=ttl,
            expires=now + ttl if ttl > 0 else float("inf"),
        ).model_dump()
        metadata = {
            key: record for key, record in metadata.items() if record["expires"] > now
        }
        self._save_metadata(metadata)

    def _remove_metadata(self, cache_keys: list[str]) -> None:
        if not cache_keys:
            return
        metadata = self._load_metadata()
        for cache_key in cache_keys:
            metadata.pop(cache_key, None)
        self._save_metadata(metadata)
