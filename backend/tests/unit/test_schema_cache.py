"""Unit tests for the schema cache and its backing stores.

The same behavioral checks run against the in-memory store and a SQLite
database so both backends agree on expiry and pattern matching.
"""

from pathlib import Path
import tempfile
from unittest.mock import Mock

import pytest

from schemagraph.cache import (
    CacheBackendError,
    CacheBackendType,
    CacheConfig,
    CacheConfigurationError,
    MemoryCacheBackend,
    SchemaCache,
    SqliteCacheBackend,
    create_cache_backend,
    create_schema_cache,
    escape_like,
    glob_to_like,
    like_to_regex,
    validate_cache_config,
)
from schemagraph.core import ContentEvent, EventDispatcher, HookName


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(params=["memory", "sqlite"])
def backend(request, clock):
    if request.param == "memory":
        yield MemoryCacheBackend(clock=clock)
        return

    with tempfile.TemporaryDirectory() as temp_dir:
        store = SqliteCacheBackend(Path(temp_dir) / "cache.db", clock=clock)
        yield store
        store.close()


@pytest.fixture
def cache(backend, clock):
    return SchemaCache(backend, clock=clock)


class TestPatterns:
    """Test wildcard translation."""

    def test_underscore_is_literal(self):
        """Test LIKE metacharacters in keys are escaped."""
        assert escape_like("wp_schema_") == "wp\\_schema\\_"
        assert glob_to_like("provider_*") == "provider\\_%"

    def test_regex_agrees_with_like(self):
        """Test the compiled regex treats escaped characters literally."""
        regex = like_to_regex(escape_like("wp_schema_") + glob_to_like("provider_home_*"))
        assert regex.match("wp_schema_provider_home_x")
        assert not regex.match("wp_schema_providerXhome_x")
        assert not regex.match("wp_schema_provider_singular_home_42")


class TestSchemaCacheOperations:
    """Test single-key and batch operations on both backends."""

    def test_round_trip_and_delete(self, cache):
        """Test a set value reads back and delete removes it."""
        value = {"a": [1, 2, {"b": "c"}]}
        assert cache.set("k", value) is True
        assert cache.get("k") == value
        assert cache.has("k") is True

        assert cache.delete("k") is True
        assert cache.get("k") is None
        assert cache.has("k") is False

    def test_round_trip_without_memo_layer(self, backend, clock):
        """Test values survive a cache with the memo layer disabled."""
        cache = SchemaCache(backend, use_memory_cache=False, clock=clock)
        cache.set("k", ["x", 0, False])
        assert cache.get("k") == ["x", 0, False]

    def test_expired_entries_are_misses(self, backend, clock):
        """Test an entry past its TTL is gone from the backing store."""
        cache = SchemaCache(backend, use_memory_cache=False, clock=clock)
        cache.set("short", "value", ttl=10)

        clock.advance(11)
        assert cache.get("short") is None

    def test_zero_ttl_never_expires(self, backend, clock):
        """Test a TTL of zero means no expiry."""
        cache = SchemaCache(backend, use_memory_cache=False, clock=clock)
        cache.set("forever", "value", ttl=0)

        clock.advance(10**9)
        assert cache.get("forever") == "value"

    def test_none_is_never_stored(self, cache):
        """Test None values are not cached."""
        assert cache.set("nothing", None) is False

    def test_batch_operations(self, cache):
        """Test multi-key helpers."""
        assert cache.set_multiple({"a": 1, "b": 2}) is True
        assert cache.get_multiple(["a", "b", "c"]) == {"a": 1, "b": 2, "c": None}

        assert cache.delete_multiple(["a", "b"]) is True
        assert cache.get_multiple(["a", "b"]) == {"a": None, "b": None}

    def test_long_keys_are_hashed_with_readable_prefix(self, cache):
        """Test overlong keys keep a prefix of the original key."""
        key = "provider_singular_" + "x" * 300
        cache_key = cache.build_cache_key(key)

        assert len(cache_key) <= 172
        assert cache_key.startswith("wp_schema_provider_singular_")
        cache.set(key, "long")
        assert cache.get(key) == "long"


class TestSchemaCacheInvalidation:
    """Test bulk and reactive invalidation."""

    def test_post_invalidation_is_targeted(self, cache):
        """Test invalidating post 42 spares other posts."""
        cache.set("provider_singular_home_42", "a")
        cache.set("provider_singular_home_43", "b")
        cache.set("provider_home_x", "c")

        cache.invalidate_post(42)

        assert cache.get("provider_singular_home_42") is None
        assert cache.get("provider_home_x") is None
        assert cache.get("provider_singular_home_43") == "b"

    def test_term_invalidation(self, cache):
        """Test term invalidation drops taxonomy and archive entries."""
        cache.set("provider_taxonomy_webpage_t7", "a")
        cache.set("provider_archive_webpage_t7", "b")
        cache.set("provider_taxonomy_webpage_t8", "c")

        cache.invalidate_term(7)

        assert cache.get("provider_taxonomy_webpage_t7") is None
        assert cache.get("provider_archive_webpage_t7") is None
        assert cache.get("provider_taxonomy_webpage_t8") == "c"

    def test_delete_by_pattern_clears_memo_layer(self, cache):
        """Test pattern deletion also drops memoized values."""
        cache.set("provider_home_organization", {"name": "Acme"})
        cache.delete_by_pattern("provider_*")

        assert cache.get("provider_home_organization") is None
        assert cache.get_metadata() == {}

    def test_flush_clears_everything(self, cache):
        """Test flush removes entries and metadata and notifies listeners."""
        hooks = EventDispatcher()
        flushed = []
        hooks.add_action(HookName.CACHE_FLUSHED, lambda: flushed.append(True))
        cache.hooks = hooks

        cache.set("a", 1)
        cache.set("b", 2)
        assert cache.flush() is True

        assert cache.get("a") is None
        assert cache.get_stats().backend_count == 0
        assert cache.get_stats().metadata_count == 0
        assert flushed == [True]

    def test_content_events_trigger_invalidation(self, cache):
        """Test host content events are wired to invalidation."""
        hooks = EventDispatcher()
        invalidated = []
        hooks.add_action(HookName.POST_CACHE_INVALIDATED, invalidated.append)
        cache.hooks = hooks
        cache.register_invalidation_hooks(hooks)

        cache.set("provider_singular_article_p42", "a")
        cache.set("provider_home_website", "b")
        cache.set("unrelated", "c")

        hooks.notify(ContentEvent.SAVE_POST, 42)
        assert cache.get("provider_singular_article_p42") is None
        assert invalidated == [42]

        hooks.notify(ContentEvent.SWITCH_THEME, "new-theme")
        assert cache.get("unrelated") is None


class TestSchemaCacheMetadata:
    """Test metadata bookkeeping and statistics."""

    def test_metadata_records_writes(self, cache, clock):
        """Test each write leaves a metadata record."""
        cache.set("k", "v", ttl=60)
        metadata = cache.get_metadata()["wp_schema_k"]

        assert metadata.original_key == "k"
        assert metadata.ttl == 60
        assert metadata.expires == clock.now + 60

    def test_expired_metadata_is_purged_on_write(self, cache, clock):
        """Test expired records disappear on the next write."""
        cache.set("old", "v", ttl=5)
        clock.advance(10)
        cache.set("new", "v", ttl=60)

        assert list(cache.get_metadata()) == ["wp_schema_new"]

    def test_stats(self, cache):
        """Test statistics snapshot."""
        cache.set("a", 1)
        stats = cache.get_stats()

        assert stats.backend_count == 1
        assert stats.memory_cache_count == 1
        assert stats.memory_cache_enabled is True
        assert stats.metadata_count == 1

        cache.reset_request()
        assert cache.get_stats().memory_cache_count == 0


class TestBackendFailures:
    """Test backing-store failures degrade to misses."""

    @pytest.fixture
    def broken_backend(self):
        backend = Mock()
        error = CacheBackendError("unreachable")
        backend.get.side_effect = error
        backend.set.side_effect = error
        backend.delete.side_effect = error
        backend.delete_like.side_effect = error
        backend.count_like.side_effect = error
        backend.info.return_value = {"backend": "mock"}
        return backend

    @pytest.fixture
    def flaky_backend(self):
        """Memory backend whose writes and deletes fail for one key only."""
        store = MemoryCacheBackend()
        backend = Mock(wraps=store)

        def set_value(key, value, ttl):
            if key == "wp_schema_b":
                raise CacheBackendError("disk full")
            return store.set(key, value, ttl)

        def delete_value(key):
            if key == "wp_schema_b":
                raise CacheBackendError("disk full")
            return store.delete(key)

        backend.set.side_effect = set_value
        backend.delete.side_effect = delete_value
        return backend

    def test_batch_write_attempts_every_key(self, flaky_backend):
        """Test one failing key neither stops the batch nor rolls it back."""
        cache = SchemaCache(flaky_backend, use_memory_cache=False)

        assert cache.set_multiple({"a": 1, "b": 2, "c": 3}) is False

        written = [call.args[0] for call in flaky_backend.set.call_args_list]
        assert [key for key in written if not key.startswith("__metadata__")] == [
            "wp_schema_a",
            "wp_schema_b",
            "wp_schema_c",
        ]
        assert cache.get_multiple(["a", "b", "c"]) == {"a": 1, "b": None, "c": 3}
        assert set(cache.get_metadata()) == {"wp_schema_a", "wp_schema_c"}

    def test_batch_delete_attempts_every_key(self, flaky_backend):
        """Test a failing delete still lets the remaining keys go."""
        cache = SchemaCache(flaky_backend, use_memory_cache=False)
        cache.set_multiple({"a": 1, "c": 3})

        assert cache.delete_multiple(["a", "b", "c"]) is False
        assert cache.get_multiple(["a", "c"]) == {"a": None, "c": None}

    def test_failures_are_misses(self, broken_backend):
        """Test reads miss and writes report failure without raising."""
        cache = SchemaCache(broken_backend, use_memory_cache=False)

        assert cache.get("k") is None
        assert cache.set("k", "v") is False
        assert cache.delete("k") is False
        assert cache.delete_by_pattern("provider_*") is False
        assert cache.flush() is False
        assert cache.get_stats().backend_count == 0


class TestCacheFactory:
    """Test backend factory and configuration validation."""

    def test_memory_backend_by_default(self):
        """Test the default configuration creates a memory store."""
        assert isinstance(create_cache_backend(CacheConfig()), MemoryCacheBackend)

    def test_sqlite_backend(self):
        """Test the sqlite backend is created at the configured path."""
        with tempfile.TemporaryDirectory() as temp_dir:
            config = CacheConfig(
                backend_type=CacheBackendType.SQLITE, path=str(Path(temp_dir) / "c.db")
            )
            cache = create_schema_cache(config)
            assert isinstance(cache.backend, SqliteCacheBackend)
            cache.backend.close()

    def test_sqlite_requires_path(self):
        """Test sqlite without a path is rejected."""
        with pytest.raises(CacheConfigurationError, match="requires a path"):
            validate_cache_config(CacheConfig(backend_type="sqlite"))

    def test_empty_prefix_rejected(self):
        """Test the key prefix is mandatory."""
        with pytest.raises(CacheConfigurationError, match="prefix"):
            validate_cache_config(CacheConfig(prefix=""))

    def test_schema_cache_uses_config(self):
        """Test configuration flows into the schema cache."""
        cache = create_schema_cache(CacheConfig(prefix="site1_", default_ttl=60))
        assert cache.prefix == "site1_"
        assert cache.default_ttl == 60
