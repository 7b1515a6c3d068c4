"""Unit tests for the extension-point dispatcher and context detection."""

from schemagraph.core import (
    ContentEvent,
    ContextDetector,
    EventDispatcher,
    HookName,
    RequestState,
)


class TestEventDispatcher:
    """Test filter and action dispatch."""

    def test_emit_without_filters_returns_value(self):
        """Test an unfiltered extension point passes the value through."""
        hooks = EventDispatcher()
        assert hooks.emit("anything", {"a": 1}) == {"a": 1}

    def test_none_result_keeps_prior_value(self):
        """Test a filter returning None leaves the value unchanged."""
        hooks = EventDispatcher()
        hooks.add_filter("value", lambda value: None)
        hooks.add_filter("value", lambda value: value + 1)

        assert hooks.emit("value", 1) == 2

    def test_filters_run_by_priority_then_registration(self):
        """Test ascending priority order with ties in registration order."""
        hooks = EventDispatcher()
        hooks.add_filter("order", lambda value: value + ["late"], priority=20)
        hooks.add_filter("order", lambda value: value + ["first"])
        hooks.add_filter("order", lambda value: value + ["second"])
        hooks.add_filter("order", lambda value: value + ["early"], priority=1)

        assert hooks.emit("order", []) == ["early", "first", "second", "late"]

    def test_filter_receives_extra_arguments(self):
        """Test call-site arguments follow the value."""
        hooks = EventDispatcher()
        hooks.add_filter(HookName.CACHE_TTL, lambda ttl, context: 60 if context == "home" else ttl)

        assert hooks.emit(HookName.CACHE_TTL, 3600, "home") == 60
        assert hooks.emit(HookName.CACHE_TTL, 3600, "singular") == 3600

    def test_enum_and_string_names_are_equivalent(self):
        """Test enum members address the same extension point as their value."""
        hooks = EventDispatcher()
        hooks.add_filter("schema_cache_key", lambda key, *args: key + "_x")

        assert hooks.emit(HookName.CACHE_KEY, "k") == "k_x"

    def test_failing_filter_is_skipped(self):
        """Test a raising participant does not break the chain."""
        hooks = EventDispatcher()

        def broken(value):
            raise RuntimeError("boom")

        hooks.add_filter("value", broken)
        hooks.add_filter("value", lambda value: value * 10)

        assert hooks.emit("value", 2) == 20

    def test_actions_are_notified_in_order(self):
        """Test actions receive arguments and failures are contained."""
        hooks = EventDispatcher()
        calls = []

        def broken(*args):
            raise ValueError("nope")

        hooks.add_action(ContentEvent.SAVE_POST, lambda post_id: calls.append(("a", post_id)))
        hooks.add_action(ContentEvent.SAVE_POST, broken)
        hooks.add_action(ContentEvent.SAVE_POST, lambda post_id: calls.append(("b", post_id)))

        hooks.notify(ContentEvent.SAVE_POST, 42)
        assert calls == [("a", 42), ("b", 42)]

    def test_registered_hooks_and_remove_all(self):
        """Test hook listing and removal."""
        hooks = EventDispatcher()
        hooks.add_filter(HookName.PIECES, lambda pieces, context: pieces)
        hooks.add_action(HookName.CACHE_FLUSHED, lambda: None)

        assert hooks.get_registered_hooks() == ["schema_cache_flushed", "schema_pieces"]
        assert hooks.has_filter(HookName.PIECES)

        hooks.remove_all(HookName.PIECES)
        assert not hooks.has_filter(HookName.PIECES)
        assert hooks.get_registered_hooks() == ["schema_cache_flushed"]


class TestContextDetector:
    """Test request state to context mapping."""

    def test_front_page_is_home(self):
        """Test the front page wins over other flags."""
        detector = ContextDetector()
        state = RequestState(is_front_page=True, is_singular=True)
        assert detector.get_current_context(state) == "home"

    def test_context_mapping(self):
        """Test each request flag maps to its context."""
        detector = ContextDetector()
        assert detector.get_current_context(RequestState(is_singular=True)) == "singular"
        assert detector.get_current_context(RequestState(is_posts_page=True)) == "archive"
        assert detector.get_current_context(RequestState(is_search=True)) == "search"
        assert detector.get_current_context(RequestState(is_404=True)) == "404"
        assert detector.get_current_context(RequestState()) == "unknown"

    def test_should_generate_schema(self):
        """Test admin and feed requests and dead-end contexts are skipped."""
        detector = ContextDetector()
        assert detector.should_generate_schema("home", RequestState()) is True
        assert detector.should_generate_schema("home", RequestState(is_feed=True)) is False
        assert detector.should_generate_schema("home", RequestState(is_admin=True)) is False
        assert detector.should_generate_schema("404", RequestState()) is False
        assert detector.should_generate_schema("unknown", RequestState()) is False
