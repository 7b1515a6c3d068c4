"""Extension-point dispatcher.

External code observes and transforms data at named extension points
through a :class:`HookDispatcher`. Filters receive the current value plus
call-site arguments and return either a replacement value or ``None`` to
keep the prior value. Actions are notifications whose return values are
ignored.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from itertools import count
from typing import Any

from .logging import get_logger

logger = get_logger(__name__)

FilterCallback = Callable[..., Any | None]
ActionCallback = Callable[..., None]

DEFAULT_HOOK_PRIORITY = 10


class HookName(str, Enum):
    """Extension points raised by the engine."""

    # Registration
    REGISTER_PROVIDERS = "schema_register_providers"
    PROVIDER_REGISTERED = "schema_provider_registered"
    PROVIDER_UNREGISTERED = "schema_provider_unregistered"
    TYPE_REGISTERED = "schema_type_registered"
    TYPE_UNREGISTERED = "schema_type_unregistered"
    VALIDATOR_REGISTERED = "schema_validator_registered"

    # Generation
    BEFORE_GENERATION = "schema_before_generation"
    AFTER_GENERATION = "schema_after_generation"
    PROVIDER_DATA = "schema_provider_data"
    COLLECTED_DATA = "schema_collected_data"
    PRE_GENERATION_DATA = "schema_pre_generation_data"
    POST_GENERATION = "schema_post_generation"
    TYPE_DATA = "schema_type_data"
    SCHEMA_GENERATED = "schema_generated"

    # Graph
    PIECES = "schema_pieces"
    PIECE_TYPE = "schema_piece_"
    PIECE_ID = "schema_piece_id_"

    # Built-in provider data
    ORGANIZATION_DATA = "schema_organization_data"
    WEBSITE_DATA = "schema_website_data"
    WEBPAGE_DATA = "schema_webpage_data"
    ARTICLE_DATA = "schema_article_data"

    # Cache
    CACHE_KEY = "schema_cache_key"
    CACHE_TTL = "schema_cache_ttl"
    CACHE_FLUSHED = "schema_cache_flushed"
    POST_CACHE_INVALIDATED = "schema_post_cache_invalidated"
    TERM_CACHE_INVALIDATED = "schema_term_cache_invalidated"
    HOME_CACHE_INVALIDATED = "schema_home_cache_invalidated"


class ContentEvent(str, Enum):
    """Source-content change events reported by the hosting application."""

    SAVE_POST = "save_post"
    DELETE_POST = "delete_post"
    TRASH_POST = "trash_post"
    UNTRASH_POST = "untrash_post"
    EDIT_TERM = "edit_term"
    CREATE_TERM = "create_term"
    DELETE_TERM = "delete_term"
    UPDATE_SITE_IDENTITY = "update_site_identity"
    CUSTOMIZE_SAVE_AFTER = "customize_save_after"
    SWITCH_THEME = "switch_theme"
    ACTIVATED_PLUGIN = "activated_plugin"
    DEACTIVATED_PLUGIN = "deactivated_plugin"
    UPDATE_NAV_MENU = "update_nav_menu"


def hook_name(name: "str | HookName | ContentEvent") -> str:
    """Normalize an extension point name to its string form."""
    if isinstance(name, Enum):
        return str(name.value)
    return name


def piece_type_hook(schema_type: str) -> str:
    """Name of the per-type piece filter, keyed by lower-cased type."""
    return f"{HookName.PIECE_TYPE.value}{schema_type.lower()}"


def piece_id_hook(piece_id: str) -> str:
    """Name of the per-id piece filter, keyed by a sanitized id."""
    sanitized = piece_id.replace("#", "").replace("/", "_").replace(":", "_")
    return f"{HookName.PIECE_ID.value}{sanitized}"


class HookDispatcher(ABC):
    """Abstract dispatcher the engine depends on.

    Hosting integrations implement this to bridge to their own event system.
    """

    @abstractmethod
    def emit(self, name: str | HookName, value: Any, *args: Any) -> Any:
        """Run ``value`` through every filter registered for ``name``.

        Returns:
            The filtered value; the input value when no filter has an opinion
        """
        pass

    @abstractmethod
    def notify(self, name: str | HookName | ContentEvent, *args: Any) -> None:
        """Invoke every action registered for ``name``."""
        pass

    @abstractmethod
    def add_filter(
        self,
        name: str | HookName,
        callback: FilterCallback,
        priority: int = DEFAULT_HOOK_PRIORITY,
    ) -> None:
        """Register a filter callback."""
        pass

    @abstractmethod
    def add_action(
        self,
        name: str | HookName | ContentEvent,
        callback: ActionCallback,
        priority: int = DEFAULT_HOOK_PRIORITY,
    ) -> None:
        """Register an action callback."""
        pass

    @abstractmethod
    def get_registered_hooks(self) -> list[str]:
        """Names of all extension points with at least one participant."""
        pass


@dataclass(order=True)
class _Participant:
    priority: int
    sequence: int
    callback: Callable[..., Any] = field(compare=False)


class EventDispatcher(HookDispatcher):
    """In-process dispatcher.

    Participants run in ascending priority order, ties in registration order.
    A participant that raises is logged and skipped so one broken extension
    cannot break generation.
    """

    def __init__(self) -> None:
        self._filters: dict[str, list[_Participant]] = {}
        self._actions: dict[str, list[_Participant]] = {}
        self._sequence = count()

    def add_filter(
        self,
        name: str | HookName,
        callback: FilterCallback,
        priority: int = DEFAULT_HOOK_PRIORITY,
    ) -> None:
        participants = self._filters.setdefault(hook_name(name), [])
        participants.append(_Participant(priority, next(self._sequence), callback))
        participants.sort()

    def add_action(
        self,
        name: str | HookName | ContentEvent,
        callback: ActionCallback,
        priority: int = DEFAULT_HOOK_PRIORITY,
    ) -> None:
        participants = self._actions.setdefault(hook_name(name), [])
        participants.append(_Participant(priority, next(self._sequence), callback))
        participants.sort()

    def remove_all(self, name: str | HookName | ContentEvent) -> None:
        """Drop every participant registered for ``name``."""
        key = hook_name(name)
        self._filters.pop(key, None)
        self._actions.pop(key, None)

    def has_filter(self, name: str | HookName) -> bool:
        return bool(self._filters.get(hook_name(name)))

    def emit(self, name: str | HookName, value: Any, *args: Any) -> Any:
        key = hook_name(name)
        for participant in list(self._filters.get(key, [])):
            try:
                result = participant.callback(value, *args)
            except Exception as e:
                logger.warning(
                    "Filter participant failed",
                    hook=key,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                continue
            if result is not None:
                value = result
        return value

    def notify(self, name: str | HookName | ContentEvent, *args: Any) -> None:
        key = hook_name(name)
        for participant in list(self._actions.get(key, [])):
            try:
                participant.callback(*args)
            except Exception as e:
                logger.warning(
                    "Action participant failed",
                    hook=key,
                    error=str(e),
                    error_type=type(e).__name__,
                )

    def get_registered_hooks(self) -> list[str]:
        names = [name for name, items in self._filters.items() if items]
        names.extend(
            name for name, items in self._actions.items() if items and name not in names
        )
        return sorted(names)
