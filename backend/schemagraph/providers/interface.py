"""Data provider contract.

A provider decides whether it applies to a generation context and emits
either raw schema data (:meth:`DataProvider.provide`) or linked pieces
(:meth:`DataProvider.get_pieces`). Providers are ordered by ascending
priority; lower runs earlier.
"""

from abc import ABC, abstractmethod
from typing import Any

from ..core.hooks import HookDispatcher
from ..core.piece import SCHEMA_CONTEXT, SchemaPiece

DEFAULT_PRIORITY = 10

# Options that identify the content a cache entry was derived from
CACHE_KEY_OPTIONS = (("post_id", "p"), ("term_id", "t"), ("user_id", "u"))


class DataProvider(ABC):
    """Abstract interface for pluggable schema data providers."""

    @property
    @abstractmethod
    def provider_id(self) -> str:
        """Unique provider identifier."""
        pass

    @property
    @abstractmethod
    def priority(self) -> int:
        """Ordering priority; lower values run earlier."""
        pass

    @abstractmethod
    def get_supported_schema_types(self) -> list[str]:
        """Schema types this provider can emit."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the provider's dependencies are present.

        Unavailable providers are never registered.
        """
        pass

    @abstractmethod
    def can_provide(self, context: str, options: dict[str, Any]) -> bool:
        """Whether the provider applies to this context and options."""
        pass

    @abstractmethod
    def provide(self, context: str, options: dict[str, Any]) -> list[dict[str, Any]]:
        """Produce raw schema data for the context.

        Returns:
            Schema objects; an item carrying ``@context`` is complete and
            is used as-is, otherwise it is generated from its ``@type``
        """
        pass

    @abstractmethod
    def get_pieces(self, context: str, options: dict[str, Any]) -> list[SchemaPiece]:
        """Produce linked graph pieces for the context."""
        pass

    @abstractmethod
    def get_cache_key(self, context: str, options: dict[str, Any]) -> str:
        """Cache key for this provider's output in the given context."""
        pass


class BaseProvider(DataProvider):
    """Convenience base class with the common provider behavior.

    Subclasses set ``id`` (and optionally ``default_priority`` and
    ``schema_types``) and implement :meth:`get_pieces`; :meth:`provide`
    flattens those pieces into complete schema objects.
    """

    id: str = ""
    default_priority: int = DEFAULT_PRIORITY
    schema_types: tuple[str, ...] = ()

    def __init__(self, hooks: HookDispatcher | None = None, priority: int | None = None):
        self.hooks = hooks
        self._priority = self.default_priority if priority is None else priority

    @property
    def provider_id(self) -> str:
        return self.id or type(self).__name__

    @property
    def priority(self) -> int:
        return self._priority

    def get_supported_schema_types(self) -> list[str]:
        return list(self.schema_types)

    def is_available(self) -> bool:
        return True

    def can_provide(self, context: str, options: dict[str, Any]) -> bool:
        return True

    def provide(self, context: str, options: dict[str, Any]) -> list[dict[str, Any]]:
        return [
            {"@context": SCHEMA_CONTEXT, **piece.to_array()}
            for piece in self.get_pieces(context, options)
        ]

    def get_pieces(self, context: str, options: dict[str, Any]) -> list[SchemaPiece]:
        return []

    def get_cache_key(self, context: str, options: dict[str, Any]) -> str:
        """Build ``provider_<context>_<provider_id>`` plus content ids.

        Content ids are appended as ``_p<post_id>``, ``_t<term_id>`` and
        ``_u<user_id>`` so id-based invalidation patterns can find them.
        """
        parts = ["provider", context, self.provider_id]
        for option, marker in CACHE_KEY_OPTIONS:
            if options.get(option) not in (None, ""):
                parts.append(f"{marker}{options[option]}")
        return "_".join(parts)

    def apply_piece_filters(self, piece: SchemaPiece, hook: Any, *args: Any) -> SchemaPiece:
        """Run a piece's flattened data through a data filter and apply it back.

        A filter result that is not a mapping, or that matches the current
        data, leaves the piece unchanged.
        """
        if not self.hooks:
            return piece
        data = self.hooks.emit(hook, piece.to_array(), *args)
        if isinstance(data, dict) and data != piece.to_array():
            piece.from_array(data)
        return piece

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.provider_id!r}, priority={self.priority})"
