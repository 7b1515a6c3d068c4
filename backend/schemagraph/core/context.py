"""Generation context detection.

The hosting application describes the current request as a
:class:`RequestState`; :class:`ContextDetector` turns it into the context
name providers decide on (``home``, ``singular``, ``archive``, ...).
"""

from dataclasses import dataclass
from enum import Enum


class GenerationContext(str, Enum):
    """Known generation contexts."""

    HOME = "home"
    SINGULAR = "singular"
    ARCHIVE = "archive"
    TAXONOMY = "taxonomy"
    SEARCH = "search"
    NOT_FOUND = "404"
    UNKNOWN = "unknown"


@dataclass
class RequestState:
    """Flags describing the request being rendered."""

    is_front_page: bool = False
    is_posts_page: bool = False
    is_singular: bool = False
    is_archive: bool = False
    is_search: bool = False
    is_404: bool = False
    is_admin: bool = False
    is_feed: bool = False
    is_robots: bool = False
    is_trackback: bool = False


class ContextDetector:
    """Maps request state to a generation context."""

    SKIPPED_CONTEXTS = frozenset({GenerationContext.NOT_FOUND, GenerationContext.UNKNOWN})

    def get_current_context(self, state: RequestState) -> str:
        if state.is_front_page:
            return GenerationContext.HOME.value
        if state.is_singular:
            return GenerationContext.SINGULAR.value
        if state.is_archive or state.is_posts_page:
            return GenerationContext.ARCHIVE.value
        if state.is_search:
            return GenerationContext.SEARCH.value
        if state.is_404:
            return GenerationContext.NOT_FOUND.value
        return GenerationContext.UNKNOWN.value

    def should_generate_schema(self, context: str, state: RequestState) -> bool:
        """Skip admin, feed, robots and trackback requests and dead-end contexts."""
        if state.is_admin or state.is_feed or state.is_robots or state.is_trackback:
            return False
        return context not in {item.value for item in self.SKIPPED_CONTEXTS}
