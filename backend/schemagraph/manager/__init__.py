"""Generation orchestration and the application context."""

from .app import AppContext, create_app_context
from .schema_manager import MERGED_TYPES, SchemaManager, merge_schemas
from .status import GenerationStatus

__all__ = [
    "MERGED_TYPES",
    "AppContext",
    "GenerationStatus",
    "SchemaManager",
    "create_app_context",
    "merge_schemas",
]
