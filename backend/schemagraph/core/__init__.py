"""Core building blocks: pieces, graphs, extension points and logging."""

from .context import ContextDetector, GenerationContext, RequestState
from .exceptions import GeneratorError, ProviderError, SchemaGraphError, SchemaTypeError
from .graph import SchemaGraph, dump_json
from .hooks import (
    ContentEvent,
    EventDispatcher,
    HookDispatcher,
    HookName,
    piece_id_hook,
    piece_type_hook,
)
from .logging import (
    GenerationLogger,
    bind_context,
    configure_logging,
    get_logger,
)
from .output import OutputService
from .piece import SCHEMA_CONTEXT, SchemaPiece
from .values import Reference, ValueKind, classify, is_empty, to_jsonld

__all__ = [
    # Graph
    "SCHEMA_CONTEXT",
    "SchemaGraph",
    "SchemaPiece",
    "dump_json",
    # Values
    "Reference",
    "ValueKind",
    "classify",
    "is_empty",
    "to_jsonld",
    # Extension points
    "ContentEvent",
    "EventDispatcher",
    "HookDispatcher",
    "HookName",
    "piece_id_hook",
    "piece_type_hook",
    # Context and output
    "ContextDetector",
    "GenerationContext",
    "OutputService",
    "RequestState",
    # Errors
    "GeneratorError",
    "ProviderError",
    "SchemaGraphError",
    "SchemaTypeError",
    # Logging
    "GenerationLogger",
    "bind_context",
    "configure_logging",
    "get_logger",
]
