"""Schema graph assembly and serialization.

A :class:`SchemaGraph` collects pieces keyed by id, lets extension code
replace pieces at three levels (whole collection, per type, per id), checks
that every reference resolves, and serializes the result as JSON-LD.
"""

from collections.abc import Iterable, Iterator
import json
from typing import Any

from .hooks import HookDispatcher, HookName, piece_id_hook, piece_type_hook
from .logging import get_logger
from .piece import SCHEMA_CONTEXT, SchemaPiece

logger = get_logger(__name__)


class SchemaGraph:
    """Ordered collection of schema pieces keyed by id.

    Pieces keep first-added order; adding a piece whose id already exists
    replaces it in place (last write wins).
    """

    def __init__(self, pieces: Iterable[SchemaPiece] | None = None):
        self._pieces: dict[str, SchemaPiece] = {}
        if pieces:
            self.add_pieces(pieces)

    def add_piece(self, piece: SchemaPiece) -> "SchemaGraph":
        self._pieces[piece.id] = piece
        return self

    def add_pieces(self, pieces: Iterable[Any]) -> "SchemaGraph":
        """Add several pieces, skipping anything that is not a piece."""
        for piece in pieces:
            if isinstance(piece, SchemaPiece):
                self.add_piece(piece)
        return self

    def get_piece(self, id: str) -> SchemaPiece | None:
        return self._pieces.get(id)

    def get_pieces(self) -> list[SchemaPiece]:
        return list(self._pieces.values())

    def get_pieces_by_type(self, type: str) -> list[SchemaPiece]:
        return [piece for piece in self._pieces.values() if piece.type == type]

    def remove_piece(self, id: str) -> "SchemaGraph":
        self._pieces.pop(id, None)
        return self

    def has_piece(self, id: str) -> bool:
        return id in self._pieces

    def clear(self) -> "SchemaGraph":
        self._pieces = {}
        return self

    def count(self) -> int:
        return len(self._pieces)

    def is_empty(self) -> bool:
        return not self._pieces

    def __len__(self) -> int:
        return len(self._pieces)

    def __iter__(self) -> Iterator[SchemaPiece]:
        return iter(list(self._pieces.values()))

    def __contains__(self, id: object) -> bool:
        return id in self._pieces

    def apply_filters(self, context: str, hooks: HookDispatcher) -> "SchemaGraph":
        """Let extension code replace pieces.

        Runs the whole-collection filter, then one filter per piece type, then
        one filter per piece id. Replacements that are not pieces are ignored
        and the original piece is kept.
        """
        filtered = hooks.emit(HookName.PIECES, self.get_pieces(), context)
        if isinstance(filtered, dict):
            filtered = list(filtered.values())
        if isinstance(filtered, list | tuple):
            self._pieces = {}
            self.add_pieces(filtered)
        else:
            logger.warning(
                "Ignoring non-collection result from pieces filter",
                result_type=type(filtered).__name__,
            )

        for piece in self.get_pieces():
            replacement = hooks.emit(piece_type_hook(piece.type), piece, context)
            self._replace(piece, replacement)

        for piece in self.get_pieces():
            replacement = hooks.emit(piece_id_hook(piece.id), piece, context)
            self._replace(piece, replacement)

        return self

    def validate_references(self) -> list[str]:
        """Report every reference that does not resolve to a piece in the graph."""
        errors = []
        for piece in self._pieces.values():
            for ref_id in piece.references:
                if ref_id not in self._pieces:
                    errors.append(
                        f"Piece '{piece.id}' references missing piece '{ref_id}'"
                    )
        return errors

    def to_array(self) -> list[dict[str, Any]]:
        """Flatten every piece, adding the schema.org ``@context`` where missing."""
        output = []
        for piece in self._pieces.values():
            data = piece.to_array()
            if "@context" not in data:
                data = {"@context": SCHEMA_CONTEXT, **data}
            output.append(data)
        return output

    def to_json(self) -> str:
        return dump_json(self.to_array())

    def to_document(self, compact_single: bool = False) -> dict[str, Any]:
        """Build the final JSON-LD document.

        Pieces are wrapped in ``{"@context": ..., "@graph": [...]}`` with their
        own ``@context`` removed. With ``compact_single`` a graph holding one
        piece is emitted as that single object instead.
        """
        items = self.to_array()
        if compact_single and len(items) == 1:
            return items[0]

        graph = []
        for item in items:
            item = dict(item)
            item.pop("@context", None)
            graph.append(item)
        return {"@context": SCHEMA_CONTEXT, "@graph": graph}

    def to_document_json(self, compact_single: bool = False) -> str:
        return dump_json(self.to_document(compact_single))

    def _replace(self, original: SchemaPiece, replacement: Any) -> None:
        if replacement is original or not isinstance(replacement, SchemaPiece):
            return
        if replacement.id == original.id:
            self._pieces[original.id] = replacement
            return
        # Re-key in place so the piece keeps its position
        self._pieces = {
            (replacement.id if key == original.id else key): (
                replacement if key == original.id else piece
            )
            for key, piece in self._pieces.items()
        }


def dump_json(data: Any) -> str:
    """Pretty-print JSON with unescaped slashes and unicode."""
    return json.dumps(data, indent=4, ensure_ascii=False)
