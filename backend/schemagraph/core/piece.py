"""Atomic schema.org structured-data pieces."""

from typing import Any

from .values import Reference, ValueKind, classify, to_jsonld

SCHEMA_CONTEXT = "https://schema.org"


class SchemaPiece:
    """One node of a schema graph.

    A piece has a stable ``id``, a schema.org ``type``, a property bag and the
    ordered list of ids it references. ``@type`` and ``@id`` are always present
    in the property bag. :attr:`references` is derived from the current
    property values: every :class:`Reference` or bare ``{"@id": ...}`` mapping,
    directly or inside a list, in property order. Targets are not
    deduplicated, so repeated references keep their order.

    Setters return the piece so calls can be chained.
    """

    def __init__(self, id: str, type: str, data: dict[str, Any] | None = None):
        self._id = id
        self._type = type
        self._data: dict[str, Any] = {"@type": type, "@id": id}
        if data:
            self.merge(data)

    @property
    def id(self) -> str:
        return self._id

    @property
    def type(self) -> str:
        return self._type

    @property
    def references(self) -> list[str]:
        targets: list[str] = []
        for property, value in self._data.items():
            if property not in ("@type", "@id"):
                targets.extend(reference_targets(value))
        return targets

    def set(self, property: str, value: Any) -> "SchemaPiece":
        """Store a property value. No validation happens at this layer."""
        self._data[property] = value
        self._pin_identity()
        return self

    def add_reference(self, property: str, target_id: str) -> "SchemaPiece":
        """Point ``property`` at another piece by id."""
        return self.set(property, Reference(target_id))

    def get(self, property: str, default: Any = None) -> Any:
        return self._data.get(property, default)

    def has(self, property: str) -> bool:
        return self._data.get(property) is not None

    def remove(self, property: str) -> "SchemaPiece":
        if property not in ("@type", "@id"):
            self._data.pop(property, None)
        return self

    def merge(self, data: dict[str, Any]) -> "SchemaPiece":
        """Merge a property mapping into this piece."""
        for property, value in data.items():
            if property in ("@type", "@id"):
                continue
            self.set(property, value)
        return self

    def from_array(self, data: dict[str, Any]) -> "SchemaPiece":
        """Update this piece from a (possibly filtered) flattened mapping."""
        return self.merge(data)

    def to_array(self) -> dict[str, Any]:
        """Return the full flattened property bag, including ``@type``/``@id``."""
        return {property: to_jsonld(value) for property, value in self._data.items()}

    @classmethod
    def create_from_array(cls, data: dict[str, Any]) -> "SchemaPiece":
        """Create a piece from existing schema data."""
        return cls(data.get("@id", "#unknown"), data.get("@type", "Thing"), data)

    def _pin_identity(self) -> None:
        self._data["@type"] = self._type
        self._data["@id"] = self._id

    def __repr__(self) -> str:
        return f"SchemaPiece(id={self._id!r}, type={self._type!r})"


def reference_targets(value: Any) -> list[str]:
    """Ids referenced by a property value, directly or inside a list."""
    items = value if isinstance(value, list | tuple) else [value]
    targets = []
    for item in items:
        if isinstance(item, Reference):
            targets.append(item.id)
        elif isinstance(item, dict) and classify(item) is ValueKind.REFERENCE:
            targets.append(item["@id"])
    return targets
