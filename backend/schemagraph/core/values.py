"""Property value kinds for schema pieces.

Piece property bags hold plain Python values (``str``, ``int``/``float``,
``bool``, ``list``, ``dict``) plus :class:`Reference` markers. Every value is
classified into one closed :class:`ValueKind` so validation and
serialization can branch on the kind instead of probing types ad hoc.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ValueKind(str, Enum):
    """Closed set of property value kinds."""

    NULL = "null"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    REFERENCE = "reference"


@dataclass(frozen=True)
class Reference:
    """Pointer to another piece in the same graph."""

    id: str

    def to_jsonld(self) -> dict[str, str]:
        """Return the JSON-LD node reference form."""
        return {"@id": self.id}


def classify(value: Any) -> ValueKind:
    """Classify a property value.

    ``bool`` is checked before numbers since it subclasses ``int``. A mapping
    whose only key is ``@id`` is a reference in its serialized form.
    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, Reference):
        return ValueKind.REFERENCE
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, int | float):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, dict):
        if set(value) == {"@id"}:
            return ValueKind.REFERENCE
        return ValueKind.MAPPING
    if isinstance(value, list | tuple):
        return ValueKind.SEQUENCE
    raise TypeError(f"Unsupported property value type: {type(value).__name__}")


def is_empty(value: Any) -> bool:
    """Check whether a value counts as missing.

    ``None``, ``""`` and empty collections are empty; ``0`` and ``False``
    are present values.
    """
    if value is None or value == "":
        return True
    if isinstance(value, list | tuple | dict):
        return len(value) == 0
    return False


def to_jsonld(value: Any) -> Any:
    """Flatten a property value into plain JSON-compatible data."""
    if isinstance(value, Reference):
        return value.to_jsonld()
    if isinstance(value, dict):
        return {key: to_jsonld(item) for key, item in value.items()}
    if isinstance(value, list | tuple):
        return [to_jsonld(item) for item in value]
    return value
