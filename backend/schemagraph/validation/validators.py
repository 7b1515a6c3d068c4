"""Value format validators and schema.org property tables.

This module provides the format checks (URL, email, telephone, ISO-8601
dates, enumerations) and the lookup tables the validation layers consult:
expected property types, subtype inheritance and fixed enumerations.
"""

from datetime import date
import re
from typing import Any, ClassVar

from pydantic import AnyUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..core.values import ValueKind, classify

# Expected property types, per schema type with "*" as the wildcard table
PROPERTY_TYPES: dict[str, dict[str, str]] = {
    "*": {
        "name": "string",
        "description": "string",
        "url": "url",
        "image": "image",
        "telephone": "string",
        "email": "string",
        "sameAs": "array",
        "datePublished": "date",
        "dateModified": "date",
    },
    "Organization": {
        "logo": "object",
        "address": "object",
        "contactPoint": "array",
    },
    "Article": {
        "headline": "string",
        "author": "object",
        "publisher": "object",
        "articleBody": "string",
        "wordCount": "integer",
    },
    "Product": {
        "offers": "array",
        "brand": "object",
        "category": "string",
        "sku": "string",
        "gtin": "string",
    },
}

# Actual type -> types it may stand in for
SUBTYPES: dict[str, tuple[str, ...]] = {
    "LocalBusiness": ("Organization",),
    "Article": ("CreativeWork",),
    "BlogPosting": ("Article", "CreativeWork"),
    "NewsArticle": ("Article", "CreativeWork"),
    "WebPage": ("CreativeWork",),
    "AboutPage": ("WebPage", "CreativeWork"),
    "ContactPage": ("WebPage", "CreativeWork"),
}

ENUM_VALUES: dict[str, tuple[str, ...]] = {
    "availability": (
        "https://schema.org/InStock",
        "https://schema.org/OutOfStock",
        "https://schema.org/PreOrder",
        "https://schema.org/BackOrder",
    ),
    "condition": (
        "https://schema.org/NewCondition",
        "https://schema.org/UsedCondition",
        "https://schema.org/RefurbishedCondition",
        "https://schema.org/DamagedCondition",
    ),
}

URL_PROPERTIES = frozenset({"url", "sameAs", "image", "logo", "mainEntityOfPage"})
DATE_PROPERTIES = frozenset(
    {"datePublished", "dateModified", "dateCreated", "startDate", "endDate"}
)
METADATA_KEYS = frozenset({"@context", "@type", "@id"})


def is_valid_subtype(actual_type: str, expected_type: str) -> bool:
    """Check the fixed inheritance table."""
    return expected_type in SUBTYPES.get(actual_type, ())


def get_expected_property_type(property: str, schema_type: str) -> str:
    """Look up a property's expected type, falling back to the wildcard table."""
    return (
        PROPERTY_TYPES.get(schema_type, {}).get(property)
        or PROPERTY_TYPES["*"].get(property)
        or "mixed"
    )


class UrlValidator:
    """Validates absolute URLs."""

    _adapter: ClassVar[TypeAdapter[AnyUrl]] = TypeAdapter(AnyUrl)

    @classmethod
    def is_valid(cls, value: str) -> bool:
        if not value or value != value.strip():
            return False
        try:
            url = cls._adapter.validate_python(value)
        except PydanticValidationError:
            return False
        if url.scheme in ("http", "https"):
            return bool(url.host)
        return True


class EmailValidator:
    """Specialized validator for email addresses."""

    EMAIL_PATTERN = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    @classmethod
    def is_valid(cls, email: str) -> bool:
        return bool(re.match(cls.EMAIL_PATTERN, email))


class TelephoneValidator:
    """Loose telephone check: at least one digit."""

    @staticmethod
    def is_valid(telephone: str) -> bool:
        return any(char.isdigit() for char in telephone)


class DateValidator:
    """Validates ISO-8601 dates, optionally with time and timezone offset."""

    DATE_PATTERN = re.compile(
        r"^(\d{4}-\d{2}-\d{2})"
        r"(T\d{2}:\d{2}(:\d{2}(\.\d+)?)?([+-]\d{2}:?\d{2}|Z)?)?$"
    )

    @classmethod
    def is_valid(cls, value: str) -> bool:
        match = cls.DATE_PATTERN.match(value)
        if not match:
            return False
        try:
            date.fromisoformat(match.group(1))
        except ValueError:
            return False
        return True


def is_valid_property_type(value: Any, expected_type: str) -> bool:
    """Compare a value's runtime kind against an expected property type."""
    kind = classify(value)

    if expected_type == "string":
        return kind is ValueKind.STRING
    if expected_type == "number":
        return kind is ValueKind.NUMBER or (
            kind is ValueKind.STRING and _is_numeric_string(value)
        )
    if expected_type == "integer":
        return (kind is ValueKind.NUMBER and isinstance(value, int)) or (
            kind is ValueKind.STRING and value.isdigit()
        )
    if expected_type == "boolean":
        return kind is ValueKind.BOOLEAN
    if expected_type == "array":
        return kind is ValueKind.SEQUENCE
    if expected_type == "object":
        # A node reference stands in for the object it points at
        return kind is ValueKind.REFERENCE or (
            kind is ValueKind.MAPPING and "@type" in value
        )
    if expected_type == "url":
        return kind is ValueKind.STRING and UrlValidator.is_valid(value)
    if expected_type == "image":
        # Image URL or an ImageObject
        if kind is ValueKind.MAPPING:
            return UrlValidator.is_valid(str(value.get("url", "")))
        return kind is ValueKind.REFERENCE or (
            kind is ValueKind.STRING and UrlValidator.is_valid(value)
        )
    if expected_type == "date":
        return kind is ValueKind.STRING and DateValidator.is_valid(value)
    return True


def describe_kind(value: Any) -> str:
    """Short name of a value's kind for error messages."""
    try:
        return classify(value).value
    except TypeError:
        return type(value).__name__


def _is_numeric_string(value: str) -> bool:
    try:
        float(value)
    except ValueError:
        return False
    return True
