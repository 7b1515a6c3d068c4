"""Schema validation for generated structured data.

This package provides the layered schema.org validator: envelope and type
checks, required properties, property value types, value formats and
per-type custom validators.
"""

from .engine import SchemaValidator
from .errors import ValidationError, ValidationResult, ValidationWarning
from .layers import (
    PropertyTypeValidator,
    RequiredPropertyValidator,
    SchemaRules,
    StructureValidator,
    TypeCompatibilityValidator,
    ValueFormatValidator,
)
from .validators import (
    DateValidator,
    EmailValidator,
    TelephoneValidator,
    UrlValidator,
    get_expected_property_type,
    is_valid_property_type,
    is_valid_subtype,
)

__all__ = [
    "DateValidator",
    "EmailValidator",
    "PropertyTypeValidator",
    "RequiredPropertyValidator",
    "SchemaRules",
    "SchemaValidator",
    "StructureValidator",
    "TelephoneValidator",
    "TypeCompatibilityValidator",
    "UrlValidator",
    "ValidationError",
    "ValidationResult",
    "ValidationWarning",
    "ValueFormatValidator",
    "get_expected_property_type",
    "is_valid_property_type",
    "is_valid_subtype",
]
