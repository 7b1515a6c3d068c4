"""Individual validation layers for the schema validation pipeline.

Each layer checks one aspect of a flattened schema object: document
structure, type compatibility, required properties, property value types
and value formats.
"""

from collections.abc import Callable
from typing import Any, Protocol

from ..core.piece import SCHEMA_CONTEXT
from ..core.values import is_empty
from .errors import ValidationError, ValidationWarning
from .validators import (
    DATE_PROPERTIES,
    ENUM_VALUES,
    METADATA_KEYS,
    URL_PROPERTIES,
    DateValidator,
    EmailValidator,
    TelephoneValidator,
    UrlValidator,
    describe_kind,
    get_expected_property_type,
    is_valid_property_type,
    is_valid_subtype,
)


class SchemaRules(Protocol):
    """Per-type rules the validator reads from the schema type registry."""

    def get_required_properties(self, schema_type: str) -> list[str]:
        """Properties that must be present and non-empty."""
        ...

    def get_allowed_properties(self, schema_type: str) -> list[str]:
        """Properties recognized for the type; empty means unrestricted."""
        ...

    def get_validator(self, schema_type: str) -> Callable[..., Any] | None:
        """Custom validator registered for the type."""
        ...


class StructureValidator:
    """Validates the JSON-LD envelope (Layer 1)."""

    def validate(self, schema: Any) -> list[ValidationError]:
        """Check ``@context`` and ``@type``.

        Returns:
            At most one error; any error is fatal
        """
        if not isinstance(schema, dict):
            return [
                ValidationError(
                    type="invalid_structure",
                    message="Schema must be a JSON object",
                )
            ]

        if "@context" not in schema:
            return [
                ValidationError(
                    type="missing_context",
                    property="@context",
                    message="Missing required '@context' property",
                    help=f"Set '@context' to '{SCHEMA_CONTEXT}'",
                )
            ]

        if schema["@context"] != SCHEMA_CONTEXT:
            return [
                ValidationError(
                    type="invalid_context",
                    property="@context",
                    message=f"Invalid '@context'. Must be '{SCHEMA_CONTEXT}'",
                )
            ]

        if "@type" not in schema:
            return [
                ValidationError(
                    type="missing_type",
                    property="@type",
                    message="Missing required '@type' property",
                )
            ]

        if not isinstance(schema["@type"], str):
            return [
                ValidationError(
                    type="invalid_type",
                    property="@type",
                    message="'@type' must be a string",
                )
            ]

        return []


class TypeCompatibilityValidator:
    """Validates the declared type against the expected type (Layer 2)."""

    def validate(self, schema: dict[str, Any], expected_type: str) -> list[ValidationError]:
        actual_type = schema["@type"]

        if actual_type == expected_type or is_valid_subtype(actual_type, expected_type):
            return []

        return [
            ValidationError(
                type="type_mismatch",
                property="@type",
                message=(
                    f"Schema type mismatch. Expected '{expected_type}', "
                    f"got '{actual_type}'"
                ),
            )
        ]


class RequiredPropertyValidator:
    """Validates required properties are present and non-empty (Layer 3)."""

    def __init__(self, rules: SchemaRules):
        self.rules = rules

    def validate(self, schema: dict[str, Any], schema_type: str) -> list[ValidationError]:
        errors = []
        for property in self.rules.get_required_properties(schema_type):
            if property not in schema or is_empty(schema[property]):
                errors.append(
                    ValidationError(
                        type="missing_required_property",
                        property=property,
                        message=f"Missing required property: '{property}'",
                        help=f"'{schema_type}' schemas must include '{property}'",
                    )
                )
        return errors


class PropertyTypeValidator:
    """Validates property value types against the type tables (Layer 4)."""

    def __init__(self, rules: SchemaRules):
        self.rules = rules

    def validate(
        self, schema: dict[str, Any], schema_type: str
    ) -> tuple[list[ValidationError], list[ValidationWarning]]:
        errors = []
        warnings = []
        allowed = set(self.rules.get_allowed_properties(schema_type))

        for property, value in schema.items():
            if property in METADATA_KEYS:
                continue

            if allowed and property not in allowed:
                warnings.append(
                    ValidationWarning(
                        type="unknown_property",
                        property=property,
                        message=(
                            f"Property '{property}' is not a recognized property "
                            f"of '{schema_type}'"
                        ),
                    )
                )

            expected_type = get_expected_property_type(property, schema_type)
            if not is_valid_property_type(value, expected_type):
                errors.append(
                    ValidationError(
                        type="invalid_property_type",
                        property=property,
                        message=(
                            f"Invalid type for property '{property}'. Expected "
                            f"'{expected_type}', got '{describe_kind(value)}'"
                        ),
                    )
                )

        return errors, warnings


class ValueFormatValidator:
    """Validates scalar value formats (Layer 5).

    Nested structures are skipped; only string and scalar values are checked.
    """

    def validate(
        self, schema: dict[str, Any]
    ) -> tuple[list[ValidationError], list[ValidationWarning]]:
        errors: list[ValidationError] = []
        warnings: list[ValidationWarning] = []

        for property, value in schema.items():
            if property in METADATA_KEYS or isinstance(value, dict | list | tuple):
                continue

            if isinstance(value, str):
                self._check_string(property, value, errors, warnings)

            if property in ENUM_VALUES and value not in ENUM_VALUES[property]:
                valid_values = ", ".join(ENUM_VALUES[property])
                warnings.append(
                    ValidationWarning(
                        type="unrecognized_enum_value",
                        property=property,
                        message=(
                            f"Property '{property}' value '{value}' is not in "
                            f"recommended values: {valid_values}"
                        ),
                    )
                )

        return errors, warnings

    def _check_string(
        self,
        property: str,
        value: str,
        errors: list[ValidationError],
        warnings: list[ValidationWarning],
    ) -> None:
        if property in URL_PROPERTIES and not UrlValidator.is_valid(value):
            errors.append(
                ValidationError(
                    type="invalid_url",
                    property=property,
                    message=f"Invalid URL for property '{property}': '{value}'",
                    help="Use an absolute URL such as https://example.com/",
                )
            )

        if property == "email" and not EmailValidator.is_valid(value):
            errors.append(
                ValidationError(
                    type="invalid_email",
                    property=property,
                    message=f"Invalid email address: '{value}'",
                )
            )

        if property == "telephone" and not TelephoneValidator.is_valid(value):
            warnings.append(
                ValidationWarning(
                    type="telephone_format",
                    property=property,
                    message=f"Telephone number '{value}' may not be in optimal format",
                )
            )

        if property in DATE_PROPERTIES and not DateValidator.is_valid(value):
            errors.append(
                ValidationError(
                    type="invalid_date",
                    property=property,
                    message=(
                        f"Invalid date format for property '{property}': "
                        f"'{value}'. Use ISO 8601 format."
                    ),
                    help="Example: 2024-01-15 or 2024-01-15T10:00:00+00:00",
                )
            )
