"""Main schema validator that orchestrates all validation layers.

Structural and type-compatibility failures stop validation immediately;
required-property, property-type and value-format checks accumulate. A
custom validator registered for the type runs last and its findings are
merged in.
"""

from typing import Any

from ..core.logging import get_logger
from .errors import ValidationError, ValidationResult, ValidationWarning
from .layers import (
    PropertyTypeValidator,
    RequiredPropertyValidator,
    SchemaRules,
    StructureValidator,
    TypeCompatibilityValidator,
    ValueFormatValidator,
)
from .validators import ENUM_VALUES, SUBTYPES

logger = get_logger(__name__)


class SchemaValidator:
    """Validates flattened schema.org objects against per-type rules."""

    def __init__(self, rules: SchemaRules):
        """Initialize the validator.

        Args:
            rules: Source of required/allowed properties and custom validators,
                normally the schema type registry
        """
        self.rules = rules

        self.structure_validator = StructureValidator()
        self.type_validator = TypeCompatibilityValidator()
        self.required_validator = RequiredPropertyValidator(rules)
        self.property_type_validator = PropertyTypeValidator(rules)
        self.format_validator = ValueFormatValidator()

    def validate(self, schema: Any, expected_type: str) -> ValidationResult:
        """Validate a schema object against its expected type.

        Never raises; an unexpected failure inside a layer becomes a single
        error on the result.
        """
        result = ValidationResult()

        try:
            # Layer 1: envelope, fatal
            structure_errors = self.structure_validator.validate(schema)
            if structure_errors:
                result.extend_errors(structure_errors)
                return result

            # Layer 2: type compatibility, fatal
            type_errors = self.type_validator.validate(schema, expected_type)
            if type_errors:
                result.extend_errors(type_errors)
                return result

            # Layer 3: required properties
            result.extend_errors(self.required_validator.validate(schema, expected_type))

            # Layer 4: property types
            errors, warnings = self.property_type_validator.validate(
                schema, expected_type
            )
            result.extend_errors(errors)
            result.extend_warnings(warnings)

            # Layer 5: value formats
            errors, warnings = self.format_validator.validate(schema)
            result.extend_errors(errors)
            result.extend_warnings(warnings)

            # Layer 6: custom validator
            custom_validator = self.rules.get_validator(expected_type)
            if custom_validator is not None:
                result.merge(self._run_custom_validator(custom_validator, schema))

        except Exception as e:
            logger.error(
                "Unexpected validation failure",
                schema_type=expected_type,
                error=str(e),
                error_type=type(e).__name__,
            )
            result.add_error(
                ValidationError(type="internal_error", message=f"Validation error: {e}")
            )

        result.is_valid = not result.errors
        return result

    def validate_required_properties(self, schema: dict[str, Any], schema_type: str) -> bool:
        """Check only the required-property rule."""
        return not self.required_validator.validate(schema, schema_type)

    def validate_property_types(self, schema: dict[str, Any], schema_type: str) -> bool:
        """Check only the property-type rule."""
        errors, _warnings = self.property_type_validator.validate(schema, schema_type)
        return not errors

    def get_validator_info(self) -> dict[str, Any]:
        """Get information about the validator configuration."""
        return {
            "subtypes": {name: list(parents) for name, parents in SUBTYPES.items()},
            "enumerated_properties": sorted(ENUM_VALUES),
        }

    @staticmethod
    def _run_custom_validator(validator: Any, schema: dict[str, Any]) -> ValidationResult:
        """Normalize whatever a custom validator returns into a result.

        Accepts a ValidationResult, or a list of error messages/ValidationErrors.
        """
        outcome = validator(schema)

        if isinstance(outcome, ValidationResult):
            return outcome

        result = ValidationResult()
        for item in outcome or []:
            if isinstance(item, ValidationError):
                result.add_error(item)
            elif isinstance(item, ValidationWarning):
                result.add_warning(item)
            else:
                result.add_error(ValidationError(type="custom_validation", message=str(item)))
        return result
