"""Registry of schema types, their generators and property rules.

The registry is the extension point for adding schema types: each type
maps to a generator strategy plus the required/allowed property sets the
validator enforces. It also satisfies the validator's ``SchemaRules``
protocol.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
import re
from typing import Any

from ..core.exceptions import GeneratorError, SchemaTypeError
from ..core.hooks import HookDispatcher, HookName
from ..core.logging import get_logger
from .generators import GeneratorFunction, SchemaGenerator, as_generator, core_generators

logger = get_logger(__name__)

SCHEMA_TYPE_PATTERN = re.compile(r"^[A-Z][a-zA-Z0-9]*$")

DEFAULT_REQUIRED_PROPERTIES = ["name"]

CORE_PROPERTY_RULES: dict[str, tuple[list[str], list[str]]] = {
    "Organization": (
        ["name"],
        ["name", "description", "url", "logo", "address", "telephone", "email", "sameAs"],
    ),
    "LocalBusiness": (
        ["name"],
        ["name", "description", "url", "logo", "address", "telephone", "openingHours", "geo"],
    ),
    "Article": (
        ["headline", "author"],
        [
            "headline",
            "author",
            "datePublished",
            "dateModified",
            "description",
            "articleBody",
            "image",
            "publisher",
            "mainEntityOfPage",
        ],
    ),
    "WebSite": (
        ["name", "url"],
        ["name", "url", "description", "potentialAction", "publisher"],
    ),
    "WebPage": (
        ["name", "url"],
        ["name", "url", "description", "breadcrumb", "isPartOf"],
    ),
    "Product": (
        ["name"],
        ["name", "description", "image", "offers", "brand", "category", "sku", "gtin"],
    ),
    "Person": (
        ["name"],
        ["name", "description", "image", "jobTitle", "worksFor", "url", "sameAs"],
    ),
    "FAQPage": (["mainEntity"], ["name", "description", "mainEntity"]),
    "BreadcrumbList": (["itemListElement"], ["itemListElement", "numberOfItems"]),
}

SchemaValidatorFunction = Callable[[dict[str, Any]], Any]


@dataclass
class SchemaTypeRegistration:
    """Generator and options registered for one schema type."""

    generator: SchemaGenerator
    options: dict[str, Any] = field(default_factory=dict)


class SchemaTypeRegistry:
    """Central registry of schema types and their generators."""

    def __init__(self, hooks: HookDispatcher | None = None, register_core_types: bool = True):
        """Initialize the registry.

        Args:
            hooks: Dispatcher for registration notifications and generation filters
            register_core_types: Pre-register the core schema.org types
        """
        self.hooks = hooks
        self._types: dict[str, SchemaTypeRegistration] = {}
        self._validators: dict[str, SchemaValidatorFunction] = {}
        self._required_properties: dict[str, list[str]] = {}
        self._allowed_properties: dict[str, list[str]] = {}

        if register_core_types:
            self._register_core_types()

    def register_schema_type(
        self,
        schema_type: str,
        generator: SchemaGenerator | GeneratorFunction,
        options: dict[str, Any] | None = None,
    ) -> bool:
        """Register a schema type with its generator.

        ``options`` may carry ``required_properties`` and ``allowed_properties``
        for the validator. Re-registering a type replaces it.

        Returns:
            False if the type name is not PascalCase or the generator is unusable
        """
        options = options or {}

        if not self.is_valid_schema_type(schema_type):
            logger.warning("Invalid schema type name", schema_type=schema_type)
            return False

        try:
            strategy = as_generator(generator)
        except TypeError as e:
            logger.warning("Invalid schema generator", schema_type=schema_type, error=str(e))
            return False

        self._types[schema_type] = SchemaTypeRegistration(strategy, options)

        if options.get("required_properties"):
            self._required_properties[schema_type] = list(options["required_properties"])
        if options.get("allowed_properties"):
            self._allowed_properties[schema_type] = list(options["allowed_properties"])

        if self.hooks:
            self.hooks.notify(HookName.TYPE_REGISTERED, schema_type, strategy, options)
        return True

    def unregister_schema_type(self, schema_type: str) -> bool:
        if not self.has_schema_type(schema_type):
            return False

        del self._types[schema_type]
        self._validators.pop(schema_type, None)
        self._required_properties.pop(schema_type, None)
        self._allowed_properties.pop(schema_type, None)

        if self.hooks:
            self.hooks.notify(HookName.TYPE_UNREGISTERED, schema_type)
        return True

    def has_schema_type(self, schema_type: str) -> bool:
        return schema_type in self._types

    def get_generator(self, schema_type: str) -> SchemaGenerator | None:
        registration = self._types.get(schema_type)
        return registration.generator if registration else None

    def get_generator_options(self, schema_type: str) -> dict[str, Any]:
        registration = self._types.get(schema_type)
        return dict(registration.options) if registration else {}

    def get_registered_types(self) -> list[str]:
        return list(self._types)

    def register_validator(self, schema_type: str, validator: SchemaValidatorFunction) -> bool:
        """Register the custom validator for a type, replacing any previous one."""
        if not schema_type:
            return False

        self._validators[schema_type] = validator
        if self.hooks:
            self.hooks.notify(HookName.VALIDATOR_REGISTERED, schema_type, validator)
        return True

    def get_validator(self, schema_type: str) -> SchemaValidatorFunction | None:
        return self._validators.get(schema_type)

    def get_required_properties(self, schema_type: str) -> list[str]:
        if schema_type in self._required_properties:
            return list(self._required_properties[schema_type])
        if schema_type in CORE_PROPERTY_RULES:
            return list(CORE_PROPERTY_RULES[schema_type][0])
        return list(DEFAULT_REQUIRED_PROPERTIES)

    def get_allowed_properties(self, schema_type: str) -> list[str]:
        return list(self._allowed_properties.get(schema_type, []))

    def generate_schema(
        self,
        schema_type: str,
        data: dict[str, Any],
        options: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Generate a schema with the type's generator.

        Data passes through the pre-generation filter before the generator runs
        and the result passes through the post-generation filter.

        Raises:
            SchemaTypeError: If no generator is registered for ``schema_type``
            GeneratorError: If the generator fails or returns a non-mapping
        """
        options = options or {}
        generator = self.get_generator(schema_type)
        if generator is None:
            raise SchemaTypeError(f"No generator registered for schema type: {schema_type}")

        if self.hooks:
            data = self.hooks.emit(HookName.PRE_GENERATION_DATA, data, schema_type, options)

        try:
            schema = generator.generate(data, options)
        except Exception as e:
            raise GeneratorError(
                f"Generator for '{schema_type}' failed: {e}", cause=e
            ) from e

        if not isinstance(schema, dict):
            raise GeneratorError(
                f"Generator for '{schema_type}' returned {type(schema).__name__}, expected a mapping"
            )

        if self.hooks:
            schema = self.hooks.emit(
                HookName.POST_GENERATION, schema, schema_type, data, options
            )
        return schema

    @staticmethod
    def is_valid_schema_type(schema_type: str) -> bool:
        """Schema.org type names are PascalCase."""
        return bool(schema_type) and SCHEMA_TYPE_PATTERN.match(schema_type) is not None

    def _register_core_types(self) -> None:
        for schema_type, generator in core_generators().items():
            required, allowed = CORE_PROPERTY_RULES[schema_type]
            self.register_schema_type(
                schema_type,
                generator,
                {"required_properties": required, "allowed_properties": allowed},
            )
