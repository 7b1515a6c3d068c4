"""Schema type registry and generator strategies."""

from .generators import (
    BreadcrumbListGenerator,
    FAQPageGenerator,
    FunctionGenerator,
    OrganizationGenerator,
    PropertyMapGenerator,
    SchemaGenerator,
    as_generator,
    core_generators,
)
from .registry import CORE_PROPERTY_RULES, SchemaTypeRegistration, SchemaTypeRegistry

__all__ = [
    "CORE_PROPERTY_RULES",
    "BreadcrumbListGenerator",
    "FAQPageGenerator",
    "FunctionGenerator",
    "OrganizationGenerator",
    "PropertyMapGenerator",
    "SchemaGenerator",
    "SchemaTypeRegistration",
    "SchemaTypeRegistry",
    "as_generator",
    "core_generators",
]
