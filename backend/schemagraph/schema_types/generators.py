"""Schema generator strategies.

A generator turns provider data into a flattened schema.org object. Each
registered schema type maps to one :class:`SchemaGenerator` instance;
plain callables are wrapped in a :class:`FunctionGenerator`.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from ..core.piece import SCHEMA_CONTEXT
from ..core.values import is_empty

GeneratorFunction = Callable[[dict[str, Any], dict[str, Any]], dict[str, Any]]


class SchemaGenerator(ABC):
    """Strategy that builds one schema type from raw data."""

    @abstractmethod
    def generate(self, data: dict[str, Any], options: dict[str, Any]) -> dict[str, Any]:
        """Generate a schema object.

        Args:
            data: Raw data collected by a provider
            options: Generation options (context, post id, ...)

        Returns:
            Flattened schema object carrying ``@context`` and ``@type``
        """
        pass


class FunctionGenerator(SchemaGenerator):
    """Adapts a plain ``(data, options) -> schema`` callable."""

    def __init__(self, function: GeneratorFunction):
        self.function = function

    def generate(self, data: dict[str, Any], options: dict[str, Any]) -> dict[str, Any]:
        return self.function(data, options)

    def __repr__(self) -> str:
        name = getattr(self.function, "__name__", repr(self.function))
        return f"FunctionGenerator({name})"


def as_generator(generator: SchemaGenerator | GeneratorFunction) -> SchemaGenerator:
    """Resolve a registration argument to a generator strategy.

    Raises:
        TypeError: If ``generator`` is neither a strategy nor callable
    """
    if isinstance(generator, SchemaGenerator):
        return generator
    if callable(generator):
        return FunctionGenerator(generator)
    raise TypeError(f"Generator must be a SchemaGenerator or callable, got {type(generator).__name__}")


class PropertyMapGenerator(SchemaGenerator):
    """Copies non-empty data fields onto schema properties.

    ``fields`` maps schema property name to data key. Strings are stripped;
    empty values (None, empty string, empty collection) are skipped, while
    ``0`` and ``False`` are kept.
    """

    def __init__(self, schema_type: str, fields: dict[str, str] | None = None):
        self.schema_type = schema_type
        self.fields = fields or {}

    def generate(self, data: dict[str, Any], options: dict[str, Any]) -> dict[str, Any]:
        schema = self.create_schema()
        for property, key in self.fields.items():
            value = data.get(key)
            if is_empty(value):
                continue
            schema[property] = value.strip() if isinstance(value, str) else value
        return schema

    def create_schema(self) -> dict[str, Any]:
        return {"@context": SCHEMA_CONTEXT, "@type": self.schema_type}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.schema_type!r})"


class OrganizationGenerator(PropertyMapGenerator):
    """Organization (and LocalBusiness) with a structured logo."""

    def __init__(self, schema_type: str = "Organization", fields: dict[str, str] | None = None):
        super().__init__(
            schema_type,
            fields
            or {
                "name": "name",
                "url": "url",
                "description": "description",
                "address": "address",
                "telephone": "telephone",
                "email": "email",
                "sameAs": "social_media",
            },
        )

    def generate(self, data: dict[str, Any], options: dict[str, Any]) -> dict[str, Any]:
        schema = super().generate(data, options)
        logo = self.process_logo(data.get("logo"))
        if logo:
            schema["logo"] = logo
        return schema

    @staticmethod
    def process_logo(logo: Any) -> dict[str, Any] | None:
        """Normalize a logo URL or mapping into an ImageObject."""
        if isinstance(logo, str) and logo:
            return {"@type": "ImageObject", "url": logo}

        if isinstance(logo, dict) and logo:
            if logo.get("@type") == "ImageObject":
                return logo
            image: dict[str, Any] = {
                "@type": "ImageObject",
                "url": logo.get("url") or logo.get("src", ""),
            }
            for dimension in ("width", "height"):
                if logo.get(dimension):
                    image[dimension] = int(logo[dimension])
            return image

        return None


class BreadcrumbListGenerator(PropertyMapGenerator):
    """BreadcrumbList from an ordered list of ``{"name", "url"}`` items."""

    def __init__(self):
        super().__init__("BreadcrumbList")

    def generate(self, data: dict[str, Any], options: dict[str, Any]) -> dict[str, Any]:
        schema = self.create_schema()
        items = [
            {
                "@type": "ListItem",
                "position": position,
                "name": item.get("name", ""),
                **({"item": item["url"]} if item.get("url") else {}),
            }
            for position, item in enumerate(data.get("items") or [], 1)
        ]
        schema["itemListElement"] = items
        schema["numberOfItems"] = len(items)
        return schema


class FAQPageGenerator(PropertyMapGenerator):
    """FAQPage from a list of ``{"question", "answer"}`` pairs."""

    def __init__(self):
        super().__init__("FAQPage", {"name": "name", "description": "description"})

    def generate(self, data: dict[str, Any], options: dict[str, Any]) -> dict[str, Any]:
        schema = super().generate(data, options)
        schema["mainEntity"] = [
            {
                "@type": "Question",
                "name": faq.get("question", ""),
                "acceptedAnswer": {"@type": "Answer", "text": faq.get("answer", "")},
            }
            for faq in data.get("faqs") or []
        ]
        return schema


def core_generators() -> dict[str, SchemaGenerator]:
    """Default generator per core schema type."""
    return {
        "Organization": OrganizationGenerator(),
        "LocalBusiness": OrganizationGenerator(
            "LocalBusiness",
            {
                "name": "name",
                "url": "url",
                "description": "description",
                "address": "address",
                "telephone": "telephone",
                "openingHours": "opening_hours",
                "geo": "geo",
            },
        ),
        "Article": PropertyMapGenerator(
            "Article",
            {
                "headline": "headline",
                "author": "author",
                "datePublished": "date_published",
                "dateModified": "date_modified",
                "description": "description",
                "articleBody": "content",
                "image": "image",
                "publisher": "publisher",
            },
        ),
        "WebSite": PropertyMapGenerator(
            "WebSite",
            {
                "name": "name",
                "url": "url",
                "description": "description",
                "potentialAction": "search_action",
                "publisher": "publisher",
            },
        ),
        "WebPage": PropertyMapGenerator(
            "WebPage",
            {
                "name": "name",
                "url": "url",
                "description": "description",
                "breadcrumb": "breadcrumb",
                "isPartOf": "is_part_of",
            },
        ),
        "Product": PropertyMapGenerator(
            "Product",
            {
                "name": "name",
                "description": "description",
                "image": "image",
                "offers": "offers",
                "brand": "brand",
                "category": "category",
                "sku": "sku",
                "gtin": "gtin",
            },
        ),
        "Person": PropertyMapGenerator(
            "Person",
            {
                "name": "name",
                "description": "description",
                "image": "image",
                "jobTitle": "job_title",
                "worksFor": "works_for",
                "url": "url",
                "sameAs": "social_media",
            },
        ),
        "FAQPage": FAQPageGenerator(),
        "BreadcrumbList": BreadcrumbListGenerator(),
    }
