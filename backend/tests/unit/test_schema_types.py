"""Unit tests for the schema type registry and generator strategies."""

import pytest

from schemagraph.core import EventDispatcher, GeneratorError, HookName, SchemaTypeError
from schemagraph.schema_types import (
    BreadcrumbListGenerator,
    FAQPageGenerator,
    FunctionGenerator,
    OrganizationGenerator,
    PropertyMapGenerator,
    SchemaTypeRegistry,
)

CORE_TYPES = [
    "Organization",
    "LocalBusiness",
    "Article",
    "WebSite",
    "WebPage",
    "Product",
    "Person",
    "FAQPage",
    "BreadcrumbList",
]


class TestGenerators:
    """Test generator strategies."""

    def test_property_map_skips_empty_and_strips(self):
        """Test empty values are skipped, strings stripped, 0 kept."""
        generator = PropertyMapGenerator(
            "Product", {"name": "name", "description": "description", "sku": "sku", "gtin": "gtin"}
        )

        schema = generator.generate({"name": "  Widget  ", "description": "", "sku": 0}, {})

        assert schema == {
            "@context": "https://schema.org",
            "@type": "Product",
            "name": "Widget",
            "sku": 0,
        }

    def test_organization_logo_becomes_image_object(self):
        """Test logo URLs and mappings are normalized."""
        generator = OrganizationGenerator()
        schema = generator.generate(
            {"name": "Acme", "logo": "https://acme.test/logo.png", "social_media": ["https://x.test/acme"]},
            {},
        )

        assert schema["logo"] == {"@type": "ImageObject", "url": "https://acme.test/logo.png"}
        assert schema["sameAs"] == ["https://x.test/acme"]
        assert OrganizationGenerator.process_logo(
            {"src": "https://acme.test/l.png", "width": "600", "height": 60}
        ) == {"@type": "ImageObject", "url": "https://acme.test/l.png", "width": 600, "height": 60}
        assert OrganizationGenerator.process_logo(None) is None

    def test_breadcrumb_positions(self):
        """Test breadcrumb items are numbered from 1."""
        schema = BreadcrumbListGenerator().generate(
            {"items": [{"name": "Home", "url": "https://a.test/"}, {"name": "Post"}]}, {}
        )

        assert schema["numberOfItems"] == 2
        assert schema["itemListElement"][0] == {
            "@type": "ListItem",
            "position": 1,
            "name": "Home",
            "item": "https://a.test/",
        }
        assert "item" not in schema["itemListElement"][1]

    def test_faq_page(self):
        """Test FAQ pairs become questions with accepted answers."""
        schema = FAQPageGenerator().generate(
            {"faqs": [{"question": "Why?", "answer": "Because."}]}, {}
        )

        assert schema["mainEntity"] == [
            {
                "@type": "Question",
                "name": "Why?",
                "acceptedAnswer": {"@type": "Answer", "text": "Because."},
            }
        ]

    def test_function_generator(self):
        """Test plain callables are adapted."""
        generator = FunctionGenerator(lambda data, options: {"@type": "Thing", **options})
        assert generator.generate({}, {"a": 1}) == {"@type": "Thing", "a": 1}


class TestSchemaTypeRegistry:
    """Test schema type registration and generation."""

    def test_core_types_registered(self):
        """Test the core types are available out of the box."""
        registry = SchemaTypeRegistry()
        assert registry.get_registered_types() == CORE_TYPES

    def test_core_types_optional(self):
        """Test an empty registry can be created."""
        assert SchemaTypeRegistry(register_core_types=False).get_registered_types() == []

    @pytest.mark.parametrize("name", ["event", "My-Type", "", "1Thing"])
    def test_invalid_type_names_rejected(self, name):
        """Test type names must be PascalCase."""
        registry = SchemaTypeRegistry()
        assert registry.register_schema_type(name, lambda data, options: {}) is False
        assert registry.has_schema_type(name) is False

    def test_non_callable_generator_rejected(self):
        """Test unusable generators are refused."""
        registry = SchemaTypeRegistry()
        assert registry.register_schema_type("Event", "not callable") is False

    def test_register_and_unregister(self):
        """Test registration lifecycle and notifications."""
        hooks = EventDispatcher()
        events = []
        hooks.add_action(HookName.TYPE_REGISTERED, lambda name, *args: events.append(("add", name)))
        hooks.add_action(HookName.TYPE_UNREGISTERED, lambda name: events.append(("remove", name)))
        registry = SchemaTypeRegistry(hooks, register_core_types=False)

        assert registry.register_schema_type(
            "Event", lambda data, options: {}, {"required_properties": ["name", "startDate"]}
        )
        assert registry.get_required_properties("Event") == ["name", "startDate"]
        assert registry.get_generator_options("Event") == {
            "required_properties": ["name", "startDate"]
        }

        assert registry.unregister_schema_type("Event") is True
        assert registry.unregister_schema_type("Event") is False
        assert registry.get_required_properties("Event") == ["name"]
        assert events == [("add", "Event"), ("remove", "Event")]

    def test_property_rules(self):
        """Test required and allowed property lookups."""
        registry = SchemaTypeRegistry()

        assert registry.get_required_properties("Article") == ["headline", "author"]
        assert registry.get_required_properties("WebSite") == ["name", "url"]
        assert registry.get_required_properties("Unknown") == ["name"]
        assert "mainEntityOfPage" in registry.get_allowed_properties("Article")
        assert registry.get_allowed_properties("Unknown") == []

    def test_generate_schema_runs_filters(self):
        """Test pre- and post-generation filters wrap the generator."""
        hooks = EventDispatcher()
        hooks.add_filter(
            HookName.PRE_GENERATION_DATA,
            lambda data, schema_type, options: {**data, "name": data["name"].upper()},
        )
        hooks.add_filter(
            HookName.POST_GENERATION,
            lambda schema, schema_type, data, options: {**schema, "generatedFor": schema_type},
        )
        registry = SchemaTypeRegistry(hooks)

        schema = registry.generate_schema("Person", {"name": "jane"})

        assert schema["name"] == "JANE"
        assert schema["generatedFor"] == "Person"

    def test_unregistered_type_raises(self):
        """Test generating an unknown type raises SchemaTypeError."""
        with pytest.raises(SchemaTypeError, match="No generator registered"):
            SchemaTypeRegistry().generate_schema("Event", {})

    def test_generator_failures_raise_generator_error(self):
        """Test failing and misbehaving generators raise GeneratorError."""
        registry = SchemaTypeRegistry()

        def broken(data, options):
            raise KeyError("title")

        registry.register_schema_type("Broken", broken)
        registry.register_schema_type("NotMapping", lambda data, options: ["nope"])

        with pytest.raises(GeneratorError) as exc_info:
            registry.generate_schema("Broken", {})
        assert isinstance(exc_info.value.cause, KeyError)

        with pytest.raises(GeneratorError, match="expected a mapping"):
            registry.generate_schema("NotMapping", {})

    def test_custom_validator_registration(self):
        """Test custom validators are stored per type."""
        registry = SchemaTypeRegistry()

        def check(schema):
            return []

        assert registry.register_validator("Organization", check) is True
        assert registry.get_validator("Organization") is check
        assert registry.register_validator("", check) is False
