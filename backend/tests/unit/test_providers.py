"""Unit tests for the provider contract, registry and built-in providers."""

from datetime import datetime, timezone
from pathlib import Path
import tempfile

import pytest

from schemagraph.core import EventDispatcher, HookName, SchemaGraph, SchemaGraphError, SchemaPiece
from schemagraph.providers import (
    ArticleProvider,
    BaseProvider,
    OrganizationProvider,
    ProviderRegistry,
    StaticSiteData,
    WebPageProvider,
    WebsiteProvider,
    default_providers,
    resolve_post_schema_type,
)


class StubProvider(BaseProvider):
    """Provider with configurable identity and applicability."""

    def __init__(self, provider_id, priority=None, available=True, contexts=None):
        super().__init__(priority=priority)
        self.id = provider_id
        self.available = available
        self.contexts = contexts

    def is_available(self):
        return self.available

    def can_provide(self, context, options):
        return self.contexts is None or context in self.contexts

    def get_pieces(self, context, options):
        return [SchemaPiece(f"#{self.id}", "Thing").set("name", self.id)]


@pytest.fixture
def site():
    return StaticSiteData(
        {
            "site": {
                "name": "Example",
                "description": "Just another site",
                "url": "https://example.com",
            },
            "organization": {
                "logo": "https://example.com/logo.png",
                "social_media": ["https://twitter.com/example"],
                "email": "info@example.com",
            },
            "authors": {7: {"name": "Jane Doe"}},
            "posts": {
                42: {
                    "type": "post",
                    "title": "Hello World",
                    "excerpt": "First post",
                    "author": 7,
                    "date": datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc),
                    "image": {"url": "https://example.com/a.jpg", "width": 1200, "height": 630},
                },
                43: {"type": "blog_post", "title": "Diary"},
                50: {"type": "page", "title": "About", "url": "https://example.com/about/"},
            },
            "terms": {3: {"name": "News", "url": "https://example.com/news/"}},
        }
    )


class TestBaseProvider:
    """Test the shared provider behavior."""

    def test_cache_key_carries_content_ids(self):
        """Test content ids are embedded in the cache key."""
        provider = StubProvider("article")

        assert provider.get_cache_key("home", {}) == "provider_home_article"
        assert (
            provider.get_cache_key("singular", {"post_id": 42, "user_id": 1})
            == "provider_singular_article_p42_u1"
        )
        assert provider.get_cache_key("taxonomy", {"term_id": 3}) == "provider_taxonomy_article_t3"

    def test_provide_flattens_pieces_with_context(self):
        """Test provide emits complete schema objects."""
        assert StubProvider("thing").provide("home", {}) == [
            {"@context": "https://schema.org", "@type": "Thing", "@id": "#thing", "name": "thing"}
        ]

    def test_priority_override(self):
        """Test the constructor priority wins over the default."""
        assert StubProvider("a").priority == 10
        assert StubProvider("a", priority=3).priority == 3


class TestProviderRegistry:
    """Test provider registration and context resolution."""

    def test_unavailable_provider_not_registered(self):
        """Test unavailable providers are refused."""
        registry = ProviderRegistry()
        assert registry.register_provider(StubProvider("x", available=False)) is False
        assert len(registry) == 0

    def test_priority_ordering_keeps_registration_order_for_ties(self):
        """Test ascending priority with ties in registration order."""
        registry = ProviderRegistry()
        registry.register_provider(StubProvider("a", priority=10))
        registry.register_provider(StubProvider("b", priority=5))
        registry.register_provider(StubProvider("c", priority=10))

        ordered = registry.get_providers_for_context("home")
        assert [provider.provider_id for provider in ordered] == ["b", "a", "c"]

    def test_reregistration_replaces_and_moves_to_end(self):
        """Test registering an existing id replaces it."""
        registry = ProviderRegistry()
        registry.register_provider(StubProvider("a"))
        registry.register_provider(StubProvider("b"))
        replacement = StubProvider("a")
        registry.register_provider(replacement)

        assert list(registry.get_providers()) == ["b", "a"]
        assert registry.get_provider("a") is replacement

    def test_context_filtering_and_failing_checks(self):
        """Test inapplicable and raising providers are left out."""

        class Broken(StubProvider):
            def can_provide(self, context, options):
                raise RuntimeError("no site")

        registry = ProviderRegistry()
        registry.register_provider(StubProvider("home_only", contexts={"home"}))
        registry.register_provider(Broken("broken"))

        assert [p.provider_id for p in registry.get_providers_for_context("home")] == ["home_only"]
        assert registry.get_providers_for_context("singular") == []

    def test_registration_notifications(self):
        """Test registration and removal notify listeners."""
        hooks = EventDispatcher()
        events = []
        hooks.add_action(HookName.PROVIDER_REGISTERED, lambda pid, provider: events.append(pid))
        hooks.add_action(HookName.PROVIDER_UNREGISTERED, lambda pid: events.append(f"-{pid}"))
        registry = ProviderRegistry(hooks)

        registry.register_provider(StubProvider("a"))
        assert registry.unregister_provider("a") is True
        assert registry.unregister_provider("a") is False
        assert events == ["a", "-a"]

    def test_providers_by_schema_type(self, site):
        """Test lookup by supported schema type."""
        registry = ProviderRegistry()
        for provider in default_providers(site):
            registry.register_provider(provider)

        assert [p.provider_id for p in registry.get_providers_by_schema_type("Person")] == [
            "article"
        ]


class TestStaticSiteData:
    """Test the YAML-backed site data source."""

    def test_accessors(self, site):
        """Test site and post lookups."""
        assert site.get_site_url() == "https://example.com/"
        assert site.get_post(42)["id"] == 42
        assert site.get_post(999) is None
        assert site.get_post_type(43) == "blog_post"
        assert site.get_permalink(42) == "https://example.com/?p=42"
        assert site.get_permalink(50) == "https://example.com/about/"
        assert site.get_author_name(7) == "Jane Doe"
        assert site.get_term(3)["name"] == "News"

    def test_from_file(self):
        """Test loading a YAML site description."""
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "site.yaml"
            path.write_text(
                "site:\n  name: Example\n  url: https://example.com/\n"
                "posts:\n  - id: 1\n    title: Listed\n"
            )
            site = StaticSiteData.from_file(path)

        assert site.get_site_name() == "Example"
        assert site.get_title(1) == "Listed"

    def test_from_file_errors(self):
        """Test unreadable and non-mapping files raise SchemaGraphError."""
        with tempfile.TemporaryDirectory() as temp_dir:
            missing = Path(temp_dir) / "missing.yaml"
            with pytest.raises(SchemaGraphError, match="Cannot load site file"):
                StaticSiteData.from_file(missing)

            listing = Path(temp_dir) / "list.yaml"
            listing.write_text("- just\n- a list\n")
            with pytest.raises(SchemaGraphError, match="must contain a mapping"):
                StaticSiteData.from_file(listing)


class TestBuiltinProviders:
    """Test the built-in site providers."""

    def test_post_type_mapping(self):
        """Test post types resolve to schema types."""
        assert resolve_post_schema_type("post") == "Article"
        assert resolve_post_schema_type("blog_post") == "BlogPosting"
        assert resolve_post_schema_type("page") == "WebPage"
        assert resolve_post_schema_type("recipe") == "Article"
        assert resolve_post_schema_type(None) == "Article"

    def test_organization_piece(self, site):
        """Test the organization piece carries site identity."""
        [organization] = OrganizationProvider(site).get_pieces("home", {})
        data = organization.to_array()

        assert data["@id"] == "#organization"
        assert data["name"] == "Example"
        assert data["url"] == "https://example.com/"
        assert data["logo"] == {"@type": "ImageObject", "url": "https://example.com/logo.png"}
        assert data["sameAs"] == ["https://twitter.com/example"]
        assert data["email"] == "info@example.com"

    def test_organization_data_filter(self, site):
        """Test the data filter can change the piece."""
        hooks = EventDispatcher()
        hooks.add_filter(
            HookName.ORGANIZATION_DATA, lambda data, context: {**data, "name": "Filtered"}
        )

        [organization] = OrganizationProvider(site, hooks).get_pieces("home", {})
        assert organization.get("name") == "Filtered"

    def test_website_links_publisher_and_search(self, site):
        """Test the website references the organization and advertises search on home."""
        [website] = WebsiteProvider(site).get_pieces("home", {})

        assert website.references == ["#organization"]
        assert website.get("potentialAction")["target"]["urlTemplate"] == (
            "https://example.com/?s={search_term_string}"
        )

        [singular] = WebsiteProvider(site).get_pieces("singular", {"post_id": 42})
        assert singular.get("potentialAction") is None

    def test_unfiltered_pieces_keep_single_references(self, site):
        """Test a dispatcher without data filters leaves references untouched."""
        hooks = EventDispatcher()
        [website] = WebsiteProvider(site, hooks).get_pieces("home", {})
        article, _author = ArticleProvider(site, hooks).get_pieces("singular", {"post_id": 42})

        assert website.references == ["#organization"]
        assert article.references == ["#organization", "#author-7"]
        assert SchemaGraph([website]).validate_references() == [
            "Piece '#website' references missing piece '#organization'"
        ]

    def test_article_provider_applicability(self, site):
        """Test the article provider only applies to article posts."""
        provider = ArticleProvider(site)

        assert provider.can_provide("singular", {"post_id": 42}) is True
        assert provider.can_provide("singular", {"post_id": 43}) is True
        assert provider.can_provide("singular", {"post_id": 50}) is False
        assert provider.can_provide("singular", {}) is False
        assert provider.can_provide("home", {"post_id": 42}) is False

    def test_article_pieces(self, site):
        """Test the article and its author piece are linked."""
        article, author = ArticleProvider(site).get_pieces("singular", {"post_id": 42})

        assert article.id == "#article"
        assert article.type == "Article"
        assert article.get("headline") == "Hello World"
        assert article.get("datePublished") == "2024-01-15T10:00:00+00:00"
        assert article.get("image") == {
            "@type": "ImageObject",
            "url": "https://example.com/a.jpg",
            "width": 1200,
            "height": 630,
        }
        assert author.id == "#author-7"
        assert author.get("name") == "Jane Doe"
        assert article.references == ["#organization", "#author-7"]

    def test_article_without_known_author(self, site):
        """Test posts without a known author emit no author piece."""
        pieces = ArticleProvider(site).get_pieces("singular", {"post_id": 43})

        assert [piece.type for piece in pieces] == ["BlogPosting"]
        assert pieces[0].get("author") is None

    def test_webpage_applicability(self, site):
        """Test the webpage provider covers pages and listings."""
        provider = WebPageProvider(site)

        assert provider.can_provide("singular", {"post_id": 50}) is True
        assert provider.can_provide("singular", {"post_id": 42}) is False
        assert provider.can_provide("taxonomy", {"term_id": 3}) is True
        assert provider.can_provide("home", {}) is False

    def test_webpage_describes_term(self, site):
        """Test listing pages are named after the queried term."""
        [webpage] = WebPageProvider(site).get_pieces("taxonomy", {"term_id": 3})

        assert webpage.get("name") == "News"
        assert webpage.get("url") == "https://example.com/news/"
        assert webpage.references == ["#website", "#organization"]

    def test_webpage_describes_page(self, site):
        """Test singular pages use the post title and permalink."""
        [webpage] = WebPageProvider(site).get_pieces("singular", {"post_id": 50})

        assert webpage.get("name") == "About"
        assert webpage.get("url") == "https://example.com/about/"
