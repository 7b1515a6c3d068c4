"""End-to-end tests for graph generation with the built-in providers.

These tests wire the full engine through ``create_app_context`` against a
realistic site description, using both cache backends, and exercise
rendering, extension filters and content-driven cache invalidation.
"""

import json
from pathlib import Path
import tempfile

import pytest

from schemagraph.config import Settings
from schemagraph.core import ContentEvent, EventDispatcher, HookName, piece_type_hook
from schemagraph.manager import create_app_context
from schemagraph.providers import StaticSiteData

SITE = {
    "site": {
        "name": "Example News",
        "description": "Daily news",
        "url": "https://news.example.com",
    },
    "organization": {
        "logo": {"url": "https://news.example.com/logo.png", "width": 600, "height": 60},
        "social_media": ["https://twitter.com/examplenews"],
        "telephone": "+1 555 0100",
    },
    "authors": {7: {"name": "Jane Doe"}},
    "posts": {
        42: {
            "type": "news",
            "title": "Big Story",
            "excerpt": "Something happened",
            "author": 7,
            "date": "2024-03-01T08:00:00+00:00",
            "modified": "2024-03-02T09:30:00+00:00",
            "image": "https://news.example.com/big.jpg",
        },
        43: {"type": "page", "title": "About Us", "excerpt": "Who we are"},
    },
    "terms": {3: {"name": "Politics", "url": "https://news.example.com/politics/"}},
}


@pytest.fixture
def site():
    return StaticSiteData(SITE)


@pytest.fixture(params=["memory", "sqlite"])
def settings(request):
    if request.param == "memory":
        yield Settings(cache_backend="memory")
        return

    with tempfile.TemporaryDirectory() as temp_dir:
        yield Settings(cache_backend="sqlite", cache_path=str(Path(temp_dir) / "cache.db"))


@pytest.fixture
def app(settings, site):
    with create_app_context(settings, site) as context:
        yield context


class TestHomeGraph:
    """Test the home page graph."""

    def test_home_has_organization_and_website(self, app):
        """Test the home graph holds exactly the two site pieces, linked."""
        graph = app.manager.build_graph("home")

        assert [piece.id for piece in graph] == ["#organization", "#website"]
        assert graph.validate_references() == []

        document = graph.to_document()
        assert document["@context"] == "https://schema.org"
        assert len(document["@graph"]) == 2
        assert document["@graph"][1]["publisher"] == {"@id": "#organization"}

    def test_render_is_idempotent(self, app):
        """Test rendering twice yields identical output, cached or not."""
        first = app.manager.render("home")
        second = app.manager.render("home")

        assert first == second
        payload = first.removeprefix('<script type="application/ld+json">').removesuffix(
            "</script>\n"
        )
        assert json.loads(payload)["@graph"][0]["name"] == "Example News"

    def test_home_pieces_validate(self, app):
        """Test the built-in pieces pass validation."""
        app.manager.build_graph("home")

        assert app.manager.get_status_report()["error_count"] == 0


class TestSingularGraph:
    """Test post and page graphs."""

    def test_news_article(self, app):
        """Test a news post yields a NewsArticle linked to its author."""
        graph = app.manager.build_graph("singular", {"post_id": 42})

        article = graph.get_piece("#article")
        assert article.type == "NewsArticle"
        assert article.get("author") == {"@id": "#author-7"}
        assert article.get("image") == {
            "@type": "ImageObject",
            "url": "https://news.example.com/big.jpg",
        }
        assert graph.get_piece("#author-7").get("name") == "Jane Doe"
        assert graph.validate_references() == []
        assert app.manager.get_status_report()["error_count"] == 0

    def test_page_uses_webpage(self, app):
        """Test a page yields a WebPage part of the website."""
        graph = app.manager.build_graph("singular", {"post_id": 43})

        assert [piece.id for piece in graph] == ["#organization", "#website", "#webpage"]
        assert graph.get_piece("#webpage").get("isPartOf") == {"@id": "#website"}

    def test_taxonomy_page(self, app):
        """Test a term listing is described by the webpage piece."""
        graph = app.manager.build_graph("taxonomy", {"term_id": 3})

        assert graph.get_piece("#webpage").get("name") == "Politics"


class TestExtensionsAndInvalidation:
    """Test extension filters and cache invalidation across requests."""

    def test_piece_filter_changes_output(self, settings, site):
        """Test a per-type piece filter rewrites the organization."""
        hooks = EventDispatcher()
        hooks.add_filter(
            piece_type_hook("Organization"),
            lambda piece, context: piece.set("name", "Renamed"),
        )

        with create_app_context(settings, site, hooks) as app:
            graph = app.manager.build_graph("home")

        assert graph.get_piece("#organization").get("name") == "Renamed"

    def test_save_post_invalidates_cached_article(self, settings):
        """Test a post save event drops the cached article pieces."""
        data = json.loads(json.dumps(SITE))
        site = StaticSiteData(data)

        with create_app_context(settings, site) as app:
            first = app.manager.build_graph("singular", {"post_id": 42})
            assert first.get_piece("#article").get("headline") == "Big Story"

            site.posts["42"]["title"] = "Updated Story"
            cached = app.manager.build_graph("singular", {"post_id": 42})
            assert cached.get_piece("#article").get("headline") == "Big Story"

            app.hooks.notify(ContentEvent.SAVE_POST, 42)
            fresh = app.manager.build_graph("singular", {"post_id": 42})
            assert fresh.get_piece("#article").get("headline") == "Updated Story"

    def test_site_identity_change_invalidates_home(self, settings):
        """Test a site identity update refreshes home pieces."""
        data = json.loads(json.dumps(SITE))
        site = StaticSiteData(data)
        invalidated = []

        with create_app_context(settings, site) as app:
            app.hooks.add_action(HookName.HOME_CACHE_INVALIDATED, lambda: invalidated.append(True))
            app.manager.build_graph("home")

            site.site["name"] = "Renamed News"
            app.hooks.notify(ContentEvent.UPDATE_SITE_IDENTITY)
            graph = app.manager.build_graph("home")

        assert invalidated == [True]
        assert graph.get_piece("#organization").get("name") == "Renamed News"
