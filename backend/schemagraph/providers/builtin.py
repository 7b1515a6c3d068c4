"""Built-in providers for the foundational site pieces.

Organization and WebSite are emitted in every context and linked by id;
WebPage and Article describe the queried content. Each provider passes
its flattened piece through a data filter (``schema_<kind>_data``) where
returning None keeps the piece unchanged.
"""

from datetime import date, datetime
from typing import Any

from ..core.context import GenerationContext
from ..core.hooks import HookDispatcher, HookName
from ..core.piece import SchemaPiece
from ..schema_types.generators import OrganizationGenerator
from .interface import BaseProvider
from .site_data import SiteDataSource

ORGANIZATION_ID = "#organization"
WEBSITE_ID = "#website"
WEBPAGE_ID = "#webpage"
ARTICLE_ID = "#article"

# Post type -> schema type; unknown post types are articles
POST_TYPE_SCHEMA = {
    "post": "Article",
    "news": "NewsArticle",
    "blog_post": "BlogPosting",
    "page": "WebPage",
}
ARTICLE_TYPES = frozenset({"Article", "BlogPosting", "NewsArticle"})


def resolve_post_schema_type(post_type: str | None) -> str:
    return POST_TYPE_SCHEMA.get(post_type or "", "Article")


def author_id(user_id: Any) -> str:
    return f"#author-{user_id}"


class SiteProvider(BaseProvider):
    """Base class for providers reading from a site data source."""

    def __init__(
        self,
        site: SiteDataSource,
        hooks: HookDispatcher | None = None,
        priority: int | None = None,
    ):
        super().__init__(hooks, priority)
        self.site = site

    def queried_post(self, options: dict[str, Any]) -> dict[str, Any] | None:
        post_id = options.get("post_id")
        if post_id in (None, ""):
            return None
        return self.site.get_post(post_id)

    def image_object(self, post_id: Any) -> dict[str, Any] | None:
        image = self.site.get_featured_image(post_id)
        if not image or not image.get("url"):
            return None
        image_object: dict[str, Any] = {"@type": "ImageObject", "url": image["url"]}
        for dimension in ("width", "height"):
            if image.get(dimension):
                image_object[dimension] = int(image[dimension])
        return image_object


class OrganizationProvider(SiteProvider):
    """The site's publishing organization, ``#organization``."""

    id = "organization"
    default_priority = 5
    schema_types = ("Organization",)

    def get_pieces(self, context: str, options: dict[str, Any]) -> list[SchemaPiece]:
        organization = SchemaPiece(ORGANIZATION_ID, "Organization")
        organization.set("name", self.site.get_site_name()).set(
            "url", self.site.get_site_url()
        )

        description = self.site.get_site_description()
        if description:
            organization.set("description", description)

        extra = self.site.get_organization_data()
        logo = OrganizationGenerator.process_logo(extra.get("logo"))
        if logo:
            organization.set("logo", logo)
        if extra.get("social_media"):
            organization.set("sameAs", list(extra["social_media"]))
        for property in ("telephone", "email", "address"):
            if extra.get(property):
                organization.set(property, extra[property])

        self.apply_piece_filters(organization, HookName.ORGANIZATION_DATA, context)
        return [organization]


class WebsiteProvider(SiteProvider):
    """The site itself, ``#website``, published by ``#organization``."""

    id = "website"
    default_priority = 5
    schema_types = ("WebSite",)

    # Contexts where the site search box is advertised
    SEARCH_CONTEXTS = (GenerationContext.HOME.value, GenerationContext.ARCHIVE.value)

    def get_pieces(self, context: str, options: dict[str, Any]) -> list[SchemaPiece]:
        site_url = self.site.get_site_url()
        website = SchemaPiece(WEBSITE_ID, "WebSite")
        website.set("name", self.site.get_site_name()).set("url", site_url).add_reference(
            "publisher", ORGANIZATION_ID
        )

        description = self.site.get_site_description()
        if description:
            website.set("description", description)

        if context in self.SEARCH_CONTEXTS:
            website.set(
                "potentialAction",
                {
                    "@type": "SearchAction",
                    "target": {
                        "@type": "EntryPoint",
                        "urlTemplate": f"{site_url}?s={{search_term_string}}",
                    },
                    "query-input": "required name=search_term_string",
                },
            )

        self.apply_piece_filters(website, HookName.WEBSITE_DATA, context)
        return [website]


class WebPageProvider(SiteProvider):
    """The queried page, ``#webpage``, part of ``#website``.

    Covers singular content that is not an article, plus archive and
    taxonomy listings.
    """

    id = "webpage"
    default_priority = 20
    schema_types = ("WebPage",)

    LISTING_CONTEXTS = (GenerationContext.ARCHIVE.value, GenerationContext.TAXONOMY.value)

    def can_provide(self, context: str, options: dict[str, Any]) -> bool:
        if context in self.LISTING_CONTEXTS:
            return True
        if context != GenerationContext.SINGULAR.value:
            return False
        post = self.queried_post(options)
        return post is not None and resolve_post_schema_type(post.get("type")) not in ARTICLE_TYPES

    def get_pieces(self, context: str, options: dict[str, Any]) -> list[SchemaPiece]:
        webpage = SchemaPiece(WEBPAGE_ID, "WebPage")
        webpage.add_reference("isPartOf", WEBSITE_ID).add_reference(
            "publisher", ORGANIZATION_ID
        )

        post = self.queried_post(options) if context == GenerationContext.SINGULAR.value else None
        if post is not None:
            self._describe_post(webpage, post)
        else:
            self._describe_listing(webpage, options)

        self.apply_piece_filters(webpage, HookName.WEBPAGE_DATA, context, options.get("post_id"))
        return [webpage]

    def _describe_post(self, webpage: SchemaPiece, post: dict[str, Any]) -> None:
        post_id = post["id"]
        title = self.site.get_title(post_id)
        webpage.set("name", title).set("headline", title).set(
            "url", self.site.get_permalink(post_id)
        )

        excerpt = self.site.get_excerpt(post_id)
        if excerpt:
            webpage.set("description", excerpt)
        if post.get("date"):
            webpage.set("datePublished", isoformat(post["date"]))
        if post.get("modified"):
            webpage.set("dateModified", isoformat(post["modified"]))

        image = self.image_object(post_id)
        if image:
            webpage.set("image", image)

    def _describe_listing(self, webpage: SchemaPiece, options: dict[str, Any]) -> None:
        term_id = options.get("term_id")
        term = self.site.get_term(term_id) if term_id not in (None, "") else None

        if term:
            webpage.set("name", term.get("name", "")).set(
                "url", term.get("url") or self.site.get_site_url()
            )
            if term.get("description"):
                webpage.set("description", term["description"])
        else:
            webpage.set("name", self.site.get_site_name()).set(
                "url", self.site.get_site_url()
            )


class ArticleProvider(SiteProvider):
    """The queried article, ``#article``, with its author ``#author-<id>``."""

    id = "article"
    default_priority = 20
    schema_types = tuple(sorted(ARTICLE_TYPES)) + ("Person",)

    def can_provide(self, context: str, options: dict[str, Any]) -> bool:
        if context != GenerationContext.SINGULAR.value:
            return False
        post = self.queried_post(options)
        return post is not None and resolve_post_schema_type(post.get("type")) in ARTICLE_TYPES

    def get_pieces(self, context: str, options: dict[str, Any]) -> list[SchemaPiece]:
        post = self.queried_post(options)
        if post is None:
            return []

        post_id = post["id"]
        title = self.site.get_title(post_id)
        url = self.site.get_permalink(post_id)

        article = SchemaPiece(ARTICLE_ID, resolve_post_schema_type(post.get("type")))
        article.set("headline", title).set("name", title).set("url", url).set(
            "mainEntityOfPage", url
        ).add_reference("publisher", ORGANIZATION_ID)

        if post.get("date"):
            article.set("datePublished", isoformat(post["date"]))
        if post.get("modified"):
            article.set("dateModified", isoformat(post["modified"]))

        excerpt = self.site.get_excerpt(post_id)
        if excerpt:
            article.set("description", excerpt)

        image = self.image_object(post_id)
        if image:
            article.set("image", image)

        pieces = [article]
        author_name = (
            self.site.get_author_name(post["author"]) if post.get("author") is not None else None
        )
        if author_name:
            author = SchemaPiece(author_id(post["author"]), "Person").set("name", author_name)
            article.add_reference("author", author.id)
            pieces.append(author)

        self.apply_piece_filters(article, HookName.ARTICLE_DATA, context, post_id)
        return pieces


def isoformat(value: Any) -> str:
    """Render YAML-parsed dates and datetimes as ISO-8601 strings."""
    if isinstance(value, datetime | date):
        return value.isoformat()
    return str(value)


def default_providers(
    site: SiteDataSource, hooks: HookDispatcher | None = None
) -> list[BaseProvider]:
    """The built-in provider set, in registration order."""
    return [
        OrganizationProvider(site, hooks),
        WebsiteProvider(site, hooks),
        WebPageProvider(site, hooks),
        ArticleProvider(site, hooks),
    ]
