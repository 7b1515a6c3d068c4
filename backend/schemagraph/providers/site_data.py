"""Site data source: the content fetch calls providers depend on.

The hosting application owns its content storage; providers only see it
through the :class:`SiteDataSource` protocol. :class:`StaticSiteData`
serves a site described in a YAML file or a plain mapping.
"""

from pathlib import Path
from typing import Any, Protocol

import yaml

from ..core.exceptions import SchemaGraphError


class SiteDataSource(Protocol):
    """Synchronous content fetch calls consumed by providers."""

    def get_site_name(self) -> str: ...

    def get_site_description(self) -> str: ...

    def get_site_url(self) -> str: ...

    def get_organization_data(self) -> dict[str, Any]: ...

    def get_post(self, post_id: int) -> dict[str, Any] | None: ...

    def get_post_type(self, post_id: int) -> str | None: ...

    def get_permalink(self, post_id: int) -> str | None: ...

    def get_title(self, post_id: int) -> str: ...

    def get_excerpt(self, post_id: int) -> str: ...

    def get_content(self, post_id: int) -> str: ...

    def get_featured_image(self, post_id: int) -> dict[str, Any] | None: ...

    def get_author_name(self, user_id: int) -> str | None: ...

    def get_term(self, term_id: int) -> dict[str, Any] | None: ...


class StaticSiteData:
    """In-memory site description.

    Expected shape::

        site:
          name: Example
          description: Just another site
          url: https://example.com/
        organization:
          logo: https://example.com/logo.png
          social_media: [https://twitter.com/example]
        authors:
          7: {name: Jane Doe}
        posts:
          42:
            type: post
            title: Hello
            excerpt: ...
            content: ...
            author: 7
            date: 2024-01-15T10:00:00+00:00
            modified: 2024-01-16T10:00:00+00:00
            image: {url: https://example.com/a.jpg, width: 1200, height: 630}
        terms:
          3: {name: News, taxonomy: category, url: https://example.com/news/}
    """

    def __init__(self, data: dict[str, Any]):
        self.data = data
        self.site: dict[str, Any] = data.get("site") or {}
        self.organization: dict[str, Any] = data.get("organization") or {}
        self.posts = _index_by_id(data.get("posts"))
        self.authors = _index_by_id(data.get("authors"))
        self.terms = _index_by_id(data.get("terms"))

    @classmethod
    def from_file(cls, path: str | Path) -> "StaticSiteData":
        """Load a site description from a YAML file.

        Raises:
            SchemaGraphError: If the file cannot be read or is not a mapping
        """
        try:
            content = Path(path).read_text(encoding="utf-8")
            data = yaml.safe_load(content)
        except (OSError, yaml.YAMLError) as e:
            raise SchemaGraphError(f"Cannot load site file {path}: {e}", cause=e) from e

        if not isinstance(data, dict):
            raise SchemaGraphError(f"Site file {path} must contain a mapping")
        return cls(data)

    def get_site_name(self) -> str:
        return str(self.site.get("name", ""))

    def get_site_description(self) -> str:
        return str(self.site.get("description", ""))

    def get_site_url(self) -> str:
        url = str(self.site.get("url", ""))
        return url if url.endswith("/") or not url else f"{url}/"

    def get_organization_data(self) -> dict[str, Any]:
        return dict(self.organization)

    def get_post(self, post_id: int) -> dict[str, Any] | None:
        post = self.posts.get(str(post_id))
        return dict(post, id=post_id) if post is not None else None

    def get_post_type(self, post_id: int) -> str | None:
        post = self.posts.get(str(post_id))
        return post.get("type", "post") if post is not None else None

    def get_permalink(self, post_id: int) -> str | None:
        post = self.posts.get(str(post_id))
        if post is None:
            return None
        return post.get("url") or f"{self.get_site_url()}?p={post_id}"

    def get_title(self, post_id: int) -> str:
        return str(self.posts.get(str(post_id), {}).get("title", ""))

    def get_excerpt(self, post_id: int) -> str:
        return str(self.posts.get(str(post_id), {}).get("excerpt", ""))

    def get_content(self, post_id: int) -> str:
        return str(self.posts.get(str(post_id), {}).get("content", ""))

    def get_featured_image(self, post_id: int) -> dict[str, Any] | None:
        image = self.posts.get(str(post_id), {}).get("image")
        if isinstance(image, str):
            return {"url": image}
        return dict(image) if image else None

    def get_author_name(self, user_id: int) -> str | None:
        author = self.authors.get(str(user_id))
        return author.get("name") if author else None

    def get_term(self, term_id: int) -> dict[str, Any] | None:
        term = self.terms.get(str(term_id))
        return dict(term, id=term_id) if term is not None else None


def _index_by_id(items: Any) -> dict[str, dict[str, Any]]:
    """Key a YAML mapping or list of ``{"id": ...}`` records by string id."""
    if not items:
        return {}
    if isinstance(items, dict):
        return {str(key): value or {} for key, value in items.items()}
    return {str(item["id"]): item for item in items if isinstance(item, dict) and "id" in item}
