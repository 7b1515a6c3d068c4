"""Pluggable data providers and their registry.

Providers decide applicability for a generation context and emit schema
data or linked pieces. Site content reaches them only through the
:class:`SiteDataSource` protocol.
"""

from .builtin import (
    ARTICLE_ID,
    ORGANIZATION_ID,
    WEBPAGE_ID,
    WEBSITE_ID,
    ArticleProvider,
    OrganizationProvider,
    SiteProvider,
    WebPageProvider,
    WebsiteProvider,
    author_id,
    default_providers,
    resolve_post_schema_type,
)
from .interface import DEFAULT_PRIORITY, BaseProvider, DataProvider
from .registry import ProviderRegistry
from .site_data import SiteDataSource, StaticSiteData

__all__ = [
    "ARTICLE_ID",
    "DEFAULT_PRIORITY",
    "ORGANIZATION_ID",
    "WEBPAGE_ID",
    "WEBSITE_ID",
    "ArticleProvider",
    "BaseProvider",
    "DataProvider",
    "OrganizationProvider",
    "ProviderRegistry",
    "SiteDataSource",
    "SiteProvider",
    "StaticSiteData",
    "WebPageProvider",
    "WebsiteProvider",
    "author_id",
    "default_providers",
    "resolve_post_schema_type",
]
