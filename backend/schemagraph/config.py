"""Configuration management for the schema graph engine.

This module handles environment-based configuration using Pydantic Settings.
Every field can be set through a ``SCHEMAGRAPH_``-prefixed environment
variable (``SCHEMAGRAPH_CACHE_BACKEND=sqlite``).
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .cache import CacheConfig

# Provider cache lifetime per generation context, in seconds
CONTEXT_CACHE_TTLS: dict[str, int] = {
    "singular": 3600,
    "home": 1800,
    "archive": 1800,
    "taxonomy": 1800,
}
DEFAULT_CONTEXT_CACHE_TTL = 900


class Settings(BaseSettings):
    """Schema graph engine configuration."""

    model_config = SettingsConfigDict(env_prefix="SCHEMAGRAPH_", case_sensitive=False)

    # Environment
    environment: Literal["development", "testing", "production"] = Field(
        default="development", description="Application environment"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Enable JSON formatted logs")

    # Cache
    cache_backend: Literal["memory", "sqlite"] = Field(
        default="memory", description="Cache backing store"
    )
    cache_path: str | None = Field(
        default=None, description="Database file for the sqlite cache backend"
    )
    cache_prefix: str = Field(default="wp_schema_", description="Cache key namespace")
    cache_default_ttl: int = Field(
        default=3600, ge=0, description="Default entry lifetime in seconds"
    )
    cache_max_key_length: int = Field(
        default=172, ge=40, description="Maximum namespaced key length"
    )
    memory_cache_enabled: bool = Field(
        default=True, description="Enable the per-request memo layer"
    )

    # Generation
    caching_enabled: bool = Field(
        default=True, description="Cache provider output between requests"
    )
    validation_enabled: bool = Field(
        default=True, description="Validate generated schemas"
    )
    suppress_invalid: bool = Field(
        default=False, description="Drop schemas that fail validation from output"
    )

    @property
    def cache_config(self) -> CacheConfig:
        """Create cache configuration from individual fields."""
        return CacheConfig(
            backend_type=self.cache_backend,
            path=self.cache_path,
            prefix=self.cache_prefix,
            default_ttl=self.cache_default_ttl,
            max_key_length=self.cache_max_key_length,
            use_memory_cache=self.memory_cache_enabled,
        )

    @staticmethod
    def get_cache_ttl(context: str) -> int:
        """Provider cache lifetime for a generation context."""
        return CONTEXT_CACHE_TTLS.get(context, DEFAULT_CONTEXT_CACHE_TTL)
