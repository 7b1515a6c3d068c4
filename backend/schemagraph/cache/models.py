"""Pydantic models for cache configuration, metadata and statistics."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class CacheBackendType(str, Enum):
    """Supported backing stores."""

    MEMORY = "memory"
    SQLITE = "sqlite"


class CacheConfig(BaseModel):
    """Configuration for a schema cache and its backing store."""

    backend_type: CacheBackendType = Field(
        default=CacheBackendType.MEMORY.value, description="Backing store type"
    )
    path: str | None = Field(
        default=None, description="Database file for the sqlite backend"
    )
    prefix: str = Field(default="wp_schema_", description="Key namespace prefix")
    default_ttl: int = Field(default=3600, ge=0, description="Default TTL in seconds")
    max_key_length: int = Field(
        default=172, ge=40, description="Maximum namespaced key length"
    )
    use_memory_cache: bool = Field(
        default=True, description="Enable the per-request memo layer"
    )

    class Config:
        """Pydantic configuration."""

        use_enum_values = True


class CacheMetadata(BaseModel):
    """Bookkeeping record kept for every cached key."""

    original_key: str = Field(description="Key as passed by the caller")
    created: float = Field(description="Unix timestamp of the write")
    ttl: int = Field(ge=0, description="TTL in seconds")
    expires: float = Field(description="Unix timestamp the entry expires at")

    def is_expired(self, now: float) -> bool:
        return self.expires <= now


class CacheStats(BaseModel):
    """Snapshot of cache occupancy."""

    backend_count: int = Field(ge=0, description="Entries under the namespace")
    memory_cache_count: int = Field(ge=0, description="Entries in the memo layer")
    memory_cache_enabled: bool
    metadata_count: int = Field(ge=0, description="Tracked metadata records")
    backend_info: dict[str, Any] = Field(
        default_factory=dict, description="Backend-specific details"
    )
