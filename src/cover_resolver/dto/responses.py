"""Response DTOs for API endpoints."""

from pydantic import BaseModel, Field


class CoverResponse(BaseModel):
    """Response DTO for cover resolution.

    When no cover was found ``available`` is false and ``url`` is the
    fallback asset, so clients always get something renderable.
    """

    url: str = Field(..., description="Image URL to render")
    source: str | None = Field(None, description="Source that produced the URL")
    from_cache: bool = Field(False, description="Whether the URL came from the cache")
    available: bool = Field(..., description="False when no cover could be found")
    provenance: str = Field(..., description="Badge category for the returned URL")
    network_sourced: bool = Field(..., description="Whether cache badges apply to this URL")
    reason: str | None = Field(None, description="Why no cover was found, when unavailable")


class ProvenanceResponse(BaseModel):
    """Response DTO for reference classification."""

    reference: str | None = Field(None, description="The classified reference")
    kind: str | None = Field(None, description="Reference kind, null when absent")
    provenance: str = Field(..., description="Badge category")
    network_sourced: bool = Field(..., description="Whether cache badges apply")


class CacheEntryItem(BaseModel):
    """Single entry in the cache listing."""

    key: str = Field(..., description="Cache key (source:title[:platform])")
    url: str = Field(..., description="Cached image URL")
    source: str | None = Field(None, description="Source that produced the URL")
    title: str | None = Field(None, description="Page the image was taken from")
    cached_at: float = Field(..., description="Timestamp when the entry was cached (Unix timestamp)")


class CacheEntriesResponse(BaseModel):
    """Response DTO for the cache listing."""

    count: int = Field(..., description="Number of entries listed", ge=0)
    entries: list[CacheEntryItem] = Field(default_factory=list, description="Entries, newest first")


class CacheStatsResponse(BaseModel):
    """Response DTO for cache statistics."""

    session_entries: int = Field(..., description="Entries held in the session tier", ge=0)
    durable_entries: int | None = Field(
        None,
        description="Entries held in the durable tier, null when it is unreachable",
        ge=0,
    )
    key_prefix: str = Field(..., description="Namespace prefix of durable keys")
    ttl_seconds: int | None = Field(
        None,
        description="Entry lifetime in seconds, null when entries never expire",
        ge=0,
    )


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'degraded'")
    cache_healthy: bool = Field(..., description="Whether the durable cache tier is reachable")
