"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import ResolveCoverRequest
from .responses import (
    CacheEntriesResponse,
    CacheEntryItem,
    CacheStatsResponse,
    CoverResponse,
    HealthCheckResponse,
    ProvenanceResponse,
)

__all__ = [
    "ResolveCoverRequest",
    "CoverResponse",
    "ProvenanceResponse",
    "CacheEntryItem",
    "CacheEntriesResponse",
    "CacheStatsResponse",
    "HealthCheckResponse",
]
