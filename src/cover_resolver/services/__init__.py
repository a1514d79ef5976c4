"""Service layer for business logic.

This layer contains the core business logic and orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)

Usage:
    ```python
    from cover_resolver.repositories import RedisCoverRepository
    from cover_resolver.services import CoverCache, ResolverService

    cache = CoverCache.create(store=RedisCoverRepository.create())
    resolver = ResolverService.create(cache=cache)
    ```
"""

from .cover_cache import CoverCache
from .resolver_service import (
    DEFAULT_COVER_ASSET,
    PLACEHOLDER_DATA_URI,
    ResolverService,
    default_providers,
    derive_key,
    fallback_image_url,
)

__all__ = [
    "DEFAULT_COVER_ASSET",
    "PLACEHOLDER_DATA_URI",
    "CoverCache",
    "ResolverService",
    "default_providers",
    "derive_key",
    "fallback_image_url",
]
