"""Cover Resolver - cover image resolution and caching for retro game catalogs.

This package provides a layered architecture for finding game cover art:

Layers:
    - protocols: Interface contracts (CoverStore, CoverProvider)
    - repositories: Data access implementations (Redis, Wikipedia)
    - services: Business logic (CoverCache, ResolverService)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from cover_resolver.entities import GameIdentity
    from cover_resolver.services import CoverCache, ResolverService

    resolver = ResolverService.create(cache=CoverCache.create())
    result = await resolver.resolve(GameIdentity("Super Mario Bros.", "nes"))
    ```

For HTTP API:
    ```python
    from cover_resolver.api.app import app
    ```
"""

from cover_resolver.config import get_redis_client, settings
from cover_resolver.dto import CoverResponse, ResolveCoverRequest
from cover_resolver.entities import (
    CacheEntryEntity,
    CacheKey,
    GameIdentity,
    ImageReference,
    ReferenceKind,
    ResolutionResult,
    Unavailable,
)
from cover_resolver.handlers import CoverHandler
from cover_resolver.protocols import CoverProvider, CoverStore
from cover_resolver.provenance import Provenance, classify_provenance, looks_network_sourced
from cover_resolver.references import format_reference, parse_reference
from cover_resolver.repositories import RedisCoverRepository, WikipediaCoverProvider
from cover_resolver.services import CoverCache, ResolverService, derive_key, fallback_image_url

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    # Protocols (interfaces)
    "CoverStore",
    "CoverProvider",
    # Reference grammar and provenance
    "parse_reference",
    "format_reference",
    "Provenance",
    "classify_provenance",
    "looks_network_sourced",
    # Services (business logic)
    "CoverCache",
    "ResolverService",
    "derive_key",
    "fallback_image_url",
    # Handlers (HTTP)
    "CoverHandler",
    # Repositories (data access)
    "RedisCoverRepository",
    "WikipediaCoverProvider",
    # Entities (domain models)
    "CacheEntryEntity",
    "CacheKey",
    "GameIdentity",
    "ImageReference",
    "ReferenceKind",
    "ResolutionResult",
    "Unavailable",
    # DTOs (API contracts)
    "ResolveCoverRequest",
    "CoverResponse",
]
