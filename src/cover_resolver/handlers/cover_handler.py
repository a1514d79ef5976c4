"""HTTP handlers for cover operations.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, validation, and error handling.
"""

from fastapi import HTTPException, status

from cover_resolver.dto import (
    CacheEntriesResponse,
    CacheEntryItem,
    CacheStatsResponse,
    CoverResponse,
    HealthCheckResponse,
    ProvenanceResponse,
    ResolveCoverRequest,
)
from cover_resolver.entities import GameIdentity, ResolutionResult
from cover_resolver.provenance import Provenance, classify_provenance, looks_network_sourced
from cover_resolver.references import parse_reference
from cover_resolver.services import ResolverService, fallback_image_url


class CoverHandler:
    """HTTP handlers for cover operations.

    This handler delegates business logic to ResolverService
    and handles HTTP-specific concerns like:
    - Converting entities to DTOs
    - Substituting the fallback image for unavailable covers
    - Error handling and responses

    Example:
        ```python
        from cover_resolver.handlers import CoverHandler

        handler = CoverHandler(resolver=resolver)

        @app.post("/covers/resolve", response_model=CoverResponse)
        async def resolve_cover(request: ResolveCoverRequest):
            return await handler.resolve_cover(request)
        ```
    """

    def __init__(self, resolver: ResolverService) -> None:
        """Initialize the cover handler.

        Args:
            resolver: The resolver service for business logic (required).
        """
        self._resolver = resolver

    async def resolve_cover(self, request: ResolveCoverRequest) -> CoverResponse:
        """Handle POST /covers/resolve requests.

        Args:
            request: The resolve request DTO

        Returns:
            CoverResponse; unavailable covers come back as the fallback image

        Raises:
            HTTPException: If an unexpected error occurs during resolution
        """
        identity = GameIdentity(
            title=request.title,
            platform=request.platform or None,
            reference=request.reference or None,
            preferred_source=request.preferred_source or None,
        )

        try:
            result = await self._resolver.resolve(identity)
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to resolve cover: {e}",
            ) from e

        if not isinstance(result, ResolutionResult):
            return CoverResponse(
                url=fallback_image_url(),
                source=None,
                from_cache=False,
                available=False,
                provenance=Provenance.DEFAULT.value,
                network_sourced=False,
                reason=result.reason,
            )

        return CoverResponse(
            url=result.url,
            source=result.source,
            from_cache=result.from_cache,
            available=True,
            provenance=_provenance_of(result).value,
            network_sourced=looks_network_sourced(result.url),
        )

    async def classify(self, reference: str | None) -> ProvenanceResponse:
        """Handle GET /covers/provenance requests."""
        kind = parse_reference(reference).kind.value if reference else None
        return ProvenanceResponse(
            reference=reference,
            kind=kind,
            provenance=classify_provenance(reference).value,
            network_sourced=looks_network_sourced(reference),
        )

    async def list_entries(self) -> CacheEntriesResponse:
        """Handle GET /cache/entries requests.

        Raises:
            HTTPException: If an error occurs while listing entries
        """
        try:
            rows = self._resolver.cache.inspect()
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to list cache entries: {e}",
            ) from e

        entries = [
            CacheEntryItem(
                key=row["key"],
                url=row["url"],
                source=row["source"],
                title=row["title"],
                cached_at=row["timestamp"],
            )
            for row in rows
        ]
        return CacheEntriesResponse(count=len(entries), entries=entries)

    async def get_stats(self) -> CacheStatsResponse:
        """Handle GET /cache/stats requests.

        Returns:
            CacheStatsResponse with cache statistics

        Raises:
            HTTPException: If an error occurs while fetching stats
        """
        try:
            stats = self._resolver.cache.get_stats()

            return CacheStatsResponse(
                session_entries=stats.get("session_entries", 0),
                durable_entries=stats.get("durable_entries"),
                key_prefix=stats.get("key_prefix", ""),
                ttl_seconds=stats.get("ttl"),
            )

        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to get stats: {e}",
            ) from e

    async def clear_cache(self) -> dict:
        """Handle DELETE /cache requests.

        Returns:
            Dict with clear operation result
        """
        try:
            count = self._resolver.cache.clear()

            return {
                "success": True,
                "deleted_count": count,
                "message": "Cover cache cleared successfully",
            }

        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to clear cache: {e}",
            ) from e

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests.

        Returns:
            HealthCheckResponse; a down durable tier only degrades the service
        """
        is_healthy = self._resolver.cache.health_check()

        return HealthCheckResponse(
            status="healthy" if is_healthy else "degraded",
            cache_healthy=is_healthy,
        )


def _provenance_of(result: ResolutionResult) -> Provenance:
    try:
        return Provenance(result.source)
    except ValueError:
        return classify_provenance(result.url)
