from typing import Any

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cover_resolver.api.dependencies import HandlerDep, ResolverDep, lifespan
from cover_resolver.config import settings
from cover_resolver.dto import (
    CacheEntriesResponse,
    CacheStatsResponse,
    CoverResponse,
    HealthCheckResponse,
    ProvenanceResponse,
    ResolveCoverRequest,
)
from cover_resolver.services import ResolverService

TITLE = "Cover Resolver API"
DESCRIPTION = "Cover image resolution and caching for retro game catalogs"
VERSION = "0.1.0"

router = APIRouter()


@router.get("/")
async def root(resolver: ResolverDep) -> dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "name": TITLE,
        "version": VERSION,
        "description": DESCRIPTION,
        "default_source": resolver.default_source,
        "sources": sorted(resolver.providers),
        "endpoints": {
            "resolve": "/covers/resolve",
            "provenance": "/covers/provenance",
            "cache": "/cache",
            "health": "/health",
            "docs": "/docs",
        },
    }


@router.get("/health", response_model=HealthCheckResponse)
async def health(handler: HandlerDep) -> HealthCheckResponse:
    """Health check endpoint."""
    return await handler.health_check()


@router.post("/covers/resolve", response_model=CoverResponse)
async def resolve_cover(request: ResolveCoverRequest, handler: HandlerDep) -> CoverResponse:
    """
    Resolve a game's cover image.

    Args:
        request: Title, platform, and optional reference / preferred source.

    Returns:
        The cover URL with its source and provenance, or the fallback image
        with ``available=false``.
    """
    return await handler.resolve_cover(request)


@router.get("/covers/provenance", response_model=ProvenanceResponse)
async def provenance(handler: HandlerDep, reference: str | None = None) -> ProvenanceResponse:
    """Classify a stored reference for badge rendering."""
    return await handler.classify(reference)


@router.get("/cache/stats", response_model=CacheStatsResponse)
async def cache_stats(handler: HandlerDep) -> CacheStatsResponse:
    """Get cache statistics."""
    return await handler.get_stats()


@router.get("/cache/entries", response_model=CacheEntriesResponse)
async def cache_entries(handler: HandlerDep) -> CacheEntriesResponse:
    """List cached covers, newest first."""
    return await handler.list_entries()


@router.delete("/cache", response_model=dict[str, Any])
async def clear_cache(handler: HandlerDep) -> dict[str, Any]:
    """Clear all entries from the cover cache."""
    return await handler.clear_cache()


def create_app(resolver: ResolverService | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        resolver: Pre-built resolver to serve. If None, the lifespan wires
            the default Redis + Wikipedia stack.
    """
    app = FastAPI(
        title=TITLE,
        description=DESCRIPTION,
        version=VERSION,
        lifespan=lifespan,
    )
    if resolver is not None:
        app.state.resolver = resolver

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    from cover_resolver.config import configure_logging

    configure_logging()
    uvicorn.run(
        "cover_resolver.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
