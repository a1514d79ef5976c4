"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from cover_resolver.config import settings
from cover_resolver.handlers import CoverHandler
from cover_resolver.repositories import RedisCoverRepository
from cover_resolver.services import CoverCache, ResolverService


def get_resolver(request: Request) -> ResolverService:
    """Dependency injection for ResolverService from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The ResolverService instance from app.state

    Raises:
        RuntimeError: If service is not initialized
    """
    resolver = getattr(request.app.state, "resolver", None)
    if resolver is None:
        raise RuntimeError("ResolverService not initialized. Check lifespan setup.")
    return resolver


def get_handler(request: Request) -> CoverHandler:
    """Dependency injection for CoverHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The CoverHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "cover_handler", None)
    if handler is None:
        raise RuntimeError("CoverHandler not initialized. Check lifespan setup.")
    return handler


def build_resolver() -> ResolverService:
    """Wire the default stack: Redis durable tier, two-tier cache, Wikipedia providers."""
    repository = RedisCoverRepository.create()
    cache = CoverCache.create(store=repository)
    return ResolverService.create(cache=cache)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores in app.state:
    1. Repository (data access) and CoverCache
    2. ResolverService (business logic) - stored in app.state.resolver
    3. CoverHandler (HTTP endpoints) - stored in app.state.cover_handler

    A resolver already placed in app.state (see create_app) is used as-is
    and left open on shutdown.

    Args:
        app: The FastAPI application instance

    Yields:
        None

    Cleanup:
        Closes owned providers and removes all services from app.state
    """
    resolver: ResolverService | None = getattr(app.state, "resolver", None)
    owns_resolver = resolver is None
    if resolver is None:
        resolver = build_resolver()

    app.state.resolver = resolver
    app.state.cover_handler = CoverHandler(resolver=resolver)

    cache_healthy = resolver.cache.health_check()
    print("✓ Cover resolver initialized")
    print(f"✓ Default source: {resolver.default_source}")
    print(f"✓ Providers: {', '.join(sorted(resolver.providers))}")
    print(f"✓ Cache TTL: {resolver.cache.ttl or 'never expires'}")
    if cache_healthy:
        print(f"✓ Redis: {settings.redis_url}")
    else:
        print(f"✗ Redis unreachable at {settings.redis_url}, using session cache only")

    yield

    del app.state.cover_handler
    if owns_resolver:
        await resolver.close()
        del app.state.resolver
    print("✓ Cover resolver shut down")


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[CoverHandler, Depends(get_handler)]
ResolverDep = Annotated[ResolverService, Depends(get_resolver)]
