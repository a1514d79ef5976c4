"""Cover resolution service.

Turns a GameIdentity into a renderable URL by consulting, in order, the
identity's own reference, the two-tier cache, and the provider for the
requested source.
"""

import asyncio
import base64
import logging
from collections.abc import Iterable

from cover_resolver.config import settings
from cover_resolver.entities import (
    CacheKey,
    GameIdentity,
    ImageReference,
    ReferenceKind,
    Resolution,
    ResolutionResult,
    Unavailable,
)
from cover_resolver.errors import ProviderMiss
from cover_resolver.protocols import CoverProvider
from cover_resolver.references import WIKIMEDIA, parse_reference
from cover_resolver.repositories import ScreenScraperCoverProvider, TheGamesDBCoverProvider, WikipediaCoverProvider
from cover_resolver.services.cover_cache import CoverCache

logger = logging.getLogger(__name__)

DEFAULT_COVER_ASSET = "/game/default-image.png"

_PLACEHOLDER_SVG = (
    '<svg width="300" height="200" xmlns="http://www.w3.org/2000/svg">'
    '<rect width="100%" height="100%" fill="#2d3238"/>'
    '<text x="50%" y="50%" font-family="Arial" font-size="24" fill="#ffa500" '
    'text-anchor="middle" dominant-baseline="middle">Game Cover</text></svg>'
)
PLACEHOLDER_DATA_URI = "data:image/svg+xml;base64," + base64.b64encode(_PLACEHOLDER_SVG.encode()).decode()

# Result source for references that never reach a provider.
_FINAL_SOURCES = {
    ReferenceKind.DIRECT_URL: "external",
    ReferenceKind.LOCAL_ASSET: "local",
    ReferenceKind.EMBEDDED: "embedded",
    ReferenceKind.CUSTOM: "custom",
}


def fallback_image_url(asset_failed: bool = False) -> str:
    """Image a caller should show for an Unavailable result.

    The bundled default asset comes first; the inline placeholder is for
    when that asset itself fails to load.
    """
    return PLACEHOLDER_DATA_URI if asset_failed else DEFAULT_COVER_ASSET


def derive_key(identity: GameIdentity, default_source: str = WIKIMEDIA) -> CacheKey:
    """Compute the cache key for an identity.

    A scoped reference carries its own (source, title, platform) and wins
    over ``preferred_source``. Otherwise the key is built from the
    preferred (or default) source and the identity's title and platform.
    """
    if identity.reference:
        reference = parse_reference(identity.reference)
        if reference.kind is ReferenceKind.SCOPED and reference.source and reference.title:
            return CacheKey(source=reference.source, title=reference.title, platform=reference.platform)

    return CacheKey(
        source=identity.preferred_source or default_source,
        title=identity.title,
        platform=identity.platform or None,
    )


class ResolverService:
    """Core cover resolution service.

    This service depends on PROTOCOLS, not concrete implementations:
    - CoverCache wraps any CoverStore (Redis by default)
    - CoverProvider: Wikipedia, TheGamesDB, ScreenScraper, or a test double

    Concurrent resolutions of the same cache key share one provider call.

    Example:
        ```python
        from cover_resolver.entities import GameIdentity
        from cover_resolver.services import CoverCache, ResolverService

        resolver = ResolverService.create(cache=CoverCache.create())
        result = await resolver.resolve(GameIdentity("Chrono Trigger", "snes"))
        await resolver.close()
        ```
    """

    def __init__(
        self,
        cache: CoverCache,
        providers: Iterable[CoverProvider],
        default_source: str | None = None,
        timeout: float | None = None,
        broad_scan: bool | None = None,
    ) -> None:
        """Initialize the resolver service.

        Args:
            cache: Two-tier cover cache (required).
            providers: Providers keyed by their ``name``; must include the default source.
            default_source: Source used when none is requested. Defaults to settings.
            timeout: Seconds allowed per provider call. Defaults to settings.
            broad_scan: Whether to try a substring scan of the cache before the network.
                Defaults to settings.
        """
        self._cache = cache
        self._providers: dict[str, CoverProvider] = {provider.name: provider for provider in providers}
        self._default_source = default_source or settings.default_source
        self._timeout = timeout or settings.provider_timeout
        self._broad_scan = settings.broad_scan if broad_scan is None else broad_scan
        self._in_flight: dict[str, asyncio.Task[Resolution]] = {}

        if self._default_source not in self._providers:
            raise ValueError(
                f"No provider registered for default source {self._default_source!r} "
                f"(have {sorted(self._providers)})"
            )

    @classmethod
    def create(
        cls,
        cache: CoverCache,
        providers: Iterable[CoverProvider] | None = None,
        default_source: str | None = None,
        timeout: float | None = None,
    ) -> "ResolverService":
        """Factory method to create ResolverService with default providers.

        Args:
            cache: Two-tier cover cache (required).
            providers: Providers to use. If None, Wikipedia plus the
                TheGamesDB and ScreenScraper slots delegating to it.
            default_source: Source used when none is requested. If None, uses settings.
            timeout: Seconds per provider call. If None, uses settings.

        Returns:
            Configured ResolverService instance
        """
        if providers is None:
            providers = default_providers()
        return cls(cache=cache, providers=providers, default_source=default_source, timeout=timeout)

    async def resolve(self, identity: GameIdentity) -> Resolution:
        """Resolve a game's cover image URL.

        Business logic:
        1. Direct, local, embedded and custom references are returned as-is
        2. Derive the cache key (a scoped reference is authoritative)
        3. Exact cache lookup, then a broad scan on the title
        4. Ask the provider for the key's source and cache its answer

        Args:
            identity: What the caller knows about the game

        Returns:
            ResolutionResult, or Unavailable when nothing could be found.
            Never raises for a missing cover.
        """
        if identity.reference:
            reference = parse_reference(identity.reference)
            if reference.is_final:
                return self._passthrough(reference)

        key = derive_key(identity, self._default_source)

        cached = await asyncio.to_thread(self._from_cache, key)
        if cached is not None:
            return cached

        return await self._fetch_once(key)

    def provider_for(self, source: str) -> CoverProvider:
        """Provider for a source token; "auto", "cache" and unknown tokens get the default."""
        return self._providers.get(source) or self._providers[self._default_source]

    async def close(self) -> None:
        """Close every provider.

        Should be called when shutting down the application.
        """
        for provider in self._providers.values():
            await provider.close()

    @property
    def cache(self) -> CoverCache:
        """Get the underlying cache (for testing)."""
        return self._cache

    @property
    def providers(self) -> dict[str, CoverProvider]:
        return dict(self._providers)

    @property
    def default_source(self) -> str:
        return self._default_source

    def _passthrough(self, reference: ImageReference) -> ResolutionResult:
        return ResolutionResult(url=reference.raw, source=_FINAL_SOURCES[reference.kind], from_cache=False)

    def _from_cache(self, key: CacheKey) -> ResolutionResult | None:
        # Blocking store I/O; resolve() runs this in a worker thread.
        entry = self._cache.get(key)
        if entry is None and self._broad_scan:
            entry = self._cache.scan_broad(key.title, key.platform)
            if entry is not None:
                logger.debug("Broad cache scan hit for %r", key.title)
        if entry is None:
            return None
        return ResolutionResult(url=entry.url, source=entry.source or key.source, from_cache=True)

    async def _fetch_once(self, key: CacheKey) -> Resolution:
        serialized = key.serialize()
        task = self._in_flight.get(serialized)
        if task is None:
            task = asyncio.ensure_future(self._fetch(key))
            self._in_flight[serialized] = task
            task.add_done_callback(lambda _: self._in_flight.pop(serialized, None))
        else:
            logger.debug("Joining in-flight lookup for %s", serialized)
        # One caller being cancelled must not cancel the shared lookup.
        return await asyncio.shield(task)

    async def _fetch(self, key: CacheKey) -> Resolution:
        provider = self.provider_for(key.source)
        try:
            match = await asyncio.wait_for(provider.resolve(key.title, key.platform), timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.warning("%s timed out after %.1fs for %r", provider.name, self._timeout, key.title)
            return Unavailable(title=key.title, platform=key.platform, reason=f"{provider.name} timed out")
        except ProviderMiss as e:
            logger.info("No cover for %r from %s: %s", key.title, provider.name, e)
            return Unavailable(title=key.title, platform=key.platform, reason=str(e) or "no cover found")

        metadata = {"title": match.page_title or key.title, "source": match.source}
        await asyncio.to_thread(self._cache.put, key, match.url, metadata)
        return ResolutionResult(url=match.url, source=match.source, from_cache=False)


def default_providers() -> list[CoverProvider]:
    """Wikipedia plus the TheGamesDB and ScreenScraper slots that delegate to it."""
    wikipedia = WikipediaCoverProvider.create()
    return [wikipedia, TheGamesDBCoverProvider(wikipedia), ScreenScraperCoverProvider(wikipedia)]
