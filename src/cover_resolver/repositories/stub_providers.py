"""Capability slots for database-backed cover sources.

TheGamesDB and ScreenScraper both need API credentials that are not wired
up yet. Each provider logs and hands the lookup to a fallback provider so
callers can already ask for these sources by name.
"""

import logging

from cover_resolver.entities import CoverMatch
from cover_resolver.protocols import CoverProvider
from cover_resolver.references import SCREENSCRAPER, TGDB

logger = logging.getLogger(__name__)


class DelegatingCoverProvider:
    """Provider that answers for one source name using another provider.

    The returned CoverMatch keeps the delegate's ``source`` so provenance
    reflects where the URL actually came from.
    """

    source_name: str = ""

    def __init__(self, fallback: CoverProvider) -> None:
        self._fallback = fallback

    @property
    def name(self) -> str:
        return self.source_name

    @property
    def fallback(self) -> CoverProvider:
        return self._fallback

    async def resolve(self, title: str, platform: str | None) -> CoverMatch:
        logger.info(
            "%s lookup for %r is not implemented, delegating to %s",
            self.name,
            title,
            self._fallback.name,
        )
        return await self._fallback.resolve(title, platform)

    async def close(self) -> None:
        # The fallback is shared and closed by whoever created it.
        return None


class TheGamesDBCoverProvider(DelegatingCoverProvider):
    """TheGamesDB slot (``tgdb``)."""

    source_name = TGDB


class ScreenScraperCoverProvider(DelegatingCoverProvider):
    """ScreenScraper slot (``screenscraper``)."""

    source_name = SCREENSCRAPER
