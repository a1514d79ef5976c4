"""Cover provider protocol.

Defines the interface for any external source that can turn a
(title, platform) pair into an image URL.

Implementations:
- Wikipedia content scrape (the only real one today)
- TheGamesDB (capability slot, delegates to Wikipedia)
- ScreenScraper (capability slot, delegates to Wikipedia)
"""

from typing import Protocol, runtime_checkable

from cover_resolver.entities import CoverMatch


@runtime_checkable
class CoverProvider(Protocol):
    """Protocol for cover image providers.

    Any class with these members satisfies the protocol, no explicit
    inheritance needed.
    """

    @property
    def name(self) -> str:
        """Source token this provider answers for (e.g. "wikimedia")."""
        ...

    async def resolve(self, title: str, platform: str | None) -> CoverMatch:
        """Find a cover image for a game.

        Args:
            title: Game title
            platform: Platform slug, if known

        Returns:
            CoverMatch with the image URL

        Raises:
            ProviderMiss: If no image could be found. Transport errors are
                converted to ProviderMiss before they leave the provider.
        """
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...
