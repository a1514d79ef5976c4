"""Resolution domain entities."""

from dataclasses import dataclass


@dataclass(frozen=True)
class GameIdentity:
    """What a caller knows about a game when asking for its cover.

    Attributes:
        title: Game title from the catalog
        platform: Platform slug from the catalog (e.g. "snes")
        reference: Optional pre-encoded image reference stored with the game
        preferred_source: Optional provider token to try first
    """

    title: str
    platform: str | None = None
    reference: str | None = None
    preferred_source: str | None = None


@dataclass(frozen=True)
class CoverMatch:
    """A provider's answer for a (title, platform) pair.

    Attributes:
        url: The image URL
        source: Token of the provider that actually produced the URL
        page_title: Canonical page the image was taken from, if any
    """

    url: str
    source: str
    page_title: str | None = None


@dataclass(frozen=True)
class ResolutionResult:
    """Successful cover resolution. Carries no image data."""

    url: str
    source: str
    from_cache: bool

    @property
    def available(self) -> bool:
        return True


@dataclass(frozen=True)
class Unavailable:
    """Terminal result when no cover could be found.

    This is a value, not an exception. Callers substitute their own static
    fallback image.
    """

    title: str
    platform: str | None = None
    reason: str = "no cover found"

    @property
    def available(self) -> bool:
        return False


Resolution = ResolutionResult | Unavailable
