"""Cache key domain entity."""

from dataclasses import dataclass
from urllib.parse import quote

# Characters encodeURIComponent leaves alone, so keys written by older
# browser clients line up with ours.
_URI_COMPONENT_SAFE = "!~*'()"


def encode_component(value: str) -> str:
    """Percent-encode a key segment the way encodeURIComponent does."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


@dataclass(frozen=True)
class CacheKey:
    """Identity of a cached cover: (source, title, platform).

    Attributes:
        source: Provider token the lookup was scoped to
        title: Raw (decoded) game title
        platform: Platform slug, if known
    """

    source: str
    title: str
    platform: str | None = None

    def serialize(self) -> str:
        """Serialize as ``source:urlencoded-title[:urlencoded-platform]``."""
        parts = [self.source, encode_component(self.title)]
        if self.platform:
            parts.append(encode_component(self.platform))
        return ":".join(parts)

    def __str__(self) -> str:
        return self.serialize()
