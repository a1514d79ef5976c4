"""Image reference domain entity."""

from dataclasses import dataclass
from enum import Enum


class ReferenceKind(str, Enum):
    """Variants of the image reference grammar."""

    EMBEDDED = "embedded"
    LOCAL_ASSET = "local-asset"
    DIRECT_URL = "direct-url"
    SCOPED = "scoped-reference"
    CUSTOM = "custom"


@dataclass(frozen=True)
class ImageReference:
    """A parsed image reference.

    Built once by references.parse_reference(); downstream code inspects
    ``kind`` and never re-parses ``raw``.

    Attributes:
        raw: The reference string exactly as supplied
        kind: Which variant of the grammar applies
        source: Provider token (SCOPED only)
        title: Percent-decoded game title (SCOPED only)
        platform: Percent-decoded platform (SCOPED only, optional)
    """

    raw: str
    kind: ReferenceKind
    source: str | None = None
    title: str | None = None
    platform: str | None = None

    @property
    def is_final(self) -> bool:
        """True when the reference is already a renderable value."""
        return self.kind is not ReferenceKind.SCOPED
