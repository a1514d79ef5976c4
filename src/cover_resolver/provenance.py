"""Provenance classification for badge rendering.

Pure prefix/scheme inspection built on the reference grammar. Whether a
value is actually cache-resident is a different question, answered by
CoverCache; these helpers only describe what kind of reference it is.
"""

from enum import Enum

from cover_resolver.entities import ImageReference, ReferenceKind
from cover_resolver.references import CACHE, SCREENSCRAPER, TGDB, WIKIMEDIA, parse_reference


class Provenance(str, Enum):
    """Display category for where a cover value came from."""

    WIKIMEDIA = "wikimedia"
    TGDB = "tgdb"
    SCREENSCRAPER = "screenscraper"
    LOCAL = "local"
    EMBEDDED = "embedded"
    EXTERNAL = "external"
    CUSTOM = "custom"
    DEFAULT = "default"


_PROVIDER_PROVENANCE = {
    WIKIMEDIA: Provenance.WIKIMEDIA,
    TGDB: Provenance.TGDB,
    SCREENSCRAPER: Provenance.SCREENSCRAPER,
}

_KIND_PROVENANCE = {
    ReferenceKind.EMBEDDED: Provenance.EMBEDDED,
    ReferenceKind.LOCAL_ASSET: Provenance.LOCAL,
    ReferenceKind.DIRECT_URL: Provenance.EXTERNAL,
    ReferenceKind.CUSTOM: Provenance.CUSTOM,
}

# Markers older "cache:" references used to record their origin.
_CACHE_MARKERS = (
    (WIKIMEDIA, Provenance.WIKIMEDIA),
    (TGDB, Provenance.TGDB),
    (SCREENSCRAPER, Provenance.SCREENSCRAPER),
    ("web-url", Provenance.EXTERNAL),
)


def classify_provenance(ref: str | ImageReference | None) -> Provenance:
    """Map a reference (or a resolved value) to its badge category.

    Args:
        ref: Raw reference string, an already parsed reference, or None

    Returns:
        The Provenance member; DEFAULT when there is no reference at all
    """
    if ref is None or ref == "":
        return Provenance.DEFAULT

    parsed = ref if isinstance(ref, ImageReference) else parse_reference(ref)

    if parsed.kind is not ReferenceKind.SCOPED:
        return _KIND_PROVENANCE[parsed.kind]

    if parsed.source in _PROVIDER_PROVENANCE:
        return _PROVIDER_PROVENANCE[parsed.source]

    if parsed.source == CACHE:
        remainder = parsed.raw[len(CACHE) + 1 :]
        for marker, provenance in _CACHE_MARKERS:
            if marker in remainder:
                return provenance

    return Provenance.CUSTOM


def looks_network_sourced(ref: str | ImageReference | None) -> bool:
    """Is this the kind of reference cache badges apply to?

    True for direct URLs and scoped provider references; False for local
    assets, embedded data, custom schemes and absent values.
    """
    if ref is None or ref == "":
        return False
    parsed = ref if isinstance(ref, ImageReference) else parse_reference(ref)
    return parsed.kind in (ReferenceKind.DIRECT_URL, ReferenceKind.SCOPED)
