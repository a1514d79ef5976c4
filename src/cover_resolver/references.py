"""Image reference grammar.

Classifies the opaque reference strings stored alongside catalog records.
Classification is by prefix/scheme inspection only and never touches the
network. Every string maps to exactly one ReferenceKind:

    data:...                                  -> EMBEDDED
    file://... | app-local://... | /path      -> LOCAL_ASSET
    http(s)://...                             -> DIRECT_URL
    <source>:<encoded-title>[:<platform>]     -> SCOPED
    <other-scheme>:...                        -> CUSTOM
    anything else (bare relative path)        -> LOCAL_ASSET
"""

import re
from urllib.parse import unquote

from cover_resolver.entities import CacheKey, ImageReference, ReferenceKind

WIKIMEDIA = "wikimedia"
TGDB = "tgdb"
SCREENSCRAPER = "screenscraper"
AUTO = "auto"
CACHE = "cache"

KNOWN_SOURCES = frozenset({WIKIMEDIA, TGDB, SCREENSCRAPER, AUTO, CACHE})

# Sources with an adapter of their own. "auto" and "cache" use the default one.
PROVIDER_SOURCES = (WIKIMEDIA, TGDB, SCREENSCRAPER)

_APP_LOCAL_PREFIXES = ("app-local://", "client-storage://", "/")
_DIRECT_URL_PREFIXES = ("http://", "https://")

_SCOPED_PATTERN = re.compile(r"^([a-z]+):(.+)$", re.DOTALL)
# Two or more characters so a Windows drive letter stays a bare path.
_SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]+:")


def parse_reference(raw: str) -> ImageReference:
    """Classify a reference string.

    Pure and total: never raises, never does I/O.

    Args:
        raw: The reference exactly as stored

    Returns:
        ImageReference with its kind (and decoded parts for SCOPED)
    """
    lowered = raw.lower()

    if lowered.startswith("data:"):
        return ImageReference(raw=raw, kind=ReferenceKind.EMBEDDED)

    if lowered.startswith("file://") or lowered.startswith(_APP_LOCAL_PREFIXES):
        return ImageReference(raw=raw, kind=ReferenceKind.LOCAL_ASSET)

    if lowered.startswith(_DIRECT_URL_PREFIXES):
        return ImageReference(raw=raw, kind=ReferenceKind.DIRECT_URL)

    scoped = _parse_scoped(raw)
    if scoped is not None:
        return scoped

    if _SCHEME_PATTERN.match(raw):
        return ImageReference(raw=raw, kind=ReferenceKind.CUSTOM)

    return ImageReference(raw=raw, kind=ReferenceKind.LOCAL_ASSET)


def _parse_scoped(raw: str) -> ImageReference | None:
    match = _SCOPED_PATTERN.match(raw)
    if match is None or match.group(1) not in KNOWN_SOURCES:
        return None

    encoded_title, _, encoded_platform = match.group(2).partition(":")
    title = unquote(encoded_title)
    if not title.strip():
        return None

    return ImageReference(
        raw=raw,
        kind=ReferenceKind.SCOPED,
        source=match.group(1),
        title=title,
        platform=unquote(encoded_platform) or None,
    )


def format_reference(source: str, title: str, platform: str | None = None) -> str:
    """Build a scoped reference string for a (source, title, platform) triple.

    Raises:
        ValueError: If source is not a known source token
    """
    if source not in KNOWN_SOURCES:
        raise ValueError(f"Unknown source {source!r}, expected one of {sorted(KNOWN_SOURCES)}")
    return CacheKey(source=source, title=title, platform=platform).serialize()
