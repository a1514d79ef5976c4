"""Fact-box ("infobox") extraction from rendered encyclopedia pages.

Page HTML comes from a third party and is treated as untrusted, possibly
malformed text, so it is parsed with BeautifulSoup rather than matched
with regular expressions.
"""

import logging
from collections.abc import Iterable

from bs4 import BeautifulSoup, Tag

from cover_resolver.platforms import is_platform_name, normalize_name

logger = logging.getLogger(__name__)

# Most specific first. A table matches when its class attribute contains
# "infobox" and every extra marker.
INFOBOX_MATCHERS: tuple[tuple[str, ...], ...] = (
    ("infobox", "video-game"),
    ("infobox", "vg"),
    ("infobox", "vevent"),
    ("infobox", "game"),
    ("infobox", "software"),
    ("infobox",),
)

LISTING_PREFIX = "list of"


def filter_candidates(titles: Iterable[str], platform: str | None = None) -> list[str]:
    """Drop search hits that cannot be a game's own page.

    Removes listing pages ("List of ...") and pages whose title is exactly
    a console name, which search engines tend to rank highly when the
    platform is part of the query.

    Args:
        titles: Candidate page titles in search-rank order
        platform: Requested platform slug; also rejected verbatim even when
            it is not a known console

    Returns:
        Surviving titles, order preserved
    """
    requested = normalize_name(platform) if platform else None
    survivors = []
    for title in titles:
        if not title or not title.strip():
            continue
        normalized = normalize_name(title)
        if normalized.startswith(LISTING_PREFIX):
            logger.debug("Dropping listing page candidate %r", title)
            continue
        if is_platform_name(title) or normalized == requested:
            logger.debug("Dropping console page candidate %r", title)
            continue
        survivors.append(title)
    return survivors


def normalize_image_url(src: str) -> str:
    """Turn protocol-relative ``//host/path`` into ``https://host/path``."""
    src = src.strip()
    if src.startswith("//"):
        return f"https:{src}"
    return src


def find_infobox(html: str) -> Tag | None:
    """Locate the page's fact box.

    Matchers are tried in priority order over every table in the document;
    the first table satisfying the highest-priority matcher wins.
    """
    if not html:
        return None

    soup = BeautifulSoup(html, "html.parser")
    tables = [(table, _class_string(table)) for table in soup.find_all("table")]

    for markers in INFOBOX_MATCHERS:
        for table, classes in tables:
            if all(marker in classes for marker in markers):
                return table
    return None


def extract_image(html: str) -> str | None:
    """Extract the primary image URL from a page's fact box.

    Row one of a fact box is its heading; row two conventionally holds the
    cover art, so an image there wins over anything further down. When row
    two has none, the first image anywhere in the box is used.

    Args:
        html: Rendered page HTML

    Returns:
        Absolute image URL, or None if the page has no usable fact-box image
    """
    infobox = find_infobox(html)
    if infobox is None:
        logger.debug("No infobox found in page")
        return None

    rows = infobox.find_all("tr")
    if len(rows) >= 2:
        src = _first_image_src(rows[1])
        if src:
            return normalize_image_url(src)

    src = _first_image_src(infobox)
    if src:
        return normalize_image_url(src)

    logger.debug("Infobox has no image")
    return None


def _class_string(tag: Tag) -> str:
    classes = tag.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    return " ".join(classes).lower()


def _first_image_src(scope: Tag) -> str | None:
    for img in scope.find_all("img"):
        src = img.get("src")
        if isinstance(src, str) and src.strip():
            return src
    return None
