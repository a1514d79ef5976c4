"""
Tests for the image reference grammar.
"""

import pytest

from cover_resolver.entities import ReferenceKind
from cover_resolver.references import KNOWN_SOURCES, format_reference, parse_reference


@pytest.mark.parametrize(
    ("raw", "kind"),
    [
        ("data:image/png;base64,iVBORw0KGgo=", ReferenceKind.EMBEDDED),
        ("DATA:image/svg+xml;utf8,<svg/>", ReferenceKind.EMBEDDED),
        ("file:///home/user/covers/metroid.png", ReferenceKind.LOCAL_ASSET),
        ("app-local://covers/metroid.png", ReferenceKind.LOCAL_ASSET),
        ("client-storage://covers/metroid.png", ReferenceKind.LOCAL_ASSET),
        ("/game/default-image.png", ReferenceKind.LOCAL_ASSET),
        ("//upload.wikimedia.org/cover.jpg", ReferenceKind.LOCAL_ASSET),
        ("http://example.com/cover.jpg", ReferenceKind.DIRECT_URL),
        ("HTTPS://EXAMPLE.COM/COVER.JPG", ReferenceKind.DIRECT_URL),
        ("wikimedia:Super%20Mario%20Bros.:nes", ReferenceKind.SCOPED),
        ("tgdb:Metroid", ReferenceKind.SCOPED),
        ("auto:Metroid", ReferenceKind.SCOPED),
        ("cache:wikimedia-Metroid", ReferenceKind.SCOPED),
        ("steam:12345", ReferenceKind.CUSTOM),
        ("Wikimedia:Metroid", ReferenceKind.CUSTOM),
        ("wikimedia:", ReferenceKind.CUSTOM),
        ("covers/zelda.jpg", ReferenceKind.LOCAL_ASSET),
        ("C:\\games\\zelda.jpg", ReferenceKind.LOCAL_ASSET),
        ("c:/games/zelda.jpg", ReferenceKind.LOCAL_ASSET),
    ],
)
def test_parse_reference_kind(raw, kind):
    """Each reference lands in exactly one variant."""
    assert parse_reference(raw).kind is kind


@pytest.mark.parametrize("raw", ["", " ", ":", "::::", "%", "%zz", "a:b:c:d", "?x=1", "\x00"])
def test_parse_reference_is_total(raw):
    """Odd inputs are classified, never rejected."""
    reference = parse_reference(raw)
    assert isinstance(reference.kind, ReferenceKind)
    assert reference.raw == raw


def test_scoped_reference_parts_are_decoded():
    reference = parse_reference("screenscraper:Chrono%20Trigger:snes")

    assert reference.source == "screenscraper"
    assert reference.title == "Chrono Trigger"
    assert reference.platform == "snes"
    assert not reference.is_final


def test_scoped_reference_without_platform():
    reference = parse_reference("tgdb:Metroid")

    assert reference.title == "Metroid"
    assert reference.platform is None


def test_non_scoped_references_are_final():
    assert parse_reference("https://example.com/x.png").is_final
    assert parse_reference("/game/x.png").is_final


def test_format_reference_round_trips_titles_with_colons():
    raw = format_reference("wikimedia", "Zelda II: The Adventure of Link", "nes")

    reference = parse_reference(raw)
    assert reference.kind is ReferenceKind.SCOPED
    assert reference.source == "wikimedia"
    assert reference.title == "Zelda II: The Adventure of Link"
    assert reference.platform == "nes"


def test_format_reference_matches_key_layout():
    assert format_reference("screenscraper", "Chrono Trigger", "snes") == "screenscraper:Chrono%20Trigger:snes"
    assert format_reference("tgdb", "Metroid") == "tgdb:Metroid"


def test_format_reference_rejects_unknown_source():
    with pytest.raises(ValueError, match="Unknown source"):
        format_reference("mobygames", "Metroid")


def test_known_sources():
    assert KNOWN_SOURCES == {"wikimedia", "tgdb", "screenscraper", "auto", "cache"}
