"""Platform slugs and the console names encyclopedias use for them.

Search engines like to rank a console's own article above the game we
asked for, so candidate filtering needs to recognize those titles.
"""

import re

PLATFORM_NAMES: dict[str, tuple[str, ...]] = {
    "nes": ("Nintendo Entertainment System", "Famicom"),
    "snes": ("Super Nintendo Entertainment System", "Super Famicom", "Super NES"),
    "n64": ("Nintendo 64",),
    "gamecube": ("Nintendo GameCube", "GameCube"),
    "wii": ("Wii", "Nintendo Wii"),
    "wii u": ("Wii U", "Nintendo Wii U"),
    "switch": ("Nintendo Switch",),
    "gb": ("Game Boy",),
    "gbc": ("Game Boy Color",),
    "gba": ("Game Boy Advance",),
    "ds": ("Nintendo DS",),
    "3ds": ("Nintendo 3DS",),
    "vb": ("Virtual Boy",),
    "sms": ("Master System", "Sega Master System"),
    "genesis": ("Sega Genesis", "Mega Drive", "Sega Mega Drive"),
    "segacd": ("Sega CD", "Mega-CD"),
    "32x": ("32X", "Sega 32X"),
    "saturn": ("Sega Saturn",),
    "dreamcast": ("Dreamcast", "Sega Dreamcast"),
    "gamegear": ("Game Gear", "Sega Game Gear"),
    "ps1": ("PlayStation", "PlayStation 1"),
    "ps2": ("PlayStation 2",),
    "ps3": ("PlayStation 3",),
    "ps4": ("PlayStation 4",),
    "ps5": ("PlayStation 5",),
    "psp": ("PlayStation Portable",),
    "vita": ("PlayStation Vita",),
    "atari2600": ("Atari 2600",),
    "lynx": ("Atari Lynx",),
    "jaguar": ("Atari Jaguar",),
    "pce": ("TurboGrafx-16", "PC Engine"),
    "neogeo": ("Neo Geo",),
    "arcade": ("Arcade game", "Arcade video game"),
}

_WHITESPACE = re.compile(r"\s+")


def normalize_name(name: str) -> str:
    """Lowercase and collapse whitespace for name comparisons."""
    return _WHITESPACE.sub(" ", name).strip().lower()


def _all_platform_names() -> frozenset[str]:
    names = set(PLATFORM_NAMES)
    for aliases in PLATFORM_NAMES.values():
        names.update(normalize_name(alias) for alias in aliases)
    return frozenset(names)


KNOWN_PLATFORM_NAMES = _all_platform_names()


def is_platform_name(title: str) -> bool:
    """True if ``title`` is exactly a known console name or slug."""
    return normalize_name(title) in KNOWN_PLATFORM_NAMES
