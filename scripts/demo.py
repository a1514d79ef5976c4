#!/usr/bin/env python3
"""
Demo script for the cover resolver.

Resolves a handful of retro games against Wikipedia, shows the second
lookup coming from cache, and classifies a few stored references.
"""

import asyncio
import time

from cover_resolver.config import configure_logging, settings
from cover_resolver.entities import GameIdentity, ResolutionResult
from cover_resolver.provenance import classify_provenance, looks_network_sourced
from cover_resolver.references import format_reference, parse_reference
from cover_resolver.repositories import RedisCoverRepository
from cover_resolver.services import CoverCache, ResolverService


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def demo_references() -> None:
    """Show how stored references are classified."""
    print_section("Reference Grammar & Provenance")

    references = [
        "https://upload.wikimedia.org/wikipedia/en/3/32/Super_Mario_Bros_box.jpg",
        "/game/chrono-trigger.png",
        "data:image/png;base64,iVBORw0KGgo=",
        format_reference("screenscraper", "Chrono Trigger", "snes"),
        "cache:wikimedia-Metroid",
        "steam:12345",
        "covers/zelda.jpg",
    ]

    print(f"\n{'Reference':<48} {'Kind':<18} {'Badge':<14} {'Network'}")
    print("-" * 90)
    for reference in references:
        kind = parse_reference(reference).kind.value
        badge = classify_provenance(reference).value
        network = "yes" if looks_network_sourced(reference) else "no"
        print(f"{reference[:46]:<48} {kind:<18} {badge:<14} {network}")


async def demo_resolution(resolver: ResolverService) -> None:
    """Resolve covers twice to show the cache at work."""
    print_section("Cover Resolution")

    games = [
        GameIdentity("Super Mario Bros.", "nes"),
        GameIdentity("Chrono Trigger", "snes", preferred_source="tgdb"),
        GameIdentity("Sonic the Hedgehog", "genesis", reference="screenscraper:Sonic%20the%20Hedgehog:genesis"),
        GameIdentity("Tetris", "gb"),
    ]

    for attempt in ("first", "second"):
        print(f"\n🔍 {attempt.capitalize()} pass:")
        for game in games:
            start = time.time()
            result = await resolver.resolve(game)
            duration = (time.time() - start) * 1000

            print(f"\n  {game.title} ({game.platform})")
            if isinstance(result, ResolutionResult):
                origin = "CACHE HIT" if result.from_cache else "fetched"
                print(f"  ✓ {origin} from {result.source} in {duration:.0f}ms")
                print(f"  URL: {result.url}")
            else:
                print(f"  ✗ Unavailable: {result.reason}")


async def main() -> None:
    """Run all demos."""
    configure_logging("WARNING")

    print("\n🚀 Cover Resolver Demo")
    print("=" * 70)
    print(f"Wikipedia API: {settings.wikipedia_api_url}")
    print(f"Redis URL: {settings.redis_url}")

    demo_references()

    repository = RedisCoverRepository.create()
    if not repository.health_check():
        print("\n⚠️  Redis is not reachable, continuing with the session cache only.")
        print("   Start it with: docker compose up -d")

    cache = CoverCache.create(store=repository)
    resolver = ResolverService.create(cache=cache)
    try:
        await demo_resolution(resolver)

        print_section("Cache Contents")
        for row in cache.inspect():
            print(f"  {row['key']:<50} {row['source']}")

        print("\n" + "=" * 70)
        print("✅ Demo completed successfully!")
        print("=" * 70)
    finally:
        await resolver.close()


if __name__ == "__main__":
    asyncio.run(main())
