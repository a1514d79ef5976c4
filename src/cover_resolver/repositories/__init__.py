"""Repository layer for data access.

This layer abstracts external dependencies (Redis, Wikipedia, cover
databases) behind protocol-based interfaces. This enables:
- Easy swapping of implementations (Redis → SQLite, Wikipedia → TheGamesDB, etc.)
- Unit testing with fake implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from cover_resolver.protocols import CoverProvider, CoverStore

from .redis_repository import RedisCoverRepository
from .stub_providers import DelegatingCoverProvider, ScreenScraperCoverProvider, TheGamesDBCoverProvider
from .wikipedia_provider import WikipediaCoverProvider

__all__ = [
    "CoverProvider",
    "CoverStore",
    "DelegatingCoverProvider",
    "RedisCoverRepository",
    "ScreenScraperCoverProvider",
    "TheGamesDBCoverProvider",
    "WikipediaCoverProvider",
]
