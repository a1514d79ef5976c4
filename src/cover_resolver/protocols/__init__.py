"""Protocol interfaces for swappable implementations.

Protocols enable:
- Easy swapping of implementations (Redis → SQLite, Wikipedia → TheGamesDB, etc.)
- Unit testing with fake implementations
- Clear separation of concerns
"""

from .cover_provider import CoverProvider
from .cover_store import CoverStore

__all__ = [
    "CoverProvider",
    "CoverStore",
]
