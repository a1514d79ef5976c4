"""Durable cover store protocol.

Defines the interface for the cache tier that survives process restarts.
Values are the JSON-able dicts of CacheEntryEntity.to_dict().

Implementations can include:
- Redis (default)
- Any key/value store with prefix scans (SQLite, a JSON file, etc.)
"""

from collections.abc import Iterator
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CoverStore(Protocol):
    """Protocol for durable cover storage backends.

    Implementations raise CacheIOError when the backend is unreachable;
    CoverCache catches it and degrades to the session tier.

    Example:
        ```python
        from cover_resolver.protocols import CoverStore

        store: CoverStore = RedisCoverRepository.create()
        ```
    """

    def get(self, key: str) -> dict[str, Any] | None:
        """Fetch the stored payload for a key.

        Args:
            key: Full storage key (namespace prefix included)

        Returns:
            The decoded payload, or None if absent or unreadable
        """
        ...

    def set(self, key: str, value: dict[str, Any], ttl: int | None = None) -> None:
        """Store a payload, replacing any previous value.

        Args:
            key: Full storage key
            value: JSON-serializable payload
            ttl: Optional expiry in seconds
        """
        ...

    def delete(self, key: str) -> bool:
        """Delete a key.

        Returns:
            True if something was deleted
        """
        ...

    def scan_keys(self, prefix: str) -> Iterator[str]:
        """Iterate over every stored key starting with ``prefix``."""
        ...

    def clear_all(self, prefix: str) -> int:
        """Delete every key starting with ``prefix``.

        Returns:
            Number of entries deleted
        """
        ...

    def count_all(self, prefix: str) -> int:
        """Count keys starting with ``prefix``."""
        ...

    def health_check(self) -> bool:
        """Check if the backend is reachable."""
        ...
