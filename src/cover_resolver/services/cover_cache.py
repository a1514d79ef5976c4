"""Two-tier cover URL cache.

Session tier: a plain dict owned by this instance, gone when the process
exits. Durable tier: any CoverStore (Redis by default), namespaced by a key
prefix. Both tiers hold the same CacheEntryEntity values.
"""

import logging
import time
from collections.abc import Callable, Iterator
from typing import Any
from urllib.parse import unquote

from cover_resolver.config import settings
from cover_resolver.entities import CacheEntryEntity, CacheKey, encode_component
from cover_resolver.errors import CacheIOError
from cover_resolver.protocols import CoverStore

logger = logging.getLogger(__name__)


class CoverCache:
    """Session + durable cache of resolved cover URLs.

    The durable tier is optional and allowed to fail: every CacheIOError is
    logged and that call carries on with the session tier only.

    Example:
        ```python
        from cover_resolver.repositories import RedisCoverRepository
        from cover_resolver.services import CoverCache

        cache = CoverCache.create(store=RedisCoverRepository.create())
        key = CacheKey("wikimedia", "Super Mario Bros.", "nes")
        cache.put(key, "https://upload.wikimedia.org/...", {"source": "wikimedia"})
        entry = cache.get(key)
        ```
    """

    def __init__(
        self,
        store: CoverStore | None = None,
        ttl: int | None = None,
        key_prefix: str | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the cover cache.

        Args:
            store: Durable tier. None means session-only.
            ttl: Entries older than this many seconds are treated as absent.
                None or 0 means entries never expire.
            key_prefix: Namespace for durable keys. Defaults to settings.
            clock: Time source, in Unix seconds.
        """
        self._store = store
        self._ttl = ttl or None
        self._prefix = key_prefix if key_prefix is not None else settings.cache_key_prefix
        self._clock = clock
        self._session: dict[str, CacheEntryEntity] = {}

    @classmethod
    def create(
        cls,
        store: CoverStore | None = None,
        ttl: int | None = None,
        key_prefix: str | None = None,
    ) -> "CoverCache":
        """Factory method to create CoverCache with defaults.

        Args:
            store: Durable tier. None means session-only.
            ttl: Expiry in seconds. If None, uses settings.
            key_prefix: Durable key namespace. If None, uses settings.

        Returns:
            Configured CoverCache
        """
        if ttl is None:
            ttl = settings.cache_ttl_seconds
        return cls(store=store, ttl=ttl, key_prefix=key_prefix)

    def durable_key(self, key: CacheKey | str) -> str:
        """Full durable key for a cache key."""
        return f"{self._prefix}{_serialize(key)}"

    def get(self, key: CacheKey | str) -> CacheEntryEntity | None:
        """Look up a cover URL.

        Business logic:
        1. Session tier
        2. Durable tier; a hit is copied into the session tier
        3. Entries older than the TTL (if any) count as misses

        Args:
            key: Cache key or its serialized form

        Returns:
            CacheEntryEntity if found, None otherwise
        """
        session_key = _serialize(key)

        entry = self._session.get(session_key)
        if entry is not None:
            if not self._is_stale(entry):
                return entry
            self._session.pop(session_key, None)

        entry = self._read_durable(self.durable_key(session_key))
        if entry is None or self._is_stale(entry):
            return None

        self._session[session_key] = entry
        return entry

    def put(
        self,
        key: CacheKey | str,
        url: str,
        metadata: dict[str, Any] | None = None,
    ) -> CacheEntryEntity:
        """Record a resolved URL in both tiers, overwriting any previous value.

        Args:
            key: Cache key or its serialized form
            url: Resolved image URL
            metadata: Optional ``title`` and ``source``

        Returns:
            The stored entry
        """
        session_key = _serialize(key)
        entry = CacheEntryEntity(url=url, timestamp=self._clock(), metadata=dict(metadata or {}))
        self._session[session_key] = entry

        if self._store is not None:
            try:
                self._store.set(self.durable_key(session_key), entry.to_dict(), ttl=self._ttl)
            except CacheIOError as e:
                logger.warning("Durable cache write failed, keeping session copy only: %s", e)
        return entry

    def scan_broad(self, substring: str, platform: str | None = None) -> CacheEntryEntity | None:
        """Find any entry whose title mentions ``substring``.

        Checks the session tier, then walks every durable key under the
        namespace (so it still works while the durable tier is down). It is
        O(n) in the size of the cache and only meant as a last resort before
        a network lookup. Only the title segment of a key is compared: it
        matches when it contains the substring case-insensitively, or
        contains its percent-encoded form. When both the entry and the
        lookup name a platform, they must agree.

        Args:
            substring: Usually the raw game title
            platform: Platform slug of the lookup, if known

        Returns:
            The first matching entry, or None
        """
        if not substring or not substring.strip():
            return None

        needles = {substring.lower(), encode_component(substring).lower()}

        for session_key in list(self._session):
            if _matches(session_key, needles, platform):
                entry = self._session[session_key]
                if not self._is_stale(entry):
                    return entry

        if self._store is None:
            return None

        try:
            for durable_key in self._store.scan_keys(self._prefix):
                if not _matches(durable_key[len(self._prefix) :], needles, platform):
                    continue
                entry = self._read_durable(durable_key)
                if entry is not None and not self._is_stale(entry):
                    logger.debug("Broad scan for %r matched %s", substring, durable_key)
                    return entry
        except CacheIOError as e:
            logger.warning("Durable cache scan failed: %s", e)
        return None

    def delete(self, key: CacheKey | str) -> bool:
        """Remove one entry from both tiers.

        Returns:
            True if either tier held the entry
        """
        session_key = _serialize(key)
        removed = self._session.pop(session_key, None) is not None

        if self._store is not None:
            try:
                removed = self._store.delete(self.durable_key(session_key)) or removed
            except CacheIOError as e:
                logger.warning("Durable cache delete failed: %s", e)
        return removed

    def clear(self) -> int:
        """Drop every entry in both tiers.

        Returns:
            Number of durable entries deleted, or the number of session
            entries when the durable tier is missing or unreachable
        """
        session_count = len(self._session)
        self._session.clear()

        if self._store is None:
            return session_count
        try:
            count = self._store.clear_all(self._prefix)
        except CacheIOError as e:
            logger.warning("Durable cache clear failed: %s", e)
            return session_count

        logger.info("Cleared %d cover cache entries", count)
        return count

    def inspect(self) -> list[dict[str, Any]]:
        """List cached entries for diagnostics, newest first.

        Reads the durable tier when it is reachable and the session tier
        otherwise.
        """
        rows = [_describe(key, entry) for key, entry in self._durable_items()]
        if not rows:
            rows = [_describe(key, entry) for key, entry in self._session.items()]
        rows.sort(key=lambda row: row["timestamp"], reverse=True)
        return rows

    def get_stats(self) -> dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dictionary with cache statistics
        """
        durable_entries: int | None = None
        if self._store is not None:
            try:
                durable_entries = self._store.count_all(self._prefix)
            except CacheIOError as e:
                logger.warning("Durable cache count failed: %s", e)

        return {
            "session_entries": len(self._session),
            "durable_entries": durable_entries,
            "key_prefix": self._prefix,
            "ttl": self._ttl,
        }

    def health_check(self) -> bool:
        """True when the durable tier is reachable (or there is none)."""
        if self._store is None:
            return True
        return self._store.health_check()

    @property
    def ttl(self) -> int | None:
        return self._ttl

    @property
    def key_prefix(self) -> str:
        return self._prefix

    @property
    def store(self) -> CoverStore | None:
        """Get the durable tier (for testing)."""
        return self._store

    def _is_stale(self, entry: CacheEntryEntity) -> bool:
        return self._ttl is not None and entry.age(self._clock()) > self._ttl

    def _read_durable(self, durable_key: str) -> CacheEntryEntity | None:
        if self._store is None:
            return None
        try:
            payload = self._store.get(durable_key)
        except CacheIOError as e:
            logger.warning("Durable cache read failed, using session tier only: %s", e)
            return None
        if payload is None:
            return None

        try:
            return CacheEntryEntity.from_dict(payload)
        except ValueError:
            logger.warning("Ignoring malformed cache entry under %s", durable_key)
            return None

    def _durable_items(self) -> Iterator[tuple[str, CacheEntryEntity]]:
        if self._store is None:
            return
        try:
            keys = list(self._store.scan_keys(self._prefix))
        except CacheIOError as e:
            logger.warning("Durable cache scan failed: %s", e)
            return
        for durable_key in keys:
            entry = self._read_durable(durable_key)
            if entry is not None:
                yield durable_key[len(self._prefix) :], entry


def _serialize(key: CacheKey | str) -> str:
    return key.serialize() if isinstance(key, CacheKey) else key


def _matches(key: str, needles: set[str], platform: str | None) -> bool:
    # Serialized keys are source:title[:platform] with encoded segments.
    _, _, rest = key.partition(":")
    title, _, entry_platform = rest.partition(":")
    if platform and entry_platform and unquote(entry_platform).lower() != platform.lower():
        return False

    decoded, encoded = unquote(title).lower(), title.lower()
    return any(needle in decoded or needle in encoded for needle in needles)


def _describe(key: str, entry: CacheEntryEntity) -> dict[str, Any]:
    return {
        "key": key,
        "url": entry.url,
        "source": entry.source,
        "title": entry.title,
        "timestamp": entry.timestamp,
    }
