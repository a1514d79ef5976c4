"""Redis implementation of CoverStore.

Each cover is a plain Redis string holding the JSON payload
``{url, timestamp, title?, source?}`` under ``cover_<source>:<title>[:<platform>]``.
"""

import json
import logging
from collections.abc import Iterator
from typing import Any

import redis

from cover_resolver.config import get_redis_client
from cover_resolver.errors import CacheIOError

logger = logging.getLogger(__name__)


class RedisCoverRepository:
    """Redis implementation of the durable cover tier.

    This class satisfies the CoverStore protocol through structural
    typing - no explicit inheritance needed.

    Every redis.RedisError is re-raised as CacheIOError so callers only
    have to know about one failure type.
    """

    def __init__(self, redis_client: redis.Redis | None = None) -> None:
        """Initialize the Redis cover repository.

        Args:
            redis_client: Redis client instance. If None, creates default.
        """
        self._client = redis_client or get_redis_client()

    @classmethod
    def create(cls, redis_client: redis.Redis | None = None) -> "RedisCoverRepository":
        """Factory method to create RedisCoverRepository with defaults.

        Args:
            redis_client: Redis client. If None, uses settings.

        Returns:
            Configured RedisCoverRepository
        """
        return cls(redis_client=redis_client)

    def get(self, key: str) -> dict[str, Any] | None:
        """Fetch and decode the payload stored under ``key``."""
        try:
            raw = self._client.get(key)
        except redis.RedisError as e:
            raise CacheIOError(f"Redis get failed for {key}: {e}") from e

        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="replace")

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable cache payload under %s", key)
            return None
        return payload if isinstance(payload, dict) else None

    def set(self, key: str, value: dict[str, Any], ttl: int | None = None) -> None:
        """Store ``value`` as JSON, with an optional expiry in seconds."""
        try:
            self._client.set(key, json.dumps(value), ex=ttl)
        except redis.RedisError as e:
            raise CacheIOError(f"Redis set failed for {key}: {e}") from e

    def delete(self, key: str) -> bool:
        try:
            result: int = self._client.delete(key)  # type: ignore[assignment]
        except redis.RedisError as e:
            raise CacheIOError(f"Redis delete failed for {key}: {e}") from e
        return result > 0

    def scan_keys(self, prefix: str) -> Iterator[str]:
        """Iterate over keys starting with ``prefix``.

        Uses SCAN, so it is safe on large keyspaces but still O(n).
        """
        try:
            for key in self._client.scan_iter(match=f"{_escape_glob(prefix)}*"):
                yield key.decode("utf-8") if isinstance(key, bytes) else key
        except redis.RedisError as e:
            raise CacheIOError(f"Redis scan failed for {prefix}*: {e}") from e

    def clear_all(self, prefix: str) -> int:
        """Delete all keys under ``prefix``.

        Returns:
            Number of entries deleted
        """
        count = 0
        for key in list(self.scan_keys(prefix)):
            if self.delete(key):
                count += 1
        return count

    def count_all(self, prefix: str) -> int:
        count = 0
        for _ in self.scan_keys(prefix):
            count += 1
        return count

    def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client


def _escape_glob(value: str) -> str:
    """Escape Redis glob metacharacters in a literal prefix."""
    for char in ("\\", "*", "?", "[", "]"):
        value = value.replace(char, f"\\{char}")
    return value
