"""
Shared fixtures: an in-memory Redis stand-in and scripted cover providers.
"""

import asyncio
import fnmatch

import pytest
import redis

from cover_resolver.entities import CoverMatch
from cover_resolver.errors import ProviderMiss
from cover_resolver.repositories import RedisCoverRepository
from cover_resolver.services import CoverCache


class FakeRedis:
    """Just enough of redis.Redis for RedisCoverRepository, with decode_responses=True."""

    def __init__(self, fail: bool = False) -> None:
        self.data: dict[str, str] = {}
        self.expiries: dict[str, int | None] = {}
        self.calls: list[str] = []
        self.fail = fail

    def _op(self, name: str) -> None:
        self.calls.append(name)
        if self.fail:
            raise redis.ConnectionError("Connection refused")

    def get(self, key):
        self._op("get")
        return self.data.get(key)

    def set(self, key, value, ex=None):
        self._op("set")
        self.data[key] = value
        self.expiries[key] = ex
        return True

    def delete(self, *keys):
        self._op("delete")
        count = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                count += 1
        return count

    def scan_iter(self, match=None):
        self._op("scan_iter")
        for key in list(self.data):
            if match is None or fnmatch.fnmatchcase(key, match):
                yield key

    def ping(self):
        self._op("ping")
        return True


class StubProvider:
    """Scripted CoverProvider that records every lookup."""

    def __init__(
        self,
        name: str = "wikimedia",
        url: str | None = "https://img.example/cover.jpg",
        delay: float = 0.0,
        error: Exception | None = None,
    ) -> None:
        self._name = name
        self.url = url
        self.delay = delay
        self.error = error
        self.calls: list[tuple[str, str | None]] = []
        self.closed = False

    @property
    def name(self) -> str:
        return self._name

    async def resolve(self, title, platform):
        self.calls.append((title, platform))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if self.url is None:
            raise ProviderMiss(f"No cover for {title}")
        return CoverMatch(url=self.url, source=self._name, page_title=title)

    async def close(self):
        self.closed = True


@pytest.fixture
def fake_redis():
    """Empty in-memory Redis."""
    return FakeRedis()


@pytest.fixture
def broken_redis():
    """Redis whose every command fails with a connection error."""
    return FakeRedis(fail=True)


@pytest.fixture
def store(fake_redis):
    """Durable tier backed by the in-memory Redis."""
    return RedisCoverRepository(redis_client=fake_redis)


@pytest.fixture
def cache(store):
    """Two-tier cache with no expiry and the default key prefix."""
    return CoverCache(store=store, ttl=None, key_prefix="cover_")


@pytest.fixture
def make_provider():
    """Factory for StubProvider instances."""
    return StubProvider
