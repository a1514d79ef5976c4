"""
Tests for the cover resolver API.
"""

import pytest
from fastapi.testclient import TestClient

from cover_resolver.api.app import create_app
from cover_resolver.services import ResolverService

MARIO_URL = "https://img.example/mario.jpg"


@pytest.fixture
def provider(make_provider):
    """Scripted Wikipedia stand-in."""
    return make_provider(url=MARIO_URL)


@pytest.fixture
def client(cache, provider):
    """Create a test client around an in-memory resolver."""
    resolver = ResolverService(cache=cache, providers=[provider], default_source="wikimedia", timeout=1.0)
    with TestClient(create_app(resolver=resolver)) as test_client:
        yield test_client


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Cover Resolver API"
    assert data["default_source"] == "wikimedia"
    assert data["sources"] == ["wikimedia"]


def test_health(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "cache_healthy": True}


def test_resolve_cover(client, provider):
    """First lookup hits the provider, the second the cache."""
    payload = {"title": "Super Mario Bros", "platform": "nes"}

    first = client.post("/covers/resolve", json=payload)
    second = client.post("/covers/resolve", json=payload)

    assert first.status_code == 200
    data = first.json()
    assert data["url"] == MARIO_URL
    assert data["source"] == "wikimedia"
    assert data["from_cache"] is False
    assert data["available"] is True
    assert data["provenance"] == "wikimedia"
    assert data["network_sourced"] is True

    assert second.json()["from_cache"] is True
    assert provider.calls == [("Super Mario Bros", "nes")]


def test_resolve_cover_with_local_reference(client, provider):
    response = client.post("/covers/resolve", json={"title": "Metroid", "reference": "/game/metroid.png"})

    data = response.json()
    assert data["url"] == "/game/metroid.png"
    assert data["source"] == "local"
    assert data["provenance"] == "local"
    assert data["network_sourced"] is False
    assert provider.calls == []


def test_unavailable_cover_returns_fallback(client, provider):
    provider.url = None

    response = client.post("/covers/resolve", json={"title": "Obscure Homebrew", "platform": "nes"})

    assert response.status_code == 200
    data = response.json()
    assert data["available"] is False
    assert data["url"] == "/game/default-image.png"
    assert data["provenance"] == "default"
    assert data["network_sourced"] is False
    assert data["reason"]


def test_unexpected_provider_error_is_500(client, provider):
    provider.error = RuntimeError("provider exploded")

    response = client.post("/covers/resolve", json={"title": "Metroid", "platform": "nes"})

    assert response.status_code == 500
    assert "provider exploded" in response.json()["detail"]


def test_resolve_requires_title(client):
    response = client.post("/covers/resolve", json={"platform": "nes"})
    assert response.status_code == 422


def test_provenance(client):
    response = client.get("/covers/provenance", params={"reference": "screenscraper:Chrono%20Trigger:snes"})

    assert response.status_code == 200
    assert response.json() == {
        "reference": "screenscraper:Chrono%20Trigger:snes",
        "kind": "scoped-reference",
        "provenance": "screenscraper",
        "network_sourced": True,
    }


def test_provenance_without_reference(client):
    data = client.get("/covers/provenance").json()

    assert data["kind"] is None
    assert data["provenance"] == "default"
    assert data["network_sourced"] is False


def test_cache_stats_entries_and_clear(client):
    client.post("/covers/resolve", json={"title": "Super Mario Bros", "platform": "nes"})

    stats = client.get("/cache/stats").json()
    assert stats == {"session_entries": 1, "durable_entries": 1, "key_prefix": "cover_", "ttl_seconds": None}

    entries = client.get("/cache/entries").json()
    assert entries["count"] == 1
    assert entries["entries"][0]["key"] == "wikimedia:Super%20Mario%20Bros:nes"
    assert entries["entries"][0]["url"] == MARIO_URL
    assert entries["entries"][0]["source"] == "wikimedia"

    cleared = client.delete("/cache").json()
    assert cleared["success"] is True
    assert cleared["deleted_count"] == 1

    assert client.get("/cache/stats").json()["durable_entries"] == 0
    assert client.get("/cache/entries").json()["count"] == 0
