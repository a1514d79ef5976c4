"""
Tests for the Wikipedia provider against a mocked MediaWiki API.
"""

import httpx
import pytest

from cover_resolver.errors import NetworkError, ProviderMiss
from cover_resolver.repositories import (
    ScreenScraperCoverProvider,
    TheGamesDBCoverProvider,
    WikipediaCoverProvider,
)
from cover_resolver.repositories.wikipedia_provider import build_search_query

API_URL = "https://en.wikipedia.org/w/api.php"

MARIO_PAGE = """
<div class="mw-parser-output">
<table class="infobox ib-video-game hproduct">
  <tr><th class="infobox-above">Super Mario Bros.</th></tr>
  <tr><td class="infobox-image"><img src="//upload.wikimedia.org/wikipedia/en/0/03/Super_Mario_Bros._box.png"></td></tr>
</table>
</div>
"""


def search_payload(*titles):
    return {"query": {"search": [{"ns": 0, "title": title} for title in titles]}}


class FakeWikipedia:
    """MockTransport handler serving scripted MediaWiki responses."""

    def __init__(self, titles=(), html=None, thumbnail=None):
        self.titles = list(titles)
        self.html = html
        self.thumbnail = thumbnail
        self.requests: list[httpx.Request] = []

    def actions(self):
        return [f"{r.url.params.get('action')}:{r.url.params.get('prop', 'search')}" for r in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        params = request.url.params

        if params.get("list") == "search":
            return httpx.Response(200, json=search_payload(*self.titles))
        if params.get("action") == "parse":
            if self.html is None:
                return httpx.Response(200, json={"error": {"code": "missingtitle"}})
            return httpx.Response(200, json={"parse": {"title": params["page"], "text": {"*": self.html}}})
        if params.get("prop") == "pageimages":
            page = {"pageid": 1, "title": params["titles"]}
            if self.thumbnail:
                page["thumbnail"] = {"source": self.thumbnail, "width": 500, "height": 700}
            return httpx.Response(200, json={"query": {"pages": {"1": page}}})
        return httpx.Response(400, json={"error": "unexpected request"})


def wikipedia_provider(handler) -> WikipediaCoverProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return WikipediaCoverProvider(
        api_url=API_URL,
        search_limit=3,
        search_suffix="video game",
        thumbnail_size=500,
        client=client,
    )


def test_build_search_query():
    assert build_search_query("Super Mario Bros.", "nes", "video game") == "Super Mario Bros. nes video game"
    assert build_search_query("Tetris", None, "video game") == "Tetris video game"
    assert build_search_query("Tetris", "", "") == "Tetris"


@pytest.mark.asyncio
async def test_resolve_from_infobox():
    wiki = FakeWikipedia(
        titles=["List of Nintendo Entertainment System games", "Nintendo Entertainment System", "Super Mario Bros."],
        html=MARIO_PAGE,
    )
    provider = wikipedia_provider(wiki)

    match = await provider.resolve("Super Mario Bros.", "nes")

    assert match.url == "https://upload.wikimedia.org/wikipedia/en/0/03/Super_Mario_Bros._box.png"
    assert match.source == "wikimedia"
    assert match.page_title == "Super Mario Bros."

    search, parse = wiki.requests
    assert search.url.params["srsearch"] == "Super Mario Bros. nes video game"
    assert search.url.params["srlimit"] == "3"
    assert parse.url.params["page"] == "Super Mario Bros."
    assert parse.url.params["prop"] == "text"
    await provider.close()


@pytest.mark.asyncio
async def test_resolve_falls_back_to_thumbnail():
    wiki = FakeWikipedia(
        titles=["Tetris"],
        html="<p>An article without a fact box.</p>",
        thumbnail="https://upload.wikimedia.org/thumb/tetris.jpg",
    )
    provider = wikipedia_provider(wiki)

    match = await provider.resolve("Tetris", "gb")

    assert match.url == "https://upload.wikimedia.org/thumb/tetris.jpg"
    assert wiki.requests[-1].url.params["pithumbsize"] == "500"
    assert wiki.actions() == ["query:search", "parse:text", "query:pageimages"]


@pytest.mark.asyncio
async def test_missing_page_html_uses_thumbnail():
    wiki = FakeWikipedia(titles=["Tetris"], html=None, thumbnail="//upload.wikimedia.org/thumb/tetris.jpg")
    provider = wikipedia_provider(wiki)

    match = await provider.resolve("Tetris", None)

    assert match.url == "https://upload.wikimedia.org/thumb/tetris.jpg"


@pytest.mark.asyncio
async def test_no_image_anywhere_is_a_miss():
    wiki = FakeWikipedia(titles=["Tetris"], html="<p>Nothing</p>", thumbnail=None)
    provider = wikipedia_provider(wiki)

    with pytest.raises(ProviderMiss):
        await provider.resolve("Tetris", "gb")


@pytest.mark.asyncio
async def test_filtered_out_candidates_are_a_miss():
    wiki = FakeWikipedia(titles=["List of Game Boy games", "Game Boy"], html=MARIO_PAGE)
    provider = wikipedia_provider(wiki)

    with pytest.raises(ProviderMiss, match="No suitable Wikipedia page"):
        await provider.resolve("Game Boy", "gb")

    assert len(wiki.requests) == 1


@pytest.mark.asyncio
async def test_no_search_results_is_a_miss():
    provider = wikipedia_provider(FakeWikipedia(titles=[]))

    with pytest.raises(ProviderMiss):
        await provider.resolve("Nonexistent Game", None)


@pytest.mark.asyncio
async def test_http_error_status_is_a_miss():
    provider = wikipedia_provider(lambda request: httpx.Response(503, text="Service Unavailable"))

    with pytest.raises(ProviderMiss) as exc_info:
        await provider.resolve("Metroid", "nes")

    assert isinstance(exc_info.value.__cause__, NetworkError)


@pytest.mark.asyncio
async def test_transport_error_is_a_miss():
    def handler(request):
        raise httpx.ConnectError("Connection refused", request=request)

    provider = wikipedia_provider(handler)

    with pytest.raises(ProviderMiss) as exc_info:
        await provider.resolve("Metroid", "nes")

    assert isinstance(exc_info.value.__cause__, NetworkError)


@pytest.mark.asyncio
async def test_invalid_json_is_a_miss():
    provider = wikipedia_provider(lambda request: httpx.Response(200, text="<html>not json</html>"))

    with pytest.raises(ProviderMiss):
        await provider.resolve("Metroid", "nes")


@pytest.mark.parametrize(
    "payload",
    [
        {"query": ["unexpected"]},
        {"query": {"search": "oops"}},
        {"query": {"search": [{"title": "Chrono Trigger"}]}, "parse": "oops"},
        {"query": {"search": [{"title": "Chrono Trigger"}], "pages": {"1": {"thumbnail": "x"}}}},
        {"query": {"search": [{"title": "Chrono Trigger"}], "pages": {"1": ["x"]}}, "parse": {"text": ["x"]}},
    ],
)
@pytest.mark.asyncio
async def test_unexpected_json_shapes_are_a_miss(payload):
    provider = wikipedia_provider(lambda request: httpx.Response(200, json=payload))

    with pytest.raises(ProviderMiss):
        await provider.resolve("Chrono Trigger", "snes")


@pytest.mark.asyncio
async def test_empty_title_is_a_miss():
    wiki = FakeWikipedia(titles=["Metroid"])
    provider = wikipedia_provider(wiki)

    with pytest.raises(ProviderMiss):
        await provider.resolve("  ", "nes")

    assert wiki.requests == []


@pytest.mark.asyncio
async def test_close_releases_client():
    client = httpx.AsyncClient(transport=httpx.MockTransport(FakeWikipedia()))
    provider = WikipediaCoverProvider(api_url=API_URL, client=client)

    await provider.close()

    assert client.is_closed


@pytest.mark.asyncio
async def test_stub_providers_delegate(make_provider):
    wikipedia = make_provider(name="wikimedia", url="https://img.example/chrono.jpg")

    for stub_class, name in ((TheGamesDBCoverProvider, "tgdb"), (ScreenScraperCoverProvider, "screenscraper")):
        stub = stub_class(wikipedia)
        match = await stub.resolve("Chrono Trigger", "snes")

        assert stub.name == name
        assert stub.fallback is wikipedia
        assert match.url == "https://img.example/chrono.jpg"
        assert match.source == "wikimedia"
        await stub.close()

    assert wikipedia.calls == [("Chrono Trigger", "snes"), ("Chrono Trigger", "snes")]
    assert not wikipedia.closed
