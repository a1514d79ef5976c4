"""Wikipedia content-scrape cover provider.

There is no cover-art API for Wikipedia, so this provider searches for the
game's article, scrapes the image out of its infobox, and falls back to the
page-thumbnail API when the infobox has none.

Endpoints used (all unauthenticated GETs against ``w/api.php``):
- ``action=query&list=search``    full-text search
- ``action=parse&prop=text``      rendered page HTML
- ``action=query&prop=pageimages`` page thumbnail
"""

import logging
from typing import Any

import httpx

from cover_resolver.config import settings
from cover_resolver.entities import CoverMatch
from cover_resolver.errors import NetworkError, ProviderMiss
from cover_resolver.references import WIKIMEDIA
from cover_resolver.repositories.infobox import extract_image, filter_candidates, normalize_image_url

logger = logging.getLogger(__name__)


def build_search_query(title: str, platform: str | None, suffix: str | None = None) -> str:
    """Join title, platform and suffix tokens into a search string."""
    tokens = [token.strip() for token in (title, platform, suffix) if token and token.strip()]
    return " ".join(tokens)


class WikipediaCoverProvider:
    """Wikipedia implementation of CoverProvider.

    This class satisfies the CoverProvider protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        provider = WikipediaCoverProvider.create()
        match = await provider.resolve("Chrono Trigger", "snes")
        print(match.url)
        await provider.close()
        ```
    """

    def __init__(
        self,
        api_url: str | None = None,
        search_limit: int | None = None,
        search_suffix: str | None = None,
        thumbnail_size: int | None = None,
        timeout: float | None = None,
        user_agent: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the Wikipedia provider.

        Args:
            api_url: MediaWiki API endpoint. Defaults to settings.wikipedia_api_url.
            search_limit: How many search hits to consider. Defaults to settings.
            search_suffix: Extra query token(s), e.g. "video game". Defaults to settings.
            thumbnail_size: Width requested from the thumbnail API. Defaults to settings.
            timeout: Per-request timeout in seconds. Defaults to settings.http_timeout.
            user_agent: User-Agent header value. Defaults to settings.
            client: Pre-built async client (mainly for tests).
        """
        self._api_url = api_url or settings.wikipedia_api_url
        self._search_limit = search_limit or settings.wikipedia_search_limit
        self._search_suffix = (
            search_suffix if search_suffix is not None else settings.wikipedia_search_suffix
        )
        self._thumbnail_size = thumbnail_size or settings.wikipedia_thumbnail_size
        self._timeout = timeout or settings.http_timeout
        self._user_agent = user_agent or settings.http_user_agent
        self._client = client

    @classmethod
    def create(
        cls,
        api_url: str | None = None,
        timeout: float | None = None,
    ) -> "WikipediaCoverProvider":
        """Factory method to create WikipediaCoverProvider with defaults.

        Args:
            api_url: MediaWiki API endpoint. If None, uses settings.
            timeout: Per-request timeout. If None, uses settings.

        Returns:
            Configured WikipediaCoverProvider
        """
        return cls(api_url=api_url, timeout=timeout)

    @property
    def name(self) -> str:
        return WIKIMEDIA

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client.

        Returns:
            The httpx.AsyncClient instance
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                headers={"User-Agent": self._user_agent},
                follow_redirects=True,
                limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
            )
        return self._client

    async def resolve(self, title: str, platform: str | None) -> CoverMatch:
        """Find a cover image for a game on Wikipedia.

        Business logic:
        1. Search for "<title> <platform> <suffix>", keep the top hits
        2. Drop listing pages and console pages
        3. Scrape the first survivor's infobox image
        4. Fall back to the page thumbnail API

        Args:
            title: Game title
            platform: Platform slug, if known

        Returns:
            CoverMatch with the image URL and the page it came from

        Raises:
            ProviderMiss: If no image was found or the API could not be reached
        """
        try:
            return await self._resolve(title, platform)
        except NetworkError as e:
            logger.warning("Wikipedia lookup for %r failed: %s", title, e)
            raise ProviderMiss(f"Wikipedia unreachable for {title!r}: {e}") from e

    async def _resolve(self, title: str, platform: str | None) -> CoverMatch:
        if not title or not title.strip():
            raise ProviderMiss("A game title is required")

        query = build_search_query(title, platform, self._search_suffix)
        logger.info("Searching Wikipedia for %r", query)

        candidates = await self.search(query)
        survivors = filter_candidates(candidates, platform)
        if not survivors:
            raise ProviderMiss(f"No suitable Wikipedia page for {title!r} ({len(candidates)} hits)")

        page_title = survivors[0]
        logger.debug("Using Wikipedia page %r for %r", page_title, title)

        html = await self.fetch_page_html(page_title)
        url = extract_image(html) if html else None
        if url:
            logger.info("Found infobox image for %r: %s", title, url)
            return CoverMatch(url=url, source=self.name, page_title=page_title)

        url = await self.fetch_thumbnail(page_title)
        if url:
            logger.info("Found page thumbnail for %r: %s", title, url)
            return CoverMatch(url=url, source=self.name, page_title=page_title)

        raise ProviderMiss(f"No image on Wikipedia page {page_title!r}")

    async def search(self, query: str) -> list[str]:
        """Full-text search; returns page titles in rank order."""
        data = await self._get_json(
            {
                "action": "query",
                "list": "search",
                "srsearch": query,
                "srlimit": str(self._search_limit),
                "format": "json",
            }
        )
        hits = _member(_member(data, "query", dict), "search", list)
        titles = [hit["title"] for hit in hits if isinstance(hit, dict) and isinstance(hit.get("title"), str)]
        return titles[: self._search_limit]

    async def fetch_page_html(self, page_title: str) -> str | None:
        """Fetch a page's rendered HTML, or None if the API returned none."""
        data = await self._get_json(
            {
                "action": "parse",
                "page": page_title,
                "prop": "text",
                "format": "json",
            }
        )
        text = _member(data, "parse", dict).get("text")
        if isinstance(text, dict):
            text = text.get("*")
        return text if isinstance(text, str) and text else None

    async def fetch_thumbnail(self, page_title: str) -> str | None:
        """Ask the page-images API for a page's lead thumbnail."""
        data = await self._get_json(
            {
                "action": "query",
                "titles": page_title,
                "prop": "pageimages",
                "pithumbsize": str(self._thumbnail_size),
                "format": "json",
            }
        )
        pages = _member(_member(data, "query", dict), "pages", dict)
        if not pages:
            return None

        # The API keys pages by id; a single title means a single page.
        page = next(iter(pages.values()))
        source = _member(_member(page, "thumbnail", dict), "source", str)
        return normalize_image_url(source) if source else None

    async def _get_json(self, params: dict[str, str]) -> dict[str, Any]:
        """GET the API endpoint and decode a JSON object.

        Raises:
            NetworkError: On transport errors, non-2xx status or bad JSON
        """
        try:
            response = await self.client.get(self._api_url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise NetworkError(f"Wikipedia API error: {e}") from e
        except ValueError as e:
            raise NetworkError(f"Wikipedia API returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise NetworkError(f"Unexpected response format: {type(data).__name__}")
        return data

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def _member(data: Any, name: str, kind: type) -> Any:
    """``data[name]`` when ``data`` is a dict and the value is a ``kind``, else an empty ``kind``."""
    value = data.get(name) if isinstance(data, dict) else None
    return value if isinstance(value, kind) else kind()
