import logging
import os
from dataclasses import dataclass
from functools import lru_cache

import redis
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Redis (durable cache tier)
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")

    # Cache
    cache_key_prefix: str = os.getenv("COVER_CACHE_PREFIX", "cover_")
    cache_ttl: int = int(os.getenv("COVER_CACHE_TTL", "0"))  # 0 = never expire
    broad_scan: bool = os.getenv("COVER_BROAD_SCAN", "true").lower() == "true"

    # Resolution
    default_source: str = os.getenv("COVER_DEFAULT_SOURCE", "wikimedia")
    provider_timeout: float = float(os.getenv("PROVIDER_TIMEOUT", "20.0"))

    # Wikipedia
    wikipedia_api_url: str = os.getenv("WIKIPEDIA_API_URL", "https://en.wikipedia.org/w/api.php")
    wikipedia_search_limit: int = int(os.getenv("WIKIPEDIA_SEARCH_LIMIT", "3"))
    wikipedia_search_suffix: str = os.getenv("WIKIPEDIA_SEARCH_SUFFIX", "video game")
    wikipedia_thumbnail_size: int = int(os.getenv("WIKIPEDIA_THUMBNAIL_SIZE", "500"))
    http_timeout: float = float(os.getenv("HTTP_TIMEOUT", "10.0"))
    http_user_agent: str = os.getenv(
        "HTTP_USER_AGENT",
        "cover-resolver/0.1 (retro game catalog cover lookup)",
    )

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def cache_ttl_seconds(self) -> int | None:
        """TTL for cache entries, or None when entries never expire."""
        return self.cache_ttl or None

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.cache_ttl < 0:
            raise ValueError("COVER_CACHE_TTL must be >= 0 (0 disables expiry)")

        if self.default_source not in ("wikimedia", "tgdb", "screenscraper"):
            raise ValueError(
                "COVER_DEFAULT_SOURCE must be one of wikimedia, tgdb, screenscraper, "
                f"got {self.default_source!r}"
            )

        if not 1 <= self.wikipedia_search_limit <= 50:
            raise ValueError("WIKIPEDIA_SEARCH_LIMIT must be between 1 and 50")

        if self.provider_timeout <= 0 or self.http_timeout <= 0:
            raise ValueError("PROVIDER_TIMEOUT and HTTP_TIMEOUT must be positive")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client() -> redis.Redis:
    """Create a Redis client instance."""
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=True,
    )


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the service and scripts."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
