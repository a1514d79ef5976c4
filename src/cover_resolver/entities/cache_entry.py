"""Cache entry domain entity."""

import time
from dataclasses import dataclass, field
from typing import Any

# Anything above this is a JavaScript-style millisecond timestamp.
_MILLISECOND_THRESHOLD = 1e11


@dataclass(frozen=True)
class CacheEntryEntity:
    """Domain entity for a cached cover URL.

    This is the value held by both cache tiers. It never carries image data,
    only the URL.

    Attributes:
        url: The resolved image URL
        timestamp: When the entry was written (Unix seconds)
        metadata: Optional ``title`` (page the image came from) and ``source``
    """

    url: str
    timestamp: float
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def source(self) -> str | None:
        return self.metadata.get("source")

    @property
    def title(self) -> str | None:
        return self.metadata.get("title")

    def age(self, now: float | None = None) -> float:
        """Seconds since this entry was written."""
        return (now if now is not None else time.time()) - self.timestamp

    def to_dict(self) -> dict[str, Any]:
        """Flatten into the persisted JSON layout."""
        data: dict[str, Any] = {"url": self.url, "timestamp": self.timestamp}
        for name in ("title", "source"):
            if self.metadata.get(name):
                data[name] = self.metadata[name]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CacheEntryEntity":
        """Build an entry from the persisted JSON layout.

        Raises:
            ValueError: If the payload has no usable url
        """
        url = data.get("url")
        if not isinstance(url, str) or not url:
            raise ValueError("cache payload has no url")

        try:
            timestamp = float(data.get("timestamp") or 0)
        except (TypeError, ValueError):
            timestamp = 0.0
        if timestamp > _MILLISECOND_THRESHOLD:
            timestamp /= 1000

        metadata = {name: data[name] for name in ("title", "source") if data.get(name)}
        return cls(url=url, timestamp=timestamp, metadata=metadata)
