"""Request DTOs for API endpoints."""

from pydantic import BaseModel, Field


class ResolveCoverRequest(BaseModel):
    """Request DTO for resolving a cover.

    The handler will convert this to a GameIdentity for the service layer.
    """

    title: str = Field(..., description="Game title as stored in the catalog", min_length=1)
    platform: str | None = Field(None, description="Platform slug, e.g. 'snes'")
    reference: str | None = Field(
        None,
        description="Stored image reference (URL, local path, data URI or 'source:title[:platform]')",
    )
    preferred_source: str | None = Field(
        None,
        description="Provider to ask first: wikimedia, tgdb or screenscraper",
    )
