"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.
"""

from .cache_entry import CacheEntryEntity
from .cache_key import CacheKey, encode_component
from .image_reference import ImageReference, ReferenceKind
from .resolution import CoverMatch, GameIdentity, Resolution, ResolutionResult, Unavailable

__all__ = [
    "CacheEntryEntity",
    "CacheKey",
    "CoverMatch",
    "GameIdentity",
    "ImageReference",
    "ReferenceKind",
    "Resolution",
    "ResolutionResult",
    "Unavailable",
    "encode_component",
]
