"""Error taxonomy for cover resolution.

None of these escape ResolverService.resolve(). Adapters convert transport
failures into ProviderMiss, and the cache swallows CacheIOError.
"""


class CoverResolverError(Exception):
    """Base class for cover resolver errors."""

    pass


class ParseAmbiguous(CoverResolverError):
    """Reference string could not be classified.

    Never raised: the reference grammar is total.
    """

    pass


class ProviderMiss(CoverResolverError):
    """A provider could not find or extract a cover image."""

    pass


class NetworkError(ProviderMiss):
    """Transport-level failure talking to an external endpoint."""

    pass


class CacheIOError(CoverResolverError):
    """The durable cache tier is unavailable."""

    pass
