from .base import (
    END_OF_STREAM, PostSource, PostStream, IterablePostSource, PostSourceError, SourceAuthenticationError
)

__all__ = [
    "END_OF_STREAM",
    "PostSource",
    "PostStream",
    "IterablePostSource",
    "PostSourceError",
    "SourceAuthenticationError",
]
