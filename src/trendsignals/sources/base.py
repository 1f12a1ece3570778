from abc import ABC, abstractmethod
from typing import Any, Iterable, Iterator
import logging

logger = logging.getLogger(__name__)

# Returned by PostStream.next_post once the source is exhausted
END_OF_STREAM = object()


# Custom Exceptions
class PostSourceError(Exception):
    """Base exception for post source errors"""
    pass


class SourceAuthenticationError(PostSourceError):
    """Raised when a source cannot be configured or authenticated"""
    pass


class PostStream(ABC):
    """
    Explicit pull stream over the posts matching one query.

    ``next_post`` returns the next raw post-like item, or END_OF_STREAM
    once the source is exhausted. It may raise on transport failure. Streams are
    async context managers and are closed on every exit path.
    """

    @abstractmethod
    async def next_post(self) -> Any:
        """Fetch the next raw item, END_OF_STREAM at the end of the stream"""
        pass

    async def aclose(self) -> None:
        """Release whatever the stream holds"""
        return None

    async def __aenter__(self) -> "PostStream":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


class PostSource(ABC):
    """Abstract interface for anything that can search posts by query"""

    name: str = "source"

    @abstractmethod
    def open(self, query: str, limit: int) -> PostStream:
        """
        Open a stream of posts for a query.

        Args:
            query: Search query string
            limit: Upper bound on the number of items the caller will pull

        Returns:
            A fresh PostStream owned by the caller
        """
        pass


class _IteratorStream(PostStream):
    def __init__(self, iterator: Iterator[Any]):
        self._iterator = iterator
        self._closed = False

    async def next_post(self) -> Any:
        if self._closed:
            return END_OF_STREAM
        return next(self._iterator, END_OF_STREAM)

    async def aclose(self) -> None:
        self._closed = True


class IterablePostSource(PostSource):
    """
    In-memory source over a fixed set of items.

    Useful for feeding synthetic posts through the pipeline. Every item is
    offered regardless of the query.
    """

    name = "memory"

    def __init__(self, items: Iterable[Any]):
        self._items = list(items)

    def open(self, query: str, limit: int) -> PostStream:
        logger.debug(f"Opening in-memory stream for '{query}' over {len(self._items)} items")
        return _IteratorStream(iter(self._items))
