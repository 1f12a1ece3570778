import asyncio
import logging
from datetime import datetime
from typing import List, Optional

from ..sources.base import END_OF_STREAM, PostSource
from .state import CollectionConfig, CollectionError, CollectionResult, InvalidRequestError, Post

logger = logging.getLogger(__name__)


class PostCollector:
    """
    Pulls posts for a query from a post source into a bounded batch.

    Items without a string ``text`` are skipped. Any failure of the source
    aborts the collection: partial progress is discarded and a single
    CollectionError is raised.
    """

    def __init__(self, source: PostSource, config: Optional[CollectionConfig] = None):
        self.source = source
        self.config = config or CollectionConfig()

    async def collect(self, query: str, max_posts: Optional[int] = None) -> CollectionResult:
        """
        Collect up to ``max_posts`` posts matching ``query``.

        Args:
            query: Non-empty search query
            max_posts: Positive cap on accepted posts (configured default if None)

        Returns:
            CollectionResult with at most ``max_posts`` posts

        Raises:
            InvalidRequestError: If query or max_posts is invalid (source untouched)
            CollectionError: If the source fails while collecting
        """
        if not isinstance(query, str) or not query.strip():
            raise InvalidRequestError("Search query is required")

        if max_posts is None:
            max_posts = self.config.default_max_posts
        if isinstance(max_posts, bool) or not isinstance(max_posts, int) or max_posts <= 0:
            raise InvalidRequestError(f"max_posts must be a positive integer, got {max_posts!r}")

        posts: List[Post] = []
        skipped = 0
        start_time = datetime.now()

        try:
            async with self.source.open(query, max_posts) as stream:
                while len(posts) < max_posts:
                    item = await stream.next_post()
                    if item is END_OF_STREAM:
                        break

                    post = Post.from_raw(item)
                    if post is None:
                        skipped += 1
                        logger.debug(f"Skipping item without text for '{query}': {type(item).__name__}")
                        continue
                    posts.append(post)
        except asyncio.CancelledError:
            logger.info(f"Collection for '{query}' cancelled after {len(posts)} posts")
            raise
        except Exception as e:
            logger.error(f"Collection for '{query}' failed after {len(posts)} posts: {e}")
            raise CollectionError(f"Failed to collect posts for '{query}': {e}") from e

        if skipped:
            logger.warning(f"Skipped {skipped} items without text for '{query}'")

        elapsed = (datetime.now() - start_time).total_seconds()
        logger.info(
            f"Collected {len(posts)}/{max_posts} posts for '{query}' "
            f"from {self.source.name} in {elapsed:.2f}s"
        )

        return CollectionResult(
            query=query,
            posts=tuple(posts),
            requested=max_posts,
            skipped=skipped
        )
