import asyncio
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

import praw
from dotenv import load_dotenv

from .base import END_OF_STREAM, PostSource, PostSourceError, PostStream, SourceAuthenticationError

logger = logging.getLogger(__name__)


# Configuration
@dataclass
class RedditConfig:
    client_id: str
    client_secret: str
    user_agent: str = "trendsignals_reddit_source_v1.0"
    subreddit: str = "all"
    rate_limit_seconds: int = 300
    timeout: int = 30


def submission_to_item(submission: Any) -> Dict[str, Any]:
    """Flatten a PRAW submission into the raw item shape the collector reads."""
    title = getattr(submission, "title", "") or ""
    selftext = getattr(submission, "selftext", "") or ""
    text = f"{title}\n{selftext}".strip()
    author = getattr(submission, "author", None)
    created_utc = getattr(submission, "created_utc", None)
    return {
        "id": getattr(submission, "id", None),
        "text": text or None,
        "author": str(author) if author else "[deleted]",
        "timestamp": datetime.fromtimestamp(created_utc, tz=timezone.utc) if created_utc else None,
    }


class _PrawStream(PostStream):
    """Pulls one submission per call through a worker thread; PRAW blocks on I/O."""

    def __init__(self, listing: Iterator[Any]):
        self._listing = listing

    async def next_post(self) -> Any:
        if self._listing is None:
            return END_OF_STREAM
        submission = await asyncio.to_thread(next, self._listing, END_OF_STREAM)
        if submission is END_OF_STREAM:
            return END_OF_STREAM
        return submission_to_item(submission)

    async def aclose(self) -> None:
        self._listing = None


class PrawPostSource(PostSource):
    """
    Reddit search backed by PRAW, read-only.

    Title and body of each submission are joined into the post text.
    """

    name = "reddit"

    def __init__(self, config: RedditConfig, client: Optional[praw.Reddit] = None):
        """
        Initialize Reddit post source

        Args:
            config: Reddit configuration object
            client: Pre-built PRAW client (optional, built from config otherwise)
        """
        self._config = config
        self._client = client
        if self._client is None:
            self._initialize_client()

    def _initialize_client(self):
        """Initialize the PRAW Reddit client"""
        try:
            self._client = praw.Reddit(
                client_id=self._config.client_id,
                client_secret=self._config.client_secret,
                user_agent=self._config.user_agent,
                ratelimit_seconds=self._config.rate_limit_seconds,
                timeout=self._config.timeout
            )
            self._client.read_only = True

            logger.info("PRAW Reddit client initialized successfully")

        except Exception as e:
            raise SourceAuthenticationError(f"Failed to initialize Reddit client: {e}")

    def open(self, query: str, limit: int) -> PostStream:
        try:
            subreddit = self._client.subreddit(self._config.subreddit)
            listing = subreddit.search(query, sort="new", limit=limit)
        except Exception as e:
            raise PostSourceError(f"Failed to search r/{self._config.subreddit} for '{query}': {e}") from e

        logger.info(f"Searching r/{self._config.subreddit} for '{query}' (limit {limit})")
        return _PrawStream(iter(listing))


# Configuration Factory
class RedditConfigFactory:
    """Factory for creating Reddit configuration objects"""

    @staticmethod
    def from_environment(env_path: Optional[Path] = None) -> RedditConfig:
        """
        Load Reddit configuration from environment variables

        Args:
            env_path: Path to .env file (optional)

        Returns:
            RedditConfig object

        Raises:
            SourceAuthenticationError: If required credentials are missing
        """
        if env_path:
            load_dotenv(dotenv_path=env_path)
        else:
            load_dotenv()

        client_id = os.getenv("REDDIT_CLIENT_ID")
        client_secret = os.getenv("REDDIT_CLIENT_SECRET")

        if not client_id or not client_secret:
            raise SourceAuthenticationError(
                "Reddit API credentials not found in environment variables. "
                "Please set REDDIT_CLIENT_ID and REDDIT_CLIENT_SECRET"
            )

        return RedditConfig(
            client_id=client_id,
            client_secret=client_secret,
            user_agent=os.getenv("REDDIT_USER_AGENT", "trendsignals_reddit_source_v1.0"),
            subreddit=os.getenv("REDDIT_SUBREDDIT", "all"),
            rate_limit_seconds=int(os.getenv("REDDIT_RATE_LIMIT_SECONDS", "300")),
            timeout=int(os.getenv("REDDIT_TIMEOUT", "30"))
        )
