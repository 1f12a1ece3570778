import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, AsyncIterator, Dict, Optional

from dotenv import load_dotenv
from twscrape import API

from .base import END_OF_STREAM, PostSource, PostStream, SourceAuthenticationError

logger = logging.getLogger(__name__)


@dataclass
class TwitterConfig:
    accounts_db: str = "accounts.db"


class TwitterConfigFactory:
    """Factory for creating Twitter configuration objects"""

    @staticmethod
    def from_environment(env_path: Optional[Path] = None) -> TwitterConfig:
        """
        Load Twitter configuration from environment variables

        Args:
            env_path: Path to .env file (optional)

        Returns:
            TwitterConfig object
        """
        if env_path:
            load_dotenv(dotenv_path=env_path)
        else:
            load_dotenv()

        return TwitterConfig(accounts_db=os.getenv("TWSCRAPE_DB", "accounts.db"))


def tweet_to_item(tweet: Any) -> Dict[str, Any]:
    """Flatten a twscrape Tweet into the raw item shape the collector reads."""
    user = getattr(tweet, "user", None)
    return {
        "id": getattr(tweet, "id", None),
        "text": getattr(tweet, "rawContent", None),
        "author": getattr(user, "username", None) if user is not None else None,
        "timestamp": getattr(tweet, "date", None),
    }


class _TwscrapeStream(PostStream):
    def __init__(self, tweets: AsyncIterator[Any]):
        self._tweets = tweets

    async def next_post(self) -> Any:
        try:
            tweet = await self._tweets.__anext__()
        except StopAsyncIteration:
            return END_OF_STREAM
        return tweet_to_item(tweet)

    async def aclose(self) -> None:
        aclose = getattr(self._tweets, "aclose", None)
        if aclose is not None:
            await aclose()


class TwscrapePostSource(PostSource):
    """
    Twitter search backed by twscrape.

    Accounts are managed by twscrape itself (``twscrape add_accounts`` /
    ``twscrape login_accounts``); this source only reads from its pool.
    """

    name = "twitter"

    def __init__(self, api: Optional[API] = None, config: Optional[TwitterConfig] = None):
        self._config = config or TwitterConfig()
        if api is None:
            try:
                api = API(self._config.accounts_db)
            except Exception as e:
                raise SourceAuthenticationError(f"Failed to initialize twscrape API: {e}") from e
        self._api = api

    def open(self, query: str, limit: int) -> PostStream:
        logger.info(f"Searching Twitter for '{query}' (limit {limit})")
        return _TwscrapeStream(self._api.search(query, limit=limit))
