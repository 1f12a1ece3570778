"""
Tool entry points for the agent layer.

Both tools validate their arguments against a pydantic schema before running
and always return a JSON string: a result on success, an ErrorEnvelope on
failure. Argument names are camelCase because they are the tools' public
schema.
"""
import json
import logging
from typing import List, Optional

from langchain_core.tools import StructuredTool
from pydantic import BaseModel, Field, ValidationError

from .analysis.analyzer import TradingAnalyzer
from .analysis.collection import PostCollector
from .analysis.features import TrendFeatureExtractor
from .analysis.recommendation import RecommendationAdapter
from .analysis.state import CollectionConfig, ErrorEnvelope, ErrorType, FeatureConfig, TrendSignalError
from .sources.base import PostSource

logger = logging.getLogger(__name__)

TWITTER_TREND_TOOL_NAME = "twitter_trend_analyzer"
TRADING_ANALYZER_TOOL_NAME = "analyze_crypto_sentiment"


class TwitterTrendInput(BaseModel):
    query: str = Field(
        description="The Twitter search query to analyze (e.g., 'bitcoin', 'ethereum', 'crypto trading')"
    )
    maxTweets: Optional[int] = Field(
        default=None,
        description="Maximum number of tweets to collect (default: 50)"
    )


class CryptoSentimentInput(BaseModel):
    cryptoSymbol: str = Field(description="The cryptocurrency symbol (e.g., BTC, ETH, SOL)")
    query: str = Field(description="The Twitter search query to analyze")
    totalTweets: Optional[int] = Field(default=None, description="Total number of tweets analyzed")
    totalCryptoTweets: Optional[int] = Field(default=None, description="Number of crypto-related tweets")
    positiveCount: Optional[int] = Field(default=None, description="Number of potentially positive tweets")
    hashtags: Optional[List[str]] = Field(default=None, description="Top hashtags found in the tweets")


def _invalid_input(error: ValidationError) -> str:
    logger.error(f"Rejected tool input: {error}")
    return ErrorEnvelope(error=str(error), error_type=ErrorType.INVALID_INPUT).to_json()


def create_twitter_trend_tool(
    source: PostSource,
    collection_config: Optional[CollectionConfig] = None,
    feature_config: Optional[FeatureConfig] = None
) -> StructuredTool:
    """
    Build the ``twitter_trend_analyzer`` tool.

    Args:
        source: Post source searched on every call
        collection_config: Collection settings (default cap of 50 posts)
        feature_config: Keyword and marker sets for feature extraction

    Returns:
        StructuredTool returning the trend summary JSON or an error envelope
    """
    collector = PostCollector(source, collection_config)
    extractor = TrendFeatureExtractor(feature_config)

    async def analyze_twitter_trends(query: str, maxTweets: Optional[int] = None) -> str:
        try:
            # A zero cap falls back to the default, like an omitted one
            result = await collector.collect(query, maxTweets or None)
            summary = extractor.extract(result)
            return json.dumps(summary.to_scraper_payload(), ensure_ascii=False, separators=(",", ":"))
        except Exception as e:
            logger.error(f"{TWITTER_TREND_TOOL_NAME} failed for '{query}': {e}")
            return ErrorEnvelope.from_exception(e, ErrorType.TWITTER_SCRAPE_FAILED).to_json()

    return StructuredTool.from_function(
        coroutine=analyze_twitter_trends,
        name=TWITTER_TREND_TOOL_NAME,
        description=(
            "Scrapes Twitter for trending topics and crypto-related tweets. Use this to get real-time "
            "Twitter data and analyze crypto trends, hashtags, and sentiment patterns."
        ),
        args_schema=TwitterTrendInput,
        handle_validation_error=_invalid_input
    )


def create_trading_analyzer_tool(analyzer: TradingAnalyzer) -> StructuredTool:
    """
    Build the ``analyze_crypto_sentiment`` tool around an analyzer.

    Feature counts left out by the caller take the adapter defaults.
    """
    adapter = RecommendationAdapter(analyzer)

    async def analyze_crypto_sentiment(
        cryptoSymbol: str,
        query: str,
        totalTweets: Optional[int] = None,
        totalCryptoTweets: Optional[int] = None,
        positiveCount: Optional[int] = None,
        hashtags: Optional[List[str]] = None
    ) -> str:
        try:
            return await adapter.recommend_overrides(
                cryptoSymbol,
                query,
                total_tweets=totalTweets,
                total_crypto_tweets=totalCryptoTweets,
                positive_count=positiveCount,
                hashtags=hashtags
            )
        except TrendSignalError as e:
            logger.error(f"{TRADING_ANALYZER_TOOL_NAME} failed for {cryptoSymbol}: {e}")
            return ErrorEnvelope.from_exception(e).to_json()
        except Exception as e:
            logger.error(f"{TRADING_ANALYZER_TOOL_NAME} failed for {cryptoSymbol}: {e}")
            return ErrorEnvelope.from_exception(e, ErrorType.ANALYZER_FAILED).to_json()

    return StructuredTool.from_function(
        coroutine=analyze_crypto_sentiment,
        name=TRADING_ANALYZER_TOOL_NAME,
        description="Analyzes Twitter sentiment for a cryptocurrency and provides trading recommendations",
        args_schema=CryptoSentimentInput,
        handle_validation_error=_invalid_input
    )
