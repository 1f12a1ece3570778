from typing import Any, Optional, Sequence
import json
import logging

from pydantic import ValidationError
from pydantic_core import to_jsonable_python

from .analyzer import TradingAnalyzer
from .state import AnalyzerError, FeatureSummary, InvalidRequestError, RecommendationRequest

logger = logging.getLogger(__name__)

DEFAULT_TOTAL_TWEETS = 1000
DEFAULT_TOTAL_CRYPTO_TWEETS = 800
DEFAULT_POSITIVE_COUNT = 500
DEFAULT_HASHTAGS = ("#crypto",)


class RecommendationAdapter:
    """
    Packs a feature summary and an asset symbol into a RecommendationRequest,
    hands it to the injected analyzer and serializes whatever comes back.

    Requests can be built from a computed FeatureSummary or from raw override
    counts, so the analyzer can also be driven with synthetic features.
    """

    def __init__(self, analyzer: TradingAnalyzer):
        self.analyzer = analyzer

    def request_from_summary(self, asset_symbol: str, summary: FeatureSummary) -> RecommendationRequest:
        if not isinstance(summary, FeatureSummary):
            raise InvalidRequestError(f"Expected a FeatureSummary, got {type(summary).__name__}")
        return self._build_request(asset_symbol, summary)

    def request_from_overrides(
        self,
        asset_symbol: str,
        query: str,
        total_tweets: Optional[int] = None,
        total_crypto_tweets: Optional[int] = None,
        positive_count: Optional[int] = None,
        hashtags: Optional[Sequence[str]] = None
    ) -> RecommendationRequest:
        """
        Build a request from individual feature counts.

        Omitted values fall back to 1000 tweets, 800 crypto tweets,
        500 positive tweets and ``["#crypto"]``.
        """
        self.check_query(query)
        fields = {
            "query": query,
            "total_posts": DEFAULT_TOTAL_TWEETS if total_tweets is None else total_tweets,
            "crypto_relevant_count": (
                DEFAULT_TOTAL_CRYPTO_TWEETS if total_crypto_tweets is None else total_crypto_tweets
            ),
            "positive_signal_count": DEFAULT_POSITIVE_COUNT if positive_count is None else positive_count,
            "top_hashtags": tuple(DEFAULT_HASHTAGS if hashtags is None else hashtags),
        }
        try:
            summary = FeatureSummary(**fields)
        except ValidationError as e:
            raise InvalidRequestError(f"Invalid feature overrides: {e}") from e
        return self._build_request(asset_symbol, summary)

    @staticmethod
    def check_symbol(asset_symbol: str) -> None:
        if not isinstance(asset_symbol, str) or not asset_symbol.strip():
            raise InvalidRequestError("Asset symbol is required")

    @staticmethod
    def check_query(query: str) -> None:
        if not isinstance(query, str) or not query.strip():
            raise InvalidRequestError("Search query is required")

    def _build_request(self, asset_symbol: str, summary: FeatureSummary) -> RecommendationRequest:
        self.check_symbol(asset_symbol)
        self.check_query(summary.query)
        try:
            return RecommendationRequest(feature_summary=summary, asset_symbol=asset_symbol)
        except ValidationError as e:
            raise InvalidRequestError(f"Invalid recommendation request: {e}") from e

    async def recommend(self, request: RecommendationRequest) -> Any:
        """
        Invoke the analyzer exactly once.

        Raises:
            AnalyzerError: Wrapping whatever the analyzer raised
        """
        logger.info(
            f"Requesting recommendation for {request.asset_symbol} "
            f"({request.feature_summary.total_posts} posts for '{request.feature_summary.query}')"
        )
        try:
            return await self.analyzer.analyze_trading_decision(request)
        except Exception as e:
            raise AnalyzerError(f"Analyzer failed for {request.asset_symbol}: {e}") from e

    @staticmethod
    def serialize(recommendation: Any) -> str:
        """Encode an analyzer result as indented JSON without looking inside it."""
        return json.dumps(
            to_jsonable_python(recommendation, by_alias=True, fallback=str),
            indent=2,
            ensure_ascii=False
        )

    async def recommend_summary(self, asset_symbol: str, summary: FeatureSummary) -> str:
        request = self.request_from_summary(asset_symbol, summary)
        return self.serialize(await self.recommend(request))

    async def recommend_overrides(self, asset_symbol: str, query: str, **overrides: Any) -> str:
        request = self.request_from_overrides(asset_symbol, query, **overrides)
        return self.serialize(await self.recommend(request))
