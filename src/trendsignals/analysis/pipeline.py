from typing import TYPE_CHECKING, Optional
import logging

from ..sources.base import PostSource
from .analyzer import LLMTradingAnalyzer, TradingAnalyzer
from .collection import PostCollector
from .features import TrendFeatureExtractor
from .recommendation import RecommendationAdapter
from .state import CollectionConfig, FeatureConfig, FeatureSummary

if TYPE_CHECKING:
    from ..config import PipelineConfig

logger = logging.getLogger(__name__)


class TrendPipeline:
    """Chains collection, feature extraction and recommendation for one query"""

    def __init__(
        self,
        source: PostSource,
        analyzer: TradingAnalyzer,
        collection_config: Optional[CollectionConfig] = None,
        feature_config: Optional[FeatureConfig] = None
    ):
        self.collector = PostCollector(source, collection_config)
        self.extractor = TrendFeatureExtractor(feature_config)
        self.adapter = RecommendationAdapter(analyzer)

    @classmethod
    def from_config(
        cls,
        source: PostSource,
        config: "PipelineConfig",
        analyzer: Optional[TradingAnalyzer] = None
    ) -> "TrendPipeline":
        """
        Build a pipeline from a PipelineConfig.

        An LLMTradingAnalyzer is created from ``config.model`` unless an
        analyzer is passed in.
        """
        if analyzer is None:
            analyzer = LLMTradingAnalyzer(config.model)
        return cls(
            source,
            analyzer,
            collection_config=config.collection,
            feature_config=config.features
        )

    async def analyze_trends(self, query: str, max_posts: Optional[int] = None) -> FeatureSummary:
        result = await self.collector.collect(query, max_posts)
        return self.extractor.extract(result)

    async def run(self, query: str, asset_symbol: str, max_posts: Optional[int] = None) -> str:
        """
        Collect posts for ``query`` and return the serialized recommendation
        for ``asset_symbol``. Errors from any stage propagate unchanged.
        """
        # Symbol is checked before any post is pulled
        self.adapter.check_symbol(asset_symbol)

        summary = await self.analyze_trends(query, max_posts)
        logger.info(
            f"Pipeline '{query}' -> {asset_symbol}: {summary.crypto_relevant_count}/"
            f"{summary.total_posts} relevant posts, top hashtags {list(summary.top_hashtags)}"
        )
        return await self.adapter.recommend_summary(asset_symbol, summary)
