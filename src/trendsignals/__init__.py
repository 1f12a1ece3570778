from .analysis import (
    PostCollector, TrendFeatureExtractor, RecommendationAdapter, TrendPipeline,
    LLMTradingAnalyzer, FeatureSummary, CollectionResult, ErrorEnvelope, ErrorType
)
from .config import PipelineConfig, PipelineConfigFactory
from .tools import create_twitter_trend_tool, create_trading_analyzer_tool

__all__ = [
    "PostCollector",
    "TrendFeatureExtractor",
    "RecommendationAdapter",
    "TrendPipeline",
    "LLMTradingAnalyzer",
    "FeatureSummary",
    "CollectionResult",
    "ErrorEnvelope",
    "ErrorType",
    "PipelineConfig",
    "PipelineConfigFactory",
    "create_twitter_trend_tool",
    "create_trading_analyzer_tool",
]
