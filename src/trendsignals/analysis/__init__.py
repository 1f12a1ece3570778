from .state import (
    Post, CollectionResult, FeatureSummary, RecommendationRequest, TradingRecommendation,
    ErrorEnvelope, ErrorType, ModelConfig, CollectionConfig, FeatureConfig,
    TrendSignalError, InvalidRequestError, CollectionError, AnalyzerError
)
from .collection import PostCollector
from .features import TrendFeatureExtractor, extract_features
from .analyzer import TradingAnalyzer, LLMTradingAnalyzer
from .recommendation import RecommendationAdapter
from .pipeline import TrendPipeline
from .prompts import analyzer_system_prompt, analyzer_content

__all__ = [
    "Post",
    "CollectionResult",
    "FeatureSummary",
    "RecommendationRequest",
    "TradingRecommendation",
    "ErrorEnvelope",
    "ErrorType",
    "ModelConfig",
    "CollectionConfig",
    "FeatureConfig",
    "TrendSignalError",
    "InvalidRequestError",
    "CollectionError",
    "AnalyzerError",
    "PostCollector",
    "TrendFeatureExtractor",
    "extract_features",
    "TradingAnalyzer",
    "LLMTradingAnalyzer",
    "RecommendationAdapter",
    "TrendPipeline",
    "analyzer_system_prompt",
    "analyzer_content",
]
