from typing import Any, List, Literal, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class ErrorType(str, Enum):
    """Tags carried by the error envelope returned from the tool surface"""
    TWITTER_SCRAPE_FAILED = "TWITTER_SCRAPE_FAILED"
    ANALYZER_FAILED = "ANALYZER_FAILED"
    INVALID_INPUT = "INVALID_INPUT"


# Custom Exceptions
class TrendSignalError(Exception):
    """Base exception for pipeline errors"""
    error_type: ErrorType = ErrorType.INVALID_INPUT


class InvalidRequestError(TrendSignalError):
    """Raised when a required field is missing or malformed"""
    error_type = ErrorType.INVALID_INPUT


class CollectionError(TrendSignalError):
    """Raised when the post source fails mid-collection"""
    error_type = ErrorType.TWITTER_SCRAPE_FAILED


class AnalyzerError(TrendSignalError):
    """Raised when the analyzer invocation fails"""
    error_type = ErrorType.ANALYZER_FAILED


@dataclass(frozen=True)
class Post:
    """A single social-media item with usable text"""
    text: str
    author: Optional[str] = None
    timestamp: Optional[datetime] = None
    source_id: Optional[str] = None

    @classmethod
    def from_raw(cls, item: Any) -> Optional["Post"]:
        """
        Build a Post from a raw item yielded by a post source.

        Mappings are read by key, anything else by attribute. Returns None
        when the item does not expose a string ``text``.
        """
        if item is None:
            return None
        if isinstance(item, Post):
            return item

        if isinstance(item, dict):
            getter = item.get
        else:
            def getter(name, default=None):
                return getattr(item, name, default)

        text = getter("text")
        if not isinstance(text, str):
            return None

        author = getter("author")
        timestamp = getter("timestamp")
        source_id = getter("id")
        return cls(
            text=text,
            author=str(author) if author is not None else None,
            timestamp=timestamp if isinstance(timestamp, datetime) else None,
            source_id=str(source_id) if source_id is not None else None,
        )


@dataclass(frozen=True)
class CollectionResult:
    """Bounded, ordered batch of accepted posts for one query"""
    query: str
    posts: Tuple[Post, ...]
    requested: int
    skipped: int = 0

    @property
    def count(self) -> int:
        """Number of posts actually collected"""
        return len(self.posts)


class FeatureSummary(BaseModel):
    """Heuristic trend/sentiment aggregate derived from a batch of posts"""
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    query: str = Field(description="Search query the posts were collected for.")
    total_posts: int = Field(ge=0, description="Number of posts examined.")
    crypto_relevant_count: int = Field(ge=0, description="Posts matching at least one domain keyword.")
    positive_signal_count: int = Field(ge=0, description="Crypto-relevant posts with a bullish marker.")
    top_hashtags: Tuple[str, ...] = Field(
        default=(),
        max_length=5,
        description="Most frequent hashtags among crypto-relevant posts, most frequent first."
    )

    @model_validator(mode="after")
    def _check_counts(self) -> "FeatureSummary":
        if self.positive_signal_count > self.crypto_relevant_count:
            raise ValueError("positive_signal_count cannot exceed crypto_relevant_count")
        if self.crypto_relevant_count > self.total_posts:
            raise ValueError("crypto_relevant_count cannot exceed total_posts")
        return self

    def to_scraper_payload(self) -> dict:
        """Wire rendition shared by the trend tool output and the analyzer prompt."""
        return {
            "query": self.query,
            "totalTweets": self.total_posts,
            "analysis": {
                "totalCryptoTweets": self.crypto_relevant_count,
                "potentiallyPositiveTweets": self.positive_signal_count,
                "topHashtags": list(self.top_hashtags),
            },
        }


class RecommendationRequest(BaseModel):
    """Frozen input handed to the analyzer"""
    model_config = ConfigDict(frozen=True)

    feature_summary: FeatureSummary
    asset_symbol: str = Field(min_length=1)

    @field_validator("asset_symbol", mode="before")
    @classmethod
    def _strip_symbol(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value


class TradingRecommendation(BaseModel):
    symbol: str = Field(description="Asset symbol the recommendation is for.")
    action: Literal["BUY", "SELL", "HOLD"] = Field(
        description="Recommended trading action."
    )
    confidence: int = Field(
        description="Confidence score (1-10) for the recommendation.",
        default=5,
        ge=1,
        le=10
    )
    sentiment: Literal["bullish", "bearish", "neutral"] = Field(
        description="Overall sentiment read from the social signals.",
        default="neutral"
    )
    risk_level: Literal["low", "medium", "high"] = Field(
        description="Risk associated with acting on the recommendation.",
        default="medium"
    )
    key_factors: List[str] = Field(
        description="Signals that drove the recommendation.",
        default_factory=list
    )
    reasoning: str = Field(
        description="Short explanation of the recommendation.",
        default=""
    )


class ErrorEnvelope(BaseModel):
    """Uniform failure value returned by the tool surface"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    error: str
    error_type: ErrorType

    @classmethod
    def from_exception(cls, exc: BaseException, error_type: Optional[ErrorType] = None) -> "ErrorEnvelope":
        if error_type is None:
            error_type = getattr(exc, "error_type", ErrorType.INVALID_INPUT)
        return cls(error=str(exc) or "Unknown error", error_type=error_type)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


@dataclass
class ModelConfig:
    """Configuration for the LLM model"""
    model_name: str = field(default="gpt-4.1-mini")
    temperature: float = field(default=0.0, metadata={"ge": 0.0, "le": 2.0})
    max_tokens: Optional[int] = field(default=None)
    timeout: Optional[int] = field(default=30)
    max_retries: int = field(default=2)

    def __post_init__(self):
        """Validate field constraints after initialization"""
        if not 0.0 <= self.temperature <= 2.0:
            raise ValueError("temperature must be between 0.0 and 2.0")


@dataclass
class CollectionConfig:
    """Configuration for post collection"""
    default_max_posts: int = 50

    def __post_init__(self):
        if self.default_max_posts <= 0:
            raise ValueError("default_max_posts must be a positive integer")


@dataclass
class FeatureConfig:
    """Static keyword and marker sets used by the feature extractor"""
    crypto_keywords: Tuple[str, ...] = (
        'bitcoin', 'crypto', 'ethereum', 'blockchain',
        'altcoin', 'trading', 'defi', 'nft'
    )
    positive_emojis: Tuple[str, ...] = ('🚀',)
    positive_words: Tuple[str, ...] = ('bullish', 'moon')
    max_hashtags: int = 5

    def __post_init__(self):
        if not 0 < self.max_hashtags <= 5:
            raise ValueError("max_hashtags must be between 1 and 5")
        # Matching is done against lowercased text
        self.crypto_keywords = tuple(k.lower() for k in self.crypto_keywords)
        self.positive_words = tuple(w.lower() for w in self.positive_words)
