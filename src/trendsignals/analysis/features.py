from collections import Counter
from typing import Iterable, List, Optional
import logging
import re

from .state import CollectionResult, FeatureConfig, FeatureSummary

logger = logging.getLogger(__name__)

# ASCII word characters only, hashtags are counted case-sensitively
HASHTAG_PATTERN = re.compile(r"#\w+", re.ASCII)


class TrendFeatureExtractor:
    """
    Derives heuristic trend and sentiment counts from a batch of posts.

    This is a keyword scan, not NLP: negations and sarcasm are not detected.
    Extraction is pure and deterministic for a given config.
    """

    def __init__(self, config: Optional[FeatureConfig] = None):
        self.config = config or FeatureConfig()

    def extract(self, result: CollectionResult) -> FeatureSummary:
        """
        Build a FeatureSummary for a collection result.

        Args:
            result: Posts collected for a query

        Returns:
            FeatureSummary; an empty collection gives zero counts
        """
        relevant = [post for post in result.posts if self.is_crypto_relevant(post.text)]
        positive_count = sum(1 for post in relevant if self.is_positive_signal(post.text))
        hashtags = self.top_hashtags(post.text for post in relevant)

        summary = FeatureSummary(
            query=result.query,
            total_posts=len(result.posts),
            crypto_relevant_count=len(relevant),
            positive_signal_count=positive_count,
            top_hashtags=tuple(hashtags)
        )

        logger.debug(
            f"Features for '{result.query}': {summary.total_posts} posts, "
            f"{summary.crypto_relevant_count} relevant, {summary.positive_signal_count} positive"
        )
        return summary

    def is_crypto_relevant(self, text: str) -> bool:
        lowered = text.lower()
        return any(keyword in lowered for keyword in self.config.crypto_keywords)

    def is_positive_signal(self, text: str) -> bool:
        if any(emoji in text for emoji in self.config.positive_emojis):
            return True
        lowered = text.lower()
        return any(word in lowered for word in self.config.positive_words)

    def top_hashtags(self, texts: Iterable[str]) -> List[str]:
        """Most frequent hashtags, ties kept in first-seen order."""
        counts = Counter()
        for text in texts:
            counts.update(HASHTAG_PATTERN.findall(text))
        # most_common sorts stably, so equal counts keep insertion order
        return [tag for tag, _ in counts.most_common(self.config.max_hashtags)]


def extract_features(result: CollectionResult, config: Optional[FeatureConfig] = None) -> FeatureSummary:
    """Convenience wrapper around TrendFeatureExtractor.extract."""
    return TrendFeatureExtractor(config).extract(result)
