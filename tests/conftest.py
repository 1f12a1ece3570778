"""
Shared fakes for the trendsignals test suite.

Nothing here touches the network: post sources and analyzers are replaced by
in-memory stand-ins that record how they were used.
"""
from typing import Any, List, Optional

import pytest

from trendsignals.analysis.state import RecommendationRequest, TradingRecommendation
from trendsignals.sources.base import END_OF_STREAM, PostSource, PostStream


SCENARIO_POSTS = [
    {"text": "bitcoin to the moon 🚀 #BTC #crypto", "author": "alice"},
    {"text": "just had lunch", "author": "bob"},
    {"text": "bitcoin bullish #BTC", "author": "carol"},
]


class FakeStream(PostStream):
    def __init__(self, owner: "FakePostSource"):
        self.owner = owner
        self.position = 0

    async def next_post(self) -> Any:
        if self.owner.fail_at is not None and self.position == self.owner.fail_at:
            raise self.owner.error
        if self.position >= len(self.owner.items):
            return END_OF_STREAM
        item = self.owner.items[self.position]
        self.position += 1
        self.owner.pulled += 1
        return item

    async def aclose(self) -> None:
        self.owner.closed += 1


class FakePostSource(PostSource):
    """Serves a fixed item list, optionally raising at a given pull index"""

    name = "fake"

    def __init__(self, items: List[Any], fail_at: Optional[int] = None,
                 error: Optional[Exception] = None):
        self.items = list(items)
        self.fail_at = fail_at
        self.error = error or ConnectionError("transport dropped")
        self.opened: List[tuple] = []
        self.pulled = 0
        self.closed = 0

    def open(self, query: str, limit: int) -> PostStream:
        self.opened.append((query, limit))
        return FakeStream(self)


class StubAnalyzer:
    """Returns a fixed recommendation and records every request"""

    def __init__(self, recommendation: Any = None):
        self.recommendation = recommendation or TradingRecommendation(
            symbol="BTC",
            action="HOLD",
            confidence=4,
            sentiment="bullish",
            risk_level="high",
            key_factors=["rocket emoji spam"],
            reasoning="Crowd is excited but the sample is small."
        )
        self.requests: List[RecommendationRequest] = []

    async def analyze_trading_decision(self, request: RecommendationRequest) -> Any:
        self.requests.append(request)
        return self.recommendation


class FailingAnalyzer:
    def __init__(self, error: Optional[Exception] = None):
        self.error = error or RuntimeError("model endpoint unavailable")
        self.calls = 0

    async def analyze_trading_decision(self, request: RecommendationRequest) -> Any:
        self.calls += 1
        raise self.error


@pytest.fixture
def scenario_source() -> FakePostSource:
    return FakePostSource(SCENARIO_POSTS)


@pytest.fixture
def stub_analyzer() -> StubAnalyzer:
    return StubAnalyzer()


@pytest.fixture
def failing_analyzer() -> FailingAnalyzer:
    return FailingAnalyzer()
