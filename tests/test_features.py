import pytest

from conftest import SCENARIO_POSTS
from trendsignals.analysis.features import TrendFeatureExtractor, extract_features
from trendsignals.analysis.state import CollectionResult, FeatureConfig, FeatureSummary, Post


def make_result(texts, query="bitcoin"):
    posts = tuple(Post(text=t) for t in texts)
    return CollectionResult(query=query, posts=posts, requested=50)


def test_reference_scenario():
    summary = extract_features(make_result([item["text"] for item in SCENARIO_POSTS]))

    assert summary.query == "bitcoin"
    assert summary.total_posts == 3
    assert summary.crypto_relevant_count == 2
    assert summary.positive_signal_count == 2
    assert summary.top_hashtags == ("#BTC", "#crypto")


def test_empty_collection_gives_zero_summary():
    summary = extract_features(make_result([]))

    assert summary.total_posts == 0
    assert summary.crypto_relevant_count == 0
    assert summary.positive_signal_count == 0
    assert summary.top_hashtags == ()


def test_keyword_match_is_case_insensitive_substring():
    extractor = TrendFeatureExtractor()

    assert extractor.is_crypto_relevant("BITCOIN ETF approved")
    assert extractor.is_crypto_relevant("NFTs are back")
    assert extractor.is_crypto_relevant("#DeFi summer")
    assert not extractor.is_crypto_relevant("Stock market opens flat")


def test_positive_signals_only_counted_among_relevant_posts():
    summary = extract_features(make_result([
        "so bullish on my garden 🚀",     # not crypto relevant
        "ethereum looks bullish",
        "Crypto winter is here",
    ]))

    assert summary.crypto_relevant_count == 2
    assert summary.positive_signal_count == 1


def test_negation_is_not_detected():
    # Keyword heuristic: "not bullish" still counts as positive
    summary = extract_features(make_result(["I am not bullish on bitcoin"]))

    assert summary.positive_signal_count == 1


def test_hashtags_are_case_sensitive_and_ranked_with_stable_ties():
    summary = extract_features(make_result([
        "crypto #alpha #BTC #btc",
        "crypto #beta #BTC",
        "crypto #gamma #delta #epsilon #zeta",
    ]))

    assert summary.top_hashtags == ("#BTC", "#alpha", "#btc", "#beta", "#gamma")
    assert len(summary.top_hashtags) == 5


def test_hashtags_from_irrelevant_posts_are_ignored():
    summary = extract_features(make_result([
        "#lunch #lunch #lunch",
        "bitcoin #BTC",
    ]))

    assert summary.top_hashtags == ("#BTC",)


def test_hashtag_tokens_stop_at_non_ascii_word_characters():
    summary = extract_features(make_result(["bitcoin #BTC🚀 #café"]))

    assert summary.top_hashtags == ("#BTC", "#caf")


def test_custom_keyword_configuration():
    config = FeatureConfig(crypto_keywords=("SOLANA",), positive_emojis=("📈",), positive_words=("pump",))
    summary = TrendFeatureExtractor(config).extract(make_result([
        "solana 📈",
        "Solana PUMP incoming",
        "bitcoin to the moon 🚀",
    ]))

    assert summary.crypto_relevant_count == 2
    assert summary.positive_signal_count == 2


def test_max_hashtags_configuration():
    config = FeatureConfig(max_hashtags=2)
    summary = TrendFeatureExtractor(config).extract(make_result(["crypto #a #b #c"]))

    assert summary.top_hashtags == ("#a", "#b")


def test_max_hashtags_cannot_exceed_five():
    with pytest.raises(ValueError):
        FeatureConfig(max_hashtags=6)


def test_extraction_is_deterministic():
    result = make_result([item["text"] for item in SCENARIO_POSTS] * 4)
    extractor = TrendFeatureExtractor()

    first = extractor.extract(result)
    second = extractor.extract(result)

    assert first == second
    assert first.model_dump_json() == second.model_dump_json()


@pytest.mark.parametrize("texts", [
    [],
    ["nothing relevant"],
    ["bitcoin", "bitcoin bullish", "moon 🚀", "trading 🚀 #x"],
    ["defi " * 3, "NFT moon", "altcoin season #alt #alt", "blockchain"],
])
def test_count_invariant_holds(texts):
    summary = extract_features(make_result(texts))

    assert 0 <= summary.positive_signal_count <= summary.crypto_relevant_count <= summary.total_posts
    assert len(summary.top_hashtags) <= 5


def test_summary_rejects_inconsistent_counts():
    with pytest.raises(ValueError):
        FeatureSummary(query="q", total_posts=1, crypto_relevant_count=2, positive_signal_count=0)
    with pytest.raises(ValueError):
        FeatureSummary(query="q", total_posts=5, crypto_relevant_count=2, positive_signal_count=3)


def test_scraper_payload_shape():
    summary = extract_features(make_result([item["text"] for item in SCENARIO_POSTS]))

    assert summary.to_scraper_payload() == {
        "query": "bitcoin",
        "totalTweets": 3,
        "analysis": {
            "totalCryptoTweets": 2,
            "potentiallyPositiveTweets": 2,
            "topHashtags": ["#BTC", "#crypto"],
        },
    }
    assert summary.model_dump(by_alias=True)["cryptoRelevantCount"] == 2
