import asyncio

import pytest

from conftest import FakePostSource, SCENARIO_POSTS
from trendsignals.analysis.collection import PostCollector
from trendsignals.analysis.state import (
    CollectionConfig, CollectionError, InvalidRequestError, Post
)
from trendsignals.sources.base import IterablePostSource


@pytest.mark.asyncio
async def test_collects_all_posts_when_source_is_smaller_than_cap(scenario_source):
    result = await PostCollector(scenario_source).collect("bitcoin", 10)

    assert result.query == "bitcoin"
    assert result.count == 3
    assert [p.text for p in result.posts] == [item["text"] for item in SCENARIO_POSTS]
    assert result.posts[0].author == "alice"
    assert scenario_source.opened == [("bitcoin", 10)]
    assert scenario_source.closed == 1


@pytest.mark.asyncio
async def test_never_returns_more_than_max_posts():
    source = FakePostSource([{"text": f"post {i}"} for i in range(100)])

    result = await PostCollector(source).collect("crypto", 7)

    assert result.count == 7
    assert result.requested == 7
    # Pulling stops as soon as the cap is reached
    assert source.pulled == 7
    assert source.closed == 1


@pytest.mark.asyncio
async def test_default_cap_is_fifty():
    source = FakePostSource([{"text": "bitcoin"}] * 80)

    result = await PostCollector(source).collect("bitcoin")

    assert result.count == 50
    assert source.opened == [("bitcoin", 50)]


@pytest.mark.asyncio
async def test_configured_default_cap_is_used():
    source = FakePostSource([{"text": "bitcoin"}] * 80)
    collector = PostCollector(source, CollectionConfig(default_max_posts=5))

    result = await collector.collect("bitcoin")

    assert result.count == 5


@pytest.mark.asyncio
async def test_items_without_string_text_are_skipped():
    class Tweet:
        def __init__(self, text):
            self.text = text

    items = [
        {"text": "bitcoin up"},
        {"text": None},
        {"content": "no text key"},
        Tweet(42),
        Tweet("ethereum attribute post"),
        "bare string",
        {"text": "last one"},
    ]
    source = FakePostSource(items)

    result = await PostCollector(source).collect("bitcoin", 10)

    assert [p.text for p in result.posts] == ["bitcoin up", "ethereum attribute post", "last one"]
    assert result.skipped == 4


@pytest.mark.asyncio
async def test_skipped_items_do_not_count_towards_cap():
    items = [{"text": None}, {"text": "a"}, {"nope": 1}, {"text": "b"}, {"text": "c"}]
    result = await PostCollector(FakePostSource(items)).collect("q", 2)

    assert [p.text for p in result.posts] == ["a", "b"]


@pytest.mark.asyncio
async def test_none_item_is_skipped_not_treated_as_end_of_stream():
    items = [{"text": "bitcoin a"}, None, {"text": "bitcoin b"}, {"text": "bitcoin c"}]

    result = await PostCollector(IterablePostSource(items)).collect("bitcoin", 10)

    assert [p.text for p in result.posts] == ["bitcoin a", "bitcoin b", "bitcoin c"]
    assert result.skipped == 1


@pytest.mark.asyncio
async def test_leading_none_items_do_not_end_collection():
    source = FakePostSource([None, None, {"text": "late post"}])

    result = await PostCollector(source).collect("bitcoin", 5)

    assert result.count == 1
    assert result.skipped == 2
    assert source.pulled == 3


@pytest.mark.asyncio
@pytest.mark.parametrize("query", ["", "   ", None])
async def test_empty_query_fails_before_source_is_opened(query):
    source = FakePostSource(SCENARIO_POSTS)

    with pytest.raises(InvalidRequestError, match="query is required"):
        await PostCollector(source).collect(query)

    assert source.opened == []


@pytest.mark.asyncio
@pytest.mark.parametrize("max_posts", [0, -3, 2.5, True, "10"])
async def test_invalid_cap_is_rejected(max_posts):
    source = FakePostSource(SCENARIO_POSTS)

    with pytest.raises(InvalidRequestError):
        await PostCollector(source).collect("bitcoin", max_posts)

    assert source.opened == []


@pytest.mark.asyncio
async def test_source_failure_discards_partial_progress():
    source = FakePostSource(SCENARIO_POSTS, fail_at=2)

    with pytest.raises(CollectionError) as exc_info:
        await PostCollector(source).collect("bitcoin", 10)

    assert isinstance(exc_info.value.__cause__, ConnectionError)
    assert "transport dropped" in str(exc_info.value)
    assert source.pulled == 2
    assert source.closed == 1


@pytest.mark.asyncio
async def test_source_failing_on_open_is_a_collection_error():
    class BrokenSource(FakePostSource):
        def open(self, query, limit):
            raise PermissionError("no session")

    with pytest.raises(CollectionError):
        await PostCollector(BrokenSource([])).collect("bitcoin")


@pytest.mark.asyncio
async def test_stream_is_released_when_collection_is_abandoned():
    gate = asyncio.Event()

    class SlowSource(FakePostSource):
        def open(self, query, limit):
            stream = super().open(query, limit)
            original = stream.next_post

            async def next_post():
                if stream.position == 1:
                    await gate.wait()
                return await original()

            stream.next_post = next_post
            return stream

    source = SlowSource([{"text": "a"}, {"text": "b"}])
    task = asyncio.create_task(PostCollector(source).collect("bitcoin", 5))
    await asyncio.sleep(0)
    await asyncio.sleep(0)

    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(task, timeout=0.05)

    assert source.closed == 1


@pytest.mark.asyncio
async def test_concurrent_collections_are_independent():
    source = IterablePostSource([{"text": "bitcoin"}, {"text": "defi"}, {"text": "nft"}])
    collector = PostCollector(source)

    first, second = await asyncio.gather(
        collector.collect("bitcoin", 2),
        collector.collect("defi", 3),
    )

    assert first.count == 2
    assert second.count == 3
    assert first.query == "bitcoin" and second.query == "defi"


def test_post_from_raw_keeps_existing_post():
    post = Post(text="hello")
    assert Post.from_raw(post) is post
    assert Post.from_raw(None) is None
