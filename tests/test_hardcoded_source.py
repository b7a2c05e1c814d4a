from datetime import timedelta

import httpx
import pytest

from src.crawlers.adapters.hardcoded import HardcodedFeedSource


@pytest.fixture
def no_network(monkeypatch):
    async def _blocked(*args, **kwargs):
        raise AssertionError("hardcoded source must not touch the network")

    monkeypatch.setattr(httpx.AsyncClient, "send", _blocked)


@pytest.mark.asyncio
async def test_generate_feed_returns_fixed_items(no_network, reference_time):
    feed = await HardcodedFeedSource().generate_feed(now=reference_time)

    assert feed.source_id == "my-hardcoded-feed"
    assert [item.guid for item in feed.items] == ["hardcoded-article-1", "hardcoded-article-2"]
    assert [item.title for item in feed.items] == ["第一篇硬编码文章", "第二篇硬编码文章"]
    assert feed.items[0].published_at == reference_time - timedelta(days=1)
    assert feed.items[1].published_at == reference_time - timedelta(days=2)
    assert feed.items[0].categories == ["分类一", "演示"]
    assert feed.items[0].content_html.startswith("<p>")
    assert feed.items[1].content_html is None


@pytest.mark.asyncio
async def test_generate_feed_is_deterministic(no_network, reference_time):
    source = HardcodedFeedSource()
    first = await source.generate_feed(now=reference_time)
    second = await source.generate_feed(now=reference_time)

    assert first.items == second.items
    assert first.items is not second.items
