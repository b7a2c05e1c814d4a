import asyncio
from datetime import datetime

import pytest

from src.crawlers.extractors.dates import BEIJING_TIMEZONE, at_beijing_time, parse_cn_date, parse_iso_day_at
from src.crawlers.extractors.filters import is_boilerplate_title, strip_full_version_marker
from src.crawlers.extractors.html import absolutize_images, make_soup
from src.crawlers.pipeline.fanout import gather_isolated
from src.crawlers.pipeline.types import Feed, FeedItem


@pytest.mark.asyncio
async def test_gather_isolated_drops_failures_and_keeps_order():
    finished: list[int] = []

    async def worker(value: int) -> int:
        await asyncio.sleep(0.001 * (5 - value))
        if value == 2:
            raise RuntimeError("unit failed")
        finished.append(value)
        return value * 10

    results = await gather_isolated([0, 1, 2, 3, 4], worker, label="test")

    assert results == [0, 10, 30, 40]
    assert sorted(finished) == [0, 1, 3, 4]


@pytest.mark.asyncio
async def test_gather_isolated_respects_max_concurrency():
    in_flight = 0
    peak = 0

    async def worker(value: int) -> int:
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.005)
        in_flight -= 1
        if value == 0:
            raise ValueError("first unit fails")
        return value

    results = await gather_isolated(list(range(6)), worker, max_concurrency=2)

    assert results == [1, 2, 3, 4, 5]
    assert peak == 2


@pytest.mark.asyncio
async def test_gather_isolated_empty_input():
    async def worker(value: int) -> int:
        return value

    assert await gather_isolated([], worker) == []


def test_feed_item_guid_defaults_to_url():
    item = FeedItem(
        title="t",
        description="d",
        url="https://example.com/a",
        published_at=datetime(2025, 1, 1, tzinfo=BEIJING_TIMEZONE),
    )
    assert item.guid == "https://example.com/a"
    assert item.categories == []


def test_feed_item_requires_publish_date():
    with pytest.raises(ValueError):
        FeedItem(title="t", description="d", url="https://example.com/a", published_at=None)


def test_feed_rejects_duplicate_guid():
    feed = Feed(source_id="s", title="T", description="D", link="https://example.com")
    day = datetime(2025, 1, 1, tzinfo=BEIJING_TIMEZONE)

    assert feed.add_item(FeedItem(title="first", description="", url="https://example.com/a", published_at=day))
    assert not feed.add_item(FeedItem(title="second", description="", url="https://example.com/a", published_at=day))
    assert [item.title for item in feed.items] == ["first"]


def test_parse_cn_date():
    assert parse_cn_date("2025年10月22日") == datetime(2025, 10, 22, tzinfo=BEIJING_TIMEZONE)
    assert parse_cn_date(" 2025年 1月 5日 ") == datetime(2025, 1, 5, tzinfo=BEIJING_TIMEZONE)
    assert parse_cn_date("2025年13月40日") is None
    assert parse_cn_date("") is None
    assert parse_cn_date(None) is None


def test_parse_iso_day_at_fixed_hour():
    assert parse_iso_day_at("2025-10-22 星期三", hour=19) == datetime(2025, 10, 22, 19, tzinfo=BEIJING_TIMEZONE)
    assert parse_iso_day_at("星期三", hour=19) is None
    assert parse_iso_day_at("   ", hour=19) is None


def test_at_beijing_time_uses_beijing_calendar_day():
    # 20:00 UTC on the 21st is already the 22nd in Beijing.
    utc_evening = datetime.fromisoformat("2025-10-21T20:00:00+00:00")
    assert at_beijing_time(utc_evening, 19) == datetime(2025, 10, 22, 19, tzinfo=BEIJING_TIMEZONE)


def test_boilerplate_filter():
    assert is_boilerplate_title("本版责编：李四")
    assert is_boilerplate_title("   ")
    assert not is_boilerplate_title("坚持高质量发展")
    assert strip_full_version_marker("[视频]故事完整版 ") == "[视频]故事"


def test_absolutize_images_resolves_against_base():
    soup = make_soup('<div><img src="../img/a.jpg"><img src="https://x.com/b.jpg"><img src="data:abc"></div>')

    rewritten = absolutize_images(soup, "https://paper.people.com.cn/rmrb/pc/content/202510/22/c.html")

    sources = [img["src"] for img in soup.find_all("img")]
    assert rewritten == 1
    assert sources == [
        "https://paper.people.com.cn/rmrb/pc/content/202510/img/a.jpg",
        "https://x.com/b.jpg",
        "data:abc",
    ]
