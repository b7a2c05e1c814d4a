from datetime import datetime, timedelta, timezone

from src.crawlers.adapters.base import BaseSourceAdapter
from src.crawlers.pipeline.types import Feed, FeedItem

HARDCODED_FEED_ID = "my-hardcoded-feed"
HARDCODED_FEED_LINK = "http://example.com/hardcoded"


class HardcodedFeedSource(BaseSourceAdapter):
    """Fixed items, no network access. Used as the baseline for the adapter contract."""

    id = HARDCODED_FEED_ID
    title = "我的硬编码 RSS Feed"
    description = "这是一个完全固定，用于演示框架的RSS Feed。"
    link = HARDCODED_FEED_LINK

    async def generate_feed(self, *, now: datetime | None = None) -> Feed:
        reference = now or datetime.now(timezone.utc)
        feed = self.new_feed()
        feed.add_item(
            FeedItem(
                title="第一篇硬编码文章",
                description="这是第一篇固定内容的文章描述，内容是写死的。",
                url=f"{HARDCODED_FEED_LINK}/article1",
                guid="hardcoded-article-1",
                published_at=reference - timedelta(days=1),
                author="固定作者A",
                categories=["分类一", "演示"],
                content_html="<p>这篇硬编码文章的<b>完整内容</b>。</p><p>没有任何动态生成或解析。</p>",
            )
        )
        feed.add_item(
            FeedItem(
                title="第二篇硬编码文章",
                description="这是第二篇固定内容的文章描述。",
                url=f"{HARDCODED_FEED_LINK}/article2",
                guid="hardcoded-article-2",
                published_at=reference - timedelta(days=2),
                author="固定作者B",
                categories=["分类二"],
            )
        )
        return feed
