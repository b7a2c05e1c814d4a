import logging
import time
import uuid
from dataclasses import dataclass
from datetime import datetime

import httpx

from src.crawlers.adapters.base import BaseSourceAdapter
from src.crawlers.extractors.dates import at_beijing_time, beijing_now, parse_iso_day_at
from src.crawlers.extractors.filters import strip_full_version_marker
from src.crawlers.extractors.html import (
    absolutize_protocol_relative,
    absolutize_protocol_relative_media,
    inner_html,
    make_soup,
    strip_noise,
)
from src.crawlers.pipeline.fanout import gather_isolated
from src.crawlers.pipeline.http import build_client, fetch_html
from src.crawlers.pipeline.types import Feed, FeedItem

logger = logging.getLogger(__name__)

XWLB_ID = "xinwenlianbo"
XWLB_INDEX_URL = "https://tv.cctv.com/lm/xwlb/index.shtml"
XWLB_BROADCAST_HOUR = 19
XWLB_CATEGORIES = ("新闻联播", "CCTV", "中国新闻")

LIST_DATE_SELECTOR = "div.rilititle p"
LIST_ENTRY_SELECTOR = "#content.rililist.newsList > li"
# The first row links to the full-length broadcast, not a single story.
LIST_SKIP_LEADING = 1
ARTICLE_CONTENT_SELECTOR = "div.title_con #content"
ARTICLE_FALLBACK_PARAGRAPH_SELECTOR = "div.title_con p"
FALLBACK_PARAGRAPH_JOINER = "<br>"


@dataclass(slots=True)
class NewsListItem:
    title: str
    link: str


@dataclass(slots=True)
class NewsListing:
    published_at: datetime
    date_is_fallback: bool
    entries: list[NewsListItem]


def parse_xwlb_listing(html: str, *, fallback_date: datetime) -> NewsListing:
    soup = make_soup(html)

    published_at = None
    date_node = soup.select_one(LIST_DATE_SELECTOR)
    if date_node is not None:
        published_at = parse_iso_day_at(date_node.get_text(strip=True), hour=XWLB_BROADCAST_HOUR)
    date_is_fallback = published_at is None
    if date_is_fallback:
        logger.warning("[xwlb] could not read the list publish date, using %s", fallback_date.isoformat())
        published_at = fallback_date

    entries: list[NewsListItem] = []
    for row in soup.select(LIST_ENTRY_SELECTOR)[LIST_SKIP_LEADING:]:
        anchor = row.find("a")
        if anchor is None:
            continue
        href = (anchor.get("href") or "").strip()
        title = (anchor.get("title") or "").strip() or strip_full_version_marker(anchor.get_text(strip=True))
        if not href or not title:
            continue
        entries.append(NewsListItem(title=title, link=absolutize_protocol_relative(href)))

    return NewsListing(published_at=published_at, date_is_fallback=date_is_fallback, entries=entries)


def extract_xwlb_content(html: str, *, url: str = "") -> str | None:
    """Return the story body HTML, paragraph fragments as a fallback, else ``None``."""
    soup = make_soup(html)
    body = soup.select_one(ARTICLE_CONTENT_SELECTOR)
    if body is not None:
        strip_noise(body)
        absolutize_protocol_relative_media(body)
        return inner_html(body)

    logger.warning("[xwlb] content region %r missing on %s", ARTICLE_CONTENT_SELECTOR, url)
    paragraphs = [inner_html(node) for node in soup.select(ARTICLE_FALLBACK_PARAGRAPH_SELECTOR)]
    fallback = FALLBACK_PARAGRAPH_JOINER.join(paragraphs)
    if fallback:
        logger.warning("[xwlb] falling back to paragraph fragments for %s", url)
        return fallback
    return None


def build_error_item(*, link: str, fallback_date: datetime, message: str) -> FeedItem:
    return FeedItem(
        title=f"抓取CCTV新闻联播RSS失败 - {fallback_date.isoformat()}",
        description=f"无法获取CCTV新闻联播内容。请检查网络连接或网站结构是否改变。错误信息: {message}",
        url=link,
        guid=f"error-{time.time_ns()}-{uuid.uuid4().hex[:8]}",
        published_at=fallback_date,
    )


class XinWenLianBoSource(BaseSourceAdapter):
    """CCTV evening bulletin: one listing page, then each story page one at a time."""

    id = XWLB_ID
    title = "CCTV 新闻联播"
    description = "中央电视台《新闻联播》最新节目内容的 RSS Feed，包含全文。"
    link = XWLB_INDEX_URL

    def __init__(
        self,
        *,
        user_agent: str,
        list_timeout: float = 15.0,
        fetch_timeout: float = 10.0,
        serial: bool = True,
        max_concurrency: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.user_agent = user_agent
        self.list_timeout = list_timeout
        self.fetch_timeout = fetch_timeout
        self.serial = serial
        self.max_concurrency = max_concurrency
        self.transport = transport

    async def generate_feed(self, *, now: datetime | None = None) -> Feed:
        feed = self.new_feed()
        fallback_date = at_beijing_time(beijing_now(now), XWLB_BROADCAST_HOUR)

        try:
            async with build_client(user_agent=self.user_agent, transport=self.transport) as client:
                logger.info("[xwlb] fetching listing page: %s", self.link)
                html = await fetch_html(client, self.link, timeout=self.list_timeout, source_tag="xwlb-fetch")
                listing = parse_xwlb_listing(html, fallback_date=fallback_date)
                logger.info("[xwlb] found %d stories, fetching full text", len(listing.entries))

                if self.serial:
                    contents = [await self._fetch_content(client, entry) for entry in listing.entries]
                else:
                    contents = await gather_isolated(
                        listing.entries,
                        lambda entry: self._fetch_content(client, entry),
                        max_concurrency=self.max_concurrency,
                        label="xwlb-articles",
                    )

            # The list date is shared by every story, fallback or not.
            for entry, content in zip(listing.entries, contents):
                feed.add_item(
                    FeedItem(
                        title=entry.title,
                        description=content or entry.title,
                        url=entry.link,
                        guid=entry.link,
                        published_at=listing.published_at,
                        categories=list(XWLB_CATEGORIES),
                        content_html=content,
                    )
                )
        except Exception as exc:
            logger.error("[xwlb] feed generation failed: %s", exc)
            feed.items.clear()
            feed.add_item(build_error_item(link=self.link, fallback_date=fallback_date, message=str(exc)))

        return feed

    async def _fetch_content(self, client: httpx.AsyncClient, entry: NewsListItem) -> str | None:
        try:
            html = await fetch_html(client, entry.link, timeout=self.fetch_timeout, source_tag="xwlb-fetch")
            return extract_xwlb_content(html, url=entry.link)
        except Exception as exc:
            logger.error("[xwlb] failed to extract full text from %s: %s", entry.link, exc)
            return None
