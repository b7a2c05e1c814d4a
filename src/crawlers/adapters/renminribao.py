import html as html_lib
import logging
from datetime import datetime
from urllib.parse import urljoin

import httpx

from src.crawlers.adapters.base import BaseSourceAdapter
from src.crawlers.extractors.dates import beijing_now, parse_cn_date
from src.crawlers.extractors.filters import is_boilerplate_title
from src.crawlers.extractors.html import absolutize_images, inner_html, make_soup, select_text
from src.crawlers.pipeline.errors import FeedGenerationError, FetchError
from src.crawlers.pipeline.fanout import gather_isolated
from src.crawlers.pipeline.http import build_client, fetch_html
from src.crawlers.pipeline.types import ArticleListItem, Feed, FeedItem, PageLink

logger = logging.getLogger(__name__)

RMRB_ID = "renminribao"
RMRB_LAYOUT_BASE_URL = "https://paper.people.com.cn/rmrb/pc/layout"
RMRB_FEED_CATEGORY = "人民日报"
PAGE_NAME_SEPARATOR = "："

PAGE_LINK_SELECTOR = "#list li a"
ARTICLE_LINK_SELECTOR = "div.news ul.news-list li a"
ARTICLE_HEADING_SELECTOR = "div.article > h1 > p"
ARTICLE_SUBHEADING_SELECTOR = "div.article > h3 > p"
ARTICLE_DATE_SELECTOR = "p.sec span.date span.newstime"
ARTICLE_SECTION_SELECTOR = "p.sec"
ARTICLE_ATTACHMENT_SELECTOR = "div.article div.attachment"
ARTICLE_BODY_SELECTOR = "div.article div#ozoom"
ARTICLE_IMAGE_SCOPE_SELECTOR = "div.article"


def build_rmrb_root_url(day: datetime) -> str:
    return f"{RMRB_LAYOUT_BASE_URL}/{day:%Y%m}/{day:%d}/"


def parse_rmrb_page_links(html: str, *, root_url: str) -> list[PageLink]:
    soup = make_soup(html)
    links: list[PageLink] = []
    for anchor in soup.select(PAGE_LINK_SELECTOR):
        href = (anchor.get("href") or "").strip()
        name = anchor.get_text(strip=True)
        if not href or not name:
            continue
        links.append(PageLink(name=name, url=urljoin(root_url, href)))
    return links


def parse_rmrb_article_list(html: str, *, page: PageLink) -> list[ArticleListItem]:
    soup = make_soup(html)
    rows: list[ArticleListItem] = []
    for anchor in soup.select(ARTICLE_LINK_SELECTOR):
        href = (anchor.get("href") or "").strip()
        title = anchor.get_text(strip=True)
        if not href or is_boilerplate_title(title):
            continue
        rows.append(ArticleListItem(title=title, link=urljoin(page.url, href), page_name=page.name))
    return rows


def split_page_name(page_name: str) -> tuple[str, str]:
    """``"01版：要闻"`` -> ``("01版", "要闻")``."""
    prefix, _, section = page_name.partition(PAGE_NAME_SEPARATOR)
    return prefix.strip(), section.strip()


def parse_rmrb_article(html: str, *, item: ArticleListItem, fallback_date: datetime) -> FeedItem:
    soup = make_soup(html)

    heading = select_text(soup, ARTICLE_HEADING_SELECTOR) or item.title
    subheading = select_text(soup, ARTICLE_SUBHEADING_SELECTOR)
    final_title = f"{subheading} {heading}" if subheading else heading
    page_prefix, page_section = split_page_name(item.page_name)

    published_at = parse_cn_date(select_text(soup, ARTICLE_DATE_SELECTOR))
    if published_at is None:
        logger.debug("[rmrb] no parseable date for %s, using reference date", item.link)
        published_at = fallback_date

    scope = soup.select_one(ARTICLE_IMAGE_SCOPE_SELECTOR)
    if scope is not None:
        absolutize_images(scope, item.link)

    content_parts = [
        f"<h3>{html_lib.escape(subheading)}</h3>" if subheading else "",
        f"<h1>{html_lib.escape(heading)}</h1>",
        inner_html(soup.select_one(ARTICLE_SECTION_SELECTOR)),
        inner_html(soup.select_one(ARTICLE_ATTACHMENT_SELECTOR)),
        inner_html(soup.select_one(ARTICLE_BODY_SELECTOR)),
    ]
    content_html = "".join(content_parts)

    categories = [RMRB_FEED_CATEGORY]
    if page_section:
        categories.append(page_section)

    return FeedItem(
        title=f"【{page_prefix}】{final_title}",
        description=content_html,
        url=item.link,
        guid=item.link,
        published_at=published_at,
        categories=categories,
        content_html=content_html,
    )


class RenMinRiBaoSource(BaseSourceAdapter):
    """People's Daily e-paper: root page -> page list -> articles, both fan-outs in parallel."""

    id = RMRB_ID
    title = "人民日报电子版"
    description = "人民日报每日电子版，包含当日各版面文章全文。"
    link = f"{RMRB_LAYOUT_BASE_URL}/"

    def __init__(
        self,
        *,
        user_agent: str,
        root_timeout: float = 15.0,
        fetch_timeout: float = 10.0,
        max_concurrency: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.user_agent = user_agent
        self.root_timeout = root_timeout
        self.fetch_timeout = fetch_timeout
        self.max_concurrency = max_concurrency
        self.transport = transport

    async def generate_feed(self, *, now: datetime | None = None) -> Feed:
        feed = self.new_feed()
        reference = beijing_now(now)
        full_date = f"{reference:%Y-%m-%d}"
        root_url = build_rmrb_root_url(reference)

        async with build_client(user_agent=self.user_agent, transport=self.transport) as client:
            try:
                page_links = await self._discover(client, root_url)
            except FetchError as exc:
                if not exc.is_not_found:
                    raise FeedGenerationError(f"Failed to fetch RenMinRiBao main page {root_url}: {exc}") from exc
                logger.warning("[rmrb] page not found (404) for %s, not published yet", full_date)
                feed.add_item(
                    FeedItem(
                        title=f"人民日报 ({full_date}) 无更新",
                        description="今日人民日报尚未发布或页面不存在。",
                        url=root_url,
                        guid=f"rmrb-no-update-{full_date}",
                        published_at=reference,
                    )
                )
                return feed

            logger.info("[rmrb] found %d pages, fetching article lists", len(page_links))
            per_page = await gather_isolated(
                page_links,
                lambda page: self._list_articles(client, page),
                max_concurrency=self.max_concurrency,
                label="rmrb-pages",
            )
            articles = [article for page_articles in per_page for article in page_articles]

            logger.info("[rmrb] found %d articles, fetching full content", len(articles))
            items = await gather_isolated(
                articles,
                lambda article: self._fetch_article(client, article, reference),
                max_concurrency=self.max_concurrency,
                label="rmrb-articles",
            )

        feed.extend(items)
        logger.info("[rmrb] feed ready with %d items", len(feed.items))
        return feed

    async def _discover(self, client: httpx.AsyncClient, root_url: str) -> list[PageLink]:
        logger.info("[rmrb] fetching main page: %s", root_url)
        html = await fetch_html(client, root_url, timeout=self.root_timeout, source_tag="rmrb-fetch")
        try:
            page_links = parse_rmrb_page_links(html, root_url=root_url)
        except Exception as exc:
            raise FeedGenerationError(f"Failed to parse RenMinRiBao main page {root_url}: {exc}") from exc
        if not page_links:
            logger.error("[rmrb] selector %r matched no page links on %s", PAGE_LINK_SELECTOR, root_url)
            raise FeedGenerationError(
                f"No page links found on the main page. Selector {PAGE_LINK_SELECTOR!r} failed."
            )
        return page_links

    async def _list_articles(self, client: httpx.AsyncClient, page: PageLink) -> list[ArticleListItem]:
        try:
            html = await fetch_html(client, page.url, timeout=self.fetch_timeout, source_tag="rmrb-fetch")
            return parse_rmrb_article_list(html, page=page)
        except Exception as exc:
            logger.error("[rmrb] failed to fetch page %s: %s", page.name, exc)
            return []

    async def _fetch_article(
        self,
        client: httpx.AsyncClient,
        item: ArticleListItem,
        reference: datetime,
    ) -> FeedItem:
        html = await fetch_html(client, item.link, timeout=self.fetch_timeout, source_tag="rmrb-fetch")
        return parse_rmrb_article(html, item=item, fallback_date=reference)
