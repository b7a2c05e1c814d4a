import logging
from dataclasses import dataclass, field
from datetime import datetime

logger = logging.getLogger(__name__)

DEFAULT_FEED_LANGUAGE = "zh-CN"
DEFAULT_FEED_TTL_MINUTES = 60


@dataclass(slots=True)
class PageLink:
    name: str
    url: str


@dataclass(slots=True)
class ArticleListItem:
    title: str
    link: str
    page_name: str


@dataclass(slots=True)
class FeedItem:
    title: str
    description: str
    url: str
    published_at: datetime
    guid: str | None = None
    author: str | None = None
    categories: list[str] = field(default_factory=list)
    content_html: str | None = None

    def __post_init__(self) -> None:
        if not self.guid:
            self.guid = self.url
        if self.published_at is None:
            raise ValueError(f"Feed item {self.guid!r} has no publish date")


@dataclass(slots=True)
class Feed:
    source_id: str
    title: str
    description: str
    link: str
    language: str = DEFAULT_FEED_LANGUAGE
    ttl: int = DEFAULT_FEED_TTL_MINUTES
    items: list[FeedItem] = field(default_factory=list)

    def add_item(self, item: FeedItem) -> bool:
        """Append an item unless another item already carries its guid."""
        if any(existing.guid == item.guid for existing in self.items):
            logger.warning("[%s] duplicate guid skipped: %s", self.source_id, item.guid)
            return False
        self.items.append(item)
        return True

    def extend(self, items: list[FeedItem]) -> int:
        return sum(1 for item in items if self.add_item(item))
