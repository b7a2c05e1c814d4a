from abc import ABC, abstractmethod
from datetime import datetime

from src.crawlers.pipeline.types import Feed


class BaseSourceAdapter(ABC):
    """One publication turned into a feed.

    Adapters are built once at startup and must not mutate themselves inside
    ``generate_feed``; every call works on its own locals so concurrent calls
    never see each other.
    """

    id: str
    title: str
    description: str
    link: str

    def new_feed(self) -> Feed:
        return Feed(
            source_id=self.id,
            title=self.title,
            description=self.description,
            link=self.link,
        )

    @abstractmethod
    async def generate_feed(self, *, now: datetime | None = None) -> Feed:
        """Build the feed. ``now`` pins the reference time used for URLs and fallbacks."""
