import logging

import httpx

from src.core.config import Settings
from src.crawlers.adapters.hardcoded import HardcodedFeedSource
from src.crawlers.adapters.renminribao import RenMinRiBaoSource
from src.crawlers.adapters.xinwenlianbo import XinWenLianBoSource
from src.crawlers.registry import SourceRegistry

logger = logging.getLogger(__name__)


def build_source_registry(
    settings: Settings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> SourceRegistry:
    """Register every shipped source, then freeze the registry for serving."""
    registry = SourceRegistry()
    registry.register(HardcodedFeedSource())
    registry.register(
        XinWenLianBoSource(
            user_agent=settings.user_agent,
            list_timeout=settings.root_fetch_timeout_seconds,
            fetch_timeout=settings.fetch_timeout_seconds,
            serial=settings.xwlb_serial_fetch,
            max_concurrency=settings.xwlb_max_concurrency,
            transport=transport,
        )
    )
    registry.register(
        RenMinRiBaoSource(
            user_agent=settings.user_agent,
            root_timeout=settings.root_fetch_timeout_seconds,
            fetch_timeout=settings.fetch_timeout_seconds,
            max_concurrency=settings.rmrb_max_concurrency,
            transport=transport,
        )
    )
    logger.info("All sources registered: %s", ", ".join(registry.list_ids()))
    return registry.freeze()
