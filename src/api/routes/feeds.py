import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse, Response

from src.api.deps import get_registry
from src.core.config import settings
from src.crawlers.registry import SourceRegistry
from src.schemas.feed import SourceIndex
from src.services.feed_service import render_rss

logger = logging.getLogger(__name__)

router = APIRouter(tags=["feeds"])

RSS_MEDIA_TYPE = "application/xml"


@router.get("/rss", response_model=SourceIndex)
def list_sources(registry: SourceRegistry = Depends(get_registry)) -> SourceIndex:
    return SourceIndex(
        message="欢迎来到极简RSS服务演示！",
        available_sources=registry.list_ids(),
        instructions="通过访问 /rss/{sourceId} 来获取特定的Feed内容。",
    )


@router.get("/rss/{source_id}")
async def get_feed(source_id: str, registry: SourceRegistry = Depends(get_registry)) -> Response:
    source = registry.get(source_id)
    if source is None:
        available = ", ".join(registry.list_ids())
        return PlainTextResponse(
            f"错误：RSS源 '{source_id}' 未找到。可用源：{available}",
            status_code=404,
        )

    try:
        feed = await source.generate_feed()
    except Exception as exc:
        logger.exception("Feed generation failed for source %r", source_id)
        raise HTTPException(status_code=500, detail="服务器内部错误！") from exc

    xml = render_rss(feed, feed_url=settings.feed_url_for(source_id))
    return Response(content=xml, media_type=RSS_MEDIA_TYPE)
