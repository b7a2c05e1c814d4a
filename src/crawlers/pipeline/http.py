import logging

import httpx

from src.crawlers.pipeline.errors import FetchError

logger = logging.getLogger(__name__)

DEFAULT_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


def build_client(
    *,
    user_agent: str,
    transport: httpx.AsyncBaseTransport | None = None,
    referer: str | None = None,
) -> httpx.AsyncClient:
    headers = {
        "User-Agent": user_agent,
        "Accept": DEFAULT_ACCEPT,
        "Accept-Language": "zh-CN,zh;q=0.9,en;q=0.8",
    }
    if referer:
        headers["Referer"] = referer
    return httpx.AsyncClient(follow_redirects=True, headers=headers, transport=transport)


async def fetch_html(
    client: httpx.AsyncClient,
    url: str,
    *,
    timeout: float,
    source_tag: str = "fetch",
) -> str:
    """Fetch one document. No retries: a failure is final for this unit of work."""
    logger.debug("[%s] GET %s timeout=%.1fs", source_tag, url, timeout)
    try:
        response = await client.get(url, timeout=timeout)
    except httpx.TimeoutException as exc:
        raise FetchError(url, f"Timed out after {timeout:.1f}s fetching {url}") from exc
    except httpx.HTTPError as exc:
        raise FetchError(url, f"Transport error fetching {url}: {exc}") from exc

    if response.status_code >= 400:
        raise FetchError(
            url,
            f"HTTP {response.status_code} fetching {url}",
            status_code=response.status_code,
        )

    logger.debug("[%s] status=%s bytes=%d url=%s", source_tag, response.status_code, len(response.text), url)
    return response.text
