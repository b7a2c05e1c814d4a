from datetime import datetime

import httpx
import pytest

from src.crawlers.extractors.dates import BEIJING_TIMEZONE

TEST_USER_AGENT = "rss-source-bridge-tests/1.0"


def build_transport(routes: dict[str, object], calls: list[str] | None = None) -> httpx.MockTransport:
    """Serve canned responses by exact URL.

    A route value is ``(status, body)``, an exception instance to raise, or a
    callable taking the request and returning either of those. Unknown URLs 404.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if calls is not None:
            calls.append(url)
        route = routes.get(url)
        if callable(route):
            route = route(request)
        if route is None:
            return httpx.Response(404, text="not found")
        if isinstance(route, Exception):
            raise route
        status, body = route
        return httpx.Response(status, text=body, headers={"Content-Type": "text/html; charset=utf-8"})

    return httpx.MockTransport(handler)


@pytest.fixture
def reference_time() -> datetime:
    return datetime(2025, 10, 22, 8, 30, tzinfo=BEIJING_TIMEZONE)


@pytest.fixture
def user_agent() -> str:
    return TEST_USER_AGENT


@pytest.fixture
def make_transport():
    return build_transport
