from fastapi import Request

from src.crawlers.registry import SourceRegistry


def get_registry(request: Request) -> SourceRegistry:
    return request.app.state.registry
