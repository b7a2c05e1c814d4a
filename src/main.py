import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from src.api.routes.feeds import router as feeds_router
from src.core.config import settings
from src.core.logging import configure_logging
from src.crawlers.sources import build_source_registry

configure_logging(settings.log_level)

app = FastAPI(title=settings.app_name)
app.state.registry = build_source_registry(settings)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(feeds_router)


@app.get("/", response_class=PlainTextResponse)
def index() -> str:
    return "欢迎来到极简RSS服务演示！请访问 /rss 查看可用Feed。"


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


if __name__ == "__main__":
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
