from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


PROJECT_ROOT = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    app_name: str = "rss-source-bridge"
    app_env: str = "dev"
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    base_url: str | None = None

    log_level: str = "INFO"

    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/91.0.4472.124 Safari/537.36"
    )
    root_fetch_timeout_seconds: float = 15.0
    fetch_timeout_seconds: float = 10.0

    rmrb_max_concurrency: int | None = None
    xwlb_serial_fetch: bool = True
    xwlb_max_concurrency: int | None = None

    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
    )

    @property
    def public_base_url(self) -> str:
        base = (self.base_url or "").strip()
        if not base:
            return f"http://localhost:{self.api_port}"
        return base.rstrip("/")

    def feed_url_for(self, source_id: str) -> str:
        return f"{self.public_base_url}/rss/{source_id}"


settings = Settings()
