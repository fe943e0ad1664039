import secrets
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import AnyUrl, BeforeValidator, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",")]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_ignore_empty=True, extra="ignore"
    )

    PROJECT_NAME: str = "Rickshaw Signage"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    SECRET_KEY: str = secrets.token_urlsafe(32)
    # 60 minutes * 24 hours * 8 days = 8 days
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 8

    BACKEND_CORS_ORIGINS: Annotated[
        list[AnyUrl] | str, BeforeValidator(parse_cors)
    ] = []
    SENTRY_DSN: str | None = None

    SQLALCHEMY_DATABASE_URI: str = "sqlite:///./signage.db"

    # Object storage for ad media
    MEDIA_ROOT: Path = Path("media")
    MEDIA_URL_PREFIX: str = "/media"
    MAX_UPLOAD_BYTES: int = 500 * 1024 * 1024  # 500MB max

    # Top-headlines feed
    NEWS_API_KEY: str | None = None
    NEWS_API_URL: str = "https://newsapi.org/v2/top-headlines"
    NEWS_COUNTRY: str = "us"
    NEWS_CATEGORY: str = "health"
    MAX_NEWS_ROWS: int = 100
    NEWS_PAGE_SIZE: int = 20

    FIRST_SUPERUSER: str = "admin@example.com"
    FIRST_SUPERUSER_PASSWORD: str = "changethis"

    RATE_LIMITING_ENABLED: bool = False
    RATE_LIMITING_WHITELIST: list[str] = []

    @computed_field  # type: ignore[prop-decorator]
    @property
    def news_enabled(self) -> bool:
        return bool(self.NEWS_API_KEY)


settings = Settings()  # type: ignore
