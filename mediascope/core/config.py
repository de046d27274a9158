"""Application configuration."""

import secrets
import warnings
from typing import Annotated, Any, Literal, Self

from pydantic import (
    AnyUrl,
    BeforeValidator,
    HttpUrl,
    computed_field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",")]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "MediaScope"
    SERVER_PORT: int = 8000
    ROOTPATH: str = ""
    API_V1_STR: str = "/api/v1"
    SECRET_KEY: str = secrets.token_urlsafe(32)
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 8  # 8 days
    AUTH_COOKIE_NAME: str = "auth"
    FRONTEND_HOST: str = "http://localhost:3000"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"
    JWT_ALGORITHM: str = "HS256"

    BACKEND_CORS_ORIGINS: Annotated[
        list[AnyUrl] | str, BeforeValidator(parse_cors)
    ] = []
    CORS_ALLOW_METHODS: list[str] = ["GET", "OPTIONS"]
    CORS_ALLOW_HEADERS: list[str] = ["Authorization", "Content-Type"]

    @computed_field
    @property
    def all_cors_origins(self) -> list[str]:
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS] + [
            self.FRONTEND_HOST
        ]

    # Sentry
    SENTRY_DSN: HttpUrl | None = None

    # Source registry（资源站配置文件）
    SOURCE_CONFIG_PATH: str = "config.json"

    # Fan-out query
    SOURCE_TIMEOUT_MS: int = 20000  # 单个资源站整体超时
    SOURCE_HTTP_TIMEOUT_SEC: float = 8.0  # 单次 HTTP 请求超时
    SOURCE_SEARCH_MAX_PAGES: int = 5
    FETCHER_USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0 Safari/537.36"
    )

    # HTTP cache pass-through
    CACHE_TIME_SEC: int = 7200

    # Content filter（敏感分类过滤）
    DISABLE_CONTENT_FILTER: bool = False
    CONTENT_FILTER_WORDS: list[str] | None = None  # None 时使用内置词表

    # Browse client
    BROWSE_PAGE_SIZE: int = 25
    HOT_LISTING_API_URL: str = (
        "https://m.douban.cmliussss.net/rexxar/api/v2/subject/recent_hot"
    )
    CALENDAR_API_URL: str = "https://api.bgm.tv/calendar"
    CATALOG_API_URL: str = "http://localhost:8000"

    @field_validator("SOURCE_TIMEOUT_MS")
    @classmethod
    def _validate_source_timeout(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("SOURCE_TIMEOUT_MS must be a positive duration")
        return value

    @field_validator("SOURCE_SEARCH_MAX_PAGES", "BROWSE_PAGE_SIZE")
    @classmethod
    def _validate_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("value must be at least 1")
        return value

    def _check_default_secret(self, var_name: str, value: str | None) -> None:
        if value == "changethis":
            message = (
                f'The value of {var_name} is "changethis", '
                "for security, please change it, at least for deployments."
            )
            if self.ENVIRONMENT == "local":
                warnings.warn(message, stacklevel=1)
            else:
                raise ValueError(message)

    @model_validator(mode="after")
    def _enforce_non_default_secrets(self) -> Self:
        self._check_default_secret("SECRET_KEY", self.SECRET_KEY)
        return self


settings = Settings()
