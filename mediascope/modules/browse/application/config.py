"""Explicit configuration for the browse client."""

from typing import Any, Self

from pydantic import BaseModel, Field

from mediascope.core.config import Settings
from mediascope.modules.catalog.domain.site_config import CustomCategory


class BrowseConfig(BaseModel):
    """Passed into the browse client at construction; every field has a default."""

    catalog_api_url: str = "http://localhost:8000"
    api_prefix: str = "/api/v1"
    access_token: str | None = None
    hot_listing_api_url: str = (
        "https://m.douban.cmliussss.net/rexxar/api/v2/subject/recent_hot"
    )
    calendar_api_url: str = "https://api.bgm.tv/calendar"
    page_size: int = Field(default=25, ge=1)
    timeout_sec: float = Field(default=10.0, gt=0)
    user_agent: str = "MediaScope/0.1"
    custom_categories: list[CustomCategory] = Field(default_factory=list)

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: Any) -> Self:
        values: dict[str, Any] = {
            "catalog_api_url": settings.CATALOG_API_URL,
            "api_prefix": settings.API_V1_STR,
            "hot_listing_api_url": settings.HOT_LISTING_API_URL,
            "calendar_api_url": settings.CALENDAR_API_URL,
            "page_size": settings.BROWSE_PAGE_SIZE,
            "timeout_sec": settings.SOURCE_HTTP_TIMEOUT_SEC,
            "user_agent": settings.FETCHER_USER_AGENT,
        }
        values.update(overrides)
        return cls(**values)

    def find_custom_category(self, name: str) -> CustomCategory | None:
        return next((c for c in self.custom_categories if c.name == name), None)
