"""Source registry backed by the site configuration file."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import httpx
from loguru import logger

from mediascope.core.config import settings
from mediascope.modules.catalog.domain.entities import SourceDescriptor
from mediascope.modules.catalog.domain.exceptions import SiteConfigError
from mediascope.modules.catalog.domain.site_config import (
    ApiSite,
    CustomCategory,
    SiteConfig,
    UserPolicy,
)
from mediascope.modules.catalog.infrastructure.api_site_client import ApiSiteClient


class FileSourceRegistry:
    """Load api sites and custom categories from a JSON file.

    配置格式：
    {
        "cache_time": 7200,
        "disable_content_filter": false,
        "api_site": {"<key>": {"api": "...", "name": "...", "disabled": false}},
        "custom_category": [{"name": "...", "type": "movie", "query": "..."}],
        "users": {"<username>": {"enabled_apis": ["<key>"]}}
    }
    """

    def __init__(
        self,
        config_path: Path | str | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config_path = Path(config_path or settings.SOURCE_CONFIG_PATH)
        self._transport = transport
        self._config: SiteConfig | None = None

    async def list_sources(self, username: str) -> list[SourceDescriptor]:
        config = self.load()
        return [
            ApiSiteClient(site, transport=self._transport).as_descriptor()
            for site in config.sites_for(username)
        ]

    async def list_custom_categories(self) -> list[CustomCategory]:
        return list(self.load().custom_categories)

    async def get_cache_time(self) -> int:
        cache_time = self.load().cache_time
        return cache_time if cache_time is not None else settings.CACHE_TIME_SEC

    async def is_content_filter_enabled(self) -> bool:
        disabled = self.load().disable_content_filter
        if disabled is None:
            disabled = settings.DISABLE_CONTENT_FILTER
        return not disabled

    def load(self) -> SiteConfig:
        """Parse the config file once and keep it for later calls."""
        if self._config is None:
            self._config = self._load_from_file()
        return self._config

    def reload(self) -> SiteConfig:
        self._config = None
        return self.load()

    def _load_from_file(self) -> SiteConfig:
        if not self.config_path.exists():
            logger.warning(
                f"Site config {self.config_path} not found, no sources available"
            )
            return SiteConfig()
        try:
            payload = json.loads(self.config_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise SiteConfigError(f"Cannot read site config: {exc}") from exc
        return self.parse_config_payload(payload)

    @staticmethod
    def parse_config_payload(payload: Any) -> SiteConfig:
        if not isinstance(payload, dict):
            raise SiteConfigError("Site config must be a JSON object")

        api_sites: list[ApiSite] = []
        raw_sites = payload.get("api_site") or {}
        if not isinstance(raw_sites, dict):
            raise SiteConfigError("api_site must be an object keyed by site key")
        for key, raw_site in raw_sites.items():
            if not isinstance(raw_site, dict):
                continue
            api = raw_site.get("api")
            if not isinstance(api, str) or not api.strip():
                logger.warning(f"Skipping api site {key}: missing api url")
                continue
            name = raw_site.get("name")
            detail = raw_site.get("detail")
            api_sites.append(
                ApiSite(
                    key=key,
                    api=api.strip(),
                    name=name.strip() if isinstance(name, str) else key,
                    detail=detail if isinstance(detail, str) else None,
                    disabled=raw_site.get("disabled") is True,
                )
            )

        custom_categories: list[CustomCategory] = []
        for raw_category in payload.get("custom_category") or []:
            if not isinstance(raw_category, dict):
                continue
            name = raw_category.get("name")
            query = raw_category.get("query")
            kind = raw_category.get("type")
            if not isinstance(name, str) or not isinstance(query, str):
                continue
            if kind not in ("movie", "tv"):
                continue
            custom_categories.append(CustomCategory(name=name, kind=kind, query=query))

        users: dict[str, UserPolicy] = {}
        raw_users = payload.get("users") or {}
        if isinstance(raw_users, dict):
            for username, raw_policy in raw_users.items():
                enabled = (
                    raw_policy.get("enabled_apis")
                    if isinstance(raw_policy, dict)
                    else None
                )
                users[username] = UserPolicy(
                    username=username,
                    enabled_apis=(
                        frozenset(str(k) for k in enabled)
                        if isinstance(enabled, list)
                        else None
                    ),
                )

        cache_time = payload.get("cache_time")
        disable_filter = payload.get("disable_content_filter")
        return SiteConfig(
            api_sites=api_sites,
            custom_categories=custom_categories,
            users=users,
            cache_time=cache_time if isinstance(cache_time, int) else None,
            disable_content_filter=(
                disable_filter if isinstance(disable_filter, bool) else None
            ),
        )
