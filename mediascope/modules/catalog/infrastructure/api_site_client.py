"""Videolist API client.

大多数资源站提供相同结构的采集接口：
    GET <api>?ac=videolist&wd=<关键词>&pg=<页码>
返回 {"list": [...], "pagecount": N}。
"""

from __future__ import annotations

import asyncio
import re
from typing import Any

import httpx
from loguru import logger

from mediascope.core.config import settings
from mediascope.core.domain.exceptions import ConfigurationError
from mediascope.core.infrastructure.logging import BusinessEvents
from mediascope.modules.catalog.domain.entities import ContentItem, SourceDescriptor
from mediascope.modules.catalog.domain.exceptions import (
    InvalidTimeoutError,
    MalformedSourceResponseError,
)
from mediascope.modules.catalog.domain.site_config import ApiSite

_YEAR_RE = re.compile(r"\d{4}")


class ApiSiteClient:
    """Search one videolist API site."""

    def __init__(
        self,
        site: ApiSite,
        *,
        timeout_sec: float | None = None,
        max_pages: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if timeout_sec is None:
            timeout_sec = settings.SOURCE_HTTP_TIMEOUT_SEC
        if max_pages is None:
            max_pages = settings.SOURCE_SEARCH_MAX_PAGES
        if timeout_sec <= 0:
            raise InvalidTimeoutError(int(timeout_sec * 1000))
        if max_pages < 1:
            raise ConfigurationError(f"max_pages must be at least 1, got {max_pages}")

        self.site = site
        self.timeout_sec = timeout_sec
        self.max_pages = max_pages
        self._transport = transport

    def as_descriptor(self) -> SourceDescriptor:
        return SourceDescriptor(key=self.site.key, name=self.site.name, query_fn=self.search)

    async def search(self, term: str) -> list[ContentItem]:
        """Search ``term``; an empty term returns the site's default listing.

        HTTP errors propagate to the caller. A payload without a result list
        is logged and treated as an empty result.
        """
        async with httpx.AsyncClient(
            timeout=self.timeout_sec,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            payload = await self._fetch_page(client, term, page=1)
            items = self._parse_or_empty(payload)

            # 空关键词时只取默认列表第一页
            page_count = self._page_count(payload) if term else 1
            extra_pages = range(2, min(page_count, self.max_pages) + 1)
            if not extra_pages:
                return items

            results = await asyncio.gather(
                *(self._fetch_page(client, term, page=page) for page in extra_pages),
                return_exceptions=True,
            )

        for page, result in zip(extra_pages, results, strict=True):
            if isinstance(result, Exception):
                logger.warning(
                    f"{self.site.name} 第 {page} 页获取失败，已跳过: {result}"
                )
                continue
            items.extend(self._parse_or_empty(result))
        return items

    async def _fetch_page(
        self, client: httpx.AsyncClient, term: str, page: int
    ) -> Any:
        params: dict[str, str | int] = {"ac": "videolist", "wd": term}
        if page > 1:
            params["pg"] = page
        response = await client.get(
            self.site.api,
            params=params,
            headers={
                "User-Agent": settings.FETCHER_USER_AGENT,
                "Accept": "application/json",
            },
        )
        response.raise_for_status()
        try:
            return response.json()
        except ValueError:
            # 非 JSON 响应同样按结构异常处理
            return None

    def _parse_or_empty(self, payload: Any) -> list[ContentItem]:
        try:
            return self._parse_payload(payload)
        except MalformedSourceResponseError as exc:
            logger.warning(f"{self.site.name} 响应结构异常: {exc}")
            BusinessEvents.source_response_malformed(
                source_key=self.site.key, detail=str(exc)
            )
            return []

    def _parse_payload(self, payload: Any) -> list[ContentItem]:
        if not isinstance(payload, dict):
            raise MalformedSourceResponseError("response payload must be an object")

        raw_list = payload.get("list")
        if not isinstance(raw_list, list):
            raise MalformedSourceResponseError("response missing list")

        items: list[ContentItem] = []
        for raw_item in raw_list:
            if not isinstance(raw_item, dict):
                continue
            item = self._parse_item(raw_item)
            if item is not None:
                items.append(item)
        return items

    def _parse_item(self, raw: dict[str, Any]) -> ContentItem | None:
        title = self._clean_title(raw.get("vod_name"))
        if not title:
            return None

        return ContentItem(
            id=str(raw.get("vod_id", "")),
            title=title,
            type_name=str(raw.get("type_name") or ""),
            poster=str(raw.get("vod_pic") or ""),
            rating=self._parse_rating(raw),
            year=self._parse_year(raw.get("vod_year")),
            source=self.site.key,
            source_name=self.site.name,
            episodes=self._parse_episodes(raw.get("vod_play_url")),
            description=self._strip_html(str(raw.get("vod_content") or "")),
            douban_id=self._parse_douban_id(raw.get("vod_douban_id")),
            class_name=str(raw.get("vod_class") or ""),
        )

    @staticmethod
    def _page_count(payload: Any) -> int:
        if not isinstance(payload, dict):
            return 1
        try:
            return max(int(payload.get("pagecount", 1)), 1)
        except (TypeError, ValueError):
            return 1

    @staticmethod
    def _parse_episodes(play_url: object) -> list[str]:
        """Pick the play group with the most m3u8 episodes.

        Format: ``第1集$url#第2集$url$$$<next group>``.
        """
        if not isinstance(play_url, str) or not play_url:
            return []

        episodes: list[str] = []
        for group in play_url.split("$$$"):
            matched: list[str] = []
            for title_url in group.split("#"):
                parts = title_url.split("$")
                if len(parts) == 2 and parts[1].endswith(".m3u8"):
                    matched.append(parts[1])
            if len(matched) > len(episodes):
                episodes = matched
        return episodes

    @staticmethod
    def _parse_year(value: object) -> str:
        match = _YEAR_RE.search(str(value or ""))
        return match.group(0) if match else "unknown"

    @staticmethod
    def _parse_rating(raw: dict[str, Any]) -> float | None:
        for key in ("vod_score", "vod_douban_score"):
            try:
                value = float(raw.get(key) or 0)
            except (TypeError, ValueError):
                continue
            if value > 0:
                return value
        return None

    @staticmethod
    def _parse_douban_id(value: object) -> int | None:
        try:
            douban_id = int(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return None
        return douban_id or None

    @staticmethod
    def _clean_title(title: object) -> str:
        if not isinstance(title, str):
            return ""
        return " ".join(title.split())

    @staticmethod
    def _strip_html(text: str) -> str:
        """移除 HTML 标签。"""
        text = re.sub(r"<[^>]+>", "", text)
        text = text.replace("&nbsp;", " ")
        text = text.replace("&amp;", "&")
        text = text.replace("&lt;", "<")
        text = text.replace("&gt;", ">")
        text = text.replace("&quot;", '"')
        text = text.replace("&#39;", "'")
        return " ".join(text.split())
