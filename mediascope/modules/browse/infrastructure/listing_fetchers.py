"""Listing fetchers used by the browse client.

- CatalogQueryListingFetcher: 自定义分类，走本服务的聚合查询接口
- HotListingFetcher: 电影 / 电视剧热门列表
- CalendarListingFetcher: 按星期预取的放送表，只有一页
- RoutingListingFetcher: 按快照选择上面三者之一
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Mapping, Sequence
from typing import Any

import httpx
from loguru import logger

from mediascope.modules.browse.application.config import BrowseConfig
from mediascope.modules.browse.domain.ports import CalendarProvider, ListingFetcher
from mediascope.modules.browse.domain.snapshot import BrowseKind, QuerySnapshot
from mediascope.modules.catalog.domain.entities import ContentItem
from mediascope.modules.catalog.domain.site_config import CustomCategory

_YEAR_RE = re.compile(r"\d{4}")


def _parse_score(value: object) -> float | None:
    try:
        score = float(value or 0)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return score if score > 0 else None


def _parse_year(value: object) -> str:
    match = _YEAR_RE.search(str(value or ""))
    return match.group(0) if match else "unknown"


class CatalogQueryListingFetcher:
    """Custom categories resolved through ``/catalog/query``.

    The query endpoint is not paginated, so every page after the first is
    empty.
    """

    def __init__(
        self,
        config: BrowseConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._transport = transport

    async def fetch_page(self, snapshot: QuerySnapshot) -> list[ContentItem]:
        if snapshot.page > 0:
            return []

        category = self.config.find_custom_category(snapshot.params.category)
        if category is None:
            logger.warning(f"Unknown custom category: {snapshot.params.category!r}")
            return []

        headers = {"Accept": "application/json"}
        if self.config.access_token:
            headers["Authorization"] = f"Bearer {self.config.access_token}"

        async with httpx.AsyncClient(
            base_url=self.config.catalog_api_url,
            timeout=self.config.timeout_sec,
            transport=self._transport,
        ) as client:
            response = await client.get(
                f"{self.config.api_prefix}/catalog/query",
                params={"query": category.query},
                headers=headers,
            )
            response.raise_for_status()
            payload = response.json()

        results = payload.get("results") if isinstance(payload, dict) else None
        if not isinstance(results, list):
            logger.warning("Catalog query response missing results list")
            return []
        return [
            ContentItem.model_validate(raw) for raw in results if isinstance(raw, dict)
        ]


class HotListingFetcher:
    """Movie / TV hot listings, paged by ``start`` and ``limit``."""

    def __init__(
        self,
        config: BrowseConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._transport = transport

    async def fetch_page(self, snapshot: QuerySnapshot) -> list[ContentItem]:
        params_obj = snapshot.params
        page_size = self.config.page_size
        params: dict[str, Any] = {
            "start": snapshot.page * page_size,
            "limit": page_size,
            "category": params_obj.category,
            "type": params_obj.subcategory,
        }
        params.update({k: str(v) for k, v in params_obj.filters.items()})

        async with httpx.AsyncClient(
            timeout=self.config.timeout_sec,
            transport=self._transport,
        ) as client:
            response = await client.get(
                f"{self.config.hot_listing_api_url.rstrip('/')}/{params_obj.kind.value}",
                params=params,
                headers={
                    "User-Agent": self.config.user_agent,
                    "Accept": "application/json",
                },
            )
            response.raise_for_status()
            payload = response.json()

        return self._parse_payload(payload)

    @staticmethod
    def _parse_payload(payload: Any) -> list[ContentItem]:
        raw_items = payload.get("items") if isinstance(payload, dict) else None
        if not isinstance(raw_items, list):
            logger.warning("Hot listing response missing items list")
            return []

        items: list[ContentItem] = []
        for raw in raw_items:
            if not isinstance(raw, dict) or not isinstance(raw.get("title"), str):
                continue
            pic = raw.get("pic") if isinstance(raw.get("pic"), dict) else {}
            rating = raw.get("rating") if isinstance(raw.get("rating"), dict) else {}
            items.append(
                ContentItem(
                    id=str(raw.get("id", "")),
                    title=raw["title"],
                    poster=str(pic.get("normal") or pic.get("large") or ""),
                    rating=_parse_score(rating.get("value")),
                    year=_parse_year(raw.get("card_subtitle")),
                )
            )
        return items


class BangumiCalendarProvider:
    """Weekly airing calendar, keyed by lower-case English weekday."""

    def __init__(
        self,
        config: BrowseConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._transport = transport

    async def load_calendar(self) -> Mapping[str, Sequence[ContentItem]]:
        async with httpx.AsyncClient(
            timeout=self.config.timeout_sec,
            transport=self._transport,
        ) as client:
            response = await client.get(
                self.config.calendar_api_url,
                headers={
                    "User-Agent": self.config.user_agent,
                    "Accept": "application/json",
                },
            )
            response.raise_for_status()
            payload = response.json()

        if not isinstance(payload, list):
            logger.warning("Calendar response must be a list")
            return {}

        calendar: dict[str, list[ContentItem]] = {}
        for day in payload:
            if not isinstance(day, dict) or not isinstance(day.get("weekday"), dict):
                continue
            weekday = str(day["weekday"].get("en", "")).lower()
            raw_items = day.get("items")
            if not isinstance(raw_items, list):
                raw_items = []
            parsed = (self._parse_item(raw) for raw in raw_items if isinstance(raw, dict))
            calendar[weekday] = [item for item in parsed if item is not None]
        return calendar

    @staticmethod
    def _parse_item(raw: dict[str, Any]) -> ContentItem | None:
        title = next(
            (
                value
                for value in (raw.get("name_cn"), raw.get("name"))
                if isinstance(value, str) and value
            ),
            None,
        )
        if title is None:
            return None
        images = raw.get("images") if isinstance(raw.get("images"), dict) else {}
        rating = raw.get("rating") if isinstance(raw.get("rating"), dict) else {}
        return ContentItem(
            id=str(raw.get("id", "")),
            title=title,
            poster=str(images.get("large") or images.get("common") or ""),
            rating=_parse_score(rating.get("score")),
            year=_parse_year(raw.get("air_date")),
        )


class CalendarListingFetcher:
    """Serve pre-fetched calendar data; the second page is always empty.

    Only a non-empty calendar is kept, so a failed or empty load is retried
    on the next first-page fetch.
    """

    def __init__(self, provider: CalendarProvider) -> None:
        self.provider = provider
        self._calendar: Mapping[str, Sequence[ContentItem]] | None = None
        self._lock = asyncio.Lock()

    async def fetch_page(self, snapshot: QuerySnapshot) -> list[ContentItem]:
        if snapshot.page > 0:
            return []
        calendar = await self._load()
        return list(calendar.get(snapshot.params.weekday.lower(), []))

    async def _load(self) -> Mapping[str, Sequence[ContentItem]]:
        async with self._lock:
            if self._calendar is not None:
                return self._calendar
            calendar = await self.provider.load_calendar()
            if calendar:
                self._calendar = calendar
            else:
                logger.warning("Calendar is empty, will reload on next fetch")
            return calendar


class RoutingListingFetcher:
    """Pick the fetcher that serves a snapshot's category."""

    def __init__(
        self,
        custom: ListingFetcher,
        hot: ListingFetcher,
        calendar: ListingFetcher,
    ) -> None:
        self.custom = custom
        self.hot = hot
        self.calendar = calendar

    def route(self, snapshot: QuerySnapshot) -> ListingFetcher:
        if snapshot.params.kind is BrowseKind.CUSTOM:
            return self.custom
        if snapshot.params.weekday:
            return self.calendar
        return self.hot

    async def fetch_page(self, snapshot: QuerySnapshot) -> list[ContentItem]:
        return await self.route(snapshot).fetch_page(snapshot)


async def load_custom_categories(
    config: BrowseConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[CustomCategory]:
    """Fetch the server's custom categories for ``BrowseConfig``."""
    headers = {"Accept": "application/json"}
    if config.access_token:
        headers["Authorization"] = f"Bearer {config.access_token}"

    async with httpx.AsyncClient(
        base_url=config.catalog_api_url,
        timeout=config.timeout_sec,
        transport=transport,
    ) as client:
        response = await client.get(
            f"{config.api_prefix}/catalog/categories", headers=headers
        )
        response.raise_for_status()
        payload = response.json()

    raw_categories = payload.get("categories") if isinstance(payload, dict) else None
    categories: list[CustomCategory] = []
    for raw in raw_categories if isinstance(raw_categories, list) else []:
        if not isinstance(raw, dict) or raw.get("type") not in ("movie", "tv"):
            continue
        name, query = raw.get("name"), raw.get("query")
        if not isinstance(name, str) or not isinstance(query, str):
            logger.warning(f"Skipping malformed custom category: {raw}")
            continue
        categories.append(CustomCategory(name=name, kind=raw["type"], query=query))
    return categories


def build_listing_fetcher(
    config: BrowseConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> RoutingListingFetcher:
    return RoutingListingFetcher(
        custom=CatalogQueryListingFetcher(config, transport=transport),
        hot=HotListingFetcher(config, transport=transport),
        calendar=CalendarListingFetcher(
            BangumiCalendarProvider(config, transport=transport)
        ),
    )
