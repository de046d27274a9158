"""Catalog application services."""

from collections.abc import Iterable

from mediascope.modules.catalog.application.aggregator import FanOutAggregator
from mediascope.modules.catalog.application.content_filter import (
    BlocklistContentFilter,
)
from mediascope.modules.catalog.application.models import (
    CatalogQueryData,
    CustomCategoryData,
    SourceSummaryData,
)
from mediascope.modules.catalog.domain.entities import AggregationRequest
from mediascope.modules.catalog.domain.exceptions import InvalidTimeoutError
from mediascope.modules.catalog.domain.ports import SourceRegistry


class CatalogQueryService:
    """Resolve a user's sources and run the fan-out query over them."""

    def __init__(
        self,
        registry: SourceRegistry,
        per_source_timeout_ms: int,
        blocked_words: Iterable[str] | None = None,
    ) -> None:
        if per_source_timeout_ms <= 0:
            raise InvalidTimeoutError(per_source_timeout_ms)
        self.registry = registry
        self.per_source_timeout_ms = per_source_timeout_ms
        self.blocked_words = blocked_words

    async def query(self, username: str, term: str) -> CatalogQueryData:
        """Run ``term`` (free text or a source key) for ``username``."""
        sources = await self.registry.list_sources(username)
        aggregator = FanOutAggregator(content_filter=await self._content_filter())

        request: AggregationRequest = aggregator.resolve(
            term, sources, self.per_source_timeout_ms
        )
        result = await aggregator.aggregate(request)

        return CatalogQueryData(
            items=result.items,
            cache_time=await self.registry.get_cache_time(),
        )

    async def list_sources(self, username: str) -> list[SourceSummaryData]:
        sources = await self.registry.list_sources(username)
        return [SourceSummaryData(key=s.key, name=s.name) for s in sources]

    async def list_custom_categories(self) -> list[CustomCategoryData]:
        categories = await self.registry.list_custom_categories()
        return [
            CustomCategoryData(name=c.name, type=c.kind, query=c.query)
            for c in categories
        ]

    async def get_cache_time(self) -> int:
        return await self.registry.get_cache_time()

    async def _content_filter(self) -> BlocklistContentFilter | None:
        if not await self.registry.is_content_filter_enabled():
            return None
        return BlocklistContentFilter(self.blocked_words)
