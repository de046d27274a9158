"""Fan-out aggregator.

Sends one logical query to every source concurrently, each bounded by its own
timeout, and merges whatever succeeded. A single source failing or timing out
never fails the aggregation; it is logged and left out of the result.
"""

import asyncio
import time
from collections.abc import Sequence

from loguru import logger

from mediascope.core.infrastructure.logging import BusinessEvents
from mediascope.modules.catalog.domain.entities import (
    AggregationRequest,
    AggregationResult,
    ContentItem,
    SourceDescriptor,
    SourceOutcome,
    SourceStatus,
)
from mediascope.modules.catalog.domain.ports import ContentFilter


class FanOutAggregator:
    """Concurrent multi-source query with partial-failure tolerance."""

    def __init__(self, content_filter: ContentFilter | None = None) -> None:
        """初始化聚合器。

        Args:
            content_filter: 分类过滤器，为 None 时不做过滤
        """
        self.content_filter = content_filter

    @staticmethod
    def resolve(
        term: str,
        sources: Sequence[SourceDescriptor],
        per_source_timeout_ms: int,
    ) -> AggregationRequest:
        """Build the request for ``term``.

        A term equal to a source key means "browse that source's default
        listing": only that source is queried, with an empty term.
        """
        site = next((source for source in sources if source.key == term), None)
        if site is not None:
            return AggregationRequest(
                term="",
                sources=[site],
                per_source_timeout_ms=per_source_timeout_ms,
            )
        return AggregationRequest(
            term=term,
            sources=list(sources),
            per_source_timeout_ms=per_source_timeout_ms,
        )

    async def search(
        self,
        term: str,
        sources: Sequence[SourceDescriptor],
        per_source_timeout_ms: int,
    ) -> AggregationResult:
        return await self.aggregate(
            self.resolve(term, sources, per_source_timeout_ms)
        )

    async def aggregate(self, request: AggregationRequest) -> AggregationResult:
        """Query all sources and merge successes in source order."""
        if not request.sources:
            return AggregationResult()

        start_time = time.monotonic()
        # gather keeps argument order, so the merge follows source order
        # regardless of which source answered first.
        outcomes = await asyncio.gather(
            *(
                self._query_source(source, request.term, request.timeout_sec)
                for source in request.sources
            )
        )

        items: list[ContentItem] = [
            item for outcome in outcomes if outcome.is_success for item in outcome.items
        ]
        items = self._filter(items)

        result = AggregationResult(items=items, outcomes=list(outcomes))
        BusinessEvents.aggregation_completed(
            term=request.term,
            source_count=len(request.sources),
            succeeded=result.succeeded,
            item_count=len(items),
            latency_ms=int((time.monotonic() - start_time) * 1000),
        )
        return result

    async def _query_source(
        self,
        source: SourceDescriptor,
        term: str,
        timeout_sec: float,
    ) -> SourceOutcome:
        start_time = time.monotonic()
        try:
            items = await asyncio.wait_for(source.query_fn(term), timeout=timeout_sec)
        except TimeoutError:
            duration_ms = int((time.monotonic() - start_time) * 1000)
            logger.warning(f"搜索失败 {source.name}: timeout after {duration_ms}ms")
            BusinessEvents.source_query_failed(
                source_key=source.key,
                reason="timeout",
                duration_ms=duration_ms,
            )
            return SourceOutcome(
                source_key=source.key,
                status=SourceStatus.TIMEOUT,
                duration_ms=duration_ms,
                error_message=f"{source.name} timeout",
            )
        except Exception as exc:
            duration_ms = int((time.monotonic() - start_time) * 1000)
            logger.warning(f"搜索失败 {source.name}: {exc}")
            BusinessEvents.source_query_failed(
                source_key=source.key,
                reason="error",
                error=str(exc),
                duration_ms=duration_ms,
            )
            return SourceOutcome(
                source_key=source.key,
                status=SourceStatus.FAILED,
                duration_ms=duration_ms,
                error_message=str(exc),
            )

        return SourceOutcome(
            source_key=source.key,
            status=SourceStatus.SUCCESS,
            items=list(items or []),
            duration_ms=int((time.monotonic() - start_time) * 1000),
        )

    def _filter(self, items: list[ContentItem]) -> list[ContentItem]:
        if self.content_filter is None:
            return items
        filtered = self.content_filter.apply(items)
        if len(filtered) != len(items):
            BusinessEvents.content_filtered(
                removed=len(items) - len(filtered),
                remaining=len(filtered),
            )
        return filtered
