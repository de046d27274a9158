"""Browse ports."""

from collections.abc import Mapping, Sequence
from typing import Protocol

from mediascope.modules.browse.domain.snapshot import QuerySnapshot
from mediascope.modules.catalog.domain.entities import ContentItem


class ListingFetcher(Protocol):
    """Fetch one page of listings for a snapshot."""

    async def fetch_page(self, snapshot: QuerySnapshot) -> list[ContentItem]: ...


class CalendarProvider(Protocol):
    """Pre-fetched episodic listings keyed by weekday."""

    async def load_calendar(self) -> Mapping[str, Sequence[ContentItem]]: ...
