"""Catalog ports."""

from collections.abc import Sequence
from typing import Protocol

from mediascope.modules.catalog.domain.entities import ContentItem, SourceDescriptor
from mediascope.modules.catalog.domain.site_config import CustomCategory


class ContentFilter(Protocol):
    """Predicate over an item's category label."""

    def is_blocked(self, category_label: str) -> bool: ...

    def apply(self, items: Sequence[ContentItem]) -> list[ContentItem]: ...


class SourceRegistry(Protocol):
    """Port supplying the sources and categories visible to a user."""

    async def list_sources(self, username: str) -> list[SourceDescriptor]: ...

    async def list_custom_categories(self) -> list[CustomCategory]: ...

    async def get_cache_time(self) -> int: ...

    async def is_content_filter_enabled(self) -> bool: ...
