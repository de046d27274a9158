"""Catalog application data models."""

from pydantic import BaseModel

from mediascope.modules.catalog.domain.entities import ContentItem


class CatalogQueryData(BaseModel):
    """Result of one catalog query."""

    items: list[ContentItem]
    cache_time: int


class SourceSummaryData(BaseModel):
    """Source visible to the current user."""

    key: str
    name: str


class CustomCategoryData(BaseModel):
    """Custom browse category."""

    name: str
    type: str
    query: str
