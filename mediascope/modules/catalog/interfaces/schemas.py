"""Catalog API schemas."""

from typing import Any

from pydantic import BaseModel, Field


class CatalogQueryResponse(BaseModel):
    """Query response; ``results`` is empty when nothing matched."""

    results: list[dict[str, Any]] = Field(default_factory=list, description="条目列表")


class SourceSummaryResponse(BaseModel):
    key: str = Field(..., description="资源站 key")
    name: str = Field(..., description="资源站名称")


class SourceListResponse(BaseModel):
    sources: list[SourceSummaryResponse]


class CustomCategoryResponse(BaseModel):
    name: str = Field(..., description="分类名称")
    type: str = Field(..., description="movie / tv")
    query: str = Field(..., description="关键词或资源站 key")


class CustomCategoryListResponse(BaseModel):
    categories: list[CustomCategoryResponse]
