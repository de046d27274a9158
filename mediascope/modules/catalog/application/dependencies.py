"""Catalog module application dependencies."""

from typing import NoReturn

from fastapi import Depends

from mediascope.core.config import settings
from mediascope.modules.catalog.application.services import CatalogQueryService
from mediascope.modules.catalog.domain.ports import SourceRegistry


def _missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")


async def get_source_registry() -> SourceRegistry:
    _missing_dependency("SourceRegistry")


async def get_catalog_query_service(
    registry: SourceRegistry = Depends(get_source_registry),
) -> CatalogQueryService:
    return CatalogQueryService(
        registry=registry,
        per_source_timeout_ms=settings.SOURCE_TIMEOUT_MS,
        blocked_words=settings.CONTENT_FILTER_WORDS,
    )
