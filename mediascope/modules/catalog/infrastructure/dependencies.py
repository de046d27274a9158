"""Catalog module infrastructure dependencies."""

from functools import lru_cache

from mediascope.modules.catalog.infrastructure.site_config_registry import (
    FileSourceRegistry,
)


@lru_cache
def _file_source_registry() -> FileSourceRegistry:
    return FileSourceRegistry()


async def get_source_registry() -> FileSourceRegistry:
    return _file_source_registry()
