"""Catalog API routes."""

from fastapi import APIRouter, Depends, Query, Response

from mediascope.core.application.security import get_current_username
from mediascope.modules.catalog.application.dependencies import (
    get_catalog_query_service,
)
from mediascope.modules.catalog.application.services import CatalogQueryService
from mediascope.modules.catalog.interfaces.schemas import (
    CatalogQueryResponse,
    CustomCategoryListResponse,
    CustomCategoryResponse,
    SourceListResponse,
    SourceSummaryResponse,
)

router = APIRouter(prefix="/catalog", tags=["catalog"])


def _cache_headers(cache_time: int) -> dict[str, str]:
    return {
        "Cache-Control": f"public, max-age={cache_time}, s-maxage={cache_time}",
        "CDN-Cache-Control": f"public, s-maxage={cache_time}",
        "Vercel-CDN-Cache-Control": f"public, s-maxage={cache_time}",
        "Netlify-Vary": "query",
    }


@router.get(
    "/query",
    response_model=CatalogQueryResponse,
    summary="聚合查询",
    description="把关键词并发发往所有可用资源站；若 query 恰为某个资源站 key，则只查询该站默认列表",
)
async def query_catalog(
    response: Response,
    query: str | None = Query(None, description="关键词或资源站 key"),
    username: str = Depends(get_current_username),
    service: CatalogQueryService = Depends(get_catalog_query_service),
) -> CatalogQueryResponse:
    """Fan a query out to the caller's sources."""
    if not query:
        response.headers.update(_cache_headers(await service.get_cache_time()))
        return CatalogQueryResponse(results=[])

    data = await service.query(username=username, term=query)
    if not data.items:
        return CatalogQueryResponse(results=[])

    response.headers.update(_cache_headers(data.cache_time))
    return CatalogQueryResponse(results=[item.model_dump() for item in data.items])


@router.get(
    "/sources",
    response_model=SourceListResponse,
    summary="可用资源站",
)
async def list_sources(
    username: str = Depends(get_current_username),
    service: CatalogQueryService = Depends(get_catalog_query_service),
) -> SourceListResponse:
    sources = await service.list_sources(username)
    return SourceListResponse(
        sources=[SourceSummaryResponse(key=s.key, name=s.name) for s in sources]
    )


@router.get(
    "/categories",
    response_model=CustomCategoryListResponse,
    summary="自定义分类",
)
async def list_custom_categories(
    _username: str = Depends(get_current_username),
    service: CatalogQueryService = Depends(get_catalog_query_service),
) -> CustomCategoryListResponse:
    categories = await service.list_custom_categories()
    return CustomCategoryListResponse(
        categories=[
            CustomCategoryResponse(name=c.name, type=c.type, query=c.query)
            for c in categories
        ]
    )
