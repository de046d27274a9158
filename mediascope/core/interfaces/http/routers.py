"""API router configuration."""

from fastapi import APIRouter

from mediascope.modules.catalog.interfaces.router import router as catalog_router

api_router = APIRouter()

# Catalog query
api_router.include_router(catalog_router)
