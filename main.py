"""MediaScope Backend - 多资源站影视聚合查询入口。"""

import sentry_sdk
from fastapi import FastAPI
from fastapi.concurrency import asynccontextmanager
from fastapi.routing import APIRoute
from loguru import logger
from starlette.middleware.cors import CORSMiddleware

from mediascope.core.application import security as app_security
from mediascope.core.config import settings
from mediascope.core.domain.exceptions import DomainException
from mediascope.core.infrastructure.logging import setup_logging
from mediascope.core.infrastructure.security import jwt as infra_jwt
from mediascope.core.interfaces.http.exceptions import (
    domain_exception_handler,
    global_exception_handler,
)
from mediascope.core.interfaces.http.routers import api_router
from mediascope.modules.catalog.application import dependencies as catalog_app_deps
from mediascope.modules.catalog.infrastructure import (
    dependencies as catalog_infra_deps,
)


def custom_generate_unique_id(route: APIRoute) -> str:
    """Generate unique operation IDs for OpenAPI."""
    if route.tags:
        return f"{route.tags[0]}-{route.name}"
    return route.name


# Initialize Sentry if configured
if settings.SENTRY_DSN and settings.ENVIRONMENT != "local":
    sentry_sdk.init(
        dsn=str(settings.SENTRY_DSN),
        enable_tracing=True,
        environment=settings.ENVIRONMENT,
    )


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Application lifespan manager."""
    setup_logging()
    logger.info("Starting MediaScope backend...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(
        f"Per-source timeout: {settings.SOURCE_TIMEOUT_MS}ms, "
        f"site config: {settings.SOURCE_CONFIG_PATH}"
    )

    yield

    logger.info("Shutting down MediaScope backend...")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="多资源站影视元数据聚合查询：并发分发、单站超时、部分失败容忍",
    version="0.1.0",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url=f"{settings.API_V1_STR}/docs",
    redoc_url=f"{settings.API_V1_STR}/redoc",
    root_path=settings.ROOTPATH,
    generate_unique_id_function=custom_generate_unique_id,
    lifespan=lifespan,
)

# Dependency overrides (application -> infrastructure)
app.dependency_overrides[app_security.get_current_username] = (
    infra_jwt.get_current_username
)
app.dependency_overrides[catalog_app_deps.get_source_registry] = (
    catalog_infra_deps.get_source_registry
)

# Exception handlers
app.add_exception_handler(DomainException, domain_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# CORS middleware
if settings.all_cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.all_cors_origins,
        allow_credentials=True,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )

# Include API router
app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/health", tags=["health"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "version": "0.1.0",
        "feature_flags": {
            "content_filter_enabled": not settings.DISABLE_CONTENT_FILTER,
        },
    }


@app.get("/", tags=["root"])
async def root():
    """Root endpoint."""
    return {
        "message": "Welcome to MediaScope API",
        "docs": f"{settings.API_V1_STR}/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.SERVER_PORT,
        reload=settings.ENVIRONMENT == "local",
    )
