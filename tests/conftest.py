"""
pytest 配置和共享 fixtures。

测试分层：
- unit/: 单元测试（不依赖外部服务，上游 HTTP 用 httpx.MockTransport 模拟）

使用方法：
    # 运行所有测试
    uv run pytest

    # 运行带覆盖率
    uv run pytest --cov=mediascope --cov-report=html
"""

import asyncio
from collections.abc import AsyncGenerator, Callable
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from mediascope.core.config import Settings
from mediascope.modules.catalog.domain.entities import ContentItem, SourceDescriptor
from mediascope.modules.catalog.domain.site_config import CustomCategory

# ============================================
# 配置 Fixtures
# ============================================


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def test_settings() -> Settings:
    """测试环境配置。"""
    return Settings(
        ENVIRONMENT="local",
        SECRET_KEY="test-secret-key-for-testing-only",
        SOURCE_TIMEOUT_MS=250,
        CACHE_TIME_SEC=600,
    )


# ============================================
# 资源站 Fixtures
# ============================================


class FakeSource:
    """Scriptable source: fixed items after a delay, an error, or never."""

    def __init__(
        self,
        key: str,
        items: list[ContentItem] | None = None,
        *,
        delay: float = 0.0,
        error: Exception | None = None,
        hang: bool = False,
    ) -> None:
        self.key = key
        self.items = items or []
        self.delay = delay
        self.error = error
        self.hang = hang
        self.calls: list[str] = []

    async def query(self, term: str) -> list[ContentItem]:
        self.calls.append(term)
        if self.hang:
            await asyncio.Event().wait()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.items)

    def descriptor(self) -> SourceDescriptor:
        return SourceDescriptor(key=self.key, name=f"site-{self.key}", query_fn=self.query)


@pytest.fixture
def make_item() -> Callable[..., ContentItem]:
    def _make(title: str, type_name: str = "动作片", **extra: Any) -> ContentItem:
        return ContentItem(title=title, type_name=type_name, **extra)

    return _make


@pytest.fixture
def make_source() -> Callable[..., FakeSource]:
    def _make(key: str, items: list[ContentItem] | None = None, **kwargs: Any):
        return FakeSource(key, items, **kwargs)

    return _make


class InMemorySourceRegistry:
    """SourceRegistry over a fixed list of sources."""

    def __init__(
        self,
        sources: list[FakeSource] | None = None,
        *,
        categories: list[CustomCategory] | None = None,
        cache_time: int = 600,
        filter_enabled: bool = True,
        allowed: dict[str, set[str]] | None = None,
    ) -> None:
        self.sources = sources or []
        self.categories = categories or []
        self.cache_time = cache_time
        self.filter_enabled = filter_enabled
        self.allowed = allowed or {}

    async def list_sources(self, username: str) -> list[SourceDescriptor]:
        keys = self.allowed.get(username)
        return [
            s.descriptor() for s in self.sources if keys is None or s.key in keys
        ]

    async def list_custom_categories(self) -> list[CustomCategory]:
        return list(self.categories)

    async def get_cache_time(self) -> int:
        return self.cache_time

    async def is_content_filter_enabled(self) -> bool:
        return self.filter_enabled


@pytest.fixture
def registry() -> InMemorySourceRegistry:
    return InMemorySourceRegistry()


# ============================================
# HTTP Client Fixtures
# ============================================


@pytest.fixture
def auth_headers() -> dict[str, str]:
    from mediascope.core.infrastructure.security.jwt import create_access_token

    return {"Authorization": f"Bearer {create_access_token('alice')}"}


@pytest.fixture
async def async_client(
    registry: InMemorySourceRegistry,
) -> AsyncGenerator[AsyncClient, None]:
    """异步 HTTP 客户端（用于 API 测试）。"""
    from main import app
    from mediascope.modules.catalog.application.dependencies import get_source_registry

    saved_overrides = dict(app.dependency_overrides)
    app.dependency_overrides[get_source_registry] = lambda: registry

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    # 恢复 main.py 中注册的依赖覆盖
    app.dependency_overrides.clear()
    app.dependency_overrides.update(saved_overrides)
