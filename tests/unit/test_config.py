"""配置校验测试。"""

import pytest
from pydantic import ValidationError

from mediascope.core.config import Settings
from mediascope.modules.catalog.application.services import CatalogQueryService
from mediascope.modules.catalog.domain.exceptions import InvalidTimeoutError


class TestSettings:
    """Settings 校验。"""

    def test_defaults(self, test_settings):
        assert test_settings.SOURCE_TIMEOUT_MS == 250
        assert test_settings.AUTH_COOKIE_NAME == "auth"
        assert test_settings.FRONTEND_HOST in test_settings.all_cors_origins

    @pytest.mark.parametrize("timeout_ms", [0, -100])
    def test_non_positive_source_timeout_rejected(self, timeout_ms):
        with pytest.raises(ValidationError):
            Settings(SOURCE_TIMEOUT_MS=timeout_ms)

    def test_cors_origins_from_comma_string(self):
        settings = Settings(BACKEND_CORS_ORIGINS="http://a.test, http://b.test/")

        assert settings.all_cors_origins[:2] == ["http://a.test", "http://b.test"]

    def test_default_secret_rejected_outside_local(self):
        with pytest.raises(ValidationError):
            Settings(ENVIRONMENT="production", SECRET_KEY="changethis")


class TestCatalogQueryService:
    """服务构造校验。"""

    def test_non_positive_timeout_rejected(self, registry):
        with pytest.raises(InvalidTimeoutError):
            CatalogQueryService(registry=registry, per_source_timeout_ms=0)

    @pytest.mark.anyio
    async def test_query_returns_items_and_cache_time(
        self, registry, make_source, make_item
    ):
        registry.cache_time = 321
        registry.sources = [
            make_source("a", [make_item("a1")]),
            make_source("b", error=RuntimeError("down")),
        ]
        service = CatalogQueryService(registry=registry, per_source_timeout_ms=500)

        data = await service.query(username="alice", term="q")

        assert [i.title for i in data.items] == ["a1"]
        assert data.cache_time == 321
        assert data.model_dump(exclude={"items"}) == {"cache_time": 321}
