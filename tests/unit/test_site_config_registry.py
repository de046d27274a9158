"""FileSourceRegistry 单元测试。"""

import json

import pytest

from mediascope.core.config import settings
from mediascope.modules.catalog.domain.exceptions import SiteConfigError
from mediascope.modules.catalog.domain.site_config import CustomCategory
from mediascope.modules.catalog.infrastructure.site_config_registry import (
    FileSourceRegistry,
)

pytestmark = pytest.mark.anyio

CONFIG = {
    "cache_time": 3600,
    "api_site": {
        "a": {"api": "https://a.example.com/api", "name": "站点A"},
        "b": {"api": "https://b.example.com/api", "name": "站点B", "disabled": True},
        "c": {"api": "https://c.example.com/api"},
        "broken": {"name": "no api"},
    },
    "custom_category": [
        {"name": "漫威", "type": "movie", "query": "漫威"},
        {"name": "bad", "type": "anime", "query": "x"},
    ],
    "users": {"guest": {"enabled_apis": ["c"]}},
}


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(CONFIG, ensure_ascii=False), encoding="utf-8")
    return path


class TestParseConfig:
    """配置解析测试。"""

    def test_sites_keep_declaration_order(self):
        config = FileSourceRegistry.parse_config_payload(CONFIG)

        assert [s.key for s in config.api_sites] == ["a", "b", "c"]
        assert config.api_sites[2].name == "c"
        assert config.api_sites[1].disabled is True

    def test_invalid_categories_skipped(self):
        config = FileSourceRegistry.parse_config_payload(CONFIG)

        assert config.custom_categories == [
            CustomCategory(name="漫威", kind="movie", query="漫威")
        ]

    def test_non_object_rejected(self):
        with pytest.raises(SiteConfigError):
            FileSourceRegistry.parse_config_payload([])

    def test_api_site_must_be_object(self):
        with pytest.raises(SiteConfigError):
            FileSourceRegistry.parse_config_payload({"api_site": ["a"]})


class TestRegistry:
    """资源站注册表测试。"""

    async def test_disabled_sites_hidden(self, config_file):
        sources = await FileSourceRegistry(config_file).list_sources("alice")

        assert [s.key for s in sources] == ["a", "c"]

    async def test_user_policy_restricts_sites(self, config_file):
        sources = await FileSourceRegistry(config_file).list_sources("guest")

        assert [s.key for s in sources] == ["c"]

    async def test_cache_time_from_file(self, config_file):
        assert await FileSourceRegistry(config_file).get_cache_time() == 3600

    async def test_defaults_from_settings(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{}", encoding="utf-8")
        registry = FileSourceRegistry(path)

        assert await registry.get_cache_time() == settings.CACHE_TIME_SEC
        assert await registry.is_content_filter_enabled() is (
            not settings.DISABLE_CONTENT_FILTER
        )

    async def test_disable_content_filter(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text('{"disable_content_filter": true}', encoding="utf-8")

        assert await FileSourceRegistry(path).is_content_filter_enabled() is False

    async def test_missing_file_means_no_sources(self, tmp_path):
        registry = FileSourceRegistry(tmp_path / "absent.json")

        assert await registry.list_sources("alice") == []
        assert await registry.list_custom_categories() == []

    async def test_bad_json_raises(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(SiteConfigError):
            await FileSourceRegistry(path).list_sources("alice")

    async def test_reload_picks_up_changes(self, config_file):
        registry = FileSourceRegistry(config_file)
        assert len(await registry.list_sources("alice")) == 2

        config_file.write_text(
            json.dumps({"api_site": {"z": {"api": "https://z.example.com"}}}),
            encoding="utf-8",
        )
        assert len(await registry.list_sources("alice")) == 2

        registry.reload()
        assert [s.key for s in await registry.list_sources("alice")] == ["z"]
