"""BrowseParams / QuerySnapshot 单元测试。"""

import pytest

from mediascope.modules.browse.domain.snapshot import (
    BrowseKind,
    BrowseParams,
    QuerySnapshot,
)


class TestBrowseParams:
    """浏览参数测试。"""

    def test_filters_are_copied(self):
        source = {"sort": "T", "tags": ["科幻"]}
        params = BrowseParams(filters=source)

        source["sort"] = "R"
        source["tags"].append("动作")

        assert params.filters == {"sort": "T", "tags": ["科幻"]}

    def test_filters_are_read_only(self):
        params = BrowseParams(filters={"sort": "T"})

        with pytest.raises(TypeError):
            params.filters["sort"] = "R"  # type: ignore[index]

    def test_primary_change_clears_secondary(self):
        params = BrowseParams(category="热门", subcategory="华语")

        changed = params.with_primary("最新")

        assert changed.category == "最新"
        assert changed.subcategory == ""
        assert params.subcategory == "华语"

    def test_secondary_change_keeps_primary(self):
        params = BrowseParams(category="热门", subcategory="华语")

        changed = params.with_secondary("欧美")

        assert (changed.category, changed.subcategory) == ("热门", "欧美")
        assert params.subcategory == "华语"

    def test_weekday_change_keeps_categories(self):
        params = BrowseParams(kind=BrowseKind.TV, category="番剧", subcategory="日本")

        changed = params.with_weekday("fri")

        assert changed.weekday == "fri"
        assert (changed.category, changed.subcategory) == ("番剧", "日本")
        assert params.weekday == ""
        assert QuerySnapshot(changed) != QuerySnapshot(params)

    def test_kind_change_clears_categories(self):
        params = BrowseParams(category="热门", subcategory="华语")

        changed = params.with_kind(BrowseKind.TV)

        assert changed.kind is BrowseKind.TV
        assert (changed.category, changed.subcategory) == ("", "")

    def test_with_filters_merges(self):
        params = BrowseParams(filters={"sort": "T"}).with_filters(year="2024")

        assert dict(params.filters) == {"sort": "T", "year": "2024"}


class TestQuerySnapshot:
    """快照相等性测试。"""

    def test_equal_by_value_with_nested_filters(self):
        a = QuerySnapshot(BrowseParams(category="热门", filters={"tags": ["科幻"]}))
        b = QuerySnapshot(BrowseParams(category="热门", filters={"tags": ["科幻"]}))

        assert a == b
        assert a is not b

    @pytest.mark.parametrize(
        "other",
        [
            QuerySnapshot(BrowseParams(category="最新", filters={"tags": ["科幻"]})),
            QuerySnapshot(BrowseParams(category="热门", filters={"tags": ["动作"]})),
            QuerySnapshot(
                BrowseParams(category="热门", weekday="mon", filters={"tags": ["科幻"]})
            ),
            QuerySnapshot(BrowseParams(category="热门", filters={"tags": ["科幻"]}), 1),
        ],
    )
    def test_any_field_difference_breaks_equality(self, other):
        base = QuerySnapshot(BrowseParams(category="热门", filters={"tags": ["科幻"]}))

        assert base != other

    def test_negative_page_rejected(self):
        with pytest.raises(ValueError):
            QuerySnapshot(BrowseParams(), page=-1)

    def test_as_dict(self):
        snapshot = QuerySnapshot(
            BrowseParams(kind=BrowseKind.TV, category="热门", filters={"sort": "T"}),
            page=2,
        )

        assert snapshot.as_dict() == {
            "kind": "tv",
            "category": "热门",
            "subcategory": "",
            "weekday": "",
            "filters": {"sort": "T"},
            "page": 2,
        }
