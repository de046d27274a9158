"""Browse parameters and by-value snapshots."""

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any


class BrowseKind(str, Enum):
    """浏览类型。"""

    MOVIE = "movie"
    TV = "tv"
    CUSTOM = "custom"


@dataclass(frozen=True)
class BrowseParams:
    """User-adjustable selection, excluding the page index.

    ``filters`` is deep-copied and exposed read-only, so a params object
    never changes after construction.
    """

    kind: BrowseKind = BrowseKind.MOVIE
    category: str = ""
    subcategory: str = ""
    weekday: str = ""
    filters: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "filters", MappingProxyType(copy.deepcopy(dict(self.filters)))
        )

    def with_kind(self, kind: BrowseKind) -> "BrowseParams":
        return replace(self, kind=kind, category="", subcategory="")

    def with_primary(self, value: str) -> "BrowseParams":
        # 切换一级分类时清空二级分类
        return replace(self, category=value, subcategory="")

    def with_secondary(self, value: str) -> "BrowseParams":
        return replace(self, subcategory=value)

    def with_weekday(self, weekday: str) -> "BrowseParams":
        return replace(self, weekday=weekday)

    def with_filters(self, **filters: Any) -> "BrowseParams":
        return replace(self, filters={**self.filters, **filters})


@dataclass(frozen=True)
class QuerySnapshot:
    """Parameters captured when a fetch is dispatched.

    Two snapshots are equal iff every field is equal, nested filters included.
    """

    params: BrowseParams
    page: int = 0

    def __post_init__(self) -> None:
        if self.page < 0:
            raise ValueError("page index must be >= 0")

    def as_dict(self) -> dict[str, Any]:
        return {
            "kind": self.params.kind.value,
            "category": self.params.category,
            "subcategory": self.params.subcategory,
            "weekday": self.params.weekday,
            "filters": copy.deepcopy(dict(self.params.filters)),
            "page": self.page,
        }
