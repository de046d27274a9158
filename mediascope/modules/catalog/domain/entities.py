"""Catalog domain models.

ContentItem 由各资源站的响应解析器产出，创建后不可变；
SourceDescriptor 由资源站注册表提供，一次请求内不会被修改。
"""

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from mediascope.modules.catalog.domain.exceptions import InvalidTimeoutError


class ContentItem(BaseModel):
    """One media listing produced by a source.

    Source-specific fields beyond the common ones are kept as extras.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    id: str = Field(default="", description="资源站内条目ID")
    title: str = Field(..., description="标题")
    type_name: str = Field(default="", description="分类标签")
    poster: str = Field(default="", description="海报地址")
    rating: float | None = Field(default=None, description="评分")
    year: str = Field(default="unknown", description="年份")
    source: str = Field(default="", description="资源站 key")
    source_name: str = Field(default="", description="资源站名称")
    episodes: list[str] = Field(default_factory=list, description="播放地址")
    description: str = Field(default="", description="简介")
    douban_id: int | None = Field(default=None, description="豆瓣ID")


QueryFn = Callable[[str], Awaitable[list[ContentItem]]]


@dataclass(frozen=True)
class SourceDescriptor:
    """A queryable content provider."""

    key: str
    name: str
    query_fn: QueryFn = field(compare=False, repr=False)


@dataclass(frozen=True)
class AggregationRequest:
    """One logical query fanned out to ``sources``."""

    term: str
    sources: Sequence[SourceDescriptor]
    per_source_timeout_ms: int

    def __post_init__(self) -> None:
        if self.per_source_timeout_ms <= 0:
            raise InvalidTimeoutError(self.per_source_timeout_ms)

    @property
    def timeout_sec(self) -> float:
        return self.per_source_timeout_ms / 1000


class SourceStatus(str, Enum):
    """单个资源站查询结果状态。"""

    SUCCESS = "success"
    TIMEOUT = "timeout"
    FAILED = "failed"


@dataclass(frozen=True)
class SourceOutcome:
    """Diagnostic record for one source in one aggregation."""

    source_key: str
    status: SourceStatus
    items: list[ContentItem] = field(default_factory=list)
    duration_ms: int = 0
    error_message: str | None = None

    @property
    def is_success(self) -> bool:
        return self.status == SourceStatus.SUCCESS


@dataclass(frozen=True)
class AggregationResult:
    """Merged items in source order, plus per-source outcomes."""

    items: list[ContentItem] = field(default_factory=list)
    outcomes: list[SourceOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.is_success)
