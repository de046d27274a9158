"""Display state and pagination phases."""

from dataclasses import dataclass, field
from enum import Enum

from mediascope.modules.catalog.domain.entities import ContentItem


class PaginationPhase(str, Enum):
    """分页状态机。"""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    LOADING_MORE = "loading_more"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class DisplayState:
    """What the browsing surface shows.

    An empty ``items`` with ``loading`` false is the "no data" state.
    """

    items: list[ContentItem] = field(default_factory=list)
    has_more: bool = False
    loading: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.items and not self.loading
