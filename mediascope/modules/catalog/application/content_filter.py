"""Category-label blocklist filter."""

from collections.abc import Iterable, Sequence

from mediascope.modules.catalog.domain.blocklist import DEFAULT_BLOCKED_CATEGORY_WORDS
from mediascope.modules.catalog.domain.entities import ContentItem


class BlocklistContentFilter:
    """Drop items whose category label contains a blocked substring."""

    def __init__(self, blocked_words: Iterable[str] | None = None) -> None:
        words = (
            DEFAULT_BLOCKED_CATEGORY_WORDS if blocked_words is None else blocked_words
        )
        self.blocked_words: tuple[str, ...] = tuple(w for w in words if w)

    def is_blocked(self, category_label: str) -> bool:
        label = category_label or ""
        return any(word in label for word in self.blocked_words)

    def apply(self, items: Sequence[ContentItem]) -> list[ContentItem]:
        return [item for item in items if not self.is_blocked(item.type_name)]
