"""Pagination accumulator.

State machine::

    IDLE -> LOADING -> READY <-> LOADING_MORE
                 \\         \\
                  `-> EXHAUSTED <-'

Any parameter change resets to IDLE and immediately dispatches page 0. Every
fetch goes through the stale-response guard, so a completion for parameters
the user has already left performs no transition at all.
"""

from collections.abc import Callable
from dataclasses import replace

from loguru import logger

from mediascope.modules.browse.application.guard import GuardOutcome, StaleResponseGuard
from mediascope.modules.browse.domain.ports import ListingFetcher
from mediascope.modules.browse.domain.snapshot import BrowseParams, QuerySnapshot
from mediascope.modules.browse.domain.state import DisplayState, PaginationPhase
from mediascope.modules.catalog.domain.entities import ContentItem


class PaginationAccumulator:
    """Append successive pages for the current browse parameters."""

    def __init__(
        self,
        fetcher: ListingFetcher,
        params: BrowseParams | None = None,
        on_change: Callable[[DisplayState], None] | None = None,
    ) -> None:
        """初始化分页累加器。

        Args:
            fetcher: 分页数据获取器
            params: 初始浏览参数
            on_change: 显示状态变化回调（由 UI 层决定如何渲染）
        """
        self.fetcher = fetcher
        self.params = params or BrowseParams()
        self.phase = PaginationPhase.IDLE
        self.state = DisplayState()
        self._on_change = on_change
        self._last_page = 0
        self._live: QuerySnapshot | None = None
        self._guard: StaleResponseGuard[list[ContentItem]] = StaleResponseGuard(
            self.live_snapshot
        )

    def live_snapshot(self) -> QuerySnapshot | None:
        """Parameters and page index of the most recent dispatch."""
        return self._live

    @property
    def has_more(self) -> bool:
        return self.state.has_more

    async def select(self, params: BrowseParams) -> GuardOutcome | None:
        """Switch to ``params``; unchanged params are a no-op once loaded."""
        if params == self.params and self.phase is not PaginationPhase.IDLE:
            return None
        self.params = params
        return await self.refresh()

    async def refresh(self) -> GuardOutcome:
        """Reset and load page 0 for the current params."""
        self._reset()
        return await self._load_initial()

    async def load_more(self) -> GuardOutcome | None:
        """Visibility signal: fetch the next page if one may exist."""
        if self.phase is not PaginationPhase.READY or not self.state.has_more:
            return None

        snapshot = QuerySnapshot(self.params, page=self._last_page + 1)
        self._dispatch(snapshot, PaginationPhase.LOADING_MORE)
        return await self._guard.guard(
            snapshot,
            lambda: self.fetcher.fetch_page(snapshot),
            on_commit=lambda items: self._commit_more(snapshot, items),
            on_failure=lambda _exc: self._restore(PaginationPhase.READY),
        )

    def _reset(self) -> None:
        self.phase = PaginationPhase.IDLE
        self._last_page = 0
        self._live = None
        self._set_state(DisplayState())

    async def _load_initial(self) -> GuardOutcome:
        snapshot = QuerySnapshot(self.params, page=0)
        self._dispatch(snapshot, PaginationPhase.LOADING)
        return await self._guard.guard(
            snapshot,
            lambda: self.fetcher.fetch_page(snapshot),
            on_commit=self._commit_initial,
            on_failure=lambda _exc: self._restore(PaginationPhase.IDLE),
        )

    def _dispatch(self, snapshot: QuerySnapshot, phase: PaginationPhase) -> None:
        self._live = snapshot
        self.phase = phase
        self._set_state(replace(self.state, loading=True))
        logger.debug(f"dispatch {phase.value}: {snapshot.as_dict()}")

    def _commit_initial(self, items: list[ContentItem]) -> None:
        self._last_page = 0
        if not items:
            self.phase = PaginationPhase.EXHAUSTED
            self._set_state(DisplayState(items=[], has_more=False, loading=False))
            return
        self.phase = PaginationPhase.READY
        self._set_state(DisplayState(items=list(items), has_more=True, loading=False))

    def _commit_more(self, snapshot: QuerySnapshot, items: list[ContentItem]) -> None:
        if not items:
            self.phase = PaginationPhase.EXHAUSTED
            self._set_state(replace(self.state, has_more=False, loading=False))
            return
        self._last_page = snapshot.page
        self.phase = PaginationPhase.READY
        self._set_state(
            DisplayState(
                items=[*self.state.items, *items],
                has_more=True,
                loading=False,
            )
        )

    def _restore(self, phase: PaginationPhase) -> None:
        self.phase = phase
        self._set_state(replace(self.state, loading=False))

    def _set_state(self, state: DisplayState) -> None:
        self.state = state
        if self._on_change is not None:
            self._on_change(state)
