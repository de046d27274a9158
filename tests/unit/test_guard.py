"""StaleResponseGuard 单元测试。"""

from unittest.mock import AsyncMock, Mock

import pytest

from mediascope.modules.browse.application.guard import GuardOutcome, StaleResponseGuard
from mediascope.modules.browse.domain.snapshot import BrowseParams, QuerySnapshot

pytestmark = pytest.mark.anyio


class LiveParams:
    """可变的"当前参数"，模拟 UI 状态。"""

    def __init__(self, snapshot: QuerySnapshot | None) -> None:
        self.snapshot = snapshot

    def __call__(self) -> QuerySnapshot | None:
        return self.snapshot


def _snapshot(category: str, page: int = 0) -> QuerySnapshot:
    return QuerySnapshot(BrowseParams(category=category), page=page)


class TestStaleResponseGuard:
    """过期响应保护测试。"""

    async def test_commits_when_params_unchanged(self):
        live = LiveParams(_snapshot("热门"))
        on_commit = Mock()

        outcome = await StaleResponseGuard(live).guard(
            _snapshot("热门"), AsyncMock(return_value=["a"]), on_commit
        )

        assert outcome == GuardOutcome.COMMITTED
        on_commit.assert_called_once_with(["a"])

    async def test_discards_when_params_changed_during_fetch(self):
        live = LiveParams(_snapshot("热门"))
        on_commit = Mock()

        async def fetch():
            live.snapshot = _snapshot("最新")
            return ["stale"]

        outcome = await StaleResponseGuard(live).guard(
            _snapshot("热门"), fetch, on_commit
        )

        assert outcome == GuardOutcome.DISCARDED
        on_commit.assert_not_called()

    async def test_page_change_counts_as_stale(self):
        live = LiveParams(_snapshot("热门", page=1))
        on_commit = Mock()

        outcome = await StaleResponseGuard(live).guard(
            _snapshot("热门", page=0), AsyncMock(return_value=[]), on_commit
        )

        assert outcome == GuardOutcome.DISCARDED
        on_commit.assert_not_called()

    async def test_current_failure_reported(self):
        live = LiveParams(_snapshot("热门"))
        on_commit = Mock()
        on_failure = Mock()
        error = RuntimeError("network")

        outcome = await StaleResponseGuard(live).guard(
            _snapshot("热门"),
            AsyncMock(side_effect=error),
            on_commit,
            on_failure,
        )

        assert outcome == GuardOutcome.FAILED
        on_failure.assert_called_once_with(error)
        on_commit.assert_not_called()

    async def test_stale_failure_dropped(self):
        live = LiveParams(_snapshot("热门"))
        on_failure = Mock()

        async def fetch():
            live.snapshot = _snapshot("最新")
            raise RuntimeError("network")

        outcome = await StaleResponseGuard(live).guard(
            _snapshot("热门"), fetch, Mock(), on_failure
        )

        assert outcome == GuardOutcome.DISCARDED
        on_failure.assert_not_called()

    async def test_failure_without_handler(self):
        live = LiveParams(_snapshot("热门"))

        outcome = await StaleResponseGuard(live).guard(
            _snapshot("热门"), AsyncMock(side_effect=ValueError("x")), Mock()
        )

        assert outcome == GuardOutcome.FAILED

    def test_is_current_compares_by_value(self):
        guard = StaleResponseGuard(LiveParams(_snapshot("热门")))

        assert guard.is_current(_snapshot("热门"))
        assert not guard.is_current(_snapshot("热门", page=1))

    def test_nothing_dispatched_is_never_current(self):
        guard = StaleResponseGuard(LiveParams(None))

        assert not guard.is_current(_snapshot("热门"))
