"""Stale-response guard.

Every async fetch driven by user-controlled parameters carries the snapshot it
was dispatched with. When it completes, its result is committed only if that
snapshot still equals the live parameters; otherwise it is dropped. In-flight
work is not cancelled, it just cannot reach the display any more.
"""

from collections.abc import Awaitable, Callable
from enum import Enum

from loguru import logger

from mediascope.core.infrastructure.logging import BusinessEvents
from mediascope.modules.browse.domain.snapshot import QuerySnapshot


class GuardOutcome(str, Enum):
    COMMITTED = "committed"
    DISCARDED = "discarded"
    FAILED = "failed"


class StaleResponseGuard[T]:
    """Commit-time filter comparing dispatch snapshot to live parameters."""

    def __init__(self, live_params: Callable[[], QuerySnapshot | None]) -> None:
        self._live_params = live_params

    def is_current(self, snapshot: QuerySnapshot) -> bool:
        return self._live_params() == snapshot

    async def guard(
        self,
        snapshot: QuerySnapshot,
        fetch: Callable[[], Awaitable[T]],
        on_commit: Callable[[T], None],
        on_failure: Callable[[Exception], None] | None = None,
    ) -> GuardOutcome:
        """Run ``fetch`` and commit its result only if ``snapshot`` is still live.

        A failing fetch is logged and handed to ``on_failure`` when it is
        still current; a stale failure is dropped like a stale result.
        """
        try:
            result = await fetch()
        except Exception as exc:
            if not self.is_current(snapshot):
                self._discard(snapshot)
                return GuardOutcome.DISCARDED
            logger.warning(f"加载数据失败 {snapshot.as_dict()}: {exc}")
            if on_failure is not None:
                on_failure(exc)
            return GuardOutcome.FAILED

        if not self.is_current(snapshot):
            self._discard(snapshot)
            return GuardOutcome.DISCARDED

        on_commit(result)
        return GuardOutcome.COMMITTED

    def _discard(self, snapshot: QuerySnapshot) -> None:
        live = self._live_params()
        BusinessEvents.stale_response_discarded(
            dispatched=snapshot.as_dict(),
            live=live.as_dict() if live is not None else {},
        )
