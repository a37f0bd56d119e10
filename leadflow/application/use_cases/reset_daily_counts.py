"""ResetDailyCountsUseCase — start a new counting day for every active employee."""

from __future__ import annotations

import logging

from leadflow.application.ports.counter_store import CounterStore

logger = logging.getLogger(__name__)


class ResetDailyCountsUseCase:
    def __init__(self, counter_store: CounterStore):
        self._counters = counter_store

    async def execute(self) -> int:
        reset = await self._counters.reset_daily()
        logger.info("Reset today_count for %d active employee(s)", reset)
        return reset
