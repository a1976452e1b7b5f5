"""Background housekeeping: the midnight quota reset and daily report pruning."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from gossipcast.moderation.ledger import ModerationLedger
from gossipcast.quota import QuotaTracker, next_local_midnight

logger = logging.getLogger(__name__)

DAY_SECONDS = 24 * 60 * 60


def seconds_until_midnight(now: datetime) -> float:
    # Compare in UTC; same-tzinfo subtraction ignores a DST offset change.
    midnight = next_local_midnight(now).astimezone(timezone.utc)
    return max((midnight - now.astimezone(timezone.utc)).total_seconds(), 0.0)


class MaintenanceTasks:
    """Owns the periodic asyncio tasks sharing state with request handlers."""

    def __init__(
        self,
        quota: QuotaTracker,
        ledger: ModerationLedger,
        retention_days: int = 7,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._quota = quota
        self._ledger = ledger
        self._retention_days = retention_days
        self._clock = clock or (lambda: datetime.now().astimezone())
        self._tasks: list[asyncio.Task] = []

    # -- jobs ----------------------------------------------------------------

    def reset_quota(self) -> None:
        logger.info("Midnight: resetting daily usage")
        self._quota.reset()

    def prune_reports(self) -> int:
        return self._ledger.prune_older_than(self._retention_days, now=self._clock())

    # -- loops ---------------------------------------------------------------

    async def _quota_reset_loop(self) -> None:
        while True:
            await asyncio.sleep(seconds_until_midnight(self._clock()))
            try:
                self.reset_quota()
            except Exception:
                logger.exception("Daily usage reset failed")

    async def _pruning_loop(self) -> None:
        while True:
            await asyncio.sleep(DAY_SECONDS)
            try:
                self.prune_reports()
            except Exception:
                logger.exception("Report pruning failed")

    # -- lifecycle -----------------------------------------------------------

    @property
    def running(self) -> bool:
        return any(not t.done() for t in self._tasks)

    def start(self) -> None:
        """Schedule both loops on the running event loop."""
        if self.running:
            return
        self._tasks = [
            asyncio.create_task(self._quota_reset_loop(), name="gossipcast-quota-reset"),
            asyncio.create_task(self._pruning_loop(), name="gossipcast-report-pruning"),
        ]

    async def stop(self) -> None:
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
