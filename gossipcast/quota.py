"""Per-device daily submission quotas.

Counters are keyed by ``(device_id, calendar day)`` in server-local time and
kept in memory.  :meth:`QuotaTracker.reset` wipes every counter at once; the
maintenance task calls it at local midnight, so a device's allowance renews at
midnight regardless of when it was first used.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_DAILY_LIMIT = 3


@dataclass(frozen=True)
class QuotaStatus:
    """Snapshot of a device's allowance for one day."""

    allowed: bool = True
    usage: int = 0
    remaining: int = DEFAULT_DAILY_LIMIT
    limit: int = DEFAULT_DAILY_LIMIT


def _local_now() -> datetime:
    return datetime.now().astimezone()


def next_local_midnight(now: datetime) -> datetime:
    """The first instant of the day after *now*, in *now*'s timezone.

    ``datetime.now().astimezone()`` attaches a fixed offset, which is wrong
    for tomorrow on a DST-transition day.  Such datetimes (and naive ones) are
    resolved against the host timezone so the result carries tomorrow's
    offset.  Zone-aware tzinfos work out their own offset.
    """
    midnight = datetime.combine(now.date() + timedelta(days=1), time.min)
    if now.tzinfo is None:
        return midnight.astimezone()
    if isinstance(now.tzinfo, timezone) and now.utcoffset() == now.astimezone().utcoffset():
        return midnight.astimezone()
    return midnight.replace(tzinfo=now.tzinfo)


class QuotaTracker:
    """In-memory daily usage counters."""

    def __init__(
        self,
        daily_limit: int = DEFAULT_DAILY_LIMIT,
        clock: Callable[[], datetime] = _local_now,
    ) -> None:
        self.daily_limit = daily_limit
        self._clock = clock
        self._counts: dict[tuple[str, date], int] = {}

    def _key(self, device_id: str, now: Optional[datetime]) -> tuple[str, date]:
        return device_id, (now or self._clock()).date()

    # -- querying ------------------------------------------------------------

    def usage(self, device_id: str, now: Optional[datetime] = None) -> int:
        return self._counts.get(self._key(device_id, now), 0)

    def check(self, device_id: str, now: Optional[datetime] = None) -> QuotaStatus:
        """Evaluate the allowance without consuming it."""
        used = self.usage(device_id, now)
        return QuotaStatus(
            allowed=used < self.daily_limit,
            usage=used,
            remaining=max(self.daily_limit - used, 0),
            limit=self.daily_limit,
        )

    def next_reset(self, now: Optional[datetime] = None) -> datetime:
        return next_local_midnight(now or self._clock())

    # -- recording -----------------------------------------------------------

    def increment(self, device_id: str, now: Optional[datetime] = None) -> int:
        """Count one accepted submission and return the new total."""
        key = self._key(device_id, now)
        count = min(self._counts.get(key, 0) + 1, self.daily_limit)
        self._counts[key] = count
        return count

    def check_and_increment(self, device_id: str, now: Optional[datetime] = None) -> QuotaStatus:
        """Consume one unit if available; ``allowed=False`` means exceeded."""
        status = self.check(device_id, now)
        if not status.allowed:
            return status
        used = self.increment(device_id, now)
        return QuotaStatus(
            allowed=True,
            usage=used,
            remaining=max(self.daily_limit - used, 0),
            limit=self.daily_limit,
        )

    def reset(self) -> int:
        """Clear every counter. Returns how many were dropped."""
        dropped = len(self._counts)
        self._counts.clear()
        logger.info("Daily usage reset (%d counter(s) cleared)", dropped)
        return dropped
