"""Cancellable one-shot timers for the display countdown.

The scheduler only needs ``call_later(delay, callback)`` returning something
with ``cancel()``; :class:`AsyncioTimerService` provides that on the running
event loop, so timer callbacks run on the same loop as request handlers and
never interleave with them.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class TimerService(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class AsyncioTimerService:
    """Timers backed by ``loop.call_later`` on the running event loop."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)
