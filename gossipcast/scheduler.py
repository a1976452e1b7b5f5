"""Single-slot display rotation.

Accepted items wait in a FIFO queue.  One item at a time is shown to every
observer for ``display_seconds``, counting down once per second; when the
countdown reaches zero the item is discarded and, after a ``pacing_seconds``
gap, the next queued item (if any) takes the slot.  An item on display is
never cut short.

All methods are meant to run on one event loop; timers fire on that same
loop, so promotion can never race with an enqueue.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, Optional

from gossipcast.broadcast import COUNTDOWN, GOSSIP_DISPLAY, Publisher
from gossipcast.models import DisplayPhase, DisplayState, GossipItem
from gossipcast.timers import TimerHandle, TimerService

logger = logging.getLogger(__name__)

DISPLAY_SECONDS = 5
PACING_SECONDS = 1.0
_TICK_SECONDS = 1.0


class DisplayScheduler:
    """Owns the pending queue, the display slot and its countdown timers."""

    def __init__(
        self,
        publisher: Publisher,
        timers: TimerService,
        display_seconds: int = DISPLAY_SECONDS,
        pacing_seconds: float = PACING_SECONDS,
    ) -> None:
        if display_seconds < 1:
            raise ValueError("display_seconds must be at least 1")
        self._publisher = publisher
        self._timers = timers
        self.display_seconds = display_seconds
        self.pacing_seconds = pacing_seconds
        self._queue: deque[GossipItem] = deque()
        self._state = DisplayState()
        self._timer: Optional[TimerHandle] = None

    # -- introspection -------------------------------------------------------

    @property
    def phase(self) -> DisplayPhase:
        return self._state.phase

    @property
    def is_idle(self) -> bool:
        return self._state.phase is DisplayPhase.IDLE

    @property
    def active_item(self) -> Optional[GossipItem]:
        return self._state.item if self._state.is_showing else None

    @property
    def time_left(self) -> int:
        return self._state.remaining if self._state.is_showing else 0

    @property
    def queue_length(self) -> int:
        return len(self._queue)

    def pending(self) -> list[GossipItem]:
        return list(self._queue)

    def current_state(self) -> dict[str, Any]:
        """Snapshot sent to observers when they connect."""
        item = self.active_item
        return {
            "activeGossip": item.to_public_dict() if item else None,
            "queueLength": self.queue_length,
        }

    # -- transitions ---------------------------------------------------------

    def enqueue(self, item: GossipItem) -> int:
        """Queue *item*; promote right away if the slot is idle.

        Returns the queue length right after the append, i.e. the item's
        position in line at acceptance time.
        """
        self._queue.append(item)
        position = len(self._queue)
        if self.is_idle:
            self.promote()
        return position

    def promote(self) -> None:
        """Move the next queued item into the slot, or go idle."""
        self._cancel_timer()
        if not self._queue:
            self._state = DisplayState()
            self._publisher.publish(GOSSIP_DISPLAY, {"gossip": None, "timeLeft": 0})
            return

        item = self._queue.popleft()
        self._state = DisplayState(
            phase=DisplayPhase.SHOWING,
            item=item,
            remaining=self.display_seconds,
        )
        logger.info("Displaying %s: %r", item.id, item.content)
        self._publisher.publish(
            GOSSIP_DISPLAY,
            {
                "gossip": item.to_public_dict(),
                "timeLeft": self.display_seconds,
                "queueLength": len(self._queue),
            },
        )
        self._timer = self._timers.call_later(_TICK_SECONDS, self.tick)

    def tick(self) -> None:
        """One second of countdown for the item on display."""
        self._timer = None
        if not self._state.is_showing:
            return

        self._state.remaining -= 1
        item = self._state.item
        self._publisher.publish(
            COUNTDOWN,
            {"timeLeft": self._state.remaining, "gossip": item.to_public_dict()},
        )

        if self._state.remaining > 0:
            self._timer = self._timers.call_later(_TICK_SECONDS, self.tick)
            return

        logger.info("Discarded %s: %r", item.id, item.content)
        self._state = DisplayState(phase=DisplayPhase.PACING)
        self._timer = self._timers.call_later(self.pacing_seconds, self.promote)

    def shutdown(self) -> None:
        """Cancel any pending countdown or pacing timer."""
        self._cancel_timer()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
