"""Fan-out of display events to every connected observer.

Each observer gets a bounded :class:`asyncio.Queue` of ``{"event", "data"}``
messages.  Publishing never blocks: an observer that stops draining its
queue is dropped once the queue fills up.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

logger = logging.getLogger(__name__)

NEW_GOSSIP = "new-gossip"
GOSSIP_DISPLAY = "gossip-display"
COUNTDOWN = "countdown"
CURRENT_STATE = "current-state"

_QUEUE_SIZE = 100


class Publisher(Protocol):
    """Anything that can fan an event out to observers."""

    def publish(self, event: str, payload: dict[str, Any]) -> None: ...


_ids = itertools.count(1)


@dataclass(eq=False)
class Subscription:
    """One connected observer."""

    id: int = field(default_factory=lambda: next(_ids))
    queue: asyncio.Queue = field(default_factory=lambda: asyncio.Queue(maxsize=_QUEUE_SIZE))
    closed: bool = False

    async def receive(self) -> dict[str, Any]:
        return await self.queue.get()


class BroadcastGateway:
    """In-process publish/subscribe hub."""

    def __init__(self) -> None:
        self._subscribers: list[Subscription] = []

    @property
    def connection_count(self) -> int:
        return len(self._subscribers)

    def connect(self, snapshot: dict[str, Any]) -> Subscription:
        """Register an observer; its first message is the *snapshot* as ``current-state``."""
        sub = Subscription()
        sub.queue.put_nowait({"event": CURRENT_STATE, "data": snapshot})
        self._subscribers.append(sub)
        logger.info("Observer %d connected (%d total)", sub.id, len(self._subscribers))
        return sub

    def disconnect(self, sub: Subscription) -> None:
        if sub in self._subscribers:
            sub.closed = True
            self._subscribers.remove(sub)
            logger.info("Observer %d disconnected (%d total)", sub.id, len(self._subscribers))

    def publish(self, event: str, payload: dict[str, Any]) -> None:
        message = {"event": event, "data": payload}
        for sub in list(self._subscribers):
            try:
                sub.queue.put_nowait(message)
            except asyncio.QueueFull:
                logger.warning("Observer %d is not draining events; dropping it", sub.id)
                sub.closed = True
                self._subscribers.remove(sub)
