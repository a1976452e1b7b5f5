"""Shared fakes: a manual timer service, a fixed clock and a recording publisher."""

from __future__ import annotations

import itertools
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any, Callable

import pytest

from gossipcast.config import Settings
from gossipcast.state import build_state

KST = timezone(timedelta(hours=9))


class SpringForward(tzinfo):
    """UTC-5 until 2026-03-08 02:00 local time, UTC-4 from then on."""

    _SWITCH = datetime(2026, 3, 8, 2, 0)

    def utcoffset(self, dt):
        return timedelta(hours=-4) if dt.replace(tzinfo=None) >= self._SWITCH else timedelta(hours=-5)

    def dst(self, dt):
        return self.utcoffset(dt) + timedelta(hours=5)

    def tzname(self, dt):
        return "EDT" if self.dst(dt) else "EST"


class _ManualHandle:
    def __init__(self, due: float, seq: int, callback: Callable[[], None]) -> None:
        self.due = due
        self.seq = seq
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualTimers:
    """Timer service driven by :meth:`advance` instead of wall time."""

    def __init__(self) -> None:
        self.now = 0.0
        self._seq = itertools.count()
        self._pending: list[_ManualHandle] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> _ManualHandle:
        handle = _ManualHandle(self.now + delay, next(self._seq), callback)
        self._pending.append(handle)
        return handle

    @property
    def pending(self) -> list[_ManualHandle]:
        return [h for h in self._pending if not h.cancelled]

    def advance(self, seconds: float) -> None:
        """Fire every timer due within *seconds*, in due order, including new ones."""
        target = self.now + seconds
        while True:
            self._pending = [h for h in self._pending if not h.cancelled]
            due = [h for h in self._pending if h.due <= target + 1e-9]
            if not due:
                break
            handle = min(due, key=lambda h: (h.due, h.seq))
            self._pending.remove(handle)
            self.now = handle.due
            handle.callback()
        self.now = target


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: Any) -> None:
        self.now = self.now + timedelta(**kwargs)


class RecordingPublisher:
    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def publish(self, event: str, payload: dict[str, Any]) -> None:
        self.events.append((event, payload))

    def of(self, event: str) -> list[dict[str, Any]]:
        return [payload for name, payload in self.events if name == event]

    def names(self) -> list[str]:
        return [name for name, _ in self.events]


@pytest.fixture
def timers() -> ManualTimers:
    return ManualTimers()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 10, 18, 12, 0, tzinfo=KST))


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def state(timers, clock):
    return build_state(Settings(), timers=timers, clock=clock)
