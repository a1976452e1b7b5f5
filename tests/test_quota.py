"""Tests for per-device daily quotas."""

from datetime import datetime, timedelta

from gossipcast.quota import QuotaTracker, next_local_midnight

from conftest import KST, SpringForward

NOON = datetime(2026, 10, 18, 12, 0, tzinfo=KST)


def test_fresh_device_has_full_allowance():
    tracker = QuotaTracker()
    status = tracker.check("d1", NOON)
    assert status.allowed
    assert status.usage == 0
    assert status.remaining == 3


def test_check_does_not_consume():
    tracker = QuotaTracker()
    for _ in range(5):
        tracker.check("d1", NOON)
    assert tracker.usage("d1", NOON) == 0


def test_check_and_increment_until_exceeded():
    tracker = QuotaTracker()
    usages = [tracker.check_and_increment("d1", NOON).usage for _ in range(3)]
    assert usages == [1, 2, 3]

    fourth = tracker.check_and_increment("d1", NOON)
    assert not fourth.allowed
    assert fourth.usage == 3
    assert fourth.remaining == 0
    assert tracker.usage("d1", NOON) == 3


def test_devices_are_independent():
    tracker = QuotaTracker()
    for _ in range(3):
        tracker.increment("d1", NOON)
    assert tracker.check("d2", NOON).allowed


def test_counter_is_per_calendar_day():
    tracker = QuotaTracker()
    for _ in range(3):
        tracker.increment("d1", NOON)
    tomorrow = NOON + timedelta(days=1)
    assert not tracker.check("d1", NOON).allowed
    assert tracker.check("d1", tomorrow).allowed


def test_reset_clears_every_device():
    tracker = QuotaTracker()
    tracker.increment("d1", NOON)
    tracker.increment("d2", NOON)
    assert tracker.reset() == 2
    assert tracker.usage("d1", NOON) == 0
    assert tracker.usage("d2", NOON) == 0


def test_custom_limit():
    tracker = QuotaTracker(daily_limit=1)
    assert tracker.check_and_increment("d1", NOON).allowed
    assert not tracker.check_and_increment("d1", NOON).allowed


def test_default_clock_is_used_without_now(clock):
    tracker = QuotaTracker(clock=clock)
    tracker.increment("d1")
    assert tracker.usage("d1", clock.now) == 1


def test_next_reset_is_local_midnight():
    assert next_local_midnight(NOON) == datetime(2026, 10, 19, 0, 0, tzinfo=KST)
    tracker = QuotaTracker()
    assert tracker.next_reset(NOON).isoformat() == "2026-10-19T00:00:00+09:00"


def test_next_reset_carries_tomorrows_dst_offset():
    now = datetime(2026, 3, 8, 0, 30, tzinfo=SpringForward())
    midnight = next_local_midnight(now)
    assert (midnight.year, midnight.month, midnight.day, midnight.hour) == (2026, 3, 9, 0)
    assert midnight.utcoffset() == timedelta(hours=-4)
