"""Tests for the submission gate chain."""

import pytest

from gossipcast.broadcast import GOSSIP_DISPLAY, NEW_GOSSIP
from gossipcast.errors import Forbidden, PolicyViolation, QuotaExceeded, ValidationError
from gossipcast.moderation.content_policy import default_content_policy
from gossipcast.moderation.ledger import ModerationLedger
from gossipcast.pipeline import SubmissionPipeline
from gossipcast.quota import QuotaTracker
from gossipcast.scheduler import DisplayScheduler


@pytest.fixture
def parts(publisher, timers, clock):
    scheduler = DisplayScheduler(publisher=publisher, timers=timers)
    quota = QuotaTracker(clock=clock)
    ledger = ModerationLedger(clock=clock)
    pipeline = SubmissionPipeline(
        scheduler=scheduler,
        quota=quota,
        ledger=ledger,
        policy=default_content_policy(),
        publisher=publisher,
        clock=clock,
    )
    return pipeline, scheduler, quota, ledger


def test_three_per_day_then_quota_exceeded(parts):
    pipeline, _, quota, _ = parts
    usages = [pipeline.submit("안녕", "d1").usage for _ in range(3)]
    assert usages == [1, 2, 3]

    with pytest.raises(QuotaExceeded) as exc_info:
        pipeline.submit("또", "d1")
    assert exc_info.value.status_code == 429
    assert quota.usage("d1") == 3


def test_length_checked_before_quota(parts):
    pipeline, *_ = parts
    for _ in range(3):
        pipeline.submit("안녕", "d1")
    with pytest.raises(ValidationError):
        pipeline.submit("", "d1")


def test_contact_info_rejected_regardless_of_quota(parts):
    pipeline, scheduler, quota, _ = parts
    with pytest.raises(PolicyViolation) as exc_info:
        pipeline.submit("010-1234-5678", "d1")
    assert exc_info.value.status_code == 400
    assert exc_info.value.violation_type == "contact_info"
    assert quota.usage("d1") == 0
    assert scheduler.is_idle


@pytest.mark.parametrize(
    "content, violation",
    [("ㅎㅎㅎㅎㅎ", "repetition"), ("1234567", "numeric_only"), ("이 바보야", "profanity")],
)
def test_policy_rejections(parts, content, violation):
    pipeline, scheduler, quota, _ = parts
    with pytest.raises(PolicyViolation) as exc_info:
        pipeline.submit(content, "d1")
    assert exc_info.value.violation_type == violation
    assert scheduler.queue_length == 0
    assert scheduler.active_item is None
    assert quota.usage("d1") == 0


@pytest.mark.parametrize("content", ["", "   ", None, "가" * 51])
def test_length_validation(parts, content):
    pipeline, _, quota, _ = parts
    with pytest.raises(ValidationError):
        pipeline.submit(content, "d1")
    assert quota.usage("d1") == 0


def test_fifty_chars_accepted_and_trimmed(parts):
    pipeline, *_ = parts
    result = pipeline.submit("  " + "가나" * 25 + "  ", "d1")
    assert result.item.content == "가나" * 25


def test_missing_device_id_is_validation_error(parts):
    pipeline, *_ = parts
    with pytest.raises(ValidationError):
        pipeline.submit("안녕", None)
    with pytest.raises(ValidationError):
        pipeline.submit("안녕", "")


def test_banned_device_rejected_before_anything_else(parts):
    pipeline, _, quota, ledger = parts
    ledger.file_report("아무말", "폭력적 내용", "d1")
    with pytest.raises(Forbidden) as exc_info:
        pipeline.submit("ㅎㅎㅎㅎㅎ", "d1")
    assert exc_info.value.status_code == 403
    with pytest.raises(Forbidden):
        pipeline.submit("안녕", "d1")
    assert quota.usage("d1") == 0


def test_accepted_item_becomes_active(parts, publisher):
    pipeline, scheduler, _, _ = parts
    result = pipeline.submit("안녕", "d1")
    assert result.position == 1
    assert scheduler.active_item is result.item
    assert result.item.submitter_id == "d1"
    assert publisher.names() == [GOSSIP_DISPLAY, NEW_GOSSIP]
    assert publisher.of(NEW_GOSSIP) == [{"queueLength": 0, "userUsage": 1}]


def test_second_submission_queues_behind_active(parts, timers):
    pipeline, scheduler, _, _ = parts
    a = pipeline.submit("첫번째", "d1").item
    b_result = pipeline.submit("두번째", "d2")
    assert b_result.position == 1
    assert scheduler.active_item is a
    assert scheduler.queue_length == 1

    timers.advance(6)
    assert scheduler.active_item is b_result.item
    assert scheduler.queue_length == 0
