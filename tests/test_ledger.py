"""Tests for report intake, severity and bans."""

from datetime import timedelta

import pytest

from gossipcast.errors import MissingField, ReportNotFound
from gossipcast.moderation.ledger import ModerationLedger
from gossipcast.moderation.models import ReportStatus


def test_file_report_is_pending(clock):
    ledger = ModerationLedger(clock=clock)
    report = ledger.file_report("별로다", "spam", "d1", {"app_version": "1.2.0"})
    assert report.status == ReportStatus.PENDING
    assert report.reported_at == clock.now
    assert report.metadata["app_version"] == "1.2.0"
    assert len(ledger) == 1
    assert not ledger.is_banned("d1")


@pytest.mark.parametrize(
    "content, reason, device_id",
    [("", "spam", "d1"), ("내용", "", "d1"), ("내용", "spam", None)],
)
def test_missing_fields_rejected(content, reason, device_id):
    ledger = ModerationLedger()
    with pytest.raises(MissingField) as exc_info:
        ledger.file_report(content, reason, device_id)
    assert exc_info.value.status_code == 400
    assert len(ledger) == 0


def test_severe_reason_bans_immediately():
    ledger = ModerationLedger()
    ledger.file_report("아무말", "폭력적 내용", "d1")
    assert ledger.is_banned("d1")


def test_severe_reason_matches_as_substring():
    ledger = ModerationLedger()
    assert ledger.is_severe("아무말", "category: harassment")


def test_severe_term_in_content_bans():
    ledger = ModerationLedger()
    ledger.file_report("죽을래", "other", "d2")
    assert ledger.is_banned("d2")


def test_severe_terms_are_case_sensitive():
    ledger = ModerationLedger(severe_reasons=[], severe_terms=["Kill"])
    assert ledger.is_severe("Kill it", "other")
    assert not ledger.is_severe("kill it", "other")


def test_mild_report_does_not_ban():
    ledger = ModerationLedger()
    assert not ledger.is_severe("그냥 싫음", "spam")
    ledger.file_report("그냥 싫음", "spam", "d3")
    assert not ledger.is_banned("d3")


def test_ban_is_permanent_after_review():
    ledger = ModerationLedger()
    report = ledger.file_report("아무말", "sexual", "d1")
    ledger.mark_reviewed(report.id)
    assert ledger.get(report.id).status == ReportStatus.REVIEWED
    assert ledger.is_banned("d1")


def test_unknown_report_not_found():
    with pytest.raises(ReportNotFound):
        ModerationLedger().mark_reviewed("nope")


def test_list_recent_keeps_filing_order():
    ledger = ModerationLedger()
    for i in range(5):
        ledger.file_report(f"내용 {i}", "spam", f"d{i}")
    recent = ledger.list_recent(3)
    assert [r.content for r in recent] == ["내용 2", "내용 3", "내용 4"]
    assert ledger.list_recent(0) == []


def test_summary_counts():
    ledger = ModerationLedger()
    first = ledger.file_report("a", "spam", "d1")
    ledger.file_report("b", "violence", "d2")
    ledger.file_report("c", "violence", "d2")
    ledger.mark_reviewed(first.id)

    summary = ledger.summary()
    assert summary.total == 3
    assert summary.pending == 2
    assert summary.banned == 1


def test_prune_drops_reports_past_retention(clock):
    ledger = ModerationLedger(clock=clock)
    ledger.file_report("old", "spam", "d1")
    clock.advance(days=3)
    ledger.file_report("newer", "spam", "d2")
    clock.advance(days=5)

    removed = ledger.prune_older_than(7)
    assert removed == 1
    assert [r.content for r in ledger.list_recent()] == ["newer"]


def test_prune_uses_explicit_now(clock):
    ledger = ModerationLedger(clock=clock)
    ledger.file_report("x", "spam", "d1")
    assert ledger.prune_older_than(7, now=clock.now + timedelta(days=6)) == 0
    assert ledger.prune_older_than(7, now=clock.now + timedelta(days=8)) == 1
