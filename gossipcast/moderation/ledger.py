"""Report intake, severity classification and device bans.

Every report is kept (in memory) for a retention window.  A report whose
reason names a severe category, or whose content contains a severe term,
bans the reporting device immediately and permanently.  There is no review
step before the ban and no way to lift it.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Iterable, Optional

from gossipcast.errors import MissingField, ReportNotFound
from gossipcast.moderation.models import LedgerSummary, Report, ReportStatus

logger = logging.getLogger(__name__)

SEVERE_REASONS: tuple[str, ...] = (
    "harassment", "괴롭힘/혐오",
    "violence", "폭력적 내용",
    "sexual", "성적인 내용",
)

SEVERE_TERMS: tuple[str, ...] = ("죽", "살인", "강간", "테러", "자살", "죽어", "죽일")

_MISSING_FIELDS = "필수 정보가 누락되었습니다."


def _local_now() -> datetime:
    return datetime.now().astimezone()


class ModerationLedger:
    """In-memory report log plus the set of banned devices."""

    def __init__(
        self,
        severe_reasons: Iterable[str] = SEVERE_REASONS,
        severe_terms: Iterable[str] = SEVERE_TERMS,
        clock: Callable[[], datetime] = _local_now,
    ) -> None:
        self._severe_reasons = tuple(severe_reasons)
        self._severe_terms = tuple(severe_terms)
        self._clock = clock
        self._reports: list[Report] = []
        self._banned: set[str] = set()

    # -- intake --------------------------------------------------------------

    def file_report(
        self,
        content: Optional[str],
        reason: Optional[str],
        device_id: Optional[str],
        metadata: Optional[dict[str, Any]] = None,
    ) -> Report:
        """Record a pending report and ban the device on a severe violation."""
        if not content or not reason or not device_id:
            raise MissingField(_MISSING_FIELDS)

        report = Report(
            content=content,
            reason=reason,
            device_id=device_id,
            reported_at=self._clock(),
            metadata=dict(metadata or {}),
        )
        self._reports.append(report)
        logger.info("Report %s filed: %r (reason: %s)", report.id, content, reason)

        if self.is_severe(content, reason):
            self.ban(device_id)
        return report

    def is_severe(self, content: str, reason: str) -> bool:
        """True if *reason* names a severe category or *content* has a severe term."""
        if any(severe in reason for severe in self._severe_reasons):
            return True
        return any(term in content for term in self._severe_terms)

    # -- bans ----------------------------------------------------------------

    def ban(self, device_id: str) -> None:
        if device_id not in self._banned:
            self._banned.add(device_id)
            logger.warning("Device %s banned automatically (severe violation)", device_id)

    def is_banned(self, device_id: Optional[str]) -> bool:
        return device_id is not None and device_id in self._banned

    @property
    def banned_count(self) -> int:
        return len(self._banned)

    # -- queries -------------------------------------------------------------

    def get(self, report_id: str) -> Report:
        for report in self._reports:
            if report.id == report_id:
                return report
        raise ReportNotFound(f"Report {report_id} not found")

    def mark_reviewed(self, report_id: str) -> Report:
        """Flag a report as reviewed. Bans already applied stay in place."""
        report = self.get(report_id)
        report.status = ReportStatus.REVIEWED
        return report

    def list_recent(self, limit: int = 50) -> list[Report]:
        """Return the last *limit* reports in filing order."""
        if limit <= 0:
            return []
        return list(self._reports[-limit:])

    def summary(self) -> LedgerSummary:
        return LedgerSummary(
            total=len(self._reports),
            pending=sum(1 for r in self._reports if r.status == ReportStatus.PENDING),
            banned=len(self._banned),
        )

    def __len__(self) -> int:
        return len(self._reports)

    # -- retention -----------------------------------------------------------

    def prune_older_than(self, retention_days: int = 7, now: Optional[datetime] = None) -> int:
        """Drop reports filed before ``now - retention_days``. Returns the count removed."""
        cutoff = (now or self._clock()) - timedelta(days=retention_days)
        before = len(self._reports)
        self._reports = [r for r in self._reports if r.reported_at > cutoff]
        removed = before - len(self._reports)
        if removed:
            logger.info("Pruned %d report(s) older than %d day(s)", removed, retention_days)
        return removed
