"""Content policy and report/ban moderation."""

from gossipcast.moderation.content_policy import (
    ContentPolicy,
    ContentRule,
    default_content_policy,
    load_content_policy,
)
from gossipcast.moderation.ledger import ModerationLedger
from gossipcast.moderation.models import PolicyDecision, Report, ReportStatus

__all__ = [
    "ContentPolicy",
    "ContentRule",
    "default_content_policy",
    "load_content_policy",
    "ModerationLedger",
    "PolicyDecision",
    "Report",
    "ReportStatus",
]
