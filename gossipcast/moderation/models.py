"""Data models for content moderation and reports."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class PolicyDecision:
    """Result of evaluating content against the content policy."""

    allowed: bool
    reason: str = ""
    violation_type: str = ""  # "profanity" | "contact_info" | "repetition" | "numeric_only" | ""
    rule: str = ""


ALLOWED = PolicyDecision(allowed=True)


class ReportStatus(Enum):
    PENDING = "pending"
    REVIEWED = "reviewed"


@dataclass
class Report:
    """A user report against a displayed message."""

    content: str
    reason: str
    device_id: str
    reported_at: datetime
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    status: ReportStatus = ReportStatus.PENDING
    # Client-supplied extras (original timestamp, app version).
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class LedgerSummary:
    """Aggregate counts for the admin view."""

    total: int = 0
    pending: int = 0
    banned: int = 0
