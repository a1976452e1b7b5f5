"""Error taxonomy for gossip submission and report intake.

Every error carries the HTTP status it is surfaced with; the web layer turns
them into ``{"error": message}`` responses.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gossipcast.moderation.models import PolicyDecision


class GossipError(Exception):
    """Base class for request-terminal, user-facing errors."""

    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SubmissionRejected(GossipError):
    """A gossip submission was refused by the gate chain."""


class ValidationError(SubmissionRejected):
    """Empty or over-long content, or a missing device id."""

    status_code = 400


class PolicyViolation(SubmissionRejected):
    """Content was filtered by the content policy."""

    status_code = 400

    def __init__(self, decision: PolicyDecision) -> None:
        super().__init__(decision.reason)
        self.decision = decision

    @property
    def violation_type(self) -> str:
        return self.decision.violation_type


class QuotaExceeded(SubmissionRejected):
    """The device used up its daily allowance. Clears at the next reset."""

    status_code = 429


class Forbidden(SubmissionRejected):
    """The device is banned. Bans never expire."""

    status_code = 403


class MissingField(GossipError):
    """A required report field was absent."""

    status_code = 400


class ReportNotFound(GossipError):
    status_code = 404
