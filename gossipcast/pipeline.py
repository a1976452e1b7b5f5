"""Submission gate chain: ban -> length -> content policy -> quota -> enqueue."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from gossipcast.broadcast import NEW_GOSSIP, Publisher
from gossipcast.errors import Forbidden, PolicyViolation, QuotaExceeded, ValidationError
from gossipcast.models import GossipItem
from gossipcast.moderation.content_policy import ContentPolicy
from gossipcast.moderation.ledger import ModerationLedger
from gossipcast.quota import QuotaTracker
from gossipcast.scheduler import DisplayScheduler

logger = logging.getLogger(__name__)

MAX_CONTENT_LENGTH = 50

_BANNED_MSG = "이용이 제한된 사용자입니다"
_MISSING_DEVICE_MSG = "기기 식별자가 필요합니다."
_QUOTA_MSG = "하루 {limit}번만 사용 가능합니다."


@dataclass(frozen=True)
class SubmissionResult:
    """An accepted submission."""

    item: GossipItem
    position: int
    usage: int


class SubmissionPipeline:
    def __init__(
        self,
        scheduler: DisplayScheduler,
        quota: QuotaTracker,
        ledger: ModerationLedger,
        policy: ContentPolicy,
        publisher: Publisher,
        max_length: int = MAX_CONTENT_LENGTH,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._scheduler = scheduler
        self._quota = quota
        self._ledger = ledger
        self._policy = policy
        self._publisher = publisher
        self.max_length = max_length
        self._clock = clock or (lambda: datetime.now().astimezone())

    def submit(
        self,
        content: Optional[str],
        device_id: Optional[str],
        now: Optional[datetime] = None,
    ) -> SubmissionResult:
        """Run the gate chain; raise a ``SubmissionRejected`` on the first failure.

        Rejections leave the queue and the quota untouched.
        """
        now = now or self._clock()

        if self._ledger.is_banned(device_id):
            logger.info("Rejected submission from banned device %s", device_id)
            raise Forbidden(_BANNED_MSG)

        if not device_id:
            raise ValidationError(_MISSING_DEVICE_MSG)

        text = (content or "").strip()
        if not text or len(text) > self.max_length:
            raise ValidationError(f"내용은 1-{self.max_length}자 사이여야 합니다.")

        decision = self._policy.evaluate(text)
        if not decision.allowed:
            logger.info("Rejected submission from %s: %s", device_id, decision.violation_type)
            raise PolicyViolation(decision)

        if not self._quota.check(device_id, now).allowed:
            logger.info("Rejected submission from %s: daily quota used up", device_id)
            raise QuotaExceeded(_QUOTA_MSG.format(limit=self._quota.daily_limit))

        item = GossipItem(content=text, submitter_id=device_id, created_at=now)
        position = self._scheduler.enqueue(item)
        usage = self._quota.increment(device_id, now)
        logger.info("Accepted %s: %r (queue length %d)", item.id, text, position)

        self._publisher.publish(
            NEW_GOSSIP,
            {"queueLength": self._scheduler.queue_length, "userUsage": usage},
        )
        return SubmissionResult(item=item, position=position, usage=usage)
