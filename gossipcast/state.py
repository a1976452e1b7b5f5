"""Application state container.

Everything the service mutates lives on one :class:`AppState`, built by
:func:`build_state` and attached to the FastAPI app.  Tests build their own
instance with fake timers and clocks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from gossipcast.broadcast import BroadcastGateway
from gossipcast.config import Settings
from gossipcast.maintenance import MaintenanceTasks
from gossipcast.moderation.content_policy import ContentPolicy, default_content_policy, load_content_policy
from gossipcast.moderation.ledger import ModerationLedger
from gossipcast.pipeline import SubmissionPipeline
from gossipcast.quota import QuotaTracker
from gossipcast.scheduler import DisplayScheduler
from gossipcast.timers import AsyncioTimerService, TimerService

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    settings: Settings
    gateway: BroadcastGateway
    scheduler: DisplayScheduler
    quota: QuotaTracker
    ledger: ModerationLedger
    policy: ContentPolicy
    pipeline: SubmissionPipeline
    maintenance: MaintenanceTasks


def build_state(
    settings: Optional[Settings] = None,
    *,
    timers: Optional[TimerService] = None,
    clock: Optional[Callable[[], datetime]] = None,
    policy: Optional[ContentPolicy] = None,
) -> AppState:
    """Wire a fresh, isolated set of components."""
    settings = settings or Settings()
    clock = clock or (lambda: datetime.now().astimezone())

    if policy is None:
        if settings.policy_file:
            policy = load_content_policy(settings.policy_file)
            logger.info("Loaded content policy %r from %s", policy.name, settings.policy_file)
        else:
            policy = default_content_policy()

    gateway = BroadcastGateway()
    scheduler = DisplayScheduler(
        publisher=gateway,
        timers=timers or AsyncioTimerService(),
        display_seconds=settings.display_seconds,
        pacing_seconds=settings.pacing_seconds,
    )
    quota = QuotaTracker(daily_limit=settings.daily_quota, clock=clock)
    ledger = ModerationLedger(clock=clock)
    pipeline = SubmissionPipeline(
        scheduler=scheduler,
        quota=quota,
        ledger=ledger,
        policy=policy,
        publisher=gateway,
        max_length=settings.max_content_length,
        clock=clock,
    )
    maintenance = MaintenanceTasks(
        quota=quota,
        ledger=ledger,
        retention_days=settings.report_retention_days,
        clock=clock,
    )
    return AppState(
        settings=settings,
        gateway=gateway,
        scheduler=scheduler,
        quota=quota,
        ledger=ledger,
        policy=policy,
        pipeline=pipeline,
        maintenance=maintenance,
    )
