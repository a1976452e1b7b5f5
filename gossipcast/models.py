"""Core data models for gossip items and the display slot."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


def _now() -> datetime:
    return datetime.now().astimezone()


@dataclass(frozen=True)
class GossipItem:
    """A single ephemeral message, immutable once accepted."""

    content: str
    submitter_id: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=_now)

    def to_public_dict(self) -> dict[str, Any]:
        """Wire form broadcast to observers. The submitter stays anonymous."""
        return {
            "id": self.id,
            "content": self.content,
            "createdAt": self.created_at.isoformat(),
        }


class DisplayPhase(Enum):
    """Lifecycle of the single display slot."""

    IDLE = "idle"
    SHOWING = "showing"
    PACING = "pacing"  # gap after a discard; reads as idle, promotion already pending


@dataclass
class DisplayState:
    """The one process-wide display slot."""

    phase: DisplayPhase = DisplayPhase.IDLE
    item: Optional[GossipItem] = None
    remaining: int = 0

    @property
    def is_showing(self) -> bool:
        return self.phase is DisplayPhase.SHOWING
