"""Gossip submission and usage router."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from gossipcast.errors import Forbidden
from gossipcast.state import AppState
from web.backend.app.dependencies import get_state
from web.backend.app.models.api import (
    ErrorResponse,
    GossipSubmitRequest,
    GossipSubmitResponse,
    UsageResponse,
)

router = APIRouter(prefix="/api", tags=["gossip"])

_ERRORS = {
    400: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    429: {"model": ErrorResponse},
}


@router.post("/gossip", response_model=GossipSubmitResponse, responses=_ERRORS)
async def submit_gossip(req: GossipSubmitRequest, state: AppState = Depends(get_state)):
    """Submit a message for display. Rejections surface as ``{"error": ...}``."""
    result = state.pipeline.submit(req.content, req.device_id)
    return GossipSubmitResponse(
        success=True,
        queue_position=result.position,
        user_usage=result.usage,
    )


@router.get("/usage/{device_id}", response_model=UsageResponse, responses={403: {"model": ErrorResponse}})
async def get_usage(device_id: str, state: AppState = Depends(get_state)):
    """Today's usage for a device and when it resets."""
    if state.ledger.is_banned(device_id):
        raise Forbidden("이용이 제한된 사용자입니다.")

    status = state.quota.check(device_id)
    return UsageResponse(
        usage=status.usage,
        remaining=status.remaining,
        reset_time=state.quota.next_reset().isoformat(),
    )
