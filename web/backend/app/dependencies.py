"""FastAPI dependencies exposing the application state."""

from __future__ import annotations

from fastapi import Request

from gossipcast.state import AppState


def get_state(request: Request) -> AppState:
    """Return the :class:`AppState` attached to the running app."""
    return request.app.state.gossip
