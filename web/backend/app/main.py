"""FastAPI application for the gossipcast broadcaster.

Provides:
- Gossip submission and per-device usage lookups
- Report intake and the admin report listing
- A WebSocket stream of display events
- A status snapshot at ``/``
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

# Ensure the gossipcast package is importable by adding the project root to sys.path.
_project_root = str(Path(__file__).resolve().parents[3])
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gossipcast import __version__
from gossipcast.config import load_settings
from gossipcast.errors import GossipError
from gossipcast.state import AppState, build_state
from web.backend.app.dependencies import get_state
from web.backend.app.models.api import GossipResponse, StatusResponse
from web.backend.app.routers import gossip, realtime, reports

logger = logging.getLogger(__name__)

_BAD_REQUEST = "잘못된 요청입니다."


def create_app(state: Optional[AppState] = None) -> FastAPI:
    """Build the API around *state* (a fresh one from the environment if omitted)."""
    state = state or build_state(load_settings())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        state.maintenance.start()
        logger.info("gossipcast %s ready", __version__)
        try:
            yield
        finally:
            state.scheduler.shutdown()
            await state.maintenance.stop()

    app = FastAPI(
        title="gossipcast API",
        description=(
            "Anonymous, ephemeral message broadcaster. Messages are shown one "
            "at a time to every connected client for a few seconds, then discarded."
        ),
        version=__version__,
        lifespan=lifespan,
    )
    app.state.gossip = state

    # -----------------------------------------------------------------------
    # CORS middleware (mobile clients connect from anywhere)
    # -----------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(state.settings.cors_origins),
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # -----------------------------------------------------------------------
    # Error handlers
    # -----------------------------------------------------------------------

    @app.exception_handler(GossipError)
    async def gossip_error_handler(request: Request, exc: GossipError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.debug("Malformed request to %s: %s", request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"error": _BAD_REQUEST})

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------
    app.include_router(gossip.router)
    app.include_router(reports.router)
    app.include_router(realtime.router)

    # -----------------------------------------------------------------------
    # Root and health-check endpoints
    # -----------------------------------------------------------------------

    @app.get("/", response_model=StatusResponse, tags=["meta"])
    async def root(request: Request):
        """Return a live status snapshot."""
        current = get_state(request)
        item = current.scheduler.active_item
        summary = current.ledger.summary()
        return StatusResponse(
            message="gossipcast 서버가 실행중입니다!",
            active_users=current.gateway.connection_count,
            queue_length=current.scheduler.queue_length,
            current_gossip=GossipResponse(**item.to_public_dict()) if item else None,
            total_reports=summary.total,
            banned_users_count=summary.banned,
        )

    @app.get("/health", tags=["meta"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
