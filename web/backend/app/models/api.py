"""Pydantic models for API request/response serialization.

Field names are snake_case in Python and camelCase on the wire, matching what
the mobile client sends and expects.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Gossip models
# ---------------------------------------------------------------------------


class GossipResponse(BaseModel):
    """Mirrors gossipcast.models.GossipItem (public form)."""

    id: str
    content: str
    created_at: str = Field("", alias="createdAt")

    model_config = {"populate_by_name": True}


class GossipSubmitRequest(BaseModel):
    """Body of ``POST /api/gossip``. Fields are optional so the pipeline can
    answer missing values with its own 400 message."""

    content: Optional[str] = None
    device_id: Optional[str] = Field(None, alias="deviceId")

    model_config = {"populate_by_name": True}


class GossipSubmitResponse(BaseModel):
    success: bool = True
    queue_position: int = Field(0, alias="queuePosition")
    user_usage: int = Field(0, alias="userUsage")

    model_config = {"populate_by_name": True}


class UsageResponse(BaseModel):
    usage: int = 0
    remaining: int = 0
    reset_time: str = Field("", alias="resetTime")

    model_config = {"populate_by_name": True}


# ---------------------------------------------------------------------------
# Report models
# ---------------------------------------------------------------------------


class ReportRequest(BaseModel):
    """Body of ``POST /api/report``."""

    content: Optional[str] = None
    reason: Optional[str] = None
    timestamp: Optional[Any] = None
    device_id: Optional[str] = Field(None, alias="deviceId")
    app_version: Optional[str] = Field(None, alias="appVersion")

    model_config = {"populate_by_name": True}


class ReportCreatedResponse(BaseModel):
    success: bool = True
    report_id: str = Field("", alias="reportId")

    model_config = {"populate_by_name": True}


class ReportResponse(BaseModel):
    """Mirrors gossipcast.moderation.models.Report."""

    id: str
    content: str
    reason: str
    device_id: str = Field("", alias="deviceId")
    reported_at: str = Field("", alias="reportedAt")
    status: str = "pending"
    timestamp: Optional[Any] = None
    app_version: Optional[str] = Field(None, alias="appVersion")

    model_config = {"populate_by_name": True}


class AdminReportsResponse(BaseModel):
    reports: list[ReportResponse] = Field(default_factory=list)
    total_count: int = Field(0, alias="totalCount")
    pending_count: int = Field(0, alias="pendingCount")
    banned_users_count: int = Field(0, alias="bannedUsersCount")

    model_config = {"populate_by_name": True}


# ---------------------------------------------------------------------------
# Meta models
# ---------------------------------------------------------------------------


class StatusResponse(BaseModel):
    """Body of ``GET /``."""

    message: str
    active_users: int = Field(0, alias="activeUsers")
    queue_length: int = Field(0, alias="queueLength")
    current_gossip: Optional[GossipResponse] = Field(None, alias="currentGossip")
    total_reports: int = Field(0, alias="totalReports")
    banned_users_count: int = Field(0, alias="bannedUsersCount")

    model_config = {"populate_by_name": True}


class ErrorResponse(BaseModel):
    error: str
