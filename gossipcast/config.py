"""Environment-driven settings."""

from __future__ import annotations

import os
from dataclasses import dataclass


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 3000
    daily_quota: int = 3
    max_content_length: int = 50
    display_seconds: int = 5
    pacing_seconds: float = 1.0
    report_retention_days: int = 7
    admin_report_limit: int = 50
    # Optional YAML rule set replacing the built-in content policy.
    policy_file: str = ""
    log_level: str = "INFO"
    cors_origins: tuple[str, ...] = ("*",)


def load_settings() -> Settings:
    """Build :class:`Settings` from ``GOSSIPCAST_*`` environment variables.

    ``PORT`` is read unprefixed so the server picks up the port assigned by
    hosting platforms.
    """
    return Settings(
        host=os.getenv("GOSSIPCAST_HOST", "").strip() or Settings.host,
        port=_get_int("PORT", Settings.port),
        daily_quota=_get_int("GOSSIPCAST_DAILY_QUOTA", Settings.daily_quota),
        max_content_length=_get_int("GOSSIPCAST_MAX_CONTENT_LENGTH", Settings.max_content_length),
        display_seconds=_get_int("GOSSIPCAST_DISPLAY_SECONDS", Settings.display_seconds),
        pacing_seconds=_get_float("GOSSIPCAST_PACING_SECONDS", Settings.pacing_seconds),
        report_retention_days=_get_int("GOSSIPCAST_REPORT_RETENTION_DAYS", Settings.report_retention_days),
        admin_report_limit=_get_int("GOSSIPCAST_ADMIN_REPORT_LIMIT", Settings.admin_report_limit),
        policy_file=os.getenv("GOSSIPCAST_POLICY_FILE", "").strip(),
        log_level=os.getenv("GOSSIPCAST_LOG_LEVEL", "").strip().upper() or Settings.log_level,
        cors_origins=_get_list("GOSSIPCAST_CORS_ORIGINS", Settings.cors_origins),
    )
