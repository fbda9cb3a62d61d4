"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class FailedLoginEvent:
    """A matched log line, as handed to notifier adapters."""

    line: str
    hostname: str
    detected_at: datetime


@dataclass(frozen=True)
class LifecycleNotice:
    """Startup, shutdown and test messages sent outside the alert path."""

    kind: str
    hostname: str
    stealth_mode: bool
    log_path: Optional[str] = None


@dataclass(frozen=True)
class MonitorStatus:
    """Point-in-time snapshot of a monitoring session."""

    log_path: str
    running: bool
    cursor: Optional[int]
    patterns: int
    seen_events: int
    alerts_sent: int
    poll_interval: float
