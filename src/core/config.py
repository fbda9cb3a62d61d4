"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class MonitorConfig:
    """Settings for one tail monitoring session."""

    log_path: str
    patterns: Tuple[str, ...]
    poll_interval: float
    detect_replacement: bool = False


@dataclass(frozen=True)
class DedupConfig:
    """Eviction settings for the in-memory seen-event set.

    ``None`` disables the corresponding limit.
    """

    ttl_seconds: Optional[float] = None
    max_entries: Optional[int] = None


@dataclass(frozen=True)
class CameraConfig:
    """Evidence capture settings consumed by the camera adapter."""

    enabled: bool
    device: int
    save_dir: str
    stealth_mode: bool
    timeout_seconds: float


@dataclass(frozen=True)
class NotificationConfig:
    """Notification settings consumed by notifier adapters."""

    method: str
    bot_chat_id: Optional[str]
    lifecycle_notices: bool
