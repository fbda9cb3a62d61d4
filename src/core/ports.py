"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for notification and evidence adapters so
that the core can be reused with different backends.
"""

from __future__ import annotations

from typing import Optional, Protocol

from core.models import FailedLoginEvent, LifecycleNotice


class NotifierPort(Protocol):
    """Notification operations required by the alert processor."""

    async def send_alert(self, event: FailedLoginEvent) -> None:
        ...

    async def send_notice(self, notice: LifecycleNotice) -> None:
        ...

    async def send_photo(self, image_path: str, caption: str) -> None:
        ...


class EvidencePort(Protocol):
    """Evidence capture. Returns a file path, or None when nothing was captured."""

    async def capture(self) -> Optional[str]:
        ...
