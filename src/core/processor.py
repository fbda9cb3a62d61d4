"""Core alert processing pipeline.

This module is integration-agnostic. It only relies on ports for evidence
capture and notifications, enabling other adapters without changes here.
"""

from __future__ import annotations

import logging
import socket
from datetime import datetime, timezone
from typing import Callable, Optional

from core.models import FailedLoginEvent, LifecycleNotice
from core.ports import EvidencePort, NotifierPort

LOGGER = logging.getLogger(__name__)

ALERT_PHOTO_CAPTION = "Image captured during failed login attempt"
TEST_PHOTO_CAPTION = "Test image capture"


def resolve_hostname() -> str:
    try:
        return socket.gethostname() or "unknown"
    except OSError:
        return "unknown"


class AlertProcessor:
    """Turns a matched log line into a capture plus notifications."""

    def __init__(
        self,
        notifier: NotifierPort,
        evidence: Optional[EvidencePort] = None,
        stealth_mode: bool = False,
        hostname: Optional[str] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._notifier = notifier
        self._evidence = evidence
        self._stealth_mode = stealth_mode
        self._hostname = hostname or resolve_hostname()
        self._clock = clock

    async def handle(self, line: str) -> None:
        """Process one failed-login line. Each step fails independently."""

        # Capture first so the photo is as close to the event as possible.
        image_path = await self._capture()

        event = FailedLoginEvent(line=line, hostname=self._hostname, detected_at=self._clock())
        try:
            await self._notifier.send_alert(event)
            LOGGER.info("Alert message sent")
        except Exception:
            LOGGER.exception("Failed to send alert message")

        if image_path:
            await self._send_photo(image_path, ALERT_PHOTO_CAPTION)

    async def send_test(self) -> None:
        """Send a test alert with a capture, mirroring a real detection."""

        LOGGER.info("Sending test alert")
        image_path = await self._capture()
        await self._notifier.send_notice(self._notice("test"))
        LOGGER.info("Test alert sent")
        if image_path:
            await self._send_photo(image_path, TEST_PHOTO_CAPTION)

    async def send_lifecycle(self, kind: str, log_path: Optional[str] = None) -> None:
        """Send a startup/shutdown notice. Delivery failures are only logged."""

        try:
            await self._notifier.send_notice(self._notice(kind, log_path))
            LOGGER.info("%s notification sent", kind.capitalize())
        except Exception:
            LOGGER.exception("Failed to send %s notification", kind)

    def _notice(self, kind: str, log_path: Optional[str] = None) -> LifecycleNotice:
        return LifecycleNotice(
            kind=kind,
            hostname=self._hostname,
            stealth_mode=self._stealth_mode,
            log_path=log_path,
        )

    async def _capture(self) -> Optional[str]:
        if self._evidence is None:
            return None
        try:
            return await self._evidence.capture()
        except Exception:
            LOGGER.exception("Failed to capture image")
            return None

    async def _send_photo(self, image_path: str, caption: str) -> None:
        try:
            await self._notifier.send_photo(image_path, caption)
            LOGGER.info("Image sent: %s", image_path)
        except Exception:
            LOGGER.exception("Failed to send image %s", image_path)
