from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Optional

from core.models import FailedLoginEvent, LifecycleNotice
from core.processor import ALERT_PHOTO_CAPTION, TEST_PHOTO_CAPTION, AlertProcessor

FIXED_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakeNotifier:
    def __init__(self, fail_alerts: bool = False) -> None:
        self.alerts: list[FailedLoginEvent] = []
        self.notices: list[LifecycleNotice] = []
        self.photos: list[tuple[str, str]] = []
        self._fail_alerts = fail_alerts

    async def send_alert(self, event: FailedLoginEvent) -> None:
        if self._fail_alerts:
            raise RuntimeError("Bot API error 500")
        self.alerts.append(event)

    async def send_notice(self, notice: LifecycleNotice) -> None:
        self.notices.append(notice)

    async def send_photo(self, image_path: str, caption: str) -> None:
        self.photos.append((image_path, caption))


class FakeEvidence:
    def __init__(self, result: Optional[str] = "/tmp/security_1.jpg", error: bool = False) -> None:
        self.calls = 0
        self._result = result
        self._error = error

    async def capture(self) -> Optional[str]:
        self.calls += 1
        if self._error:
            raise OSError("device busy")
        return self._result


def _processor(notifier: FakeNotifier, evidence: Optional[FakeEvidence] = None) -> AlertProcessor:
    return AlertProcessor(
        notifier=notifier,
        evidence=evidence,
        stealth_mode=True,
        hostname="bastion",
        clock=lambda: FIXED_TIME,
    )


def test_alert_with_capture_sends_message_then_photo() -> None:
    notifier = FakeNotifier()
    evidence = FakeEvidence()

    asyncio.run(_processor(notifier, evidence).handle("Failed password for root"))

    assert notifier.alerts == [
        FailedLoginEvent(line="Failed password for root", hostname="bastion", detected_at=FIXED_TIME)
    ]
    assert notifier.photos == [("/tmp/security_1.jpg", ALERT_PHOTO_CAPTION)]
    assert evidence.calls == 1


def test_alert_without_evidence_sends_no_photo() -> None:
    notifier = FakeNotifier()

    asyncio.run(_processor(notifier, FakeEvidence(result=None)).handle("line"))
    asyncio.run(_processor(notifier).handle("other line"))

    assert len(notifier.alerts) == 2
    assert notifier.photos == []


def test_capture_error_still_sends_alert() -> None:
    notifier = FakeNotifier()

    asyncio.run(_processor(notifier, FakeEvidence(error=True)).handle("line"))

    assert len(notifier.alerts) == 1
    assert notifier.photos == []


def test_alert_delivery_failure_does_not_raise() -> None:
    notifier = FakeNotifier(fail_alerts=True)

    asyncio.run(_processor(notifier, FakeEvidence()).handle("line"))

    assert notifier.photos == [("/tmp/security_1.jpg", ALERT_PHOTO_CAPTION)]


def test_send_test_uses_test_notice_and_caption() -> None:
    notifier = FakeNotifier()

    asyncio.run(_processor(notifier, FakeEvidence()).send_test())

    assert [notice.kind for notice in notifier.notices] == ["test"]
    assert notifier.photos == [("/tmp/security_1.jpg", TEST_PHOTO_CAPTION)]


def test_lifecycle_notice_carries_host_and_stealth_mode() -> None:
    notifier = FakeNotifier()

    asyncio.run(_processor(notifier).send_lifecycle("startup", "/var/log/auth.log"))

    assert notifier.notices == [
        LifecycleNotice(kind="startup", hostname="bastion", stealth_mode=True, log_path="/var/log/auth.log")
    ]
