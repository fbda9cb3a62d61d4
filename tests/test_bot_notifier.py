from __future__ import annotations

import asyncio
import json
from datetime import datetime, timezone
from pathlib import Path

from adapters import telegram_bot_notifier
from adapters.telegram_bot_notifier import TelegramBotNotifier, encode_multipart
from core.models import FailedLoginEvent


class FakeResponse:
    def __init__(self, body: bytes = b'{"ok": true}') -> None:
        self._body = body

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc) -> None:
        return None

    def read(self) -> bytes:
        return self._body


def test_send_alert_posts_html_message(monkeypatch) -> None:
    requests = []

    def fake_urlopen(request, timeout):
        requests.append((request, timeout))
        return FakeResponse()

    monkeypatch.setattr(telegram_bot_notifier.urllib.request, "urlopen", fake_urlopen)
    notifier = TelegramBotNotifier(bot_token="123:abc", chat_id="42")
    event = FailedLoginEvent(
        line="Failed password for root",
        hostname="bastion",
        detected_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )

    asyncio.run(notifier.send_alert(event))

    request, timeout = requests[0]
    payload = json.loads(request.data.decode("utf-8"))
    assert request.full_url == "https://api.telegram.org/bot123:abc/sendMessage"
    assert timeout == telegram_bot_notifier.REQUEST_TIMEOUT
    assert payload["chat_id"] == "42"
    assert payload["parse_mode"] == "HTML"
    assert "Failed password for root" in payload["text"]


def test_multipart_body_contains_fields_and_file(tmp_path: Path) -> None:
    image = tmp_path / "security_20240101_000000.jpg"
    image.write_bytes(b"\xff\xd8jpeg")

    body, content_type = encode_multipart({"chat_id": "42", "caption": "hi"}, "photo", str(image))

    boundary = content_type.split("boundary=", 1)[1]
    assert content_type.startswith("multipart/form-data")
    assert body.count(f"--{boundary}".encode()) == 4
    assert b'name="chat_id"\r\n\r\n42\r\n' in body
    assert b'filename="security_20240101_000000.jpg"' in body
    assert b"Content-Type: image/jpeg" in body
    assert b"\xff\xd8jpeg" in body
