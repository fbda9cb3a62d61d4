"""Telegram Bot API notification adapter.

Uses the Bot API for delivery so alerts can be routed via a bot chat.
"""

from __future__ import annotations

import json
import mimetypes
import os
import urllib.error
import urllib.request
import uuid
from typing import Optional

from adapters.notification_formatting import format_alert, format_notice
from core.models import FailedLoginEvent, LifecycleNotice

REQUEST_TIMEOUT = 10


def encode_multipart(fields: dict[str, str], file_field: str, file_path: str) -> tuple[bytes, str]:
    """Build a multipart/form-data body with one file part."""

    boundary = uuid.uuid4().hex
    content_type = mimetypes.guess_type(file_path)[0] or "application/octet-stream"
    chunks: list[bytes] = []
    for name, value in fields.items():
        chunks.append(
            (
                f"--{boundary}\r\n"
                f'Content-Disposition: form-data; name="{name}"\r\n\r\n'
                f"{value}\r\n"
            ).encode("utf-8")
        )
    with open(file_path, "rb") as handle:
        payload = handle.read()
    chunks.append(
        (
            f"--{boundary}\r\n"
            f'Content-Disposition: form-data; name="{file_field}"; filename="{os.path.basename(file_path)}"\r\n'
            f"Content-Type: {content_type}\r\n\r\n"
        ).encode("utf-8")
    )
    chunks.append(payload)
    chunks.append(f"\r\n--{boundary}--\r\n".encode("utf-8"))
    return b"".join(chunks), f"multipart/form-data; boundary={boundary}"


class TelegramBotNotifier:
    """Notifier adapter that sends messages via the Telegram Bot API."""

    def __init__(self, bot_token: str, chat_id: str) -> None:
        self._bot_token = bot_token
        self._chat_id = chat_id

    def _endpoint(self, method: str) -> str:
        # The Bot API endpoint is deterministic and derived from the token.
        return f"https://api.telegram.org/bot{self._bot_token}/{method}"

    async def send_alert(self, event: FailedLoginEvent) -> None:
        """Send the formatted alert via the Bot API."""

        self._send_message(format_alert(event, mode="html"))

    async def send_notice(self, notice: LifecycleNotice) -> None:
        self._send_message(format_notice(notice, mode="html"))

    async def send_photo(self, image_path: str, caption: str) -> None:
        """Upload a captured image with a caption."""

        body, content_type = encode_multipart(
            {"chat_id": self._chat_id, "caption": caption},
            "photo",
            image_path,
        )
        self._post("sendPhoto", body, content_type)

    def _send_message(self, message: str) -> None:
        payload = {
            "chat_id": self._chat_id,
            "text": message,
            "parse_mode": "HTML",
            "disable_web_page_preview": True,
        }
        self._post("sendMessage", json.dumps(payload).encode("utf-8"), "application/json")

    def _post(self, method: str, data: bytes, content_type: str) -> Optional[dict]:
        request = urllib.request.Request(self._endpoint(method), data=data, method="POST")
        request.add_header("Content-Type", content_type)
        try:
            with urllib.request.urlopen(request, timeout=REQUEST_TIMEOUT) as response:
                return json.loads(response.read().decode("utf-8") or "null")
        except urllib.error.HTTPError as e:
            body = e.read().decode("utf-8", errors="replace")
            raise RuntimeError(f"Bot API error {e.code}: {body}") from e
