"""Telegram notification adapter for Saved Messages.

Formats a human-readable Markdown message and sends it to Saved Messages
through the user's own Telethon session.
"""

from __future__ import annotations

from adapters.notification_formatting import format_alert, format_notice
from core.models import FailedLoginEvent, LifecycleNotice


class TelegramSavedMessagesNotifier:
    """Notifier adapter that sends messages to the user's Saved Messages."""

    def __init__(self, client) -> None:
        self._client = client

    async def send_alert(self, event: FailedLoginEvent) -> None:
        """Send the formatted alert to Saved Messages."""

        message = format_alert(event, mode="markdown")
        await self._client.send_message("me", message, parse_mode="Markdown")

    async def send_notice(self, notice: LifecycleNotice) -> None:
        message = format_notice(notice, mode="markdown")
        await self._client.send_message("me", message, parse_mode="Markdown")

    async def send_photo(self, image_path: str, caption: str) -> None:
        await self._client.send_file("me", image_path, caption=caption)
