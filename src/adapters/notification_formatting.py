"""Shared notification formatting helpers.

Keeping formatting here prevents drift between adapters and keeps messages
consistent regardless of delivery channel.
"""

from __future__ import annotations

import html

from core.models import FailedLoginEvent, LifecycleNotice

DIVIDER = "──────────────"

_NOTICE_TITLES = {
    "startup": "Security monitoring started",
    "shutdown": "Security monitoring stopped",
    "test": "TEST ALERT",
}


def escape_md(value: str) -> str:
    """Escape the characters Telegram's legacy Markdown treats as markup."""

    for ch in r"*_[`":
        value = value.replace(ch, f"\\{ch}")
    return value


def _timestamp(event: FailedLoginEvent) -> str:
    return event.detected_at.astimezone().strftime("%Y-%m-%d %H:%M:%S").strip()


def _enabled(flag: bool) -> str:
    return "enabled" if flag else "disabled"


def _format_alert_markdown(event: FailedLoginEvent) -> str:
    """Create the Markdown alert body used by Saved Messages."""

    lines = [
        "⚠️ **SECURITY ALERT** ⚠️",
        f"**Time:** {escape_md(_timestamp(event))}",
        f"**Host:** {escape_md(event.hostname)}",
        "**Event:** Failed login attempt detected",
        DIVIDER,
        "",
        "**Log entry:**",
        escape_md(event.line),
        DIVIDER,
    ]
    return "\n".join(lines)


def _format_alert_html(event: FailedLoginEvent) -> str:
    """Create the HTML alert body used by the Bot API adapter."""

    parts = [
        "⚠️ <b>SECURITY ALERT</b> ⚠️",
        f"<b>Time:</b> {html.escape(_timestamp(event))}",
        f"<b>Host:</b> {html.escape(event.hostname)}",
        "<b>Event:</b> Failed login attempt detected",
        DIVIDER,
        "",
        "<b>Log entry:</b>",
        f"<code>{html.escape(event.line)}</code>",
        DIVIDER,
    ]
    return "\n".join(parts)


def _notice_lines(notice: LifecycleNotice) -> list[tuple[str, str]]:
    if notice.kind == "test":
        return [("", "This is a test security alert. The security monitoring system is working correctly.")]
    rows = [("Host", notice.hostname)]
    if notice.kind == "startup":
        rows.append(("Stealth camera mode", _enabled(notice.stealth_mode)))
        if notice.log_path:
            rows.append(("Log file", notice.log_path))
    return rows


def format_alert(event: FailedLoginEvent, mode: str) -> str:
    """Return the alert formatted for the requested mode."""

    if mode == "markdown":
        return _format_alert_markdown(event)
    if mode == "html":
        return _format_alert_html(event)
    raise ValueError(f"Unsupported notification format: {mode}")


def format_notice(notice: LifecycleNotice, mode: str) -> str:
    """Return a lifecycle notice formatted for the requested mode."""

    try:
        title = _NOTICE_TITLES[notice.kind]
    except KeyError:
        raise ValueError(f"Unsupported notice kind: {notice.kind}") from None

    if mode == "markdown":
        lines = [f"🔒 **{escape_md(title)}** 🔒"]
        for label, value in _notice_lines(notice):
            if label:
                lines.append(f"**{escape_md(label)}:** {escape_md(value)}")
            else:
                lines.append(escape_md(value))
        return "\n".join(lines)
    if mode == "html":
        parts = [f"🔒 <b>{html.escape(title)}</b> 🔒"]
        for label, value in _notice_lines(notice):
            if label:
                parts.append(f"<b>{html.escape(label)}:</b> {html.escape(value)}")
            else:
                parts.append(html.escape(value))
        return "\n".join(parts)
    raise ValueError(f"Unsupported notification format: {mode}")
