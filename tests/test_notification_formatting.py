from __future__ import annotations

from datetime import datetime, timezone

import pytest

from adapters.notification_formatting import escape_md, format_alert, format_notice
from core.models import FailedLoginEvent, LifecycleNotice


def _event(line: str = "Failed password for root from 10.0.0.5 port 22") -> FailedLoginEvent:
    return FailedLoginEvent(
        line=line,
        hostname="web_01",
        detected_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


def test_html_alert_escapes_log_line() -> None:
    message = format_alert(_event("Failed password for <script> & co"), mode="html")
    assert "<code>Failed password for &lt;script&gt; &amp; co</code>" in message
    assert "<b>Host:</b> web_01" in message


def test_markdown_alert_escapes_markup_characters() -> None:
    message = format_alert(_event("user_name *root*"), mode="markdown")
    assert "user\\_name \\*root\\*" in message
    assert "**Host:** web\\_01" in message


def test_escape_md_leaves_plain_text_alone() -> None:
    assert escape_md("10.0.0.5 port 22") == "10.0.0.5 port 22"


def test_startup_notice_lists_host_and_stealth_mode() -> None:
    notice = LifecycleNotice(kind="startup", hostname="bastion", stealth_mode=False, log_path="/var/log/auth.log")
    message = format_notice(notice, mode="html")
    assert "Security monitoring started" in message
    assert "<b>Stealth camera mode:</b> disabled" in message
    assert "/var/log/auth.log" in message


def test_test_notice_has_no_host_row() -> None:
    notice = LifecycleNotice(kind="test", hostname="bastion", stealth_mode=True)
    message = format_notice(notice, mode="markdown")
    assert "TEST ALERT" in message
    assert "bastion" not in message


def test_unknown_mode_and_kind_are_rejected() -> None:
    with pytest.raises(ValueError):
        format_alert(_event(), mode="markdown_v3")
    with pytest.raises(ValueError):
        format_notice(LifecycleNotice(kind="reboot", hostname="h", stealth_mode=True), mode="html")
