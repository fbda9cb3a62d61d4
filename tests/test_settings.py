from __future__ import annotations

import json
from pathlib import Path

import pytest

import settings
from core.patterns import DEFAULT_PATTERNS


def test_missing_config_uses_defaults(tmp_path: Path) -> None:
    config = settings.load_config(str(tmp_path / "absent.json"))

    monitor = settings.monitor_config(config)
    assert monitor.log_path == "/var/log/auth.log"
    assert monitor.poll_interval == 2
    assert monitor.patterns == DEFAULT_PATTERNS
    assert settings.dedup_config(config).ttl_seconds is None
    assert settings.dedup_config(config).max_entries is None


def test_partial_config_is_merged_over_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "monitor": {"log_path": "/var/log/secure", "patterns": ["FAILED LOGIN"]},
                "dedup": {"ttl_hours": 12, "max_entries": 5000},
                "notifications": {"bot_chat_id": 12345},
            }
        ),
        encoding="utf-8",
    )

    config = settings.load_config(str(path))

    monitor = settings.monitor_config(config)
    assert monitor.log_path == "/var/log/secure"
    assert monitor.patterns == ("FAILED LOGIN",)
    assert monitor.poll_interval == 2
    dedup = settings.dedup_config(config)
    assert dedup.ttl_seconds == 12 * 3600
    assert dedup.max_entries == 5000
    notifications = settings.notification_config(config)
    assert notifications.method == "bot"
    assert notifications.bot_chat_id == "12345"
    assert settings.camera_config(config).save_dir == "/tmp/security_captures"


def test_defaults_are_not_mutated_by_loading(tmp_path: Path) -> None:
    config = settings.load_config(str(tmp_path / "absent.json"))
    config["monitor"]["patterns"].append("extra")

    assert "extra" not in settings.DEFAULTS["monitor"]["patterns"]


def test_malformed_config_raises_runtime_error_with_line(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text('{\n  "monitor": {bad json\n}', encoding="utf-8")

    with pytest.raises(RuntimeError, match="invalid JSON at line 2"):
        settings.load_config(str(path))


def test_non_object_config_root_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(RuntimeError, match="config root must be an object"):
        settings.load_config(str(path))
