from __future__ import annotations

import logging
from pathlib import Path

import pytest

import app
import settings
from core.config import CameraConfig, MonitorConfig
from core.patterns import DEFAULT_PATTERNS


@pytest.fixture
def quiet_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    log = tmp_path / "auth.log"
    log.touch()
    monkeypatch.setattr(app, "load_dotenv", lambda: None)
    monkeypatch.setattr(settings, "CONFIG_ERROR", None)
    monkeypatch.setattr(settings, "REQUIRE_ROOT", False)
    monkeypatch.setattr(settings, "LOGGING", {})
    monkeypatch.setattr(
        settings,
        "CAMERA",
        CameraConfig(enabled=False, device=0, save_dir=str(tmp_path), stealth_mode=False, timeout_seconds=1),
    )
    return log


def test_run_rejects_non_positive_interval(
    quiet_settings: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture, capsys
) -> None:
    caplog.set_level(logging.ERROR, logger="app")
    monkeypatch.setattr(
        settings,
        "MONITOR",
        MonitorConfig(log_path=str(quiet_settings), patterns=DEFAULT_PATTERNS, poll_interval=0),
    )

    with pytest.raises(SystemExit) as exit_info:
        app.main(["run"])

    assert exit_info.value.code == 1
    assert "monitor.check_interval must be positive" in caplog.text
    assert "Traceback" not in capsys.readouterr().err


def test_run_refuses_broken_config_file(
    quiet_settings: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.ERROR, logger="app")
    monkeypatch.setattr(settings, "CONFIG_ERROR", "config.json: invalid JSON at line 1: Expecting property name")

    with pytest.raises(SystemExit) as exit_info:
        app.main(["run"])

    assert exit_info.value.code == 1
    assert "invalid JSON at line 1" in caplog.text


def test_check_reports_broken_config_file(quiet_settings: Path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.setattr(settings, "CONFIG_ERROR", "config.json: config root must be an object")

    with pytest.raises(SystemExit) as exit_info:
        app.main(["check"])

    assert exit_info.value.code == 1
    assert "! config.json: config root must be an object" in capsys.readouterr().out
