"""Static configuration for loginwatch.

All user-editable settings (monitor, patterns, dedup, camera, notifications,
logging) live in a single JSON file for quick edits without touching Python.
Secrets (bot token, Telethon credentials) stay in the environment / .env.
"""

import copy
import json
import logging
import os
from typing import Optional

from core.config import CameraConfig, DedupConfig, MonitorConfig, NotificationConfig
from defaults import DEFAULT_CONFIG

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# LOGINWATCH_CONFIG overrides the config location.
CONFIG_PATH = os.getenv("LOGINWATCH_CONFIG") or os.path.join(PROJECT_ROOT, "config.json")

DEFAULTS = DEFAULT_CONFIG


def _merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: str) -> dict:
    """Load the JSON config on top of DEFAULTS. A missing file means defaults."""

    if not os.path.exists(path):
        logging.getLogger(__name__).info("Config file %s not found, using default configuration", path)
        return copy.deepcopy(DEFAULTS)

    with open(path, "r", encoding="utf-8") as handle:
        try:
            loaded = json.load(handle)
        except json.JSONDecodeError as exc:
            raise RuntimeError(f"{path}: invalid JSON at line {exc.lineno}: {exc.msg}") from exc
    if not isinstance(loaded, dict):
        raise RuntimeError(f"{path}: config root must be an object")
    return _merge(DEFAULTS, loaded)


def _positive_or_none(value) -> Optional[float]:
    number = float(value or 0)
    return number if number > 0 else None


def monitor_config(config: dict) -> MonitorConfig:
    monitor = config.get("monitor", {})
    return MonitorConfig(
        log_path=str(monitor.get("log_path", DEFAULTS["monitor"]["log_path"])),
        patterns=tuple(monitor.get("patterns") or ()),
        poll_interval=float(monitor.get("check_interval", DEFAULTS["monitor"]["check_interval"])),
        detect_replacement=bool(monitor.get("detect_replacement", False)),
    )


def dedup_config(config: dict) -> DedupConfig:
    dedup = config.get("dedup", {})
    ttl_hours = _positive_or_none(dedup.get("ttl_hours"))
    max_entries = _positive_or_none(dedup.get("max_entries"))
    return DedupConfig(
        ttl_seconds=ttl_hours * 3600 if ttl_hours else None,
        max_entries=int(max_entries) if max_entries else None,
    )


def camera_config(config: dict) -> CameraConfig:
    camera = config.get("camera", {})
    return CameraConfig(
        enabled=bool(camera.get("enabled", True)),
        device=int(camera.get("device", 0)),
        save_dir=str(camera.get("save_dir", DEFAULTS["camera"]["save_dir"])),
        stealth_mode=bool(camera.get("stealth_mode", True)),
        timeout_seconds=float(camera.get("timeout_seconds", 3)),
    )


def notification_config(config: dict) -> NotificationConfig:
    notifications = config.get("notifications", {})
    bot_chat_id = notifications.get("bot_chat_id")
    return NotificationConfig(
        method=str(notifications.get("notification_method", "bot")),
        bot_chat_id=str(bot_chat_id) if bot_chat_id not in (None, "") else None,
        lifecycle_notices=bool(notifications.get("lifecycle_notices", True)),
    )


# The config panel still opens on a broken file; run, test and check refuse it.
try:
    CONFIG = load_config(CONFIG_PATH)
    CONFIG_ERROR: Optional[str] = None
except RuntimeError as exc:
    CONFIG = copy.deepcopy(DEFAULTS)
    CONFIG_ERROR = str(exc)

MONITOR = monitor_config(CONFIG)
DEDUP = dedup_config(CONFIG)
CAMERA = camera_config(CONFIG)
NOTIFICATIONS = notification_config(CONFIG)

# Reading auth logs normally needs root; tests and containers can opt out.
REQUIRE_ROOT = bool(CONFIG.get("require_root", True))

# Logging configuration (optional).
LOGGING = CONFIG.get("logging", {})
