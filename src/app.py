"""Application entry point for the loginwatch monitor."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import signal
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Optional

from art import tprint
from dotenv import load_dotenv

import settings
from adapters.camera_capture import FfmpegCameraCapture, ffmpeg_available, v4l2_ctl_available
from adapters.telegram_bot_notifier import TelegramBotNotifier
from adapters.telegram_notifier import TelegramSavedMessagesNotifier
from core.dedup import SeenEvents
from core.patterns import build_patterns
from core.processor import AlertProcessor
from core.tail_monitor import OpenError, TailMonitor

NAME = "LOGINWATCH"
FONT = "tarty-1"

LOGGER = logging.getLogger(__name__)


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", False):
        return []
    values = []
    for name in redact_cfg.get("patterns", []):
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    secrets = _collect_redaction_values(config)
    formatter = _RedactingFormatter(secrets, fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/loginwatch.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _require_valid_config() -> None:
    if settings.CONFIG_ERROR:
        raise RuntimeError(f"Invalid configuration: {settings.CONFIG_ERROR}")


def _preflight() -> None:
    """Fail fast on environment problems that would make monitoring useless."""

    _require_valid_config()
    if settings.MONITOR.poll_interval <= 0:
        raise RuntimeError("monitor.check_interval must be positive")

    if settings.REQUIRE_ROOT and os.geteuid() != 0:
        raise RuntimeError("Root privileges are required to read auth logs. Please run with sudo.")

    camera = settings.CAMERA
    if camera.enabled:
        if not ffmpeg_available():
            raise RuntimeError("ffmpeg is required for camera capture (apt-get install ffmpeg)")
        if camera.stealth_mode and not v4l2_ctl_available():
            LOGGER.warning("v4l2-ctl not found; install v4l-utils for camera LED control")
        os.makedirs(camera.save_dir, exist_ok=True)


async def _connect_notifier() -> tuple[Any, Any]:
    """Return (notifier, telethon_client_or_None) for the configured method."""

    notifications = settings.NOTIFICATIONS
    if notifications.method == "bot":
        bot_token = os.getenv("BOT_API")
        if not bot_token:
            raise RuntimeError("BOT_API is required when notification_method=bot")
        if not notifications.bot_chat_id:
            raise RuntimeError("notifications.bot_chat_id is required for bot notifications")
        return TelegramBotNotifier(bot_token=bot_token, chat_id=notifications.bot_chat_id), None

    if notifications.method == "saved_messages":
        from client import build_client
        from get_session import authorize

        client = build_client()
        await client.connect()
        await authorize(client)
        return TelegramSavedMessagesNotifier(client), client

    raise RuntimeError("notification_method must be 'bot' or 'saved_messages'")


def _build_processor(notifier: Any) -> AlertProcessor:
    camera = settings.CAMERA
    evidence = FfmpegCameraCapture(camera) if camera.enabled else None
    return AlertProcessor(notifier=notifier, evidence=evidence, stealth_mode=camera.stealth_mode)


async def _serve() -> int:
    monitor_cfg = settings.MONITOR
    notifier, client = await _connect_notifier()
    logger = logging.getLogger(__name__)
    logger.info("Selected notification method - %s", settings.NOTIFICATIONS.method)

    try:
        processor = _build_processor(notifier)
        monitor = TailMonitor(
            path=monitor_cfg.log_path,
            patterns=monitor_cfg.patterns,
            poll_interval=monitor_cfg.poll_interval,
            on_match=processor.handle,
            seen=SeenEvents.from_config(settings.DEDUP),
            detect_replacement=monitor_cfg.detect_replacement,
        )
        try:
            monitor.start()
        except OpenError as exc:
            logger.error("Cannot start monitoring: %s", exc)
            return 1

        # Cooperative shutdown: signals only flip the event, the monitor
        # notices it at the end of its current sleep or cycle.
        stop = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, stop.set)

        lifecycle = settings.NOTIFICATIONS.lifecycle_notices
        if lifecycle:
            await processor.send_lifecycle("startup", monitor_cfg.log_path)

        logger.info("Loginwatch is now running. Monitoring for failed login attempts...")
        await monitor.run(stop)
        logger.info("Received termination signal. Shutting down gracefully...")

        if lifecycle:
            await processor.send_lifecycle("shutdown")

        status = monitor.status()
        logger.info(
            "Session summary: alerts=%s, distinct events=%s, cursor=%s",
            status.alerts_sent,
            status.seen_events,
            status.cursor,
        )
        return 0
    finally:
        if client is not None:
            await client.disconnect()


def _run() -> int:
    _print_banner()
    _configure_logging()
    logger = logging.getLogger(__name__)
    logger.info("Starting loginwatch")

    try:
        _preflight()
        return asyncio.run(_serve())
    except RuntimeError as exc:
        logger.error("%s", exc)
        return 1


async def _send_test() -> None:
    _require_valid_config()
    notifier, client = await _connect_notifier()
    try:
        await _build_processor(notifier).send_test()
    finally:
        if client is not None:
            await client.disconnect()


def _test() -> int:
    _configure_logging()
    try:
        asyncio.run(_send_test())
    except Exception as exc:
        logging.getLogger(__name__).error("Test alert failed: %s", exc)
        return 1
    return 0


def _check() -> int:
    """Print the effective configuration and report blocking problems."""

    _print_banner()
    problems = 0
    monitor_cfg = settings.MONITOR
    print(f"config:        {settings.CONFIG_PATH}")
    if settings.CONFIG_ERROR:
        print(f"! {settings.CONFIG_ERROR}")
        return 1
    print(f"log file:      {monitor_cfg.log_path}")
    print(f"interval:      {monitor_cfg.poll_interval}s")
    print(f"notifications: {settings.NOTIFICATIONS.method}")

    if monitor_cfg.poll_interval <= 0:
        print("! check_interval must be positive")
        problems += 1
    if not os.access(monitor_cfg.log_path, os.R_OK):
        print(f"! {monitor_cfg.log_path} is not readable by this user")
        problems += 1

    pattern_set = build_patterns(monitor_cfg.patterns)
    print(f"patterns:      {len(pattern_set)} valid, {len(pattern_set.rejected)} rejected")
    for rejected in pattern_set.rejected:
        print(f"! invalid pattern {rejected.source!r}: {rejected.error}")

    camera = settings.CAMERA
    if camera.enabled:
        has_ffmpeg = ffmpeg_available()
        print(f"ffmpeg:        {'found' if has_ffmpeg else 'missing'}")
        if not has_ffmpeg:
            problems += 1
        if camera.stealth_mode:
            print(f"v4l2-ctl:      {'found' if v4l2_ctl_available() else 'missing (optional)'}")
    else:
        print("camera:        disabled")

    return 1 if problems else 0


def _setup() -> None:
    _print_banner()
    from frontend.app import ConfigPanelApp

    ConfigPanelApp().run()


def _login() -> None:
    _print_banner()
    _configure_logging()
    from get_session import login

    asyncio.run(login())


def main(argv: Optional[list[str]] = None) -> None:
    load_dotenv()
    parser = argparse.ArgumentParser(prog="loginwatch")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start monitoring the auth log")
    subparsers.add_parser("test", help="Send a test alert through the configured notifier")
    subparsers.add_parser("check", help="Validate config, patterns and external tools")
    subparsers.add_parser("config", help="Launch the config TUI")
    subparsers.add_parser("login", help="Authorize the Telegram session for saved_messages")

    args = parser.parse_args(argv)
    if args.command == "config":
        _setup()
        return
    if args.command == "login":
        _login()
        return
    if args.command == "test":
        sys.exit(_test())
    if args.command == "check":
        sys.exit(_check())
    sys.exit(_run())


if __name__ == "__main__":
    main()
