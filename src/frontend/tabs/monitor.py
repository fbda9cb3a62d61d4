"""Monitor tab implementation."""

from __future__ import annotations

import os
from typing import Any

from textual import on
from textual.containers import Container, Vertical
from textual.widgets import Input, Static, Switch

from ..validators import parse_log_path, parse_positive_number


class MonitorTab(Container):
    """Monitor tab for editing config.monitor and require_root."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._loading_form = False

    def compose(self):
        with Vertical(id="monitor-panel"):
            yield Static("Monitor", id="monitor-title")
            yield Static("log_path", classes="form-label")
            yield Input(placeholder="/var/log/auth.log", id="monitor-log-path")
            yield Static("", id="monitor-path-status", classes="subtle")
            yield Static("check_interval (seconds)", classes="form-label")
            yield Input(placeholder="2", id="monitor-interval")
            yield Static("detect_replacement (reset on inode change)", classes="form-label")
            yield Switch(id="monitor-detect-replacement")
            yield Static("require_root", classes="form-label")
            yield Switch(id="monitor-require-root")
            yield Static("", id="monitor-error", classes="settings-error")

    def on_mount(self) -> None:
        self.reload_from_config()

    def reload_from_config(self) -> None:
        self._loading_form = True
        monitor = self._get_monitor()
        data = self.app.config_state.data or {}
        log_path = str(monitor.get("log_path", "/var/log/auth.log"))
        self.query_one("#monitor-log-path", Input).value = log_path
        self.query_one("#monitor-interval", Input).value = str(monitor.get("check_interval", 2))
        self.query_one("#monitor-detect-replacement", Switch).value = bool(monitor.get("detect_replacement", False))
        self.query_one("#monitor-require-root", Switch).value = bool(data.get("require_root", True))
        self._set_error("")
        self._update_path_status(log_path)
        self._loading_form = False

    def _get_monitor(self) -> dict[str, Any]:
        data = self.app.config_state.data or {}
        monitor = data.get("monitor")
        if isinstance(monitor, dict):
            return monitor
        return {}

    def _set_monitor(self, monitor: dict[str, Any]) -> None:
        self.app.update_config_section("monitor", monitor)

    def _set_error(self, message: str) -> None:
        self.query_one("#monitor-error", Static).update(message)

    def _update_path_status(self, path: str) -> None:
        status = self.query_one("#monitor-path-status", Static)
        if not path:
            status.update("")
        elif not os.path.exists(path):
            status.update("file not found on this machine")
        elif not os.access(path, os.R_OK):
            status.update("exists, not readable by the current user")
        else:
            status.update("exists, readable")

    @on(Input.Changed, "#monitor-log-path")
    def _on_log_path_changed(self, event: Input.Changed) -> None:
        if self._loading_form:
            return
        path, error = parse_log_path(event.value)
        self._set_error(error or "")
        self._update_path_status(event.value.strip())
        if path is None:
            return
        monitor = self._get_monitor()
        monitor["log_path"] = path
        self._set_monitor(monitor)

    @on(Input.Changed, "#monitor-interval")
    def _on_interval_changed(self, event: Input.Changed) -> None:
        if self._loading_form:
            return
        value, error = parse_positive_number(event.value)
        self._set_error(error or "")
        if value is None:
            return
        monitor = self._get_monitor()
        monitor["check_interval"] = value
        self._set_monitor(monitor)

    @on(Switch.Changed, "#monitor-detect-replacement")
    def _on_detect_replacement_changed(self, event: Switch.Changed) -> None:
        if self._loading_form:
            return
        monitor = self._get_monitor()
        monitor["detect_replacement"] = bool(event.value)
        self._set_monitor(monitor)

    @on(Switch.Changed, "#monitor-require-root")
    def _on_require_root_changed(self, event: Switch.Changed) -> None:
        if self._loading_form:
            return
        self.app.update_config_section("require_root", bool(event.value))
