"""Patterns tab implementation."""

from __future__ import annotations

from typing import Any, Optional

from textual import on
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Button, DataTable, Input, Static, TextArea

from core.patterns import DEFAULT_PATTERNS, build_patterns
from ..modals import AddPatternScreen, DeletePatternScreen
from ..validators import parse_pattern


class PatternsTab(Container):
    """Patterns tab for editing config.monitor.patterns and testing them."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._loading_form = False
        self._current_row_key: Optional[str] = None
        self._table_ready = False

    def compose(self):
        with Vertical(id="patterns-panel"):
            with Horizontal(id="patterns-body"):
                with Container(id="patterns-left"):
                    yield DataTable(id="patterns-table", cursor_type="row")
                with Container(id="patterns-right"):
                    yield Static("Pattern editor", id="patterns-title")
                    yield Static("regex (first matching pattern wins)", classes="form-label")
                    yield Input(placeholder="Select a pattern", id="pattern-regex")
                    yield Static("", id="pattern-error", classes="settings-error")
                    yield Static("Pattern tester", id="patterns-test-title")
                    yield TextArea(id="pattern-test-text")
                    with Horizontal(id="patterns-test-actions"):
                        yield Button("Test", id="pattern-test", variant="primary")
                    yield Static("", id="pattern-test-result", markup=False)
            with Horizontal(id="patterns-actions"):
                yield Button("Add pattern", id="add-pattern", variant="success")
                yield Button("Move up", id="move-pattern-up")
                yield Button("Delete pattern", id="delete-pattern", variant="error")
                yield Button("Restore defaults", id="restore-patterns", variant="warning")

    def on_mount(self) -> None:
        table = self.query_one("#patterns-table", DataTable)
        table.add_column("#", key="index", width=4)
        table.add_column("status", key="status", width=8)
        table.add_column("pattern", key="pattern", width=60)
        table.zebra_stripes = True
        self.query_one("#patterns-test-actions").styles.height = 3
        self._table_ready = True
        self.reload_from_config()
        self._set_form_state(None)

    def reload_from_config(self) -> None:
        if not self._table_ready:
            return
        table = self.query_one("#patterns-table", DataTable)
        table.clear()
        for index, pattern in enumerate(self._get_patterns()):
            table.add_row(str(index + 1), self._status_for(pattern), pattern, key=str(index))
        self._update_action_state()

    @staticmethod
    def _status_for(pattern: str) -> str:
        return "invalid" if parse_pattern(pattern).error else "ok"

    def _get_patterns(self) -> list[str]:
        data = self.app.config_state.data or {}
        monitor = data.get("monitor")
        if isinstance(monitor, dict) and isinstance(monitor.get("patterns"), list):
            return monitor["patterns"]
        return []

    def _set_patterns(self, patterns: list[str]) -> None:
        data = self.app.config_state.data or {}
        monitor = data.get("monitor")
        monitor = dict(monitor) if isinstance(monitor, dict) else {}
        monitor["patterns"] = patterns
        self.app.update_config_section("monitor", monitor)

    def _update_action_state(self) -> None:
        has_selection = self._current_row_key is not None
        self.query_one("#delete-pattern", Button).disabled = not has_selection
        self.query_one("#move-pattern-up", Button).disabled = not has_selection or self._current_index() == 0

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        self._current_row_key = self._coerce_row_key(event.row_key)
        self._set_form_state(self._current_row_key)
        self._update_action_state()

    @on(Input.Changed, "#pattern-regex")
    def _on_regex_changed(self, event: Input.Changed) -> None:
        if self._loading_form:
            return
        index = self._current_index()
        if index is None:
            return
        patterns = self._get_patterns()
        if index >= len(patterns):
            return
        info = parse_pattern(event.value)
        self.query_one("#pattern-error", Static).update(info.error or "")
        # Invalid patterns are still stored; the monitor drops them at startup.
        patterns[index] = event.value
        self._set_patterns(patterns)
        self._update_table_cell(index, "pattern", event.value)
        self._update_table_cell(index, "status", self._status_for(event.value))

    @on(Button.Pressed, "#add-pattern")
    def _on_add_pattern(self) -> None:
        self.app.push_screen(AddPatternScreen(), self._handle_add_pattern)

    def _handle_add_pattern(self, pattern: str | None) -> None:
        if not pattern:
            return
        patterns = self._get_patterns()
        patterns.append(pattern)
        self._set_patterns(patterns)
        self.reload_from_config()
        self._select_row(len(patterns) - 1)

    @on(Button.Pressed, "#move-pattern-up")
    def _on_move_up(self) -> None:
        index = self._current_index()
        if not index:
            return
        patterns = self._get_patterns()
        if index >= len(patterns):
            return
        patterns[index - 1], patterns[index] = patterns[index], patterns[index - 1]
        self._set_patterns(patterns)
        self.reload_from_config()
        self._select_row(index - 1)

    @on(Button.Pressed, "#delete-pattern")
    def _on_delete_pattern(self) -> None:
        index = self._current_index()
        if index is None:
            return
        patterns = self._get_patterns()
        if index >= len(patterns):
            return
        self.app.push_screen(DeletePatternScreen(patterns[index]), self._handle_delete_pattern)

    def _handle_delete_pattern(self, confirmed: bool | None) -> None:
        if not confirmed:
            return
        index = self._current_index()
        if index is None:
            return
        patterns = self._get_patterns()
        if index >= len(patterns):
            return
        patterns.pop(index)
        self._set_patterns(patterns)
        self._current_row_key = None
        self.reload_from_config()
        self._set_form_state(None)

    @on(Button.Pressed, "#restore-patterns")
    def _on_restore_defaults(self) -> None:
        self._set_patterns(list(DEFAULT_PATTERNS))
        self._current_row_key = None
        self.reload_from_config()
        self._set_form_state(None)

    @on(Button.Pressed, "#pattern-test")
    def _on_test_patterns(self) -> None:
        test_text = self.query_one("#pattern-test-text", TextArea).text
        result = self.query_one("#pattern-test-result", Static)
        if not test_text.strip():
            result.update("Paste auth log lines to test.")
            return
        pattern_set = build_patterns(self._get_patterns())
        if not len(pattern_set):
            result.update("No valid patterns configured.")
            return
        lines = []
        for line in test_text.splitlines():
            if not line.strip():
                continue
            pattern = pattern_set.match(line)
            if pattern is None:
                lines.append(f"- no match: {line}")
            else:
                lines.append(f"+ {pattern.pattern}: {line}")
        result.update("\n".join(lines))

    def _set_form_state(self, row_key: Optional[str]) -> None:
        self._loading_form = True
        regex_input = self.query_one("#pattern-regex", Input)
        self.query_one("#pattern-error", Static).update("")
        if row_key is None:
            regex_input.value = ""
            regex_input.disabled = True
        else:
            index = int(row_key)
            patterns = self._get_patterns()
            if index >= len(patterns):
                self._loading_form = False
                return
            regex_input.value = patterns[index]
            regex_input.disabled = False
        self._loading_form = False

    def _select_row(self, index: int) -> None:
        table = self.query_one("#patterns-table", DataTable)
        row_key = str(index)
        try:
            table.move_cursor(row=index)
        except Exception:
            return
        self._current_row_key = row_key
        self._set_form_state(row_key)
        self._update_action_state()

    def _update_table_cell(self, index: int, column_key: str, value: Any) -> None:
        table = self.query_one("#patterns-table", DataTable)
        row_key = str(index)
        try:
            table.get_row(row_key)
        except Exception:
            self.reload_from_config()
            return
        table.update_cell(row_key, column_key, value)

    def _current_index(self) -> Optional[int]:
        if self._current_row_key is None:
            return None
        try:
            return int(self._current_row_key)
        except ValueError:
            return None

    @staticmethod
    def _coerce_row_key(value: Any) -> str:
        if hasattr(value, "value"):
            return str(value.value)
        return str(value)
