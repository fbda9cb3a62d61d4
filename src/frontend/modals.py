"""Modal dialogs for the Textual config panel."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Static

from .validators import parse_pattern


class UnsavedChangesScreen(ModalScreen[str]):
    """Prompt when exiting with unsaved changes."""

    def compose(self) -> ComposeResult:
        yield Container(
            Static("Unsaved changes", classes="modal-title"),
            Static("Save changes before exit?", classes="modal-body"),
            Horizontal(
                Button("Save", id="unsaved-save", variant="success"),
                Button("Discard", id="unsaved-discard", variant="error"),
                Button("Cancel", id="unsaved-cancel"),
                classes="modal-actions",
            ),
            classes="modal-dialog modal-dialog--confirm",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "unsaved-save":
            self.dismiss("save")
        elif event.button.id == "unsaved-discard":
            self.dismiss("discard")
        else:
            self.dismiss("cancel")


class ReloadConfirmScreen(ModalScreen[str]):
    """Prompt when reloading with unsaved changes."""

    def compose(self) -> ComposeResult:
        yield Container(
            Static("Reload config?", classes="modal-title"),
            Static("Unsaved changes will be lost.", classes="modal-body"),
            Horizontal(
                Button("Save", id="reload-save"),
                Button("Reload", id="reload-reload", variant="warning"),
                Button("Cancel", id="reload-cancel"),
                classes="modal-actions",
            ),
            classes="modal-dialog modal-dialog--confirm",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "reload-save":
            self.dismiss("save")
        elif event.button.id == "reload-reload":
            self.dismiss("reload")
        else:
            self.dismiss("cancel")


class AddPatternScreen(ModalScreen[str | None]):
    """Modal form for adding a new pattern."""

    def compose(self) -> ComposeResult:
        yield Container(
            Static("Add pattern", classes="modal-title"),
            Static("", id="add-error", classes="modal-error"),
            Static("regex", classes="form-label"),
            Input(placeholder=r"Failed password for .* from .* port \d+", id="add-pattern"),
            Horizontal(
                Button("Add", id="add-confirm", variant="success"),
                Button("Cancel", id="add-cancel"),
                classes="modal-actions",
            ),
            classes="modal-dialog modal-dialog--form",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "add-cancel":
            self.dismiss(None)
            return
        if event.button.id != "add-confirm":
            return
        info = parse_pattern(self.query_one("#add-pattern", Input).value)
        if info.error or info.normalized is None:
            self.query_one("#add-error", Static).update(info.error or "invalid pattern")
            return
        self.dismiss(info.normalized)


class DeletePatternScreen(ModalScreen[bool]):
    """Confirm deletion of a pattern."""

    def __init__(self, pattern: str) -> None:
        super().__init__()
        self._pattern = pattern or "(empty pattern)"

    def compose(self) -> ComposeResult:
        yield Container(
            Static("Delete pattern?", classes="modal-title"),
            Static(self._pattern, classes="modal-body", markup=False),
            Horizontal(
                Button("Delete", id="delete-pattern-confirm", variant="error"),
                Button("Cancel", id="delete-pattern-cancel"),
                classes="modal-actions",
            ),
            classes="modal-dialog modal-dialog--confirm",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "delete-pattern-confirm":
            self.dismiss(True)
        else:
            self.dismiss(False)
