"""String prompt used for renaming entries and naming new folders.

When renaming, only the base name is preselected:
  hello.txt            -> select "hello"
  hello.tar.gz         -> select "hello"
  Makefile             -> select entire name
  .bashrc              -> select entire name
"""
from __future__ import annotations

from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QLabel, QLineEdit, QDialogButtonBox
)
from PyQt6.QtCore import Qt


def _selection_span(filename: str) -> tuple[int, int]:
    """Return (start, length) of the part to preselect."""
    if not filename:
        return 0, 0
    search_from = 1 if filename.startswith('.') else 0
    dot_index = filename.find('.', search_from)
    if dot_index == -1:
        return 0, len(filename)
    return 0, dot_index


class StringPromptDialog(QDialog):
    def __init__(self, title: str, prompt: str, default_value: str = "",
                 submit_label: str = "Confirm", parent=None):
        super().__init__(parent)
        self.setWindowTitle(title)
        self._default_value = default_value
        self._build(prompt, submit_label)

    def _build(self, prompt: str, submit_label: str):
        layout = QVBoxLayout(self)
        layout.addWidget(QLabel(prompt))

        self.line_edit = QLineEdit(self._default_value)
        layout.addWidget(self.line_edit)

        self.buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel
        )
        self.buttons.button(QDialogButtonBox.StandardButton.Ok).setText(submit_label)
        self.buttons.accepted.connect(self.accept)
        self.buttons.rejected.connect(self.reject)
        layout.addWidget(self.buttons)

        self.resize(420, 110)
        self.line_edit.setFocus(Qt.FocusReason.ActiveWindowFocusReason)
        start, length = _selection_span(self._default_value)
        if length:
            self.line_edit.setSelection(start, length)

    @property
    def value(self) -> str:
        return self.line_edit.text().strip()


def get_rename(parent, original_name: str):
    """Show the rename prompt and return (new_name, ok)."""
    dlg = StringPromptDialog(f"Rename '{original_name}'", "Enter a new name to proceed.",
                             original_name, "Confirm", parent=parent)
    ok = dlg.exec() == QDialog.DialogCode.Accepted
    return dlg.value, ok


def get_folder_name(parent):
    """Show the new folder prompt and return (name, ok)."""
    dlg = StringPromptDialog("New folder", "Enter a name for the new folder.",
                             "", "Create", parent=parent)
    ok = dlg.exec() == QDialog.DialogCode.Accepted
    return dlg.value, ok
