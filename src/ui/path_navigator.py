"""
Path navigation widget - displays an rclone path as clickable segments
"""
from PyQt6.QtWidgets import (QWidget, QHBoxLayout, QPushButton, QLineEdit)
from PyQt6.QtCore import pyqtSignal, Qt

from core.rclone_path import RclonePath


def path_segments(path):
    """Return [(label, RclonePath)] from the root down to path"""
    chain = [path]
    current = path
    while True:
        parent = current.resolve_to_parent()
        if parent == current:
            break
        chain.append(parent)
        current = parent
    chain.reverse()
    segments = []
    for item in chain:
        label = item.filename() if not item.is_root() else str(item)
        segments.append((label or str(item), item))
    return segments


class PathNavigator(QWidget):
    """Shows the current location as segment buttons, or as a text field (Ctrl+L)"""

    path_entered = pyqtSignal(str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.current_path = None
        self.edit_mode = False
        self.setup_ui()

    def setup_ui(self):
        self.layout = QHBoxLayout(self)
        self.layout.setContentsMargins(0, 0, 0, 0)
        self.layout.setSpacing(2)

        self.path_edit = QLineEdit()
        self.path_edit.setVisible(False)
        self.path_edit.setPlaceholderText("remote:path/to/folder")
        self.path_edit.returnPressed.connect(self.confirm_path_edit)
        self.layout.addWidget(self.path_edit)

        self.button_container = QWidget()
        self.button_layout = QHBoxLayout(self.button_container)
        self.button_layout.setContentsMargins(0, 0, 0, 0)
        self.button_layout.setSpacing(2)
        self.layout.addWidget(self.button_container)

        self.layout.addStretch()

    def set_path(self, path):
        self.current_path = path
        self.update_path_display()

    def update_path_display(self):
        while self.button_layout.count():
            child = self.button_layout.takeAt(0).widget()
            if child:
                child.setParent(None)
                child.deleteLater()
        if self.current_path is None:
            return

        for label, segment_path in path_segments(self.current_path):
            button = QPushButton(label)
            button.setFlat(True)
            button.setToolTip(str(segment_path))
            button.clicked.connect(lambda checked, p=str(segment_path): self.path_entered.emit(p))
            self.button_layout.addWidget(button)

    def segment_labels(self):
        if self.current_path is None:
            return []
        return [label for label, _path in path_segments(self.current_path)]

    def toggle_edit_mode(self):
        if self.edit_mode:
            self.exit_edit_mode()
        else:
            self.enter_edit_mode()

    def enter_edit_mode(self):
        self.edit_mode = True
        self.path_edit.setText(str(self.current_path) if self.current_path else "")
        self.path_edit.setVisible(True)
        self.button_container.setVisible(False)
        self.path_edit.setFocus()
        self.path_edit.selectAll()

    def exit_edit_mode(self):
        self.edit_mode = False
        self.path_edit.setVisible(False)
        self.button_container.setVisible(True)

    def confirm_path_edit(self):
        # Remote paths cannot be checked up front; the listing reports errors
        new_path = self.path_edit.text().strip()
        if new_path:
            self.path_entered.emit(new_path)
        self.exit_edit_mode()

    def keyPressEvent(self, event):
        if event.key() == Qt.Key.Key_Escape and self.edit_mode:
            self.exit_edit_mode()
        else:
            super().keyPressEvent(event)
