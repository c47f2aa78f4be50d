"""Browse / pick-a-destination mode shared between the listing and the controller."""
from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from core.rclone_path import RclonePath


class PickerKind(Enum):
    BROWSE = 'browse'
    SELECT_MOVE_DESTINATION = 'move'
    SELECT_COPY_DESTINATION = 'copy'


@dataclass(frozen=True)
class PickerMode:
    kind: PickerKind = PickerKind.BROWSE
    source: Optional[RclonePath] = None

    @classmethod
    def browse(cls) -> 'PickerMode':
        return cls()

    @classmethod
    def move(cls, source: RclonePath) -> 'PickerMode':
        return cls(PickerKind.SELECT_MOVE_DESTINATION, source)

    @classmethod
    def copy(cls, source: RclonePath) -> 'PickerMode':
        return cls(PickerKind.SELECT_COPY_DESTINATION, source)

    @property
    def is_browse(self) -> bool:
        return self.kind is PickerKind.BROWSE


class PickerModeState(QObject):
    """Holds the single active PickerMode.

    Every change goes through transition(), which compares and swaps under
    one lock acquisition. mode_changed fires after the lock is released, so a
    handler may read or transition the mode again without re-entering it.
    """

    mode_changed = pyqtSignal(object)  # PickerMode

    def __init__(self, parent=None):
        super().__init__(parent)
        self._lock = threading.Lock()
        self._mode = PickerMode.browse()

    @property
    def mode(self) -> PickerMode:
        with self._lock:
            return self._mode

    def subscribe(self, callback: Callable[[PickerMode], None]) -> None:
        self.mode_changed.connect(callback)

    def transition(self, expected: PickerKind, new_mode: PickerMode) -> Optional[PickerMode]:
        """Switch to new_mode if the current kind is expected; returns the replaced mode."""
        with self._lock:
            previous = self._mode
            if previous.kind is not expected:
                return None
            self._mode = new_mode
        if previous != new_mode:
            self.mode_changed.emit(new_mode)
        return previous

    def request_move(self, source: RclonePath) -> bool:
        return self.transition(PickerKind.BROWSE, PickerMode.move(source)) is not None

    def request_copy(self, source: RclonePath) -> bool:
        return self.transition(PickerKind.BROWSE, PickerMode.copy(source)) is not None

    def take_destination_request(self, kind: PickerKind) -> Optional[RclonePath]:
        """Leave the given select-destination mode and hand back its source path."""
        previous = self.transition(kind, PickerMode.browse())
        if previous is None:
            return None
        return previous.source

    def cancel(self) -> bool:
        """Return to Browse from any select-destination mode without creating a job."""
        for kind in (PickerKind.SELECT_MOVE_DESTINATION, PickerKind.SELECT_COPY_DESTINATION):
            if self.transition(kind, PickerMode.browse()) is not None:
                return True
        return False
