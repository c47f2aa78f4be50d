"""Back/forward history for one browsing session."""
from __future__ import annotations

from typing import List, Optional

from core.rclone_path import RclonePath


class NavigationHistory:
    """Two stacks of visited locations.

    The caller owns the current location; undo() and redo() take it as an
    argument and push it onto the opposite stack.
    """

    def __init__(self):
        self.back: List[RclonePath] = []
        self.forward: List[RclonePath] = []

    def push_current_and_clear_forward(self, old_path: RclonePath) -> None:
        self.back.append(old_path)
        self.forward.clear()

    def undo(self, current: RclonePath) -> Optional[RclonePath]:
        if not self.back:
            return None
        previous = self.back.pop()
        self.forward.append(current)
        return previous

    def redo(self, current: RclonePath) -> Optional[RclonePath]:
        if not self.forward:
            return None
        following = self.forward.pop()
        self.back.append(current)
        return following

    def can_undo(self) -> bool:
        return bool(self.back)

    def can_redo(self) -> bool:
        return bool(self.forward)
