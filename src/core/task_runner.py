"""Fire-and-forget dispatch of blocking rclone calls.

Work runs on a daemon thread; its return value is handed back to the
callback on the thread that owns the runner (the GUI thread) through a
queued Qt signal. No cancellation: a submitted task always runs to the end.
"""
from __future__ import annotations

import threading
from typing import Any, Callable, Set

from PyQt6.QtCore import QObject, pyqtSignal

Work = Callable[[], Any]
Callback = Callable[[Any], None]


class ThreadedTaskRunner(QObject):
    # callback, result; delivered in the runner's own thread
    _task_done = pyqtSignal(object, object)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._threads: Set[threading.Thread] = set()
        self._lock = threading.Lock()
        self._task_done.connect(self._deliver)

    def submit(self, work: Work, on_done: Callback) -> None:
        thread = threading.Thread(target=self._run, args=(work, on_done), daemon=True)
        with self._lock:
            self._threads.add(thread)
        thread.start()

    def active_count(self) -> int:
        with self._lock:
            return len(self._threads)

    def _run(self, work: Work, on_done: Callback):
        try:
            result = work()
            self._task_done.emit(on_done, result)
        finally:
            with self._lock:
                self._threads.discard(threading.current_thread())

    def _deliver(self, on_done: Callback, result):
        on_done(result)


class ImmediateTaskRunner:
    """Runs work inline. Used headless and in tests where ordering must be deterministic."""

    def submit(self, work: Work, on_done: Callback) -> None:
        on_done(work())

    def active_count(self) -> int:
        return 0
