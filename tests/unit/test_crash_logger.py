"""
Unit tests for crash logger functionality
"""
import sys
import threading
from datetime import datetime

from utils.crash_logger import CrashLogger


def _raise_and_log(exc):
    try:
        raise exc
    except Exception:
        CrashLogger.log_exception(*sys.exc_info())


class TestCrashLogger:
    """Log entries land in the isolated log directory"""

    def test_log_directory_creation(self, isolated_logs):
        CrashLogger.setup()
        assert isolated_logs.is_dir()

    def test_log_exception(self):
        _raise_and_log(ValueError("Test error message"))

        content = CrashLogger.LOG_FILE.read_text(encoding='utf-8')
        assert "FATAL ERROR" in content
        assert "ValueError" in content
        assert "Test error message" in content
        assert "Stack Trace:" in content
        assert datetime.now().strftime("%Y-%m-%d") in content

    def test_multiple_log_entries(self):
        _raise_and_log(ValueError("First error"))
        _raise_and_log(TypeError("Second error"))

        content = CrashLogger.LOG_FILE.read_text(encoding='utf-8')
        assert content.count("FATAL ERROR") == 2
        assert "First error" in content
        assert "Second error" in content

    def test_job_failure_entry(self):
        CrashLogger.log_job_failure("Move a.txt to r:dst", "exit status 3\n\nnot found")

        content = CrashLogger.LOG_FILE.read_text(encoding='utf-8')
        assert "JOB FAILED" in content
        assert "Job: Move a.txt to r:dst" in content
        assert "not found" in content

    def test_thread_exception_hook(self, monkeypatch):
        monkeypatch.setattr(threading, "excepthook", CrashLogger.log_thread_exception)

        def boom():
            raise RuntimeError("worker blew up")

        thread = threading.Thread(target=boom)
        thread.start()
        thread.join()

        content = CrashLogger.LOG_FILE.read_text(encoding='utf-8')
        assert "RuntimeError" in content
        assert "worker blew up" in content

    def test_install_exception_handler(self, monkeypatch):
        monkeypatch.setattr(sys, "excepthook", sys.__excepthook__)
        monkeypatch.setattr(threading, "excepthook", threading.__excepthook__)
        CrashLogger.install_exception_handler()
        assert sys.excepthook == CrashLogger.log_exception
        assert threading.excepthook == CrashLogger.log_thread_exception

    def test_log_rotation(self, monkeypatch):
        monkeypatch.setattr(CrashLogger, "MAX_LOG_SIZE", 100)
        CrashLogger.setup()
        CrashLogger.LOG_FILE.write_text("x" * 200, encoding='utf-8')

        _raise_and_log(ValueError("after rotation"))

        backup = CrashLogger.LOG_FILE.with_suffix('.log.old')
        assert backup.exists()
        assert "after rotation" in CrashLogger.LOG_FILE.read_text(encoding='utf-8')
        assert "after rotation" not in backup.read_text(encoding='utf-8')
