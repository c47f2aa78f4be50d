import os
import sys
import pytest
from pathlib import Path

# Add src directory to Python path for imports
PROJECT_ROOT = Path(__file__).parent.parent
SRC_DIR = PROJECT_ROOT / 'src'
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

# Force offscreen platform early for all tests before any Qt import to reduce GUI driver related crashes
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from utils.crash_logger import CrashLogger
from utils.settings import AppConfig


@pytest.fixture(scope="session", autouse=True)
def qapp():
    """Provide a single QApplication instance for the whole test session."""
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture(autouse=True)
def isolated_logs(tmp_path, monkeypatch):
    """Keep crash and job failure logs out of the user's home directory"""
    log_dir = tmp_path / "logs"
    monkeypatch.setattr(CrashLogger, "LOG_DIR", log_dir)
    monkeypatch.setattr(CrashLogger, "LOG_FILE", log_dir / "crash.log")
    yield log_dir


@pytest.fixture
def config(tmp_path):
    AppConfig._cached_settings = None
    AppConfig._cache_file_mtime = None
    return AppConfig(config_dir=tmp_path / "config")
