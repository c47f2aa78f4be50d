"""
Application configuration for Rclone Shuttle
"""
import base64
import json
import os
import sys
from pathlib import Path

from PyQt6.QtCore import QByteArray

DEFAULT_SETTINGS = {
    "skip_overwrite_disclaimer": False,
    "window_geometry": None,
    "splitter_state": None,
}


def rclone_config_path():
    """Custom rclone config file selected through the environment, if any"""
    return os.environ.get("RCLONE_CONFIG_FILE") or None


class AppConfig:
    # Class-level cache shared between instances, keyed on the file's mtime
    _cached_settings = None
    _cache_file_mtime = None

    def __init__(self, config_dir=None):
        self.config_dir = Path(config_dir) if config_dir else Path.home() / ".config" / "rclone-shuttle"
        self.config_file = self.config_dir / "settings.json"
        self.settings = self.load_settings()

    def load_settings(self):
        """Load settings merged over the defaults"""
        settings = dict(DEFAULT_SETTINGS)
        if not self.config_file.exists():
            return settings

        try:
            current_mtime = self.config_file.stat().st_mtime
            if (AppConfig._cached_settings is not None and
                    AppConfig._cache_file_mtime == (self.config_file, current_mtime)):
                return AppConfig._cached_settings.copy()

            with open(self.config_file, 'r', encoding='utf-8') as f:
                loaded = json.load(f)
            if isinstance(loaded, dict):
                settings.update(loaded)

            AppConfig._cached_settings = settings.copy()
            AppConfig._cache_file_mtime = (self.config_file, current_mtime)
            return settings
        except (json.JSONDecodeError, OSError):
            return settings

    def save_settings(self):
        """Write settings to disk; failures are reported but never fatal"""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(self.settings, f, indent=2)
        except OSError as e:
            print(f"Warning: failed to save config. {e}", file=sys.stderr)
        finally:
            AppConfig._cached_settings = None
            AppConfig._cache_file_mtime = None

    def get(self, key, default=None):
        """Get a setting value; window state keys come back as QByteArray"""
        value = self.settings.get(key, default)
        if (key.endswith("geometry") or key.endswith("state")) and isinstance(value, str) and value:
            try:
                return QByteArray(base64.b64decode(value.encode('utf-8')))
            except ValueError:
                return default
        return value

    def set(self, key, value):
        """Set and persist a setting value"""
        if isinstance(value, QByteArray):
            value = base64.b64encode(value.data()).decode('utf-8')
        self.settings = self.load_settings()
        self.settings[key] = value
        self.save_settings()

    @property
    def skip_overwrite_disclaimer(self) -> bool:
        return bool(self.settings.get("skip_overwrite_disclaimer", False))
