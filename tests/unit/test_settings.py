"""
Unit tests for AppConfig persistence
"""
import json

from PyQt6.QtCore import QByteArray

from utils.settings import AppConfig, DEFAULT_SETTINGS, rclone_config_path


def test_defaults_without_file(config):
    assert config.settings == DEFAULT_SETTINGS
    assert not config.skip_overwrite_disclaimer


def test_set_persists_across_instances(config):
    config.set("skip_overwrite_disclaimer", True)
    reloaded = AppConfig(config_dir=config.config_dir)
    assert reloaded.skip_overwrite_disclaimer
    saved = json.loads(config.config_file.read_text(encoding='utf-8'))
    assert saved["skip_overwrite_disclaimer"] is True


def test_geometry_round_trips_as_bytes(config):
    config.set("window_geometry", QByteArray(b"\x01\x02geometry"))
    assert isinstance(config.settings["window_geometry"], str)
    restored = AppConfig(config_dir=config.config_dir).get("window_geometry")
    assert bytes(restored.data()) == b"\x01\x02geometry"


def test_corrupt_file_falls_back_to_defaults(config):
    config.config_dir.mkdir(parents=True)
    config.config_file.write_text("{not json", encoding='utf-8')
    assert AppConfig(config_dir=config.config_dir).settings == DEFAULT_SETTINGS


def test_unknown_keys_are_kept(config):
    config.config_dir.mkdir(parents=True)
    config.config_file.write_text(json.dumps({"extra": 1}), encoding='utf-8')
    loaded = AppConfig(config_dir=config.config_dir)
    assert loaded.get("extra") == 1
    assert loaded.get("splitter_state") is None


def test_rclone_config_path_from_environment(monkeypatch):
    monkeypatch.delenv("RCLONE_CONFIG_FILE", raising=False)
    assert rclone_config_path() is None
    monkeypatch.setenv("RCLONE_CONFIG_FILE", "/srv/rclone.conf")
    assert rclone_config_path() == "/srv/rclone.conf"
