"""
Unit tests for RcloneClient (subprocess calls are mocked)
"""
import json
import subprocess
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from core.rclone_client import (FileListing, MkdirResult, MKDIR_UNSUPPORTED_WARNING,
                                PasswordRequiredError, RcloneClient, RcloneUnavailableError,
                                format_size, parse_mod_time)
from core.rclone_path import RclonePath


def _completed(returncode=0, stdout="", stderr=""):
    return MagicMock(returncode=returncode, stdout=stdout, stderr=stderr)


LSJSON = json.dumps([
    {"Path": "photos", "Name": "photos", "Size": -1, "MimeType": "inode/directory",
     "ModTime": "2024-03-01T10:00:00.123456789Z", "IsDir": True},
    {"Path": "notes.txt", "Name": "notes.txt", "Size": 2048, "MimeType": "text/plain",
     "ModTime": "2024-03-02T11:30:00+01:00", "IsDir": False, "IsBucket": False},
])


class TestParsing:
    def test_parse_nanosecond_utc(self):
        parsed = parse_mod_time("2024-03-01T10:00:00.123456789Z")
        assert parsed == datetime(2024, 3, 1, 10, 0, 0, 123456, tzinfo=timezone.utc)

    def test_parse_offset_without_fraction(self):
        parsed = parse_mod_time("2024-03-02T11:30:00+01:00")
        assert parsed.utcoffset().total_seconds() == 3600

    def test_format_size(self):
        assert format_size(999) == "999 B"
        assert format_size(2048) == "2.0 kB"
        assert format_size(3_500_000) == "3.5 MB"

    def test_entry_path_joined_with_parent(self):
        entry = json.loads(LSJSON)[1]
        listing = FileListing.from_json(entry, RclonePath("r:docs"))
        assert listing.path == RclonePath("r:docs/notes.txt")
        assert listing.formatted_size() == "2.0 kB"
        assert listing.is_bucket is False

    def test_directory_has_no_size(self):
        listing = FileListing.from_json(json.loads(LSJSON)[0], RclonePath("r:"))
        assert listing.path == RclonePath("r:photos")
        assert listing.formatted_size() is None


class TestCommands:
    @patch('subprocess.run')
    def test_list_remotes(self, mock_run):
        mock_run.return_value = _completed(stdout="gdrive:\ns3:\n\n")
        success, remotes = RcloneClient().list_remotes()
        assert success
        assert remotes == ["gdrive:", "s3:"]
        assert mock_run.call_args[0][0][-1] == "listremotes"

    @patch('subprocess.run')
    def test_config_path_and_password(self, mock_run):
        mock_run.return_value = _completed(stdout="a:\n")
        RcloneClient(password="secret", config_path="/tmp/rclone.conf", binary="rclone").list_remotes()
        args, kwargs = mock_run.call_args
        assert args[0][:2] == ["rclone", "--config=/tmp/rclone.conf"]
        assert kwargs["env"]["RCLONE_CONFIG_PASS"] == "secret"
        assert kwargs["stdin"] == subprocess.DEVNULL

    @patch('subprocess.run')
    def test_ls(self, mock_run):
        mock_run.return_value = _completed(stdout=LSJSON)
        success, listings = RcloneClient().ls(RclonePath("r:"))
        assert success
        assert [l.name for l in listings] == ["photos", "notes.txt"]

    @patch('subprocess.run')
    def test_ls_failure_includes_stderr(self, mock_run):
        mock_run.return_value = _completed(returncode=3, stderr="directory not found")
        success, error = RcloneClient().ls(RclonePath("r:missing"))
        assert not success
        assert "directory not found" in error

    @patch('subprocess.run')
    def test_ls_bad_json(self, mock_run):
        mock_run.return_value = _completed(stdout="not json")
        success, error = RcloneClient().ls(RclonePath("r:"))
        assert not success
        assert "Could not decode" in error

    @patch('subprocess.run', side_effect=FileNotFoundError("rclone"))
    def test_command_did_not_start(self, _mock_run):
        assert RcloneClient().copy(RclonePath("a:x"), RclonePath("b:x")) == (False, "Command did not start")

    @patch('subprocess.run')
    def test_copy_move_rename_remove(self, mock_run):
        mock_run.return_value = _completed()
        client = RcloneClient(binary="rclone")
        assert client.copy(RclonePath("a:x"), RclonePath("b:x")) == (True, "")
        assert mock_run.call_args[0][0] == ["rclone", "copyto", "a:x", "b:x"]
        client.move(RclonePath("a:x"), RclonePath("b:dir/x"))
        assert mock_run.call_args[0][0] == ["rclone", "moveto", "a:x", "b:dir/x"]
        client.rename(RclonePath("a:dir/old.txt"), "new.txt")
        assert mock_run.call_args[0][0] == ["rclone", "moveto", "a:dir/old.txt", "a:dir/new.txt"]
        client.remove(RclonePath("a:dir"), is_dir=True)
        assert mock_run.call_args[0][0] == ["rclone", "purge", "a:dir"]
        client.remove(RclonePath("a:dir/f"))
        assert mock_run.call_args[0][0] == ["rclone", "deletefile", "a:dir/f"]

    @patch('subprocess.run')
    def test_mkdir_outcomes(self, mock_run):
        client = RcloneClient()
        mock_run.return_value = _completed()
        assert client.mkdir(RclonePath("a:new"))[0] is MkdirResult.CREATED
        mock_run.return_value = _completed(stderr=MKDIR_UNSUPPORTED_WARNING)
        assert client.mkdir(RclonePath("s3:bucket/new"))[0] is MkdirResult.NOT_SUPPORTED_HERE
        mock_run.return_value = _completed(returncode=1, stderr="permission denied")
        result, message = client.mkdir(RclonePath("a:new"))
        assert result is MkdirResult.FAILED
        assert "permission denied" in message


class TestConnect:
    @patch('subprocess.run')
    def test_connect_success(self, mock_run):
        mock_run.return_value = _completed(stdout="a:\n")
        client = RcloneClient.connect()
        assert isinstance(client, RcloneClient)

    @patch('subprocess.run', side_effect=FileNotFoundError("rclone"))
    def test_connect_unavailable(self, _mock_run):
        with pytest.raises(RcloneUnavailableError):
            RcloneClient.connect()

    @patch('subprocess.run')
    def test_connect_wrong_password(self, mock_run):
        mock_run.return_value = _completed(returncode=1, stderr="bad password")
        with pytest.raises(PasswordRequiredError):
            RcloneClient.connect(password="nope")

    @patch('subprocess.run')
    def test_is_password_required(self, mock_run):
        mock_run.return_value = _completed(returncode=1)
        assert RcloneClient.is_password_required()
        mock_run.return_value = _completed(returncode=0)
        assert not RcloneClient.is_password_required()

    @patch('subprocess.run', side_effect=FileNotFoundError("rclone"))
    def test_is_password_required_without_rclone(self, _mock_run):
        with pytest.raises(RcloneUnavailableError):
            RcloneClient.is_password_required()
