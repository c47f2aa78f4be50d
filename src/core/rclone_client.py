"""
Thin wrapper around the rclone command line tool.

Every call runs one rclone subprocess to completion, so callers are
expected to invoke these methods off the GUI thread (see core.task_runner).
"""
import json
import os
import re
import subprocess
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Tuple

from core.rclone_path import RclonePath

DEFAULT_BINARY = 'rclone'
MKDIR_UNSUPPORTED_WARNING = (
    "Warning: running mkdir on a remote which can't have empty directories does nothing"
)


class RcloneError(Exception):
    """Base class for rclone setup problems."""


class RcloneUnavailableError(RcloneError):
    """rclone could not be started or refused to list remotes."""


class PasswordRequiredError(RcloneError):
    """The rclone config is encrypted and no (valid) password was given."""


class MkdirResult(Enum):
    CREATED = 'created'
    NOT_SUPPORTED_HERE = 'not_supported_here'
    FAILED = 'failed'


_FRACTION_RE = re.compile(r'\.(\d+)')


def parse_mod_time(raw: str) -> datetime:
    """Parse rclone's RFC 3339 timestamps (nanosecond fractions, trailing Z)."""
    value = raw.strip()
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    value = _FRACTION_RE.sub(lambda m: '.' + m.group(1)[:6].ljust(6, '0'), value, count=1)
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_size(size: int) -> str:
    """Format a byte count with decimal (SI) units"""
    value = float(size)
    for unit in ['B', 'kB', 'MB', 'GB', 'TB']:
        if value < 1000.0:
            if unit == 'B':
                return f"{int(value)} B"
            return f"{value:.1f} {unit}"
        value /= 1000.0
    return f"{value:.1f} PB"


@dataclass(frozen=True)
class FileListing:
    """One entry of an `rclone lsjson` listing."""

    path: RclonePath
    name: str
    size: int
    mime_type: str
    mod_time: datetime
    is_dir: bool
    is_bucket: Optional[bool] = None

    @classmethod
    def from_json(cls, entry: dict, parent_path: RclonePath) -> 'FileListing':
        # Entry paths are relative to the listed directory
        return cls(
            path=parent_path.join(entry['Path']),
            name=entry['Name'],
            size=int(entry.get('Size', -1)),
            mime_type=entry.get('MimeType', ''),
            mod_time=parse_mod_time(entry['ModTime']),
            is_dir=bool(entry.get('IsDir', False)),
            is_bucket=entry.get('IsBucket'),
        )

    def formatted_size(self) -> Optional[str]:
        """Size for display; None for directories and unknown (-1) or empty sizes."""
        if self.size in (-1, 0):
            return None
        return format_size(self.size)


def _failure(prefix: str, result: subprocess.CompletedProcess) -> str:
    return f"{prefix} with exit status {result.returncode}\n\n{result.stderr.strip()}"


class RcloneClient:
    """Lister, transfer executor and remote list backed by the rclone CLI.

    Operations return (success, result) tuples: result is the payload on
    success and a human readable error message on failure.
    """

    def __init__(self, password: Optional[str] = None, config_path: Optional[str] = None,
                 binary: Optional[str] = None):
        self.password = password
        self.config_path = config_path
        self.binary = binary or os.environ.get('RCLONE_BINARY', DEFAULT_BINARY)

    @classmethod
    def connect(cls, password: Optional[str] = None, config_path: Optional[str] = None,
                binary: Optional[str] = None) -> 'RcloneClient':
        """Create a client and verify it can talk to rclone."""
        client = cls(password, config_path, binary)
        success, result = client.list_remotes()
        if not success:
            if password is not None:
                raise PasswordRequiredError(result)
            raise RcloneUnavailableError(result)
        return client

    @staticmethod
    def is_password_required(config_path: Optional[str] = None, binary: Optional[str] = None) -> bool:
        """Check whether the rclone config is encrypted.

        Raises RcloneUnavailableError if rclone cannot be started at all.
        """
        cmd = [binary or os.environ.get('RCLONE_BINARY', DEFAULT_BINARY), 'config', 'show']
        if config_path:
            cmd.append(f"--config={config_path}")
        try:
            result = subprocess.run(cmd, stdin=subprocess.DEVNULL, capture_output=True, text=True)
        except OSError as e:
            raise RcloneUnavailableError(str(e)) from e
        return result.returncode != 0

    def _run(self, *args: str) -> subprocess.CompletedProcess:
        cmd = [self.binary]
        if self.config_path:
            cmd.append(f"--config={self.config_path}")
        cmd.extend(args)
        env = os.environ.copy()
        if self.password is not None:
            env['RCLONE_CONFIG_PASS'] = self.password
        return subprocess.run(cmd, stdin=subprocess.DEVNULL, capture_output=True,
                              text=True, env=env)

    def _simple(self, prefix: str, *args: str) -> Tuple[bool, str]:
        try:
            result = self._run(*args)
        except OSError:
            return False, "Command did not start"
        if result.returncode == 0:
            return True, ""
        return False, _failure(prefix, result)

    def list_remotes(self) -> Tuple[bool, object]:
        try:
            result = self._run('listremotes')
        except OSError:
            return False, "Command did not start"
        if result.returncode != 0:
            return False, _failure("Rclone command failed", result)
        remotes = [line.strip() for line in result.stdout.splitlines() if line.strip()]
        return True, remotes

    def ls(self, path: RclonePath) -> Tuple[bool, object]:
        try:
            result = self._run('lsjson', str(path))
        except OSError:
            return False, "Command did not start"
        if result.returncode != 0:
            return False, _failure("Rclone command failed", result)
        try:
            entries = json.loads(result.stdout or '[]')
            listings = [FileListing.from_json(entry, path) for entry in entries]
        except (ValueError, KeyError, TypeError) as e:
            return False, f"Could not decode listing of {path}: {e}"
        return True, listings

    def copy(self, source_path: RclonePath, target_path: RclonePath) -> Tuple[bool, str]:
        return self._simple("Copy failed", 'copyto', str(source_path), str(target_path))

    def move(self, source_path: RclonePath, target_path: RclonePath) -> Tuple[bool, str]:
        return self._simple("Move failed", 'moveto', str(source_path), str(target_path))

    def rename(self, path: RclonePath, new_name: str) -> Tuple[bool, str]:
        target = path.resolve_to_parent().join(new_name)
        return self._simple("Rename failed", 'moveto', str(path), str(target))

    def remove(self, path: RclonePath, is_dir: bool = False) -> Tuple[bool, str]:
        # purge removes the directory itself, delete only removes files
        command = 'purge' if is_dir else 'deletefile'
        return self._simple("Delete failed", command, str(path))

    def mkdir(self, path: RclonePath) -> Tuple[MkdirResult, str]:
        try:
            result = self._run('mkdir', str(path))
        except OSError:
            return MkdirResult.FAILED, "Command did not start"
        if result.returncode != 0:
            return MkdirResult.FAILED, _failure("Rclone command failed", result)
        if MKDIR_UNSUPPORTED_WARNING in (result.stderr or ''):
            return MkdirResult.NOT_SUPPORTED_HERE, ""
        return MkdirResult.CREATED, ""
