"""Location strings as understood by rclone.

A single string may follow one of three syntaxes:

  remote:path/to/item     a configured rclone remote
  /home/user/file         POSIX absolute (local)
  C:\\Users\\file          drive-letter absolute (local, Windows)

The syntax is never stored; every operation classifies the raw string again
through _scheme_of() so that all methods agree on the edge cases.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

SCHEME_REMOTE = 'remote'
SCHEME_POSIX = 'posix'
SCHEME_DRIVE = 'drive'

_DRIVE_RE = re.compile(r'^[A-Za-z]:\\')


def _scheme_of(raw: str) -> str:
    if _DRIVE_RE.match(raw):
        return SCHEME_DRIVE
    if raw.startswith('/'):
        return SCHEME_POSIX
    return SCHEME_REMOTE


@dataclass(frozen=True, order=True)
class RclonePath:
    """Immutable location value; equality and ordering follow the raw string."""

    inner: str = field(default='')

    def __str__(self) -> str:
        return self.inner

    @property
    def scheme(self) -> str:
        return _scheme_of(self.inner)

    def is_root(self) -> bool:
        """True for 'name:', '/' and 'X:\\'."""
        scheme = _scheme_of(self.inner)
        if scheme == SCHEME_DRIVE:
            return len(self.inner) == 3
        if scheme == SCHEME_POSIX:
            return self.inner == '/'
        return self.inner.endswith(':')

    def resolve_to_parent(self) -> 'RclonePath':
        """Return the location one level up; roots resolve to themselves."""
        scheme = _scheme_of(self.inner)
        if scheme == SCHEME_DRIVE:
            return self._drive_parent()
        if scheme == SCHEME_POSIX:
            return self._posix_parent()
        return self._remote_parent()

    def _remote_parent(self) -> 'RclonePath':
        if self.inner.endswith(':'):
            return self
        parts = [p for p in re.split(r'[:/]', self.inner) if p]
        if len(parts) < 2:
            # No remote separator at all ("foo"); nothing above it
            return self
        parts.pop()
        return RclonePath(parts[0] + ':' + '/'.join(parts[1:]))

    def _posix_parent(self) -> 'RclonePath':
        parts = [p for p in self.inner.split('/') if p]
        if not parts:
            return RclonePath('/')
        parts.pop()
        return RclonePath('/' + '/'.join(parts))

    def _drive_parent(self) -> 'RclonePath':
        drive = self.inner[:2]
        parts = [p for p in self.inner[3:].split('\\') if p]
        if not parts:
            return RclonePath(drive + '\\')
        parts.pop()
        return RclonePath(drive + '\\' + '\\'.join(parts))

    def path_has_parent(self) -> bool:
        """Only a bare remote root ('name:') has no parent."""
        if '/' in self.inner:
            return True
        return not self.inner.endswith(':')

    def filename(self) -> str:
        """Last segment, split on '\\' first, then '/', then the remote colon."""
        for separator in ('\\', '/', ':'):
            if separator in self.inner:
                return self.inner.rsplit(separator, 1)[1]
        return self.inner

    def join(self, tail: str) -> 'RclonePath':
        """Append tail as a child segment using this location's own separator."""
        if self.inner.endswith(('/', '\\', ':')):
            infix = ''
        elif _scheme_of(self.inner) == SCHEME_DRIVE:
            infix = '\\'
        else:
            infix = '/'
        return RclonePath(f"{self.inner}{infix}{tail}")

    def remote(self) -> Optional[str]:
        """Remote prefix including the colon ('foo:'), or None for bare strings."""
        index = self.inner.find(':')
        if index == -1:
            return None
        return self.inner[:index + 1]
