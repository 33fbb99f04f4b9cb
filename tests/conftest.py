"""Pytest configuration for the `tests/` suite.

Puts the repository root on `sys.path` so the suite runs from a plain
checkout as well as from an editable install, and provides in-memory
fakes of the filesystem and account databases for ownership scenarios
that would otherwise need root.
"""

from __future__ import annotations

import errno
import sys
from pathlib import Path

import pytest


def _prepend_sys_path(path: Path) -> None:
    path_str = str(path)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)


_REPO_ROOT = Path(__file__).resolve().parents[1]
_prepend_sys_path(_REPO_ROOT)

from permscout.permissions import (  # noqa: E402
    DirEntry,
    EntryKind,
    EntryMetadata,
    FatalOSError,
    UnknownGroupError,
    UnknownUserError,
)


class FakeMetadataSource:
    """MetadataSource over an in-memory tree. "/" exists with mode 755."""

    def __init__(self):
        self.entries: dict[Path, tuple[EntryMetadata, EntryKind]] = {}
        self.children: dict[Path, list[Path]] = {}
        self.lstat_calls: list[Path] = []
        self.listed: list[Path] = []
        self.broken_listings: set[Path] = set()
        self.add("/", uid=0, gid=0, mode=0o755)

    def add(self, path, uid=0, gid=0, mode=0o755, kind=EntryKind.DIRECTORY):
        path = Path(path)
        if path not in self.entries and path.parent != path:
            self.children.setdefault(path.parent, []).append(path)
        self.entries[path] = (EntryMetadata(uid=uid, gid=gid, mode=mode), kind)
        return self

    def add_file(self, path, uid=0, gid=0, mode=0o644):
        return self.add(path, uid=uid, gid=gid, mode=mode, kind=EntryKind.OTHER)

    def add_symlink(self, path, uid=0, gid=0):
        return self.add(path, uid=uid, gid=gid, mode=0o777, kind=EntryKind.SYMLINK)

    def lstat(self, path):
        path = Path(path)
        self.lstat_calls.append(path)
        if path not in self.entries:
            raise FatalOSError(
                "lstat", path, FileNotFoundError(errno.ENOENT, "No such file or directory")
            )
        return self.entries[path][0]

    def list_dir(self, path):
        path = Path(path)
        self.listed.append(path)
        if path in self.broken_listings or path not in self.entries:
            raise FatalOSError(
                "scandir", path, FileNotFoundError(errno.ENOENT, "No such file or directory")
            )
        return [
            DirEntry(path=child, kind=self.entries[child][1])
            for child in self.children.get(path, [])
        ]

    def resolve(self, path):
        path = Path(path)
        if path not in self.entries:
            raise FatalOSError(
                "canonicalize", path, FileNotFoundError(errno.ENOENT, "No such file or directory")
            )
        return path

    def is_directory(self, path):
        return self.entries[Path(path)][1] is EntryKind.DIRECTORY


class FakeIdentityResolver:
    """IdentityResolver over fixed name tables."""

    def __init__(self, users=None, groups=None):
        self.users = users or {}
        self.groups = groups or {}

    def resolve_user(self, name):
        if name not in self.users:
            raise UnknownUserError(name)
        return self.users[name]

    def resolve_group(self, name):
        if name not in self.groups:
            raise UnknownGroupError(name)
        return self.groups[name]


@pytest.fixture
def fake_fs():
    return FakeMetadataSource()


@pytest.fixture
def fake_resolver():
    return FakeIdentityResolver(users={"alice": 1000, "root": 0}, groups={"staff": 1000, "root": 0})


@pytest.fixture
def audit_tree(fake_fs):
    """The /audit scenario: a private directory holding a world-writable file."""
    fake_fs.add("/audit", uid=1000, gid=1000, mode=0o700)
    fake_fs.add_file("/audit/secret", uid=0, gid=0, mode=0o666)
    fake_fs.add("/audit/locked", uid=0, gid=0, mode=0o700)
    fake_fs.add_file("/audit/locked/inner", uid=0, gid=0, mode=0o666)
    return fake_fs
