"""
Tests for the local filesystem metadata source.
"""

import errno
import os
from pathlib import Path

import pytest

from permscout.permissions import EntryKind, FatalOSError, LocalMetadataSource


@pytest.fixture
def source():
    return LocalMetadataSource()


class TestLstat:
    def test_reports_owner_and_permission_bits(self, source, tmp_path):
        target = tmp_path / "file.txt"
        target.write_text("x")
        target.chmod(0o4640)

        meta = source.lstat(target)

        assert meta.uid == os.getuid()
        assert meta.gid == target.stat().st_gid
        assert meta.mode == 0o640

    def test_missing_path(self, source, tmp_path):
        with pytest.raises(FatalOSError) as exc_info:
            source.lstat(tmp_path / "missing")

        err = exc_info.value
        assert err.operation == "lstat"
        assert err.error.errno == errno.ENOENT
        assert "missing" in str(err)


class TestListDir:
    def test_entries_are_tagged_without_following_links(self, source, tmp_path):
        (tmp_path / "file").write_text("x")
        (tmp_path / "dir").mkdir()
        (tmp_path / "dirlink").symlink_to(tmp_path / "dir")
        (tmp_path / "dangling").symlink_to(tmp_path / "nowhere")

        kinds = {entry.name: entry.kind for entry in source.list_dir(tmp_path)}

        assert kinds == {
            "file": EntryKind.OTHER,
            "dir": EntryKind.DIRECTORY,
            "dirlink": EntryKind.SYMLINK,
            "dangling": EntryKind.SYMLINK,
        }

    def test_entry_paths_are_children(self, source, tmp_path):
        (tmp_path / "a").write_text("x")
        (entry,) = source.list_dir(tmp_path)
        assert entry.path == tmp_path / "a"
        assert isinstance(entry.path, Path)

    def test_missing_directory(self, source, tmp_path):
        with pytest.raises(FatalOSError) as exc_info:
            source.list_dir(tmp_path / "missing")
        assert exc_info.value.operation == "scandir"

    def test_listing_a_file(self, source, tmp_path):
        target = tmp_path / "file"
        target.write_text("x")
        with pytest.raises(FatalOSError) as exc_info:
            source.list_dir(target)
        assert exc_info.value.error.errno == errno.ENOTDIR


class TestResolve:
    def test_resolves_symlinks_and_dots(self, source, tmp_path):
        real = tmp_path / "real"
        real.mkdir()
        (tmp_path / "alias").symlink_to(real)

        assert source.resolve(tmp_path / "alias" / ".." / "alias") == real.resolve()

    def test_missing_path(self, source, tmp_path):
        with pytest.raises(FatalOSError) as exc_info:
            source.resolve(tmp_path / "missing")
        assert exc_info.value.operation == "canonicalize"

    def test_is_directory(self, source, tmp_path):
        (tmp_path / "file").write_text("x")
        assert source.is_directory(tmp_path) is True
        assert source.is_directory(tmp_path / "file") is False
