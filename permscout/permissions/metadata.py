"""
Filesystem metadata access for the auditor.

The auditing code only talks to a MetadataSource, so the host-specific stat
layout stays here and ownership scenarios can be exercised without root.
"""

import errno
import logging
import os
import stat
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol

from .config import PERMISSION_MASK
from .exceptions import FatalOSError

logger = logging.getLogger(__name__)


class EntryKind(Enum):
    """Type of a directory entry, as reported without following links."""

    SYMLINK = "symlink"
    DIRECTORY = "directory"
    OTHER = "other"


@dataclass(frozen=True)
class EntryMetadata:
    """Ownership and normalized 9-bit permission mode of one path."""

    uid: int
    gid: int
    mode: int


@dataclass(frozen=True)
class DirEntry:
    """One entry of a directory listing."""

    path: Path
    kind: EntryKind

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def is_symlink(self) -> bool:
        return self.kind is EntryKind.SYMLINK

    @property
    def is_directory(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


class MetadataSource(Protocol):
    """Read-only view of the filesystem used by the auditor."""

    def lstat(self, path: Path) -> EntryMetadata:
        """Metadata of ``path`` itself, never of a symlink target."""
        ...

    def list_dir(self, path: Path) -> list[DirEntry]:
        """Immediate entries of a directory, in no particular order."""
        ...

    def resolve(self, path: str | os.PathLike) -> Path:
        """Absolute path with symlinks, ``.`` and ``..`` resolved."""
        ...

    def is_directory(self, path: Path) -> bool:
        ...


class LocalMetadataSource:
    """MetadataSource backed by the host filesystem."""

    def lstat(self, path: Path) -> EntryMetadata:
        try:
            st = os.lstat(path)
        except OSError as e:
            raise FatalOSError("lstat", path, e) from e
        return EntryMetadata(
            uid=st.st_uid, gid=st.st_gid, mode=stat.S_IMODE(st.st_mode) & PERMISSION_MASK
        )

    def list_dir(self, path: Path) -> list[DirEntry]:
        entries = []
        try:
            with os.scandir(path) as it:
                for entry in it:
                    if entry.is_symlink():
                        kind = EntryKind.SYMLINK
                    elif entry.is_dir(follow_symlinks=False):
                        kind = EntryKind.DIRECTORY
                    else:
                        kind = EntryKind.OTHER
                    entries.append(DirEntry(path=Path(entry.path), kind=kind))
        except OSError as e:
            raise FatalOSError("scandir", path, e) from e
        logger.debug(f"Listed {len(entries)} entries in {path}")
        return entries

    def resolve(self, path: str | os.PathLike) -> Path:
        try:
            return Path(path).resolve(strict=True)
        except OSError as e:
            raise FatalOSError("canonicalize", path, e) from e
        except RuntimeError as e:
            # Symlink loop on interpreters older than 3.13
            raise FatalOSError("canonicalize", path, OSError(errno.ELOOP, str(e))) from e

    def is_directory(self, path: Path) -> bool:
        return Path(path).is_dir()
