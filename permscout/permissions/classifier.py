"""
Effective permission classification for an identity.

Only the classic owner/group/other triad is considered: no ACLs,
capabilities or supplementary groups.
"""

from enum import IntFlag
from pathlib import Path

from .config import (
    EXECUTE_BIT,
    GROUP_SHIFT,
    OTHER_SHIFT,
    OWNER_SHIFT,
    READ_BIT,
    TRIAD_MASK,
    WRITE_BIT,
)
from .identity import Identity
from .metadata import EntryMetadata, LocalMetadataSource, MetadataSource


class PermissionBits(IntFlag):
    """Rights one identity has on one entry."""

    NONE = 0
    EXECUTE = EXECUTE_BIT
    WRITE = WRITE_BIT
    READ = READ_BIT

    @property
    def symbolic(self) -> str:
        """ls-style rendering, e.g. ``rw-``."""
        return "".join(
            char if self & bit else "-"
            for char, bit in (("r", self.READ), ("w", self.WRITE), ("x", self.EXECUTE))
        )


def select_triad(metadata: EntryMetadata, identity: Identity) -> PermissionBits:
    """
    Pick the triad that applies to ``identity``.

    Owner wins when the uid matches, then group when the gid matches,
    otherwise other. A uid match with an empty owner triad does not fall
    through to the group or other triad.
    """
    if metadata.uid == identity.uid:
        shift = OWNER_SHIFT
    elif metadata.gid == identity.gid:
        shift = GROUP_SHIFT
    else:
        shift = OTHER_SHIFT
    return PermissionBits((metadata.mode >> shift) & TRIAD_MASK)


def classify_permissions(
    path: Path, identity: Identity, source: MetadataSource | None = None
) -> PermissionBits:
    """
    Effective rights of ``identity`` on ``path`` itself (symlinks not followed).

    Args:
        path: Existing path, discovered by a listing or a known ancestor
        identity: Audited uid/gid pair
        source: Metadata source, the local filesystem by default

    Returns:
        Permission bits in the range 0-7

    Raises:
        FatalOSError: metadata could not be read
    """
    source = source or LocalMetadataSource()
    return select_triad(source.lstat(path), identity)
