"""
Writable-file auditor.

Answers two questions for an identity: can it reach a directory at all, and
if so, which entries below that directory can it write to.
"""

import logging
import os
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from .classifier import PermissionBits, classify_permissions
from .config import EXCLUDED_ROOT_ENTRIES, AuditOptions
from .exceptions import NotADirectoryTargetError
from .identity import Identity
from .metadata import DirEntry, LocalMetadataSource, MetadataSource

logger = logging.getLogger(__name__)

PathCallback = Callable[[Path], None]


def _is_root(path: Path) -> bool:
    return path.parent == path


def is_resolvable(
    path: Path,
    identity: Identity,
    source: MetadataSource | None = None,
    on_ancestor: PathCallback | None = None,
) -> bool:
    """
    Check that ``identity`` can traverse every directory from "/" down to
    and including ``path``.

    Walks upwards from ``path`` and stops at the first directory without the
    execute bit. ``on_ancestor`` is called for each non-root directory before
    it is checked.
    """
    source = source or LocalMetadataSource()
    current = path
    while not _is_root(current):
        if on_ancestor is not None:
            on_ancestor(current)
        perms = classify_permissions(current, identity, source)
        logger.debug(f"Ancestor {current}: {perms.symbolic}")
        if not perms & PermissionBits.EXECUTE:
            logger.debug(f"{identity} cannot traverse {current}")
            return False
        current = current.parent

    perms = classify_permissions(current, identity, source)
    logger.debug(f"Root {current}: {perms.symbolic}")
    return bool(perms & PermissionBits.EXECUTE)


def find_writable_files(
    directory: Path,
    identity: Identity,
    source: MetadataSource | None = None,
    excluded_root_entries: tuple[str, ...] = EXCLUDED_ROOT_ENTRIES,
) -> Iterator[Path]:
    """
    Yield every entry under ``directory`` that ``identity`` can write to.

    Depth-first and pre-order. Symlinks are never classified or followed,
    ``excluded_root_entries`` are skipped when listing "/", and directories
    without the execute bit are reported if writable but not descended into.
    Paths are yielded as soon as they are found.

    Raises:
        FatalOSError: a listing or stat failed mid-walk
    """
    source = source or LocalMetadataSource()
    # Pending listings, innermost last
    pending: list[tuple[Path, Iterator[DirEntry]]] = [
        (directory, iter(source.list_dir(directory)))
    ]
    logger.debug(f"Entering {directory}")

    while pending:
        parent, entries = pending[-1]
        entry = next(entries, None)
        if entry is None:
            pending.pop()
            continue

        if entry.is_symlink:
            logger.debug(f"Skipping symlink {entry.path}")
            continue

        if _is_root(parent) and entry.name in excluded_root_entries:
            logger.debug(f"Skipping pseudo-filesystem {entry.path}")
            continue

        perms = classify_permissions(entry.path, identity, source)
        if perms & PermissionBits.WRITE:
            yield entry.path

        if entry.is_directory and perms & PermissionBits.EXECUTE:
            logger.debug(f"Entering {entry.path}")
            pending.append((entry.path, iter(source.list_dir(entry.path))))


@dataclass
class AuditReport:
    """Outcome of one audit run."""

    target: Path
    resolvable: bool
    writable: list[Path] = field(default_factory=list)

    @property
    def writable_count(self) -> int:
        return len(self.writable)


class WritableFileAuditor:
    """
    Audit a directory tree on behalf of one identity.

    Combines target validation, the resolvability check and the writable
    file scan.
    """

    def __init__(
        self,
        identity: Identity,
        source: MetadataSource | None = None,
        options: AuditOptions | None = None,
    ):
        self.identity = identity
        self.source = source or LocalMetadataSource()
        self.options = options or AuditOptions()
        self.logger = logging.getLogger(__name__)

    def check_target(self, path: str | os.PathLike) -> Path:
        """
        Canonicalize the audit target.

        Raises:
            FatalOSError: the path cannot be resolved
            NotADirectoryTargetError: the resolved path is not a directory
        """
        target = self.source.resolve(path)
        if not self.source.is_directory(target):
            raise NotADirectoryTargetError(target)
        self.logger.debug(f"Audit target: {target}")
        return target

    def is_resolvable(self, target: Path, on_ancestor: PathCallback | None = None) -> bool:
        return is_resolvable(target, self.identity, self.source, on_ancestor)

    def iter_writable(self, target: Path) -> Iterator[Path]:
        return find_writable_files(
            target, self.identity, self.source, self.options.excluded_root_entries
        )

    def audit(
        self,
        path: str | os.PathLike,
        on_writable: PathCallback | None = None,
        on_ancestor: PathCallback | None = None,
    ) -> AuditReport:
        """
        Run a complete audit of ``path``.

        Args:
            path: Directory to audit, canonicalized before use
            on_writable: Called with each writable path as soon as it is found
            on_ancestor: Called with each ancestor visited by the resolvability check

        Returns:
            AuditReport; an unresolvable target is scanned for nothing and
            is not an error
        """
        target = self.check_target(path)
        report = AuditReport(target=target, resolvable=self.is_resolvable(target, on_ancestor))

        if not report.resolvable:
            self.logger.info(f"{target} is not reachable by {self.identity}, nothing to scan")
            return report

        for writable in self.iter_writable(target):
            report.writable.append(writable)
            if on_writable is not None:
                on_writable(writable)

        self.logger.debug(f"Found {report.writable_count} writable entries under {target}")
        return report
