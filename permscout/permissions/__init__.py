"""
Writable-file auditing for a user/group identity.
"""

import os

from .auditor import AuditReport, WritableFileAuditor, find_writable_files, is_resolvable
from .classifier import PermissionBits, classify_permissions, select_triad
from .config import AuditOptions
from .exceptions import (
    AuditError,
    FatalOSError,
    InputError,
    NotADirectoryTargetError,
    UnknownGroupError,
    UnknownUserError,
    UsageError,
)
from .identity import Identity, IdentityResolver, PosixIdentityResolver, resolve_identity
from .metadata import DirEntry, EntryKind, EntryMetadata, LocalMetadataSource, MetadataSource


def audit_path(path: str | os.PathLike, user: str, group: str) -> AuditReport:
    """
    Audit ``path`` for a user and group given by name.

    Args:
        path: Directory to audit
        user: User account name
        group: Group name

    Returns:
        AuditReport with the writable paths in discovery order
    """
    return WritableFileAuditor(resolve_identity(user, group)).audit(path)


__all__ = [
    "AuditError",
    "AuditOptions",
    "AuditReport",
    "DirEntry",
    "EntryKind",
    "EntryMetadata",
    "FatalOSError",
    "Identity",
    "IdentityResolver",
    "InputError",
    "LocalMetadataSource",
    "MetadataSource",
    "NotADirectoryTargetError",
    "PermissionBits",
    "PosixIdentityResolver",
    "UnknownGroupError",
    "UnknownUserError",
    "UsageError",
    "WritableFileAuditor",
    "audit_path",
    "classify_permissions",
    "find_writable_files",
    "is_resolvable",
    "resolve_identity",
    "select_triad",
]
