"""
Exceptions raised by the writable-file auditor.

Lower layers raise, the command line entry point reports and exits.
"""

from __future__ import annotations

import os


class AuditError(Exception):
    """Base class for failures that stop an audit."""

    exit_code = 1


class InputError(AuditError):
    """Bad invocation, detected before any scanning starts."""


class UsageError(InputError):
    """Wrong number of arguments or unknown options."""


class UnknownUserError(InputError):
    """Raised when a user name is not in the passwd database."""

    def __init__(self, name: str):
        super().__init__(f"user {name} does not exist")
        self.name = name


class UnknownGroupError(InputError):
    """Raised when a group name is not in the group database."""

    def __init__(self, name: str):
        super().__init__(f"group {name} does not exist")
        self.name = name


class NotADirectoryTargetError(InputError):
    """Raised when the audit target is not a directory."""

    def __init__(self, path: str | os.PathLike):
        super().__init__(f"{path} is not a directory")
        self.path = path


class FatalOSError(AuditError):
    """
    An operating system call failed while auditing.

    Never recovered from: skipping the entry would leave a partial audit
    that looks complete.
    """

    def __init__(self, operation: str, target: str | os.PathLike | None, error: OSError):
        self.operation = operation
        self.target = target
        self.error = error
        reason = error.strerror or str(error)
        if target is None:
            message = f"{operation}: {reason}"
        else:
            message = f"{operation}: {target}: {reason}"
        super().__init__(message)
