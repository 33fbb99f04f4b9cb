"""
Configuration for the writable-file auditor.
"""

import argparse
from dataclasses import dataclass

# Effective permission bits for one triad
READ_BIT = 0o4
WRITE_BIT = 0o2
EXECUTE_BIT = 0o1  # traverse, for directories

# Normalized mode layout: rwx rwx rwx
PERMISSION_MASK = 0o777
TRIAD_MASK = 0o7
OWNER_SHIFT = 6
GROUP_SHIFT = 3
OTHER_SHIFT = 0

# Entries directly under "/" that are never classified or descended into.
# Pseudo-filesystems: metadata is synthetic and walking them is meaningless.
EXCLUDED_ROOT_ENTRIES = ("sys", "proc")


@dataclass(frozen=True)
class AuditOptions:
    """
    Options that shape one audit run.

    There are no configuration files or environment variables: every option
    comes from the command line.
    """

    show_chain: bool = False
    verbose: bool = False
    excluded_root_entries: tuple[str, ...] = EXCLUDED_ROOT_ENTRIES

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "AuditOptions":
        return cls(
            show_chain=getattr(args, "show_chain", False),
            verbose=getattr(args, "verbose", False),
        )
