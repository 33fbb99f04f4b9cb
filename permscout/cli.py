"""
Command line entry point: ``permscout USER GROUP PATH``.
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from permscout.permissions import (
    AuditError,
    AuditOptions,
    IdentityResolver,
    MetadataSource,
    UsageError,
    WritableFileAuditor,
    resolve_identity,
)

LOG_FORMAT = "%(levelname)s: %(message)s"

logger = logging.getLogger(__name__)
error_console = Console(stderr=True, highlight=False, emoji=False)


class AuditArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting with status 2."""

    def error(self, message):
        raise UsageError(f"{self.format_usage().rstrip()}\n{self.prog}: error: {message}")


def build_parser() -> AuditArgumentParser:
    from permscout import __version__

    parser = AuditArgumentParser(
        prog="permscout",
        description="Find files and directories a user/group pair can write to",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  permscout nobody nogroup /
  permscout www-data www-data /var/www
  permscout --show-chain backup backup /srv/backups

The tree is scanned only if the identity can traverse every directory
from / down to PATH. Symlinks are never followed; /sys and /proc are skipped.
        """,
    )
    parser.add_argument("user", metavar="USER", help="User account name to audit")
    parser.add_argument("group", metavar="GROUP", help="Group name to audit")
    parser.add_argument("path", metavar="PATH", help="Directory to audit")
    parser.add_argument(
        "--show-chain",
        action="store_true",
        help="Also print each ancestor directory checked for traverse permission",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def emit_path(path: Path) -> None:
    """Write one path to stdout immediately, bytes preserved."""
    stream = sys.stdout
    stream.flush()
    stream.buffer.write(os.fsencode(path) + b"\n")
    stream.buffer.flush()


def run(
    user: str,
    group: str,
    path: str,
    options: AuditOptions,
    resolver: IdentityResolver | None = None,
    source: MetadataSource | None = None,
) -> int:
    """Resolve the identity, then audit ``path``. Raises AuditError on failure."""
    identity = resolve_identity(user, group, resolver)
    logger.debug(f"Auditing as {user}:{group} ({identity})")

    auditor = WritableFileAuditor(identity, source=source, options=options)
    auditor.audit(
        path,
        on_writable=emit_path,
        on_ancestor=emit_path if options.show_chain else None,
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        options = AuditOptions.from_args(args)
        logging.basicConfig(
            level=logging.DEBUG if options.verbose else logging.WARNING, format=LOG_FORMAT
        )
        return run(args.user, args.group, args.path, options)
    except AuditError as e:
        error_console.print(escape(str(e)), style="red", soft_wrap=True)
        return e.exit_code
    except BrokenPipeError:
        # Reader closed the pipe; interpreter shutdown flushes into /dev/null instead
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        os.close(devnull)
        return 1
    except KeyboardInterrupt:
        print("\n❌ Operation cancelled by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
