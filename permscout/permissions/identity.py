"""
User and group name resolution for the audited identity.
"""

import grp
import logging
import pwd
from dataclasses import dataclass
from typing import Protocol

from .exceptions import FatalOSError, UnknownGroupError, UnknownUserError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """The (uid, gid) pair being audited."""

    uid: int
    gid: int

    def __str__(self) -> str:
        return f"{self.uid}:{self.gid}"


class IdentityResolver(Protocol):
    """Maps account names to numeric ids."""

    def resolve_user(self, name: str) -> int: ...

    def resolve_group(self, name: str) -> int: ...


class PosixIdentityResolver:
    """IdentityResolver backed by the passwd and group databases."""

    def resolve_user(self, name: str) -> int:
        """
        Look up a user name.

        Raises:
            UnknownUserError: no such user
            FatalOSError: the passwd lookup itself failed
        """
        try:
            uid = pwd.getpwnam(name).pw_uid
        except KeyError:
            raise UnknownUserError(name) from None
        except OSError as e:
            raise FatalOSError("can not get user record", name, e) from e
        logger.debug(f"Resolved user {name} to UID {uid}")
        return uid

    def resolve_group(self, name: str) -> int:
        """
        Look up a group name.

        Raises:
            UnknownGroupError: no such group
            FatalOSError: the group lookup itself failed
        """
        try:
            gid = grp.getgrnam(name).gr_gid
        except KeyError:
            raise UnknownGroupError(name) from None
        except OSError as e:
            raise FatalOSError("can not get group record", name, e) from e
        logger.debug(f"Resolved group {name} to GID {gid}")
        return gid


def resolve_identity(user: str, group: str, resolver: IdentityResolver | None = None) -> Identity:
    """Resolve a user and group name pair once, at startup."""
    resolver = resolver or PosixIdentityResolver()
    return Identity(uid=resolver.resolve_user(user), gid=resolver.resolve_group(group))
