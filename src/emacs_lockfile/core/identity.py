"""Identity of the process taking a lock.

Lock records name a user, a host, a process ID and the host's boot time.
These come from ambient process state, so they are looked up through an
``IdentityProvider`` that callers can replace (tests, acting on behalf of
another process).
"""

import getpass
import logging
import os
import socket
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

import psutil
from pydantic import ValidationError

from ..constants import USER_ENV_VARS
from ..errors import IdentityError
from ..models import LockRecord

logger = logging.getLogger(__name__)


class IdentityProvider(Protocol):
    """Source of the current lock owner's identity."""

    def get_user(self) -> str:
        """Login name of the owner."""

    def get_host(self) -> str:
        """Machine name of the owner."""

    def get_pid(self) -> int:
        """Process ID of the owner."""

    def get_boot_time(self) -> int | None:
        """Boot timestamp of the owner's host, None if unknown."""


class SystemIdentity:
    """Identity of the running process, read from the operating system."""

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ

    def get_user(self) -> str:
        environ = os.environ if self._environ is None else self._environ
        for name in USER_ENV_VARS:
            value = environ.get(name)
            if value:
                return value
        try:
            return getpass.getuser()
        except (OSError, KeyError) as e:
            raise IdentityError(f"Can't determine user name: {e}") from e

    def get_host(self) -> str:
        return socket.gethostname()

    def get_pid(self) -> int:
        return os.getpid()

    def get_boot_time(self) -> int | None:
        """Return current time minus host uptime, or None if uptime is unavailable."""
        try:
            boot = psutil.boot_time()
        except (psutil.Error, OSError, RuntimeError) as e:
            logger.debug("Host boot time unavailable: %s", e)
            return None
        return int(boot)


@dataclass(frozen=True)
class StaticIdentity:
    """Fixed identity, for tests and for locking on behalf of another process."""

    user: str
    host: str
    pid: int
    boot: int | None = None

    def get_user(self) -> str:
        return self.user

    def get_host(self) -> str:
        return self.host

    def get_pid(self) -> int:
        return self.pid

    def get_boot_time(self) -> int | None:
        return self.boot


@dataclass(frozen=True)
class _OverriddenIdentity:
    base: IdentityProvider
    user: str | None = None
    host: str | None = None
    pid: int | None = None

    def get_user(self) -> str:
        return self.user if self.user is not None else self.base.get_user()

    def get_host(self) -> str:
        return self.host if self.host is not None else self.base.get_host()

    def get_pid(self) -> int:
        return self.pid if self.pid is not None else self.base.get_pid()

    def get_boot_time(self) -> int | None:
        return self.base.get_boot_time()


def with_overrides(
    base: IdentityProvider,
    *,
    user: str | None = None,
    host: str | None = None,
    pid: int | None = None,
) -> IdentityProvider:
    """Wrap a provider, replacing the given fields.

    Returns the base provider unchanged when nothing is overridden.
    """
    if user is None and host is None and pid is None:
        return base
    return _OverriddenIdentity(base=base, user=user, host=host, pid=pid)


def current_record(identity: IdentityProvider) -> LockRecord:
    """Build a fresh lock record for the given identity.

    Raises:
        IdentityError: If the identity cannot form a valid record
    """
    user = identity.get_user()
    host = identity.get_host()
    pid = identity.get_pid()
    try:
        return LockRecord(user=user, host=host, pid=pid, boot=identity.get_boot_time())
    except ValidationError as e:
        raise IdentityError(
            f"Invalid lock owner {user!r}@{host!r} (pid {pid}): {e.error_count()} validation error(s)"
        ) from e
