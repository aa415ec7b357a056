"""Exceptions raised inside emacs-lockfile.

The public lock operations never let these escape: each one is turned into
a ``LockResponse`` at the operation boundary. They are raised by the codec,
the store and the identity provider so the operations can tell failures
apart.
"""

from .constants import LOCK_SYNTAX, LOCK_SYNTAX_WITH_BOOT


class LockfileError(Exception):
    """Base exception for lock file errors."""


class LockSyntaxError(LockfileError):
    """Raised when marker content does not match ``user@host.pid[:boot]``."""

    def __init__(self, content: str):
        self.content = content
        self.expected = f"{LOCK_SYNTAX} or {LOCK_SYNTAX_WITH_BOOT}"
        super().__init__(
            f"Bad syntax in lock file content {content!r}, does not match {self.expected}"
        )


class LockStoreError(LockfileError):
    """Raised when reading, creating or removing a marker fails."""

    def __init__(self, message: str, path: str, original_error: Exception | None = None):
        self.path = path
        self.original_error = original_error
        if original_error is not None:
            message = f"{message}: {_describe(original_error)}"
        super().__init__(message)


class IdentityError(LockfileError):
    """Raised when the current lock owner cannot be determined."""


class TakeoverContentionError(LockfileError):
    """Raised when a forced takeover keeps losing the marker to other processes."""

    def __init__(self, path: str, attempts: int):
        self.path = path
        self.attempts = attempts
        super().__init__(
            f"Takeover contention exceeded: lock file '{path}' was recreated by another "
            f"process {attempts} times"
        )


def _describe(error: Exception) -> str:
    if isinstance(error, OSError) and error.strerror:
        return error.strerror
    return str(error)


class ConfigError(LockfileError):
    """Raised when the configuration file is unreadable or invalid."""

    def __init__(self, message: str, config_file: str | None = None):
        self.config_file = config_file
        if config_file:
            message = f"{config_file}: {message}"
        super().__init__(message)
