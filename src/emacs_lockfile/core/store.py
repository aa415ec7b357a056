"""Lock marker storage.

The store is the only place that touches the filesystem. Exclusive
creation of the marker is the single mutual-exclusion point of the
locking protocol: a create must fail, never overwrite, when the marker
already exists.

Markers are symbolic links whose target is the lock content, as Emacs
writes them. Where symlinks are unsupported, a regular file holding the
content is created exclusively instead.
"""

import errno
import logging
import os
from collections.abc import Callable, Iterable, Mapping
from enum import Enum
from typing import Protocol

from ..errors import LockStoreError

logger = logging.getLogger(__name__)

_SYMLINK_UNSUPPORTED_ERRNOS = {
    err_no
    for err_no in (
        errno.EPERM,
        getattr(errno, "ENOTSUP", None),
        getattr(errno, "EOPNOTSUPP", None),
        getattr(errno, "ENOSYS", None),
    )
    if err_no is not None
}

# ERROR_PRIVILEGE_NOT_HELD: symlink creation needs developer mode or admin rights
_WINERROR_PRIVILEGE_NOT_HELD = 1314


class MarkerKind(str, Enum):
    """How markers are written."""

    AUTO = "auto"
    SYMLINK = "symlink"
    FILE = "file"


class LockStore(Protocol):
    """Filesystem primitives used by the lock operations."""

    def read(self, path: str) -> str | None:
        """Return marker content, or None if the marker does not exist.

        Raises:
            LockStoreError: If the marker exists but cannot be read
        """

    def create(self, path: str, content: str) -> bool:
        """Exclusively create a marker. Returns False if it already exists.

        Raises:
            LockStoreError: On any other failure
        """

    def remove(self, path: str) -> None:
        """Delete a marker.

        Raises:
            LockStoreError: If the marker cannot be removed
        """

    def target_exists(self, path: str) -> bool:
        """Return True if the target is an existing regular file."""


def _symlink_unsupported(error: OSError) -> bool:
    if getattr(error, "winerror", None) == _WINERROR_PRIVILEGE_NOT_HELD:
        return True
    return error.errno in _SYMLINK_UNSUPPORTED_ERRNOS


def _write_all(fd: int, payload: bytes) -> None:
    """Write complete payload to fd, handling short writes."""
    total_written = 0
    while total_written < len(payload):
        written = os.write(fd, payload[total_written:])
        if written <= 0:
            raise OSError("short write while writing lock file")
        total_written += written


class FileSystemLockStore:
    """Store markers on the local filesystem."""

    def __init__(self, marker_kind: MarkerKind | str = MarkerKind.AUTO) -> None:
        self.marker_kind = MarkerKind(marker_kind)
        self._symlinks_supported = self.marker_kind is not MarkerKind.FILE

    def read(self, path: str) -> str | None:
        if os.path.islink(path):
            try:
                return os.readlink(path)
            except FileNotFoundError:
                return None
            except OSError as e:
                raise LockStoreError("Can't read link", path, e) from e

        try:
            with open(path, encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise LockStoreError("Can't read file", path, e) from e

    def create(self, path: str, content: str) -> bool:
        if self._symlinks_supported:
            try:
                os.symlink(content, path)
                return True
            except FileExistsError:
                return False
            except NotImplementedError as e:
                self._symlink_failed(path, e)
            except OSError as e:
                if not _symlink_unsupported(e):
                    raise LockStoreError("Can't create lock file", path, e) from e
                self._symlink_failed(path, e)
        return self._create_file(path, content)

    def remove(self, path: str) -> None:
        try:
            os.unlink(path)
        except OSError as e:
            raise LockStoreError(f"Can't remove lock file '{path}'", path, e) from e

    def target_exists(self, path: str) -> bool:
        return os.path.isfile(path)

    def _symlink_failed(self, path: str, error: Exception) -> None:
        if self.marker_kind is MarkerKind.SYMLINK:
            raise LockStoreError("Can't create lock symlink", path, error) from error
        logger.debug("Symlinks unsupported for %s (%s); using regular lock files", path, error)
        self._symlinks_supported = False

    def _create_file(self, path: str, content: str) -> bool:
        """Create a regular-file marker with O_CREAT | O_EXCL."""
        try:
            fd = os.open(path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        except FileExistsError:
            return False
        except OSError as e:
            raise LockStoreError("Can't create lock file", path, e) from e

        try:
            _write_all(fd, content.encode("utf-8"))
        except OSError as e:
            os.close(fd)
            try:
                os.unlink(path)
            except OSError:
                logger.warning("Could not clean up partially written lock file %s", path)
            raise LockStoreError("Can't write lock file", path, e) from e
        os.close(fd)
        return True


class MemoryLockStore:
    """In-memory store for exercising the lock operations without a filesystem.

    Attributes:
        markers: Marker content keyed by marker path.
        targets: Paths of target files considered to exist.
        failures: Error messages keyed by operation name ("read", "create",
            "remove"); a listed operation raises LockStoreError.
        after_remove: Called with the marker path after every successful
            remove, to simulate another process racing for the lock.
    """

    def __init__(
        self,
        targets: Iterable[str] = (),
        markers: Mapping[str, str] | None = None,
    ) -> None:
        self.markers: dict[str, str] = dict(markers or {})
        self.targets: set[str] = {os.fspath(t) for t in targets}
        self.failures: dict[str, str] = {}
        self.after_remove: Callable[[str], None] | None = None

    def read(self, path: str) -> str | None:
        self._maybe_fail("read", path)
        return self.markers.get(path)

    def create(self, path: str, content: str) -> bool:
        self._maybe_fail("create", path)
        if path in self.markers:
            return False
        self.markers[path] = content
        return True

    def remove(self, path: str) -> None:
        self._maybe_fail("remove", path)
        if path not in self.markers:
            raise LockStoreError(
                f"Can't remove lock file '{path}'",
                path,
                FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT)),
            )
        del self.markers[path]
        if self.after_remove is not None:
            self.after_remove(path)

    def target_exists(self, path: str) -> bool:
        return path in self.targets

    def _maybe_fail(self, operation: str, path: str) -> None:
        message = self.failures.get(operation)
        if message is not None:
            raise LockStoreError(message, path)
