"""Emacs-style lock operations: get, lock, locked, unlock.

Every operation returns a ``LockResponse`` instead of raising. Callers
branch on ``LockStatus``:

- OK: done
- NOT_MODIFIED: already in the requested state
- PRECONDITION_FAILED: target missing, or lock held by another process
- CONFLICT: forced takeover kept losing the marker to other processes
- BAD_REQUEST: no target given
- INTERNAL_ERROR: filesystem failure or malformed marker

Locking is advisory and cooperative, like Emacs's own. The only real
mutual exclusion is the store's exclusive marker creation; reads used for
ownership checks and forced takeovers are race-prone.
"""

import logging
import os

from ..constants import DEFAULT_MAX_TAKEOVER_ATTEMPTS
from ..errors import IdentityError, LockStoreError, LockSyntaxError, TakeoverContentionError
from ..models import LockQueryResult, LockResponse, LockStatus
from .codec import decode_record, encode_record
from .identity import IdentityProvider, SystemIdentity, current_record
from .paths import lockfile_path
from .store import FileSystemLockStore, LockStore

logger = logging.getLogger(__name__)

TargetPath = str | os.PathLike[str] | None


def _missing_target(target_file: TargetPath) -> bool:
    return target_file is None or os.fspath(target_file) == ""


def _bad_request() -> LockResponse:
    return LockResponse(LockStatus.BAD_REQUEST, "Please specify target_file")


def read_lockfile(target_file: str | os.PathLike[str], store: LockStore | None = None) -> LockQueryResult:
    """Read and decode the marker of a target file.

    Never raises: read and syntax failures are reported in ``error``.

    Args:
        target_file: File whose marker to read
        store: Marker store, defaults to the local filesystem

    Returns:
        Query result with the marker path always populated
    """
    store = store if store is not None else FileSystemLockStore()
    path = lockfile_path(target_file)
    logger.debug("Lockfile path: %s", path)

    try:
        content = store.read(path)
    except LockStoreError as e:
        return LockQueryResult(exists=True, path=path, error=str(e))

    if content is None:
        return LockQueryResult(exists=False, path=path)

    logger.debug("Lockfile content: %r", content)
    try:
        record = decode_record(content)
    except LockSyntaxError as e:
        return LockQueryResult(exists=True, path=path, error=str(e))
    return LockQueryResult(exists=True, path=path, record=record)


def get_lock(target_file: TargetPath, *, store: LockStore | None = None) -> LockResponse:
    """Get information on the lock marker of a target file.

    Returns:
        OK with a LockQueryResult (``exists=False`` when unlocked), or
        INTERNAL_ERROR if the marker cannot be read or decoded
    """
    if _missing_target(target_file):
        return _bad_request()

    info = read_lockfile(target_file, store)
    if info.error:
        return LockResponse(LockStatus.INTERNAL_ERROR, info.error)
    return LockResponse(LockStatus.OK, "OK", info)


def acquire_lock(
    target_file: TargetPath,
    force: bool = False,
    *,
    store: LockStore | None = None,
    identity: IdentityProvider | None = None,
    max_attempts: int = DEFAULT_MAX_TAKEOVER_ATTEMPTS,
) -> LockResponse:
    """Lock a file by creating its Emacs-style marker.

    Without ``force``, the target must exist and a lock held by another
    process is left alone. With ``force``, a foreign lock is removed and
    recreated as ours; this races with other processes between reading,
    removing and recreating the marker, so it is a best-effort takeover.

    Args:
        target_file: File to lock
        force: Lock even if the target is missing, taking over foreign locks
        store: Marker store, defaults to the local filesystem
        identity: Lock owner identity, defaults to the running process
        max_attempts: Foreign markers to remove before giving up on a
            contended takeover

    Returns:
        OK if locked, NOT_MODIFIED if we already held the lock,
        PRECONDITION_FAILED if the target is missing or locked by another
        process, CONFLICT if a forced takeover exhausted its attempts,
        INTERNAL_ERROR on filesystem or parse failures
    """
    if _missing_target(target_file):
        return _bad_request()
    assert target_file is not None  # For type checkers.

    store = store if store is not None else FileSystemLockStore()
    identity = identity if identity is not None else SystemIdentity()
    target = os.fspath(target_file)

    if not force and not store.target_exists(target):
        return LockResponse(LockStatus.PRECONDITION_FAILED, "Target file does not exist")

    try:
        new_record = current_record(identity)
    except IdentityError as e:
        return LockResponse(LockStatus.INTERNAL_ERROR, str(e))

    path = lockfile_path(target)
    content = encode_record(new_record)
    attempts = max(1, max_attempts)

    for takeover in range(attempts + 1):
        create_error: LockStoreError | None = None
        try:
            if store.create(path, content):
                logger.debug("Created lockfile %s -> %s", path, content)
                return LockResponse(LockStatus.OK, "Locked")
        except LockStoreError as e:
            create_error = e

        # Marker is probably held already
        existing = read_lockfile(target, store)
        if not existing.exists:
            message = "Couldn't create lockfile but lockfile doesn't exist, probably permission problem"
            if create_error is not None:
                message = f"{message} ({create_error})"
            return LockResponse(LockStatus.INTERNAL_ERROR, message)

        if existing.error:
            return LockResponse(
                LockStatus.INTERNAL_ERROR, f"Can't get lockfile information: {existing.error}"
            )
        assert existing.record is not None  # For type checkers.

        owner_pid = existing.record.pid
        if owner_pid == new_record.pid:
            return LockResponse(LockStatus.NOT_MODIFIED, "File was already locked by us")

        if not force:
            return LockResponse(
                LockStatus.PRECONDITION_FAILED,
                f"Target file was not locked by us (pid {new_record.pid}) but by pid {owner_pid}",
            )

        if takeover == attempts:
            break
        logger.warning(
            "Taking over lock on %s from pid %d (attempt %d/%d)",
            target,
            owner_pid,
            takeover + 1,
            attempts,
        )
        try:
            store.remove(path)
        except LockStoreError as e:
            return LockResponse(LockStatus.INTERNAL_ERROR, f"Can't remove old lockfile: {e}")

    error = TakeoverContentionError(path, attempts)
    logger.error("%s", error)
    return LockResponse(LockStatus.CONFLICT, str(error))


def is_locked(
    target_file: TargetPath,
    by_us: bool | None = None,
    *,
    store: LockStore | None = None,
    identity: IdentityProvider | None = None,
) -> LockResponse:
    """Check whether a target file is locked.

    Args:
        target_file: File to check
        by_us: None to report any lock; True to report only locks held by
            our process; False to report only locks held by others
        store: Marker store, defaults to the local filesystem
        identity: Whose locks count as ours, defaults to the running process

    Returns:
        OK with a boolean payload, or INTERNAL_ERROR if the marker cannot
        be read or decoded
    """
    if _missing_target(target_file):
        return _bad_request()

    info = read_lockfile(target_file, store)
    if info.error:
        return LockResponse(LockStatus.INTERNAL_ERROR, info.error)
    if not info.exists:
        return LockResponse(LockStatus.OK, "Not locked", False)
    assert info.record is not None  # For type checkers.

    owner_pid = info.record.pid
    if by_us is None:
        return LockResponse(LockStatus.OK, f"Locked by pid {owner_pid}", True)

    identity = identity if identity is not None else SystemIdentity()
    ours = owner_pid == identity.get_pid()
    locked = ours if by_us else not ours
    message = f"Locked by pid {owner_pid}" if locked else f"Not locked by {'us' if by_us else 'others'}"
    return LockResponse(LockStatus.OK, message, locked)


def release_lock(
    target_file: TargetPath,
    force: bool = False,
    *,
    store: LockStore | None = None,
    identity: IdentityProvider | None = None,
) -> LockResponse:
    """Unlock a file by removing its Emacs-style marker.

    Ownership is checked on a prior read and not re-verified when removing,
    so a marker replaced by another process in between is removed as well.

    Args:
        target_file: File to unlock
        force: Unlock even if the target is missing or locked by another process
        store: Marker store, defaults to the local filesystem
        identity: Whose locks count as ours, defaults to the running process

    Returns:
        OK if unlocked, NOT_MODIFIED if there was no lock,
        PRECONDITION_FAILED if the target is missing or locked by another
        process, INTERNAL_ERROR on filesystem or parse failures
    """
    if _missing_target(target_file):
        return _bad_request()
    assert target_file is not None  # For type checkers.

    store = store if store is not None else FileSystemLockStore()
    identity = identity if identity is not None else SystemIdentity()
    target = os.fspath(target_file)

    if not force and not store.target_exists(target):
        return LockResponse(LockStatus.PRECONDITION_FAILED, "Target file does not exist")

    info = read_lockfile(target, store)
    if info.error:
        return LockResponse(LockStatus.INTERNAL_ERROR, info.error)
    if not info.exists:
        return LockResponse(LockStatus.NOT_MODIFIED, "Target file was not locked")
    assert info.record is not None  # For type checkers.

    pid = identity.get_pid()
    if not force and info.record.pid != pid:
        return LockResponse(
            LockStatus.PRECONDITION_FAILED,
            f"Target file was not locked by us (pid {pid}) but by pid {info.record.pid}",
        )

    try:
        store.remove(info.path)
    except LockStoreError as e:
        return LockResponse(LockStatus.INTERNAL_ERROR, str(e))

    logger.debug("Removed lockfile %s", info.path)
    return LockResponse(LockStatus.OK, "Unlocked")
