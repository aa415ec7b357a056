"""Emacs-compatible advisory file locking.

Create, inspect and remove the ``.#name`` lock markers Emacs places next to
files being edited, so other tools can respect (or break) them.

Example:
    >>> from emacs_lockfile import acquire_lock, release_lock
    >>> res = acquire_lock("notes.txt")
    >>> res.status
    <LockStatus.OK: 200>
"""

from .core import (
    acquire_lock,
    decode_record,
    encode_record,
    get_lock,
    is_locked,
    lockfile_path,
    read_lockfile,
    release_lock,
)
from .errors import (
    IdentityError,
    LockfileError,
    LockStoreError,
    LockSyntaxError,
    TakeoverContentionError,
)
from .models import LockQueryResult, LockRecord, LockResponse, LockStatus

__version__ = "0.1.0"

__all__ = [
    "IdentityError",
    "LockQueryResult",
    "LockRecord",
    "LockResponse",
    "LockStatus",
    "LockStoreError",
    "LockSyntaxError",
    "LockfileError",
    "TakeoverContentionError",
    "__version__",
    "acquire_lock",
    "decode_record",
    "encode_record",
    "get_lock",
    "is_locked",
    "lockfile_path",
    "read_lockfile",
    "release_lock",
]
