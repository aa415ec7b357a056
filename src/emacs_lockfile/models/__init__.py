"""Pydantic data models for emacs-lockfile.

- LockRecord: who holds a lock (user, host, pid, boot time)
- LockQueryResult: outcome of reading a marker
- LockStatus / LockResponse: status-coded results of the lock operations
"""

from .record import LockQueryResult, LockRecord
from .response import LockResponse, LockStatus

__all__ = [
    "LockQueryResult",
    "LockRecord",
    "LockResponse",
    "LockStatus",
]
