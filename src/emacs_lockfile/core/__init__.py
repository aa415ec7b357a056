"""Core lock file protocol.

- paths: marker path derivation
- codec: marker content encoding and decoding
- identity: lock owner identity providers
- store: filesystem and in-memory marker stores
- operations: get / lock / locked / unlock state machine
"""

from .codec import decode_record, encode_record
from .identity import IdentityProvider, StaticIdentity, SystemIdentity, current_record, with_overrides
from .operations import acquire_lock, get_lock, is_locked, read_lockfile, release_lock
from .paths import lockfile_path
from .store import FileSystemLockStore, LockStore, MarkerKind, MemoryLockStore

__all__ = [
    "FileSystemLockStore",
    "IdentityProvider",
    "LockStore",
    "MarkerKind",
    "MemoryLockStore",
    "StaticIdentity",
    "SystemIdentity",
    "acquire_lock",
    "current_record",
    "decode_record",
    "encode_record",
    "get_lock",
    "is_locked",
    "lockfile_path",
    "read_lockfile",
    "release_lock",
    "with_overrides",
]
