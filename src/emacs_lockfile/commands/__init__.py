"""CLI command implementations for emacs-lockfile.

This package contains the implementation of each CLI command,
separated from the CLI framework setup in cli.py.
"""

from .config import config_app
from .lock import get, lock, locked, unlock

__all__ = [
    "config_app",
    "get",
    "lock",
    "locked",
    "unlock",
]
