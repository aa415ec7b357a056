"""Constants for emacs-lockfile."""

# Prepended to the target's file name to form the marker name
MARKER_PREFIX = ".#"

LOCK_SYNTAX = "user@host.pid"
LOCK_SYNTAX_WITH_BOOT = "user@host.pid:boot"

# Environment variables consulted (in order) for the lock owner's name
USER_ENV_VARS = ("USERNAME", "USER", "LOGNAME")

DEFAULT_MAX_TAKEOVER_ATTEMPTS = 5

CONFIG_ENV_VAR = "EMACS_LOCKFILE_CONFIG"
CONFIG_DIR_NAME = "emacs-lockfile"
CONFIG_FILE_NAME = "config.toml"

# CLI exit codes
EXIT_OK = 0
EXIT_INTERNAL_ERROR = 1
EXIT_BAD_REQUEST = 2
EXIT_PRECONDITION_FAILED = 3
EXIT_CONFLICT = 4
