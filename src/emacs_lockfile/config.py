"""Configuration management for emacs-lockfile."""

import os
import tomllib
from pathlib import Path

import tomli_w
from pydantic import BaseModel, Field, ValidationError

from .constants import (
    CONFIG_DIR_NAME,
    CONFIG_ENV_VAR,
    CONFIG_FILE_NAME,
    DEFAULT_MAX_TAKEOVER_ATTEMPTS,
)
from .core.identity import IdentityProvider, SystemIdentity, with_overrides
from .core.store import FileSystemLockStore, MarkerKind
from .errors import ConfigError


class MarkerConfig(BaseModel):
    """How lock markers are written."""

    kind: MarkerKind = Field(
        default=MarkerKind.AUTO,
        description="auto (symlink, regular file if unsupported), symlink, or file",
    )


class TakeoverConfig(BaseModel):
    """Forced takeover settings."""

    max_attempts: int = Field(
        default=DEFAULT_MAX_TAKEOVER_ATTEMPTS,
        ge=1,
        description="Foreign locks to remove before reporting contention",
    )


class IdentityConfig(BaseModel):
    """Overrides for the identity written into lock files."""

    user: str | None = None  # Defaults to USERNAME / USER / LOGNAME
    host: str | None = None  # Defaults to the machine's hostname


class LockfileConfig(BaseModel):
    """Root configuration for emacs-lockfile."""

    marker: MarkerConfig = Field(default_factory=MarkerConfig)
    takeover: TakeoverConfig = Field(default_factory=TakeoverConfig)
    identity: IdentityConfig = Field(default_factory=IdentityConfig)

    def build_store(self) -> FileSystemLockStore:
        """Create the marker store described by this config."""
        return FileSystemLockStore(self.marker.kind)

    def build_identity(self, pid: int | None = None) -> IdentityProvider:
        """Create the identity provider, applying overrides.

        Args:
            pid: Act on behalf of this process instead of the current one
        """
        return with_overrides(
            SystemIdentity(),
            user=self.identity.user,
            host=self.identity.host,
            pid=pid,
        )


def get_config_path() -> Path:
    """Get path of the user config file.

    Honors $EMACS_LOCKFILE_CONFIG, then $XDG_CONFIG_HOME, then ~/.config.
    """
    explicit = os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        return Path(explicit).expanduser()
    base = os.environ.get("XDG_CONFIG_HOME")
    config_home = Path(base) if base else Path.home() / ".config"
    return config_home / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def load_config(config_path: Path | None = None) -> LockfileConfig:
    """Load config from TOML.

    Args:
        config_path: Config file, defaults to get_config_path()

    Returns:
        Loaded configuration, or defaults if the file doesn't exist

    Raises:
        ConfigError: If the file cannot be read or fails validation
    """
    if config_path is None:
        config_path = get_config_path()
    if not config_path.exists():
        return LockfileConfig()
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Can't read config: {e}", str(config_path)) from e
    try:
        return LockfileConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config: {e}", str(config_path)) from e


def save_config(config: LockfileConfig, config_path: Path) -> Path:
    """Write config to TOML, creating parent directories.

    Returns:
        Path to the written config file
    """
    config_path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json", exclude_none=True)
    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
    return config_path


def write_config_template(config_path: Path) -> Path:
    """Write default config.toml template.

    Returns:
        Path to the written config file
    """
    return save_config(LockfileConfig(), config_path)


# Active config (set by cli.py main callback)
_config: LockfileConfig | None = None


def get_active_config() -> LockfileConfig:
    """Get the config loaded by the CLI, or defaults if not yet set."""
    if _config is None:
        return LockfileConfig()
    return _config


def set_active_config(config: LockfileConfig) -> None:
    """Set the active config. Called by CLI main callback."""
    global _config
    _config = config
