"""Shared test fixtures for emacs-lockfile tests."""

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
from typer.testing import CliRunner

from emacs_lockfile import config as config_module
from emacs_lockfile import output as output_module
from emacs_lockfile.core import MemoryLockStore, StaticIdentity
from emacs_lockfile.logging import PACKAGE_LOGGER

@pytest.fixture
def runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_state(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Keep tests away from the user's config and reset CLI globals.

    The CLI configures the package logger and sets module-level output and
    config state; both are restored so caplog and defaults work everywhere.
    """
    monkeypatch.setenv("EMACS_LOCKFILE_CONFIG", str(tmp_path / "no-such-config.toml"))
    yield
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    output_module._ctx = None
    config_module._config = None


@pytest.fixture
def alice() -> StaticIdentity:
    """Identity of the first editor process."""
    return StaticIdentity(user="alice", host="workstation", pid=1001, boot=1700000000)


@pytest.fixture
def bob() -> StaticIdentity:
    """Identity of a second, competing process."""
    return StaticIdentity(user="bob", host="laptop.local", pid=2002)


@pytest.fixture
def memory_store() -> MemoryLockStore:
    """In-memory store where the default target file exists."""
    return MemoryLockStore(targets=["project/notes.txt"])


@pytest.fixture
def target_file(tmp_path: Path) -> Path:
    """Create an existing target file on disk."""
    target = tmp_path / "notes.txt"
    target.write_text("hello\n")
    return target


@pytest.fixture
def marker_file(target_file: Path) -> Path:
    """Marker path for target_file (not created)."""
    return target_file.with_name(f".#{target_file.name}")
