"""Lock commands: get, lock, locked, unlock."""

import typer

from ..config import get_active_config
from ..constants import (
    EXIT_BAD_REQUEST,
    EXIT_CONFLICT,
    EXIT_INTERNAL_ERROR,
    EXIT_OK,
    EXIT_PRECONDITION_FAILED,
)
from ..core import acquire_lock, get_lock, is_locked, release_lock
from ..models import LockResponse, LockStatus
from ..output import get_output_context

EXIT_CODES = {
    LockStatus.OK: EXIT_OK,
    LockStatus.NOT_MODIFIED: EXIT_OK,
    LockStatus.BAD_REQUEST: EXIT_BAD_REQUEST,
    LockStatus.PRECONDITION_FAILED: EXIT_PRECONDITION_FAILED,
    LockStatus.CONFLICT: EXIT_CONFLICT,
    LockStatus.INTERNAL_ERROR: EXIT_INTERNAL_ERROR,
}

_PID_HELP = "Act on behalf of this process ID (e.g. the calling shell's $$)"


def _finish(response: LockResponse) -> None:
    """Print the response and exit with its status code."""
    get_output_context().response(response)
    exit_code = EXIT_CODES[response.status]
    if exit_code != EXIT_OK:
        raise typer.Exit(exit_code)


def get(
    target: str = typer.Argument(..., help="Target file"),
) -> None:
    """Show who holds the Emacs lock on a file."""
    config = get_active_config()
    _finish(get_lock(target, store=config.build_store()))


def lock(
    target: str = typer.Argument(..., help="Target file"),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Lock even if the file is missing, taking over other processes' locks",
    ),
    pid: int | None = typer.Option(None, "--pid", min=1, help=_PID_HELP),
) -> None:
    """Lock a file using an Emacs-style lock file."""
    config = get_active_config()
    _finish(
        acquire_lock(
            target,
            force,
            store=config.build_store(),
            identity=config.build_identity(pid),
            max_attempts=config.takeover.max_attempts,
        )
    )


def locked(
    target: str = typer.Argument(..., help="Target file"),
    by_us: bool | None = typer.Option(
        None,
        "--by-us/--by-others",
        help="Only count locks held by us, or only those held by other processes",
    ),
    pid: int | None = typer.Option(None, "--pid", min=1, help=_PID_HELP),
) -> None:
    """Check whether a file is locked. Exits 1 if it is not."""
    config = get_active_config()
    response = is_locked(
        target,
        by_us,
        store=config.build_store(),
        identity=config.build_identity(pid),
    )
    _finish(response)
    if response.data is False:
        raise typer.Exit(1)


def unlock(
    target: str = typer.Argument(..., help="Target file"),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Unlock even if the file is missing or locked by another process",
    ),
    pid: int | None = typer.Option(None, "--pid", min=1, help=_PID_HELP),
) -> None:
    """Unlock a file locked with an Emacs-style lock file."""
    config = get_active_config()
    _finish(
        release_lock(
            target,
            force,
            store=config.build_store(),
            identity=config.build_identity(pid),
        )
    )
