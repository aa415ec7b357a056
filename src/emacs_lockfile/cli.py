"""emacs-lockfile CLI: create, check and remove Emacs-style lock files."""

from pathlib import Path

import typer
from rich.console import Console

from emacs_lockfile import __version__

from .commands import config_app, get, lock, locked, unlock
from .config import load_config, set_active_config
from .errors import ConfigError
from .logging import configure_logging
from .output import OutputContext, set_output_context


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"emacs-lockfile {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="emacs-lockfile",
    help="Create, check and delete Emacs-style lock files",
    no_args_is_help=True,
)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (-v, -vv)",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress non-error output",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in JSON format for automation",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Config file (default: $EMACS_LOCKFILE_CONFIG or ~/.config/emacs-lockfile/config.toml)",
    ),
) -> None:
    """emacs-lockfile - Emacs-compatible advisory file locking."""
    configure_logging(
        verbosity=verbose,
        quiet=quiet,
        no_color=no_color,
    )
    console = Console(no_color=no_color, highlight=False, soft_wrap=True)
    ctx = OutputContext(console=console, json_mode=json_output)
    set_output_context(ctx)

    try:
        set_active_config(load_config(config_path))
    except ConfigError as e:
        ctx.error(str(e))
        raise typer.Exit(2) from None


app.command("get")(get)
app.command("lock")(lock)
app.command("locked")(locked)
app.command("unlock")(unlock)
app.add_typer(config_app, name="config")


def run() -> None:
    """Console script entry point."""
    app()
