"""Config commands: init, show."""

from pathlib import Path

import typer

from ..config import get_active_config, get_config_path, write_config_template
from ..output import get_output_context

config_app = typer.Typer(help="Configuration commands", no_args_is_help=True)


@config_app.command("init")
def config_init(
    path: Path | None = typer.Option(None, "--path", "-p", help="Config file to write"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing config"),
) -> None:
    """Write a default config file."""
    ctx = get_output_context()
    config_path = path or get_config_path()

    if config_path.exists() and not force:
        ctx.error(f"Config already exists: {config_path} (use --force to overwrite)")
        raise typer.Exit(1)

    write_config_template(config_path)
    if ctx.json_mode:
        ctx.print_json({"created": str(config_path)})
    else:
        ctx.console.print(f"[green]Created config:[/green] {config_path}")


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration."""
    ctx = get_output_context()
    config = get_active_config()
    data = config.model_dump(mode="json")
    if ctx.json_mode:
        ctx.print_json(data)
        return
    ctx.console.print(f"[bold]marker.kind:[/bold] {data['marker']['kind']}")
    ctx.console.print(f"[bold]takeover.max_attempts:[/bold] {data['takeover']['max_attempts']}")
    ctx.console.print(f"[bold]identity.user:[/bold] {data['identity']['user'] or '(from environment)'}")
    ctx.console.print(f"[bold]identity.host:[/bold] {data['identity']['host'] or '(hostname)'}")
