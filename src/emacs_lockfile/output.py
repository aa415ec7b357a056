"""Output formatting for the emacs-lockfile CLI."""

import json
from dataclasses import dataclass
from typing import Any

from rich.console import Console

from .models import LockQueryResult, LockResponse, LockStatus

_STATUS_STYLES = {
    LockStatus.OK: "green",
    LockStatus.NOT_MODIFIED: "yellow",
    LockStatus.PRECONDITION_FAILED: "red",
    LockStatus.CONFLICT: "red",
    LockStatus.BAD_REQUEST: "red",
    LockStatus.INTERNAL_ERROR: "red",
}


@dataclass
class OutputContext:
    """Context for output formatting."""

    console: Console
    json_mode: bool = False

    def print(self, message: str, style: str | None = None) -> None:
        """Print message respecting output mode."""
        if not self.json_mode:
            self.console.print(message, style=style)

    def print_json(self, data: dict[str, Any]) -> None:
        """Print JSON data."""
        if self.json_mode:
            print(json.dumps(data, indent=2, default=str))

    def error(self, message: str) -> None:
        """Print error in appropriate format."""
        if self.json_mode:
            self.print_json({"error": message})
        else:
            self.console.print(f"Error: {message}", style="red", markup=False)

    def response(self, response: LockResponse) -> None:
        """Print a lock operation result in appropriate format."""
        if self.json_mode:
            self.print_json(response.to_dict())
            return

        if isinstance(response.data, LockQueryResult):
            self._print_query(response.data)
            return

        style = _STATUS_STYLES[response.status]
        if response.ok:
            self.console.print(response.message, style=style, markup=False)
        else:
            self.console.print(
                f"Error ({response.status.name}): {response.message}", style=style, markup=False
            )

    def _print_query(self, info: LockQueryResult) -> None:
        if info.record is None:
            self.console.print("Not locked", style="green")
        else:
            record = info.record
            self.console.print("Locked", style="yellow")
            self.console.print(f"  user: {record.user}", markup=False)
            self.console.print(f"  host: {record.host}", markup=False)
            self.console.print(f"  pid:  {record.pid}")
            if record.boot is not None:
                self.console.print(f"  boot: {record.boot}")
        self.console.print(f"  lock file: {info.path}", markup=False)


# Global output context (set by cli.py main callback)
_ctx: OutputContext | None = None


def get_output_context() -> OutputContext:
    """Get the current output context.

    Returns a default OutputContext if not yet initialized by CLI.
    """
    if _ctx is None:
        return OutputContext(Console())
    return _ctx


def set_output_context(ctx: OutputContext) -> None:
    """Set the global output context. Called by CLI main callback."""
    global _ctx
    _ctx = ctx
