"""Status lines printed by the CLI, mirrored into the session log."""

from __future__ import annotations

from rich.markup import escape

from chargefit.ui.console import VERSION, console, icon
from chargefit.ui.logging import log, log_section

__all__ = [
    "action",
    "bullet",
    "error",
    "info",
    "show_header",
    "show_version",
    "success",
    "warning",
]


def _emit(
    symbol: str, style: str, message: str, indent: int, level: str | None
) -> None:
    console.print(f"{'  ' * indent}[{style}]{icon(symbol)}[/{style}] {escape(message)}")
    if level is not None:
        log(message, level=level)


def show_header(text: str) -> None:
    rule = icon("separator") * 60
    console.print(f"[header]{rule}\n  {escape(text)}\n{rule}[/header]")
    log_section(text)


def success(message: str, indent: int = 0, do_log: bool = True) -> None:
    _emit("check", "success", message, indent, "info" if do_log else None)


def warning(message: str, indent: int = 0, do_log: bool = True) -> None:
    _emit("warn", "warning", message, indent, "warning" if do_log else None)


def error(message: str, indent: int = 0, do_log: bool = True) -> None:
    _emit("error", "error", message, indent, "error" if do_log else None)


def info(message: str, indent: int = 0, do_log: bool = True) -> None:
    _emit("info", "dim", message, indent, "info" if do_log else None)


def action(message: str) -> None:
    """Start of a processing step, set off by a blank line."""
    console.print()
    _emit("action", "bold yellow", message, 0, "info")


def bullet(message: str, indent: int = 1, style: str = "info") -> None:
    """List item; ``message`` may carry Rich markup."""
    console.print(f"{'  ' * indent}[{style}]{icon('bullet')}[/{style}] {message}")


def show_version() -> None:
    console.print(f"[header]chargefit[/header] [dim]v{VERSION}[/dim]")
