"""Typer callbacks for CLI."""

import typer

from chargefit.ui import show_version


def version_callback(value: bool | None) -> None:
    """Show version information and exit."""
    if value:
        show_version()
        raise typer.Exit


def positive_callback(value: float) -> float:
    """Reject zero and negative lengths and thresholds."""
    if not value > 0:
        msg = f"must be strictly positive, got {value:g}"
        raise typer.BadParameter(msg)
    return value
