"""Shared Rich console, colour theme and output verbosity."""

import os
import sys
from enum import IntEnum

from rich.console import Console
from rich.theme import Theme

from chargefit import __version__ as VERSION

CHARGEFIT_THEME = Theme(
    {
        "success": "bold green",
        "warning": "bold yellow",
        "error": "bold red",
        "info": "cyan",
        "header": "bold cyan",
        "key": "cyan",
        "metric": "bold green",
        "value": "green",
        "number": "green",
        "path": "blue underline",
        "dim": "dim",
    }
)

console = Console(theme=CHARGEFIT_THEME)


class Verbosity(IntEnum):
    QUIET = 0
    NORMAL = 1
    VERBOSE = 2  # engine events are echoed


def set_verbosity(level: Verbosity) -> None:
    console.quiet = level == Verbosity.QUIET


_SYMBOLS = {
    "check": ("✓", "+"),
    "warn": ("⚠", "!"),
    "error": ("✗", "x"),
    "info": ("▸", ">"),
    "bullet": ("•", "-"),
    "action": ("»", ">"),
    "separator": ("─", "-"),
}


def _unicode_ok() -> bool:
    if os.getenv("CHARGEFIT_ASCII", "").lower() in {"1", "true", "yes"}:
        return False
    encoding = console.encoding or sys.getdefaultencoding()
    return "utf" in encoding.lower()


def icon(name: str) -> str:
    """Symbol for ``name``, falling back to ASCII on non-UTF terminals."""
    fancy, plain = _SYMBOLS.get(name, _SYMBOLS["bullet"])
    return fancy if _unicode_ok() else plain


__all__ = [
    "CHARGEFIT_THEME",
    "VERSION",
    "Verbosity",
    "console",
    "icon",
    "set_verbosity",
]
