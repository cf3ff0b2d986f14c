"""CLI command modules for chargefit.

Each module exports a command function with its Typer annotations; the
main app.py imports and registers them.
"""

from chargefit.cli.commands.filter import filter_command
from chargefit.cli.commands.fit import diagonal_command, fit_command
from chargefit.cli.commands.info import info_command
from chargefit.cli.commands.init import init_command

__all__ = [
    "diagonal_command",
    "filter_command",
    "fit_command",
    "info_command",
    "init_command",
]
