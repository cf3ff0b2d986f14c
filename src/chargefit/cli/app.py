"""Main Typer application for chargefit.

Creates the application and registers the commands of the
``chargefit.cli.commands`` subpackage.
"""

from typing import Annotated

import typer

from chargefit.cli.callbacks import version_callback
from chargefit.cli.commands import (
    diagonal_command,
    filter_command,
    fit_command,
    info_command,
    init_command,
)

app = typer.Typer(
    name="chargefit",
    help="chargefit - Power-law Lorentzian position reconstruction for charge clusters",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """chargefit - Sub-pixel cluster positions from power-law Lorentzian fits.

    Fit charge profiles along the central row, column and diagonals of a cluster.
    """


app.command(name="fit")(fit_command)
app.command(name="diagonal")(diagonal_command)
app.command(name="filter")(filter_command)
app.command(name="init")(init_command)
app.command(name="info")(info_command)
