"""Filter command implementation."""

from __future__ import annotations

import pathlib  # noqa: TC003
from typing import Annotated

import typer

from chargefit.cli.callbacks import positive_callback
from chargefit.cli.commands._common import load_samples
from chargefit.core.constants import OUTLIER_CONSERVATIVE_THRESHOLD
from chargefit.core.shared.exceptions import DataIOError
from chargefit.io.samples import write_samples
from chargefit.services.fit import ChargeFitService
from chargefit.ui import ConsoleReporter, error, print_summary, success


def filter_command(
    samples: Annotated[
        pathlib.Path,
        typer.Argument(
            help="CSV file with x, y and charge columns",
            exists=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ],
    threshold: Annotated[
        float,
        typer.Option(
            "--threshold",
            "-t",
            help="Rejection threshold in MAD units",
            callback=positive_callback,
        ),
    ] = OUTLIER_CONSERVATIVE_THRESHOLD,
    output: Annotated[
        pathlib.Path | None,
        typer.Option("--output", "-o", help="Write the kept samples as CSV", dir_okay=False),
    ] = None,
) -> None:
    """Remove charge outliers from a sample table.

    Examples
    --------
        $ chargefit filter hits.csv --threshold 3 --output clean.csv
    """
    table = load_samples(samples)
    result = ChargeFitService(reporter=ConsoleReporter()).remove_outliers(
        table.x, table.y, table.charge, sigma_threshold=threshold, verbose=True
    )
    if not result.success:
        raise typer.Exit(1)

    print_summary(
        {
            "Samples": len(table),
            "Outliers removed": result.outliers_removed,
            "Remaining": result.charge.size,
            "Filtering applied": result.filtering_applied,
        },
        title="Outlier Removal",
    )

    if output is not None:
        try:
            write_samples(output, result.x, result.y, result.charge)
        except DataIOError as exc:
            error(str(exc))
            raise typer.Exit(1) from exc
        success(f"Filtered samples written to {output}")
