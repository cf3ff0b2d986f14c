"""Fit and diagonal command implementations."""

from __future__ import annotations

import pathlib  # noqa: TC003
from typing import Annotated

import typer

from chargefit.cli.callbacks import positive_callback
from chargefit.cli.commands._common import load_samples, resolve_config, start_logging
from chargefit.core.shared.exceptions import DataIOError
from chargefit.io.writers import JSONWriter
from chargefit.services.fit import ChargeFitService
from chargefit.ui import (
    ConsoleReporter,
    Verbosity,
    close_logging,
    error,
    log_dict,
    print_axis_fits,
    set_verbosity,
    show_header,
    success,
    warning,
)

SamplesArgument = Annotated[
    pathlib.Path,
    typer.Argument(
        help="CSV file with x, y and charge columns",
        exists=True,
        dir_okay=False,
        resolve_path=True,
    ),
]
CenterXOption = Annotated[
    float, typer.Option("--center-x", "-x", help="Estimate of the cluster center in x")
]
CenterYOption = Annotated[
    float, typer.Option("--center-y", "-y", help="Estimate of the cluster center in y")
]
PitchOption = Annotated[
    float,
    typer.Option("--pitch", "-p", help="Pixel spacing (pitch)", callback=positive_callback),
]
FilterOption = Annotated[
    bool | None,
    typer.Option(
        "--filter/--no-filter",
        help="Try MAD-filtered datasets before the raw samples "
        "(default: config.outliers.enabled)",
    ),
]
ConfigOption = Annotated[
    pathlib.Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to TOML configuration file",
        exists=True,
        dir_okay=False,
        resolve_path=True,
    ),
]
OutputOption = Annotated[
    pathlib.Path | None,
    typer.Option("--output", "-o", help="Write the result as JSON", dir_okay=False),
]
LogFileOption = Annotated[
    pathlib.Path | None,
    typer.Option("--log-file", help="Write a session log (text or JSON)", dir_okay=False),
]
VerboseOption = Annotated[
    bool, typer.Option("--verbose", "-v", help="Show fit progress from the engine")
]


def _prepare(
    config_path: pathlib.Path | None,
    log_file: pathlib.Path | None,
    verbose: bool,
    filter_outliers: bool | None,
) -> tuple[ChargeFitService, bool]:
    set_verbosity(Verbosity.VERBOSE if verbose else Verbosity.NORMAL)
    config = resolve_config(config_path)
    start_logging(log_file, config)
    enable_filtering = config.outliers.enabled if filter_outliers is None else filter_outliers
    return ChargeFitService(config, ConsoleReporter()), enable_filtering


def _write(
    result: object, output: pathlib.Path | None, kind: str, metadata: dict[str, object]
) -> None:
    if output is None:
        return
    try:
        JSONWriter().write(result, output, kind=kind, metadata=metadata)  # type: ignore[arg-type]
    except DataIOError as exc:
        error(str(exc))
        raise typer.Exit(1) from exc
    success(f"Results written to {output}")


def fit_command(
    samples: SamplesArgument,
    center_x: CenterXOption,
    center_y: CenterYOption,
    pitch: PitchOption,
    filter_outliers: FilterOption = None,
    config: ConfigOption = None,
    output: OutputOption = None,
    log_file: LogFileOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Fit the central row and column of a charge cluster.

    Examples
    --------
    Basic usage:
        $ chargefit fit hits.csv --center-x 0.1 --center-y -0.2 --pitch 0.5

    Save the result:
        $ chargefit fit hits.csv -x 0 -y 0 -p 0.5 --output fit.json
    """
    service, enable_filtering = _prepare(config, log_file, verbose, filter_outliers)
    table = load_samples(samples)
    show_header(f"Row/column fit of {samples.name} ({len(table)} samples)")
    run = {"samples": samples, "center_x": center_x, "center_y": center_y, "pitch": pitch}
    log_dict(run)

    result = service.fit_2d(
        table.x,
        table.y,
        table.charge,
        center_x,
        center_y,
        pitch,
        verbose=verbose,
        enable_outlier_filtering=enable_filtering,
    )
    print_axis_fits({"X (row)": result.x, "Y (column)": result.y}, title="Row/Column Fit")
    _write(result, output, "fit_2d", run)
    close_logging()

    if not result.fit_successful:
        warning("Fit failed on at least one axis")
        raise typer.Exit(1)
    success("Row/column fit successful")


def diagonal_command(
    samples: SamplesArgument,
    center_x: CenterXOption,
    center_y: CenterYOption,
    pitch: PitchOption,
    filter_outliers: FilterOption = None,
    config: ConfigOption = None,
    output: OutputOption = None,
    log_file: LogFileOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Fit the main and secondary diagonals of a charge cluster.

    Examples
    --------
        $ chargefit diagonal hits.csv --center-x 0 --center-y 0 --pitch 0.5
    """
    service, enable_filtering = _prepare(config, log_file, verbose, filter_outliers)
    table = load_samples(samples)
    show_header(f"Diagonal fit of {samples.name} ({len(table)} samples)")
    run = {"samples": samples, "center_x": center_x, "center_y": center_y, "pitch": pitch}
    log_dict(run)

    result = service.fit_diagonal(
        table.x,
        table.y,
        table.charge,
        center_x,
        center_y,
        pitch,
        verbose=verbose,
        enable_outlier_filtering=enable_filtering,
    )
    print_axis_fits(result.axes(), title="Diagonal Fit")
    _write(result, output, "diagonal", run)
    close_logging()

    if not result.fit_successful:
        warning("Fit failed on at least one diagonal")
        raise typer.Exit(1)
    success("Diagonal fit successful")
