"""Helpers shared by the fitting commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer

from chargefit.core.domain.config import ChargeFitConfig
from chargefit.core.shared.exceptions import ConfigError, DataIOError
from chargefit.io.config import load_config
from chargefit.io.samples import read_samples
from chargefit.ui import error, setup_logging

if TYPE_CHECKING:
    from pathlib import Path

    from chargefit.io.samples import SampleTable


def resolve_config(path: Path | None) -> ChargeFitConfig:
    """Load the configuration file, or the defaults when none is given."""
    if path is None:
        return ChargeFitConfig()
    try:
        return load_config(path)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(1) from exc


def load_samples(path: Path) -> SampleTable:
    """Read the samples CSV, exiting with status 1 on failure."""
    try:
        return read_samples(path)
    except DataIOError as exc:
        error(str(exc))
        raise typer.Exit(1) from exc


def start_logging(log_file: Path | None, config: ChargeFitConfig) -> None:
    if log_file is not None:
        setup_logging(log_file, log_format=config.output.log_format)
