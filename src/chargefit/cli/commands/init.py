"""Init command implementation."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from chargefit.io.config import generate_default_config
from chargefit.ui import bullet, console, error, info, success


def init_command(
    path: Annotated[
        Path,
        typer.Argument(
            help="Path for new configuration file",
            dir_okay=False,
            resolve_path=True,
        ),
    ] = Path("chargefit.toml"),
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite existing file",
        ),
    ] = False,
) -> None:
    """Generate a default configuration file.

    Examples
    --------
      Create default config:
        $ chargefit init

      Overwrite existing config:
        $ chargefit init --force
    """
    if path.exists() and not force:
        error(f"File already exists: {path}")
        info("Use --force to overwrite")
        raise typer.Exit(1)

    path.write_text(generate_default_config())
    success(f"Created configuration file: {path}")

    console.print("\n[header]Configuration includes:[/header]")
    bullet("[green]Uncertainty weighting[/green] (fraction of max charge, floor)")
    bullet("[green]Outlier filtering[/green] (MAD thresholds)")
    bullet("[green]Output preferences[/green] (log format)")
    console.print(
        f"\nRun a fit with: [cyan]chargefit fit hits.csv -x 0 -y 0 -p 0.5 --config {path}[/]"
    )
