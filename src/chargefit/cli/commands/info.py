"""Info command implementation."""

from __future__ import annotations

import sys

import numpy as np
import scipy
from threadpoolctl import threadpool_info

from chargefit import __version__
from chargefit.core.fitting.strategies import SOLVER_CONFIGS
from chargefit.ui import console, print_summary


def info_command() -> None:
    """Show version and environment information."""
    console.print("[bold]chargefit System Information[/bold]\n")

    console.print(f"[green]chargefit version:[/green] {__version__}")
    console.print(f"[green]Python version:[/green] {sys.version}")
    console.print(f"[green]NumPy version:[/green] {np.__version__}")
    console.print(f"[green]SciPy version:[/green] {scipy.__version__}")

    blas = [pool for pool in threadpool_info() if pool.get("user_api") == "blas"]
    if blas:
        libraries = ", ".join(
            f"{pool['internal_api']} ({pool['num_threads']} threads)" for pool in blas
        )
        console.print(f"[green]BLAS:[/green] {libraries}")
    console.print("\n[dim]Fits run single-threaded BLAS under a process-wide solver lock.[/dim]\n")

    print_summary(
        {
            config.name: (
                f"{config.trust_region.value} / {config.loss.value} / {config.max_iterations}"
            )
            for config in SOLVER_CONFIGS
        },
        title="Solver Configurations",
    )
