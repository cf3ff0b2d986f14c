"""UI tables for displaying fit results.

This module provides functions for creating and displaying Rich tables
with consistent styling across the application.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich import box
from rich.table import Table

from chargefit.ui.console import console, icon

if TYPE_CHECKING:
    from chargefit.core.results.fit_results import AxisFitResult

__all__ = [
    "create_table",
    "print_axis_fits",
    "print_summary",
]


def create_table(title: str | None = None, show_header: bool = True) -> Table:
    """Create a standard table with consistent styling."""
    return Table(
        title=title,
        title_style="header" if title else None,
        box=box.ROUNDED,
        show_header=show_header,
        header_style="bold cyan",
        border_style="dim",
    )


def _value(value: float, error: float) -> str:
    return f"{value:.5g} ± {error:.2g}"


def print_axis_fits(fits: dict[str, AxisFitResult], title: str = "Fit Results") -> None:
    """Print one row per fitted axis with parameters and fit quality."""
    table = create_table(title)
    table.add_column("Axis", style="metric")
    table.add_column("Status", justify="center")
    table.add_column("Center", style="value", justify="right")
    table.add_column("Amplitude", justify="right")
    table.add_column("Gamma", justify="right")
    table.add_column("Beta", justify="right")
    table.add_column("Baseline", justify="right")
    table.add_column("χ²/dof", justify="right")
    table.add_column("Points", justify="right")
    table.add_column("Solver", style="dim")

    for name, fit in fits.items():
        if not fit.success:
            table.add_row(name, f"[error]{icon('error')}[/error]", *["-"] * 8)
            continue
        table.add_row(
            name,
            f"[success]{icon('check')}[/success]",
            _value(fit.center, fit.center_err),
            _value(fit.amplitude, fit.amplitude_err),
            _value(fit.gamma, fit.gamma_err),
            _value(fit.beta, fit.beta_err),
            _value(fit.baseline, fit.baseline_err),
            f"{fit.chi2_reduced:.3g}",
            str(fit.n_points),
            f"{fit.config_name} ({fit.covariance_source.value})",
        )

    console.print(table)


def print_summary(items: dict[str, Any], title: str = "Summary") -> None:
    """Print a standard two-column summary table."""
    table = create_table(title, show_header=False)
    table.add_column("Item", style="metric")
    table.add_column("Value", style="value")

    for key, value in items.items():
        table.add_row(key, str(value))

    console.print(table)
