"""Fit service exposing the public cluster fitting operations."""

from chargefit.services.fit.grouping import (
    CentralLines,
    DiagonalProjection,
    central_lines,
    project_diagonals,
)
from chargefit.services.fit.service import (
    ChargeFitService,
    fit_2d_power_lorentzian,
    fit_diagonal_power_lorentzian,
    fit_power_lorentzian,
    remove_power_lorentzian_outliers,
)

__all__ = [
    "CentralLines",
    "ChargeFitService",
    "DiagonalProjection",
    "central_lines",
    "fit_2d_power_lorentzian",
    "fit_diagonal_power_lorentzian",
    "fit_power_lorentzian",
    "project_diagonals",
    "remove_power_lorentzian_outliers",
]
