"""Application service layer for chargefit workflows.

This module provides high-level service facades that the CLI and other
adapters can use without knowing core implementation details.
"""

from chargefit.services.fit import (
    ChargeFitService,
    fit_2d_power_lorentzian,
    fit_diagonal_power_lorentzian,
    fit_power_lorentzian,
    remove_power_lorentzian_outliers,
)

__all__ = [
    "ChargeFitService",
    "fit_2d_power_lorentzian",
    "fit_diagonal_power_lorentzian",
    "fit_power_lorentzian",
    "remove_power_lorentzian_outliers",
]
