"""Goodness-of-fit statistics.

Single source of truth for the reduced chi-square, degrees of freedom and the
pseudo p-value reported with every axis fit.
"""

from __future__ import annotations

from chargefit.core.constants import N_MODEL_PARAMS, PSEUDO_P_VALUE_SCALE


def compute_degrees_of_freedom(n_data: int, n_params: int = N_MODEL_PARAMS) -> int:
    """Compute degrees of freedom, minimum of 1 to avoid division by zero."""
    return max(1, n_data - n_params)


def compute_reduced_chi_squared(
    chi_squared: float,
    n_data: int,
    n_params: int = N_MODEL_PARAMS,
) -> float:
    """Compute reduced chi-squared ``chi_squared / dof``."""
    return chi_squared / compute_degrees_of_freedom(n_data, n_params)


def reduced_chi_squared_from_cost(cost: float, n_data: int) -> float:
    """Reduced chi-squared from a least-squares objective ``cost``.

    ``scipy.optimize.least_squares`` reports half the sum of the
    loss-transformed squared residuals, so the chi-square is ``2 * cost``.
    """
    return compute_reduced_chi_squared(2.0 * cost, n_data)


def compute_pseudo_p_value(chi2_reduced: float) -> float:
    """Heuristic goodness-of-fit score in [0, 1].

    Linear in the reduced chi-square: 1 for a perfect fit, 0 at or above
    ``chi2_reduced = 10``. A non-positive chi-square yields 0.
    """
    if chi2_reduced > 0:
        return 1.0 - min(1.0, chi2_reduced / PSEUDO_P_VALUE_SCALE)
    return 0.0


__all__ = [
    "compute_degrees_of_freedom",
    "compute_pseudo_p_value",
    "compute_reduced_chi_squared",
    "reduced_chi_squared_from_cost",
]
