"""Result records and goodness-of-fit statistics."""

from chargefit.core.results.fit_results import (
    AxisFitResult,
    CovarianceSource,
    DiagonalFitResult,
    Fit2DResult,
    OutlierRemovalResult,
)
from chargefit.core.results.statistics import (
    compute_degrees_of_freedom,
    compute_pseudo_p_value,
    compute_reduced_chi_squared,
    reduced_chi_squared_from_cost,
)

__all__ = [
    "AxisFitResult",
    "CovarianceSource",
    "DiagonalFitResult",
    "Fit2DResult",
    "OutlierRemovalResult",
    "compute_degrees_of_freedom",
    "compute_pseudo_p_value",
    "compute_reduced_chi_squared",
    "reduced_chi_squared_from_cost",
]
