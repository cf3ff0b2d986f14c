"""Numerical building blocks independent of the fitting engine."""

from chargefit.core.algorithms.robust import (
    DataStatistics,
    compute_robust_statistics,
    mad_sigma,
    median,
)

__all__ = ["DataStatistics", "compute_robust_statistics", "mad_sigma", "median"]
