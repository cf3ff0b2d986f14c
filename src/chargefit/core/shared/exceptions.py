"""Exception taxonomy for chargefit.

Public fit entry points never raise across the fit boundary; these
exceptions travel between internal layers (backend wrapper, covariance
routines, file loaders) and are converted into flagged results or CLI
errors at the edges.
"""

from __future__ import annotations


class ChargeFitError(Exception):
    """Base class for all chargefit-specific exceptions."""


class ConfigError(ChargeFitError):
    """Configuration-related errors (invalid/missing options, schema issues)."""


class DataIOError(ChargeFitError):
    """Sample loading/saving errors (files, formats, permissions)."""


class OptimizationError(ChargeFitError):
    """Errors raised by the least-squares backend during a solve."""


class NumericsError(ChargeFitError):
    """Numeric instability or invalid arithmetic conditions (NaNs, singular matrices)."""


__all__ = [
    "ChargeFitError",
    "ConfigError",
    "DataIOError",
    "NumericsError",
    "OptimizationError",
]
