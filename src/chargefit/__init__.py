"""chargefit - Power-law Lorentzian position reconstruction for charge clusters.

Public API:
    - fit_2d_power_lorentzian: Central row and column fits
    - fit_diagonal_power_lorentzian: Main and secondary diagonal fits
    - fit_power_lorentzian: Single 1D profile fit
    - remove_power_lorentzian_outliers: Standalone MAD outlier removal
    - ChargeFitService: Service facade with an injectable reporter

Configuration:
    - ChargeFitConfig: Main configuration object
    - UncertaintyConfig, OutlierConfig, OutputConfig: Sub-configurations
    - get_config, set_config, use_config: Process-wide configuration store

Results:
    - AxisFitResult, Fit2DResult, DiagonalFitResult, OutlierRemovalResult
"""

import contextlib
from importlib import metadata

__version__ = "0.1.0"

with contextlib.suppress(metadata.PackageNotFoundError):
    __version__ = metadata.version(__name__)

# Configuration
from chargefit.core.domain.config import (
    ChargeFitConfig,
    OutlierConfig,
    OutputConfig,
    UncertaintyConfig,
    get_config,
    set_config,
    use_config,
)

# Results (read-only records)
from chargefit.core.results import (
    AxisFitResult,
    DiagonalFitResult,
    Fit2DResult,
    OutlierRemovalResult,
)

# Services (primary API)
from chargefit.services import (
    ChargeFitService,
    fit_2d_power_lorentzian,
    fit_diagonal_power_lorentzian,
    fit_power_lorentzian,
    remove_power_lorentzian_outliers,
)

__all__ = [
    # Version
    "__version__",
    # Services
    "ChargeFitService",
    "fit_2d_power_lorentzian",
    "fit_diagonal_power_lorentzian",
    "fit_power_lorentzian",
    "remove_power_lorentzian_outliers",
    # Configuration
    "ChargeFitConfig",
    "OutlierConfig",
    "OutputConfig",
    "UncertaintyConfig",
    "get_config",
    "set_config",
    "use_config",
    # Results
    "AxisFitResult",
    "DiagonalFitResult",
    "Fit2DResult",
    "OutlierRemovalResult",
]
