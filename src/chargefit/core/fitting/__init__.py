"""Fitting engine: estimation, outlier filtering, solving and uncertainties."""

from chargefit.core.fitting.estimation import (
    EstimationMethod,
    ParameterEstimates,
    estimate_parameters,
)
from chargefit.core.fitting.orchestrator import FitOrchestrator
from chargefit.core.fitting.outliers import (
    OutlierFilterResult,
    filter_outliers,
    remove_outliers_3d,
)
from chargefit.core.fitting.parameters import (
    PARAM_NAMES,
    ParameterBounds,
    ParameterType,
    ParameterVector,
)
from chargefit.core.fitting.strategies import (
    SOLVER_CONFIGS,
    LeastSquaresBackend,
    SolveOutcome,
    SolverConfig,
)
from chargefit.core.fitting.uncertainty import UncertaintyEstimate, estimate_uncertainties

__all__ = [
    "PARAM_NAMES",
    "SOLVER_CONFIGS",
    "EstimationMethod",
    "FitOrchestrator",
    "LeastSquaresBackend",
    "OutlierFilterResult",
    "ParameterBounds",
    "ParameterEstimates",
    "ParameterType",
    "ParameterVector",
    "SolveOutcome",
    "SolverConfig",
    "UncertaintyEstimate",
    "estimate_parameters",
    "estimate_uncertainties",
    "filter_outliers",
    "remove_outliers_3d",
]
