"""Solver configurations and the ``scipy.optimize.least_squares`` backend.

The fitting engine iterates a fixed, ordered table of solver
configurations. Each record names a linear solver, a trust-region
strategy, tolerances, an iteration cap and a robust loss; the backend
maps the record onto ``least_squares`` keyword arguments.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

import numpy as np
from scipy.optimize import least_squares

from chargefit.core.constants import PARAMETER_TOLERANCE
from chargefit.core.shared.exceptions import OptimizationError

if TYPE_CHECKING:
    from chargefit.core.fitting.parameters import ParameterBounds, ParameterVector
    from chargefit.core.lineshapes.registry import Lineshape
    from chargefit.core.shared.typing import FloatArray


class LinearSolver(str, Enum):
    """Linear solver used inside each trust-region step."""

    DENSE_QR = "dense_qr"
    DENSE_NORMAL_CHOLESKY = "dense_normal_cholesky"
    SPARSE_NORMAL_CHOLESKY = "sparse_normal_cholesky"


class TrustRegion(str, Enum):
    """Trust-region strategy."""

    LEVENBERG_MARQUARDT = "levenberg_marquardt"
    DOGLEG = "dogleg"


class RobustLoss(str, Enum):
    """Robust loss applied to the residuals."""

    NONE = "linear"
    MODERATE = "huber"
    HEAVY_TAILED = "cauchy"


_METHODS: dict[TrustRegion, str] = {
    TrustRegion.LEVENBERG_MARQUARDT: "trf",
    TrustRegion.DOGLEG: "dogbox",
}

# (tr_solver, x_scale)
_LINEAR_SOLVERS: dict[LinearSolver, tuple[str, Any]] = {
    LinearSolver.DENSE_QR: ("exact", 1.0),
    LinearSolver.DENSE_NORMAL_CHOLESKY: ("exact", "jac"),
    LinearSolver.SPARSE_NORMAL_CHOLESKY: ("lsmr", "jac"),
}


@dataclass(frozen=True, slots=True)
class SolverConfig:
    """One row of the solver configuration table."""

    name: str
    linear_solver: LinearSolver
    trust_region: TrustRegion
    function_tolerance: float
    gradient_tolerance: float
    max_iterations: int
    loss: RobustLoss
    loss_scale: float

    def loss_f_scale(self, amplitude_estimate: float, sigma: float) -> float:
        """Soft margin of the robust loss in weighted-residual units."""
        scale = self.loss_scale * amplitude_estimate / sigma
        if scale > 0 and np.isfinite(scale):
            return float(scale)
        return 1.0

    def least_squares_kwargs(self, amplitude_estimate: float, sigma: float) -> dict[str, Any]:
        """Keyword arguments for :func:`scipy.optimize.least_squares`."""
        tr_solver, x_scale = _LINEAR_SOLVERS[self.linear_solver]
        kwargs: dict[str, Any] = {
            "method": _METHODS[self.trust_region],
            "tr_solver": tr_solver,
            "x_scale": x_scale,
            "ftol": self.function_tolerance,
            "gtol": self.gradient_tolerance,
            "xtol": PARAMETER_TOLERANCE,
            "max_nfev": self.max_iterations,
            "loss": self.loss.value,
        }
        if self.loss is not RobustLoss.NONE:
            kwargs["f_scale"] = self.loss_f_scale(amplitude_estimate, sigma)
        return kwargs


SOLVER_CONFIGS: tuple[SolverConfig, ...] = (
    SolverConfig(
        name="dense_qr_huber",
        linear_solver=LinearSolver.DENSE_QR,
        trust_region=TrustRegion.LEVENBERG_MARQUARDT,
        function_tolerance=1e-15,
        gradient_tolerance=1e-15,
        max_iterations=2000,
        loss=RobustLoss.MODERATE,
        loss_scale=0.10,
    ),
    SolverConfig(
        name="dense_qr_cauchy",
        linear_solver=LinearSolver.DENSE_QR,
        trust_region=TrustRegion.LEVENBERG_MARQUARDT,
        function_tolerance=1e-12,
        gradient_tolerance=1e-12,
        max_iterations=1500,
        loss=RobustLoss.HEAVY_TAILED,
        loss_scale=0.16,
    ),
    SolverConfig(
        name="dense_qr_dogleg",
        linear_solver=LinearSolver.DENSE_QR,
        trust_region=TrustRegion.DOGLEG,
        function_tolerance=1e-10,
        gradient_tolerance=1e-10,
        max_iterations=1000,
        loss=RobustLoss.NONE,
        loss_scale=0.0,
    ),
    SolverConfig(
        name="dense_normal_cholesky_huber",
        linear_solver=LinearSolver.DENSE_NORMAL_CHOLESKY,
        trust_region=TrustRegion.LEVENBERG_MARQUARDT,
        function_tolerance=1e-12,
        gradient_tolerance=1e-12,
        max_iterations=1500,
        loss=RobustLoss.MODERATE,
        loss_scale=0.13,
    ),
    SolverConfig(
        name="sparse_normal_cholesky_cauchy",
        linear_solver=LinearSolver.SPARSE_NORMAL_CHOLESKY,
        trust_region=TrustRegion.LEVENBERG_MARQUARDT,
        function_tolerance=1e-12,
        gradient_tolerance=1e-12,
        max_iterations=1200,
        loss=RobustLoss.HEAVY_TAILED,
        loss_scale=0.22,
    ),
)


def get_solver_config(name: str) -> SolverConfig:
    """Return a solver configuration by name.

    Raises:
        ValueError: If no configuration has that name
    """
    for config in SOLVER_CONFIGS:
        if config.name == name:
            return config
    available = ", ".join(config.name for config in SOLVER_CONFIGS)
    msg = f"Unknown solver configuration '{name}'. Available: {available}"
    raise ValueError(msg)


@dataclass(slots=True)
class SolveOutcome:
    """Normalized result of a single bounded solve."""

    x: FloatArray
    cost: float
    converged: bool
    status: int
    message: str
    nfev: int
    jac: FloatArray


class LeastSquaresBackend:
    """Bounded trust-region solves of a weighted lineshape model."""

    def __init__(self, model: Lineshape) -> None:
        self._model = model

    def solve(
        self,
        config: SolverConfig,
        start: ParameterVector,
        bounds: ParameterBounds,
        x: FloatArray,
        y: FloatArray,
        sigma: FloatArray,
        *,
        amplitude_estimate: float,
    ) -> SolveOutcome:
        """Run one solve from ``start`` inside ``bounds``.

        Bounds are made strictly ordered and ``start`` is clipped into them
        before the call.

        Raises:
            OptimizationError: If the backend rejects the problem or the
                residuals become non-finite
        """
        safe_bounds = bounds.sanitized()
        x0 = safe_bounds.clip(start).as_array()
        kwargs = config.least_squares_kwargs(amplitude_estimate, float(sigma[0]))

        try:
            result = least_squares(
                self._model.residuals,
                x0,
                jac=self._model.jacobian,
                bounds=safe_bounds.as_tuple(),
                args=(x, y, sigma),
                **kwargs,
            )
        except (ValueError, np.linalg.LinAlgError) as exc:
            msg = f"{config.name}: {exc}"
            raise OptimizationError(msg) from exc

        return SolveOutcome(
            x=np.asarray(result.x, dtype=float),
            cost=float(result.cost),
            converged=int(result.status) >= 1,
            status=int(result.status),
            message=str(result.message),
            nfev=int(result.nfev),
            jac=np.asarray(result.jac, dtype=float),
        )


__all__ = [
    "SOLVER_CONFIGS",
    "LeastSquaresBackend",
    "LinearSolver",
    "RobustLoss",
    "SolveOutcome",
    "SolverConfig",
    "TrustRegion",
    "get_solver_config",
]
