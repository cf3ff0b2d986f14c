"""Parameter uncertainties from the covariance of an accepted solution.

The covariance ``(J^T J)^-1`` is attempted under an ordered list of
settings (three SVD thresholds, then QR). The first attempt yielding finite,
plausible standard errors wins; otherwise analytic errors derived from the
fitted parameters and the dataset dispersion are reported.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from scipy import linalg

from chargefit.core import constants
from chargefit.core.fitting.parameters import ParameterVector
from chargefit.core.results.fit_results import CovarianceSource
from chargefit.core.shared.exceptions import NumericsError

if TYPE_CHECKING:
    from chargefit.core.shared.typing import FloatArray


@dataclass(frozen=True, slots=True)
class CovarianceSetting:
    """Decomposition and reciprocal-condition threshold of one attempt."""

    source: CovarianceSource
    min_reciprocal_condition: float


COVARIANCE_SETTINGS: tuple[CovarianceSetting, ...] = (
    CovarianceSetting(CovarianceSource.SVD, 1e-14),
    CovarianceSetting(CovarianceSource.SVD, 1e-12),
    CovarianceSetting(CovarianceSource.SVD, 1e-10),
    CovarianceSetting(CovarianceSource.QR, 1e-12),
)


@dataclass(frozen=True, slots=True)
class UncertaintyEstimate:
    """Standard errors of ``(A, m, gamma, beta, B)`` and their origin."""

    errors: ParameterVector
    source: CovarianceSource


def covariance_svd(
    jac: FloatArray,
    min_reciprocal_condition: float,
    max_null_space_rank: int = constants.COVARIANCE_NULL_SPACE_RANK,
) -> FloatArray:
    """Pseudo-inverse of ``J^T J`` from the singular values of ``J``.

    Eigenvalues of ``J^T J`` (squared singular values) whose ratio to the
    largest is below ``min_reciprocal_condition`` are dropped, at most
    ``max_null_space_rank`` of them.

    Raises:
        NumericsError: If the spectrum is degenerate or remains
            ill-conditioned after dropping the allowed directions
    """
    try:
        _, singular, vt = linalg.svd(jac, full_matrices=False)
    except (linalg.LinAlgError, ValueError) as exc:
        msg = f"SVD failed: {exc}"
        raise NumericsError(msg) from exc

    eigenvalues = singular**2
    largest = float(eigenvalues[0]) if eigenvalues.size else 0.0
    if not np.isfinite(largest) or largest <= 0.0:
        msg = "Jacobian has no usable singular values"
        raise NumericsError(msg)

    ratios = eigenvalues / largest
    dropped = ratios < min_reciprocal_condition
    if int(dropped.sum()) > max_null_space_rank:
        msg = (
            f"{int(dropped.sum())} ill-conditioned directions exceed the "
            f"null-space rank {max_null_space_rank}"
        )
        raise NumericsError(msg)

    kept = ~dropped
    inv_eigenvalues = np.zeros_like(eigenvalues)
    inv_eigenvalues[kept] = 1.0 / eigenvalues[kept]
    return (vt.T * inv_eigenvalues) @ vt


def covariance_qr(jac: FloatArray, min_reciprocal_condition: float) -> FloatArray:
    """Covariance ``R^-1 R^-T`` from the QR decomposition of ``J``.

    Raises:
        NumericsError: If ``(min|diag R| / max|diag R|)^2`` is below the threshold
    """
    try:
        r = linalg.qr(jac, mode="r")[0]
    except (linalg.LinAlgError, ValueError) as exc:
        msg = f"QR failed: {exc}"
        raise NumericsError(msg) from exc

    n_params = jac.shape[1]
    r = r[:n_params, :n_params]
    diag = np.abs(np.diag(r))
    largest = float(diag.max()) if diag.size else 0.0
    if not np.isfinite(largest) or largest <= 0.0:
        msg = "R factor has no usable diagonal"
        raise NumericsError(msg)
    if (float(diag.min()) / largest) ** 2 < min_reciprocal_condition:
        msg = "R factor is ill-conditioned"
        raise NumericsError(msg)

    r_inv = linalg.solve_triangular(r, np.eye(n_params))
    return r_inv @ r_inv.T


def compute_covariance(jac: FloatArray, setting: CovarianceSetting) -> FloatArray:
    """Covariance of the parameters under a single setting."""
    if jac.ndim != 2 or jac.shape[0] < jac.shape[1]:
        msg = f"Jacobian of shape {jac.shape} is underdetermined"
        raise NumericsError(msg)
    if setting.source is CovarianceSource.QR:
        return covariance_qr(jac, setting.min_reciprocal_condition)
    return covariance_svd(jac, setting.min_reciprocal_condition)


def analytic_errors(params: ParameterVector, mad: float, pixel_spacing: float) -> ParameterVector:
    """Heuristic errors used when no covariance attempt is acceptable."""
    return ParameterVector(
        amplitude=max(0.02 * params.amplitude, 0.1 * mad),
        center=max(0.02 * pixel_spacing, params.gamma / 10.0),
        gamma=max(0.05 * params.gamma, 0.01 * pixel_spacing),
        beta=max(0.1 * params.beta, 0.05),
        baseline=max(0.1 * abs(params.baseline), 0.05 * mad),
    )


def _plausible(errors: FloatArray, params: ParameterVector, pixel_spacing: float) -> bool:
    return bool(
        np.all(np.isfinite(errors))
        and errors[0] < constants.MAX_AMPLITUDE_ERROR_RATIO * params.amplitude
        and errors[1] < constants.MAX_CENTER_ERROR_SPACINGS * pixel_spacing
    )


def estimate_uncertainties(
    jac: FloatArray,
    params: ParameterVector,
    *,
    mad: float,
    pixel_spacing: float,
) -> UncertaintyEstimate:
    """Standard errors of an accepted fit.

    Args:
        jac: Jacobian of the (loss-scaled) weighted residuals at the solution
        params: Accepted parameters, gamma already made positive
        mad: Dispersion of the fitted dataset's charges
        pixel_spacing: Physical pitch, bounds the plausible center error

    Returns:
        Errors from the first acceptable covariance attempt, or analytic errors
    """
    jac = np.asarray(jac, dtype=float)
    for setting in COVARIANCE_SETTINGS:
        try:
            covariance = compute_covariance(jac, setting)
        except NumericsError:
            continue
        errors = np.sqrt(np.abs(np.diag(covariance)))
        if _plausible(errors, params, pixel_spacing):
            return UncertaintyEstimate(ParameterVector.from_array(errors), setting.source)

    return UncertaintyEstimate(
        analytic_errors(params, mad, pixel_spacing), CovarianceSource.ANALYTIC
    )


__all__ = [
    "COVARIANCE_SETTINGS",
    "CovarianceSetting",
    "UncertaintyEstimate",
    "analytic_errors",
    "compute_covariance",
    "covariance_qr",
    "covariance_svd",
    "estimate_uncertainties",
]
