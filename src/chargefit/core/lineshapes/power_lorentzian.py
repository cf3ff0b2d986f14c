"""Power-law generalized Lorentzian lineshape.

    y(x) = A / (1 + ((x - m) / gamma)^2)^beta + B

Parameter vectors are ordered ``(A, m, gamma, beta, B)``. Residual
evaluation guards against degenerate widths and exponents: ``|gamma|`` is
floored at 1e-12, ``|beta|`` at 0.1 and the base ``1 + u^2`` at 1e-12. The
floors only apply to residuals and their Jacobian; :func:`power_lorentzian`
evaluates the raw model.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from chargefit.core.constants import DENOMINATOR_FLOOR, SAFE_BETA_FLOOR, SAFE_GAMMA_FLOOR
from chargefit.core.lineshapes.registry import register_shape

if TYPE_CHECKING:
    from chargefit.core.shared.typing import FloatArray


def power_lorentzian(
    x: FloatArray,
    amplitude: float,
    center: float,
    gamma: float,
    beta: float,
    baseline: float,
) -> FloatArray:
    """Evaluate the power-law Lorentzian."""
    u = (np.asarray(x, dtype=float) - center) / gamma
    return amplitude / np.power(1.0 + u * u, beta) + baseline


def _safe_terms(
    params: FloatArray, x: FloatArray
) -> tuple[FloatArray, FloatArray, float, float]:
    """Return ``(u, base, safe_gamma, safe_beta)`` with the safety floors applied."""
    _, center, gamma, beta, _ = params
    safe_gamma = max(abs(gamma), SAFE_GAMMA_FLOOR)
    safe_beta = max(abs(beta), SAFE_BETA_FLOOR)
    u = (x - center) / safe_gamma
    base = np.maximum(1.0 + u * u, DENOMINATOR_FLOOR)
    return u, base, safe_gamma, safe_beta


@register_shape("power_lorentzian")
class PowerLorentzian:
    """Residual model for the power-law Lorentzian with an analytic Jacobian."""

    name = "power_lorentzian"
    param_names = ("amplitude", "center", "gamma", "beta", "baseline")

    def evaluate(self, x: FloatArray, params: FloatArray) -> FloatArray:
        return power_lorentzian(x, *params)

    def residuals(
        self, params: FloatArray, x: FloatArray, y: FloatArray, sigma: FloatArray
    ) -> FloatArray:
        amplitude = params[0]
        baseline = params[4]
        _, base, _, safe_beta = _safe_terms(params, x)
        model = amplitude / np.power(base, safe_beta) + baseline
        return (model - y) / sigma

    def jacobian(
        self, params: FloatArray, x: FloatArray, y: FloatArray, sigma: FloatArray
    ) -> FloatArray:
        """Analytic Jacobian of :meth:`residuals`, shape ``(n, 5)``.

        Derivatives with respect to gamma and beta carry the sign of the raw
        parameter (the model depends on ``|gamma|`` and ``|beta|``) and vanish
        where the safety floor is active.
        """
        amplitude, _, gamma, beta, _ = params
        u, base, safe_gamma, safe_beta = _safe_terms(params, x)

        powered = np.power(base, -safe_beta)
        powered_next = powered / base
        common = 2.0 * amplitude * safe_beta * powered_next / safe_gamma

        d_amplitude = powered
        d_center = common * u
        if abs(gamma) > SAFE_GAMMA_FLOOR:
            d_gamma = common * u * u * np.sign(gamma)
        else:
            d_gamma = np.zeros_like(u)
        if abs(beta) > SAFE_BETA_FLOOR:
            d_beta = -amplitude * powered * np.log(base) * np.sign(beta)
        else:
            d_beta = np.zeros_like(u)
        d_baseline = np.ones_like(u)

        jac = np.column_stack((d_amplitude, d_center, d_gamma, d_beta, d_baseline))
        weights = np.broadcast_to(np.asarray(sigma, dtype=float), u.shape)
        return jac / weights[:, np.newaxis]


__all__ = ["PowerLorentzian", "power_lorentzian"]
