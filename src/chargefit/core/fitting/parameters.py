"""Parameter vectors and box constraints of the power-law Lorentzian fit."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, NamedTuple

import numpy as np

from chargefit.core import constants

if TYPE_CHECKING:
    from chargefit.core.shared.typing import FloatArray


class ParameterType(str, Enum):
    """Model parameters, in the order used by every parameter vector."""

    AMPLITUDE = "amplitude"  # peak height above baseline
    CENTER = "center"  # peak position
    GAMMA = "gamma"  # half width scale
    BETA = "beta"  # power-law exponent
    BASELINE = "baseline"  # constant offset


PARAM_NAMES: tuple[str, ...] = tuple(param.value for param in ParameterType)


class ParameterVector(NamedTuple):
    """Immutable ``(A, m, gamma, beta, B)`` vector passed between solves."""

    amplitude: float
    center: float
    gamma: float
    beta: float
    baseline: float

    @classmethod
    def from_array(cls, values: FloatArray) -> ParameterVector:
        return cls(*(float(v) for v in values))

    def as_array(self) -> FloatArray:
        return np.array(self, dtype=float)

    @property
    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self)))


@dataclass(frozen=True, slots=True)
class ParameterBounds:
    """Lower and upper box constraints, one pair per parameter."""

    lower: ParameterVector
    upper: ParameterVector

    @classmethod
    def around(
        cls,
        start: ParameterVector,
        *,
        max_charge: float,
        pixel_spacing: float,
        min_amplitude: float,
    ) -> ParameterBounds:
        """Base search box around a starting estimate.

        Args:
            start: Initial estimate ``(A0, m0, gamma0, beta0, B0)``
            max_charge: Largest charge of the fitted dataset
            pixel_spacing: Physical pitch used as the length scale
            min_amplitude: Absolute floor on the amplitude lower bound
        """
        amplitude = start.amplitude
        baseline = start.baseline
        baseline_range = max(
            constants.BASELINE_AMPLITUDE_FRACTION * amplitude,
            constants.BASELINE_SELF_FACTOR * abs(baseline),
        )
        center_range = constants.CENTER_RANGE * pixel_spacing
        lower = ParameterVector(
            amplitude=max(min_amplitude, constants.AMPLITUDE_MIN_FRACTION * amplitude),
            center=start.center - center_range,
            gamma=constants.GAMMA_MIN * pixel_spacing,
            beta=constants.BETA_MIN,
            baseline=baseline - baseline_range,
        )
        upper = ParameterVector(
            amplitude=min(
                constants.AMPLITUDE_MAX_CHARGE_FACTOR * max_charge,
                constants.AMPLITUDE_MAX_FACTOR * amplitude,
            ),
            center=start.center + center_range,
            gamma=constants.GAMMA_MAX * pixel_spacing,
            beta=constants.BETA_MAX,
            baseline=baseline + baseline_range,
        )
        return cls(lower, upper)

    def with_beta(self, lower: float, upper: float) -> ParameterBounds:
        return replace(
            self,
            lower=self.lower._replace(beta=lower),
            upper=self.upper._replace(beta=upper),
        )

    def with_center(self, center: float, half_width: float) -> ParameterBounds:
        return replace(
            self,
            lower=self.lower._replace(center=center - half_width),
            upper=self.upper._replace(center=center + half_width),
        )

    def sanitized(self) -> ParameterBounds:
        """Return bounds where every lower bound is strictly below its upper bound."""
        lower = self.lower.as_array()
        upper = self.upper.as_array()
        collapsed = lower >= upper
        if not collapsed.any():
            return self
        gap = np.maximum(np.abs(lower) * 1e-6, 1e-12)
        upper = np.where(collapsed, lower + gap, upper)
        return ParameterBounds(self.lower, ParameterVector.from_array(upper))

    def clip(self, params: ParameterVector) -> ParameterVector:
        """Clip a parameter vector into the box."""
        clipped = np.clip(params.as_array(), self.lower.as_array(), self.upper.as_array())
        return ParameterVector.from_array(clipped)

    def as_tuple(self) -> tuple[FloatArray, FloatArray]:
        """Bounds in the ``(lower, upper)`` form accepted by scipy."""
        return self.lower.as_array(), self.upper.as_array()


__all__ = ["PARAM_NAMES", "ParameterBounds", "ParameterType", "ParameterVector"]
