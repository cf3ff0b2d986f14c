"""Initial parameter estimation by a ranked cascade of strategies.

Each strategy is a pure function of the series, its robust statistics, the
external center estimate and the pixel spacing. It returns an
:class:`EstimationOutcome` that either carries estimates or the reason it
declined. The cascade returns the first success; the conservative fallback
always succeeds.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING

import numpy as np

from chargefit.core import constants
from chargefit.core.algorithms.robust import compute_robust_statistics
from chargefit.core.fitting.parameters import ParameterVector

if TYPE_CHECKING:
    from collections.abc import Callable

    from chargefit.core.algorithms.robust import DataStatistics
    from chargefit.core.domain.samples import AxisSeries


class EstimationMethod(IntEnum):
    """Strategy that produced an estimate; 0 means no estimate."""

    NONE = 0
    PHYSICS = 1
    ROBUST = 2
    FALLBACK = 3


@dataclass(frozen=True, slots=True)
class ParameterEstimates:
    """Initial guess for one dataset attempt."""

    amplitude: float = 0.0
    center: float = 0.0
    gamma: float = 0.0
    beta: float = 1.0
    baseline: float = 0.0
    valid: bool = False
    method_used: EstimationMethod = EstimationMethod.NONE

    def as_vector(self) -> ParameterVector:
        return ParameterVector(
            self.amplitude, self.center, self.gamma, self.beta, self.baseline
        )

    @property
    def is_plausible(self) -> bool:
        """Positive amplitude and width, every value finite."""
        return self.amplitude > 0 and self.gamma > 0 and self.as_vector().is_finite


@dataclass(frozen=True, slots=True)
class EstimationOutcome:
    """Tagged result of a single strategy: estimates or a rejection reason."""

    estimates: ParameterEstimates | None = None
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.estimates is not None

    @classmethod
    def accept(cls, estimates: ParameterEstimates) -> EstimationOutcome:
        if estimates.is_plausible:
            return cls(estimates=estimates)
        return cls(reason=f"implausible {estimates.method_used.name.lower()} estimate")


def estimate_physics(
    series: AxisSeries,
    stats: DataStatistics,
    center_estimate: float,
    pixel_spacing: float,
) -> EstimationOutcome:
    """Charge-weighted moments above the baseline."""
    baseline = min(stats.min, stats.q25)
    amplitude = stats.max - baseline
    amplitude = max(
        amplitude, constants.ESTIMATE_AMPLITUDE_RANGE_FRACTION * (stats.max - stats.min)
    )
    center = stats.weighted_mean

    weights = np.maximum(0.0, series.charges - baseline)
    keep = weights > constants.ESTIMATE_WEIGHT_FRACTION * amplitude
    if keep.any():
        offsets = series.positions[keep] - center
        kept = weights[keep]
        variance = float(np.sum(kept * offsets * offsets) / np.sum(kept))
        gamma = float(np.sqrt(2.0 * variance))
    else:
        gamma = constants.ESTIMATE_GAMMA_DEFAULT * pixel_spacing
    gamma = float(
        np.clip(
            gamma,
            constants.ESTIMATE_GAMMA_MIN * pixel_spacing,
            constants.ESTIMATE_GAMMA_MAX * pixel_spacing,
        )
    )

    return EstimationOutcome.accept(
        ParameterEstimates(
            amplitude=amplitude,
            center=center,
            gamma=gamma,
            beta=1.0,
            baseline=baseline,
            valid=True,
            method_used=EstimationMethod.PHYSICS,
        )
    )


def estimate_robust(
    series: AxisSeries,
    stats: DataStatistics,
    center_estimate: float,
    pixel_spacing: float,
) -> EstimationOutcome:
    """Order statistics of the charges: median center, interquartile amplitude."""
    return EstimationOutcome.accept(
        ParameterEstimates(
            amplitude=stats.q75 - stats.q25,
            center=stats.median,
            gamma=max(stats.mad, constants.ESTIMATE_GAMMA_ROBUST_MIN * pixel_spacing),
            beta=1.0,
            baseline=stats.q25,
            valid=True,
            method_used=EstimationMethod.ROBUST,
        )
    )


def estimate_fallback(
    series: AxisSeries,
    stats: DataStatistics,
    center_estimate: float,
    pixel_spacing: float,
) -> EstimationOutcome:
    """Conservative guess from the external center estimate; never rejects."""
    return EstimationOutcome(
        estimates=ParameterEstimates(
            amplitude=stats.max,
            center=center_estimate,
            gamma=constants.ESTIMATE_GAMMA_DEFAULT * pixel_spacing,
            beta=1.0,
            baseline=0.0,
            valid=True,
            method_used=EstimationMethod.FALLBACK,
        )
    )


ESTIMATION_STRATEGIES: tuple[
    Callable[[AxisSeries, DataStatistics, float, float], EstimationOutcome], ...
] = (estimate_physics, estimate_robust, estimate_fallback)


def estimate_parameters(
    series: AxisSeries,
    center_estimate: float,
    pixel_spacing: float,
) -> ParameterEstimates:
    """Run the strategy cascade and return the first successful estimate.

    Returns an invalid :class:`ParameterEstimates` only when the series
    violates the input contract (length mismatch or fewer than five points).
    """
    if not series.is_fittable:
        return ParameterEstimates()

    stats = compute_robust_statistics(series.positions, series.charges)
    if not stats.valid:
        return ParameterEstimates()

    for strategy in ESTIMATION_STRATEGIES:
        outcome = strategy(series, stats, center_estimate, pixel_spacing)
        if outcome.ok and outcome.estimates is not None:
            return outcome.estimates
    return ParameterEstimates()


__all__ = [
    "ESTIMATION_STRATEGIES",
    "EstimationMethod",
    "EstimationOutcome",
    "ParameterEstimates",
    "estimate_fallback",
    "estimate_parameters",
    "estimate_physics",
    "estimate_robust",
]
