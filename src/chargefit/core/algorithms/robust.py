"""Robust order statistics of a 1D charge-vs-position series.

Quartiles are index quartiles (``sorted[n // 4]`` and ``sorted[3n // 4]``),
not interpolated ones, and the median of an even-length series is the mean
of the two middle elements.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

import numpy as np

from chargefit.core.constants import MAD_FLOOR, MAD_TO_SIGMA

if TYPE_CHECKING:
    from chargefit.core.shared.typing import FloatArray


@dataclass(frozen=True, slots=True)
class DataStatistics:
    """Summary statistics of the charges of a series.

    Attributes:
        mean: Arithmetic mean of charges
        median: Median charge
        std_dev: Population standard deviation of charges
        mad: Normal-consistent median absolute deviation (floored)
        q25: Lower index quartile of charges
        q75: Upper index quartile of charges
        min: Minimum charge
        max: Maximum charge
        weighted_mean: Position weighted by ``max(0, charge - q25)``
        total_weight: Sum of those weights
        robust_center: Charge-weighted center of the series
        valid: False on empty input or length mismatch
    """

    mean: float = 0.0
    median: float = 0.0
    std_dev: float = 0.0
    mad: float = 0.0
    q25: float = 0.0
    q75: float = 0.0
    min: float = 0.0
    max: float = 0.0
    weighted_mean: float = 0.0
    total_weight: float = 0.0
    robust_center: float = 0.0
    valid: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def sorted_median(sorted_values: FloatArray) -> float:
    """Median of an already sorted, non-empty array."""
    n = sorted_values.size
    mid = n // 2
    if n % 2:
        return float(sorted_values[mid])
    return float(0.5 * (sorted_values[mid - 1] + sorted_values[mid]))


def median(values: FloatArray) -> float:
    """Median of a non-empty array."""
    return sorted_median(np.sort(np.asarray(values, dtype=float)))


def mad_sigma(values: FloatArray, center: float, fallback: float) -> float:
    """Normal-consistent median absolute deviation about ``center``.

    Values below 1e-12 (or non-finite) are replaced by ``fallback`` when it
    is finite and above 1e-12, otherwise by 1e-12.
    """
    deviations = np.sort(np.abs(np.asarray(values, dtype=float) - center))
    mad = float(deviations[deviations.size // 2]) * MAD_TO_SIGMA
    if np.isfinite(mad) and mad >= MAD_FLOOR:
        return mad
    if np.isfinite(fallback) and fallback > MAD_FLOOR:
        return float(fallback)
    return MAD_FLOOR


def weighted_center(positions: FloatArray, weights: FloatArray) -> tuple[float, float]:
    """Return ``(weighted mean, total weight)``; arithmetic mean when weightless."""
    total = float(np.sum(weights))
    if total > 0.0:
        return float(np.sum(positions * weights) / total), total
    return float(np.mean(positions)), total


def compute_robust_statistics(positions: FloatArray, charges: FloatArray) -> DataStatistics:
    """Compute :class:`DataStatistics` for a series.

    Args:
        positions: Sample positions
        charges: Sample charges, same length as ``positions``

    Returns:
        Statistics record, invalid on empty input or length mismatch
    """
    positions = np.asarray(positions, dtype=float)
    charges = np.asarray(charges, dtype=float)
    if positions.shape != charges.shape or charges.size == 0:
        return DataStatistics()

    n = charges.size
    ordered = np.sort(charges)
    med = sorted_median(ordered)
    std_dev = float(np.std(charges))
    q25 = float(ordered[n // 4])
    q75 = float(ordered[(3 * n) // 4])

    weights = np.maximum(0.0, charges - q25)
    center, total_weight = weighted_center(positions, weights)

    return DataStatistics(
        mean=float(np.mean(charges)),
        median=med,
        std_dev=std_dev,
        mad=mad_sigma(charges, med, std_dev),
        q25=q25,
        q75=q75,
        min=float(ordered[0]),
        max=float(ordered[-1]),
        weighted_mean=center,
        total_weight=total_weight,
        robust_center=center,
        valid=True,
    )


__all__ = [
    "DataStatistics",
    "compute_robust_statistics",
    "mad_sigma",
    "median",
    "sorted_median",
    "weighted_center",
]
