"""MAD-based outlier rejection on sample charges.

Two flavours share the same statistics:

- :func:`filter_outliers` conditions a 1D series before fitting. It keeps
  charges inside ``median +- k * mad``, retries once with a lenient
  threshold when fewer than half survive, and never returns fewer than
  five samples.
- :func:`remove_outliers_3d` works on unpartitioned ``(x, y, charge)``
  samples and always returns a complete, consistent triple.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from chargefit.core import constants
from chargefit.core.algorithms.robust import compute_robust_statistics
from chargefit.core.results.fit_results import OutlierRemovalResult

if TYPE_CHECKING:
    from chargefit.core.domain.samples import AxisSeries
    from chargefit.core.shared.typing import ArrayLike1D, BoolArray, FloatArray


@dataclass(frozen=True, slots=True)
class OutlierFilterResult:
    """Filtered series and what happened to it.

    Attributes:
        series: Filtered samples (the input unchanged when filtering was abandoned)
        removed: Number of samples dropped
        threshold: Threshold (MAD units) of the pass that produced ``series``
        applied: True when ``series`` differs from the input
        success: False only when the input violated the contract
    """

    series: AxisSeries
    removed: int
    threshold: float
    applied: bool
    success: bool


def _within_band(charges: FloatArray, median: float, mad: float, k: float) -> BoolArray:
    return (charges >= median - k * mad) & (charges <= median + k * mad)


def filter_outliers(
    series: AxisSeries,
    threshold: float = constants.OUTLIER_CONSERVATIVE_THRESHOLD,
    retry_threshold: float = constants.OUTLIER_RETRY_THRESHOLD,
) -> OutlierFilterResult:
    """Filter a series by the MAD rule on its charges.

    Args:
        series: Samples to condition
        threshold: Half-width of the accepted band in MAD units
        retry_threshold: Threshold of the single lenient retry

    Returns:
        Filter outcome; the series is returned unchanged (``success=False``)
        when it has fewer than five samples or mismatched arrays
    """
    if not series.is_fittable:
        return OutlierFilterResult(series, 0, threshold, applied=False, success=False)

    stats = compute_robust_statistics(series.positions, series.charges)
    if not stats.valid:
        return OutlierFilterResult(series, 0, threshold, applied=False, success=False)

    n = len(series)
    used = threshold
    keep = _within_band(series.charges, stats.median, stats.mad, threshold)
    if int(keep.sum()) < n // 2:
        used = retry_threshold
        keep = _within_band(series.charges, stats.median, stats.mad, retry_threshold)

    kept = int(keep.sum())
    if kept < constants.MIN_FIT_POINTS:
        return OutlierFilterResult(series, 0, used, applied=False, success=True)

    return OutlierFilterResult(
        series.select(keep),
        n - kept,
        used,
        applied=kept < n,
        success=True,
    )


def remove_outliers_3d(
    x: ArrayLike1D,
    y: ArrayLike1D,
    charge: ArrayLike1D,
    *,
    enable: bool = True,
    sigma_threshold: float = constants.OUTLIER_CONSERVATIVE_THRESHOLD,
) -> OutlierRemovalResult:
    """Drop samples whose charge deviates from the median by more than ``k * mad``.

    Args:
        x: Sample x coordinates
        y: Sample y coordinates
        charge: Sample charges
        enable: When False the input is returned unchanged
        sigma_threshold: Rejection threshold in MAD units

    Returns:
        Removal outcome; empty arrays with ``success=False`` on length mismatch
    """
    x_arr = np.array(x, dtype=float).ravel()
    y_arr = np.array(y, dtype=float).ravel()
    charge_arr = np.array(charge, dtype=float).ravel()

    if not enable:
        return OutlierRemovalResult(x_arr, y_arr, charge_arr, success=True)

    if not x_arr.size == y_arr.size == charge_arr.size:
        return OutlierRemovalResult(success=False)

    if charge_arr.size < constants.MIN_FIT_POINTS:
        return OutlierRemovalResult(x_arr, y_arr, charge_arr, success=True)

    stats = compute_robust_statistics(x_arr, charge_arr)
    if not stats.valid:
        return OutlierRemovalResult(x_arr, y_arr, charge_arr, success=False)

    outlier = np.abs(charge_arr - stats.median) > sigma_threshold * stats.mad
    n_outliers = int(outlier.sum())
    if charge_arr.size - n_outliers < constants.MIN_FIT_POINTS:
        return OutlierRemovalResult(x_arr, y_arr, charge_arr, success=True)

    keep = ~outlier
    return OutlierRemovalResult(
        x_arr[keep],
        y_arr[keep],
        charge_arr[keep],
        outliers_removed=n_outliers,
        filtering_applied=True,
        success=True,
    )


__all__ = ["OutlierFilterResult", "filter_outliers", "remove_outliers_3d"]
