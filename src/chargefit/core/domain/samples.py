"""One-dimensional charge-vs-position sample series."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from chargefit.core.constants import MIN_FIT_POINTS

if TYPE_CHECKING:
    from collections.abc import Iterable

    from chargefit.core.shared.typing import ArrayLike1D, BoolArray, FloatArray


@dataclass(frozen=True, slots=True)
class AxisSeries:
    """Ordered ``(position, charge)`` samples along one axis or diagonal."""

    positions: FloatArray
    charges: FloatArray

    @classmethod
    def from_arrays(cls, positions: ArrayLike1D, charges: ArrayLike1D) -> AxisSeries:
        """Build a series from any 1D sequences, copying into float arrays."""
        return cls(
            np.array(positions, dtype=float).ravel(),
            np.array(charges, dtype=float).ravel(),
        )

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[float, float]]) -> AxisSeries:
        """Build a series from ``(position, charge)`` pairs."""
        pair_list = list(pairs)
        if not pair_list:
            return cls(np.empty(0), np.empty(0))
        data = np.asarray(pair_list, dtype=float)
        return cls(data[:, 0].copy(), data[:, 1].copy())

    def __len__(self) -> int:
        return int(self.positions.size)

    @property
    def is_consistent(self) -> bool:
        """True when both arrays have the same length."""
        return self.positions.shape == self.charges.shape

    @property
    def is_fittable(self) -> bool:
        """True when the series satisfies the input contract of a fit."""
        return self.is_consistent and len(self) >= MIN_FIT_POINTS

    @property
    def max_charge(self) -> float:
        return float(np.max(self.charges)) if self.charges.size else 0.0

    def select(self, mask: BoolArray) -> AxisSeries:
        """Return the samples where ``mask`` is true, preserving order."""
        return AxisSeries(self.positions[mask], self.charges[mask])

    def sorted_by_position(self) -> AxisSeries:
        """Return the series ordered by position, then by charge."""
        order = np.lexsort((self.charges, self.positions))
        return AxisSeries(self.positions[order], self.charges[order])


__all__ = ["AxisSeries"]
