"""Partition 2D samples into rows/columns and project them onto diagonals."""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from chargefit.core import constants
from chargefit.core.domain.samples import AxisSeries

if TYPE_CHECKING:
    from chargefit.core.shared.typing import FloatArray


def group_by_coordinate(
    keys: FloatArray,
    positions: FloatArray,
    charges: FloatArray,
    tolerance: float,
) -> dict[float, AxisSeries]:
    """Group samples whose ``keys`` agree within ``tolerance``.

    Samples are visited in input order. Each joins the first existing group,
    in ascending key order, whose key lies strictly within ``tolerance``;
    otherwise it starts a new group keyed by its own coordinate. Group
    members keep their input order.
    """
    ordered_keys: list[float] = []
    members: dict[float, list[tuple[float, float]]] = {}
    for key, position, charge in zip(keys, positions, charges, strict=True):
        key = float(key)
        for existing in ordered_keys:
            if abs(existing - key) < tolerance:
                members[existing].append((float(position), float(charge)))
                break
        else:
            bisect.insort(ordered_keys, key)
            members[key] = [(float(position), float(charge))]
    return {key: AxisSeries.from_pairs(members[key]) for key in ordered_keys}


def select_nearest_group(
    groups: dict[float, AxisSeries], target: float
) -> tuple[float, AxisSeries] | None:
    """Group nearest ``target`` among those with enough samples; ties go to the lower key."""
    best: tuple[float, AxisSeries] | None = None
    best_distance = np.inf
    for key in sorted(groups):
        series = groups[key]
        distance = abs(key - target)
        if len(series) >= constants.MIN_FIT_POINTS and distance < best_distance:
            best_distance = distance
            best = (key, series)
    return best


@dataclass(frozen=True, slots=True)
class CentralLines:
    """Central row (positions along x) and central column (positions along y)."""

    row: AxisSeries | None
    column: AxisSeries | None
    row_key: float | None = None
    column_key: float | None = None


def central_lines(
    x: FloatArray,
    y: FloatArray,
    charge: FloatArray,
    center_x_estimate: float,
    center_y_estimate: float,
    pixel_spacing: float,
) -> CentralLines:
    """Select the row and column nearest the center estimates, sorted by position."""
    positive = charge > 0
    x, y, charge = x[positive], y[positive], charge[positive]
    tolerance = constants.GROUPING_TOLERANCE * pixel_spacing

    rows = group_by_coordinate(y, x, charge, tolerance)
    columns = group_by_coordinate(x, y, charge, tolerance)
    row = select_nearest_group(rows, center_y_estimate)
    column = select_nearest_group(columns, center_x_estimate)

    return CentralLines(
        row=row[1].sorted_by_position() if row else None,
        column=column[1].sorted_by_position() if column else None,
        row_key=row[0] if row else None,
        column_key=column[0] if column else None,
    )


@dataclass(frozen=True, slots=True)
class DiagonalProjection:
    """Samples projected onto the main and secondary diagonals."""

    main: AxisSeries
    secondary: AxisSeries
    pitch: float


def project_diagonals(
    x: FloatArray,
    y: FloatArray,
    charge: FloatArray,
    center_x_estimate: float,
    center_y_estimate: float,
    pixel_spacing: float,
) -> DiagonalProjection:
    """Project samples near either diagonal through the center estimate.

    The main diagonal keeps ``|dx - dy| < spacing / 2`` at coordinate
    ``(dx + dy) / 2``; the secondary diagonal keeps ``|dx + dy| < spacing / 2``
    at coordinate ``(dx - dy) / 2``. A sample may land on both.
    """
    positive = charge > 0
    dx = x[positive] - center_x_estimate
    dy = y[positive] - center_y_estimate
    charge = charge[positive]
    tolerance = constants.DIAGONAL_TOLERANCE * pixel_spacing

    on_main = np.abs(dx - dy) < tolerance
    on_secondary = np.abs(dx + dy) < tolerance
    main = AxisSeries(0.5 * (dx + dy)[on_main], charge[on_main])
    secondary = AxisSeries(0.5 * (dx - dy)[on_secondary], charge[on_secondary])

    return DiagonalProjection(
        main=main.sorted_by_position(),
        secondary=secondary.sorted_by_position(),
        pitch=pixel_spacing * constants.DIAGONAL_PITCH_FACTOR,
    )


__all__ = [
    "CentralLines",
    "DiagonalProjection",
    "central_lines",
    "group_by_coordinate",
    "project_diagonals",
    "select_nearest_group",
]
