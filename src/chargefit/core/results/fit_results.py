"""Result records returned by the public fitting operations.

Every record is a plain value created fresh per call. A record always
exists, even for failed fits; failure is signalled by its ``success`` /
``fit_successful`` flag and the numeric fields keep their defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import TYPE_CHECKING, Any

import numpy as np

if TYPE_CHECKING:
    from chargefit.core.shared.typing import FloatArray


def _empty() -> FloatArray:
    return np.empty(0, dtype=float)


class CovarianceSource(str, Enum):
    """Where the reported parameter errors came from."""

    NONE = "none"
    SVD = "svd"
    QR = "qr"
    ANALYTIC = "analytic"


@dataclass(frozen=True, slots=True)
class AxisFitResult:
    """Fitted power-law Lorentzian along one axis or diagonal.

    Attributes:
        amplitude, center, gamma, beta, baseline: Fitted parameters
            (``gamma`` reported as its absolute value)
        *_err: One-sigma standard errors of the parameters
        chi2_reduced: Reduced chi-square of the accepted solution
        dof: Degrees of freedom ``max(1, n - 5)``
        pp: Pseudo p-value ``1 - min(1, chi2_reduced / 10)``
        success: True when a (dataset, configuration) pair was accepted
        n_points: Size of the dataset that was fitted
        dataset_index: Position of that dataset in the candidate list
        config_name: Solver configuration that produced the fit
        estimation_method: Strategy that produced the initial guess (1-3)
        covariance_source: Origin of the reported errors
    """

    amplitude: float = 0.0
    center: float = 0.0
    gamma: float = 0.0
    beta: float = 0.0
    baseline: float = 0.0
    amplitude_err: float = 0.0
    center_err: float = 0.0
    gamma_err: float = 0.0
    beta_err: float = 0.0
    baseline_err: float = 0.0
    chi2_reduced: float = 0.0
    dof: int = 0
    pp: float = 0.0
    success: bool = False
    n_points: int = 0
    dataset_index: int = -1
    config_name: str = ""
    estimation_method: int = 0
    covariance_source: CovarianceSource = CovarianceSource.NONE

    @classmethod
    def failed(cls) -> AxisFitResult:
        """Default record for an axis whose fit could not be produced."""
        return cls()

    def to_dict(self) -> dict[str, Any]:
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["covariance_source"] = self.covariance_source.value
        return data


@dataclass(frozen=True, slots=True)
class Fit2DResult:
    """Central-row (``x``) and central-column (``y``) fits of a cluster."""

    x: AxisFitResult = field(default_factory=AxisFitResult)
    y: AxisFitResult = field(default_factory=AxisFitResult)
    row_positions: FloatArray = field(default_factory=_empty)
    row_charges: FloatArray = field(default_factory=_empty)
    column_positions: FloatArray = field(default_factory=_empty)
    column_charges: FloatArray = field(default_factory=_empty)
    x_charge_uncertainty: float = 0.0
    y_charge_uncertainty: float = 0.0
    fit_successful: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "x": self.x.to_dict(),
            "y": self.y.to_dict(),
            "row_positions": self.row_positions.tolist(),
            "row_charges": self.row_charges.tolist(),
            "column_positions": self.column_positions.tolist(),
            "column_charges": self.column_charges.tolist(),
            "x_charge_uncertainty": self.x_charge_uncertainty,
            "y_charge_uncertainty": self.y_charge_uncertainty,
            "fit_successful": self.fit_successful,
        }


@dataclass(frozen=True, slots=True)
class DiagonalFitResult:
    """Fits along the main and secondary diagonals of a cluster."""

    main_x: AxisFitResult = field(default_factory=AxisFitResult)
    main_y: AxisFitResult = field(default_factory=AxisFitResult)
    secondary_x: AxisFitResult = field(default_factory=AxisFitResult)
    secondary_y: AxisFitResult = field(default_factory=AxisFitResult)
    fit_successful: bool = False

    def axes(self) -> dict[str, AxisFitResult]:
        return {
            "main_x": self.main_x,
            "main_y": self.main_y,
            "secondary_x": self.secondary_x,
            "secondary_y": self.secondary_y,
        }

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {name: fit.to_dict() for name, fit in self.axes().items()}
        data["fit_successful"] = self.fit_successful
        return data


@dataclass(frozen=True, slots=True)
class OutlierRemovalResult:
    """Outcome of the standalone 3-coordinate outlier remover.

    The three arrays are always a complete, consistent triple: either the
    input unchanged, the filtered samples, or empty on invalid input.
    """

    x: FloatArray = field(default_factory=_empty)
    y: FloatArray = field(default_factory=_empty)
    charge: FloatArray = field(default_factory=_empty)
    outliers_removed: int = 0
    filtering_applied: bool = False
    success: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "x": self.x.tolist(),
            "y": self.y.tolist(),
            "charge": self.charge.tolist(),
            "outliers_removed": self.outliers_removed,
            "filtering_applied": self.filtering_applied,
            "success": self.success,
        }


__all__ = [
    "AxisFitResult",
    "CovarianceSource",
    "DiagonalFitResult",
    "Fit2DResult",
    "OutlierRemovalResult",
]
