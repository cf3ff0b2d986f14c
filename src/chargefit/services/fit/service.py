"""High-level fitting service facade.

This module provides the public fitting operations. The CLI and other
adapters should import only from here (or from the package root).

Every operation that runs the solver holds the process-wide solver lock
for its whole duration, so concurrent callers are serialized. All
operations fail closed: invalid input yields a default result whose
success flag is false, never an exception.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from chargefit.core import constants
from chargefit.core.domain.config import ChargeFitConfig, get_config
from chargefit.core.domain.samples import AxisSeries
from chargefit.core.fitting.orchestrator import FitOrchestrator
from chargefit.core.fitting.outliers import remove_outliers_3d
from chargefit.core.parallel import next_call_id, solver_session
from chargefit.core.results.fit_results import (
    AxisFitResult,
    DiagonalFitResult,
    Fit2DResult,
    OutlierRemovalResult,
)
from chargefit.core.shared.events import EventDispatcher, EventType, ReporterEventHandler
from chargefit.core.shared.reporter import NullReporter, Reporter
from chargefit.services.fit.grouping import central_lines, project_diagonals
from chargefit.ui.reporter import ConsoleReporter

if TYPE_CHECKING:
    from chargefit.core.shared.typing import ArrayLike1D, FloatArray

logger = logging.getLogger(__name__)


def _as_triple(
    x: ArrayLike1D, y: ArrayLike1D, charge: ArrayLike1D
) -> tuple[FloatArray, FloatArray, FloatArray] | None:
    """Float copies of the sample arrays, or None when they break the input contract."""
    x_arr = np.array(x, dtype=float).ravel()
    y_arr = np.array(y, dtype=float).ravel()
    charge_arr = np.array(charge, dtype=float).ravel()
    if not x_arr.size == y_arr.size == charge_arr.size:
        return None
    if charge_arr.size < constants.MIN_FIT_POINTS:
        return None
    return x_arr, y_arr, charge_arr


class ChargeFitService:
    """Service for power-law Lorentzian cluster fits.

    Example:
        service = ChargeFitService(reporter=ConsoleReporter())
        result = service.fit_2d(x, y, charge, 0.0, 0.0, 0.5, verbose=True)
        print(result.x.center, result.y.center)
    """

    def __init__(
        self,
        config: ChargeFitConfig | None = None,
        reporter: Reporter | None = None,
    ) -> None:
        """Initialize the fit service.

        Args:
            config: Configuration (default: the active process-wide configuration)
            reporter: Reporter for verbose output (default: Rich console)
        """
        self._config = config
        self._reporter = reporter

    @property
    def config(self) -> ChargeFitConfig:
        return self._config if self._config is not None else get_config()

    def _reporter_for(self, verbose: bool) -> Reporter:
        if not verbose:
            return NullReporter()
        return self._reporter or ConsoleReporter()

    def _dispatcher(self, verbose: bool) -> EventDispatcher:
        dispatcher = EventDispatcher()
        if verbose:
            dispatcher.subscribe(None, ReporterEventHandler(self._reporter_for(verbose)))
        return dispatcher

    def _orchestrator(self, dispatcher: EventDispatcher) -> FitOrchestrator:
        return FitOrchestrator(config=self.config, dispatcher=dispatcher)

    def fit_axis(
        self,
        positions: ArrayLike1D,
        charges: ArrayLike1D,
        center_estimate: float,
        pixel_spacing: float,
        *,
        verbose: bool = False,
        enable_outlier_filtering: bool = True,
    ) -> AxisFitResult:
        """Fit a single 1D charge profile."""
        call_id = next_call_id()
        dispatcher = self._dispatcher(verbose)
        series = AxisSeries.from_arrays(positions, charges)
        if not series.is_fittable:
            dispatcher.emit(
                EventType.INPUT_REJECTED,
                f"Call {call_id}: need at least {constants.MIN_FIT_POINTS} "
                "matching positions and charges",
            )
            return AxisFitResult.failed()

        with solver_session():
            return self._orchestrator(dispatcher).fit(
                series.sorted_by_position(),
                center_estimate,
                pixel_spacing,
                enable_outlier_filtering=enable_outlier_filtering,
                label="profile",
            )

    def fit_2d(
        self,
        x: ArrayLike1D,
        y: ArrayLike1D,
        charge: ArrayLike1D,
        center_x_estimate: float,
        center_y_estimate: float,
        pixel_spacing: float,
        *,
        verbose: bool = False,
        enable_outlier_filtering: bool = True,
    ) -> Fit2DResult:
        """Fit the central row (X) and central column (Y) of a cluster.

        Args:
            x: Sample x coordinates
            y: Sample y coordinates
            charge: Sample charges; non-positive charges are ignored
            center_x_estimate: External estimate of the cluster center in x
            center_y_estimate: External estimate of the cluster center in y
            pixel_spacing: Pixel pitch
            verbose: Report progress through the reporter
            enable_outlier_filtering: Try MAD-filtered datasets first

        Returns:
            Fit2DResult, ``fit_successful`` only when both axes succeeded
        """
        call_id = next_call_id()
        dispatcher = self._dispatcher(verbose)
        samples = _as_triple(x, y, charge)
        if samples is None:
            dispatcher.emit(
                EventType.INPUT_REJECTED,
                f"Call {call_id}: coordinate and charge arrays must match "
                f"and hold at least {constants.MIN_FIT_POINTS} samples",
            )
            return Fit2DResult()

        uncertainty = self.config.uncertainty
        with solver_session():
            orchestrator = self._orchestrator(dispatcher)
            lines = central_lines(*samples, center_x_estimate, center_y_estimate, pixel_spacing)
            x_fit = self._fit_line(
                orchestrator,
                lines.row,
                center_x_estimate,
                pixel_spacing,
                enable_outlier_filtering,
                "X (central row)",
            )
            y_fit = self._fit_line(
                orchestrator,
                lines.column,
                center_y_estimate,
                pixel_spacing,
                enable_outlier_filtering,
                "Y (central column)",
            )

        row = lines.row if lines.row is not None else AxisSeries.from_pairs([])
        column = lines.column if lines.column is not None else AxisSeries.from_pairs([])
        x_uncertainty = (
            uncertainty.fraction * row.max_charge if uncertainty.enabled and x_fit.success else 0.0
        )
        y_uncertainty = (
            uncertainty.fraction * column.max_charge
            if uncertainty.enabled and y_fit.success
            else 0.0
        )
        result = Fit2DResult(
            x=x_fit,
            y=y_fit,
            row_positions=row.positions,
            row_charges=row.charges,
            column_positions=column.positions,
            column_charges=column.charges,
            x_charge_uncertainty=x_uncertainty,
            y_charge_uncertainty=y_uncertainty,
            fit_successful=x_fit.success and y_fit.success,
        )
        logger.debug("Call %d: 2D fit successful=%s", call_id, result.fit_successful)
        return result

    def fit_diagonal(
        self,
        x: ArrayLike1D,
        y: ArrayLike1D,
        charge: ArrayLike1D,
        center_x_estimate: float,
        center_y_estimate: float,
        pixel_spacing: float,
        *,
        verbose: bool = False,
        enable_outlier_filtering: bool = True,
    ) -> DiagonalFitResult:
        """Fit the main and secondary diagonals of a cluster.

        Samples are optionally cleaned by the standalone outlier remover,
        projected onto both diagonals through the center estimate and fitted
        with center estimate 0 and pitch ``spacing * sqrt(2)``. The X and Y
        fits of each diagonal use the same projected samples.
        """
        call_id = next_call_id()
        dispatcher = self._dispatcher(verbose)
        samples = _as_triple(x, y, charge)
        if samples is None:
            dispatcher.emit(
                EventType.INPUT_REJECTED,
                f"Call {call_id}: coordinate and charge arrays must match "
                f"and hold at least {constants.MIN_FIT_POINTS} samples",
            )
            return DiagonalFitResult()

        with solver_session():
            if enable_outlier_filtering:
                removal = remove_outliers_3d(
                    *samples,
                    enable=True,
                    sigma_threshold=self.config.outliers.conservative_threshold,
                )
                if removal.success and removal.filtering_applied:
                    dispatcher.emit(
                        EventType.OUTLIERS_FILTERED,
                        f"Removed {removal.outliers_removed} outliers before diagonal "
                        f"projection, {removal.charge.size} samples remaining",
                        removed=removal.outliers_removed,
                    )
                    samples = (removal.x, removal.y, removal.charge)

            projection = project_diagonals(
                *samples, center_x_estimate, center_y_estimate, pixel_spacing
            )
            orchestrator = self._orchestrator(dispatcher)
            fits = {
                label: self._fit_line(
                    orchestrator,
                    series,
                    0.0,
                    projection.pitch,
                    enable_outlier_filtering,
                    label,
                )
                for label, series in (
                    ("main diagonal X", projection.main),
                    ("main diagonal Y", projection.main),
                    ("secondary diagonal X", projection.secondary),
                    ("secondary diagonal Y", projection.secondary),
                )
            }

        main_x, main_y, secondary_x, secondary_y = fits.values()
        return DiagonalFitResult(
            main_x=main_x,
            main_y=main_y,
            secondary_x=secondary_x,
            secondary_y=secondary_y,
            fit_successful=all(fit.success for fit in fits.values()),
        )

    def remove_outliers(
        self,
        x: ArrayLike1D,
        y: ArrayLike1D,
        charge: ArrayLike1D,
        *,
        enable: bool = True,
        sigma_threshold: float = constants.OUTLIER_CONSERVATIVE_THRESHOLD,
        verbose: bool = False,
    ) -> OutlierRemovalResult:
        """Standalone MAD outlier removal on unpartitioned samples."""
        result = remove_outliers_3d(
            x, y, charge, enable=enable, sigma_threshold=sigma_threshold
        )
        reporter = self._reporter_for(verbose)
        if not result.success:
            reporter.error("Outlier removal: coordinate and charge arrays do not match")
        elif result.filtering_applied:
            reporter.info(
                f"Outlier removal: removed {result.outliers_removed} outliers, "
                f"{result.charge.size} samples remaining"
            )
        elif enable and result.charge.size >= constants.MIN_FIT_POINTS:
            reporter.warning("Outlier removal: too many outliers detected, keeping original data")
        return result

    def _fit_line(
        self,
        orchestrator: FitOrchestrator,
        series: AxisSeries | None,
        center_estimate: float,
        pixel_spacing: float,
        enable_outlier_filtering: bool,
        label: str,
    ) -> AxisFitResult:
        if series is None or len(series) < constants.MIN_FIT_POINTS:
            orchestrator.events.emit(
                EventType.INPUT_REJECTED,
                f"{label}: fewer than {constants.MIN_FIT_POINTS} samples, axis skipped",
                label=label,
            )
            return AxisFitResult.failed()
        fit = orchestrator.fit(
            series,
            center_estimate,
            pixel_spacing,
            enable_outlier_filtering=enable_outlier_filtering,
            label=label,
        )
        if fit.success:
            orchestrator.events.emit(
                EventType.AXIS_COMPLETED,
                f"{label}: center {fit.center:.6g} +- {fit.center_err:.2g}",
                label=label,
            )
        return fit


def fit_power_lorentzian(
    positions: ArrayLike1D,
    charges: ArrayLike1D,
    center_estimate: float,
    pixel_spacing: float,
    verbose: bool = False,
    enable_outlier_filtering: bool = True,
    *,
    config: ChargeFitConfig | None = None,
    reporter: Reporter | None = None,
) -> AxisFitResult:
    """Fit a power-law Lorentzian to one charge profile."""
    return ChargeFitService(config, reporter).fit_axis(
        positions,
        charges,
        center_estimate,
        pixel_spacing,
        verbose=verbose,
        enable_outlier_filtering=enable_outlier_filtering,
    )


def fit_2d_power_lorentzian(
    x: ArrayLike1D,
    y: ArrayLike1D,
    charge: ArrayLike1D,
    center_x_estimate: float,
    center_y_estimate: float,
    pixel_spacing: float,
    verbose: bool = False,
    enable_outlier_filtering: bool = True,
    *,
    config: ChargeFitConfig | None = None,
    reporter: Reporter | None = None,
) -> Fit2DResult:
    """Fit the central row and column of a charge cluster."""
    return ChargeFitService(config, reporter).fit_2d(
        x,
        y,
        charge,
        center_x_estimate,
        center_y_estimate,
        pixel_spacing,
        verbose=verbose,
        enable_outlier_filtering=enable_outlier_filtering,
    )


def fit_diagonal_power_lorentzian(
    x: ArrayLike1D,
    y: ArrayLike1D,
    charge: ArrayLike1D,
    center_x_estimate: float,
    center_y_estimate: float,
    pixel_spacing: float,
    verbose: bool = False,
    enable_outlier_filtering: bool = True,
    *,
    config: ChargeFitConfig | None = None,
    reporter: Reporter | None = None,
) -> DiagonalFitResult:
    """Fit both diagonals of a charge cluster."""
    return ChargeFitService(config, reporter).fit_diagonal(
        x,
        y,
        charge,
        center_x_estimate,
        center_y_estimate,
        pixel_spacing,
        verbose=verbose,
        enable_outlier_filtering=enable_outlier_filtering,
    )


def remove_power_lorentzian_outliers(
    x: ArrayLike1D,
    y: ArrayLike1D,
    charge: ArrayLike1D,
    enable: bool = True,
    sigma_threshold: float = constants.OUTLIER_CONSERVATIVE_THRESHOLD,
    verbose: bool = False,
) -> OutlierRemovalResult:
    """Remove charge outliers from unpartitioned ``(x, y, charge)`` samples."""
    return ChargeFitService().remove_outliers(
        x, y, charge, enable=enable, sigma_threshold=sigma_threshold, verbose=verbose
    )


__all__ = [
    "ChargeFitService",
    "fit_2d_power_lorentzian",
    "fit_diagonal_power_lorentzian",
    "fit_power_lorentzian",
    "remove_power_lorentzian_outliers",
]
