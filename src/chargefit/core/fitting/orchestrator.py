"""Multi-dataset, multi-configuration search for a single axis fit.

For one 1D series the orchestrator iterates candidate datasets (outlier
filtered at two thresholds, then raw) in the outer loop and the solver
configuration table in the inner loop. Every (dataset, configuration) pair
runs a two-stage bounded solve: a first pass with the exponent pinned near
a plain Lorentzian, then a full pass around the first optimum. The first
pair whose solution passes validation ends the search.

The orchestrator is not thread-safe on its own; public entry points wrap
it in :func:`chargefit.core.parallel.solver_session`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from chargefit.core import constants
from chargefit.core.algorithms.robust import compute_robust_statistics
from chargefit.core.domain.config import ChargeFitConfig, get_config
from chargefit.core.fitting.estimation import estimate_parameters
from chargefit.core.fitting.outliers import filter_outliers
from chargefit.core.fitting.parameters import ParameterBounds, ParameterVector
from chargefit.core.fitting.strategies import SOLVER_CONFIGS, LeastSquaresBackend
from chargefit.core.fitting.uncertainty import estimate_uncertainties
from chargefit.core.lineshapes import get_shape
from chargefit.core.results.fit_results import AxisFitResult
from chargefit.core.results.statistics import (
    compute_degrees_of_freedom,
    compute_pseudo_p_value,
    reduced_chi_squared_from_cost,
)
from chargefit.core.shared.events import EventDispatcher, EventType
from chargefit.core.shared.exceptions import OptimizationError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from chargefit.core.domain.samples import AxisSeries
    from chargefit.core.fitting.estimation import ParameterEstimates
    from chargefit.core.fitting.strategies import SolveOutcome, SolverConfig
    from chargefit.core.shared.typing import FloatArray


def _is_physical(params: ParameterVector) -> bool:
    return params.amplitude > 0 and params.gamma > 0 and params.is_finite


def is_acceptable(outcome: SolveOutcome) -> bool:
    """Converged with positive amplitude and width and a sane exponent."""
    params = ParameterVector.from_array(outcome.x)
    return (
        outcome.converged
        and _is_physical(params)
        and constants.ACCEPT_BETA_MIN < params.beta < constants.ACCEPT_BETA_MAX
    )


class FitOrchestrator:
    """Search datasets and solver configurations for an acceptable fit."""

    def __init__(
        self,
        *,
        config: ChargeFitConfig | None = None,
        dispatcher: EventDispatcher | None = None,
        backend: LeastSquaresBackend | None = None,
        solver_configs: Sequence[SolverConfig] = SOLVER_CONFIGS,
        lineshape: str = "power_lorentzian",
    ) -> None:
        self._config = config if config is not None else get_config()
        self._events = dispatcher if dispatcher is not None else EventDispatcher()
        self._backend = backend or LeastSquaresBackend(get_shape(lineshape)())
        self._solver_configs = tuple(solver_configs)

    @property
    def config(self) -> ChargeFitConfig:
        return self._config

    @property
    def events(self) -> EventDispatcher:
        return self._events

    def candidate_datasets(
        self, series: AxisSeries, *, enable_outlier_filtering: bool
    ) -> list[AxisSeries]:
        """Datasets to try, in order, each with at least five samples."""
        if not enable_outlier_filtering:
            return [series] if len(series) >= constants.MIN_FIT_POINTS else []

        outliers = self._config.outliers
        candidates: list[AxisSeries] = []
        for threshold in (outliers.conservative_threshold, outliers.lenient_threshold):
            filtered = filter_outliers(series, threshold, outliers.retry_threshold)
            if filtered.applied:
                self._events.emit(
                    EventType.OUTLIERS_FILTERED,
                    f"Removed {filtered.removed} outliers at {filtered.threshold:g} MAD, "
                    f"{len(filtered.series)} points remaining",
                    removed=filtered.removed,
                    threshold=filtered.threshold,
                )
            candidates.append(filtered.series)
        candidates.append(series)
        return [dataset for dataset in candidates if len(dataset) >= constants.MIN_FIT_POINTS]

    def fit(
        self,
        series: AxisSeries,
        center_estimate: float,
        pixel_spacing: float,
        *,
        enable_outlier_filtering: bool = True,
        label: str = "axis",
    ) -> AxisFitResult:
        """Fit the power-law Lorentzian to one series.

        Args:
            series: Samples sorted by position
            center_estimate: External estimate of the peak position
            pixel_spacing: Physical pitch, the only length scale
            enable_outlier_filtering: Try MAD-filtered datasets first
            label: Name used in emitted events

        Returns:
            The first accepted fit, or a failed record on exhaustion
        """
        if not series.is_fittable:
            self._events.emit(
                EventType.INPUT_REJECTED,
                f"{label}: need at least {constants.MIN_FIT_POINTS} matching samples, "
                f"got {len(series)}",
                label=label,
            )
            return AxisFitResult.failed()

        self._events.emit(
            EventType.FIT_STARTED,
            f"Fitting {label} ({len(series)} points)",
            label=label,
            n_points=len(series),
        )

        datasets = self.candidate_datasets(
            series, enable_outlier_filtering=enable_outlier_filtering
        )
        for index, dataset in enumerate(datasets):
            result = self._fit_dataset(
                index, dataset, center_estimate, pixel_spacing, label, raw_size=len(series)
            )
            if result is not None:
                return result

        self._events.emit(
            EventType.FIT_EXHAUSTED,
            f"{label}: all datasets and solver configurations failed",
            label=label,
        )
        return AxisFitResult.failed()

    def _fit_dataset(
        self,
        index: int,
        dataset: AxisSeries,
        center_estimate: float,
        pixel_spacing: float,
        label: str,
        *,
        raw_size: int,
    ) -> AxisFitResult | None:
        self._events.emit(
            EventType.DATASET_STARTED,
            f"{label}: dataset {index} with {len(dataset)} points",
            label=label,
            dataset_index=index,
        )
        estimates = estimate_parameters(dataset, center_estimate, pixel_spacing)
        if not estimates.valid:
            self._events.emit(
                EventType.ESTIMATE_FAILED,
                f"{label}: no initial estimate for dataset {index}",
                label=label,
                dataset_index=index,
            )
            return None

        self._events.emit(
            EventType.ESTIMATE_READY,
            f"{label}: method {int(estimates.method_used)} estimate "
            f"A={estimates.amplitude:.4g} m={estimates.center:.4g} "
            f"gamma={estimates.gamma:.4g} B={estimates.baseline:.4g}",
            label=label,
            method=int(estimates.method_used),
        )

        n = len(dataset)
        sigma = np.full(n, self._config.uncertainty.sample_uncertainty(dataset.max_charge))
        start = estimates.as_vector()
        base_bounds = ParameterBounds.around(
            start,
            max_charge=dataset.max_charge,
            pixel_spacing=pixel_spacing,
            min_amplitude=self._config.uncertainty.min_value,
        )

        for solver_config in self._solver_configs:
            outcome = self._solve_two_stage(
                solver_config, start, base_bounds, dataset, sigma, pixel_spacing, label
            )
            if outcome is None or not is_acceptable(outcome):
                reason = "backend error" if outcome is None else outcome.message
                self._events.emit(
                    EventType.CONFIG_FAILED,
                    f"{label}: {solver_config.name} rejected ({reason})",
                    label=label,
                    config=solver_config.name,
                )
                continue

            result = self._build_result(
                outcome, dataset, index, solver_config, estimates, pixel_spacing, raw_size
            )
            self._events.emit(
                EventType.FIT_ACCEPTED,
                f"{label}: {solver_config.name} accepted on dataset {index}, "
                f"m={result.center:.6g} +- {result.center_err:.2g}, "
                f"chi2_red={result.chi2_reduced:.3g}",
                label=label,
                config=solver_config.name,
                dataset_index=index,
            )
            return result
        return None

    def _solve(
        self,
        solver_config: SolverConfig,
        start: ParameterVector,
        bounds: ParameterBounds,
        dataset: AxisSeries,
        sigma: FloatArray,
        amplitude_estimate: float,
    ) -> SolveOutcome | None:
        try:
            return self._backend.solve(
                solver_config,
                start,
                bounds,
                dataset.positions,
                dataset.charges,
                sigma,
                amplitude_estimate=amplitude_estimate,
            )
        except OptimizationError:
            return None

    def _solve_two_stage(
        self,
        solver_config: SolverConfig,
        start: ParameterVector,
        base_bounds: ParameterBounds,
        dataset: AxisSeries,
        sigma: FloatArray,
        pixel_spacing: float,
        label: str,
    ) -> SolveOutcome | None:
        stage_one_bounds = base_bounds.with_beta(
            constants.STAGE_ONE_BETA_MIN, constants.STAGE_ONE_BETA_MAX
        )
        stage_one = self._solve(
            solver_config, start, stage_one_bounds, dataset, sigma, start.amplitude
        )

        if stage_one is not None and stage_one.converged:
            first = ParameterVector.from_array(stage_one.x)
            if _is_physical(first):
                stage_two_bounds = base_bounds.with_center(
                    first.center, constants.STAGE_TWO_CENTER_RANGE * pixel_spacing
                )
                return self._solve(
                    solver_config, first, stage_two_bounds, dataset, sigma, start.amplitude
                )

        self._events.emit(
            EventType.STAGE_ONE_FAILED,
            f"{label}: {solver_config.name} stage 1 failed, single-stage fallback",
            label=label,
            config=solver_config.name,
        )
        return self._solve(solver_config, start, base_bounds, dataset, sigma, start.amplitude)

    def _build_result(
        self,
        outcome: SolveOutcome,
        dataset: AxisSeries,
        index: int,
        solver_config: SolverConfig,
        estimates: ParameterEstimates,
        pixel_spacing: float,
        raw_size: int,
    ) -> AxisFitResult:
        fitted = ParameterVector.from_array(outcome.x)
        fitted = fitted._replace(gamma=abs(fitted.gamma))

        stats = compute_robust_statistics(dataset.positions, dataset.charges)
        uncertainty = estimate_uncertainties(
            outcome.jac, fitted, mad=stats.mad, pixel_spacing=pixel_spacing
        )
        errors = uncertainty.errors

        n = len(dataset)
        # chi2 uses the fitted dataset, dof the series as supplied
        chi2_reduced = reduced_chi_squared_from_cost(outcome.cost, n)
        return AxisFitResult(
            amplitude=fitted.amplitude,
            center=fitted.center,
            gamma=fitted.gamma,
            beta=fitted.beta,
            baseline=fitted.baseline,
            amplitude_err=errors.amplitude,
            center_err=errors.center,
            gamma_err=errors.gamma,
            beta_err=errors.beta,
            baseline_err=errors.baseline,
            chi2_reduced=chi2_reduced,
            dof=compute_degrees_of_freedom(raw_size),
            pp=compute_pseudo_p_value(chi2_reduced),
            success=True,
            n_points=n,
            dataset_index=index,
            config_name=solver_config.name,
            estimation_method=int(estimates.method_used),
            covariance_source=uncertainty.source,
        )


__all__ = ["FitOrchestrator", "is_acceptable"]
