"""Test the dataset/configuration search with a scripted backend."""

import numpy as np
import pytest

from chargefit.core.domain.config import ChargeFitConfig, OutlierConfig
from chargefit.core.domain.samples import AxisSeries
from chargefit.core.fitting.orchestrator import FitOrchestrator, is_acceptable
from chargefit.core.fitting.strategies import SOLVER_CONFIGS, SolveOutcome
from chargefit.core.results import CovarianceSource
from chargefit.core.shared.events import EventDispatcher, EventType
from chargefit.core.shared.exceptions import OptimizationError

GOOD = np.array([90.0, 0.25, 2.5, 1.05, 6.0])
JAC = np.vstack([np.eye(5), np.eye(5)])


def outcome(x=GOOD, *, converged=True, cost=0.5):
    return SolveOutcome(
        x=np.asarray(x, dtype=float),
        cost=cost,
        converged=converged,
        status=1 if converged else 0,
        message="scripted",
        nfev=3,
        jac=JAC,
    )


class ScriptedBackend:
    """Backend double returning ``respond(call)`` and recording every call."""

    def __init__(self, respond):
        self.respond = respond
        self.calls = []

    def solve(self, config, start, bounds, x, y, sigma, *, amplitude_estimate):
        call = {
            "config": config.name,
            "start": start,
            "bounds": bounds,
            "n": x.size,
            "sigma": sigma,
            "amplitude_estimate": amplitude_estimate,
        }
        self.calls.append(call)
        return self.respond(call)


@pytest.fixture
def events():
    return []


@pytest.fixture
def dispatcher(events):
    dispatcher = EventDispatcher()
    dispatcher.subscribe(None, events.append)
    return dispatcher


@pytest.fixture
def series(wide_profile):
    positions, charges, _ = wide_profile
    return AxisSeries(positions, charges)


def make(backend, dispatcher, config=None):
    return FitOrchestrator(
        config=config or ChargeFitConfig(), dispatcher=dispatcher, backend=backend
    )


class TestIsAcceptable:
    def test_good_solution(self):
        assert is_acceptable(outcome())

    @pytest.mark.parametrize(
        "x",
        [
            [-1.0, 0.0, 1.0, 1.0, 0.0],
            [1.0, 0.0, -1.0, 1.0, 0.0],
            [1.0, 0.0, 1.0, 0.1, 0.0],
            [1.0, 0.0, 1.0, 5.0, 0.0],
            [1.0, np.nan, 1.0, 1.0, 0.0],
        ],
    )
    def test_rejections(self, x):
        assert not is_acceptable(outcome(x))

    def test_not_converged(self):
        assert not is_acceptable(outcome(converged=False))


class TestFitOrchestrator:
    def test_first_configuration_accepted(self, series, dispatcher, events):
        backend = ScriptedBackend(lambda call: outcome())
        result = make(backend, dispatcher).fit(series, 0.0, 1.0)

        assert result.success
        assert result.config_name == SOLVER_CONFIGS[0].name
        assert result.dataset_index == 0
        assert result.n_points == 15
        assert result.dof == 10
        assert result.chi2_reduced == pytest.approx(0.1)
        assert result.pp == pytest.approx(0.99)
        assert result.center == pytest.approx(0.25)
        assert result.covariance_source is CovarianceSource.SVD
        assert result.estimation_method == 1
        assert len(backend.calls) == 2
        assert events[-1].event_type is EventType.FIT_ACCEPTED

    def test_filtered_fit_reports_unfiltered_dof(self, series, dispatcher):
        charges = series.charges.copy()
        charges[3] = 1000.0 * np.median(charges)
        corrupted = AxisSeries(series.positions, charges)
        backend = ScriptedBackend(lambda call: outcome())
        result = make(backend, dispatcher).fit(corrupted, 0.0, 1.0)

        assert result.dataset_index == 0
        assert result.n_points == 14
        assert result.dof == 15 - 5
        assert result.chi2_reduced == pytest.approx(2 * 0.5 / (14 - 5))

    def test_two_stage_bounds(self, series, dispatcher):
        first = np.array([90.0, 0.4, 2.5, 1.0, 6.0])
        backend = ScriptedBackend(lambda call: outcome(first))
        make(backend, dispatcher).fit(series, 0.0, 2.0)

        stage_one, stage_two = backend.calls
        assert stage_one["bounds"].lower.beta == 0.9
        assert stage_one["bounds"].upper.beta == 1.1
        assert stage_two["start"].center == pytest.approx(0.4)
        assert stage_two["bounds"].lower.center == pytest.approx(0.4 - 1.0)
        assert stage_two["bounds"].upper.center == pytest.approx(0.4 + 1.0)
        assert stage_two["bounds"].lower.beta == 0.2
        assert stage_two["bounds"].upper.beta == 4.0

    def test_stage_one_failure_falls_back_to_single_stage(self, series, dispatcher, events):
        def respond(call):
            if call["bounds"].upper.beta == 1.1:
                return outcome(converged=False)
            return outcome()

        backend = ScriptedBackend(respond)
        result = make(backend, dispatcher).fit(series, 0.0, 1.0)

        assert result.success
        assert len(backend.calls) == 2
        fallback = backend.calls[1]
        assert fallback["start"] == backend.calls[0]["start"]
        assert fallback["bounds"].lower.beta == 0.2
        assert EventType.STAGE_ONE_FAILED in {event.event_type for event in events}

    def test_backend_error_moves_to_next_configuration(self, series, dispatcher):
        def respond(call):
            if call["config"] == SOLVER_CONFIGS[0].name:
                raise OptimizationError("boom")
            return outcome()

        backend = ScriptedBackend(respond)
        result = make(backend, dispatcher).fit(series, 0.0, 1.0)

        assert result.success
        assert result.config_name == SOLVER_CONFIGS[1].name

    def test_unphysical_solution_rejected(self, series, dispatcher, events):
        bad_beta = np.array([90.0, 0.25, 2.5, 6.0, 6.0])

        def respond(call):
            if call["config"] == SOLVER_CONFIGS[2].name:
                return outcome()
            return outcome(bad_beta)

        result = make(ScriptedBackend(respond), dispatcher).fit(series, 0.0, 1.0)

        assert result.config_name == SOLVER_CONFIGS[2].name
        rejected = [event for event in events if event.event_type is EventType.CONFIG_FAILED]
        assert [event.data["config"] for event in rejected] == [
            SOLVER_CONFIGS[0].name,
            SOLVER_CONFIGS[1].name,
        ]

    def test_exhaustion(self, series, dispatcher, events):
        backend = ScriptedBackend(lambda call: outcome(converged=False))
        result = make(backend, dispatcher).fit(series, 0.0, 1.0)

        assert not result.success
        assert result.config_name == ""
        assert len(backend.calls) == 3 * len(SOLVER_CONFIGS) * 2
        assert events[-1].event_type is EventType.FIT_EXHAUSTED

    def test_exhaustion_without_filtering_tries_raw_data_only(self, series, dispatcher):
        backend = ScriptedBackend(lambda call: outcome(converged=False))
        make(backend, dispatcher).fit(series, 0.0, 1.0, enable_outlier_filtering=False)
        assert len(backend.calls) == len(SOLVER_CONFIGS) * 2

    def test_short_series_never_reaches_backend(self, dispatcher, events):
        backend = ScriptedBackend(lambda call: outcome())
        short = AxisSeries(np.arange(4.0), np.ones(4))
        result = make(backend, dispatcher).fit(short, 0.0, 1.0)

        assert not result.success
        assert backend.calls == []
        assert events[0].event_type is EventType.INPUT_REJECTED

    def test_sigma_from_configuration(self, series, dispatcher):
        backend = ScriptedBackend(lambda call: outcome())
        make(backend, dispatcher).fit(series, 0.0, 1.0)
        np.testing.assert_allclose(backend.calls[0]["sigma"], 0.05 * series.max_charge)

    def test_uniform_weights_when_uncertainty_disabled(self, series, dispatcher):
        config = ChargeFitConfig.model_validate({"uncertainty": {"enabled": False}})
        backend = ScriptedBackend(lambda call: outcome())
        make(backend, dispatcher, config).fit(series, 0.0, 1.0)
        np.testing.assert_array_equal(backend.calls[0]["sigma"], 1.0)


class TestCandidateDatasets:
    def test_filtered_datasets_come_first(self, dispatcher, events):
        positions = np.arange(11.0)
        charges = 10.0 + np.sin(positions)
        charges[3] = 500.0
        orchestrator = make(ScriptedBackend(lambda call: outcome()), dispatcher)

        datasets = orchestrator.candidate_datasets(
            AxisSeries(positions, charges), enable_outlier_filtering=True
        )

        assert [len(dataset) for dataset in datasets] == [10, 10, 11]
        filtered = [event for event in events if event.event_type is EventType.OUTLIERS_FILTERED]
        assert [event.data["threshold"] for event in filtered] == [2.5, 3.0]

    def test_thresholds_from_configuration(self, dispatcher, events):
        config = ChargeFitConfig(
            outliers=OutlierConfig(conservative_threshold=1e6, lenient_threshold=1e7)
        )
        positions = np.arange(11.0)
        charges = 10.0 + np.sin(positions)
        charges[3] = 500.0
        orchestrator = make(ScriptedBackend(lambda call: outcome()), dispatcher, config)

        datasets = orchestrator.candidate_datasets(
            AxisSeries(positions, charges), enable_outlier_filtering=True
        )
        assert [len(dataset) for dataset in datasets] == [11, 11, 11]

    def test_without_filtering(self, series, dispatcher):
        orchestrator = make(ScriptedBackend(lambda call: outcome()), dispatcher)
        datasets = orchestrator.candidate_datasets(series, enable_outlier_filtering=False)
        assert datasets == [series]
