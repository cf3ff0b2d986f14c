"""Test the public fitting operations and their input contract."""

import numpy as np
import pytest

from chargefit import (
    ChargeFitConfig,
    ChargeFitService,
    fit_2d_power_lorentzian,
    fit_diagonal_power_lorentzian,
    fit_power_lorentzian,
    remove_power_lorentzian_outliers,
)
from chargefit.core.fitting.strategies import LeastSquaresBackend


class MockReporter:
    """Test double for capturing reporter calls."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def action(self, message: str) -> None:
        self.messages.append(("action", message))

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def warning(self, message: str) -> None:
        self.messages.append(("warning", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def levels(self) -> set[str]:
        return {level for level, _ in self.messages}


@pytest.fixture
def solver_calls(monkeypatch):
    """Record backend calls without running the solver."""
    calls = []

    def record(self, *args, **kwargs):
        calls.append(args)
        raise AssertionError("solver must not run")

    monkeypatch.setattr(LeastSquaresBackend, "solve", record)
    return calls


class TestInputContract:
    def test_fit_axis_too_few_points(self, solver_calls):
        result = fit_power_lorentzian([0.0, 1.0, 2.0, 3.0], [1.0, 5.0, 5.0, 1.0], 1.5, 1.0)
        assert not result.success
        assert solver_calls == []

    def test_fit_axis_length_mismatch(self, solver_calls):
        result = fit_power_lorentzian(np.arange(6.0), np.ones(5), 0.0, 1.0)
        assert not result.success

    def test_fit_2d_too_few_points(self, solver_calls):
        result = fit_2d_power_lorentzian([0, 1, 2, 3], [0, 0, 0, 0], [1, 2, 2, 1], 1.5, 0.0, 1.0)
        assert not result.fit_successful
        assert not result.x.success
        assert not result.y.success
        assert result.row_positions.size == 0
        assert solver_calls == []

    def test_fit_2d_length_mismatch(self, solver_calls, cluster):
        x, y, charge = cluster
        result = fit_2d_power_lorentzian(x, y[:-1], charge, 0.0, 0.0, 1.0)
        assert not result.fit_successful

    def test_diagonal_too_few_points(self, solver_calls):
        result = fit_diagonal_power_lorentzian([0, 1, 2], [0, 1, 2], [1, 3, 1], 1.0, 1.0, 1.0)
        assert not result.fit_successful
        assert not any(fit.success for fit in result.axes().values())
        assert solver_calls == []

    def test_fit_2d_lines_too_short(self, solver_calls):
        x = np.arange(6.0)
        result = fit_2d_power_lorentzian(x, x, np.ones(6), 2.0, 2.0, 1.0)
        assert not result.fit_successful
        assert solver_calls == []


class TestFitAxis:
    def test_unsorted_input_is_sorted(self, wide_profile):
        positions, charges, params = wide_profile
        order = np.random.default_rng(7).permutation(positions.size)
        result = fit_power_lorentzian(
            positions[order], charges[order], 0.0, 1.0, enable_outlier_filtering=False
        )
        assert result.success
        assert result.center == pytest.approx(params[1], abs=1e-3)

    def test_verbose_reports_progress(self, wide_profile):
        positions, charges, _ = wide_profile
        reporter = MockReporter()
        fit_power_lorentzian(positions, charges, 0.0, 1.0, verbose=True, reporter=reporter)
        assert {"action", "success"} <= reporter.levels()

    def test_quiet_by_default(self, wide_profile):
        positions, charges, _ = wide_profile
        reporter = MockReporter()
        ChargeFitService(reporter=reporter).fit_axis(positions, charges, 0.0, 1.0)
        assert reporter.messages == []

    def test_verbose_prints_to_console_by_default(self, wide_profile, capsys):
        positions, charges, _ = wide_profile
        fit_power_lorentzian(positions, charges, 0.0, 1.0, verbose=True)
        assert "Fitting profile" in capsys.readouterr().out

        fit_power_lorentzian(positions, charges, 0.0, 1.0)
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""

    def test_rejection_reported_when_verbose(self):
        reporter = MockReporter()
        ChargeFitService(reporter=reporter).fit_axis([0.0], [1.0], 0.0, 1.0, verbose=True)
        assert reporter.levels() == {"warning"}


class TestFit2D:
    def test_charge_uncertainty_follows_configuration(self, cluster):
        x, y, charge = cluster
        config = ChargeFitConfig.model_validate({"uncertainty": {"fraction": 0.1}})
        result = fit_2d_power_lorentzian(x, y, charge, 0.0, 0.0, 1.0, config=config)

        assert result.fit_successful
        assert result.x_charge_uncertainty == pytest.approx(0.1 * result.row_charges.max())
        assert result.y_charge_uncertainty == pytest.approx(0.1 * result.column_charges.max())

    def test_row_and_column_recorded(self, cluster):
        x, y, charge = cluster
        result = ChargeFitService().fit_2d(x, y, charge, 0.0, 0.0, 1.0)
        np.testing.assert_array_equal(result.row_positions, np.arange(-4.0, 5.0))
        np.testing.assert_array_equal(result.column_positions, np.arange(-4.0, 5.0))


class TestRemoveOutliers:
    def setup_method(self):
        self.x = np.arange(10.0)
        self.y = np.zeros(10)
        self.charge = np.array([5.0, 6.0, 5.5, 6.5, 5.0, 900.0, 6.0, 5.5, 6.2, 5.8])

    def test_module_function(self):
        result = remove_power_lorentzian_outliers(self.x, self.y, self.charge)
        assert result.outliers_removed == 1

    def test_disabled_identity(self):
        result = remove_power_lorentzian_outliers(self.x, self.y, self.charge, enable=False)
        np.testing.assert_array_equal(result.charge, self.charge)
        assert not result.filtering_applied

    def test_reports_removal(self):
        reporter = MockReporter()
        ChargeFitService(reporter=reporter).remove_outliers(
            self.x, self.y, self.charge, verbose=True
        )
        assert reporter.messages[0][0] == "info"
        assert "removed 1" in reporter.messages[0][1]

    def test_reports_mismatch(self):
        reporter = MockReporter()
        result = ChargeFitService(reporter=reporter).remove_outliers(
            self.x, self.y[:3], self.charge, verbose=True
        )
        assert not result.success
        assert reporter.levels() == {"error"}
