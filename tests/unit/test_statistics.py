"""Test goodness-of-fit statistics and result records."""

import pytest

from chargefit.core.results import (
    AxisFitResult,
    DiagonalFitResult,
    compute_degrees_of_freedom,
    compute_pseudo_p_value,
    compute_reduced_chi_squared,
    reduced_chi_squared_from_cost,
)


class TestStatistics:
    def test_degrees_of_freedom_floor(self):
        assert compute_degrees_of_freedom(12) == 7
        assert compute_degrees_of_freedom(5) == 1
        assert compute_degrees_of_freedom(3) == 1

    def test_reduced_chi_squared(self):
        assert compute_reduced_chi_squared(14.0, 12) == pytest.approx(2.0)

    def test_from_cost(self):
        assert reduced_chi_squared_from_cost(7.0, 12) == pytest.approx(2.0)

    @pytest.mark.parametrize(
        ("chi2", "expected"),
        [(0.0, 0.0), (-1.0, 0.0), (1.0, 0.9), (5.0, 0.5), (10.0, 0.0), (25.0, 0.0)],
    )
    def test_pseudo_p_value(self, chi2, expected):
        assert compute_pseudo_p_value(chi2) == pytest.approx(expected)


class TestResultRecords:
    def test_failed_record_defaults(self):
        result = AxisFitResult.failed()
        assert not result.success
        assert result.center == 0.0
        assert result.dataset_index == -1
        assert result.to_dict()["covariance_source"] == "none"

    def test_records_are_independent(self):
        first, second = DiagonalFitResult(), DiagonalFitResult()
        assert first.main_x is not None
        assert first.to_dict() == second.to_dict()
        assert set(first.axes()) == {"main_x", "main_y", "secondary_x", "secondary_y"}
