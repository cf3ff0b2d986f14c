"""Test row/column grouping and diagonal projection."""

import numpy as np
import pytest

from chargefit.core.domain.samples import AxisSeries
from chargefit.services.fit.grouping import (
    central_lines,
    group_by_coordinate,
    project_diagonals,
    select_nearest_group,
)


class TestGroupByCoordinate:
    def test_groups_within_tolerance(self):
        keys = np.array([0.0, 1.0, 0.05, 1.02])
        positions = np.array([10.0, 20.0, 30.0, 40.0])
        charges = np.array([1.0, 2.0, 3.0, 4.0])
        groups = group_by_coordinate(keys, positions, charges, 0.1)

        assert list(groups) == [0.0, 1.0]
        np.testing.assert_array_equal(groups[0.0].positions, [10.0, 30.0])
        np.testing.assert_array_equal(groups[1.0].charges, [2.0, 4.0])

    def test_tolerance_is_strict(self):
        groups = group_by_coordinate(np.array([0.0, 0.1]), np.zeros(2), np.ones(2), 0.1)
        assert len(groups) == 2

    def test_first_matching_key_in_ascending_order(self):
        keys = np.array([1.0, 0.0, 0.95, 0.05])
        groups = group_by_coordinate(keys, np.arange(4.0), np.ones(4), 0.1)

        assert list(groups) == [0.0, 1.0]
        np.testing.assert_array_equal(groups[1.0].positions, [0.0, 2.0])
        np.testing.assert_array_equal(groups[0.0].positions, [1.0, 3.0])


class TestSelectNearestGroup:
    @staticmethod
    def group(n):
        return AxisSeries(np.arange(float(n)), np.ones(n))

    def test_nearest_with_enough_points(self):
        groups = {0.0: self.group(5), 1.0: self.group(2), 2.0: self.group(6)}
        key, series = select_nearest_group(groups, 1.1)
        assert key == 2.0
        assert len(series) == 6

    def test_tie_goes_to_lower_key(self):
        groups = {-1.0: self.group(5), 1.0: self.group(5)}
        key, _ = select_nearest_group(groups, 0.0)
        assert key == -1.0

    def test_none_when_all_groups_small(self):
        assert select_nearest_group({0.0: self.group(4)}, 0.0) is None


class TestCentralLines:
    def test_selects_central_row_and_column(self, cluster):
        x, y, charge = cluster
        lines = central_lines(x, y, charge, 0.3, -0.2, 1.0)

        assert lines.row_key == pytest.approx(0.0)
        assert lines.column_key == pytest.approx(0.0)
        assert len(lines.row) == 9
        assert len(lines.column) == 9
        assert np.all(np.diff(lines.row.positions) > 0)
        np.testing.assert_array_equal(lines.row.charges, charge[y == 0.0][np.argsort(x[y == 0.0])])

    def test_non_positive_charges_ignored(self, cluster):
        x, y, charge = cluster
        charge = charge.copy()
        charge[(y == 0.0) & (x < 0)] = 0.0
        lines = central_lines(x, y, charge, 0.0, 0.0, 1.0)
        assert len(lines.row) == 5

    def test_missing_lines(self):
        x = np.array([0.0, 1.0, 2.0, 3.0, 4.0])
        y = np.array([0.0, 1.0, 2.0, 3.0, 4.0])
        lines = central_lines(x, y, np.ones(5), 0.0, 0.0, 1.0)
        assert lines.row is None
        assert lines.column is None


class TestProjectDiagonals:
    def test_centered_grid(self, centered_cluster):
        x, y, charge = centered_cluster
        projection = project_diagonals(x, y, charge, 0.0, 0.0, 1.0)

        np.testing.assert_allclose(projection.main.positions, np.arange(-4.0, 5.0))
        np.testing.assert_allclose(projection.secondary.positions, np.arange(-4.0, 5.0))
        np.testing.assert_allclose(projection.main.charges, projection.main.charges[::-1])
        assert projection.pitch == pytest.approx(np.sqrt(2.0))

    def test_secondary_coordinate_sign(self):
        x = np.array([1.0, -1.0, 0.0])
        y = np.array([-1.0, 1.0, 0.0])
        projection = project_diagonals(x, y, np.array([1.0, 2.0, 3.0]), 0.0, 0.0, 1.0)

        np.testing.assert_allclose(projection.secondary.positions, [-1.0, 0.0, 1.0])
        np.testing.assert_allclose(projection.secondary.charges, [2.0, 3.0, 1.0])
        np.testing.assert_allclose(projection.main.positions, [0.0])

    def test_offset_estimate(self):
        x = np.array([2.0, 3.0, 4.0])
        y = np.array([-1.0, 0.0, 1.0])
        projection = project_diagonals(x, y, np.ones(3), 3.0, 0.0, 1.0)
        np.testing.assert_allclose(projection.main.positions, [-1.0, 0.0, 1.0])
