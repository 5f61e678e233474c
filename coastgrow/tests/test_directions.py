"""
Tests for tangent/normal derivation.
"""

import numpy as np
import pytest

from coastgrow.features.growth.directions import (
    derive_normals,
    derive_tangent,
    derive_tangents,
    unit_normals,
)
from coastgrow.features.growth.neighbors import find_neighbors


class TestDeriveTangent:

    def test_isolated_point(self):
        assert derive_tangent((5, 5), []) == (0, 1)

    def test_single_neighbor_points_away(self):
        assert derive_tangent((5, 5), [(4, 4)]) == (1, 1)

    def test_first_minus_last(self):
        assert derive_tangent((5, 5), [(4, 4), (5, 6), (6, 6)]) == (-2, -2)

    def test_horizontal_line_gets_vertical_normals(self):
        mask = np.zeros((10, 10), dtype=bool)
        mask[5, 2:9] = True
        tangent = derive_tangent((5, 5), find_neighbors((5, 5), mask))
        assert tangent == (-2, 0)
        first, second = unit_normals(tangent)
        assert first == pytest.approx((0.0, 1.0))
        assert second == pytest.approx((0.0, -1.0))


class TestUnitNormals:

    def test_rotations(self):
        first, second = unit_normals((3, 4))
        assert first == pytest.approx((0.8, -0.6))
        assert second == pytest.approx((-0.8, 0.6))

    def test_unit_length_and_perpendicular(self):
        tangent = (2, -7)
        for normal in unit_normals(tangent):
            assert np.hypot(*normal) == pytest.approx(1.0)
            assert normal[0] * tangent[0] + normal[1] * tangent[1] == pytest.approx(0.0)

    def test_zero_tangent_is_degenerate(self):
        assert unit_normals((0, 0)) is None


class TestBatchDerivation:

    def test_batch_matches_scalar(self, random_mask):
        ys, xs = np.nonzero(random_mask)
        tangents = derive_tangents(random_mask, xs, ys)
        normals = derive_normals(random_mask, xs, ys)
        assert normals.shape == (len(xs), 2, 2)

        for j, (x, y) in enumerate(zip(xs, ys)):
            point = (int(x), int(y))
            expected_tangent = derive_tangent(point, find_neighbors(point, random_mask))
            assert tuple(tangents[j]) == expected_tangent
            first, second = unit_normals(expected_tangent)
            assert tuple(normals[j, 0]) == pytest.approx(first)
            assert tuple(normals[j, 1]) == pytest.approx(second)

    def test_empty_point_set(self, random_mask):
        empty = np.array([], dtype=np.int64)
        assert derive_normals(random_mask, empty, empty).shape == (0, 2, 2)
