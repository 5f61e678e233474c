"""
Tests for noise-gated spur growth.
"""

import numpy as np
import pytest

from coastgrow.features.growth.directions import derive_normals
from coastgrow.features.growth.noise_field import NoiseField
from coastgrow.features.growth.spurs import (
    grow_from_normal,
    grow_spurs,
    passes_gate,
    spur_lengths,
)
from coastgrow.globals.config_models import NoiseConfig, SpurConfig


class TestSpurLengths:

    def test_empty_range_gives_min(self):
        rng = np.random.default_rng(0)
        assert not spur_lengths(10, SpurConfig(min_length=0, max_length=0), rng).any()
        assert (spur_lengths(10, SpurConfig(min_length=3, max_length=3), rng) == 3).all()

    def test_half_open_range(self):
        lengths = spur_lengths(500, SpurConfig(min_length=2, max_length=5), np.random.default_rng(1))
        assert lengths.shape == (500, 2)
        assert lengths.min() >= 2
        assert lengths.max() <= 4

    def test_seeded(self):
        spurs = SpurConfig()
        a = spur_lengths(50, spurs, np.random.default_rng(9))
        b = spur_lengths(50, spurs, np.random.default_rng(9))
        assert np.array_equal(a, b)


class TestGate:

    def test_base_threshold(self):
        spurs = SpurConfig()
        assert passes_gate(99, 0, 10, spurs)
        assert not passes_gate(100, 0, 10, spurs)

    def test_ramp_truncates(self):
        # 100 + 5 * 155 // 10 == 177
        spurs = SpurConfig()
        assert passes_gate(176, 5, 10, spurs)
        assert not passes_gate(177, 5, 10, spurs)

    def test_tip_never_reaches_255(self):
        spurs = SpurConfig()
        assert not passes_gate(255, 24, 25, spurs)


class TestGrowSpurs:

    def test_zero_range_adds_nothing(self, coastline_mask, open_noise):
        grown = grow_spurs(coastline_mask, open_noise, SpurConfig(min_length=0, max_length=0))
        assert np.array_equal(grown, coastline_mask)

    def test_input_untouched(self, coastline_mask, open_noise):
        before = coastline_mask.copy()
        grow_spurs(coastline_mask, open_noise, SpurConfig(min_length=5, max_length=6))
        assert np.array_equal(before, coastline_mask)

    def test_mask_is_kept(self, coastline_mask, closed_noise):
        grown = grow_spurs(coastline_mask, closed_noise, SpurConfig(min_length=3, max_length=9))
        assert np.array_equal(grown, coastline_mask)

    def test_isolated_point_grows_horizontally(self, open_noise):
        mask = np.zeros((21, 21), dtype=bool)
        mask[10, 10] = True
        grown = grow_spurs(mask, open_noise, SpurConfig(min_length=4, max_length=5))
        expected = np.zeros_like(mask)
        expected[10, 7:14] = True
        assert np.array_equal(grown, expected)

    def test_without_gate_noise_is_ignored(self, closed_noise):
        mask = np.zeros((21, 21), dtype=bool)
        mask[10, 10] = True
        spurs = SpurConfig(min_length=4, max_length=5, noise_gating=False)
        grown = grow_spurs(mask, closed_noise, spurs)
        assert int(grown.sum()) == 7

    def test_off_grid_steps_are_dropped(self, open_noise):
        mask = np.zeros((5, 5), dtype=bool)
        mask[0, 0] = True
        grown = grow_spurs(mask, open_noise, SpurConfig(min_length=4, max_length=5))
        expected = np.zeros_like(mask)
        expected[0, 0:4] = True
        assert np.array_equal(grown, expected)

    def test_seeded_runs_match(self, coastline_mask):
        noise = NoiseField.generate(40, 40, NoiseConfig())
        a = grow_spurs(coastline_mask, noise, SpurConfig(), seed=4)
        b = grow_spurs(coastline_mask, noise, SpurConfig(), seed=4)
        assert np.array_equal(a, b)
        assert a.sum() > coastline_mask.sum()

    @pytest.mark.parametrize("gating", [True, False])
    def test_batches_match_single_spurs(self, coastline_mask, gating):
        noise = NoiseField.generate(40, 40, NoiseConfig(seed=2))
        spurs = SpurConfig(min_length=2, max_length=12, noise_gating=gating, batch_size=7)

        batched = grow_spurs(coastline_mask, noise, spurs, seed=11)

        reference = coastline_mask.copy()
        ys, xs = np.nonzero(coastline_mask)
        lengths = spur_lengths(len(xs), spurs, np.random.default_rng(11))
        normals = derive_normals(coastline_mask, xs, ys)
        for j, (x, y) in enumerate(zip(xs, ys)):
            for side in (0, 1):
                grow_from_normal(
                    reference, (int(x), int(y)), tuple(normals[j, side]),
                    int(lengths[j, side]), noise, spurs,
                )
        assert np.array_equal(batched, reference)


def test_degenerate_normal_is_skipped(open_noise):
    grown = np.zeros((5, 5), dtype=bool)
    assert grow_from_normal(grown, (2, 2), None, 4, open_noise, SpurConfig()) == 0
    assert grow_from_normal(grown, (2, 2), (np.nan, np.nan), 4, open_noise, SpurConfig()) == 0
    assert not grown.any()
