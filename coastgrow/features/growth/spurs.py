"""
coastgrow/features/growth/spurs.py

Spur growth
===========

Every occupied point of the mask grows two short spurs, one along each unit
normal of its local boundary direction. Step ``i`` of a spur of length ``L``
lands on ``floor(P + i * normal)`` and is kept only when the noise there is
below a threshold that ramps up along the spur:

    noise < gate_base + trunc(i * gate_ramp / L)

With the defaults (100, 155) spurs start sparse near the coastline and
become solid towards the tip, which gives frayed, jittered extensions
instead of straight hairs.

Details
-------
- The output starts as a copy of the mask; spurs only ever add pixels.
- Writes are idempotent, so overlapping spurs do not depend on order.
- Targets outside the grid are dropped (no wrap into the next row); noise
  lookups outside the grid clamp to the edge.
- Spur lengths are drawn from one seeded ``numpy.random.Generator`` in
  row-major point order, two per point (first normal, second normal).
- Points are processed in vectorized batches of ``SpurConfig.batch_size``.
"""

from __future__ import annotations

import numpy as np

from coastgrow.globals.config_models import SpurConfig
from coastgrow.globals.logutil import process_step, info, debug
from .directions import derive_normals
from .neighbors import as_mask
from .noise_field import NoiseField


def spur_lengths(count: int, spurs: SpurConfig, rng: np.random.Generator) -> np.ndarray:
    """(count, 2) spur lengths drawn from ``[min_length, max_length)``.

    An empty range (max <= min) gives ``min_length`` for every spur.
    """
    lo, hi = int(spurs.min_length), int(spurs.max_length)
    if hi <= lo:
        return np.full((count, 2), lo, dtype=np.int64)
    return rng.integers(lo, hi, size=(count, 2), dtype=np.int64)

def passes_gate(noise_value, step, length, spurs: SpurConfig):
    """Growth-gate test; works on scalars or broadcastable arrays."""
    step = np.asarray(step, dtype=np.int64)
    length = np.maximum(np.asarray(length, dtype=np.int64), 1)
    threshold = int(spurs.gate_base) + (step * int(spurs.gate_ramp)) // length
    return np.asarray(noise_value, dtype=np.int64) < threshold

def grow_from_normal(
    grown: np.ndarray,
    point: tuple[int, int],
    normal: tuple[float, float] | None,
    length: int,
    noise: NoiseField,
    spurs: SpurConfig,
) -> int:
    """Grow a single spur into ``grown`` (bool mask, written in place).

    Returns the number of steps that passed the gate and landed on the grid.
    """
    if normal is None or not np.all(np.isfinite(normal)):
        return 0
    h, w = grown.shape
    x, y = point
    marked = 0
    for i in range(int(length)):
        cx = int(np.floor(x + i * normal[0]))
        cy = int(np.floor(y + i * normal[1]))
        if spurs.noise_gating and not passes_gate(noise.value_at(cx, cy), i, length, spurs):
            continue
        if 0 <= cx < w and 0 <= cy < h:
            grown[cy, cx] = True
            marked += 1
    return marked

def _grow_batch(
    grown: np.ndarray,
    xs: np.ndarray,
    ys: np.ndarray,
    normals: np.ndarray,
    lengths: np.ndarray,
    noise: NoiseField,
    spurs: SpurConfig,
) -> int:
    """Vectorized :func:`grow_from_normal` over a batch of points sharing one side."""
    max_len = int(lengths.max()) if lengths.size else 0
    if max_len == 0:
        return 0

    steps = np.arange(max_len, dtype=np.int64)[None, :]
    fx = np.floor(xs[:, None] + steps * normals[:, 0:1])
    fy = np.floor(ys[:, None] + steps * normals[:, 1:2])

    keep = (steps < lengths[:, None]) & np.isfinite(fx) & np.isfinite(fy)
    cx = np.where(keep, fx, -1).astype(np.int64)
    cy = np.where(keep, fy, -1).astype(np.int64)

    if spurs.noise_gating:
        keep &= passes_gate(noise.sample(cx, cy), steps, lengths[:, None], spurs)

    h, w = grown.shape
    keep &= (cx >= 0) & (cx < w) & (cy >= 0) & (cy < h)
    grown[cy[keep], cx[keep]] = True
    return int(keep.sum())

def grow_spurs(
    grid: np.ndarray,
    noise: NoiseField,
    spurs: SpurConfig | None = None,
    *,
    seed: int | None = 0,
) -> np.ndarray:
    """Grow spurs from every occupied point of ``grid``.

    Parameters
    ----------
    grid : np.ndarray
        Source mask (bool) or pixel grid; not modified.
    noise : NoiseField
        Gate field; lookups outside it clamp to the edge.
    spurs : SpurConfig
        Length range and gate parameters.
    seed : int | None
        Seed for the spur length generator.

    Returns
    -------
    np.ndarray
        New bool mask: the source occupancy plus all grown spur pixels.
    """
    spurs = spurs or SpurConfig()
    mask = as_mask(grid)
    grown = mask.copy()

    ys, xs = np.nonzero(mask)
    count = len(xs)
    process_step(f"Growing spurs from {count} occupied points")
    if count == 0:
        return grown

    rng = np.random.default_rng(seed)
    lengths = spur_lengths(count, spurs, rng)
    if not lengths.any():
        info("Spur range is empty; nothing to grow")
        return grown

    normals = derive_normals(mask, xs, ys)
    xs = xs.astype(np.float64)
    ys = ys.astype(np.float64)

    batch = int(spurs.batch_size)
    marked = 0
    for start in range(0, count, batch):
        sl = slice(start, start + batch)
        for side in (0, 1):
            marked += _grow_batch(grown, xs[sl], ys[sl], normals[sl, side], lengths[sl, side], noise, spurs)
        debug(f"Grew batch {start // batch + 1}: points {start}..{min(start + batch, count) - 1}")

    added = int(grown.sum()) - count
    info(f"Spur steps marked: {marked}; new pixels: {added}")
    return grown
