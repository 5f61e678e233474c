"""
coastgrow/features/growth/directions.py

Tangent and normal derivation for boundary points.

Tangent rules for a point P with neighbor set N (scan order, size k):
  - k == 0  -> (0, 1)
  - k == 1  -> P - N[0]
  - k >= 2  -> N[0] - N[-1]

Normals are the tangent rotated by +/-90 degrees and scaled to unit length.
A zero-length tangent yields NaN normals; growth skips them.
"""

from __future__ import annotations

import numpy as np

from .neighbors import NEIGHBOR_OFFSETS, neighbor_table

ISOLATED_TANGENT = (0, 1)

_OFFSETS = np.array(NEIGHBOR_OFFSETS, dtype=np.int64)


def derive_tangent(point: tuple[int, int], neighbors: list[tuple[int, int]]) -> tuple[int, int]:
    if not neighbors:
        return ISOLATED_TANGENT
    if len(neighbors) == 1:
        return point[0] - neighbors[0][0], point[1] - neighbors[0][1]
    first, last = neighbors[0], neighbors[-1]
    return first[0] - last[0], first[1] - last[1]

def unit_normals(tangent: tuple[float, float]) -> tuple[tuple[float, float], tuple[float, float]] | None:
    """Both unit normals of ``tangent``, or None when the tangent is degenerate."""
    tx, ty = float(tangent[0]), float(tangent[1])
    length = float(np.hypot(tx, ty))
    if length == 0.0:
        return None
    return (ty / length, -tx / length), (-ty / length, tx / length)

def derive_tangents(mask: np.ndarray, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    """Batch form of :func:`derive_tangent`; returns (n, 2) int tangents."""
    table = neighbor_table(mask, xs, ys)
    count = table.sum(axis=1)
    first = np.argmax(table, axis=1)
    last = table.shape[1] - 1 - np.argmax(table[:, ::-1], axis=1)

    # offsets are relative to P, so P - N[0] == -offset[first]
    tangents = np.empty((len(count), 2), dtype=np.int64)
    tangents[:] = ISOLATED_TANGENT
    single = count == 1
    tangents[single] = -_OFFSETS[first[single]]
    multi = count >= 2
    tangents[multi] = _OFFSETS[first[multi]] - _OFFSETS[last[multi]]
    return tangents

def derive_normals(mask: np.ndarray, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    """(n, 2, 2) unit normals; ``[:, 0]`` is (ty, -tx), ``[:, 1]`` is (-ty, tx).

    Degenerate tangents produce NaN rows.
    """
    tangents = derive_tangents(mask, xs, ys).astype(np.float64)
    tx, ty = tangents[:, 0], tangents[:, 1]
    length = np.hypot(tx, ty)
    with np.errstate(divide="ignore", invalid="ignore"):
        first = np.stack([ty / length, -tx / length], axis=1)
        second = np.stack([-ty / length, tx / length], axis=1)
    return np.stack([first, second], axis=1)
