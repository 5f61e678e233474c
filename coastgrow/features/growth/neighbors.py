"""
coastgrow/features/growth/neighbors.py

Emptiness test and 8-neighborhood lookups.

A pixel is background when it is fully transparent or opaque pure white;
everything else is occupied. Lookups outside the grid read as a fully
transparent pixel, so edge points simply have fewer neighbors.

Neighbor scan order is x-major (column x-1 top to bottom, then column x,
then column x+1). Direction derivation depends on which neighbor comes
first and last, so this order is part of the contract.
"""

from __future__ import annotations

import cv2
import numpy as np

# (dx, dy) in scan order, center excluded
NEIGHBOR_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),           (0, 1),
    (1, -1),  (1, 0),  (1, 1),
)

TRANSPARENT_PIXEL = np.zeros(4, dtype=np.uint8)

# weights every neighbor once, center zero
RING_KERNEL = np.array([[1, 1, 1], [1, 0, 1], [1, 1, 1]], dtype=np.uint8)


def _rgba_of(pixel) -> tuple[int, int, int, int]:
    px = [int(c) for c in np.atleast_1d(pixel)]
    if len(px) == 1:        # gray
        return px[0], px[0], px[0], 255
    if len(px) == 2:        # gray + alpha
        return px[0], px[0], px[0], px[1]
    if len(px) == 3:
        return px[0], px[1], px[2], 255
    return px[0], px[1], px[2], px[3]

def is_empty(pixel) -> bool:
    """True for background pixels: alpha 0, or opaque pure white."""
    r, g, b, a = _rgba_of(pixel)
    if a == 0:
        return True
    return r == 255 and g == 255 and b == 255 and a == 255

def pixel_at(grid: np.ndarray, x: int, y: int) -> np.ndarray:
    """Pixel at (x, y); a transparent pixel when outside the grid."""
    h, w = grid.shape[:2]
    if 0 <= x < w and 0 <= y < h:
        return grid[y, x]
    return TRANSPARENT_PIXEL

def occupancy(grid: np.ndarray) -> np.ndarray:
    """Apply :func:`is_empty` to a whole grid; returns a bool mask (True = occupied)."""
    if grid.ndim == 2:
        if grid.dtype == np.bool_:
            return grid.copy()
        # gray, opaque
        return grid != 255

    channels = grid.shape[2]
    if channels >= 3:
        white = np.all(grid[..., :3] == 255, axis=-1)
    else:
        white = grid[..., 0] == 255

    if channels in (2, 4):
        alpha = grid[..., -1]
    else:
        alpha = np.full(grid.shape[:2], 255, dtype=np.uint8)

    return (alpha != 0) & ~(white & (alpha == 255))

def as_mask(grid: np.ndarray) -> np.ndarray:
    """Accept either a bool occupancy mask or a pixel grid."""
    if grid.dtype == np.bool_ and grid.ndim == 2:
        return grid
    return occupancy(grid)

def find_neighbors(point: tuple[int, int], grid: np.ndarray) -> list[tuple[int, int]]:
    """Occupied 8-neighbors of ``point`` in scan order.

    ``grid`` may be a pixel grid or a bool occupancy mask.
    """
    x, y = int(point[0]), int(point[1])
    if grid.dtype == np.bool_ and grid.ndim == 2:
        h, w = grid.shape
        return [
            (x + dx, y + dy)
            for dx, dy in NEIGHBOR_OFFSETS
            if 0 <= x + dx < w and 0 <= y + dy < h and grid[y + dy, x + dx]
        ]
    return [
        (x + dx, y + dy)
        for dx, dy in NEIGHBOR_OFFSETS
        if not is_empty(pixel_at(grid, x + dx, y + dy))
    ]

def neighbor_counts(grid: np.ndarray) -> np.ndarray:
    """Number of occupied 8-neighbors for every pixel (uint8, 0..8).

    Same weighted-kernel trick as skeleton endpoint detection: a ring kernel
    through cv2.filter2D, zero padding so out-of-bounds reads as empty.
    """
    mask = as_mask(grid).astype(np.uint8)
    return cv2.filter2D(mask, -1, RING_KERNEL, borderType=cv2.BORDER_CONSTANT)

def neighbor_table(mask: np.ndarray, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    """(n, 8) bool table; row j holds neighbor occupancy of (xs[j], ys[j]) in scan order."""
    padded = np.pad(as_mask(mask), 1, mode="constant", constant_values=False)
    xs = np.asarray(xs, dtype=np.int64) + 1
    ys = np.asarray(ys, dtype=np.int64) + 1
    columns = [padded[ys + dy, xs + dx] for dx, dy in NEIGHBOR_OFFSETS]
    return np.stack(columns, axis=1)
