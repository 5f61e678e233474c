"""Terrain band classification by 8-neighbor density."""

from __future__ import annotations

import numpy as np

from coastgrow.globals.config_models import Palette
from coastgrow.globals.logutil import process_step, info
from .neighbors import as_mask, neighbor_counts

WATER, SAND, LAND = 0, 1, 2
BAND_NAMES = {WATER: "water", SAND: "sand", LAND: "land"}

# more than this many occupied neighbors is land
LAND_MIN_EXCLUSIVE = 4


def band_for_count(count: int) -> int:
    if count > LAND_MIN_EXCLUSIVE:
        return LAND
    if count > 0:
        return SAND
    return WATER

def classify(grid: np.ndarray) -> np.ndarray:
    """Band id (WATER/SAND/LAND) per pixel as a uint8 array."""
    counts = neighbor_counts(grid)
    bands = np.full(counts.shape, WATER, dtype=np.uint8)
    bands[counts > 0] = SAND
    bands[counts > LAND_MIN_EXCLUSIVE] = LAND
    return bands

def band_counts(bands: np.ndarray) -> dict[str, int]:
    return {name: int((bands == band).sum()) for band, name in BAND_NAMES.items()}

def colorize(grid: np.ndarray, palette: Palette | None = None) -> np.ndarray:
    """Paint each pixel with its band color; returns an RGBA grid."""
    palette = palette or Palette()
    process_step("Classifying terrain bands")
    colors = palette.rgba()
    lut = np.array([colors["water"], colors["sand"], colors["land"]], dtype=np.uint8)
    bands = classify(grid)
    info(f"Band counts: {band_counts(bands)}")
    return lut[bands]

def to_binary_image(grid: np.ndarray) -> np.ndarray:
    """Opaque black where occupied, transparent elsewhere (RGBA)."""
    mask = as_mask(grid)
    out = np.zeros(mask.shape + (4,), dtype=np.uint8)
    out[mask, 3] = 255
    return out
