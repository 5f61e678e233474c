"""
coastgrow/features/growth/morphology.py

Dilate/erode cleanup of the grown mask.

These are not the textbook 3x3 operators:
  - dilate: occupied if the pixel or any of its 8 neighbors is occupied
  - erode:  occupied only if ALL 8 neighbors are occupied; the pixel itself
            is not consulted and out-of-bounds counts as empty, so the image
            border always erodes away

The erosion is deliberately aggressive: three passes strip spur tips and
thin necks, leaving the solid body of the grown coast.
"""

from __future__ import annotations

import cv2
import numpy as np

from coastgrow.globals.logutil import process_step, setting_config
from .neighbors import as_mask, RING_KERNEL

_BOX_KERNEL = np.ones((3, 3), dtype=np.uint8)


def dilate(grid: np.ndarray) -> np.ndarray:
    """One dilation pass; returns a new bool mask."""
    u8 = as_mask(grid).astype(np.uint8)
    out = cv2.dilate(u8, _BOX_KERNEL, iterations=1, borderType=cv2.BORDER_CONSTANT, borderValue=0)
    return out > 0

def erode(grid: np.ndarray) -> np.ndarray:
    """One strict erosion pass (all 8 neighbors required); returns a new bool mask."""
    u8 = as_mask(grid).astype(np.uint8)
    # ring kernel: the minimum is taken over the neighbors only
    out = cv2.erode(u8, RING_KERNEL, iterations=1, borderType=cv2.BORDER_CONSTANT, borderValue=0)
    return out > 0

def clean_mask(grid: np.ndarray, erode_passes: int = 3) -> tuple[np.ndarray, dict[str, np.ndarray]]:
    """Dilate once, then erode ``erode_passes`` times.

    Returns (final_mask, steps) where steps holds ``dilated`` and ``eroded``
    (the latter equals final_mask; with zero passes it equals ``dilated``).
    """
    process_step(f"Morphology: 1 dilate + {erode_passes} erode passes")
    dilated = dilate(grid)
    setting_config(f"Occupied after dilate: {int(dilated.sum())}")

    eroded = dilated
    for i in range(int(erode_passes)):
        eroded = erode(eroded)
        setting_config(f"Occupied after erode pass {i + 1}: {int(eroded.sum())}")

    return eroded, {"dilated": dilated, "eroded": eroded}
