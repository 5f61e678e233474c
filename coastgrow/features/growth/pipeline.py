"""
coastgrow/features/growth/pipeline.py

Growth Pipeline
===============

High-level flow from a sparse coastline mask to a banded terrain image.
``grow_terrain`` runs entirely in memory; ``grow_image`` wraps it with the
image load/save collaborators.

Processing Steps
----------------
1. Occupancy: transparent and opaque-white pixels are background
2. Noise field: one Perlin grid for the image size (read-only)
3. Spur growth: every occupied point grows two noise-gated spurs along its
   boundary normals; the mask itself is kept
4. Morphology: one dilate, then ``erode_passes`` strict erosions
5. Output: colorize by neighbor density (land / sand / water), or emit the
   cleaned mask as opaque black on transparent

Returned Objects
----------------
grow_terrain() returns a TerrainResult (final image, final mask, optional
intermediate masks, band counts). grow_image() returns dict[str, str] of
written paths.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import cv2
import numpy as np

from coastgrow.globals import configs
from coastgrow.globals.config_models import GrowConfig
from coastgrow.globals.image_utility import load_image, write_image, to_u8_for_display
from coastgrow.globals.logutil import info, process_step, setting_config, success

from .classify import band_counts, classify, colorize, to_binary_image
from .morphology import clean_mask
from .neighbors import occupancy
from .noise_field import NoiseField
from .spurs import grow_spurs


@dataclass
class TerrainResult:
    image: np.ndarray
    mask: np.ndarray
    noise: NoiseField
    counts: dict[str, int] = field(default_factory=dict)
    steps: dict[str, np.ndarray] = field(default_factory=dict)


def _show_step(title: str, img: np.ndarray, show: bool, *, max_w: int = 1280, max_h: int = 900) -> None:
    """Show an intermediate grid scaled to fit the screen; waits for a key."""
    if not show:
        return
    disp = to_u8_for_display(img)
    if disp.ndim == 3 and disp.shape[2] == 4:
        disp = cv2.cvtColor(disp, cv2.COLOR_RGBA2BGRA)
    h, w = disp.shape[:2]
    scale = min(max_w / float(w), max_h / float(h), 1.0)
    if scale < 1.0:
        disp = cv2.resize(disp, (int(w * scale), int(h * scale)), interpolation=cv2.INTER_AREA)
    cv2.namedWindow(title, cv2.WINDOW_NORMAL)
    cv2.imshow(title, disp)
    cv2.waitKey(0)

def grow_terrain(
    grid: np.ndarray,
    config: GrowConfig | None = None,
    *,
    noise: NoiseField | None = None,
    keep_steps: bool = False,
    show: bool = False,
) -> TerrainResult:
    """Run spur growth, morphology and classification on an in-memory grid.

    Parameters
    ----------
    grid : np.ndarray
        Source pixel grid (RGBA/RGB/gray) or bool mask; never modified.
    config : GrowConfig
        Run configuration; defaults to the ``textured`` preset.
    noise : NoiseField, optional
        Pre-built field to reuse; generated from ``config.noise`` otherwise.
    keep_steps : bool
        Keep the intermediate masks (``grown``, ``dilated``, ``eroded``).
    show : bool
        Display each stage with cv2.imshow.
    """
    config = config or GrowConfig()
    process_step("Growing terrain from mask")
    for k, v in config.summary().items():
        setting_config(f"  {k}: {v}")

    mask = occupancy(grid)
    h, w = mask.shape
    info(f"Mask {w}x{h}: {int(mask.sum())} occupied pixels")
    _show_step("01 - Mask", mask, show)

    if noise is None:
        noise = NoiseField.generate(w, h, config.noise)

    grown = grow_spurs(mask, noise, config.spurs, seed=config.seed)
    _show_step("02 - Grown", grown, show)

    final, morph_steps = clean_mask(grown, config.erode_passes)
    _show_step("03 - Cleaned", final, show)

    if config.output == "binary":
        image = to_binary_image(final)
    else:
        image = colorize(final, config.palette)
    _show_step("04 - Output", image, show)

    if show:
        cv2.destroyAllWindows()

    steps = {"grown": grown, **morph_steps} if keep_steps else {}
    result = TerrainResult(
        image=image,
        mask=final,
        noise=noise,
        counts=band_counts(classify(final)),
        steps=steps,
    )
    success(f"Terrain grown: {result.counts}")
    return result

def _step_path(output: Path, suffix: str) -> Path:
    return output.with_name(f"{output.stem}{suffix}{output.suffix or '.png'}")

def grow_image(
    source: Path | str,
    output: Path | str,
    config: GrowConfig | None = None,
    *,
    show: bool = False,
) -> dict[str, str]:
    """Load ``source``, grow terrain, write ``output`` (and step images if enabled).

    Raises ImageLoadError / ImageWriteError from the I/O collaborators.
    """
    config = config or GrowConfig()
    source, output = Path(source), Path(output)
    process_step(f"Starting growth pipeline for {source.name}...")

    grid = load_image(source)
    result = grow_terrain(grid, config, keep_steps=config.save_steps, show=show)

    written = {"output": str(write_image(output, result.image, message="Wrote terrain image"))}

    if config.save_steps:
        process_step("Writing intermediate steps...")
        step_suffixes = {
            "grown": configs.GROWN_STEP_SUFFIX,
            "dilated": configs.DILATED_STEP_SUFFIX,
            "eroded": configs.ERODED_STEP_SUFFIX,
        }
        for name, suffix in step_suffixes.items():
            path = write_image(_step_path(output, suffix), to_binary_image(result.steps[name]), log=False)
            written[name] = str(path)
        noise_path = write_image(_step_path(output, configs.NOISE_STEP_SUFFIX), result.noise.to_image(), log=False)
        written["noise"] = str(noise_path)

    for k, v in written.items():
        info(f"{k}: {v}")
    return written
