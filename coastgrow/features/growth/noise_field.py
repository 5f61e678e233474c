"""
coastgrow/features/growth/noise_field.py

Precomputed Perlin noise field used by the growth gate.

Noise is sampled at normalized coordinates (x/width, y/height) times
``scale`` and mapped from [-1, 1] to integer levels 0..255. The field is
built once per image size and is read-only afterwards.
"""

from __future__ import annotations

import numpy as np
from noise import pnoise2

from coastgrow.globals.config_models import NoiseConfig
from coastgrow.globals.logutil import process_step, setting_config


def map_range(value, in_min: float, in_max: float, out_min: float, out_max: float):
    return (value - in_min) * (out_max - out_min) / (in_max - in_min) + out_min


class NoiseField:
    """Immutable (height, width) uint8 noise grid with clamped sampling."""

    def __init__(self, values: np.ndarray):
        values = np.array(values, dtype=np.uint8, copy=True)
        if values.ndim != 2 or values.size == 0:
            raise ValueError(f"NoiseField needs a non-empty 2D array, got shape {values.shape}")
        values.setflags(write=False)
        self.values = values

    @property
    def width(self) -> int:
        return self.values.shape[1]

    @property
    def height(self) -> int:
        return self.values.shape[0]

    @classmethod
    def generate(cls, width: int, height: int, config: NoiseConfig | None = None) -> "NoiseField":
        """Build the field for a ``width`` x ``height`` image."""
        config = config or NoiseConfig()
        process_step(f"Generating {width}x{height} noise field")
        setting_config(
            f"Noise: scale={config.scale}, octaves={config.octaves}, "
            f"persistence={config.persistence:.4f}, lacunarity={config.lacunarity}, seed={config.seed}"
        )

        octaves = int(config.octaves)
        persistence = float(config.persistence)
        lacunarity = float(config.lacunarity)
        base = int(config.seed)
        scale = float(config.scale)

        raw = np.array(
            [
                [
                    pnoise2(
                        x / width * scale,
                        y / height * scale,
                        octaves=octaves,
                        persistence=persistence,
                        lacunarity=lacunarity,
                        base=base,
                    )
                    for x in range(width)
                ]
                for y in range(height)
            ],
            dtype=np.float64,
        ).reshape(height, width)

        levels = np.clip(map_range(raw, -1.0, 1.0, 0.0, 255.0), 0, 255)
        return cls(levels.astype(np.uint8))

    def sample(self, xs, ys) -> np.ndarray:
        """Noise at (xs, ys); coordinates outside the grid clamp to the nearest edge."""
        xs = np.clip(np.asarray(xs, dtype=np.int64), 0, self.width - 1)
        ys = np.clip(np.asarray(ys, dtype=np.int64), 0, self.height - 1)
        return self.values[ys, xs]

    def value_at(self, x: int, y: int) -> int:
        return int(self.sample(x, y))

    def to_image(self) -> np.ndarray:
        """Grayscale grid for previews."""
        return self.values.copy()
