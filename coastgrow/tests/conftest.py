import cv2
import numpy as np
import pytest

from coastgrow.features.growth.noise_field import NoiseField


def rgba_from_mask(mask: np.ndarray) -> np.ndarray:
    """Opaque black where mask is True, transparent elsewhere."""
    grid = np.zeros(mask.shape + (4,), dtype=np.uint8)
    grid[mask, 3] = 255
    return grid


@pytest.fixture
def single_pixel_mask():
    mask = np.zeros((5, 5), dtype=bool)
    mask[2, 2] = True
    return mask


@pytest.fixture
def random_mask():
    rng = np.random.default_rng(7)
    return rng.random((16, 12)) < 0.35


@pytest.fixture
def coastline_mask():
    """1px circle outline, the kind of sparse coastline the tool is fed."""
    u8 = np.zeros((40, 40), dtype=np.uint8)
    cv2.circle(u8, (20, 20), 12, 255, 1)
    return u8 > 0


@pytest.fixture
def open_noise():
    """Noise that passes every gate step."""
    return NoiseField(np.zeros((64, 64), dtype=np.uint8))


@pytest.fixture
def closed_noise():
    """Noise that fails every gate step (threshold tops out at 254)."""
    return NoiseField(np.full((64, 64), 255, dtype=np.uint8))
