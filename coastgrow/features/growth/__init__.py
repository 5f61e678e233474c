from .neighbors import (is_empty,
                        pixel_at,
                        occupancy,
                        find_neighbors,
                        neighbor_counts,
                        neighbor_table,
                        NEIGHBOR_OFFSETS)
from .directions import derive_tangent, unit_normals, derive_tangents, derive_normals
from .noise_field import NoiseField
from .spurs import spur_lengths, grow_from_normal, grow_spurs
from .morphology import dilate, erode, clean_mask
from .classify import classify, colorize, to_binary_image, WATER, SAND, LAND
from .pipeline import grow_terrain, grow_image, TerrainResult

__all__ = [
    "is_empty",
    "pixel_at",
    "occupancy",
    "find_neighbors",
    "neighbor_counts",
    "neighbor_table",
    "NEIGHBOR_OFFSETS",
    "derive_tangent",
    "unit_normals",
    "derive_tangents",
    "derive_normals",
    "NoiseField",
    "spur_lengths",
    "grow_from_normal",
    "grow_spurs",
    "dilate",
    "erode",
    "clean_mask",
    "classify",
    "colorize",
    "to_binary_image",
    "WATER",
    "SAND",
    "LAND",
    "grow_terrain",
    "grow_image",
    "TerrainResult",
]
