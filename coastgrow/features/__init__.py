from .growth import grow_terrain, grow_image, TerrainResult
