from . import globals
from .globals import configs, directories
from .globals import GrowConfig, read_config_file, ImageLoadError, ImageWriteError

from .features import grow_terrain, grow_image, TerrainResult

__version__ = "0.1.0"
