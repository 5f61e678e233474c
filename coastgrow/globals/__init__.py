from . import directories
from . import configs
from . import image_utility
from .image_utility import load_image, write_image, ImageLoadError, ImageWriteError
from .logutil import Logger, info, process_step, warn, error, success, setting_config
from .config_models import GrowConfig, NoiseConfig, SpurConfig, Palette, read_config_file
