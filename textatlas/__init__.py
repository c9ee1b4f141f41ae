"""Text layout and glyph atlas management for wgpu renderers."""

# ruff: noqa: F401, F403

from . import utils
from .utils import enums, logger, Rect
from .utils.enums import *

from .text import *


__version__ = "0.1.0"
version_info = tuple(map(int, __version__.split(".")))

__wgpu_version_range__ = "0.19.0", "1.0.0"
