"""
Utility functions for textatlas.

.. currentmodule:: textatlas.utils

.. autosummary::
    :toctree: utils/

    rect.Rect
    enums

"""

import os
import logging

from .rect import Rect  # noqa: F401
from . import enums  # noqa: F401


logger = logging.getLogger("textatlas")


def _set_log_level():
    # Set default level
    logger.setLevel(logging.WARN)
    # Set user-specified level
    level = os.getenv("TEXTATLAS_LOG_LEVEL", "")
    if level:
        try:
            if level.isnumeric():
                logger.setLevel(int(level))
            else:
                logger.setLevel(level.upper())
        except Exception:
            logger.warning(f"Invalid textatlas log level: {level}")


_set_log_level()
