"""
The enums used in textatlas. The enums are all available from the root ``textatlas`` namespace.

.. currentmodule:: textatlas.utils.enums

.. autosummary::
    :toctree: utils/enums

    Direction
    Script

"""

from wgpu.utils import BaseEnum


__all__ = [
    "Direction",
    "Script",
]


class Enum(BaseEnum):
    """Enum base class for textatlas."""


class Direction(Enum):
    """Enum that defines the resolved reading direction of a text run."""

    ltr = None  #: left to right.
    rtl = None  #: right to left.


class Script(Enum):
    """Enum for the scripts that the shaper distinguishes. The values are ISO 15924 tags, as used by HarfBuzz."""

    latin = "Latn"
    arabic = "Arab"
    hebrew = "Hebr"
    han = "Hani"
    hiragana = "Hira"
    katakana = "Kana"
    hangul = "Hang"
    bengali = "Beng"
    thai = "Thai"
    devanagari = "Deva"
    common = "Zyyy"  #: no script-specific characters; shaped as Latin.
