"""
The stages of text rendering:

* Segmentation: split text in paragraphs, and paragraphs in runs of a
  single direction and script (``BidiSegmenter``).
* Shaping: convert a run into glyphs with advances (``ScriptShaper``).
* Glyph generation: rasterize glyphs into the atlas (``GlyphRasterCache``
  and ``AtlasPacker``).
* Layout: position the glyphs on screen (``TextLayoutEngine``).
* Upload: copy the changed part of the atlas to a texture (``TextureSink``).

The ``TextServer`` manages fonts and one layout engine per font and size.
"""

from ._errors import (  # noqa: F401
    TextError,
    AtlasFull,
    GlyphTooLargeError,
    FontLoadError,
    RasterizeError,
    ShapingError,
)
from ._atlas import AtlasPacker, DEFAULT_ATLAS_SIZE  # noqa: F401
from ._fontface import FontFace, GlyphMetrics, LineMetrics  # noqa: F401
from ._fontfinder import find_system_font  # noqa: F401
from ._script import detect_script, get_script, split_by_script  # noqa: F401
from ._bidi import BidiSegmenter, Paragraph, TextRun, segment  # noqa: F401
from ._shaper import ScriptShaper, ShapedGlyph  # noqa: F401
from ._glyphcache import Glyph, GlyphRasterCache  # noqa: F401
from ._engine import (  # noqa: F401
    INSTANCE_DTYPE,
    LayoutResult,
    PositionedGlyphInstance,
    TextLayoutEngine,
)
from ._sink import (  # noqa: F401
    TextureSink,
    ArrayTextureSink,
    WgpuTextureSink,
    create_atlas_texture,
)
from ._server import TextServer  # noqa: F401
