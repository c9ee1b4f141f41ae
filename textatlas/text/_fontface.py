"""
The font face: rasterization with FreeType and shaping with Harfbuzz.

Both libraries get their own object for the same font data. Each call sets
the pixel size it needs, so results only depend on the arguments.

Relevant links:
* https://harfbuzz.github.io/
* https://freetype.org/freetype2/docs/glyphs/glyphs-3.html

"""

import io
import time

import freetype
import uharfbuzz
import numpy as np

from ..utils import logger
from ..utils.rect import Rect
from ..utils.enums import Direction, Script
from ._errors import FontLoadError, RasterizeError, ShapingError


# The glyph that fonts use for characters they do not support (the "tofu").
NOTDEF_GLYPH = 0

# Harfbuzz positions are requested in 26.6 fixed point, like FreeType uses.
SUBPIXELS = 64


class GlyphMetrics:
    """The metrics of a rasterized glyph, in pixels.

    The bitmap_left and bitmap_top place the top-left corner of the bitmap
    relative to the pen position on the baseline (y up, as in FreeType).
    The bounds are the ink box relative to the baseline, in y-down coordinates.
    """

    __slots__ = ["bitmap_left", "bitmap_top", "bounds", "height", "width"]

    def __init__(self, width, height, bitmap_left, bitmap_top, bounds):
        self.width = width
        self.height = height
        self.bitmap_left = bitmap_left
        self.bitmap_top = bitmap_top
        self.bounds = bounds

    def __repr__(self):
        return f"<GlyphMetrics {self.width}x{self.height} at ({self.bitmap_left}, {self.bitmap_top})>"


class LineMetrics:
    """Vertical font metrics for a given pixel size. The descender is negative."""

    __slots__ = ["ascender", "descender", "line_gap"]

    def __init__(self, ascender, descender, line_gap):
        self.ascender = ascender
        self.descender = descender
        self.line_gap = line_gap

    @property
    def line_height(self):
        """The font's native distance between baselines."""
        return self.ascender - self.descender + self.line_gap


class FontFace:
    """A font loaded from bytes, that can rasterize and shape.

    Parameters:
        data (bytes): the contents of a TrueType or OpenType font file.
        index (int): the face index, for font collections (.ttc).
        name (str): a name used in log messages. Default is the family name.

    Raises FontLoadError if the data is not a valid font.
    """

    def __init__(self, data, index=0, *, name=None):
        if not isinstance(data, (bytes, bytearray, memoryview)):
            cls = type(data).__name__
            raise TypeError(f"FontFace expects bytes, not '{cls}'")
        data = bytes(data)
        if not data:
            raise FontLoadError("Cannot load a font from empty data.")

        t0 = time.perf_counter()

        try:
            self._ft_face = freetype.Face(io.BytesIO(data), index)
        except freetype.FT_Exception as err:
            raise FontLoadError(f"Invalid font data: {err}") from None

        blob = uharfbuzz.Blob(data)
        self._hb_face = uharfbuzz.Face(blob, index)
        self._hb_font = uharfbuzz.Font(self._hb_face)
        self._hb_scale = None

        self._ft_size = None
        self._data = data
        self._index = index

        if name is None:
            family = self._ft_face.family_name
            name = family.decode(errors="replace") if family else "unnamed"
        self._name = name

        dt = time.perf_counter() - t0
        logger.info(f"Loading font {self._name} took {1000 * dt:0.1f} ms")

    @classmethod
    def from_file(cls, filename, index=0):
        """Load a font face from a file."""
        try:
            with open(filename, "rb") as f:
                data = f.read()
        except OSError as err:
            raise FontLoadError(f"Cannot read font file {filename!r}: {err}") from None
        return cls(data, index)

    def __repr__(self):
        return f"<FontFace {self._name} at {hex(id(self))}>"

    @property
    def name(self):
        """The name of the font, for display purposes."""
        return self._name

    @property
    def data(self):
        """The raw font bytes."""
        return self._data

    @property
    def glyph_count(self):
        """The number of glyphs in the font."""
        return self._ft_face.num_glyphs

    @property
    def notdef_glyph(self):
        """The index of the glyph used for unsupported characters."""
        return NOTDEF_GLYPH

    def _set_ft_size(self, size):
        if size != self._ft_size:
            try:
                self._ft_face.set_pixel_sizes(0, size)
            except freetype.FT_Exception as err:
                raise RasterizeError(f"Font {self._name} cannot be set to {size}px: {err}") from None
            self._ft_size = size

    def _set_hb_size(self, size):
        if size != self._hb_scale:
            self._hb_font.scale = size * SUBPIXELS, size * SUBPIXELS
            self._hb_scale = size

    def get_line_metrics(self, size):
        """Get the LineMetrics for the given pixel size."""
        self._set_hb_size(size)
        ext = self._hb_font.get_font_extents("ltr")
        return LineMetrics(
            ext.ascender / SUBPIXELS,
            ext.descender / SUBPIXELS,
            ext.line_gap / SUBPIXELS,
        )

    def rasterize(self, glyph_id, size):
        """Rasterize a glyph at the given pixel size.

        Returns (metrics, bitmap), where bitmap is a uint8 array of shape (height, width).
        Raises RasterizeError if FreeType cannot render the glyph.
        """
        glyph_id = int(glyph_id)
        if not 0 <= glyph_id < self._ft_face.num_glyphs:
            raise RasterizeError(f"Font {self._name} has no glyph {glyph_id}.")

        self._set_ft_size(size)
        face = self._ft_face
        try:
            face.load_glyph(glyph_id, freetype.FT_LOAD_DEFAULT)
            face.glyph.render(freetype.FT_RENDER_MODE_NORMAL)
        except freetype.FT_Exception as err:
            raise RasterizeError(f"Cannot rasterize glyph {glyph_id} of {self._name}: {err}") from None

        # The buffer may have padding at the end of each row
        bitmap = face.glyph.bitmap
        rows, width, pitch = bitmap.rows, bitmap.width, abs(bitmap.pitch)
        if rows and width:
            array = np.array(bitmap.buffer, np.uint8).reshape(rows, pitch)[:, :width]
            array = np.ascontiguousarray(array)
        else:
            array = np.zeros((rows, width), np.uint8)

        m = face.glyph.metrics
        bounds = Rect(
            m.horiBearingX / SUBPIXELS,
            -m.horiBearingY / SUBPIXELS,
            m.width / SUBPIXELS,
            m.height / SUBPIXELS,
        )
        metrics = GlyphMetrics(
            width,
            rows,
            face.glyph.bitmap_left,
            face.glyph.bitmap_top,
            bounds,
        )
        return metrics, array

    def shape(self, text, script, direction, size):
        """Shape text with Harfbuzz, using an explicit script and direction.

        Returns a list of (glyph_id, cluster, x_advance, x_offset, y_offset)
        tuples in visual order. The cluster is the index of the first code point
        in text that the glyph represents. Distances are in pixels.
        """
        if script == Script.common:
            script = Script.latin
        if direction not in (Direction.ltr, Direction.rtl):
            raise ValueError(f"Invalid direction: {direction!r}")

        buf = uharfbuzz.Buffer()
        # Adding code points makes the clusters index into the str
        buf.add_codepoints([ord(c) for c in text])
        buf.direction = direction
        buf.script = script
        buf.guess_segment_properties()

        self._set_hb_size(size)
        try:
            uharfbuzz.shape(self._hb_font, buf)
        except Exception as err:
            raise ShapingError(f"Cannot shape {text!r} with {self._name}: {err}") from None

        result = []
        for info, pos in zip(buf.glyph_infos, buf.glyph_positions):
            result.append(
                (
                    info.codepoint,
                    info.cluster,
                    int(round(pos.x_advance / SUBPIXELS)),
                    pos.x_offset / SUBPIXELS,
                    pos.y_offset / SUBPIXELS,
                )
            )
        return result
