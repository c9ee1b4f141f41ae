"""
The text layout engine. This is where the text rendering steps come
together: segmentation, shaping, glyph generation and layout.

The engine owns the atlas and the glyph cache for one font at one size.
Both persist across calls to ``layout()``, so laying out the same text
again (e.g. every frame) does not rasterize anything. New glyphs are
written to the atlas, and the written area is collected in a dirty region,
that the caller uploads to the GPU once per frame with ``upload()`` or
``take_dirty_region()``.

When the atlas is full, it is cleared and glyphs are packed again from
scratch. This costs one extra round of rasterization, but text never fails
to render because of it.
"""

import numpy as np

from ..utils import logger
from ._atlas import AtlasPacker, DEFAULT_ATLAS_SIZE
from ._bidi import BidiSegmenter
from ._errors import AtlasFull, GlyphTooLargeError
from ._glyphcache import GlyphRasterCache
from ._shaper import ScriptShaper


# The dtype for per-instance data, as consumed by an instanced draw call.
INSTANCE_DTYPE = np.dtype(
    [
        ("pos", "f4", 2),
        ("size", "f4", 2),
        ("region", "f4", 4),  # x, y, w, h in normalized texture coords
        ("color", "f4", 4),
    ]
)


def to_rgba(color):
    """Convert a color to an (r, g, b, a) tuple of floats.

    Accepts a tuple of 3 or 4 floats in the range 0..1, or a hex string
    like "#f80", "#ff8800" or "#ff8800aa".
    """
    if isinstance(color, str):
        digits = color.lstrip("#")
        if len(digits) in (3, 4):
            digits = "".join(c + c for c in digits)
        if len(digits) not in (6, 8):
            raise ValueError(f"Invalid color string: '{color}'")
        try:
            values = [int(digits[i : i + 2], 16) / 255 for i in range(0, len(digits), 2)]
        except ValueError:
            raise ValueError(f"Invalid color string: '{color}'") from None
    elif isinstance(color, (tuple, list, np.ndarray)):
        values = [float(v) for v in color]
    else:
        cls = type(color).__name__
        raise TypeError(f"Color must be a str or tuple, not '{cls}'")

    if len(values) == 3:
        values.append(1.0)
    if len(values) != 4:
        raise ValueError(f"Color must have 3 or 4 components, not {len(values)}.")
    if not all(0.0 <= v <= 1.0 for v in values):
        raise ValueError(f"Color components must be between 0 and 1: {color!r}")
    return tuple(values)


class PositionedGlyphInstance:
    """One glyph on screen, ready to be drawn.

    The ``screen_position`` is the top-left corner of the glyph bitmap,
    ``size`` its width and height in pixels, and ``atlas_region_normalized``
    the bitmap's location in the atlas texture, in texture coordinates.
    """

    __slots__ = ["atlas_region_normalized", "color", "screen_position", "size"]

    def __init__(self, screen_position, size, atlas_region_normalized, color):
        self.screen_position = screen_position
        self.size = size
        self.atlas_region_normalized = atlas_region_normalized
        self.color = color

    def __repr__(self):
        x, y = self.screen_position
        return f"<PositionedGlyphInstance at ({x:0.5g}, {y:0.5g})>"

    def __eq__(self, other):
        if not isinstance(other, PositionedGlyphInstance):
            return NotImplemented
        return (
            self.screen_position == other.screen_position
            and self.size == other.size
            and self.atlas_region_normalized == other.atlas_region_normalized
            and self.color == other.color
        )


class LayoutResult:
    """The result of laying out a piece of text.

    The ``line_breaks`` contain, for each paragraph, the range of indices
    into ``instances`` of the glyphs on that line.
    """

    __slots__ = ["instances", "line_breaks"]

    def __init__(self, instances, line_breaks):
        self.instances = instances
        self.line_breaks = line_breaks

    def __repr__(self):
        return f"<LayoutResult with {len(self.instances)} glyphs on {len(self.line_breaks)} lines>"

    def __len__(self):
        return len(self.instances)

    def to_array(self):
        """Get the instances as a structured array with ``INSTANCE_DTYPE``."""
        array = np.zeros((len(self.instances),), INSTANCE_DTYPE)
        for i, instance in enumerate(self.instances):
            array[i] = (
                instance.screen_position,
                instance.size,
                tuple(instance.atlas_region_normalized),
                instance.color,
            )
        return array


class TextLayoutEngine:
    """Lays out text for one font face at one pixel size.

    Parameters:
        face (FontFace): the font to render with.
        size (int): the font size in pixels.
        atlas_size (int): the width and height of the glyph atlas. Default 2096.
        base_direction (str | None): force the paragraph direction to "ltr" or "rtl".

    The engine is not thread-safe; use one engine per thread, or guard it
    with a lock (the ``TextServer`` does the latter).
    """

    def __init__(self, face, size, *, atlas_size=DEFAULT_ATLAS_SIZE, base_direction=None):
        if face is None:
            raise TypeError("A TextLayoutEngine needs a font face.")
        if not isinstance(size, (int, float)) or size <= 0:
            raise ValueError(f"Font size must be a positive number, not {size!r}")
        size = int(round(size))

        self._face = face
        self._size = size
        self._packer = AtlasPacker(atlas_size)
        self._segmenter = BidiSegmenter(base_direction)
        self._shaper = ScriptShaper(face, size)
        self._cache = GlyphRasterCache(face, size, self._packer)
        self._line_metrics = face.get_line_metrics(size)

        # Incremented on every atlas reset
        self._generation = 0

    def __repr__(self):
        return f"<TextLayoutEngine {self._face.name} {self._size}px at {hex(id(self))}>"

    @property
    def face(self):
        """The font face."""
        return self._face

    @property
    def size(self):
        """The font size in pixels."""
        return self._size

    @property
    def cache(self):
        """The current glyph cache. Replaced on each atlas reset."""
        return self._cache

    @property
    def atlas_array(self):
        """The atlas bitmap (read-only)."""
        return self._packer.array

    @property
    def atlas_size(self):
        """The width and height of the atlas texture."""
        return self._packer.size

    @property
    def generation(self):
        """The number of times that the atlas has been reset."""
        return self._generation

    @property
    def dirty_region(self):
        """The atlas region that awaits upload, or None (a copy)."""
        return self._packer.dirty_region

    @property
    def ascender(self):
        """The distance from the top of a line to its baseline, in pixels."""
        return self._line_metrics.ascender

    @property
    def descender(self):
        """The (negative) distance from the baseline to the bottom of a line."""
        return self._line_metrics.descender

    @property
    def line_height(self):
        """The font's native line height, a sensible default line spacing."""
        return self._line_metrics.line_height

    def layout(self, text, line_spacing, origin=(0.0, 0.0), *, color=(1.0, 1.0, 1.0, 1.0), tracking=0.0):
        """Lay out text, and return a LayoutResult.

        Parameters:
            text (str): the text. Each paragraph becomes one line.
            line_spacing (float): the distance between baselines, in pixels.
            origin (tuple): the top-left of the text block, in pixels (y down).
            color (tuple | str): the color of the glyphs.
            tracking (float): extra space between glyphs, in pixels.

        Glyphs that are not in the atlas yet are rasterized and packed.
        """
        if not isinstance(line_spacing, (int, float)):
            cls = type(line_spacing).__name__
            raise TypeError(f"Line spacing must be a number, not '{cls}'")
        x0, y0 = (float(v) for v in origin)
        color = to_rgba(color)

        # Shaping does not depend on the atlas, so it is done once
        paragraphs = []
        for paragraph in self._segmenter.segment(text):
            shaped_runs = []
            for run in paragraph.runs:
                run_text = run.get_text(text)
                glyphs = self._shaper.shape(run_text, run.direction, run.script)
                shaped_runs.append((run_text, glyphs))
            paragraphs.append(shaped_runs)

        generation = self._generation
        result = self._place_glyphs(paragraphs, line_spacing, x0, y0, color, tracking)

        if self._generation != generation:
            # The atlas was reset halfway, so the glyphs placed before the
            # reset refer to regions that are gone. Redo with the fresh atlas.
            generation = self._generation
            result = self._place_glyphs(paragraphs, line_spacing, x0, y0, color, tracking)
            if self._generation != generation:
                logger.warning(
                    f"The text needs more glyphs than fit in the {self.atlas_size}px atlas of "
                    f"{self._face.name} {self._size}px; some glyphs show stale bitmaps."
                )

        return result

    def _place_glyphs(self, paragraphs, line_spacing, x0, y0, color, tracking):
        scale = 1.0 / self._packer.size
        instances = []
        line_breaks = []

        baseline = y0 + self._line_metrics.ascender
        for shaped_runs in paragraphs:
            first = len(instances)
            pen_x = x0
            for run_text, glyphs in shaped_runs:
                for sg in glyphs:
                    source_text = run_text[sg.cluster.start : sg.cluster.stop]
                    glyph = self._get_glyph(sg.glyph_id, source_text)
                    ox, oy = glyph.offset
                    w, h = glyph.bitmap_size
                    position = (pen_x + sg.x_offset + ox, baseline - sg.y_offset + oy)
                    instances.append(
                        PositionedGlyphInstance(
                            position,
                            (float(w), float(h)),
                            glyph.atlas_region.scaled(scale),
                            color,
                        )
                    )
                    pen_x += sg.x_advance + tracking
            line_breaks.append(range(first, len(instances)))
            baseline += line_spacing

        return LayoutResult(instances, line_breaks)

    def _get_glyph(self, glyph_id, source_text):
        try:
            return self._cache.get_or_rasterize(glyph_id, source_text)
        except AtlasFull:
            pass
        self.reset_atlas()
        try:
            return self._cache.get_or_rasterize(glyph_id, source_text)
        except AtlasFull as err:
            raise GlyphTooLargeError(
                f"Glyph {glyph_id} ({source_text!r}) of {self._face.name} {self._size}px "
                f"does not fit in an empty {self.atlas_size}px atlas."
            ) from err

    def reset_atlas(self):
        """Clear the atlas and the glyph cache. The whole atlas is marked dirty."""
        logger.warning(
            f"Glyph atlas of {self._face.name} {self._size}px is full, resetting it."
        )
        self._packer.reset()
        self._cache = GlyphRasterCache(self._face, self._size, self._packer)
        self._generation += 1

    def take_dirty_region(self):
        """Return the atlas region written since the previous call (or None),
        and clear it. The caller must upload exactly this region.
        """
        return self._packer.take_dirty_region()

    def upload(self, sink):
        """Take the dirty region and write it to the given texture sink.

        Returns the uploaded region, or None if nothing changed.
        """
        region = self.take_dirty_region()
        if region is not None:
            sink.write_region(region, self._packer.get_region(region))
        return region
