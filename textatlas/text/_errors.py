class TextError(Exception):
    """Base class for errors raised by the text subsystem."""


class AtlasFull(TextError):
    """The atlas has no room left for a bitmap of the requested size."""


class GlyphTooLargeError(AtlasFull):
    """A single glyph bitmap does not fit in an empty atlas."""


class FontLoadError(TextError):
    """The font data could not be loaded."""


class RasterizeError(TextError):
    """The font face failed to produce a bitmap for a glyph."""


class ShapingError(TextError):
    """The font face failed to shape a piece of text."""
