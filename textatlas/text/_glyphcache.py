from ..utils import logger
from ._errors import RasterizeError


class Glyph:
    """A rasterized glyph that lives in the atlas.

    Glyphs are created by the GlyphRasterCache and are not changed afterwards.
    The ``offset`` places the top-left of the bitmap relative to the pen
    position on the baseline, in y-down pixels. The ``bounds`` is the ink box
    relative to the baseline. The ``atlas_region`` is where the bitmap is
    stored in the atlas.
    """

    __slots__ = ["atlas_region", "bitmap_size", "bounds", "glyph_id", "offset", "source_text"]

    def __init__(self, glyph_id, source_text, offset, bitmap_size, bounds, atlas_region):
        self.glyph_id = glyph_id
        self.source_text = source_text
        self.offset = offset
        self.bitmap_size = bitmap_size
        self.bounds = bounds
        self.atlas_region = atlas_region

    def __repr__(self):
        return f"<Glyph {self.glyph_id} {self.source_text!r} at {self.atlas_region}>"


class GlyphRasterCache:
    """Caches the glyphs for one font face at one pixel size.

    On a miss the glyph is rasterized and packed in the atlas, so each glyph
    is rasterized and packed at most once during the lifetime of the cache.
    The cache cannot be invalidated; when the font, the size or the atlas
    changes, a new cache must be created.

    Parameters:
        face (FontFace): the font to rasterize from.
        size (int): the font size in pixels.
        packer (AtlasPacker): the atlas to put the bitmaps in.
    """

    def __init__(self, face, size, packer):
        self._face = face
        self._size = int(size)
        self._packer = packer
        self._glyphs = {}  # (glyph_id, size) -> Glyph
        self._hits = 0
        self._misses = 0

    def __repr__(self):
        return f"<GlyphRasterCache {self._face.name} {self._size}px with {len(self._glyphs)} glyphs>"

    def __len__(self):
        return len(self._glyphs)

    def __contains__(self, glyph_id):
        return (glyph_id, self._size) in self._glyphs

    @property
    def face(self):
        return self._face

    @property
    def size(self):
        return self._size

    @property
    def packer(self):
        return self._packer

    @property
    def hits(self):
        """The number of lookups that found a cached glyph."""
        return self._hits

    @property
    def misses(self):
        """The number of lookups that required rasterization."""
        return self._misses

    def get_or_rasterize(self, glyph_id, source_text=""):
        """Get the Glyph for the given glyph index, rasterizing it if needed.

        Raises AtlasFull if the atlas has no room for a new glyph.
        """
        key = int(glyph_id), self._size
        try:
            glyph = self._glyphs[key]
        except KeyError:
            pass
        else:
            self._hits += 1
            return glyph

        metrics, bitmap = self._rasterize(key[0])
        region = self._packer.pack(bitmap, metrics.width, metrics.height)

        glyph = Glyph(
            key[0],
            source_text,
            (metrics.bitmap_left, -metrics.bitmap_top),
            (metrics.width, metrics.height),
            metrics.bounds,
            region,
        )
        self._glyphs[key] = glyph
        self._misses += 1
        logger.debug(f"Rasterized glyph {key[0]} ({source_text!r}) into {region}")
        return glyph

    def _rasterize(self, glyph_id):
        try:
            return self._face.rasterize(glyph_id, self._size)
        except RasterizeError as err:
            notdef = self._face.notdef_glyph
            if glyph_id == notdef:
                raise
            logger.warning(f"{err} Using the missing glyph instead.")
            return self._face.rasterize(notdef, self._size)
