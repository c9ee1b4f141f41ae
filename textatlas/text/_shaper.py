"""
Text shaping: turning a run of text into glyphs with advances.

The actual shaping is done by the font face (Harfbuzz). This module adds
the bookkeeping: it converts Harfbuzz clusters into ranges that partition
the run, and reports characters that the font cannot render.
"""

from ..utils import logger
from ..utils.enums import Direction
from ._script import detect_script


class ShapedGlyph:
    """A glyph produced by shaping.

    The ``cluster`` is the range of code point indices (relative to the run
    text) that this glyph represents. Distances are in pixels.
    """

    __slots__ = ["cluster", "glyph_id", "x_advance", "x_offset", "y_offset"]

    def __init__(self, glyph_id, cluster, x_advance, x_offset=0.0, y_offset=0.0):
        self.glyph_id = glyph_id
        self.cluster = cluster
        self.x_advance = x_advance
        self.x_offset = x_offset
        self.y_offset = y_offset

    def __repr__(self):
        c = self.cluster
        return f"<ShapedGlyph {self.glyph_id} for {c.start}:{c.stop} adv {self.x_advance}>"

    def __eq__(self, other):
        if not isinstance(other, ShapedGlyph):
            return NotImplemented
        return (
            self.glyph_id == other.glyph_id
            and self.cluster == other.cluster
            and self.x_advance == other.x_advance
            and self.x_offset == other.x_offset
            and self.y_offset == other.y_offset
        )


def clusters_to_ranges(cluster_starts, length, direction):
    """Convert per-glyph cluster start indices to ranges.

    The glyphs are in visual order. For LTR text the clusters increase, and
    each glyph's range ends where the next glyph's cluster starts, with the
    end of the run as a sentinel after the last glyph. For RTL text the
    clusters decrease, so the sentinel goes before the first glyph and each
    glyph ends where the previous glyph's cluster starts.

    When multiple glyphs share a cluster, only one of them gets the full
    range and the others get an empty range, so that ranges never overlap.
    """
    n = len(cluster_starts)
    if direction == Direction.rtl:
        boundaries = [length] + list(cluster_starts)
        ends = boundaries[:n]
    else:
        boundaries = list(cluster_starts) + [length]
        ends = boundaries[1:]
    ranges = []
    for start, end in zip(cluster_starts, ends):
        ranges.append(range(start, max(start, end)))
    return ranges


class ScriptShaper:
    """Shapes runs of text for one font face and pixel size.

    Parameters:
        face (FontFace): the font to shape with.
        size (int): the font size in pixels.
    """

    def __init__(self, face, size):
        self._face = face
        self._size = int(size)
        self._warned_for_codepoints = set()

    @property
    def face(self):
        return self._face

    @property
    def size(self):
        return self._size

    def shape(self, text, direction, script=None):
        """Shape a run of text. Returns a list of ShapedGlyph objects in visual order.

        When no script is given, the dominant script of the text is used.
        Characters that the font does not support are represented by the
        font's notdef glyph.
        """
        if not text:
            return []
        if script is None:
            script = detect_script(text)

        raw = self._face.shape(text, script, direction, self._size)

        ranges = clusters_to_ranges([r[1] for r in raw], len(text), direction)
        glyphs = []
        missing = []
        notdef = self._face.notdef_glyph
        for (glyph_id, _, x_advance, x_offset, y_offset), cluster in zip(raw, ranges):
            if glyph_id == notdef:
                missing.append(text[cluster.start : cluster.stop])
            glyphs.append(ShapedGlyph(glyph_id, cluster, x_advance, x_offset, y_offset))

        if missing:
            self._warn_for_missing(missing)

        return glyphs

    def _warn_for_missing(self, failed_texts):
        codepoints = {ord(c) for c in "".join(failed_texts)}
        if any(cp not in self._warned_for_codepoints for cp in codepoints):
            self._warned_for_codepoints.update(codepoints)
            logger.warning(
                f"Font {self._face.name} cannot render chars '{' '.join(failed_texts)}', using its missing glyph."
            )
