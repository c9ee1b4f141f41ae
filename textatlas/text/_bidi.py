"""
Bidirectional segmentation: split text in paragraphs, and each paragraph in
runs of a single direction and script, ordered for display.

The embedding levels are resolved with python-bidi, which follows the
Unicode Bidirectional Algorithm (https://unicode.org/reports/tr9/). The
paragraph split (P1), line-level whitespace reset (L1) and the reordering of
runs (L2) are done here, because python-bidi does these per character and
we need them per run.
"""

import unicodedata

from bidi.algorithm import (
    get_empty_storage,
    get_base_level,
    get_embedding_levels,
    explicit_embed_and_overrides,
    resolve_weak_types,
    resolve_neutral_types,
    resolve_implicit_levels,
)

from ..utils.enums import Direction
from ._script import split_by_script


# Bidi classes that are reset to the paragraph level by rule L1, when at
# the end of a line or before a separator.
L1_TRAILING_TYPES = {"WS", "FSI", "LRI", "RLI", "PDI", "BN", "LRE", "RLE", "LRO", "RLO", "PDF"}

# python-bidi does not implement isolates; they are resolved as neutrals.
ISOLATE_TYPES = {"LRI", "RLI", "FSI", "PDI"}

# Default bidi class of unassigned code points in right-to-left blocks.
# Everything else defaults to L.
DEFAULT_RTL_RANGES = [
    (0x0590, 0x05FF, "R"),
    (0x0600, 0x07BF, "AL"),
    (0x07C0, 0x085F, "R"),
    (0x0860, 0x08FF, "AL"),
    (0xFB1D, 0xFB4F, "R"),
    (0xFB50, 0xFDCF, "AL"),
    (0xFDF0, 0xFDFF, "AL"),
    (0xFE70, 0xFEFF, "AL"),
    (0x10800, 0x10CFF, "R"),
    (0x10D00, 0x10D3F, "AL"),
    (0x10D40, 0x10EBF, "R"),
    (0x10EC0, 0x10EFF, "AL"),
    (0x10F00, 0x10F2F, "R"),
    (0x10F30, 0x10F6F, "AL"),
    (0x10F70, 0x10FFF, "R"),
    (0x1E800, 0x1EC6F, "R"),
    (0x1EC70, 0x1ECBF, "AL"),
    (0x1ECC0, 0x1ECFF, "R"),
    (0x1ED00, 0x1ED4F, "AL"),
    (0x1ED50, 0x1EDFF, "R"),
    (0x1EE00, 0x1EEFF, "AL"),
    (0x1EF00, 0x1EFFF, "R"),
]


def get_default_bidi_class(codepoint):
    """Get the bidi class of an unassigned code point."""
    for first, last, bidi_class in DEFAULT_RTL_RANGES:
        if first <= codepoint <= last:
            return bidi_class
    return "L"


class TextRun:
    """A piece of a paragraph with a single resolved direction and script.

    The ``range`` indexes into the full text that was segmented.
    """

    __slots__ = ["direction", "level", "script", "start", "stop"]

    def __init__(self, start, stop, level, script):
        self.start = start
        self.stop = stop
        self.level = level
        self.direction = Direction.rtl if level % 2 else Direction.ltr
        self.script = script

    def __repr__(self):
        return f"<TextRun {self.start}:{self.stop} {self.direction} {self.script}>"

    @property
    def range(self):
        """The range of code point indices of this run."""
        return range(self.start, self.stop)

    def get_text(self, text):
        """Get the substring for this run from the segmented text."""
        return text[self.start : self.stop]


class Paragraph:
    """A paragraph of text, with its runs in visual order.

    The ``range`` includes the paragraph separator (if any), the runs don't.
    """

    __slots__ = ["level", "runs", "start", "stop"]

    def __init__(self, start, stop, level, runs):
        self.start = start
        self.stop = stop
        self.level = level
        self.runs = runs

    def __repr__(self):
        return f"<Paragraph {self.start}:{self.stop} with {len(self.runs)} runs>"

    @property
    def range(self):
        return range(self.start, self.stop)

    @property
    def direction(self):
        """The base direction of the paragraph."""
        return Direction.rtl if self.level % 2 else Direction.ltr


def split_paragraphs(text):
    """Split text at paragraph separators (bidi class B).

    Yields (start, content_stop, stop) tuples, where content_stop excludes
    the separator. A CR LF pair is a single separator. No empty paragraph is
    produced after a final separator.
    """
    start = i = 0
    n = len(text)
    while i < n:
        c = text[i]
        if unicodedata.bidirectional(c) == "B":
            content_stop = i
            if c == "\r" and i + 1 < n and text[i + 1] == "\n":
                i += 1
            yield start, content_stop, i + 1
            start = i + 1
        i += 1
    if start < n:
        yield start, n, n


def resolve_levels(text, base_level):
    """Get the resolved embedding level for each character of a single
    paragraph (without separator). Returns a list of ints.
    """
    if not text:
        return []

    storage = get_empty_storage()
    storage["base_level"] = base_level
    storage["base_dir"] = ("L", "R")[base_level]

    get_embedding_levels(text, storage, False, False)
    chars = list(storage["chars"])

    # The class of each character as Unicode defines it, for rule L1
    classes = [ch["orig"] for ch in chars]

    # Give every character a class that python-bidi can resolve
    for ch in chars:
        if not ch["type"]:
            bidi_class = get_default_bidi_class(ord(ch["ch"]))
        elif ch["type"] in ISOLATE_TYPES:
            bidi_class = "ON"
        else:
            continue
        ch["type"] = ch["orig"] = bidi_class

    explicit_embed_and_overrides(storage, False)
    resolve_weak_types(storage, False)
    resolve_neutral_types(storage, False)
    resolve_implicit_levels(storage, False)

    # Characters removed by rule X9 don't get a level. They take the level
    # of the character before them, so that they do not break up runs.
    kept = {id(ch) for ch in storage["chars"]}
    levels = [ch["level"] if id(ch) in kept else None for ch in chars]
    fill = next((level for level in levels if level is not None), base_level)
    for i, level in enumerate(levels):
        if level is None:
            levels[i] = fill
        else:
            fill = level

    # L1: segment separators, and whitespace before them or at the end of
    # the line, go back to the paragraph level.
    reset = True
    for i in range(len(chars) - 1, -1, -1):
        bidi_class = classes[i]
        if bidi_class in ("S", "B"):
            levels[i] = base_level
            reset = True
        elif reset and bidi_class in L1_TRAILING_TYPES:
            levels[i] = base_level
        else:
            reset = False

    return levels


def get_level_runs(levels, offset=0):
    """Get the maximal runs of equal level as (start, stop, level) tuples."""
    runs = []
    start = 0
    for i in range(1, len(levels) + 1):
        if i == len(levels) or levels[i] != levels[start]:
            runs.append((offset + start, offset + i, levels[start]))
            start = i
    return runs


def reorder_runs(runs):
    """Put level runs in visual order (rule L2).

    From the highest level down to the lowest odd level, every maximal
    sequence of runs at that level or higher is reversed.
    """
    if not runs:
        return []
    levels = [run[2] for run in runs]
    highest = max(levels)
    lowest_odd = min(level | 1 for level in levels)
    order = list(range(len(runs)))
    for level in range(highest, lowest_odd - 1, -1):
        i = 0
        while i < len(order):
            if levels[order[i]] >= level:
                j = i
                while j < len(order) and levels[order[j]] >= level:
                    j += 1
                order[i:j] = order[i:j][::-1]
                i = j
            else:
                i += 1
    return [runs[i] for i in order]


class BidiSegmenter:
    """Segments text into paragraphs of visually ordered runs.

    Parameters:
        base_direction (str | None): force the paragraph direction to "ltr"
            or "rtl". By default it is derived from the first strong character
            of each paragraph.
    """

    def __init__(self, base_direction=None):
        if base_direction is not None and base_direction not in Direction:
            raise ValueError(f"Invalid base direction: {base_direction!r}")
        self._base_direction = base_direction

    @property
    def base_direction(self):
        return self._base_direction

    def segment(self, text):
        """Segment the text. Returns a list of Paragraph objects."""
        if not isinstance(text, str):
            cls = type(text).__name__
            raise TypeError(f"Text must be str, not '{cls}'")

        paragraphs = []
        for start, content_stop, stop in split_paragraphs(text):
            content = text[start:content_stop]

            if self._base_direction is None:
                base_level = get_base_level(content) if content else 0
            else:
                base_level = int(self._base_direction == Direction.rtl)

            levels = resolve_levels(content, base_level)
            level_runs = reorder_runs(get_level_runs(levels, start))

            runs = []
            for run_start, run_stop, level in level_runs:
                pieces = [
                    TextRun(a, b, level, script)
                    for a, b, script in split_by_script(text, run_start, run_stop)
                ]
                if level % 2:
                    pieces.reverse()
                runs.extend(pieces)

            paragraphs.append(Paragraph(start, stop, base_level, runs))

        return paragraphs


def segment(text, base_direction=None):
    """Segment text into paragraphs of visually ordered runs."""
    return BidiSegmenter(base_direction).segment(text)
