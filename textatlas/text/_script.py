"""
Script detection, based on the Unicode blocks of the code points in a piece of text.
"""

import bisect

from ..utils.enums import Script


# (first, last, script), sorted by first code point
SCRIPT_RANGES = [
    (0x0041, 0x005A, Script.latin),
    (0x0061, 0x007A, Script.latin),
    (0x00AA, 0x00AA, Script.latin),
    (0x00BA, 0x00BA, Script.latin),
    (0x00C0, 0x00D6, Script.latin),
    (0x00D8, 0x00F6, Script.latin),
    (0x00F8, 0x024F, Script.latin),  # Latin-1 supplement, Extended-A and -B
    (0x0250, 0x02AF, Script.latin),  # IPA extensions
    (0x0590, 0x05FF, Script.hebrew),
    (0x0600, 0x06FF, Script.arabic),
    (0x0750, 0x077F, Script.arabic),  # Arabic supplement
    (0x0870, 0x08FF, Script.arabic),  # Arabic extended-B and -A
    (0x0900, 0x097F, Script.devanagari),
    (0x0980, 0x09FF, Script.bengali),
    (0x0E00, 0x0E7F, Script.thai),
    (0x1100, 0x11FF, Script.hangul),  # Hangul jamo
    (0x1E00, 0x1EFF, Script.latin),  # Latin extended additional (Vietnamese)
    (0x2C60, 0x2C7F, Script.latin),
    (0x2E80, 0x2FDF, Script.han),  # CJK radicals
    (0x3005, 0x3007, Script.han),
    (0x3021, 0x3029, Script.han),
    (0x3041, 0x309F, Script.hiragana),
    (0x30A0, 0x30FF, Script.katakana),
    (0x3130, 0x318F, Script.hangul),  # Hangul compatibility jamo
    (0x31F0, 0x31FF, Script.katakana),
    (0x3400, 0x4DBF, Script.han),  # CJK extension A
    (0x4E00, 0x9FFF, Script.han),  # CJK unified ideographs
    (0xA720, 0xA7FF, Script.latin),
    (0xA8E0, 0xA8FF, Script.devanagari),
    (0xAB30, 0xAB6F, Script.latin),
    (0xAC00, 0xD7AF, Script.hangul),  # Hangul syllables
    (0xD7B0, 0xD7FF, Script.hangul),
    (0xF900, 0xFAFF, Script.han),  # CJK compatibility ideographs
    (0xFB00, 0xFB06, Script.latin),
    (0xFB1D, 0xFB4F, Script.hebrew),  # Hebrew presentation forms
    (0xFB50, 0xFDFF, Script.arabic),  # Arabic presentation forms A
    (0xFE70, 0xFEFF, Script.arabic),  # Arabic presentation forms B
    (0xFF21, 0xFF3A, Script.latin),  # Fullwidth Latin
    (0xFF41, 0xFF5A, Script.latin),
    (0xFF66, 0xFF9F, Script.katakana),  # Halfwidth katakana
    (0xFFA0, 0xFFDC, Script.hangul),  # Halfwidth hangul
    (0x20000, 0x2FA1F, Script.han),  # CJK extensions B and up
]

_RANGE_STARTS = [r[0] for r in SCRIPT_RANGES]

# Within these blocks some code points are shared by all scripts (digits,
# punctuation, tatweel, danda); they are treated as common.
COMMON_EXCEPTIONS = {
    0x060C,  # Arabic comma
    0x061B,  # Arabic semicolon
    0x061F,  # Arabic question mark
    0x0640,  # Tatweel
    0x0964,  # Danda
    0x0965,  # Double danda
    0x30FB,  # Katakana middle dot
    0x30FC,  # Prolonged sound mark
}


def get_script(codepoint):
    """Get the Script for a single code point, or None if the code point
    is common to several scripts (digits, punctuation, whitespace, marks
    outside the script blocks, symbols).
    """
    if codepoint in COMMON_EXCEPTIONS:
        return None
    i = bisect.bisect_right(_RANGE_STARTS, codepoint) - 1
    if i >= 0:
        first, last, script = SCRIPT_RANGES[i]
        if codepoint <= last:
            return script
    return None


def detect_script(text):
    """Detect the dominant script of a piece of text.

    Counts the code points per script, and returns the most frequent one.
    Ties go to the script that occurs first. Returns ``Script.common`` when
    the text contains no script-specific characters.
    """
    counts = {}
    for c in text:
        script = get_script(ord(c))
        if script is not None:
            counts[script] = counts.get(script, 0) + 1
    if not counts:
        return Script.common
    # Dicts keep insertion order, and max() returns the first maximum.
    return max(counts, key=counts.get)


def split_by_script(text, start=0, stop=None):
    """Split text[start:stop] into pieces of a single script.

    Yields (start, stop, script) tuples in logical order. Characters common to
    several scripts join the piece before them, or the first piece when the
    text starts with them. A text without any script-specific character is a
    single piece with ``Script.common``.
    """
    if stop is None:
        stop = len(text)
    piece_start = start
    piece_script = None
    for i in range(start, stop):
        script = get_script(ord(text[i]))
        if script is None or script == piece_script:
            continue
        if piece_script is None:
            # Leading common characters belong to the first real script
            piece_script = script
            continue
        yield piece_start, i, piece_script
        piece_start, piece_script = i, script
    if stop > start:
        yield piece_start, stop, piece_script or Script.common
