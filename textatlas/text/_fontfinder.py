"""
Find a default font on the system. We look for font files in the usual
font directories of each OS, and pick the first one from a list of
well-known fonts with a broad Unicode coverage.
"""

import os
import sys

from ..utils import logger


# File names (without extension, lowercase) in order of preference
PREFERRED_FONTS = [
    "notosans-regular",
    "dejavusans",
    "arialuni",
    "arial unicode ms",
    "arial",
    "segoeui",
    "liberationsans-regular",
    "freesans",
    "helvetica",
]

FONT_EXTENSIONS = ".ttf", ".otf", ".ttc"


def find_system_font(preferred=None):
    """Get the filename of a suitable default font, or None.

    The TEXTATLAS_FONT environment variable can point to a font file to
    use instead.
    """
    filename = os.getenv("TEXTATLAS_FONT", "")
    if filename:
        if os.path.isfile(filename):
            return filename
        logger.warning(f"TEXTATLAS_FONT points to a missing file: {filename}")

    preferred = PREFERRED_FONTS if preferred is None else preferred
    found = {}
    for directory in get_system_font_directories():
        for path in find_font_paths(directory):
            name = os.path.splitext(os.path.basename(path))[0].lower()
            found.setdefault(name, path)

    for name in preferred:
        if name in found:
            return found[name]

    # Anything is better than nothing
    for name in sorted(found):
        if found[name].lower().endswith((".ttf", ".otf")):
            return found[name]
    return None


def find_font_paths(directory):
    """Return a sorted list of font files in the directory (recursively)."""
    paths = []
    for dirpath, _, filenames in os.walk(directory):
        for fname in filenames:
            if fname.lower().endswith(FONT_EXTENSIONS):
                paths.append(os.path.join(dirpath, fname))
    return sorted(paths)


# %% OS-specific logic


def get_system_font_directories():
    """Get a list of existing system font directories."""
    # Simple triage, easy to replace in tests.
    if sys.platform.startswith("win"):
        dirs = [os.path.join(os.getenv("WINDIR", ""), "Fonts"), *WinFontDirs]
    elif sys.platform.startswith("darwin"):
        dirs = OSXFontDirectories + X11FontDirectories
    else:
        dirs = X11FontDirectories
    return [os.path.abspath(d) for d in dirs if os.path.isdir(d)]


try:
    HOME = os.path.expanduser("~")
except Exception:  # Exceptions thrown by home() are not specified...
    HOME = "/home"  # Just an arbitrary path

WinFontDirs = [
    os.path.join(os.getenv("LOCALAPPDATA", ""), "Microsoft/Windows/Fonts"),
    os.path.join(os.getenv("APPDATA", ""), "Microsoft/Windows/Fonts"),
]

X11FontDirectories = [
    # here is the standard location for fonts
    "/usr/share/fonts/",
    # documented as a good place to install new fonts
    "/usr/local/share/fonts/",
    # user fonts
    os.path.join(os.getenv("XDG_DATA_HOME") or HOME, ".local/share/fonts"),
    os.path.join(HOME, ".fonts"),
]

OSXFontDirectories = [
    "/Library/Fonts/",
    "/System/Library/Fonts/",
    "/System/Library/Fonts/Supplemental/",
    # user fonts
    os.path.join(HOME, "Library/Fonts"),
]
