import os
import threading

from ..utils import logger
from ._errors import FontLoadError
from ._engine import TextLayoutEngine
from ._fontface import FontFace
from ._fontfinder import find_system_font
from ._atlas import DEFAULT_ATLAS_SIZE


DEFAULT_FONT_SIZE = 16


class TextServer:
    """A registry of fonts and layout engines, that can be shared between threads.

    Fonts are registered under a name. The first font that is loaded also
    becomes the "default" font, and when no font is loaded at all, the
    server loads a font from the system on first use. One layout engine
    (with its own atlas) is created per font and size, on demand.

    All methods hold a lock, so the engines are never used concurrently.

    Parameters:
        atlas_size (int): the size of the atlas of each engine.
        default_size (int): the font size to use when none is given.
    """

    def __init__(self, *, atlas_size=DEFAULT_ATLAS_SIZE, default_size=DEFAULT_FONT_SIZE):
        self._lock = threading.RLock()
        self._atlas_size = int(atlas_size)
        self._default_size = int(default_size)
        self._fonts = {}  # name -> FontFace
        self._engines = {}  # (name, size) -> TextLayoutEngine
        self._sinks = {}  # (name, size) -> TextureSink

    def __repr__(self):
        return f"<TextServer with {len(self._fonts)} fonts and {len(self._engines)} engines>"

    @property
    def atlas_size(self):
        return self._atlas_size

    @property
    def default_size(self):
        return self._default_size

    def load_font(self, name, font):
        """Register a font under the given name and return its FontFace.

        The font can be a FontFace, the font data as bytes, or a filename.
        Loading a font under an existing name replaces it, and drops the
        engines of the old font.
        """
        if not isinstance(name, str) or not name:
            raise TypeError("A font name must be a non-empty str.")
        if isinstance(font, FontFace):
            face = font
        elif isinstance(font, (bytes, bytearray, memoryview)):
            face = FontFace(font, name=name)
        elif isinstance(font, (str, os.PathLike)):
            face = FontFace.from_file(font)
        else:
            cls = type(font).__name__
            raise TypeError(f"Cannot load a font from '{cls}'")

        with self._lock:
            if name in self._fonts:
                self._drop_engines(name)
            self._fonts[name] = face
            self._fonts.setdefault("default", face)
        logger.info(f"Registered font {face.name} as '{name}'")
        return face

    def remove_font(self, name):
        """Unregister a font, and drop its engines."""
        with self._lock:
            if name not in self._fonts:
                raise KeyError(f"No font named '{name}'")
            self._fonts.pop(name)
            self._drop_engines(name)

    def get_font(self, name=None):
        """Get the FontFace registered under the given name (default "default")."""
        name = name or "default"
        with self._lock:
            if name == "default" and not self._fonts:
                self._load_system_font()
            try:
                return self._fonts[name]
            except KeyError:
                raise KeyError(f"No font named '{name}'") from None

    def get_fonts(self):
        """Get a dict that maps names to registered fonts."""
        with self._lock:
            return dict(self._fonts)

    def get_engine(self, font=None, size=None):
        """Get the layout engine for the given font name and size, creating it if needed."""
        name = font or "default"
        size = self._default_size if size is None else int(round(size))
        with self._lock:
            key = name, size
            engine = self._engines.get(key)
            if engine is None:
                face = self.get_font(name)
                engine = TextLayoutEngine(face, size, atlas_size=self._atlas_size)
                self._engines[key] = engine
            return engine

    def get_engines(self):
        """Get a dict that maps (font name, size) to the existing engines."""
        with self._lock:
            return dict(self._engines)

    def layout(
        self,
        text,
        *,
        font=None,
        size=None,
        line_spacing=None,
        origin=(0.0, 0.0),
        color=(1.0, 1.0, 1.0, 1.0),
        tracking=0.0,
    ):
        """Lay out text with the given font and size. Returns a LayoutResult.

        The line spacing defaults to the line height of the font.
        """
        with self._lock:
            engine = self.get_engine(font, size)
            if line_spacing is None:
                line_spacing = engine.line_height
            return engine.layout(
                text, line_spacing, origin, color=color, tracking=tracking
            )

    def prepare(self, sink_factory):
        """Upload the dirty regions of all atlases, e.g. once per frame.

        The sink_factory is called as ``sink_factory(engine)`` the first time
        an engine is seen, and must return a TextureSink. Returns a dict that
        maps (font name, size) to the sink of each engine.
        """
        with self._lock:
            for key, engine in self._engines.items():
                sink = self._sinks.get(key)
                if sink is None:
                    sink = self._sinks[key] = sink_factory(engine)
                region = engine.upload(sink)
                if region is not None:
                    logger.debug(f"Uploaded atlas region {region} of {engine}")
            return dict(self._sinks)

    def _drop_engines(self, name):
        for key in [key for key in self._engines if key[0] == name]:
            self._engines.pop(key)
            self._sinks.pop(key, None)

    def _load_system_font(self):
        filename = find_system_font()
        if filename is None:
            raise FontLoadError(
                "No font is loaded and no system font was found. "
                "Use TextServer.load_font() or set TEXTATLAS_FONT."
            )
        self.load_font("default", filename)
