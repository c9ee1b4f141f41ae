import numpy as np

from ..utils import logger
from ..utils.rect import Rect
from ._errors import AtlasFull


# Width and height of the atlas, in pixels.
DEFAULT_ATLAS_SIZE = 2096


class AtlasPacker:
    """A fixed-size glyph atlas, filled with shelf packing.

    Bitmaps are placed left-to-right in horizontal shelves. When a bitmap
    does not fit in the remaining width, a new shelf is started below the
    tallest bitmap of the current shelf. Glyphs for one font size have
    similar heights, so this wastes little space and never needs to
    backtrack. Regions never move; the only way to reclaim space is
    ``reset()``, which invalidates all regions at once.

    Every write is merged into a dirty region, which the caller takes with
    ``take_dirty_region()`` and uploads to the GPU.
    """

    def __init__(self, size=DEFAULT_ATLAS_SIZE):
        size = int(size)
        if size <= 0:
            raise ValueError(f"Atlas size must be positive, not {size}.")

        self._array = np.zeros((size, size), np.uint8)

        # Packing cursor
        self._next_x = 0
        self._next_y = 0
        self._row_height = 0

        # Stats
        self._region_count = 0
        self._allocated_area = 0

        self._dirty_region = None

    def __repr__(self):
        return f"<AtlasPacker {self.size}x{self.size} with {self._region_count} regions at {hex(id(self))}>"

    @property
    def size(self):
        """The width and height of the (square) atlas."""
        return self._array.shape[0]

    @property
    def array(self):
        """The atlas bitmap (read-only view). The array object stays the
        same for the lifetime of the packer, also over resets.
        """
        view = self._array.view()
        view.flags.writeable = False
        return view

    @property
    def cursor(self):
        """The packing cursor as (next_x, next_y, row_height)."""
        return self._next_x, self._next_y, self._row_height

    @property
    def region_count(self):
        """The number of regions packed since the last reset."""
        return self._region_count

    @property
    def total_area(self):
        """The total area of the atlas."""
        return self._array.size

    @property
    def allocated_area(self):
        """The sum of the areas of all packed regions."""
        return self._allocated_area

    @property
    def dirty_region(self):
        """The region written since the last take, or None. Returns a copy."""
        if self._dirty_region is None:
            return None
        return Rect(*self._dirty_region)

    def pack(self, bitmap, width, height):
        """Place the bitmap in the atlas and return its region as a Rect.

        Raises AtlasFull when there is no room left.
        """
        width, height = int(width), int(height)
        bitmap = np.asarray(bitmap, np.uint8).reshape(height, width)
        size = self.size

        if width > size:
            raise AtlasFull(f"Bitmap of width {width} does not fit in a {size}px atlas.")

        # Start a new shelf? The cursor only moves once the bitmap fits.
        x, y, row_height = self._next_x, self._next_y, self._row_height
        if x + width > size:
            x, y, row_height = 0, y + row_height, 0

        if y + height > size:
            raise AtlasFull(
                f"No room for a {width}x{height} bitmap at row {y} of a {size}px atlas."
            )

        self._next_x, self._next_y, self._row_height = x, y, row_height
        region = Rect(x, y, width, height)

        if width and height:
            self._array[y : y + height, x : x + width] = bitmap
            if self._dirty_region is None:
                self._dirty_region = Rect(*region)
            else:
                self._dirty_region = self._dirty_region.union(region)

        self._next_x += width
        self._row_height = max(self._row_height, height)

        # Bookkeeping
        self._region_count += 1
        self._allocated_area += width * height

        return region

    def get_region(self, region):
        """Return a copy of the atlas data in the given region."""
        x, y, w, h = region
        return self._array[y : y + h, x : x + w].copy()

    def take_dirty_region(self):
        """Return the region written since the previous call (or None), and clear it."""
        region = self._dirty_region
        self._dirty_region = None
        return region

    def reset(self):
        """Clear the atlas. All previously returned regions become invalid,
        and the whole atlas is marked dirty.
        """
        logger.debug(f"Resetting {self.size}px atlas with {self._region_count} regions")
        # Clear in-place, so that views of the array remain valid.
        self._array.fill(0)
        self._next_x = self._next_y = self._row_height = 0
        self._region_count = 0
        self._allocated_area = 0
        self._dirty_region = Rect(0, 0, self.size, self.size)
