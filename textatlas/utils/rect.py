class Rect:
    """An axis-aligned rectangle, with the origin at the top-left (y points down).

    Used both for integer pixel rectangles (atlas regions, dirty regions) and
    for float rectangles (glyph bounds, normalized texture coordinates).
    """

    __slots__ = ["height", "width", "x", "y"]

    def __init__(self, x=0, y=0, width=0, height=0):
        if width < 0 or height < 0:
            raise ValueError("Rect width and height must not be negative.")
        self.x = x
        self.y = y
        self.width = width
        self.height = height

    def __repr__(self):
        return f"<Rect({self.x:0.5g}, {self.y:0.5g}, {self.width:0.5g}, {self.height:0.5g})>"

    def __eq__(self, other):
        if not isinstance(other, Rect):
            return NotImplemented
        return tuple(self) == tuple(other)

    def __hash__(self):
        return hash(tuple(self))

    def __iter__(self):
        return iter((self.x, self.y, self.width, self.height))

    @property
    def right(self):
        return self.x + self.width

    @property
    def bottom(self):
        return self.y + self.height

    @property
    def area(self):
        return self.width * self.height

    @property
    def is_empty(self):
        """Whether the rect covers no pixels at all."""
        return self.width <= 0 or self.height <= 0

    def union(self, other):
        """Get the smallest rect that contains both rects. Empty rects are ignored."""
        if other is None or other.is_empty:
            return Rect(*self)
        if self.is_empty:
            return Rect(*other)
        x1 = min(self.x, other.x)
        y1 = min(self.y, other.y)
        x2 = max(self.right, other.right)
        y2 = max(self.bottom, other.bottom)
        return Rect(x1, y1, x2 - x1, y2 - y1)

    def intersects(self, other):
        """Whether the two rects share at least one pixel."""
        if self.is_empty or other.is_empty:
            return False
        return (
            self.x < other.right
            and other.x < self.right
            and self.y < other.bottom
            and other.y < self.bottom
        )

    def contains(self, other):
        """Whether the other rect lies fully inside this rect."""
        return (
            self.x <= other.x
            and self.y <= other.y
            and other.right <= self.right
            and other.bottom <= self.bottom
        )

    def scaled(self, factor):
        """Get a new float rect with all components multiplied by factor."""
        return Rect(
            self.x * factor,
            self.y * factor,
            self.width * factor,
            self.height * factor,
        )
