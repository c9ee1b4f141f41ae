import numpy as np

from textatlas.text import AtlasPacker, AtlasFull, DEFAULT_ATLAS_SIZE
from textatlas.utils import Rect

from pytest import raises


def bitmap(w, h, value=1):
    return np.full((h, w), value, np.uint8)


def test_atlas_init():
    atlas = AtlasPacker()
    assert atlas.size == DEFAULT_ATLAS_SIZE
    assert atlas.array.shape == (DEFAULT_ATLAS_SIZE, DEFAULT_ATLAS_SIZE)
    assert atlas.array.dtype == np.uint8
    assert atlas.total_area == DEFAULT_ATLAS_SIZE**2
    assert atlas.allocated_area == 0
    assert atlas.region_count == 0
    assert atlas.cursor == (0, 0, 0)
    assert atlas.dirty_region is None

    with raises(ValueError):
        AtlasPacker(0)


def test_atlas_array_is_readonly():
    atlas = AtlasPacker(16)
    with raises(ValueError):
        atlas.array[0, 0] = 1


def test_shelf_packing_same_width():
    # Two glyphs per shelf; the second shelf starts below the first one
    atlas = AtlasPacker(100)
    heights = [10, 10, 20, 10]
    regions = [atlas.pack(bitmap(40, h), 40, h) for h in heights]

    assert [r.x for r in regions] == [0, 40, 0, 40]
    assert [r.y for r in regions] == [0, 0, 10, 10]
    assert atlas.cursor == (80, 10, 20)


def test_shelf_packing_tall_glyph_on_first_shelf():
    # Three glyphs on the first shelf, the tallest sets the row height
    atlas = AtlasPacker(100)
    heights = [10, 10, 20, 10]
    regions = [atlas.pack(bitmap(30, h), 30, h) for h in heights]

    assert [r.x for r in regions] == [0, 30, 60, 0]
    assert [r.y for r in regions] == [0, 0, 0, 20]
    assert regions[2] == Rect(60, 0, 30, 20)


def test_shelf_packing_is_deterministic():
    sizes = [(np.random.randint(1, 20), np.random.randint(1, 20)) for _ in range(100)]

    def run():
        atlas = AtlasPacker(256)
        return [tuple(atlas.pack(bitmap(w, h), w, h)) for w, h in sizes]

    assert run() == run()


def test_atlas_no_overlap():
    atlas = AtlasPacker(256)
    regions = []
    while True:
        w, h = np.random.randint(1, 30), np.random.randint(1, 30)
        try:
            regions.append(atlas.pack(bitmap(w, h, len(regions) % 250 + 1), w, h))
        except AtlasFull:
            break

    assert len(regions) > 50
    full = Rect(0, 0, 256, 256)
    for i, r1 in enumerate(regions):
        assert full.contains(r1)
        for r2 in regions[i + 1 :]:
            assert not r1.intersects(r2)

    # Each region still holds its own bitmap
    for i, r in enumerate(regions):
        assert np.all(atlas.get_region(r) == i % 250 + 1)

    assert atlas.region_count == len(regions)
    assert atlas.allocated_area == sum(r.area for r in regions)


def test_atlas_full():
    atlas = AtlasPacker(32)

    # Too wide
    with raises(AtlasFull):
        atlas.pack(bitmap(33, 1), 33, 1)

    # Too high
    with raises(AtlasFull):
        atlas.pack(bitmap(1, 33), 1, 33)

    # Fill up
    for _ in range(4):
        atlas.pack(bitmap(16, 16), 16, 16)
    with raises(AtlasFull):
        atlas.pack(bitmap(16, 16), 16, 16)

    # A bitmap that does not fit leaves the cursor alone
    atlas = AtlasPacker(32)
    atlas.pack(bitmap(20, 20), 20, 20)
    with raises(AtlasFull):
        atlas.pack(bitmap(16, 16), 16, 16)
    assert atlas.cursor == (20, 0, 20)
    assert atlas.pack(bitmap(12, 8), 12, 8) == Rect(20, 0, 12, 8)

    # Exactly fitting regions still work
    atlas = AtlasPacker(32)
    assert atlas.pack(bitmap(32, 32), 32, 32) == Rect(0, 0, 32, 32)


def test_dirty_region():
    atlas = AtlasPacker(64)
    assert atlas.take_dirty_region() is None

    r1 = atlas.pack(bitmap(10, 10), 10, 10)
    assert atlas.dirty_region == r1

    r2 = atlas.pack(bitmap(20, 5), 20, 5)
    assert atlas.dirty_region == Rect(0, 0, 30, 10)
    assert atlas.dirty_region.contains(r2)

    # The property returns a copy
    region = atlas.dirty_region
    region.width = 1
    assert atlas.dirty_region == Rect(0, 0, 30, 10)

    assert atlas.take_dirty_region() == Rect(0, 0, 30, 10)
    assert atlas.take_dirty_region() is None

    # Next write only dirties the new region
    r3 = atlas.pack(bitmap(5, 5), 5, 5)
    assert atlas.take_dirty_region() == r3


def test_dirty_region_covers_all_writes():
    atlas = AtlasPacker(128)
    mirror = np.zeros((128, 128), np.uint8)
    for i in range(60):
        w, h = np.random.randint(1, 16), np.random.randint(1, 16)
        atlas.pack(bitmap(w, h, i + 1), w, h)
        if i % 7 == 0:
            x, y, w, h = atlas.take_dirty_region()
            mirror[y : y + h, x : x + w] = atlas.get_region(Rect(x, y, w, h))
    region = atlas.take_dirty_region()
    if region is not None:
        x, y, w, h = region
        mirror[y : y + h, x : x + w] = atlas.get_region(region)

    assert np.all(mirror == atlas.array)


def test_empty_bitmap():
    atlas = AtlasPacker(64)
    atlas.pack(bitmap(10, 10), 10, 10)
    atlas.take_dirty_region()

    region = atlas.pack(np.zeros((0, 0), np.uint8), 0, 0)
    assert region == Rect(10, 0, 0, 0)
    assert region.is_empty
    assert atlas.dirty_region is None
    assert atlas.region_count == 2


def test_atlas_reset():
    atlas = AtlasPacker(64)
    array = atlas.array
    for _ in range(5):
        atlas.pack(bitmap(10, 10), 10, 10)
    assert array.max() == 1

    atlas.reset()

    # The array is cleared in-place
    assert array.max() == 0
    assert atlas.array.base is array.base
    assert atlas.cursor == (0, 0, 0)
    assert atlas.region_count == 0
    assert atlas.allocated_area == 0
    assert atlas.dirty_region == Rect(0, 0, 64, 64)

    # Packing starts over
    assert atlas.pack(bitmap(10, 10), 10, 10) == Rect(0, 0, 10, 10)


if __name__ == "__main__":
    for ob in list(globals().values()):
        if callable(ob) and ob.__name__.startswith("test_"):
            print(f"{ob.__name__} ...")
            ob()
    print("done")
