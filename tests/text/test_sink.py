import numpy as np
import wgpu

from textatlas.text import (
    ArrayTextureSink,
    TextLayoutEngine,
    TextureSink,
    WgpuTextureSink,
    create_atlas_texture,
)
from textatlas.utils import Rect

from fakeface import FakeFace
from pytest import raises


class FakeQueue:
    def __init__(self):
        self.writes = []

    def write_texture(self, destination, data, data_layout, size):
        self.writes.append((destination, data.copy(), data_layout, size))


class FakeDevice:
    def __init__(self):
        self.queue = FakeQueue()
        self.textures = []

    def create_texture(self, **kwargs):
        self.textures.append(kwargs)
        return object()


def test_base_sink():
    with raises(NotImplementedError):
        TextureSink().write_region(Rect(0, 0, 1, 1), np.zeros((1, 1), np.uint8))


def test_array_sink():
    sink = ArrayTextureSink(16)
    data = np.full((3, 4), 7, np.uint8)
    sink.write_region(Rect(2, 5, 4, 3), data)
    assert sink.array[5:8, 2:6].tolist() == data.tolist()
    assert sink.array.sum() == 7 * 12


def test_create_atlas_texture():
    device = FakeDevice()
    create_atlas_texture(device, 512)
    kwargs = device.textures[0]
    assert kwargs["size"] == (512, 512, 1)
    assert kwargs["format"] == wgpu.TextureFormat.r8unorm
    assert kwargs["usage"] & wgpu.TextureUsage.COPY_DST
    assert kwargs["usage"] & wgpu.TextureUsage.TEXTURE_BINDING


def test_wgpu_sink():
    device = FakeDevice()
    engine = TextLayoutEngine(FakeFace(), 16, atlas_size=128)
    sink = WgpuTextureSink.for_engine(device, engine)
    assert device.textures[0]["size"] == (128, 128, 1)

    engine.layout("abc", 20)
    region = engine.upload(sink)
    assert region == Rect(0, 0, 24, 16)

    assert len(device.queue.writes) == 1
    destination, data, data_layout, size = device.queue.writes[0]
    assert destination["texture"] is sink.texture
    assert destination["origin"] == (0, 0, 0)
    assert data.shape == (16, 24)
    assert data.flags.c_contiguous
    assert data_layout == {"bytes_per_row": 24, "rows_per_image": 16}
    assert size == (24, 16, 1)
    assert np.all(data == engine.atlas_array[0:16, 0:24])

    # Only new glyphs are written next time
    engine.layout("abcd", 20)
    engine.upload(sink)
    destination, data, data_layout, size = device.queue.writes[1]
    assert destination["origin"] == (24, 0, 0)
    assert size == (8, 16, 1)

    # Nothing changed, nothing written
    assert engine.upload(sink) is None
    assert len(device.queue.writes) == 2


if __name__ == "__main__":
    for ob in list(globals().values()):
        if callable(ob) and ob.__name__.startswith("test_"):
            print(f"{ob.__name__} ...")
            ob()
    print("done")
