"""
Texture sinks receive the dirty parts of an atlas. The layout engine only
decides which bytes go where; a sink copies them to the actual texture.
"""

import numpy as np
import wgpu


class TextureSink:
    """Base class for objects that receive atlas updates."""

    def write_region(self, region, data):
        """Write data (a uint8 array of shape (h, w)) to the given Rect of the texture."""
        raise NotImplementedError()


class ArrayTextureSink(TextureSink):
    """A sink that mirrors the atlas in a numpy array, e.g. for a CPU renderer."""

    def __init__(self, size):
        self._array = np.zeros((size, size), np.uint8)

    @property
    def array(self):
        """The mirrored atlas."""
        return self._array

    def write_region(self, region, data):
        x, y, w, h = region
        self._array[y : y + h, x : x + w] = data


class WgpuTextureSink(TextureSink):
    """A sink that writes atlas updates to a wgpu texture via the device queue.

    Parameters:
        device (wgpu.GPUDevice): the device that owns the texture.
        texture (wgpu.GPUTexture): a 2D texture with a one-byte format
            (e.g. r8unorm) and COPY_DST usage.
    """

    def __init__(self, device, texture):
        self._device = device
        self._texture = texture

    @classmethod
    def for_engine(cls, device, engine, label="glyph atlas"):
        """Create a texture that matches the engine's atlas, and a sink for it."""
        texture = create_atlas_texture(device, engine.atlas_size, label)
        return cls(device, texture)

    @property
    def texture(self):
        """The wgpu texture that this sink writes to."""
        return self._texture

    def write_region(self, region, data):
        x, y, w, h = region
        data = np.ascontiguousarray(data, np.uint8)
        self._device.queue.write_texture(
            {"texture": self._texture, "origin": (x, y, 0), "mip_level": 0},
            data,
            {"bytes_per_row": w, "rows_per_image": h},
            (w, h, 1),
        )


def create_atlas_texture(device, size, label="glyph atlas"):
    """Create a wgpu texture suitable to hold an atlas of the given size."""
    return device.create_texture(
        label=label,
        size=(size, size, 1),
        format=wgpu.TextureFormat.r8unorm,
        usage=wgpu.TextureUsage.TEXTURE_BINDING | wgpu.TextureUsage.COPY_DST,
    )
