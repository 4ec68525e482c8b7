from __future__ import annotations

import random

from .buffer import PixelBuffer
from ..errors import ConfigurationError

SLICE_MIN_HEIGHT = 6
SLICE_MAX_HEIGHT = 24
SLICE_SHIFT_SCALE = 4


def spread(buffer: PixelBuffer, amount: int, rng: random.Random) -> PixelBuffer:
    """Copy every pixel from a random neighbour up to ``amount`` px away (fraying)."""
    if amount <= 0:
        return buffer.copy()
    width, height = buffer.width, buffer.height
    src = buffer.pixels
    out = buffer.copy()
    dst = out.pixels
    randint = rng.randint
    for y in range(height):
        for x in range(width):
            nx = min(width - 1, max(0, x + randint(-amount, amount)))
            ny = min(height - 1, max(0, y + randint(-amount, amount)))
            s = (ny * width + nx) * 4
            d = (y * width + x) * 4
            dst[d:d + 4] = src[s:s + 4]
    return out


def slice_displace(
    buffer: PixelBuffer,
    amount: int,
    rng: random.Random,
    bands: int | None = None,
) -> PixelBuffer:
    """Shift random horizontal bands sideways, clamping the source column."""
    if amount <= 0:
        return buffer.copy()
    width, height = buffer.width, buffer.height
    if bands is None:
        bands = max(1, height // SLICE_MAX_HEIGHT) + rng.randint(0, 3)
    src = buffer.pixels
    out = buffer.copy()
    dst = out.pixels
    for _ in range(bands):
        start = rng.randrange(height)
        band_height = rng.randint(SLICE_MIN_HEIGHT, SLICE_MAX_HEIGHT)
        offset = rng.randint(-amount, amount) * SLICE_SHIFT_SCALE
        if offset == 0:
            continue
        for y in range(start, min(height, start + band_height)):
            row = y * width
            for x in range(width):
                sx = min(width - 1, max(0, x - offset))
                s = (row + sx) * 4
                d = (row + x) * 4
                dst[d:d + 4] = src[s:s + 4]
    return out


def noise_layer(width: int, height: int, rng: random.Random) -> PixelBuffer:
    """Opaque gray layer of uniform noise."""
    data = bytearray(width * height * 4)
    randint = rng.randint
    for i in range(0, len(data), 4):
        v = randint(0, 255)
        data[i] = data[i + 1] = data[i + 2] = v
        data[i + 3] = 255
    return PixelBuffer(width, height, data)


def channel_shift(buffer: PixelBuffer, channel: int, dx: int, dy: int = 0) -> PixelBuffer:
    """Offset a single RGB channel by ``(dx, dy)``, clamping at the border."""
    if channel not in (0, 1, 2):
        raise ConfigurationError(f"Channel must be 0, 1 or 2, got {channel}")
    if dx == 0 and dy == 0:
        return buffer.copy()
    width, height = buffer.width, buffer.height
    src = buffer.pixels
    out = buffer.copy()
    dst = out.pixels
    for y in range(height):
        sy = min(height - 1, max(0, y - dy))
        for x in range(width):
            sx = min(width - 1, max(0, x - dx))
            dst[(y * width + x) * 4 + channel] = src[(sy * width + sx) * 4 + channel]
    return out
