from __future__ import annotations

from typing import List

from .buffer import PixelBuffer, clamp_byte


def luminance(r: float, g: float, b: float) -> float:
    return 0.299 * r + 0.587 * g + 0.114 * b


def luminance_plane(buffer: PixelBuffer) -> List[float]:
    data = buffer.pixels
    return [
        0.299 * data[i] + 0.587 * data[i + 1] + 0.114 * data[i + 2]
        for i in range(0, len(data), 4)
    ]


def grayscale(buffer: PixelBuffer) -> PixelBuffer:
    out = buffer.copy()
    data = out.pixels
    for i in range(0, len(data), 4):
        gray = clamp_byte(luminance(data[i], data[i + 1], data[i + 2]))
        data[i] = data[i + 1] = data[i + 2] = gray
    return out


def invert(buffer: PixelBuffer) -> PixelBuffer:
    out = buffer.copy()
    data = out.pixels
    for i in range(0, len(data), 4):
        data[i] = 255 - data[i]
        data[i + 1] = 255 - data[i + 1]
        data[i + 2] = 255 - data[i + 2]
    return out
