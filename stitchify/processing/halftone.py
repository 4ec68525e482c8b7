from __future__ import annotations

import math

from .buffer import PixelBuffer, clamp_byte
from .luminance import luminance
from .quantize import BAYER_8X8

_THRESHOLDS = tuple(tuple(int((value + 0.5) * 4) for value in row) for row in BAYER_8X8)


def ordered_halftone(buffer: PixelBuffer) -> PixelBuffer:
    """Black and white Bayer 8x8 threshold of the luminance."""
    out = buffer.copy()
    data = out.pixels
    width = buffer.width
    for p in range(buffer.width * buffer.height):
        i = p * 4
        y, x = divmod(p, width)
        gray = luminance(data[i], data[i + 1], data[i + 2])
        v = 255 if gray > _THRESHOLDS[y & 7][x & 7] else 0
        data[i] = data[i + 1] = data[i + 2] = v
    return out


def dot_halftone(buffer: PixelBuffer, cell_size: int = 6, colored: bool = True) -> PixelBuffer:
    """Round dots on white paper, one per ``cell_size`` square.

    Dot area follows the cell's mean darkness. With ``colored`` the dot takes
    the cell's mean color, otherwise it is black.
    """
    cell_size = max(2, cell_size)
    width, height = buffer.width, buffer.height
    src = buffer.pixels
    out = buffer.copy()
    dst = out.pixels
    max_radius = cell_size / math.sqrt(2)

    for cy in range(0, height, cell_size):
        for cx in range(0, width, cell_size):
            x_end = min(width, cx + cell_size)
            y_end = min(height, cy + cell_size)
            r = g = b = 0
            count = 0
            for y in range(cy, y_end):
                for x in range(cx, x_end):
                    i = (y * width + x) * 4
                    r += src[i]
                    g += src[i + 1]
                    b += src[i + 2]
                    count += 1
            mean = (r / count, g / count, b / count)
            darkness = 1.0 - luminance(*mean) / 255.0
            radius = max_radius * math.sqrt(darkness)
            ink = tuple(clamp_byte(v) for v in mean) if colored else (0, 0, 0)
            center_x = cx + (cell_size - 1) / 2.0
            center_y = cy + (cell_size - 1) / 2.0
            for y in range(cy, y_end):
                for x in range(cx, x_end):
                    i = (y * width + x) * 4
                    inside = math.hypot(x - center_x, y - center_y) < radius
                    dst[i], dst[i + 1], dst[i + 2] = ink if inside else (255, 255, 255)
    return out
