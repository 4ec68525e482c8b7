from __future__ import annotations

import colorsys
from typing import Dict, Tuple

from .buffer import PixelBuffer, clamp_byte
from ..errors import ConfigurationError


def color_boost(buffer: PixelBuffer, brightness: float = 115, saturation: float = 105) -> PixelBuffer:
    """Scale HSL lightness and saturation by percentages, capped at 1.0."""
    l_factor = brightness / 100.0
    s_factor = saturation / 100.0
    out = buffer.copy()
    data = out.pixels
    memo: Dict[Tuple[int, int, int], Tuple[int, int, int]] = {}
    for i in range(0, len(data), 4):
        key = (data[i], data[i + 1], data[i + 2])
        mapped = memo.get(key)
        if mapped is None:
            h, l, s = colorsys.rgb_to_hls(key[0] / 255.0, key[1] / 255.0, key[2] / 255.0)
            r, g, b = colorsys.hls_to_rgb(h, min(1.0, l * l_factor), min(1.0, s * s_factor))
            mapped = (clamp_byte(r * 255), clamp_byte(g * 255), clamp_byte(b * 255))
            memo[key] = mapped
        data[i], data[i + 1], data[i + 2] = mapped
    return out


def adjust_brightness(buffer: PixelBuffer, factor: float) -> PixelBuffer:
    lut = bytes(clamp_byte(v * factor) for v in range(256))
    out = buffer.copy()
    data = out.pixels
    for c in range(3):
        data[c::4] = data[c::4].translate(lut)
    return out


def posterize(buffer: PixelBuffer, levels: int) -> PixelBuffer:
    if levels < 2:
        raise ConfigurationError(f"Posterize needs at least 2 levels, got {levels}")
    step = 255.0 / (levels - 1)
    lut = bytes(clamp_byte(round(v / step) * step) for v in range(256))
    out = buffer.copy()
    data = out.pixels
    for c in range(3):
        data[c::4] = data[c::4].translate(lut)
    return out


def scanlines(buffer: PixelBuffer, spacing: int = 3, darkness: float = 0.35) -> PixelBuffer:
    """Darken every ``spacing``-th row."""
    if spacing <= 0:
        return buffer.copy()
    keep = max(0.0, min(1.0, 1.0 - darkness))
    lut = bytes(clamp_byte(v * keep) for v in range(256))
    out = buffer.copy()
    data = out.pixels
    stride = buffer.width * 4
    for y in range(0, buffer.height, spacing):
        row = y * stride
        for i in range(row, row + stride, 4):
            data[i] = lut[data[i]]
            data[i + 1] = lut[data[i + 1]]
            data[i + 2] = lut[data[i + 2]]
    return out
