"""Compound effects assembled from the blur, noise and blend primitives."""

from __future__ import annotations

import random
from typing import Tuple

from .blend import blend_layers
from .blur import box_blur, box_blur_1d, gaussian_blur_2d
from .buffer import PixelBuffer, clamp_byte
from .luminance import grayscale, invert
from .stochastic import channel_shift, noise_layer

FABRIC_COLOR: Tuple[int, int, int] = (242, 236, 222)


def fabric_texture(
    buffer: PixelBuffer,
    rng: random.Random,
    blur_radius: int = 8,
    opacity: float = 1.0,
) -> PixelBuffer:
    """Soft-light a vertically streaked noise layer over the image (woven cloth)."""
    noise = noise_layer(buffer.width, buffer.height, rng)
    noise = box_blur_1d(noise, "y", blur_radius)
    return blend_layers(buffer, noise, "soft_light", opacity)


def paper_texture(
    buffer: PixelBuffer,
    rng: random.Random,
    blur_radius: int = 1,
    opacity: float = 0.6,
) -> PixelBuffer:
    noise = box_blur(noise_layer(buffer.width, buffer.height, rng), blur_radius)
    return blend_layers(buffer, noise, "soft_light", opacity)


def pencil_sketch(buffer: PixelBuffer, radius: int = 4) -> PixelBuffer:
    """Color-dodge the grayscale image with its blurred negative."""
    gray = grayscale(buffer)
    smudge = gaussian_blur_2d(invert(gray), radius)
    return blend_layers(gray, smudge, "color_dodge")


def chromatic_split(buffer: PixelBuffer, offset: int) -> PixelBuffer:
    """Push red and blue apart horizontally by ``offset`` px each."""
    if offset <= 0:
        return buffer.copy()
    return channel_shift(channel_shift(buffer, 0, offset), 2, -offset)


def pixelate(buffer: PixelBuffer, cell_size: int) -> PixelBuffer:
    if cell_size <= 1:
        return buffer.copy()
    width, height = buffer.width, buffer.height
    src = buffer.pixels
    out = buffer.copy()
    dst = out.pixels
    for cy in range(0, height, cell_size):
        for cx in range(0, width, cell_size):
            cells = [
                (y * width + x) * 4
                for y in range(cy, min(height, cy + cell_size))
                for x in range(cx, min(width, cx + cell_size))
            ]
            mean = tuple(
                clamp_byte(sum(src[i + c] for i in cells) / len(cells)) for c in range(3)
            )
            for i in cells:
                dst[i], dst[i + 1], dst[i + 2] = mean
    return out


def cross_stitch(buffer: PixelBuffer, cell_size: int = 6) -> PixelBuffer:
    """Redraw each cell as an X stitch of its color on plain fabric."""
    cell_size = max(3, cell_size)
    blocks = pixelate(buffer, cell_size)
    src = blocks.pixels
    out = blocks.copy()
    dst = out.pixels
    width = buffer.width
    last = cell_size - 1
    for p in range(buffer.width * buffer.height):
        y, x = divmod(p, width)
        dx = x % cell_size
        dy = y % cell_size
        on_stitch = dx == dy or dx + dy == last
        if not on_stitch:
            i = p * 4
            # Fabric shows through with a faint tint of the thread.
            dst[i] = clamp_byte(FABRIC_COLOR[0] * 0.8 + src[i] * 0.2)
            dst[i + 1] = clamp_byte(FABRIC_COLOR[1] * 0.8 + src[i + 1] * 0.2)
            dst[i + 2] = clamp_byte(FABRIC_COLOR[2] * 0.8 + src[i + 2] * 0.2)
    return out
