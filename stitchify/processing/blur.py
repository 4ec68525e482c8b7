"""Windowed averaging: box, Gaussian and per-pixel directional blur.

Neighbourhoods are clamped at the image border: edge pixels average over the
taps that fall inside the image and never wrap or reflect.
"""

from __future__ import annotations

import math
from typing import List, Sequence

from .buffer import PixelBuffer, clamp_byte
from ..errors import ConfigurationError

Plane = List[float]


def split_channels(buffer: PixelBuffer) -> List[Plane]:
    data = buffer.pixels
    return [[float(v) for v in data[c::4]] for c in range(3)]


def merge_channels(buffer: PixelBuffer, planes: Sequence[Plane]) -> PixelBuffer:
    """Write RGB planes over a copy of ``buffer``; alpha is kept."""
    out = buffer.copy()
    data = out.pixels
    for c, plane in enumerate(planes):
        data[c::4] = bytes(clamp_byte(v) for v in plane)
    return out


def _check_axis(axis: str) -> None:
    if axis not in ("x", "y"):
        raise ConfigurationError(f"Blur axis must be 'x' or 'y', got {axis!r}")


def box_blur_plane(plane: Plane, width: int, height: int, axis: str, radius: int) -> Plane:
    _check_axis(axis)
    if radius <= 0:
        return list(plane)
    out = [0.0] * len(plane)
    if axis == "x":
        lines, length, step = height, width, 1
    else:
        lines, length, step = width, height, width
    for line in range(lines):
        start = line * width if axis == "x" else line
        prefix = [0.0]
        for n in range(length):
            prefix.append(prefix[-1] + plane[start + n * step])
        for n in range(length):
            lo = max(0, n - radius)
            hi = min(length, n + radius + 1)
            out[start + n * step] = (prefix[hi] - prefix[lo]) / (hi - lo)
    return out


def box_blur_1d(buffer: PixelBuffer, axis: str, radius: int) -> PixelBuffer:
    _check_axis(axis)
    if radius <= 0:
        return buffer.copy()
    planes = [
        box_blur_plane(plane, buffer.width, buffer.height, axis, radius)
        for plane in split_channels(buffer)
    ]
    return merge_channels(buffer, planes)


def box_blur(buffer: PixelBuffer, radius: int) -> PixelBuffer:
    if radius <= 0:
        return buffer.copy()
    planes = []
    for plane in split_channels(buffer):
        plane = box_blur_plane(plane, buffer.width, buffer.height, "x", radius)
        planes.append(box_blur_plane(plane, buffer.width, buffer.height, "y", radius))
    return merge_channels(buffer, planes)


def gaussian_kernel_1d(radius: int) -> List[float]:
    if radius <= 0:
        return [1.0]
    sigma = radius / 2.0
    weights = [math.exp(-(d * d) / (2 * sigma * sigma)) for d in range(-radius, radius + 1)]
    total = sum(weights)
    return [w / total for w in weights]


def gaussian_kernel(radius: int) -> List[List[float]]:
    """Normalized ``(2r+1)`` square Gaussian kernel with sigma ``r / 2``."""
    row = gaussian_kernel_1d(radius)
    return [[a * b for b in row] for a in row]


def _convolve_line(plane: Plane, width: int, height: int, axis: str, kernel: Sequence[float]) -> Plane:
    radius = len(kernel) // 2
    out = [0.0] * len(plane)
    for y in range(height):
        row = y * width
        for x in range(width):
            total = 0.0
            weight_sum = 0.0
            for k, weight in enumerate(kernel):
                d = k - radius
                if axis == "x":
                    nx = x + d
                    if nx < 0 or nx >= width:
                        continue
                    total += plane[row + nx] * weight
                else:
                    ny = y + d
                    if ny < 0 or ny >= height:
                        continue
                    total += plane[ny * width + x] * weight
                weight_sum += weight
            out[row + x] = total / weight_sum
    return out


def gaussian_blur_plane(plane: Plane, width: int, height: int, radius: int) -> Plane:
    # The square kernel is an outer product and the in-bounds tap region is a
    # rectangle, so two renormalized passes of its row marginals equal one
    # renormalized 2D pass.
    if radius <= 0:
        return list(plane)
    kernel = [sum(row) for row in gaussian_kernel(radius)]
    plane = _convolve_line(plane, width, height, "x", kernel)
    return _convolve_line(plane, width, height, "y", kernel)


def gaussian_blur_2d(buffer: PixelBuffer, radius: int) -> PixelBuffer:
    if radius <= 0:
        return buffer.copy()
    planes = [
        gaussian_blur_plane(plane, buffer.width, buffer.height, radius)
        for plane in split_channels(buffer)
    ]
    return merge_channels(buffer, planes)


def directional_blur(buffer: PixelBuffer, length: int, angle_field: Sequence[float]) -> PixelBuffer:
    """Average up to ``2 * length + 1`` samples along each pixel's own angle.

    ``angle_field`` holds one angle in radians per pixel, row-major. Samples
    outside the image are skipped.
    """
    width, height = buffer.width, buffer.height
    if len(angle_field) != width * height:
        raise ConfigurationError(
            f"Angle field has {len(angle_field)} entries, expected {width * height}"
        )
    if length <= 0:
        return buffer.copy()

    src = buffer.pixels
    out = buffer.copy()
    dst = out.pixels
    steps = range(-length, length + 1)
    for y in range(height):
        for x in range(width):
            p = y * width + x
            theta = angle_field[p]
            ux = math.cos(theta)
            uy = math.sin(theta)
            r = g = b = 0
            count = 0
            for t in steps:
                nx = x + int(round(t * ux))
                ny = y + int(round(t * uy))
                if nx < 0 or nx >= width or ny < 0 or ny >= height:
                    continue
                i = (ny * width + nx) * 4
                r += src[i]
                g += src[i + 1]
                b += src[i + 2]
                count += 1
            i = p * 4
            dst[i] = clamp_byte(r / count)
            dst[i + 1] = clamp_byte(g / count)
            dst[i + 2] = clamp_byte(b / count)
    return out
