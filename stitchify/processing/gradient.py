"""Sobel gradients on luminance and the effects derived from them."""

from __future__ import annotations

import math
from typing import List, Tuple

from .blend import overlay
from .blur import Plane, directional_blur, gaussian_blur_plane
from .buffer import PixelBuffer, clamp_byte
from .luminance import luminance_plane
from ..errors import ConfigurationError

Color = Tuple[int, int, int]

FLAT_SHADE = 127.5


def sobel_plane(plane: Plane, width: int, height: int) -> Tuple[Plane, Plane]:
    """Return ``(gx, gy)`` for a single-channel plane, replicating border samples."""
    gx = [0.0] * len(plane)
    gy = [0.0] * len(plane)
    for y in range(height):
        up = max(0, y - 1) * width
        row = y * width
        down = min(height - 1, y + 1) * width
        for x in range(width):
            left = max(0, x - 1)
            right = min(width - 1, x + 1)
            tl, tc, tr = plane[up + left], plane[up + x], plane[up + right]
            ml, mr = plane[row + left], plane[row + right]
            bl, bc, br = plane[down + left], plane[down + x], plane[down + right]
            gx[row + x] = (tr + 2 * mr + br) - (tl + 2 * ml + bl)
            gy[row + x] = (bl + 2 * bc + br) - (tl + 2 * tc + tr)
    return gx, gy


def sobel(buffer: PixelBuffer) -> Tuple[List[float], List[float]]:
    """Gradient magnitude and direction (radians) of the luminance."""
    gx, gy = sobel_plane(luminance_plane(buffer), buffer.width, buffer.height)
    magnitude = [math.sqrt(a * a + b * b) for a, b in zip(gx, gy)]
    angle = [math.atan2(b, a) for a, b in zip(gx, gy)]
    return magnitude, angle


def edge_mask(buffer: PixelBuffer, threshold: float) -> List[bool]:
    magnitude, _ = sobel(buffer)
    return [m > threshold for m in magnitude]


def draw_edges(buffer: PixelBuffer, threshold: float, color: Color = (0, 0, 0)) -> PixelBuffer:
    out = buffer.copy()
    data = out.pixels
    for p, is_edge in enumerate(edge_mask(buffer, threshold)):
        if is_edge:
            i = p * 4
            data[i], data[i + 1], data[i + 2] = color
    return out


def emboss(buffer: PixelBuffer, strength: float = 1.0) -> PixelBuffer:
    """Add the signed diagonal gradient back into every RGB channel."""
    gx, gy = sobel_plane(luminance_plane(buffer), buffer.width, buffer.height)
    out = buffer.copy()
    data = out.pixels
    for p in range(len(gx)):
        delta = -(gx[p] + gy[p]) / 8.0 * strength
        i = p * 4
        data[i] = clamp_byte(data[i] + delta)
        data[i + 1] = clamp_byte(data[i + 1] + delta)
        data[i + 2] = clamp_byte(data[i + 2] + delta)
    return out


def shade_map(
    buffer: PixelBuffer,
    azimuth: float = 120.0,
    elevation: float = 55.0,
    ambient: float = 0.25,
    blur_radius: int = 2,
    strength: float = 1.0,
) -> Plane:
    """Lambertian relief of the blurred luminance, mid-gray where the surface is flat.

    The gradient is treated as a surface normal ``normalize(-gx/255, -gy/255, 1)``
    lit from ``azimuth``/``elevation`` (degrees). Intensity never drops below
    ``ambient``.
    """
    width, height = buffer.width, buffer.height
    gray = gaussian_blur_plane(luminance_plane(buffer), width, height, blur_radius)
    gx, gy = sobel_plane(gray, width, height)

    az = math.radians(azimuth)
    el = math.radians(elevation)
    lx = math.cos(el) * math.cos(az)
    ly = math.cos(el) * math.sin(az)
    lz = math.sin(el)
    flat = max(ambient, lz)

    shading = [0.0] * len(gx)
    for p in range(len(gx)):
        nx = -gx[p] / 255.0
        ny = -gy[p] / 255.0
        norm = math.sqrt(nx * nx + ny * ny + 1.0)
        intensity = max(ambient, (nx * lx + ny * ly + lz) / norm)
        shading[p] = min(255.0, max(0.0, FLAT_SHADE + (intensity - flat) * 255.0 * strength))
    return shading


def shade(
    buffer: PixelBuffer,
    azimuth: float = 120.0,
    elevation: float = 55.0,
    ambient: float = 0.25,
    blur_radius: int = 2,
    strength: float = 1.0,
    mode: str = "overlay",
) -> PixelBuffer:
    if mode not in ("overlay", "add"):
        raise ConfigurationError(f"Shading mode must be 'overlay' or 'add', got {mode!r}")
    shading = shade_map(buffer, azimuth, elevation, ambient, blur_radius, strength)
    out = buffer.copy()
    data = out.pixels
    for p, value in enumerate(shading):
        i = p * 4
        if mode == "overlay":
            layer = value / 255.0
            for c in range(3):
                data[i + c] = clamp_byte(overlay(data[i + c] / 255.0, layer) * 255.0)
        else:
            delta = value - FLAT_SHADE
            for c in range(3):
                data[i + c] = clamp_byte(data[i + c] + delta)
    return out


def stitch_angles(buffer: PixelBuffer) -> List[float]:
    """Per-pixel angle running across the local gradient; horizontal where flat."""
    magnitude, angle = sobel(buffer)
    half_pi = math.pi / 2
    return [a + half_pi if m > 1e-9 else 0.0 for m, a in zip(magnitude, angle)]


def flow_field(buffer: PixelBuffer, smoothing: int = 2) -> List[float]:
    """Smoothed edge-tangent orientation for every pixel.

    Gradients are averaged as doubled-angle vectors so opposite directions
    reinforce rather than cancel.
    """
    width, height = buffer.width, buffer.height
    gx, gy = sobel_plane(luminance_plane(buffer), width, height)
    cos2 = [a * a - b * b for a, b in zip(gx, gy)]
    sin2 = [2 * a * b for a, b in zip(gx, gy)]
    cos2 = gaussian_blur_plane(cos2, width, height, smoothing)
    sin2 = gaussian_blur_plane(sin2, width, height, smoothing)
    half_pi = math.pi / 2
    field = []
    for c, s in zip(cos2, sin2):
        if abs(c) < 1e-9 and abs(s) < 1e-9:
            field.append(0.0)
        else:
            field.append(math.atan2(s, c) / 2 + half_pi)
    return field


def thread_pattern(buffer: PixelBuffer, thickness: int) -> PixelBuffer:
    return directional_blur(buffer, thickness, stitch_angles(buffer))


def oil_paint(buffer: PixelBuffer, brush_length: int, smoothing: int = 2) -> PixelBuffer:
    return directional_blur(buffer, brush_length, flow_field(buffer, smoothing))
