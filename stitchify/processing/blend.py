"""Pixel-wise blend modes on channels normalized to ``[0, 1]``."""

from __future__ import annotations

import math
from typing import Callable, Dict

from .buffer import PixelBuffer, clamp_byte, require_same_size
from ..errors import ConfigurationError

BlendFn = Callable[[float, float], float]


def soft_light(base: float, blend: float) -> float:
    if blend < 0.5:
        return 2 * base * blend + base * base * (1 - 2 * blend)
    return 2 * base * (1 - blend) + math.sqrt(base) * (2 * blend - 1)


def overlay(base: float, layer: float) -> float:
    if base < 0.5:
        return 2 * base * layer
    return 1 - 2 * (1 - base) * (1 - layer)


def color_dodge(base: float, blend: float) -> float:
    if blend >= 1:
        return 1.0
    return min(1.0, base / (1 - blend))


def linear_add(base: float, blend: float) -> float:
    return min(1.0, base + blend)


BLEND_MODES: Dict[str, BlendFn] = {
    "soft_light": soft_light,
    "overlay": overlay,
    "color_dodge": color_dodge,
    "linear_add": linear_add,
}


def blend_layers(
    base: PixelBuffer,
    layer: PixelBuffer,
    mode: str,
    opacity: float = 1.0,
) -> PixelBuffer:
    """Composite ``layer`` over ``base`` channel by channel; base alpha is kept."""
    require_same_size(base, layer)
    fn = BLEND_MODES.get(mode)
    if fn is None:
        raise ConfigurationError(
            f"Unknown blend mode '{mode}'. Available: {', '.join(sorted(BLEND_MODES))}"
        )
    opacity = max(0.0, min(1.0, opacity))
    out = base.copy()
    data = out.pixels
    top = layer.pixels
    # Channel pairs repeat heavily (quantized bases, gray layers).
    memo: Dict[tuple, int] = {}
    for i in range(0, len(data), 4):
        for c in range(3):
            key = (data[i + c], top[i + c])
            value = memo.get(key)
            if value is None:
                b = key[0] / 255.0
                mixed = fn(b, key[1] / 255.0)
                value = clamp_byte((b + (mixed - b) * opacity) * 255.0)
                memo[key] = value
            data[i + c] = value
    return out
