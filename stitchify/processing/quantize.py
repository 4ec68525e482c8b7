"""K-means color quantization over RGB space.

Centroids start from the first ``k`` distinct colors of the sample in
encounter order, so the same image always yields the same palette. Clustering
runs for a fixed number of iterations with no convergence check.
"""

from __future__ import annotations

from collections import Counter
from typing import Dict, List, Sequence, Tuple

from .buffer import PixelBuffer
from ..errors import ConfigurationError

Color = Tuple[int, int, int]
Palette = List[Color]

DEFAULT_ITERATIONS = 10
DEFAULT_SAMPLE_LIMIT = 4096

BAYER_8X8 = (
    (0, 48, 12, 60, 3, 51, 15, 63),
    (32, 16, 44, 28, 35, 19, 47, 31),
    (8, 56, 4, 52, 11, 59, 7, 55),
    (40, 24, 36, 20, 43, 27, 39, 23),
    (2, 50, 14, 62, 1, 49, 13, 61),
    (34, 18, 46, 30, 33, 17, 45, 29),
    (10, 58, 6, 54, 9, 57, 5, 53),
    (42, 26, 38, 22, 41, 25, 37, 21),
)


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


def sample_colors(buffer: PixelBuffer, limit: int = DEFAULT_SAMPLE_LIMIT) -> List[Color]:
    """Return at most ``limit`` colors taken at a fixed stride across the image."""
    if limit <= 0:
        raise ConfigurationError(f"Sample limit must be positive, got {limit}")
    data = buffer.pixels
    count = buffer.width * buffer.height
    stride = max(1, -(-count // limit))
    return [
        (data[i], data[i + 1], data[i + 2])
        for i in range(0, count * 4, stride * 4)
    ]


def nearest_index(color: Sequence[int], palette: Sequence[Color]) -> int:
    best_index = 0
    best_distance = float("inf")
    r, g, b = color[0], color[1], color[2]
    for index, (R, G, B) in enumerate(palette):
        distance = (R - r) ** 2 + (G - g) ** 2 + (B - b) ** 2
        if distance < best_distance:
            best_distance = distance
            best_index = index
    return best_index


def nearest_two(color: Sequence[int], palette: Sequence[Color]) -> Tuple[int, int]:
    r, g, b = color[0], color[1], color[2]
    best = [(float("inf"), 0), (float("inf"), 0)]
    for index, (R, G, B) in enumerate(palette):
        distance = (R - r) ** 2 + (G - g) ** 2 + (B - b) ** 2
        if distance < best[0][0]:
            best[1] = best[0]
            best[0] = (distance, index)
        elif distance < best[1][0]:
            best[1] = (distance, index)
    return best[0][1], best[1][1]


def mix_ratio(color: Sequence[int], color_a: Color, color_b: Color) -> float:
    """Weight of ``color_a`` in the mix of ``a`` and ``b`` closest to ``color``."""
    numerator = 0.0
    denominator = 1e-6
    for channel in range(3):
        xa = color_a[channel]
        xb = color_b[channel]
        numerator += (xa - xb) * (color[channel] - xb)
        denominator += (xa - xb) ** 2
    return max(0.0, min(1.0, numerator / denominator))


def _initial_centroids(weighted: Counter, k: int) -> Palette:
    # Counter preserves first-insertion order, i.e. encounter order.
    distinct = list(weighted)[:k]
    return [distinct[i % len(distinct)] for i in range(k)]


def cluster(sample: Sequence[Color], k: int, iterations: int = DEFAULT_ITERATIONS) -> Palette:
    """Cluster ``sample`` into exactly ``k`` centroids.

    Empty clusters keep their previous centroid, so the palette may contain
    duplicates when the sample has fewer than ``k`` distinct colors.
    """
    if k <= 0:
        raise ConfigurationError(f"Color count must be positive, got {k}")
    if not sample:
        raise ConfigurationError("Cannot cluster an empty sample")
    if k > len(sample):
        raise ConfigurationError(f"Color count {k} exceeds sample size {len(sample)}")
    if iterations < 0:
        raise ConfigurationError(f"Iteration count must not be negative, got {iterations}")

    weighted = Counter(tuple(color[:3]) for color in sample)
    centroids = _initial_centroids(weighted, k)

    for _ in range(iterations):
        sums = [[0, 0, 0, 0] for _ in range(k)]
        for color, count in weighted.items():
            acc = sums[nearest_index(color, centroids)]
            acc[0] += color[0] * count
            acc[1] += color[1] * count
            acc[2] += color[2] * count
            acc[3] += count
        centroids = [
            (
                _round_half_up(acc[0] / acc[3]),
                _round_half_up(acc[1] / acc[3]),
                _round_half_up(acc[2] / acc[3]),
            )
            if acc[3]
            else centroids[index]
            for index, acc in enumerate(sums)
        ]

    return centroids


def quantize_image(buffer: PixelBuffer, palette: Sequence[Color]) -> PixelBuffer:
    """Replace every pixel with its nearest palette entry, keeping alpha."""
    if not palette:
        raise ConfigurationError("Palette must contain at least one color")
    out = buffer.copy()
    data = out.pixels
    lookup: Dict[Tuple[int, int, int], Color] = {}
    for i in range(0, len(data), 4):
        key = (data[i], data[i + 1], data[i + 2])
        mapped = lookup.get(key)
        if mapped is None:
            mapped = palette[nearest_index(key, palette)]
            lookup[key] = mapped
        data[i], data[i + 1], data[i + 2] = mapped
    return out


def derive_palette(
    buffer: PixelBuffer,
    num_colors: int,
    iterations: int = DEFAULT_ITERATIONS,
    sample_limit: int = DEFAULT_SAMPLE_LIMIT,
) -> Palette:
    if num_colors <= 0:
        raise ConfigurationError(f"Color count must be positive, got {num_colors}")
    sample = sample_colors(buffer, max(sample_limit, num_colors))
    return cluster(sample, min(num_colors, len(sample)), iterations)


def quantize(
    buffer: PixelBuffer,
    num_colors: int,
    iterations: int = DEFAULT_ITERATIONS,
    sample_limit: int = DEFAULT_SAMPLE_LIMIT,
) -> PixelBuffer:
    return quantize_image(buffer, derive_palette(buffer, num_colors, iterations, sample_limit))


def ordered_palette_dither(buffer: PixelBuffer, palette: Sequence[Color]) -> PixelBuffer:
    """Bayer-ordered mix of the two palette entries nearest to each pixel."""
    if not palette:
        raise ConfigurationError("Palette must contain at least one color")
    out = buffer.copy()
    data = out.pixels
    width = buffer.width
    for p in range(buffer.width * buffer.height):
        i = p * 4
        y, x = divmod(p, width)
        color = (data[i], data[i + 1], data[i + 2])
        index_a, index_b = nearest_two(color, palette)
        alpha = mix_ratio(color, palette[index_a], palette[index_b])
        threshold = (BAYER_8X8[y & 7][x & 7] + 8) / 72.0
        chosen = palette[index_a] if alpha >= threshold else palette[index_b]
        data[i], data[i + 1], data[i + 2] = chosen
    return out


def retro_print(
    buffer: PixelBuffer,
    num_colors: int,
    iterations: int = DEFAULT_ITERATIONS,
    sample_limit: int = DEFAULT_SAMPLE_LIMIT,
) -> PixelBuffer:
    return ordered_palette_dither(buffer, derive_palette(buffer, num_colors, iterations, sample_limit))
