import random

import pytest

from stitchify.errors import ConfigurationError
from stitchify.processing.buffer import PixelBuffer
from stitchify.processing.effects import (
    chromatic_split,
    cross_stitch,
    fabric_texture,
    pencil_sketch,
)
from stitchify.processing.halftone import dot_halftone, ordered_halftone
from stitchify.processing.luminance import grayscale, luminance
from stitchify.processing.tone import adjust_brightness, color_boost, posterize, scanlines


def palette_buffer() -> PixelBuffer:
    colors = [(10, 200, 30), (255, 255, 255), (0, 0, 0), (128, 64, 250), (90, 90, 90), (240, 10, 120)]
    buffer = PixelBuffer.blank(3, 2)
    for index, color in enumerate(colors):
        buffer.set(index % 3, index // 3, *color)
    return buffer


def test_luminance_weights() -> None:
    assert luminance(255, 255, 255) == pytest.approx(255.0)
    assert luminance(100, 0, 0) == pytest.approx(29.9)


def test_grayscale_equalizes_channels() -> None:
    result = grayscale(palette_buffer())

    for y in range(2):
        for x in range(3):
            r, g, b, _ = result.get(x, y)
            assert r == g == b


def test_color_boost_neutral_settings_are_identity() -> None:
    buffer = palette_buffer()

    assert color_boost(buffer, 100, 100).pixels == buffer.pixels


def test_color_boost_scales_lightness() -> None:
    buffer = PixelBuffer.blank(1, 1, color=(100, 100, 100, 255))

    assert color_boost(buffer, 200, 100).get(0, 0) == (200, 200, 200, 255)
    assert color_boost(PixelBuffer.blank(1, 1, color=(255, 255, 255, 255)), 200, 150).get(0, 0) == (255, 255, 255, 255)


def test_adjust_brightness_keeps_alpha() -> None:
    buffer = PixelBuffer.blank(2, 1, color=(200, 100, 50, 30))

    assert adjust_brightness(buffer, 0.5).get(1, 0) == (100, 50, 25, 30)


def test_posterize_two_levels() -> None:
    result = posterize(palette_buffer(), 2)

    assert set(result.pixels[0::4]) | set(result.pixels[1::4]) | set(result.pixels[2::4]) <= {0, 255}
    with pytest.raises(ConfigurationError):
        posterize(palette_buffer(), 1)


def test_scanlines_darken_every_nth_row() -> None:
    buffer = PixelBuffer.blank(2, 3, color=(100, 100, 100, 255))

    result = scanlines(buffer, spacing=2, darkness=1.0)

    assert result.get(0, 0)[:3] == (0, 0, 0)
    assert result.get(0, 1)[:3] == (100, 100, 100)
    assert result.get(1, 2)[:3] == (0, 0, 0)


def test_ordered_halftone_is_binary_gray() -> None:
    result = ordered_halftone(palette_buffer())

    for y in range(2):
        for x in range(3):
            r, g, b, _ = result.get(x, y)
            assert r == g == b
            assert r in (0, 255)


def test_dot_halftone_white_paper_and_solid_ink() -> None:
    white = PixelBuffer.blank(8, 8, color=(255, 255, 255, 255))
    black = PixelBuffer.blank(8, 8, color=(0, 0, 0, 255))

    assert dot_halftone(white, 4).pixels == white.pixels
    assert dot_halftone(black, 4, colored=False).pixels == black.pixels


def test_pencil_sketch_turns_flat_image_white() -> None:
    flat = PixelBuffer.blank(5, 5, color=(80, 120, 40, 255))

    result = pencil_sketch(flat, 2)

    assert result.get(2, 2) == (255, 255, 255, 255)


def test_chromatic_split_zero_offset_is_identity() -> None:
    buffer = palette_buffer()

    assert chromatic_split(buffer, 0).pixels == buffer.pixels


def test_cross_stitch_draws_diagonals_over_fabric() -> None:
    buffer = PixelBuffer.blank(6, 6, color=(10, 20, 30, 255))

    result = cross_stitch(buffer, 3)

    assert result.get(0, 0) == (10, 20, 30, 255)
    assert result.get(2, 0) == (10, 20, 30, 255)
    assert result.get(1, 0) == (196, 193, 184, 255)


def test_fabric_texture_is_reproducible() -> None:
    buffer = palette_buffer()

    first = fabric_texture(buffer, random.Random(4), blur_radius=2)
    second = fabric_texture(buffer, random.Random(4), blur_radius=2)

    assert first.pixels == second.pixels
    assert first.size == buffer.size
