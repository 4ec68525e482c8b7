import math

import pytest

from stitchify.errors import ConfigurationError
from stitchify.processing.blend import (
    blend_layers,
    color_dodge,
    linear_add,
    overlay,
    soft_light,
)
from stitchify.processing.buffer import PixelBuffer


@pytest.mark.parametrize(
    "blend, expected",
    [
        (0.0, 0.25 * 0.25),
        (0.5 - 1e-9, 0.25),
        (0.5, 0.25),
        (1.0, math.sqrt(0.25)),
    ],
)
def test_soft_light_branches(blend: float, expected: float) -> None:
    assert soft_light(0.25, blend) == pytest.approx(expected, abs=1e-6)


def test_soft_light_light_branch_formula() -> None:
    base, blend = 0.6, 0.8
    expected = 2 * base * (1 - blend) + math.sqrt(base) * (2 * blend - 1)

    assert soft_light(base, blend) == pytest.approx(expected)


@pytest.mark.parametrize(
    "base, layer, expected",
    [
        (0.25, 0.5, 0.25),
        (0.75, 0.5, 0.75),
        (0.25, 1.0, 0.5),
        (0.75, 0.0, 0.5),
    ],
)
def test_overlay_branches(base: float, layer: float, expected: float) -> None:
    assert overlay(base, layer) == pytest.approx(expected)


def test_color_dodge_guards_full_blend() -> None:
    assert color_dodge(0.3, 1.0) == 1.0
    assert color_dodge(0.25, 0.5) == pytest.approx(0.5)
    assert color_dodge(0.8, 0.5) == 1.0
    assert color_dodge(0.4, 0.0) == pytest.approx(0.4)


def test_linear_add_clamps() -> None:
    assert linear_add(0.7, 0.6) == 1.0
    assert linear_add(0.2, 0.3) == pytest.approx(0.5)


def test_blend_layers_soft_light_with_black_layer() -> None:
    base = PixelBuffer.blank(2, 2, color=(128, 128, 128, 200))
    layer = PixelBuffer.blank(2, 2, color=(0, 0, 0, 255))

    result = blend_layers(base, layer, "soft_light")

    assert result.get(1, 1) == (64, 64, 64, 200)


def test_blend_layers_zero_opacity_is_identity() -> None:
    base = PixelBuffer.blank(3, 2, color=(10, 120, 250, 255))
    layer = PixelBuffer.blank(3, 2, color=(255, 0, 90, 255))

    assert blend_layers(base, layer, "overlay", opacity=0.0).pixels == base.pixels


def test_blend_layers_rejects_size_mismatch() -> None:
    with pytest.raises(ConfigurationError):
        blend_layers(PixelBuffer.blank(2, 2), PixelBuffer.blank(3, 2), "overlay")


def test_blend_layers_rejects_unknown_mode() -> None:
    with pytest.raises(ConfigurationError):
        blend_layers(PixelBuffer.blank(2, 2), PixelBuffer.blank(2, 2), "hard_mix")
