import random

import pytest

from stitchify.errors import ConfigurationError
from stitchify.processing.blur import (
    box_blur,
    box_blur_1d,
    directional_blur,
    gaussian_blur_2d,
    gaussian_kernel,
)
from stitchify.processing.buffer import PixelBuffer


def red_row(*values: int) -> PixelBuffer:
    data = bytearray()
    for value in values:
        data += bytes((value, 0, 0, 255))
    return PixelBuffer(len(values), 1, data)


def random_buffer(width: int, height: int, seed: int = 1) -> PixelBuffer:
    rng = random.Random(seed)
    data = bytearray(rng.randrange(256) for _ in range(width * height * 4))
    return PixelBuffer(width, height, data)


def test_box_blur_averages_fewer_samples_at_edges() -> None:
    result = box_blur_1d(red_row(0, 90, 180), "x", 1)

    assert [result.get(x, 0)[0] for x in range(3)] == [45, 90, 135]


def test_box_blur_radius_larger_than_image_averages_everything() -> None:
    result = box_blur_1d(red_row(0, 90, 180), "x", 50)

    assert [result.get(x, 0)[0] for x in range(3)] == [90, 90, 90]


def test_box_blur_vertical_axis() -> None:
    column = PixelBuffer(1, 3, bytes((0, 0, 0, 255, 90, 0, 0, 255, 180, 0, 0, 255)))

    result = box_blur_1d(column, "y", 1)

    assert [result.get(0, y)[0] for y in range(3)] == [45, 90, 135]


def test_box_blur_rejects_unknown_axis() -> None:
    with pytest.raises(ConfigurationError):
        box_blur_1d(red_row(1, 2), "z", 1)


def test_zero_radius_returns_identical_copy() -> None:
    buffer = random_buffer(4, 3)

    for result in (box_blur_1d(buffer, "x", 0), box_blur(buffer, 0), gaussian_blur_2d(buffer, 0)):
        assert result.pixels == buffer.pixels
        assert result is not buffer


def test_blur_keeps_alpha() -> None:
    buffer = random_buffer(5, 4)

    result = box_blur(buffer, 2)

    assert result.pixels[3::4] == buffer.pixels[3::4]


def test_gaussian_kernel_is_normalized() -> None:
    kernel = gaussian_kernel(2)

    assert len(kernel) == 5
    assert all(len(row) == 5 for row in kernel)
    assert sum(sum(row) for row in kernel) == pytest.approx(1.0)
    assert kernel[2][2] == max(max(row) for row in kernel)
    assert kernel[0][1] == pytest.approx(kernel[1][0])


def test_gaussian_kernel_zero_radius() -> None:
    assert gaussian_kernel(0) == [[1.0]]


def test_gaussian_blur_matches_direct_2d_convolution() -> None:
    buffer = random_buffer(6, 5, seed=7)
    radius = 2
    kernel = gaussian_kernel(radius)

    result = gaussian_blur_2d(buffer, radius)

    for y in range(buffer.height):
        for x in range(buffer.width):
            for c in range(3):
                total = 0.0
                weight_sum = 0.0
                for ky, row in enumerate(kernel):
                    for kx, weight in enumerate(row):
                        sx, sy = x + kx - radius, y + ky - radius
                        if buffer.in_bounds(sx, sy):
                            total += buffer.pixels[buffer.index(sx, sy) + c] * weight
                            weight_sum += weight
                expected = total / weight_sum
                assert abs(result.pixels[buffer.index(x, y) + c] - expected) <= 0.5 + 1e-6


def test_gaussian_blur_renormalizes_at_edges() -> None:
    flat = PixelBuffer.blank(5, 4, color=(100, 150, 200, 255))

    result = gaussian_blur_2d(flat, 3)

    assert result.pixels == flat.pixels


def test_gaussian_blur_with_radius_beyond_image() -> None:
    buffer = random_buffer(3, 2)

    result = gaussian_blur_2d(buffer, 10)

    assert result.size == (3, 2)
    assert len(result.pixels) == len(buffer.pixels)


def test_directional_blur_horizontal_matches_box_blur() -> None:
    buffer = random_buffer(6, 5)

    directional = directional_blur(buffer, 2, [0.0] * 30)

    assert directional.pixels == box_blur_1d(buffer, "x", 2).pixels


def test_directional_blur_vertical_matches_box_blur() -> None:
    buffer = random_buffer(6, 5, seed=9)

    directional = directional_blur(buffer, 2, [1.5707963267948966] * 30)

    assert directional.pixels == box_blur_1d(buffer, "y", 2).pixels


def test_directional_blur_rejects_wrong_field_size() -> None:
    with pytest.raises(ConfigurationError):
        directional_blur(random_buffer(3, 3), 1, [0.0] * 8)
