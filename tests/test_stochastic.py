import random

from stitchify.processing.buffer import PixelBuffer
from stitchify.processing.stochastic import channel_shift, noise_layer, slice_displace, spread


def unique_buffer(width: int, height: int) -> PixelBuffer:
    buffer = PixelBuffer.blank(width, height)
    for y in range(height):
        for x in range(width):
            buffer.set(x, y, x * 10, y * 10, (x + y) % 256)
    return buffer


def test_spread_with_zero_amount_is_identity() -> None:
    buffer = unique_buffer(5, 4)

    result = spread(buffer, 0, random.Random(1))

    assert result.pixels == buffer.pixels


def test_spread_with_huge_amount_stays_in_bounds() -> None:
    buffer = unique_buffer(3, 3)
    source_colors = {buffer.get(x, y) for x in range(3) for y in range(3)}

    result = spread(buffer, 1000, random.Random(2))

    assert result.size == buffer.size
    assert {result.get(x, y) for x in range(3) for y in range(3)} <= source_colors


def test_spread_is_reproducible_with_seeded_rng() -> None:
    buffer = unique_buffer(6, 6)

    first = spread(buffer, 3, random.Random(7))
    second = spread(buffer, 3, random.Random(7))

    assert first.pixels == second.pixels


def test_spread_does_not_mutate_input() -> None:
    buffer = unique_buffer(4, 4)
    original = bytes(buffer.pixels)

    spread(buffer, 2, random.Random(3))

    assert bytes(buffer.pixels) == original


def test_slice_displace_zero_amount_is_identity() -> None:
    buffer = unique_buffer(8, 30)

    assert slice_displace(buffer, 0, random.Random(1)).pixels == buffer.pixels


def test_slice_displace_only_moves_pixels_within_their_row() -> None:
    buffer = unique_buffer(12, 40)

    result = slice_displace(buffer, 3, random.Random(5), bands=4)

    for y in range(buffer.height):
        row = {buffer.get(x, y) for x in range(buffer.width)}
        assert {result.get(x, y) for x in range(buffer.width)} <= row


def test_channel_shift_moves_one_channel_with_clamping() -> None:
    buffer = PixelBuffer(3, 1, bytes((10, 1, 2, 255, 20, 3, 4, 255, 30, 5, 6, 255)))

    result = channel_shift(buffer, 0, 1)

    assert [result.get(x, 0) for x in range(3)] == [
        (10, 1, 2, 255),
        (10, 3, 4, 255),
        (20, 5, 6, 255),
    ]


def test_noise_layer_is_opaque_gray() -> None:
    layer = noise_layer(4, 3, random.Random(0))

    for y in range(3):
        for x in range(4):
            r, g, b, a = layer.get(x, y)
            assert r == g == b
            assert a == 255
