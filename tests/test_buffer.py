import pytest
from PIL import Image

from stitchify.errors import ConfigurationError
from stitchify.processing.buffer import PixelBuffer


def test_rejects_non_positive_dimensions() -> None:
    with pytest.raises(ConfigurationError):
        PixelBuffer(0, 4, bytearray())
    with pytest.raises(ConfigurationError):
        PixelBuffer.blank(3, -1)


def test_rejects_mismatched_pixel_length() -> None:
    with pytest.raises(ConfigurationError):
        PixelBuffer(2, 2, bytearray(15))


def test_get_and_set_address_row_major_rgba() -> None:
    buffer = PixelBuffer.blank(3, 2)

    buffer.set(2, 1, 10, 20, 30, 40)

    assert buffer.get(2, 1) == (10, 20, 30, 40)
    assert buffer.pixels[(1 * 3 + 2) * 4] == 10


def test_set_clamps_channel_values() -> None:
    buffer = PixelBuffer.blank(1, 1)

    buffer.set(0, 0, 300, -5, 12.4, 255)

    assert buffer.get(0, 0) == (255, 0, 12, 255)


def test_out_of_bounds_access_raises() -> None:
    buffer = PixelBuffer.blank(2, 2)

    with pytest.raises(IndexError):
        buffer.get(2, 0)
    with pytest.raises(IndexError):
        buffer.set(0, -1, 0, 0, 0)


def test_clamp_coord_limits_to_image() -> None:
    buffer = PixelBuffer.blank(4, 3)

    assert buffer.clamp_coord(-2, 10) == (0, 2)
    assert buffer.clamp_coord(5, -1) == (3, 0)
    assert buffer.clamp_coord(1, 1) == (1, 1)


def test_from_image_converts_to_rgba() -> None:
    img = Image.new("RGB", (3, 2), color=(1, 2, 3))

    buffer = PixelBuffer.from_image(img)

    assert buffer.size == (3, 2)
    assert buffer.get(2, 1) == (1, 2, 3, 255)
    assert buffer.to_image().mode == "RGBA"
    assert buffer.to_image().size == (3, 2)


def test_copy_is_independent() -> None:
    buffer = PixelBuffer.blank(2, 2, color=(5, 5, 5, 255))

    clone = buffer.copy()
    clone.set(0, 0, 200, 200, 200)

    assert buffer.get(0, 0) == (5, 5, 5, 255)
