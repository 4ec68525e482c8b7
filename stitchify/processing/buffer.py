from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from PIL import Image

from ..errors import ConfigurationError

RGBA = Tuple[int, int, int, int]


@dataclass
class PixelBuffer:
    """Fixed-size RGBA raster stored as one byte per channel, row-major."""

    width: int
    height: int
    pixels: bytearray

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError(
                f"Image dimensions must be positive, got {self.width}x{self.height}"
            )
        if not isinstance(self.pixels, bytearray):
            self.pixels = bytearray(self.pixels)
        expected = self.width * self.height * 4
        if len(self.pixels) != expected:
            raise ConfigurationError(
                f"Pixel data has {len(self.pixels)} bytes, expected {expected}"
            )

    @classmethod
    def blank(cls, width: int, height: int, color: RGBA = (0, 0, 0, 255)) -> "PixelBuffer":
        if width <= 0 or height <= 0:
            raise ConfigurationError(f"Image dimensions must be positive, got {width}x{height}")
        return cls(width, height, bytearray(bytes(color) * (width * height)))

    @classmethod
    def from_image(cls, img: Image.Image) -> "PixelBuffer":
        rgba = img.convert("RGBA")
        width, height = rgba.size
        return cls(width, height, bytearray(rgba.tobytes()))

    def to_image(self) -> Image.Image:
        return Image.frombytes("RGBA", (self.width, self.height), bytes(self.pixels))

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.width, self.height, bytearray(self.pixels))

    def index(self, x: int, y: int) -> int:
        return (y * self.width + x) * 4

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def clamp_coord(self, x: int, y: int) -> Tuple[int, int]:
        return (
            min(self.width - 1, max(0, x)),
            min(self.height - 1, max(0, y)),
        )

    def get(self, x: int, y: int) -> RGBA:
        if not self.in_bounds(x, y):
            raise IndexError(f"({x}, {y}) is outside {self.width}x{self.height}")
        i = self.index(x, y)
        data = self.pixels
        return data[i], data[i + 1], data[i + 2], data[i + 3]

    def set(self, x: int, y: int, r: int, g: int, b: int, a: int = 255) -> None:
        if not self.in_bounds(x, y):
            raise IndexError(f"({x}, {y}) is outside {self.width}x{self.height}")
        i = self.index(x, y)
        self.pixels[i:i + 4] = bytes((clamp_byte(r), clamp_byte(g), clamp_byte(b), clamp_byte(a)))


def clamp_byte(value: float) -> int:
    """Round half-up and clamp to the 0..255 channel range."""
    return min(255, max(0, int(value + 0.5)))


def require_same_size(first: PixelBuffer, second: PixelBuffer) -> None:
    if first.size != second.size:
        raise ConfigurationError(
            f"Layer size {second.width}x{second.height} does not match "
            f"{first.width}x{first.height}"
        )
