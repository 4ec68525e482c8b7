from __future__ import annotations

import io

from PIL import Image, UnidentifiedImageError

from ..config import SETTINGS
from ..errors import ConfigurationError, ImageTooLargeError
from ..processing.buffer import PixelBuffer


def decode_image(data: bytes) -> PixelBuffer:
    """Decode any Pillow-readable image into an RGBA buffer.

    The size is checked from the header, before the raster is decoded.
    """
    if not data:
        raise ConfigurationError("No image data supplied")
    limit = SETTINGS.max_pixels
    try:
        with Image.open(io.BytesIO(data)) as img:
            pixel_count = img.width * img.height
            if pixel_count > limit:
                raise ImageTooLargeError(f"Image has {pixel_count} pixels, limit is {limit}")
            return PixelBuffer.from_image(img)
    except Image.DecompressionBombError as exc:
        raise ImageTooLargeError(f"Image is too large: {exc}") from exc
    except (UnidentifiedImageError, OSError) as exc:
        raise ConfigurationError(f"Could not decode image: {exc}") from exc


def encode_png(buffer: PixelBuffer) -> bytes:
    out = io.BytesIO()
    buffer.to_image().save(out, "PNG", optimize=True)
    return out.getvalue()
