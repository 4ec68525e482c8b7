"""Infrastructure helpers for fetching, caching and encoding images."""

from .cache import CACHE, ResponseCache
from .imaging import decode_image, encode_png
from .network import FETCHER, SourceFetcher
from .responses import send_png_bytes

__all__ = [
    "CACHE",
    "ResponseCache",
    "decode_image",
    "encode_png",
    "FETCHER",
    "SourceFetcher",
    "send_png_bytes",
]
