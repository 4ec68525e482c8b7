from __future__ import annotations

import logging
import time
from typing import Callable
from urllib.parse import urlsplit

import requests

from .imaging import decode_image
from ..config import SETTINGS
from ..errors import ConfigurationError, ImageTooLargeError, SourceError
from ..processing.buffer import PixelBuffer

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], requests.Session]


def _validate_source_url(url: str) -> str:
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ConfigurationError(f"Invalid source_url: {url}")
    return url


class SourceFetcher:
    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        self._session_factory = session_factory or requests.Session
        self._session = self._create_session()

    def _create_session(self) -> requests.Session:
        session = self._session_factory()
        session.headers.update({"User-Agent": "stitchify/1.0"})
        return session

    def fetch_bytes(self, source_url: str) -> bytes:
        target_url = _validate_source_url(source_url)
        last_exception: Exception | None = None
        for attempt in range(1, SETTINGS.retries + 2):
            try:
                response = self._session.get(target_url, timeout=SETTINGS.timeout)
                response.raise_for_status()
                return response.content
            except requests.RequestException as exc:
                last_exception = exc
                logger.warning("Fetching %s failed (attempt %d): %s", target_url, attempt, exc)
                time.sleep(0.4 * attempt)
        raise SourceError(f"Could not fetch {target_url}: {last_exception}")

    def fetch_source(self, source_url: str) -> PixelBuffer:
        data = self.fetch_bytes(source_url)
        try:
            return decode_image(data)
        except ImageTooLargeError:
            raise
        except ConfigurationError as exc:
            raise SourceError(f"Source {source_url} is not a usable image: {exc}") from exc


FETCHER = SourceFetcher()
