"""Exception types raised by the stylization pipeline and its HTTP surface."""

from __future__ import annotations


class StitchifyError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(StitchifyError, ValueError):
    """An invalid parameter or image was supplied before any pixel work began."""


class UnknownStyleError(ConfigurationError):
    """A style key is not in the catalog and fallback is disabled."""

    def __init__(self, key: str, available: list[str]) -> None:
        super().__init__(f"Unknown style '{key}'. Available: {', '.join(available)}")
        self.key = key
        self.available = available


class ImageTooLargeError(ConfigurationError):
    """The image exceeds the configured pixel limit."""


class SourceError(StitchifyError, RuntimeError):
    """The remote source image could not be fetched or decoded."""
