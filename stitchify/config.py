import logging
import os
from dataclasses import dataclass

from .errors import ConfigurationError


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class StudioSettings:
    port: int
    log_level: str
    default_style: str
    strict_styles: bool
    num_colors: int
    thread_thickness: int
    spread_amount: int
    brightness: int
    kmeans_iterations: int
    kmeans_sample_limit: int
    edge_threshold: int
    max_pixels: int
    timeout: float
    retries: int
    cache_ttl: float

    @classmethod
    def from_env(cls) -> "StudioSettings":
        return cls(
            port=int(os.getenv("PORT", "5500")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            default_style=os.getenv("DEFAULT_STYLE", "embroidery").lower(),
            strict_styles=_env_flag("STRICT_STYLES", "0"),
            num_colors=int(os.getenv("NUM_COLORS", "8")),
            thread_thickness=int(os.getenv("THREAD_THICKNESS", "3")),
            spread_amount=int(os.getenv("SPREAD_AMOUNT", "2")),
            brightness=int(os.getenv("BRIGHTNESS", "115")),
            kmeans_iterations=int(os.getenv("KMEANS_ITERATIONS", "10")),
            kmeans_sample_limit=int(os.getenv("KMEANS_SAMPLE_LIMIT", "4096")),
            edge_threshold=int(os.getenv("EDGE_THR", "45")),
            max_pixels=int(os.getenv("MAX_PIXELS", "4000000")),
            timeout=float(os.getenv("SOURCE_TIMEOUT", "10.0")),
            retries=int(os.getenv("SOURCE_RETRIES", "2")),
            cache_ttl=float(os.getenv("CACHE_TTL", "30")),
        )

    def validate(self) -> "StudioSettings":
        """Reject values the pipeline cannot run with."""
        if self.kmeans_iterations < 0:
            raise ConfigurationError(f"kmeans_iterations must be >= 0, got {self.kmeans_iterations}")
        if self.kmeans_sample_limit <= 0:
            raise ConfigurationError(f"kmeans_sample_limit must be positive, got {self.kmeans_sample_limit}")
        if self.max_pixels <= 0:
            raise ConfigurationError(f"max_pixels must be positive, got {self.max_pixels}")
        return self


SETTINGS = StudioSettings.from_env()


def configure_logging() -> logging.Logger:
    logging.basicConfig(level=SETTINGS.log_level)
    return logging.getLogger("stitchify")
