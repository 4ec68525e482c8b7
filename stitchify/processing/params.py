from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple

from ..config import SETTINGS, StudioSettings
from ..errors import ConfigurationError


@dataclass(frozen=True)
class StyleParameters:
    """User-facing knobs shared by every style; styles ignore the ones they don't use."""

    num_colors: int = 8
    thread_thickness: int = 3
    spread_amount: int = 2
    brightness: int = 115

    LIMITS: ClassVar[Dict[str, Tuple[int, int]]] = {
        "num_colors": (2, 32),
        "thread_thickness": (1, 10),
        "spread_amount": (1, 10),
        "brightness": (50, 200),
    }

    @classmethod
    def from_settings(cls, settings: StudioSettings = SETTINGS) -> "StyleParameters":
        return cls(
            num_colors=settings.num_colors,
            thread_thickness=settings.thread_thickness,
            spread_amount=settings.spread_amount,
            brightness=settings.brightness,
        )

    @classmethod
    def from_mapping(
        cls,
        values: Mapping[str, Any],
        defaults: Optional["StyleParameters"] = None,
    ) -> "StyleParameters":
        """Build parameters from string values such as query arguments.

        Keys that are absent or empty fall back to ``defaults``.
        """
        base = defaults or cls.from_settings()
        overrides: Dict[str, int] = {}
        for field in fields(cls):
            raw = values.get(field.name)
            if raw is None or raw == "":
                continue
            try:
                overrides[field.name] = int(raw)
            except (TypeError, ValueError):
                raise ConfigurationError(f"{field.name} must be an integer, got {raw!r}") from None
        return replace(base, **overrides)

    def clamped(self) -> "StyleParameters":
        """Clamp every knob into its valid range; non-positive color counts are rejected."""
        if self.num_colors <= 0:
            raise ConfigurationError(f"num_colors must be positive, got {self.num_colors}")
        values = {}
        for name, (low, high) in self.LIMITS.items():
            values[name] = min(high, max(low, int(getattr(self, name))))
        return replace(self, **values)
