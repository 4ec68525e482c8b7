"""Declarative style catalog.

A style is an ordered tuple of ``Step`` records. Each step names a transform
in ``TRANSFORMS`` and binds its keyword arguments either to literals, to a
``Param`` scaled from the user's ``StyleParameters``, or to a ``Setting`` read
from the service configuration. Adding a style means adding data here, not
code in the runner.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from . import blur, effects, gradient, halftone, luminance, quantize, stochastic, tone
from .params import StyleParameters
from ..errors import UnknownStyleError

TransformFn = Callable[..., Any]

DEFAULT_STYLE = "embroidery"


@dataclass(frozen=True)
class Param:
    """Reference to a ``StyleParameters`` field, mapped as ``value * scale + offset``."""

    name: str
    scale: float = 1.0
    offset: float = 0.0
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    as_int: bool = True

    def resolve(self, params: StyleParameters) -> Any:
        value = getattr(params, self.name) * self.scale + self.offset
        if self.minimum is not None:
            value = max(self.minimum, value)
        if self.maximum is not None:
            value = min(self.maximum, value)
        return int(round(value)) if self.as_int else float(value)


@dataclass(frozen=True)
class Setting:
    """Reference to a field of the service settings."""

    name: str

    def resolve(self, settings: Any) -> Any:
        return getattr(settings, self.name)


@dataclass(frozen=True)
class Step:
    name: str
    transform: str
    args: Mapping[str, Any] = field(default_factory=dict)

    def bind(self, params: StyleParameters, settings: Any) -> Dict[str, Any]:
        bound: Dict[str, Any] = {}
        for key, value in self.args.items():
            if isinstance(value, Param):
                bound[key] = value.resolve(params)
            elif isinstance(value, Setting):
                bound[key] = value.resolve(settings)
            else:
                bound[key] = value
        return bound


@dataclass(frozen=True)
class Transform:
    name: str
    fn: TransformFn
    stochastic: bool = False


class TransformRegistry:
    def __init__(self) -> None:
        self._by_name: Dict[str, Transform] = {}

    def register(self, name: str, fn: TransformFn, stochastic: bool = False) -> None:
        self._by_name[name] = Transform(name, fn, stochastic)

    def names(self) -> List[str]:
        return sorted(self._by_name)

    def get(self, name: str) -> Transform:
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(
                f"Unknown transform '{name}'. Available: {', '.join(self.names())}"
            ) from None

    def __contains__(self, name: str) -> bool:
        return name in self._by_name


TRANSFORMS = TransformRegistry()
TRANSFORMS.register("quantize", quantize.quantize)
TRANSFORMS.register("retro_print", quantize.retro_print)
TRANSFORMS.register("grayscale", luminance.grayscale)
TRANSFORMS.register("box_blur", blur.box_blur)
TRANSFORMS.register("box_blur_1d", blur.box_blur_1d)
TRANSFORMS.register("gaussian_blur", blur.gaussian_blur_2d)
TRANSFORMS.register("thread_pattern", gradient.thread_pattern)
TRANSFORMS.register("oil_paint", gradient.oil_paint)
TRANSFORMS.register("emboss", gradient.emboss)
TRANSFORMS.register("shade", gradient.shade)
TRANSFORMS.register("draw_edges", gradient.draw_edges)
TRANSFORMS.register("spread", stochastic.spread, stochastic=True)
TRANSFORMS.register("slice_displace", stochastic.slice_displace, stochastic=True)
TRANSFORMS.register("fabric_texture", effects.fabric_texture, stochastic=True)
TRANSFORMS.register("paper_texture", effects.paper_texture, stochastic=True)
TRANSFORMS.register("chromatic_split", effects.chromatic_split)
TRANSFORMS.register("cross_stitch", effects.cross_stitch)
TRANSFORMS.register("pencil_sketch", effects.pencil_sketch)
TRANSFORMS.register("color_boost", tone.color_boost)
TRANSFORMS.register("adjust_brightness", tone.adjust_brightness)
TRANSFORMS.register("posterize", tone.posterize)
TRANSFORMS.register("scanlines", tone.scanlines)
TRANSFORMS.register("dot_halftone", halftone.dot_halftone)
TRANSFORMS.register("ordered_halftone", halftone.ordered_halftone)


@dataclass(frozen=True)
class Style:
    key: str
    label: str
    description: str
    steps: Tuple[Step, ...]

    def step_names(self) -> List[str]:
        return [step.name for step in self.steps]


class StyleCatalog:
    def __init__(self, transforms: TransformRegistry = TRANSFORMS, default: str = DEFAULT_STYLE) -> None:
        self._transforms = transforms
        self._styles: Dict[str, Style] = {}
        self.default = default

    @property
    def transforms(self) -> TransformRegistry:
        return self._transforms

    def register(self, style: Style) -> None:
        for step in style.steps:
            if step.transform not in self._transforms:
                raise KeyError(f"Style '{style.key}' uses unknown transform '{step.transform}'")
        self._styles[style.key] = style

    def keys(self) -> List[str]:
        return list(self._styles)

    def __contains__(self, key: str) -> bool:
        return _normalize(key) in self._styles

    def get(self, key: Optional[str], strict: bool = False, default: Optional[str] = None) -> Style:
        """Look up ``key``; unknown keys resolve to the default style unless ``strict``."""
        normalized = _normalize(key or "")
        style = self._styles.get(normalized)
        if style is not None:
            return style
        if strict:
            raise UnknownStyleError(key or "", self.keys())
        fallback = _normalize(default or "")
        return self._styles.get(fallback) or self._styles[self.default]

    def describe(self) -> List[Dict[str, Any]]:
        return [
            {
                "key": style.key,
                "label": style.label,
                "description": style.description,
                "steps": style.step_names(),
                "default": style.key == self.default,
            }
            for style in self._styles.values()
        ]


def _normalize(key: str) -> str:
    return key.strip().lower().replace("-", "_").replace(" ", "_")


KMEANS = {
    "iterations": Setting("kmeans_iterations"),
    "sample_limit": Setting("kmeans_sample_limit"),
}

CATALOG = StyleCatalog()

CATALOG.register(Style(
    key="embroidery",
    label="Embroidery",
    description="Flat thread colors, directional stitches, frayed edges and cloth relief.",
    steps=(
        Step("Quantizing colors", "quantize", {"num_colors": Param("num_colors"), **KMEANS}),
        Step("Applying thread pattern", "thread_pattern", {"thickness": Param("thread_thickness")}),
        Step("Spreading pixels", "spread", {"amount": Param("spread_amount")}),
        Step("Adding fabric texture", "fabric_texture", {"blur_radius": 8}),
        Step("Applying 3D shading", "shade", {"azimuth": 120.0, "elevation": 55.0, "blur_radius": 2}),
        Step("Boosting colors", "color_boost", {"brightness": Param("brightness"), "saturation": 105}),
    ),
))

CATALOG.register(Style(
    key="cross_stitch",
    label="Cross Stitch",
    description="One X stitch per cell on linen.",
    steps=(
        Step("Quantizing colors", "quantize", {"num_colors": Param("num_colors"), **KMEANS}),
        Step("Stitching cells", "cross_stitch", {"cell_size": Param("thread_thickness", scale=2, minimum=3)}),
        Step("Adding fabric texture", "fabric_texture", {"blur_radius": 2, "opacity": 0.5}),
        Step("Boosting colors", "color_boost", {"brightness": Param("brightness"), "saturation": 105}),
    ),
))

CATALOG.register(Style(
    key="oil_painting",
    label="Oil Painting",
    description="Brush strokes that follow the image's edge flow, with impasto relief.",
    steps=(
        Step("Softening detail", "gaussian_blur", {"radius": 1}),
        Step("Quantizing colors", "quantize", {"num_colors": Param("num_colors"), **KMEANS}),
        Step("Painting strokes", "oil_paint", {"brush_length": Param("thread_thickness", scale=2, offset=2), "smoothing": 2}),
        Step("Raising impasto", "shade", {"blur_radius": 1, "strength": 0.6, "mode": "add"}),
        Step("Boosting colors", "color_boost", {"brightness": Param("brightness"), "saturation": 120}),
    ),
))

CATALOG.register(Style(
    key="watercolor",
    label="Watercolor",
    description="Washed-out pigment that bleeds past its edges on grainy paper.",
    steps=(
        Step("Softening detail", "gaussian_blur", {"radius": 2}),
        Step("Quantizing colors", "quantize", {"num_colors": Param("num_colors"), **KMEANS}),
        Step("Bleeding pigment", "spread", {"amount": Param("spread_amount")}),
        Step("Wetting edges", "box_blur", {"radius": 1}),
        Step("Adding paper texture", "paper_texture", {"opacity": 0.6}),
        Step("Adjusting tone", "color_boost", {"brightness": Param("brightness"), "saturation": 90}),
    ),
))

CATALOG.register(Style(
    key="halftone",
    label="Halftone",
    description="Color dot screen.",
    steps=(
        Step("Adjusting tone", "color_boost", {"brightness": Param("brightness"), "saturation": 100}),
        Step("Screening dots", "dot_halftone", {"cell_size": Param("thread_thickness", scale=2, offset=2)}),
    ),
))

CATALOG.register(Style(
    key="newsprint",
    label="Newsprint",
    description="Black and white ordered dither.",
    steps=(
        Step("Adjusting brightness", "adjust_brightness", {"factor": Param("brightness", scale=0.01, as_int=False)}),
        Step("Dithering", "ordered_halftone"),
    ),
))

CATALOG.register(Style(
    key="retro_print",
    label="Retro Print",
    description="Limited ink palette mixed with a Bayer ordered dither.",
    steps=(
        Step("Dithering to palette", "retro_print", {"num_colors": Param("num_colors"), **KMEANS}),
        Step("Boosting colors", "color_boost", {"brightness": Param("brightness"), "saturation": 110}),
    ),
))

CATALOG.register(Style(
    key="glitch",
    label="Glitch",
    description="Torn horizontal slices with split color channels.",
    steps=(
        Step("Slicing bands", "slice_displace", {"amount": Param("spread_amount")}),
        Step("Splitting channels", "chromatic_split", {"offset": Param("spread_amount")}),
        Step("Scattering pixels", "spread", {"amount": 1}),
        Step("Boosting colors", "color_boost", {"brightness": Param("brightness"), "saturation": 130}),
    ),
))

CATALOG.register(Style(
    key="vhs",
    label="VHS",
    description="Smeared tape playback with tracking errors and scanlines.",
    steps=(
        Step("Smearing signal", "box_blur_1d", {"axis": "x", "radius": Param("thread_thickness")}),
        Step("Splitting channels", "chromatic_split", {"offset": 2}),
        Step("Tracking errors", "slice_displace", {"amount": Param("spread_amount")}),
        Step("Drawing scanlines", "scanlines", {"spacing": 3, "darkness": 0.35}),
        Step("Adding tape noise", "paper_texture", {"opacity": 0.3}),
    ),
))

CATALOG.register(Style(
    key="emboss",
    label="Emboss",
    description="Raised relief from the luminance gradient.",
    steps=(
        Step("Embossing", "emboss", {"strength": Param("thread_thickness", scale=0.5, as_int=False)}),
        Step("Adjusting tone", "color_boost", {"brightness": Param("brightness"), "saturation": 100}),
    ),
))

CATALOG.register(Style(
    key="sketch",
    label="Pencil Sketch",
    description="Graphite lines from a color-dodged negative.",
    steps=(
        Step("Sketching", "pencil_sketch", {"radius": Param("thread_thickness", offset=1)}),
        Step("Adjusting brightness", "adjust_brightness", {"factor": Param("brightness", scale=0.01, as_int=False)}),
    ),
))

CATALOG.register(Style(
    key="pop_art",
    label="Pop Art",
    description="Few saturated inks outlined in black.",
    steps=(
        Step("Quantizing colors", "quantize", {"num_colors": Param("num_colors", maximum=6), **KMEANS}),
        Step("Inking outlines", "draw_edges", {"threshold": Setting("edge_threshold")}),
        Step("Boosting colors", "color_boost", {"brightness": Param("brightness"), "saturation": 150}),
    ),
))
