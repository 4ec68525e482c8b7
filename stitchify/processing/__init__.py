"""Raster transforms and the style pipeline that chains them."""

from .blend import BLEND_MODES, blend_layers, color_dodge, linear_add, overlay, soft_light
from .blur import box_blur, box_blur_1d, directional_blur, gaussian_blur_2d, gaussian_kernel
from .buffer import PixelBuffer
from .catalog import CATALOG, DEFAULT_STYLE, TRANSFORMS, Param, Setting, Step, Style, StyleCatalog
from .gradient import draw_edges, edge_mask, emboss, flow_field, oil_paint, shade, sobel, thread_pattern
from .luminance import grayscale, luminance, luminance_plane
from .params import StyleParameters
from .pipeline import PipelineRunner, PipelineState, StepSnapshot, run_style
from .quantize import cluster, quantize, quantize_image, sample_colors
from .stochastic import slice_displace, spread

__all__ = [
    "BLEND_MODES",
    "blend_layers",
    "color_dodge",
    "linear_add",
    "overlay",
    "soft_light",
    "box_blur",
    "box_blur_1d",
    "directional_blur",
    "gaussian_blur_2d",
    "gaussian_kernel",
    "PixelBuffer",
    "CATALOG",
    "DEFAULT_STYLE",
    "TRANSFORMS",
    "Param",
    "Setting",
    "Step",
    "Style",
    "StyleCatalog",
    "draw_edges",
    "edge_mask",
    "emboss",
    "flow_field",
    "oil_paint",
    "shade",
    "sobel",
    "thread_pattern",
    "grayscale",
    "luminance",
    "luminance_plane",
    "StyleParameters",
    "PipelineRunner",
    "PipelineState",
    "StepSnapshot",
    "run_style",
    "cluster",
    "quantize",
    "quantize_image",
    "sample_colors",
    "slice_displace",
    "spread",
]
