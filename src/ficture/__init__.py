"""Procedural world map generation.

This package generates world map images by sampling wrapped fractal
noise for elevation and moisture and coloring the result through
configurable biome gradients.
"""

from .color import ColorEvaluator, Gradient, Rgb, parse_color
from .config import Config, load_config, parse_config
from .exceptions import ConfigError, ConfigLookupError, FictureError
from .grid import Grid
from .image import pixels_to_image, save_image
from .noise import NoiseField
from .pipeline import generate_map, normalize_samples, render_biome_chart
from .sample import Sample
from .utils import normalize

__all__ = [
    "ColorEvaluator",
    "Config",
    "ConfigError",
    "ConfigLookupError",
    "FictureError",
    "Gradient",
    "Grid",
    "NoiseField",
    "Rgb",
    "Sample",
    "generate_map",
    "load_config",
    "normalize",
    "normalize_samples",
    "parse_color",
    "parse_config",
    "pixels_to_image",
    "render_biome_chart",
    "save_image",
]
