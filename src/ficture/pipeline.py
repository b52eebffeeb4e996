"""Map generation pipeline.

Wires noise fields and color evaluators through the grid engine:

1. Start from a uniform grid of zero samples.
2. Sample elevation and moisture noise at every coordinate.
3. Reduce the min/max of both factors and renormalize them to [0, 1].
4. Color every cell: below sea level from the ocean gradient, otherwise
   from the biome map's color evaluator.
"""

import math
import time

import structlog

from .color import ColorEvaluator, Gradient, Rgb
from .config import Config
from .grid import Grid
from .noise import NoiseField
from .sample import Sample
from .utils import normalize

logger = structlog.get_logger()

DEFAULT_SEA_LEVEL = 0.05

# (min elevation, max elevation, min moisture, max moisture)
Bounds = tuple[float, float, float, float]

_EMPTY_BOUNDS: Bounds = (math.inf, -math.inf, math.inf, -math.inf)


def _extend_bounds(bounds: Bounds, sample: Sample) -> Bounds:
    min_e, max_e, min_m, max_m = bounds
    return (
        min(min_e, sample.elevation),
        max(max_e, sample.elevation),
        min(min_m, sample.moisture),
        max(max_m, sample.moisture),
    )


def _merge_bounds(a: Bounds, b: Bounds) -> Bounds:
    return (min(a[0], b[0]), max(a[1], b[1]), min(a[2], b[2]), max(a[3], b[3]))


def sample_bounds(grid: Grid[Sample], max_workers: int | None = None) -> Bounds:
    """Min and max of elevation and moisture over the whole grid."""
    return grid.reduce_all(
        _EMPTY_BOUNDS, _extend_bounds, _merge_bounds, max_workers=max_workers
    )


def normalize_samples(
    grid: Grid[Sample], max_workers: int | None = None
) -> Grid[Sample]:
    """Linearly rescale both factors so each spans [0, 1] across the grid.

    Args:
        grid: Grid of raw samples.
        max_workers: Thread count for the reduction and the transform.

    Returns:
        New grid of normalized samples.
    """
    min_e, max_e, min_m, max_m = sample_bounds(grid, max_workers)
    logger.debug(
        "sample_bounds",
        min_elevation=min_e,
        max_elevation=max_e,
        min_moisture=min_m,
        max_moisture=max_m,
    )

    def rescale(sample: Sample) -> Sample:
        return Sample(
            elevation=normalize(sample.elevation, min_e, max_e),
            moisture=normalize(sample.moisture, min_m, max_m),
        )

    return grid.map_values(rescale, max_workers=max_workers)


def sample_noise(
    grid: Grid[Sample],
    elevation_field: NoiseField,
    moisture_field: NoiseField,
    max_workers: int | None = None,
) -> Grid[Sample]:
    """Fill every cell with elevation and moisture noise."""

    def fill(_: Sample, x: int, y: int) -> Sample:
        return Sample(
            elevation=elevation_field.generate(x, y),
            moisture=moisture_field.generate(x, y),
        )

    return grid.map_with_coordinates(fill, max_workers=max_workers)


def colorize(
    grid: Grid[Sample],
    evaluator: ColorEvaluator,
    ocean: Gradient | None = None,
    sea_level: float = DEFAULT_SEA_LEVEL,
    max_workers: int | None = None,
) -> Grid[Rgb]:
    """Map normalized samples to colors.

    Args:
        grid: Grid of samples normalized to [0, 1].
        evaluator: Biome color lookup for land.
        ocean: Gradient for cells below ``sea_level``; None colors every
            cell with the evaluator.
        sea_level: Elevation below which a cell is water.
        max_workers: Thread count.

    Returns:
        Grid of RGB colors.
    """

    def color(sample: Sample) -> Rgb:
        if ocean is not None and sample.elevation < sea_level:
            return ocean.at(normalize(sample.elevation, 0.0, sea_level))
        return evaluator.evaluate(sample.elevation, sample.moisture)

    return grid.map_values(color, max_workers=max_workers)


def generate_map(
    config: Config,
    width: int,
    height: int,
    *,
    elevation_noise: str = "elevation_noise",
    moisture_noise: str = "moisture_noise",
    biome_map: str = "default",
    ocean: str | None = "ocean",
    sea_level: float = DEFAULT_SEA_LEVEL,
    max_workers: int | None = None,
) -> Grid[Rgb]:
    """Generate a colored world map from configuration.

    All named lookups happen before any sampling, so a missing name fails
    without doing any work.

    Args:
        config: Validated configuration.
        width: Map width in pixels.
        height: Map height in pixels.
        elevation_noise: Noise generator name for elevation.
        moisture_noise: Noise generator name for moisture.
        biome_map: Biome map name for the color evaluator.
        ocean: Biome name of the below-sea-level gradient, or None for no ocean.
        sea_level: Normalized elevation below which cells are ocean.
        max_workers: Thread count for every grid transform.

    Returns:
        Grid of RGB colors, ready for ``extract``.

    Raises:
        ConfigLookupError: If any named entry is missing from the config.
    """
    elevation_field = config.get_noise_field(elevation_noise, width, height)
    moisture_field = config.get_noise_field(moisture_noise, width, height)
    evaluator = config.get_color_evaluator(biome_map)
    ocean_gradient = config.get_gradient(ocean) if ocean is not None else None

    logger.info("map_generation_started", width=width, height=height, biome_map=biome_map)
    start_time = time.perf_counter()

    grid = Grid.uniform(Sample(0.0, 0.0), width, height)
    grid = sample_noise(grid, elevation_field, moisture_field, max_workers)
    logger.info("noise_sampled", elapsed_s=round(time.perf_counter() - start_time, 2))

    grid = normalize_samples(grid, max_workers)
    colors = colorize(grid, evaluator, ocean_gradient, sea_level, max_workers)

    logger.info(
        "map_generated",
        width=width,
        height=height,
        elapsed_s=round(time.perf_counter() - start_time, 2),
    )
    return colors


def render_biome_chart(
    evaluator: ColorEvaluator,
    width: int,
    height: int,
    max_workers: int | None = None,
) -> Grid[Rgb]:
    """Render every color of a biome map.

    Elevation increases along the x axis and moisture along the y axis,
    which makes band boundaries and gradients easy to inspect.
    """
    grid = Grid.uniform(Sample(0.0, 0.0), width, height)
    grid = grid.map_with_coordinates(
        lambda _, x, y: Sample(elevation=x / width, moisture=y / height),
        max_workers=max_workers,
    )
    return grid.map_values(
        lambda sample: evaluator.evaluate(sample.elevation, sample.moisture),
        max_workers=max_workers,
    )
