"""Gradients and biome color lookup.

Colors on the map come from gradients. A ColorEvaluator arranges
gradients in a two-level band structure: elevation bands, each split into
moisture bands, each owning one gradient. The elevation value picks a
position along the chosen gradient.

Despite the names, any two factors in [0, 1] can drive an evaluator, for
example temperature and moisture.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple

from PIL import ImageColor

from .exceptions import (
    InvalidColorError,
    MissingColorsError,
    MissingElevationLevelsError,
    MissingMoistureLevelsError,
)
from .utils import normalize

if TYPE_CHECKING:
    from .config import BiomeMapConfig


class Rgb(NamedTuple):
    """8-bit-per-channel color."""

    r: int
    g: int
    b: int


def parse_color(text: str) -> tuple[float, float, float]:
    """Parse an HTML/CSS color string into float channels in [0, 1].

    Accepts hex (``#rgb``, ``#rrggbb``, ``#rrggbbaa``), CSS color names and
    ``rgb()``/``hsl()`` notation. Alpha is dropped.

    Raises:
        InvalidColorError: If the string is not a recognizable color.
    """
    try:
        channels = ImageColor.getrgb(text)
    except (ValueError, AttributeError) as e:
        raise InvalidColorError(text) from e
    r, g, b = channels[:3]
    return (r / 255.0, g / 255.0, b / 255.0)


def _to_byte(channel: float) -> int:
    # Round half up, clamped to the byte range
    return min(255, max(0, int(channel * 255.0 + 0.5)))


class Gradient:
    """Ordered color stops evenly spaced across [0, 1].

    Immutable after construction and safe to share between threads.
    """

    __slots__ = ("_stops",)

    def __init__(self, stops: tuple[tuple[float, float, float], ...]):
        if not stops:
            raise MissingColorsError()
        self._stops = tuple(stops)

    @classmethod
    def from_colors(cls, colors: list[str]) -> "Gradient":
        """Build a gradient from color strings.

        Raises:
            MissingColorsError: If ``colors`` is empty.
            InvalidColorError: If any color cannot be parsed.
        """
        if not colors:
            raise MissingColorsError()
        return cls(tuple(parse_color(color) for color in colors))

    @property
    def stops(self) -> tuple[tuple[float, float, float], ...]:
        return self._stops

    def interpolate(self, t: float) -> tuple[float, float, float]:
        """Linearly interpolate float channels at position ``t``.

        ``t`` outside [0, 1] clamps to the nearest end color.
        """
        stops = self._stops
        last = len(stops) - 1
        if last == 0 or t <= 0.0:
            return stops[0]
        if t >= 1.0:
            return stops[last]

        position = t * last
        index = int(position)
        frac = position - index
        lo, hi = stops[index], stops[index + 1]
        return (
            lo[0] + (hi[0] - lo[0]) * frac,
            lo[1] + (hi[1] - lo[1]) * frac,
            lo[2] + (hi[2] - lo[2]) * frac,
        )

    def at(self, t: float) -> Rgb:
        """Color at position ``t`` as 8-bit RGB."""
        r, g, b = self.interpolate(t)
        return Rgb(_to_byte(r), _to_byte(g), _to_byte(b))

    def __repr__(self) -> str:
        return f"Gradient({len(self._stops)} stops)"


@dataclass(frozen=True, slots=True)
class MoistureBand:
    """Moisture range ending at ``threshold`` with its gradient."""

    threshold: float
    gradient: Gradient


@dataclass(frozen=True, slots=True)
class ElevationBand:
    """Elevation range [lower, threshold] split into moisture bands."""

    lower: float
    threshold: float
    moisture_bands: tuple[MoistureBand, ...]


class ColorEvaluator:
    """Look up colors from a hierarchy of elevation and moisture bands.

    Thresholds are cumulative and normalized, so the last band of each
    level ends at 1.0. A value exactly on a boundary belongs to the lower
    band. Values above every threshold, such as 1.0 plus rounding error,
    fall back to the last band.
    """

    __slots__ = ("_bands",)

    def __init__(self, bands: tuple[ElevationBand, ...]):
        if not bands:
            raise MissingElevationLevelsError()
        for band in bands:
            if not band.moisture_bands:
                raise MissingMoistureLevelsError()
        self._bands = tuple(bands)

    @classmethod
    def from_bands(cls, biome_map: "BiomeMapConfig") -> "ColorEvaluator":
        """Build an evaluator from a biome map configuration.

        Each level's weight is accumulated in declared order and divided by
        the total weight of its siblings to get the band threshold.

        Args:
            biome_map: Biome map with elevation levels and moisture levels.

        Returns:
            ColorEvaluator with one elevation band per elevation level.

        Raises:
            MissingElevationLevelsError: If there are no elevation levels.
            MissingMoistureLevelsError: If an elevation level has no moisture levels.
            MissingColorsError: If a gradient is empty.
            InvalidColorError: If a gradient color cannot be parsed.
        """
        levels = biome_map.elevation_levels
        if not levels:
            raise MissingElevationLevelsError()

        total_elevation = biome_map.total_elevation()
        bands = []
        cumulative_elevation = 0.0
        lower = 0.0

        for level in levels:
            if not level.moisture_levels:
                raise MissingMoistureLevelsError()

            total_moisture = level.total_moisture()
            moisture_bands = []
            cumulative_moisture = 0.0
            for moisture_level in level.moisture_levels:
                cumulative_moisture += moisture_level.moisture
                moisture_bands.append(
                    MoistureBand(
                        threshold=cumulative_moisture / total_moisture,
                        gradient=Gradient.from_colors(moisture_level.gradient),
                    )
                )

            cumulative_elevation += level.elevation
            threshold = cumulative_elevation / total_elevation
            bands.append(
                ElevationBand(
                    lower=lower,
                    threshold=threshold,
                    moisture_bands=tuple(moisture_bands),
                )
            )
            lower = threshold

        return cls(tuple(bands))

    @property
    def bands(self) -> tuple[ElevationBand, ...]:
        return self._bands

    def select(self, elevation: float, moisture: float) -> tuple[ElevationBand, MoistureBand]:
        """Pick the elevation band and moisture band for a sample."""
        band = self._bands[-1]
        for candidate in self._bands:
            if elevation <= candidate.threshold:
                band = candidate
                break

        sub_band = band.moisture_bands[-1]
        for candidate in band.moisture_bands:
            if moisture <= candidate.threshold:
                sub_band = candidate
                break

        return band, sub_band

    def evaluate(self, elevation: float, moisture: float) -> Rgb:
        """Color for an (elevation, moisture) pair.

        Elevation is renormalized into the selected band's own range to
        pick the position along the moisture band's gradient.
        """
        band, sub_band = self.select(elevation, moisture)
        t = normalize(elevation, band.lower, band.threshold)
        return sub_band.gradient.at(t)

    def __repr__(self) -> str:
        return f"ColorEvaluator({len(self._bands)} elevation bands)"
