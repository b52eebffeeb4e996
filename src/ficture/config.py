"""Map generation configuration loading from TOML files."""

import math
import tomllib
from pathlib import Path

import structlog
from pydantic import BaseModel, Field, ValidationError

from .color import ColorEvaluator, Gradient, parse_color
from .exceptions import (
    ConfigParseError,
    InvalidElevationError,
    InvalidFilePathError,
    InvalidLacunarityError,
    InvalidMoistureError,
    InvalidOctavesError,
    InvalidPersistenceError,
    MissingColorsError,
    MissingElevationLevelsError,
    MissingMoistureLevelsError,
    UnknownBiomeError,
    UnknownBiomeMapError,
    UnknownNoiseGeneratorError,
)
from .noise import DEFAULT_SEED, NoiseField

logger = structlog.get_logger()

DEFAULT_CONFIG_PATH = Path("config/config.toml")


def _is_positive(value: float) -> bool:
    """True for finite numbers above zero."""
    return math.isfinite(value) and value > 0


def _check_gradient(gradient: list[str]) -> None:
    if not gradient:
        raise MissingColorsError()
    for color in gradient:
        parse_color(color)


class BiomeConfig(BaseModel):
    """Gradient for a single named biome."""

    gradient: list[str]

    def check(self) -> None:
        """Validate the gradient colors."""
        _check_gradient(self.gradient)


class NoiseConfig(BaseModel):
    """Noise generation parameters."""

    octaves: int = Field(default=6, description="Number of octaves to sum")
    persistence: float = Field(
        default=2.0, description="Amplitude divisor per octave"
    )
    lacunarity: float = Field(
        default=3.0, description="Frequency multiplier per octave"
    )
    seed: int = Field(
        default=DEFAULT_SEED, description="Seed of the noise primitive"
    )

    def check(self) -> None:
        """Validate the noise parameters."""
        if self.octaves <= 0:
            raise InvalidOctavesError(self.octaves)
        if not _is_positive(self.persistence):
            raise InvalidPersistenceError(self.persistence)
        if not _is_positive(self.lacunarity):
            raise InvalidLacunarityError(self.lacunarity)


class MoistureLevelConfig(BaseModel):
    """A single moisture level: relative weight and gradient."""

    moisture: float
    gradient: list[str]

    def check(self) -> None:
        """Validate the moisture level."""
        if not _is_positive(self.moisture):
            raise InvalidMoistureError(self.moisture)
        _check_gradient(self.gradient)


class ElevationLevelConfig(BaseModel):
    """A single elevation level: relative weight and moisture levels."""

    elevation: float
    moisture_levels: list[MoistureLevelConfig] = Field(default_factory=list)

    def check(self) -> None:
        """Validate the elevation level and its moisture levels."""
        if not _is_positive(self.elevation):
            raise InvalidElevationError(self.elevation)
        if not self.moisture_levels:
            raise MissingMoistureLevelsError()
        for moisture_level in self.moisture_levels:
            moisture_level.check()

    def total_moisture(self) -> float:
        """Sum of the moisture weights in this level."""
        return sum(level.moisture for level in self.moisture_levels)


class BiomeMapConfig(BaseModel):
    """A set of elevation levels forming one biome map."""

    elevation_levels: list[ElevationLevelConfig] = Field(default_factory=list)

    def check(self) -> None:
        """Validate every elevation level."""
        if not self.elevation_levels:
            raise MissingElevationLevelsError()
        for elevation_level in self.elevation_levels:
            elevation_level.check()

    def total_elevation(self) -> float:
        """Sum of the elevation weights in this map."""
        return sum(level.elevation for level in self.elevation_levels)


class Config(BaseModel):
    """Complete map generation configuration."""

    biomes: dict[str, BiomeConfig] = Field(default_factory=dict)
    noise_generators: dict[str, NoiseConfig] = Field(default_factory=dict)
    biome_maps: dict[str, BiomeMapConfig] = Field(default_factory=dict)

    def check(self) -> None:
        """Validate the entire configuration.

        Raises:
            ConfigError: The specific subclass for the first invalid item.
        """
        for biome in self.biomes.values():
            biome.check()
        for noise in self.noise_generators.values():
            noise.check()
        for biome_map in self.biome_maps.values():
            biome_map.check()

    def get_noise_field(self, name: str, width: int, height: int) -> NoiseField:
        """Build the named noise generator for a map of the given size.

        Raises:
            UnknownNoiseGeneratorError: If ``name`` is not configured.
        """
        noise = self.noise_generators.get(name)
        if noise is None:
            raise UnknownNoiseGeneratorError(name, list(self.noise_generators))
        return NoiseField(
            width,
            height,
            octaves=noise.octaves,
            persistence=noise.persistence,
            lacunarity=noise.lacunarity,
            seed=noise.seed,
        )

    def get_color_evaluator(self, name: str) -> ColorEvaluator:
        """Build the evaluator for the named biome map.

        Raises:
            UnknownBiomeMapError: If ``name`` is not configured.
        """
        biome_map = self.biome_maps.get(name)
        if biome_map is None:
            raise UnknownBiomeMapError(name, list(self.biome_maps))
        return ColorEvaluator.from_bands(biome_map)

    def get_gradient(self, name: str) -> Gradient:
        """Build the gradient of the named biome.

        Raises:
            UnknownBiomeError: If ``name`` is not configured.
        """
        biome = self.biomes.get(name)
        if biome is None:
            raise UnknownBiomeError(name, list(self.biomes))
        return Gradient.from_colors(biome.gradient)


def parse_config(data: dict) -> Config:
    """Validate raw configuration data.

    Raises:
        ConfigParseError: If the data does not match the schema.
        ConfigError: If any value is out of range.
    """
    try:
        config = Config.model_validate(data)
    except ValidationError as e:
        raise ConfigParseError(str(e)) from e
    config.check()
    return config


def load_config(config_path: Path) -> Config:
    """Load and validate configuration from a TOML file.

    Args:
        config_path: Path to the TOML config file.

    Returns:
        Validated Config object.

    Raises:
        InvalidFilePathError: If the file cannot be opened.
        ConfigParseError: If the TOML is malformed or does not match the schema.
        ConfigError: If any value is out of range.
    """
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise InvalidFilePathError(str(config_path)) from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(str(e)) from e

    config = parse_config(data)
    logger.info(
        "config_loaded",
        path=str(config_path),
        biomes=len(config.biomes),
        noise_generators=len(config.noise_generators),
        biome_maps=len(config.biome_maps),
    )
    return config
