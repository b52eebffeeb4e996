"""Custom exceptions for map generation."""


class FictureError(Exception):
    """Base exception for ficture errors."""

    pass


class GridConsumedError(FictureError):
    """Raised when a grid is used after its cells were extracted."""

    pass


class ImageWriteError(FictureError):
    """Raised when the output image cannot be written."""

    pass


class ConfigError(FictureError):
    """Base exception for configuration errors."""

    pass


class InvalidFilePathError(ConfigError):
    """Raised when the config file cannot be opened."""

    def __init__(self, path: str):
        super().__init__(f"invalid file (couldn't open the file at {path})")
        self.path = path


class ConfigParseError(ConfigError):
    """Raised when the config file is malformed."""

    def __init__(self, detail: str):
        super().__init__(f"failed to parse config file: {detail}")
        self.detail = detail


class InvalidOctavesError(ConfigError):
    """Raised when a noise generator has no octaves."""

    def __init__(self, value: int):
        super().__init__(
            f"invalid octaves (expected a value greater than 0, but found {value})"
        )
        self.value = value


class InvalidPersistenceError(ConfigError):
    """Raised when persistence is not positive."""

    def __init__(self, value: float):
        super().__init__(
            f"invalid persistence (expected a value greater than 0, but found {value})"
        )
        self.value = value


class InvalidLacunarityError(ConfigError):
    """Raised when lacunarity is not positive."""

    def __init__(self, value: float):
        super().__init__(
            f"invalid lacunarity (expected a value greater than 0, but found {value})"
        )
        self.value = value


class InvalidElevationError(ConfigError):
    """Raised when an elevation level weight is not positive."""

    def __init__(self, value: float):
        super().__init__(
            f"invalid elevation (expected a value greater than 0, but found {value})"
        )
        self.value = value


class InvalidMoistureError(ConfigError):
    """Raised when a moisture level weight is not positive."""

    def __init__(self, value: float):
        super().__init__(
            f"invalid moisture (expected a value greater than 0, but found {value})"
        )
        self.value = value


class InvalidColorError(ConfigError):
    """Raised when a color string cannot be parsed."""

    def __init__(self, color: str):
        super().__init__(f"invalid color (expected a valid html color, but found {color!r})")
        self.color = color


class MissingColorsError(ConfigError):
    """Raised when a gradient has no colors."""

    def __init__(self) -> None:
        super().__init__("expected at least one color to be present, but found none")


class MissingElevationLevelsError(ConfigError):
    """Raised when a biome map has no elevation levels."""

    def __init__(self) -> None:
        super().__init__(
            "expected at least one elevation level to be present, but found none"
        )


class MissingMoistureLevelsError(ConfigError):
    """Raised when an elevation level has no moisture levels."""

    def __init__(self) -> None:
        super().__init__(
            "expected at least one moisture level to be present, but found none"
        )


class ConfigLookupError(ConfigError, LookupError):
    """Base exception for named lookups missing from the configuration."""

    kind = "entry"

    def __init__(self, name: str, available: list[str]):
        super().__init__(
            f"{self.kind} '{name}' not defined in config file. "
            f"Available: {sorted(available)}"
        )
        self.name = name
        self.available = available


class UnknownNoiseGeneratorError(ConfigLookupError):
    """Raised when a noise generator name is not configured."""

    kind = "noise generator"


class UnknownBiomeMapError(ConfigLookupError):
    """Raised when a biome map name is not configured."""

    kind = "biome map"


class UnknownBiomeError(ConfigLookupError):
    """Raised when a biome gradient name is not configured."""

    kind = "biome"
