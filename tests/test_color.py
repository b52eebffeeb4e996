"""Tests for gradients and the biome color evaluator."""

import pytest

from ficture.color import (
    ColorEvaluator,
    ElevationBand,
    Gradient,
    MoistureBand,
    Rgb,
    parse_color,
)
from ficture.config import BiomeMapConfig
from ficture.exceptions import (
    InvalidColorError,
    MissingColorsError,
    MissingElevationLevelsError,
    MissingMoistureLevelsError,
)


class TestParseColor:
    """Tests for color string parsing."""

    def test_six_digit_hex(self) -> None:
        """#rrggbb parses to float channels."""
        assert parse_color("#ff0000") == (1.0, 0.0, 0.0)

    def test_three_digit_hex(self) -> None:
        """#rgb shorthand is accepted."""
        assert parse_color("#fff") == (1.0, 1.0, 1.0)

    def test_alpha_dropped(self) -> None:
        """#rrggbbaa keeps only RGB."""
        assert parse_color("#00ff0080") == (0.0, 1.0, 0.0)

    def test_named_color(self) -> None:
        """CSS color names are accepted."""
        assert parse_color("blue") == (0.0, 0.0, 1.0)

    @pytest.mark.parametrize("text", ["#12345", "notacolor", "#gggggg", ""])
    def test_invalid_color(self, text: str) -> None:
        """Unparsable strings raise InvalidColorError."""
        with pytest.raises(InvalidColorError):
            parse_color(text)


class TestGradient:
    """Tests for gradient interpolation."""

    def test_endpoints(self) -> None:
        """t=0 and t=1 return the first and last colors."""
        gradient = Gradient.from_colors(["#000000", "#ffffff"])
        assert gradient.at(0.0) == Rgb(0, 0, 0)
        assert gradient.at(1.0) == Rgb(255, 255, 255)

    def test_midpoint_rounds_half_up(self) -> None:
        """127.5 rounds to 128."""
        gradient = Gradient.from_colors(["#000000", "#ffffff"])
        assert gradient.at(0.5) == Rgb(128, 128, 128)

    def test_linear_between_stops(self) -> None:
        """Channels interpolate linearly."""
        gradient = Gradient.from_colors(["#000000", "#ffffff"])
        r, g, b = gradient.interpolate(0.25)
        assert r == pytest.approx(0.25)
        assert g == pytest.approx(0.25)
        assert b == pytest.approx(0.25)

    def test_three_stops_evenly_spaced(self) -> None:
        """Middle stop sits at t=0.5."""
        gradient = Gradient.from_colors(["#ff0000", "#00ff00", "#0000ff"])
        assert gradient.at(0.5) == Rgb(0, 255, 0)
        assert gradient.at(0.25) == Rgb(128, 128, 0)
        assert gradient.at(0.75) == Rgb(0, 128, 128)

    @pytest.mark.parametrize("t,expected", [(-0.5, Rgb(0, 0, 0)), (1.7, Rgb(255, 255, 255))])
    def test_out_of_range_clamps(self, t: float, expected: Rgb) -> None:
        """t outside [0, 1] clamps to the end colors."""
        gradient = Gradient.from_colors(["#000000", "#ffffff"])
        assert gradient.at(t) == expected

    def test_single_color(self) -> None:
        """A one-color gradient is constant."""
        gradient = Gradient.from_colors(["#336699"])
        assert gradient.at(0.0) == gradient.at(0.6) == Rgb(0x33, 0x66, 0x99)

    def test_empty_gradient(self) -> None:
        """An empty color list raises MissingColorsError."""
        with pytest.raises(MissingColorsError):
            Gradient.from_colors([])

    def test_bad_color_in_gradient(self) -> None:
        """Any bad color fails the whole gradient."""
        with pytest.raises(InvalidColorError):
            Gradient.from_colors(["#000000", "nope"])


class TestColorEvaluatorBuild:
    """Tests for building the band hierarchy."""

    def test_cumulative_thresholds(self, banded_biome_map: BiomeMapConfig) -> None:
        """Thresholds are cumulative weights divided by the total."""
        evaluator = ColorEvaluator.from_bands(banded_biome_map)
        low, high = evaluator.bands
        assert (low.lower, low.threshold) == (0.0, 0.25)
        assert (high.lower, high.threshold) == (0.25, 1.0)
        assert [b.threshold for b in low.moisture_bands] == [1.0]
        assert [b.threshold for b in high.moisture_bands] == [0.5, 1.0]

    def test_missing_elevation_levels(self) -> None:
        """An empty hierarchy is rejected."""
        with pytest.raises(MissingElevationLevelsError):
            ColorEvaluator.from_bands(BiomeMapConfig(elevation_levels=[]))

    def test_missing_moisture_levels(self) -> None:
        """An elevation level without moisture levels is rejected."""
        biome_map = BiomeMapConfig.model_validate(
            {"elevation_levels": [{"elevation": 1.0, "moisture_levels": []}]}
        )
        with pytest.raises(MissingMoistureLevelsError):
            ColorEvaluator.from_bands(biome_map)

    def test_direct_construction_requires_bands(self) -> None:
        """The evaluator cannot be built empty."""
        with pytest.raises(MissingElevationLevelsError):
            ColorEvaluator(())
        with pytest.raises(MissingMoistureLevelsError):
            ColorEvaluator((ElevationBand(lower=0.0, threshold=1.0, moisture_bands=()),))


class TestColorEvaluatorEvaluate:
    """Tests for evaluate."""

    def test_gray_gradient_midpoint(self, gray_biome_map: BiomeMapConfig) -> None:
        """One band black-to-white gives the interpolated gray."""
        evaluator = ColorEvaluator.from_bands(gray_biome_map)
        assert evaluator.evaluate(0.5, 0.0) == Rgb(128, 128, 128)

    @pytest.mark.parametrize("elevation", [0.0, 0.1, 0.25, 0.5, 0.8, 1.0])
    @pytest.mark.parametrize("moisture", [0.0, 0.3, 1.0])
    def test_gray_gradient_everywhere(
        self, gray_biome_map: BiomeMapConfig, elevation: float, moisture: float
    ) -> None:
        """Gray level depends only on elevation."""
        evaluator = ColorEvaluator.from_bands(gray_biome_map)
        level = int(elevation * 255 + 0.5)
        assert evaluator.evaluate(elevation, moisture) == Rgb(level, level, level)

    def test_selects_band_by_elevation(self, banded_biome_map: BiomeMapConfig) -> None:
        """Low elevations use the first band's gradient."""
        evaluator = ColorEvaluator.from_bands(banded_biome_map)
        assert evaluator.evaluate(0.1, 0.9) == Rgb(255, 0, 0)

    def test_selects_sub_band_by_moisture(self, banded_biome_map: BiomeMapConfig) -> None:
        """Within a band, moisture picks the gradient."""
        evaluator = ColorEvaluator.from_bands(banded_biome_map)
        assert evaluator.evaluate(1.0, 0.2) == Rgb(0, 255, 0)
        assert evaluator.evaluate(1.0, 0.8) == Rgb(0, 0, 255)

    def test_elevation_normalized_within_band(self, banded_biome_map: BiomeMapConfig) -> None:
        """Elevation is rescaled to the band's own [lower, threshold] range."""
        evaluator = ColorEvaluator.from_bands(banded_biome_map)
        # Upper band spans [0.25, 1.0]; 0.625 is its midpoint
        assert evaluator.evaluate(0.625, 0.2) == Rgb(0, 128, 0)

    def test_elevation_boundary_belongs_to_lower_band(
        self, banded_biome_map: BiomeMapConfig
    ) -> None:
        """A value exactly on a threshold selects the lower band."""
        evaluator = ColorEvaluator.from_bands(banded_biome_map)
        band, _ = evaluator.select(0.25, 0.0)
        assert band.threshold == 0.25
        assert evaluator.evaluate(0.25, 0.0) == Rgb(255, 0, 0)

    def test_moisture_boundary_belongs_to_lower_band(
        self, banded_biome_map: BiomeMapConfig
    ) -> None:
        """Moisture exactly on a threshold selects the lower sub-band."""
        evaluator = ColorEvaluator.from_bands(banded_biome_map)
        _, sub_band = evaluator.select(1.0, 0.5)
        assert sub_band.threshold == 0.5

    def test_above_every_threshold_falls_back_to_last_band(
        self, banded_biome_map: BiomeMapConfig
    ) -> None:
        """Values past 1.0 use the last band rather than a default color."""
        evaluator = ColorEvaluator.from_bands(banded_biome_map)
        band, sub_band = evaluator.select(1.0 + 1e-12, 1.0 + 1e-12)
        assert band is evaluator.bands[-1]
        assert sub_band is band.moisture_bands[-1]
        assert evaluator.evaluate(1.0 + 1e-12, 1.0 + 1e-12) == Rgb(0, 0, 255)

    def test_top_value_uses_last_band(self) -> None:
        """Elevation 1.0 lands in the last band with fractional weights."""
        biome_map = BiomeMapConfig.model_validate(
            {
                "elevation_levels": [
                    {
                        "elevation": 0.1,
                        "moisture_levels": [{"moisture": 0.1, "gradient": ["#000000"]}],
                    },
                    {
                        "elevation": 0.2,
                        "moisture_levels": [{"moisture": 0.1, "gradient": ["#ffffff"]}],
                    },
                ]
            }
        )
        evaluator = ColorEvaluator.from_bands(biome_map)
        assert evaluator.evaluate(1.0, 1.0) == Rgb(255, 255, 255)

    def test_shared_between_threads(self, banded_biome_map: BiomeMapConfig) -> None:
        """Concurrent lookups agree with sequential lookups."""
        from concurrent import futures

        evaluator = ColorEvaluator.from_bands(banded_biome_map)
        inputs = [(e / 50, m / 10) for e in range(51) for m in range(11)]
        expected = [evaluator.evaluate(e, m) for e, m in inputs]
        with futures.ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(lambda p: evaluator.evaluate(*p), inputs))
        assert results == expected


class TestBands:
    """Tests for band value types."""

    def test_bands_are_immutable(self) -> None:
        """Band objects cannot be modified after construction."""
        band = MoistureBand(threshold=1.0, gradient=Gradient.from_colors(["#000000"]))
        with pytest.raises(AttributeError):
            band.threshold = 0.5  # type: ignore[misc]
