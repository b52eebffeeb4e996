"""Shared test fixtures for ficture tests."""

from pathlib import Path

import pytest

from ficture.config import BiomeMapConfig, Config, parse_config

MINIMAL_CONFIG = """\
[biomes.ocean]
gradient = ["#000080", "#0000ff"]

[noise_generators.elevation_noise]
octaves = 3
persistence = 2.0
lacunarity = 2.0

[noise_generators.moisture_noise]
octaves = 2
persistence = 3.0
lacunarity = 3.0
seed = 5

[[biome_maps.default.elevation_levels]]
elevation = 1.0

[[biome_maps.default.elevation_levels.moisture_levels]]
moisture = 1.0
gradient = ["#000000", "#ffffff"]
"""


@pytest.fixture
def config_data() -> dict:
    """Raw minimal well-formed configuration data."""
    return {
        "biomes": {"ocean": {"gradient": ["#000080", "#0000ff"]}},
        "noise_generators": {
            "elevation_noise": {"octaves": 3, "persistence": 2.0, "lacunarity": 2.0},
            "moisture_noise": {
                "octaves": 2,
                "persistence": 3.0,
                "lacunarity": 3.0,
                "seed": 5,
            },
        },
        "biome_maps": {
            "default": {
                "elevation_levels": [
                    {
                        "elevation": 1.0,
                        "moisture_levels": [
                            {"moisture": 1.0, "gradient": ["#000000", "#ffffff"]}
                        ],
                    }
                ]
            }
        },
    }


@pytest.fixture
def minimal_config(config_data: dict) -> Config:
    """Validated minimal configuration."""
    return parse_config(config_data)


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Minimal configuration written to a TOML file."""
    path = tmp_path / "config.toml"
    path.write_text(MINIMAL_CONFIG)
    return path


@pytest.fixture
def gray_biome_map() -> BiomeMapConfig:
    """One elevation band with one black-to-white moisture band."""
    return BiomeMapConfig.model_validate(
        {
            "elevation_levels": [
                {
                    "elevation": 1.0,
                    "moisture_levels": [
                        {"moisture": 1.0, "gradient": ["#000000", "#ffffff"]}
                    ],
                }
            ]
        }
    )


@pytest.fixture
def banded_biome_map() -> BiomeMapConfig:
    """Two elevation bands (weights 1 and 3), the upper split by moisture.

    Elevation thresholds: 0.25, 1.0.
    Upper band moisture thresholds: 0.5, 1.0.
    """
    return BiomeMapConfig.model_validate(
        {
            "elevation_levels": [
                {
                    "elevation": 1.0,
                    "moisture_levels": [
                        {"moisture": 2.0, "gradient": ["#ff0000"]},
                    ],
                },
                {
                    "elevation": 3.0,
                    "moisture_levels": [
                        {"moisture": 1.0, "gradient": ["#000000", "#00ff00"]},
                        {"moisture": 1.0, "gradient": ["#000000", "#0000ff"]},
                    ],
                },
            ]
        }
    )
