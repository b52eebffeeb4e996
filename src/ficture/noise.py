"""Fractal noise fields for map generation.

A NoiseField sums several octaves of 3D OpenSimplex noise. The
horizontal axis is projected onto a circle before sampling, so the
generated map wraps seamlessly on its east-west edges.
"""

import math

from opensimplex import OpenSimplex

# Seed of the single noise instance; fixed unless a generator config sets one
DEFAULT_SEED = 2


class NoiseField:
    """Multi-octave noise sampled per grid coordinate.

    Frequencies, amplitudes and the wrapped column coordinates are
    precomputed once. After construction nothing is mutated, so one
    instance can be sampled from many threads at once.

    Args:
        width: Map width in cells.
        height: Map height in cells.
        octaves: Number of noise layers to sum.
        persistence: Amplitude divisor between octaves. Higher values make
            later octaves contribute less.
        lacunarity: Frequency multiplier between octaves. Higher values make
            later octaves add finer detail.
        seed: Seed of the underlying OpenSimplex instance.
    """

    def __init__(
        self,
        width: int,
        height: int,
        octaves: int = 6,
        persistence: float = 2.0,
        lacunarity: float = 3.0,
        seed: int = DEFAULT_SEED,
    ):
        if width <= 0 or height <= 0:
            raise ValueError(f"Noise field dimensions must be positive, got {width}x{height}")
        if octaves <= 0:
            raise ValueError(f"octaves must be positive, got {octaves}")
        if not (math.isfinite(persistence) and persistence > 0):
            raise ValueError(f"persistence must be positive, got {persistence}")
        if not (math.isfinite(lacunarity) and lacunarity > 0):
            raise ValueError(f"lacunarity must be positive, got {lacunarity}")

        self._width = width
        self._height = height
        self._seed = seed
        self._aspect_ratio = width / height

        frequencies = []
        amplitudes = []
        amplitude = 1.0
        for octave in range(octaves):
            frequencies.append(lacunarity**octave)
            amplitudes.append(amplitude)
            amplitude /= persistence

        self._octaves = tuple(zip(frequencies, amplitudes))
        self._frequencies = tuple(frequencies)
        self._amplitudes = tuple(amplitudes)
        self._circle_coords = tuple(self.circle_point(x) for x in range(width))
        self._noise = OpenSimplex(seed=seed)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def frequencies(self) -> tuple[float, ...]:
        return self._frequencies

    @property
    def amplitudes(self) -> tuple[float, ...]:
        return self._amplitudes

    @property
    def circle_coords(self) -> tuple[tuple[float, float], ...]:
        return self._circle_coords

    def circle_point(self, column: float) -> tuple[float, float]:
        """Project a (possibly fractional) column onto the wrap circle.

        Column ``width`` lands on the same point as column 0.
        """
        angle = 2.0 * math.pi * column / self._width
        return (
            math.cos(angle) / self._aspect_ratio,
            math.sin(angle) / self._aspect_ratio,
        )

    def generate(self, x: int, y: int) -> float:
        """Sample the field at grid coordinate (x, y).

        Returns:
            Squared octave sum; squaring biases the output towards low values.

        Raises:
            IndexError: If (x, y) lies outside the field.
        """
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(f"({x}, {y}) outside {self._width}x{self._height} noise field")
        circle_x, circle_z = self._circle_coords[x]
        return self._accumulate(circle_x, circle_z, y / self._height)

    def generate_at(self, column: float, y: float) -> float:
        """Sample the field at an arbitrary column, projecting it on the fly.

        Agrees with ``generate`` at integer columns and continues smoothly
        past the last column back to column 0.
        """
        circle_x, circle_z = self.circle_point(column)
        return self._accumulate(circle_x, circle_z, y / self._height)

    def _accumulate(self, circle_x: float, circle_z: float, scale_y: float) -> float:
        total = 0.0
        for frequency, amplitude in self._octaves:
            total += amplitude * self._noise.noise3(
                frequency * circle_x,
                frequency * scale_y,
                frequency * circle_z,
            )
        return total**2

    def __repr__(self) -> str:
        return (
            f"NoiseField(width={self._width}, height={self._height}, "
            f"octaves={len(self._octaves)}, seed={self._seed})"
        )
