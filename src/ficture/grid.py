"""Dense 2D grid with pure, parallel transforms.

Map generation is a chain of whole-grid steps: a uniform grid is created,
every cell is rewritten by a function, values are reduced for
normalization, and the final grid is handed to a sink. Steps can be
reordered, added or removed without touching each other.

Every transform returns a new Grid and leaves its input untouched.
Transform functions run concurrently on a thread pool, so they must not
mutate shared state; cell placement in the output depends only on the
cell's coordinate, never on execution order.
"""

import functools
import os
from collections.abc import Callable, Iterable, Iterator
from concurrent import futures
from typing import Generic, TypeVar

from .exceptions import GridConsumedError

T = TypeVar("T")
U = TypeVar("U")
R = TypeVar("R")

# Row chunks per worker thread
CHUNKS_PER_WORKER = 4


def default_workers() -> int:
    """Number of worker threads used when a transform does not specify one."""
    return os.cpu_count() or 1


def _row_chunks(height: int, workers: int) -> list[range]:
    """Split row indices [0, height) into contiguous chunks."""
    chunk_count = max(1, min(height, workers * CHUNKS_PER_WORKER))
    size = -(-height // chunk_count)
    return [range(start, min(start + size, height)) for start in range(0, height, size)]


class Grid(Generic[T]):
    """Immutable dense 2D grid stored in row-major order.

    Cell (x, y) lives at index ``y * width + x``. A grid always holds
    exactly ``width * height`` cells. The constructor copies ``cells``, so
    later changes to the caller's list do not reach the grid.
    """

    __slots__ = ("_width", "_height", "_cells")

    def __init__(self, width: int, height: int, cells: Iterable[T]):
        cells = list(cells)
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        if len(cells) != width * height:
            raise ValueError(
                f"Expected {width * height} cells for a {width}x{height} grid, "
                f"got {len(cells)}"
            )
        self._width = width
        self._height = height
        self._cells: list[T] | None = cells

    @classmethod
    def _adopt(cls, width: int, height: int, cells: list[U]) -> "Grid[U]":
        """Wrap a freshly built cell list without copying it."""
        grid = cls.__new__(cls)
        grid._width = width
        grid._height = height
        grid._cells = cells
        return grid

    @classmethod
    def uniform(cls, value: T, width: int, height: int) -> "Grid[T]":
        """Create a grid with every cell set to ``value``.

        The same object is placed in every cell, so ``value`` should be
        immutable.

        Args:
            value: Initial cell value.
            width: Grid width, must be positive.
            height: Grid height, must be positive.

        Returns:
            New grid of size width x height.

        Raises:
            ValueError: If width or height is not positive.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        return cls._adopt(width, height, [value] * (width * height))

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def consumed(self) -> bool:
        """Whether the cells were handed off by ``extract``."""
        return self._cells is None

    def __len__(self) -> int:
        return self._width * self._height

    def __getitem__(self, position: tuple[int, int]) -> T:
        x, y = position
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(f"({x}, {y}) outside {self._width}x{self._height} grid")
        return self._live_cells()[y * self._width + x]

    def __repr__(self) -> str:
        state = "consumed" if self.consumed else f"{len(self)} cells"
        return f"Grid(width={self._width}, height={self._height}, {state})"

    def cells(self) -> Iterator[T]:
        """Iterate over cells in row-major order."""
        return iter(self._live_cells())

    def map_values(
        self,
        f: Callable[[T], U],
        max_workers: int | None = None,
    ) -> "Grid[U]":
        """Apply ``f`` to every cell.

        Args:
            f: Pure function of a cell value. Called concurrently.
            max_workers: Thread count, defaults to the CPU count.

        Returns:
            New grid of the same size holding ``f(cell)`` at each coordinate.
        """
        cells = self._live_cells()
        width = self._width

        def run(rows: range) -> list[U]:
            return [f(cell) for cell in cells[rows.start * width : rows.stop * width]]

        return Grid._adopt(self._width, self._height, self._fan_out(run, max_workers))

    def map_with_coordinates(
        self,
        f: Callable[[T, int, int], U],
        max_workers: int | None = None,
    ) -> "Grid[U]":
        """Apply ``f`` to every cell together with its coordinates.

        Args:
            f: Pure function ``f(cell, x, y)``. Called concurrently.
            max_workers: Thread count, defaults to the CPU count.

        Returns:
            New grid of the same size holding ``f(cell, x, y)`` at (x, y).
        """
        cells = self._live_cells()
        width = self._width

        def run(rows: range) -> list[U]:
            out: list[U] = []
            for y in rows:
                offset = y * width
                for x in range(width):
                    out.append(f(cells[offset + x], x, y))
            return out

        return Grid._adopt(self._width, self._height, self._fan_out(run, max_workers))

    def reduce_all(
        self,
        seed: R,
        combine: Callable[[R, T], R],
        merge: Callable[[R, R], R] | None = None,
        max_workers: int | None = None,
    ) -> R:
        """Fold every cell into a single value.

        Without ``merge`` the fold runs sequentially in row-major order.
        With ``merge`` each row chunk is folded in parallel starting from
        ``seed`` and the partial results are merged, in which case ``seed``
        must be an identity for ``merge`` and both functions must be
        associative and commutative.

        Args:
            seed: Initial accumulator.
            combine: ``combine(acc, cell) -> acc``.
            merge: ``merge(acc, acc) -> acc`` for combining partial results.
            max_workers: Thread count, defaults to the CPU count.

        Returns:
            The reduced value.
        """
        cells = self._live_cells()
        if merge is None:
            return functools.reduce(combine, cells, seed)

        width = self._width

        def run(rows: range) -> list[R]:
            chunk = cells[rows.start * width : rows.stop * width]
            return [functools.reduce(combine, chunk, seed)]

        partials = self._fan_out(run, max_workers)
        return functools.reduce(merge, partials, seed)

    def extract(self, sink: Callable[[list[T], int, int], R]) -> R:
        """Hand the flat cell list and dimensions to ``sink``.

        The grid is consumed: ownership of the cell list passes to the sink
        and any later use of this grid raises GridConsumedError.

        Args:
            sink: ``sink(cells, width, height)``.

        Returns:
            Whatever the sink returns.
        """
        cells = self._live_cells()
        self._cells = None
        return sink(cells, self._width, self._height)

    def _live_cells(self) -> list[T]:
        if self._cells is None:
            raise GridConsumedError("Grid cells were already extracted")
        return self._cells

    def _fan_out(
        self,
        run: Callable[[range], list[U]],
        max_workers: int | None,
    ) -> list[U]:
        """Run ``run`` over row chunks and concatenate results in row order."""
        workers = max_workers or default_workers()
        chunks = _row_chunks(self._height, workers)

        if workers == 1 or len(chunks) == 1:
            parts = [run(rows) for rows in chunks]
        else:
            with futures.ThreadPoolExecutor(max_workers=workers) as executor:
                parts = list(executor.map(run, chunks))

        out: list[U] = []
        for part in parts:
            out.extend(part)
        return out
