"""Grid state storage for multi-state cellular automata.

Cell states are unsigned 32-bit integers in a C-contiguous (height, width)
numpy array, so the flattened view is the row-major width*height buffer that
renderers and read-back consumers expect. CellBuffers owns the two grids of a
double-buffered simulation.
"""

import numpy as np
from typing import Optional, Tuple
import logging

logger = logging.getLogger(__name__)

STATE_DTYPE = np.uint32
MAX_DIMENSION = 8192  # Prevent excessive memory usage


class Grid:
    """2D grid of cell states (0 dead, 1 alive, 2.. dying).

    Attributes:
        width: Grid width in cells
        height: Grid height in cells
        state: (height, width) uint32 array, indexed state[y, x]
    """

    def __init__(self, width: int, height: int, initial_state: Optional[np.ndarray] = None):
        """Initialize grid with given dimensions.

        Args:
            width: Grid width (cells)
            height: Grid height (cells)
            initial_state: Optional (height, width) or flat width*height array

        Raises:
            ValueError: If dimensions are invalid or initial_state shape doesn't match
        """
        if width < 1 or height < 1:
            raise ValueError("Grid dimensions must be positive")

        if width > MAX_DIMENSION or height > MAX_DIMENSION:
            raise ValueError(f"Grid dimensions cannot exceed {MAX_DIMENSION}x{MAX_DIMENSION}")

        self.width = width
        self.height = height
        self.state = np.zeros((height, width), dtype=STATE_DTYPE)

        if initial_state is not None:
            self.load(initial_state)

    def load(self, data: np.ndarray) -> None:
        """Overwrite all cells from a (height, width) or flat row-major array.

        Raises:
            ValueError: If the array size or values don't fit the grid
        """
        data = np.asarray(data)
        if data.shape == (self.height, self.width):
            source = data
        elif data.ndim == 1 and data.size == self.width * self.height:
            source = data.reshape(self.height, self.width)
        else:
            raise ValueError(f"Initial state shape {data.shape} doesn't match grid size {(self.height, self.width)}")
        if data.size and (data.min() < 0 or data.max() > np.iinfo(STATE_DTYPE).max):
            raise ValueError("Cell states must fit in an unsigned 32-bit integer")
        self.state[:] = source.astype(STATE_DTYPE)

    def copy(self) -> 'Grid':
        """Create a deep copy of the grid."""
        return Grid(self.width, self.height, self.state)

    def clear(self) -> None:
        """Reset all cells to dead state."""
        self.state.fill(0)

    def get(self, x: int, y: int) -> int:
        """Get cell state at coordinates.

        Raises:
            IndexError: If coordinates are out of bounds
        """
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Coordinates ({x}, {y}) out of bounds for {self.width}x{self.height} grid")
        return int(self.state[y, x])

    def set(self, x: int, y: int, value: int) -> None:
        """Set cell state at coordinates.

        Raises:
            IndexError: If coordinates are out of bounds
        """
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Coordinates ({x}, {y}) out of bounds for {self.width}x{self.height} grid")
        self.state[y, x] = value

    def flat(self) -> np.ndarray:
        """Row-major copy of the cells, length width*height."""
        return self.state.ravel().copy()

    def count_alive(self) -> int:
        """Count cells in state 1 (dying cells are not alive)."""
        return int(np.count_nonzero(self.state == 1))

    def count_nonzero(self) -> int:
        """Count alive and dying cells."""
        return int(np.count_nonzero(self.state))

    def density(self) -> float:
        """Fraction of cells that are alive."""
        return self.count_alive() / (self.width * self.height)

    def is_empty(self) -> bool:
        return not np.any(self.state)

    def max_state(self) -> int:
        return int(self.state.max()) if self.state.size else 0

    def alive_cells(self) -> set:
        """Set of (x, y) coordinates of alive cells."""
        rows, cols = np.nonzero(self.state == 1)
        return {(int(x), int(y)) for x, y in zip(cols, rows)}

    def bounds(self) -> Tuple[int, int, int, int]:
        """Bounding box of non-dead cells (min_x, min_y, max_x, max_y)."""
        if self.is_empty():
            return (0, 0, self.width - 1, self.height - 1)

        rows, cols = np.nonzero(self.state)
        return (int(cols.min()), int(rows.min()), int(cols.max()), int(rows.max()))

    def __getitem__(self, key: Tuple[int, int]) -> int:
        """Access cell state using grid[x, y] syntax."""
        x, y = key
        return self.get(x, y)

    def __setitem__(self, key: Tuple[int, int], value: int) -> None:
        """Set cell state using grid[x, y] = value syntax."""
        x, y = key
        self.set(x, y, value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return False
        return (self.width == other.width and
                self.height == other.height and
                np.array_equal(self.state, other.state))

    def __str__(self) -> str:
        """Alive cells as '#', dying as '+', dead as '.' (first 20 rows / 40 columns)."""
        lines = []
        for y in range(min(20, self.height)):
            line = ''
            for x in range(min(40, self.width)):
                s = self.state[y, x]
                line += '#' if s == 1 else ('+' if s > 1 else '.')
            if self.width > 40:
                line += '...'
            lines.append(line)

        if self.height > 20:
            lines.append('...')

        return '\n'.join(lines)

    def __repr__(self) -> str:
        return f"Grid({self.width}x{self.height}, alive={self.count_alive()}, nonzero={self.count_nonzero()})"


class CellBuffers:
    """Ping-pong pair of grids.

    A step reads `current` and writes `next`; swap() then makes the written
    grid current. Nothing reads `next` while a step is writing it.
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self._grids = (Grid(width, height), Grid(width, height))
        self.step_count = 0

        logger.debug(f"Created double-buffered grid {width}x{height}")

    @property
    def current(self) -> Grid:
        return self._grids[self.step_count % 2]

    @property
    def next(self) -> Grid:
        return self._grids[(self.step_count + 1) % 2]

    def swap(self) -> None:
        self.step_count += 1

    def clear(self) -> None:
        for grid in self._grids:
            grid.clear()
