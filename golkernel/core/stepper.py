"""Serial reference implementation of the transition kernel.

This is the oracle the parallel kernel is checked against. It favours
directness over speed: every neighbor goes through the boundary transform and
the vitality contribution function one at a time, in enumeration order.
"""

import numpy as np
from typing import List, Optional
import logging

from .boundary import transform_coordinate
from .neighborhood import neighbor_offsets, max_neighbors
from .step_config import StepConfig
from ..vitality.contribution import neighbor_contribution

logger = logging.getLogger(__name__)


def round_neighbor_count(total: float, limit: int) -> int:
    """Clamp a weighted neighbor sum to [0, limit] and round half up."""
    clamped = max(0.0, min(float(limit), total))
    return int(clamped + 0.5)


class GenerationsEngine:
    """Serial B/S/Generations rules engine.

    Reads one grid and returns the state each cell takes in the next
    generation. The engine holds only the step configuration.
    """

    def __init__(self, config: StepConfig):
        """Initialize the engine.

        Args:
            config: Dimensions, rule, boundary and vitality settings
        """
        self.config = config
        self._limit = max_neighbors(config.rule.neighborhood)

    def _cell(self, rows: List[List[int]], x: int, y: int) -> int:
        cfg = self.config
        resolved = transform_coordinate(x, y, cfg.width, cfg.height, cfg.boundary)
        if resolved is None:
            return 0
        rx, ry = resolved
        return rows[ry][rx]

    def weighted_sum(self, rows: List[List[int]], x: int, y: int) -> float:
        """Sum of neighbor contributions before clamping and rounding."""
        cfg = self.config
        num_states = cfg.rule.num_states
        total = 0.0
        for dx, dy in neighbor_offsets(cfg.rule.neighborhood, y):
            state = self._cell(rows, x + dx, y + dy)
            total += neighbor_contribution(state, cfg.vitality, num_states)
        return total

    def count_neighbors(self, rows: List[List[int]], x: int, y: int) -> int:
        """Rounded weighted neighbor count of the cell at (x, y).

        Args:
            rows: Grid state as nested lists, rows[y][x]
            x: Column of the cell
            y: Row of the cell

        Returns:
            Integer neighbor count in [0, max_neighbors]
        """
        return round_neighbor_count(self.weighted_sum(rows, x, y), self._limit)

    def update_cell(self, rows: List[List[int]], x: int, y: int) -> int:
        """Next state of the cell at (x, y)."""
        n = self.count_neighbors(rows, x, y)
        return self.config.rule.next_state(rows[y][x], n)

    def update_grid(self, current: np.ndarray, out: Optional[np.ndarray] = None) -> np.ndarray:
        """Compute one full generation.

        Args:
            current: (height, width) state array, read only
            out: Optional destination array of the same shape; must not
                alias current

        Returns:
            Destination array holding the next generation
        """
        cfg = self.config
        if current.shape != (cfg.height, cfg.width):
            raise ValueError(f"Grid shape {current.shape} doesn't match config {(cfg.height, cfg.width)}")
        if out is None:
            out = np.zeros_like(current)
        elif out is current:
            raise ValueError("Destination buffer must differ from the source buffer")

        rows = current.tolist()
        for y in range(cfg.height):
            for x in range(cfg.width):
                out[y, x] = self.update_cell(rows, x, y)

        return out


def step_serial(current: np.ndarray, next_state: np.ndarray, config: StepConfig) -> np.ndarray:
    """Write the generation after `current` into `next_state` (serial path).

    Returns:
        next_state, for convenience
    """
    return GenerationsEngine(config).update_grid(current, next_state)
