"""Simulation controller.

Owns the double-buffered grid of one session together with the active rule,
boundary and vitality settings, and exposes the operations a UI drives:
set_rule, set_view, step, randomize, clear, bulk read/write and painting.
"""

import math
import numpy as np
from typing import Dict, List, NamedTuple, Optional, Tuple, Union
import logging

from .config import KernelConfig
from .core.grid import CellBuffers, Grid
from .core.mappings import BoundaryId, NeighborhoodId, coerce_id
from .core.parallel import ParallelEngine
from .core.step_config import StepConfig
from .core.stepper import GenerationsEngine
from .patterns.seeds import SeedPattern, get_seed_pattern
from .rules.presets import get_default_rule
from .rules.rule_spec import RuleSpec
from .rules.rule_strings import parse_rule_string
from .vitality.spec import VitalitySpec, DEFAULT_VITALITY

logger = logging.getLogger(__name__)

RandomSource = Union[np.random.Generator, int, None]


class ViewSettings(NamedTuple):
    """Step-relevant view settings."""
    boundary: BoundaryId
    vitality: VitalitySpec


class Simulation:
    """Cellular automaton session with ping-pong grid buffers.

    Paints made with set_cell are queued and applied to the current grid
    right before the next step or read-back.
    """

    def __init__(self, width: int, height: int,
                 rule: Optional[RuleSpec] = None,
                 boundary: Union[BoundaryId, str] = BoundaryId.TORUS,
                 vitality: VitalitySpec = DEFAULT_VITALITY,
                 backend: str = 'parallel',
                 rng: RandomSource = None,
                 density: float = 0.25):
        """Initialize an empty simulation.

        Args:
            width: Grid width in cells
            height: Grid height in cells
            rule: Active rule (Conway's Life if None)
            boundary: Boundary topology
            vitality: Vitality weighting
            backend: 'parallel' or 'serial'
            rng: Session random generator or seed
            density: Default fill density for randomize()

        Raises:
            ValueError: If dimensions or backend are invalid
        """
        if backend not in ('parallel', 'serial'):
            raise ValueError(f"Unknown backend: {backend!r}")

        self.width = width
        self.height = height
        self.backend = backend
        self.buffers = CellBuffers(width, height)
        self.rule = rule or get_default_rule()
        self.boundary = coerce_id(BoundaryId, boundary)
        self.vitality = vitality
        self.generation = 0
        self.density = density

        self._rng = np.random.default_rng(rng)
        self._pending_paints: Dict[int, int] = {}
        self._alive_cells = 0
        self._rebuild_engine()

        logger.debug(f"Created simulation {width}x{height} ({backend}) with {self.rule!r}")

    def _rebuild_engine(self) -> None:
        config = StepConfig(self.width, self.height, self.rule, self.boundary, self.vitality)
        if self.backend == 'parallel':
            self._engine = ParallelEngine(config)
        else:
            self._engine = GenerationsEngine(config)

    def _resolve_rng(self, rng: RandomSource) -> np.random.Generator:
        if rng is None:
            return self._rng
        if isinstance(rng, np.random.Generator):
            return rng
        return np.random.default_rng(rng)

    @property
    def grid(self) -> Grid:
        """Current generation (read it, don't hold on to it across steps)."""
        return self.buffers.current

    # Rule and view

    def set_rule(self, rule: RuleSpec) -> None:
        """Replace the active rule.

        Cells whose state no longer exists under the new state count are
        reset to dead.
        """
        self.rule = rule
        current = self.buffers.current.state
        current[current >= rule.num_states] = 0
        self._pending_paints = {i: s for i, s in self._pending_paints.items() if s < rule.num_states}
        self._rebuild_engine()
        logger.debug(f"Rule set to {rule!r}")

    def set_rule_string(self, rule_string: str,
                        neighborhood: Union[NeighborhoodId, str, None] = None) -> RuleSpec:
        """Parse and apply a rule string, falling back to the default rule.

        Returns:
            The rule actually applied
        """
        rule = parse_rule_string(rule_string, neighborhood or self.rule.neighborhood)
        if rule is None:
            logger.warning(f"Invalid rule string {rule_string!r}, using default rule")
            rule = get_default_rule()
        self.set_rule(rule)
        return rule

    def get_rule(self) -> RuleSpec:
        return self.rule

    def set_view(self, boundary: Union[BoundaryId, str, None] = None,
                 vitality: Optional[VitalitySpec] = None) -> None:
        """Update boundary and/or vitality settings."""
        changed = False
        if boundary is not None:
            boundary = coerce_id(BoundaryId, boundary)
            changed = changed or boundary is not self.boundary
            self.boundary = boundary
        if vitality is not None:
            changed = changed or vitality != self.vitality
            self.vitality = vitality
        if changed:
            self._rebuild_engine()
            logger.debug(f"View set: boundary={self.boundary.value}, vitality={self.vitality.mode.value}")

    def get_view(self) -> ViewSettings:
        return ViewSettings(self.boundary, self.vitality)

    def get_dimensions(self) -> Tuple[int, int]:
        return self.width, self.height

    # Stepping

    def _apply_paints(self) -> None:
        if not self._pending_paints:
            return
        flat = self.buffers.current.state.reshape(-1)
        for index, state in self._pending_paints.items():
            flat[index] = state
        self._pending_paints.clear()

    def step(self) -> int:
        """Advance one generation.

        Returns:
            Number of alive cells after the step
        """
        self._apply_paints()
        self._engine.update_grid(self.buffers.current.state, self.buffers.next.state)
        self.buffers.swap()
        self.generation += 1
        self._alive_cells = self.buffers.current.count_alive()
        return self._alive_cells

    def step_multiple(self, steps: int, log_interval: Optional[int] = None) -> List[int]:
        """Advance several generations.

        Args:
            steps: Number of generations
            log_interval: If provided, only record alive counts at these intervals

        Returns:
            Alive counts (every step, or every log_interval steps)
        """
        live_counts = []
        for step_num in range(steps):
            live_count = self.step()
            if log_interval is None or step_num % log_interval == 0:
                live_counts.append(live_count)
        return live_counts

    # Painting and bulk access

    def set_cell(self, x: int, y: int, state: int) -> None:
        """Queue a single cell write; coordinates off the grid are ignored."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            return
        if not (0 <= state < self.rule.num_states):
            raise ValueError(f"State {state} out of range for {self.rule.num_states}-state rule")
        self._pending_paints[x + y * self.width] = state

    def get_cell(self, x: int, y: int) -> int:
        self._apply_paints()
        return self.buffers.current.get(x, y)

    def load_pattern(self, pattern: Union[SeedPattern, str], center_x: int, center_y: int,
                     state: int = 1) -> None:
        """Queue a seed pattern centered at (center_x, center_y), wrapping at edges."""
        if isinstance(pattern, str):
            pattern = get_seed_pattern(pattern, default=None)
        for dx, dy in pattern.cells:
            self.set_cell((center_x + dx) % self.width, (center_y + dy) % self.height, state)

    def clear(self) -> None:
        """Kill every cell in both buffers and drop pending paints."""
        self.buffers.clear()
        self._pending_paints.clear()
        self._alive_cells = 0

    def randomize(self, density: Optional[float] = None, include_spectrum: bool = True,
                  rng: RandomSource = None) -> None:
        """Fill the current grid randomly.

        Args:
            density: Probability of a cell being non-dead (0.0 to 1.0);
                defaults to the session density
            include_spectrum: For multi-state rules, put half of the seeded
                cells into dying states, biased towards early ones
            rng: Random generator or seed (defaults to the session generator)
        """
        gen = self._resolve_rng(rng)
        density = self.density if density is None else density
        density = max(0.0, min(1.0, density))
        shape = (self.height, self.width)
        num_states = self.rule.num_states

        seeded = gen.random(shape) < density
        data = np.zeros(shape, dtype=np.uint32)

        if include_spectrum and num_states > 2:
            alive = gen.random(shape) < 0.5
            weighted = gen.random(shape) ** 1.5
            dying = np.minimum(2 + np.floor(weighted * (num_states - 2)), num_states - 1).astype(np.uint32)
            data[:] = np.where(alive, 1, dying)
            data[~seeded] = 0
        else:
            data[seeded] = 1

        self.buffers.current.state[:] = data
        self._pending_paints.clear()
        self._alive_cells = int(np.count_nonzero(data == 1))

    def continuous_seed(self, rate: float, pattern_id: str = 'pixel', alive: bool = True,
                        rng: RandomSource = None) -> int:
        """Sprinkle pattern copies at random centers to keep the grid active.

        Args:
            rate: Seeding rate; 0.1 places about 6.5 seeds per call on 256x256
            pattern_id: Seed pattern to place (unknown ids place a pixel)
            alive: True to paint alive cells, False to erase
            rng: Random generator or seed (defaults to the session generator)

        Returns:
            Number of pattern copies placed
        """
        gen = self._resolve_rng(rng)
        pattern = get_seed_pattern(pattern_id)
        seeds_per_call = (rate * self.width * self.height) / 1000
        adjusted = seeds_per_call / math.sqrt(len(pattern.cells))
        seed_state = 1 if alive else 0

        placed = 0
        for s in range(math.ceil(adjusted)):
            # The last, fractional seed is placed with matching probability.
            if s + 1 > adjusted and gen.random() > adjusted % 1:
                continue
            center_x = int(gen.integers(self.width))
            center_y = int(gen.integers(self.height))
            for dx, dy in pattern.cells:
                key = (center_y + dy) % self.height * self.width + (center_x + dx) % self.width
                self._pending_paints.setdefault(key, seed_state)
            placed += 1
        return placed

    def set_cell_data(self, data: np.ndarray) -> None:
        """Overwrite the current grid from a flat row-major buffer.

        Raises:
            ValueError: If the length or any state is invalid
        """
        data = np.asarray(data)
        if data.size != self.width * self.height:
            raise ValueError(f"Cell data length {data.size} doesn't match grid size {self.width * self.height}")
        if data.size and (data.min() < 0 or data.max() >= self.rule.num_states):
            raise ValueError(f"Cell states must be in [0, {self.rule.num_states})")
        self.buffers.current.load(data.reshape(-1))
        self._pending_paints.clear()
        self._alive_cells = self.buffers.current.count_alive()

    def get_cell_data(self) -> np.ndarray:
        """Flat row-major copy of the current grid."""
        self._apply_paints()
        return self.buffers.current.flat()

    async def get_cell_data_async(self) -> np.ndarray:
        """Awaitable read-back for callers written against an async device API."""
        return self.get_cell_data()

    # Statistics

    def count_alive_cells(self) -> int:
        """Alive cell count as of the last step or bulk write."""
        return self._alive_cells

    def update_alive_cells_count(self) -> int:
        """Recount alive cells including pending paints."""
        self._apply_paints()
        self._alive_cells = self.buffers.current.count_alive()
        return self._alive_cells

    def get_center_of_mass(self) -> Tuple[float, float]:
        """Centroid (x, y) of alive cells, (0.0, 0.0) if none."""
        self._apply_paints()
        rows, cols = np.nonzero(self.buffers.current.state == 1)
        if len(rows) == 0:
            return (0.0, 0.0)
        return (float(np.mean(cols)), float(np.mean(rows)))

    def __str__(self) -> str:
        return str(self.buffers.current)

    def __repr__(self) -> str:
        return (f"Simulation({self.width}x{self.height}, generation={self.generation}, "
                f"rule={self.rule!r}, boundary={self.boundary.value})")


def create_simulation(config: Optional[KernelConfig] = None) -> Simulation:
    """Build a simulation from configuration (environment if None)."""
    config = config or KernelConfig.from_env()
    sim = Simulation(config.width, config.height,
                     boundary=config.boundary,
                     backend=config.backend,
                     rng=config.seed,
                     density=config.density)
    sim.set_rule_string(config.rule, config.neighborhood)
    return sim
