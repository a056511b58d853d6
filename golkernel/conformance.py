"""Serial/parallel conformance harness.

Runs the serial reference and the parallel kernel on the same seed grid for
every boundary x neighborhood x vitality mode combination and reports any
generation where the two produce different bytes.
"""

import itertools
import numpy as np
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple
import logging

from .core.mappings import BoundaryId, NeighborhoodId, VitalityMode
from .core.parallel import ParallelEngine
from .core.step_config import StepConfig
from .core.stepper import GenerationsEngine
from .rules.rule_spec import RuleSpec
from .vitality.curve import CurvePoint
from .vitality.spec import VitalitySpec

logger = logging.getLogger(__name__)

# Exercises both halves of the Hermite limiter and negative contributions.
CONFORMANCE_CURVE = (
    CurvePoint(0.0, 0.0), CurvePoint(0.2, 1.4), CurvePoint(0.5, -0.6),
    CurvePoint(0.8, 0.9), CurvePoint(1.0, 0.3),
)


@dataclass
class Mismatch:
    """One combination whose two paths disagreed."""
    boundary: BoundaryId
    neighborhood: NeighborhoodId
    mode: VitalityMode
    generation: int
    differing_cells: int


@dataclass
class ConformanceReport:
    """Outcome of a conformance run."""
    combinations: int = 0
    generations: int = 0
    mismatches: List[Mismatch] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.mismatches


def vitality_for_mode(mode: VitalityMode) -> VitalitySpec:
    """Representative non-trivial settings for each vitality mode."""
    if mode is VitalityMode.CURVE:
        return VitalitySpec(mode=mode, curve_points=CONFORMANCE_CURVE)
    return VitalitySpec(mode=mode, threshold=0.5, ghost_factor=0.6,
                        sigmoid_sharpness=7.0, decay_power=1.7)


def conformance_rule(neighborhood: NeighborhoodId, num_states: int = 5) -> RuleSpec:
    """Generations rule with birth/survival spread over the neighborhood's range."""
    birth = {1, 2, 3} if neighborhood is NeighborhoodId.VON_NEUMANN else {2, 3, 5, 7}
    survive = {1, 2} if neighborhood is NeighborhoodId.VON_NEUMANN else {2, 3, 4, 6, 9}
    return RuleSpec.from_sets(birth, survive, num_states, neighborhood)


def seed_grid(width: int, height: int, num_states: int, seed: int = 0) -> np.ndarray:
    """Random multi-state grid (about half the cells non-dead)."""
    gen = np.random.default_rng(seed)
    states = gen.integers(0, num_states, size=(height, width)).astype(np.uint32)
    states[gen.random((height, width)) < 0.5] = 0
    return states


def run_combination(initial: np.ndarray, config: StepConfig,
                    generations: int = 3) -> Optional[Tuple[int, int]]:
    """Step both paths side by side.

    Returns:
        (generation, differing cell count) of the first divergence, or None
    """
    serial = GenerationsEngine(config)
    parallel = ParallelEngine(config)

    serial_state = initial.copy()
    parallel_state = initial.copy()
    for generation in range(1, generations + 1):
        serial_state = serial.update_grid(serial_state, np.zeros_like(serial_state))
        parallel_state = parallel.update_grid(parallel_state, np.zeros_like(parallel_state))
        if serial_state.tobytes() != parallel_state.tobytes():
            return generation, int(np.count_nonzero(serial_state != parallel_state))
    return None


def run_conformance(width: int = 13, height: int = 11, seed: int = 0, generations: int = 3,
                    num_states: int = 5,
                    boundaries: Iterable[BoundaryId] = tuple(BoundaryId),
                    neighborhoods: Iterable[NeighborhoodId] = tuple(NeighborhoodId),
                    modes: Iterable[VitalityMode] = tuple(VitalityMode)) -> ConformanceReport:
    """Run the full boundary x neighborhood x vitality matrix.

    Odd grid dimensions keep the flip and hex-parity paths honest.
    """
    initial = seed_grid(width, height, num_states, seed)
    report = ConformanceReport(generations=generations)

    for boundary, neighborhood, mode in itertools.product(boundaries, neighborhoods, modes):
        config = StepConfig(width, height, conformance_rule(neighborhood, num_states),
                            boundary, vitality_for_mode(mode))
        report.combinations += 1
        divergence = run_combination(initial, config, generations)
        if divergence is not None:
            generation, cells = divergence
            logger.warning(f"Mismatch: {boundary.value}/{neighborhood.value}/{mode.value} "
                           f"at generation {generation} ({cells} cells)")
            report.mismatches.append(Mismatch(boundary, neighborhood, mode, generation, cells))

    logger.info(f"Conformance: {report.combinations} combinations, "
                f"{len(report.mismatches)} mismatches")
    return report
