"""Tests for the transition step.

Stepping tests run against both the serial reference and the parallel kernel;
count-level checks call the serial engine directly.
"""

import numpy as np
import pytest
from golkernel.conformance import seed_grid
from golkernel.core.boundary import transform_coordinate
from golkernel.core.mappings import BoundaryId, NeighborhoodId, VitalityMode
from golkernel.core.neighborhood import HEX_OFFSETS_ODD, neighbor_offsets
from golkernel.core.parallel import ParallelEngine, step_parallel
from golkernel.core.step_config import StepConfig
from golkernel.core.stepper import GenerationsEngine, round_neighbor_count, step_serial
from golkernel.patterns.seeds import get_seed_pattern, place_pattern
from golkernel.rules.rule_spec import RuleSpec
from golkernel.rules.rule_strings import parse_rule_string
from golkernel.vitality.spec import VitalitySpec


@pytest.fixture(params=[GenerationsEngine, ParallelEngine], ids=['serial', 'parallel'])
def engine_cls(request):
    return request.param


def run(engine, state, steps=1):
    for _ in range(steps):
        state = engine.update_grid(state, np.zeros_like(state))
    return state


def alive_set(state):
    ys, xs = np.nonzero(state == 1)
    return {(int(x), int(y)) for x, y in zip(xs, ys)}


class TestRounding:
    """Clamp and round-half-up of weighted sums."""

    def test_half_rounds_up(self):
        assert round_neighbor_count(2.5, 8) == 3
        assert round_neighbor_count(2.49, 8) == 2

    def test_clamped(self):
        assert round_neighbor_count(-1.3, 8) == 0
        assert round_neighbor_count(12.0, 8) == 8
        assert round_neighbor_count(7.0, 4) == 4


class TestClassicPatterns:
    """Conway's Life still lifes, oscillators and spaceships."""

    def test_glider_translates_on_torus(self, engine_cls):
        """After 4 steps a glider moves one cell down-right, wrapping mod 8."""
        state = np.zeros((8, 8), dtype=np.uint32)
        place_pattern(state, get_seed_pattern('glider'), 3, 3)
        initial = alive_set(state)
        engine = engine_cls(StepConfig(8, 8, RuleSpec.conway(), BoundaryId.TORUS))

        state = run(engine, state, 4)

        assert alive_set(state) == {((x + 1) % 8, (y + 1) % 8) for x, y in initial}

    def test_glider_wraps_fully_around(self, engine_cls):
        state = np.zeros((8, 8), dtype=np.uint32)
        place_pattern(state, get_seed_pattern('glider'), 3, 3)
        initial = state.copy()
        engine = engine_cls(StepConfig(8, 8, RuleSpec.conway(), BoundaryId.TORUS))

        assert np.array_equal(run(engine, state, 32), initial)

    def test_block_is_still(self, engine_cls):
        state = np.zeros((6, 6), dtype=np.uint32)
        state[2:4, 2:4] = 1
        engine = engine_cls(StepConfig(6, 6, RuleSpec.conway(), BoundaryId.PLANE))

        assert np.array_equal(run(engine, state), state)

    def test_blinker_oscillates(self, engine_cls):
        state = np.zeros((5, 5), dtype=np.uint32)
        state[2, 1:4] = 1
        engine = engine_cls(StepConfig(5, 5, RuleSpec.conway(), BoundaryId.PLANE))

        once = run(engine, state)
        assert alive_set(once) == {(2, 1), (2, 2), (2, 3)}
        assert np.array_equal(run(engine, once), state)

    def test_plane_edges_count_as_dead(self, engine_cls):
        """A blinker against the edge of a plane loses the off-grid half."""
        state = np.zeros((5, 5), dtype=np.uint32)
        state[0, 1:4] = 1
        engine = engine_cls(StepConfig(5, 5, RuleSpec.conway(), BoundaryId.PLANE))

        assert alive_set(run(engine, state)) == {(2, 0), (2, 1)}

    def test_torus_edges_wrap(self, engine_cls):
        state = np.zeros((5, 5), dtype=np.uint32)
        state[0, 1:4] = 1
        engine = engine_cls(StepConfig(5, 5, RuleSpec.conway(), BoundaryId.TORUS))

        assert alive_set(run(engine, state)) == {(2, 4), (2, 0), (2, 1)}


class TestGenerations:
    """Multi-state decay chains."""

    def test_brians_brain_decay(self, engine_cls):
        """An isolated cell goes alive -> dying -> dead."""
        state = np.zeros((5, 5), dtype=np.uint32)
        state[2, 2] = 1
        engine = engine_cls(StepConfig(5, 5, parse_rule_string("B2/S/C3"), BoundaryId.PLANE))

        once = run(engine, state)
        assert once[2, 2] == 2
        assert once.sum() == 2
        twice = run(engine, once)
        assert twice.sum() == 0

    def test_dying_cells_ignore_neighbors(self, engine_cls):
        state = np.ones((4, 4), dtype=np.uint32)
        state[1, 1] = 2
        rule = RuleSpec.from_sets({3}, set(range(9)), num_states=4)
        engine = engine_cls(StepConfig(4, 4, rule, BoundaryId.TORUS))

        out = run(engine, state)
        assert out[1, 1] == 3
        assert (out == 1).sum() == 15

    def test_states_stay_in_range(self, engine_cls):
        rng = np.random.default_rng(3)
        state = rng.integers(0, 6, size=(9, 9)).astype(np.uint32)
        rule = parse_rule_string("B2/S345/C6")
        engine = engine_cls(StepConfig(9, 9, rule, BoundaryId.KLEIN_X))

        for _ in range(5):
            state = run(engine, state)
            assert state.max() < 6


class TestVitalityWeighting:
    """Fractional neighbor counts."""

    def _dead_center(self):
        # center (2, 2) is dead with two alive and one dying neighbor
        state = np.zeros((5, 5), dtype=np.uint32)
        state[1, 1] = 1
        state[1, 2] = 1
        state[3, 3] = 2
        return state

    def test_half_rounds_up_to_birth(self, engine_cls):
        """2 alive + one state-2 neighbor at ghost 1.0 sums to 2.5, rounded to 3."""
        rule = parse_rule_string("B3/S/C3")
        vitality = VitalitySpec(mode=VitalityMode.GHOST, ghost_factor=1.0)
        engine = engine_cls(StepConfig(5, 5, rule, BoundaryId.PLANE, vitality))

        assert run(engine, self._dead_center())[2, 2] == 1

    def test_zero_ghost_means_no_birth(self, engine_cls):
        rule = parse_rule_string("B3/S/C3")
        vitality = VitalitySpec(mode=VitalityMode.GHOST, ghost_factor=0.0)
        engine = engine_cls(StepConfig(5, 5, rule, BoundaryId.PLANE, vitality))

        assert run(engine, self._dead_center())[2, 2] == 0

    def test_sum_clamped_to_neighbor_limit(self, engine_cls):
        """Eight heavy ghosts sum to 12 but count as 8."""
        state = np.full((3, 3), 2, dtype=np.uint32)
        state[1, 1] = 0
        rule = parse_rule_string("B8/S/C3")
        vitality = VitalitySpec(mode=VitalityMode.GHOST, ghost_factor=3.0)
        engine = engine_cls(StepConfig(3, 3, rule, BoundaryId.PLANE, vitality))

        assert run(engine, state)[1, 1] == 1

    def test_none_mode_matches_plain_count(self, engine_cls):
        """With vitality off the step is ordinary Life on a torus."""
        rng = np.random.default_rng(11)
        state = (rng.random((12, 10)) < 0.4).astype(np.uint32)
        engine = engine_cls(StepConfig(10, 12, RuleSpec.conway(), BoundaryId.TORUS))

        counts = sum(np.roll(np.roll(state, dy, axis=0), dx, axis=1)
                     for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dx, dy) != (0, 0))
        expected = ((counts == 3) | ((state == 1) & (counts == 2))).astype(np.uint32)

        assert np.array_equal(run(engine, state), expected)


class TestNoneModeCount:
    """With vitality off the weighted count is the number of alive neighbors."""

    @pytest.mark.parametrize("neighborhood", list(NeighborhoodId))
    @pytest.mark.parametrize("boundary", [BoundaryId.PLANE, BoundaryId.TORUS,
                                          BoundaryId.MOBIUS_X, BoundaryId.PROJECTIVE_PLANE])
    def test_dying_states_add_nothing(self, neighborhood, boundary):
        width, height = 9, 7
        state = seed_grid(width, height, 5, seed=8)
        rule = RuleSpec.from_sets({3}, {2, 3}, 5, neighborhood)
        engine = GenerationsEngine(StepConfig(width, height, rule, boundary))
        rows = state.tolist()

        for y in range(height):
            for x in range(width):
                alive = 0
                for dx, dy in neighbor_offsets(neighborhood, y):
                    resolved = transform_coordinate(x + dx, y + dy, width, height, boundary)
                    if resolved is not None and rows[resolved[1]][resolved[0]] == 1:
                        alive += 1
                assert engine.weighted_sum(rows, x, y) == alive, (x, y)
                assert engine.count_neighbors(rows, x, y) == alive, (x, y)

    def test_grid_holds_dying_cells(self):
        state = seed_grid(9, 7, 5, seed=8)
        assert (state >= 2).any()
        assert (state == 1).any()


class TestNeighborhoods:
    """Neighborhood shapes as seen through a step."""

    def test_hex_odd_row_births(self, engine_cls):
        """B1 around a lone cell on an odd row births exactly its hex neighbors."""
        state = np.zeros((7, 7), dtype=np.uint32)
        state[3, 2] = 1
        rule = RuleSpec.from_sets({1}, set(), 2, NeighborhoodId.HEXAGONAL)
        engine = engine_cls(StepConfig(7, 7, rule, BoundaryId.PLANE))

        assert alive_set(run(engine, state)) == {(2 + dx, 3 + dy) for dx, dy in HEX_OFFSETS_ODD}

    def test_von_neumann_births(self, engine_cls):
        state = np.zeros((5, 5), dtype=np.uint32)
        state[2, 2] = 1
        rule = RuleSpec.from_sets({1}, set(), 2, NeighborhoodId.VON_NEUMANN)
        engine = engine_cls(StepConfig(5, 5, rule, BoundaryId.PLANE))

        assert alive_set(run(engine, state)) == {(2, 1), (2, 3), (1, 2), (3, 2)}

    def test_extended_moore_births(self, engine_cls):
        state = np.zeros((7, 7), dtype=np.uint32)
        state[3, 3] = 1
        rule = RuleSpec.from_sets({1}, set(), 2, NeighborhoodId.EXTENDED_MOORE)
        engine = engine_cls(StepConfig(7, 7, rule, BoundaryId.PLANE))

        out = run(engine, state)
        assert (out == 1).sum() == 24
        assert out[3, 3] == 0


class TestBufferHandling:
    """Source and destination buffers."""

    def test_same_buffer_rejected(self, engine_cls):
        state = np.zeros((4, 4), dtype=np.uint32)
        engine = engine_cls(StepConfig(4, 4))
        with pytest.raises(ValueError, match="differ"):
            engine.update_grid(state, state)

    def test_shape_mismatch_rejected(self, engine_cls):
        engine = engine_cls(StepConfig(4, 4))
        with pytest.raises(ValueError, match="shape"):
            engine.update_grid(np.zeros((5, 4), dtype=np.uint32), np.zeros((5, 4), dtype=np.uint32))

    def test_source_untouched(self, engine_cls):
        state = np.zeros((6, 6), dtype=np.uint32)
        place_pattern(state, get_seed_pattern('glider'), 2, 2)
        before = state.copy()
        run(engine_cls(StepConfig(6, 6)), state)
        assert np.array_equal(state, before)

    def test_step_functions(self):
        state = np.zeros((5, 5), dtype=np.uint32)
        state[2, 1:4] = 1
        config = StepConfig(5, 5, boundary='plane')
        serial = step_serial(state, np.zeros_like(state), config)
        parallel = step_parallel(state, np.zeros_like(state), config)
        assert serial.tobytes() == parallel.tobytes()
