"""Parallel transition kernel (numba).

A data-parallel rendition of the step, written the way a compute shader is:
integer-coded ids, literal offset tables indexed by row parity, and one
independent per-cell body run across rows with prange. It deliberately does
not call into the serial reference; the two are kept in agreement by the
conformance harness in golkernel.conformance.
"""

import math
import numpy as np
from numba import jit, prange
import logging

from .mappings import boundary_to_index, neighborhood_to_index, vitality_mode_to_index
from .step_config import StepConfig

logger = logging.getLogger(__name__)

# Vitality mode codes (VitalityMode declaration order)
MODE_NONE = 0
MODE_THRESHOLD = 1
MODE_GHOST = 2
MODE_SIGMOID = 3
MODE_DECAY = 4
MODE_CURVE = 5

# Offset tables per neighborhood code, as [even-row table, odd-row table]
_MOORE = [(-1, -1), (0, -1), (1, -1), (-1, 0), (1, 0), (-1, 1), (0, 1), (1, 1)]
_VON_NEUMANN = [(0, -1), (0, 1), (-1, 0), (1, 0)]
_EXTENDED_MOORE = [
    (-2, -2), (-1, -2), (0, -2), (1, -2), (2, -2),
    (-2, -1), (-1, -1), (0, -1), (1, -1), (2, -1),
    (-2, 0), (-1, 0), (1, 0), (2, 0),
    (-2, 1), (-1, 1), (0, 1), (1, 1), (2, 1),
    (-2, 2), (-1, 2), (0, 2), (1, 2), (2, 2),
]
_HEX_EVEN = [(-1, -1), (0, -1), (-1, 0), (1, 0), (-1, 1), (0, 1)]
_HEX_ODD = [(0, -1), (1, -1), (-1, 0), (1, 0), (0, 1), (1, 1)]
_EXT_HEX_EVEN = _HEX_EVEN + [
    (0, -2), (1, -2),
    (-2, -1), (1, -1),
    (-2, 0), (2, 0),
    (-2, 1), (1, 1),
    (0, 2), (1, 2),
]
_EXT_HEX_ODD = _HEX_ODD + [
    (-1, -2), (0, -2),
    (-1, -1), (2, -1),
    (-2, 0), (2, 0),
    (-1, 1), (2, 1),
    (-1, 2), (0, 2),
]

_OFFSET_TABLES = (
    (_MOORE, _MOORE),
    (_VON_NEUMANN, _VON_NEUMANN),
    (_EXTENDED_MOORE, _EXTENDED_MOORE),
    (_HEX_EVEN, _HEX_ODD),
    (_EXT_HEX_EVEN, _EXT_HEX_ODD),
)
_NEIGHBOR_LIMITS = (8, 4, 24, 6, 18)


def offset_table(neighborhood_code: int) -> np.ndarray:
    """(2, n, 2) int64 array of offsets; first axis is row parity."""
    even, odd = _OFFSET_TABLES[neighborhood_code]
    return np.array([even, odd], dtype=np.int64)


@jit(nopython=True, cache=True)
def _wraps_x(boundary):
    # cylinderX, torus, mobiusX, kleinX, kleinY, projectivePlane
    return boundary == 1 or boundary == 3 or boundary == 4 or boundary == 6 or boundary == 7 or boundary == 8


@jit(nopython=True, cache=True)
def _wraps_y(boundary):
    # cylinderY, torus, mobiusY, kleinX, kleinY, projectivePlane
    return boundary == 2 or boundary == 3 or boundary == 5 or boundary == 6 or boundary == 7 or boundary == 8


@jit(nopython=True, cache=True)
def _flips_on_wrap_x(boundary):
    return boundary == 4 or boundary == 6 or boundary == 8


@jit(nopython=True, cache=True)
def _flips_on_wrap_y(boundary):
    return boundary == 5 or boundary == 7 or boundary == 8


@jit(nopython=True, cache=True)
def resolve_coordinate(x, y, width, height, boundary):
    """Boundary transform; returns (-1, -1) for coordinates off the grid."""
    x_wraps = 0
    y_wraps = 0

    if x < 0 or x >= width:
        if not _wraps_x(boundary):
            return -1, -1
        if x < 0:
            x_wraps = (-x - 1) // width + 1
        else:
            x_wraps = x // width
        x = x % width
        if x < 0:
            x += width

    if y < 0 or y >= height:
        if not _wraps_y(boundary):
            return -1, -1
        if y < 0:
            y_wraps = (-y - 1) // height + 1
        else:
            y_wraps = y // height
        y = y % height
        if y < 0:
            y += height

    if _flips_on_wrap_x(boundary) and (x_wraps & 1) == 1:
        y = height - 1 - y
    if _flips_on_wrap_y(boundary) and (y_wraps & 1) == 1:
        x = width - 1 - x

    if x < 0 or x >= width or y < 0 or y >= height:
        return -1, -1
    return x, y


@jit(nopython=True, cache=True)
def contribution(state, num_states, mode, threshold, ghost_factor, sharpness, decay_power, curve):
    """Weighted presence of one neighbor state."""
    if mode == MODE_NONE:
        return 1.0 if state == 1 else 0.0

    if state == 0:
        vitality = 0.0
    elif state == 1:
        vitality = 1.0
    else:
        vitality = (num_states - state) / (num_states - 1)

    if mode == MODE_THRESHOLD:
        return 1.0 if vitality >= threshold else 0.0
    if mode == MODE_SIGMOID:
        z = (vitality - threshold) * sharpness
        return 1.0 / (1.0 + math.exp(-z))

    if state == 1:
        return 1.0
    if state == 0:
        return 0.0

    if mode == MODE_GHOST:
        return vitality * ghost_factor
    if mode == MODE_DECAY:
        return math.pow(vitality, decay_power) * ghost_factor
    if mode == MODE_CURVE:
        pos = vitality * 127.0
        lo = int(math.floor(pos))
        hi = min(lo + 1, 127)
        frac = pos - lo
        v0 = curve[lo] if lo < curve.shape[0] else 0.0
        v1 = curve[hi] if hi < curve.shape[0] else 0.0
        return v0 + (v1 - v0) * frac

    return 1.0 if state == 1 else 0.0


@jit(nopython=True, parallel=True, cache=True)
def step_kernel(current, out, offsets, birth_mask, survive_mask, num_states, limit,
                boundary, mode, threshold, ghost_factor, sharpness, decay_power, curve):
    """Write the next generation of `current` into `out`.

    Rows are distributed across threads; every cell reads only `current`
    and writes only its own slot of `out`.
    """
    height, width = current.shape
    n_offsets = offsets.shape[1]

    for row in prange(height):
        y = np.int64(row)
        parity = y & 1
        for x in range(width):
            total = 0.0
            for k in range(n_offsets):
                rx, ry = resolve_coordinate(x + offsets[parity, k, 0], y + offsets[parity, k, 1],
                                            width, height, boundary)
                neighbor = 0
                if rx >= 0:
                    neighbor = np.int64(current[ry, rx])
                total += contribution(neighbor, num_states, mode, threshold, ghost_factor,
                                      sharpness, decay_power, curve)

            clamped = max(0.0, min(float(limit), total))
            n = int(clamped + 0.5)

            s = np.int64(current[y, x])
            if s == 0:
                nxt = 1 if (birth_mask >> n) & 1 else 0
            elif num_states == 2:
                nxt = 1 if (survive_mask >> n) & 1 else 0
            elif s == 1:
                nxt = 1 if (survive_mask >> n) & 1 else 2
            else:
                nxt = s + 1
                if nxt >= num_states:
                    nxt = 0
            out[y, x] = nxt


class ParallelEngine:
    """Parallel step bound to one StepConfig.

    Converts the configuration to the plain integer/float arguments the
    kernel takes once, then reuses them for every step.
    """

    def __init__(self, config: StepConfig):
        self.config = config
        rule = config.rule
        vitality = config.vitality

        nh_code = neighborhood_to_index(rule.neighborhood)
        self._offsets = offset_table(nh_code)
        self._limit = _NEIGHBOR_LIMITS[nh_code]
        self._boundary = boundary_to_index(config.boundary)
        self._mode = vitality_mode_to_index(vitality.mode)
        self._curve = np.asarray(vitality.curve_samples, dtype=np.float64)

        logger.debug(f"Parallel engine ready: {rule!r}, boundary={config.boundary.value}, "
                     f"vitality={vitality.mode.value}")

    def update_grid(self, current: np.ndarray, out: np.ndarray) -> np.ndarray:
        """Compute one generation from `current` into `out`."""
        cfg = self.config
        if current.shape != (cfg.height, cfg.width) or out.shape != current.shape:
            raise ValueError(f"Grid shape {current.shape} doesn't match config {(cfg.height, cfg.width)}")
        if out is current or np.shares_memory(out, current):
            raise ValueError("Destination buffer must differ from the source buffer")

        rule = cfg.rule
        vitality = cfg.vitality
        step_kernel(current, out, self._offsets,
                    np.int64(rule.birth_mask), np.int64(rule.survive_mask),
                    np.int64(rule.num_states), np.int64(self._limit),
                    np.int64(self._boundary), np.int64(self._mode),
                    float(vitality.threshold), float(vitality.ghost_factor),
                    float(vitality.sigmoid_sharpness), float(vitality.decay_power),
                    self._curve)
        return out


def step_parallel(current: np.ndarray, next_state: np.ndarray, config: StepConfig) -> np.ndarray:
    """Write the generation after `current` into `next_state` (parallel path)."""
    return ParallelEngine(config).update_grid(current, next_state)
