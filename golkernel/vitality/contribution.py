"""Per-neighbor vitality contribution (serial reference).

Converts a raw neighbor state into the fractional amount it adds to the
weighted neighbor count. Callers clamp the sum, not the individual terms.
"""

import math

from ..core.mappings import VitalityMode
from .spec import VitalitySpec


def vitality_of_cell(state: int, num_states: int) -> float:
    """Normalized aliveness: 1 alive, 0 dead, decreasing along the decay chain."""
    if state == 0:
        return 0.0
    if state == 1:
        return 1.0
    return (num_states - state) / (num_states - 1)


def neighbor_contribution(state: int, spec: VitalitySpec, num_states: int) -> float:
    """Weighted presence of one neighbor.

    Args:
        state: Neighbor cell state
        spec: Vitality configuration
        num_states: State count of the active rule

    Returns:
        Contribution, normally in [0, 1]
    """
    mode = spec.mode
    if mode is VitalityMode.NONE:
        return 1.0 if state == 1 else 0.0

    vitality = vitality_of_cell(state, num_states)

    if mode is VitalityMode.THRESHOLD:
        return 1.0 if vitality >= spec.threshold else 0.0

    if mode is VitalityMode.SIGMOID:
        z = (vitality - spec.threshold) * spec.sigmoid_sharpness
        try:
            return 1.0 / (1.0 + math.exp(-z))
        except OverflowError:
            return 0.0

    # Remaining modes only reweight dying cells.
    if state == 1:
        return 1.0
    if state == 0:
        return 0.0

    if mode is VitalityMode.GHOST:
        return vitality * spec.ghost_factor
    if mode is VitalityMode.DECAY:
        return math.pow(vitality, spec.decay_power) * spec.ghost_factor
    if mode is VitalityMode.CURVE:
        return sample_curve(spec.curve_samples, vitality)

    raise ValueError(f"Unknown vitality mode: {mode!r}")


def sample_curve(samples, vitality: float) -> float:
    """Linear interpolation into the 128-entry curve table at vitality * 127."""
    last = len(samples) - 1
    pos = vitality * 127
    lo = int(math.floor(pos))
    hi = min(lo + 1, 127)
    frac = pos - lo
    v0 = samples[lo] if 0 <= lo <= last else 0.0
    v1 = samples[hi] if 0 <= hi <= last else 0.0
    return v0 + (v1 - v0) * frac
