"""Neighbor-based shading values for renderers.

Read-only reuse of the neighborhood enumerator and boundary transform: the
renderer tints each cell by how many live neighbors it has, or by how much
neighbor vitality surrounds it. Never used by the step itself.
"""

import numpy as np
from typing import Union
import logging

from .boundary import transform_coordinate
from .mappings import BoundaryId, NeighborhoodId, coerce_id
from .neighborhood import neighbor_offsets
from ..vitality.contribution import vitality_of_cell

logger = logging.getLogger(__name__)

SHADING_OFF = 0
SHADING_COUNT_ALIVE = 1
SHADING_SUM_VITALITY = 2


def neighbor_shading(state: np.ndarray, num_states: int,
                     neighborhood: Union[NeighborhoodId, str],
                     boundary: Union[BoundaryId, str],
                     mode: int = SHADING_COUNT_ALIVE) -> np.ndarray:
    """Per-cell shading values.

    Args:
        state: (height, width) cell states
        num_states: State count of the active rule
        neighborhood: Neighborhood to shade with
        boundary: Boundary topology
        mode: 0 off, 1 count alive neighbors, 2 sum neighbor vitality

    Returns:
        (height, width) float64 array
    """
    if mode not in (SHADING_OFF, SHADING_COUNT_ALIVE, SHADING_SUM_VITALITY):
        raise ValueError(f"Unknown shading mode: {mode}")

    height, width = state.shape
    shading = np.zeros((height, width), dtype=np.float64)
    if mode == SHADING_OFF:
        return shading

    nh = coerce_id(NeighborhoodId, neighborhood)
    bd = coerce_id(BoundaryId, boundary)
    rows = state.tolist()

    for y in range(height):
        offsets = neighbor_offsets(nh, y)
        for x in range(width):
            total = 0.0
            for dx, dy in offsets:
                resolved = transform_coordinate(x + dx, y + dy, width, height, bd)
                if resolved is None:
                    continue
                s = rows[resolved[1]][resolved[0]]
                if mode == SHADING_COUNT_ALIVE:
                    total += 1.0 if s == 1 else 0.0
                else:
                    total += vitality_of_cell(s, num_states)
            shading[y, x] = total

    return shading
