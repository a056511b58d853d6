"""Boundary topology transform.

Maps an arbitrary integer coordinate, possibly many grid widths outside the
grid, onto an in-grid coordinate or None ("out of bounds, contributes dead").
Orientation-reversing topologies (Mobius, Klein, projective plane) mirror the
opposite axis whenever an axis is crossed an odd number of times.
"""

from typing import NamedTuple, Optional, Tuple, Union

from .mappings import BoundaryId, coerce_id


class BoundaryTraits(NamedTuple):
    """Per-topology wrap and flip flags."""
    wraps_x: bool
    wraps_y: bool
    flips_on_wrap_x: bool  # X crossing mirrors y
    flips_on_wrap_y: bool  # Y crossing mirrors x


BOUNDARY_TRAITS = {
    BoundaryId.PLANE: BoundaryTraits(False, False, False, False),
    BoundaryId.CYLINDER_X: BoundaryTraits(True, False, False, False),
    BoundaryId.CYLINDER_Y: BoundaryTraits(False, True, False, False),
    BoundaryId.TORUS: BoundaryTraits(True, True, False, False),
    BoundaryId.MOBIUS_X: BoundaryTraits(True, False, True, False),
    BoundaryId.MOBIUS_Y: BoundaryTraits(False, True, False, True),
    BoundaryId.KLEIN_X: BoundaryTraits(True, True, True, False),
    BoundaryId.KLEIN_Y: BoundaryTraits(True, True, False, True),
    BoundaryId.PROJECTIVE_PLANE: BoundaryTraits(True, True, True, True),
}


def boundary_traits(boundary: Union[BoundaryId, str]) -> BoundaryTraits:
    """Get wrap/flip flags for a boundary id."""
    return BOUNDARY_TRAITS[coerce_id(BoundaryId, boundary)]


def wrap_axis(value: int, size: int) -> Tuple[int, int]:
    """Normalize a coordinate on a wrapping axis.

    Args:
        value: Coordinate, any integer
        size: Axis length (positive)

    Returns:
        (normalized coordinate in [0, size), number of edge crossings)
    """
    if 0 <= value < size:
        return value, 0
    if value < 0:
        crossings = (-value - 1) // size + 1
    else:
        crossings = value // size
    wrapped = value % size
    if wrapped < 0:
        wrapped += size
    return wrapped, crossings


def transform_coordinate(x: int, y: int, width: int, height: int,
                         boundary: Union[BoundaryId, str]) -> Optional[Tuple[int, int]]:
    """Resolve a neighbor coordinate under a boundary topology.

    Args:
        x: Column, may lie outside [0, width)
        y: Row, may lie outside [0, height)
        width: Grid width in cells
        height: Grid height in cells
        boundary: Boundary topology id

    Returns:
        (x, y) inside the grid, or None when the coordinate falls off a
        non-wrapping edge
    """
    traits = boundary_traits(boundary)

    x_wraps = 0
    y_wraps = 0

    if x < 0 or x >= width:
        if not traits.wraps_x:
            return None
        x, x_wraps = wrap_axis(x, width)

    if y < 0 or y >= height:
        if not traits.wraps_y:
            return None
        y, y_wraps = wrap_axis(y, height)

    if traits.flips_on_wrap_x and x_wraps & 1:
        y = height - 1 - y
    if traits.flips_on_wrap_y and y_wraps & 1:
        x = width - 1 - x

    if not (0 <= x < width and 0 <= y < height):
        return None
    return x, y
