"""Neighborhood offset enumeration.

Offsets are (dx, dy) pairs relative to the cell being updated. Their order is
fixed: neighbor contributions are summed in this order, and floating point
addition makes the order observable.

Hexagonal shapes use odd-r offset coordinates: odd rows sit half a cell to
the right, so the diagonal neighbors of a cell depend on its row parity.
"""

from typing import List, Tuple, Union

from .mappings import NeighborhoodId, coerce_id

Offset = Tuple[int, int]

MAX_NEIGHBORS = {
    NeighborhoodId.MOORE: 8,
    NeighborhoodId.VON_NEUMANN: 4,
    NeighborhoodId.EXTENDED_MOORE: 24,
    NeighborhoodId.HEXAGONAL: 6,
    NeighborhoodId.EXTENDED_HEXAGONAL: 18,
}

MOORE_OFFSETS: List[Offset] = [
    (-1, -1), (0, -1), (1, -1),
    (-1, 0), (1, 0),
    (-1, 1), (0, 1), (1, 1),
]

VON_NEUMANN_OFFSETS: List[Offset] = [(0, -1), (0, 1), (-1, 0), (1, 0)]

EXTENDED_MOORE_OFFSETS: List[Offset] = [
    (dx, dy)
    for dy in range(-2, 3)
    for dx in range(-2, 3)
    if not (dx == 0 and dy == 0)
]

HEX_OFFSETS_EVEN: List[Offset] = [(-1, -1), (0, -1), (-1, 0), (1, 0), (-1, 1), (0, 1)]
HEX_OFFSETS_ODD: List[Offset] = [(0, -1), (1, -1), (-1, 0), (1, 0), (0, 1), (1, 1)]


def max_neighbors(neighborhood: Union[NeighborhoodId, str]) -> int:
    """Maximum neighbor count for a neighborhood (used for clamping)."""
    return MAX_NEIGHBORS[coerce_id(NeighborhoodId, neighborhood)]


def is_hexagonal(neighborhood: Union[NeighborhoodId, str]) -> bool:
    nh = coerce_id(NeighborhoodId, neighborhood)
    return nh in (NeighborhoodId.HEXAGONAL, NeighborhoodId.EXTENDED_HEXAGONAL)


def hex_offsets(y: int) -> List[Offset]:
    """Ring-1 hexagonal offsets for a cell in row y."""
    return list(HEX_OFFSETS_ODD if y & 1 else HEX_OFFSETS_EVEN)


def extended_hex_offsets(y: int) -> List[Offset]:
    """Ring-1 plus ten ring-2 hexagonal offsets for a cell in row y (16 total).

    The pairs two rows away follow the parity of the row one step away
    (y - 1 above, y + 1 below), not the parity of y.
    """
    odd = bool(y & 1)
    offsets = hex_offsets(y)

    if (y - 1) & 1:
        offsets += [(0, -2), (1, -2)]
    else:
        offsets += [(-1, -2), (0, -2)]

    if odd:
        offsets += [(-1, -1), (2, -1)]
    else:
        offsets += [(-2, -1), (1, -1)]

    offsets += [(-2, 0), (2, 0)]

    if odd:
        offsets += [(-1, 1), (2, 1)]
    else:
        offsets += [(-2, 1), (1, 1)]

    if (y + 1) & 1:
        offsets += [(0, 2), (1, 2)]
    else:
        offsets += [(-1, 2), (0, 2)]

    return offsets


def neighbor_offsets(neighborhood: Union[NeighborhoodId, str], y: int = 0) -> List[Offset]:
    """Enumerate neighbor offsets for a cell in row y.

    Args:
        neighborhood: Neighborhood id
        y: Row of the cell; only hexagonal shapes depend on it

    Returns:
        List of (dx, dy) offsets; as long as max_neighbors(neighborhood)
        except for extended hexagonal, which yields 16 against a limit of 18
    """
    nh = coerce_id(NeighborhoodId, neighborhood)
    if nh is NeighborhoodId.VON_NEUMANN:
        return list(VON_NEUMANN_OFFSETS)
    if nh is NeighborhoodId.EXTENDED_MOORE:
        return list(EXTENDED_MOORE_OFFSETS)
    if nh is NeighborhoodId.HEXAGONAL:
        return hex_offsets(y)
    if nh is NeighborhoodId.EXTENDED_HEXAGONAL:
        return extended_hex_offsets(y)
    return list(MOORE_OFFSETS)
