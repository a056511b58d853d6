"""Seed pattern catalogue.

Patterns are lists of (dx, dy) offsets from a center cell. Hex patterns are
laid out for odd-r offset coordinates and only look right on hexagonal
neighborhoods.
"""

import numpy as np
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

Cell = Tuple[int, int]


@dataclass(frozen=True)
class SeedPattern:
    """Named seed shape."""
    id: str
    name: str
    cells: Tuple[Cell, ...]
    description: str
    hex: bool = False


def _pattern(pid: str, name: str, cells: List[Cell], description: str, hex: bool = False) -> SeedPattern:
    return SeedPattern(pid, name, tuple(cells), description, hex)


SEED_PATTERNS: List[SeedPattern] = [
    _pattern('pixel', 'Pixel', [(0, 0)], 'Single cell'),
    _pattern('dot-pair', 'Pair', [(0, 0), (1, 0)], 'Two adjacent cells'),
    _pattern('line-h', 'Line H', [(-1, 0), (0, 0), (1, 0)], 'Horizontal line'),
    _pattern('line-v', 'Line V', [(0, -1), (0, 0), (0, 1)], 'Vertical line'),
    _pattern('cross', 'Cross', [(0, 0), (-1, 0), (1, 0), (0, -1), (0, 1)], 'Plus shape'),
    _pattern('diamond', 'Diamond', [(0, -1), (-1, 0), (1, 0), (0, 1)], 'Diamond outline'),
    _pattern('square', 'Block', [(0, 0), (1, 0), (0, 1), (1, 1)], '2x2 block'),
    _pattern('corner', 'Corner', [(0, 0), (1, 0), (0, 1)], 'L-shape'),

    # 3x3 patterns
    _pattern('ring', 'Ring',
             [(-1, -1), (0, -1), (1, -1), (-1, 0), (1, 0), (-1, 1), (0, 1), (1, 1)],
             '3x3 ring (hollow)'),
    _pattern('full-3x3', 'Full 3x3',
             [(dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1)],
             'Solid 3x3 block'),
    _pattern('x-shape', 'X', [(-1, -1), (1, -1), (0, 0), (-1, 1), (1, 1)], 'X shape'),
    _pattern('checker-3x3', 'Checker', [(-1, -1), (1, -1), (0, 0), (-1, 1), (1, 1)], 'Checkerboard 3x3'),

    # 4x4 patterns
    _pattern('full-4x4', 'Full 4x4',
             [(dx, dy) for dy in range(-1, 3) for dx in range(-1, 3)],
             'Solid 4x4 block'),
    _pattern('ring-4x4', 'Ring 4x4',
             [(dx, dy) for dy in range(-1, 3) for dx in range(-1, 3)
              if dx in (-1, 2) or dy in (-1, 2)],
             '4x4 ring (hollow)'),
    _pattern('corners-4x4', 'Corners', [(-1, -1), (2, -1), (-1, 2), (2, 2)], '4x4 corner dots'),
    _pattern('diagonal', 'Diagonal', [(-1, -1), (0, 0), (1, 1), (2, 2)], 'Diagonal line'),

    # Letters and movers
    _pattern('h-shape', 'H', [(-1, -1), (-1, 0), (-1, 1), (0, 0), (1, -1), (1, 0), (1, 1)], 'H letter shape'),
    _pattern('t-shape', 'T', [(-1, -1), (0, -1), (1, -1), (0, 0), (0, 1)], 'T letter shape'),
    _pattern('arrow', 'Arrow', [(0, -1), (-1, 0), (0, 0), (1, 0), (0, 1), (0, 2)], 'Arrow pointing down'),
    _pattern('glider', 'Glider', [(0, -1), (1, 0), (-1, 1), (0, 1), (1, 1)], 'Classic glider pattern'),
]

SEED_PATTERNS_HEX: List[SeedPattern] = [
    _pattern('hex-pixel', 'Pixel', [(0, 0)], 'Single cell', hex=True),
    _pattern('hex-pair', 'Pair', [(0, 0), (1, 0)], 'Two adjacent cells', hex=True),
    _pattern('hex-trio-h', 'Trio H', [(-1, 0), (0, 0), (1, 0)], 'Horizontal trio', hex=True),
    _pattern('hex-trio-v', 'Trio V', [(0, -1), (0, 0), (0, 1)], 'Vertical trio', hex=True),
    _pattern('hex-ring', 'Ring', [(-1, -1), (0, -1), (-1, 0), (1, 0), (-1, 1), (0, 1)],
             'Hexagonal ring (6 neighbors)', hex=True),
    _pattern('hex-full', 'Full Hex', [(0, 0), (-1, -1), (0, -1), (-1, 0), (1, 0), (-1, 1), (0, 1)],
             'Center + all 6 neighbors', hex=True),
    _pattern('hex-triangle-up', 'Tri Up', [(0, 0), (-1, 1), (0, 1)], 'Upward triangle', hex=True),
    _pattern('hex-triangle-down', 'Tri Down', [(-1, -1), (0, -1), (0, 0)], 'Downward triangle', hex=True),
    _pattern('hex-diamond', 'Diamond', [(0, -1), (-1, 0), (1, 0), (0, 1)], 'Diamond shape', hex=True),
    _pattern('hex-line-diag', 'Diagonal', [(-1, -1), (0, 0), (0, 1)], 'Diagonal line', hex=True),
    _pattern('hex-flower', 'Flower', [(0, -1), (-1, 0), (1, 0), (-1, 1), (0, 1), (0, -2), (-1, 2), (1, 1)],
             'Flower pattern', hex=True),
    _pattern('hex-arrow', 'Arrow', [(0, -1), (-1, 0), (0, 0), (1, 0), (0, 1)], 'Arrow/cross shape', hex=True),
    _pattern('hex-wave', 'Wave', [(-1, -1), (0, 0), (1, 0), (0, 1), (1, 1)], 'Wave pattern', hex=True),
    _pattern('hex-cluster', 'Cluster', [(0, 0), (1, 0), (0, 1), (1, 1)], '4-cell cluster', hex=True),
    _pattern('hex-big-ring', 'Big Ring',
             [(-1, -2), (0, -2), (-2, -1), (1, -1), (-2, 0), (2, 0), (-2, 1), (1, 1), (-1, 2), (0, 2)],
             'Large hexagonal ring', hex=True),
    _pattern('hex-star', 'Star',
             [(0, -2), (-1, -1), (1, -1), (-2, 0), (0, 0), (2, 0), (-1, 1), (1, 1), (0, 2)],
             'Star pattern', hex=True),
]

_BY_ID: Dict[str, SeedPattern] = {p.id: p for p in SEED_PATTERNS + SEED_PATTERNS_HEX}


def get_seed_pattern(pattern_id: str, default: Optional[str] = 'pixel') -> SeedPattern:
    """Look up a seed pattern by id.

    Unknown ids fall back to `default`; pass default=None to raise instead.

    Raises:
        KeyError: If the id is unknown and no default is given
    """
    if pattern_id in _BY_ID:
        return _BY_ID[pattern_id]
    if default is None:
        raise KeyError(f"Unknown seed pattern: {pattern_id}")
    return _BY_ID[default]


def place_pattern(state: np.ndarray, pattern: SeedPattern, center_x: int, center_y: int,
                  value: int = 1) -> None:
    """Stamp a pattern into a (height, width) state array, wrapping at the edges."""
    height, width = state.shape
    for dx, dy in pattern.cells:
        state[(center_y + dy) % height, (center_x + dx) % width] = value


def pattern_cells(pattern: SeedPattern, center_x: int, center_y: int,
                  width: int, height: int) -> List[Cell]:
    """Absolute (x, y) cells covered by a pattern placed at a center, wrapped."""
    return [((center_x + dx) % width, (center_y + dy) % height) for dx, dy in pattern.cells]
