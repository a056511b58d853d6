"""Canonical id <-> index mappings shared by kernels, renderers and UI adapters.

Ids are the stable public contract (plain strings, persisted in rule presets).
Indices are internal encodings, e.g. the integer codes handed to the parallel
kernel. Member order is fixed and must never be rearranged.
"""

from enum import Enum
from typing import Type, TypeVar, Union

E = TypeVar('E', bound=Enum)


class BoundaryId(Enum):
    """Boundary topologies for resolving coordinates beyond the grid edge."""
    PLANE = 'plane'
    CYLINDER_X = 'cylinderX'
    CYLINDER_Y = 'cylinderY'
    TORUS = 'torus'
    MOBIUS_X = 'mobiusX'
    MOBIUS_Y = 'mobiusY'
    KLEIN_X = 'kleinX'
    KLEIN_Y = 'kleinY'
    PROJECTIVE_PLANE = 'projectivePlane'


class NeighborhoodId(Enum):
    """Fixed neighborhood shapes."""
    MOORE = 'moore'
    VON_NEUMANN = 'vonNeumann'
    EXTENDED_MOORE = 'extendedMoore'
    HEXAGONAL = 'hexagonal'
    EXTENDED_HEXAGONAL = 'extendedHexagonal'


class VitalityMode(Enum):
    """How dying cells contribute to neighbor counts."""
    NONE = 'none'
    THRESHOLD = 'threshold'
    GHOST = 'ghost'
    SIGMOID = 'sigmoid'
    DECAY = 'decay'
    CURVE = 'curve'


class SpectrumModeId(Enum):
    """Renderer color spectrum modes (not used by the kernel)."""
    HUE_SHIFT = 'hueShift'
    RAINBOW = 'rainbow'
    WARM = 'warm'
    COOL = 'cool'
    MONOCHROME = 'monochrome'
    FIRE = 'fire'
    COMPLEMENT = 'complement'
    TRIADIC = 'triadic'
    SPLIT = 'split'
    ANALOGOUS = 'analogous'
    PASTEL = 'pastel'
    VIVID = 'vivid'
    THERMAL = 'thermal'
    BANDS = 'bands'
    NEON = 'neon'
    SUNSET = 'sunset'
    OCEAN = 'ocean'
    FOREST = 'forest'


class BrushShapeId(Enum):
    """Brush shapes of the painting UI (not used by the kernel)."""
    CIRCLE = 'circle'
    SQUARE = 'square'
    DIAMOND = 'diamond'
    HEXAGON = 'hexagon'
    RING = 'ring'
    TRIANGLE = 'triangle'
    LINE = 'line'
    CROSS = 'cross'
    STAR = 'star'
    HEART = 'heart'
    SPIRAL = 'spiral'
    FLOWER = 'flower'
    BURST = 'burst'
    WAVE = 'wave'
    DOTS = 'dots'
    SCATTER = 'scatter'
    TEXT = 'text'


def coerce_id(enum_cls: Type[E], value: Union[E, str]) -> E:
    """Resolve a member or its string id to the enum member.

    Raises:
        ValueError: If the id is unknown
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise ValueError(f"Unknown {enum_cls.__name__} id: {value!r}") from None


def id_to_index(enum_cls: Type[E], value: Union[E, str]) -> int:
    """Get the stable integer index of an id.

    Args:
        enum_cls: One of the id enums of this module
        value: Enum member or its string id

    Returns:
        Position of the id in the enum's declaration order

    Raises:
        ValueError: If the id is unknown
    """
    member = coerce_id(enum_cls, value)
    return list(enum_cls).index(member)


def index_to_id(enum_cls: Type[E], index: int) -> E:
    """Inverse of id_to_index.

    Raises:
        ValueError: If the index is out of range
    """
    members = list(enum_cls)
    if not (0 <= index < len(members)):
        raise ValueError(f"Unknown {enum_cls.__name__} index: {index}")
    return members[index]


def boundary_to_index(value: Union[BoundaryId, str]) -> int:
    return id_to_index(BoundaryId, value)


def neighborhood_to_index(value: Union[NeighborhoodId, str]) -> int:
    return id_to_index(NeighborhoodId, value)


def vitality_mode_to_index(value: Union[VitalityMode, str]) -> int:
    return id_to_index(VitalityMode, value)


def spectrum_mode_to_index(value: Union[SpectrumModeId, str]) -> int:
    return id_to_index(SpectrumModeId, value)


def brush_shape_to_index(value: Union[BrushShapeId, str]) -> int:
    return id_to_index(BrushShapeId, value)
