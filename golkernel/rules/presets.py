"""Showcase rule presets.

Each preset pairs a RuleSpec with the vitality settings it was tuned for and
the way its grid is usually seeded.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from ..core.mappings import NeighborhoodId
from ..vitality.curve import CurvePoint
from ..vitality.spec import VitalitySpec, DEFAULT_VITALITY
from .rule_spec import RuleSpec

DEFAULT_RULE_NAME = "Conway's Life"


@dataclass(frozen=True)
class RulePreset:
    """A named rule with its vitality settings and seeding hints."""
    rule: RuleSpec
    vitality: VitalitySpec = DEFAULT_VITALITY
    init_type: str = 'random'  # random | centeredDisk
    density: float = 0.25
    seed_rate: float = 0.0
    disk_radius: Optional[int] = None
    stim_period: int = 0  # frames between stimulation pulses, 0 = never

    @property
    def name(self) -> str:
        return self.rule.name or ''


def _curve(*points) -> VitalitySpec:
    return VitalitySpec.from_curve([CurvePoint(x, y) for x, y in points])


GALLERY_PRESETS: List[RulePreset] = [
    # Classics
    RulePreset(RuleSpec(0b1000, 0b1100, 2, NeighborhoodId.MOORE, name="Conway's Life"),
               density=0.25, seed_rate=0.001),
    RulePreset(RuleSpec(0b100, 0b111000, 4, NeighborhoodId.MOORE, name='Star Wars'),
               density=0.35, seed_rate=0.002),
    RulePreset(RuleSpec(0b100, 0, 3, NeighborhoodId.MOORE, name="Brian's Brain"),
               density=0.15, seed_rate=0.003),

    # Extended and hexagonal rules tuned with vitality curves
    RulePreset(RuleSpec(2148, 2592, 48, NeighborhoodId.EXTENDED_HEXAGONAL, name='Hex2 Neo Diagonal Growth'),
               vitality=_curve((0, 0), (0.372, -0.746), (0.531, 0.321), (0.695, -0.669), (1, -1)),
               init_type='centeredDisk', density=0.5, disk_radius=9, stim_period=80),
    RulePreset(RuleSpec(4, 56, 88, NeighborhoodId.HEXAGONAL, name='Hex Neo Mandala 1'),
               vitality=_curve((0, 0), (0.148, 1.01), (1, 0.19)),
               init_type='centeredDisk', density=1.0, disk_radius=9, stim_period=100),
    RulePreset(RuleSpec(0b100, 0b1100, 32, NeighborhoodId.HEXAGONAL, name='Hex Neo Slime Mold'),
               density=0.2, seed_rate=0.001),
    RulePreset(RuleSpec(0b1111111111111111100100000, 0b1111111110000001111100000, 64,
                        NeighborhoodId.EXTENDED_MOORE, name='Ext24 Neo Waves'),
               density=0.2, seed_rate=0.0009),
    RulePreset(RuleSpec(992, 8128, 256, NeighborhoodId.EXTENDED_MOORE, name='Ext24 Neo Coral'),
               vitality=_curve((0, 0),
                               (0.04336907932808316, -1.902238176074881),
                               (0.19299944518769985, 0.6060420562784863),
                               (0.4857545088260803, -0.15734757965514712),
                               (0.7199585597367847, -0.15734757965514712),
                               (0.8175435809495781, 0.8786812119690697),
                               (1, -0.920737215588781)),
               init_type='centeredDisk', density=1.0, disk_radius=8, stim_period=120),
    RulePreset(RuleSpec(0b1101000, 0b111100000, 128, NeighborhoodId.EXTENDED_HEXAGONAL, name='Hex2 Neo Brain 2'),
               init_type='centeredDisk', density=1.0, disk_radius=10, stim_period=100),
]

_BY_NAME: Dict[str, RulePreset] = {p.name: p for p in GALLERY_PRESETS}


def get_preset(name: str) -> Optional[RulePreset]:
    """Preset by exact name, or None."""
    return _BY_NAME.get(name)


def preset_names() -> List[str]:
    return [p.name for p in GALLERY_PRESETS]


def get_default_rule() -> RuleSpec:
    """Rule used when nothing else is configured or a rule string is invalid."""
    return _BY_NAME[DEFAULT_RULE_NAME].rule
