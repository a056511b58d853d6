"""
golkernel: cellular-automaton transition kernel

Birth/survival and Generations rules over five neighborhoods, nine boundary
topologies (including Mobius, Klein and projective-plane wrapping) and six
vitality weighting modes. Every step can run on a parallel numba kernel or on
the serial reference; both produce byte-identical generations.
"""

from .core.mappings import BoundaryId, NeighborhoodId, VitalityMode
from .rules.rule_spec import RuleSpec
from .rules.rule_strings import parse_rule_string, format_rule_string
from .vitality.spec import VitalitySpec, DEFAULT_VITALITY
from .simulation import Simulation, create_simulation

__version__ = "0.1.0"

__all__ = [
    'BoundaryId',
    'NeighborhoodId',
    'VitalityMode',
    'RuleSpec',
    'parse_rule_string',
    'format_rule_string',
    'VitalitySpec',
    'DEFAULT_VITALITY',
    'Simulation',
    'create_simulation',
]
