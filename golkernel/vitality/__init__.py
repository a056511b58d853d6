"""Vitality weighting of dying neighbors."""

from .curve import CurvePoint, VITALITY_CURVE_SAMPLES, sample_vitality_curve
from .spec import VitalitySpec, DEFAULT_VITALITY
from .contribution import neighbor_contribution, vitality_of_cell

__all__ = [
    'CurvePoint',
    'VITALITY_CURVE_SAMPLES',
    'sample_vitality_curve',
    'VitalitySpec',
    'DEFAULT_VITALITY',
    'neighbor_contribution',
    'vitality_of_cell',
]
