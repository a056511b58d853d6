"""Vitality weighting configuration."""

from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple, Union

from ..core.mappings import VitalityMode, coerce_id
from .curve import CurvePoint, VITALITY_CURVE_SAMPLES, sample_vitality_curve


@dataclass(frozen=True)
class VitalitySpec:
    """How dying cells contribute to neighbor counts.

    Attributes:
        mode: Weighting scheme
        threshold: Cut-off for 'threshold', center for 'sigmoid' (0..1)
        ghost_factor: Multiplier for dying cells in 'ghost' and 'decay'
        sigmoid_sharpness: Steepness for 'sigmoid'
        decay_power: Exponent applied to vitality in 'decay'
        curve_points: Control points for 'curve'
        curve_samples: 128 samples of the curve; derived from curve_points
            when not given
    """

    mode: VitalityMode = VitalityMode.NONE
    threshold: float = 1.0
    ghost_factor: float = 0.0
    sigmoid_sharpness: float = 10.0
    decay_power: float = 1.0
    curve_points: Tuple[CurvePoint, ...] = ()
    curve_samples: Optional[Tuple[float, ...]] = field(default=None)

    def __post_init__(self):
        object.__setattr__(self, 'mode', coerce_id(VitalityMode, self.mode))
        points = tuple(CurvePoint(float(x), float(y)) for x, y in self.curve_points)
        object.__setattr__(self, 'curve_points', points)
        if self.curve_samples is None:
            samples = sample_vitality_curve(points)
        else:
            samples = [float(s) for s in self.curve_samples]
            if len(samples) != VITALITY_CURVE_SAMPLES:
                raise ValueError(f"curve_samples must hold {VITALITY_CURVE_SAMPLES} values, got {len(samples)}")
        object.__setattr__(self, 'curve_samples', tuple(samples))

    @classmethod
    def from_curve(cls, points: Sequence[Union[CurvePoint, Tuple[float, float]]],
                   ghost_factor: float = 0.0) -> 'VitalitySpec':
        """Curve-mode spec from control points."""
        return cls(mode=VitalityMode.CURVE, ghost_factor=ghost_factor,
                   curve_points=tuple(CurvePoint(*p) for p in points))


DEFAULT_VITALITY = VitalitySpec()
