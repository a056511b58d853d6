"""Configuration consumed by one generation step."""

from dataclasses import dataclass, field
from typing import Union

from .mappings import BoundaryId, coerce_id
from ..rules.rule_spec import RuleSpec
from ..vitality.spec import VitalitySpec, DEFAULT_VITALITY


@dataclass(frozen=True)
class StepConfig:
    """Everything a step needs besides the two grids.

    Replaced wholesale when the rule or view settings change; never mutated
    while a step runs.
    """

    width: int
    height: int
    rule: RuleSpec = field(default_factory=RuleSpec.conway)
    boundary: BoundaryId = BoundaryId.TORUS
    vitality: VitalitySpec = DEFAULT_VITALITY

    def __post_init__(self):
        if self.width < 1 or self.height < 1:
            raise ValueError("Grid dimensions must be positive")
        object.__setattr__(self, 'boundary', coerce_id(BoundaryId, self.boundary))

    @classmethod
    def create(cls, width: int, height: int, rule: RuleSpec,
               boundary: Union[BoundaryId, str] = BoundaryId.TORUS,
               vitality: VitalitySpec = DEFAULT_VITALITY) -> 'StepConfig':
        return cls(width, height, rule, coerce_id(BoundaryId, boundary), vitality)
