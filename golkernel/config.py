"""Runtime configuration.

Values come from keyword arguments or from GOLKERNEL_* environment variables
(see .env.example).
"""

import os
from dataclasses import dataclass
from typing import Optional
import logging

logger = logging.getLogger(__name__)

BACKENDS = ('parallel', 'serial')


@dataclass
class KernelConfig:
    """Simulation session settings.

    Attributes:
        width: Grid width in cells
        height: Grid height in cells
        backend: 'parallel' (numba kernel) or 'serial' (reference)
        seed: Seed for the session random generator (None = nondeterministic)
        density: Default fill density for randomize()
        rule: Rule string, e.g. "B3/S23" or "B2/S345/C4"
        neighborhood: Neighborhood id the rule string is applied to
        boundary: Boundary topology id
    """

    width: int = 256
    height: int = 256
    backend: str = 'parallel'
    seed: Optional[int] = None
    density: float = 0.25
    rule: str = 'B3/S23'
    neighborhood: str = 'moore'
    boundary: str = 'torus'

    def __post_init__(self):
        if self.width < 1 or self.height < 1:
            raise ValueError("Grid dimensions must be positive")
        if self.backend not in BACKENDS:
            raise ValueError(f"backend must be one of {BACKENDS}, got {self.backend!r}")
        if not (0.0 <= self.density <= 1.0):
            raise ValueError("density must be between 0.0 and 1.0")

    @classmethod
    def from_env(cls) -> 'KernelConfig':
        """Create configuration from environment variables."""
        seed = os.getenv('GOLKERNEL_SEED')
        config = cls(
            width=int(os.getenv('GOLKERNEL_WIDTH', '256')),
            height=int(os.getenv('GOLKERNEL_HEIGHT', '256')),
            backend=os.getenv('GOLKERNEL_BACKEND', 'parallel'),
            seed=int(seed) if seed else None,
            density=float(os.getenv('GOLKERNEL_DENSITY', '0.25')),
            rule=os.getenv('GOLKERNEL_RULE', 'B3/S23'),
            neighborhood=os.getenv('GOLKERNEL_NEIGHBORHOOD', 'moore'),
            boundary=os.getenv('GOLKERNEL_BOUNDARY', 'torus'),
        )
        logger.debug(f"Loaded configuration from environment: {config}")
        return config
