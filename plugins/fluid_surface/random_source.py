"""
Random source for turbulence and impulse placement.

The surface only needs uniform(low, high). Anything with that method can
be passed as `rng` (tests use fixed sequences); UniformSource is the
seedable numpy-backed default.
"""

import numpy as np


class UniformSource:
    """Uniform floats in [low, high) from a numpy Generator."""

    def __init__(self, seed=None):
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def uniform(self, low, high):
        if low == high:
            return float(low)
        return float(self._rng.uniform(low, high))

    def reseed(self, seed=None):
        """Restart the sequence (same seed replays the same values)."""
        self.seed = seed
        self._rng = np.random.default_rng(seed)
