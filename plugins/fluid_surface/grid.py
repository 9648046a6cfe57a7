"""
Grid Indexing with Mirror-Fold Boundaries

Maps 2D logical coordinates (x, z) onto flat row-major storage
(index = x + z * width). Coordinates outside the grid fold back in by
reflection about the first and last rows/columns, so one step past an
edge lands on the second-to-last interior cell:

    index(-1, z)    == index(1, z)
    index(width, z) == index(width - 2, z)

The same fold is used for relative displacements when addressing the
distribution kernel, which makes the kernel behave as a mirrored tiling.
"""

import numpy as np


class ConfigurationError(ValueError):
    """Raised when simulation parameters cannot produce a valid surface."""


def fold(c, bound):
    """Reflect a single coordinate into [0, bound).

    Works for scalars and integer arrays. Repeated reflection keeps the
    function total over all integers; within one step of the grid it
    reduces to -c below zero and 2*bound - c - 2 at or past the bound.
    """
    period = 2 * (bound - 1)
    c = np.mod(c, period)
    return np.where(c >= bound, period - c, c)


class GridIndexer:
    """Flat-index mapping for a width x height grid."""

    __slots__ = ("width", "height", "area")

    def __init__(self, width, height):
        if width < 2 or height < 2:
            raise ConfigurationError(
                f"grid must be at least 2x2, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.area = self.width * self.height

    def fold_x(self, x):
        return fold(x, self.width)

    def fold_z(self, z):
        return fold(z, self.height)

    def index(self, x, z):
        """Flat index for (x, z) with mirror folding. Never out of range."""
        return int(self.fold_x(x) + self.fold_z(z) * self.width)

    def index_array(self, x, z):
        """Vectorized index() over broadcastable integer arrays."""
        return self.fold_x(np.asarray(x)) + self.fold_z(np.asarray(z)) * self.width

    def coords(self):
        """Return (X, Z) integer arrays of length area in flat order."""
        Z, X = np.divmod(np.arange(self.area), self.width)
        return X, Z

    def contains(self, x, z):
        return 0 <= x < self.width and 0 <= z < self.height
