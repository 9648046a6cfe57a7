"""
Distribution Kernel - relative-displacement weights for volume diffusion

Built once per grid size from a radial falloff around the grid's
geometric center:

    ratio  = |(x, z) - center| / |center - origin|
    weight = 1 + ratio / -1

then divided by (sum of weights * e). The kernel is addressed by the
mirror-folded displacement between a target and a source cell, so it
acts as a mirrored tiling rather than a linear convolution kernel.

The diffusion pass is all-pairs: every target accumulates every source's
velocity times kernel[index(xV - x, zV - z)]. Because the fold works per
axis, the lookup factors into two small displacement tables.
"""

import math

import numpy as np

from .grid import ConfigurationError

# Grids up to this many cells cache a dense (area, area) transfer matrix.
DENSE_AREA_LIMIT = 2500


class DistributionKernel:
    """Normalized weight field plus the cached all-pairs lookup."""

    def __init__(self, indexer, dense_limit=None):
        """
        Args:
            indexer: GridIndexer for the grid this kernel serves
            dense_limit: Max area for the dense transfer matrix
                (defaults to DENSE_AREA_LIMIT)
        """
        self.indexer = indexer
        self.dense_limit = DENSE_AREA_LIMIT if dense_limit is None else dense_limit
        self.raw_total = 0.0
        self.weights = self._build_weights()

        w, h = indexer.width, indexer.height
        offsets_x = np.arange(w)
        offsets_z = np.arange(h)
        # _dx[x, xV] = fold(xV - x), _dz[z, zV] = fold(zV - z)
        self._dx = indexer.fold_x(offsets_x[None, :] - offsets_x[:, None])
        self._dz = indexer.fold_z(offsets_z[None, :] - offsets_z[:, None])
        self._grid = self.weights.reshape(h, w)

        self._transfer = None
        if indexer.area <= self.dense_limit:
            self._transfer = self._build_transfer()

    def _build_weights(self):
        w, h = self.indexer.width, self.indexer.height
        cx, cz = w / 2.0, h / 2.0
        center_distance = math.hypot(cx, cz)

        X, Z = self.indexer.coords()
        ratio = np.hypot(X - cx, Z - cz) / center_distance
        weights = 1.0 + (ratio / -1.0)

        total = float(weights.sum())
        norm = total * math.e
        if norm == 0.0 or not math.isfinite(norm):
            raise ConfigurationError(
                f"distribution kernel for {w}x{h} grid has degenerate sum {total}")
        self.raw_total = total
        return weights / norm

    def _build_transfer(self):
        """Dense matrix T with T[target, source] = kernel[index(source - target)]."""
        dz = self._dz[:, None, :, None]
        dx = self._dx[None, :, None, :]
        area = self.indexer.area
        return self._grid[dz, dx].reshape(area, area)

    def at(self, dx, dz):
        """Weight for a relative displacement (mirror-folded)."""
        return float(self.weights[self.indexer.index(dx, dz)])

    def spread(self, velocity):
        """Per-target diffusion sum of source velocities.

        Args:
            velocity: Flat (area,) array, read-only during the pass

        Returns:
            Flat (area,) array; entry i is sum over sources iV of
            velocity[iV] * kernel[index(xV - x, zV - z)]
        """
        if self._transfer is not None:
            return self._transfer @ velocity

        h, w = self.indexer.height, self.indexer.width
        field = velocity.reshape(h, w)
        out = np.empty((h, w), dtype=np.float64)
        for z in range(h):
            # rows[zV, x, xV] = kernel at displacement (xV - x, zV - z)
            rows = self._grid[self._dz[z]][:, self._dx]
            out[z] = np.einsum("vxu,vu->x", rows, field)
        return out.reshape(-1)

    @property
    def total(self):
        return float(self.weights.sum())
