"""
Mesh boundary: vertex export and grid triangulation.

Vertices are one per grid cell, row-major (z, x), matching the flat
layout of the volume field. Connectivity depends only on the grid size
and has to be rebuilt whenever the surface is resized.
"""

import numpy as np


def triangulate(width, height):
    """Two triangles per quad of a width x height vertex grid.

    Returns:
        (2 * (width - 1) * (height - 1), 3) int32 array of vertex indices
    """
    Z, X = np.mgrid[:height - 1, :width - 1]
    v = (X + Z * width).reshape(-1).astype(np.int32)
    tris = np.empty((v.size, 2, 3), dtype=np.int32)
    tris[:, 0, 0] = v
    tris[:, 0, 1] = v + width
    tris[:, 0, 2] = v + 1
    tris[:, 1, 0] = v + 1
    tris[:, 1, 1] = v + width
    tris[:, 1, 2] = v + width + 1
    return tris.reshape(-1, 3)


def centered_origin(width, height, cell_size=(1.0, 1.0)):
    """Origin offset that centers the grid around (0, 0)."""
    return (-(width - 1) * cell_size[0] / 2.0,
            -(height - 1) * cell_size[1] / 2.0)


def export_vertices(surface, cell_size=(1.0, 1.0), origin=(0.0, 0.0), out=None):
    """Write (x, volume, z) per cell into out (or a new array).

    Args:
        surface: FluidSurface to read
        cell_size: World units per cell along (x, z)
        origin: World position of cell (0, 0)
        out: Optional caller-owned (area, 3) float array to fill

    Returns:
        The (area, 3) vertex array
    """
    if out is None:
        out = np.empty((surface.area, 3), dtype=np.float64)
    elif out.shape != (surface.area, 3):
        raise ValueError(
            f"vertex buffer shape {out.shape} does not match grid "
            f"({surface.area}, 3)")
    X, Z = surface.indexer.coords()
    out[:, 0] = X * cell_size[0] + origin[0]
    out[:, 1] = surface.current
    out[:, 2] = Z * cell_size[1] + origin[1]
    return out
