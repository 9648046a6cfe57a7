"""
Colormaps for Fluid Surface Visualization

Maps normalized volume [0, 1] to RGB colors. Each colormap is a (256, 3)
uint8 array used as a lookup table.
"""

import numpy as np
from scipy.ndimage import zoom


def _interpolate_colors(stops, n=256):
    """
    Build a colormap by smoothstep interpolation between color stops.

    Args:
        stops: List of (position, (r, g, b)) where position is [0, 1]
        n: Number of entries in the LUT
    """
    positions = np.array([s[0] for s in stops], dtype=np.float64)
    colors = np.array([s[1] for s in stops], dtype=np.float64)
    t = np.linspace(0.0, 1.0, n)

    seg = np.clip(np.searchsorted(positions, t, side="right") - 1,
                  0, len(positions) - 2)
    span = positions[seg + 1] - positions[seg]
    frac = np.divide(t - positions[seg], span,
                     out=np.zeros_like(t), where=span > 0)
    frac = frac * frac * (3 - 2 * frac)  # smoothstep
    lut = colors[seg] + frac[:, None] * (colors[seg + 1] - colors[seg])
    return lut.astype(np.uint8)


# --- Colormap Definitions ---

def ocean():
    """Deep blue troughs to white crests."""
    return _interpolate_colors([
        (0.00, (0, 2, 15)),
        (0.25, (5, 20, 80)),
        (0.50, (10, 80, 160)),
        (0.75, (40, 180, 220)),
        (1.00, (200, 250, 255)),
    ])


def thermal():
    """Thermal camera look - low volume cold, high volume hot."""
    return _interpolate_colors([
        (0.00, (0, 0, 20)),
        (0.20, (0, 0, 120)),
        (0.40, (30, 80, 180)),
        (0.50, (60, 180, 80)),
        (0.60, (200, 200, 30)),
        (0.80, (240, 80, 0)),
        (1.00, (255, 255, 255)),
    ])


def fire():
    """Black through red to yellow-white."""
    return _interpolate_colors([
        (0.00, (0, 0, 0)),
        (0.20, (60, 5, 0)),
        (0.40, (180, 30, 0)),
        (0.60, (240, 100, 10)),
        (0.80, (255, 200, 50)),
        (1.00, (255, 255, 200)),
    ])


def moss():
    """Dark earth to bright green."""
    return _interpolate_colors([
        (0.00, (5, 5, 2)),
        (0.30, (30, 50, 15)),
        (0.60, (60, 160, 40)),
        (1.00, (180, 255, 150)),
    ])


# Registry of all colormaps
COLORMAPS = {
    "ocean": ocean,
    "thermal": thermal,
    "fire": fire,
    "moss": moss,
}


def get_colormap(name):
    """Get a colormap LUT (256, 3) uint8 array by name."""
    return COLORMAPS[name]()


def normalize_volumes(volumes, volume_min, volume_max):
    """Scale volumes from [volume_min, volume_max] into [0, 1]."""
    span = volume_max - volume_min
    if span <= 0:
        return np.zeros_like(volumes, dtype=np.float64)
    return (volumes - volume_min) / span


def apply_colormap(field, lut):
    """
    Apply a colormap LUT to a 2D float field.

    Args:
        field: 2D numpy array with values in [0, 1]
        lut: (256, 3) uint8 colormap lookup table

    Returns:
        (H, W, 3) uint8 RGB image
    """
    indices = (np.clip(field, 0, 1) * 255).astype(np.uint8)
    return lut[indices]


def render_volumes(volumes, volume_min, volume_max, lut, scale=1):
    """Colorize a (height, width) volume grid, upsampled bilinearly by scale.

    Returns:
        (height * scale, width * scale, 3) uint8 RGB image
    """
    field = normalize_volumes(np.asarray(volumes, dtype=np.float64),
                              volume_min, volume_max)
    if scale > 1:
        field = zoom(field, scale, order=1)
    return apply_colormap(field, lut)
