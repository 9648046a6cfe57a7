"""Fluid surface: frame-stepped volume field with mirrored diffusion."""

from .grid import GridIndexer, ConfigurationError, fold
from .kernel import DistributionKernel
from .surface import FluidSurface, DEFAULT_SPLASH_RADIUS
from .mesh import export_vertices, triangulate, centered_origin
from .random_source import UniformSource
from .presets import PRESETS, PRESET_ORDER, get_preset, list_presets

__all__ = [
    "GridIndexer", "ConfigurationError", "fold",
    "DistributionKernel",
    "FluidSurface", "DEFAULT_SPLASH_RADIUS",
    "export_vertices", "triangulate", "centered_origin",
    "UniformSource",
    "PRESETS", "PRESET_ORDER", "get_preset", "list_presets",
]
