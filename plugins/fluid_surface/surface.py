"""
Fluid Surface - volume-field simulation engine

A dense 2D field of fluid volume (rendered as height) evolved one frame
at a time:

  Pass A: velocity = (current - previous + gravity * (current/target)^e)
                     * resistance
          previous = current
  Pass B: current += velocity
          current -= sum over sources of velocity[src] * kernel[src - dst]
          current  = clamp(current, volume_min, volume_max)

Pass A completes for every cell before Pass B reads any velocity, so
every diffusion source sees this step's velocity, never a value already
updated by Pass B. Clamping happens once per cell after the full sum.

External impulses (point or splash) add volume directly to the current
field and are only clamped by the next step.
"""

import math
import numpy as np

from .grid import GridIndexer, ConfigurationError
from .kernel import DistributionKernel
from .mesh import export_vertices
from .presets import PRESETS, preset_params
from .random_source import UniformSource


DEFAULT_SPLASH_RADIUS = 20

_FLOAT_PARAMS = (
    "volume_max", "volume_min", "volume_target", "volume_turbulence",
    "resistance_coefficient", "gravity", "impact_power",
)


def validate_params(params):
    """Raise ConfigurationError if a parameter set cannot run."""
    width, height = params["width"], params["height"]
    if int(width) != width or int(height) != height:
        raise ConfigurationError(f"grid size must be integral, got {width}x{height}")
    if width < 2 or height < 2:
        raise ConfigurationError(f"grid must be at least 2x2, got {width}x{height}")
    for key in _FLOAT_PARAMS:
        if not math.isfinite(float(params[key])):
            raise ConfigurationError(f"{key} must be finite, got {params[key]!r}")
    if params["volume_min"] > params["volume_max"]:
        raise ConfigurationError(
            f"volume_min ({params['volume_min']}) exceeds "
            f"volume_max ({params['volume_max']})")
    if not 0.0 < params["resistance_coefficient"] <= 1.0:
        raise ConfigurationError(
            "resistance_coefficient must be in (0, 1], "
            f"got {params['resistance_coefficient']}")
    if params["volume_turbulence"] < 0:
        raise ConfigurationError(
            f"volume_turbulence must be >= 0, got {params['volume_turbulence']}")


class FluidSurface:
    """Volume field + distribution kernel + configuration.

    step() and the inject_*() methods are the only mutators of the field
    between resets. Arrays are flat, indexed by GridIndexer.index(x, z).
    """

    def __init__(self, width=32, height=32, volume_max=10.0, volume_min=0.1,
                 volume_target=1.0, volume_turbulence=0.0,
                 resistance_coefficient=1.0, gravity=-0.03,
                 impact_power=1.0, rng=None):
        """
        Args:
            width, height: Grid size in cells (>= 2 each)
            volume_max, volume_min: Clamp bounds applied every step
            volume_target: Rest volume; also the gravity ratio denominator
            volume_turbulence: Half-width of the initial random perturbation
            resistance_coefficient: Velocity retention per step, in (0, 1]
            gravity: Pull toward (negative) or away from the target volume
            impact_power: Default volume added by an impulse
            rng: Object with uniform(low, high); defaults to UniformSource()
        """
        params = {
            "width": width, "height": height,
            "volume_max": volume_max, "volume_min": volume_min,
            "volume_target": volume_target,
            "volume_turbulence": volume_turbulence,
            "resistance_coefficient": resistance_coefficient,
            "gravity": gravity, "impact_power": impact_power,
        }
        validate_params(params)
        self._assign(params)
        self.rng = rng if rng is not None else UniformSource()

        self.indexer = None
        self.kernel = None
        self.generation = 0
        self._allocate(int(width), int(height))
        self.reinitialize()

    @classmethod
    def from_preset(cls, key, rng=None, **overrides):
        """Build a surface from a named preset, with optional overrides."""
        if key not in PRESETS:
            raise ConfigurationError(f"unknown preset: {key}")
        params = preset_params(key)
        params.update({k: v for k, v in overrides.items() if v is not None})
        return cls(rng=rng, **params)

    def _assign(self, params):
        self.volume_max = float(params["volume_max"])
        self.volume_min = float(params["volume_min"])
        self.volume_target = float(params["volume_target"])
        self.volume_turbulence = float(params["volume_turbulence"])
        self.resistance_coefficient = float(params["resistance_coefficient"])
        self.gravity = float(params["gravity"])
        self.impact_power = float(params["impact_power"])

    def _allocate(self, width, height):
        self.indexer = GridIndexer(width, height)
        self.kernel = DistributionKernel(self.indexer)
        area = self.indexer.area
        self.current = np.zeros(area, dtype=np.float64)
        self.previous = self.current.copy()
        self.velocity = np.zeros(area, dtype=np.float64)

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    @property
    def width(self):
        return self.indexer.width

    @property
    def height(self):
        return self.indexer.height

    @property
    def area(self):
        return self.indexer.area

    @property
    def volumes(self):
        """(height, width) view of the current field."""
        return self.current.reshape(self.height, self.width)

    def index(self, x, z):
        return self.indexer.index(x, z)

    def resize(self, width, height):
        """Reallocate for new grid dimensions. No-op if unchanged.

        The new field starts flat at volume_target. Returns True if the
        grid was rebuilt.
        """
        if width == self.width and height == self.height:
            return False
        validate_params(dict(self.get_params(), width=width, height=height))
        self._allocate(int(width), int(height))
        self.reset()
        self.generation = 0
        return True

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    def reset(self, target=None):
        """Flatten the field: current and previous both set to target."""
        if target is None:
            target = self.volume_target
        self.current[:] = target
        self.previous[:] = target
        self.velocity[:] = 0.0

    def reinitialize(self):
        """Start-up state: flat at target, perturbed by turbulence, at rest."""
        self.reset()
        self.apply_turbulence()
        self.previous[:] = self.current
        self.generation = 0

    def apply_turbulence(self, target=None, turbulence=None):
        """Set current to target + uniform(-turbulence, turbulence) per cell.

        Draws once per cell in flat index order, so a replayed random
        sequence gives the same field.
        """
        if target is None:
            target = self.volume_target
        if turbulence is None:
            turbulence = self.volume_turbulence
        uniform = self.rng.uniform
        noise = np.fromiter(
            (uniform(-turbulence, turbulence) for _ in range(self.area)),
            dtype=np.float64, count=self.area)
        self.current[:] = target + noise

    # ------------------------------------------------------------------
    # Impulses
    # ------------------------------------------------------------------

    def inject_at(self, x, z, power=None):
        """Add power to the cell at (x, z). Out-of-grid coordinates fold."""
        if power is None:
            power = self.impact_power
        i = self.index(x, z)
        self.current[i] += power
        return i

    def inject_splash(self, center_x, center_z, power=None,
                      radius=DEFAULT_SPLASH_RADIUS):
        """Add power to every in-grid cell of the [-radius, radius) window.

        Cells outside the grid are skipped, not folded. Returns the
        number of cells modified.
        """
        if power is None:
            power = self.impact_power
        x0 = max(center_x - radius, 0)
        x1 = min(center_x + radius, self.width)
        z0 = max(center_z - radius, 0)
        z1 = min(center_z + radius, self.height)
        if x1 <= x0 or z1 <= z0:
            return 0
        self.volumes[z0:z1, x0:x1] += power
        return (x1 - x0) * (z1 - z0)

    def _random_cell(self):
        x = int(self.rng.uniform(0, self.width))
        z = int(self.rng.uniform(0, self.height))
        return min(x, self.width - 1), min(z, self.height - 1)

    def inject_random_point(self, power=None):
        """Point impulse at a random cell. Returns its (x, z)."""
        x, z = self._random_cell()
        self.inject_at(x, z, power)
        return x, z

    def inject_random_splash(self, power=None, radius=DEFAULT_SPLASH_RADIUS):
        """Splash impulse centered on a random cell. Returns its (x, z)."""
        x, z = self._random_cell()
        self.inject_splash(x, z, power, radius)
        return x, z

    # ------------------------------------------------------------------
    # Integration
    # ------------------------------------------------------------------

    def step(self):
        """Advance one time step. Returns the (height, width) volume view."""
        cur = self.current
        vel = self.velocity
        vmin, vmax = self.volume_min, self.volume_max

        # Pass A: velocity from the volume change plus the gravity term
        with np.errstate(invalid="ignore", over="ignore", divide="ignore"):
            np.divide(cur, self.volume_target, out=vel)
            np.power(vel, math.e, out=vel)
            vel *= self.gravity
            vel += cur
            vel -= self.previous
            vel *= self.resistance_coefficient
        self.previous[:] = cur

        # Zero non-finite velocities before they reach the all-pairs sum
        bad = ~np.isfinite(vel)
        pinned = None
        if bad.any():
            pinned = np.where(vel[bad] == np.inf, vmax, vmin)
            vel[bad] = 0.0

        # Pass B: self update then all-pairs diffusion, clamp once
        cur += vel
        cur -= self.kernel.spread(vel)
        if pinned is not None:
            cur[bad] = pinned
        np.nan_to_num(cur, copy=False, nan=vmin, posinf=vmax, neginf=vmin)
        np.clip(cur, vmin, vmax, out=cur)

        self.generation += 1
        return self.volumes

    def step_n(self, n):
        """Advance n steps. Returns final volume view."""
        for _ in range(n):
            self.step()
        return self.volumes

    # ------------------------------------------------------------------
    # Export / parameters
    # ------------------------------------------------------------------

    def export(self, out=None):
        """(area, 3) array of (x, volume, z) in flat row-major order."""
        return export_vertices(self, out=out)

    def set_params(self, width=None, height=None, rng=None, **params):
        """Update parameters. Resizes if width/height change."""
        merged = self.get_params()
        if width is not None:
            merged["width"] = width
        if height is not None:
            merged["height"] = height
        for key, value in params.items():
            if key not in merged:
                raise ConfigurationError(f"unknown parameter: {key}")
            if value is not None:
                merged[key] = value
        validate_params(merged)

        self._assign(merged)
        if rng is not None:
            self.rng = rng
        self.resize(merged["width"], merged["height"])

    def get_params(self):
        return {
            "width": self.width,
            "height": self.height,
            "volume_max": self.volume_max,
            "volume_min": self.volume_min,
            "volume_target": self.volume_target,
            "volume_turbulence": self.volume_turbulence,
            "resistance_coefficient": self.resistance_coefficient,
            "gravity": self.gravity,
            "impact_power": self.impact_power,
        }

    @property
    def stats(self):
        """Return current field statistics."""
        return {
            "generation": self.generation,
            "mass": float(self.current.sum()),
            "mean": float(self.current.mean()),
            "min": float(self.current.min()),
            "max": float(self.current.max()),
            "spread": float(self.current.max() - self.current.min()),
        }
