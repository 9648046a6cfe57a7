"""
Fluid Surface Parameter Presets

Each preset is a complete FluidSurface configuration known to produce
a stable, interesting surface. Keys match the FluidSurface keyword
arguments; "name", "description" and "palette" are display metadata.
"""

PRESETS = {
    # =====================================================================
    # REFERENCE
    # =====================================================================
    "reference": {
        "name": "Reference",
        "description": "4x4 flat pool, no gravity, full momentum",
        "width": 4, "height": 4,
        "volume_max": 20.0, "volume_min": 10.0, "volume_target": 15.0,
        "volume_turbulence": 0.0, "resistance_coefficient": 1.0,
        "gravity": 0.0, "impact_power": 5.0,
    },

    # =====================================================================
    # POOLS
    # =====================================================================
    "pond": {
        "name": "Still Pond",
        "description": "Calm water that settles quickly after a splash",
        "width": 32, "height": 32,
        "volume_max": 10.0, "volume_min": 0.1, "volume_target": 1.0,
        "volume_turbulence": 0.05, "resistance_coefficient": 0.6,
        "gravity": -0.03, "impact_power": 0.5,
        "palette": "ocean",
    },
    "ripple": {
        "name": "Ripple Tank",
        "description": "Low damping, impulses ring across the surface",
        "width": 40, "height": 40,
        "volume_max": 4.0, "volume_min": 0.2, "volume_target": 1.0,
        "volume_turbulence": 0.0, "resistance_coefficient": 0.95,
        "gravity": -0.01, "impact_power": 0.8,
        "palette": "ocean",
    },
    "choppy": {
        "name": "Choppy Sea",
        "description": "Heavy initial turbulence with strong gravity pull",
        "width": 48, "height": 32,
        "volume_max": 6.0, "volume_min": 0.1, "volume_target": 2.0,
        "volume_turbulence": 0.6, "resistance_coefficient": 0.8,
        "gravity": -0.08, "impact_power": 1.5,
        "palette": "thermal",
    },
    "syrup": {
        "name": "Syrup",
        "description": "Thick fluid, impulses barely spread",
        "width": 32, "height": 32,
        "volume_max": 8.0, "volume_min": 0.5, "volume_target": 2.0,
        "volume_turbulence": 0.1, "resistance_coefficient": 0.2,
        "gravity": -0.02, "impact_power": 2.0,
        "palette": "moss",
    },
    "lava": {
        "name": "Lava Pool",
        "description": "Hot viscous pool with big slow impacts",
        "width": 24, "height": 24,
        "volume_max": 12.0, "volume_min": 1.0, "volume_target": 4.0,
        "volume_turbulence": 0.4, "resistance_coefficient": 0.4,
        "gravity": -0.05, "impact_power": 3.0,
        "palette": "fire",
    },
}


# Display order; number keys 1-9 in the viewer map here
PRESET_ORDER = ["pond", "ripple", "choppy", "syrup", "lava", "reference"]

# Keys of a preset that are FluidSurface parameters
PARAM_KEYS = (
    "width", "height", "volume_max", "volume_min", "volume_target",
    "volume_turbulence", "resistance_coefficient", "gravity", "impact_power",
)


def get_preset(name):
    """Get a preset by name. Returns None if not found."""
    return PRESETS.get(name)


def preset_params(name):
    """Return only the FluidSurface parameters of a preset."""
    preset = PRESETS[name]
    return {k: preset[k] for k in PARAM_KEYS if k in preset}


def list_presets():
    """Return list of (key, name, description) in display order."""
    return [(k, PRESETS[k]["name"], PRESETS[k]["description"])
            for k in PRESET_ORDER if k in PRESETS]
