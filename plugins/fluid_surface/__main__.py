"""
Fluid Surface Viewer - Entry Point

Usage:
    python -m fluid_surface [preset] [--size WxH] [--window WxH] [--seed N]
                            [--snap STEPS] [--list]

Examples:
    python -m fluid_surface
    python -m fluid_surface ripple
    python -m fluid_surface choppy --size 64x48
    python -m fluid_surface pond --snap 300 --seed 7

--snap runs headless (no pygame): N steps with occasional random splashes,
then saves a PNG to screenshots/. Use --list to see all presets.
"""

import os
import sys

import numpy as np
from PIL import Image

from .presets import PRESET_ORDER, get_preset, list_presets
from .surface import FluidSurface
from .colormaps import get_colormap, render_volumes
from .random_source import UniformSource


SNAP_RES = 512           # Output image is roughly this wide
SNAP_SPLASH_CHANCE = 0.02


def snap(preset, steps, grid_size=None, seed=None):
    """Headless mode: run N steps, save screenshot, exit."""
    screenshots_dir = os.path.join(
        os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))),
        "screenshots"
    )
    os.makedirs(screenshots_dir, exist_ok=True)

    presets_to_snap = [preset] if preset != "all" else PRESET_ORDER
    rng = UniformSource(seed)

    for pkey in presets_to_snap:
        p = get_preset(pkey)
        if not p:
            print(f"Unknown preset: {pkey}")
            continue

        overrides = {}
        if grid_size:
            overrides["width"], overrides["height"] = grid_size
        surface = FluidSurface.from_preset(pkey, rng=rng, **overrides)
        radius = max(1, min(surface.width, surface.height) // 6)

        print(f"  {pkey}: running {steps} steps...", end="", flush=True)
        for _ in range(steps):
            if rng.uniform(0.0, 1.0) < SNAP_SPLASH_CHANCE:
                surface.inject_random_splash(radius=radius)
            surface.step()

        scale = max(1, SNAP_RES // surface.width)
        lut = get_colormap(p.get("palette", "ocean"))
        rgb = render_volumes(surface.volumes, surface.volume_min,
                             surface.volume_max, lut, scale=scale)

        img = Image.fromarray(np.ascontiguousarray(rgb))
        path = os.path.join(screenshots_dir, f"fluid_{pkey}.png")
        img.save(path)
        img.save(os.path.join(screenshots_dir, "latest.png"))
        stats = surface.stats
        print(f" mean={stats['mean']:.3f} range={stats['spread']:.3f} saved: {path}")


def _parse_size(text):
    parts = text.lower().split("x")
    return int(parts[0]), int(parts[1])


def main(argv=None):
    preset = "pond"
    grid_size = None
    win_w, win_h = 800, 800
    snap_steps = 0
    seed = None

    args = sys.argv[1:] if argv is None else list(argv)
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--size" and i + 1 < len(args):
            grid_size = _parse_size(args[i + 1])
            i += 2
        elif arg == "--window" and i + 1 < len(args):
            win_w, win_h = _parse_size(args[i + 1])
            i += 2
        elif arg == "--snap" and i + 1 < len(args):
            snap_steps = int(args[i + 1])
            i += 2
        elif arg == "--seed" and i + 1 < len(args):
            seed = int(args[i + 1])
            i += 2
        elif arg == "--list":
            print("\nAvailable presets:\n")
            for key, name, desc in list_presets():
                print(f"    {key:12s} {name:14s} {desc}")
            print()
            return
        elif arg in ("--help", "-h"):
            print(__doc__)
            return
        elif arg in PRESET_ORDER or arg == "all":
            preset = arg
            i += 1
        else:
            print(f"Unknown argument: {arg}")
            print("Use --list to see available presets")
            return

    if snap_steps > 0:
        print(f"Headless snap mode: {preset}, {snap_steps} steps")
        snap(preset, snap_steps, grid_size=grid_size, seed=seed)
        return

    if preset == "all":
        print("'all' is only valid with --snap")
        return

    # pygame is only needed for the interactive window
    from .viewer import Viewer

    print("Starting Fluid Surface Viewer")
    print(f"  Preset: {preset}")
    if grid_size:
        print(f"  Grid: {grid_size[0]}x{grid_size[1]}")
    print(f"  Window: {win_w}x{win_h}")
    print()

    viewer = Viewer(
        width=win_w,
        height=win_h,
        start_preset=preset,
        grid_size=grid_size,
        seed=seed,
    )
    viewer.run()


if __name__ == "__main__":
    main()
