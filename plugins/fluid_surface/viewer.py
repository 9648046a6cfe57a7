"""
Interactive Pygame Viewer for the Fluid Surface

Top-down view of the volume field, colored by height. Acts as the
impulse trigger source: keys and mouse clicks become splash/point
impulses on the surface.

Controls:
  SPACE       Splash at a random cell
  I           Point impulse at a random cell
  P           Pause / Resume
  R           Reset with the preset's turbulence
  H           Toggle HUD overlay
  S           Save screenshot
  1-9         Switch preset
  Q / ESC     Quit
  Mouse L     Splash at cursor
"""

import os
import time
import numpy as np
import pygame

from .surface import FluidSurface, DEFAULT_SPLASH_RADIUS
from .presets import PRESET_ORDER, get_preset
from .colormaps import get_colormap, render_volumes
from .random_source import UniformSource


BG_COLOR = (18, 18, 24)
DEFAULT_PALETTE = "ocean"


class Viewer:
    """Pygame window driving one FluidSurface."""

    def __init__(self, width=800, height=800, start_preset="pond",
                 grid_size=None, seed=None, steps_per_frame=1):
        self.canvas_w = width
        self.canvas_h = height
        self.grid_size = grid_size
        self.rng = UniformSource(seed)
        self.steps_per_frame = steps_per_frame

        self.running = True
        self.paused = False
        self.show_hud = True
        self.splash_radius = DEFAULT_SPLASH_RADIUS
        self.fps_history = []
        self.hud_font = None

        self.preset_key = None
        self.surface = None
        self.lut = None
        self._apply_preset(start_preset)

    def _apply_preset(self, key):
        preset = get_preset(key)
        if preset is None:
            print(f"Unknown preset: {key}")
            return
        overrides = {}
        if self.grid_size:
            overrides["width"], overrides["height"] = self.grid_size
        self.surface = FluidSurface.from_preset(key, rng=self.rng, **overrides)
        self.preset_key = key
        self.lut = get_colormap(preset.get("palette", DEFAULT_PALETTE))
        # Splash covers roughly a third of the smaller side
        self.splash_radius = max(1, min(DEFAULT_SPLASH_RADIUS,
                                        min(self.surface.width, self.surface.height) // 3))

    def _on_reset(self):
        self.surface.reinitialize()

    def _render_frame(self):
        s = self.surface
        rgb = render_volumes(s.volumes, s.volume_min, s.volume_max, self.lut)
        # pygame surfaces are (w, h, 3)
        return pygame.surfarray.make_surface(rgb.swapaxes(0, 1).copy())

    def _draw_hud(self, screen, fps):
        if not self.show_hud:
            return

        stats = self.surface.stats
        preset = get_preset(self.preset_key)
        line = (f"{preset['name']}  |  Step: {stats['generation']:,}  |  "
                f"Mean: {stats['mean']:.3f}  |  Range: {stats['spread']:.3f}  |  "
                f"{self.surface.width}x{self.surface.height}  |  FPS: {fps:.0f}")
        if self.paused:
            line = "[PAUSED]  " + line

        bg_surface = pygame.Surface((self.canvas_w, 24), pygame.SRCALPHA)
        bg_surface.fill((0, 0, 0, 140))
        screen.blit(bg_surface, (0, 0))
        text_surface = self.hud_font.render(line, True, (210, 215, 225))
        screen.blit(text_surface, (10, 6))

    def _handle_mouse(self):
        if not pygame.mouse.get_pressed()[0]:
            return
        mx, my = pygame.mouse.get_pos()
        x = int(mx * self.surface.width / self.canvas_w)
        z = int(my * self.surface.height / self.canvas_h)
        if self.surface.indexer.contains(x, z):
            self.surface.inject_splash(x, z, radius=self.splash_radius)

    def _save_screenshot(self, screen):
        screenshots_dir = os.path.join(
            os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))),
            "screenshots"
        )
        os.makedirs(screenshots_dir, exist_ok=True)
        timestamp = time.strftime("%Y%m%d_%H%M%S")
        path = os.path.join(screenshots_dir, f"fluid_{self.preset_key}_{timestamp}.png")
        pygame.image.save(screen, path)
        print(f"Screenshot saved: {path}")

    def run(self):
        """Main viewer loop."""
        pygame.init()

        screen = pygame.display.set_mode((self.canvas_w, self.canvas_h))
        pygame.display.set_caption("Fluid Surface")
        clock = pygame.time.Clock()
        self.hud_font = pygame.font.SysFont("menlo", 13)

        while self.running:
            frame_start = time.time()

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                elif event.type == pygame.KEYDOWN:
                    self._handle_keydown(event, screen)

            self._handle_mouse()

            if not self.paused:
                for _ in range(self.steps_per_frame):
                    self.surface.step()

            screen.fill(BG_COLOR)
            frame = self._render_frame()
            scaled = pygame.transform.smoothscale(frame, (self.canvas_w, self.canvas_h))
            screen.blit(scaled, (0, 0))

            frame_time = time.time() - frame_start
            self.fps_history.append(frame_time)
            if len(self.fps_history) > 30:
                self.fps_history.pop(0)
            avg_fps = 1.0 / max(np.mean(self.fps_history), 0.001)
            self._draw_hud(screen, avg_fps)

            pygame.display.flip()
            clock.tick(60)

        pygame.quit()

    def _handle_keydown(self, event, screen):
        key = event.key

        if key in (pygame.K_q, pygame.K_ESCAPE):
            self.running = False

        elif key == pygame.K_SPACE:
            self.surface.inject_random_splash(radius=self.splash_radius)

        elif key == pygame.K_i:
            self.surface.inject_random_point()

        elif key == pygame.K_p:
            self.paused = not self.paused

        elif key == pygame.K_r:
            self._on_reset()

        elif key == pygame.K_h:
            self.show_hud = not self.show_hud

        elif key == pygame.K_s:
            self._save_screenshot(screen)

        elif pygame.K_1 <= key <= pygame.K_9:
            idx = key - pygame.K_1
            if idx < len(PRESET_ORDER):
                self._apply_preset(PRESET_ORDER[idx])
