import logging

import numpy as np
import pygame

from .errors import ConfigurationError
from .grid import clamp
from .params import Params
from .simulator import Simulator

logger = logging.getLogger(__name__)


def density_to_rgb(dens, auto_exposure=True):
    """Grayscale image (Nx, Ny, 3) of the active density cells."""
    field = dens[1:-1, 1:-1]
    if auto_exposure:
        mx = float(field.max())
        scale = 255.0 / (mx + 1e-6)
        scale = clamp(scale, 1.0, 255.0)
    else:
        scale = 2.0  # lower if too bright

    img = np.clip(field * scale, 0, 255).astype(np.uint8)
    return np.stack([img, img, img], axis=2)


# ---------------------------
# Pygame App
# ---------------------------

class App:
    """Window, mouse input and parameter keys around a Simulator."""

    MIN_N = 10
    MAX_N = 200

    def __init__(self, params=None, window=500):
        pygame.init()
        pygame.display.set_caption("Stable Fluids")
        self.screen = pygame.display.set_mode((window, window))
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("consolas", 16)

        params = params or Params()
        self.params = params.updated(width=float(window), height=float(window))
        self.sim = Simulator.from_params(self.params)

        # UI state
        self.running = True
        self.paused = False
        self.show_grid = False
        self.show_vels = False
        self.auto_exposure = True
        self.vec_scale = 8.0
        self.vec_skip = max(1, self.params.N // 24)

    def rebuild(self, N):
        """Resolution changes need a fresh grid."""
        N = clamp(N, self.MIN_N, self.MAX_N)
        if N == self.params.N:
            return
        try:
            params = self.sim.params.updated(N=N)
        except ConfigurationError as exc:
            logger.warning("keeping %dx%d grid: %s", self.params.N, self.params.N, exc)
            return
        self.params = params
        self.sim = Simulator.from_params(params)
        self.vec_skip = max(1, N // 24)
        logger.info("grid resolution changed to %d", N)

    def handle_input(self):
        sim = self.sim
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_v:
                    self.show_vels = not self.show_vels
                elif event.key == pygame.K_g:
                    self.show_grid = not self.show_grid
                elif event.key == pygame.K_a:
                    self.auto_exposure = not self.auto_exposure
                elif event.key == pygame.K_c:
                    sim.grid.clear()
                elif event.key == pygame.K_SPACE:
                    self.paused = not self.paused

                elif event.key == pygame.K_1:
                    sim.set_params(visc=sim.visc * 0.5)
                elif event.key == pygame.K_2:
                    sim.set_params(visc=max(1e-6, sim.visc * 1.5))
                elif event.key == pygame.K_3:
                    sim.set_params(diff=sim.diff * 0.5)
                elif event.key == pygame.K_4:
                    sim.set_params(diff=max(1e-6, sim.diff * 1.5))

                elif event.key == pygame.K_LEFTBRACKET:
                    self.rebuild(self.params.N - 10)
                elif event.key == pygame.K_RIGHTBRACKET:
                    self.rebuild(self.params.N + 10)

        # Mouse: dye source while the left button is held
        if pygame.mouse.get_pressed(3)[0]:
            self.sim.register_click(*pygame.mouse.get_pos())
        else:
            self.sim.release_click()

    # ---- Rendering ----
    def render(self, grid, show_grid=False, show_vels=False):
        w, h = self.screen.get_size()

        rgb = density_to_rgb(grid.dens, self.auto_exposure)
        surf = pygame.surfarray.make_surface(rgb)  # axis 0 is x, axis 1 is y
        surf = pygame.transform.scale(surf, (w, h))
        self.screen.blit(surf, (0, 0))

        if show_grid:
            for i in range(1, grid.Nx):
                x = i * grid.cell_w
                pygame.draw.line(self.screen, (60, 60, 60), (x, 0), (x, h), 1)
            for j in range(1, grid.Ny):
                y = j * grid.cell_h
                pygame.draw.line(self.screen, (60, 60, 60), (0, y), (w, y), 1)

        if show_vels:
            step = self.vec_skip
            u, v = grid.vel
            for ii in range(1, grid.Nx + 1, step):
                for jj in range(1, grid.Ny + 1, step):
                    cx = (ii - 0.5) * grid.cell_w
                    cy = (jj - 0.5) * grid.cell_h
                    sx = cx + float(u[ii, jj]) * self.vec_scale
                    sy = cy + float(v[ii, jj]) * self.vec_scale
                    pygame.draw.line(self.screen, (0, 255, 0), (cx, cy), (sx, sy), 1)
                    pygame.draw.circle(self.screen, (0, 255, 0), (int(sx), int(sy)), 1)

        self.draw_hud()
        pygame.display.flip()

    def draw_hud(self):
        p = self.sim.params
        lines = [
            f"N={p.N}  visc={p.visc:.3g}  diff={p.diff:.3g}  dt={p.dt:.3g}",
            "[LMB] dye  [V] vectors  [G] grid  [A] auto exposure  [C] clear  [Space] pause",
            "[1/2] visc   [3/4] diff   [ ] resolution",
            f"FPS: {self.clock.get_fps():.0f}   paused: {self.paused}",
        ]
        y = 6
        for s in lines:
            surf = self.font.render(s, True, (255, 255, 255))
            self.screen.blit(surf, (8, y))
            y += 18

    def run(self):
        while self.running:
            self.clock.tick(60)
            self.handle_input()
            if self.paused:
                self.render(self.sim.grid, self.show_grid, self.show_vels)
            else:
                self.sim.step(self, self.show_grid, self.show_vels)
        pygame.quit()
