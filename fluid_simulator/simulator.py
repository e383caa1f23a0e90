"""
The Simulator owns a Grid and runs the stable-fluids pipeline on it.

One call to ``step()`` is one tick:

    velocity: add sources -> diffuse -> project -> advect -> project
    density:  add sources -> diffuse -> advect

A tick always runs to completion in bounded time. Parameters and the
interactive source may only be changed between ticks, from the thread that
calls ``step()``.
"""

import logging

import numpy as np

from .advect import advect
from .grid import Grid
from .params import (
    N_SOLVER_ITERS,
    REFERENCE_FORCING,
    VELOCITY_BOUNDARY,
    BoundaryMode,
    Params,
)
from .solver import LinearSolver, divergence_norm

logger = logging.getLogger(__name__)


class Simulator:
    """
    Parameters
    ----------
    N : int
        Active cells per axis (N by N grid).
    width, height : float
        Size of the grid region in pixels, used to map clicks to cells.
    visc, diff : float
        Viscosity and density diffusion constants (0 disables smoothing).
    time_step : float
        Time step per tick.
    forcing : Forcing or None
        Velocity source re-applied every tick. The default reference forcing
        is skipped on grids too small to hold its cell.
    """

    def __init__(self, N=50, width=500.0, height=500.0, visc=0.1, diff=0.1, time_step=0.01, *,
                 forcing=REFERENCE_FORCING, iters=N_SOLVER_ITERS, relaxation="gauss-seidel",
                 click_amount=100.0):
        params = Params(N=N, width=width, height=height, visc=visc, diff=diff, dt=time_step,
                        iters=iters, relaxation=relaxation, forcing=forcing,
                        click_amount=click_amount)
        self._setup(params.validate())

    @classmethod
    def from_params(cls, params: Params):
        sim = cls.__new__(cls)
        sim._setup(params.validate())
        return sim

    def _setup(self, params):
        self.params = params
        self.grid = Grid(params.N, params.width, params.height)
        self.solver = LinearSolver(self.grid.Nx, self.grid.Ny, params.iters, params.relaxation)
        self.v_src = [np.zeros(self.grid.shape), np.zeros(self.grid.shape)]
        forcing = params.active_forcing()
        if forcing is None and params.forcing is not None:
            logger.info("forcing cell %s lies outside a %dx%d grid, forcing skipped",
                        params.forcing.cell, params.N, params.N)
        self._apply_forcing(forcing)
        self.ticks = 0
        logger.info(
            "simulator ready: N=%d visc=%g diff=%g dt=%g iters=%d relaxation=%s forcing=%s",
            params.N, params.visc, params.diff, params.dt, params.iters, params.relaxation,
            forcing)

    # ---- Parameters ----
    @property
    def visc(self):
        return self.params.visc

    @property
    def diff(self):
        return self.params.diff

    @property
    def time_step(self):
        return self.params.dt

    def set_params(self, visc=None, diff=None, time_step=None, forcing=None):
        """Update parameters between ticks. ``forcing=False`` removes the forcing term."""
        changes = {}
        if visc is not None:
            changes["visc"] = visc
        if diff is not None:
            changes["diff"] = diff
        if time_step is not None:
            changes["dt"] = time_step
        if forcing is not None:
            changes["forcing"] = forcing or None
        self.params = self.params.updated(**changes)
        if "forcing" in changes:
            self._apply_forcing(self.params.active_forcing())

    def _apply_forcing(self, forcing):
        for src in self.v_src:
            src.fill(0.0)
        if forcing is None:
            return
        i, j = forcing.cell
        for dim, value in enumerate(forcing.value):
            self.v_src[dim][i, j] = value

    # ---- Operators ----
    def add_source(self, dest, source):
        """dest += dt * source over every cell, border included."""
        dest += self.params.dt * source
        return dest

    def diffuse(self, cur, prev, k, mode=BoundaryMode.MIRROR):
        return self.solver.diffuse(cur, prev, k, mode, self.params.dt)

    def advect(self, cur, prev, vel, mode=BoundaryMode.MIRROR):
        return advect(cur, prev, vel, mode, self.grid.I, self.grid.J)

    def project(self, vel):
        g = self.grid
        self.solver.project(vel[0], vel[1], g.p, g.div)

    # ---- Steps ----
    def v_step(self):
        """One velocity update."""
        g = self.grid
        for dim in range(2):
            self.add_source(g.vel[dim], g.prev_vel[dim])
            self.add_source(g.vel[dim], self.v_src[dim])
        g.swap_velocity()

        for dim in range(2):
            self.diffuse(g.vel[dim], g.prev_vel[dim], self.params.visc, VELOCITY_BOUNDARY[dim])
        self.project(g.vel)
        g.swap_velocity()

        # trace through the projected field, which now sits in prev_vel
        for dim in range(2):
            self.advect(g.vel[dim], g.prev_vel[dim], g.prev_vel, VELOCITY_BOUNDARY[dim])
        self.project(g.vel)

    def d_step(self):
        """One density update."""
        g = self.grid
        self.add_source(g.dens, g.prev_dens)
        g.swap_density()
        self.diffuse(g.dens, g.prev_dens, self.params.diff, BoundaryMode.MIRROR)
        g.swap_density()
        self.advect(g.dens, g.prev_dens, g.vel, BoundaryMode.MIRROR)

    def step(self, renderer=None, show_grid=False, show_vels=False):
        """Take one step in the simulation and hand the grid to ``renderer``."""
        self.grid.clear_prev()
        self.v_step()
        self.d_step()
        self.ticks += 1
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("tick %d: density=%.6g max_speed=%.6g divergence=%.3e",
                         self.ticks, self.grid.total_density(), self.grid.max_speed(),
                         self.divergence())
        if renderer is not None:
            renderer.render(self.grid, show_grid, show_vels)

    # ---- Interaction ----
    def register_click(self, x, y):
        return self.grid.register_click(x, y, self.params.click_amount)

    def release_click(self):
        self.grid.release_click()

    def divergence(self):
        """Sum of |divergence| of the current velocity over the active cells."""
        u, v = self.grid.vel
        return divergence_norm(self.solver.divergence(u, v))
