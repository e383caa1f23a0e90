import logging
import numbers

import numpy as np

logger = logging.getLogger(__name__)


def clamp(x, lo, hi):
    return lo if x < lo else hi if x > hi else x


class Grid:
    """
    Discretized fields for a 2D stable-fluids simulation.

    Every field has shape (Nx+2, Ny+2) and is indexed ``field[i, j]`` with
    ``i`` along X and ``j`` along Y. Indices 1..N are active cells, 0 and
    N+1 form the border ring. The original layout carried a size-1 Z axis
    for interface uniformity only; fields here are plain 2D arrays.
    """

    def __init__(self, N, width, height):
        if isinstance(N, numbers.Integral):
            N = (N, N)
        self.Nx, self.Ny = int(N[0]), int(N[1])
        self.width = float(width)
        self.height = float(height)
        # pixels per cell
        self.cell_w = self.width / self.Nx
        self.cell_h = self.height / self.Ny

        shape = (self.Nx + 2, self.Ny + 2)
        self.shape = shape

        self.vel = [np.zeros(shape), np.zeros(shape)]
        self.prev_vel = [np.zeros(shape), np.zeros(shape)]
        self.dens = np.zeros(shape)
        self.prev_dens = np.zeros(shape)

        # scratch for projection
        self.p = np.zeros(shape)
        self.div = np.zeros(shape)

        # interactive density source, owned by the UI between ticks
        self.dens_src = np.zeros(shape)

        # Precompute index grids for advection (interior cells only)
        I, J = np.meshgrid(np.arange(1, self.Nx + 1), np.arange(1, self.Ny + 1), indexing="ij")
        self.I = I.astype(np.float64)
        self.J = J.astype(np.float64)

        logger.debug("allocated %dx%d grid (%d cells per field)", self.Nx, self.Ny, shape[0] * shape[1])

    @property
    def N(self):
        return (self.Nx, self.Ny)

    @property
    def u(self):
        return self.vel[0]

    @property
    def v(self):
        return self.vel[1]

    # ---- Buffer lifecycle ----
    def swap_velocity(self):
        self.vel, self.prev_vel = self.prev_vel, self.vel

    def swap_density(self):
        self.dens, self.prev_dens = self.prev_dens, self.dens

    def clear_prev(self):
        """Zero the per-tick source buffers, then re-apply the interactive source."""
        for arr in self.prev_vel:
            arr.fill(0.0)
        self.prev_dens[:, :] = self.dens_src

    def clear(self):
        for arr in (*self.vel, *self.prev_vel, self.dens, self.prev_dens, self.p, self.div, self.dens_src):
            arr.fill(0.0)

    # ---- Interaction ----
    def cell_from_pixel(self, x, y):
        """Map a pixel position inside the domain to an active cell (i, j)."""
        i = clamp(int(np.floor(x / self.cell_w)) + 1, 1, self.Nx)
        j = clamp(int(np.floor(y / self.cell_h)) + 1, 1, self.Ny)
        return i, j

    def register_click(self, x, y, amount):
        i, j = self.cell_from_pixel(x, y)
        self.dens_src[i, j] = amount
        return i, j

    def release_click(self):
        self.dens_src.fill(0.0)

    # ---- Diagnostics ----
    def total_density(self):
        return float(self.dens[1:-1, 1:-1].sum())

    def max_speed(self):
        u, v = self.vel
        return float(np.sqrt(u[1:-1, 1:-1] ** 2 + v[1:-1, 1:-1] ** 2).max())
