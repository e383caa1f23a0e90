"""Offscreen rendering of the grid with matplotlib, for headless runs."""

import logging
from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402

logger = logging.getLogger(__name__)


class FigureRenderer:
    """Draws density (plus optional grid lines and velocity arrows) into a figure."""

    def __init__(self, figsize=(6, 6), vec_skip=None):
        self.fig, self.ax = plt.subplots(figsize=figsize)
        self.vec_skip = vec_skip
        self.frames = 0

    def render(self, grid, show_grid=False, show_vels=False):
        ax = self.ax
        ax.clear()
        Nx, Ny = grid.Nx, grid.Ny
        ax.set_xlim(0, Nx)
        ax.set_ylim(Ny, 0)  # y grows downward, as on screen
        ax.set_aspect("equal")
        ax.set_xticks([])
        ax.set_yticks([])

        d = grid.dens[1:Nx+1, 1:Ny+1].T
        ax.imshow(d, origin="upper", extent=[0, Nx, Ny, 0], cmap="gray",
                  vmin=0.0, vmax=max(1e-6, float(d.max())), interpolation="bilinear")

        if show_grid:
            for i in range(1, Nx):
                ax.axvline(i, color="0.3", linewidth=0.5)
            for j in range(1, Ny):
                ax.axhline(j, color="0.3", linewidth=0.5)

        if show_vels:
            step = self.vec_skip or max(1, Nx // 24)
            ii = np.arange(1, Nx + 1, step)
            jj = np.arange(1, Ny + 1, step)
            I, J = np.meshgrid(ii, jj, indexing="ij")
            u, v = grid.vel
            U, V = u[I, J], v[I, J]
            peak = float(np.hypot(U, V).max())
            if peak > 0:
                # longest arrow spans one sampling step
                ax.quiver(I - 0.5, J - 0.5, U, V, color="lime",
                          angles="xy", scale_units="xy", scale=peak / step)

        self.frames += 1

    def save(self, path):
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.fig.savefig(path, bbox_inches="tight")
        logger.info("saved snapshot to %s", path)
        return path

    def close(self):
        plt.close(self.fig)
