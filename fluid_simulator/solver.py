"""
Relaxation kernel shared by diffusion and pressure projection.

Both operators approximately invert a five-point system of the form

    c * x[i, j] - a * (x[i-1, j] + x[i+1, j] + x[i, j-1] + x[i, j+1]) = x0[i, j]

with a fixed number of sweeps and no convergence test, so every tick costs
the same. The default scheme is Gauss-Seidel: cells are visited in
lexicographic order (i outer, j inner) and each update sees the values its
predecessors wrote in the same sweep. Cells on one anti-diagonal
(i + j = const) never neighbour each other, so a sweep is evaluated one
diagonal at a time with numpy; the result is identical to the scalar loop.
"""

import logging

import numpy as np

from .boundary import set_boundary
from .params import N_SOLVER_ITERS, RELAXATION_SCHEMES, BoundaryMode
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


def _wavefronts(Nx, Ny):
    fronts = []
    for d in range(2, Nx + Ny + 1):
        i = np.arange(max(1, d - Ny), min(Nx, d - 1) + 1)
        j = d - i
        fronts.append((i, j, i - 1, i + 1, j - 1, j + 1))
    return fronts


class LinearSolver:
    """Fixed-iteration relaxation for an (Nx+2, Ny+2) grid."""

    def __init__(self, Nx, Ny, iters=N_SOLVER_ITERS, scheme="gauss-seidel"):
        if scheme not in RELAXATION_SCHEMES:
            raise ConfigurationError(f"unknown relaxation scheme {scheme!r}")
        self.Nx = Nx
        self.Ny = Ny
        self.iters = iters
        self.scheme = scheme
        self._fronts = _wavefronts(Nx, Ny)

    # ---- Sweeps ----
    def _gauss_seidel_sweep(self, x, x0, a, c):
        for I, J, Im, Ip, Jm, Jp in self._fronts:
            x[I, J] = (x0[I, J] + a * (x[Im, J] + x[Ip, J] + x[I, Jm] + x[I, Jp])) / c

    def _jacobi_sweep(self, x, x0, a, c):
        x[1:-1, 1:-1] = (
            x0[1:-1, 1:-1] + a * (
                x[0:-2, 1:-1] + x[2:, 1:-1] +
                x[1:-1, 0:-2] + x[1:-1, 2:]
            )
        ) / c

    def relax(self, x, x0, a, c, mode=BoundaryMode.MIRROR):
        """Run ``iters`` sweeps on ``x`` in place, refilling the border after each."""
        if self.scheme == "jacobi":
            sweep = self._jacobi_sweep
        else:
            sweep = self._gauss_seidel_sweep
        for _ in range(self.iters):
            sweep(x, x0, a, c)
            set_boundary(x, mode)
        return x

    # ---- Linear diffusion solve ----
    def diffuse(self, cur, prev, k, mode, dt):
        """Implicit diffusion of ``prev`` into ``cur`` with constant ``k``."""
        a = dt * k * self.Nx * self.Ny
        return self.relax(cur, prev, a, 1 + 4 * a, mode)

    # ---- Projection to make velocity divergence-free ----
    def divergence(self, u, v, out=None):
        """Negative half central-difference divergence, scaled by cell widths."""
        if out is None:
            out = np.zeros_like(u)
        Lx = 1.0 / self.Nx
        Ly = 1.0 / self.Ny
        out[1:-1, 1:-1] = -0.5 * (
            Lx * (u[2:, 1:-1] - u[0:-2, 1:-1]) +
            Ly * (v[1:-1, 2:] - v[1:-1, 0:-2])
        )
        return set_boundary(out)

    def project(self, u, v, p, div):
        """Subtract the pressure gradient from (u, v); ``p`` and ``div`` are scratch."""
        Lx = 1.0 / self.Nx
        Ly = 1.0 / self.Ny
        self.divergence(u, v, out=div)
        p.fill(0.0)
        set_boundary(p)

        self.relax(p, div, 1, 4)

        u[1:-1, 1:-1] -= 0.5 * (p[2:, 1:-1] - p[0:-2, 1:-1]) / Lx
        v[1:-1, 1:-1] -= 0.5 * (p[1:-1, 2:] - p[1:-1, 0:-2]) / Ly
        set_boundary(u, BoundaryMode.OPPOSE_X)
        set_boundary(v, BoundaryMode.OPPOSE_Y)


def divergence_norm(div):
    """Sum of |divergence| over the active cells."""
    return float(np.abs(div[1:-1, 1:-1]).sum())
