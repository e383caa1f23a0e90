import numpy as np

from .boundary import set_boundary
from .params import BoundaryMode


def advect(cur, prev, vel, mode=BoundaryMode.MIRROR, I=None, J=None):
    """
    Semi-Lagrangian transport of ``prev`` along ``vel`` into ``cur``.

    Each active cell centre is traced back by one implicit time unit
    (``x = i - Nx * u``, ``y = j - Ny * v``), clamped to [0.5, N + 0.5] and
    bilinearly sampled from ``prev``. Positions on the clamp limits sample
    border cells directly. ``I`` and ``J`` are optional precomputed index
    grids of the active cells.
    """
    Nx = cur.shape[0] - 2
    Ny = cur.shape[1] - 2
    u, v = vel[0], vel[1]
    if I is None or J is None:
        I, J = np.meshgrid(np.arange(1, Nx + 1), np.arange(1, Ny + 1), indexing="ij")

    # Backtrace
    x = I - Nx * u[1:-1, 1:-1]
    y = J - Ny * v[1:-1, 1:-1]

    # Clamp to the sampling region
    x = np.clip(x, 0.5, Nx + 0.5)
    y = np.clip(y, 0.5, Ny + 0.5)

    i0 = np.floor(x).astype(np.intp)
    i1 = i0 + 1
    j0 = np.floor(y).astype(np.intp)
    j1 = j0 + 1

    s1 = x - i0
    s0 = 1.0 - s1
    t1 = y - j0
    t0 = 1.0 - t1

    # Bilinear sample from prev
    cur[1:-1, 1:-1] = (
        s0 * (t0 * prev[i0, j0] + t1 * prev[i0, j1]) +
        s1 * (t0 * prev[i1, j0] + t1 * prev[i1, j1])
    )
    return set_boundary(cur, mode)
