from .params import BoundaryMode


def set_boundary(x, mode=BoundaryMode.MIRROR):
    """
    Fill the one-cell border ring of ``x`` (shape (Nx+2, Ny+2)) in place.

    Edges copy their nearest active neighbour, or its negation on the axis
    selected by ``mode``. Corners are the average of their two adjacent edge
    cells, computed after the edges.
    """
    Nx = x.shape[0] - 2
    Ny = x.shape[1] - 2

    # Left/right edges
    if mode is BoundaryMode.OPPOSE_X:
        x[0, 1:Ny+1] = -x[1, 1:Ny+1]
        x[Nx+1, 1:Ny+1] = -x[Nx, 1:Ny+1]
    else:
        x[0, 1:Ny+1] = x[1, 1:Ny+1]
        x[Nx+1, 1:Ny+1] = x[Nx, 1:Ny+1]

    # Top/bottom edges
    if mode is BoundaryMode.OPPOSE_Y:
        x[1:Nx+1, 0] = -x[1:Nx+1, 1]
        x[1:Nx+1, Ny+1] = -x[1:Nx+1, Ny]
    else:
        x[1:Nx+1, 0] = x[1:Nx+1, 1]
        x[1:Nx+1, Ny+1] = x[1:Nx+1, Ny]

    # Corners
    x[0, 0] = 0.5 * (x[1, 0] + x[0, 1])
    x[0, Ny+1] = 0.5 * (x[1, Ny+1] + x[0, Ny])
    x[Nx+1, 0] = 0.5 * (x[Nx, 0] + x[Nx+1, 1])
    x[Nx+1, Ny+1] = 0.5 * (x[Nx, Ny+1] + x[Nx+1, Ny])
    return x
