"""2D stable-fluids simulation (Stam's method) on a fixed grid."""

from .advect import advect
from .boundary import set_boundary
from .errors import ConfigurationError
from .grid import Grid
from .params import (
    N_SOLVER_ITERS,
    REFERENCE_FORCING,
    BoundaryMode,
    Forcing,
    Params,
)
from .simulator import Simulator
from .solver import LinearSolver, divergence_norm

__all__ = [
    "advect",
    "set_boundary",
    "ConfigurationError",
    "Grid",
    "N_SOLVER_ITERS",
    "REFERENCE_FORCING",
    "BoundaryMode",
    "Forcing",
    "Params",
    "Simulator",
    "LinearSolver",
    "divergence_norm",
]
