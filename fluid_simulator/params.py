import enum
import math
import numbers
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from .errors import ConfigurationError


N_SOLVER_ITERS = 20

RELAXATION_SCHEMES = ("gauss-seidel", "jacobi")


class BoundaryMode(enum.Enum):
    """How the border ring is filled from the nearest active cells.

    MIRROR copies the neighbour on every edge. OPPOSE_X negates it on the
    left/right edges, OPPOSE_Y on the top/bottom edges.
    """
    MIRROR = 0
    OPPOSE_X = 1
    OPPOSE_Y = 2


# Each velocity component reflects only across the walls normal to its axis.
VELOCITY_BOUNDARY = (BoundaryMode.OPPOSE_X, BoundaryMode.OPPOSE_Y)


@dataclass(frozen=True)
class Forcing:
    """Constant velocity source re-applied at one cell every tick.

    An ``optional`` forcing is dropped on grids too small to hold its cell
    instead of failing validation.
    """
    cell: Tuple[int, int] = (5, 25)
    value: Tuple[float, float] = (500.0, 0.0)
    optional: bool = False

    def fits(self, N):
        i, j = self.cell
        return 0 <= i <= N + 1 and 0 <= j <= N + 1


REFERENCE_FORCING = Forcing(optional=True)


@dataclass
class Params:
    N: int = 50               # active cells per axis (N x N)
    width: float = 500.0      # domain size in pixels
    height: float = 500.0
    visc: float = 0.1         # viscosity for velocity
    diff: float = 0.1         # diffusion for density
    dt: float = 0.01          # time step
    iters: int = N_SOLVER_ITERS
    relaxation: str = "gauss-seidel"
    forcing: Optional[Forcing] = field(default_factory=lambda: REFERENCE_FORCING)
    click_amount: float = 100.0   # density source set by a click

    def validate(self):
        if not _integer(self.N) or self.N < 1:
            raise ConfigurationError(f"grid resolution must be an integer >= 1, got {self.N!r}")
        for name in ("width", "height", "dt"):
            value = getattr(self, name)
            if not _finite(value) or value <= 0:
                raise ConfigurationError(f"{name} must be > 0, got {value!r}")
        for name in ("visc", "diff"):
            value = getattr(self, name)
            if not _finite(value) or value < 0:
                raise ConfigurationError(f"{name} must be >= 0, got {value!r}")
        if not _integer(self.iters) or self.iters < 1:
            raise ConfigurationError(f"iters must be an integer >= 1, got {self.iters!r}")
        if self.relaxation not in RELAXATION_SCHEMES:
            raise ConfigurationError(
                f"relaxation must be one of {RELAXATION_SCHEMES}, got {self.relaxation!r}")
        f = self.forcing
        if f is not None and not f.optional and not f.fits(self.N):
            raise ConfigurationError(
                f"forcing cell {f.cell} lies outside a {self.N}x{self.N} grid")
        return self

    def active_forcing(self):
        """The forcing to apply on this grid, or None if there is none to apply."""
        if self.forcing is None or not self.forcing.fits(self.N):
            return None
        return self.forcing

    def updated(self, **changes):
        """Return a validated copy with ``changes`` applied."""
        return replace(self, **changes).validate()


def _integer(value):
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _finite(value):
    try:
        return math.isfinite(value)
    except TypeError:
        return False
