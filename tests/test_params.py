import math

import numpy as np
import pytest

from fluid_simulator import REFERENCE_FORCING, ConfigurationError, Forcing, Params, Simulator


def test_defaults_match_reference_configuration():
    p = Params().validate()
    assert (p.N, p.visc, p.diff, p.dt, p.iters) == (50, 0.1, 0.1, 0.01, 20)
    assert p.forcing == REFERENCE_FORCING
    assert REFERENCE_FORCING.cell == (5, 25)
    assert REFERENCE_FORCING.value == (500.0, 0.0)


@pytest.mark.parametrize("changes", [
    {"N": 0},
    {"N": -3},
    {"N": 2.5},
    {"N": True},
    {"dt": 0.0},
    {"dt": -0.1},
    {"dt": math.inf},
    {"visc": -1e-3},
    {"diff": -1.0},
    {"diff": math.nan},
    {"width": 0.0},
    {"iters": 0},
    {"relaxation": "sor"},
    {"N": 4, "forcing": Forcing(cell=(5, 25))},
    {"forcing": Forcing(cell=(-1, 2))},
])
def test_invalid_configuration_fails_fast(changes):
    with pytest.raises(ConfigurationError):
        Params(**changes).validate()


def test_zero_smoothing_is_allowed():
    Params(visc=0.0, diff=0.0).validate()


def test_configuration_error_is_value_error():
    with pytest.raises(ValueError):
        Simulator(N=0)


def test_updated_validates_copy():
    p = Params()
    q = p.updated(visc=0.5)
    assert q.visc == 0.5 and p.visc == 0.1
    with pytest.raises(ConfigurationError):
        p.updated(dt=0)


def test_reference_forcing_is_skipped_on_small_grids():
    p = Params(N=4).validate()
    assert p.forcing == REFERENCE_FORCING
    assert p.active_forcing() is None
    assert Params(N=24).active_forcing() == REFERENCE_FORCING


def test_explicit_forcing_must_fit():
    forcing = Forcing(cell=(5, 25), value=(1.0, 0.0))
    assert Params(N=30, forcing=forcing).validate().active_forcing() == forcing
    with pytest.raises(ConfigurationError):
        Params(N=20, forcing=forcing).validate()


def test_numpy_integers_accepted():
    p = Params(N=np.int64(8), iters=np.int32(5)).validate()
    assert p.N == 8 and p.iters == 5
