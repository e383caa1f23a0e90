"""Pytest configuration and fixtures for the fluid simulator tests."""

import os

import numpy as np
import pytest

# Headless backends for the pygame and matplotlib front-ends
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("MPLBACKEND", "Agg")


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def random_field(rng):
    """Random (Nx+2, Ny+2) field on a non-square 6x5 grid."""
    return rng.standard_normal((8, 7))


@pytest.fixture
def quiet_sim():
    """Factory for small simulators without the reference forcing term."""
    from fluid_simulator import Simulator

    def make(N=4, **kwargs):
        kwargs.setdefault("forcing", None)
        kwargs.setdefault("width", float(N))
        kwargs.setdefault("height", float(N))
        return Simulator(N, visc=kwargs.pop("visc", 0.1), diff=kwargs.pop("diff", 0.1),
                         time_step=kwargs.pop("time_step", 0.1), **kwargs)

    return make


@pytest.fixture
def bump():
    """Gaussian bump sampled on an (N+2, N+2) grid, indexed like the fields."""

    def make(N, cx, cy, sigma):
        i, j = np.meshgrid(np.arange(N + 2), np.arange(N + 2), indexing="ij")
        return np.exp(-((i - cx) ** 2 + (j - cy) ** 2) / (2.0 * sigma ** 2))

    return make
