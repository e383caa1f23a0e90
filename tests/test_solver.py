"""Tests for the relaxation kernel, diffusion and projection."""

import numpy as np
import pytest

from fluid_simulator import BoundaryMode, ConfigurationError, LinearSolver, divergence_norm, set_boundary


def reference_relax(x, x0, a, c, mode, iters):
    """Plain lexicographic Gauss-Seidel loop."""
    Nx, Ny = x.shape[0] - 2, x.shape[1] - 2
    for _ in range(iters):
        for i in range(1, Nx + 1):
            for j in range(1, Ny + 1):
                x[i, j] = (x0[i, j] + a * (x[i-1, j] + x[i+1, j] + x[i, j-1] + x[i, j+1])) / c
        set_boundary(x, mode)
    return x


class TestRelaxation:
    """The wavefront sweep must reproduce the scalar loop."""

    @pytest.mark.parametrize("mode", list(BoundaryMode))
    @pytest.mark.parametrize("iters", [1, 3, 20])
    def test_matches_scalar_gauss_seidel(self, rng, mode, iters):
        x0 = rng.standard_normal((8, 7))
        start = rng.standard_normal((8, 7))
        a = 0.7

        solver = LinearSolver(6, 5, iters=iters)
        fast = solver.relax(start.copy(), x0, a, 1 + 4 * a, mode)
        slow = reference_relax(start.copy(), x0, a, 1 + 4 * a, mode, iters)

        np.testing.assert_allclose(fast, slow, rtol=1e-12, atol=1e-12)

    def test_jacobi_reaches_same_solution(self, rng):
        x0 = rng.standard_normal((6, 6))
        a = 0.16
        gs = LinearSolver(4, 4, scheme="gauss-seidel").relax(np.zeros((6, 6)), x0, a, 1 + 4 * a)
        jac = LinearSolver(4, 4, scheme="jacobi").relax(np.zeros((6, 6)), x0, a, 1 + 4 * a)
        np.testing.assert_allclose(gs[1:-1, 1:-1], jac[1:-1, 1:-1], atol=1e-6)

    def test_unknown_scheme_rejected(self):
        with pytest.raises(ConfigurationError):
            LinearSolver(4, 4, scheme="sor")


class TestDiffuse:

    def test_zero_constant_is_identity_on_active_cells(self, rng):
        prev = set_boundary(rng.standard_normal((8, 7)))
        cur = rng.standard_normal((8, 7))
        LinearSolver(6, 5).diffuse(cur, prev, 0.0, BoundaryMode.MIRROR, dt=0.1)
        np.testing.assert_array_equal(cur[1:-1, 1:-1], prev[1:-1, 1:-1])

    def test_spreads_and_conserves_with_mirror_walls(self):
        prev = np.zeros((8, 8))
        prev[3, 3] = 1.0
        cur = np.zeros((8, 8))
        LinearSolver(6, 6).diffuse(cur, prev, 0.1, BoundaryMode.MIRROR, dt=0.1)

        assert 0.0 < cur[3, 3] < 1.0
        for i, j in [(2, 3), (4, 3), (3, 2), (3, 4)]:
            assert cur[i, j] > 0.0
        assert cur[1:-1, 1:-1].sum() == pytest.approx(1.0, abs=1e-6)


class TestProject:

    def make_field(self, bump, N=16):
        u = set_boundary(bump(N, 6.0, 8.0, 2.5), BoundaryMode.OPPOSE_X)
        v = set_boundary(0.5 * bump(N, 10.0, 6.0, 3.0), BoundaryMode.OPPOSE_Y)
        return u, v

    def test_repeated_projection_does_not_grow_divergence(self, bump):
        N = 16
        solver = LinearSolver(N, N)
        u, v = self.make_field(bump, N)
        p, div = np.zeros_like(u), np.zeros_like(u)

        d0 = divergence_norm(solver.divergence(u, v))
        solver.project(u, v, p, div)
        d1 = divergence_norm(solver.divergence(u, v))
        solver.project(u, v, p, div)
        d2 = divergence_norm(solver.divergence(u, v))

        assert d1 < d0
        assert d2 <= d1 + 1e-12

    def test_net_divergence_vanishes(self, bump):
        N = 16
        solver = LinearSolver(N, N)
        u, v = self.make_field(bump, N)
        solver.project(u, v, np.zeros_like(u), np.zeros_like(u))
        div = solver.divergence(u, v)
        assert abs(div[1:-1, 1:-1].sum()) < 1e-12

    def test_velocity_borders_reflect(self, bump):
        N = 16
        solver = LinearSolver(N, N)
        u, v = self.make_field(bump, N)
        solver.project(u, v, np.zeros_like(u), np.zeros_like(u))
        np.testing.assert_array_equal(u[0, 1:-1], -u[1, 1:-1])
        np.testing.assert_array_equal(v[1:-1, 0], -v[1:-1, 1])

    def test_zero_field_stays_zero(self):
        solver = LinearSolver(5, 5)
        u, v = np.zeros((7, 7)), np.zeros((7, 7))
        solver.project(u, v, np.ones((7, 7)), np.ones((7, 7)))
        assert not u.any() and not v.any()
