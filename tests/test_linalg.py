"""Tests for the per-element linear-algebra primitives."""

import numpy as np

from solvers.dg.linalg import lin_eq, minus, plus_times


class TestMinus:
    def test_subtracts_in_place(self):
        a = np.array([1.0, 2.0, 3.0])
        b = np.array([0.5, 2.0, -1.0])
        minus(a, b)
        assert np.array_equal(a, [0.5, 0.0, 4.0])
        assert np.array_equal(b, [0.5, 2.0, -1.0])


class TestPlusTimes:
    def test_scaled_accumulation(self):
        a = np.array([1.0, 1.0, 1.0])
        b = np.array([2.0, 4.0, -6.0])
        plus_times(a, b, 0.5)
        assert np.array_equal(a, [2.0, 3.0, -2.0])

    def test_zero_scale_is_noop(self):
        a = np.array([1.0, -2.0])
        plus_times(a, np.array([7.0, 9.0]), 0.0)
        assert np.array_equal(a, [1.0, -2.0])


class TestLinEq:
    def test_matches_dense_solve(self):
        rng = np.random.default_rng(0)
        A = rng.standard_normal((5, 5))
        mass = A @ A.T + 5 * np.eye(5)
        rhs = rng.standard_normal(5)
        out = rng.standard_normal(5)
        expected = 0.1 * np.linalg.solve(mass, rhs) + 1.0 * out

        lin_eq(mass, rhs, out, 0.1, 1.0)

        assert np.allclose(out, expected, rtol=1e-12, atol=1e-14)

    def test_beta_zero_overwrites(self):
        mass = np.array([[2.0, 0.0], [0.0, 4.0]])
        rhs = np.array([2.0, 2.0])
        out = np.array([100.0, -100.0])

        lin_eq(mass, rhs, out, 1.0, 0.0)

        assert np.allclose(out, [1.0, 0.5])

    def test_rhs_not_modified(self):
        mass = np.eye(3) * 2.0
        rhs = np.array([1.0, 2.0, 3.0])
        out = np.zeros(3)
        lin_eq(mass, rhs, out, 1.0, 0.0)
        assert np.array_equal(rhs, [1.0, 2.0, 3.0])
