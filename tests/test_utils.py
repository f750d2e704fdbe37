"""Tests for the angle helpers in rotjax.utils."""

import math

import jax
import jax.numpy as jnp
import pytest

from rotjax.utils import floating_point_modulo, from_radians, to_radians, wrap_angle

PI = math.pi
ATOL = 1e-12


class TestDegreeConversion:
    def test_to_radians_degrees(self):
        assert float(to_radians(180.0, True)) == pytest.approx(PI, abs=ATOL)

    def test_to_radians_passthrough(self):
        assert float(to_radians(1.25, False)) == 1.25

    def test_from_radians_degrees(self):
        assert float(from_radians(PI / 2, True)) == pytest.approx(90.0, abs=ATOL)

    def test_from_radians_passthrough(self):
        assert float(from_radians(0.5, False)) == 0.5

    def test_array_input(self):
        out = to_radians(jnp.array([0.0, 90.0, 180.0]), True)
        assert out.shape == (3,)
        assert float(out[1]) == pytest.approx(PI / 2, abs=ATOL)


class TestFloatingPointModulo:
    def test_positive_modulus(self):
        assert float(floating_point_modulo(5.0, 3.0)) == pytest.approx(2.0, abs=ATOL)

    def test_negative_dividend(self):
        assert float(floating_point_modulo(-1.0, 3.0)) == pytest.approx(2.0, abs=ATOL)

    def test_negative_modulus(self):
        assert float(floating_point_modulo(1.0, -3.0)) == pytest.approx(-2.0, abs=ATOL)

    def test_zero_modulus_returns_input(self):
        assert float(floating_point_modulo(1.5, 0.0)) == 1.5

    def test_excluded_boundary_maps_to_zero(self):
        # -1e-16 + 360 rounds to 360, which is outside [0, 360)
        assert float(floating_point_modulo(-1e-16, 360.0)) == 0.0

    def test_exact_multiple(self):
        assert float(floating_point_modulo(6.0, 3.0)) == 0.0

    def test_jit(self):
        f = jax.jit(floating_point_modulo)
        assert float(f(7.0, 2.0)) == pytest.approx(1.0, abs=ATOL)


class TestWrapAngle:
    def test_in_range_unchanged(self):
        assert float(wrap_angle(0.5)) == 0.5
        assert float(wrap_angle(-PI)) == -PI

    def test_pi_maps_to_minus_pi(self):
        assert float(wrap_angle(PI)) == pytest.approx(-PI, abs=ATOL)

    def test_above_range(self):
        assert float(wrap_angle(1.5 * PI)) == pytest.approx(-0.5 * PI, abs=ATOL)

    def test_multiple_turns(self):
        assert float(wrap_angle(0.5 + 4.0 * PI)) == pytest.approx(0.5, abs=1e-10)
        assert float(wrap_angle(0.5 - 4.0 * PI)) == pytest.approx(0.5, abs=1e-10)

    def test_idempotent(self):
        for a in (-7.0, -PI, -1.0, 0.0, 2.0, PI, 9.5):
            once = wrap_angle(a)
            assert float(wrap_angle(once)) == float(once)

    def test_range(self):
        angles = jnp.linspace(-20.0, 20.0, 401)
        wrapped = wrap_angle(angles)
        assert bool(jnp.all(wrapped >= -PI))
        assert bool(jnp.all(wrapped < PI))
