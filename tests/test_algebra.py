"""Tests for composition, inversion, vector rotation and similarity."""

import itertools
import math

import jax.numpy as jnp
import numpy as np
import pytest

from rotjax import (
    AngleAxis,
    EulerAngleOrder,
    EulerAngles,
    EulerAnglesXyz,
    EulerAnglesZyx,
    EulerAnglesZyz,
    RotationMatrix,
    RotationQuaternion,
    RotationUsage,
    RotationVector,
    Rz,
    set_dtype,
)

ACTIVE = RotationUsage.ACTIVE
PASSIVE = RotationUsage.PASSIVE
PI = math.pi
ATOL = 1e-12
RT_TOL = 1e-9


def _sample(usage):
    """A generic rotation (no gimbal lock in any sequence)."""
    return AngleAxis(0.9, 0.3, -0.5, 0.8, usage=usage).normalized().to_rotation_quaternion()


CONVERTERS = {
    "quaternion": lambda r: r.to_rotation_quaternion(),
    "matrix": lambda r: r.to_rotation_matrix(),
    "angle_axis": lambda r: r.to_angle_axis(),
    "rotation_vector": lambda r: r.to_rotation_vector(),
    "zyx": lambda r: r.to_euler_angles_zyx(),
    "xyz": lambda r: r.to_euler_angles_xyz(),
    "zyz": lambda r: r.to_euler_angles_zyz(),
    "yxz": lambda r: r.to_euler_angles(EulerAngleOrder.YXZ),
    "xzx": lambda r: r.to_euler_angles(EulerAngleOrder.XZX),
}


# ===========================================================================
# Conversion round trips
# ===========================================================================


class TestRoundTrip:
    @pytest.mark.parametrize("usage", [ACTIVE, PASSIVE])
    @pytest.mark.parametrize("src, dst", list(itertools.product(CONVERTERS, repeat=2)))
    def test_all_pairs(self, src, dst, usage):
        ref = _sample(usage)
        a = CONVERTERS[src](ref)
        b = CONVERTERS[dst](a)
        back = CONVERTERS[src](b)
        assert a.usage == b.usage == back.usage == usage
        assert float(a.get_disparity_angle(b)) < RT_TOL
        assert float(a.get_disparity_angle(back)) < RT_TOL
        assert float(ref.get_disparity_angle(back)) < RT_TOL

    @pytest.mark.parametrize("usage", [ACTIVE, PASSIVE])
    @pytest.mark.parametrize("name", list(CONVERTERS))
    def test_rotate_agrees_across_kinds(self, name, usage):
        ref = _sample(usage)
        v = jnp.array([[1.0, 0.0, -2.0], [0.5, 1.0, 0.0], [0.0, 3.0, 1.0]])
        np.testing.assert_allclose(CONVERTERS[name](ref).rotate(v), ref.rotate(v), atol=RT_TOL)

    def test_euler_order_change_values(self):
        zyx = EulerAnglesZyx(0.1, 0.2, 0.3)
        xyz = zyx.to_euler_angles_xyz()
        assert isinstance(xyz, EulerAnglesXyz)
        np.testing.assert_allclose(
            xyz.to_rotation_matrix().to_matrix(), zyx.to_rotation_matrix().to_matrix(), atol=ATOL
        )

    def test_generic_euler_result(self):
        e = RotationQuaternion().to_euler_angles(EulerAngleOrder.YZY)
        assert type(e) is EulerAngles
        assert e.order == EulerAngleOrder.YZY

    def test_passive_quaternion_to_matrix_values(self):
        # logical values map through the same formulas in both usages
        active = RotationQuaternion(math.cos(0.2), 0.0, 0.0, math.sin(0.2))
        passive = RotationQuaternion(math.cos(0.2), 0.0, 0.0, math.sin(0.2), usage=PASSIVE)
        np.testing.assert_allclose(active.to_rotation_matrix().to_matrix(), Rz(0.4), atol=ATOL)
        np.testing.assert_allclose(passive.to_rotation_matrix().to_matrix(), Rz(0.4), atol=ATOL)
        np.testing.assert_allclose(passive.to_rotation_matrix().to_stored_implementation(), Rz(-0.4), atol=ATOL)


# ===========================================================================
# Vector rotation
# ===========================================================================


class TestRotate:
    def test_active_yaw(self):
        r = EulerAnglesZyx(PI / 2, 0.0, 0.0)
        np.testing.assert_allclose(r.rotate(jnp.array([1.0, 0.0, 0.0])), [0.0, 1.0, 0.0], atol=ATOL)

    def test_passive_yaw(self):
        r = EulerAnglesZyx(PI / 2, 0.0, 0.0, usage=PASSIVE)
        np.testing.assert_allclose(r.rotate(jnp.array([1.0, 0.0, 0.0])), [0.0, -1.0, 0.0], atol=ATOL)

    def test_inverse_rotate(self):
        r = _sample(ACTIVE)
        v = jnp.array([0.3, -0.2, 1.5])
        np.testing.assert_allclose(r.inverse_rotate(r.rotate(v)), v, atol=ATOL)
        np.testing.assert_allclose(r.inverse_rotate(v), r.inverted().rotate(v), atol=ATOL)

    def test_batch(self):
        r = RotationMatrix.rotation_z(PI / 2)
        V = jnp.array([[1.0, 0.0], [0.0, 1.0], [0.0, 0.0]])
        np.testing.assert_allclose(r.rotate(V), [[0.0, -1.0], [1.0, 0.0], [0.0, 0.0]], atol=ATOL)

    def test_preserves_norm(self):
        v = jnp.array([1.0, 2.0, 3.0])
        for name in CONVERTERS:
            r = CONVERTERS[name](_sample(PASSIVE))
            assert float(jnp.linalg.norm(r.rotate(v))) == pytest.approx(float(jnp.linalg.norm(v)), abs=ATOL)


# ===========================================================================
# Composition and inversion
# ===========================================================================


class TestCompose:
    def test_yaw_twice_is_half_turn(self):
        r = EulerAnglesZyx(PI / 2, 0.0, 0.0)
        r2 = r * r
        assert isinstance(r2, EulerAnglesZyx)
        aa = r2.to_angle_axis()
        assert float(aa.angle) == pytest.approx(PI, abs=1e-9)
        assert float(jnp.abs(aa.axis[2])) == pytest.approx(1.0, abs=1e-9)
        np.testing.assert_allclose(r2.rotate(jnp.array([1.0, 0.0, 0.0])), [-1.0, 0.0, 0.0], atol=1e-9)

    @pytest.mark.parametrize("usage", [ACTIVE, PASSIVE])
    @pytest.mark.parametrize("name", list(CONVERTERS))
    def test_compose_matches_quaternion(self, name, usage):
        a = CONVERTERS[name](_sample(usage))
        b = CONVERTERS[name](EulerAnglesZyx(-0.4, 0.3, 1.1, usage=usage).to_rotation_quaternion())
        ab = a.compose(b)
        expected = a.to_rotation_quaternion() * b.to_rotation_quaternion()
        assert type(ab) is type(a)
        assert float(ab.get_disparity_angle(expected)) < RT_TOL

    @pytest.mark.parametrize("usage", [ACTIVE, PASSIVE])
    @pytest.mark.parametrize("name", list(CONVERTERS))
    def test_times_inverse_is_identity(self, name, usage):
        r = CONVERTERS[name](_sample(usage))
        e = r * r.inverted()
        assert float(e.get_disparity_angle(RotationQuaternion(usage=usage))) < RT_TOL

    def test_active_composition_order(self):
        a = RotationMatrix.rotation_z(PI / 2)
        b = RotationMatrix.rotation_x(PI / 2)
        v = jnp.array([0.0, 1.0, 0.0])
        np.testing.assert_allclose((a * b).rotate(v), a.rotate(b.rotate(v)), atol=ATOL)

    def test_passive_composition_order(self):
        # frame rotations compose in the same stored order
        a = RotationMatrix.rotation_z(PI / 2, usage=PASSIVE)
        b = RotationMatrix.rotation_x(PI / 2, usage=PASSIVE)
        v = jnp.array([0.0, 1.0, 0.0])
        np.testing.assert_allclose((a * b).rotate(v), a.rotate(b.rotate(v)), atol=ATOL)

    def test_passive_matrix_logical_product(self):
        a = RotationMatrix.rotation_z(0.3, usage=PASSIVE)
        b = RotationMatrix.rotation_x(0.5, usage=PASSIVE)
        np.testing.assert_allclose(
            (a * b).to_matrix(), b.to_matrix() @ a.to_matrix(), atol=ATOL
        )

    def test_kind_mismatch_raises(self):
        with pytest.raises(TypeError, match="representations must match"):
            RotationQuaternion() * RotationMatrix()

    def test_order_mismatch_raises(self):
        with pytest.raises(TypeError, match="representations must match"):
            EulerAnglesZyx().compose(EulerAnglesXyz())

    def test_usage_mismatch_raises(self):
        with pytest.raises(TypeError, match="usage must match"):
            RotationVector() * RotationVector(usage=PASSIVE)

    def test_mul_non_rotation(self):
        with pytest.raises(TypeError):
            RotationQuaternion() * 2.0

    def test_inverted_values(self):
        np.testing.assert_allclose(
            AngleAxis(0.3, 0.0, 1.0, 0.0).inverted().to_vector(), [-0.3, 0.0, 1.0, 0.0]
        )
        np.testing.assert_allclose(RotationVector(0.1, 0.2, 0.3).inverted().to_vector(), [-0.1, -0.2, -0.3])
        np.testing.assert_allclose(
            RotationMatrix.rotation_y(0.4).inverted().to_matrix(), RotationMatrix.rotation_y(-0.4).to_matrix()
        )

    def test_inverted_keeps_type_and_usage(self):
        e = EulerAnglesZyz(0.1, 0.2, 0.3, usage=PASSIVE).inverted()
        assert isinstance(e, EulerAnglesZyz)
        assert e.usage == PASSIVE


# ===========================================================================
# Similarity
# ===========================================================================


class TestSimilarity:
    def test_disparity_across_kinds(self):
        a = RotationQuaternion()
        b = AngleAxis(0.5, 0.0, 0.0, 1.0)
        assert float(a.get_disparity_angle(b)) == pytest.approx(0.5, abs=ATOL)

    def test_disparity_is_symmetric(self):
        a = EulerAnglesZyx(0.1, 0.2, 0.3)
        b = RotationVector(0.4, -0.1, 0.2)
        assert float(a.get_disparity_angle(b)) == pytest.approx(float(b.get_disparity_angle(a)), abs=ATOL)

    def test_disparity_at_most_pi(self):
        a = RotationQuaternion()
        b = AngleAxis(1.5 * PI, 0.0, 0.0, 1.0)
        assert float(a.get_disparity_angle(b)) == pytest.approx(0.5 * PI, abs=ATOL)

    def test_disparity_usage_mismatch_raises(self):
        with pytest.raises(TypeError, match="usage must match"):
            RotationQuaternion().get_disparity_angle(RotationMatrix(usage=PASSIVE))

    def test_is_near(self):
        a = EulerAnglesZyx(0.1, 0.2, 0.3)
        b = EulerAnglesZyx(0.1, 0.2, 0.3 + 1e-6)
        assert not bool(a.is_near(b))
        assert bool(a.is_near(b, tol=1e-5))

    def test_is_near_euler_wrap(self):
        a = EulerAnglesZyx(PI - 0.1, 0.2, 0.3)
        b = EulerAnglesZyx(-PI - 0.1, 0.2, 0.3)
        assert bool(a.is_near(b, tol=1e-9))

    def test_is_near_default_tolerance_follows_payload_precision(self):
        a = AngleAxis(0.5, 0.0, 0.0, 1.0)
        b = a.cast(jnp.float32)
        assert bool(a.is_near(b))
        assert bool(b.is_near(a))
        assert not bool(a.is_near(AngleAxis(0.5 + 1e-9, 0.0, 0.0, 1.0)))


class TestCastPayloads:
    @pytest.mark.parametrize("pitch", [PI / 2, -PI / 2])
    def test_float32_quaternion_at_gimbal_lock(self, pitch):
        source = EulerAnglesZyx(0.7, pitch, 0.2)
        e = source.to_rotation_quaternion().cast(jnp.float32).to_euler_angles_zyx()
        assert e.dtype == jnp.float32
        assert float(e.roll) == 0.0
        # only yaw - roll (or yaw + roll) is observable at the lock
        assert float(e.yaw) == pytest.approx(0.5 if pitch > 0 else 0.9, abs=1e-4)
        assert float(source.get_disparity_angle(e)) < 1e-5

    @pytest.mark.parametrize("pitch", [PI / 2, -PI / 2])
    def test_float64_quaternion_at_gimbal_lock_under_float32_config(self, pitch):
        source = EulerAnglesZyx(0.7, pitch, 0.2)
        q = source.to_rotation_quaternion()
        set_dtype(jnp.float32)
        e = q.to_euler_angles_zyx()
        assert e.dtype == jnp.float64
        assert float(e.yaw) == pytest.approx(0.5 if pitch > 0 else 0.9, abs=1e-9)
        assert float(source.get_disparity_angle(e)) < 1e-9

    def test_float64_rotation_vector_under_float32_config(self):
        rv = RotationVector(1e-9, 0.0, 0.0)
        set_dtype(jnp.float32)
        aa = rv.to_angle_axis()
        assert float(aa.angle) == pytest.approx(1e-9, rel=1e-9)
        np.testing.assert_allclose(aa.axis, [1.0, 0.0, 0.0])


# ===========================================================================
# Tangent space
# ===========================================================================


class TestBoxOperators:
    @pytest.mark.parametrize("usage", [ACTIVE, PASSIVE])
    @pytest.mark.parametrize("name", list(CONVERTERS))
    def test_box_minus_undoes_box_plus(self, name, usage):
        r = CONVERTERS[name](_sample(usage))
        delta = jnp.array([0.01, -0.02, 0.03])
        perturbed = r.box_plus(delta)
        assert type(perturbed) is type(r)
        np.testing.assert_allclose(perturbed.box_minus(r), delta, atol=RT_TOL)

    def test_box_plus_active_is_left_multiplication(self):
        r = RotationQuaternion.from_rotation(EulerAnglesZyx(0.1, 0.2, 0.3))
        delta = jnp.array([0.0, 0.0, 0.2])
        expected = RotationVector.from_vector(delta).to_rotation_quaternion() * r
        assert float(r.box_plus(delta).get_disparity_angle(expected)) < ATOL

    def test_box_minus_of_self_is_zero(self):
        r = _sample(PASSIVE)
        np.testing.assert_allclose(r.box_minus(r), [0.0, 0.0, 0.0], atol=ATOL)

    def test_box_minus_usage_mismatch_raises(self):
        with pytest.raises(TypeError):
            _sample(ACTIVE).box_minus(_sample(PASSIVE))
