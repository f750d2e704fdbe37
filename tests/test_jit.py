"""JIT, vmap, grad and pytree tests for the rotation classes."""

import math

import jax
import jax.numpy as jnp
import numpy as np
import pytest

from rotjax import (
    AngleAxis,
    EulerAngleOrder,
    EulerAngles,
    EulerAnglesZyx,
    RotationMatrix,
    RotationQuaternion,
    RotationUsage,
    RotationVector,
)

PASSIVE = RotationUsage.PASSIVE
PI = math.pi
ATOL = 1e-12

# built lazily so that the float64 fixture is active
SAMPLES = [
    lambda: RotationQuaternion(0.5, 0.5, 0.5, 0.5),
    lambda: RotationMatrix.rotation_y(0.4, usage=PASSIVE),
    lambda: AngleAxis(0.7, 0.0, 0.6, 0.8),
    lambda: RotationVector(0.1, -0.2, 0.3, usage=PASSIVE),
    lambda: EulerAnglesZyx(0.1, 0.2, 0.3),
    lambda: EulerAngles(EulerAngleOrder.XZX, 0.4, 0.5, 0.6, usage=PASSIVE),
]


class TestPytree:
    @pytest.mark.parametrize("make", SAMPLES)
    def test_flatten_unflatten(self, make):
        r = make()
        leaves, treedef = jax.tree_util.tree_flatten(r)
        assert len(leaves) == 1
        r2 = jax.tree_util.tree_unflatten(treedef, leaves)
        assert type(r2) is type(r)
        assert r2.usage == r.usage
        assert r2.order == r.order
        np.testing.assert_array_equal(r2.to_stored_implementation(), r.to_stored_implementation())

    def test_tree_map(self):
        r = EulerAnglesZyx(0.1, 0.2, 0.3, usage=PASSIVE)
        doubled = jax.tree_util.tree_map(lambda x: 2.0 * x, r)
        assert isinstance(doubled, EulerAnglesZyx)
        np.testing.assert_allclose(doubled.to_vector(), [0.2, 0.4, 0.6])


class TestJIT:
    @pytest.mark.parametrize("make", SAMPLES)
    def test_compose_jit(self, make):
        r = make()
        @jax.jit
        def compose(a, b):
            return a * b

        out = compose(r, r.inverted())
        assert type(out) is type(r)
        assert out.usage == r.usage
        ident = RotationQuaternion(usage=r.usage)
        assert float(out.get_disparity_angle(ident)) < 1e-9

    @pytest.mark.parametrize("make", SAMPLES)
    def test_convert_jit(self, make):
        r = make()
        @jax.jit
        def convert(x):
            return x.to_rotation_matrix()

        m = convert(r)
        assert isinstance(m, RotationMatrix)
        assert float(m.get_disparity_angle(r)) < 1e-9

    def test_unique_jit(self):
        f = jax.jit(lambda e: e.get_unique())
        e = f(EulerAnglesZyx(PI, PI / 2 + 0.1, 0.0))
        np.testing.assert_allclose(e.to_vector(), [0.0, PI / 2 - 0.1, -PI], atol=ATOL)

    def test_rotate_jit(self):
        f = jax.jit(lambda r, v: r.rotate(v))
        v = f(EulerAnglesZyx(PI / 2, 0.0, 0.0), jnp.array([1.0, 0.0, 0.0]))
        np.testing.assert_allclose(v, [0.0, 1.0, 0.0], atol=ATOL)

    def test_box_plus_jit(self):
        f = jax.jit(lambda r, d: r.box_plus(d))
        r = RotationQuaternion()
        out = f(r, jnp.array([0.0, 0.0, 0.3]))
        assert float(out.get_disparity_angle(AngleAxis(0.3, 0.0, 0.0, 1.0).to_rotation_quaternion())) < ATOL

    def test_disparity_jit(self):
        f = jax.jit(lambda a, b: a.get_disparity_angle(b))
        angle = f(RotationQuaternion(), RotationVector(0.0, 0.2, 0.0))
        assert float(angle) == pytest.approx(0.2, abs=ATOL)

    def test_rebuild_from_scalars_jit(self):
        @jax.jit
        def build(yaw):
            return EulerAnglesZyx(yaw, 0.0, 0.0).to_rotation_quaternion()

        q = build(0.5)
        np.testing.assert_allclose(q.to_implementation(), [math.cos(0.25), 0.0, 0.0, math.sin(0.25)], atol=ATOL)


class TestVmapGrad:
    def test_vmap_from_vector(self):
        angles = jnp.array([[0.1, 0.0, 0.0], [0.2, 0.0, 0.0], [0.3, 0.0, 0.0]])

        def to_quaternion(a):
            return EulerAnglesZyx.from_vector(a).to_rotation_quaternion().to_implementation()

        qs = jax.vmap(to_quaternion)(angles)
        assert qs.shape == (3, 4)
        np.testing.assert_allclose(qs[:, 0], jnp.cos(angles[:, 0] / 2), atol=ATOL)
        np.testing.assert_allclose(qs[:, 3], jnp.sin(angles[:, 0] / 2), atol=ATOL)

    def test_vmap_over_rotations(self):
        batch = jax.vmap(lambda a: RotationVector.from_vector(a))(
            jnp.array([[0.0, 0.0, 0.1], [0.0, 0.0, 0.2]])
        )
        assert isinstance(batch, RotationVector)
        assert batch.to_stored_implementation().shape == (2, 3)

        rotated = jax.vmap(lambda r: r.rotate(jnp.array([1.0, 0.0, 0.0])))(batch)
        np.testing.assert_allclose(rotated[:, 1], [math.sin(0.1), math.sin(0.2)], atol=ATOL)

    def test_grad_rotate(self):
        def y_component(yaw):
            return EulerAnglesZyx(yaw, 0.0, 0.0).rotate(jnp.array([1.0, 0.0, 0.0]))[1]

        assert float(jax.grad(y_component)(0.3)) == pytest.approx(math.cos(0.3), abs=ATOL)


class TestGradAtIdentity:
    """Derivatives at the zero rotation, where the angle-axis split is singular."""

    def test_grad_box_plus_at_zero(self):
        r = RotationQuaternion()

        def y_component(delta):
            return r.box_plus(delta).rotate(jnp.array([1.0, 0.0, 0.0]))[1]

        np.testing.assert_allclose(jax.grad(y_component)(jnp.zeros(3)), [0.0, 0.0, 1.0], atol=ATOL)

    def test_jacobian_box_plus_at_zero(self):
        r = RotationQuaternion()
        v = jnp.array([1.0, 0.0, 0.0])
        J = jax.jacfwd(lambda delta: r.box_plus(delta).rotate(v))(jnp.zeros(3))
        # d(delta x v)/d(delta) for v = x
        np.testing.assert_allclose(J, [[0.0, 0.0, 0.0], [0.0, 0.0, 1.0], [0.0, -1.0, 0.0]], atol=ATOL)

    @pytest.mark.parametrize("make", SAMPLES)
    def test_jacobian_box_plus_is_finite(self, make):
        r = make()
        J = jax.jacfwd(lambda delta: r.box_plus(delta).rotate(jnp.array([0.3, -0.2, 0.9])))(jnp.zeros(3))
        assert J.shape == (3, 3)
        assert bool(jnp.all(jnp.isfinite(J)))

    def test_grad_rotation_vector_rotate_at_zero(self):
        def y_component(rv):
            return RotationVector.from_vector(rv).rotate(jnp.array([1.0, 0.0, 0.0]))[1]

        np.testing.assert_allclose(jax.grad(y_component)(jnp.zeros(3)), [0.0, 0.0, 1.0], atol=ATOL)

    def test_grad_rotation_vector_angle_at_zero(self):
        g = jax.grad(lambda rv: RotationVector.from_vector(rv).angle)(jnp.zeros(3))
        np.testing.assert_allclose(g, [0.0, 0.0, 0.0], atol=ATOL)

    def test_jacobian_box_minus_at_coincidence(self):
        r = EulerAnglesZyx(0.3, 0.2, 0.1).to_rotation_quaternion()
        J = jax.jacfwd(lambda delta: r.box_plus(delta).box_minus(r))(jnp.zeros(3))
        np.testing.assert_allclose(J, jnp.eye(3), atol=1e-9)

    def test_grad_disparity_at_coincidence(self):
        r = EulerAnglesZyx(0.3, 0.2, 0.1).to_rotation_quaternion()
        g = jax.grad(lambda delta: r.box_plus(delta).get_disparity_angle(r))(jnp.zeros(3))
        np.testing.assert_allclose(g, [0.0, 0.0, 0.0], atol=ATOL)
