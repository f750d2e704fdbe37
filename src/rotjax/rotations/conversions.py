"""Pure conversion kernels between rotation payloads.

All functions operate on raw JAX arrays (no class instances) so that the
dispatch tables in :mod:`rotjax.rotations.dispatch` and the classes built on
top of them can share them without circular imports.

Convention:
    Quaternion layout is scalar-first Hamilton: ``[w, x, y, z]`` (shape ``(4,)``).
    Rotation matrices are active: ``v_rotated = R @ v`` (shape ``(3, 3)``).
    Angle-axis layout is ``[angle, ax, ay, az]`` (shape ``(4,)``).
    Rotation vectors are ``angle * axis`` (shape ``(3,)``).
    Euler angles are ``[phi, theta, psi]`` for the intrinsic sequence
    ``R_a(phi) @ R_b(theta) @ R_c(psi)`` named by the ``EulerAngleOrder``.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp

from rotjax.rotations._tolerance import get_rotation_epsilon
from rotjax.rotations.kinds import EulerAngleOrder, axis_parity, euler_axes
from rotjax.rotations.rotation_matrices import ELEMENTARY_ROTATIONS


def _default_axis(dtype) -> jax.Array:
    return jnp.array([1.0, 0.0, 0.0], dtype=dtype)


def safe_norm(v: jax.Array) -> jax.Array:
    """Euclidean norm whose gradient at the origin is zero instead of NaN.

    Args:
        v (jax.Array): Vector of any shape.

    Returns:
        jnp.ndarray: Scalar norm of ``v``.
    """
    sq = jnp.sum(v * v)
    nonzero = sq > 0.0
    return jnp.where(nonzero, jnp.sqrt(jnp.where(nonzero, sq, 1.0)), 0.0)


def normalize_axis(axis: jax.Array) -> jax.Array:
    """Normalize a rotation axis, falling back to ``[1, 0, 0]`` when it vanishes.

    Args:
        axis (jax.Array): Axis vector of shape ``(3,)``.

    Returns:
        jnp.ndarray: Unit axis of shape ``(3,)``.
    """
    n = safe_norm(axis)
    defined = n > get_rotation_epsilon(axis.dtype)
    return jnp.where(defined, axis / jnp.where(defined, n, 1.0), _default_axis(axis.dtype))


# ---------------------------------------------------------------------------
# Quaternion algebra
# ---------------------------------------------------------------------------

def quaternion_multiply(q1: jax.Array, q2: jax.Array) -> jax.Array:
    """Hamilton product of two quaternions.

    The product is not renormalized; drift accumulated over repeated
    products is left to the caller.

    Args:
        q1 (jax.Array): First quaternion of shape ``(4,)`` in scalar-first order.
        q2 (jax.Array): Second quaternion of shape ``(4,)`` in scalar-first order.

    Returns:
        jnp.ndarray: Product quaternion of shape ``(4,)``.
    """
    s1, v1 = q1[0], q1[1:]
    s2, v2 = q2[0], q2[1:]

    s = s1 * s2 - jnp.dot(v1, v2)
    v = s1 * v2 + s2 * v1 + jnp.cross(v1, v2)

    return jnp.concatenate([jnp.array([s]), v])


def quaternion_conjugate(q: jax.Array) -> jax.Array:
    """Return ``[w, -x, -y, -z]``."""
    return jnp.concatenate([q[:1], -q[1:]])


def quaternion_slerp(q1: jax.Array, q2: jax.Array, t: float | jax.Array) -> jax.Array:
    """Spherical linear interpolation between two quaternions.

    Falls back to linear interpolation when the quaternions are nearly
    parallel (dot product > 0.9995).

    Args:
        q1 (jax.Array): Start quaternion of shape ``(4,)``.
        q2 (jax.Array): End quaternion of shape ``(4,)``.
        t (float | jax.Array): Interpolation parameter in ``[0, 1]``.

    Returns:
        jnp.ndarray: Interpolated unit quaternion of shape ``(4,)``.
    """
    dot = jnp.dot(q1, q2)

    # Flip sign if needed for shortest path
    q2_adj = jnp.where(dot < 0.0, -q2, q2)
    dot = jnp.abs(dot)

    def _linear_interp(_):
        qt = q1 + (q2_adj - q1) * t
        return qt / jnp.linalg.norm(qt)

    def _slerp_interp(_):
        theta_0 = jnp.arccos(jnp.clip(dot, -1.0, 1.0))
        theta = theta_0 * t
        s0 = jnp.cos(theta) - dot * jnp.sin(theta) / jnp.sin(theta_0)
        s1 = jnp.sin(theta) / jnp.sin(theta_0)
        qt = q1 * s0 + q2_adj * s1
        return qt / jnp.linalg.norm(qt)

    return jax.lax.cond(dot > 0.9995, _linear_interp, _slerp_interp, None)


# ---------------------------------------------------------------------------
# Quaternion <-> Rotation Matrix
# ---------------------------------------------------------------------------

def quaternion_to_rotation_matrix(q: jax.Array) -> jax.Array:
    """Convert a unit quaternion to an active 3x3 rotation matrix.

    Uses the bilinear product form, which does not assume a unit norm
    beyond the squared terms on the diagonal.

    Args:
        q (jax.Array): Quaternion array of shape ``(4,)`` in scalar-first order ``[w, x, y, z]``.

    Returns:
        jnp.ndarray: Rotation matrix of shape ``(3, 3)``.
    """
    qw, qx, qy, qz = q[0], q[1], q[2], q[3]

    return jnp.array([
        [qw*qw + qx*qx - qy*qy - qz*qz,  2.0*qx*qy - 2.0*qw*qz,          2.0*qx*qz + 2.0*qw*qy],
        [2.0*qx*qy + 2.0*qw*qz,          qw*qw - qx*qx + qy*qy - qz*qz,  2.0*qy*qz - 2.0*qw*qx],
        [2.0*qx*qz - 2.0*qw*qy,          2.0*qy*qz + 2.0*qw*qx,          qw*qw - qx*qx - qy*qy + qz*qz],
    ])


def rotation_matrix_to_quaternion(R: jax.Array) -> jax.Array:
    """Convert an active 3x3 rotation matrix to a unit quaternion.

    Uses Shepperd's method with ``jax.lax.switch`` on ``argmax`` for
    numerical stability and JIT compatibility.

    Args:
        R (jax.Array): Rotation matrix of shape ``(3, 3)``.

    Returns:
        jnp.ndarray: Quaternion array of shape ``(4,)`` in scalar-first order ``[w, x, y, z]``.
    """
    # 4w^2, 4x^2, 4y^2, 4z^2
    qvec = jnp.array([
        1.0 + R[0, 0] + R[1, 1] + R[2, 2],
        1.0 + R[0, 0] - R[1, 1] - R[2, 2],
        1.0 - R[0, 0] + R[1, 1] - R[2, 2],
        1.0 - R[0, 0] - R[1, 1] + R[2, 2],
    ])

    ind_max = jnp.argmax(qvec)
    q_max = qvec[ind_max]

    def _case_w(_):
        sq = jnp.sqrt(q_max)
        return 0.5 * jnp.array([
            sq,
            (R[2, 1] - R[1, 2]) / sq,
            (R[0, 2] - R[2, 0]) / sq,
            (R[1, 0] - R[0, 1]) / sq,
        ])

    def _case_x(_):
        sq = jnp.sqrt(q_max)
        return 0.5 * jnp.array([
            (R[2, 1] - R[1, 2]) / sq,
            sq,
            (R[0, 1] + R[1, 0]) / sq,
            (R[0, 2] + R[2, 0]) / sq,
        ])

    def _case_y(_):
        sq = jnp.sqrt(q_max)
        return 0.5 * jnp.array([
            (R[0, 2] - R[2, 0]) / sq,
            (R[0, 1] + R[1, 0]) / sq,
            sq,
            (R[1, 2] + R[2, 1]) / sq,
        ])

    def _case_z(_):
        sq = jnp.sqrt(q_max)
        return 0.5 * jnp.array([
            (R[1, 0] - R[0, 1]) / sq,
            (R[0, 2] + R[2, 0]) / sq,
            (R[1, 2] + R[2, 1]) / sq,
            sq,
        ])

    return jax.lax.switch(ind_max, [_case_w, _case_x, _case_y, _case_z], None)


# ---------------------------------------------------------------------------
# Angle-Axis <-> Quaternion
# ---------------------------------------------------------------------------

def angle_axis_to_quaternion(aa: jax.Array) -> jax.Array:
    """Convert an angle-axis payload to a unit quaternion.

    The axis is normalized first; a vanishing axis falls back to
    ``[1, 0, 0]``.

    Args:
        aa (jax.Array): Array ``[angle, ax, ay, az]`` of shape ``(4,)``.

    Returns:
        jnp.ndarray: Unit quaternion of shape ``(4,)`` in scalar-first order.
    """
    axis = normalize_axis(aa[1:])
    half = aa[0] / 2.0
    return jnp.concatenate([jnp.array([jnp.cos(half)]), axis * jnp.sin(half)])


def quaternion_to_angle_axis(q: jax.Array) -> jax.Array:
    """Convert a quaternion to an angle-axis payload with angle in ``[0, pi]``.

    The sign of ``q`` is chosen so that the scalar part is non-negative,
    which selects the shortest rotation.  When the vector part is smaller
    than the rotation epsilon the rotation is the identity and the result
    is exactly ``[0, 1, 0, 0]``.

    Args:
        q (jax.Array): Quaternion of shape ``(4,)`` in scalar-first order.

    Returns:
        jnp.ndarray: Array ``[angle, ax, ay, az]`` of shape ``(4,)``.
    """
    w = q[0]
    v = q[1:]
    v_norm = safe_norm(v)
    defined = v_norm > get_rotation_epsilon(q.dtype)

    sign = jnp.where(w < 0.0, -1.0, 1.0)
    angle = 2.0 * jnp.arctan2(v_norm, jnp.abs(w))
    axis = sign * v / jnp.where(defined, v_norm, 1.0)

    angle = jnp.where(defined, angle, 0.0)
    axis = jnp.where(defined, axis, _default_axis(q.dtype))
    return jnp.concatenate([jnp.array([angle]), axis])


# ---------------------------------------------------------------------------
# Rotation Vector <-> Angle-Axis
# ---------------------------------------------------------------------------

def rotation_vector_to_angle_axis(rv: jax.Array) -> jax.Array:
    """Split a rotation vector into angle and unit axis.

    The zero vector maps to angle ``0`` about ``[1, 0, 0]``.

    Args:
        rv (jax.Array): Rotation vector of shape ``(3,)``.

    Returns:
        jnp.ndarray: Array ``[angle, ax, ay, az]`` of shape ``(4,)``.
    """
    angle = safe_norm(rv)
    defined = angle > get_rotation_epsilon(rv.dtype)
    axis = jnp.where(defined, rv / jnp.where(defined, angle, 1.0), _default_axis(rv.dtype))
    return jnp.concatenate([jnp.array([jnp.where(defined, angle, 0.0)]), axis])


def angle_axis_to_rotation_vector(aa: jax.Array) -> jax.Array:
    """Scale the (normalized) axis by the angle.

    Args:
        aa (jax.Array): Array ``[angle, ax, ay, az]`` of shape ``(4,)``.

    Returns:
        jnp.ndarray: Rotation vector of shape ``(3,)``.
    """
    return aa[0] * normalize_axis(aa[1:])


def rotation_vector_to_quaternion(rv: jax.Array) -> jax.Array:
    """Exponential map from a rotation vector to a unit quaternion.

    Below the rotation epsilon (in squared angle) the half-angle terms are
    replaced by their Taylor series, so the map and its derivatives stay
    finite at the zero vector.

    Args:
        rv (jax.Array): Rotation vector of shape ``(3,)``.

    Returns:
        jnp.ndarray: Unit quaternion of shape ``(4,)`` in scalar-first order.
    """
    sq = jnp.sum(rv * rv)
    small = sq < get_rotation_epsilon(rv.dtype)
    angle = jnp.sqrt(jnp.where(small, 1.0, sq))

    w = jnp.where(small, 1.0 - sq / 8.0, jnp.cos(angle / 2.0))
    # sin(angle / 2) / angle
    scale = jnp.where(small, 0.5 - sq / 48.0, jnp.sin(angle / 2.0) / angle)
    return jnp.concatenate([jnp.array([w]), scale * rv])


def quaternion_to_rotation_vector(q: jax.Array) -> jax.Array:
    """Logarithmic map from a quaternion to a rotation vector with norm in ``[0, pi]``.

    Like :func:`rotation_vector_to_quaternion`, a Taylor series is used
    close to the identity so the map is differentiable there.

    Args:
        q (jax.Array): Unit quaternion of shape ``(4,)`` in scalar-first order.

    Returns:
        jnp.ndarray: Rotation vector of shape ``(3,)``.
    """
    v = q[1:]
    w = jnp.abs(q[0])

    sq = jnp.sum(v * v)
    small = sq < get_rotation_epsilon(q.dtype)
    n = jnp.sqrt(jnp.where(small, 1.0, sq))
    w_safe = jnp.where(small, w, 1.0)

    # 2 * atan2(|v|, w) / |v|
    scale = jnp.where(
        small,
        2.0 / w_safe * (1.0 - sq / (3.0 * w_safe * w_safe)),
        2.0 * jnp.arctan2(n, w) / n,
    )
    return jnp.where(q[0] < 0.0, -scale, scale) * v


# ---------------------------------------------------------------------------
# Euler Angles <-> Quaternion / Rotation Matrix
# ---------------------------------------------------------------------------

def _elementary_quaternion(axis: int, angle: jax.Array) -> jax.Array:
    half = angle / 2.0
    v = jnp.eye(3, dtype=jnp.result_type(angle))[axis] * jnp.sin(half)
    return jnp.concatenate([jnp.array([jnp.cos(half)]), v])


def euler_angles_to_quaternion(angles: jax.Array, order: EulerAngleOrder) -> jax.Array:
    """Convert Euler angles to a quaternion.

    The quaternion is the Hamilton product of the three elementary
    rotations in sequence order.

    Args:
        angles (jax.Array): Array ``[phi, theta, psi]`` in radians.
        order (EulerAngleOrder): Rotation sequence.

    Returns:
        jnp.ndarray: Unit quaternion of shape ``(4,)`` in scalar-first order.
    """
    a1, a2, a3 = euler_axes(order)
    q = quaternion_multiply(
        _elementary_quaternion(a1, angles[0]),
        _elementary_quaternion(a2, angles[1]),
    )
    return quaternion_multiply(q, _elementary_quaternion(a3, angles[2]))


def euler_angles_to_rotation_matrix(angles: jax.Array, order: EulerAngleOrder) -> jax.Array:
    """Convert Euler angles to an active rotation matrix.

    Args:
        angles (jax.Array): Array ``[phi, theta, psi]`` in radians.
        order (EulerAngleOrder): Rotation sequence.

    Returns:
        jnp.ndarray: Rotation matrix of shape ``(3, 3)``.
    """
    a1, a2, a3 = euler_axes(order)
    return (
        ELEMENTARY_ROTATIONS[a1](angles[0])
        @ ELEMENTARY_ROTATIONS[a2](angles[1])
        @ ELEMENTARY_ROTATIONS[a3](angles[2])
    )


def rotation_matrix_to_euler_angles(R: jax.Array, order: EulerAngleOrder) -> jax.Array:
    """Extract Euler angles from an active rotation matrix.

    Of the two solutions the one with the middle angle in ``[-pi/2, pi/2]``
    (Tait-Bryan sequences) or ``[0, pi]`` (symmetric sequences) is
    returned.  At gimbal lock the first and third angles are coupled; the
    third angle is set to ``0`` and the first absorbs the whole rotation.

    Args:
        R (jax.Array): Rotation matrix of shape ``(3, 3)``.
        order (EulerAngleOrder): Rotation sequence.

    Returns:
        jnp.ndarray: Array ``[phi, theta, psi]`` in radians.
    """
    i, j, third = euler_axes(order)

    if i == third:
        k = 3 - i - j
        e = axis_parity(i, j, k)
        s_theta = jnp.hypot(R[i, j], R[i, k])
        theta = jnp.arctan2(s_theta, R[i, i])
        phi = jnp.arctan2(R[j, i], -e * R[k, i])
        psi = jnp.arctan2(R[i, j], e * R[i, k])
        locked = s_theta < get_rotation_epsilon(R.dtype)
    else:
        k = third
        e = axis_parity(i, j, k)
        c_theta = jnp.hypot(R[i, i], R[i, j])
        theta = jnp.arctan2(e * R[i, k], c_theta)
        phi = jnp.arctan2(-e * R[j, k], R[k, k])
        psi = jnp.arctan2(-e * R[i, j], R[i, i])
        locked = c_theta < get_rotation_epsilon(R.dtype)

    phi = jnp.where(locked, jnp.arctan2(e * R[k, j], R[j, j]), phi)
    psi = jnp.where(locked, 0.0, psi)

    return jnp.array([phi, theta, psi])


def quaternion_to_euler_angles(q: jax.Array, order: EulerAngleOrder) -> jax.Array:
    """Convert a quaternion to Euler angles through the rotation matrix.

    Args:
        q (jax.Array): Quaternion of shape ``(4,)`` in scalar-first order.
        order (EulerAngleOrder): Target rotation sequence.

    Returns:
        jnp.ndarray: Array ``[phi, theta, psi]`` in radians.
    """
    return rotation_matrix_to_euler_angles(quaternion_to_rotation_matrix(q), order)
