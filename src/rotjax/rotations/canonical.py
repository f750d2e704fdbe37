"""Canonical ("unique") representatives of rotation payloads.

Several payloads describe the same physical rotation: ``q`` and ``-q``,
Euler angles that differ by multiples of ``2*pi`` or by the gimbal flip,
angle-axis pairs ``(angle, axis)`` and ``(-angle, -axis)``.  The kernels
below choose one member of each class.  They act on logical payloads.

Every kernel leaves values already in canonical form bit-for-bit
unchanged, so applying a kernel twice gives exactly the result of
applying it once.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp

from rotjax.constants import HALF_PI, PI
from rotjax.rotations.conversions import safe_norm
from rotjax.rotations.kinds import EulerAngleOrder, is_symmetric
from rotjax.utils import wrap_angle


def _shift_by_pi(angle: jax.Array) -> jax.Array:
    # -tiny + pi rounds to pi, hence the final wrap
    return wrap_angle(jnp.where(angle >= 0.0, angle - PI, angle + PI))


def _wrap_closed(angle: jax.Array) -> jax.Array:
    # like wrap_angle, but +pi is kept as is
    return jnp.where(jnp.abs(angle) <= PI, angle, wrap_angle(angle))


def unique_euler_angles(angles: jax.Array, order: EulerAngleOrder) -> jax.Array:
    """Canonical Euler angles.

    The outer angles are wrapped into ``[-pi, pi)``.  For Tait-Bryan
    sequences a middle angle outside ``[-pi/2, pi/2]`` is reflected back
    (``theta -> pi - theta`` or ``-pi - theta``) while the outer angles are
    shifted by ``pi``.  For symmetric sequences a negative middle angle is
    negated, again shifting the outer angles by ``pi``, so that
    ``theta`` lies in ``[0, pi]``.

    Args:
        angles (jax.Array): Array ``[phi, theta, psi]`` in radians.
        order (EulerAngleOrder): Rotation sequence.

    Returns:
        jnp.ndarray: Canonical ``[phi, theta, psi]``.
    """
    phi = wrap_angle(angles[0])
    psi = wrap_angle(angles[2])

    if is_symmetric(order):
        theta = _wrap_closed(angles[1])
        flip = theta < 0.0
        theta_flipped = -theta
    else:
        theta = wrap_angle(angles[1])
        flip = (theta > HALF_PI) | (theta < -HALF_PI)
        theta_flipped = jnp.where(theta > 0.0, PI - theta, -PI - theta)

    return jnp.array([
        jnp.where(flip, _shift_by_pi(phi), phi),
        jnp.where(flip, theta_flipped, theta),
        jnp.where(flip, _shift_by_pi(psi), psi),
    ])


def unique_quaternion(q: jax.Array) -> jax.Array:
    """Choose between ``q`` and ``-q``.

    The first non-zero component of ``[w, x, y, z]`` is made positive, so
    the scalar part is non-negative and ties at ``w == 0`` are broken
    deterministically.

    Args:
        q (jax.Array): Quaternion of shape ``(4,)``.

    Returns:
        jnp.ndarray: Canonical quaternion.
    """
    sign = jnp.where(
        q[0] != 0.0, jnp.sign(q[0]),
        jnp.where(q[1] != 0.0, jnp.sign(q[1]),
                  jnp.where(q[2] != 0.0, jnp.sign(q[2]), jnp.where(q[3] < 0.0, -1.0, 1.0))),
    )
    return jnp.where(sign < 0.0, -q, q)


def unique_angle_axis(aa: jax.Array) -> jax.Array:
    """Canonical angle-axis with angle in ``[0, pi]``.

    The angle is wrapped into ``[-pi, pi]``; a negative angle is negated
    together with the axis.  A zero angle takes the axis ``[1, 0, 0]``.

    Args:
        aa (jax.Array): Array ``[angle, ax, ay, az]``.

    Returns:
        jnp.ndarray: Canonical ``[angle, ax, ay, az]``.
    """
    angle = _wrap_closed(aa[0])
    axis = aa[1:]
    flip = angle < 0.0
    angle = jnp.where(flip, -angle, angle)
    axis = jnp.where(flip, -axis, axis)
    axis = jnp.where(angle == 0.0, jnp.array([1.0, 0.0, 0.0], dtype=aa.dtype), axis)
    return jnp.concatenate([jnp.array([angle]), axis])


def unique_rotation_vector(rv: jax.Array) -> jax.Array:
    """Canonical rotation vector with norm in ``[0, pi]``.

    Vectors longer than ``pi`` are rescaled to the wrapped angle about the
    same axis, which may reverse their direction.

    Args:
        rv (jax.Array): Rotation vector of shape ``(3,)``.

    Returns:
        jnp.ndarray: Canonical rotation vector.
    """
    angle = safe_norm(rv)
    in_range = angle <= PI
    safe_angle = jnp.where(in_range, 1.0, angle)
    rescaled = rv / safe_angle * wrap_angle(angle)
    return jnp.where(in_range, rv, rescaled)


def unique_rotation_matrix(R: jax.Array) -> jax.Array:
    """A rotation matrix is already unique; returned unchanged."""
    return R
