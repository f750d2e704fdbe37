"""Active/passive usage of a rotation and the transform between views.

Every rotation stores a payload (its *stored implementation*) that is
interpreted identically by all kernels regardless of usage.  The usage only
decides how that payload is presented to, and read from, the caller (its
*logical implementation*):

========================  ===========================================
Representation            PASSIVE logical view of a stored payload
========================  ===========================================
Rotation quaternion       conjugate
Rotation matrix           transpose
Angle-axis                angle negated, axis unchanged
Rotation vector           negated
Euler angles              every angle negated
========================  ===========================================

Each transform is an involution, so :func:`apply_usage` maps in both
directions.
"""

from __future__ import annotations

import enum
from typing import Callable

import jax
import jax.numpy as jnp

from rotjax.rotations.conversions import quaternion_conjugate
from rotjax.rotations.kinds import RepresentationKind


class RotationUsage(enum.IntEnum):
    """How a rotation is meant to act.

    Attributes:
        ACTIVE: The rotation rotates vectors expressed in a fixed frame.
        PASSIVE: The rotation rotates the reference frame; its nominal
            parameters describe the inverse of the active rotation.
    """

    ACTIVE = 0
    PASSIVE = 1


def _negate_angle(aa: jax.Array) -> jax.Array:
    return jnp.concatenate([-aa[:1], aa[1:]])


_PASSIVE_TRANSFORMS: dict[RepresentationKind, Callable[[jax.Array], jax.Array]] = {
    RepresentationKind.ROTATION_QUATERNION: quaternion_conjugate,
    RepresentationKind.ROTATION_MATRIX: jnp.transpose,
    RepresentationKind.ANGLE_AXIS: _negate_angle,
    RepresentationKind.ROTATION_VECTOR: jnp.negative,
    RepresentationKind.EULER_ANGLES: jnp.negative,
}


def apply_usage(kind: RepresentationKind, payload: jax.Array, usage: RotationUsage) -> jax.Array:
    """Translate between the stored and the logical payload of a rotation.

    Args:
        kind (RepresentationKind): Payload layout.
        payload (jax.Array): Stored or logical payload.
        usage (RotationUsage): Usage of the rotation.

    Returns:
        jnp.ndarray: ``payload`` unchanged for ``ACTIVE``, the passive
        transform of ``payload`` otherwise.
    """
    if RotationUsage(usage) == RotationUsage.ACTIVE:
        return payload
    return _PASSIVE_TRANSFORMS[RepresentationKind(kind)](payload)


def resolve_usage(source: RotationUsage, requested: RotationUsage | None) -> RotationUsage:
    """Return the usage of a conversion result.

    Conversions never change the usage of a rotation: the result inherits
    the source usage, and explicitly asking for the other usage is a type
    error.

    Args:
        source (RotationUsage): Usage of the source rotation.
        requested (RotationUsage | None): Usage requested by the caller, if any.

    Returns:
        RotationUsage: The usage of the converted rotation.

    Raises:
        TypeError: If ``requested`` differs from ``source``.
    """
    source = RotationUsage(source)
    if requested is None:
        return source
    requested = RotationUsage(requested)
    if requested != source:
        raise TypeError(
            f"Cannot convert a {source.name} rotation into a {requested.name} rotation; "
            f"usage must match"
        )
    return source
