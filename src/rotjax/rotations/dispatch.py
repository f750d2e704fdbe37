"""Dispatch tables for conversion, composition, inversion and canonicalization.

Conversions are looked up in a registry keyed by
``(source kind, destination kind)``.  Only a bounded set of pairs has a
direct kernel; every other pair is routed through the quaternion hub
(``source -> quaternion -> destination``).  Each representation therefore
only needs a converter to and from the quaternion to be fully
interconvertible.

All functions here act on *stored* payloads and dispatch on static tags,
so they are safe to call under ``jax.jit``.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

import jax
import jax.numpy as jnp

from rotjax.rotations import canonical
from rotjax.rotations import conversions as cv
from rotjax.rotations.kinds import EulerAngleOrder, RepresentationKind

logger = logging.getLogger(__name__)

Q = RepresentationKind.ROTATION_QUATERNION
M = RepresentationKind.ROTATION_MATRIX
AA = RepresentationKind.ANGLE_AXIS
RV = RepresentationKind.ROTATION_VECTOR
EA = RepresentationKind.EULER_ANGLES

Order = Optional[EulerAngleOrder]
Converter = Callable[[jax.Array, Order, Order], jax.Array]

_CONVERTERS: dict[tuple[RepresentationKind, RepresentationKind], Converter] = {}


def register_conversion(source: RepresentationKind, dest: RepresentationKind) -> Callable[[Converter], Converter]:
    """Decorator registering a direct payload converter.

    The decorated function receives ``(payload, source_order, dest_order)``
    where the orders are ``None`` for non-Euler kinds.

    Args:
        source (RepresentationKind): Source payload layout.
        dest (RepresentationKind): Destination payload layout.

    Returns:
        Callable: The decorator.
    """
    def decorator(fn: Converter) -> Converter:
        _CONVERTERS[(RepresentationKind(source), RepresentationKind(dest))] = fn
        return fn
    return decorator


def has_direct_conversion(source: RepresentationKind, dest: RepresentationKind) -> bool:
    """Return whether a direct kernel is registered for ``source -> dest``."""
    return (RepresentationKind(source), RepresentationKind(dest)) in _CONVERTERS


# Quaternion hub

@register_conversion(Q, M)
def _q_to_m(p, _src, _dst):
    return cv.quaternion_to_rotation_matrix(p)


@register_conversion(M, Q)
def _m_to_q(p, _src, _dst):
    return cv.rotation_matrix_to_quaternion(p)


@register_conversion(Q, AA)
def _q_to_aa(p, _src, _dst):
    return cv.quaternion_to_angle_axis(p)


@register_conversion(AA, Q)
def _aa_to_q(p, _src, _dst):
    return cv.angle_axis_to_quaternion(p)


@register_conversion(Q, RV)
def _q_to_rv(p, _src, _dst):
    return cv.quaternion_to_rotation_vector(p)


@register_conversion(RV, Q)
def _rv_to_q(p, _src, _dst):
    return cv.rotation_vector_to_quaternion(p)


@register_conversion(Q, EA)
def _q_to_ea(p, _src, dst_order):
    return cv.quaternion_to_euler_angles(p, dst_order)


@register_conversion(EA, Q)
def _ea_to_q(p, src_order, _dst):
    return cv.euler_angles_to_quaternion(p, src_order)


# Direct pairs off the hub

@register_conversion(AA, RV)
def _aa_to_rv(p, _src, _dst):
    return cv.angle_axis_to_rotation_vector(p)


@register_conversion(RV, AA)
def _rv_to_aa(p, _src, _dst):
    return cv.rotation_vector_to_angle_axis(p)


@register_conversion(M, EA)
def _m_to_ea(p, _src, dst_order):
    return cv.rotation_matrix_to_euler_angles(p, dst_order)


@register_conversion(EA, M)
def _ea_to_m(p, src_order, _dst):
    return cv.euler_angles_to_rotation_matrix(p, src_order)


@register_conversion(EA, EA)
def _ea_to_ea(p, src_order, dst_order):
    if src_order == dst_order:
        return p
    R = cv.euler_angles_to_rotation_matrix(p, src_order)
    return cv.rotation_matrix_to_euler_angles(R, dst_order)


def convert_payload(
    payload: jax.Array,
    source: RepresentationKind,
    dest: RepresentationKind,
    source_order: Order = None,
    dest_order: Order = None,
) -> jax.Array:
    """Convert a stored payload between representations.

    Args:
        payload (jax.Array): Stored payload of the source rotation.
        source (RepresentationKind): Source payload layout.
        dest (RepresentationKind): Destination payload layout.
        source_order (EulerAngleOrder | None): Source Euler order, if any.
        dest_order (EulerAngleOrder | None): Destination Euler order, if any.

    Returns:
        jnp.ndarray: Stored payload of the destination representation.
    """
    source = RepresentationKind(source)
    dest = RepresentationKind(dest)
    if source == dest and source != EA:
        return payload

    direct = _CONVERTERS.get((source, dest))
    if direct is not None:
        return direct(payload, source_order, dest_order)

    logger.debug("No direct %s -> %s conversion, routing through the quaternion hub", source.name, dest.name)
    q = _CONVERTERS[(source, Q)](payload, source_order, None)
    return _CONVERTERS[(Q, dest)](q, None, dest_order)


# Composition

_COMPOSERS: dict[RepresentationKind, Callable[[jax.Array, jax.Array], jax.Array]] = {
    Q: cv.quaternion_multiply,
    M: jnp.matmul,
}


def compose_payload(kind: RepresentationKind, a: jax.Array, b: jax.Array, order: Order = None) -> jax.Array:
    """Compose two stored payloads of the same kind (``a`` after ``b``).

    Quaternions and matrices are multiplied directly.  Every other kind is
    composed on the quaternion hub and converted back.

    Args:
        kind (RepresentationKind): Payload layout of both operands.
        a (jax.Array): Stored payload applied second.
        b (jax.Array): Stored payload applied first.
        order (EulerAngleOrder | None): Euler order of both operands, if any.

    Returns:
        jnp.ndarray: Stored payload of the composition.
    """
    kind = RepresentationKind(kind)
    composer = _COMPOSERS.get(kind)
    if composer is not None:
        return composer(a, b)
    qa = convert_payload(a, kind, Q, order)
    qb = convert_payload(b, kind, Q, order)
    return convert_payload(cv.quaternion_multiply(qa, qb), Q, kind, dest_order=order)


# Inversion

def _invert_angle_axis(aa):
    return jnp.concatenate([-aa[:1], aa[1:]])


_INVERTERS: dict[RepresentationKind, Callable[[jax.Array], jax.Array]] = {
    Q: cv.quaternion_conjugate,
    M: jnp.transpose,
    AA: _invert_angle_axis,
    RV: jnp.negative,
}


def invert_payload(kind: RepresentationKind, payload: jax.Array, order: Order = None) -> jax.Array:
    """Return the stored payload of the inverse rotation.

    Euler angles have no closed-form inverse in the same sequence, so they
    are inverted on the quaternion hub.

    Args:
        kind (RepresentationKind): Payload layout.
        payload (jax.Array): Stored payload.
        order (EulerAngleOrder | None): Euler order, if any.

    Returns:
        jnp.ndarray: Stored payload of the inverse.
    """
    kind = RepresentationKind(kind)
    inverter = _INVERTERS.get(kind)
    if inverter is not None:
        return inverter(payload)
    q = convert_payload(payload, kind, Q, order)
    return convert_payload(cv.quaternion_conjugate(q), Q, kind, dest_order=order)


# Canonicalization

_UNIQUE: dict[RepresentationKind, Callable[[jax.Array, Order], jax.Array]] = {
    Q: lambda p, _order: canonical.unique_quaternion(p),
    M: lambda p, _order: canonical.unique_rotation_matrix(p),
    AA: lambda p, _order: canonical.unique_angle_axis(p),
    RV: lambda p, _order: canonical.unique_rotation_vector(p),
    EA: canonical.unique_euler_angles,
}


def unique_payload(kind: RepresentationKind, logical: jax.Array, order: Order = None) -> jax.Array:
    """Return the canonical representative of a logical payload.

    Args:
        kind (RepresentationKind): Payload layout.
        logical (jax.Array): Logical payload.
        order (EulerAngleOrder | None): Euler order, if any.

    Returns:
        jnp.ndarray: Canonical logical payload.
    """
    return _UNIQUE[RepresentationKind(kind)](logical, order)
