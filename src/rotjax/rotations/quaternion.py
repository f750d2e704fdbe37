"""Rotation quaternion representation.

Provides the ``RotationQuaternion`` class representing a rotation as a unit
Hamilton quaternion in scalar-first convention ``[w, x, y, z]``.

The quaternion is the hub of the conversion graph: every representation
converts to and from it, and pairs without a direct kernel are routed
through it.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp

from rotjax.config import get_dtype
from rotjax.rotations.conversions import quaternion_conjugate, quaternion_slerp
from rotjax.rotations.kinds import RepresentationKind
from rotjax.rotations.rotation import Rotation, register_rotation_pytree
from rotjax.rotations.usage import RotationUsage, apply_usage

_UNIT_NORM_TOL = 1e-6


def _is_unit(q: jax.Array, tol: float = _UNIT_NORM_TOL) -> bool:
    return bool(jnp.abs(jnp.linalg.norm(q) - 1.0) < tol)


class RotationQuaternion(Rotation):
    """Unit quaternion representing a 3D rotation.

    Internal storage is a shape ``(4,)`` array in scalar-first order
    ``[w, x, y, z]``.  For a ``PASSIVE`` rotation the stored array is the
    conjugate of the components passed to the constructor; the accessors
    always return the components as given.

    Args:
        w (float): Scalar (real) component.
        x (float): First vector (imaginary) component.
        y (float): Second vector (imaginary) component.
        z (float): Third vector (imaginary) component.
        usage (RotationUsage): Usage tag. Default: ``ACTIVE``
        validate (bool): Check that the quaternion has unit norm.
            Default: ``True``

    Raises:
        ValueError: If ``validate`` is set and the norm is not one.
    """

    __slots__ = ()

    kind = RepresentationKind.ROTATION_QUATERNION

    def __init__(
        self,
        w: float = 1.0,
        x: float = 0.0,
        y: float = 0.0,
        z: float = 0.0,
        usage: RotationUsage = RotationUsage.ACTIVE,
        validate: bool = True,
    ) -> None:
        _float = get_dtype()
        q = jnp.array([_float(w), _float(x), _float(y), _float(z)])
        if validate and not _is_unit(q):
            raise ValueError(
                f"Quaternion must have unit norm, got norm={float(jnp.linalg.norm(q)):.6f}"
            )
        self._usage = RotationUsage(usage)
        self._data = apply_usage(self.kind, q, self._usage)

    # Properties

    @property
    def w(self) -> jax.Array:
        """Scalar component."""
        return self.to_implementation()[0]

    @property
    def x(self) -> jax.Array:
        """First vector component."""
        return self.to_implementation()[1]

    @property
    def y(self) -> jax.Array:
        """Second vector component."""
        return self.to_implementation()[2]

    @property
    def z(self) -> jax.Array:
        """Third vector component."""
        return self.to_implementation()[3]

    @property
    def real(self) -> jax.Array:
        """Scalar part, same as :attr:`w`."""
        return self.w

    @property
    def imaginary(self) -> jax.Array:
        """Vector part ``[x, y, z]``."""
        return self.to_implementation()[1:]

    # Factory methods

    @classmethod
    def from_vector(
        cls,
        v: jax.Array,
        scalar_first: bool = True,
        usage: RotationUsage = RotationUsage.ACTIVE,
        validate: bool = True,
    ) -> RotationQuaternion:
        """Create from a 4-element vector.

        Args:
            v (jax.Array): Array-like of shape ``(4,)``.
            scalar_first (bool): If ``True``, ``v = [w, x, y, z]``.
                If ``False``, ``v = [x, y, z, w]``.
            usage (RotationUsage): Usage tag. Default: ``ACTIVE``
            validate (bool): Check that the quaternion has unit norm.

        Returns:
            RotationQuaternion: New quaternion.
        """
        if scalar_first:
            return cls(v[0], v[1], v[2], v[3], usage=usage, validate=validate)
        else:
            return cls(v[3], v[0], v[1], v[2], usage=usage, validate=validate)

    def to_vector(self, scalar_first: bool = True) -> jax.Array:
        """Return the logical quaternion as a 4-element vector.

        Args:
            scalar_first (bool): If ``True``, return ``[w, x, y, z]``.
                If ``False``, return ``[x, y, z, w]``.

        Returns:
            jnp.ndarray: Array of shape ``(4,)``.
        """
        q = self.to_implementation()
        if scalar_first:
            return q
        else:
            return jnp.array([q[1], q[2], q[3], q[0]])

    # Methods

    def norm(self) -> jax.Array:
        """Return the Euclidean norm.

        Returns:
            jax.Array: Scalar norm.
        """
        return jnp.linalg.norm(self._data)

    def normalized(self) -> RotationQuaternion:
        """Return a copy rescaled to unit norm.

        Useful after long chains of compositions, which are not
        renormalized.
        """
        return self._with_data(self._data / jnp.linalg.norm(self._data))

    def conjugated(self) -> RotationQuaternion:
        """Return the conjugate quaternion ``[w, -x, -y, -z]``.

        For a unit quaternion the conjugate is the inverse rotation.
        """
        return self._with_data(quaternion_conjugate(self._data))

    def slerp(self, other: RotationQuaternion, t: float) -> RotationQuaternion:
        """Spherical linear interpolation.

        Args:
            other (RotationQuaternion): Target quaternion of the same usage.
            t (float): Interpolation parameter in ``[0, 1]``.  ``t=0`` returns
                ``self``, ``t=1`` returns ``other``.

        Returns:
            RotationQuaternion: Interpolated quaternion.
        """
        self._check_same_representation(other, "interpolate")
        return self._with_data(quaternion_slerp(self._data, other._data, t))

    def _fields(self):
        q = self.to_implementation()
        return [("w", q[0]), ("x", q[1]), ("y", q[2]), ("z", q[3])]


# Register as JAX pytree
register_rotation_pytree(RotationQuaternion)
