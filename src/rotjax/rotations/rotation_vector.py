"""Rotation vector representation.

Provides the ``RotationVector`` class: the rotation axis scaled by the
rotation angle in radians.  This is the tangent-space coordinate used by
:meth:`~rotjax.rotations.rotation.Rotation.box_plus` and
:meth:`~rotjax.rotations.rotation.Rotation.box_minus`.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp

from rotjax.config import get_dtype
from rotjax.rotations.conversions import safe_norm
from rotjax.rotations.kinds import RepresentationKind
from rotjax.rotations.rotation import Rotation, register_rotation_pytree
from rotjax.rotations.usage import RotationUsage, apply_usage


class RotationVector(Rotation):
    """Rotation stored as ``angle * axis``.

    Internal storage is a shape ``(3,)`` array.  A ``PASSIVE`` instance
    stores the negated vector.

    Args:
        x (float): First component.
        y (float): Second component.
        z (float): Third component.
        usage (RotationUsage): Usage tag. Default: ``ACTIVE``
    """

    __slots__ = ()

    kind = RepresentationKind.ROTATION_VECTOR

    def __init__(
        self,
        x: float = 0.0,
        y: float = 0.0,
        z: float = 0.0,
        usage: RotationUsage = RotationUsage.ACTIVE,
    ) -> None:
        _float = get_dtype()
        rv = jnp.array([_float(x), _float(y), _float(z)])
        self._usage = RotationUsage(usage)
        self._data = apply_usage(self.kind, rv, self._usage)

    @classmethod
    def from_vector(cls, v: jax.Array, usage: RotationUsage = RotationUsage.ACTIVE) -> RotationVector:
        """Create from a 3-element vector."""
        return cls(v[0], v[1], v[2], usage=usage)

    def to_vector(self) -> jax.Array:
        """Return the logical rotation vector, shape ``(3,)``."""
        return self.to_implementation()

    @property
    def vector(self) -> jax.Array:
        """Logical rotation vector, same as :meth:`to_vector`."""
        return self.to_implementation()

    @property
    def x(self) -> jax.Array:
        """First component."""
        return self.to_implementation()[0]

    @property
    def y(self) -> jax.Array:
        """Second component."""
        return self.to_implementation()[1]

    @property
    def z(self) -> jax.Array:
        """Third component."""
        return self.to_implementation()[2]

    @property
    def angle(self) -> jax.Array:
        """Rotation angle, the norm of the vector."""
        return safe_norm(self._data)

    def _fields(self):
        return [("vector", self.to_implementation())]


# Register as JAX pytree
register_rotation_pytree(RotationVector)
