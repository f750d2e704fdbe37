"""Angle-axis rotation representation.

Provides the ``AngleAxis`` class representing a rotation by an angle about
a unit axis.  The payload is ``[angle, ax, ay, az]``.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp

from rotjax.config import get_dtype
from rotjax.rotations.conversions import normalize_axis
from rotjax.rotations.kinds import RepresentationKind
from rotjax.rotations.rotation import Rotation, register_rotation_pytree
from rotjax.rotations.usage import RotationUsage, apply_usage
from rotjax.utils import from_radians, to_radians


class AngleAxis(Rotation):
    """Rotation by ``angle`` about the axis ``[x, y, z]``.

    Internal storage is a shape ``(4,)`` array ``[angle, ax, ay, az]`` with
    the angle in radians.  A ``PASSIVE`` instance stores the negated angle
    and the same axis.

    The axis is stored as given; conversions normalize it and fall back to
    ``[1, 0, 0]`` for a vanishing axis.

    Args:
        angle (float): Rotation angle.
        x (float): Axis x component.
        y (float): Axis y component.
        z (float): Axis z component.
        usage (RotationUsage): Usage tag. Default: ``ACTIVE``
        use_degrees (bool): Interpret ``angle`` in degrees. Default: ``False``
    """

    __slots__ = ()

    kind = RepresentationKind.ANGLE_AXIS

    def __init__(
        self,
        angle: float = 0.0,
        x: float = 1.0,
        y: float = 0.0,
        z: float = 0.0,
        usage: RotationUsage = RotationUsage.ACTIVE,
        use_degrees: bool = False,
    ) -> None:
        _float = get_dtype()
        aa = jnp.array([_float(to_radians(angle, use_degrees)), _float(x), _float(y), _float(z)])
        self._usage = RotationUsage(usage)
        self._data = apply_usage(self.kind, aa, self._usage)

    @classmethod
    def from_axis(
        cls,
        axis: jax.Array,
        angle: float,
        usage: RotationUsage = RotationUsage.ACTIVE,
        use_degrees: bool = False,
    ) -> AngleAxis:
        """Create from a 3-element axis and an angle.

        Args:
            axis (jax.Array): Array-like of shape ``(3,)``.
            angle (float): Rotation angle.
            usage (RotationUsage): Usage tag. Default: ``ACTIVE``
            use_degrees (bool): Interpret ``angle`` in degrees. Default: ``False``

        Returns:
            AngleAxis: New angle-axis rotation.
        """
        return cls(angle, axis[0], axis[1], axis[2], usage=usage, use_degrees=use_degrees)

    @classmethod
    def from_vector(
        cls,
        v: jax.Array,
        usage: RotationUsage = RotationUsage.ACTIVE,
        use_degrees: bool = False,
    ) -> AngleAxis:
        """Create from a 4-element vector ``[angle, x, y, z]``."""
        return cls(v[0], v[1], v[2], v[3], usage=usage, use_degrees=use_degrees)

    def to_vector(self, use_degrees: bool = False) -> jax.Array:
        """Return ``[angle, x, y, z]`` from the logical payload.

        Args:
            use_degrees (bool): Return the angle in degrees. Default: ``False``

        Returns:
            jnp.ndarray: Array of shape ``(4,)``.
        """
        aa = self.to_implementation()
        return jnp.concatenate([jnp.array([from_radians(aa[0], use_degrees)]), aa[1:]])

    # Properties

    @property
    def angle(self) -> jax.Array:
        """Rotation angle in radians."""
        return self.to_implementation()[0]

    @property
    def axis(self) -> jax.Array:
        """Rotation axis, shape ``(3,)``."""
        return self.to_implementation()[1:]

    def with_angle(self, angle: float, use_degrees: bool = False) -> AngleAxis:
        """Return a copy with a different angle."""
        return self._with_logical_element(0, to_radians(angle, use_degrees))

    def normalized(self) -> AngleAxis:
        """Return a copy with a unit-length axis."""
        aa = self._data
        return self._with_data(jnp.concatenate([aa[:1], normalize_axis(aa[1:])]))

    def _fields(self):
        return [("angle", self.angle), ("axis", self.axis)]


# Register as JAX pytree
register_rotation_pytree(AngleAxis)
