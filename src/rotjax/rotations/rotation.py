"""Common value type shared by every rotation representation.

A :class:`Rotation` is a stored payload tagged with a
:class:`~rotjax.rotations.kinds.RepresentationKind`, a
:class:`~rotjax.rotations.usage.RotationUsage` and, for Euler angles, an
:class:`~rotjax.rotations.kinds.EulerAngleOrder`.  The concrete classes in
this package only add constructors and named accessors; conversion,
composition, inversion, transformation and canonicalization are free
functions in :mod:`rotjax.rotations.dispatch` selected by those tags.

Every concrete class is registered as a JAX pytree with the payload as the
sole leaf and ``(usage, order)`` as auxiliary data, so rotations can be
passed through ``jax.jit`` and ``jax.vmap``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import jax
import jax.numpy as jnp

from rotjax.config import x64_enabled
from rotjax.rotations._tolerance import get_rotation_epsilon
from rotjax.rotations.conversions import (
    quaternion_conjugate,
    safe_norm,
    quaternion_multiply,
    quaternion_to_rotation_vector,
    rotation_vector_to_quaternion,
)
from rotjax.rotations.dispatch import (
    compose_payload,
    convert_payload,
    invert_payload,
    unique_payload,
)
from rotjax.rotations.kinds import EulerAngleOrder, RepresentationKind
from rotjax.rotations.usage import RotationUsage, apply_usage, resolve_usage

if TYPE_CHECKING:
    from rotjax.rotations.angle_axis import AngleAxis
    from rotjax.rotations.euler_angles import (
        EulerAngles,
        EulerAnglesXyz,
        EulerAnglesZyx,
        EulerAnglesZyz,
    )
    from rotjax.rotations.quaternion import RotationQuaternion
    from rotjax.rotations.rotation_matrix import RotationMatrix
    from rotjax.rotations.rotation_vector import RotationVector

logger = logging.getLogger(__name__)


class Rotation:
    """Base value type of all rotation representations.

    Not instantiated directly; use one of the concrete representations.
    """

    __slots__ = ("_data", "_usage")

    kind: RepresentationKind

    @classmethod
    def _from_internal(
        cls,
        data: jax.Array,
        usage: RotationUsage = RotationUsage.ACTIVE,
        order: EulerAngleOrder | None = None,
    ) -> Rotation:
        """Create from a raw stored payload without conversion or validation.

        Used by pytree unflatten and conversion outputs.

        Args:
            data (jax.Array): Stored payload.
            usage (RotationUsage): Usage tag.
            order (EulerAngleOrder | None): Ignored for non-Euler kinds.

        Returns:
            Rotation: New instance.
        """
        obj = object.__new__(cls)
        obj._data = data
        obj._usage = RotationUsage(usage)
        return obj

    def _with_data(self, data: jax.Array) -> Rotation:
        return self._from_internal(data, self._usage, self.order)

    def _with_logical(self, logical: jax.Array) -> Rotation:
        return self._with_data(apply_usage(self.kind, logical, self._usage))

    def _with_logical_element(self, index: int, value: float) -> Rotation:
        logical = self.to_implementation()
        return self._with_logical(logical.at[index].set(jnp.asarray(value, dtype=logical.dtype)))

    # Properties

    @property
    def usage(self) -> RotationUsage:
        """Usage tag (``ACTIVE`` or ``PASSIVE``)."""
        return self._usage

    @property
    def order(self) -> EulerAngleOrder | None:
        """Euler order, ``None`` for non-Euler representations."""
        return None

    @property
    def dtype(self):
        """Scalar type of the payload."""
        return self._data.dtype

    def to_implementation(self) -> jax.Array:
        """Return the logical payload, with the usage convention applied.

        Returns:
            jnp.ndarray: Payload as seen by a caller of this usage.
        """
        return apply_usage(self.kind, self._data, self._usage)

    def to_stored_implementation(self) -> jax.Array:
        """Return the raw stored payload.

        The stored payload bypasses the usage convention and is only meant
        for callers that handle the passive sign/transpose themselves.

        Returns:
            jnp.ndarray: Stored payload.
        """
        return self._data

    def __getitem__(self, idx):
        return self.to_implementation()[idx]

    @classmethod
    def identity(cls, *, usage: RotationUsage = RotationUsage.ACTIVE) -> Rotation:
        """Return the identity rotation.

        Args:
            usage (RotationUsage): Usage tag. Default: ``ACTIVE``

        Returns:
            Rotation: Identity in this representation.
        """
        return cls(usage=usage)

    # Conversion

    @classmethod
    def from_rotation(cls, other: Rotation, *, usage: RotationUsage | None = None) -> Rotation:
        """Create from any other rotation.

        Args:
            other (Rotation): Source rotation.
            usage (RotationUsage | None): Expected usage. Defaults to the
                source usage.

        Returns:
            Rotation: Equivalent rotation in this representation.

        Raises:
            TypeError: If ``other`` is not a rotation or ``usage`` differs
                from the usage of ``other``.
        """
        return cls._convert(other, usage, None)

    @classmethod
    def _convert(cls, other: Rotation, usage: RotationUsage | None, order: EulerAngleOrder | None) -> Rotation:
        if not isinstance(other, Rotation):
            raise TypeError(f"Expected a rotation, got {type(other).__name__}")
        usage = resolve_usage(other.usage, usage)
        data = convert_payload(other._data, other.kind, cls.kind, other.order, order)
        return cls._from_internal(data, usage, order)

    def cast(self, dtype) -> Rotation:
        """Return the same rotation with the payload cast to ``dtype``.

        Args:
            dtype: Target float dtype, e.g. ``jnp.float32`` or ``jnp.float64``.

        Returns:
            Rotation: New instance of the same representation and usage.
        """
        if jnp.dtype(dtype) == jnp.dtype(jnp.float64) and not x64_enabled():
            logger.warning(
                "Casting %s to float64 while jax_enable_x64 is disabled; JAX keeps the payload in float32",
                type(self).__name__,
            )
        return self._with_data(self._data.astype(dtype))

    def to_rotation_quaternion(self) -> RotationQuaternion:
        """Convert to ``RotationQuaternion``."""
        from rotjax.rotations.quaternion import RotationQuaternion

        return RotationQuaternion.from_rotation(self)

    def to_rotation_matrix(self) -> RotationMatrix:
        """Convert to ``RotationMatrix``."""
        from rotjax.rotations.rotation_matrix import RotationMatrix

        return RotationMatrix.from_rotation(self)

    def to_angle_axis(self) -> AngleAxis:
        """Convert to ``AngleAxis``."""
        from rotjax.rotations.angle_axis import AngleAxis

        return AngleAxis.from_rotation(self)

    def to_rotation_vector(self) -> RotationVector:
        """Convert to ``RotationVector``."""
        from rotjax.rotations.rotation_vector import RotationVector

        return RotationVector.from_rotation(self)

    def to_euler_angles(self, order: EulerAngleOrder) -> EulerAngles:
        """Convert to ``EulerAngles`` with the given rotation sequence.

        Args:
            order (EulerAngleOrder): Target rotation sequence.

        Returns:
            EulerAngles: Equivalent euler angles.
        """
        from rotjax.rotations.euler_angles import EulerAngles

        return EulerAngles.from_rotation(self, order=order)

    def to_euler_angles_zyx(self) -> EulerAnglesZyx:
        """Convert to yaw-pitch-roll ``EulerAnglesZyx``."""
        from rotjax.rotations.euler_angles import EulerAnglesZyx

        return EulerAnglesZyx.from_rotation(self)

    def to_euler_angles_xyz(self) -> EulerAnglesXyz:
        """Convert to roll-pitch-yaw ``EulerAnglesXyz``."""
        from rotjax.rotations.euler_angles import EulerAnglesXyz

        return EulerAnglesXyz.from_rotation(self)

    def to_euler_angles_zyz(self) -> EulerAnglesZyz:
        """Convert to ``EulerAnglesZyz``."""
        from rotjax.rotations.euler_angles import EulerAnglesZyz

        return EulerAnglesZyz.from_rotation(self)

    # Composition and transformation

    def _check_usage(self, other: Rotation, operation: str) -> None:
        if not isinstance(other, Rotation):
            raise TypeError(f"Cannot {operation} {type(self).__name__} and {type(other).__name__}")
        if other.usage != self.usage:
            raise TypeError(
                f"Cannot {operation} a {self.usage.name} and a {other.usage.name} rotation; usage must match"
            )

    def _check_same_representation(self, other: Rotation, operation: str) -> None:
        self._check_usage(other, operation)
        if other.kind != self.kind or other.order != self.order:
            raise TypeError(
                f"Cannot {operation} {type(self).__name__} and {type(other).__name__}; "
                f"representations must match"
            )

    def compose(self, other: Rotation) -> Rotation:
        """Concatenate two rotations: ``self`` applied after ``other``.

        Args:
            other (Rotation): Rotation of the same representation and usage.

        Returns:
            Rotation: The composition, in this representation and usage.

        Raises:
            TypeError: If representation, Euler order or usage differ.
        """
        self._check_same_representation(other, "compose")
        return self._with_data(compose_payload(self.kind, self._data, other._data, self.order))

    def __mul__(self, other: Rotation) -> Rotation:
        if not isinstance(other, Rotation):
            return NotImplemented
        return self.compose(other)

    def inverted(self) -> Rotation:
        """Return the inverse rotation in the same representation and usage."""
        return self._with_data(invert_payload(self.kind, self._data, self.order))

    def get_unique(self) -> Rotation:
        """Return the canonical representative of this rotation.

        Canonicalization is applied to the logical payload, so the
        documented ranges hold for the values returned by the accessors.

        Returns:
            Rotation: Canonical rotation of the same representation and usage.
        """
        logical = unique_payload(self.kind, self.to_implementation(), self.order)
        return self._with_logical(logical)

    def _stored_matrix(self) -> jax.Array:
        return convert_payload(self._data, self.kind, RepresentationKind.ROTATION_MATRIX, self.order)

    def _stored_quaternion(self) -> jax.Array:
        return convert_payload(self._data, self.kind, RepresentationKind.ROTATION_QUATERNION, self.order)

    def rotate(self, v: jax.Array) -> jax.Array:
        """Apply the rotation to a vector or a batch of column vectors.

        The stored payload already encodes the usage convention, so the
        same matrix product serves both usages.

        Args:
            v (jax.Array): Array of shape ``(3,)`` or ``(3, N)``.

        Returns:
            jnp.ndarray: Rotated vector(s), same shape as ``v``.
        """
        return self._stored_matrix() @ jnp.asarray(v)

    def inverse_rotate(self, v: jax.Array) -> jax.Array:
        """Apply the inverse rotation to a vector or a batch of column vectors.

        Args:
            v (jax.Array): Array of shape ``(3,)`` or ``(3, N)``.

        Returns:
            jnp.ndarray: Rotated vector(s), same shape as ``v``.
        """
        return self._stored_matrix().T @ jnp.asarray(v)

    def box_plus(self, vector: jax.Array) -> Rotation:
        """Perturb the rotation by a rotation vector: ``exp(vector) * self``.

        ``vector`` is interpreted with the usage of this rotation.

        Args:
            vector (jax.Array): Rotation vector of shape ``(3,)``.

        Returns:
            Rotation: Perturbed rotation in this representation and usage.
        """
        delta = apply_usage(
            RepresentationKind.ROTATION_VECTOR, jnp.asarray(vector, dtype=self._data.dtype), self._usage
        )
        q = quaternion_multiply(rotation_vector_to_quaternion(delta), self._stored_quaternion())
        return self._with_data(
            convert_payload(q, RepresentationKind.ROTATION_QUATERNION, self.kind, dest_order=self.order)
        )

    def box_minus(self, other: Rotation) -> jax.Array:
        """Rotation vector ``log(self * other^-1)``, the inverse of :meth:`box_plus`.

        Args:
            other (Rotation): Rotation of the same usage (any representation).

        Returns:
            jnp.ndarray: Rotation vector of shape ``(3,)`` in this usage.
        """
        self._check_usage(other, "subtract")
        q = quaternion_multiply(self._stored_quaternion(), quaternion_conjugate(other._stored_quaternion()))
        return apply_usage(RepresentationKind.ROTATION_VECTOR, quaternion_to_rotation_vector(q), self._usage)

    # Comparison

    def get_disparity_angle(self, other: Rotation) -> jax.Array:
        """Angle of the rotation that takes ``self`` onto ``other``.

        Works across representations and is insensitive to the ``q``/``-q``
        and Euler-angle ambiguities.

        Args:
            other (Rotation): Rotation of the same usage.

        Returns:
            jax.Array: Angle in ``[0, pi]`` radians.
        """
        self._check_usage(other, "compare")
        d = quaternion_multiply(quaternion_conjugate(self._stored_quaternion()), other._stored_quaternion())
        return 2.0 * jnp.arctan2(safe_norm(d[1:]), jnp.abs(d[0]))

    def is_near(self, other: Rotation, tol: float | None = None) -> jax.Array:
        """Return whether two rotations agree within an angular tolerance.

        Args:
            other (Rotation): Rotation of the same usage.
            tol (float | None): Tolerance in radians. Default: the rotation
                epsilon of the less precise of the two payloads.

        Returns:
            jax.Array: Boolean scalar.
        """
        angle = self.get_disparity_angle(other)
        if tol is None:
            tol = max(get_rotation_epsilon(self.dtype), get_rotation_epsilon(other.dtype))
        return angle <= tol

    def __eq__(self, other: object) -> bool:
        if (
            not isinstance(other, Rotation)
            or other.kind != self.kind
            or other.order != self.order
            or other.usage != self.usage
        ):
            return NotImplemented
        return bool(self.is_near(other))

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    # String representations

    def _fields(self) -> list[tuple[str, jax.Array]]:
        return [("data", self.to_implementation())]

    def __str__(self) -> str:
        parts = []
        for name, value in self._fields():
            arr = jnp.asarray(value)
            if arr.ndim == 0:
                parts.append(f"{name}={float(arr):.6f}")
            else:
                parts.append(f"{name}=[" + ", ".join(f"{float(x):.6f}" for x in arr.ravel()) + "]")
        return f"{type(self).__name__}({', '.join(parts)}, usage={self._usage.name})"

    def __repr__(self) -> str:
        parts = []
        for name, value in self._fields():
            arr = jnp.asarray(value)
            if arr.ndim == 0:
                parts.append(f"{name}={float(arr)}")
            else:
                parts.append(f"{name}=[" + ", ".join(f"{float(x)}" for x in arr.ravel()) + "]")
        return f"{type(self).__name__}({', '.join(parts)}, usage={self._usage.name})"


def register_rotation_pytree(cls: type[Rotation]) -> type[Rotation]:
    """Register a rotation class as a JAX pytree.

    The stored payload is the sole leaf; usage and Euler order are
    auxiliary data.

    Args:
        cls (type[Rotation]): Concrete rotation class.

    Returns:
        type[Rotation]: ``cls``, unchanged.
    """
    jax.tree_util.register_pytree_node(
        cls,
        lambda r: ((r._data,), (r._usage, r.order)),
        lambda aux, children: cls._from_internal(children[0], *aux),
    )
    return cls
