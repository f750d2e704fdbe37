"""Euler angle rotation representations.

Provides the generic ``EulerAngles`` class, parameterized by one of the 12
``EulerAngleOrder`` sequences, and the named conventions built on it:

- ``EulerAnglesZyx``: yaw-pitch-roll, ``Rz(yaw) @ Ry(pitch) @ Rx(roll)``.
- ``EulerAnglesXyz``: roll-pitch-yaw, ``Rx(roll) @ Ry(pitch) @ Rz(yaw)``.
- ``EulerAnglesZyz``: symmetric ``Rz(phi) @ Ry(theta) @ Rz(psi)``.

Angles are stored in radians in composition order ``[phi, theta, psi]``.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp

from rotjax.config import get_dtype
from rotjax.rotations.kinds import EulerAngleOrder, RepresentationKind
from rotjax.rotations.rotation import Rotation, register_rotation_pytree
from rotjax.rotations.usage import RotationUsage, apply_usage
from rotjax.utils import from_radians, to_radians


class EulerAngles(Rotation):
    """Rotation as three successive intrinsic rotations about named axes.

    Internal storage is a shape ``(3,)`` array ``[phi, theta, psi]`` in
    radians; the ``use_degrees`` flag on the constructor converts degree
    inputs.  A ``PASSIVE`` instance stores the negated angles.

    This class is registered as a JAX pytree.  The angle array is the leaf;
    usage and ``order`` are auxiliary data.

    Args:
        order (EulerAngleOrder): Rotation sequence (e.g. ``EulerAngleOrder.ZYX``).
        phi (float): First rotation angle.
        theta (float): Second rotation angle.
        psi (float): Third rotation angle.
        usage (RotationUsage): Usage tag. Default: ``ACTIVE``
        use_degrees (bool): If ``True``, interpret angles as degrees. Default: ``False``
    """

    __slots__ = ("_order",)

    kind = RepresentationKind.EULER_ANGLES
    _default_order: EulerAngleOrder | None = None

    def __init__(
        self,
        order: EulerAngleOrder,
        phi: float = 0.0,
        theta: float = 0.0,
        psi: float = 0.0,
        usage: RotationUsage = RotationUsage.ACTIVE,
        use_degrees: bool = False,
    ) -> None:
        _float = get_dtype()
        angles = jnp.array([_float(phi), _float(theta), _float(psi)])
        angles = to_radians(angles, use_degrees).astype(_float)
        self._order = EulerAngleOrder(order)
        self._usage = RotationUsage(usage)
        self._data = apply_usage(self.kind, angles, self._usage)

    @classmethod
    def _resolve_order(cls, order: EulerAngleOrder | None) -> EulerAngleOrder:
        if order is None:
            if cls._default_order is None:
                raise ValueError(f"{cls.__name__} requires an explicit EulerAngleOrder")
            return cls._default_order
        order = EulerAngleOrder(order)
        if cls._default_order is not None and order != cls._default_order:
            raise ValueError(f"{cls.__name__} only supports order {cls._default_order.name}, got {order.name}")
        return order

    @classmethod
    def _from_internal(
        cls,
        data: jax.Array,
        usage: RotationUsage = RotationUsage.ACTIVE,
        order: EulerAngleOrder | None = None,
    ) -> EulerAngles:
        """Create from a raw stored angle array without conversion.

        Args:
            data (jax.Array): Stored angles of shape ``(3,)`` in radians.
            usage (RotationUsage): Usage tag.
            order (EulerAngleOrder | None): Rotation sequence. May be omitted
                for the named conventions.

        Returns:
            EulerAngles: New instance.
        """
        obj = super()._from_internal(data, usage)
        obj._order = cls._resolve_order(order)
        return obj

    # Factory methods

    @classmethod
    def identity(
        cls,
        *,
        order: EulerAngleOrder | None = None,
        usage: RotationUsage = RotationUsage.ACTIVE,
    ) -> EulerAngles:
        """Zero rotation in the given sequence.

        Args:
            order (EulerAngleOrder | None): Rotation sequence. Optional for
                the named conventions.
            usage (RotationUsage): Usage tag. Default: ``ACTIVE``

        Returns:
            EulerAngles: Angles ``[0, 0, 0]``.
        """
        return cls._from_internal(jnp.zeros(3, dtype=get_dtype()), usage, order)

    @classmethod
    def from_rotation(
        cls,
        other: Rotation,
        *,
        order: EulerAngleOrder | None = None,
        usage: RotationUsage | None = None,
    ) -> EulerAngles:
        """Create from any other rotation.

        Args:
            other (Rotation): Source rotation.
            order (EulerAngleOrder | None): Target sequence. Optional for the
                named conventions.
            usage (RotationUsage | None): Expected usage. Defaults to the
                source usage.

        Returns:
            EulerAngles: Equivalent Euler angles.

        Raises:
            TypeError: If ``usage`` differs from the usage of ``other``.
        """
        return cls._convert(other, usage, cls._resolve_order(order))

    @classmethod
    def from_vector(
        cls,
        v: jax.Array,
        order: EulerAngleOrder | None = None,
        usage: RotationUsage = RotationUsage.ACTIVE,
        use_degrees: bool = False,
    ) -> EulerAngles:
        """Create from a 3-element vector ``[phi, theta, psi]``.

        Args:
            v (jax.Array): Array-like of shape ``(3,)``.
            order (EulerAngleOrder | None): Rotation sequence. Optional for
                the named conventions.
            usage (RotationUsage): Usage tag. Default: ``ACTIVE``
            use_degrees (bool): Interpret ``v`` in degrees. Default: ``False``

        Returns:
            EulerAngles: New Euler angles.
        """
        _float = get_dtype()
        angles = to_radians(jnp.asarray(v, dtype=_float), use_degrees).astype(_float)
        return cls._from_internal(apply_usage(cls.kind, angles, usage), usage, order)

    def to_vector(self, use_degrees: bool = False) -> jax.Array:
        """Return the logical angles ``[phi, theta, psi]``.

        Args:
            use_degrees (bool): Return degrees instead of radians.

        Returns:
            jnp.ndarray: Array of shape ``(3,)``.
        """
        return from_radians(self.to_implementation(), use_degrees)

    # Properties

    @property
    def order(self) -> EulerAngleOrder:
        """Rotation sequence."""
        return self._order

    @property
    def phi(self) -> jax.Array:
        """First rotation angle in radians."""
        return self.to_implementation()[0]

    @property
    def theta(self) -> jax.Array:
        """Second rotation angle in radians."""
        return self.to_implementation()[1]

    @property
    def psi(self) -> jax.Array:
        """Third rotation angle in radians."""
        return self.to_implementation()[2]

    def with_phi(self, value: float) -> EulerAngles:
        """Return a copy with a different first angle (radians)."""
        return self._with_logical_element(0, value)

    def with_theta(self, value: float) -> EulerAngles:
        """Return a copy with a different second angle (radians)."""
        return self._with_logical_element(1, value)

    def with_psi(self, value: float) -> EulerAngles:
        """Return a copy with a different third angle (radians)."""
        return self._with_logical_element(2, value)

    def __str__(self) -> str:
        a = self.to_implementation()
        return (
            f"{type(self).__name__}(order={self._order.name}, "
            f"phi={float(a[0]):.6f}, theta={float(a[1]):.6f}, psi={float(a[2]):.6f}, "
            f"usage={self._usage.name})"
        )

    def __repr__(self) -> str:
        a = self.to_implementation()
        return (
            f"{type(self).__name__}(order={self._order.name}, "
            f"phi={float(a[0])}, theta={float(a[1])}, psi={float(a[2])}, "
            f"usage={self._usage.name})"
        )


class EulerAnglesZyx(EulerAngles):
    """Yaw-pitch-roll angles, the ``ZYX`` sequence.

    Args:
        yaw (float): Rotation about z.
        pitch (float): Rotation about the new y.
        roll (float): Rotation about the new x.
        usage (RotationUsage): Usage tag. Default: ``ACTIVE``
        use_degrees (bool): Interpret angles in degrees. Default: ``False``
    """

    __slots__ = ()

    _default_order = EulerAngleOrder.ZYX

    def __init__(
        self,
        yaw: float = 0.0,
        pitch: float = 0.0,
        roll: float = 0.0,
        usage: RotationUsage = RotationUsage.ACTIVE,
        use_degrees: bool = False,
    ) -> None:
        super().__init__(EulerAngleOrder.ZYX, yaw, pitch, roll, usage=usage, use_degrees=use_degrees)

    @property
    def yaw(self) -> jax.Array:
        """Rotation about z in radians."""
        return self.phi

    @property
    def pitch(self) -> jax.Array:
        """Rotation about y in radians."""
        return self.theta

    @property
    def roll(self) -> jax.Array:
        """Rotation about x in radians."""
        return self.psi

    z = yaw
    y = pitch
    x = roll

    def with_yaw(self, value: float) -> EulerAnglesZyx:
        return self.with_phi(value)

    def with_pitch(self, value: float) -> EulerAnglesZyx:
        return self.with_theta(value)

    def with_roll(self, value: float) -> EulerAnglesZyx:
        return self.with_psi(value)

    def __str__(self) -> str:
        a = self.to_implementation()
        return (
            f"EulerAnglesZyx(yaw={float(a[0]):.6f}, pitch={float(a[1]):.6f}, roll={float(a[2]):.6f}, "
            f"usage={self._usage.name})"
        )


class EulerAnglesXyz(EulerAngles):
    """Roll-pitch-yaw angles, the ``XYZ`` sequence.

    Args:
        roll (float): Rotation about x.
        pitch (float): Rotation about the new y.
        yaw (float): Rotation about the new z.
        usage (RotationUsage): Usage tag. Default: ``ACTIVE``
        use_degrees (bool): Interpret angles in degrees. Default: ``False``
    """

    __slots__ = ()

    _default_order = EulerAngleOrder.XYZ

    def __init__(
        self,
        roll: float = 0.0,
        pitch: float = 0.0,
        yaw: float = 0.0,
        usage: RotationUsage = RotationUsage.ACTIVE,
        use_degrees: bool = False,
    ) -> None:
        super().__init__(EulerAngleOrder.XYZ, roll, pitch, yaw, usage=usage, use_degrees=use_degrees)

    @property
    def roll(self) -> jax.Array:
        """Rotation about x in radians."""
        return self.phi

    @property
    def pitch(self) -> jax.Array:
        """Rotation about y in radians."""
        return self.theta

    @property
    def yaw(self) -> jax.Array:
        """Rotation about z in radians."""
        return self.psi

    x = roll
    y = pitch
    z = yaw

    def with_roll(self, value: float) -> EulerAnglesXyz:
        return self.with_phi(value)

    def with_pitch(self, value: float) -> EulerAnglesXyz:
        return self.with_theta(value)

    def with_yaw(self, value: float) -> EulerAnglesXyz:
        return self.with_psi(value)


class EulerAnglesZyz(EulerAngles):
    """Symmetric ``ZYZ`` sequence ``Rz(phi) @ Ry(theta) @ Rz(psi)``."""

    __slots__ = ()

    _default_order = EulerAngleOrder.ZYZ

    def __init__(
        self,
        phi: float = 0.0,
        theta: float = 0.0,
        psi: float = 0.0,
        usage: RotationUsage = RotationUsage.ACTIVE,
        use_degrees: bool = False,
    ) -> None:
        super().__init__(EulerAngleOrder.ZYZ, phi, theta, psi, usage=usage, use_degrees=use_degrees)


EulerAnglesYpr = EulerAnglesZyx
EulerAnglesRpy = EulerAnglesXyz


# Register as JAX pytree
for _cls in (EulerAngles, EulerAnglesZyx, EulerAnglesXyz, EulerAnglesZyz):
    register_rotation_pytree(_cls)
