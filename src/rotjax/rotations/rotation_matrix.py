"""Rotation matrix representation.

Provides the ``RotationMatrix`` class representing a rotation as a 3x3
orthogonal matrix with determinant +1 (SO(3)).

The constructor validates SO(3) membership of the matrix it is given.
``_from_internal`` bypasses validation for pytree unflatten and conversion
outputs.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp

from rotjax.config import get_dtype
from rotjax.rotations.kinds import RepresentationKind
from rotjax.rotations.rotation import Rotation, register_rotation_pytree
from rotjax.rotations.rotation_matrices import Rx, Ry, Rz
from rotjax.rotations.usage import RotationUsage, apply_usage


def _is_so3(matrix: jax.Array, tol: float = 1e-6) -> bool:
    """Check if a matrix is in SO(3).

    Tests orthogonality (R^T R ≈ I) and positive determinant (det ≈ +1).

    Args:
        matrix (jax.Array): Array of shape ``(3, 3)``.
        tol (float): Tolerance for the checks.

    Returns:
        bool: ``True`` if the matrix is a proper rotation matrix.
    """
    orth_err = jnp.max(jnp.abs(matrix.T @ matrix - jnp.eye(3)))
    det = jnp.linalg.det(matrix)
    return bool(orth_err < tol and det > 0.0)


def _element(row: int, col: int) -> property:
    def getter(self) -> jax.Array:
        return self.to_implementation()[row, col]

    getter.__doc__ = f"Element ({row}, {col}) of the logical matrix."
    return property(getter)


class RotationMatrix(Rotation):
    """3x3 rotation matrix (direction cosine matrix).

    Internal storage is a shape ``(3, 3)`` array acting as ``v' = R @ v``.
    A ``PASSIVE`` matrix stores the transpose of the elements passed to the
    constructor.

    This class is registered as a JAX pytree with the stored matrix as the
    sole leaf.

    Args:
        r11 (float): Element (0, 0).
        r12 (float): Element (0, 1).
        r13 (float): Element (0, 2).
        r21 (float): Element (1, 0).
        r22 (float): Element (1, 1).
        r23 (float): Element (1, 2).
        r31 (float): Element (2, 0).
        r32 (float): Element (2, 1).
        r33 (float): Element (2, 2).
        usage (RotationUsage): Usage tag. Default: ``ACTIVE``
        validate (bool): Check SO(3) membership. Default: ``True``

    Raises:
        ValueError: If ``validate`` is set and the matrix is not a proper
            rotation matrix.
    """

    __slots__ = ()

    kind = RepresentationKind.ROTATION_MATRIX

    def __init__(
        self,
        r11: float = 1.0,
        r12: float = 0.0,
        r13: float = 0.0,
        r21: float = 0.0,
        r22: float = 1.0,
        r23: float = 0.0,
        r31: float = 0.0,
        r32: float = 0.0,
        r33: float = 1.0,
        usage: RotationUsage = RotationUsage.ACTIVE,
        validate: bool = True,
    ) -> None:
        _float = get_dtype()
        data = jnp.array(
            [
                [_float(r11), _float(r12), _float(r13)],
                [_float(r21), _float(r22), _float(r23)],
                [_float(r31), _float(r32), _float(r33)],
            ]
        )
        if validate and not _is_so3(data):
            raise ValueError(
                f"Matrix is not a proper rotation matrix. det={float(jnp.linalg.det(data)):.6f}"
            )
        self._usage = RotationUsage(usage)
        self._data = apply_usage(self.kind, data, self._usage)

    r11 = _element(0, 0)
    r12 = _element(0, 1)
    r13 = _element(0, 2)
    r21 = _element(1, 0)
    r22 = _element(1, 1)
    r23 = _element(1, 2)
    r31 = _element(2, 0)
    r32 = _element(2, 1)
    r33 = _element(2, 2)

    # Factory methods

    @classmethod
    def from_matrix(
        cls,
        matrix: jax.Array,
        usage: RotationUsage = RotationUsage.ACTIVE,
        validate: bool = True,
    ) -> RotationMatrix:
        """Create from a 3x3 array.

        Args:
            matrix (jax.Array): Array-like of shape ``(3, 3)``.
            usage (RotationUsage): Usage tag. Default: ``ACTIVE``
            validate (bool): Check SO(3) membership. Default: ``True``

        Returns:
            RotationMatrix: New rotation matrix.
        """
        m = jnp.asarray(matrix, dtype=get_dtype())
        if validate and not _is_so3(m):
            raise ValueError(
                f"Matrix is not a proper rotation matrix. det={float(jnp.linalg.det(m)):.6f}"
            )
        return cls._from_internal(apply_usage(cls.kind, m, usage), usage)

    @classmethod
    def rotation_x(
        cls, angle: float, use_degrees: bool = False, usage: RotationUsage = RotationUsage.ACTIVE
    ) -> RotationMatrix:
        """Elementary rotation about the x-axis.

        Args:
            angle (float): Rotation angle.
            use_degrees (bool): Interpret ``angle`` in degrees. Default: ``False``
            usage (RotationUsage): Usage tag. Default: ``ACTIVE``

        Returns:
            RotationMatrix: Matrix whose logical value is ``Rx(angle)``.
        """
        return cls.from_matrix(Rx(angle, use_degrees), usage=usage, validate=False)

    @classmethod
    def rotation_y(
        cls, angle: float, use_degrees: bool = False, usage: RotationUsage = RotationUsage.ACTIVE
    ) -> RotationMatrix:
        """Elementary rotation about the y-axis (see :meth:`rotation_x`)."""
        return cls.from_matrix(Ry(angle, use_degrees), usage=usage, validate=False)

    @classmethod
    def rotation_z(
        cls, angle: float, use_degrees: bool = False, usage: RotationUsage = RotationUsage.ACTIVE
    ) -> RotationMatrix:
        """Elementary rotation about the z-axis (see :meth:`rotation_x`)."""
        return cls.from_matrix(Rz(angle, use_degrees), usage=usage, validate=False)

    def to_matrix(self) -> jax.Array:
        """Return the logical 3x3 matrix.

        Returns:
            jnp.ndarray: Array of shape ``(3, 3)``.
        """
        return self.to_implementation()

    # Methods

    def determinant(self) -> jax.Array:
        """Determinant of the matrix, ``+1`` for a proper rotation."""
        return jnp.linalg.det(self._data)

    def orthonormalized(self) -> RotationMatrix:
        """Project the matrix back onto SO(3).

        Uses the SVD ``R = U S V^T`` and returns ``U V^T``, the closest
        rotation in the Frobenius norm.  The last column of ``U`` is flipped
        when needed to keep the determinant at ``+1``.

        Returns:
            RotationMatrix: Orthonormal matrix of the same usage.
        """
        U, _, Vt = jnp.linalg.svd(self._data)
        d = jnp.sign(jnp.linalg.det(U @ Vt))
        U = U.at[:, -1].multiply(d)
        return self._with_data(U @ Vt)

    def _fields(self):
        return [("matrix", self.to_implementation())]


# Register as JAX pytree
register_rotation_pytree(RotationMatrix)
