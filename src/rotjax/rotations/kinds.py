"""Representation tags used to dispatch rotation kernels.

Provides the ``RepresentationKind`` enum naming each payload layout and the
``EulerAngleOrder`` enum defining the 12 standard Euler angle rotation
sequences, together with helpers that decode an order into axis indices.

Both enums are hashable and used as static (auxiliary) pytree data, so all
dispatch on them happens at trace time.
"""

from __future__ import annotations

import enum


class RepresentationKind(enum.IntEnum):
    """Payload layout of a rotation.

    Attributes:
        ROTATION_QUATERNION: ``(4,)`` Hamilton quaternion ``[w, x, y, z]``.
        ROTATION_MATRIX: ``(3, 3)`` rotation matrix.
        ANGLE_AXIS: ``(4,)`` array ``[angle, ax, ay, az]``.
        ROTATION_VECTOR: ``(3,)`` axis scaled by the rotation angle.
        EULER_ANGLES: ``(3,)`` angles in composition order.
    """

    ROTATION_QUATERNION = 0
    ROTATION_MATRIX = 1
    ANGLE_AXIS = 2
    ROTATION_VECTOR = 3
    EULER_ANGLES = 4


class EulerAngleOrder(enum.IntEnum):
    """The 12 standard Euler angle rotation sequences.

    Each member names the axes of three successive intrinsic rotations.
    ``ZYX`` is the rotation ``Rz(yaw) @ Ry(pitch) @ Rx(roll)``, i.e. first
    about Z, then about the new Y', then about the new X''.

    Attributes:
        XYX: X-Y-X symmetric sequence (index 0).
        XYZ: X-Y-Z Tait-Bryan sequence, also known as Roll-Pitch-Yaw (index 1).
        XZX: X-Z-X symmetric sequence (index 2).
        XZY: X-Z-Y Tait-Bryan sequence (index 3).
        YXY: Y-X-Y symmetric sequence (index 4).
        YXZ: Y-X-Z Tait-Bryan sequence (index 5).
        YZX: Y-Z-X Tait-Bryan sequence (index 6).
        YZY: Y-Z-Y symmetric sequence (index 7).
        ZXY: Z-X-Y Tait-Bryan sequence (index 8).
        ZXZ: Z-X-Z symmetric sequence (index 9).
        ZYX: Z-Y-X Tait-Bryan sequence, also known as Yaw-Pitch-Roll (index 10).
        ZYZ: Z-Y-Z symmetric sequence (index 11).
    """

    XYX = 0
    XYZ = 1
    XZX = 2
    XZY = 3
    YXY = 4
    YXZ = 5
    YZX = 6
    YZY = 7
    ZXY = 8
    ZXZ = 9
    ZYX = 10
    ZYZ = 11


_AXIS_INDEX = {"X": 0, "Y": 1, "Z": 2}

_CYCLIC = ((0, 1, 2), (1, 2, 0), (2, 0, 1))


def euler_axes(order: EulerAngleOrder) -> tuple[int, int, int]:
    """Return the axis indices (0=X, 1=Y, 2=Z) of an Euler order.

    Args:
        order (EulerAngleOrder): Rotation sequence.

    Returns:
        tuple[int, int, int]: Axis index of the first, second and third rotation.
    """
    name = EulerAngleOrder(order).name
    return _AXIS_INDEX[name[0]], _AXIS_INDEX[name[1]], _AXIS_INDEX[name[2]]


def is_symmetric(order: EulerAngleOrder) -> bool:
    """Return ``True`` for proper (symmetric) Euler sequences such as ZYZ.

    Args:
        order (EulerAngleOrder): Rotation sequence.

    Returns:
        bool: Whether the first and third axes coincide.
    """
    first, _, third = euler_axes(order)
    return first == third


def axis_parity(i: int, j: int, k: int) -> float:
    """Sign of the axis permutation ``(i, j, k)``.

    Args:
        i (int): First axis index.
        j (int): Second axis index.
        k (int): Third axis index.

    Returns:
        float: ``+1.0`` for cyclic permutations of ``(0, 1, 2)``, ``-1.0`` otherwise.
    """
    return 1.0 if (i, j, k) in _CYCLIC else -1.0
