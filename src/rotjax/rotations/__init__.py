"""Rotation representations for 3D rotations.

Provides five interconvertible rotation types, each tagged with an
active or passive :class:`RotationUsage`:

- :class:`RotationQuaternion` -- unit Hamilton quaternion ``[w, x, y, z]``
- :class:`RotationMatrix` -- 3x3 rotation matrix (SO(3))
- :class:`AngleAxis` -- rotation angle and axis
- :class:`RotationVector` -- axis scaled by the rotation angle
- :class:`EulerAngles` -- three successive rotations with 12 possible orders,
  plus the named conventions :class:`EulerAnglesZyx`, :class:`EulerAnglesXyz`
  and :class:`EulerAnglesZyz`

Also re-exports the elementary rotation functions :func:`Rx`, :func:`Ry`,
:func:`Rz`.
"""

from .rotation_matrices import (
    Rx,
    Ry,
    Rz,
)

from .kinds import EulerAngleOrder, RepresentationKind
from .usage import RotationUsage
from .rotation import Rotation
from .quaternion import RotationQuaternion
from .rotation_matrix import RotationMatrix
from .angle_axis import AngleAxis
from .rotation_vector import RotationVector
from .euler_angles import (
    EulerAngles,
    EulerAnglesRpy,
    EulerAnglesXyz,
    EulerAnglesYpr,
    EulerAnglesZyx,
    EulerAnglesZyz,
)

__all__ = [
    # Elementary rotations
    "Rx",
    "Ry",
    "Rz",
    # Tags
    "EulerAngleOrder",
    "RepresentationKind",
    "RotationUsage",
    # Rotation representations
    "Rotation",
    "RotationQuaternion",
    "RotationMatrix",
    "AngleAxis",
    "RotationVector",
    "EulerAngles",
    "EulerAnglesZyx",
    "EulerAnglesXyz",
    "EulerAnglesZyz",
    "EulerAnglesYpr",
    "EulerAnglesRpy",
]
