"""
rotjax is a library of interconvertible 3D rotation representations implemented in JAX.
"""

from .constants import (
    DEG2RAD,
    RAD2DEG,
)

from .rotations import (
    Rx,
    Ry,
    Rz,
    EulerAngleOrder,
    RepresentationKind,
    RotationUsage,
    Rotation,
    RotationQuaternion,
    RotationMatrix,
    AngleAxis,
    RotationVector,
    EulerAngles,
    EulerAnglesZyx,
    EulerAnglesXyz,
    EulerAnglesZyz,
    EulerAnglesYpr,
    EulerAnglesRpy,
)

from .config import set_dtype, get_dtype

from .utils import wrap_angle
