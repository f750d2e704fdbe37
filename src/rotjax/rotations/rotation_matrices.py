import jax.numpy as jnp

from rotjax.utils import to_radians


def Rx(angle:float, use_degrees:bool=False) -> jnp.ndarray:
    """Active rotation matrix, for a rotation about the x-axis.

    Multiplying a vector by the returned matrix rotates the vector
    counter-clockwise about +x as seen looking back along the axis.

    Args:
        angle (float): Angle of rotation.
        use_degrees (bool): Handle input in degrees. Default: ``False``

    Returns:
        jnp.ndarray: Rotation matrix.
    """
    angle = to_radians(angle, use_degrees)

    c = jnp.cos(angle)
    s = jnp.sin(angle)

    return jnp.array([[1.0,  0.0,  0.0],
                      [0.0,   +c,   -s],
                      [0.0,   +s,   +c]])

def Ry(angle:float, use_degrees:bool=False) -> jnp.ndarray:
    """Active rotation matrix, for a rotation about the y-axis.

    Args:
        angle (float): Angle of rotation.
        use_degrees (bool): Handle input in degrees. Default: ``False``

    Returns:
        jnp.ndarray: Rotation matrix.
    """
    angle = to_radians(angle, use_degrees)

    c = jnp.cos(angle)
    s = jnp.sin(angle)

    return jnp.array([[ +c,  0.0,   +s],
                      [0.0, +1.0,  0.0],
                      [ -s,  0.0,   +c]])

def Rz(angle:float, use_degrees:bool=False) -> jnp.ndarray:
    """Active rotation matrix, for a rotation about the z-axis.

    Args:
        angle (float): Angle of rotation.
        use_degrees (bool): Handle input in degrees. Default: ``False``

    Returns:
        jnp.ndarray: Rotation matrix.
    """
    angle = to_radians(angle, use_degrees)

    c = jnp.cos(angle)
    s = jnp.sin(angle)

    return jnp.array([[ +c,   -s,  0.0],
                      [ +s,   +c,  0.0],
                      [0.0,  0.0,  1.0]])

ELEMENTARY_ROTATIONS = (Rx, Ry, Rz)
"""Elementary rotations indexed by axis (0=X, 1=Y, 2=Z)."""
