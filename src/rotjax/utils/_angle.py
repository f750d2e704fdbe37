"""Angle and unit conversion helpers.

These helpers wrap the ``use_degrees`` convention used throughout
rotjax, providing JAX-traceable degree/radian conversion and angle
wrapping via ``jnp.where``.
"""

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from rotjax.constants import PI, TWO_PI


def to_radians(angle: ArrayLike, use_degrees: bool) -> Array:
    """Convert angle to radians if ``use_degrees`` is True.

    Args:
        angle (ArrayLike): Angle value.
        use_degrees (bool): If ``True``, treat ``angle`` as degrees and convert.

    Returns:
        Angle in radians.
    """
    return jnp.where(use_degrees, jnp.deg2rad(angle), angle)


def from_radians(angle: ArrayLike, use_degrees: bool) -> Array:
    """Convert angle from radians to degrees if ``use_degrees`` is True.

    Args:
        angle (ArrayLike): Angle in radians.
        use_degrees (bool): If ``True``, convert to degrees.

    Returns:
        Angle in radians or degrees.
    """
    return jnp.where(use_degrees, jnp.rad2deg(angle), angle)


def floating_point_modulo(x: ArrayLike, y: ArrayLike) -> Array:
    """Floored modulo that never returns the excluded end of its range.

    For ``y > 0`` the result lies in ``[0, y)``; for ``y < 0`` it lies in
    ``(y, 0]``.  Results that round onto the excluded boundary (for example
    ``mod(-1e-16, 360)``, which evaluates to ``360`` in floating point) are
    mapped to ``0``.  A zero modulus returns ``x`` unchanged.

    Args:
        x (ArrayLike): Dividend.
        y (ArrayLike): Modulus.

    Returns:
        Array: ``x mod y``.
    """
    x = jnp.asarray(x)
    y = jnp.asarray(y, dtype=x.dtype)
    safe_y = jnp.where(y == 0.0, 1.0, y)
    m = x - safe_y * jnp.floor(x / safe_y)

    wrapped_up = jnp.where(safe_y + m == safe_y, 0.0, safe_y + m)
    positive = jnp.where(m >= safe_y, 0.0, jnp.where(m < 0.0, wrapped_up, m))
    negative = jnp.where(m <= safe_y, 0.0, jnp.where(m > 0.0, wrapped_up, m))

    result = jnp.where(safe_y > 0.0, positive, negative)
    return jnp.where(y == 0.0, x, result)


def wrap_angle(angle: ArrayLike) -> Array:
    """Wrap an angle into ``[-pi, pi)``.

    Angles that already lie in the range are returned bit-for-bit, which
    keeps repeated wrapping idempotent.

    Args:
        angle (ArrayLike): Angle in radians.

    Returns:
        Array: Equivalent angle in ``[-pi, pi)``.
    """
    angle = jnp.asarray(angle)
    wrapped = floating_point_modulo(angle + PI, TWO_PI) - PI
    return jnp.where((angle >= -PI) & (angle < PI), angle, wrapped)
