"""Precision-dependent thresholds for rotation kernels.

A payload that has been cast with :meth:`~rotjax.rotations.Rotation.cast`
need not match the configured dtype, so the kernels look the threshold up
from the dtype of the array they are working on.  The configured dtype is
only the fallback when no array is at hand.
"""

from __future__ import annotations

import jax.numpy as jnp

from rotjax.config import get_dtype

_EPSILONS = {
    jnp.dtype(jnp.float64): 1e-12,
    jnp.dtype(jnp.float32): 1e-6,
}

# float16, bfloat16
_LOW_PRECISION_EPSILON = 1e-3


def get_rotation_epsilon(dtype=None) -> float:
    """Return the rotation tolerance for a float dtype.

    The value decides when an axis counts as vanishing, when an Euler
    extraction is at gimbal lock, and is the default tolerance of
    :meth:`~rotjax.rotations.Rotation.is_near`:

    - ``float64``:  1e-12
    - ``float32``:  1e-6
    - ``float16``:  1e-3
    - ``bfloat16``: 1e-3

    Args:
        dtype: Dtype of the payload being processed. Default: the
            configured dtype from :func:`rotjax.config.get_dtype`.

    Returns:
        float: Absolute tolerance.
    """
    if dtype is None:
        dtype = get_dtype()
    return _EPSILONS.get(jnp.dtype(dtype), _LOW_PRECISION_EPSILON)
