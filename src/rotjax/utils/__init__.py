"""Shared utility functions for rotjax.

Provides angle conversion and wrapping helpers.
"""

from rotjax.utils._angle import (
    floating_point_modulo,
    from_radians,
    to_radians,
    wrap_angle,
)

__all__ = [
    "floating_point_modulo",
    "from_radians",
    "to_radians",
    "wrap_angle",
]
