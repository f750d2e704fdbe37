"""
The `constants` module defines the mathematical constants used by the rotation kernels.
"""

from jax.numpy import pi as PI

"""
Half of pi. The boundary of the middle Tait-Bryan angle. Units: *rad*
"""
HALF_PI = PI / 2.0

"""
Two pi. The period used when wrapping angles. Units: *rad*
"""
TWO_PI = 2.0 * PI

"""
Constant to convert degrees to radians. Equal to 2pi/360. Units: *rad/deg*
"""
DEG2RAD = 2.0 * PI / 360.0

"""
Constant to convert radians to degrees. Equal to 360/2pi. Units: *deg/rad*
"""
RAD2DEG = 360.0 / (PI * 2.0)
