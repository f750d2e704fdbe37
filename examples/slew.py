# /// script
# requires-python = ">=3.11"
# dependencies = ["typer>=0.9.0", "rotjax"]
#
# [tool.uv.sources]
# rotjax = { path = ".." }
# ///
"""Interpolate an attitude slew and rotate a batch of body vectors.

Builds a start and end attitude from yaw-pitch-roll angles, interpolates
between them with quaternion slerp, and rotates a batch of body-frame
vectors at every step using JIT-compiled vmap.  The final attitude is
then expressed as a passive (frame) rotation to show that both usages
describe the same motion.

Requires rotjax to be installed (``uv pip install -e .`` from the repo root).

Usage:
    uv run examples/slew.py [OPTIONS]

Examples:
    # 90 degree yaw slew in 10 steps
    uv run examples/slew.py --yaw 90 --steps 10

    # Combined slew with many body vectors
    uv run examples/slew.py --yaw 45 --pitch 30 --roll -20 --n-vectors 100000
"""

import time
from typing import Annotated

import jax
import jax.numpy as jnp
import typer

from rotjax import (
    EulerAnglesZyx,
    RotationQuaternion,
    RotationUsage,
    set_dtype,
)

set_dtype(jnp.float64)  # Must be before any JIT compilation


@jax.jit
def _rotate_batch(q: RotationQuaternion, vectors: jax.Array) -> jax.Array:
    return q.rotate(vectors.T).T


@jax.jit
def _slerp_path(q0: RotationQuaternion, q1: RotationQuaternion, ts: jax.Array) -> jax.Array:
    return jax.vmap(lambda t: q0.slerp(q1, t).to_stored_implementation())(ts)


def main(
    yaw: Annotated[float, typer.Option(help="Final yaw in degrees")] = 90.0,
    pitch: Annotated[float, typer.Option(help="Final pitch in degrees")] = 0.0,
    roll: Annotated[float, typer.Option(help="Final roll in degrees")] = 0.0,
    steps: Annotated[int, typer.Option(help="Number of interpolation steps")] = 10,
    n_vectors: Annotated[int, typer.Option(help="Body vectors rotated per step")] = 1000,
) -> None:
    """Slew from the identity to a target attitude."""
    target = EulerAnglesZyx(yaw, pitch, roll, use_degrees=True)
    q0 = RotationQuaternion()
    q1 = target.to_rotation_quaternion()

    print(f"Target attitude: {target}")
    print(f"  as quaternion: {q1}")
    print(f"  as angle-axis: {q1.to_angle_axis()}")

    ts = jnp.linspace(0.0, 1.0, steps + 1)
    path = _slerp_path(q0, q1, ts)

    key = jax.random.PRNGKey(0)
    vectors = jax.random.normal(key, (n_vectors, 3))

    t0 = time.perf_counter()
    for i in range(steps + 1):
        q = RotationQuaternion._from_internal(path[i])
        rotated = _rotate_batch(q, vectors)
        rotated.block_until_ready()
        angle = float(jnp.rad2deg(q.get_disparity_angle(q0)))
        ypr = jnp.rad2deg(q.to_euler_angles_zyx().get_unique().to_vector())
        print(
            f"  step {i:3d}: angle from start {angle:8.3f} deg, "
            f"ypr = [{float(ypr[0]):8.3f}, {float(ypr[1]):8.3f}, {float(ypr[2]):8.3f}]"
        )
    print(f"Rotated {n_vectors} vectors x {steps + 1} steps in {time.perf_counter() - t0:.3f}s")

    # ── Passive replay ───────────────────────────────────────────────────
    # A passive quaternion with the same components rotates the frame, so
    # its inverse_rotate reproduces the active rotation of a vector.
    passive_q1 = RotationQuaternion.from_vector(q1.to_implementation(), usage=RotationUsage.PASSIVE)
    v = vectors[0]
    active_out = q1.rotate(v)
    passive_out = passive_q1.inverse_rotate(v)
    err = float(jnp.max(jnp.abs(active_out - passive_out)))
    print(f"Active rotate vs passive inverse_rotate max difference: {err:.2e}")


if __name__ == "__main__":
    typer.run(main)
