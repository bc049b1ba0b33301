"""SO(3) rotation helpers in JAX.

Rotations are plain (..., 3, 3) matrices. These are the pieces the URDF
conversion needs: building a rotation from URDF roll-pitch-yaw angles and
rotating joint axes into their parent frame.
"""

import jax
import jax.numpy as jnp

Array = jax.Array


def from_rpy(rpy: Array) -> Array:
    """
    Convert roll-pitch-yaw angles to a rotation matrix.

    URDF uses fixed-axis angles: roll about X, then pitch about Y, then
    yaw about Z, so R = Rz(yaw) @ Ry(pitch) @ Rx(roll).

    Args:
        rpy: (3,) array of [roll, pitch, yaw] angles in radians

    Returns:
        (3, 3) rotation matrix
    """
    rpy = jnp.asarray(rpy, dtype=jnp.float64)
    roll, pitch, yaw = rpy[0], rpy[1], rpy[2]
    cr, sr = jnp.cos(roll), jnp.sin(roll)
    cp, sp = jnp.cos(pitch), jnp.sin(pitch)
    cy, sy = jnp.cos(yaw), jnp.sin(yaw)

    R_x = jnp.array([
        [1.0, 0.0, 0.0],
        [0.0, cr, -sr],
        [0.0, sr, cr]
    ])
    R_y = jnp.array([
        [cp, 0.0, sp],
        [0.0, 1.0, 0.0],
        [-sp, 0.0, cp]
    ])
    R_z = jnp.array([
        [cy, -sy, 0.0],
        [sy, cy, 0.0],
        [0.0, 0.0, 1.0]
    ])

    return R_z @ R_y @ R_x


def apply(R: Array, v: Array) -> Array:
    """
    Apply rotation to vector(s).

    Args:
        R: (..., 3, 3) rotation matrix
        v: (..., 3) or (..., N, 3) vector(s) to rotate

    Returns:
        (..., 3) or (..., N, 3) rotated vector(s)
    """
    if v.ndim == R.ndim - 1:  # Single vector case
        return jnp.einsum('...ij,...j->...i', R, v)
    else:  # Multiple vectors case
        return jnp.einsum('...ij,...nj->...ni', R, v)
