"""
scene.py
--------

The single parametric scene: a bright disk on a circular orbit.

Defines the pieces the temporal-blur renderer integrates over time:

- orbit_center : disk center at time t
- coverage : soft circular mask of the disk at a point
- jitter : deterministic per-pixel pseudo-random offset in [0, 1)
- linear_to_srgb : two-segment display transfer function

All functions use jax.numpy and broadcast over leading axes so they can be
evaluated for a whole image at once.
"""

from __future__ import annotations

import jax.numpy as jnp

ORBIT_RADIUS = 0.30
DISK_RADIUS = 0.1
# Coverage falls from 1 to 0 between DISK_RADIUS and DISK_RADIUS * EDGE_RATIO.
EDGE_RATIO = 1.05

_HASH_DIRECTION = (12.9898, 78.233)
_HASH_SCALE = 0.37
_HASH_GAIN = 43758.5453


def orbit_center(t, angular_speed: float) -> jnp.ndarray:
    """
    Disk center at time ``t``.

    ``angle = angular_speed * pi * t``; an ``angular_speed`` of 2 is one
    revolution per second.

    Returns
    -------
    jnp.ndarray, shape t.shape + (2,)
    """
    angle = angular_speed * jnp.pi * jnp.asarray(t)
    return ORBIT_RADIUS * jnp.stack([jnp.cos(angle), jnp.sin(angle)], axis=-1)


def smoothstep(edge0: float, edge1: float, x: jnp.ndarray) -> jnp.ndarray:
    """Hermite interpolation between 0 and 1 for x in [edge0, edge1]."""
    u = jnp.clip((x - edge0) / (edge1 - edge0), 0.0, 1.0)
    return u * u * (3.0 - 2.0 * u)


def coverage(points: jnp.ndarray, center: jnp.ndarray) -> jnp.ndarray:
    """
    Soft coverage of the disk centered at ``center`` at ``points``.

    1 inside ``DISK_RADIUS``, 0 outside ``DISK_RADIUS * EDGE_RATIO`` and a
    smooth falloff in between.

    Parameters
    ----------
    points : jnp.ndarray, shape (..., 2)
    center : jnp.ndarray, shape (..., 2), broadcastable against points

    Returns
    -------
    jnp.ndarray, shape (...)
    """
    d = jnp.linalg.norm(points - center, axis=-1)
    return 1.0 - smoothstep(DISK_RADIUS, DISK_RADIUS * EDGE_RATIO, d)


def jitter(points: jnp.ndarray, seed: float = 0.0) -> jnp.ndarray:
    """
    Deterministic pseudo-random offset in [0, 1) derived from position.

    The classic ``fract(sin(dot(p, k)) * gain)`` hash. ``seed`` shifts the
    phase of the sine so different seeds give decorrelated patterns while
    the same (position, seed) always gives the same value.
    """
    direction = jnp.asarray(_HASH_DIRECTION, dtype=points.dtype)
    phase = jnp.sum(points * _HASH_SCALE * direction, axis=-1) + seed
    value = jnp.sin(phase) * _HASH_GAIN
    return value - jnp.floor(value)


def linear_to_srgb(linear: jnp.ndarray) -> jnp.ndarray:
    """
    Encode linear light in [0, 1] for display.

    Values at or below 0.0031308 are scaled by 12.92; values above are
    raised to 1/2.4, scaled by 1.055 and offset by -0.055.
    """
    linear = jnp.clip(linear, 0.0, 1.0)
    lo = linear * 12.92
    hi = 1.055 * jnp.power(linear, 1.0 / 2.4) - 0.055
    return jnp.where(linear <= 0.0031308, lo, hi)
