"""
clock.py
--------

Frame-rate clock.

Maps wall-clock time onto the frame grid of a simulated camera running at
an arbitrary (possibly non-integer) frame rate. The start of the current
shutter interval is the time floored to the nearest frame boundary:

    frame_period = 1 / fps
    shutter_start(t) = floor(t / frame_period) * frame_period

Works on Python scalars and jax arrays alike, so it can be used inside
jit-compiled render functions.
"""

from __future__ import annotations

import jax.numpy as jnp


def frame_period(fps):
    """Duration of one simulated frame in seconds."""
    return 1.0 / fps


def shutter_start(t, fps):
    """
    Start time of the simulated shutter interval that contains ``t``.

    Parameters
    ----------
    t : float or jnp.ndarray
        Elapsed time in seconds.
    fps : float or jnp.ndarray
        Simulated frame rate. Must be > 0.

    Returns
    -------
    jnp.ndarray
        ``floor(t / (1/fps)) * (1/fps)``, broadcast over the inputs.

    Raises
    ------
    ValueError
        If ``fps`` is a concrete Python number <= 0.
    """
    if isinstance(fps, (int, float)) and fps <= 0:
        raise ValueError(f"fps must be > 0, got {fps}")
    ft = frame_period(fps)
    return jnp.floor(t / ft) * ft
