"""
renderer.py
-----------

Temporal-blur renderer.

Simulates what a camera running at an arbitrary frame rate, with a full
(360 degree) shutter, would record of the orbiting disk. There is no frame
history: every pixel integrates the scene analytically over its current
shutter interval.

For a pixel at local position p and a simulated frame rate fps:

    t0 = shutter_start(t, fps)              # frame boundary at or before t
    n  = jitter(p)                          # per-pixel offset in [0, 1)
    t_i = t0 + (i + n) / S * (1 / fps)      # one sample in each of S slots
    exposure = mean_i coverage(p, orbit_center(t_i))

The screen is split at the vertical center line. The left half is drawn at
``left_fps`` and the right half at ``right_fps``, each in coordinates
centered on its own half, with a thin bright divider between them. The
image itself is redrawn at display rate; the simulated frame rate only moves
the shutter boundaries and sample times.

Implementation
--------------
- Vectorised over all pixels with jax.numpy and jit-compiled once per
  renderer (static resolution and sample count).
- Samples are accumulated with ``lax.fori_loop`` so memory stays at one
  image worth of floats regardless of the sample count.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import jax
import jax.numpy as jnp
import numpy as np
from jax import lax

from .clock import shutter_start
from .scene import coverage, jitter, linear_to_srgb, orbit_center

DEFAULT_SAMPLES = 32
DEFAULT_ANGULAR_SPEED = 2.0
DIVIDER_HALF_WIDTH = 0.006


class RenderInitError(RuntimeError):
    """The renderer could not be set up; the test cannot proceed."""


@dataclass(frozen=True)
class RenderFrame:
    """
    Inputs for a single display tick.

    Attributes
    ----------
    left_fps : float
        Simulated frame rate of the left half.
    right_fps : float
        Simulated frame rate of the right half.
    elapsed_time : float
        Seconds since the render loop started (monotonic).
    """

    left_fps: float
    right_fps: float
    elapsed_time: float


def pixel_coordinates(width: int, height: int) -> jnp.ndarray:
    """
    Normalized coordinates of every pixel center, top row first.

    ``p = (2 * frag - resolution) / height`` where ``frag`` is measured
    from the bottom-left corner, so y grows upwards and the screen spans
    y in [-1, 1] and x in [-aspect, aspect].

    Returns
    -------
    jnp.ndarray, shape (height, width, 2)
    """
    xs = np.arange(width, dtype=np.float32) + 0.5
    ys = (height - 1 - np.arange(height, dtype=np.float32)) + 0.5
    fx, fy = np.meshgrid(xs, ys)
    px = (2.0 * fx - width) / height
    py = (2.0 * fy - height) / height
    return jnp.asarray(np.stack([px, py], axis=-1))


def to_uint8(image: jnp.ndarray) -> np.ndarray:
    """Quantize a display-encoded float image in [0, 1] to 8-bit."""
    return np.asarray(jnp.round(jnp.clip(image, 0.0, 1.0) * 255.0)).astype(np.uint8)


class TemporalBlurRenderer:
    """
    Split-screen renderer for the orbiting disk.

    Parameters
    ----------
    width, height : int
        Output resolution in pixels.
    samples : int, default=32
        Temporal samples per shutter interval.
    angular_speed : float, default=2.0
        Orbit speed; the disk angle is ``angular_speed * pi * t``.
    seed : int, default=0
        Seed of the per-pixel jitter hash.

    Raises
    ------
    RenderInitError
        If the geometry is invalid or the render program fails to compile.
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        samples: int = DEFAULT_SAMPLES,
        angular_speed: float = DEFAULT_ANGULAR_SPEED,
        seed: int = 0,
    ) -> None:
        if int(width) != width or int(height) != height or width <= 0 or height <= 0:
            raise RenderInitError(
                f"resolution must be positive integers, got {width}x{height}"
            )
        if int(samples) != samples or samples < 1:
            raise RenderInitError(f"samples must be an integer >= 1, got {samples}")
        if not math.isfinite(angular_speed):
            raise RenderInitError(f"angular_speed must be finite, got {angular_speed}")

        self.width = int(width)
        self.height = int(height)
        self.samples = int(samples)
        self.angular_speed = float(angular_speed)
        self.seed = int(seed)
        self._coords = pixel_coordinates(self.width, self.height)
        self._render_jitted = jax.jit(self._render_impl)

        # Compile once up front so a broken backend fails at startup
        # rather than on the first trial.
        try:
            self._render_jitted(
                jnp.float32(60.0), jnp.float32(60.0), jnp.float32(0.0)
            ).block_until_ready()
        except Exception as exc:
            raise RenderInitError(f"failed to build render program: {exc}") from exc

    @property
    def aspect(self) -> float:
        """Width over height."""
        return self.width / self.height

    # ------------------------------------------------------------------
    # PUBLIC API
    # ------------------------------------------------------------------
    def render(self, frame: RenderFrame) -> jnp.ndarray:
        """
        Draw one display frame.

        Parameters
        ----------
        frame : RenderFrame
            Frame rates of both halves and the elapsed time.

        Returns
        -------
        jnp.ndarray, shape (height, width, 3)
            Display-encoded (sRGB) gray levels in [0, 1].
        """
        if frame.left_fps <= 0 or frame.right_fps <= 0:
            raise ValueError(
                f"frame rates must be > 0, got {frame.left_fps} / {frame.right_fps}"
            )
        return self._render_jitted(
            jnp.float32(frame.left_fps),
            jnp.float32(frame.right_fps),
            jnp.float32(frame.elapsed_time),
        )

    def exposure(self, points, fps: float, elapsed_time: float) -> jnp.ndarray:
        """
        Mean shutter exposure at points given in half-screen coordinates.

        Parameters
        ----------
        points : array-like, shape (..., 2)
            Positions relative to the center of a half screen.
        fps : float
            Simulated frame rate (> 0).
        elapsed_time : float
            Current time in seconds.

        Returns
        -------
        jnp.ndarray, shape (...)
            Linear exposure in [0, 1].
        """
        points = jnp.asarray(points, dtype=jnp.float32)
        fps_arr = jnp.full(points.shape[:-1], fps, dtype=jnp.float32)
        t0 = shutter_start(jnp.float32(elapsed_time), fps)
        return self._shutter_blur(points, fps_arr, t0)

    # ------------------------------------------------------------------
    # INTERNALS
    # ------------------------------------------------------------------
    def _shutter_blur(self, points, fps, t0):
        """Average coverage over ``samples`` jittered times in [t0, t0 + 1/fps)."""
        dt = 1.0 / fps
        n = jitter(points, float(self.seed))

        def accumulate(i, total):
            t = t0 + (i + n) / self.samples * dt
            return total + coverage(points, orbit_center(t, self.angular_speed))

        total = lax.fori_loop(0, self.samples, accumulate, jnp.zeros_like(n))
        return total / self.samples

    def _render_impl(self, left_fps, right_fps, t):
        p = self._coords
        on_left = p[..., 0] < 0.0
        half = 0.5 * self.aspect

        fps = jnp.where(on_left, left_fps, right_fps)
        center_x = jnp.where(on_left, -half, half)
        local = jnp.stack([p[..., 0] - center_x, p[..., 1]], axis=-1)

        exposure = self._shutter_blur(local, fps, shutter_start(t, fps))
        exposure = jnp.where(jnp.abs(p[..., 0]) < DIVIDER_HALF_WIDTH, 1.0, exposure)

        gray = linear_to_srgb(exposure)
        return jnp.repeat(gray[..., None], 3, axis=-1)
