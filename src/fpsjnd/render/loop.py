"""
loop.py
-------

Cooperative, single-threaded render scheduling.

- RefreshRateMeter : rolling frame counter that estimates the display
  refresh rate from the ticks it observes.
- RenderLoop : redraws the split screen once per display tick, reading
  the frame rates currently published by the staircase.

The loop never writes staircase state. Between ticks, control returns to
the caller (the display sink usually blocks on vsync), which is the only
suspension point. Only the monotonic elapsed time matters to the renderer,
so irregular tick spacing is harmless.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

import jax.numpy as jnp

from .renderer import RenderFrame, TemporalBlurRenderer

logger = logging.getLogger(__name__)


class RefreshRateMeter:
    """
    Rolling frame counter.

    Counts ticks and, once at least ``window_s`` seconds have passed since
    the last estimate, sets ``hz = round(frames / elapsed)`` and starts a
    new window.

    Parameters
    ----------
    window_s : float, default=1.0
        Length of a measurement window in seconds.
    initial_hz : int, default=60
        Value reported before the first window completes.
    """

    def __init__(self, window_s: float = 1.0, initial_hz: int = 60) -> None:
        if window_s <= 0:
            raise ValueError(f"window_s must be positive, got {window_s}")
        self.window_s = window_s
        self.hz = initial_hz
        self._frame_count = 0
        self._window_start: float | None = None

    def tick(self, now: float) -> int:
        """Record one displayed frame at time ``now`` and return the current estimate."""
        if self._window_start is None:
            self._window_start = now
            return self.hz

        self._frame_count += 1
        elapsed = now - self._window_start
        if elapsed >= self.window_s:
            self.hz = round(self._frame_count / elapsed)
            logger.debug("refresh rate estimate: %d Hz", self.hz)
            self._window_start = now
            self._frame_count = 0
        return self.hz

    def reset(self) -> None:
        """Forget the current window; keep the last estimate."""
        self._frame_count = 0
        self._window_start = None


class RenderLoop:
    """
    Display-driven render scheduler.

    Parameters
    ----------
    renderer : TemporalBlurRenderer
        Renderer used on every tick.
    source : callable
        ``source(elapsed_time) -> RenderFrame``. Usually
        ``StaircaseController.render_frame``.
    sink : callable, optional
        Receives each rendered image (e.g. a window's blit function).
    clock : callable, default=time.perf_counter
        Monotonic clock in seconds.
    meter : RefreshRateMeter, optional
        Refresh meter ticked on every frame. A new one is created if omitted.
    """

    def __init__(
        self,
        renderer: TemporalBlurRenderer,
        source: Callable[[float], RenderFrame],
        *,
        sink: Callable[[jnp.ndarray], None] | None = None,
        clock: Callable[[], float] = time.perf_counter,
        meter: RefreshRateMeter | None = None,
    ) -> None:
        self.renderer = renderer
        self.source = source
        self.sink = sink
        self.clock = clock
        self.meter = meter or RefreshRateMeter()
        self.frames_drawn = 0
        self._start = clock()

    @property
    def elapsed(self) -> float:
        """Seconds since the loop was created."""
        return self.clock() - self._start

    def tick(self) -> jnp.ndarray:
        """Draw one frame and hand it to the sink."""
        now = self.clock()
        self.meter.tick(now)
        frame = self.source(now - self._start)
        image = self.renderer.render(frame)
        if self.sink is not None:
            self.sink(image)
        self.frames_drawn += 1
        return image

    def run(
        self,
        max_frames: int | None = None,
        should_stop: Callable[[], bool] | None = None,
    ) -> int:
        """
        Tick until ``max_frames`` frames are drawn or ``should_stop()`` is true.

        With neither argument the loop runs forever, like a display's
        animation callback.

        Returns
        -------
        int
            Number of frames drawn by this call.
        """
        drawn = 0
        logger.info("render loop started (%dx%d)", self.renderer.width, self.renderer.height)
        while max_frames is None or drawn < max_frames:
            if should_stop is not None and should_stop():
                break
            self.tick()
            drawn += 1
        logger.info("render loop stopped after %d frames", drawn)
        return drawn
