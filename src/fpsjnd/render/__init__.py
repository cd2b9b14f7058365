"""
fpsjnd.render
=============

Temporal-blur rendering of the split-screen stimulus.

This subpackage provides:
- clock : frame-rate clock (start of the current simulated shutter interval).
- scene : the orbiting disk, its soft coverage mask, the jitter hash and the
  sRGB transfer function.
- renderer : TemporalBlurRenderer, RenderFrame, RenderInitError.
- loop : RenderLoop and RefreshRateMeter for display-rate redraws.

Typical usage
-------------
    from fpsjnd.render import TemporalBlurRenderer, RenderFrame
    renderer = TemporalBlurRenderer(640, 360)
    image = renderer.render(RenderFrame(left_fps=30.0, right_fps=33.0, elapsed_time=1.25))
"""

from .clock import frame_period, shutter_start
from .loop import RefreshRateMeter, RenderLoop
from .renderer import (
    RenderFrame,
    RenderInitError,
    TemporalBlurRenderer,
    pixel_coordinates,
    to_uint8,
)

__all__ = [
    "frame_period",
    "shutter_start",
    "RefreshRateMeter",
    "RenderLoop",
    "RenderFrame",
    "RenderInitError",
    "TemporalBlurRenderer",
    "pixel_coordinates",
    "to_uint8",
]
