"""
staircase
=========

Adaptive frame-rate staircase and threshold estimation.

This subpackage provides:
- StaircaseConfig : validated run configuration (and settings parsing).
- StaircaseController : 1-down/2-up state machine over the base frame rate.
- estimate_threshold : reversal-averaging estimator with a 95% CI.

Examples
--------
>>> from fpsjnd.staircase import StaircaseConfig, StaircaseController
>>> controller = StaircaseController(StaircaseConfig(), refresh_hz=60, seed=0)
>>> state = controller.current_state()  # state.left_fps, state.right_fps
>>> trial = controller.submit_response("left")
"""

from fpsjnd.staircase.config import ConfigError, StaircaseConfig
from fpsjnd.staircase.controller import (
    Phase,
    RefreshRateLimitWarning,
    StaircaseController,
    StaircaseState,
    refresh_limit_message,
)
from fpsjnd.staircase.estimator import (
    EXCEEDED_REFRESH,
    NOT_DETERMINED,
    ThresholdEstimate,
    estimate_threshold,
    mean_and_ci,
    print_summary,
    reversal_levels,
)

__all__ = [
    "ConfigError",
    "StaircaseConfig",
    "Phase",
    "RefreshRateLimitWarning",
    "StaircaseController",
    "StaircaseState",
    "refresh_limit_message",
    "EXCEEDED_REFRESH",
    "NOT_DETERMINED",
    "ThresholdEstimate",
    "estimate_threshold",
    "mean_and_ci",
    "print_summary",
    "reversal_levels",
]
