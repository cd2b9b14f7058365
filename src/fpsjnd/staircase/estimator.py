"""
estimator.py
------------

Reversal-averaging threshold estimator.

A reversal happens where the staircase direction flips (up -> down or
down -> up). The level at each reversal brackets the observer's threshold,
so the mean of the last few reversal levels is the point estimate:

    levels = base_fps of each trial whose direction differs from the
             previous trial's (both non-None)
    use    = levels[-4:]
    mean   = sum(use) / n
    CI     = mean +/- 1.96 * sd / sqrt(n)     (sd with n - 1 denominator)

The CI is only reported when more than one level is used.

If the staircase climbed to the display's refresh rate the measurement is
right-censored: the observer could still tell the rates apart at the
highest rate the display can show, so no threshold is reported.

Examples
--------
>>> from fpsjnd.staircase.estimator import estimate_threshold
>>> result = estimate_threshold(trials, final_base_fps=27.5, refresh_hz=60)
>>> print(result.text, result.ci_text)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from fpsjnd.data.dataset import Trial

NOT_DETERMINED = "Not determined"
EXCEEDED_REFRESH = "Not determined, exceeded monitor refresh rate"

DEFAULT_TAIL = 4
Z_95 = 1.96


@dataclass(frozen=True)
class ThresholdEstimate:
    """
    Result of a staircase run.

    Attributes
    ----------
    mean : float or None
        Threshold estimate in fps (None if not determined).
    ci_low, ci_high : float or None
        95% confidence bounds (None unless more than one level was used).
    levels : tuple[float, ...]
        Reversal levels the estimate was computed from.
    exceeded_refresh : bool
        The staircase reached the display refresh rate.
    """

    mean: float | None = None
    ci_low: float | None = None
    ci_high: float | None = None
    levels: tuple[float, ...] = ()
    exceeded_refresh: bool = False

    @property
    def determined(self) -> bool:
        return self.mean is not None

    @property
    def text(self) -> str:
        """Display text: ``"29.5 fps"`` or the reason nothing was determined."""
        if self.exceeded_refresh:
            return EXCEEDED_REFRESH
        if self.mean is None:
            return NOT_DETERMINED
        return f"{self.mean:.1f} fps"

    @property
    def ci_text(self) -> str:
        """Display text of the confidence interval, empty if there is none."""
        if self.ci_low is None or self.ci_high is None:
            return ""
        return f"95% CI ≈ {self.ci_low:.1f} – {self.ci_high:.1f} fps"


def reversal_levels(trials: Sequence[Trial]) -> list[float]:
    """
    Base levels at which the staircase direction reversed.

    Parameters
    ----------
    trials : sequence of Trial
        Trials in presentation order.

    Returns
    -------
    list[float]
        For each adjacent pair with non-None, differing directions, the
        later trial's base_fps.

    Notes
    -----
    Each trial carries the direction taken after its response, so a level
    is the peak or valley actually presented when the track turned. Tools
    that store the direction before the update report the level one step
    later (30 instead of 25 for a wrong, right, right, wrong run starting
    at 30 with step 5).
    """
    trials = list(trials)
    levels = []
    for prev, cur in zip(trials, trials[1:]):
        if prev.direction and cur.direction and prev.direction != cur.direction:
            levels.append(cur.base_fps)
    return levels


def mean_and_ci(
    values: Sequence[float], z: float = Z_95
) -> tuple[float, float | None, float | None]:
    """
    Arithmetic mean and normal-approximation CI of the mean.

    Parameters
    ----------
    values : sequence of float
        At least one value.
    z : float, default=1.96
        Critical value (1.96 for a 95% interval).

    Returns
    -------
    mean : float
    ci_low, ci_high : float or None
        None when only one value is given.
    """
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        raise ValueError("need at least one value")
    mean = float(np.mean(arr))
    if arr.size == 1:
        return mean, None, None
    sd = float(np.std(arr, ddof=1))
    half_width = z * sd / math.sqrt(arr.size)
    return mean, mean - half_width, mean + half_width


def estimate_threshold(
    trials: Sequence[Trial],
    final_base_fps: float,
    refresh_hz: float,
    *,
    tail: int = DEFAULT_TAIL,
    z: float = Z_95,
) -> ThresholdEstimate:
    """
    Collapse a finished run into a threshold estimate.

    Parameters
    ----------
    trials : sequence of Trial
        All trials of the run, oldest first.
    final_base_fps : float
        Base frame rate when the run stopped.
    refresh_hz : float
        Display refresh rate (upper bound of the staircase).
    tail : int, default=4
        Number of most recent reversal levels to average.
    z : float, default=1.96
        Critical value of the CI.

    Returns
    -------
    ThresholdEstimate
    """
    if tail < 1:
        raise ValueError(f"tail must be >= 1, got {tail}")

    levels = reversal_levels(trials)
    if final_base_fps >= refresh_hz:
        return ThresholdEstimate(levels=tuple(levels), exceeded_refresh=True)
    if not levels:
        return ThresholdEstimate()

    use = levels[-tail:]
    mean, ci_low, ci_high = mean_and_ci(use, z=z)
    return ThresholdEstimate(mean=mean, ci_low=ci_low, ci_high=ci_high, levels=tuple(use))


def print_summary(estimate: ThresholdEstimate) -> None:
    """
    Print a human-readable threshold summary.

    Examples
    --------
    >>> print_summary(result)
    Threshold: 29.5 fps
    95% CI ≈ 28.2 – 30.8 fps
    Reversal levels: [28.0, 30.0, 29.0, 31.0]
    """
    print(f"Threshold: {estimate.text}")
    if estimate.ci_text:
        print(estimate.ci_text)
    if estimate.levels:
        print(f"Reversal levels: {[round(v, 2) for v in estimate.levels]}")
