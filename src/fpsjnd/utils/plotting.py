"""
plotting.py
-----------

Staircase chart.

Plots the base frame rate of every trial in order, with a marker per
trial colored by correctness, the display refresh rate as the upper bound
and, once available, the threshold estimate with its 95% CI band.

Examples
--------
>>> import matplotlib.pyplot as plt
>>> from fpsjnd.utils.plotting import plot_staircase
>>> ax = plot_staircase(session.controller.recorder.trials, refresh_hz=60,
...                     estimate=session.controller.result)
>>> plt.show()
"""

from __future__ import annotations

from typing import Sequence

import matplotlib.pyplot as plt
import numpy as np

from fpsjnd.data.dataset import Trial
from fpsjnd.staircase.estimator import ThresholdEstimate

CORRECT_COLOR = "#4caf50"
INCORRECT_COLOR = "#f44336"
LINE_COLOR = "#0af"


def plot_staircase(
    trials: Sequence[Trial],
    refresh_hz: float,
    estimate: ThresholdEstimate | None = None,
    ax: plt.Axes | None = None,
) -> plt.Axes:
    """
    Draw the staircase track of a run.

    Parameters
    ----------
    trials : sequence of Trial
        Scored trials, oldest first.
    refresh_hz : float
        Display refresh rate, drawn as a dashed upper bound.
    estimate : ThresholdEstimate, optional
        Threshold to overlay (only drawn if determined).
    ax : matplotlib Axes, optional
        Axes to draw into; a new figure is created if omitted.

    Returns
    -------
    matplotlib Axes
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(6, 4))

    ax.set_xlabel("Trial")
    ax.set_ylabel("Base frame rate (fps)")
    ax.axhline(refresh_hz, color="0.5", linestyle="--", linewidth=1, label="Refresh rate")
    if not trials:
        return ax

    index = np.array([t.index for t in trials])
    base = np.array([t.base_fps for t in trials], dtype=float)
    colors = [CORRECT_COLOR if t.correct else INCORRECT_COLOR for t in trials]

    ax.plot(index, base, color=LINE_COLOR, linewidth=2, zorder=1)
    ax.scatter(index, base, c=colors, s=18, zorder=2)

    if estimate is not None and estimate.determined:
        ax.axhline(estimate.mean, color="k", linewidth=1, label=f"Threshold {estimate.text}")
        if estimate.ci_low is not None and estimate.ci_high is not None:
            ax.axhspan(estimate.ci_low, estimate.ci_high, color="k", alpha=0.1, label="95% CI")

    ax.legend(loc="best", fontsize="small")
    return ax
