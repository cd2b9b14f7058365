"""
Simulated staircase run: estimate a frame-rate JND without a human observer
---------------------------------------------------------------------------

This script demonstrates the full measurement pipeline end to end:

1. Define a 'ground-truth' observer whose ability to tell two frame rates
   10% apart fades as the base frame rate rises (logistic psychometric
   function with a known threshold).
2. Run the 1-down/2-up staircase against it on a simulated 144 Hz display.
3. Estimate the threshold from the last reversal levels and plot the
   staircase track.
4. Render one split-screen frame of the final trial with the
   temporal-blur renderer.

Note:
- The staircase converges where the observer is ~70.7% correct, which for
  this observer lies at threshold_fps + 0.35 / slope, slightly above the
  psychometric midpoint.
"""

from __future__ import annotations

import logging
import os
import sys

import matplotlib.pyplot as plt
import numpy as np

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "../../../src")))
# --8<-- [start:imports]
from fpsjnd.model.observer import SimulatedObserver
from fpsjnd.render.renderer import TemporalBlurRenderer, to_uint8
from fpsjnd.session.experiment_session import ExperimentSession, run_simulated
from fpsjnd.staircase.config import StaircaseConfig
from fpsjnd.staircase.estimator import print_summary
from fpsjnd.utils.plotting import plot_staircase

# --8<-- [end:imports]

# Where to save figures
PLOTS_DIR = os.path.join(os.path.dirname(__file__), "plots")
REFRESH_HZ = 144
TRUE_THRESHOLD_FPS = 70.0
SLOPE = 0.15

logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

# ---------- Staircase ----------

config = StaircaseConfig(
    start_base_fps=30,
    min_base_fps=15,
    target_diff_pct=0.10,
    initial_step=10,
    min_step=0.5,
    target_reversals=10,
    max_trials=150,
)
session = ExperimentSession(config, refresh_hz=REFRESH_HZ, seed=0, show_fps=True)
observer = SimulatedObserver(threshold_fps=TRUE_THRESHOLD_FPS, slope=SLOPE, seed=1)

result = run_simulated(session, observer)
snapshot = session.snapshot()

print(f"Trials: {snapshot.total}  correct: {snapshot.correct} ({snapshot.percentage}%)")
print_summary(result)
print(f"Expected convergence ≈ {TRUE_THRESHOLD_FPS + 0.35 / SLOPE:.1f} fps")

# ---------- Plots ----------

os.makedirs(PLOTS_DIR, exist_ok=True)

fig, ax = plt.subplots(figsize=(7, 4))
plot_staircase(snapshot.trials, REFRESH_HZ, estimate=result, ax=ax)
ax.set_title("Frame-rate staircase (simulated observer)")
plt.tight_layout()
track_path = os.path.join(PLOTS_DIR, "staircase_track.png")
fig.savefig(track_path, dpi=200, bbox_inches="tight")
print(f"Saved staircase plot to {track_path}")

# ---------- Stimulus ----------

renderer = TemporalBlurRenderer(640, 360)
state = session.controller.current_state()
frame = session.controller.render_frame(elapsed_time=1.234)
image = to_uint8(renderer.render(frame))

fig2, ax2 = plt.subplots(figsize=(8, 4.5))
ax2.imshow(image, interpolation="nearest")
ax2.set_title(f"left {state.left_fps:.1f} fps | right {state.right_fps:.1f} fps")
ax2.axis("off")
stim_path = os.path.join(PLOTS_DIR, "stimulus_frame.png")
fig2.savefig(stim_path, dpi=150, bbox_inches="tight")
print(f"Saved stimulus frame to {stim_path} (mean level {np.mean(image) / 255:.3f})")

plt.show()
