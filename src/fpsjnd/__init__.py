"""
fpsjnd
======

Frame-rate just-noticeable-difference (JND) measurement.

An observer sees two side-by-side renderings of an orbiting disk, each
simulated at a different frame rate, and picks the one that moves more
smoothly. An adaptive staircase moves the tested frame rate up and down
according to the answers and the reversal levels are averaged into a
threshold estimate.

----------------------------------------------------------------------
Workflow
----------------------------------------------------------------------

Core design
-----------
1. TemporalBlurRenderer (render/renderer.py):
   - Renders both halves of the screen at display rate.
   - Simulates a camera at any (non-integer) frame rate with a full
     shutter by integrating 32 jittered samples per shutter interval.

2. StaircaseController (staircase/controller.py):
   - 1-down/2-up rule on the base frame rate (converges on ~70.7%).
   - Reversal detection, step halving and stopping rules.
   - Random side assignment from an explicit JAX PRNG key.

3. estimate_threshold (staircase/estimator.py):
   - Mean of the last 4 reversal levels with a 95% CI.

4. TrialRecorder (data/dataset.py):
   - Append-only store of scored trials shared by the estimator and the
     display.

5. ExperimentSession (session/experiment_session.py):
   - Wires the controller to observer responses, display listeners and
     the render loop.

Unified import style
--------------------
Top-level:
  from fpsjnd import StaircaseConfig, StaircaseController, ExperimentSession
  from fpsjnd import TemporalBlurRenderer, RenderFrame, estimate_threshold

Subpackages:
  from fpsjnd.render import shutter_start, RenderLoop, RefreshRateMeter
  from fpsjnd.staircase import ThresholdEstimate, reversal_levels, print_summary
  from fpsjnd.model import SimulatedObserver
  from fpsjnd.utils import plot_staircase, seed, split

Data flow
---------
- StaircaseController.start_trial() publishes (left_fps, right_fps).
- RenderLoop reads them through controller.render_frame(t) every tick.
- ExperimentSession.respond(side) scores the choice; the controller
  appends a Trial to the TrialRecorder and either starts the next trial
  or finishes and calls estimate_threshold().

----------------------------------------------------------------------
"""

from . import data as data
from . import model as model
from . import render as render
from . import session as session
from . import staircase as staircase
from . import utils as utils
from .data.dataset import Trial, TrialRecorder
from .model.observer import SimulatedObserver

# Rendering
from .render.clock import shutter_start
from .render.loop import RefreshRateMeter, RenderLoop
from .render.renderer import RenderFrame, RenderInitError, TemporalBlurRenderer

# Experiment orchestration
from .session.experiment_session import ExperimentSession, SessionSnapshot

# Staircase
from .staircase.config import ConfigError, StaircaseConfig
from .staircase.controller import RefreshRateLimitWarning, StaircaseController
from .staircase.estimator import ThresholdEstimate, estimate_threshold

__all__ = [
    # Rendering
    "TemporalBlurRenderer",
    "RenderFrame",
    "RenderInitError",
    "RenderLoop",
    "RefreshRateMeter",
    "shutter_start",
    # Staircase
    "StaircaseConfig",
    "ConfigError",
    "StaircaseController",
    "RefreshRateLimitWarning",
    "ThresholdEstimate",
    "estimate_threshold",
    # Data handling
    "Trial",
    "TrialRecorder",
    # Observer models
    "SimulatedObserver",
    # Session orchestration
    "ExperimentSession",
    "SessionSnapshot",
    # Subpackages
    "data",
    "model",
    "render",
    "session",
    "staircase",
    "utils",
]
