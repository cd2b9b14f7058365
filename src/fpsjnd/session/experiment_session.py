"""
experiment_session.py
---------------------

ExperimentSession orchestrates one frame-rate JND test.

Responsibilities
----------------
1. Own the staircase controller and its trial recorder.
2. Accept observer responses and forward them to the controller.
3. Publish a display snapshot (score, history, progress, result) to
   subscribed listeners after every state change.
4. Build the render loop that animates the current trial.

The controller knows nothing about any UI toolkit. A UI layer calls
respond() from its button handlers and renders SessionSnapshot objects
however it likes.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

import jax
import jax.numpy as jnp

from fpsjnd.data.dataset import Side, Trial
from fpsjnd.render.loop import RefreshRateMeter, RenderLoop
from fpsjnd.render.renderer import TemporalBlurRenderer
from fpsjnd.staircase.config import StaircaseConfig
from fpsjnd.staircase.controller import StaircaseController, refresh_limit_message
from fpsjnd.staircase.estimator import ThresholdEstimate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryEntry:
    """One line of the trial history log."""

    correct: bool
    base_fps: float
    comp_fps: float

    @property
    def text(self) -> str:
        mark = "✓" if self.correct else "✗"
        return f"{mark} {self.base_fps:.0f} | {self.comp_fps:.0f}"


@dataclass(frozen=True)
class SessionSnapshot:
    """
    Everything a display needs after a state change.

    Attributes
    ----------
    trial_number : int
        Number of scored trials.
    correct, total : int
        Running score.
    percentage : int
        Rounded percent correct (0 before the first response).
    progress : float
        min(1, reversals / target_reversals), 1.0 once finished.
    history : tuple[HistoryEntry, ...]
        Scored trials, newest first.
    trials : tuple[Trial, ...]
        Scored trials, oldest first (for charting).
    result : ThresholdEstimate or None
        Set once the run has finished.
    fps_label : str
        ``"30fps - 33fps"`` while a trial is pending and fps display is on.
    limit_warning : str
        Refresh-rate limit notice for the pending trial, else empty.
    finished, awaiting_response : bool
    """

    trial_number: int
    correct: int
    total: int
    percentage: int
    progress: float
    history: tuple[HistoryEntry, ...]
    trials: tuple[Trial, ...]
    result: ThresholdEstimate | None
    fps_label: str
    limit_warning: str
    finished: bool
    awaiting_response: bool


Listener = Callable[[SessionSnapshot], None]


class ExperimentSession:
    """
    High-level test orchestrator.

    Parameters
    ----------
    config : StaircaseConfig
        Run configuration (validated).
    refresh_hz : float, optional
        Display refresh rate. If omitted, the meter's current estimate is
        used when a run starts.
    meter : RefreshRateMeter, optional
        Refresh meter shared with the render loop.
    key : jax.Array, optional
        PRNG key for side assignment.
    seed : int, default=0
        Seed used when no key is given.
    show_fps : bool, default=False
        Reveal the tested frame rates in the snapshot.

    Attributes
    ----------
    controller : StaircaseController
        The staircase of the current run.
    """

    def __init__(
        self,
        config: StaircaseConfig,
        refresh_hz: float | None = None,
        *,
        meter: RefreshRateMeter | None = None,
        key: jax.Array | None = None,
        seed: int = 0,
        show_fps: bool = False,
    ) -> None:
        self.config = config
        self.meter = meter or RefreshRateMeter()
        self.show_fps = show_fps
        self._fixed_refresh_hz = refresh_hz
        self._listeners: list[Listener] = []
        self.controller = StaircaseController(
            config, self._refresh_hz(), key=key, seed=seed
        )

    # ------------------------------------------------------------------
    # COMMANDS
    # ------------------------------------------------------------------
    def respond(self, side: Side) -> Trial | None:
        """
        Forward an observer choice to the staircase.

        Returns
        -------
        Trial or None
            The scored trial, or None if no trial was pending.
        """
        trial = self.controller.submit_response(side)
        if trial is None:
            logger.debug("ignored %r response: no trial pending", side)
            return None
        self._publish()
        return trial

    def restart(self, config: StaircaseConfig | None = None) -> None:
        """
        Start a new run, optionally with a new configuration.

        The refresh rate is re-read from the meter unless it was fixed at
        construction.

        Raises
        ------
        ConfigError
            If the configuration is not a StaircaseConfig or the refresh rate
            is not positive or lies below ``min_base_fps``.
        """
        self.controller.reconfigure(
            self.config if config is None else config, self._refresh_hz()
        )
        self.config = self.controller.config
        self._publish()

    def subscribe(self, listener: Listener) -> None:
        """Call ``listener(snapshot)`` after every state change."""
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    # OUTPUTS
    # ------------------------------------------------------------------
    def snapshot(self) -> SessionSnapshot:
        """Current display data."""
        state = self.controller.current_state()
        trials = tuple(self.controller.recorder.trials)
        total = state.total_count
        percentage = round(state.correct_count / total * 100) if total else 0

        pending = state.phase == "awaiting_response"
        fps_label = ""
        if self.show_fps and pending:
            lo, hi = sorted((state.left_fps, state.right_fps))
            fps_label = f"{lo:.0f}fps - {hi:.0f}fps"
        limit_warning = ""
        if pending and state.comparison_limited:
            limit_warning = refresh_limit_message(
                state.base_fps, state.comp_fps, self.config.target_diff_pct
            )

        return SessionSnapshot(
            trial_number=state.trial_index,
            correct=state.correct_count,
            total=total,
            percentage=percentage,
            progress=self.controller.progress,
            history=tuple(
                HistoryEntry(t.correct, t.base_fps, t.comp_fps) for t in reversed(trials)
            ),
            trials=trials,
            result=self.controller.result,
            fps_label=fps_label,
            limit_warning=limit_warning,
            finished=state.finished,
            awaiting_response=pending,
        )

    # ------------------------------------------------------------------
    # RENDERING
    # ------------------------------------------------------------------
    def render_loop(
        self,
        renderer: TemporalBlurRenderer,
        *,
        sink: Callable[[jnp.ndarray], None] | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> RenderLoop:
        """Render loop that animates whatever trial the controller publishes."""
        return RenderLoop(
            renderer,
            lambda elapsed: self.controller.render_frame(elapsed),
            sink=sink,
            clock=clock,
            meter=self.meter,
        )

    # ------------------------------------------------------------------
    # INTERNALS
    # ------------------------------------------------------------------
    def _refresh_hz(self) -> float:
        if self._fixed_refresh_hz is not None:
            return self._fixed_refresh_hz
        return self.meter.hz

    def _publish(self) -> None:
        snap = self.snapshot()
        for listener in self._listeners:
            listener(snap)


def run_simulated(
    session: ExperimentSession, observer, max_responses: int = 10_000
) -> ThresholdEstimate | None:
    """
    Drive a session to completion with a simulated observer.

    Parameters
    ----------
    session : ExperimentSession
    observer : SimulatedObserver
        Anything with ``respond(left_fps, right_fps) -> side``.
    max_responses : int, default=10_000
        Safety cap on the number of responses.

    Returns
    -------
    ThresholdEstimate or None
        The run's result (None if the cap was hit first).
    """
    for _ in range(max_responses):
        if session.controller.finished:
            break
        state = session.controller.current_state()
        session.respond(observer.respond(state.left_fps, state.right_fps))
    return session.controller.result
