"""
controller.py
-------------

Adaptive frame-rate staircase (1-down, 2-up on the base frame rate).

Each trial shows the base frame rate on one half of the screen and a
comparison frame rate ``target_diff_pct`` higher on the other. The
observer picks the side that looks smoother (higher frame rate).

Rule
----
- Incorrect response: move down (base -= step).
- Two consecutive correct responses: move up (base += step).
- Otherwise: keep the previous direction, level unchanged.

Base frame rates are clamped to [min_base_fps, refresh_hz]. A change of
direction is a reversal; every reversal halves the step (never below
min_step). One miss reverses immediately while two hits are needed to
advance, so the staircase converges on ~70.7% correct.

The run stops when the target number of reversals is reached, when
max_trials trials were scored, when the base frame rate reaches the
display refresh rate, or when the comparison frame rate can no longer
exceed the base frame rate (degenerate trial). The threshold is then
estimated from the recorded reversals.

Phases
------
generating -> awaiting_response -> scoring -> generating ... -> finished
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from typing import Literal

import jax

from fpsjnd.data.dataset import Direction, Side, Trial, TrialRecorder
from fpsjnd.render.renderer import RenderFrame
from fpsjnd.utils.rng import coin_flip, seed as make_key, split

from .config import ConfigError, StaircaseConfig
from .estimator import ThresholdEstimate, estimate_threshold

logger = logging.getLogger(__name__)

Phase = Literal["generating", "awaiting_response", "scoring", "finished"]


class RefreshRateLimitWarning(UserWarning):
    """The refresh rate caps the comparison below the target difference."""


def refresh_limit_message(base_fps: float, comp_fps: float, target_diff_pct: float) -> str:
    """Explain that the comparison difference was capped by the refresh rate."""
    actual = (comp_fps - base_fps) / base_fps
    return (
        f"Monitor refresh rate limiting comparison: {actual * 100:.0f}% "
        f"difference instead of target {target_diff_pct * 100:.0f}%"
    )


@dataclass(frozen=True)
class StaircaseState:
    """
    Read-only snapshot of the controller.

    Attributes
    ----------
    phase : str
        One of "generating", "awaiting_response", "scoring", "finished".
    base_fps, comp_fps : float
        Levels of the current (or last) trial.
    left_fps, right_fps : float
        Frame rates published to the renderer.
    higher_side : {"left", "right"}
        Side showing comp_fps.
    step : float
        Current step size.
    direction, prev_direction : {"up", "down"} or None
    reversal_count, consecutive_correct, trial_index : int
    correct_count, total_count : int
    comparison_limited : bool
        comp_fps was capped by the refresh rate on the current trial.
    """

    phase: Phase
    base_fps: float
    comp_fps: float
    left_fps: float
    right_fps: float
    higher_side: Side
    step: float
    direction: Direction | None
    prev_direction: Direction | None
    reversal_count: int
    consecutive_correct: int
    trial_index: int
    correct_count: int
    total_count: int
    comparison_limited: bool

    @property
    def finished(self) -> bool:
        return self.phase == "finished"


def _validate_setup(config: StaircaseConfig, refresh_hz: float) -> tuple[StaircaseConfig, float]:
    if not isinstance(config, StaircaseConfig):
        raise ConfigError(f"expected StaircaseConfig, got {type(config).__name__}")
    if not refresh_hz > 0:
        raise ConfigError(f"refresh_hz must be positive, got {refresh_hz}")
    # Every base level lives in [min_base_fps, refresh_hz].
    if refresh_hz < config.min_base_fps:
        raise ConfigError(
            f"refresh_hz ({refresh_hz}) is below min_base_fps ({config.min_base_fps})"
        )
    return config, float(refresh_hz)


class StaircaseController:
    """
    Owns the staircase state and advances it one response at a time.

    Parameters
    ----------
    config : StaircaseConfig
        Validated run configuration.
    refresh_hz : float
        Measured display refresh rate; upper bound for every frame rate.
    key : jax.Array, optional
        PRNG key for side assignment. Takes precedence over ``seed``.
    seed : int, default=0
        Seed used when no key is given.
    recorder : TrialRecorder, optional
        Trial store. A new one is created if omitted.

    Notes
    -----
    Construction starts the first trial. Responses are accepted through
    submit_response() only while a trial is pending; anything else is a
    no-op.
    """

    def __init__(
        self,
        config: StaircaseConfig,
        refresh_hz: float,
        *,
        key: jax.Array | None = None,
        seed: int = 0,
        recorder: TrialRecorder | None = None,
    ) -> None:
        self.config, self.refresh_hz = _validate_setup(config, refresh_hz)
        self.recorder = recorder if recorder is not None else TrialRecorder()
        self._key = key if key is not None else make_key(seed)
        self.reset()

    def reconfigure(
        self,
        config: StaircaseConfig | None = None,
        refresh_hz: float | None = None,
    ) -> None:
        """
        Swap the configuration and/or refresh rate, then start a new run.

        Raises
        ------
        ConfigError
            Under the same conditions as the constructor. The controller is
            left untouched in that case.
        """
        self.config, self.refresh_hz = _validate_setup(
            self.config if config is None else config,
            self.refresh_hz if refresh_hz is None else refresh_hz,
        )
        self.reset()

    # ------------------------------------------------------------------
    # LIFECYCLE
    # ------------------------------------------------------------------
    def reset(self) -> None:
        """Reinitialize every variable from the config and start a new run."""
        cfg = self.config
        self._base = self._clamp(cfg.start_base_fps)
        self._comp = self._base
        self._left = self._base
        self._right = self._base
        self._higher_side: Side = "right"
        self._step = cfg.initial_step
        self._direction: Direction | None = None
        self._prev_direction: Direction | None = None
        self._reversals = 0
        self._consecutive = 0
        self._trial_index = 0
        self._correct = 0
        self._total = 0
        self._limited = False
        self._result: ThresholdEstimate | None = None
        self.recorder.clear()

        self._phase: Phase = "generating"
        logger.info(
            "staircase reset: base=%.2f fps, refresh=%.2f Hz", self._base, self.refresh_hz
        )
        self.start_trial()

    def start_trial(self) -> tuple[float, float, Side] | None:
        """
        Generate the next trial.

        Returns
        -------
        (left_fps, right_fps, higher_side) or None
            None if no trial could be generated: the run is finished, a
            trial is already pending, or the trial was degenerate (which
            finishes the run).
        """
        if self._phase != "generating":
            return None

        target = self.config.target_diff_pct
        self._base = self._clamp(self._base)
        raw_comp = self._base * (1.0 + target)
        self._comp = min(raw_comp, self.refresh_hz)
        self._limited = raw_comp > self.refresh_hz

        if self._comp == self._base:
            logger.info("degenerate trial at %.2f fps; finishing", self._base)
            self._finish()
            return None

        if self._limited:
            warnings.warn(
                refresh_limit_message(self._base, self._comp, target),
                RefreshRateLimitWarning,
                stacklevel=2,
            )

        self._key, subkey = split(self._key)
        if coin_flip(subkey):
            self._left, self._right, self._higher_side = self._base, self._comp, "right"
        else:
            self._left, self._right, self._higher_side = self._comp, self._base, "left"

        self._phase = "awaiting_response"
        logger.debug(
            "trial %d: left=%.2f right=%.2f",
            self._trial_index + 1,
            self._left,
            self._right,
        )
        return self._left, self._right, self._higher_side

    # ------------------------------------------------------------------
    # RESPONSES
    # ------------------------------------------------------------------
    def submit_response(self, side: Side) -> Trial | None:
        """
        Score the observer's choice and advance the staircase.

        Parameters
        ----------
        side : {"left", "right"}
            Side the observer judged to have the higher frame rate.

        Returns
        -------
        Trial or None
            The recorded trial, or None if no trial was pending.

        Raises
        ------
        ValueError
            If ``side`` is not "left" or "right".
        """
        if self._phase != "awaiting_response":
            return None
        if side not in ("left", "right"):
            raise ValueError(f"side must be 'left' or 'right', got {side!r}")

        self._phase = "scoring"
        correct = side == self._higher_side
        self._total += 1
        if correct:
            self._correct += 1
            self._consecutive += 1
        else:
            self._consecutive = 0
        self._trial_index += 1

        presented_base, presented_comp = self._base, self._comp

        new_direction = self._direction
        if not correct:
            new_direction = "down"
            self._base = self._clamp(self._base - self._step)
        elif self._consecutive >= 2:
            new_direction = "up"
            self._base = self._clamp(self._base + self._step)
            self._consecutive = 0

        self._prev_direction = self._direction
        self._direction = new_direction
        if self._prev_direction and new_direction and self._prev_direction != new_direction:
            self._reversals += 1
            self._step = max(self.config.min_step, self._step / 2)
            logger.debug(
                "reversal %d at %.2f fps, step -> %.3f",
                self._reversals,
                presented_base,
                self._step,
            )

        trial = Trial(
            index=self._trial_index,
            base_fps=presented_base,
            comp_fps=presented_comp,
            left_fps=self._left,
            right_fps=self._right,
            correct=correct,
            direction=new_direction,
        )
        self.recorder.append(trial)

        if (
            self._reversals >= self.config.target_reversals
            or self._trial_index >= self.config.max_trials
            or self._base >= self.refresh_hz
        ):
            self._finish()
        else:
            self._phase = "generating"
            self.start_trial()
        return trial

    # ------------------------------------------------------------------
    # OUTPUTS
    # ------------------------------------------------------------------
    def current_state(self) -> StaircaseState:
        """Return a snapshot of the staircase."""
        return StaircaseState(
            phase=self._phase,
            base_fps=self._base,
            comp_fps=self._comp,
            left_fps=self._left,
            right_fps=self._right,
            higher_side=self._higher_side,
            step=self._step,
            direction=self._direction,
            prev_direction=self._prev_direction,
            reversal_count=self._reversals,
            consecutive_correct=self._consecutive,
            trial_index=self._trial_index,
            correct_count=self._correct,
            total_count=self._total,
            comparison_limited=self._limited,
        )

    def render_frame(self, elapsed_time: float) -> RenderFrame:
        """Frame rates the renderer should draw at ``elapsed_time``."""
        return RenderFrame(self._left, self._right, elapsed_time)

    @property
    def finished(self) -> bool:
        return self._phase == "finished"

    @property
    def awaiting_response(self) -> bool:
        return self._phase == "awaiting_response"

    @property
    def progress(self) -> float:
        """Fraction of target reversals reached (1.0 once finished)."""
        if self.finished:
            return 1.0
        return min(1.0, self._reversals / self.config.target_reversals)

    @property
    def result(self) -> ThresholdEstimate | None:
        """Threshold estimate, available once the run has finished."""
        return self._result

    # ------------------------------------------------------------------
    # INTERNALS
    # ------------------------------------------------------------------
    def _clamp(self, fps: float) -> float:
        return min(max(fps, self.config.min_base_fps), self.refresh_hz)

    def _finish(self) -> None:
        self._phase = "finished"
        self._result = estimate_threshold(
            self.recorder.trials, self._base, self.refresh_hz
        )
        logger.info(
            "staircase finished after %d trials, %d reversals: %s",
            self._trial_index,
            self._reversals,
            self._result.text,
        )
