"""
test_session.py
---------------

Tests for ExperimentSession, the render loop and the refresh-rate meter.
"""

import pytest

from fpsjnd.model.observer import SimulatedObserver
from fpsjnd.render.loop import RefreshRateMeter, RenderLoop
from fpsjnd.render.renderer import RenderFrame
from fpsjnd.session.experiment_session import ExperimentSession, run_simulated
from fpsjnd.staircase.config import ConfigError, StaircaseConfig
from fpsjnd.staircase.controller import RefreshRateLimitWarning


class FakeClock:
    """Monotonic clock advancing by a fixed tick on every call."""

    def __init__(self, tick=1 / 60):
        self.now = 0.0
        self.tick = tick

    def __call__(self):
        t = self.now
        self.now += self.tick
        return t


def respond_correctly(session, correct=True):
    state = session.controller.current_state()
    wrong = "left" if state.higher_side == "right" else "right"
    return session.respond(state.higher_side if correct else wrong)


# ============================================================================
# Session
# ============================================================================


class TestExperimentSession:
    def test_snapshot_score_and_history(self, scenario_config):
        session = ExperimentSession(scenario_config, refresh_hz=60, seed=0)
        snap = session.snapshot()
        assert snap.trial_number == 0
        assert snap.percentage == 0
        assert snap.awaiting_response and not snap.finished

        respond_correctly(session, correct=False)
        respond_correctly(session, correct=True)
        respond_correctly(session, correct=True)

        snap = session.snapshot()
        assert (snap.trial_number, snap.correct, snap.total) == (3, 2, 3)
        assert snap.percentage == 67
        assert snap.progress == pytest.approx(1 / 3)
        assert [h.correct for h in snap.history] == [True, True, False]
        assert snap.history[-1].text == "✗ 30 | 33"
        assert [t.index for t in snap.trials] == [1, 2, 3]

    def test_listeners_receive_snapshots(self, scenario_config):
        session = ExperimentSession(scenario_config, refresh_hz=60)
        received = []
        session.subscribe(received.append)
        respond_correctly(session)
        assert len(received) == 1
        assert received[0].trial_number == 1

    def test_ignored_response_does_not_publish(self):
        session = ExperimentSession(StaircaseConfig(target_diff_pct=0.0), refresh_hz=60)
        received = []
        session.subscribe(received.append)
        assert session.respond("left") is None
        assert received == []

    def test_fps_label(self, scenario_config):
        session = ExperimentSession(scenario_config, refresh_hz=60, show_fps=True)
        assert session.snapshot().fps_label == "30fps - 33fps"
        session.show_fps = False
        assert session.snapshot().fps_label == ""

    def test_limit_warning_text(self):
        config = StaircaseConfig(start_base_fps=58, min_base_fps=10, target_diff_pct=0.10)
        with pytest.warns(RefreshRateLimitWarning):
            session = ExperimentSession(config, refresh_hz=60)
        assert session.snapshot().limit_warning == (
            "Monitor refresh rate limiting comparison: 3% difference instead of target 10%"
        )

    def test_finished_snapshot_carries_result(self, scenario_config):
        session = ExperimentSession(scenario_config, refresh_hz=60, seed=0)
        for correct in [False, True, True, False, True, True]:
            respond_correctly(session, correct)
        snap = session.snapshot()
        assert snap.finished
        assert snap.progress == 1.0
        assert snap.result is not None and snap.result.determined
        assert snap.fps_label == ""

    def test_restart_with_new_config(self, scenario_config):
        session = ExperimentSession(scenario_config, refresh_hz=60)
        respond_correctly(session, correct=False)
        received = []
        session.subscribe(received.append)
        session.restart(StaircaseConfig(start_base_fps=40, min_base_fps=20))
        assert received[-1].trial_number == 0
        assert session.controller.current_state().base_fps == 40
        assert len(session.controller.recorder) == 0

    def test_refresh_from_meter(self, scenario_config):
        meter = RefreshRateMeter(initial_hz=144)
        session = ExperimentSession(scenario_config, meter=meter)
        assert session.controller.refresh_hz == 144
        meter.hz = 0
        with pytest.raises(ConfigError):
            session.restart()

    def test_restart_rejects_refresh_below_min_base(self, scenario_config):
        meter = RefreshRateMeter(initial_hz=60)
        session = ExperimentSession(scenario_config, meter=meter)
        meter.hz = 8
        with pytest.raises(ConfigError, match="below min_base_fps"):
            session.restart()
        assert session.controller.refresh_hz == 60

    def test_construction_rejects_refresh_below_min_base(self):
        config = StaircaseConfig(start_base_fps=50, min_base_fps=40)
        with pytest.raises(ConfigError):
            ExperimentSession(config, refresh_hz=30)

    def test_restart_rejects_non_config(self, scenario_config):
        session = ExperimentSession(scenario_config, refresh_hz=60)
        with pytest.raises(ConfigError, match="expected StaircaseConfig"):
            session.restart({"start_base_fps": 40})
        assert session.config is scenario_config
        assert session.controller.config is scenario_config

    def test_simulated_run_finishes(self):
        config = StaircaseConfig(
            start_base_fps=30,
            min_base_fps=10,
            target_diff_pct=0.10,
            initial_step=8,
            min_step=0.5,
            target_reversals=8,
            max_trials=200,
        )
        session = ExperimentSession(config, refresh_hz=240, seed=1)
        observer = SimulatedObserver(threshold_fps=60.0, slope=0.2, seed=2)
        result = run_simulated(session, observer)
        assert session.controller.finished
        assert result is session.controller.result
        assert result.determined
        assert 10.0 <= result.mean <= 240.0


# ============================================================================
# Render loop and refresh meter
# ============================================================================


class TestRenderLoop:
    def test_loop_draws_published_trial(self, scenario_config, small_renderer):
        session = ExperimentSession(scenario_config, refresh_hz=60)
        images = []
        loop = session.render_loop(small_renderer, sink=images.append, clock=FakeClock())
        assert loop.run(max_frames=3) == 3
        assert loop.frames_drawn == 3
        assert len(images) == 3
        assert images[0].shape == (16, 33, 3)

    def test_should_stop(self, small_renderer):
        frames = []

        def source(elapsed):
            frames.append(elapsed)
            return RenderFrame(30.0, 33.0, elapsed)

        loop = RenderLoop(small_renderer, source, clock=FakeClock(0.01))
        assert loop.run(should_stop=lambda: len(frames) >= 2) == 2
        assert frames == sorted(frames)
        assert frames[0] > 0.0

    def test_loop_ticks_meter(self, small_renderer):
        meter = RefreshRateMeter(window_s=0.05, initial_hz=60)
        loop = RenderLoop(
            small_renderer,
            lambda t: RenderFrame(30.0, 33.0, t),
            clock=FakeClock(0.01),
            meter=meter,
        )
        loop.run(max_frames=8)
        assert meter.hz == 100


class TestRefreshRateMeter:
    @pytest.mark.parametrize("hz", [60, 75, 144])
    def test_estimates_tick_rate(self, hz):
        meter = RefreshRateMeter(initial_hz=30)
        for k in range(hz + 1):
            meter.tick(k / hz)
        assert meter.hz == hz

    def test_initial_value_until_window_elapses(self):
        meter = RefreshRateMeter(initial_hz=60)
        for k in range(10):
            assert meter.tick(k / 120) == 60

    def test_reset_keeps_estimate(self):
        meter = RefreshRateMeter()
        for k in range(121):
            meter.tick(k / 120)
        meter.reset()
        assert meter.hz == 120

    def test_invalid_window(self):
        with pytest.raises(ValueError):
            RefreshRateMeter(window_s=0)
