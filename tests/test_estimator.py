"""
test_estimator.py
-----------------

Tests for reversal detection and the reversal-averaging threshold estimate.
"""

import math

import pytest

from fpsjnd.data.dataset import Trial
from fpsjnd.staircase.estimator import (
    EXCEEDED_REFRESH,
    NOT_DETERMINED,
    ThresholdEstimate,
    estimate_threshold,
    mean_and_ci,
    print_summary,
    reversal_levels,
)


def make_trials(bases, directions):
    return [
        Trial(
            index=i + 1,
            base_fps=b,
            comp_fps=b * 1.1,
            left_fps=b,
            right_fps=b * 1.1,
            correct=d == "up",
            direction=d,
        )
        for i, (b, d) in enumerate(zip(bases, directions))
    ]


@pytest.fixture
def four_reversals():
    """Trials whose reversal levels are 28, 30, 29, 31."""
    return make_trials(
        [27.0, 28.0, 30.0, 29.0, 31.0],
        ["down", "up", "down", "up", "down"],
    )


class TestReversalLevels:
    def test_levels_are_later_trial_base(self, four_reversals):
        assert reversal_levels(four_reversals) == [28.0, 30.0, 29.0, 31.0]

    def test_none_directions_are_not_reversals(self):
        trials = make_trials([30.0, 30.0, 25.0, 25.0], [None, None, "down", "down"])
        assert reversal_levels(trials) == []

    def test_empty_and_single(self):
        assert reversal_levels([]) == []
        assert reversal_levels(make_trials([30.0], ["up"])) == []


class TestEstimateThreshold:
    def test_mean_and_ci_of_last_four(self, four_reversals):
        result = estimate_threshold(four_reversals, final_base_fps=31.0, refresh_hz=60)
        sd = math.sqrt(5 / 3)
        assert result.mean == pytest.approx(29.5)
        assert sd == pytest.approx(1.29, abs=0.01)
        assert result.ci_low == pytest.approx(28.24, abs=0.01)
        assert result.ci_high == pytest.approx(30.76, abs=0.01)
        assert result.levels == (28.0, 30.0, 29.0, 31.0)
        assert result.text == "29.5 fps"
        assert result.ci_text == "95% CI ≈ 28.2 – 30.8 fps"

    def test_only_last_four_levels_are_used(self):
        trials = make_trials(
            [10.0, 50.0, 40.0, 28.0, 30.0, 29.0, 31.0],
            ["down", "up", "down", "up", "down", "up", "down"],
        )
        result = estimate_threshold(trials, final_base_fps=30.0, refresh_hz=60)
        assert result.levels == (28.0, 30.0, 29.0, 31.0)
        assert result.mean == pytest.approx(29.5)

    def test_single_level_has_no_ci(self):
        trials = make_trials([25.0, 30.0], ["down", "up"])
        result = estimate_threshold(trials, final_base_fps=30.0, refresh_hz=60)
        assert result.mean == 30.0
        assert result.ci_low is None and result.ci_high is None
        assert result.ci_text == ""

    def test_no_reversals(self):
        trials = make_trials([30.0, 25.0], ["down", "down"])
        result = estimate_threshold(trials, final_base_fps=20.0, refresh_hz=60)
        assert not result.determined
        assert result.text == NOT_DETERMINED

    def test_exceeded_refresh_overrides_reversals(self, four_reversals):
        result = estimate_threshold(four_reversals, final_base_fps=60.0, refresh_hz=60)
        assert result.exceeded_refresh
        assert result.mean is None
        assert result.text == EXCEEDED_REFRESH

    def test_invalid_tail(self, four_reversals):
        with pytest.raises(ValueError):
            estimate_threshold(four_reversals, 30.0, 60, tail=0)


class TestMeanAndCI:
    def test_symmetric_interval(self):
        mean, lo, hi = mean_and_ci([1.0, 3.0])
        assert mean == 2.0
        assert mean - lo == pytest.approx(hi - mean)

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            mean_and_ci([])


def test_print_summary(capsys):
    print_summary(ThresholdEstimate(mean=29.5, ci_low=28.24, ci_high=30.76, levels=(28.0, 31.0)))
    out = capsys.readouterr().out
    assert "Threshold: 29.5 fps" in out
    assert "95% CI" in out
    assert "Reversal levels" in out
