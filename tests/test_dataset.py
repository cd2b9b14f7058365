"""
test_dataset.py
---------------

Tests for Trial and TrialRecorder.
"""

import dataclasses

import numpy as np
import pytest

from fpsjnd.data.dataset import Trial, TrialRecorder


def trial(index, base=30.0, correct=True, direction=None, higher="right"):
    comp = base * 1.1
    left, right = (base, comp) if higher == "right" else (comp, base)
    return Trial(index, base, comp, left, right, correct, direction)


class TestTrial:
    def test_higher_side(self):
        assert trial(1, higher="right").higher_side == "right"
        assert trial(1, higher="left").higher_side == "left"

    def test_trial_is_immutable(self):
        t = trial(1)
        with pytest.raises(dataclasses.FrozenInstanceError):
            t.correct = False


class TestTrialRecorder:
    def test_append_and_len(self):
        rec = TrialRecorder()
        rec.append(trial(1))
        rec.append(trial(2, correct=False))
        assert len(rec) == 2
        assert rec[0].index == 1
        assert [t.index for t in rec] == [1, 2]
        assert rec.correct_count == 1

    def test_indices_must_be_consecutive(self):
        rec = TrialRecorder()
        rec.append(trial(1))
        with pytest.raises(ValueError):
            rec.append(trial(3))

    def test_trials_returns_a_copy(self):
        rec = TrialRecorder()
        rec.append(trial(1))
        rec.trials.append(trial(2))
        assert len(rec) == 1

    def test_to_numpy(self):
        rec = TrialRecorder()
        rec.append(trial(1, base=30.0))
        rec.append(trial(2, base=25.0, correct=False))
        base, comp, correct = rec.to_numpy()
        np.testing.assert_allclose(base, [30.0, 25.0])
        np.testing.assert_allclose(comp, [33.0, 27.5])
        assert correct.dtype == bool
        assert correct.tolist() == [True, False]

    def test_tail_and_clear(self):
        rec = TrialRecorder()
        for i in range(1, 6):
            rec.append(trial(i))
        assert [t.index for t in rec.tail(2)] == [4, 5]
        assert rec.tail(0) == []
        rec.clear()
        assert len(rec) == 0
        rec.append(trial(1))
        assert len(rec) == 1
