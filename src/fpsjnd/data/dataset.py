"""
dataset.py
-----------

Core data containers for fpsjnd.

defines:
- Trial: one scored 2AFC presentation (immutable)
- TrialRecorder: append-only store of the trials of one run

Notes
-----
- Trials are plain Python objects; use TrialRecorder.to_numpy() for
  analysis and plotting.
- The recorder is the shared data source of the threshold estimator and of
  the display collaborators (history log, score, chart).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Literal

import numpy as np

Side = Literal["left", "right"]
Direction = Literal["up", "down"]


@dataclass(frozen=True)
class Trial:
    """
    A scored trial.

    Attributes
    ----------
    index : int
        1-based position in the run.
    base_fps : float
        Base frame rate presented on this trial.
    comp_fps : float
        Comparison (higher) frame rate presented on this trial.
    left_fps, right_fps : float
        Frame rate shown on each half of the screen.
    correct : bool
        Whether the observer picked the higher frame rate.
    direction : {"up", "down"} or None
        Staircase direction after this response was scored.
    """

    index: int
    base_fps: float
    comp_fps: float
    left_fps: float
    right_fps: float
    correct: bool
    direction: Direction | None

    @property
    def higher_side(self) -> Side:
        """Side that showed the comparison frame rate."""
        return "left" if self.left_fps > self.right_fps else "right"


class TrialRecorder:
    """
    Append-only record of completed trials.

    Attributes
    ----------
    trials : list[Trial]
        Copy of the recorded trials, oldest first.
    """

    def __init__(self) -> None:
        self._trials: list[Trial] = []

    def append(self, trial: Trial) -> None:
        """
        Append a completed trial.

        Parameters
        ----------
        trial : Trial
            Must continue the run: its index is one past the last one.
        """
        expected = len(self._trials) + 1
        if trial.index != expected:
            raise ValueError(f"expected trial index {expected}, got {trial.index}")
        self._trials.append(trial)

    @property
    def trials(self) -> list[Trial]:
        return list(self._trials)

    @property
    def correct_count(self) -> int:
        """Number of correct responses."""
        return sum(t.correct for t in self._trials)

    def tail(self, n: int) -> list[Trial]:
        """Return the last n trials."""
        if n <= 0:
            return []
        return self._trials[-n:]

    def to_numpy(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Return base levels, comparison levels and correctness as numpy arrays.

        Returns
        -------
        base_fps : np.ndarray of float
        comp_fps : np.ndarray of float
        correct : np.ndarray of bool
        """
        return (
            np.array([t.base_fps for t in self._trials], dtype=float),
            np.array([t.comp_fps for t in self._trials], dtype=float),
            np.array([t.correct for t in self._trials], dtype=bool),
        )

    def clear(self) -> None:
        """Drop all trials (start of a new run)."""
        self._trials.clear()

    def __len__(self) -> int:
        """Return number of trials."""
        return len(self._trials)

    def __iter__(self) -> Iterator[Trial]:
        return iter(list(self._trials))

    def __getitem__(self, i: int) -> Trial:
        return self._trials[i]
