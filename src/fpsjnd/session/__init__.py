"""
session
=======

Experiment orchestration.

This subpackage provides:
- ExperimentSession : owns the staircase, accepts observer responses and
  publishes display snapshots (score, history, progress, result).
- SessionSnapshot, HistoryEntry : display data.
- run_simulated : drive a session with a simulated observer.
"""

from .experiment_session import (
    ExperimentSession,
    HistoryEntry,
    SessionSnapshot,
    run_simulated,
)

__all__ = ["ExperimentSession", "HistoryEntry", "SessionSnapshot", "run_simulated"]
