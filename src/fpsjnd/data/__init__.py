"""
fpsjnd.data
===========

submodule for handling staircase trial data.

Includes:
- dataset: Trial, TrialRecorder
"""

from .dataset import Direction, Side, Trial, TrialRecorder

__all__ = ["Direction", "Side", "Trial", "TrialRecorder"]
